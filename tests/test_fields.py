import struct

import pytest

import dmi_fields as fields
from conftest import UUID_BYTES, header
from dmi_output import RecordingSink
from parsers import OUT_OF_SPEC


@pytest.mark.parametrize("code, shift, expected", [
    (0, 0, "0 bytes"),
    (16384, 1, "16 MB"),
    (1536, 1, "1536 kB"),
    (1 << 40, 0, "1 TB"),
    (3 << 30, 0, "3 GB"),
])
def test_memory_size_text(code, shift, expected):
    assert fields.memory_size_text(code, shift) == expected


def test_memory_device_size_units():
    sink = RecordingSink()
    fields.memory_device_size(sink, 0x4000)
    fields.memory_device_size(sink, 0x8000 | 512)
    fields.memory_device_size(sink, 0)
    assert sink.lines('attr') == ["Size", "Size", "Size"]
    assert [a[1] for a in sink.attrs()] == ["16 GB", "512 kB", "No Module Installed"]


@pytest.mark.parametrize("code, expected", [
    (0x801, "2049 MB"),
    (0x8000, "32 GB"),
    (0x100000, "1 TB"),
])
def test_memory_device_extended_size(code, expected):
    sink = RecordingSink()
    fields.memory_device_extended_size(sink, code)
    assert sink.attr_value("Size") == expected


def test_system_uuid_byte_order_depends_on_version():
    assert fields.system_uuid(UUID_BYTES, 0x0302) == "33221100-5544-7766-8899-aabbccddeeff"
    assert fields.system_uuid(UUID_BYTES, 0x0205) == "00112233-4455-6677-8899-aabbccddeeff"


def test_system_uuid_sentinels():
    assert fields.system_uuid(b"\xFF" * 16, 0x0302) == "Not Present"
    assert fields.system_uuid(b"\x00" * 16, 0x0302) == "Not Settable"


def test_chassis_type_ignores_lock_bit():
    assert fields.chassis_type(0x83) == "Desktop"
    assert fields.chassis_type(0x7F) == OUT_OF_SPEC


def _processor(family, manufacturer="", version="", eax=0, edx=0, extra=b""):
    formatted = bytearray(0x1A - 4)
    formatted[0x02] = family
    formatted[0x03] = 1
    struct.pack_into('<II', formatted, 0x04, eax, edx)
    formatted[0x0C] = 2
    return header(4, bytes(formatted) + extra, (manufacturer or " ", version or " "))


@pytest.mark.parametrize("manufacturer, expected", [
    ("Intel(R) Corporation", "Core 2"),
    ("AMD", "K7"),
    ("Transmeta", "Core 2 or K7"),
])
def test_processor_family_shared_code(manufacturer, expected):
    h = _processor(0xBE, manufacturer)
    assert fields.processor_family(h, 0x0207) == expected


def test_processor_family_pentium_pro_on_smbios_2_0():
    h = _processor(0x30, "GenuineIntel")
    assert fields.processor_family(h, 0x0200) == "Pentium Pro"
    assert fields.processor_family(h, 0x0201) == "Alpha"


def test_processor_family_2():
    # 0xFE defers to the 16-bit family field at 0x28
    extra = bytearray(0x2A - 0x1A)
    struct.pack_into('<H', extra, 0x0E, 0x101)
    h = _processor(0xFE, extra=bytes(extra))
    assert h.length == 0x2A
    assert fields.processor_family(h, 0x0300) == "ARMv8"


def test_processor_id_intel_signature():
    sink = RecordingSink()
    fields.processor_id(sink, _processor(0xC6, eax=0x000906EA, edx=0x1))
    assert sink.attr_value("ID") == "EA 06 09 00 01 00 00 00"
    assert sink.attr_value("Signature") == "Type 0, Family 6, Model 158, Stepping 10"
    assert sink.list_items("Flags") == ["FPU (Floating-point unit on-chip)"]


def test_processor_id_amd_extended_family():
    sink = RecordingSink()
    fields.processor_id(sink, _processor(0x6B, eax=0x00A20F10))
    assert sink.attr_value("Signature") == "Family 25, Model 33, Stepping 0"
    assert ('list_start', 'Flags', 'None') in sink.events


def test_processor_id_unknown_family_uses_version_string():
    sink = RecordingSink()
    fields.processor_id(sink, _processor(0x02, version="AMD Opteron(tm) 6174", eax=0x00100F91))
    assert sink.attr_value("Signature") == "Family 16, Model 9, Stepping 1"

    sink = RecordingSink()
    fields.processor_id(sink, _processor(0x02, version="Mystery CPU", eax=0x00100F91))
    assert sink.attr_value("Signature") is None


def test_bios_characteristics_not_supported_bit_wins():
    sink = RecordingSink()
    sink.list_start("Characteristics")
    fields.bios_characteristics(sink, (1 << 3) | (1 << 4))
    sink.list_end()
    assert sink.list_items("Characteristics") == ["BIOS characteristics not supported"]


def test_set_bits_and_bit_list():
    assert fields.set_bits(0b101, ("a", "b", "c")) == ["a", "c"]
    assert fields.set_bits(0b110, ("a", "b"), 1) == ["a", "b"]

    sink = RecordingSink()
    fields.bit_list(sink, "Supported Speeds", 0, ("70 ns",))
    assert sink.attr_value("Supported Speeds") == "None"


def test_bcd_range():
    assert fields.bcd_range(0x59, 0x00, 0x59)
    assert not fields.bcd_range(0x5A, 0x00, 0x59)
    assert not fields.bcd_range(0x60, 0x00, 0x59)


def test_address_text():
    assert fields.address_text(bytes([192, 168, 0, 1]) + bytes(12), 0x1) == "192.168.0.1"
    assert fields.address_text(bytes(15) + b"\x01", 0x2) == "::1"
    assert fields.address_text(bytes(16), 0x7) == OUT_OF_SPEC


def test_memory_voltage_value():
    sink = RecordingSink()
    fields.memory_voltage_value(sink, "Minimum Voltage", 1200)
    fields.memory_voltage_value(sink, "Maximum Voltage", 1350)
    fields.memory_voltage_value(sink, "Configured Voltage", 0)
    assert sink.attrs() == [("Minimum Voltage", "1.2 V"), ("Maximum Voltage", "1.35 V"),
                            ("Configured Voltage", "Unknown")]


def test_power_on_time_text():
    assert fields.power_on_time_text(bytes([0x12, 0x31, 0x23, 0x59, 0x59]), 0) == "12-31 23:59:59"
    # out of range or non-BCD bytes become wildcards, the rest still prints
    data = bytes([0xFF, 0x13, 0x00, 0x24, 0x5A, 0x00])
    assert fields.power_on_time_text(data, 1) == "*-* *:*:00"


def test_probe_values():
    sink = RecordingSink()
    fields.voltage_probe_value(sink, "Nominal Value", 12000)
    fields.temperature_probe_value(sink, "Minimum Value", 0xFF9C)
    fields.current_probe_value(sink, "Maximum Value", 0x8000)
    fields.voltage_probe_resolution(sink, 0x8000)
    fields.probe_accuracy(sink, 150)
    assert sink.attrs() == [("Nominal Value", "12.000 V"),
                            ("Minimum Value", "-10.0 deg C"),
                            ("Maximum Value", "Unknown"),
                            ("Resolution", "Unknown"),
                            ("Accuracy", "1.50%")]


def test_unsigned_probe_resolution_keeps_high_values():
    sink = RecordingSink()
    fields.temperature_probe_resolution(sink, 0x8001)
    assert sink.attrs() == [("Resolution", "32.769 deg C")]
