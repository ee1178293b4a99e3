import struct

import pytest

from dmi_output import RecordingSink
from options import FLAG_QUIET, Options
from parsers import to_dmi_header


def structure(type_, handle, formatted=b"", strings=()):
    """One record: header, formatted area, then its string set."""
    formatted = bytes(formatted)
    head = struct.pack('<BBH', type_, 4 + len(formatted), handle)
    if strings:
        area = b"".join(s.encode('latin-1') + b"\0" for s in strings) + b"\0"
    else:
        area = b"\0\0"
    return head + formatted + area


def header(type_, formatted=b"", strings=(), handle=0x0100):
    """DmiHeader over a single record, the way the walker builds it."""
    return to_dmi_header(structure(type_, handle, formatted, strings), 0)


def end_of_table(handle=0xFEFF):
    return structure(127, handle)


def _fix_checksum(buf, start, length, at):
    buf[at] = 0
    buf[at] = (-sum(buf[start:start + length])) & 0xFF


def smbios3_entry(table_length, address, major=3, minor=2, docrev=0):
    buf = bytearray(0x18)
    buf[0:5] = b"_SM3_"
    buf[0x06] = 0x18
    buf[0x07] = major
    buf[0x08] = minor
    buf[0x09] = docrev
    buf[0x0A] = 0x01
    struct.pack_into('<I', buf, 0x0C, table_length)
    struct.pack_into('<Q', buf, 0x10, address)
    _fix_checksum(buf, 0, 0x18, 0x05)
    return bytes(buf)


def smbios_entry(table_length, address, count, major=2, minor=8):
    buf = bytearray(0x1F)
    buf[0:4] = b"_SM_"
    buf[0x05] = 0x1F
    buf[0x06] = major
    buf[0x07] = minor
    struct.pack_into('<H', buf, 0x08, 0x100)
    buf[0x10:0x15] = b"_DMI_"
    struct.pack_into('<H', buf, 0x16, table_length)
    struct.pack_into('<I', buf, 0x18, address)
    struct.pack_into('<H', buf, 0x1C, count)
    buf[0x1E] = (major << 4) | minor
    _fix_checksum(buf, 0x10, 0x0F, 0x15)
    _fix_checksum(buf, 0, 0x1F, 0x04)
    return bytes(buf)


def legacy_entry(table_length, address, count, bcd_revision=0x21):
    buf = bytearray(0x0F)
    buf[0:5] = b"_DMI_"
    struct.pack_into('<H', buf, 0x06, table_length)
    struct.pack_into('<I', buf, 0x08, address)
    struct.pack_into('<H', buf, 0x0C, count)
    buf[0x0E] = bcd_revision
    _fix_checksum(buf, 0, 0x0F, 0x05)
    return bytes(buf)


def dump_image(entry, table):
    """Dump file layout: entry point at 0, table at 32."""
    return entry.ljust(32, b"\0") + table


def bios_record(handle=0x0000):
    formatted = bytearray(0x18 - 4)
    formatted[0x00] = 1  # vendor
    formatted[0x01] = 2  # version
    struct.pack_into('<H', formatted, 0x02, 0xE800)
    formatted[0x04] = 3  # release date
    formatted[0x05] = 0x0F  # 1 MB ROM
    struct.pack_into('<Q', formatted, 0x06, 1 << 4)  # ISA
    formatted[0x0E] = 0x01  # ACPI
    formatted[0x0F] = 0x00
    formatted[0x10] = 5
    formatted[0x11] = 17
    formatted[0x12] = 0xFF
    formatted[0x13] = 0xFF
    return structure(0, handle, formatted, ("ACME Firmware", "1.2.3", "01/02/2020"))


UUID_BYTES = bytes(range(0x00, 0x100, 0x11))


def system_record(handle=0x0001, manufacturer="ACME", product="Rocket 3000"):
    formatted = bytearray(0x1B - 4)
    formatted[0x00:0x04] = bytes((1, 2, 3, 4))
    formatted[0x04:0x14] = UUID_BYTES
    formatted[0x14] = 6  # power switch
    formatted[0x15] = 5
    formatted[0x16] = 6
    return structure(1, handle, formatted,
                     (manufacturer, product, "Rev A", "SN-42", "SKU-7", "Rockets"))


@pytest.fixture
def sample_table():
    """BIOS, System and End Of Table records."""
    return bios_record() + system_record() + end_of_table()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def options():
    return Options()


@pytest.fixture
def quiet_options():
    return Options(flags=FLAG_QUIET)
