import struct

import pytest

from conftest import header
from dmi_oem import (HP_G6, HP_GEN8, HP_GEN9, HP_GEN10, HP_GEN10_PLUS, VENDOR_ACER, VENDOR_HP,
                     VENDOR_HPE, VENDOR_LENOVO, VENDOR_UNKNOWN, OemDecoder, VendorOemDecoder,
                     detect_vendor, hp_generation)
from dmi_output import RecordingSink


def oem(manufacturer, h):
    sink = RecordingSink()
    claimed = VendorOemDecoder(manufacturer).decode(h, sink)
    return claimed, sink


def subattrs(sink):
    return [(e[1], e[2]) for e in sink.events if e[0] == 'subattr']


@pytest.mark.parametrize("manufacturer, vendor", [
    ("HP", VENDOR_HP),
    ("Hewlett-Packard   ", VENDOR_HP),
    ("HPE", VENDOR_HPE),
    ("Hewlett Packard Enterprise", VENDOR_HPE),
    ("Acer", VENDOR_ACER),
    ("LENOVO", VENDOR_LENOVO),
    ("Lenovo Group", VENDOR_UNKNOWN),
    (None, VENDOR_UNKNOWN),
])
def test_detect_vendor(manufacturer, vendor):
    assert detect_vendor(manufacturer) == vendor


def test_base_decoder_declines():
    assert not OemDecoder().decode(header(200), RecordingSink())


def test_unknown_vendor_declines():
    claimed, sink = oem("Dell Inc.", header(209, bytes(8)))
    assert not claimed
    assert sink.events == []


def test_acer_hotkeys():
    formatted = struct.pack('<HHHHH', 0x0841, 0x0002, 0x0003, 0x0004, 0x0005) + b"\x07"
    claimed, sink = oem("Acer", header(170, formatted))
    assert claimed
    assert sink.lines('handle_name') == ["Acer Hotkey Function"]
    assert sink.attr_value("Function bitmap for Communication Button") == "0x0841"
    assert subattrs(sink) == [("WiFi", "Yes"), ("3G", "Yes"), ("WiMAX", "No"),
                              ("Bluetooth", "Yes")]
    assert sink.attr_value("Communication Function Key Number") == "7"


@pytest.mark.parametrize("type_, title", [
    (209, "HP BIOS PXE NIC PCI and MAC Information"),
    (221, "HP BIOS iSCSI NIC PCI and MAC Information"),
])
def test_hp_nic_records(type_, title):
    formatted = bytes([0x08, 0x02, 0x00, 0x11, 0x22, 0x33, 0x44, 0x55]) + bytes(8)
    claimed, sink = oem("HP", header(type_, formatted))
    assert claimed
    assert sink.lines('handle_name') == [title]
    assert sink.attrs() == [("NIC 1", "PCI device 02:01.0, MAC address 00:11:22:33:44:55"),
                            ("NIC 2", "Disabled")]


def test_hp_cru_information():
    formatted = b"$CRU" + struct.pack('<QII', 0xF4000, 0x2000, 0x100)
    claimed, sink = oem("HPE", header(212, formatted))
    assert sink.lines('handle_name') == ["HPE 64-bit CRU Information"]
    assert sink.attrs() == [("Signature", "$CRU"),
                            ("Physical Address", "0x00000000000f4000"),
                            ("Length", "0x00002000"),
                            ("Offset", "0x00000100")]


def test_hp_proliant_information():
    formatted = struct.pack('<IIII', 0x1, 0x2, 0x0, 0x0401)
    claimed, sink = oem("HP", header(219, formatted))
    assert sink.attr_value("Power Features") == "0x00000001"
    assert sink.attr_value("Omega Features") == "0x00000002"
    assert sink.attr_value("Misc. Features") == "0x00000401"
    assert subattrs(sink) == [("iCRU", "Yes"), ("UEFI", "Yes")]


def test_lenovo_thinkvantage():
    formatted = bytearray(0x16 - 4)
    formatted[0x00] = 1
    formatted[0x10] = 0x80
    h = header(131, formatted, ("TVT-Enablement",))
    claimed, sink = oem("LENOVO", h)
    assert claimed
    assert sink.lines('handle_name') == ["ThinkVantage Technologies"]
    assert sink.attrs() == [("Version", "1"), ("Diagnostics", "Available")]

    # the same type without the signature string is left alone
    claimed, _ = oem("LENOVO", header(131, formatted, ("Something else",)))
    assert not claimed


def test_thinkpad_records():
    claimed, sink = oem("IBM", header(135, b"TP\x07\x03\x01\x01"))
    assert claimed
    assert sink.attr_value("Fingerprint Reader") == "Present"

    h = header(140, b"TP\x0B\x07\x01" + bytes(4), ("N1CET50W", "2020/01/01"))
    claimed, sink = oem("LENOVO", h)
    assert sink.lines('handle_name') == ["ThinkPad Embedded Controller Program"]
    assert sink.attrs() == [("Version ID", "N1CET50W"), ("Release Date", "2020/01/01")]


@pytest.mark.parametrize("product, vendor, generation", [
    ("ProLiant DL380 Gen10 Plus", VENDOR_HPE, HP_GEN10_PLUS),
    ("ProLiant DL360 Gen10", VENDOR_HPE, HP_GEN10),
    ("ProLiant BL460c Gen9", VENDOR_HP, HP_GEN9),
    ("ProLiant DL380p Gen8", VENDOR_HP, HP_GEN8),
    ("ProLiant DL380 G6", VENDOR_HP, HP_G6),
    ("Synergy 480", VENDOR_HPE, HP_GEN10_PLUS),
    (None, VENDOR_HP, HP_G6),
])
def test_hp_generation(product, vendor, generation):
    assert hp_generation(product, vendor) == generation


def test_rack_locator_needs_gen9():
    locator = header(204, bytes([1, 2, 3, 4, 8, 1, 5]), ("Rack1", "Encl", "C7000", "Bay 3", "SN1"))

    sink = RecordingSink()
    assert VendorOemDecoder("HP", "ProLiant DL380 Gen9").decode(locator, sink)
    assert sink.lines('handle_name') == ["HP ProLiant System/Rack Locator"]
    assert sink.attr_value("Server Bay") == "Bay 3"
    assert sink.attr_value("Enclosure Serial") == "SN1"

    sink = RecordingSink()
    assert not VendorOemDecoder("HP", "ProLiant DL380 G7").decode(locator, sink)
    assert sink.events == []
