import struct

from conftest import header, structure
from parsers import (BAD_INDEX, NOT_SPECIFIED, RAW_SMBIOS_HEADER_SIZE, checksum, dmi_string, dword,
                     parse_raw_smbios_data_header, qword, raw_string, record_end, signed_word,
                     string_area_empty, to_dmi_header, word)


def test_little_endian_readers():
    data = bytes(range(1, 9))
    assert word(data, 0) == 0x0201
    assert dword(data, 0) == 0x04030201
    assert qword(data, 0) == 0x0807060504030201
    assert signed_word(b"\xFF\xFF", 0) == -1


def test_checksum():
    assert checksum(bytes([0x10, 0xF0]), 2)
    assert not checksum(bytes([0x10, 0xF1]), 2)
    # a length past the buffer never validates
    assert not checksum(bytes([0x00]), 4)


def test_header_fields():
    rec = structure(4, 0x0042, b"\x01\x02", ("CPU0",))
    h = to_dmi_header(rec, 0)
    assert (h.type, h.length, h.handle) == (4, 6, 0x0042)
    # the data view reaches the string set
    assert bytes(h.data[6:11]) == b"CPU0\0"


def test_string_lookup():
    h = header(1, b"\x01\x02", ("ACME", "Rocket"))
    assert dmi_string(h, 0) == NOT_SPECIFIED
    assert dmi_string(h, 1) == "ACME"
    assert dmi_string(h, 2) == "Rocket"
    assert dmi_string(h, 3) == BAD_INDEX


def test_string_filters_unprintable_bytes():
    h = header(1, b"\x01", ("A\x07B\xE9",))
    assert dmi_string(h, 1) == "A.B."
    assert raw_string(h, 1) == b"A\x07B\xE9"


def test_string_index_in_empty_string_set():
    h = header(1, b"\x01")
    assert dmi_string(h, 1) == BAD_INDEX
    assert string_area_empty(h)
    assert not string_area_empty(header(1, b"\x01", ("x",)))


def test_record_end():
    first = structure(1, 1, b"\x01", ("ACME",))
    second = structure(127, 2)
    table = first + second
    assert record_end(table, 0, 5, len(table)) == len(first)
    assert record_end(table, len(first), 4, len(table)) == len(table)


def test_record_end_past_truncated_table():
    table = struct.pack('<BBH', 1, 5, 1) + b"\x01ACME"
    assert record_end(table, 0, 5, len(table)) > len(table)


def test_raw_smbios_data_header():
    data = struct.pack('<BBBBI', 0, 3, 4, 0, 6) + b"\x7F\x04\x00\x00\x00\x00"
    raw, offset = parse_raw_smbios_data_header(data)
    assert offset == RAW_SMBIOS_HEADER_SIZE
    assert (raw.major_version, raw.minor_version, raw.length) == (3, 4, 6)


def test_raw_smbios_data_header_rejects_short_data():
    assert parse_raw_smbios_data_header(b"\x00\x03") == (None, 0)
    data = struct.pack('<BBBBI', 0, 3, 4, 0, 100) + b"\x00" * 8
    assert parse_raw_smbios_data_header(data) == (None, 0)
