import struct

from conftest import bios_record, end_of_table, structure, system_record
from dmi_output import RecordingSink
from options import FLAG_DUMP, FLAG_DUMP_BIN, FLAG_FROM_DUMP, FLAG_NO_FILE_OFFSET, FLAG_STOP_AT_EOT
from options import Options, parse_string
from table_walker import decode_table, dmi_table, find_system_vendor


def handles(sink):
    return [e[1] for e in sink.events if e[0] == 'handle']


def test_walks_every_record(sample_table, sink, options):
    assert decode_table(sample_table, 3, 0x0302, 0, options, sink) == 3
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]
    assert sink.lines('handle_name') == ["BIOS Information", "System Information", "End Of Table"]
    assert sink.lines('info') == []


def test_count_mismatch_is_reported(sample_table, sink, options):
    decode_table(sample_table, 5, 0x0302, 0, options, sink)
    assert sink.lines('info') == ["Wrong DMI structures count: 5 announced, only 3 decoded."]


def test_announced_count_bounds_the_walk(sample_table, sink, options):
    decode_table(sample_table, 2, 0x0302, 0, options, sink)
    assert handles(sink) == [0x0000, 0x0001]
    length = len(sample_table)
    walked = length - len(end_of_table())
    assert sink.lines('info') == [
        "Wrong DMI structures length: %d bytes announced, structures occupy %d bytes."
        % (length, walked)]


def test_truncated_record(sample_table, sink, options):
    table = sample_table[:-1]
    decode_table(table, 0, 0x0302, 0, options, sink)
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]
    assert sink.lines('struct_err') == ["<TRUNCATED>"]
    assert sink.events[-2:] == [('sep',), (
        'info', "Wrong DMI structures length: %d bytes announced, structures occupy %d bytes."
        % (len(table), len(table) + 1))]


def test_short_record_stops_the_walk(sink, options):
    table = bios_record() + struct.pack('<BBH', 1, 2, 0x0005) + b"\0\0" + end_of_table()
    assert decode_table(table, 3, 0x0302, 0, options, sink) == 1
    assert sink.lines('info') == ["Invalid entry length (2). DMI table is broken! Stop.", ""]


def test_stop_at_end_of_table(sink, options):
    table = bios_record() + end_of_table() + system_record()
    assert decode_table(table, 0, 0x0300, FLAG_STOP_AT_EOT, options, sink) == 2
    assert handles(sink) == [0x0000, 0xFEFF]

    sink = RecordingSink()
    assert decode_table(table, 0, 0x0300, 0, options, sink) == 3


def test_quiet_mode(sample_table, sink, quiet_options):
    decode_table(sample_table, 3, 0x0302, 0, quiet_options, sink)
    assert handles(sink) == []
    assert "End Of Table" not in sink.lines('handle_name')
    assert sink.attr_value("Vendor") == "ACME Firmware"
    assert sink.lines('info') == []


def test_type_filter(sample_table, sink):
    decode_table(sample_table, 3, 0x0302, 0, Options(types=frozenset({1})), sink)
    assert handles(sink) == [0x0001]


def test_handle_filter(sample_table, sink):
    decode_table(sample_table, 3, 0x0302, 0, Options(handle=0x0000), sink)
    assert handles(sink) == [0x0000]


def test_string_selection(sample_table, sink):
    options = Options(string=parse_string("system-product-name"))
    assert options.quiet
    decode_table(sample_table, 3, 0x0302, 0, options, sink)
    assert sink.events == [('info', "Rocket 3000")]


def test_dump_mode(sample_table, sink):
    decode_table(sample_table, 3, 0x0302, 0, Options(flags=FLAG_DUMP), sink)
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]
    assert sink.lines('handle_name') == []
    assert sink.list_items("Header and Data")[0].startswith("00 18 00 00 01 02 00 E8")


def test_type_34_is_fixed_up(sink, options):
    formatted = bytes([1, 0x03]) + struct.pack('<I', 0) + bytes([0x05]) + b"ABCDE"
    table = structure(34, 0x0020, formatted, ("LM75",)) + end_of_table()
    decode_table(table, 0, 0x0302, 0, options, sink)
    assert ('handle', 0x0020, 34, 16) in sink.events
    assert "Invalid entry length (16). Fixed up to 11." in sink.lines('info')


def test_system_vendor_lookup(sample_table):
    assert find_system_vendor(sample_table, 3, 0, False) == ("ACME", "Rocket 3000")
    assert find_system_vendor(bios_record() + end_of_table(), 0, 0, False) == (None, None)


def test_vendor_records_decoded_for_detected_vendor(sink, options):
    locator = structure(204, 0x00CC, bytes([1, 2, 3, 4, 8, 1, 5]),
                        ("Rack1", "Encl", "C7000", "Bay 3", "SN1"))
    system = system_record(manufacturer="HP", product="ProLiant DL380 Gen9")
    table = system + locator + end_of_table()
    decode_table(table, 0, 0x0302, 0, options, sink)
    assert "HP ProLiant System/Rack Locator" in sink.lines('handle_name')
    assert sink.attr_value("Rack Name") == "Rack1"

    # same record on another vendor is only dumped
    sink = RecordingSink()
    table = system_record() + locator + end_of_table()
    decode_table(table, 0, 0x0302, 0, options, sink)
    assert "OEM-specific Type" in sink.lines('handle_name')


def _dump_file(tmp_path, table):
    path = tmp_path / "dmi.bin"
    path.write_bytes(bytes(32) + table)
    return str(path)


def test_table_from_dump_file(tmp_path, sample_table, sink):
    path = _dump_file(tmp_path, sample_table)
    options = Options(flags=FLAG_FROM_DUMP, dumpfile=path)
    assert dmi_table(32, len(sample_table), 3, 0x030200, path, 0, options, sink)
    assert sink.events[0] == ('info', "3 structures occupying %d bytes." % len(sample_table))
    assert sink.events[1] == ('sep',)
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_table_shorter_than_announced(tmp_path, sample_table, sink):
    path = _dump_file(tmp_path, sample_table)
    options = Options(flags=FLAG_FROM_DUMP, dumpfile=path)
    dmi_table(32, len(sample_table) + 10, 3, 0x030200, path, 0, options, sink)
    assert ("Wrong DMI structures length: %d bytes announced, only %d bytes available."
            % (len(sample_table) + 10, len(sample_table))) in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_sysfs_table_reads_from_the_start(tmp_path, sample_table, sink, options):
    path = tmp_path / "DMI"
    path.write_bytes(sample_table)
    dmi_table(0x7AE3F000, len(sample_table), 0, 0x030300, str(path),
              FLAG_NO_FILE_OFFSET | FLAG_STOP_AT_EOT, options, sink)
    assert sink.events[0] == ('info', "Table at 0x7AE3F000.")
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_newer_version_warning(tmp_path, sample_table, sink, options):
    path = tmp_path / "DMI"
    path.write_bytes(sample_table)
    dmi_table(0, len(sample_table), 0, 0x030400, str(path), FLAG_NO_FILE_OFFSET, options, sink)
    assert sink.lines('comment') == [
        "SMBIOS implementations newer than version 3.3.0 are not",
        "fully supported by this version of smbios-dump.",
    ]


def test_unreadable_table(tmp_path, sink, options):
    missing = str(tmp_path / "missing")
    assert not dmi_table(0, 100, 0, 0x030000, missing, FLAG_NO_FILE_OFFSET, options, sink)
    assert sink.lines('info')[-1] == "Failed to read table, sorry."


def test_table_dump_bin(tmp_path, sample_table, sink):
    source = tmp_path / "DMI"
    source.write_bytes(sample_table)
    target = tmp_path / "out.bin"
    options = Options(flags=FLAG_DUMP_BIN, dumpfile=str(target))
    dmi_table(0, len(sample_table), 3, 0x030200, str(source), FLAG_NO_FILE_OFFSET, options, sink)
    assert target.read_bytes() == bytes(32) + sample_table
    assert sink.lines('comment') == ["Writing %d bytes to %s." % (len(sample_table), target)]
    assert handles(sink) == []
