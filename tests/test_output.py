import io

import pytest
from rich.console import Console

from conftest import bios_record, header, structure, system_record
from dmi_decode import DECODERS, DecodeContext, dmi_decode, dmi_dump
from dmi_oem import OemDecoder
from dmi_output import (RecordingSink, RichSink, SinkStateError, TextSink, group_structures,
                        hex_dump)
from options import Options
from parsers import to_dmi_header
from table_walker import decode_table


def test_text_layout():
    stream = io.StringIO()
    out = TextSink(stream)
    out.comment("smbios-dump %s", "3.5")
    out.handle(header(0, handle=0x0002))
    out.handle_name("BIOS Information")
    out.attr("Vendor", "%s", "ACME")
    out.list_start("Characteristics")
    out.list_item("PCI is supported")
    out.list_end()
    out.subattr("WiFi", "Yes")
    out.struct_err("<TRUNCATED>")
    out.sep()
    assert stream.getvalue() == (
        "# smbios-dump 3.5\n"
        "Handle 0x0002, DMI type 0, 4 bytes\n"
        "BIOS Information\n"
        "\tVendor: ACME\n"
        "\tCharacteristics:\n"
        "\t\tPCI is supported\n"
        "\t\tWiFi: Yes\n"
        "\t<TRUNCATED>\n"
        "\n")


def test_text_list_with_value():
    stream = io.StringIO()
    TextSink(stream).list_start("Contained Elements", "%d", 2)
    assert stream.getvalue() == "\tContained Elements: 2\n"


def test_percent_signs_pass_through_without_arguments():
    sink = RecordingSink()
    sink.attr("Name", "100% ready")
    assert sink.attr_value("Name") == "100% ready"


def test_recording_sink_enforces_nesting():
    sink = RecordingSink()
    with pytest.raises(SinkStateError):
        sink.list_item("orphan")
    with pytest.raises(SinkStateError):
        sink.list_end()
    sink.list_start("Flags")
    with pytest.raises(SinkStateError):
        sink.attr("Vendor", "ACME")
    with pytest.raises(SinkStateError):
        sink.sep()


@pytest.mark.parametrize("type_", sorted(DECODERS))
@pytest.mark.parametrize("length", [4, 0x0B, 0x60])
def test_every_decoder_closes_its_lists(type_, length):
    # each record is the last one of the table, with nothing after its strings
    table = structure(type_, 0x0100, bytes(length - 4))
    sink = RecordingSink()
    assert decode_table(table, 1, 0x0303, 0, Options(), sink) == 1
    assert sink.events[0] == ('handle', 0x0100, type_, length)
    assert not sink.in_list


def _truncations(record, strings):
    length = record[1]
    for n in range(4, length + 1):
        yield record[0], n, record[4:n], strings


@pytest.mark.parametrize("type_, length, formatted, strings", [
    *_truncations(bios_record(), ("ACME Firmware", "1.2.3", "01/02/2020")),
    *_truncations(system_record(), ("ACME", "Rocket 3000", "Rev A", "SN-42", "SKU-7", "Rockets")),
])
def test_truncated_records_print_what_they_carry(type_, length, formatted, strings):
    table = structure(type_, 0x0100, formatted, strings)
    sink = RecordingSink()
    decode_table(table, 1, 0x0302, 0, Options(), sink)
    assert ('handle', 0x0100, type_, length) in sink.events
    assert sink.lines('struct_err') == []
    assert all(isinstance(value, str) for _, value in sink.attrs())


def test_group_structures():
    sink = RecordingSink()
    sink.info("SMBIOS 3.2.0 present.")
    sink.handle(header(1, handle=0x0001))
    sink.handle_name("System Information")
    sink.attr("Manufacturer", "ACME")
    sink.list_start("Flags")
    sink.list_item("FPU")
    sink.list_end()
    sink.sep()
    sink.handle(header(127, handle=0xFEFF))
    sink.handle_name("End Of Table")
    sink.sep()

    first, last = group_structures(sink.events)
    assert (first.handle, first.type, first.name) == (0x0001, 1, "System Information")
    assert first.rows == [(0, "Manufacturer", "ACME"), (0, "Flags", ""), (1, "", "FPU")]
    assert (last.name, last.rows) == ("End Of Table", [])


def test_hex_dump():
    assert hex_dump(b"AB\x00") == "0000  41 42 00" + " " * 40 + "  AB."
    assert hex_dump(bytes(17)).splitlines()[1].startswith("0010  00  ")


def test_rich_sink_renders_structures():
    stream = io.StringIO()
    out = RichSink(Console(file=stream, width=120, color_system=None))
    h = to_dmi_header(bios_record(), 0)
    out.handle(h)
    dmi_decode(h, DecodeContext(version=0x0302, quiet=False, oem=OemDecoder()), out)
    out.close()
    text = stream.getvalue()
    assert "Handle 0x0000, DMI type 0, 24 bytes" in text
    assert "ACME Firmware" in text
    assert "ISA is supported" in text


def test_rich_sink_hex_table():
    stream = io.StringIO()
    out = RichSink(Console(file=stream, width=120, color_system=None))
    dmi_dump(header(1, b"\x41", ("AB",)), out, dump=True)
    out.close()
    text = stream.getvalue()
    assert "Offset" in text
    assert "01 05 00 01 41" in text
    assert "41 42 00" in text
