import struct

import pytest

import entry_point
from conftest import dump_image, legacy_entry, smbios3_entry, smbios_entry
from dmi_output import RecordingSink
from entry_point import (VERSION, craft_smbios3_entry, decode_windows, overwrite_dmi_address,
                         overwrite_smbios3_address, run)
from firmware_api import EFI_NO_SMBIOS, EFI_NOT_FOUND
from options import FLAG_DUMP_BIN, FLAG_FROM_DUMP, FLAG_NO_SYSFS, FLAG_QUIET, Options
from parsers import RawSMBIOSData, checksum, dword, qword


def handles(sink):
    return [e[1] for e in sink.events if e[0] == 'handle']


def from_dump(path, flags=0):
    sink = RecordingSink()
    status = run(Options(flags=FLAG_FROM_DUMP | flags, dumpfile=str(path)), sink)
    return status, sink


@pytest.fixture
def no_firmware(monkeypatch):
    """No EFI table and no BIOS area to scan."""
    monkeypatch.setattr(entry_point, "efi_systab_address",
                        lambda: (EFI_NOT_FOUND, None, 0, None))
    monkeypatch.setattr(entry_point, "is_x86", lambda: False)


@pytest.fixture
def sysfs(tmp_path, monkeypatch):
    """Points the sysfs paths at files of the test directory."""
    entry = tmp_path / "smbios_entry_point"
    table = tmp_path / "DMI"
    monkeypatch.setattr(entry_point, "SYS_ENTRY_FILE", str(entry))
    monkeypatch.setattr(entry_point, "SYS_TABLE_FILE", str(table))
    return entry, table


def test_from_dump_smbios3(tmp_path, sample_table):
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(smbios3_entry(len(sample_table) + 64, 32), sample_table))

    status, sink = from_dump(path)
    assert status == 0
    assert sink.events[0] == ('comment', "smbios-dump %s" % VERSION)
    assert sink.lines('info')[:2] == ["Reading SMBIOS/DMI data from file %s." % path,
                                      "SMBIOS 3.2.0 present."]
    # 64-bit tables have no count, and the dump has no address to show
    assert not any(line.startswith("Table at") for line in sink.lines('info'))
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]
    assert sink.lines('comment') == ["smbios-dump %s" % VERSION]


def test_from_dump_smbios(tmp_path, sample_table):
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(smbios_entry(len(sample_table), 32, 3), sample_table))

    status, sink = from_dump(path)
    assert status == 0
    assert "SMBIOS 2.8 present." in sink.lines('info')
    assert "3 structures occupying %d bytes." % len(sample_table) in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_from_dump_legacy(tmp_path, sample_table):
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(legacy_entry(len(sample_table), 32, 3), sample_table))

    status, sink = from_dump(path)
    assert "Legacy DMI 2.1 present." in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_bad_checksum_is_not_an_entry_point(tmp_path, sample_table):
    entry = bytearray(smbios3_entry(len(sample_table), 32))
    entry[0x0C] ^= 0x01
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(bytes(entry), sample_table))

    status, sink = from_dump(path)
    assert status == 0
    assert handles(sink) == []
    assert sink.lines('comment')[-1] == "No SMBIOS nor DMI entry point found, sorry."


def test_quiet_not_found_prints_nothing(tmp_path):
    path = tmp_path / "dump.bin"
    path.write_bytes(bytes(64))
    status, sink = from_dump(path, FLAG_QUIET)
    assert status == 0
    assert sink.events == []


def test_missing_dump_file(tmp_path):
    status, sink = from_dump(tmp_path / "missing.bin")
    assert status == 1


def test_entry_point_length_too_large(tmp_path, sample_table):
    entry = bytearray(smbios3_entry(len(sample_table), 32))
    entry[0x06] = 0x21
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(bytes(entry), sample_table))

    status, sink = from_dump(path)
    assert "Entry point length too large (33 bytes, expected 24)." in sink.lines('info')
    assert handles(sink) == []


@pytest.mark.parametrize("minor, messages", [
    (0x1F, ["SMBIOS version fixup (2.31 -> 2.3).", "SMBIOS 2.3 present."]),
    (0x21, ["SMBIOS version fixup (2.33 -> 2.3).", "SMBIOS 2.3 present."]),
    (0x33, ["SMBIOS version fixup (2.51 -> 2.6).", "SMBIOS 2.6 present."]),
    (0x07, ["SMBIOS 2.7 present."]),
])
def test_version_fixups(tmp_path, sample_table, minor, messages):
    path = tmp_path / "dump.bin"
    path.write_bytes(dump_image(smbios_entry(len(sample_table), 32, 3, minor=minor),
                                sample_table))
    status, sink = from_dump(path)
    info = sink.lines('info')
    start = info.index(messages[0])
    assert info[start:start + len(messages)] == messages


def test_overwrite_dmi_address_keeps_checksum():
    crafted = overwrite_dmi_address(bytearray(legacy_entry(100, 0x000F1000, 3)))
    assert dword(crafted, 0x08) == 32
    assert checksum(crafted, 0x0F)

    crafted = overwrite_dmi_address(bytearray(smbios_entry(100, 0xBFFE0000, 3)), 0x10)
    assert dword(crafted, 0x18) == 32
    assert checksum(crafted[0x10:], 0x0F)
    assert checksum(crafted, 0x1F)


def test_overwrite_smbios3_address_keeps_checksum():
    crafted = overwrite_smbios3_address(bytearray(smbios3_entry(0x2000, 0x7AE3F000)))
    assert qword(crafted, 0x10) == 32
    assert checksum(crafted, 0x18)


def test_sysfs_dump_bin_round_trip(tmp_path, sample_table, sysfs):
    entry, table = sysfs
    entry.write_bytes(smbios3_entry(len(sample_table), 0x7AE3F000))
    table.write_bytes(sample_table)
    target = tmp_path / "out.bin"

    sink = RecordingSink()
    assert run(Options(flags=FLAG_DUMP_BIN, dumpfile=str(target)), sink) == 0
    assert "Getting SMBIOS data from sysfs." in sink.lines('info')
    assert sink.lines('comment')[1:] == [
        "Writing %d bytes to %s." % (len(sample_table), target),
        "Writing 24 bytes to %s." % target,
    ]
    image = target.read_bytes()
    assert image[:5] == b"_SM3_"
    assert image[32:] == sample_table
    assert checksum(image, 0x18)

    status, sink = from_dump(target)
    assert status == 0
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_sysfs_garbage_falls_through(sysfs, no_firmware):
    entry, _ = sysfs
    entry.write_bytes(b"garbage" * 4)

    sink = RecordingSink()
    assert run(Options(), sink) == 0
    assert sink.lines('info') == ["Getting SMBIOS data from sysfs.",
                                  "Failed to get SMBIOS data from sysfs."]
    assert sink.lines('comment')[-1] == "No SMBIOS nor DMI entry point found, sorry."


def test_efi_without_smbios_entry(monkeypatch):
    monkeypatch.setattr(entry_point, "efi_systab_address",
                        lambda: (EFI_NO_SMBIOS, None, 0, "/sys/firmware/efi/systab"))
    sink = RecordingSink()
    assert run(Options(flags=FLAG_NO_SYSFS), sink) == 1
    assert sink.lines('info') == ["/sys/firmware/efi/systab: SMBIOS entry point missing"]


def _fake_memory(path, size, chunks):
    with open(path, "wb") as f:
        for offset, data in chunks:
            f.seek(offset)
            f.write(data)
        f.truncate(size)
    return str(path)


def test_efi_entry_point(tmp_path, sample_table, monkeypatch):
    devmem = _fake_memory(tmp_path / "mem", 0x2000, [
        (0x1000, smbios3_entry(len(sample_table), 0x1100)),
        (0x1100, sample_table),
    ])
    monkeypatch.setattr(entry_point, "efi_systab_address",
                        lambda: (0, "SMBIOS3", 0x1000, "/sys/firmware/efi/systab"))

    sink = RecordingSink()
    assert run(Options(flags=FLAG_NO_SYSFS, devmem=devmem), sink) == 0
    assert "SMBIOS3 entry point at 0x00001000" in sink.lines('comment')
    assert "Found SMBIOS entry point in EFI, reading table from %s." % devmem in sink.lines('info')
    assert "Table at 0x00001100." in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_memory_scan_prefers_64bit_entry(tmp_path, sample_table, monkeypatch):
    devmem = _fake_memory(tmp_path / "mem", 0x100000, [
        (0x2000, sample_table),
        (0xF0010, legacy_entry(len(sample_table), 0x2000, 3)),
        (0xF0100, smbios3_entry(len(sample_table), 0x2000)),
    ])
    monkeypatch.setattr(entry_point, "efi_systab_address",
                        lambda: (EFI_NOT_FOUND, None, 0, None))
    monkeypatch.setattr(entry_point, "is_x86", lambda: True)

    sink = RecordingSink()
    assert run(Options(flags=FLAG_NO_SYSFS, devmem=devmem), sink) == 0
    info = sink.lines('info')
    assert info[0] == "Scanning %s for entry point." % devmem
    assert "SMBIOS 3.2.0 present." in info
    assert "Legacy DMI 2.1 present." not in info
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_memory_scan_finds_32bit_entry(tmp_path, sample_table, monkeypatch):
    devmem = _fake_memory(tmp_path / "mem", 0x100000, [
        (0x2000, sample_table),
        (0xF0040, smbios_entry(len(sample_table), 0x2000, 3)),
    ])
    monkeypatch.setattr(entry_point, "efi_systab_address",
                        lambda: (EFI_NOT_FOUND, None, 0, None))
    monkeypatch.setattr(entry_point, "is_x86", lambda: True)

    sink = RecordingSink()
    run(Options(flags=FLAG_NO_SYSFS, devmem=devmem), sink)
    assert "SMBIOS 2.8 present." in sink.lines('info')
    assert "Table at 0x00002000." in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def _rsmb(table, major=3, minor=4):
    return struct.pack('<BBBBI', 0, major, minor, 0, len(table)) + table


def test_windows_firmware_table(sample_table):
    sink = RecordingSink()
    assert decode_windows(_rsmb(sample_table), Options(), sink)
    assert sink.lines('info')[:2] == [
        "SMBIOS 3.4 present.",
        "Table of %d bytes from the firmware table API." % len(sample_table)]
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_windows_firmware_table_bad_header():
    assert not decode_windows(b"\x00\x03", Options(), RecordingSink())


def test_windows_dump_bin_round_trip(tmp_path, sample_table):
    target = tmp_path / "out.bin"
    sink = RecordingSink()
    decode_windows(_rsmb(sample_table, 3, 2), Options(flags=FLAG_DUMP_BIN, dumpfile=str(target)),
                   sink)
    assert handles(sink) == []

    status, sink = from_dump(target)
    assert "SMBIOS 3.2.0 present." in sink.lines('info')
    assert handles(sink) == [0x0000, 0x0001, 0xFEFF]


def test_crafted_smbios3_entry():
    crafted = craft_smbios3_entry(RawSMBIOSData(0, 3, 1, 0, 200), 200)
    assert crafted[:5] == b"_SM3_"
    assert (crafted[0x07], crafted[0x08]) == (3, 1)
    assert dword(crafted, 0x0C) == 200
    assert qword(crafted, 0x10) == 32
    assert checksum(crafted, 0x18)
