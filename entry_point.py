"""
Entry point parsing and the chain of places the table is looked for:
a dump file, sysfs, EFI, a scan of the BIOS area, or the Windows firmware
table API.
"""
import platform
import struct
import sys

from firmware_api import (EFI_NO_SMBIOS, EFI_NOT_FOUND, efi_systab_address, get_smbios_data,
                          log, mem_chunk, read_file, write_dump)
from options import FLAG_DUMP_BIN, FLAG_FROM_DUMP, FLAG_NO_FILE_OFFSET, FLAG_NO_SYSFS, FLAG_STOP_AT_EOT
from parsers import checksum, dword, parse_raw_smbios_data_header, qword, word
from table_walker import decode_table, dmi_table, dump_table

VERSION = "3.5"

SYS_ENTRY_FILE = "/sys/firmware/dmi/tables/smbios_entry_point"
SYS_TABLE_FILE = "/sys/firmware/dmi/tables/DMI"

SMBIOS3_ENTRY_LENGTH = 0x18
SMBIOS_ENTRY_LENGTH = 0x1F
LEGACY_ENTRY_LENGTH = 0x0F
DUMP_TABLE_OFFSET = 32

BIOS_AREA_BASE = 0xF0000
BIOS_AREA_SIZE = 0x10000

# Some BIOS report a weird version: (raw version, reported minor, fixed version)
VERSION_FIXUPS = {
    0x021F: (0x1F, 0x0203),
    0x0221: (0x21, 0x0203),
    0x0233: (51, 0x0206),
}


def overwrite_dmi_address(buf, offset=0):
    """
    Rebases the 32-bit table address of a _DMI_ block at `offset` to the
    dump file layout, compensating its checksum byte.
    """
    b = buf
    b[offset + 0x05] = (b[offset + 0x05] + sum(b[offset + 0x08:offset + 0x0C]) - DUMP_TABLE_OFFSET) & 0xFF
    b[offset + 0x08:offset + 0x0C] = struct.pack('<I', DUMP_TABLE_OFFSET)
    return buf


def overwrite_smbios3_address(buf):
    buf[0x05] = (buf[0x05] + sum(buf[0x10:0x18]) - DUMP_TABLE_OFFSET) & 0xFF
    buf[0x10:0x18] = struct.pack('<Q', DUMP_TABLE_OFFSET)
    return buf


def _write_entry(crafted, length, options, out):
    if not options.quiet:
        out.comment("Writing %d bytes to %s.", length, options.dumpfile)
    write_dump(0, length, crafted, options.dumpfile, True)


def smbios3_decode(buf, devmem, flags, options, out):
    """64-bit entry point ("_SM3_"). Returns True if the entry point is valid."""
    if buf[0x06] > 0x20:
        out.info("Entry point length too large (%d bytes, expected %d).",
                 buf[0x06], SMBIOS3_ENTRY_LENGTH)
        return False

    if not checksum(buf, buf[0x06]):
        log("smbios3_decode: bad checksum")
        return False

    ver = (buf[0x07] << 16) + (buf[0x08] << 8) + buf[0x09]
    if not options.quiet:
        out.info("SMBIOS %d.%d.%d present.", buf[0x07], buf[0x08], buf[0x09])

    dmi_table(qword(buf, 0x10), dword(buf, 0x0C), 0, ver, devmem,
              flags | FLAG_STOP_AT_EOT, options, out)

    if options.flags & FLAG_DUMP_BIN:
        crafted = overwrite_smbios3_address(bytearray(buf[:0x20]))
        _write_entry(crafted, crafted[0x06], options, out)
    return True


def smbios_version(ver, options, out):
    """Applies the known version fixups to a 0xMMmm version."""
    fixup = VERSION_FIXUPS.get(ver)
    if fixup is None:
        return ver
    reported, fixed = fixup
    if not options.quiet:
        out.info("SMBIOS version fixup (2.%d -> 2.%d).", reported, fixed & 0xFF)
    return fixed


def smbios_decode(buf, devmem, flags, options, out):
    """32-bit entry point ("_SM_") with its embedded "_DMI_" block."""
    if buf[0x05] > 0x20:
        out.info("Entry point length too large (%d bytes, expected %d).",
                 buf[0x05], SMBIOS_ENTRY_LENGTH)
        return False

    if (not checksum(buf, buf[0x05]) or bytes(buf[0x10:0x15]) != b"_DMI_"
            or not checksum(buf[0x10:], 0x0F)):
        log("smbios_decode: bad checksum or missing _DMI_ anchor")
        return False

    ver = smbios_version((buf[0x06] << 8) + buf[0x07], options, out)
    if not options.quiet:
        out.info("SMBIOS %d.%d present.", ver >> 8, ver & 0xFF)

    dmi_table(dword(buf, 0x18), word(buf, 0x16), word(buf, 0x1C), ver << 8,
              devmem, flags, options, out)

    if options.flags & FLAG_DUMP_BIN:
        crafted = overwrite_dmi_address(bytearray(buf[:0x20]), 0x10)
        _write_entry(crafted, crafted[0x05], options, out)
    return True


def legacy_decode(buf, devmem, flags, options, out):
    """Legacy DMI entry point ("_DMI_"), version in BCD nibbles."""
    if not checksum(buf, LEGACY_ENTRY_LENGTH):
        log("legacy_decode: bad checksum")
        return False

    bcd = buf[0x0E]
    if not options.quiet:
        out.info("Legacy DMI %d.%d present.", bcd >> 4, bcd & 0x0F)

    dmi_table(dword(buf, 0x08), word(buf, 0x06), word(buf, 0x0C),
              ((bcd & 0xF0) << 12) + ((bcd & 0x0F) << 8), devmem, flags, options, out)

    if options.flags & FLAG_DUMP_BIN:
        crafted = overwrite_dmi_address(bytearray(buf[:0x10]))
        _write_entry(crafted, LEGACY_ENTRY_LENGTH, options, out)
    return True


def decode_entry_point(buf, devmem, flags, options, out, legacy=True):
    """Dispatches on the anchor string. Returns True if a table was found."""
    buf = bytes(buf)
    if buf[:5] == b"_SM3_" and len(buf) >= SMBIOS3_ENTRY_LENGTH:
        return smbios3_decode(buf, devmem, flags, options, out)
    if buf[:4] == b"_SM_" and len(buf) >= SMBIOS_ENTRY_LENGTH:
        return smbios_decode(buf, devmem, flags, options, out)
    if legacy and buf[:5] == b"_DMI_" and len(buf) >= LEGACY_ENTRY_LENGTH:
        return legacy_decode(buf, devmem, flags, options, out)
    return False


def scan_bios_area(buf, devmem, options, out):
    """
    Looks for an entry point on 16-byte boundaries of the 64 KiB BIOS
    area, preferring a 64-bit one.
    """
    for fp in range(0, 0xFFE0 + 1, 16):
        if buf[fp:fp + 5] == b"_SM3_":
            if smbios3_decode(buf[fp:fp + 0x20], devmem, 0, options, out):
                return True

    for fp in range(0, 0xFFF0 + 1, 16):
        if buf[fp:fp + 4] == b"_SM_" and fp <= 0xFFE0:
            if smbios_decode(buf[fp:fp + 0x20], devmem, 0, options, out):
                return True
        elif buf[fp:fp + 5] == b"_DMI_":
            if legacy_decode(buf[fp:fp + 0x10], devmem, 0, options, out):
                return True
    return False


def craft_smbios3_entry(header, table_length):
    """Builds an _SM3_ entry point for a table obtained without one."""
    crafted = bytearray(SMBIOS3_ENTRY_LENGTH)
    crafted[0:5] = b"_SM3_"
    crafted[0x06] = SMBIOS3_ENTRY_LENGTH
    crafted[0x07] = header.major_version
    crafted[0x08] = header.minor_version
    crafted[0x09] = 0  # docrev
    crafted[0x0A] = 0x01  # entry point revision
    struct.pack_into('<I', crafted, 0x0C, table_length)
    struct.pack_into('<Q', crafted, 0x10, DUMP_TABLE_OFFSET)
    crafted[0x05] = (-sum(crafted)) & 0xFF
    return crafted


def decode_windows(raw, options, out):
    """
    Decodes the 'RSMB' firmware table: a RawSMBIOSData header followed by
    the structures. There is no structure count, so the walk stops at the
    end-of-table marker.
    """
    header, offset = parse_raw_smbios_data_header(raw)
    if header is None:
        log("decode_windows: invalid RawSMBIOSData header")
        return False

    table = raw[offset:offset + header.length]
    if not options.quiet:
        out.info("SMBIOS %d.%d present.", header.major_version, header.minor_version)
        if options.types is None:
            out.info("Table of %d bytes from the firmware table API.", header.length)
        out.sep()

    if options.flags & FLAG_DUMP_BIN:
        dump_table(table, options, out)
        _write_entry(craft_smbios3_entry(header, len(table)), SMBIOS3_ENTRY_LENGTH,
                     options, out)
        return True

    ver = (header.major_version << 8) + header.minor_version
    decode_table(table, 0, ver, FLAG_STOP_AT_EOT, options, out)
    return True


def is_x86():
    return platform.machine().lower() in ("x86_64", "amd64", "i386", "i486", "i586", "i686", "x86")


def run(options, out):
    """Finds and decodes the table. Returns the process exit status."""
    quiet = options.quiet
    if not quiet:
        out.comment("smbios-dump %s", VERSION)

    if options.flags & FLAG_FROM_DUMP:
        if not quiet:
            out.info("Reading SMBIOS/DMI data from file %s.", options.dumpfile)
        buf = mem_chunk(0, 0x20, options.dumpfile)
        if buf is None:
            return 1
        found = decode_entry_point(buf, options.dumpfile, 0, options, out)
        return _done(found, options, out)

    if sys.platform == "win32":
        raw = get_smbios_data()
        found = bool(raw) and decode_windows(raw, options, out)
        return _done(found, options, out)

    # the entry point file holds any kind of entry point, read enough for the largest
    if not options.flags & FLAG_NO_SYSFS:
        buf = read_file(0, 0x20, SYS_ENTRY_FILE)
        if buf is not None:
            if not quiet:
                out.info("Getting SMBIOS data from sysfs.")
            if decode_entry_point(buf, SYS_TABLE_FILE, FLAG_NO_FILE_OFFSET, options, out):
                return _done(True, options, out)
            if not quiet:
                out.info("Failed to get SMBIOS data from sysfs.")

    # then EFI (ia64, Intel based Mac, arm64)
    status, kind, address, source = efi_systab_address()
    if status == EFI_NO_SMBIOS:
        out.info("%s: SMBIOS entry point missing", source)
        return 1

    if status != EFI_NOT_FOUND:
        if not quiet:
            out.comment("%s entry point at 0x%08x", kind, address)
            out.info("Found SMBIOS entry point in EFI, reading table from %s.", options.devmem)
        buf = mem_chunk(address, 0x20, options.devmem)
        if buf is None:
            return 1
        found = decode_entry_point(buf, options.devmem, 0, options, out, legacy=False)
        return _done(found, options, out)

    found = False
    if is_x86():
        if not quiet:
            out.info("Scanning %s for entry point.", options.devmem)
        buf = mem_chunk(BIOS_AREA_BASE, BIOS_AREA_SIZE, options.devmem)
        if buf is None:
            return 1
        found = scan_bios_area(buf, options.devmem, options, out)
    return _done(found, options, out)


def _done(found, options, out):
    if not found and not options.quiet:
        out.comment("No SMBIOS nor DMI entry point found, sorry.")
    return 0
