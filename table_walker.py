"""
Walks a structure table: a first pass finds the system vendor for the OEM
decoders, a second pass decodes, dumps or extracts strings from every
record the options select.
"""
from dmi_decode import DecodeContext, dmi_decode, dmi_dump, dmi_table_string, fixup_type_34
from dmi_oem import VendorOemDecoder
from firmware_api import log, mem_chunk, read_file, write_dump
from options import (FLAG_DUMP, FLAG_DUMP_BIN, FLAG_FROM_DUMP, FLAG_NO_FILE_OFFSET,
                     FLAG_STOP_AT_EOT, SUPPORTED_SMBIOS_VER)
from parsers import _dmi_string, record_end, to_dmi_header

HEADER_SIZE = 4


def find_system_vendor(buf, num, flags, quiet):
    """
    First pass: returns the (manufacturer, product) strings of the System
    Information record, or (None, None).
    """
    length = len(buf)
    i = 0
    offset = 0
    while (i < num or not num) and offset + HEADER_SIZE <= length:
        h = to_dmi_header(buf, offset)

        # a short record hides where the next one starts
        if h.length < 4 or (h.type == 127 and (quiet or flags & FLAG_STOP_AT_EOT)):
            break
        i += 1

        nxt = record_end(buf, offset, h.length, length)
        if nxt > length:
            break

        if h.type == 1 and h.length >= 6:
            manufacturer = _dmi_string(h, h.data[0x04], False) if h.data[0x04] else None
            product = _dmi_string(h, h.data[0x05], False) if h.data[0x05] else None
            log(f"find_system_vendor: '{manufacturer}' '{product}'")
            return manufacturer, product

        offset = nxt
    return None, None


def decode_table(buf, num, version, flags, options, out, oem=None):
    """
    Decodes the table in buf. num is the announced structure count (0 when
    unknown), version the SMBIOS version as 0xMMmm and flags the entry
    point flags. Returns the number of records walked.
    """
    length = len(buf)
    quiet = options.quiet

    if oem is None:
        oem = VendorOemDecoder(*find_system_vendor(buf, num, flags, quiet))
    ctx = DecodeContext(version=version, quiet=quiet, oem=oem)
    dump = bool(options.flags & FLAG_DUMP)

    i = 0
    offset = 0
    while (i < num or not num) and offset + HEADER_SIZE <= length:
        h = to_dmi_header(buf, offset)
        display = options.displays(h)

        if h.length < 4:
            if not quiet:
                out.info("Invalid entry length (%d). DMI table is broken! Stop.", h.length)
                out.info("")
                quiet = True
            break
        i += 1

        # in quiet mode the end-of-table marker ends the walk
        if quiet and h.type == 127:
            break

        if display and (not quiet or dump):
            out.handle(h)

        nxt = record_end(buf, offset, h.length, length)
        if nxt > length:
            if display and not quiet:
                out.struct_err("<TRUNCATED>")
            out.sep()
            offset = nxt
            break

        if h.type == 34:
            h = fixup_type_34(h, display, quiet, out)

        if display:
            if dump:
                dmi_dump(h, out, dump=True)
                out.sep()
            else:
                dmi_decode(h, ctx, out)
        elif options.string is not None and options.string.type == h.type:
            dmi_table_string(h, options.string, version, out)

        offset = nxt

        if h.type == 127 and flags & FLAG_STOP_AT_EOT:
            break

    # 64-bit tables only announce a maximum size and no count
    if not quiet:
        if num and i != num:
            out.info("Wrong DMI structures count: %d announced, only %d decoded.", num, i)
        if offset > length or (num and offset < length):
            out.info("Wrong DMI structures length: %d bytes announced, "
                     "structures occupy %d bytes.", length, offset)
    return i


def dmi_table(base, length, num, ver, devmem, flags, options, out):
    """
    Reads the table announced by an entry point and decodes it, or writes
    it to the dump file. ver is the full 0xMMmmrr version.
    """
    quiet = options.quiet

    if ver > SUPPORTED_SMBIOS_VER and not quiet:
        out.comment("SMBIOS implementations newer than version %d.%d.%d are not",
                    SUPPORTED_SMBIOS_VER >> 16, (SUPPORTED_SMBIOS_VER >> 8) & 0xFF,
                    SUPPORTED_SMBIOS_VER & 0xFF)
        out.comment("fully supported by this version of smbios-dump.")

    if not quiet:
        if options.types is None:
            if num:
                out.info("%d structures occupying %d bytes.", num, length)
            if not options.flags & FLAG_FROM_DUMP:
                out.info("Table at 0x%08X.", base)
        out.sep()

    if flags & FLAG_NO_FILE_OFFSET or options.flags & FLAG_FROM_DUMP:
        # sysfs and dump files may be shorter than announced; 64-bit entry
        # points only give the maximum size
        buf = read_file(0 if flags & FLAG_NO_FILE_OFFSET else base, length, devmem)
        if buf is not None:
            if not quiet and num and len(buf) != length:
                out.info("Wrong DMI structures length: %d bytes announced, "
                         "only %d bytes available.", length, len(buf))
            length = len(buf)
    else:
        buf = mem_chunk(base, length, devmem)

    if buf is None:
        out.info("Failed to read table, sorry.")
        return False

    if options.flags & FLAG_DUMP_BIN:
        dump_table(buf, options, out)
    else:
        decode_table(buf, num, ver >> 8, flags, options, out)
    return True


def dump_table(buf, options, out):
    """Writes the raw table at offset 32 of the dump file, truncating it."""
    if not options.quiet:
        out.comment("Writing %d bytes to %s.", len(buf), options.dumpfile)
    return write_dump(32, len(buf), buf, options.dumpfile, False)
