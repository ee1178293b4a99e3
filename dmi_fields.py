"""
Value formatters shared by the structure decoders.

Functions named *_text return a string. The others take the output sink
and emit one attribute or one list, the way the structure decoders call
them.
"""
import socket

import dmi_names as names
from dmi_names import name_of
from parsers import OUT_OF_SPEC, dmi_string, dword, signed_word, word

MEMORY_UNITS = ("bytes", "kB", "MB", "GB", "TB", "PB", "EB", "ZB")


def set_bits(code, table, first_bit=0):
    """Names from `table` for every set bit, table[0] describing first_bit."""
    found = []
    for i, name in enumerate(table):
        if name is not None and code & (1 << (i + first_bit)):
            found.append(name)
    return found


def bit_list(out, attr, code, table, first_bit=0):
    """A list of set bit names, or a plain "None" attribute if none is set."""
    found = set_bits(code, table, first_bit)
    if not found:
        out.attr(attr, "None")
        return
    out.list_start(attr)
    for name in found:
        out.list_item("%s", name)
    out.list_end()


def bcd_range(value, low, high):
    if value > 0x99 or (value & 0x0F) > 0x09:
        return False
    return low <= value <= high


def memory_size_text(code, shift):
    """
    Formats a size split in powers of 1024. `shift` is 0 for a byte count
    and 1 for a kilobyte count. The lowest unit is kept when the two highest
    non-zero groups are adjacent, so no precision is lost.
    """
    split = [(code >> (10 * i)) & 0x3FF for i in range(6)]
    split.append(code >> 60)

    i = 6
    while i > 0 and not split[i]:
        i -= 1
    if i > 0 and split[i - 1]:
        i -= 1
        capacity = split[i] + (split[i + 1] << 10)
    else:
        capacity = split[i]

    return "%d %s" % (capacity, MEMORY_UNITS[i + shift])


def print_memory_size(out, attr, code, shift):
    out.attr(attr, memory_size_text(code, shift))


#
# BIOS Information (Type 0)
#

def bios_runtime_size(out, code):
    if code & 0x000003FF:
        out.attr("Runtime Size", "%d bytes", code)
    else:
        out.attr("Runtime Size", "%d kB", code >> 10)


def bios_rom_size(out, code1, code2):
    units = ("MB", "GB", OUT_OF_SPEC, OUT_OF_SPEC)

    if code1 != 0xFF:
        print_memory_size(out, "ROM Size", (code1 + 1) << 6, 1)
    else:
        out.attr("ROM Size", "%d %s", code2 & 0x3FFF, units[code2 >> 14])


def bios_characteristics(out, code):
    # bit 3 alone says the whole field is meaningless
    if code & (1 << 3):
        out.list_item("%s", names.BIOS_CHARACTERISTICS[0])
        return

    for i in range(4, 32):
        if code & (1 << i):
            out.list_item("%s", names.BIOS_CHARACTERISTICS[i - 3])


def bios_characteristics_x(out, code, table):
    for name in set_bits(code, table):
        out.list_item("%s", name)


#
# System Information (Type 1)
#

def system_uuid(p, ver):
    """
    Formats a 16-byte UUID. From SMBIOS 2.6 on, the first three fields are
    little-endian; older tables are printed in network order.
    """
    raw = bytes(p[:16])
    if all(b == 0xFF for b in raw):
        return "Not Present"
    if all(b == 0x00 for b in raw):
        return "Not Settable"

    if ver >= 0x0206:
        order = (3, 2, 1, 0, 5, 4, 7, 6)
    else:
        order = (0, 1, 2, 3, 4, 5, 6, 7)
    head = "".join("%02x" % raw[i] for i in order)
    tail = raw[8:].hex()
    return "%s-%s-%s-%s-%s" % (head[0:8], head[8:12], head[12:16],
                               tail[0:4], tail[4:16])


#
# Base Board Information (Type 2)
#

def base_board_features(out, code):
    if (code & 0x1F) == 0:
        out.list_start("Features", "%s", "None")
    else:
        out.list_start("Features")
        for name in set_bits(code, names.BASE_BOARD_FEATURES):
            out.list_item("%s", name)
    out.list_end()


def handle_list(out, attr, count, data, offset):
    out.list_start(attr, "%d", count)
    for i in range(count):
        out.list_item("0x%04X", word(data, offset + 2 * i))
    out.list_end()


#
# Chassis Information (Type 3)
#

def chassis_type(code):
    # bit 7 is the lock bit
    return name_of(names.CHASSIS_TYPE, code & 0x7F)


def chassis_height(out, code):
    if code == 0x00:
        out.attr("Height", "Unspecified")
    else:
        out.attr("Height", "%d U", code)


def chassis_power_cords(out, code):
    if code == 0x00:
        out.attr("Number Of Power Cords", "Unspecified")
    else:
        out.attr("Number Of Power Cords", "%d", code)


def chassis_elements(out, count, size, data, offset):
    out.list_start("Contained Elements", "%d", count)
    for i in range(count):
        if size < 0x03:
            continue
        base = offset + i * size
        code = data[base]
        if code & 0x80:
            kind = names.structure_type(code & 0x7F)
        else:
            kind = name_of(names.BASE_BOARD_TYPE, code & 0x7F)
        low, high = data[base + 1], data[base + 2]
        if low == high:
            out.list_item("%s (%d)", kind, low)
        else:
            out.list_item("%s (%d-%d)", kind, low, high)
    out.list_end()


#
# Processor Information (Type 4)
#

def _family_code(h):
    data = h.data
    if data[0x06] == 0xFE and h.length >= 0x2A:
        return word(data, 0x28)
    return data[0x06]


def _made_by(manufacturer, vendor):
    return vendor in manufacturer or manufacturer[:len(vendor)].lower() == vendor.lower()


def processor_family(h, ver):
    data = h.data

    # 0x30 meant Pentium Pro in SMBIOS 2.0 only
    if ver == 0x0200 and data[0x06] == 0x30 and h.length >= 0x08:
        manufacturer = dmi_string(h, data[0x07])
        if _made_by(manufacturer, "Intel"):
            return "Pentium Pro"

    code = _family_code(h)

    # 0xBE is shared by Core 2 and K7, guess from the manufacturer string
    if code == 0xBE:
        if h.length >= 0x08:
            manufacturer = dmi_string(h, data[0x07])
            if _made_by(manufacturer, "Intel"):
                return "Core 2"
            if _made_by(manufacturer, "AMD"):
                return "K7"
        return "Core 2 or K7"

    return names.processor_family_name(code)


_INTEL_SIGNATURE_FAMILIES = (
    (0x0B, 0x15), (0x28, 0x2F), (0xA1, 0xB3), (0xB5, 0xB5), (0xB9, 0xC7),
    (0xCD, 0xCF), (0xD2, 0xDB), (0xDD, 0xE0),
)

_AMD_SIGNATURE_FAMILIES = (
    (0x18, 0x1D), (0x1F, 0x1F), (0x38, 0x3F), (0x46, 0x4F), (0x66, 0x6B),
    (0x83, 0x8F), (0xB6, 0xB7), (0xE4, 0xEF),
)

_ARM_FAMILIES = ((0x100, 0x101), (0x118, 0x119))

SIG_INTEL = 1
SIG_AMD = 2


def _in_ranges(code, ranges):
    return any(low <= code <= high for low, high in ranges)


def processor_id(out, h):
    data = h.data
    p = 0x08
    sig = 0
    family = _family_code(h)

    # raw bytes help identify new processors
    out.attr("ID", " ".join("%02X" % data[p + i] for i in range(8)))

    if family == 0x05:  # 80386
        dx = word(data, p)
        out.attr("Signature", "Type %d, Family %d, Major Stepping %d, Minor Stepping %d",
                 dx >> 12, (dx >> 8) & 0xF, (dx >> 4) & 0xF, dx & 0xF)
        return
    if family == 0x06:  # 80486
        dx = word(data, p)
        # only some 80486 support CPUID
        if ((dx & 0x0F00) == 0x0400
                and ((dx & 0x00F0) == 0x0040 or (dx & 0x00F0) >= 0x0070)
                and (dx & 0x000F) >= 0x0003):
            sig = SIG_INTEL
        else:
            out.attr("Signature", "Type %d, Family %d, Model %d, Stepping %d",
                     (dx >> 12) & 0x3, (dx >> 8) & 0xF, (dx >> 4) & 0xF, dx & 0xF)
            return
    elif _in_ranges(family, _ARM_FAMILIES):
        midr = dword(data, p)
        # undefined before SMBIOS 3.1.0, skipped when zero
        if midr == 0:
            return
        out.attr("Signature",
                 "Implementor 0x%02x, Variant 0x%x, Architecture %d, Part 0x%03x, Revision %d",
                 midr >> 24, (midr >> 20) & 0xF, (midr >> 16) & 0xF,
                 (midr >> 4) & 0xFFF, midr & 0xF)
        return
    elif _in_ranges(family, _INTEL_SIGNATURE_FAMILIES):
        sig = SIG_INTEL
    elif _in_ranges(family, _AMD_SIGNATURE_FAMILIES):
        sig = SIG_AMD
    elif family in (0x01, 0x02):
        # "Other" or "Unknown": fall back on the version string
        version = dmi_string(h, data[0x10])
        if (version.startswith("Pentium III MMX")
                or version.startswith("Intel(R) Core(TM)2")
                or version.startswith("Intel(R) Pentium(R)")
                or version == "Genuine Intel(R) CPU U1400"):
            sig = SIG_INTEL
        elif (version.startswith("AMD Athlon(TM)")
                or version.startswith("AMD Opteron(tm)")
                or version.startswith("Dual-Core AMD Opteron(tm)")):
            sig = SIG_AMD
        else:
            return
    else:
        return

    eax = dword(data, p)
    if sig == SIG_INTEL:
        out.attr("Signature", "Type %d, Family %d, Model %d, Stepping %d",
                 (eax >> 12) & 0x3,
                 ((eax >> 20) & 0xFF) + ((eax >> 8) & 0x0F),
                 ((eax >> 12) & 0xF0) + ((eax >> 4) & 0x0F),
                 eax & 0xF)
    elif sig == SIG_AMD:
        # AMD publication #25481 revision 2.28
        base_family = (eax >> 8) & 0xF
        extended = base_family == 0xF
        out.attr("Signature", "Family %d, Model %d, Stepping %d",
                 base_family + ((eax >> 20) & 0xFF if extended else 0),
                 ((eax >> 4) & 0xF) | ((eax >> 12) & 0xF0 if extended else 0),
                 eax & 0xF)

    edx = dword(data, p + 4)
    if (edx & 0xBFEFFBFF) == 0:
        out.list_start("Flags", "None")
    else:
        out.list_start("Flags")
        for name in set_bits(edx, names.PROCESSOR_FLAGS):
            out.list_item("%s", name)
    out.list_end()


def processor_voltage(out, attr, code):
    if code & 0x80:
        out.attr(attr, "%.1f V", (code & 0x7F) / 10)
    elif (code & 0x07) == 0x00:
        out.attr(attr, "Unknown")
    else:
        found = set_bits(code, names.PROCESSOR_VOLTAGE)
        if found:
            out.attr(attr, " ".join(found))


def processor_frequency_text(data, offset):
    code = word(data, offset)
    if code:
        return "%d MHz" % code
    return "Unknown"


def processor_status(code):
    return names.PROCESSOR_STATUS[code]


def processor_cache(out, attr, code, level, ver):
    if code == 0xFFFF:
        if ver >= 0x0203:
            out.attr(attr, "Not Provided")
        else:
            out.attr(attr, "No %s Cache", level)
    else:
        out.attr(attr, "0x%04X", code)


def processor_characteristics(out, attr, code):
    if (code & 0x00FC) == 0:
        out.attr(attr, "None")
        return
    out.list_start(attr)
    for name in set_bits(code, names.PROCESSOR_CHARACTERISTICS, 2):
        out.list_item("%s", name)
    out.list_end()


#
# Memory Controller and Memory Module (Types 5 and 6)
#

def memory_module_types(out, attr, code, flat):
    if (code & 0x07FF) == 0:
        out.attr(attr, "None")
    elif flat:
        out.attr(attr, " ".join(set_bits(code, names.MEMORY_MODULE_TYPES)))
    else:
        out.list_start(attr)
        for name in set_bits(code, names.MEMORY_MODULE_TYPES):
            out.list_item("%s", name)
        out.list_end()


def memory_module_connections(out, code):
    if code == 0xFF:
        out.attr("Bank Connections", "None")
    elif (code & 0xF0) == 0xF0:
        out.attr("Bank Connections", "%d", code & 0x0F)
    elif (code & 0x0F) == 0x0F:
        out.attr("Bank Connections", "%d", code >> 4)
    else:
        out.attr("Bank Connections", "%d %d", code >> 4, code & 0x0F)


def memory_module_speed(out, attr, code):
    if code == 0:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d ns", code)


def memory_module_size(out, attr, code):
    if code & 0x80:
        connection = " (Double-bank Connection)"
    else:
        connection = " (Single-bank Connection)"

    size = code & 0x7F
    if size == 0x7D:
        out.attr(attr, "Not Determinable%s", connection)
    elif size == 0x7E:
        out.attr(attr, "Disabled%s", connection)
    elif size == 0x7F:
        out.attr(attr, "Not Installed")
    else:
        out.attr(attr, "%d MB%s", 1 << size, connection)


def memory_module_error(out, code):
    if code & (1 << 2):
        out.attr("Error Status", "See Event Log")
    else:
        out.attr("Error Status", "%s", names.MEMORY_MODULE_ERROR[code & 0x03])


#
# Cache Information (Type 7)
#

def cache_size_2(out, attr, code):
    if code & 0x80000000:
        # 64 kB granularity
        size = (code & 0x7FFFFFFF) << 6
    else:
        size = code
    print_memory_size(out, attr, size, 1)


def cache_size(out, attr, code):
    cache_size_2(out, attr, ((code & 0x8000) << 16) | (code & 0x7FFF))


def cache_types(out, attr, code, flat):
    if (code & 0x007F) == 0:
        out.attr(attr, "None")
    elif flat:
        out.attr(attr, " ".join(set_bits(code, names.CACHE_TYPES)))
    else:
        out.list_start(attr)
        for name in set_bits(code, names.CACHE_TYPES):
            out.list_item("%s", name)
        out.list_end()


#
# Port Connector and System Slots (Types 8 and 9)
#

def port_connector_type(code):
    if code <= 0x23:
        return name_of(names.PORT_CONNECTOR_TYPE, code)
    if 0xA0 <= code <= 0xA4:
        return name_of(names.PORT_CONNECTOR_TYPE_0XA0, code)
    if code == 0xFF:
        return "Other"
    return OUT_OF_SPEC


def port_type(code):
    if code <= 0x21:
        return name_of(names.PORT_TYPE, code)
    if 0xA0 <= code <= 0xA1:
        return name_of(names.PORT_TYPE_0XA0, code)
    if code == 0xFF:
        return "Other"
    return OUT_OF_SPEC


def slot_type(code):
    if 0x01 <= code <= 0x28:
        return name_of(names.SLOT_TYPE, code)
    if code == 0x30:
        return name_of(names.SLOT_TYPE_0X30, code)
    if 0xA0 <= code <= 0xC6:
        return name_of(names.SLOT_TYPE_0XA0, code)
    return OUT_OF_SPEC


def slot_id(out, code1, code2, kind):
    if kind in names.SLOT_ID_NUMBERED:
        out.attr("ID", "%d", code1)
    elif kind == 0x07:  # PCMCIA
        out.attr("ID", "Adapter %d, Socket %d", code1, code2)


def slot_characteristics(out, attr, code1, code2):
    if code1 & (1 << 0):
        out.attr(attr, "Unknown")
    elif (code1 & 0xFE) == 0 and (code2 & 0x07) == 0:
        out.attr(attr, "None")
    else:
        out.list_start(attr)
        for name in set_bits(code1, names.SLOT_CHARACTERISTICS_1, 1):
            out.list_item("%s", name)
        for name in set_bits(code2, names.SLOT_CHARACTERISTICS_2):
            out.list_item("%s", name)
        out.list_end()


def slot_segment_bus_func(out, code1, code2, code3):
    if not (code1 == 0xFFFF and code2 == 0xFF and code3 == 0xFF):
        out.attr("Bus Address", "%04x:%02x:%02x.%x",
                 code1, code2, code3 >> 3, code3 & 0x7)


def slot_peers(out, count, data, offset):
    for i in range(1, count + 1):
        base = offset + 5 * (i - 1)
        out.attr("Peer Device %d" % i, "%04x:%02x:%02x.%x (Width %d)",
                 word(data, base), data[base + 2], data[base + 3] >> 3,
                 data[base + 3] & 0x07, data[base + 4])


#
# System Event Log (Type 15)
#

def event_log_method(code):
    if code <= 0x04:
        return name_of(names.EVENT_LOG_METHOD, code)
    if code >= 0x80:
        return "OEM-specific"
    return OUT_OF_SPEC


def event_log_status(out, code):
    valid = ("Invalid", "Valid")
    full = ("Not Full", "Full")
    out.attr("Status", "%s, %s", valid[code & 1], full[(code >> 1) & 1])


def event_log_address(out, method, data, offset):
    if method in (0x00, 0x01, 0x02):
        out.attr("Access Address", "Index 0x%04X, Data 0x%04X",
                 word(data, offset), word(data, offset + 2))
    elif method == 0x03:
        out.attr("Access Address", "0x%08X", dword(data, offset))
    elif method == 0x04:
        out.attr("Access Address", "0x%04X", word(data, offset))
    else:
        out.attr("Access Address", "Unknown")


def event_log_header_type(code):
    if code <= 0x01:
        return name_of(names.EVENT_LOG_HEADER_TYPE, code)
    if code >= 0x80:
        return "OEM-specific"
    return OUT_OF_SPEC


def event_log_descriptor_type(code):
    if code <= 0x17 and names.EVENT_LOG_DESCRIPTOR_TYPE[1][code] is not None:
        return names.EVENT_LOG_DESCRIPTOR_TYPE[1][code]
    if 0x80 <= code <= 0xFE:
        return "OEM-specific"
    if code == 0xFF:
        return "End of log"
    return OUT_OF_SPEC


def event_log_descriptor_format(code):
    if code <= 0x06:
        return name_of(names.EVENT_LOG_DESCRIPTOR_FORMAT, code)
    if code >= 0x80:
        return "OEM-specific"
    return OUT_OF_SPEC


def event_log_descriptors(out, count, size, data, offset):
    if size < 0x02:
        return
    for i in range(count):
        base = offset + i * size
        out.attr("Descriptor %d" % (i + 1), "%s",
                 event_log_descriptor_type(data[base]))
        out.attr("Data Format %d" % (i + 1), "%s",
                 event_log_descriptor_format(data[base + 1]))


#
# Physical Memory Array and Memory Device (Types 16 and 17)
#

def memory_array_location(code):
    if 0x01 <= code <= 0x0A:
        return name_of(names.MEMORY_ARRAY_LOCATION, code)
    if 0xA0 <= code <= 0xA4:
        return name_of(names.MEMORY_ARRAY_LOCATION_0XA0, code)
    return OUT_OF_SPEC


def memory_array_error_handle(out, code):
    if code == 0xFFFE:
        out.attr("Error Information Handle", "Not Provided")
    elif code == 0xFFFF:
        out.attr("Error Information Handle", "No Error")
    else:
        out.attr("Error Information Handle", "0x%04X", code)


def memory_device_width(out, attr, code):
    # 0 when no module is installed
    if code == 0xFFFF or code == 0:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d bits", code)


def memory_device_size(out, code):
    if code == 0:
        out.attr("Size", "No Module Installed")
    elif code == 0xFFFF:
        out.attr("Size", "Unknown")
    else:
        size = code & 0x7FFF
        if not code & 0x8000:
            size <<= 10
        print_memory_size(out, "Size", size, 1)


def memory_device_extended_size(out, code):
    code &= 0x7FFFFFFF

    # greatest unit showing the exact value
    if code & 0x3FF:
        out.attr("Size", "%d MB", code)
    elif code & 0xFFC00:
        out.attr("Size", "%d GB", code >> 10)
    else:
        out.attr("Size", "%d TB", code >> 20)


def memory_voltage_value(out, attr, code):
    if code == 0:
        out.attr(attr, "Unknown")
    elif code % 100:
        out.attr(attr, "%g V", code / 1000)
    else:
        out.attr(attr, "%.1f V", code / 1000)


def memory_device_set(out, code):
    if code == 0:
        out.attr("Set", "None")
    elif code == 0xFF:
        out.attr("Set", "Unknown")
    else:
        out.attr("Set", "%d", code)


def memory_device_type_detail(out, code):
    if (code & 0xFFFE) == 0:
        out.attr("Type Detail", "None")
    else:
        out.attr("Type Detail", " ".join(
            set_bits(code, names.MEMORY_DEVICE_TYPE_DETAIL, 1)))


def memory_device_speed(out, attr, code1, code2):
    if code1 == 0xFFFF:
        if code2 == 0:
            out.attr(attr, "Unknown")
        else:
            out.attr(attr, "%d MT/s", code2)
    elif code1 == 0:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d MT/s", code1)


def memory_operating_mode_capability(out, code):
    attr = "Memory Operating Mode Capability"
    if (code & 0xFFFE) == 0:
        out.attr(attr, "None")
    else:
        out.attr(attr, " ".join(
            set_bits(code, names.MEMORY_OPERATING_MODE_CAPABILITY, 1)))


def memory_manufacturer_id(out, attr, code):
    # LSB is the 7-bit odd parity count of continuation codes
    if code == 0:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "Bank %d, Hex 0x%02X", (code & 0x7F) + 1, code >> 8)


def memory_product_id(out, attr, code):
    if code == 0:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "0x%04X", code)


def memory_size(out, attr, code):
    if code == 0xFFFFFFFFFFFFFFFF:
        out.attr(attr, "Unknown")
    elif code == 0:
        out.attr(attr, "None")
    else:
        print_memory_size(out, attr, code, 0)


#
# Memory errors and mapped addresses (Types 18 to 20, 33)
#

def memory_error_syndrome(out, code):
    if code == 0:
        out.attr("Vendor Syndrome", "Unknown")
    else:
        out.attr("Vendor Syndrome", "0x%08X", code)


def memory_error_address_32(out, attr, code):
    if code == 0x80000000:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "0x%08X", code)


def memory_error_address_64(out, attr, code):
    if code == 0x8000000000000000:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "0x%016X", code)


def mapped_address_size(out, code):
    if code == 0:
        out.attr("Range Size", "Invalid")
    else:
        print_memory_size(out, "Range Size", code, 1)


def mapped_address_extended_size(out, start, end):
    if start == end:
        out.attr("Range Size", "Invalid")
    else:
        print_memory_size(out, "Range Size", (end - start + 1) & 0xFFFFFFFFFFFFFFFF, 0)


def mapped_address_row_position(out, code):
    if code == 0:
        out.attr("Partition Row Position", "%s", OUT_OF_SPEC)
    elif code == 0xFF:
        out.attr("Partition Row Position", "Unknown")
    else:
        out.attr("Partition Row Position", "%d", code)


def mapped_address_optional(out, attr, code):
    # 0 means the field is not applicable
    if code == 0:
        return
    if code == 0xFF:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d", code)


def pointing_device_interface(code):
    if 0x01 <= code <= 0x08:
        return name_of(names.POINTING_DEVICE_INTERFACE, code)
    if 0xA0 <= code <= 0xA2:
        return name_of(names.POINTING_DEVICE_INTERFACE_0XA0, code)
    return OUT_OF_SPEC


#
# Portable Battery and System Reset (Types 22 and 23)
#

def battery_capacity(out, code, multiplier):
    if code == 0:
        out.attr("Design Capacity", "Unknown")
    else:
        out.attr("Design Capacity", "%d mWh", code * multiplier)


def battery_voltage(out, code):
    if code == 0:
        out.attr("Design Voltage", "Unknown")
    else:
        out.attr("Design Voltage", "%d mV", code)


def battery_maximum_error(out, code):
    if code == 0xFF:
        out.attr("Maximum Error", "Unknown")
    else:
        out.attr("Maximum Error", "%d%%", code)


def system_reset_count(out, attr, code):
    if code == 0xFFFF:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d", code)


def system_reset_timer(out, attr, code):
    if code == 0xFFFF:
        out.attr(attr, "Unknown")
    else:
        out.attr(attr, "%d min", code)


def power_on_time_text(data, offset):
    """Next scheduled power-on as MM-DD HH:MM:SS, '*' for invalid BCD bytes."""
    fields = (
        ("", 0x01, 0x12),
        ("-", 0x01, 0x31),
        (" ", 0x00, 0x23),
        (":", 0x00, 0x59),
        (":", 0x00, 0x59),
    )
    text = ""
    for i, (prefix, low, high) in enumerate(fields):
        value = data[offset + i]
        if bcd_range(value, low, high):
            text += "%s%02X" % (prefix, value)
        else:
            text += prefix + "*"
    return text


#
# Probes and cooling devices (Types 26 to 29)
#

def _probe(out, attr, code, fmt, scale, signed=True):
    if code == 0x8000:
        out.attr(attr, "Unknown")
        return
    if signed and code & 0x8000:
        code -= 0x10000
    out.attr(attr, fmt, code / scale)


def voltage_probe_value(out, attr, code):
    _probe(out, attr, code, "%.3f V", 1000)


def voltage_probe_resolution(out, code):
    _probe(out, "Resolution", code, "%.1f mV", 10, signed=False)


def probe_accuracy(out, code):
    _probe(out, "Accuracy", code, "%.2f%%", 100, signed=False)


def cooling_device_type(code):
    if 0x01 <= code <= 0x09:
        return name_of(names.COOLING_DEVICE_TYPE, code)
    if 0x10 <= code <= 0x11:
        return name_of(names.COOLING_DEVICE_TYPE_0X10, code)
    return OUT_OF_SPEC


def cooling_device_speed(out, code):
    if code == 0x8000:
        out.attr("Nominal Speed", "Unknown Or Non-rotating")
    else:
        out.attr("Nominal Speed", "%d rpm", code)


def temperature_probe_value(out, attr, code):
    _probe(out, attr, code, "%.1f deg C", 10)


def temperature_probe_resolution(out, code):
    _probe(out, "Resolution", code, "%.3f deg C", 1000, signed=False)


def current_probe_value(out, attr, code):
    _probe(out, attr, code, "%.3f A", 1000)


def current_probe_resolution(out, code):
    _probe(out, "Resolution", code, "%.1f mA", 10, signed=False)


def system_boot_status(code):
    if code <= 8:
        return name_of(names.SYSTEM_BOOT_STATUS, code)
    if 128 <= code <= 191:
        return "OEM-specific"
    if code >= 192:
        return "Product-specific"
    return OUT_OF_SPEC


def threshold(out, attr, data, offset):
    if word(data, offset) != 0x8000:
        out.attr(attr, "%d", signed_word(data, offset))


#
# Memory Channel and IPMI Device (Types 37 and 38)
#

def memory_channel_devices(out, count, data, offset, quiet):
    for i in range(1, count + 1):
        base = offset + 3 * i
        # the last device reads past the record, stop where the table ends
        if base + 3 > len(data):
            break
        out.attr("Device %d Load" % i, "%d", data[base])
        if not quiet:
            out.attr("Device %d Handle" % i, "0x%04X", word(data, base + 1))


def ipmi_base_address(out, kind, data, offset, lsb):
    if kind == 0x04:  # SSIF
        out.attr("Base Address", "0x%02X (SMBus)", data[offset] >> 1)
    else:
        address = dword(data, offset + 4) << 32 | dword(data, offset)
        out.attr("Base Address", "0x%08X%08X (%s)",
                 address >> 32, (address & 0xFFFFFFFE) | lsb,
                 "I/O" if address & 1 else "Memory-mapped")


def power_supply_power(out, code):
    if code == 0x8000:
        out.attr("Max Power Capacity", "Unknown")
    else:
        out.attr("Max Power Capacity", "%d W", code)


#
# Management Controller Host Interface (Type 42)
#

def management_controller_host_type(code):
    if 0x02 <= code <= 0x08:
        return name_of(names.MANAGEMENT_CONTROLLER_HOST_TYPE, code)
    if code <= 0x3F:
        return "MCTP"
    if code == 0x40:
        return "Network"
    if code == 0xF0:
        return "OEM"
    return OUT_OF_SPEC


def protocol_record_type(code):
    if code <= 0x4:
        return name_of(names.PROTOCOL_RECORD_TYPE, code)
    if code == 0xF0:
        return "OEM"
    return OUT_OF_SPEC


def host_interface_device_type(code):
    if 0x2 <= code <= 0x3:
        return name_of(names.HOST_INTERFACE_DEVICE_TYPE, code)
    if code >= 0x80:
        return "OEM"
    return OUT_OF_SPEC


def address_text(raw, address_type):
    """IPv4 or IPv6 address from a 16-byte field, per its format code."""
    if address_type == 0x1:
        return socket.inet_ntop(socket.AF_INET, bytes(raw[:4]))
    if address_type == 0x2:
        return socket.inet_ntop(socket.AF_INET6, bytes(raw[:16]))
    return OUT_OF_SPEC


def tpm_vendor_id(out, data, offset):
    chars = []
    for i in range(4):
        b = data[offset + i]
        if b == 0:
            break
        chars.append(chr(b) if 32 <= b < 127 else '.')
    out.attr("Vendor ID", "%s", "".join(chars))


def tpm_characteristics(out, code):
    # bit 2 alone says the whole field is meaningless
    if code & (1 << 2):
        out.list_item("%s", names.TPM_CHARACTERISTICS[0])
        return
    for i in range(3, 6):
        if code & (1 << i):
            out.list_item("%s", names.TPM_CHARACTERISTICS[i - 2])
