"""
Structure decoders.

Each parse_type_N(h, ctx, out) turns one record into sink calls. The record
length gates every group of fields, so records written against an older
revision of the standard print only what they carry. A decoder returns
False when it printed nothing, which also suppresses the separator.
"""
from collections import namedtuple

import dmi_fields as fields
import dmi_names as names
from dmi_names import name_of
from parsers import (OUT_OF_SPEC, _dmi_string, ascii_filter, checksum, dmi_string,
                     dword, is_printable, qword, raw_string, string_area_empty, word)

# version is the SMBIOS version as 0xMMmm, oem an OemDecoder
DecodeContext = namedtuple('DecodeContext', ['version', 'quiet', 'oem'])


def parse_type_0(h, ctx, out):
    # BIOS Information
    data = h.data
    out.handle_name("BIOS Information")
    if h.length < 0x12:
        return
    out.attr("Vendor", "%s", dmi_string(h, data[0x04]))
    out.attr("Version", "%s", dmi_string(h, data[0x05]))
    out.attr("Release Date", "%s", dmi_string(h, data[0x08]))
    # IA-64 has no BIOS, the base address reads 0
    if word(data, 0x06) != 0:
        out.attr("Address", "0x%04X0", word(data, 0x06))
        fields.bios_runtime_size(out, (0x10000 - word(data, 0x06)) << 4)
    fields.bios_rom_size(out, data[0x09],
                         16 if h.length < 0x1A else word(data, 0x18))
    out.list_start("Characteristics")
    fields.bios_characteristics(out, qword(data, 0x0A))
    if h.length >= 0x13:
        fields.bios_characteristics_x(out, data[0x12], names.BIOS_CHARACTERISTICS_X1)
    if h.length >= 0x14:
        fields.bios_characteristics_x(out, data[0x13], names.BIOS_CHARACTERISTICS_X2)
    out.list_end()
    if h.length < 0x18:
        return
    if data[0x14] != 0xFF and data[0x15] != 0xFF:
        out.attr("BIOS Revision", "%d.%d", data[0x14], data[0x15])
    if data[0x16] != 0xFF and data[0x17] != 0xFF:
        out.attr("Firmware Revision", "%d.%d", data[0x16], data[0x17])


def parse_type_1(h, ctx, out):
    # System Information
    data = h.data
    out.handle_name("System Information")
    if h.length < 0x08:
        return
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x04]))
    out.attr("Product Name", "%s", dmi_string(h, data[0x05]))
    out.attr("Version", "%s", dmi_string(h, data[0x06]))
    out.attr("Serial Number", "%s", dmi_string(h, data[0x07]))
    if h.length < 0x19:
        return
    out.attr("UUID", "%s", fields.system_uuid(data[0x08:0x18], ctx.version))
    out.attr("Wake-up Type", "%s", name_of(names.SYSTEM_WAKE_UP_TYPE, data[0x18]))
    if h.length < 0x1B:
        return
    out.attr("SKU Number", "%s", dmi_string(h, data[0x19]))
    out.attr("Family", "%s", dmi_string(h, data[0x1A]))


def parse_type_2(h, ctx, out):
    # Base Board Information
    data = h.data
    out.handle_name("Base Board Information")
    if h.length < 0x08:
        return
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x04]))
    out.attr("Product Name", "%s", dmi_string(h, data[0x05]))
    out.attr("Version", "%s", dmi_string(h, data[0x06]))
    out.attr("Serial Number", "%s", dmi_string(h, data[0x07]))
    if h.length < 0x09:
        return
    out.attr("Asset Tag", "%s", dmi_string(h, data[0x08]))
    if h.length < 0x0A:
        return
    fields.base_board_features(out, data[0x09])
    if h.length < 0x0E:
        return
    out.attr("Location In Chassis", "%s", dmi_string(h, data[0x0A]))
    if not ctx.quiet:
        out.attr("Chassis Handle", "0x%04X", word(data, 0x0B))
    out.attr("Type", "%s", name_of(names.BASE_BOARD_TYPE, data[0x0D]))
    if h.length < 0x0F:
        return
    if h.length < 0x0F + data[0x0E] * 2:
        return
    if not ctx.quiet:
        fields.handle_list(out, "Contained Object Handles", data[0x0E], data, 0x0F)


def parse_type_3(h, ctx, out):
    # Chassis Information
    data = h.data
    out.handle_name("Chassis Information")
    if h.length < 0x09:
        return
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x04]))
    out.attr("Type", "%s", fields.chassis_type(data[0x05]))
    out.attr("Lock", "%s", names.CHASSIS_LOCK[data[0x05] >> 7])
    out.attr("Version", "%s", dmi_string(h, data[0x06]))
    out.attr("Serial Number", "%s", dmi_string(h, data[0x07]))
    out.attr("Asset Tag", "%s", dmi_string(h, data[0x08]))
    if h.length < 0x0D:
        return
    out.attr("Boot-up State", "%s", name_of(names.CHASSIS_STATE, data[0x09]))
    out.attr("Power Supply State", "%s", name_of(names.CHASSIS_STATE, data[0x0A]))
    out.attr("Thermal State", "%s", name_of(names.CHASSIS_STATE, data[0x0B]))
    out.attr("Security Status", "%s",
             name_of(names.CHASSIS_SECURITY_STATUS, data[0x0C]))
    if h.length < 0x11:
        return
    out.attr("OEM Information", "0x%08X", dword(data, 0x0D))
    if h.length < 0x13:
        return
    fields.chassis_height(out, data[0x11])
    fields.chassis_power_cords(out, data[0x12])
    if h.length < 0x15:
        return
    count, size = data[0x13], data[0x14]
    if h.length < 0x15 + count * size:
        return
    fields.chassis_elements(out, count, size, data, 0x15)
    if h.length < 0x16 + count * size:
        return
    out.attr("SKU Number", "%s", dmi_string(h, data[0x15 + count * size]))


def parse_type_4(h, ctx, out):
    # Processor Information
    data = h.data
    out.handle_name("Processor Information")
    if h.length < 0x1A:
        return
    out.attr("Socket Designation", "%s", dmi_string(h, data[0x04]))
    out.attr("Type", "%s", name_of(names.PROCESSOR_TYPE, data[0x05]))
    out.attr("Family", "%s", fields.processor_family(h, ctx.version))
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x07]))
    fields.processor_id(out, h)
    out.attr("Version", "%s", dmi_string(h, data[0x10]))
    fields.processor_voltage(out, "Voltage", data[0x11])
    out.attr("External Clock", "%s", fields.processor_frequency_text(data, 0x12))
    out.attr("Max Speed", "%s", fields.processor_frequency_text(data, 0x14))
    out.attr("Current Speed", "%s", fields.processor_frequency_text(data, 0x16))
    if data[0x18] & (1 << 6):
        out.attr("Status", "Populated, %s", fields.processor_status(data[0x18] & 0x07))
    else:
        out.attr("Status", "Unpopulated")
    out.attr("Upgrade", "%s", name_of(names.PROCESSOR_UPGRADE, data[0x19]))
    if h.length < 0x20:
        return
    if not ctx.quiet:
        fields.processor_cache(out, "L1 Cache Handle", word(data, 0x1A), "L1", ctx.version)
        fields.processor_cache(out, "L2 Cache Handle", word(data, 0x1C), "L2", ctx.version)
        fields.processor_cache(out, "L3 Cache Handle", word(data, 0x1E), "L3", ctx.version)
    if h.length < 0x23:
        return
    out.attr("Serial Number", "%s", dmi_string(h, data[0x20]))
    out.attr("Asset Tag", "%s", dmi_string(h, data[0x21]))
    out.attr("Part Number", "%s", dmi_string(h, data[0x22]))
    if h.length < 0x28:
        return
    # 0xFF means the count lives in the 16-bit field added by SMBIOS 3.0
    if data[0x23] != 0:
        out.attr("Core Count", "%d",
                 word(data, 0x2A) if h.length >= 0x2C and data[0x23] == 0xFF else data[0x23])
    if data[0x24] != 0:
        out.attr("Core Enabled", "%d",
                 word(data, 0x2C) if h.length >= 0x2E and data[0x24] == 0xFF else data[0x24])
    if data[0x25] != 0:
        out.attr("Thread Count", "%d",
                 word(data, 0x2E) if h.length >= 0x30 and data[0x25] == 0xFF else data[0x25])
    fields.processor_characteristics(out, "Characteristics", word(data, 0x26))


def parse_type_5(h, ctx, out):
    # Memory Controller Information
    data = h.data
    out.handle_name("Memory Controller Information")
    if h.length < 0x0F:
        return
    out.attr("Error Detecting Method", "%s",
             name_of(names.MEMORY_CONTROLLER_ED_METHOD, data[0x04]))
    fields.bit_list(out, "Error Correcting Capabilities", data[0x05],
                    names.MEMORY_CONTROLLER_EC_CAPABILITIES)
    out.attr("Supported Interleave", "%s",
             name_of(names.MEMORY_CONTROLLER_INTERLEAVE, data[0x06]))
    out.attr("Current Interleave", "%s",
             name_of(names.MEMORY_CONTROLLER_INTERLEAVE, data[0x07]))
    out.attr("Maximum Memory Module Size", "%d MB", 1 << data[0x08])
    out.attr("Maximum Total Memory Size", "%d MB", data[0x0E] * (1 << data[0x08]))
    fields.bit_list(out, "Supported Speeds", word(data, 0x09),
                    names.MEMORY_CONTROLLER_SPEEDS)
    fields.memory_module_types(out, "Supported Memory Types", word(data, 0x0B), False)
    fields.processor_voltage(out, "Memory Module Voltage", data[0x0D])
    count = data[0x0E]
    if h.length < 0x0F + count * 2:
        return
    fields.handle_list(out, "Associated Memory Slots", count, data, 0x0F)
    if h.length < 0x10 + count * 2:
        return
    fields.bit_list(out, "Enabled Error Correcting Capabilities", data[0x0F + count * 2],
                    names.MEMORY_CONTROLLER_EC_CAPABILITIES)


def parse_type_6(h, ctx, out):
    # Memory Module Information
    data = h.data
    out.handle_name("Memory Module Information")
    if h.length < 0x0C:
        return
    out.attr("Socket Designation", "%s", dmi_string(h, data[0x04]))
    fields.memory_module_connections(out, data[0x05])
    fields.memory_module_speed(out, "Current Speed", data[0x06])
    fields.memory_module_types(out, "Type", word(data, 0x07), True)
    fields.memory_module_size(out, "Installed Size", data[0x09])
    fields.memory_module_size(out, "Enabled Size", data[0x0A])
    fields.memory_module_error(out, data[0x0B])


def parse_type_7(h, ctx, out):
    # Cache Information
    data = h.data
    out.handle_name("Cache Information")
    if h.length < 0x0F:
        return
    config = word(data, 0x05)
    out.attr("Socket Designation", "%s", dmi_string(h, data[0x04]))
    out.attr("Configuration", "%s, %s, Level %d",
             "Enabled" if config & 0x0080 else "Disabled",
             "Socketed" if config & 0x0008 else "Not Socketed",
             (config & 0x0007) + 1)
    out.attr("Operational Mode", "%s", names.CACHE_MODE[(config >> 8) & 0x0003])
    out.attr("Location", "%s", names.CACHE_LOCATION[(config >> 5) & 0x0003])
    if h.length >= 0x1B:
        fields.cache_size_2(out, "Installed Size", dword(data, 0x17))
    else:
        fields.cache_size(out, "Installed Size", word(data, 0x09))
    if h.length >= 0x17:
        fields.cache_size_2(out, "Maximum Size", dword(data, 0x13))
    else:
        fields.cache_size(out, "Maximum Size", word(data, 0x07))
    fields.cache_types(out, "Supported SRAM Types", word(data, 0x0B), False)
    fields.cache_types(out, "Installed SRAM Type", word(data, 0x0D), True)
    if h.length < 0x13:
        return
    fields.memory_module_speed(out, "Speed", data[0x0F])
    out.attr("Error Correction Type", "%s", name_of(names.CACHE_EC_TYPE, data[0x10]))
    out.attr("System Type", "%s", name_of(names.CACHE_TYPE, data[0x11]))
    out.attr("Associativity", "%s", name_of(names.CACHE_ASSOCIATIVITY, data[0x12]))


def parse_type_8(h, ctx, out):
    # Port Connector Information
    data = h.data
    out.handle_name("Port Connector Information")
    if h.length < 0x09:
        return
    out.attr("Internal Reference Designator", "%s", dmi_string(h, data[0x04]))
    out.attr("Internal Connector Type", "%s", fields.port_connector_type(data[0x05]))
    out.attr("External Reference Designator", "%s", dmi_string(h, data[0x06]))
    out.attr("External Connector Type", "%s", fields.port_connector_type(data[0x07]))
    out.attr("Port Type", "%s", fields.port_type(data[0x08]))


def parse_type_9(h, ctx, out):
    # System Slots
    data = h.data
    out.handle_name("System Slot Information")
    if h.length < 0x0C:
        return
    out.attr("Designation", "%s", dmi_string(h, data[0x04]))
    out.attr("Type", "%s%s", name_of(names.SLOT_BUS_WIDTH, data[0x06]),
             fields.slot_type(data[0x05]))
    out.attr("Current Usage", "%s", name_of(names.SLOT_CURRENT_USAGE, data[0x07]))
    out.attr("Length", "%s", name_of(names.SLOT_LENGTH, data[0x08]))
    fields.slot_id(out, data[0x09], data[0x0A], data[0x05])
    fields.slot_characteristics(out, "Characteristics", data[0x0B],
                                0x00 if h.length < 0x0D else data[0x0C])
    if h.length < 0x11:
        return
    fields.slot_segment_bus_func(out, word(data, 0x0D), data[0x0F], data[0x10])
    if h.length < 0x13:
        return
    out.attr("Data Bus Width", "%d", data[0x11])
    out.attr("Peer Devices", "%d", data[0x12])
    if h.length - 0x13 >= data[0x12] * 5:
        fields.slot_peers(out, data[0x12], data, 0x13)


def parse_type_10(h, ctx, out):
    # On Board Devices Information, one name line per device
    data = h.data
    count = (h.length - 0x04) // 2
    for i in range(count):
        code = data[0x04 + 2 * i]
        if count == 1:
            out.handle_name("On Board Device Information")
        else:
            out.handle_name("On Board Device %d Information", i + 1)
        out.attr("Type", "%s", name_of(names.ON_BOARD_DEVICES_TYPE, code & 0x7F))
        out.attr("Status", "%s", "Enabled" if code & 0x80 else "Disabled")
        out.attr("Description", "%s", dmi_string(h, data[0x05 + 2 * i]))


def parse_type_11(h, ctx, out):
    # OEM Strings
    out.handle_name("OEM Strings")
    if h.length < 0x05:
        return
    for i in range(1, h.data[0x04] + 1):
        out.attr("String %d" % i, "%s", dmi_string(h, i))


def parse_type_12(h, ctx, out):
    # System Configuration Options
    out.handle_name("System Configuration Options")
    if h.length < 0x05:
        return
    for i in range(1, h.data[0x04] + 1):
        out.attr("Option %d" % i, "%s", dmi_string(h, i))


def parse_type_13(h, ctx, out):
    # BIOS Language Information
    data = h.data
    out.handle_name("BIOS Language Information")
    if h.length < 0x16:
        return
    if ctx.version >= 0x0201:
        out.attr("Language Description Format", "%s",
                 "Abbreviated" if data[0x05] & 0x01 else "Long")
    out.list_start("Installable Languages", "%d", data[0x04])
    for i in range(1, data[0x04] + 1):
        out.list_item("%s", dmi_string(h, i))
    out.list_end()
    out.attr("Currently Installed Language", "%s", dmi_string(h, data[0x15]))


def parse_type_14(h, ctx, out):
    # Group Associations
    data = h.data
    out.handle_name("Group Associations")
    if h.length < 0x05:
        return
    out.attr("Name", "%s", dmi_string(h, data[0x04]))
    count = (h.length - 0x05) // 3
    out.list_start("Items", "%d", count)
    for i in range(count):
        out.list_item("0x%04X (%s)", word(data, 0x05 + 3 * i + 1),
                      names.structure_type(data[0x05 + 3 * i]))
    out.list_end()


def parse_type_15(h, ctx, out):
    # System Event Log
    data = h.data
    out.handle_name("System Event Log")
    if h.length < 0x14:
        return
    out.attr("Area Length", "%d bytes", word(data, 0x04))
    out.attr("Header Start Offset", "0x%04X", word(data, 0x06))
    header_length = word(data, 0x08) - word(data, 0x06)
    if header_length:
        out.attr("Header Length", "%d byte%s", header_length & 0xFFFFFFFF,
                 "s" if header_length > 1 else "")
    out.attr("Data Start Offset", "0x%04X", word(data, 0x08))
    out.attr("Access Method", "%s", fields.event_log_method(data[0x0A]))
    fields.event_log_address(out, data[0x0A], data, 0x10)
    fields.event_log_status(out, data[0x0B])
    out.attr("Change Token", "0x%08X", dword(data, 0x0C))
    if h.length < 0x17:
        return
    out.attr("Header Format", "%s", fields.event_log_header_type(data[0x14]))
    out.attr("Supported Log Type Descriptors", "%d", data[0x15])
    if h.length < 0x17 + data[0x15] * data[0x16]:
        return
    fields.event_log_descriptors(out, data[0x15], data[0x16], data, 0x17)


def parse_type_16(h, ctx, out):
    # Physical Memory Array
    data = h.data
    out.handle_name("Physical Memory Array")
    if h.length < 0x0F:
        return
    out.attr("Location", "%s", fields.memory_array_location(data[0x04]))
    out.attr("Use", "%s", name_of(names.MEMORY_ARRAY_USE, data[0x05]))
    out.attr("Error Correction Type", "%s", name_of(names.MEMORY_ARRAY_EC_TYPE, data[0x06]))
    if dword(data, 0x07) == 0x80000000:
        if h.length < 0x17:
            out.attr("Maximum Capacity", "Unknown")
        else:
            fields.print_memory_size(out, "Maximum Capacity", qword(data, 0x0F), 0)
    else:
        fields.print_memory_size(out, "Maximum Capacity", dword(data, 0x07), 1)
    if not ctx.quiet:
        fields.memory_array_error_handle(out, word(data, 0x0B))
    out.attr("Number Of Devices", "%d", word(data, 0x0D))


def parse_type_17(h, ctx, out):
    # Memory Device
    data = h.data
    out.handle_name("Memory Device")
    if h.length < 0x15:
        return
    if not ctx.quiet:
        out.attr("Array Handle", "0x%04X", word(data, 0x04))
        fields.memory_array_error_handle(out, word(data, 0x06))
    fields.memory_device_width(out, "Total Width", word(data, 0x08))
    fields.memory_device_width(out, "Data Width", word(data, 0x0A))
    if h.length >= 0x20 and word(data, 0x0C) == 0x7FFF:
        fields.memory_device_extended_size(out, dword(data, 0x1C))
    else:
        fields.memory_device_size(out, word(data, 0x0C))
    out.attr("Form Factor", "%s", name_of(names.MEMORY_DEVICE_FORM_FACTOR, data[0x0E]))
    fields.memory_device_set(out, data[0x0F])
    out.attr("Locator", "%s", dmi_string(h, data[0x10]))
    out.attr("Bank Locator", "%s", dmi_string(h, data[0x11]))
    out.attr("Type", "%s", name_of(names.MEMORY_DEVICE_TYPE, data[0x12]))
    fields.memory_device_type_detail(out, word(data, 0x13))
    if h.length < 0x17:
        return
    # the remaining fields are irrelevant without a module
    if word(data, 0x0C) == 0:
        return
    extended = h.length >= 0x5C
    fields.memory_device_speed(out, "Speed", word(data, 0x15),
                               dword(data, 0x54) if extended else 0)
    if h.length < 0x1B:
        return
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x17]))
    out.attr("Serial Number", "%s", dmi_string(h, data[0x18]))
    out.attr("Asset Tag", "%s", dmi_string(h, data[0x19]))
    out.attr("Part Number", "%s", dmi_string(h, data[0x1A]))
    if h.length < 0x1C:
        return
    if (data[0x1B] & 0x0F) == 0:
        out.attr("Rank", "Unknown")
    else:
        out.attr("Rank", "%d", data[0x1B] & 0x0F)
    if h.length < 0x22:
        return
    fields.memory_device_speed(out, "Configured Memory Speed", word(data, 0x20),
                               dword(data, 0x58) if extended else 0)
    if h.length < 0x28:
        return
    fields.memory_voltage_value(out, "Minimum Voltage", word(data, 0x22))
    fields.memory_voltage_value(out, "Maximum Voltage", word(data, 0x24))
    fields.memory_voltage_value(out, "Configured Voltage", word(data, 0x26))
    if h.length < 0x34:
        return
    out.attr("Memory Technology", "%s", name_of(names.MEMORY_TECHNOLOGY, data[0x28]))
    fields.memory_operating_mode_capability(out, word(data, 0x29))
    out.attr("Firmware Version", "%s", dmi_string(h, data[0x2B]))
    fields.memory_manufacturer_id(out, "Module Manufacturer ID", word(data, 0x2C))
    fields.memory_product_id(out, "Module Product ID", word(data, 0x2E))
    fields.memory_manufacturer_id(out, "Memory Subsystem Controller Manufacturer ID",
                                  word(data, 0x30))
    fields.memory_product_id(out, "Memory Subsystem Controller Product ID",
                             word(data, 0x32))
    for attr, offset in (("Non-Volatile Size", 0x34), ("Volatile Size", 0x3C),
                         ("Cache Size", 0x44), ("Logical Size", 0x4C)):
        if h.length < offset + 8:
            return
        fields.memory_size(out, attr, qword(data, offset))


def parse_type_18(h, ctx, out):
    # 32-bit Memory Error Information
    data = h.data
    out.handle_name("32-bit Memory Error Information")
    if h.length < 0x17:
        return
    out.attr("Type", "%s", name_of(names.MEMORY_ERROR_TYPE, data[0x04]))
    out.attr("Granularity", "%s", name_of(names.MEMORY_ERROR_GRANULARITY, data[0x05]))
    out.attr("Operation", "%s", name_of(names.MEMORY_ERROR_OPERATION, data[0x06]))
    fields.memory_error_syndrome(out, dword(data, 0x07))
    fields.memory_error_address_32(out, "Memory Array Address", dword(data, 0x0B))
    fields.memory_error_address_32(out, "Device Address", dword(data, 0x0F))
    fields.memory_error_address_32(out, "Resolution", dword(data, 0x13))


def _mapped_range(h, out, extended_length, extended_offset):
    data = h.data
    if h.length >= extended_length and dword(data, 0x04) == 0xFFFFFFFF:
        start = qword(data, extended_offset)
        end = qword(data, extended_offset + 8)
        out.attr("Starting Address", "0x%08X%08Xk", start >> 32, start & 0xFFFFFFFF)
        out.attr("Ending Address", "0x%08X%08Xk", end >> 32, end & 0xFFFFFFFF)
        fields.mapped_address_extended_size(out, start, end)
    else:
        start = dword(data, 0x04)
        end = dword(data, 0x08)
        out.attr("Starting Address", "0x%08X%03X", start >> 2, (start & 0x3) << 10)
        out.attr("Ending Address", "0x%08X%03X", end >> 2, ((end & 0x3) << 10) + 0x3FF)
        fields.mapped_address_size(out, (end - start + 1) & 0xFFFFFFFF)


def parse_type_19(h, ctx, out):
    # Memory Array Mapped Address
    data = h.data
    out.handle_name("Memory Array Mapped Address")
    if h.length < 0x0F:
        return
    _mapped_range(h, out, 0x1F, 0x0F)
    if not ctx.quiet:
        out.attr("Physical Array Handle", "0x%04X", word(data, 0x0C))
    out.attr("Partition Width", "%d", data[0x0E])


def parse_type_20(h, ctx, out):
    # Memory Device Mapped Address
    data = h.data
    out.handle_name("Memory Device Mapped Address")
    if h.length < 0x13:
        return
    _mapped_range(h, out, 0x23, 0x13)
    if not ctx.quiet:
        out.attr("Physical Device Handle", "0x%04X", word(data, 0x0C))
        out.attr("Memory Array Mapped Address Handle", "0x%04X", word(data, 0x0E))
    fields.mapped_address_row_position(out, data[0x10])
    fields.mapped_address_optional(out, "Interleave Position", data[0x11])
    fields.mapped_address_optional(out, "Interleaved Data Depth", data[0x12])


def parse_type_21(h, ctx, out):
    # Built-in Pointing Device
    data = h.data
    out.handle_name("Built-in Pointing Device")
    if h.length < 0x07:
        return
    out.attr("Type", "%s", name_of(names.POINTING_DEVICE_TYPE, data[0x04]))
    out.attr("Interface", "%s", fields.pointing_device_interface(data[0x05]))
    out.attr("Buttons", "%d", data[0x06])


def parse_type_22(h, ctx, out):
    # Portable Battery
    data = h.data
    out.handle_name("Portable Battery")
    if h.length < 0x10:
        return
    # SBDS fields replace the string ones when those are left empty
    legacy = h.length < 0x1A
    out.attr("Location", "%s", dmi_string(h, data[0x04]))
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x05]))
    if data[0x06] or legacy:
        out.attr("Manufacture Date", "%s", dmi_string(h, data[0x06]))
    if data[0x07] or legacy:
        out.attr("Serial Number", "%s", dmi_string(h, data[0x07]))
    out.attr("Name", "%s", dmi_string(h, data[0x08]))
    if data[0x09] != 0x02 or legacy:
        out.attr("Chemistry", "%s", name_of(names.BATTERY_CHEMISTRY, data[0x09]))
    fields.battery_capacity(out, word(data, 0x0A), 1 if h.length < 0x16 else data[0x15])
    fields.battery_voltage(out, word(data, 0x0C))
    out.attr("SBDS Version", "%s", dmi_string(h, data[0x0E]))
    fields.battery_maximum_error(out, data[0x0F])
    if legacy:
        return
    if data[0x07] == 0:
        out.attr("SBDS Serial Number", "%04X", word(data, 0x10))
    if data[0x06] == 0:
        date = word(data, 0x12)
        out.attr("SBDS Manufacture Date", "%d-%02d-%02d",
                 1980 + (date >> 9), (date >> 5) & 0x0F, date & 0x1F)
    if data[0x09] == 0x02:
        out.attr("SBDS Chemistry", "%s", dmi_string(h, data[0x14]))
    out.attr("OEM-specific Information", "0x%08X", dword(data, 0x16))


def parse_type_23(h, ctx, out):
    # System Reset
    data = h.data
    out.handle_name("System Reset")
    if h.length < 0x0D:
        return
    caps = data[0x04]
    out.attr("Status", "%s", "Enabled" if caps & (1 << 0) else "Disabled")
    out.attr("Watchdog Timer", "%s", "Present" if caps & (1 << 5) else "Not Present")
    if not caps & (1 << 5):
        return
    out.attr("Boot Option", "%s", names.SYSTEM_RESET_BOOT_OPTION[(caps >> 1) & 0x3])
    out.attr("Boot Option On Limit", "%s",
             names.SYSTEM_RESET_BOOT_OPTION[(caps >> 3) & 0x3])
    fields.system_reset_count(out, "Reset Count", word(data, 0x05))
    fields.system_reset_count(out, "Reset Limit", word(data, 0x07))
    fields.system_reset_timer(out, "Timer Interval", word(data, 0x09))
    fields.system_reset_timer(out, "Timeout", word(data, 0x0B))


def parse_type_24(h, ctx, out):
    # Hardware Security
    data = h.data
    out.handle_name("Hardware Security")
    if h.length < 0x05:
        return
    status = names.HARDWARE_SECURITY_STATUS
    out.attr("Power-On Password Status", "%s", status[data[0x04] >> 6])
    out.attr("Keyboard Password Status", "%s", status[(data[0x04] >> 4) & 0x3])
    out.attr("Administrator Password Status", "%s", status[(data[0x04] >> 2) & 0x3])
    out.attr("Front Panel Reset Status", "%s", status[data[0x04] & 0x3])


def parse_type_25(h, ctx, out):
    # System Power Controls
    out.handle_name("System Power Controls")
    if h.length < 0x09:
        return
    out.attr("Next Scheduled Power-on", "%s", fields.power_on_time_text(h.data, 0x04))


def _probe(h, out, name, locations, value, resolution):
    data = h.data
    out.handle_name(name)
    if h.length < 0x14:
        return
    out.attr("Description", "%s", dmi_string(h, data[0x04]))
    out.attr("Location", "%s", name_of(locations, data[0x05] & 0x1F))
    out.attr("Status", "%s", name_of(names.PROBE_STATUS, data[0x05] >> 5))
    value(out, "Maximum Value", word(data, 0x06))
    value(out, "Minimum Value", word(data, 0x08))
    resolution(out, word(data, 0x0A))
    value(out, "Tolerance", word(data, 0x0C))
    fields.probe_accuracy(out, word(data, 0x0E))
    out.attr("OEM-specific Information", "0x%08X", dword(data, 0x10))
    if h.length < 0x16:
        return
    value(out, "Nominal Value", word(data, 0x14))


def parse_type_26(h, ctx, out):
    _probe(h, out, "Voltage Probe", names.VOLTAGE_PROBE_LOCATION,
           fields.voltage_probe_value, fields.voltage_probe_resolution)


def parse_type_27(h, ctx, out):
    # Cooling Device
    data = h.data
    out.handle_name("Cooling Device")
    if h.length < 0x0C:
        return
    if not ctx.quiet and word(data, 0x04) != 0xFFFF:
        out.attr("Temperature Probe Handle", "0x%04X", word(data, 0x04))
    out.attr("Type", "%s", fields.cooling_device_type(data[0x06] & 0x1F))
    out.attr("Status", "%s", name_of(names.PROBE_STATUS, data[0x06] >> 5))
    if data[0x07] != 0x00:
        out.attr("Cooling Unit Group", "%d", data[0x07])
    out.attr("OEM-specific Information", "0x%08X", dword(data, 0x08))
    if h.length < 0x0E:
        return
    fields.cooling_device_speed(out, word(data, 0x0C))
    if h.length < 0x0F:
        return
    out.attr("Description", "%s", dmi_string(h, data[0x0E]))


def parse_type_28(h, ctx, out):
    _probe(h, out, "Temperature Probe", names.TEMPERATURE_PROBE_LOCATION,
           fields.temperature_probe_value, fields.temperature_probe_resolution)


def parse_type_29(h, ctx, out):
    _probe(h, out, "Electrical Current Probe", names.VOLTAGE_PROBE_LOCATION,
           fields.current_probe_value, fields.current_probe_resolution)


def parse_type_30(h, ctx, out):
    # Out-of-band Remote Access
    data = h.data
    out.handle_name("Out-of-band Remote Access")
    if h.length < 0x06:
        return
    out.attr("Manufacturer Name", "%s", dmi_string(h, data[0x04]))
    out.attr("Inbound Connection", "%s", "Enabled" if data[0x05] & (1 << 0) else "Disabled")
    out.attr("Outbound Connection", "%s", "Enabled" if data[0x05] & (1 << 1) else "Disabled")


def parse_type_31(h, ctx, out):
    # Boot Integrity Services Entry Point
    data = h.data
    out.handle_name("Boot Integrity Services Entry Point")
    if h.length < 0x1C:
        return
    out.attr("Checksum", "%s", "OK" if checksum(data, h.length) else "Invalid")
    out.attr("16-bit Entry Point Address", "%04X:%04X",
             dword(data, 0x08) >> 16, dword(data, 0x08) & 0xFFFF)
    out.attr("32-bit Entry Point Address", "0x%08X", dword(data, 0x0C))


def parse_type_32(h, ctx, out):
    # System Boot Information
    out.handle_name("System Boot Information")
    if h.length < 0x0B:
        return
    out.attr("Status", "%s", fields.system_boot_status(h.data[0x0A]))


def parse_type_33(h, ctx, out):
    # 64-bit Memory Error Information
    data = h.data
    out.handle_name("64-bit Memory Error Information")
    if h.length < 0x1F:
        return
    out.attr("Type", "%s", name_of(names.MEMORY_ERROR_TYPE, data[0x04]))
    out.attr("Granularity", "%s", name_of(names.MEMORY_ERROR_GRANULARITY, data[0x05]))
    out.attr("Operation", "%s", name_of(names.MEMORY_ERROR_OPERATION, data[0x06]))
    fields.memory_error_syndrome(out, dword(data, 0x07))
    fields.memory_error_address_64(out, "Memory Array Address", qword(data, 0x0B))
    fields.memory_error_address_64(out, "Device Address", qword(data, 0x13))
    fields.memory_error_address_32(out, "Resolution", dword(data, 0x1B))


def parse_type_34(h, ctx, out):
    # Management Device
    data = h.data
    out.handle_name("Management Device")
    if h.length < 0x0B:
        return
    out.attr("Description", "%s", dmi_string(h, data[0x04]))
    out.attr("Type", "%s", name_of(names.MANAGEMENT_DEVICE_TYPE, data[0x05]))
    out.attr("Address", "0x%08X", dword(data, 0x06))
    out.attr("Address Type", "%s",
             name_of(names.MANAGEMENT_DEVICE_ADDRESS_TYPE, data[0x0A]))


def parse_type_35(h, ctx, out):
    # Management Device Component
    data = h.data
    out.handle_name("Management Device Component")
    if h.length < 0x0B:
        return
    out.attr("Description", "%s", dmi_string(h, data[0x04]))
    if ctx.quiet:
        return
    out.attr("Management Device Handle", "0x%04X", word(data, 0x05))
    out.attr("Component Handle", "0x%04X", word(data, 0x07))
    if word(data, 0x09) != 0xFFFF:
        out.attr("Threshold Handle", "0x%04X", word(data, 0x09))


def parse_type_36(h, ctx, out):
    # Management Device Threshold Data
    out.handle_name("Management Device Threshold Data")
    if h.length < 0x10:
        return
    fields.threshold(out, "Lower Non-critical Threshold", h.data, 0x04)
    fields.threshold(out, "Upper Non-critical Threshold", h.data, 0x06)
    fields.threshold(out, "Lower Critical Threshold", h.data, 0x08)
    fields.threshold(out, "Upper Critical Threshold", h.data, 0x0A)
    fields.threshold(out, "Lower Non-recoverable Threshold", h.data, 0x0C)
    fields.threshold(out, "Upper Non-recoverable Threshold", h.data, 0x0E)


def parse_type_37(h, ctx, out):
    # Memory Channel
    data = h.data
    out.handle_name("Memory Channel")
    if h.length < 0x07:
        return
    out.attr("Type", "%s", name_of(names.MEMORY_CHANNEL_TYPE, data[0x04]))
    out.attr("Maximal Load", "%d", data[0x05])
    out.attr("Devices", "%d", data[0x06])
    if h.length < 0x07 + 3 * data[0x06]:
        return
    fields.memory_channel_devices(out, data[0x06], data, 0x07, ctx.quiet)


def parse_type_38(h, ctx, out):
    # IPMI Device Information, "Version" rather than "Revision" as in IPMI
    data = h.data
    out.handle_name("IPMI Device Information")
    if h.length < 0x10:
        return
    out.attr("Interface Type", "%s", name_of(names.IPMI_INTERFACE_TYPE, data[0x04]))
    out.attr("Specification Version", "%d.%d", data[0x05] >> 4, data[0x05] & 0x0F)
    out.attr("I2C Slave Address", "0x%02x", data[0x06] >> 1)
    if data[0x07] != 0xFF:
        out.attr("NV Storage Device Address", "%d", data[0x07])
    else:
        out.attr("NV Storage Device", "Not Present")
    fields.ipmi_base_address(out, data[0x04], data, 0x08,
                             0 if h.length < 0x11 else (data[0x10] >> 4) & 1)
    if h.length < 0x12:
        return
    if data[0x04] != 0x04:
        out.attr("Register Spacing", "%s", names.IPMI_REGISTER_SPACING[data[0x10] >> 6])
        if data[0x10] & (1 << 3):
            out.attr("Interrupt Polarity", "%s",
                     "Active High" if data[0x10] & (1 << 1) else "Active Low")
            out.attr("Interrupt Trigger Mode", "%s",
                     "Level" if data[0x10] & (1 << 0) else "Edge")
    if data[0x11] != 0x00:
        out.attr("Interrupt Number", "%d", data[0x11])


def parse_type_39(h, ctx, out):
    # System Power Supply
    data = h.data
    out.handle_name("System Power Supply")
    if h.length < 0x10:
        return
    if data[0x04] != 0x00:
        out.attr("Power Unit Group", "%d", data[0x04])
    out.attr("Location", "%s", dmi_string(h, data[0x05]))
    out.attr("Name", "%s", dmi_string(h, data[0x06]))
    out.attr("Manufacturer", "%s", dmi_string(h, data[0x07]))
    out.attr("Serial Number", "%s", dmi_string(h, data[0x08]))
    out.attr("Asset Tag", "%s", dmi_string(h, data[0x09]))
    out.attr("Model Part Number", "%s", dmi_string(h, data[0x0A]))
    out.attr("Revision", "%s", dmi_string(h, data[0x0B]))
    fields.power_supply_power(out, word(data, 0x0C))
    chars = word(data, 0x0E)
    if chars & (1 << 1):
        out.attr("Status", "Present, %s",
                 name_of(names.POWER_SUPPLY_STATUS, (chars >> 7) & 0x07))
    else:
        out.attr("Status", "Not Present")
    out.attr("Type", "%s", name_of(names.POWER_SUPPLY_TYPE, (chars >> 10) & 0x0F))
    out.attr("Input Voltage Range Switching", "%s",
             name_of(names.POWER_SUPPLY_RANGE_SWITCHING, (chars >> 3) & 0x0F))
    out.attr("Plugged", "%s", "No" if chars & (1 << 2) else "Yes")
    out.attr("Hot Replaceable", "%s", "Yes" if chars & (1 << 0) else "No")
    if h.length < 0x16 or ctx.quiet:
        return
    for attr, offset in (("Input Voltage Probe Handle", 0x10),
                         ("Cooling Device Handle", 0x12),
                         ("Input Current Probe Handle", 0x14)):
        if word(data, offset) != 0xFFFF:
            out.attr(attr, "0x%04X", word(data, offset))


def parse_type_40(h, ctx, out):
    # Additional Information
    data = h.data
    if h.length < 0x0B:
        return
    if ctx.quiet:
        return False
    count = data[0x04]
    offset = 0x05
    for i in range(count):
        out.handle_name("Additional Information %d", i + 1)

        # short entries end the list
        if h.length < offset + 1:
            break
        length = data[offset]
        if length < 0x05 or h.length < offset + length:
            break

        out.attr("Referenced Handle", "0x%04x", word(data, offset + 0x01))
        out.attr("Referenced Offset", "0x%02x", data[offset + 0x03])
        out.attr("String", "%s", dmi_string(h, data[offset + 0x04]))
        size = length - 0x05
        if size == 1:
            out.attr("Value", "0x%02x", data[offset + 0x05])
        elif size == 2:
            out.attr("Value", "0x%04x", word(data, offset + 0x05))
        elif size == 4:
            out.attr("Value", "0x%08x", dword(data, offset + 0x05))
        else:
            out.attr("Value", "Unexpected size")
        offset += length


def parse_type_41(h, ctx, out):
    # Onboard Devices Extended Information
    data = h.data
    out.handle_name("Onboard Device")
    if h.length < 0x0B:
        return
    out.attr("Reference Designation", "%s", dmi_string(h, data[0x04]))
    out.attr("Type", "%s", name_of(names.ON_BOARD_DEVICES_TYPE, data[0x05] & 0x7F))
    out.attr("Status", "%s", "Enabled" if data[0x05] & 0x80 else "Disabled")
    out.attr("Type Instance", "%d", data[0x06])
    fields.slot_segment_bus_func(out, word(data, 0x07), data[0x09], data[0x0A])


def _redfish_over_ip(out, rec, rlen):
    """Redfish over IP protocol record payload, DSP0270 section 8.6."""
    rdata = rec[0x02:]

    # always little-endian since SMBIOS 3.1.1
    out.subattr("Service UUID", "%s", fields.system_uuid(rdata[0:16], 0x0311))

    assign = rdata[16]
    out.subattr("Host IP Assignment Type", "%s",
                name_of(names.PROTOCOL_ASSIGNMENT_TYPE, assign))
    addrtype = rdata[17]
    addrstr = name_of(names.PROTOCOL_ADDRESS_TYPE, addrtype)
    out.subattr("Host IP Address Format", "%s", addrstr)
    # address and mask only mean something for static assignment
    if assign in (0x1, 0x3):
        out.subattr("%s Address" % addrstr, "%s", fields.address_text(rdata[18:34], addrtype))
        out.subattr("%s Mask" % addrstr, "%s", fields.address_text(rdata[34:50], addrtype))

    assign = rdata[50]
    out.subattr("Redfish Service IP Discovery Type", "%s",
                name_of(names.PROTOCOL_ASSIGNMENT_TYPE, assign))
    addrtype = rdata[51]
    addrstr = name_of(names.PROTOCOL_ADDRESS_TYPE, addrtype)
    out.subattr("Redfish Service IP Address Format", "%s", addrstr)
    if assign in (0x1, 0x3):
        out.subattr("%s Redfish Service Address" % addrstr, "%s",
                    fields.address_text(rdata[52:68], addrtype))
        out.subattr("%s Redfish Service Mask" % addrstr, "%s",
                    fields.address_text(rdata[68:84], addrtype))
        out.subattr("Redfish Service Port", "%d", word(rdata, 84))
        out.subattr("Redfish Service Vlan", "%d", dword(rdata, 86))

    hlen = rdata[90]
    # the host name must fit in the record
    if hlen + 91 > rlen:
        hostname = OUT_OF_SPEC
    else:
        # printed as is, up to the first NUL
        hostname = bytes(rdata[91:91 + hlen]).split(b'\0')[0].decode('latin-1')
    out.subattr("Redfish Service Hostname", "%s", hostname)


def _protocol_record(out, rec):
    rid = rec[0x00]
    rlen = rec[0x01]
    out.attr("Protocol ID", "%02x (%s)", rid, fields.protocol_record_type(rid))

    # only Redfish over IP is decoded
    if rid != 0x4:
        return
    if rlen < 91:
        return
    _redfish_over_ip(out, rec, rlen)


def _host_interface_controller(h, out):
    data = h.data
    if h.length < 0x0B:
        return

    # interface specific data must fit in the structure
    length = data[0x05]
    total_read = length + 0x06
    if total_read > h.length:
        return

    kind = data[0x04]
    out.attr("Host Interface Type", "%s", fields.management_controller_host_type(kind))

    # only network host interfaces carry device and protocol data
    if kind != 0x40:
        return

    if length != 0:
        device = data[0x06]
        out.attr("Device Type", "%s", fields.host_interface_device_type(device))
        if device == 0x2 and length >= 5:
            out.attr("idVendor", "0x%04x", word(data, 0x07))
            out.attr("idProduct", "0x%04x", word(data, 0x09))
        elif device == 0x3 and length >= 9:
            out.attr("VendorID", "0x%04x", word(data, 0x07))
            out.attr("DeviceID", "0x%04x", word(data, 0x09))
            out.attr("SubVendorID", "0x%04x", word(data, 0x0B))
            out.attr("SubDeviceID", "0x%04x", word(data, 0x0D))
        elif device == 0x4 and length >= 5:
            out.attr("Vendor ID", "0x%02x:0x%02x:0x%02x:0x%02x",
                     data[0x07], data[0x08], data[0x09], data[0x0A])

    # protocol record count, then the records themselves
    pos = total_read
    total_read += 1
    if total_read > h.length:
        out.info("Total read length %d exceeds total structure length %d (handle 0x%04x)",
                 total_read, h.length, h.handle)
        return

    count = data[pos]
    rec = pos + 1
    for i in range(count):
        # two leading bytes: protocol type and length
        total_read += data[rec + 1] + 2
        if total_read > h.length:
            out.info("Total read length %d exceeds total structure length %d "
                     "(handle 0x%04x, record %d)", total_read, h.length, h.handle, i + 1)
            return
        _protocol_record(out, data[rec:])
        rec += data[rec + 1] + 2


def parse_type_42(h, ctx, out):
    # Management Controller Host Interface
    data = h.data
    out.handle_name("Management Controller Host Interface")
    if ctx.version >= 0x0302:
        _host_interface_controller(h, out)
        return
    if h.length < 0x05:
        return
    out.attr("Interface Type", "%s", fields.management_controller_host_type(data[0x04]))
    # the type specific part has no length, the common tail is unreachable
    if h.length < 0x09:
        return
    if data[0x04] == 0xF0:
        out.attr("Vendor ID", "0x%02X%02X%02X%02X",
                 data[0x05], data[0x06], data[0x07], data[0x08])


def parse_type_43(h, ctx, out):
    # TPM Device
    data = h.data
    out.handle_name("TPM Device")
    if h.length < 0x1B:
        return
    fields.tpm_vendor_id(out, data, 0x04)
    out.attr("Specification Version", "%d.%d", data[0x08], data[0x09])
    if data[0x08] == 0x01:
        # bytes 0x0A and 0x0B repeat the specification version
        out.attr("Firmware Revision", "%d.%d", data[0x0C], data[0x0D])
    elif data[0x08] == 0x02:
        out.attr("Firmware Revision", "%d.%d",
                 dword(data, 0x0A) >> 16, dword(data, 0x0A) & 0xFFFF)
    out.attr("Description", "%s", dmi_string(h, data[0x12]))
    out.list_start("Characteristics")
    fields.tpm_characteristics(out, qword(data, 0x13))
    out.list_end()
    if h.length < 0x1F:
        return
    out.attr("OEM-specific Information", "0x%08X", dword(data, 0x1B))


def parse_type_126(h, ctx, out):
    out.handle_name("Inactive")


def parse_type_127(h, ctx, out):
    out.handle_name("End Of Table")


DECODERS = {
    0: parse_type_0,
    1: parse_type_1,
    2: parse_type_2,
    3: parse_type_3,
    4: parse_type_4,
    5: parse_type_5,
    6: parse_type_6,
    7: parse_type_7,
    8: parse_type_8,
    9: parse_type_9,
    10: parse_type_10,
    11: parse_type_11,
    12: parse_type_12,
    13: parse_type_13,
    14: parse_type_14,
    15: parse_type_15,
    16: parse_type_16,
    17: parse_type_17,
    18: parse_type_18,
    19: parse_type_19,
    20: parse_type_20,
    21: parse_type_21,
    22: parse_type_22,
    23: parse_type_23,
    24: parse_type_24,
    25: parse_type_25,
    26: parse_type_26,
    27: parse_type_27,
    28: parse_type_28,
    29: parse_type_29,
    30: parse_type_30,
    31: parse_type_31,
    32: parse_type_32,
    33: parse_type_33,
    34: parse_type_34,
    35: parse_type_35,
    36: parse_type_36,
    37: parse_type_37,
    38: parse_type_38,
    39: parse_type_39,
    40: parse_type_40,
    41: parse_type_41,
    42: parse_type_42,
    43: parse_type_43,
    126: parse_type_126,
    127: parse_type_127,
}


def dmi_dump(h, out, dump=False):
    """
    Hex dump of one record: the formatted area 16 bytes per row, then its
    strings. With `dump` set every string is also shown as hex, NUL included.
    """
    out.list_start("Header and Data")
    out.hex_rows(bytes(h.data[:h.length]))
    out.list_end()

    if string_area_empty(h):
        return

    out.list_start("Strings")
    i = 1
    while True:
        if dump:
            raw = raw_string(h, i)
            if raw is None:
                break
            out.hex_rows(raw + b"\0")
            text = ascii_filter(raw)
        else:
            text = _dmi_string(h, i)
            if text is None:
                break
        out.list_item("%s", text)
        i += 1
    out.list_end()


def dmi_decode(h, ctx, out):
    """Decodes one record, falling back on the OEM hook, then on a hex dump."""
    decoder = DECODERS.get(h.type)
    if decoder is not None:
        shown = decoder(h, ctx, out)
    elif ctx.oem.decode(h, out):
        shown = True
    elif ctx.quiet:
        shown = False
    else:
        out.handle_name("%s Type", "OEM-specific" if h.type >= 128 else "Unknown")
        dmi_dump(h, out)
        shown = True

    if shown is not False:
        out.sep()


def fixup_type_34(h, display, quiet, out):
    """
    Some boards report a Management Device length of 0x10 instead of 0x0B,
    which cuts the first characters of the description. The hidden bytes
    are checked to be text before the length is restored.
    """
    if h.length == 0x10 and is_printable(h.data[0x0B:0x10]):
        if not quiet and display:
            out.info("Invalid entry length (%d). Fixed up to %d.", 0x10, 0x0B)
        return h._replace(length=0x0B)
    return h


def dmi_table_string(h, string, version, out):
    """Prints the single value selected by `string` for a matching record."""
    data = h.data
    offset = string.offset

    if string.type == 11:  # OEM strings
        if h.length < 5 or offset > data[0x04]:
            out.info("No OEM string number %d", offset)
            return
        if offset:
            out.info("%s", dmi_string(h, offset))
        else:
            out.info("%d", data[0x04])  # count
        return

    if offset >= h.length:
        return

    key = (string.type << 8) | offset
    if key in (0x015, 0x017):  # bios-revision, firmware-revision
        if data[offset - 1] != 0xFF and data[offset] != 0xFF:
            out.info("%d.%d", data[offset - 1], data[offset])
    elif key == 0x108:
        out.info("%s", fields.system_uuid(data[offset:offset + 16], version))
    elif key == 0x305:
        out.info("%s", fields.chassis_type(data[offset]))
    elif key == 0x406:
        out.info("%s", fields.processor_family(h, version))
    elif key == 0x416:
        out.info("%s", fields.processor_frequency_text(data, offset))
    else:
        out.info("%s", dmi_string(h, data[offset]))
