"""
Vendor specific decoders for OEM record types.

The table walker picks a decoder from the System Information manufacturer
and product strings found during its first pass. Every decoder answers decode(h, out)
with True when it claimed the record.
"""
from parsers import dmi_string, dword, is_printable, qword, word

VENDOR_UNKNOWN = None
VENDOR_ACER = "Acer"
VENDOR_HP = "HP"
VENDOR_HPE = "HPE"
VENDOR_IBM = "IBM"
VENDOR_LENOVO = "Lenovo"

_VENDORS = {
    "Acer": VENDOR_ACER,
    "HP": VENDOR_HP,
    "Hewlett-Packard": VENDOR_HP,
    "HPE": VENDOR_HPE,
    "Hewlett Packard Enterprise": VENDOR_HPE,
    "IBM": VENDOR_IBM,
    "LENOVO": VENDOR_LENOVO,
}


def detect_vendor(manufacturer):
    """Maps a System Information manufacturer string to a known vendor."""
    if manufacturer is None:
        return VENDOR_UNKNOWN
    return _VENDORS.get(manufacturer.rstrip(" "), VENDOR_UNKNOWN)


# ProLiant generations, in the order product names are matched
HP_G6, HP_G7, HP_GEN8, HP_GEN9, HP_GEN10, HP_GEN10_PLUS = range(6)

_HP_GENERATIONS = (
    ("Gen10 Plus", HP_GEN10_PLUS),
    ("Gen10", HP_GEN10),
    ("Gen9", HP_GEN9),
    ("Gen8", HP_GEN8),
    ("G7", HP_G7),
    ("G6", HP_G6),
)


def hp_generation(product, vendor):
    """ProLiant generation named in the product string, else the vendor's default."""
    for name, generation in _HP_GENERATIONS:
        if product and name in product:
            return generation
    return HP_GEN10_PLUS if vendor == VENDOR_HPE else HP_G6


class OemDecoder:
    """Declines every record."""

    def decode(self, h, out):
        return False


def _acer(h, out):
    data = h.data
    if h.type != 170:
        return False

    out.handle_name("Acer Hotkey Function")
    if h.length < 0x0F:
        return True
    caps = word(data, 0x04)
    out.attr("Function bitmap for Communication Button", "0x%04x", caps)
    out.subattr("WiFi", "%s", "Yes" if caps & 0x0001 else "No")
    out.subattr("3G", "%s", "Yes" if caps & 0x0040 else "No")
    out.subattr("WiMAX", "%s", "Yes" if caps & 0x0080 else "No")
    out.subattr("Bluetooth", "%s", "Yes" if caps & 0x0800 else "No")
    out.attr("Function bitmap for Application Button", "0x%04x", word(data, 0x06))
    out.attr("Function bitmap for Media Button", "0x%04x", word(data, 0x08))
    out.attr("Function bitmap for Display Button", "0x%04x", word(data, 0x0A))
    out.attr("Function bitmap for Others Button", "0x%04x", word(data, 0x0C))
    out.attr("Communication Function Key Number", "%d", data[0x0E])
    return True


def _hp_nic(out, nic, bus, dev, mac):
    attr = "NIC %d" % nic
    if bus == 0x00 and dev == 0x00:
        out.attr(attr, "Disabled")
    elif bus == 0xFF and dev == 0xFF:
        out.attr(attr, "Not Installed")
    else:
        out.attr(attr, "PCI device %02x:%02x.%x, MAC address %02X:%02X:%02X:%02X:%02X:%02X",
                 bus, dev >> 3, dev & 7, *mac[:6])


def _hp(h, out, company, generation):
    data = h.data

    if h.type == 204:
        # only Gen9 and later servers carry the locator layout
        if generation < HP_GEN9:
            return False
        out.handle_name("%s ProLiant System/Rack Locator", company)
        if h.length < 0x0B:
            return True
        out.attr("Rack Name", "%s", dmi_string(h, data[0x04]))
        out.attr("Enclosure Name", "%s", dmi_string(h, data[0x05]))
        out.attr("Enclosure Model", "%s", dmi_string(h, data[0x06]))
        out.attr("Enclosure Serial", "%s", dmi_string(h, data[0x0A]))
        out.attr("Enclosure Bays", "%d", data[0x08])
        out.attr("Server Bay", "%s", dmi_string(h, data[0x07]))
        out.attr("Bays Filled", "%d", data[0x09])
        return True

    if h.type in (209, 221):
        # 8 byte records: device/function, bus, MAC address
        if h.type == 221:
            out.handle_name("%s BIOS iSCSI NIC PCI and MAC Information", company)
        else:
            out.handle_name("%s BIOS PXE NIC PCI and MAC Information", company)
        nic = 1
        ptr = 0x04
        while h.length >= ptr + 8:
            _hp_nic(out, nic, data[ptr + 0x01], data[ptr], data[ptr + 0x02:ptr + 0x08])
            nic += 1
            ptr += 8
        return True

    if h.type == 212:
        out.handle_name("%s 64-bit CRU Information", company)
        if h.length < 0x18:
            return True
        if is_printable(data[0x04:0x08]):
            out.attr("Signature", "%s", bytes(data[0x04:0x08]).decode('ascii'))
        else:
            out.attr("Signature", "0x%08x", dword(data, 0x04))
        if dword(data, 0x04) == 0x55524324:  # "$CRU"
            address = qword(data, 0x08)
            out.attr("Physical Address", "0x%08x%08x", address >> 32, address & 0xFFFFFFFF)
            out.attr("Length", "0x%08x", dword(data, 0x10))
            out.attr("Offset", "0x%08x", dword(data, 0x14))
        return True

    if h.type == 219:
        out.handle_name("%s ProLiant Information", company)
        if h.length < 0x08:
            return True
        out.attr("Power Features", "0x%08x", dword(data, 0x04))
        if h.length < 0x0C:
            return True
        out.attr("Omega Features", "0x%08x", dword(data, 0x08))
        if h.length < 0x14:
            return True
        features = dword(data, 0x10)
        out.attr("Misc. Features", "0x%08x", features)
        out.subattr("iCRU", "%s", "Yes" if features & 0x0001 else "No")
        out.subattr("UEFI", "%s", "Yes" if features & 0x1400 else "No")
        return True

    return False


def _thinkpad_signature(data, kind):
    return (data[0x04] == ord('T') and data[0x05] == ord('P')
            and data[0x06] == kind[0] and data[0x07] == kind[1] and data[0x08] == 0x01)


def _lenovo(h, out):
    data = h.data

    if h.type == 131:
        if h.length != 0x16 or dmi_string(h, 1) != "TVT-Enablement":
            return False
        out.handle_name("ThinkVantage Technologies")
        out.attr("Version", "%d", data[0x04])
        out.attr("Diagnostics", "%s", "Available" if data[0x14] & 0x80 else "No")
        return True

    if h.type == 135:
        if h.length < 0x0A or not _thinkpad_signature(data, (0x07, 0x03)):
            return False
        out.handle_name("ThinkPad Device Presence Detection")
        out.attr("Fingerprint Reader", "%s", "Present" if data[0x09] & 0x01 else "No")
        return True

    if h.type == 140:
        if h.length < 0x0D or not _thinkpad_signature(data, (0x0B, 0x07)):
            return False
        out.handle_name("ThinkPad Embedded Controller Program")
        out.attr("Version ID", "%s", dmi_string(h, 1))
        out.attr("Release Date", "%s", dmi_string(h, 2))
        return True

    return False


class VendorOemDecoder(OemDecoder):
    """Dispatches OEM records to the decoder of the detected vendor."""

    def __init__(self, manufacturer=None, product=None):
        self.vendor = detect_vendor(manufacturer)
        self.generation = hp_generation(product, self.vendor)

    def decode(self, h, out):
        if self.vendor == VENDOR_ACER:
            return _acer(h, out)
        if self.vendor in (VENDOR_HP, VENDOR_HPE):
            return _hp(h, out, self.vendor, self.generation)
        if self.vendor in (VENDOR_IBM, VENDOR_LENOVO):
            return _lenovo(h, out)
        return False
