"""
Decode options, shared by the command line, the GUI and library callers.
"""
from collections import namedtuple

FLAG_QUIET = 1 << 0
FLAG_DUMP = 1 << 1
FLAG_DUMP_BIN = 1 << 2
FLAG_FROM_DUMP = 1 << 3
FLAG_NO_SYSFS = 1 << 4

# Entry point processing flags, set by the locator
FLAG_NO_FILE_OFFSET = 1 << 0
FLAG_STOP_AT_EOT = 1 << 1

SUPPORTED_SMBIOS_VER = 0x030300
DEFAULT_MEM_DEV = "/dev/mem"

StringKeyword = namedtuple('StringKeyword', ['keyword', 'type', 'offset'])

TYPE_KEYWORDS = {
    "bios": (0, 13),
    "system": (1, 12, 15, 23, 32),
    "baseboard": (2, 10, 41),
    "chassis": (3,),
    "processor": (4,),
    "memory": (5, 6, 16, 17),
    "cache": (7,),
    "connector": (8,),
    "slot": (9,),
}

STRING_KEYWORDS = (
    StringKeyword("bios-vendor", 0, 0x04),
    StringKeyword("bios-version", 0, 0x05),
    StringKeyword("bios-release-date", 0, 0x08),
    StringKeyword("bios-revision", 0, 0x15),  # 0x14 and 0x15
    StringKeyword("firmware-revision", 0, 0x17),  # 0x16 and 0x17
    StringKeyword("system-manufacturer", 1, 0x04),
    StringKeyword("system-product-name", 1, 0x05),
    StringKeyword("system-version", 1, 0x06),
    StringKeyword("system-serial-number", 1, 0x07),
    StringKeyword("system-uuid", 1, 0x08),
    StringKeyword("system-sku-number", 1, 0x19),
    StringKeyword("system-family", 1, 0x1A),
    StringKeyword("baseboard-manufacturer", 2, 0x04),
    StringKeyword("baseboard-product-name", 2, 0x05),
    StringKeyword("baseboard-version", 2, 0x06),
    StringKeyword("baseboard-serial-number", 2, 0x07),
    StringKeyword("baseboard-asset-tag", 2, 0x08),
    StringKeyword("chassis-manufacturer", 3, 0x04),
    StringKeyword("chassis-type", 3, 0x05),
    StringKeyword("chassis-version", 3, 0x06),
    StringKeyword("chassis-serial-number", 3, 0x07),
    StringKeyword("chassis-asset-tag", 3, 0x08),
    StringKeyword("processor-family", 4, 0x06),
    StringKeyword("processor-manufacturer", 4, 0x07),
    StringKeyword("processor-version", 4, 0x10),
    StringKeyword("processor-frequency", 4, 0x16),
)


class OptionError(ValueError):
    pass


def _int(text, base=0):
    """Integer in C notation: decimal, 0x hexadecimal or 0 octal."""
    if base == 0 and len(text) > 1 and text[0] == "0" and text[1] not in "xXoObB":
        return int(text, 8)
    return int(text, base)


def parse_type(arg, types=None):
    """
    Adds the types named by `arg` to the `types` set and returns the new
    frozenset. `arg` is a keyword or a comma or space separated list of
    numbers.
    """
    selected = set(types or ())

    keyword = TYPE_KEYWORDS.get(arg.lower())
    if keyword is not None:
        selected.update(keyword)
        return frozenset(selected)

    items = [item for item in arg.replace(",", " ").split(" ") if item]
    if not items:
        raise OptionError("Invalid type keyword: %s\n%s" % (arg, type_keyword_help()))
    for item in items:
        try:
            value = _int(item)
        except ValueError:
            raise OptionError("Invalid type keyword: %s\n%s" % (arg, type_keyword_help()))
        if value < 0 or value > 0xFF:
            raise OptionError("Invalid type number: %d" % value)
        selected.add(value)
    return frozenset(selected)


def type_keyword_help():
    return "Valid type keywords are:\n" + "\n".join("  " + k for k in TYPE_KEYWORDS)


def string_keyword_help():
    return "Valid string keywords are:\n" + "\n".join("  " + k.keyword for k in STRING_KEYWORDS)


def parse_string(arg):
    for keyword in STRING_KEYWORDS:
        if keyword.keyword == arg.lower():
            return keyword
    raise OptionError("Invalid string keyword: %s\n%s" % (arg, string_keyword_help()))


def parse_oem_string(arg):
    """OEM string selector: a string number from 1 to 255, or "count"."""
    if arg == "count":
        return StringKeyword(None, 11, 0)
    try:
        value = int(arg, 10)
    except ValueError:
        raise OptionError("Invalid OEM string number: %s" % arg)
    if value == 0 or value > 0xFF:
        raise OptionError("Invalid OEM string number: %s" % arg)
    return StringKeyword(None, 11, value)


def parse_handle(arg):
    try:
        value = _int(arg)
    except ValueError:
        raise OptionError("Invalid handle number: %s" % arg)
    if value < 0 or value > 0xFFFF:
        raise OptionError("Invalid handle number: %s" % arg)
    return value


class Options:
    """
    What to read and what to show. `types` is None for every type or a
    frozenset of type codes, `handle` None or a single handle, `string`
    None or the StringKeyword to print.
    """

    def __init__(self, flags=0, types=None, handle=None, string=None,
                 dumpfile=None, devmem=DEFAULT_MEM_DEV):
        self.flags = flags
        self.types = types
        self.handle = handle
        self.string = string
        self.dumpfile = dumpfile
        self.devmem = devmem
        # a selected string is printed alone
        if string is not None:
            self.flags |= FLAG_QUIET

    @property
    def quiet(self):
        return bool(self.flags & FLAG_QUIET)

    def validate(self):
        selectors = ((self.string is not None) + (self.types is not None)
                     + bool(self.flags & FLAG_DUMP_BIN) + (self.handle is not None))
        if selectors > 1:
            raise OptionError("Options --string, --type, --handle and --dump-bin "
                              "are mutually exclusive")
        if self.flags & FLAG_FROM_DUMP and self.flags & FLAG_DUMP_BIN:
            raise OptionError("Options --from-dump and --dump-bin are mutually exclusive")
        return self

    def displays(self, h):
        """True if the record passes the type and handle filters."""
        return ((self.types is None or h.type in self.types)
                and (self.handle is None or self.handle == h.handle)
                and not (self.quiet and h.type in (126, 127))
                and self.string is None)
