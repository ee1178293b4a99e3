import struct
from collections import namedtuple

NOT_SPECIFIED = "Not Specified"
BAD_INDEX = "<BAD INDEX>"
OUT_OF_SPEC = "<OUT OF SPEC>"

# Named tuples for structured data
DmiHeader = namedtuple('DmiHeader', [
    'type', 'length', 'handle', 'data'
])

RawSMBIOSData = namedtuple('RawSMBIOSData', [
    'used_20_calling_method', 'major_version', 'minor_version',
    'dmi_revision', 'length'
])

RAW_SMBIOS_HEADER_SIZE = 8


def byte(data, offset):
    return data[offset]

def word(data, offset):
    return struct.unpack_from('<H', data, offset)[0]

def dword(data, offset):
    return struct.unpack_from('<I', data, offset)[0]

def qword(data, offset):
    return struct.unpack_from('<Q', data, offset)[0]

def signed_word(data, offset):
    return struct.unpack_from('<h', data, offset)[0]


def checksum(buf, length):
    """True if the first `length` bytes of buf sum to zero modulo 256."""
    if length > len(buf):
        return False
    return sum(buf[:length]) & 0xFF == 0


def is_printable(data):
    for b in data:
        if b < 32 or b >= 127:
            return False
    return True


def ascii_filter(raw):
    """Returns raw bytes as text, every byte outside 32..126 replaced by a dot."""
    return ''.join(chr(b) if 32 <= b < 127 else '.' for b in raw)


def to_dmi_header(buf, offset):
    """
    Builds the header of the record starting at `offset` in buf.
    The data field is a view running from the record start to the end
    of buf, so the string area stays reachable.
    """
    view = memoryview(buf)[offset:]
    return DmiHeader(type=view[0], length=view[1], handle=word(view, 2),
                     data=view)


def record_end(buf, offset, length, limit):
    """
    Returns the offset just past the double NUL closing the string area of
    the record at `offset`. The result exceeds `limit` when the record is
    truncated.
    """
    nxt = offset + length
    while nxt + 1 < limit and (buf[nxt] != 0 or buf[nxt + 1] != 0):
        nxt += 1
    return nxt + 2


def _string_bounds(h, s):
    """Start and end offsets (in h.data) of string number s, or None."""
    data = h.data
    size = len(data)
    pos = h.length

    def at(i):
        return data[i] if i < size else 0

    while s > 1 and at(pos):
        while at(pos):
            pos += 1
        pos += 1
        s -= 1

    if not at(pos):
        return None

    end = pos
    while at(end):
        end += 1
    return pos, end


def raw_string(h, s):
    """Unfiltered bytes of string number s, or None if there is no such string."""
    bounds = _string_bounds(h, s)
    if bounds is None:
        return None
    return bytes(h.data[bounds[0]:bounds[1]])


def _dmi_string(h, s, filter=True):
    raw = raw_string(h, s)
    if raw is None:
        return None
    if filter:
        return ascii_filter(raw)
    return raw.decode('latin-1')


def dmi_string(h, s):
    """Resolves a 1-based string reference, with the usual sentinels."""
    if s == 0:
        return NOT_SPECIFIED

    text = _dmi_string(h, s, True)
    if text is None:
        return BAD_INDEX
    return text


def string_area_empty(h):
    data = h.data
    end = h.length
    if end + 1 >= len(data):
        return True
    return data[end] == 0 and data[end + 1] == 0


def parse_raw_smbios_data_header(data):
    """
    Parses the Windows RawSMBIOSData header.
    Returns (header_obj, data_offset).
    If header seems invalid or data too short, returns (None, 0).
    """
    if len(data) < RAW_SMBIOS_HEADER_SIZE:
        return None, 0

    # struct RawSMBIOSData {
    #   BYTE  Used20CallingMethod;
    #   BYTE  SMBIOSMajorVersion;
    #   BYTE  SMBIOSMinorVersion;
    #   BYTE  DmiRevision;
    #   DWORD Length;
    #   BYTE  SMBIOSTableData[];
    # };
    u20, maj, min_, dmi, length = struct.unpack_from('<BBBBI', data, 0)
    header = RawSMBIOSData(u20, maj, min_, dmi, length)
    if length > len(data) - RAW_SMBIOS_HEADER_SIZE:
        return None, 0
    # The actual SMBIOS data follows immediately
    return header, RAW_SMBIOS_HEADER_SIZE
