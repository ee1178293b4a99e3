import ctypes
import errno
import mmap
import os
import struct
import subprocess
import sys

VERBOSE = False

EFI_NOT_FOUND = -1
EFI_NO_SMBIOS = -2

EFI_SYSTAB_FILES = ("/sys/firmware/efi/systab", "/proc/efi/systab")

if sys.platform == "win32":
    from ctypes import wintypes

    # use_last_error=True to capture error codes reliably
    kernel32 = ctypes.WinDLL('kernel32', use_last_error=True)

    # UINT GetSystemFirmwareTable(
    #   DWORD FirmwareTableProviderSignature,
    #   DWORD FirmwareTableID,
    #   PVOID pFirmwareTableBuffer,
    #   DWORD BufferSize
    # );
    kernel32.GetSystemFirmwareTable.argtypes = [wintypes.DWORD, wintypes.DWORD,
                                                ctypes.c_void_p, wintypes.DWORD]
    kernel32.GetSystemFirmwareTable.restype = ctypes.c_uint
else:
    kernel32 = None


def log(msg):
    if VERBOSE:
        print(f"[DEBUG] {msg}", file=sys.stderr)


def log_error(msg):
    print(f"[ERROR] {msg}", file=sys.stderr)


def read_file(base, max_len, filename):
    """
    Reads up to max_len bytes of filename from offset base. A short read is
    not an error: sysfs files and 64-bit tables only bound the size.
    Returns None if the file can't be read.
    """
    try:
        with open(filename, "rb") as f:
            if base:
                f.seek(base)
            data = f.read(max_len)
    except FileNotFoundError:
        log(f"read_file: {filename} not found")
        return None
    except OSError as e:
        log_error(f"{filename}: {e.strerror}")
        return None

    log(f"read_file: {len(data)} bytes at 0x{base:X} from {filename}")
    return data


def _page_align_down(address):
    return address & ~(mmap.PAGESIZE - 1)


def mem_chunk(base, length, devmem):
    """
    Copies length bytes of physical memory at base, through devmem.
    devmem can also be a regular file such as a binary dump. The mapping is
    page aligned; if mmap is refused, the bytes are read instead.
    """
    try:
        f = open(devmem, "rb")
    except OSError as e:
        log_error(f"{devmem}: {e.strerror}")
        return None

    with f:
        try:
            st = os.fstat(f.fileno())
        except OSError as e:
            log_error(f"{devmem}: {e.strerror}")
            return None

        # a regular file can't be mapped past its end
        if os.path.isfile(devmem) and base + length > st.st_size:
            log_error(f"mmap: Can't map beyond end of file {devmem}")
            return None

        start = _page_align_down(base)
        delta = base - start
        try:
            m = mmap.mmap(f.fileno(), delta + length, mmap.MAP_SHARED, mmap.PROT_READ,
                          offset=start)
        except (OSError, ValueError) as e:
            log(f"mem_chunk: mmap of 0x{base:X} refused ({e}), reading instead")
            return _read_chunk(f, base, length, devmem)

        try:
            data = m[delta:delta + length]
        finally:
            m.close()

    log(f"mem_chunk: {length} bytes at 0x{base:X} from {devmem}")
    return data


def _read_chunk(f, base, length, devmem):
    try:
        f.seek(base)
        data = f.read(length)
    except OSError as e:
        log_error(f"{devmem}: {e.strerror}")
        return None
    if len(data) != length:
        log_error(f"{devmem}: short read, {len(data)} of {length} bytes")
        return None
    return data


def write_dump(base, length, data, dumpfile, add):
    """
    Writes length bytes of data at offset base of dumpfile. The file is
    created, or truncated unless add is set.
    """
    flags = os.O_WRONLY | os.O_CREAT | (0 if add else os.O_TRUNC)
    try:
        fd = os.open(dumpfile, flags, 0o666)
    except OSError as e:
        log_error(f"{dumpfile}: {e.strerror}")
        return False

    try:
        with os.fdopen(fd, "wb") as f:
            f.seek(base)
            f.write(bytes(data[:length]))
    except OSError as e:
        log_error(f"{dumpfile}: {e.strerror}")
        return False

    log(f"write_dump: {length} bytes at 0x{base:X} to {dumpfile}")
    return True


def efi_systab_address():
    """
    Looks up the SMBIOS entry point address advertised by EFI.
    Returns (status, kind, address, source) where status is 0,
    EFI_NOT_FOUND or EFI_NO_SMBIOS and kind is "SMBIOS3" or "SMBIOS".
    """
    if sys.platform.startswith("freebsd"):
        return _kenv_address()

    if not sys.platform.startswith("linux"):
        return EFI_NOT_FOUND, None, 0, None

    for filename in EFI_SYSTAB_FILES:
        try:
            with open(filename, "r") as f:
                lines = f.read().splitlines()
        except OSError:
            continue

        for line in lines:
            key, _, value = line.partition("=")
            if key in ("SMBIOS3", "SMBIOS"):
                log(f"efi_systab_address: {line} in {filename}")
                return 0, key, int(value.strip(), 0), filename
        return EFI_NO_SMBIOS, None, 0, filename

    # no EFI interface
    return EFI_NOT_FOUND, None, 0, None


def _kenv_address():
    # the anchor address is exposed in the kernel environment in UEFI mode
    try:
        result = subprocess.run(["kenv", "-q", "hint.smbios.0.mem"],
                                capture_output=True, text=True, check=False)
    except OSError as e:
        if e.errno != errno.ENOENT:
            log_error(f"kenv: {e.strerror}")
        return EFI_NOT_FOUND, None, 0, None

    value = result.stdout.strip()
    if result.returncode != 0 or not value:
        return EFI_NOT_FOUND, None, 0, None
    return 0, "SMBIOS", int(value, 0), "kenv"


def get_firmware_provider_signature(signature_str):
    # 'RSMB' must be 0x52534D42, the big endian reading of the string
    if len(signature_str) != 4:
        raise ValueError("Signature must be 4 characters.")
    return struct.unpack('>I', signature_str.encode('ascii'))[0]


def get_system_firmware_table(provider_signature, table_id):
    sig_int = get_firmware_provider_signature(provider_signature)

    ctypes.set_last_error(0)
    size = kernel32.GetSystemFirmwareTable(sig_int, table_id, None, 0)
    err = ctypes.get_last_error()
    log(f"GetSystemFirmwareTable({provider_signature}): Size={size}, Err={err}")

    if size == 0:
        # a 0 size with no error code is an empty table
        if err != 0:
            log_error(f"GetSystemFirmwareTable({provider_signature}, {table_id}) failed. "
                      f"Code: {err} ({ctypes.FormatError(err)})")
        return b""

    buffer = (ctypes.c_char * size)()
    ctypes.set_last_error(0)
    ret = kernel32.GetSystemFirmwareTable(sig_int, table_id, buffer, size)
    err = ctypes.get_last_error()

    if ret == 0:
        log_error(f"GetSystemFirmwareTable (2nd call) failed. "
                  f"Code: {err} ({ctypes.FormatError(err)})")
        return b""

    return bytes(buffer)


def get_smbios_data():
    """Windows only: RawSMBIOSData header followed by the structure table."""
    if kernel32 is None:
        return b""
    return get_system_firmware_table('RSMB', 0)


def is_admin():
    if sys.platform == "win32":
        try:
            return bool(ctypes.windll.shell32.IsUserAnAdmin())
        except OSError:
            return False
    return os.geteuid() == 0
