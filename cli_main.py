import argparse
import sys

from rich.console import Console

import firmware_api
from dmi_output import RichSink, TextSink
from entry_point import VERSION, run
from options import (DEFAULT_MEM_DEV, FLAG_DUMP, FLAG_DUMP_BIN, FLAG_FROM_DUMP, FLAG_NO_SYSFS,
                     FLAG_QUIET, OptionError, Options, parse_handle, parse_oem_string,
                     parse_string, parse_type)

console = Console(stderr=True)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="smbios-dump",
        description="Dump the SMBIOS/DMI table in a human readable format")
    parser.add_argument("-d", "--dev-mem", metavar="FILE", default=DEFAULT_MEM_DEV,
                        help="Read memory from device FILE (default: %(default)s)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Less verbose output")
    parser.add_argument("-s", "--string", metavar="KEYWORD",
                        help="Only display the value of the given DMI string")
    parser.add_argument("-t", "--type", metavar="TYPE", action="append",
                        help="Only display the entries of given type")
    parser.add_argument("-H", "--handle", metavar="HANDLE",
                        help="Only display the entry of given handle")
    parser.add_argument("-u", "--dump", action="store_true", help="Do not decode the entries")
    parser.add_argument("--dump-bin", metavar="FILE",
                        help="Dump the DMI data to a binary file")
    parser.add_argument("--from-dump", metavar="FILE",
                        help="Read the DMI data from a binary file")
    parser.add_argument("--no-sysfs", action="store_true",
                        help="Do not attempt to read DMI data from sysfs files")
    parser.add_argument("--oem-string", metavar="N",
                        help="Only display the value of the given OEM string")
    parser.add_argument("-V", "--version", action="store_true", help="Display the version and exit")
    parser.add_argument("-v", "--verbose", action="store_true", help="Trace firmware access on stderr")
    parser.add_argument("--rich", action="store_true", help="Render structures as tables")
    parser.add_argument("--gui", action="store_true", help="Launch GUI mode")
    return parser


def options_from_args(args):
    """Builds validated Options from parsed arguments. Raises OptionError."""
    flags = 0
    if args.quiet:
        flags |= FLAG_QUIET
    if args.dump:
        flags |= FLAG_DUMP
    if args.no_sysfs:
        flags |= FLAG_NO_SYSFS

    dumpfile = None
    if args.dump_bin:
        flags |= FLAG_DUMP_BIN
        dumpfile = args.dump_bin
    if args.from_dump:
        flags |= FLAG_FROM_DUMP
        dumpfile = args.from_dump

    if args.string and args.oem_string:
        raise OptionError("Only one string can be specified")
    string = None
    if args.string:
        string = parse_string(args.string)
    elif args.oem_string:
        string = parse_oem_string(args.oem_string)

    types = None
    for arg in args.type or ():
        types = parse_type(arg, types)

    handle = None if args.handle is None else parse_handle(args.handle)

    options = Options(flags=flags, types=types, handle=handle, string=string,
                      dumpfile=dumpfile, devmem=args.dev_mem)
    return options.validate()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(VERSION)
        return 0

    firmware_api.VERBOSE = args.verbose

    try:
        options = options_from_args(args)
    except OptionError as e:
        parser.error(str(e))

    if args.gui:
        from gui_main import run_gui
        return run_gui(options)

    if not options.flags & FLAG_FROM_DUMP and not options.quiet and not firmware_api.is_admin():
        console.print("[bold red]WARNING: Not running as root/Administrator. "
                      "Firmware access will likely fail.[/bold red]")

    if args.rich:
        out = RichSink(Console())
        try:
            return run(options, out)
        finally:
            out.close()

    return run(options, TextSink(sys.stdout))


if __name__ == "__main__":
    sys.exit(main())
