"""
Output sinks for the decoder.

Decoders never print. They call the primitives of an OutputSink in a fixed
order: a handle line, a name line, then attributes and lists, with every
list closed before the next attribute. TextSink writes the classic
DMI text layout, RecordingSink keeps the calls for tests and the GUI,
and RichSink renders each structure as a rich table.
"""
import sys
from collections import namedtuple

from rich.console import Console
from rich.table import Table
from rich.text import Text


def _fmt(fmt, args):
    if args:
        return fmt % args
    return fmt


def hex_row(chunk):
    return ' '.join(f"{b:02X}" for b in chunk)


def ascii_row(chunk):
    return ''.join(chr(b) if 32 <= b < 127 else '.' for b in chunk)


def hex_dump(data, length=16):
    """Offset, hex and ASCII columns, one line per `length` bytes."""
    lines = []
    for i in range(0, len(data), length):
        chunk = data[i:i + length]
        lines.append(f"{i:04X}  {hex_row(chunk):<{length * 3}}  {ascii_row(chunk)}")
    return "\n".join(lines)


class SinkStateError(RuntimeError):
    pass


class OutputSink:
    """Base sink: every primitive is a no-op."""

    def comment(self, fmt, *args):
        pass

    def info(self, fmt, *args):
        pass

    def handle(self, h):
        pass

    def handle_name(self, fmt, *args):
        pass

    def attr(self, name, fmt, *args):
        pass

    def subattr(self, name, fmt, *args):
        pass

    def list_start(self, name, fmt=None, *args):
        pass

    def list_item(self, fmt, *args):
        pass

    def list_end(self):
        pass

    def hex_rows(self, raw):
        # list items of 16 bytes each, inside an open list
        for i in range(0, len(raw), 16):
            self.list_item("%s", hex_row(raw[i:i + 16]))

    def sep(self):
        pass

    def struct_err(self, fmt, *args):
        pass


class TextSink(OutputSink):
    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def _line(self, text):
        self.stream.write(text + "\n")

    def comment(self, fmt, *args):
        self._line("# " + _fmt(fmt, args))

    def info(self, fmt, *args):
        self._line(_fmt(fmt, args))

    def handle(self, h):
        self._line("Handle 0x%04X, DMI type %d, %d bytes" % (h.handle, h.type, h.length))

    def handle_name(self, fmt, *args):
        self._line(_fmt(fmt, args))

    def attr(self, name, fmt, *args):
        self._line("\t%s: %s" % (name, _fmt(fmt, args)))

    def subattr(self, name, fmt, *args):
        self._line("\t\t%s: %s" % (name, _fmt(fmt, args)))

    def list_start(self, name, fmt=None, *args):
        # the value is optional
        if fmt is None:
            self._line("\t%s:" % name)
        else:
            self._line("\t%s: %s" % (name, _fmt(fmt, args)))

    def list_item(self, fmt, *args):
        self._line("\t\t" + _fmt(fmt, args))

    def sep(self):
        self._line("")

    def struct_err(self, fmt, *args):
        self._line("\t" + _fmt(fmt, args))


class RecordingSink(OutputSink):
    """
    Keeps every call as an event tuple, e.g. ('attr', 'Vendor', 'ACME').
    Raises SinkStateError when the list nesting rules are broken.
    """

    def __init__(self):
        self.events = []
        self.in_list = False

    def _push(self, *event):
        self.events.append(event)

    def _no_list(self, what):
        if self.in_list:
            raise SinkStateError(f"{what} while a list is open")

    def comment(self, fmt, *args):
        self._no_list("comment")
        self._push('comment', _fmt(fmt, args))

    def info(self, fmt, *args):
        self._no_list("info")
        self._push('info', _fmt(fmt, args))

    def handle(self, h):
        self._no_list("handle")
        self._push('handle', h.handle, h.type, h.length)

    def handle_name(self, fmt, *args):
        self._no_list("handle name")
        self._push('handle_name', _fmt(fmt, args))

    def attr(self, name, fmt, *args):
        self._no_list("attribute")
        self._push('attr', name, _fmt(fmt, args))

    def subattr(self, name, fmt, *args):
        self._no_list("sub-attribute")
        self._push('subattr', name, _fmt(fmt, args))

    def list_start(self, name, fmt=None, *args):
        self._no_list("list start")
        self.in_list = True
        self._push('list_start', name, None if fmt is None else _fmt(fmt, args))

    def list_item(self, fmt, *args):
        if not self.in_list:
            raise SinkStateError("list item outside of a list")
        self._push('list_item', _fmt(fmt, args))

    def list_end(self):
        if not self.in_list:
            raise SinkStateError("list end without list start")
        self.in_list = False
        self._push('list_end')

    def sep(self):
        self._no_list("separator")
        self._push('sep')

    def struct_err(self, fmt, *args):
        self._no_list("structure error")
        self._push('struct_err', _fmt(fmt, args))

    # Query helpers

    def attrs(self):
        """Returns the (name, value) pairs of all top level attributes."""
        return [(e[1], e[2]) for e in self.events if e[0] == 'attr']

    def attr_value(self, name):
        for e in self.events:
            if e[0] == 'attr' and e[1] == name:
                return e[2]
        return None

    def list_items(self, name):
        """Items of the first list called `name`, or None."""
        items = None
        for e in self.events:
            if items is None:
                if e[0] == 'list_start' and e[1] == name:
                    items = []
            elif e[0] == 'list_item':
                items.append(e[1])
            elif e[0] == 'list_end':
                return items
        return items

    def lines(self, kind):
        return [e[1] for e in self.events if e[0] == kind]


# One decoded structure, as shown by the GUI: rows are (depth, label, value)
Structure = namedtuple('Structure', ['handle', 'type', 'length', 'name', 'rows'])


def group_structures(events):
    """Splits recorded events into Structure tuples, one per handle line."""
    structures = []
    current = None
    for e in events:
        kind = e[0]
        if kind == 'handle':
            current = Structure(e[1], e[2], e[3], "", [])
            structures.append(current)
            continue
        if current is None:
            continue
        if kind == 'handle_name':
            current = current._replace(name=e[1])
            structures[-1] = current
        elif kind == 'attr':
            current.rows.append((0, e[1], e[2]))
        elif kind == 'subattr':
            current.rows.append((1, e[1], e[2]))
        elif kind == 'list_start':
            current.rows.append((0, e[1], e[2] or ""))
        elif kind == 'list_item':
            current.rows.append((1, "", e[1]))
        elif kind == 'struct_err':
            current.rows.append((0, "", e[1]))
        elif kind == 'sep':
            current = None
    return structures


class RichSink(OutputSink):
    """Renders each structure as a rich table, flushed on the separator."""

    def __init__(self, console=None):
        self.console = console if console is not None else Console()
        self.table = None

    def _table(self):
        if self.table is None:
            self.table = Table(show_header=False, box=None, pad_edge=False)
            self.table.add_column("Field", style="green")
            self.table.add_column("Value")
        return self.table

    def _flush(self):
        if self.table is not None:
            self.console.print(self.table)
            self.table = None

    def comment(self, fmt, *args):
        self._flush()
        self.console.print(Text("# " + _fmt(fmt, args), style="dim"))

    def info(self, fmt, *args):
        self._flush()
        self.console.print(Text(_fmt(fmt, args)))

    def handle(self, h):
        self._flush()
        self.console.print(Text("Handle 0x%04X, DMI type %d, %d bytes"
                                % (h.handle, h.type, h.length), style="bold magenta"))

    def handle_name(self, fmt, *args):
        self._flush()
        self.console.print(Text(_fmt(fmt, args), style="bold cyan"))

    def attr(self, name, fmt, *args):
        self._table().add_row(Text(name), Text(_fmt(fmt, args)))

    def subattr(self, name, fmt, *args):
        self._table().add_row(Text("  " + name), Text(_fmt(fmt, args)))

    def list_start(self, name, fmt=None, *args):
        value = "" if fmt is None else _fmt(fmt, args)
        self._table().add_row(Text(name), Text(value))

    def list_item(self, fmt, *args):
        self._table().add_row("", Text(_fmt(fmt, args), style="cyan"))

    def hex_rows(self, raw):
        self._flush()
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Offset", style="dim", width=8)
        table.add_column("Hex", width=48, style="cyan")
        table.add_column("ASCII", width=16)
        for i in range(0, len(raw), 16):
            chunk = raw[i:i + 16]
            table.add_row(f"{i:04X}", hex_row(chunk), ascii_row(chunk))
        self.console.print(table)

    def sep(self):
        self._flush()
        self.console.print()

    def struct_err(self, fmt, *args):
        self._table().add_row("", Text(_fmt(fmt, args), style="bold red"))

    def close(self):
        self._flush()
