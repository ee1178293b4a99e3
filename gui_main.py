import sys
from PyQt6.QtWidgets import (QApplication, QMainWindow, QWidget, QHBoxLayout, QTreeWidget,
                             QTreeWidgetItem, QTextEdit, QSplitter, QTabWidget, QMessageBox)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from dmi_output import RecordingSink, group_structures, hex_dump
from entry_point import run
from parsers import record_end


class CaptureSink(RecordingSink):
    """RecordingSink that also keeps the bytes of every announced record."""

    def __init__(self):
        super().__init__()
        self.raw = []

    def handle(self, h):
        super().handle(h)
        end = min(record_end(h.data, 0, h.length, len(h.data)), len(h.data))
        self.raw.append(bytes(h.data[:end]))


def structure_text(structure):
    lines = [structure.name or "Type %d" % structure.type,
             "Handle: 0x%04X" % structure.handle,
             "Length: %d" % structure.length,
             "=" * 40]
    for depth, label, value in structure.rows:
        if depth == 0:
            lines.append(f"{label}: {value}" if label else f"  {value}")
        elif label:
            lines.append(f"    {label}: {value}")
        else:
            lines.append(f"    {value}")
    return "\n".join(lines)


class HexViewer(QTextEdit):
    def __init__(self):
        super().__init__()
        self.setReadOnly(True)
        self.setFont(QFont("Consolas", 10))

    def set_data(self, data):
        self.setText(hex_dump(data) if data else "")


class MainWindow(QMainWindow):
    def __init__(self, options):
        super().__init__()
        self.options = options
        self.setWindowTitle("smbios-dump - SMBIOS/DMI Viewer")
        self.resize(1000, 700)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        layout = QHBoxLayout(central_widget)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        layout.addWidget(splitter)

        # Left Panel: Tree
        self.tree = QTreeWidget()
        self.tree.setHeaderLabel("SMBIOS Structures")
        self.tree.itemClicked.connect(self.on_item_clicked)
        splitter.addWidget(self.tree)

        # Right Panel: Tabs
        self.tabs = QTabWidget()
        splitter.addWidget(self.tabs)

        self.parsed_view = QTextEdit()
        self.parsed_view.setReadOnly(True)
        self.parsed_view.setFont(QFont("Consolas", 10))
        self.tabs.addTab(self.parsed_view, "Parsed View")

        self.hex_view = HexViewer()
        self.tabs.addTab(self.hex_view, "Hex View")

        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 3)

        self.structures = []
        self.raw = []
        self.messages = []
        self.load_data()

    def load_data(self):
        sink = CaptureSink()
        status = run(self.options, sink)

        self.structures = group_structures(sink.events)
        self.raw = sink.raw
        self.messages = [("# " if e[0] == 'comment' else "") + e[1]
                         for e in sink.events if e[0] in ('comment', 'info')]

        log_item = QTreeWidgetItem(self.tree, ["Messages"])
        log_item.setData(0, Qt.ItemDataRole.UserRole, ("LOG", None))

        root = QTreeWidgetItem(self.tree, ["SMBIOS Data"])
        for index, structure in enumerate(self.structures):
            name = structure.name or "Type %d" % structure.type
            item = QTreeWidgetItem(root, [f"0x{structure.handle:04X} - {name}"])
            item.setData(0, Qt.ItemDataRole.UserRole, ("SMBIOS", index))

        self.tree.expandAll()
        self.parsed_view.setText("\n".join(self.messages))

        if status != 0 or not self.structures:
            QMessageBox.warning(self, "Warning",
                                "No SMBIOS structures decoded. Are you running as root/Admin?")

    def on_item_clicked(self, item, column):
        data = item.data(0, Qt.ItemDataRole.UserRole)
        if not data:
            return

        if data[0] == "LOG":
            self.hex_view.set_data(b"")
            self.parsed_view.setText("\n".join(self.messages))
        elif data[0] == "SMBIOS":
            index = data[1]
            self.parsed_view.setText(structure_text(self.structures[index]))
            self.hex_view.set_data(self.raw[index] if index < len(self.raw) else b"")


def run_gui(options):
    app = QApplication(sys.argv)
    window = MainWindow(options)
    window.show()
    return app.exec()
