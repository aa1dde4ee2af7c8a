from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import Optional

from PyQt6.QtCore import QEvent, Qt, QTimer
from PyQt6.QtGui import QAction, QColor, QFont, QFontDatabase, QKeySequence, QPalette, QShortcut
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPlainTextEdit,
    QSplitter,
    QTableView,
    QTableWidget,
    QTableWidgetItem,
    QTabWidget,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from core.instructions import get_instruction_defs
from core.keypad import symbol_for_button, symbol_for_label
from core.model import Cursor, KeyCommand
from core.roms import RomImage, RomLibrary
from core.session import PadSession
from ui.keypad_widget import KeypadWidget
from ui.listing import ListingTableModel
from ui.monitor_view import MonitorView


class MainWindow(QMainWindow):
    def __init__(self, rom_directory: Optional[str] = None) -> None:
        super().__init__()
        self.setWindowTitle("CHIP-8 Pad")
        self.resize(900, 600)

        self._pending_rom_name: Optional[str] = None
        stored_directory = self._load_stored_directory()
        self.roms = RomLibrary(rom_directory or stored_directory or os.getcwd())
        self.session = PadSession(self.roms)
        self.memory = self.session.memory
        self.monitor = self.session.monitor

        self._build_ui()

        self.monitor.surface = self.monitor_view
        self.monitor.on_mode_change(self._on_monitor_mode_changed)
        self.monitor.on_commit(self._on_commit_requested)
        self.monitor.on_memory_change(self.listing_model.update_address)
        self.roms.on_change(self._on_rom_selection_changed)
        self.session.on_log(self.log)
        self.session.on_load(self._on_rom_loaded)

        self._setup_shortcuts()
        QApplication.instance().installEventFilter(self)
        self._load_layout()
        if self._pending_rom_name:
            self.roms.select(self._pending_rom_name)
        self._update_header()
        if self.roms.current is not None:
            self.session.load_current_rom()
        else:
            self.log(f"No ROM files in {self.roms.directory}")

    def _setup_shortcuts(self) -> None:
        self.shortcuts: list[QShortcut] = []

        shortcut_map = [
            ("Left", KeyCommand.MOVE_LEFT),
            ("Right", KeyCommand.MOVE_RIGHT),
            ("Return", KeyCommand.COMMIT),
            ("F2", KeyCommand.TOGGLE),
        ]
        for sequence, symbol in shortcut_map:
            shortcut = QShortcut(QKeySequence(sequence), self)
            shortcut.activated.connect(lambda symbol=symbol: self.dispatch_symbol(symbol))
            self.shortcuts.append(shortcut)

    def eventFilter(self, obj, event) -> bool:
        # Hex keys need press and release, which QShortcut cannot report.
        event_type = event.type()
        if event_type in (QEvent.Type.KeyPress, QEvent.Type.KeyRelease) and isinstance(obj, QWidget):
            if (obj is self or self.isAncestorOf(obj)) and not isinstance(obj, QLineEdit):
                symbol = symbol_for_label(event.text())
                if isinstance(symbol, int):
                    if not event.isAutoRepeat():
                        if event_type == QEvent.Type.KeyPress:
                            self.press_symbol(symbol)
                        else:
                            self.release_symbol(symbol)
                    return True
        return super().eventFilter(obj, event)

    def _build_ui(self) -> None:
        self.file_menu = self.menuBar().addMenu("File")
        self.view_menu = self.menuBar().addMenu("View")

        open_dir_action = QAction("Open ROM Directory...", self)
        open_dir_action.triggered.connect(self.open_rom_directory)
        self.file_menu.addAction(open_dir_action)

        reload_action = QAction("Reload ROM", self)
        reload_action.triggered.connect(self.load_current_rom)
        self.file_menu.addAction(reload_action)

        exit_action = QAction("Exit", self)
        exit_action.triggered.connect(self.close)
        self.file_menu.addAction(exit_action)

        monitor_action = QAction("Toggle Monitor", self)
        monitor_action.triggered.connect(lambda: self.dispatch_symbol(KeyCommand.TOGGLE))
        self.view_menu.addAction(monitor_action)

        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_layout.setContentsMargins(8, 8, 8, 8)

        header = QHBoxLayout()
        self.mode_label = QLabel("RUN")
        self.rom_label = QLabel("-")
        self.rom_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.tick_label = QLabel("")
        self.key_label = QLabel(" ")
        header.addWidget(self.mode_label)
        header.addWidget(self.rom_label, 1)
        header.addWidget(self.tick_label)
        header.addWidget(self.key_label)
        left_layout.addLayout(header)

        self.monitor_view = MonitorView()
        self.monitor_view.setFont(self._default_font())
        left_layout.addWidget(self.monitor_view)

        self.keypad_widget = KeypadWidget()
        self.keypad_widget.button_pressed.connect(self.on_button_pressed)
        self.keypad_widget.button_released.connect(self.on_button_released)
        left_layout.addWidget(self.keypad_widget, 1)
        left_panel.setMinimumWidth(300)

        self.listing_model = ListingTableModel(self.memory, self)
        self.listing_view = QTableView()
        self.listing_view.setModel(self.listing_model)
        self.listing_view.verticalHeader().setVisible(False)
        self.listing_view.setFont(self._default_font())
        self.listing_view.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        listing_header = self.listing_view.horizontalHeader()
        listing_header.setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        listing_header.setStretchLastSection(True)

        self.log_output = QPlainTextEdit()
        self.log_output.setReadOnly(True)
        self.log_output.setFont(self._default_font())

        self.right_tabs = QTabWidget()
        self.right_tabs.addTab(self.listing_view, "Listing")
        self.right_tabs.addTab(self._build_instruction_tab(), "Instructions")
        self.right_tabs.addTab(self._build_output_panel(self.log_output, self.clear_log_output), "Log")

        self.main_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.main_splitter.addWidget(left_panel)
        self.main_splitter.addWidget(self.right_tabs)
        self.main_splitter.setStretchFactor(1, 1)
        self.setCentralWidget(self.main_splitter)
        self._apply_theme()

    def _build_output_panel(self, text_edit: QPlainTextEdit, clear_handler) -> QWidget:
        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        controls = QHBoxLayout()
        controls.setContentsMargins(8, 6, 8, 0)
        controls.addStretch(1)
        clear_button = QToolButton()
        clear_button.setText("Clear")
        clear_button.setAutoRaise(True)
        clear_button.clicked.connect(clear_handler)
        controls.addWidget(clear_button)
        layout.addLayout(controls)
        layout.addWidget(text_edit)
        return container

    def _build_instruction_tab(self) -> QWidget:
        widget = QWidget()
        layout = QVBoxLayout(widget)
        layout.setContentsMargins(0, 0, 0, 0)
        self.instruction_search = QLineEdit()
        self.instruction_search.setPlaceholderText("Search instructions...")
        self.instruction_search.textChanged.connect(self.filter_instruction_sheet)
        layout.addWidget(self.instruction_search)

        self.instruction_table = QTableWidget(0, 4)
        self.instruction_table.setHorizontalHeaderLabels(["Opcode", "Syntax", "Summary", "Description"])
        self.instruction_table.verticalHeader().setVisible(False)
        self.instruction_table.setEditTriggers(QTableWidget.EditTrigger.NoEditTriggers)
        self.instruction_table.setSelectionBehavior(QTableWidget.SelectionBehavior.SelectRows)
        self.instruction_table.setFont(self._default_font())
        header = self.instruction_table.horizontalHeader()
        header.setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        header.setStretchLastSection(True)
        layout.addWidget(self.instruction_table)
        self._populate_instruction_sheet()
        return widget

    def _populate_instruction_sheet(self) -> None:
        defs = get_instruction_defs()
        self.instruction_table.setRowCount(len(defs))
        for row, defn in enumerate(defs):
            self.instruction_table.setItem(row, 0, QTableWidgetItem(defn.pattern))
            self.instruction_table.setItem(row, 1, QTableWidgetItem(defn.syntax))
            self.instruction_table.setItem(row, 2, QTableWidgetItem(defn.summary))
            self.instruction_table.setItem(row, 3, QTableWidgetItem(defn.description))

    def filter_instruction_sheet(self, text: str) -> None:
        query = text.strip().lower()
        for row in range(self.instruction_table.rowCount()):
            matches = False
            for col in range(self.instruction_table.columnCount()):
                item = self.instruction_table.item(row, col)
                if item and query in item.text().lower():
                    matches = True
                    break
            self.instruction_table.setRowHidden(row, not matches if query else False)

    def _default_font(self) -> QFont:
        preferred = [
            "JetBrains Mono",
            "Cascadia Code",
            "Fira Code",
            "IBM Plex Mono",
            "Source Code Pro",
            "DejaVu Sans Mono",
            "Consolas",
            "Menlo",
        ]
        available = set(QFontDatabase.families())
        for name in preferred:
            if name in available:
                return QFont(name, 11)
        return QFont("Monospace", 11)

    def _apply_theme(self) -> None:
        panel_bg = QColor("#996600")
        text_fg = QColor("#ffcc00")
        base_bg = QColor("#282a36")
        palette = self.palette()
        palette.setColor(QPalette.ColorRole.Window, panel_bg)
        palette.setColor(QPalette.ColorRole.WindowText, text_fg)
        palette.setColor(QPalette.ColorRole.Base, base_bg)
        palette.setColor(QPalette.ColorRole.Text, QColor("#f8f8f2"))
        palette.setColor(QPalette.ColorRole.Button, panel_bg)
        palette.setColor(QPalette.ColorRole.ButtonText, text_fg)
        self.setPalette(palette)
        self.monitor_view.set_colors(panel_bg, text_fg)

    def _config_path(self) -> str:
        base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        return os.path.join(base_dir, ".chip8_pad_layout.json")

    def _read_config(self) -> dict:
        path = self._config_path()
        if not os.path.exists(path):
            return {}
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}

    def _load_stored_directory(self) -> Optional[str]:
        data = self._read_config()
        directory = data.get("rom_directory")
        self._pending_rom_name = data.get("rom_name") if isinstance(data.get("rom_name"), str) else None
        return directory if isinstance(directory, str) and os.path.isdir(directory) else None

    def _load_layout(self) -> None:
        data = self._read_config()
        try:
            geo = data.get("geometry")
            if geo:
                self.restoreGeometry(bytes.fromhex(geo))
            main_sizes = data.get("main_sizes")
            if main_sizes:
                QTimer.singleShot(0, lambda sizes=list(main_sizes): self.main_splitter.setSizes(sizes))
            tab_index = data.get("tab_index")
            if tab_index is not None:
                self.right_tabs.setCurrentIndex(int(tab_index))
        except (TypeError, ValueError):
            # A malformed layout entry only loses the stored layout.
            pass

    def _save_layout(self) -> None:
        data = {}
        data["geometry"] = self.saveGeometry().toHex().data().decode("ascii")
        data["main_sizes"] = self.main_splitter.sizes()
        data["tab_index"] = self.right_tabs.currentIndex()
        data["rom_directory"] = str(self.roms.directory)
        current = self.roms.current
        data["rom_name"] = current.name if current else None
        try:
            with open(self._config_path(), "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError:
            pass

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_layout()
        super().closeEvent(event)

    def log(self, message: str) -> None:
        self.log_output.appendPlainText(message)

    def clear_log_output(self) -> None:
        self.log_output.clear()

    def open_rom_directory(self) -> None:
        path = QFileDialog.getExistingDirectory(self, "Open ROM Directory", str(self.roms.directory))
        if not path:
            return
        self.roms.set_directory(path)
        self.log(f"{len(self.roms.entries)} ROM files in {self.roms.directory}")

    def load_current_rom(self) -> None:
        self.session.load_current_rom()
        self._update_header()

    def dispatch_symbol(self, symbol) -> None:
        if symbol is None:
            return
        self.session.dispatch(symbol)
        self._update_views()

    def press_symbol(self, symbol) -> None:
        self.session.press(symbol)
        self._update_views()

    def release_symbol(self, symbol) -> None:
        self.session.release(symbol)

    def on_button_pressed(self, index: int) -> None:
        self.key_label.setText(self.keypad_widget.buttons[index].text())
        self.press_symbol(symbol_for_button(index))

    def on_button_released(self, index: int) -> None:
        self.release_symbol(symbol_for_button(index))
        self.key_label.setText(" ")

    def _on_rom_loaded(self, image: RomImage) -> None:
        self.listing_model.refresh()
        self._update_header()
        self._update_views()

    def _on_rom_selection_changed(self, path: Optional[Path]) -> None:
        self._update_header()

    def _on_monitor_mode_changed(self, active: bool) -> None:
        self.log("Monitor on." if active else "Monitor off.")
        self._update_header()
        self._update_views()

    def _on_commit_requested(self, cursor: Cursor) -> None:
        self.log(f"Commit requested at {cursor.address:04X}")

    def _update_header(self) -> None:
        self.rom_label.setText(self.roms.display_name(self.roms.current))
        self.mode_label.setText("MON" if self.monitor.active else "RUN")
        image = self.session.image
        tickrate = image.tickrate if image is not None else None
        self.tick_label.setText(f"{tickrate} t/f" if tickrate is not None else "")

    def _update_views(self) -> None:
        if self.monitor.active:
            address = self.monitor.cursor.address
            self.listing_model.set_cursor_address(address)
            row = self.listing_model.row_for_address(address)
            if row is not None:
                self.listing_view.scrollTo(self.listing_model.index(row, 0))
        else:
            self.listing_model.set_cursor_address(None)


def run_app() -> None:
    app = QApplication(sys.argv)
    args = app.arguments()[1:]
    window = MainWindow(args[0] if args else None)
    window.show()
    app.exec()
