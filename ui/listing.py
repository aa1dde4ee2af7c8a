from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt
from PyQt6.QtGui import QColor

from core.disassembler import disassemble
from core.memory import PROGRAM_START, Memory


class ListingTableModel(QAbstractTableModel):
    headers = ["Address", "Bytes", "Instruction"]

    def __init__(self, memory: Memory, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self.memory = memory
        self.cursor_address: Optional[int] = None
        self._rows: list[int] = []
        self.refresh()

    def refresh(self) -> None:
        self.beginResetModel()
        end = min(PROGRAM_START + self.memory.program_size, len(self.memory) - 1)
        self._rows = list(range(PROGRAM_START, end, 2))
        self.endResetModel()

    def set_cursor_address(self, address: Optional[int]) -> None:
        self.cursor_address = address
        if self._rows:
            self.dataChanged.emit(self.index(0, 0), self.index(len(self._rows) - 1, len(self.headers) - 1))

    def update_address(self, address: int) -> None:
        row = self.row_for_address(address)
        if row is not None:
            self.dataChanged.emit(self.index(row, 0), self.index(row, len(self.headers) - 1))

    def row_for_address(self, address: int) -> Optional[int]:
        if not self._rows or address < self._rows[0] or address > self._rows[-1]:
            return None
        return (address - self._rows[0]) // 2

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self._rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        return 0 if parent.isValid() else len(self.headers)

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):
        if role == Qt.ItemDataRole.DisplayRole and orientation == Qt.Orientation.Horizontal:
            return self.headers[section]
        return None

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if not index.isValid():
            return None
        addr = self._rows[index.row()]
        column = index.column()

        if role == Qt.ItemDataRole.DisplayRole:
            instr = disassemble(self.memory, addr)
            if column == 0:
                return f"{addr:04X}"
            if column == 1:
                return f"{instr.opcode:04X}"
            if column == 2:
                return instr.mnemonic
        if role == Qt.ItemDataRole.ForegroundRole:
            if column == 2 and not disassemble(self.memory, addr).mnemonic:
                return QColor("#6272a4")
        if role == Qt.ItemDataRole.BackgroundRole and addr == self.cursor_address:
            return QColor("#ffb86c")
        return None
