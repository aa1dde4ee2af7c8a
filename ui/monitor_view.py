from __future__ import annotations

from typing import Dict, Tuple

from PyQt6.QtCore import QSize, Qt
from PyQt6.QtGui import QColor, QFont, QPainter
from PyQt6.QtWidgets import QSizePolicy, QWidget

from core.monitor import WINDOW_ROWS

MONITOR_COLUMNS = 24


class MonitorView(QWidget):
    """Fixed-width character grid the monitor draws into."""

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._cells: Dict[Tuple[int, int], Tuple[str, bool]] = {}
        self._background = QColor("#996600")
        self._foreground = QColor("#ffcc00")
        self._padding = 8
        self.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)

    def set_colors(self, background: QColor, foreground: QColor) -> None:
        self._background = background
        self._foreground = foreground
        self.update()

    def draw_text(self, text: str, column: int, row: int, highlighted: bool) -> None:
        for offset, char in enumerate(text):
            self._cells[(column + offset, row)] = (char, highlighted)
        self.update()

    def clear(self) -> None:
        self._cells.clear()
        self.update()

    def cell_size(self) -> QSize:
        metrics = self.fontMetrics()
        return QSize(metrics.horizontalAdvance("M"), int(metrics.height() * 1.25))

    def sizeHint(self) -> QSize:
        cell = self.cell_size()
        return QSize(
            cell.width() * MONITOR_COLUMNS + self._padding * 2,
            cell.height() * WINDOW_ROWS + self._padding * 2,
        )

    def setFont(self, font: QFont) -> None:  # type: ignore[override]
        super().setFont(font)
        self.updateGeometry()

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.fillRect(event.rect(), self._background)
        cell = self.cell_size()
        for (column, row), (char, highlighted) in self._cells.items():
            x = self._padding + column * cell.width()
            y = self._padding + row * cell.height()
            fg, bg = self._foreground, self._background
            if highlighted:
                fg, bg = bg, fg
                painter.fillRect(x, y, cell.width(), cell.height(), bg)
            painter.setPen(fg)
            painter.drawText(
                x,
                y,
                cell.width(),
                cell.height(),
                Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignVCenter,
                char,
            )
