from __future__ import annotations

from PyQt6.QtCore import QSize, pyqtSignal
from PyQt6.QtWidgets import QGridLayout, QSizePolicy, QToolButton, QWidget

from core.keypad import BUTTON_COLUMNS, BUTTON_COUNT, label_for_button


class KeypadWidget(QWidget):
    button_pressed = pyqtSignal(int)
    button_released = pyqtSignal(int)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.buttons: list[QToolButton] = []
        layout = QGridLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)
        for index in range(BUTTON_COUNT):
            button = QToolButton()
            button.setText(label_for_button(index))
            button.setMinimumSize(QSize(42, 42))
            button.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
            command_column = index % BUTTON_COLUMNS == BUTTON_COLUMNS - 1
            button.setStyleSheet(
                "QToolButton {"
                " background-color: #996600;"
                " border: 1px solid #ffcc00;"
                " border-radius: 4px;"
                f" color: {'#ff6600' if command_column else '#ffcc00'};"
                " font-weight: bold;"
                "}"
                "QToolButton:pressed { background-color: #ffcc00; color: #996600; }"
            )
            button.pressed.connect(lambda i=index: self.button_pressed.emit(i))
            button.released.connect(lambda i=index: self.button_released.emit(i))
            layout.addWidget(button, index // BUTTON_COLUMNS, index % BUTTON_COLUMNS)
            self.buttons.append(button)
