from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from core.model import KeyCommand, KeyEvent


KEY_COUNT = 16
BUTTON_COLUMNS = 5

BUTTON_LABELS: List[List[str]] = [
    ["1", "2", "3", "C", "<"],
    ["4", "5", "6", "D", ">"],
    ["7", "8", "9", "E", "G"],
    ["A", "0", "B", "F", "M"],
]

BUTTON_COUNT = sum(len(row) for row in BUTTON_LABELS)


def label_for_button(index: int) -> str:
    return BUTTON_LABELS[index // BUTTON_COLUMNS][index % BUTTON_COLUMNS]


def symbol_for_label(label: str) -> Optional[KeyEvent]:
    text = label.strip().upper()
    if len(text) != 1:
        return None
    if text in "0123456789ABCDEF":
        return int(text, 16)
    try:
        return KeyCommand(text)
    except ValueError:
        return None


def symbol_for_button(index: int) -> Optional[KeyEvent]:
    if not 0 <= index < BUTTON_COUNT:
        return None
    return symbol_for_label(label_for_button(index))


@dataclass
class Keypad:
    keys: List[bool] = field(default_factory=lambda: [False] * KEY_COUNT)

    def reset(self) -> None:
        self.keys = [False] * KEY_COUNT

    def press(self, key: int) -> None:
        self.keys[key & 0xF] = True

    def release(self, key: int) -> None:
        self.keys[key & 0xF] = False

    def is_pressed(self, key: int) -> bool:
        return self.keys[key & 0xF]

    def pressed_keys(self) -> List[int]:
        return [key for key, down in enumerate(self.keys) if down]
