from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union


MAX_MNEMONIC_LENGTH = 16


@dataclass(frozen=True)
class Instruction:
    opcode: int
    mnemonic: str

    def __post_init__(self) -> None:
        if not 0 <= self.opcode <= 0xFFFF:
            raise ValueError(f"Opcode out of range: {self.opcode:#x}")
        if len(self.mnemonic) > MAX_MNEMONIC_LENGTH or not self.mnemonic.isascii():
            raise ValueError(f"Mnemonic does not fit: {self.mnemonic!r}")


@dataclass
class Cursor:
    address: int
    nibble: int = 0

    def move_to(self, address: int) -> None:
        self.address = address
        self.nibble = 0


class KeyCommand(Enum):
    MOVE_LEFT = "<"
    MOVE_RIGHT = ">"
    COMMIT = "G"
    TOGGLE = "M"


KeyEvent = Union[KeyCommand, int]


class TextSurface(Protocol):
    def draw_text(self, text: str, column: int, row: int, highlighted: bool) -> None:
        ...

    def clear(self) -> None:
        ...
