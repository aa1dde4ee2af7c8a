from __future__ import annotations

from typing import Callable, List, Optional

from core.disassembler import decode
from core.memory import PROGRAM_START, Memory
from core.model import Cursor, KeyCommand, KeyEvent, TextSurface


WINDOW_ROWS = 5
CURSOR_ROW = 1
ADDRESS_COLUMN = 0
HEX_COLUMN = 6
MNEMONIC_COLUMN = 12


class Monitor:
    """Inspection mode over interpreter memory.

    While active, every key event is consumed here: the arrows move the
    cursor one word at a time and hex digits overwrite the nibble under the
    cursor. While inactive only the toggle command is handled; everything
    else is left for the host to route to the interpreter keypad.
    """

    def __init__(self, memory: Memory, surface: Optional[TextSurface] = None) -> None:
        self.memory = memory
        self.surface = surface
        self.active = False
        self.cursor = Cursor(PROGRAM_START)
        self._commit_callbacks: List[Callable[[Cursor], None]] = []
        self._mode_callbacks: List[Callable[[bool], None]] = []
        self._memory_callbacks: List[Callable[[int], None]] = []

    @property
    def last_address(self) -> int:
        return len(self.memory) - 2

    def on_commit(self, callback: Callable[[Cursor], None]) -> None:
        self._commit_callbacks.append(callback)

    def on_mode_change(self, callback: Callable[[bool], None]) -> None:
        self._mode_callbacks.append(callback)

    def on_memory_change(self, callback: Callable[[int], None]) -> None:
        self._memory_callbacks.append(callback)

    def handle_event(self, event: KeyEvent) -> bool:
        if event == KeyCommand.TOGGLE:
            if self.active:
                self.deactivate()
            else:
                self.activate()
            return True
        if not self.active:
            return False
        if event == KeyCommand.MOVE_LEFT:
            self.move_left()
        elif event == KeyCommand.MOVE_RIGHT:
            self.move_right()
        elif event == KeyCommand.COMMIT:
            self.commit()
        else:
            self.write_digit(event)
        return True

    def activate(self) -> None:
        self.active = True
        self.cursor.move_to(PROGRAM_START)
        self._emit_mode_change()
        self.render()

    def deactivate(self) -> None:
        self.active = False
        if self.surface is not None:
            self.surface.clear()
        self._emit_mode_change()

    def move_left(self) -> None:
        if self.cursor.address - 2 < PROGRAM_START:
            return
        self.cursor.move_to(self.cursor.address - 2)
        self.render()

    def move_right(self) -> None:
        if self.cursor.address + 2 > self.last_address:
            return
        self.cursor.move_to(self.cursor.address + 2)
        self.render()

    def write_digit(self, digit: int) -> None:
        if isinstance(digit, bool) or not isinstance(digit, int) or not 0 <= digit <= 0xF:
            raise ValueError(f"Not a hex digit: {digit!r}")
        address = self.cursor.address
        self.memory.write_nibble(address, self.cursor.nibble, digit)
        self.cursor.nibble += 1
        if self.cursor.nibble > 3:
            # the last word keeps the cursor, only the nibble wraps
            if address + 2 <= self.last_address:
                self.cursor.move_to(address + 2)
            else:
                self.cursor.nibble = 0
        for callback in list(self._memory_callbacks):
            callback(address)
        self.render()

    def commit(self) -> None:
        cursor = Cursor(self.cursor.address, self.cursor.nibble)
        for callback in list(self._commit_callbacks):
            callback(cursor)

    def window_addresses(self) -> List[int]:
        first = self.cursor.address - 2 * CURSOR_ROW
        return [first + 2 * row for row in range(WINDOW_ROWS)]

    def render(self, surface: Optional[TextSurface] = None) -> None:
        target = surface if surface is not None else self.surface
        if target is None or not self.active:
            return
        target.clear()
        for row, addr in enumerate(self.window_addresses()):
            if addr < 0 or addr > self.last_address:
                continue
            target.draw_text(f"{addr:04X}:", ADDRESS_COLUMN, row, False)
            word = f"{self.memory[addr]:02X}{self.memory[addr + 1]:02X}"
            for n, char in enumerate(word):
                highlighted = row == CURSOR_ROW and n == self.cursor.nibble
                target.draw_text(char, HEX_COLUMN + n, row, highlighted)
            target.draw_text(decode(self.memory, addr), MNEMONIC_COLUMN, row, False)

    def _emit_mode_change(self) -> None:
        for callback in list(self._mode_callbacks):
            callback(self.active)
