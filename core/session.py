from __future__ import annotations

from typing import Callable, List, Optional

from core.keypad import Keypad
from core.memory import PROGRAM_START, Memory
from core.model import KeyCommand, KeyEvent, TextSurface
from core.monitor import Monitor
from core.roms import RomImage, RomLibrary, RomLoadError


class PadSession:
    """Routes key events between the monitor, the keypad and the ROM library.

    Digits always press the interpreter keypad. Every event is offered to the
    monitor first; whatever it leaves unhandled drives ROM selection.
    """

    def __init__(self, roms: RomLibrary, memory: Optional[Memory] = None, surface: Optional[TextSurface] = None) -> None:
        self.roms = roms
        self.memory = memory if memory is not None else Memory()
        self.keypad = Keypad()
        self.monitor = Monitor(self.memory, surface)
        self.image: Optional[RomImage] = None
        self._log_callbacks: List[Callable[[str], None]] = []
        self._load_callbacks: List[Callable[[RomImage], None]] = []

    def on_log(self, callback: Callable[[str], None]) -> None:
        self._log_callbacks.append(callback)

    def on_load(self, callback: Callable[[RomImage], None]) -> None:
        self._load_callbacks.append(callback)

    def log(self, message: str) -> None:
        for callback in list(self._log_callbacks):
            callback(message)

    def press(self, symbol: Optional[KeyEvent]) -> None:
        if symbol is None:
            return
        if isinstance(symbol, int):
            self.keypad.press(symbol)
        self.dispatch(symbol)

    def release(self, symbol: Optional[KeyEvent]) -> None:
        if isinstance(symbol, int):
            self.keypad.release(symbol)

    def dispatch(self, symbol: KeyEvent) -> bool:
        if self.monitor.handle_event(symbol):
            return True
        if symbol == KeyCommand.MOVE_LEFT:
            return self.roms.select_previous()
        if symbol == KeyCommand.MOVE_RIGHT:
            return self.roms.select_next()
        if symbol == KeyCommand.COMMIT:
            return self.load_current_rom()
        return False

    def load_current_rom(self) -> bool:
        if self.monitor.active:
            self.log("Leave the monitor before loading a ROM.")
            return False
        try:
            image = self.roms.load_current(self.memory)
        except RomLoadError as exc:
            self.log(f"Failed to load: {exc.message}")
            return False
        self.image = image
        self.keypad.reset()
        self.monitor.cursor.move_to(PROGRAM_START)
        for callback in list(self._load_callbacks):
            callback(image)
        self.log(f"Loaded {image.path.name} ({len(image.program)} bytes)")
        return True
