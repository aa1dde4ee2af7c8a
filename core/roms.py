from __future__ import annotations

import struct
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from core.memory import Memory


DEFAULT_EXTENSIONS = (".ch8", ".ec8")

# .ec8 images start with the interpreter's options block: seventeen
# little-endian 32-bit ints, the first of which is the tickrate.
EC8_SUFFIX = ".ec8"
EC8_HEADER_SIZE = 17 * 4


class RomLoadError(Exception):
    def __init__(self, message: str, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


@dataclass(frozen=True)
class RomImage:
    path: Path
    program: bytes
    tickrate: Optional[int] = None


def read_rom(path: Path) -> RomImage:
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise RomLoadError(f"Failed to read {path.name}: {exc.strerror or exc}", path) from exc
    if path.suffix.lower() != EC8_SUFFIX:
        return RomImage(path=path, program=data)
    if len(data) < EC8_HEADER_SIZE:
        raise RomLoadError(f"{path.name} is shorter than its {EC8_HEADER_SIZE}-byte options header", path)
    tickrate = struct.unpack_from("<i", data, 0)[0]
    return RomImage(path=path, program=data[EC8_HEADER_SIZE:], tickrate=tickrate)


class RomLibrary:
    def __init__(self, directory: Path | str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        self.directory = Path(directory).expanduser().resolve()
        self.extensions = {ext.lower() for ext in extensions}
        self.entries: List[Path] = []
        self.current_index = 0
        self._callbacks: List[Callable[[Optional[Path]], None]] = []
        self.refresh()

    def on_change(self, callback: Callable[[Optional[Path]], None]) -> None:
        self._callbacks.append(callback)

    def _emit_change(self) -> None:
        for callback in list(self._callbacks):
            callback(self.current)

    @property
    def current(self) -> Optional[Path]:
        if 0 <= self.current_index < len(self.entries):
            return self.entries[self.current_index]
        return None

    def refresh(self) -> List[Path]:
        previous = self.current
        if self.directory.is_dir():
            self.entries = sorted(
                (path for path in self.directory.iterdir() if path.is_file() and path.suffix.lower() in self.extensions),
                key=lambda path: path.name.lower(),
            )
        else:
            self.entries = []
        if previous in self.entries:
            self.current_index = self.entries.index(previous)
        else:
            self.current_index = 0
        return self.entries

    def set_directory(self, directory: Path | str) -> None:
        self.directory = Path(directory).expanduser().resolve()
        self.refresh()
        self._emit_change()

    def select(self, name: str) -> bool:
        for index, path in enumerate(self.entries):
            if path.name == name:
                self.current_index = index
                self._emit_change()
                return True
        return False

    def select_next(self) -> bool:
        if self.current_index >= len(self.entries) - 1:
            return False
        self.current_index += 1
        self._emit_change()
        return True

    def select_previous(self) -> bool:
        if self.current_index <= 0:
            return False
        self.current_index -= 1
        self._emit_change()
        return True

    def load_current(self, memory: Memory) -> RomImage:
        path = self.current
        if path is None:
            raise RomLoadError(f"No ROM files in {self.directory}")
        image = read_rom(path)
        try:
            memory.load_program(image.program)
        except ValueError as exc:
            raise RomLoadError(str(exc), path) from exc
        return image

    @staticmethod
    def display_name(path: Optional[Path]) -> str:
        return path.stem if path else "-"
