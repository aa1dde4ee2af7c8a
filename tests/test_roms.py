import struct
from pathlib import Path

import pytest

from core.memory import MEMORY_SIZE, PROGRAM_START, Memory
from core.roms import EC8_HEADER_SIZE, RomLibrary, RomLoadError, read_rom


def _make_library(tmp_path: Path) -> RomLibrary:
    (tmp_path / "pong.ch8").write_bytes(b"\x6a\x02\x6b\x0c")
    (tmp_path / "Breakout.CH8").write_bytes(b"\x00\xe0")
    (tmp_path / "tetris.ch8").write_bytes(b"\xa2\xb4")
    (tmp_path / "notes.txt").write_text("not a rom", encoding="utf-8")
    (tmp_path / "folder.ch8").mkdir()
    return RomLibrary(tmp_path)


def test_lists_matching_files_sorted(tmp_path: Path):
    library = _make_library(tmp_path)
    assert [path.name for path in library.entries] == ["Breakout.CH8", "pong.ch8", "tetris.ch8"]
    assert library.current.name == "Breakout.CH8"
    assert RomLibrary.display_name(library.current) == "Breakout"


def test_navigation_clamps_at_ends(tmp_path: Path):
    library = _make_library(tmp_path)
    seen = []
    library.on_change(seen.append)
    assert library.select_previous() is False
    assert library.select_next() is True
    assert library.select_next() is True
    assert library.select_next() is False
    assert library.current.name == "tetris.ch8"
    assert [path.name for path in seen] == ["pong.ch8", "tetris.ch8"]


def test_select_by_name(tmp_path: Path):
    library = _make_library(tmp_path)
    assert library.select("pong.ch8")
    assert library.current.name == "pong.ch8"
    assert not library.select("missing.ch8")


def test_load_current_into_memory(tmp_path: Path):
    library = _make_library(tmp_path)
    library.select("pong.ch8")
    memory = Memory()
    image = library.load_current(memory)
    assert len(image.program) == 4
    assert image.tickrate is None
    assert memory.read_bytes(PROGRAM_START, 4) == b"\x6a\x02\x6b\x0c"
    assert memory.program_size == 4


def test_load_rejects_oversized_rom(tmp_path: Path):
    (tmp_path / "huge.ch8").write_bytes(bytes(MEMORY_SIZE))
    library = RomLibrary(tmp_path)
    with pytest.raises(RomLoadError) as exc:
        library.load_current(Memory())
    assert exc.value.path.name == "huge.ch8"


def test_empty_directory_has_nothing_to_load(tmp_path: Path):
    library = RomLibrary(tmp_path / "missing")
    assert library.entries == []
    assert library.current is None
    assert RomLibrary.display_name(library.current) == "-"
    with pytest.raises(RomLoadError):
        library.load_current(Memory())


def test_refresh_keeps_selection(tmp_path: Path):
    library = _make_library(tmp_path)
    library.select("tetris.ch8")
    (tmp_path / "airplane.ch8").write_bytes(b"\x00\xe0")
    library.refresh()
    assert library.current.name == "tetris.ch8"


def test_custom_extensions(tmp_path: Path):
    (tmp_path / "demo.sc8").write_bytes(b"\x00\xff")
    (tmp_path / "pong.ch8").write_bytes(b"\x00\xe0")
    library = RomLibrary(tmp_path, extensions=(".ch8", ".SC8"))
    assert [path.name for path in library.entries] == ["demo.sc8", "pong.ch8"]


def _ec8_image(tickrate: int, program: bytes) -> bytes:
    header = struct.pack("<i", tickrate) + bytes(EC8_HEADER_SIZE - 4)
    return header + program


def test_ec8_header_is_skipped_and_tickrate_kept(tmp_path: Path):
    (tmp_path / "invaders.ec8").write_bytes(_ec8_image(20, b"\x12\x34"))
    library = RomLibrary(tmp_path)
    assert [path.name for path in library.entries] == ["invaders.ec8"]
    memory = Memory()
    image = library.load_current(memory)
    assert image.tickrate == 20
    assert image.program == b"\x12\x34"
    assert memory.read_bytes(PROGRAM_START, 2) == b"\x12\x34"
    assert memory.program_size == 2


def test_ec8_shorter_than_header_is_rejected(tmp_path: Path):
    path = tmp_path / "broken.ec8"
    path.write_bytes(b"\x01\x02")
    with pytest.raises(RomLoadError) as exc:
        read_rom(path)
    assert exc.value.path == path


def test_missing_file_is_reported(tmp_path: Path):
    with pytest.raises(RomLoadError):
        read_rom(tmp_path / "gone.ch8")
