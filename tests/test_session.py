from pathlib import Path

from core.memory import PROGRAM_START
from core.model import KeyCommand
from core.roms import RomLibrary
from core.session import PadSession


def _session(tmp_path: Path, surface=None) -> PadSession:
    (tmp_path / "alpha.ch8").write_bytes(b"\x00\xe0\x12\x00")
    (tmp_path / "beta.ch8").write_bytes(b"\x6a\x02")
    session = PadSession(RomLibrary(tmp_path), surface=surface)
    session.messages = []
    session.on_log(session.messages.append)
    return session


def test_commit_loads_selected_rom_when_monitor_is_off(tmp_path: Path):
    session = _session(tmp_path)
    loaded = []
    session.on_load(loaded.append)
    session.press(KeyCommand.MOVE_RIGHT)
    assert session.roms.current.name == "beta.ch8"
    session.press(KeyCommand.COMMIT)
    assert [image.path.name for image in loaded] == ["beta.ch8"]
    assert session.memory.read_bytes(PROGRAM_START, 2) == b"\x6a\x02"
    assert session.messages == ["Loaded beta.ch8 (2 bytes)"]


def test_arrows_move_the_cursor_not_the_selection_while_monitoring(tmp_path: Path):
    session = _session(tmp_path)
    session.press(KeyCommand.TOGGLE)
    session.press(KeyCommand.MOVE_RIGHT)
    assert session.roms.current.name == "alpha.ch8"
    assert session.monitor.cursor.address == PROGRAM_START + 2


def test_load_is_refused_while_monitoring(tmp_path: Path, surface):
    session = _session(tmp_path, surface)
    assert session.load_current_rom()
    session.press(KeyCommand.TOGGLE)
    session.press(KeyCommand.MOVE_RIGHT)
    session.press(0xA)
    session.roms.select("beta.ch8")
    before = session.memory.read_bytes(PROGRAM_START, 4)
    draws = list(surface.draws)

    assert session.load_current_rom() is False

    assert session.monitor.active
    assert session.memory.read_bytes(PROGRAM_START, 4) == before == b"\x00\xe0\xa2\x00"
    assert (session.monitor.cursor.address, session.monitor.cursor.nibble) == (PROGRAM_START + 2, 1)
    assert surface.draws == draws
    assert session.messages[-1] == "Leave the monitor before loading a ROM."


def test_load_resets_cursor_and_keypad(tmp_path: Path):
    session = _session(tmp_path)
    session.monitor.cursor.move_to(0x300)
    session.monitor.cursor.nibble = 2
    session.press(5)
    assert session.load_current_rom()
    assert (session.monitor.cursor.address, session.monitor.cursor.nibble) == (PROGRAM_START, 0)
    assert session.keypad.pressed_keys() == []
    assert session.image.path.name == "alpha.ch8"


def test_digits_press_the_keypad_when_monitor_is_off(tmp_path: Path):
    session = _session(tmp_path)
    session.press(7)
    assert session.keypad.pressed_keys() == [7]
    assert session.memory.read_bytes(PROGRAM_START, 2) == b"\x00\x00"
    session.release(7)
    assert session.keypad.pressed_keys() == []


def test_digits_edit_memory_and_press_keypad_while_monitoring(tmp_path: Path):
    session = _session(tmp_path)
    session.load_current_rom()
    session.press(KeyCommand.TOGGLE)
    session.press(0xB)
    assert session.keypad.is_pressed(0xB)
    assert session.memory[PROGRAM_START] == 0xB0
    session.release(0xB)
    assert not session.keypad.is_pressed(0xB)


def test_failed_load_is_logged(tmp_path: Path):
    session = PadSession(RomLibrary(tmp_path / "empty"))
    messages = []
    session.on_log(messages.append)
    assert session.load_current_rom() is False
    assert session.image is None
    assert messages and messages[0].startswith("Failed to load: No ROM files in")


def test_release_of_commands_is_ignored(tmp_path: Path):
    session = _session(tmp_path)
    session.release(KeyCommand.COMMIT)
    session.release(None)
    assert session.keypad.pressed_keys() == []
