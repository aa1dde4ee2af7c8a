import pytest

from core.memory import MEMORY_SIZE, PROGRAM_START, Memory


def test_default_memory_is_zeroed_and_sized():
    memory = Memory()
    assert len(memory) == MEMORY_SIZE
    assert memory.read_bytes(0, MEMORY_SIZE) == bytes(MEMORY_SIZE)
    assert memory.program_size == 0


def test_load_program_places_bytes_at_program_start():
    memory = Memory()
    memory[0x100] = 0x55
    size = memory.load_program(b"\x00\xe0\x12\x00")
    assert size == 4
    assert memory[0x100] == 0
    assert memory.read_word(PROGRAM_START) == 0x00E0
    assert memory.read_word(PROGRAM_START + 2) == 0x1200
    assert memory.program_bytes() == b"\x00\xe0\x12\x00"


def test_load_program_rejects_oversized_image():
    memory = Memory()
    with pytest.raises(ValueError):
        memory.load_program(bytes(MEMORY_SIZE - PROGRAM_START + 1))
    assert memory.load_program(bytes(MEMORY_SIZE - PROGRAM_START)) == MEMORY_SIZE - PROGRAM_START


def test_write_nibble_targets_each_quarter_of_word():
    memory = Memory()
    memory.write_nibble(0x300, 0, 0xA)
    memory.write_nibble(0x300, 1, 0xB)
    memory.write_nibble(0x300, 2, 0xC)
    memory.write_nibble(0x300, 3, 0xD)
    assert memory.read_word(0x300) == 0xABCD


def test_read_bytes_truncates_at_end():
    memory = Memory(capacity=16)
    assert len(memory.read_bytes(10, 10)) == 6
    assert memory.read_bytes(-1, 4) == b""


def test_setitem_masks_to_byte():
    memory = Memory()
    memory[0] = 0x1FF
    assert memory[0] == 0xFF
