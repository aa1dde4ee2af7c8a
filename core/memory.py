from __future__ import annotations

from dataclasses import dataclass, field


MEMORY_SIZE = 4096
PROGRAM_START = 0x200


def clamp_u8(value: int) -> int:
    return value & 0xFF


@dataclass
class Memory:
    capacity: int = MEMORY_SIZE
    data: bytearray = field(default_factory=bytearray)
    program_size: int = 0

    def __post_init__(self) -> None:
        if not self.data:
            self.reset()
        self.capacity = len(self.data)

    def __len__(self) -> int:
        return self.capacity

    def __getitem__(self, addr: int) -> int:
        return self.data[addr]

    def __setitem__(self, addr: int, value: int) -> None:
        self.data[addr] = clamp_u8(value)

    def reset(self) -> None:
        self.data = bytearray(self.capacity)
        self.program_size = 0

    @property
    def program_capacity(self) -> int:
        return self.capacity - PROGRAM_START

    def load_program(self, program: bytes) -> int:
        if len(program) > self.program_capacity:
            raise ValueError(
                f"Program of {len(program)} bytes does not fit in {self.program_capacity} bytes"
            )
        self.reset()
        self.data[PROGRAM_START : PROGRAM_START + len(program)] = program
        self.program_size = len(program)
        return self.program_size

    def read_bytes(self, addr: int, length: int) -> bytes:
        if addr < 0:
            return b""
        if addr + length > self.capacity:
            length = max(0, self.capacity - addr)
        return bytes(self.data[addr : addr + length])

    def read_word(self, addr: int) -> int:
        return (self.data[addr] << 8) | self.data[addr + 1]

    def write_nibble(self, addr: int, nibble: int, value: int) -> None:
        """Replace one of the four nibbles of the word at ``addr``.

        Nibbles are numbered high to low across the two bytes, so 0 and 1
        land in ``addr`` and 2 and 3 land in ``addr + 1``.
        """
        target = addr + nibble // 2
        byte = self.data[target]
        if nibble % 2 == 0:
            self.data[target] = (byte & 0x0F) | ((value & 0xF) << 4)
        else:
            self.data[target] = (byte & 0xF0) | (value & 0xF)

    def program_bytes(self) -> bytes:
        return self.read_bytes(PROGRAM_START, self.program_size)
