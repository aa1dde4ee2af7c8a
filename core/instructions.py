from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional


@dataclass(frozen=True)
class InstructionDef:
    pattern: str
    syntax: str
    summary: str
    description: str
    example: int

    @property
    def mnemonic(self) -> str:
        return self.syntax.split()[0]

    def matches(self, opcode: int) -> bool:
        # Anything other than an uppercase hex digit is a wildcard nibble.
        for index, char in enumerate(self.pattern):
            nibble = (opcode >> (12 - 4 * index)) & 0xF
            if char in "0123456789ABCDEF" and int(char, 16) != nibble:
                return False
        return True


INSTRUCTION_SET: Dict[str, InstructionDef] = {}


def register_instruction_def(defn: InstructionDef) -> None:
    INSTRUCTION_SET[defn.pattern] = defn


def get_instruction_defs() -> List[InstructionDef]:
    return list(INSTRUCTION_SET.values())


def find_instruction_def(opcode: int) -> Optional[InstructionDef]:
    for defn in INSTRUCTION_SET.values():
        if defn.matches(opcode):
            return defn
    return None


_DEFS = [
    ("0?CN", "scd N", "Scroll down", "Scroll the display down by N pixel rows.", 0x00C4),
    ("00E0", "cls", "Clear screen", "Clear the display.", 0x00E0),
    ("00EE", "ret", "Return", "Return from a subroutine.", 0x00EE),
    ("00FB", "scr", "Scroll right", "Scroll the display right by 4 pixels.", 0x00FB),
    ("00FC", "scl", "Scroll left", "Scroll the display left by 4 pixels.", 0x00FC),
    ("00FD", "exit", "Exit", "Stop the interpreter.", 0x00FD),
    ("00FE", "lores", "Low resolution", "Switch to the 64x32 display mode.", 0x00FE),
    ("00FF", "hires", "High resolution", "Switch to the 128x64 display mode.", 0x00FF),
    ("1NNN", "jp NNN", "Jump", "Set PC to NNN.", 0x1234),
    ("2NNN", "call NNN", "Call", "Push PC and jump to the subroutine at NNN.", 0x2456),
    ("3XKK", "se vX,KK", "Skip if equal", "Skip the next instruction if VX == KK.", 0x3A12),
    ("4XKK", "sne vX,KK", "Skip if not equal", "Skip the next instruction if VX != KK.", 0x4B34),
    ("5XY?", "se vX,vY", "Skip if registers equal", "Skip the next instruction if VX == VY.", 0x5120),
    ("6XKK", "ld vX,KK", "Load immediate", "Set VX = KK.", 0x610A),
    ("7XKK", "add vX,KK", "Add immediate", "Set VX = VX + KK without carry.", 0x7205),
    ("8XY0", "ld vX,vY", "Move", "Set VX = VY.", 0x8120),
    ("8XY1", "or vX,vY", "Or", "Set VX = VX | VY.", 0x8121),
    ("8XY2", "and vX,vY", "And", "Set VX = VX & VY.", 0x8122),
    ("8XY3", "xor vX,vY", "Xor", "Set VX = VX ^ VY.", 0x8123),
    ("8XY4", "add vX,vY", "Add", "Set VX = VX + VY, VF = carry.", 0x8124),
    ("8XY5", "sub vX,vY", "Subtract", "Set VX = VX - VY, VF = not borrow.", 0x8125),
    ("8XY6", "shr vX,vY", "Shift right", "Set VX = VY >> 1, VF = shifted-out bit.", 0x8126),
    ("8XY7", "subn vX,vY", "Subtract reverse", "Set VX = VY - VX, VF = not borrow.", 0x8517),
    ("8XYE", "shl vX,vY", "Shift left", "Set VX = VY << 1, VF = shifted-out bit.", 0x812E),
    ("9XY?", "sne vX,vY", "Skip if registers differ", "Skip the next instruction if VX != VY.", 0x9340),
    ("ANNN", "ld i NNN", "Load index", "Set I = NNN.", 0xA2F0),
    ("BNNN", "jp v0,NNN", "Jump relative", "Set PC to NNN + V0.", 0xB300),
    ("CXKK", "rnd vX,KK", "Random", "Set VX = random byte & KK.", 0xC3FF),
    ("DXYN", "drw vX,vY,N", "Draw", "Draw an N-row sprite from I at (VX, VY), VF = collision.", 0xD123),
    ("EX9E", "skp vX", "Skip if key", "Skip the next instruction if key VX is pressed.", 0xE49E),
    ("EXA1", "sknp vX", "Skip if not key", "Skip the next instruction if key VX is not pressed.", 0xE4A1),
    ("FX07", "ld vX,dt", "Read delay timer", "Set VX = delay timer.", 0xF507),
    ("FX0A", "ld vX,k", "Wait for key", "Block until a key is pressed, store it in VX.", 0xF50A),
    ("FX15", "ld dt,vX", "Set delay timer", "Set delay timer = VX.", 0xF515),
    ("FX18", "ld st,vX", "Set sound timer", "Set sound timer = VX.", 0xF518),
    ("FX1E", "add i,vX", "Add to index", "Set I = I + VX.", 0xF51E),
    ("FX29", "ld f,vX", "Font character", "Set I to the font sprite for digit VX.", 0xF529),
    ("FX33", "ld b,vX", "BCD", "Store the BCD digits of VX at I, I+1, I+2.", 0xF533),
    ("FX55", "ld [i],vX", "Store registers", "Store V0..VX in memory starting at I.", 0xF555),
    ("FX65", "ld vX,[i]", "Load registers", "Load V0..VX from memory starting at I.", 0xF565),
]

for _pattern, _syntax, _summary, _description, _example in _DEFS:
    register_instruction_def(
        InstructionDef(
            pattern=_pattern,
            syntax=_syntax,
            summary=_summary,
            description=_description,
            example=_example,
        )
    )
