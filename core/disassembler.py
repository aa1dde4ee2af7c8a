from __future__ import annotations

from typing import Callable, Dict, List, Sequence

from core.model import Instruction


FIXED_MNEMONICS: Dict[int, str] = {
    0x00E0: "cls",
    0x00EE: "ret",
    0x00FB: "scr",
    0x00FC: "scl",
    0x00FD: "exit",
    0x00FE: "lores",
    0x00FF: "hires",
}

ALU_MNEMONICS: Dict[int, str] = {
    0x0: "ld",
    0x1: "or",
    0x2: "and",
    0x3: "xor",
    0x4: "add",
    0x5: "sub",
    0x6: "shr",
    0x7: "subn",
    0xE: "shl",
}

KEY_FORMATS: Dict[int, str] = {
    0x9E: "skp v{x:X}",
    0xA1: "sknp v{x:X}",
}

MISC_FORMATS: Dict[int, str] = {
    0x07: "ld v{x:X},dt",
    0x0A: "ld v{x:X},k",
    0x15: "ld dt,v{x:X}",
    0x18: "ld st,v{x:X}",
    0x1E: "add i,v{x:X}",
    0x29: "ld f,v{x:X}",
    0x33: "ld b,v{x:X}",
    0x55: "ld [i],v{x:X}",
    0x65: "ld v{x:X},[i]",
}


def _x(hi: int) -> int:
    return hi & 0xF


def _y(lo: int) -> int:
    return (lo >> 4) & 0xF


def _nnn(hi: int, lo: int) -> int:
    return ((hi << 8) | lo) & 0xFFF


def _decode_system(hi: int, lo: int) -> str:
    opcode = (hi << 8) | lo
    fixed = FIXED_MNEMONICS.get(opcode)
    if fixed is not None:
        return fixed
    if lo & 0xF0 == 0xC0:
        return f"scd {lo & 0xF:X}"
    return ""


def _decode_alu(hi: int, lo: int) -> str:
    name = ALU_MNEMONICS.get(lo & 0xF)
    if name is None:
        return ""
    return f"{name} v{_x(hi):X},v{_y(lo):X}"


def _decode_keys(hi: int, lo: int) -> str:
    fmt = KEY_FORMATS.get(lo)
    return fmt.format(x=_x(hi)) if fmt else ""


def _decode_misc(hi: int, lo: int) -> str:
    fmt = MISC_FORMATS.get(lo)
    return fmt.format(x=_x(hi)) if fmt else ""


FAMILY_DECODERS: Dict[int, Callable[[int, int], str]] = {
    0x0: _decode_system,
    0x1: lambda hi, lo: f"jp {_nnn(hi, lo):03X}",
    0x2: lambda hi, lo: f"call {_nnn(hi, lo):03X}",
    0x3: lambda hi, lo: f"se v{_x(hi):X},{lo:02X}",
    0x4: lambda hi, lo: f"sne v{_x(hi):X},{lo:02X}",
    0x5: lambda hi, lo: f"se v{_x(hi):X},v{_y(lo):X}",
    0x6: lambda hi, lo: f"ld v{_x(hi):X},{lo:02X}",
    0x7: lambda hi, lo: f"add v{_x(hi):X},{lo:02X}",
    0x8: _decode_alu,
    0x9: lambda hi, lo: f"sne v{_x(hi):X},v{_y(lo):X}",
    0xA: lambda hi, lo: f"ld i {_nnn(hi, lo):03X}",
    0xB: lambda hi, lo: f"jp v0,{_nnn(hi, lo):03X}",
    0xC: lambda hi, lo: f"rnd v{_x(hi):X},{lo:02X}",
    0xD: lambda hi, lo: f"drw v{_x(hi):X},v{_y(lo):X},{lo & 0xF:X}",
    0xE: _decode_keys,
    0xF: _decode_misc,
}


def decode(memory: Sequence[int], address: int) -> str:
    """Return the mnemonic for the instruction word at ``address``.

    Only ``memory[address]`` and ``memory[address + 1]`` are read. Encodings
    with no assigned instruction decode to an empty string; this never raises
    for an even address inside memory.
    """
    hi = memory[address] & 0xFF
    lo = memory[address + 1] & 0xFF
    return FAMILY_DECODERS[hi >> 4](hi, lo)


def disassemble(memory: Sequence[int], address: int) -> Instruction:
    opcode = ((memory[address] & 0xFF) << 8) | (memory[address + 1] & 0xFF)
    return Instruction(opcode=opcode, mnemonic=decode(memory, address))


def listing(memory: Sequence[int], start: int, length: int) -> List[str]:
    lines: List[str] = []
    end = min(start + length, len(memory) - 1)
    for addr in range(start, end, 2):
        instr = disassemble(memory, addr)
        lines.append(f"{addr:04X}: {instr.opcode:04X} {instr.mnemonic}".rstrip())
    return lines
