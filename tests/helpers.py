"""Instruction word builders for tests."""

from __future__ import annotations

import struct
from typing import Sequence

from afuc.decoding import Opcode


def hdr(opc: int, flush: bool = False) -> int:
    return ((opc | (0x20 if flush else 0)) & 0x3F) << 26


def alu_imm(opc: int, dst: int, src: int, uimm: int, flush: bool = False) -> int:
    return hdr(opc, flush) | (src << 21) | (dst << 16) | uimm


def movi(dst: int, uimm: int, shift: int = 0) -> int:
    return hdr(Opcode.MOVI) | (shift << 21) | (dst << 16) | uimm


def alu_reg(alu: int, dst: int, src1: int, src2: int, pad: int = 0) -> int:
    return (
        hdr(Opcode.ALU) | (src1 << 21) | (src2 << 16) | (dst << 11) | (pad << 5) | alu
    )


def control(opc: int, src1: int, src2: int, flags: int, uimm: int) -> int:
    return hdr(opc) | (src2 << 21) | (src1 << 16) | (flags << 12) | uimm


def branch(opc: int, src: int, bit_or_imm: int, ioff: int) -> int:
    return hdr(opc) | (src << 21) | (bit_or_imm << 16) | (ioff & 0xFFFF)


def call(uoff: int) -> int:
    return hdr(Opcode.CALL) | uoff


NOP = 0x00000000
RET = hdr(Opcode.RET)
WAITIN = hdr(Opcode.WIN)


def image(
    code: Sequence[int], jump_table: Sequence[int] = (), version: int = 0x12345678
) -> list[int]:
    return [version, len(code), *code, *jump_table]


def image_bytes(
    code: Sequence[int], jump_table: Sequence[int] = (), version: int = 0x12345678
) -> bytes:
    words = image(code, jump_table, version)
    return struct.pack(f"<{len(words)}I", *words)
