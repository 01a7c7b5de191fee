from __future__ import annotations

from typing import Callable, Dict, Tuple

from ..constants import (
    HDR_FLUSH_BIT,
    HDR_FLUSH_LIMIT,
    HDR_OPC_MASK,
    HDR_SHIFT,
    WORD_MASK,
)
from .bind import Bit, DecodedInstr, Disp16, Family, Opcode, Reg, Target, UImm
from .rewrite import apply_rewrites

DecoderFunc = Callable[[int, int, bool], DecodedInstr]

ALU_NAMES: Dict[int, str] = {
    Opcode.ADD: "add",
    Opcode.ADDHI: "addhi",
    Opcode.SUB: "sub",
    Opcode.SUBHI: "subhi",
    Opcode.AND: "and",
    Opcode.OR: "or",
    Opcode.XOR: "xor",
    Opcode.NOT: "not",
    Opcode.SHL: "shl",
    Opcode.USHR: "ushr",
    Opcode.ISHR: "ishr",
    Opcode.ROT: "rot",
    Opcode.MUL8: "mul8",
    Opcode.MIN: "min",
    Opcode.MAX: "max",
    Opcode.CMP: "cmp",
}

# Operators that ignore their first source.
UNARY_ALU_OPS = frozenset({Opcode.NOT})


def _bits(word: int, lo: int, width: int) -> int:
    return (word >> lo) & ((1 << width) - 1)


def _signed16(value: int) -> int:
    return value - 0x10000 if value & 0x8000 else value


def split_header(word: int) -> Tuple[int, bool]:
    """Return ``(opcode, flush)`` from the 6-bit header of ``word``."""
    hdr = word >> HDR_SHIFT
    if hdr < HDR_FLUSH_LIMIT:
        return hdr & HDR_OPC_MASK, bool(hdr & HDR_FLUSH_BIT)
    return hdr, False


def _dec_nop(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.NOP,
        mnemonic="nop",
        flush=flush,
    )


def _dec_alu_imm(word: int, opcode: int, flush: bool) -> DecodedInstr:
    src = _bits(word, 21, 5)
    ignored: Dict[str, int] = {}
    binds: Dict[str, object] = {
        "dst": Reg(_bits(word, 16, 5)),
        "uimm": UImm(_bits(word, 0, 16), 16),
    }
    if opcode in UNARY_ALU_OPS:
        ignored["src"] = src
    else:
        binds["src"] = Reg(src)
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.ALU_IMM,
        mnemonic=ALU_NAMES[opcode],
        flush=flush,
        binds=binds,
        ignored=ignored,
    )


def _dec_movi(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.MOVE_IMM,
        mnemonic="mov",
        flush=flush,
        binds={
            "dst": Reg(_bits(word, 16, 5)),
            "uimm": UImm(_bits(word, 0, 16), 16),
            "shift": UImm(_bits(word, 21, 5), 5),
        },
    )


def _dec_alu_reg(word: int, opcode: int, flush: bool) -> DecodedInstr:
    alu = _bits(word, 0, 5)
    src1 = _bits(word, 21, 5)
    binds: Dict[str, object] = {
        "alu": UImm(alu, 5),
        "dst": Reg(_bits(word, 11, 5)),
        "src2": Reg(_bits(word, 16, 5)),
    }
    ignored = {"pad": _bits(word, 5, 6)}
    if alu in UNARY_ALU_OPS:
        ignored["src1"] = src1
    else:
        binds["src1"] = Reg(src1)
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.ALU_REG,
        # Unnamed operators keep a synthetic mnemonic; the renderer shows
        # the raw word next to it.
        mnemonic=ALU_NAMES.get(alu, f"alu{alu:02x}"),
        flush=flush,
        binds=binds,
        ignored=ignored,
    )


def _dec_control(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.CONTROL,
        mnemonic="cwrite" if opcode == Opcode.CWRITE else "cread",
        flush=flush,
        binds={
            "src1": Reg(_bits(word, 16, 5)),
            "src2": Reg(_bits(word, 21, 5)),
            "flags": UImm(_bits(word, 12, 4), 4),
            "uimm": UImm(_bits(word, 0, 12), 12),
        },
    )


def _dec_branch(word: int, opcode: int, flush: bool) -> DecodedInstr:
    bit_or_imm = _bits(word, 16, 5)
    binds: Dict[str, object] = {
        "src": Reg(_bits(word, 21, 5)),
        "ioff": Disp16(_signed16(_bits(word, 0, 16))),
    }
    if opcode in (Opcode.BRNEI, Opcode.BREQI):
        binds["imm"] = UImm(bit_or_imm, 5)
    else:
        binds["bit"] = Bit(bit_or_imm)
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.BRANCH,
        mnemonic="brne" if opcode in (Opcode.BRNEI, Opcode.BRNEB) else "breq",
        flush=flush,
        binds=binds,
    )


def _dec_call(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.CALL,
        mnemonic="call",
        flush=flush,
        binds={"uoff": Target(_bits(word, 0, 26))},
        # Call targets beyond 16 bits are suspicious; report the bits that
        # overlap the branch src/bit fields.
        ignored={"src": _bits(word, 21, 5), "bit": _bits(word, 16, 5)},
    )


def _dec_ret(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word, opcode=opcode, family=Family.RET, mnemonic="ret", flush=flush
    )


def _dec_waitin(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.WAIT,
        mnemonic="waitin",
        flush=flush,
        ignored={"pad": _bits(word, 0, 26)},
    )


def _dec_unknown(word: int, opcode: int, flush: bool) -> DecodedInstr:
    return DecodedInstr(
        word=word,
        opcode=opcode,
        family=Family.UNKNOWN,
        mnemonic=f"op{opcode:02x}",
        flush=flush,
        binds={
            "dst": Reg(_bits(word, 16, 5)),
            "src": Reg(_bits(word, 21, 5)),
            "uimm": UImm(_bits(word, 0, 16), 16),
        },
    )


DECODERS: Dict[int, DecoderFunc] = {
    Opcode.NOP: _dec_nop,
    **{opc: _dec_alu_imm for opc in ALU_NAMES},
    Opcode.MOVI: _dec_movi,
    Opcode.ALU: _dec_alu_reg,
    Opcode.CWRITE: _dec_control,
    Opcode.CREAD: _dec_control,
    Opcode.BRNEI: _dec_branch,
    Opcode.BREQI: _dec_branch,
    Opcode.BRNEB: _dec_branch,
    Opcode.BREQB: _dec_branch,
    Opcode.RET: _dec_ret,
    Opcode.CALL: _dec_call,
    Opcode.WIN: _dec_waitin,
}


def decode(word: int) -> DecodedInstr:
    """Decode one instruction word.

    Every 32-bit value decodes to something: bit patterns with no known
    opcode come back as the unknown family carrying the raw word.
    """
    if not 0 <= word <= WORD_MASK:
        raise ValueError(f"Not a 32-bit word: {word:#x}")
    opcode, flush = split_header(word)
    decoder = DECODERS.get(opcode, _dec_unknown)
    return apply_rewrites(decoder(word, opcode, flush))
