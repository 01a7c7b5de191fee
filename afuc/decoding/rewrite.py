"""Special-case mnemonics chosen from operand values.

Rules are checked in order and the first match wins. Both rest on the
observation that reading ``$00`` yields zero, which comes from studying
firmware rather than from documentation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Dict, Optional, Tuple

from ..constants import ZERO_REG
from .bind import DecodedInstr, Family, Opcode, Reg, UImm


@dataclass(frozen=True)
class RewriteRule:
    name: str
    predicate: Callable[[DecodedInstr], bool]
    rewrite: Callable[[DecodedInstr], DecodedInstr]


def _alu_op(instr: DecodedInstr) -> Optional[int]:
    alu = instr.binds.get("alu")
    return alu.value if isinstance(alu, UImm) else None


def _is_or_from_zero(instr: DecodedInstr) -> bool:
    # or $dst, $00, $src
    return (
        instr.family is Family.ALU_REG
        and _alu_op(instr) == Opcode.OR
        and instr.binds.get("src1") == Reg(ZERO_REG)
    )


def _as_mov(instr: DecodedInstr) -> DecodedInstr:
    binds = dict(instr.binds)
    src1 = binds.pop("src1")
    assert isinstance(src1, Reg)
    ignored: Dict[str, int] = dict(instr.ignored, src1=src1.index)
    return replace(instr, mnemonic="mov", binds=binds, ignored=ignored)


def _is_brneb_on_zero(instr: DecodedInstr) -> bool:
    # No bit of $00 is ever set, so "branch if bit clear" always branches.
    return (
        instr.family is Family.BRANCH
        and instr.opcode == Opcode.BRNEB
        and instr.binds.get("src") == Reg(ZERO_REG)
    )


def _as_jump(instr: DecodedInstr) -> DecodedInstr:
    binds = dict(instr.binds)
    src = binds.pop("src")
    bit = binds.pop("bit")
    assert isinstance(src, Reg)
    ignored = dict(instr.ignored, src=src.index, bit=getattr(bit, "index", 0))
    return replace(instr, mnemonic="jump", binds=binds, ignored=ignored)


REWRITE_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("or-zero-is-mov", _is_or_from_zero, _as_mov),
    RewriteRule("brne-zero-bit-is-jump", _is_brneb_on_zero, _as_jump),
)


def apply_rewrites(
    instr: DecodedInstr, rules: Tuple[RewriteRule, ...] = REWRITE_RULES
) -> DecodedInstr:
    for rule in rules:
        if rule.predicate(instr):
            return replace(rule.rewrite(instr), rewrite=rule.name)
    return instr
