"""Listing text for decoded instructions.

Non-verbose output is meant to be fed back to an assembler. Verbose output
adds offsets, raw words and any bits the chosen mnemonic does not account
for, which is mostly useful while working out the encoding.
"""

from __future__ import annotations

from typing import Iterable, Iterator, List, Optional

from .analysis import ControlFlowLabels, LabelTable
from .constants import MIN_REG_ADDR, PSEUDO_REG_NAMES
from .decoding import ALU_NAMES, Bit, DecodedInstr, Family, UImm
from .errors import MissingLabel
from .jumptable import JumpTable
from .names import EnumNameResolver, NullNames, RegisterNameResolver
from .tokens import (
    TComment,
    TErr,
    TInstr,
    TInt,
    TLabel,
    TReg,
    TSep,
    TText,
    Token,
    asm_str,
)

JUMP_TABLE_RULE = ";" * 46
# Width of " lNN: " so unlabelled lines stay aligned.
LABEL_GUTTER = " " * 6


def reg_name(index: int) -> str:
    pseudo = PSEUDO_REG_NAMES.get(index)
    if pseudo is not None:
        return pseudo
    return f"${index:02x}"


class Renderer:
    def __init__(
        self,
        labels: ControlFlowLabels,
        jump_table: JumpTable,
        registers: Optional[RegisterNameResolver] = None,
        enums: Optional[EnumNameResolver] = None,
        verbose: bool = False,
        colors: bool = False,
    ) -> None:
        self.labels = labels
        self.jump_table = jump_table
        self.registers = registers if registers is not None else NullNames()
        self.enums = enums if enums is not None else NullNames()
        self.verbose = verbose
        self.colors = colors

    def _line(self, parts: List[Token]) -> str:
        return asm_str(parts, self.colors)

    def slot_name(self, slot: int) -> str:
        name = self.enums.lookup_enum(slot)
        return name if name is not None else f"UNKN{slot}"

    # ------------------------------------------------------------------ #
    # Whole listing
    # ------------------------------------------------------------------ #
    def render(self, instrs: Iterable[DecodedInstr]) -> Iterator[str]:
        for index, instr in enumerate(instrs):
            yield from self.render_instruction(index, instr)

    def render_instruction(self, index: int, instr: DecodedInstr) -> List[str]:
        lines: List[str] = []

        entry = self.jump_table.entries_at(index)
        if entry is not None:
            lines.append("")
            for slot in entry.slots:
                lines.append(self._line([TLabel(self.slot_name(slot)), TText(":")]))

        fidx = self.labels.function_labels.lookup(index)
        if fidx is not None:
            fn = self.labels.function_labels.name(fidx)
            lines.append(self._line([TLabel(fn), TText(":")]))

        parts: List[Token] = []
        lidx = self.labels.branch_labels.lookup(index)
        if lidx is not None:
            label = self.labels.branch_labels.name(lidx)
            parts += [TText(" "), TLabel(label), TText(": ")]
        else:
            parts.append(TText(LABEL_GUTTER))

        if self.verbose:
            parts.append(TText(f"\t{index:04x}: {instr.word:08x}  "))
        else:
            parts.append(TText("  "))

        if instr.flush:
            parts.append(TText("(f)"))

        parts += self.instruction_tokens(index, instr)
        lines.append(self._line(parts))
        return lines

    def render_jump_table(self) -> List[str]:
        lines = [JUMP_TABLE_RULE, "; JUMP TABLE"]
        for slot, offset in self.jump_table.slots():
            lines.append(f"{slot:3d} {slot:02x}: {offset:04x}   ; {self.slot_name(slot)}")
        return lines

    # ------------------------------------------------------------------ #
    # Operands
    # ------------------------------------------------------------------ #
    def _reg(self, instr: DecodedInstr, key: str) -> TReg:
        return TReg(reg_name(instr.reg(key).index))

    def _gpu_reg(self, value: int) -> List[Token]:
        if value < MIN_REG_ADDR:
            return []
        name = self.registers.lookup_register(value)
        if name is None:
            return []
        return [TComment(f"\t; {name}")]

    def _label_ref(self, table: LabelTable, target: int, index: int) -> List[Token]:
        label_id = table.lookup(target)
        if label_id is None:
            raise MissingLabel(table.kind, target, index)
        return [TText(" #"), TLabel(table.name(label_id))]

    def _unexpected(self, instr: DecodedInstr) -> List[Token]:
        if not self.verbose:
            return []
        return [
            TErr(f"  ({name}={value:02x})")
            for name, value in instr.ignored.items()
            if value
        ]

    def _src_bit(self, instr: DecodedInstr, flagged: int) -> List[Token]:
        # Bits 16-25 carry no operand for jump and call.
        if not self.verbose or not flagged:
            return []
        src = instr.ignored.get("src", 0)
        bit = instr.ignored.get("bit", 0)
        return [TErr(f"  (src={src:03x}, bit={bit:03x}) ")]

    def _raw(self, instr: DecodedInstr, note: str) -> List[Token]:
        return [TErr(f"[{instr.word:08x}]"), TText(f"  ; {note}")]

    # ------------------------------------------------------------------ #
    # Per-family text
    # ------------------------------------------------------------------ #
    def instruction_tokens(self, index: int, instr: DecodedInstr) -> List[Token]:
        family = instr.family
        if family is Family.NOP:
            return self._nop(instr)
        if family is Family.ALU_IMM:
            return self._alu_imm(instr)
        if family is Family.MOVE_IMM:
            return self._move_imm(instr)
        if family is Family.ALU_REG:
            return self._alu_reg(instr)
        if family is Family.CONTROL:
            return self._control(instr)
        if family is Family.BRANCH:
            return self._branch(index, instr)
        if family is Family.CALL:
            return self._call(index, instr)
        if family in (Family.RET, Family.WAIT):
            return [TInstr(instr.mnemonic)] + self._unexpected(instr)
        return self._unknown(instr)

    def _nop(self, instr: DecodedInstr) -> List[Token]:
        parts: List[Token] = []
        if instr.word != 0:
            parts += self._raw(instr, "")
        parts.append(TInstr("nop"))
        return parts

    def _alu_imm(self, instr: DecodedInstr) -> List[Token]:
        uimm = instr.binds["uimm"]
        assert isinstance(uimm, UImm)
        parts: List[Token] = [TInstr(instr.mnemonic), TSep(" ")]
        parts += [self._reg(instr, "dst"), TSep(", ")]
        if "src" in instr.binds:
            parts += [self._reg(instr, "src"), TSep(", ")]
        parts.append(TInt(f"0x{uimm.value:04x}"))
        parts += self._gpu_reg(uimm.value)
        return parts + self._unexpected(instr)

    def _move_imm(self, instr: DecodedInstr) -> List[Token]:
        uimm = instr.binds["uimm"]
        shift = instr.binds["shift"]
        assert isinstance(uimm, UImm) and isinstance(shift, UImm)
        parts: List[Token] = [
            TInstr(instr.mnemonic),
            TSep(" "),
            self._reg(instr, "dst"),
            TSep(", "),
            TInt(f"0x{uimm.value:04x}"),
        ]
        if shift.value:
            parts += [TText(" << "), TInt(str(shift.value))]
        parts += self._gpu_reg(uimm.value << shift.value)
        return parts

    def _alu_reg(self, instr: DecodedInstr) -> List[Token]:
        alu = instr.binds["alu"]
        assert isinstance(alu, UImm)
        parts: List[Token]
        if instr.rewrite is None and alu.value not in ALU_NAMES:
            parts = self._raw(instr, f"{instr.mnemonic} ")
        else:
            parts = [TInstr(instr.mnemonic), TSep(" ")]
        parts.append(self._reg(instr, "dst"))
        if "src1" in instr.binds:
            parts += [TSep(", "), self._reg(instr, "src1")]
        parts += [TSep(", "), self._reg(instr, "src2")]
        return parts + self._unexpected(instr)

    def _control(self, instr: DecodedInstr) -> List[Token]:
        flags = instr.binds["flags"]
        uimm = instr.binds["uimm"]
        assert isinstance(flags, UImm) and isinstance(uimm, UImm)
        return [
            TInstr(instr.mnemonic),
            TSep(" "),
            self._reg(instr, "src1"),
            TSep(", "),
            self._reg(instr, "src2"),
            TSep(", "),
            TInt(f"0x{flags.value:x}"),
            TSep(", "),
            TInt(f"0x{uimm.value:03x}"),
        ]

    def _branch(self, index: int, instr: DecodedInstr) -> List[Token]:
        target = instr.branch_target(index)
        assert target is not None
        parts: List[Token] = [TInstr(instr.mnemonic)]
        if "src" in instr.binds:
            parts += [TSep(" "), self._reg(instr, "src"), TSep(", ")]
            imm = instr.binds.get("imm")
            bit = instr.binds.get("bit")
            if isinstance(imm, UImm):
                parts.append(TInt(f"0x{imm.value:x}"))
            elif isinstance(bit, Bit):
                parts.append(TText(f"b{bit.index}"))
            parts.append(TSep(","))
        else:
            parts += self._src_bit(instr, instr.ignored.get("bit", 0))
        parts += self._label_ref(self.labels.branch_labels, target, index)
        if self.verbose:
            ioff = target - index
            parts.append(TText(f" (#{ioff}, {target:04x})"))
        return parts

    def _call(self, index: int, instr: DecodedInstr) -> List[Token]:
        target = instr.call_target()
        assert target is not None
        parts: List[Token] = [TInstr(instr.mnemonic)]
        parts += self._label_ref(self.labels.function_labels, target, index)
        if self.verbose:
            parts.append(TText(f" ({target:04x})"))
        stray = instr.ignored.get("src", 0) | instr.ignored.get("bit", 0)
        return parts + self._src_bit(instr, stray)

    def _unknown(self, instr: DecodedInstr) -> List[Token]:
        parts = self._raw(instr, f"{instr.mnemonic} ")
        parts += [self._reg(instr, "dst"), TSep(", "), self._reg(instr, "src")]
        parts += self._gpu_reg(instr.word & 0xFFFF)
        return parts
