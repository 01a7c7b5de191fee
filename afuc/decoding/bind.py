from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Optional


class Opcode(IntEnum):
    NOP = 0x00
    ADD = 0x01  # add immediate
    ADDHI = 0x02  # add immediate (hi 32b of 64b)
    SUB = 0x03
    SUBHI = 0x04
    AND = 0x05
    OR = 0x06
    XOR = 0x07
    NOT = 0x08  # bitwise not of immediate, src ignored
    SHL = 0x09
    USHR = 0x0A
    ISHR = 0x0B
    ROT = 0x0C  # rotate left
    MUL8 = 0x0D
    MIN = 0x0E
    MAX = 0x0F
    CMP = 0x10
    MOVI = 0x11
    ALU = 0x13  # register form, operator in the low bits
    CWRITE = 0x15
    CREAD = 0x16
    BRNEI = 0x30  # branch if $src != imm
    BREQI = 0x31  # branch if $src == imm
    BRNEB = 0x32  # branch if bit clear
    BREQB = 0x33  # branch if bit set
    RET = 0x34
    CALL = 0x35
    WIN = 0x36  # wait for input


class Family(str, Enum):
    """Coarse instruction category; decides how the remaining bits are read."""

    NOP = "nop"
    ALU_IMM = "alu_imm"
    ALU_REG = "alu_reg"
    MOVE_IMM = "move_imm"
    CONTROL = "control"
    BRANCH = "branch"
    CALL = "call"
    RET = "ret"
    WAIT = "wait"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class Reg:
    index: int

    def __post_init__(self) -> None:
        if not 0 <= self.index <= 0x1F:
            raise ValueError(f"Reg out of range: {self.index:#x}")


@dataclass(frozen=True, slots=True)
class UImm:
    value: int
    width: int

    def __post_init__(self) -> None:
        if not 0 <= self.value < (1 << self.width):
            raise ValueError(f"UImm{self.width} out of range: {self.value:#x}")


@dataclass(frozen=True, slots=True)
class Bit:
    index: int


@dataclass(frozen=True, slots=True)
class Disp16:
    value: int  # signed

    def __post_init__(self) -> None:
        if not -0x8000 <= self.value <= 0x7FFF:
            raise ValueError(f"Disp16 out of range: {self.value}")

    def target(self, index: int) -> int:
        return index + self.value


@dataclass(frozen=True, slots=True)
class Target:
    offset: int  # absolute, in words from the start of the code region


@dataclass(frozen=True, slots=True)
class DecodedInstr:
    word: int
    opcode: int
    family: Family
    mnemonic: str
    flush: bool = False
    binds: Dict[str, object] = field(default_factory=dict)
    # Raw fields the chosen rendering leaves out; verbose output flags
    # any that are nonzero.
    ignored: Dict[str, int] = field(default_factory=dict)
    rewrite: Optional[str] = None

    def reg(self, key: str) -> Reg:
        value = self.binds[key]
        assert isinstance(value, Reg), f"Expected Reg for {key}, got {value!r}"
        return value

    def branch_target(self, index: int) -> Optional[int]:
        """Absolute target of a branch at ``index``; None for other families."""
        if self.family is not Family.BRANCH:
            return None
        disp = self.binds["ioff"]
        assert isinstance(disp, Disp16)
        return disp.target(index)

    def call_target(self) -> Optional[int]:
        if self.family is not Family.CALL:
            return None
        target = self.binds["uoff"]
        assert isinstance(target, Target)
        return target.offset
