"""Disassembler for Adreno CP ("afuc") microcode."""

from .analysis import ControlFlowAnalyzer, ControlFlowLabels, LabelTable, analyze
from .config import DisasmConfig, GpuVersion, load_config
from .decoding import DecodedInstr, Family, Opcode, decode
from .errors import (
    CapacityExceeded,
    DisasmError,
    InsufficientInput,
    JumpTableCapacityExceeded,
    LabelCapacityExceeded,
    MissingLabel,
    TruncatedInput,
    UnknownGpuVersion,
)
from .jumptable import JumpTable, JumpTableEntry, JumpTableResolver
from .names import NameDatabase, NullNames
from .program import Disassembly, Program, ProgramBuffer, disassemble
from .render import Renderer

__all__ = [
    "ControlFlowAnalyzer",
    "ControlFlowLabels",
    "LabelTable",
    "analyze",
    "DisasmConfig",
    "GpuVersion",
    "load_config",
    "DecodedInstr",
    "Family",
    "Opcode",
    "decode",
    "CapacityExceeded",
    "DisasmError",
    "InsufficientInput",
    "JumpTableCapacityExceeded",
    "LabelCapacityExceeded",
    "MissingLabel",
    "TruncatedInput",
    "UnknownGpuVersion",
    "JumpTable",
    "JumpTableEntry",
    "JumpTableResolver",
    "NameDatabase",
    "NullNames",
    "Disassembly",
    "Program",
    "ProgramBuffer",
    "disassemble",
    "Renderer",
]
