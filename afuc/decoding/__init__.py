"""
Typed decoding of afuc instruction words.

``decode`` maps any 32-bit word to a ``DecodedInstr``; the opcode header is
read first because it decides which bits form which operand.
"""

from .bind import (  # noqa: F401
    Bit,
    DecodedInstr,
    Disp16,
    Family,
    Opcode,
    Reg,
    Target,
    UImm,
)
from .decode_map import ALU_NAMES, decode, split_header  # noqa: F401
from .rewrite import REWRITE_RULES, RewriteRule, apply_rewrites  # noqa: F401

__all__ = [
    "Bit",
    "DecodedInstr",
    "Disp16",
    "Family",
    "Opcode",
    "Reg",
    "Target",
    "UImm",
    "ALU_NAMES",
    "decode",
    "split_header",
    "REWRITE_RULES",
    "RewriteRule",
    "apply_rewrites",
]
