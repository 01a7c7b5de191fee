"""Shared constants for the afuc microcode disassembler.

Field positions and reserved register numbers are reverse-engineered from
captured firmware rather than taken from documentation; the test suite pins
the assumptions listed here.
"""

from enum import IntEnum
from typing import Dict

WORD_MASK = 0xFFFFFFFF

# Word 0 holds the version tag, word 1 the code/jump-table split point.
HEADER_WORDS = 2

# The 6-bit header lives in the top bits of every instruction word.
HDR_SHIFT = 26
# Headers below this value carry the flush flag in bit 5.
HDR_FLUSH_LIMIT = 0x30
HDR_FLUSH_BIT = 0x20
HDR_OPC_MASK = 0x1F

# Reading $00 always yields zero.
ZERO_REG = 0x00


class PseudoReg(IntEnum):
    """Reserved register indices with fixed names."""

    REM = 0x1C  # dwords remaining in the current packet
    ADDR = 0x1D
    ADDR2 = 0x1E  # unconfirmed
    DATA = 0x1F


PSEUDO_REG_NAMES: Dict[int, str] = {
    PseudoReg.REM: "$rem",
    PseudoReg.ADDR: "$addr",
    PseudoReg.ADDR2: "$addr2",
    PseudoReg.DATA: "$data",
}

# Immediates below this can't be GPU register addresses.
MIN_REG_ADDR = 0x100

# Number of jump-table slots read after the code region.
JUMP_TABLE_SLOTS = 0x7F
# Anything above this can't possibly be a PM4 type-3 packet id.
MAX_DISPATCH_CODE = 128
# Slot list length per jump-table destination.
MAX_ALIASES = 255
# Labels per kind.
MAX_LABELS = 0x512
