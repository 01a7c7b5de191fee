"""Error types raised by the disassembler.

Soft conditions (unknown opcodes, unresolved names, branch targets outside
the listing) never raise; they degrade to a visible fallback in the output.
Everything here is a hard condition that stops the run.
"""

from __future__ import annotations


class DisasmError(Exception):
    pass


class InsufficientInput(DisasmError):
    """The buffer is too small to hold the header words."""

    def __init__(self, words: int, needed: int, what: str = "header") -> None:
        super().__init__(
            f"Insufficient input: {what} needs {needed} words, have {words}"
        )
        self.words = words
        self.needed = needed


class TruncatedInput(InsufficientInput):
    """The split point lies beyond the end of the buffer."""

    def __init__(self, words: int, needed: int) -> None:
        super().__init__(words, needed, what="code region")


class CapacityExceeded(DisasmError):
    pass


class LabelCapacityExceeded(CapacityExceeded):
    def __init__(self, kind: str, limit: int, offset: int) -> None:
        super().__init__(
            f"Too many {kind} labels (limit {limit}) registering offset {offset:#06x}"
        )
        self.kind = kind
        self.limit = limit
        self.offset = offset


class JumpTableCapacityExceeded(CapacityExceeded):
    def __init__(self, offset: int, limit: int) -> None:
        super().__init__(
            f"Jump-table destination {offset:#06x} has more than {limit} slots"
        )
        self.offset = offset
        self.limit = limit


class MissingLabel(DisasmError):
    """A branch or call target was never registered by the analysis pass."""

    def __init__(self, kind: str, offset: int, index: int) -> None:
        super().__init__(
            f"No {kind} label for target {offset:#06x} referenced at {index:#06x}"
        )
        self.kind = kind
        self.offset = offset
        self.index = index


class UnknownGpuVersion(DisasmError, ValueError):
    pass


__all__ = [
    "DisasmError",
    "InsufficientInput",
    "TruncatedInput",
    "CapacityExceeded",
    "LabelCapacityExceeded",
    "JumpTableCapacityExceeded",
    "MissingLabel",
    "UnknownGpuVersion",
]
