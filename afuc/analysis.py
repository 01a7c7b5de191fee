"""Branch and call target discovery.

A single forward pass over the code region registers a label for every
branch and call target. The resulting tables are frozen and handed to the
renderer, which only queries them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .constants import MAX_LABELS
from .decoding import DecodedInstr
from .errors import LabelCapacityExceeded

logger = logging.getLogger(__name__)


class LabelTable:
    """Offset to label id mapping with first-seen numbering from 0."""

    def __init__(self, kind: str, prefix: str, limit: int = MAX_LABELS) -> None:
        self.kind = kind
        self.prefix = prefix
        self.limit = limit
        self._ids: Dict[int, int] = {}
        self._offsets: List[int] = []
        self._frozen = False

    def register(self, offset: int) -> int:
        existing = self._ids.get(offset)
        if existing is not None:
            return existing
        if self._frozen:
            raise RuntimeError(f"{self.kind} label table is frozen")
        if len(self._offsets) >= self.limit:
            raise LabelCapacityExceeded(self.kind, self.limit, offset)
        label_id = len(self._offsets)
        self._ids[offset] = label_id
        self._offsets.append(offset)
        return label_id

    def lookup(self, offset: int) -> Optional[int]:
        return self._ids.get(offset)

    def offset_of(self, label_id: int) -> int:
        return self._offsets[label_id]

    def name(self, label_id: int) -> str:
        return f"{self.prefix}{label_id:02d}"

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def items(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(label_id, offset)`` in id order."""
        return iter(enumerate(self._offsets))

    def __len__(self) -> int:
        return len(self._offsets)

    def __contains__(self, offset: object) -> bool:
        return offset in self._ids

    def __repr__(self) -> str:
        return f"LabelTable({self.kind!r}, {len(self)} labels)"


@dataclass
class ControlFlowLabels:
    branch_labels: LabelTable
    function_labels: LabelTable
    # Targets outside the code region, as (referencing index, target).
    out_of_range: List[Tuple[int, int]] = field(default_factory=list)


class ControlFlowAnalyzer:
    def __init__(self, max_labels: int = MAX_LABELS) -> None:
        self.max_labels = max_labels

    def analyze(self, instrs: Sequence[DecodedInstr]) -> ControlFlowLabels:
        result = ControlFlowLabels(
            branch_labels=LabelTable("branch", "l", self.max_labels),
            function_labels=LabelTable("function", "f", self.max_labels),
        )
        for index, instr in enumerate(instrs):
            target = instr.branch_target(index)
            if target is not None:
                result.branch_labels.register(target)
            else:
                target = instr.call_target()
                if target is None:
                    continue
                result.function_labels.register(target)

            if not 0 <= target < len(instrs):
                logger.debug(
                    "%s at %04x targets %04x outside the code region",
                    instr.mnemonic,
                    index,
                    target,
                )
                result.out_of_range.append((index, target))

        result.branch_labels.freeze()
        result.function_labels.freeze()
        logger.debug(
            "Found %d branch labels and %d function labels in %d instructions",
            len(result.branch_labels),
            len(result.function_labels),
            len(instrs),
        )
        return result


def analyze(
    instrs: Sequence[DecodedInstr], max_labels: int = MAX_LABELS
) -> ControlFlowLabels:
    return ControlFlowAnalyzer(max_labels).analyze(instrs)
