"""Jump-table (packet dispatch) correlation.

Each slot of the table holds the code offset of the handler for one PM4
type-3 packet id. Several ids often share a handler, so entries are grouped
by destination.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from .constants import JUMP_TABLE_SLOTS, MAX_ALIASES, MAX_DISPATCH_CODE
from .errors import JumpTableCapacityExceeded

logger = logging.getLogger(__name__)


@dataclass
class JumpTableEntry:
    offset: int
    slots: List[int] = field(default_factory=list)


class JumpTable:
    def __init__(self, raw_slots: Sequence[int] = ()) -> None:
        self._entries: Dict[int, JumpTableEntry] = {}
        self._raw = tuple(raw_slots)
        self._frozen = False

    def entries_at(self, offset: int) -> Optional[JumpTableEntry]:
        return self._entries.get(offset)

    def entries(self) -> Iterator[JumpTableEntry]:
        """Entries in order of first appearance in the table."""
        return iter(self._entries.values())

    def slots(self) -> Iterator[Tuple[int, int]]:
        """Yield ``(slot, offset)`` for every slot that was read."""
        return iter(enumerate(self._raw))

    def add(self, slot: int, offset: int, max_aliases: int = MAX_ALIASES) -> None:
        if self._frozen:
            raise RuntimeError("jump table is frozen")
        entry = self._entries.get(offset)
        if entry is None:
            entry = self._entries[offset] = JumpTableEntry(offset)
        if len(entry.slots) >= max_aliases:
            raise JumpTableCapacityExceeded(offset, max_aliases)
        entry.slots.append(slot)

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __len__(self) -> int:
        return len(self._entries)


class JumpTableResolver:
    def __init__(
        self,
        slots: int = JUMP_TABLE_SLOTS,
        max_dispatch_code: int = MAX_DISPATCH_CODE,
        max_aliases: int = MAX_ALIASES,
    ) -> None:
        self.slots = slots
        self.max_dispatch_code = max_dispatch_code
        self.max_aliases = max_aliases

    def resolve(self, region: Sequence[int]) -> JumpTable:
        count = min(self.slots, len(region))
        if count < self.slots:
            logger.debug(
                "Jump table has %d slots, expected %d", len(region), self.slots
            )
        table = JumpTable(region[:count])
        for slot in range(count):
            if slot > self.max_dispatch_code:
                continue
            table.add(slot, region[slot], self.max_aliases)
        table.freeze()
        return table


def resolve(region: Sequence[int], **kwargs: int) -> JumpTable:
    return JumpTableResolver(**kwargs).resolve(region)
