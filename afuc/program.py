"""Firmware image layout and the two-pass disassembly driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .analysis import ControlFlowAnalyzer, ControlFlowLabels
from .coding import words_from_bytes
from .config import DisasmConfig
from .constants import HEADER_WORDS, WORD_MASK
from .decoding import DecodedInstr, decode
from .errors import InsufficientInput, TruncatedInput
from .jumptable import JumpTable, JumpTableResolver
from .names import NameDatabase, NullNames
from .render import Renderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgramBuffer:
    """Whole firmware image as words.

    Word 0 is the version tag and word 1 the split point; code offsets are
    counted from word 2.
    """

    words: Tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.words) < HEADER_WORDS:
            raise InsufficientInput(len(self.words), HEADER_WORDS)
        for word in self.words:
            if not 0 <= word <= WORD_MASK:
                raise ValueError(f"Not a 32-bit word: {word:#x}")
        needed = HEADER_WORDS + self.split
        if needed > len(self.words):
            raise TruncatedInput(len(self.words), needed)

    @classmethod
    def from_words(cls, words: Sequence[int]) -> "ProgramBuffer":
        return cls(tuple(words))

    @classmethod
    def from_bytes(cls, data: bytes) -> "ProgramBuffer":
        return cls(tuple(words_from_bytes(data)))

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ProgramBuffer":
        with open(path, "rb") as f:
            data = f.read()
        logger.debug("Read %d bytes from %s", len(data), path)
        return cls.from_bytes(data)

    @property
    def version(self) -> int:
        return self.words[0]

    @property
    def split(self) -> int:
        return self.words[1]

    @property
    def code(self) -> Tuple[int, ...]:
        return self.words[HEADER_WORDS : HEADER_WORDS + self.split]

    @property
    def jump_table(self) -> Tuple[int, ...]:
        return self.words[HEADER_WORDS + self.split :]


@dataclass
class Disassembly:
    buffer: ProgramBuffer
    instrs: List[DecodedInstr]
    labels: ControlFlowLabels
    jump_table: JumpTable
    lines: List[str]


def disassemble(
    buffer: ProgramBuffer,
    config: Optional[DisasmConfig] = None,
    names: Optional[Union[NameDatabase, NullNames]] = None,
) -> Disassembly:
    """Decode, label and render the code region of ``buffer``.

    Labels and the jump table are complete before any line is rendered, so
    forward references resolve like backward ones.
    """
    config = config or DisasmConfig()
    names = names if names is not None else NullNames()

    instrs = [decode(word) for word in buffer.code]
    jump_table = JumpTableResolver(
        slots=config.jump_table_slots,
        max_dispatch_code=config.max_dispatch_code,
        max_aliases=config.max_aliases,
    ).resolve(buffer.jump_table)
    labels = ControlFlowAnalyzer(config.max_labels).analyze(instrs)

    renderer = Renderer(
        labels,
        jump_table,
        registers=names,
        enums=names,
        verbose=config.verbose,
        colors=config.colors,
    )
    lines = list(renderer.render(instrs))
    if config.verbose:
        lines += renderer.render_jump_table()

    logger.debug(
        "Disassembled %d instructions into %d lines", len(instrs), len(lines)
    )
    return Disassembly(buffer, instrs, labels, jump_table, lines)


class Program:
    """Produces the complete listing for one firmware image."""

    def __init__(
        self,
        config: Optional[DisasmConfig] = None,
        names: Optional[Union[NameDatabase, NullNames]] = None,
    ) -> None:
        self.config = config or DisasmConfig()
        self.names = (
            names if names is not None else NameDatabase.builtin(self.config.gpu.domain)
        )

    def header(self, buffer: ProgramBuffer, source: Optional[str] = None) -> List[str]:
        lines = [f"; {self.config.gpu.banner}"]
        if source is not None:
            lines.append(f"; Disassembling microcode: {source}")
        lines += [f"; Version: {buffer.version:08x}", ""]
        return lines

    def listing(self, buffer: ProgramBuffer, source: Optional[str] = None) -> List[str]:
        result = disassemble(buffer, self.config, self.names)
        return self.header(buffer, source) + result.lines

    def listing_for_file(self, path: Union[str, Path]) -> List[str]:
        return self.listing(ProgramBuffer.from_file(path), source=str(path))
