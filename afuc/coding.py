"""Binary word decoding helpers."""

import logging
import struct
from typing import List

logger = logging.getLogger(__name__)

WORD_SIZE = 4


class BufferTooShort(Exception):
    """Raised when attempting to read past the end of the buffer."""


class WordDecoder:
    def __init__(self, buf: bytes) -> None:
        self.buf, self.pos = buf, 0

    def get_pos(self) -> int:
        return self.pos

    def remaining(self) -> int:
        return (len(self.buf) - self.pos) // WORD_SIZE

    def peek(self, offset: int = 0) -> int:
        start = self.pos + offset * WORD_SIZE
        if len(self.buf) - start < WORD_SIZE:
            raise BufferTooShort
        return struct.unpack_from("<I", self.buf, start)[0]

    def unsigned_word_le(self) -> int:
        value = self.peek()
        self.pos += WORD_SIZE
        return value


def words_from_bytes(data: bytes) -> List[int]:
    """Split ``data`` into little-endian words, dropping a trailing partial word."""
    decoder = WordDecoder(data)
    words = []
    while decoder.remaining():
        words.append(decoder.unsigned_word_le())
    extra = len(data) - decoder.get_pos()
    if extra:
        logger.warning(
            "Ignoring %d trailing byte(s) after %d whole words", extra, len(words)
        )
    return words
