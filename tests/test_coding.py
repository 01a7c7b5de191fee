import logging

import pytest

from afuc.coding import BufferTooShort, WordDecoder, words_from_bytes


def test_word_decoder() -> None:
    decoder = WordDecoder(bytes([0x78, 0x56, 0x34, 0x12, 0x01, 0x00, 0x00, 0x80]))
    assert decoder.remaining() == 2
    assert decoder.peek(1) == 0x80000001
    assert decoder.unsigned_word_le() == 0x12345678
    assert decoder.get_pos() == 4
    assert decoder.unsigned_word_le() == 0x80000001
    assert decoder.remaining() == 0
    with pytest.raises(BufferTooShort):
        decoder.unsigned_word_le()


def test_word_decoder_partial_word() -> None:
    decoder = WordDecoder(b"\x01\x02\x03")
    assert decoder.remaining() == 0
    with pytest.raises(BufferTooShort):
        decoder.peek()


def test_words_from_bytes_drops_trailing_bytes(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="afuc.coding"):
        words = words_from_bytes(b"\x01\x00\x00\x00\x02\x00\x00\x00\xff\xff")
    assert words == [1, 2]
    assert "2 trailing byte(s)" in caplog.text


def test_words_from_bytes_empty() -> None:
    assert words_from_bytes(b"") == []
