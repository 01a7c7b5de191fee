import pytest

from afuc.config import DisasmConfig
from afuc.decoding import Opcode
from afuc.errors import InsufficientInput, JumpTableCapacityExceeded, TruncatedInput
from afuc.names import NullNames
from afuc.program import Program, ProgramBuffer, disassemble
from afuc.render import JUMP_TABLE_RULE

from helpers import NOP, RET, branch, call, image, image_bytes


def test_buffer_layout() -> None:
    buffer = ProgramBuffer.from_words(image([NOP, RET], jump_table=[1, 0]))
    assert buffer.version == 0x12345678
    assert buffer.split == 2
    assert buffer.code == (NOP, RET)
    assert buffer.jump_table == (1, 0)


def test_buffer_from_bytes() -> None:
    buffer = ProgramBuffer.from_bytes(image_bytes([RET], version=0xAABBCCDD))
    assert buffer.version == 0xAABBCCDD
    assert buffer.code == (RET,)
    assert buffer.jump_table == ()


def test_buffer_needs_header() -> None:
    with pytest.raises(InsufficientInput):
        ProgramBuffer.from_words([0x1])
    with pytest.raises(InsufficientInput):
        ProgramBuffer.from_bytes(b"\x00" * 7)


def test_buffer_split_past_end() -> None:
    with pytest.raises(TruncatedInput) as excinfo:
        ProgramBuffer.from_words([0, 5, NOP, NOP])
    assert excinfo.value.words == 4
    assert excinfo.value.needed == 7
    assert isinstance(excinfo.value, InsufficientInput)


def test_buffer_rejects_non_words() -> None:
    with pytest.raises(ValueError):
        ProgramBuffer.from_words([0, 0, 1 << 32])


def test_empty_code_region() -> None:
    result = disassemble(ProgramBuffer.from_words([0, 0]))
    assert result.instrs == []
    assert result.lines == []


def test_disassemble_resolves_forward_references() -> None:
    buffer = ProgramBuffer.from_words(
        image([branch(Opcode.BRNEI, 1, 0, 2), call(3), NOP, RET])
    )
    result = disassemble(buffer)
    assert result.lines == [
        "        brne $01, 0x0, #l00",
        "        call #f00",
        " l00:   nop",
        "f00:",
        "        ret",
    ]
    assert result.labels.branch_labels.lookup(2) == 0


def test_disassemble_with_jump_table_aliases() -> None:
    code = [NOP] * 0x11
    jump_table = [0x10, 1, 2, 3, 4, 0x10]
    result = disassemble(ProgramBuffer.from_words(image(code, jump_table)))
    idx = result.lines.index("UNKN0:")
    assert result.lines[idx - 1 : idx + 3] == ["", "UNKN0:", "UNKN5:", "        nop"]
    assert result.jump_table.entries_at(0x10).slots == [0, 5]


def test_verbose_appends_jump_table_dump() -> None:
    config = DisasmConfig(verbose=True)
    result = disassemble(ProgramBuffer.from_words(image([NOP], [0])), config)
    assert result.lines[-3:] == [JUMP_TABLE_RULE, "; JUMP TABLE", "  0 00: 0000   ; UNKN0"]


def test_alias_capacity_comes_from_config() -> None:
    config = DisasmConfig(max_aliases=1)
    with pytest.raises(JumpTableCapacityExceeded):
        disassemble(ProgramBuffer.from_words(image([NOP], [0, 0])), config)


def test_program_listing_header() -> None:
    buffer = ProgramBuffer.from_words(image([NOP]))
    lines = Program(names=NullNames()).listing(buffer, source="a530_pm4.fw")
    assert lines == [
        "; a5xx microcode",
        "; Disassembling microcode: a530_pm4.fw",
        "; Version: 12345678",
        "",
        "        nop",
    ]


def test_program_uses_builtin_names_by_default() -> None:
    buffer = ProgramBuffer.from_words(image([NOP], [0x0, 0x0]))
    lines = Program().listing(buffer)
    assert lines[0] == "; a5xx microcode"
    assert lines[1] == "; Version: 12345678"
    assert "UNKN0:" in lines


def test_listing_for_file(tmp_path) -> None:
    path = tmp_path / "a530_pfp.fw"
    path.write_bytes(image_bytes([RET]))
    lines = Program().listing_for_file(path)
    assert lines[1] == f"; Disassembling microcode: {path}"
    assert lines[-1] == "        ret"
