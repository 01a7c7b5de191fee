"""Name lookup services used by the renderer.

The renderer only needs two questions answered: "is this immediate a known
GPU register?" and "what is PM4 packet N called?". Both are best-effort; a
miss returns ``None`` and the caller falls back to a numeric or synthetic
name.

The built-in tables are deliberately partial. A fuller database can be
supplied as JSON::

    {
      "enums": {"0x10": "CP_NOP", ...},
      "registers": {"A5XX": {"0x800": "CP_RB_BASE"}, "AXXX": {...}}
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, Union

COMMON_DOMAIN = "AXXX"


class RegisterNameResolver(Protocol):
    def lookup_register(self, addr: int) -> Optional[str]: ...


class EnumNameResolver(Protocol):
    def lookup_enum(self, value: int) -> Optional[str]: ...


# adreno_pm4_type3_packets
PM4_TYPE3_PACKETS: Dict[int, str] = {
    0x10: "CP_NOP",
    0x11: "CP_RECORD_PFP_TIMESTAMP",
    0x13: "CP_WAIT_FOR_ME",
    0x1D: "CP_SKIP_IB2_ENABLE_GLOBAL",
    0x21: "CP_REG_RMW",
    0x22: "CP_DRAW_INDX",
    0x24: "CP_DRAW_AUTO",
    0x25: "CP_SET_STATE",
    0x26: "CP_WAIT_FOR_IDLE",
    0x27: "CP_IM_LOAD",
    0x28: "CP_DRAW_INDIRECT",
    0x29: "CP_DRAW_INDX_INDIRECT",
    0x2B: "CP_IM_LOAD_IMMEDIATE",
    0x2D: "CP_SET_CONSTANT",
    0x2E: "CP_LOAD_CONSTANT_CONTEXT",
    0x2F: "CP_SET_BIN_DATA",
    0x30: "CP_LOAD_STATE",
    0x31: "CP_RUN_OPENCL",
    0x32: "CP_COND_INDIRECT_BUFFER_PFD",
    0x33: "CP_EXEC_CS",
    0x34: "CP_DRAW_INDX_BIN",
    0x35: "CP_DRAW_INDX_2_BIN",
    0x36: "CP_DRAW_INDX_2",
    0x37: "CP_INDIRECT_BUFFER_PFD",
    0x38: "CP_DRAW_INDX_OFFSET",
    0x39: "CP_REG_TEST",
    0x3A: "CP_COND_INDIRECT_BUFFER_PFE",
    0x3B: "CP_INVALIDATE_STATE",
    0x3C: "CP_WAIT_REG_MEM",
    0x3D: "CP_MEM_WRITE",
    0x3E: "CP_REG_TO_MEM",
    0x3F: "CP_INDIRECT_BUFFER_PFE",
    0x40: "CP_INTERRUPT",
    0x41: "CP_EXEC_CS_INDIRECT",
    0x42: "CP_MEM_TO_REG",
    0x43: "CP_SET_DRAW_STATE",
    0x44: "CP_COND_EXEC",
    0x45: "CP_COND_WRITE",
    0x46: "CP_EVENT_WRITE",
    0x47: "CP_COND_REG_EXEC",
    0x48: "CP_ME_INIT",
    0x4A: "CP_SET_SHADER_BASES",
    0x4B: "CP_SET_DRAW_INIT_FLAGS",
    0x4C: "CP_SET_BIN",
    0x4F: "CP_MEM_WRITE_CNTR",
    0x50: "CP_SET_BIN_MASK",
    0x51: "CP_SET_BIN_SELECT",
    0x52: "CP_WAIT_REG_EQ",
    0x55: "CP_SET_CTXSWITCH_IB",
    0x56: "CP_SET_PSEUDO_REG",
    0x58: "CP_EVENT_WRITE_SHD",
    0x59: "CP_EVENT_WRITE_CFL",
    0x5B: "CP_EVENT_WRITE_ZPD",
    0x5D: "CP_WAIT_IB_PFD_COMPLETE",
    0x5E: "CP_CONTEXT_UPDATE",
    0x5F: "CP_SET_PROTECTED_MODE",
    0x64: "CP_SET_VISIBILITY_OVERRIDE",
    0x66: "CP_SET_SECURE_MODE",
    0x69: "CP_PREEMPT_ENABLE_GLOBAL",
    0x6A: "CP_PREEMPT_ENABLE_LOCAL",
    0x6B: "CP_CONTEXT_SWITCH_YIELD",
    0x6C: "CP_SET_RENDER_MODE",
    0x6D: "CP_REG_WRITE",
    0x6E: "CP_COMPUTE_CHECKPOINT",
    0x6F: "CP_BOOTSTRAP_UCODE",
    0x71: "CP_TEST_TWO_MEMS",
    0x73: "CP_MEM_TO_MEM",
    0x74: "CP_WIDE_REG_WRITE",
    0x78: "CP_REG_WR_NO_CTXT",
}

REGISTER_DOMAINS: Dict[str, Dict[int, str]] = {
    "A5XX": {
        0x0800: "CP_RB_BASE",
        0x0801: "CP_RB_BASE_HI",
        0x0802: "CP_RB_CNTL",
        0x0804: "CP_RB_RPTR_ADDR",
        0x0805: "CP_RB_RPTR_ADDR_HI",
        0x0806: "CP_RB_RPTR",
        0x0807: "CP_RB_WPTR",
    },
    COMMON_DOMAIN: {0x0578 + n: f"CP_SCRATCH_REG{n}" for n in range(8)},
}


def _parse_key(key: Union[str, int]) -> int:
    return key if isinstance(key, int) else int(key, 0)


def _parse_table(raw: Mapping[Union[str, int], str]) -> Dict[int, str]:
    return {_parse_key(key): str(name) for key, name in raw.items()}


@dataclass
class EnumDatabase:
    values: Dict[int, str] = field(default_factory=dict)

    def lookup_enum(self, value: int) -> Optional[str]:
        return self.values.get(value)


@dataclass
class RegisterDatabase:
    """Register names per domain; the first domain that knows a name wins."""

    domains: Sequence[Tuple[str, Dict[int, str]]] = ()

    def lookup_register(self, addr: int) -> Optional[str]:
        for _domain, regs in self.domains:
            name = regs.get(addr)
            if name is not None:
                return name
        return None


@dataclass
class NameDatabase:
    registers: RegisterDatabase
    enums: EnumDatabase

    @classmethod
    def builtin(cls, domain: str) -> "NameDatabase":
        return cls.from_dict(
            {"enums": PM4_TYPE3_PACKETS, "registers": REGISTER_DOMAINS}, domain
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, object], domain: str) -> "NameDatabase":
        registers = data.get("registers") or {}
        enums = data.get("enums") or {}
        if not isinstance(registers, Mapping) or not isinstance(enums, Mapping):
            raise ValueError("'registers' and 'enums' must be JSON objects")
        # Architecture-specific names take precedence over the common block.
        domains: List[Tuple[str, Dict[int, str]]] = []
        for name in (domain, COMMON_DOMAIN):
            if name not in registers:
                continue
            table = registers[name]
            if not isinstance(table, Mapping):
                raise ValueError(f"registers[{name!r}] must be a JSON object")
            domains.append((name, _parse_table(table)))
        return cls(
            registers=RegisterDatabase(domains),
            enums=EnumDatabase(_parse_table(enums)),
        )

    @classmethod
    def load(cls, path: Union[str, Path], domain: str) -> "NameDatabase":
        """Load a JSON name database from ``path``."""
        with open(path, "r") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return cls.from_dict(data, domain)

    def lookup_register(self, addr: int) -> Optional[str]:
        return self.registers.lookup_register(addr)

    def lookup_enum(self, value: int) -> Optional[str]:
        return self.enums.lookup_enum(value)


class NullNames:
    """Resolver that knows no names."""

    def lookup_register(self, addr: int) -> Optional[str]:
        return None

    def lookup_enum(self, value: int) -> Optional[str]:
        return None
