from __future__ import annotations

import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional, Union

from .constants import JUMP_TABLE_SLOTS, MAX_ALIASES, MAX_DISPATCH_CODE, MAX_LABELS
from .errors import UnknownGpuVersion


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw, 0)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class GpuVersion:
    """GPU generation; selects the register name domain."""

    version: int
    domain: str

    @property
    def banner(self) -> str:
        return f"a{self.version}xx microcode"

    @classmethod
    def for_version(cls, version: int) -> "GpuVersion":
        try:
            return KNOWN_GPUS[version]
        except KeyError:
            raise UnknownGpuVersion(f"Unknown GPU version: {version}") from None

    @classmethod
    def infer(cls, path: Union[str, Path]) -> Optional["GpuVersion"]:
        """Guess the version from a firmware file name such as ``a530_pm4.fw``."""
        for match in re.finditer(r"a(\d)", Path(path).name):
            gpu = KNOWN_GPUS.get(int(match.group(1)))
            if gpu is not None:
                return gpu
        return None


KNOWN_GPUS: Dict[int, GpuVersion] = {
    5: GpuVersion(5, "A5XX"),
}


@dataclass(frozen=True)
class DisasmConfig:
    gpu: GpuVersion = KNOWN_GPUS[5]
    verbose: bool = False
    colors: bool = False
    max_labels: int = MAX_LABELS
    jump_table_slots: int = JUMP_TABLE_SLOTS
    max_dispatch_code: int = MAX_DISPATCH_CODE
    max_aliases: int = MAX_ALIASES


def load_config(**overrides: object) -> DisasmConfig:
    """Build a config from ``AFUC_*`` environment flags plus explicit overrides.

    Overrides whose value is ``None`` are ignored so callers can pass
    unset command-line options straight through.
    """
    config = DisasmConfig(
        verbose=_env_flag("AFUC_VERBOSE", default=False),
        colors=_env_flag("AFUC_COLORS", default=False),
        max_labels=_env_int("AFUC_MAX_LABELS", MAX_LABELS),
    )
    applied = {key: value for key, value in overrides.items() if value is not None}
    return replace(config, **applied)  # type: ignore[arg-type]


__all__ = ["DisasmConfig", "GpuVersion", "KNOWN_GPUS", "load_config"]
