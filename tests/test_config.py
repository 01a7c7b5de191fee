import pytest

from afuc.config import KNOWN_GPUS, DisasmConfig, GpuVersion, load_config
from afuc.constants import MAX_LABELS
from afuc.errors import UnknownGpuVersion


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("AFUC_VERBOSE", "AFUC_COLORS", "AFUC_MAX_LABELS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = load_config()
    assert config == DisasmConfig()
    assert config.gpu is KNOWN_GPUS[5]
    assert config.max_labels == MAX_LABELS
    assert not config.verbose


def test_env_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFUC_VERBOSE", "1")
    monkeypatch.setenv("AFUC_COLORS", "off")
    monkeypatch.setenv("AFUC_MAX_LABELS", "0x20")
    config = load_config()
    assert config.verbose
    assert not config.colors
    assert config.max_labels == 0x20


def test_overrides_beat_env_and_none_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFUC_VERBOSE", "true")
    assert not load_config(verbose=False).verbose
    assert load_config(verbose=None).verbose
    assert load_config(colors=True).colors


def test_gpu_for_version() -> None:
    gpu = GpuVersion.for_version(5)
    assert gpu.domain == "A5XX"
    assert gpu.banner == "a5xx microcode"
    with pytest.raises(UnknownGpuVersion):
        GpuVersion.for_version(3)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("a530_pm4.fw", 5),
        ("/lib/firmware/qcom/a530_pfp.fw", 5),
        ("data/a3xx/a530v3_pm4.fw", 5),
        ("pm4.fw", None),
        ("a330_pm4.fw", None),
    ],
)
def test_gpu_inferred_from_file_name(path: str, expected) -> None:
    gpu = GpuVersion.infer(path)
    if expected is None:
        assert gpu is None
    else:
        assert gpu is not None and gpu.version == expected


def test_bad_integer_env_names_the_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AFUC_MAX_LABELS", "lots")
    with pytest.raises(ValueError, match="AFUC_MAX_LABELS"):
        load_config()
