"""Unit tests for :mod:`cmd_exec.config` and its validators."""

from __future__ import annotations

import math

import pytest

from cmd_exec.config import (
    CMD_EXEC_BUFFER_SIZE_ENV,
    CMD_EXEC_ENCODING_ENV,
    CMD_EXEC_TIMEOUT_ENV,
    DEFAULT_BUFFER_SIZE,
    RunnerConfig,
)


def test_defaults() -> None:
    """The default config waits without bound and uses 4 KiB chunks."""
    config = RunnerConfig()
    assert config.timeout is None
    assert config.buffer_size == DEFAULT_BUFFER_SIZE == 4096
    assert config.encoding is None


@pytest.mark.parametrize(
    ("kwargs", "error"),
    [
        pytest.param({"timeout": -1.0}, ValueError, id="negative-timeout"),
        pytest.param({"timeout": math.inf}, ValueError, id="infinite-timeout"),
        pytest.param({"timeout": True}, TypeError, id="bool-timeout"),
        pytest.param({"timeout": "5"}, TypeError, id="str-timeout"),
        pytest.param({"buffer_size": 0}, ValueError, id="zero-buffer"),
        pytest.param({"buffer_size": 1.5}, TypeError, id="float-buffer"),
        pytest.param({"buffer_size": False}, TypeError, id="bool-buffer"),
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object], error: type[Exception]) -> None:
    """Misconfiguration is caught at construction time."""
    with pytest.raises(error):
        RunnerConfig(**kwargs)  # type: ignore[arg-type]


def test_from_env_reads_overrides() -> None:
    """Every ``CMD_EXEC_*`` variable is applied."""
    config = RunnerConfig.from_env(
        {
            CMD_EXEC_TIMEOUT_ENV: "2.5",
            CMD_EXEC_BUFFER_SIZE_ENV: " 128 ",
            CMD_EXEC_ENCODING_ENV: "utf-8",
        }
    )
    assert config == RunnerConfig(timeout=2.5, buffer_size=128, encoding="utf-8")


@pytest.mark.parametrize("raw", ["", "none", "NONE", "inf", "infinite", " Inf "])
def test_from_env_unbounded_timeout(raw: str) -> None:
    """Unbounded spellings map to ``None``."""
    assert RunnerConfig.from_env({CMD_EXEC_TIMEOUT_ENV: raw}).timeout is None


def test_from_env_empty_mapping_uses_defaults() -> None:
    """No variables means the default config."""
    assert RunnerConfig.from_env({}) == RunnerConfig()


def test_from_env_defaults_to_process_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Without a mapping, ``os.environ`` is consulted."""
    monkeypatch.setenv(CMD_EXEC_BUFFER_SIZE_ENV, "64")
    assert RunnerConfig.from_env().buffer_size == 64


@pytest.mark.parametrize(
    ("name", "raw"),
    [
        pytest.param(CMD_EXEC_TIMEOUT_ENV, "soon", id="timeout-text"),
        pytest.param(CMD_EXEC_TIMEOUT_ENV, "-3", id="timeout-negative"),
        pytest.param(CMD_EXEC_TIMEOUT_ENV, "-inf", id="timeout-negative-inf"),
        pytest.param(CMD_EXEC_BUFFER_SIZE_ENV, "big", id="buffer-text"),
        pytest.param(CMD_EXEC_BUFFER_SIZE_ENV, "0", id="buffer-zero"),
    ],
)
def test_from_env_invalid_values(name: str, raw: str) -> None:
    """Invalid overrides raise ``ValueError`` naming the problem."""
    with pytest.raises(ValueError):  # noqa: PT011 - message varies by source
        RunnerConfig.from_env({name: raw})


def test_zero_timeout_is_a_poll() -> None:
    """Zero is accepted and kept distinct from the unbounded ``None``."""
    assert RunnerConfig(timeout=0).timeout == 0
    assert RunnerConfig.from_env({CMD_EXEC_TIMEOUT_ENV: "0"}).timeout == 0
