"""Global test configuration and shared fixtures."""

from __future__ import annotations

import sys
import typing as t
from pathlib import Path

import pytest

import cmd_exec.runner
from cmd_exec.args_builder import ArgsBuilder
from cmd_exec.config import (
    CMD_EXEC_BUFFER_SIZE_ENV,
    CMD_EXEC_ENCODING_ENV,
    CMD_EXEC_TIMEOUT_ENV,
)
from cmd_exec.platform import PLATFORM_OVERRIDE_ENV

EXE_SIMULATOR_PATH = (
    Path(__file__).resolve().parent / "tests" / "helpers" / "exe_simulator.py"
)

_CONFIG_ENV_VARS = (
    CMD_EXEC_BUFFER_SIZE_ENV,
    CMD_EXEC_ENCODING_ENV,
    CMD_EXEC_TIMEOUT_ENV,
    PLATFORM_OVERRIDE_ENV,
)


@pytest.fixture(autouse=True)
def reset_default_runner_state(
    monkeypatch: pytest.MonkeyPatch,
) -> t.Generator[None, None, None]:
    """Ensure each test sees a default runner built from a clean environment."""
    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    cmd_exec.runner.reset_default_runner()
    yield
    cmd_exec.runner.reset_default_runner()


@pytest.fixture
def python_executable() -> str:
    """Return the interpreter used to launch the exe simulator."""
    return sys.executable


@pytest.fixture
def simulator_args() -> t.Callable[..., ArgsBuilder]:
    """Return a factory for exe simulator argument builders.

    The simulator script path is added first, wrapped so that checkouts in
    directories containing spaces still form a single token.
    """

    def factory(**arguments: object) -> ArgsBuilder:
        builder = ArgsBuilder.by("", "=").add_path(str(EXE_SIMULATOR_PATH))
        for key, value in arguments.items():
            builder.add_argument(key, value)
        return builder

    return factory
