"""Runner defaults and their environment overrides."""

from __future__ import annotations

import dataclasses as dc
import math
import os
import typing as t

from ._validators import validate_buffer_size, validate_optional_timeout

CMD_EXEC_TIMEOUT_ENV: t.Final[str] = "CMD_EXEC_TIMEOUT"
CMD_EXEC_BUFFER_SIZE_ENV: t.Final[str] = "CMD_EXEC_BUFFER_SIZE"
CMD_EXEC_ENCODING_ENV: t.Final[str] = "CMD_EXEC_ENCODING"

DEFAULT_BUFFER_SIZE: t.Final[int] = 4096

# Undecodable bytes in child output are replaced rather than failing the run.
DECODE_ERRORS: t.Final[str] = "replace"

# Values of ``CMD_EXEC_TIMEOUT`` that request an unbounded wait.
_UNBOUNDED_TOKENS: t.Final[frozenset[str]] = frozenset({"", "none", "inf", "infinite"})


@dc.dataclass(frozen=True, slots=True)
class RunnerConfig:
    """
    Defaults applied by :class:`~cmd_exec.runner.ProcessRunner`.

    Attributes
    ----------
    timeout : float | None
        Seconds to wait for a process to exit. ``None`` waits without bound
        and ``0`` only polls.
    buffer_size : int
        Chunk size, in characters, used when forwarding output streams.
    encoding : str | None
        Text encoding for captured and forwarded output. ``None`` uses the
        locale's preferred encoding, as :mod:`subprocess` does.

    Raises
    ------
    ValueError, TypeError
        If ``timeout`` or ``buffer_size`` is out of range or of the wrong type.
    """

    timeout: float | None = None
    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration values to catch misconfiguration early."""
        validate_optional_timeout(self.timeout)
        validate_buffer_size(self.buffer_size)

    @classmethod
    def from_env(cls, environ: t.Mapping[str, str] | None = None) -> RunnerConfig:
        """Build a config from ``CMD_EXEC_*`` variables in *environ*."""
        env = os.environ if environ is None else environ
        kwargs: dict[str, t.Any] = {}

        if CMD_EXEC_TIMEOUT_ENV in env:
            kwargs["timeout"] = _parse_timeout(env[CMD_EXEC_TIMEOUT_ENV])
        if CMD_EXEC_BUFFER_SIZE_ENV in env:
            kwargs["buffer_size"] = _parse_buffer_size(env[CMD_EXEC_BUFFER_SIZE_ENV])
        if encoding := env.get(CMD_EXEC_ENCODING_ENV, "").strip():
            kwargs["encoding"] = encoding

        return cls(**kwargs)


def _parse_timeout(raw: str) -> float | None:
    """Convert a ``CMD_EXEC_TIMEOUT`` value to seconds or ``None``."""
    text = raw.strip().lower()
    if text in _UNBOUNDED_TOKENS:
        return None
    try:
        value = float(text)
    except ValueError as exc:
        msg = f"Invalid {CMD_EXEC_TIMEOUT_ENV}: {raw!r}"
        raise ValueError(msg) from exc
    if value == math.inf:
        return None
    return value


def _parse_buffer_size(raw: str) -> int:
    """Convert a ``CMD_EXEC_BUFFER_SIZE`` value to an integer."""
    try:
        return int(raw.strip())
    except ValueError as exc:
        msg = f"Invalid {CMD_EXEC_BUFFER_SIZE_ENV}: {raw!r}"
        raise ValueError(msg) from exc


__all__ = [
    "CMD_EXEC_BUFFER_SIZE_ENV",
    "CMD_EXEC_ENCODING_ENV",
    "CMD_EXEC_TIMEOUT_ENV",
    "DECODE_ERRORS",
    "DEFAULT_BUFFER_SIZE",
    "RunnerConfig",
]
