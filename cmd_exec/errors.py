"""Exception hierarchy for cmd-exec."""

from __future__ import annotations

import os
import typing as t


class CmdExecError(Exception):
    """Base class for all cmd-exec errors."""


class ProcessExecutionError(CmdExecError):
    """Raised when a process could not be started, read from or waited on.

    Every platform failure collapses into this one error kind. The original
    exception is kept as :attr:`cause` (and as ``__cause__`` when raised with
    ``raise ... from``) so callers can branch on it, for example::

        try:
            execute_exit_code("missing-tool", "")
        except ProcessExecutionError as exc:
            if isinstance(exc.cause, FileNotFoundError):
                ...
    """

    def __init__(
        self,
        cause: BaseException,
        executable: os.PathLike[str] | str | None = None,
    ) -> None:
        msg = f"process execution failed: {cause}"
        super().__init__(msg)
        self.cause = cause
        self.executable = executable

    def __reduce__(self) -> tuple[t.Any, ...]:
        """Support pickling despite the custom constructor signature."""
        return (type(self), (self.cause, self.executable))


__all__ = ["CmdExecError", "ProcessExecutionError"]
