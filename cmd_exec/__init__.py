"""Build argument strings and run executables with captured or forwarded output.

The package is small: :class:`ArgsBuilder` assembles argument strings, the
``execute*`` functions (or a configured :class:`ProcessRunner`) launch
processes, and :class:`StreamRedirector` forwards their output while they run.
"""

from __future__ import annotations

from .args_builder import ArgsBuilder, as_argument_string
from .config import (
    CMD_EXEC_BUFFER_SIZE_ENV,
    CMD_EXEC_ENCODING_ENV,
    CMD_EXEC_TIMEOUT_ENV,
    DEFAULT_BUFFER_SIZE,
    RunnerConfig,
)
from .errors import CmdExecError, ProcessExecutionError
from .redirector import StreamRedirector
from .result import ExecutionResult
from .runner import (
    INFINITE,
    ForwardedExecution,
    ProcessRunner,
    default_runner,
    execute,
    execute_exit_code,
    execute_forwarded,
    reset_default_runner,
    start_forwarded,
)

__all__ = [
    "CMD_EXEC_BUFFER_SIZE_ENV",
    "CMD_EXEC_ENCODING_ENV",
    "CMD_EXEC_TIMEOUT_ENV",
    "DEFAULT_BUFFER_SIZE",
    "INFINITE",
    "ArgsBuilder",
    "CmdExecError",
    "ExecutionResult",
    "ForwardedExecution",
    "ProcessExecutionError",
    "ProcessRunner",
    "RunnerConfig",
    "StreamRedirector",
    "as_argument_string",
    "default_runner",
    "execute",
    "execute_exit_code",
    "execute_forwarded",
    "reset_default_runner",
    "start_forwarded",
]
