"""Unit tests for :mod:`cmd_exec.result` and :mod:`cmd_exec.errors`."""

from __future__ import annotations

import pickle

from cmd_exec.errors import CmdExecError, ProcessExecutionError
from cmd_exec.result import ExecutionResult


def test_str_reports_exit_code() -> None:
    """The string form names the exit code."""
    assert str(ExecutionResult(exit_code=123)) == "ExitCode: 123"


def test_defaults_leave_output_unset() -> None:
    """Output fields are ``None`` unless captured."""
    result = ExecutionResult(exit_code=0)
    assert result.output is None
    assert result.error is None


def test_equality_uses_exit_code_only() -> None:
    """Results with equal exit codes compare equal whatever they printed."""
    first = ExecutionResult(exit_code=1, output="a", error="b")
    second = ExecutionResult(exit_code=1, output="c", error=None)
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1


def test_different_exit_codes_differ() -> None:
    """Different exit codes are unequal."""
    assert ExecutionResult(exit_code=0) != ExecutionResult(exit_code=1)


def test_comparison_with_other_types() -> None:
    """Comparing with unrelated objects is simply unequal."""
    assert ExecutionResult(exit_code=0) != 0
    assert ExecutionResult(exit_code=0) != "ExitCode: 0"


def test_process_execution_error_keeps_cause() -> None:
    """The wrapped cause and executable are exposed."""
    cause = FileNotFoundError(2, "No such file or directory")
    error = ProcessExecutionError(cause, "missing-tool")

    assert isinstance(error, CmdExecError)
    assert error.cause is cause
    assert error.executable == "missing-tool"
    assert str(error).startswith("process execution failed: ")


def test_process_execution_error_pickles() -> None:
    """Errors survive pickling, e.g. across worker processes."""
    error = ProcessExecutionError(PermissionError("denied"), "tool")
    restored = pickle.loads(pickle.dumps(error))  # noqa: S301 - trusted data

    assert isinstance(restored, ProcessExecutionError)
    assert isinstance(restored.cause, PermissionError)
    assert restored.executable == "tool"
