"""Launch executables and capture or forward their output.

Three execution modes share one spawn-and-wait primitive:

* :meth:`ProcessRunner.execute` buffers stdout and stderr and returns an
  :class:`~cmd_exec.result.ExecutionResult`. Output is read sequentially (all
  of stdout, then all of stderr), so a child that fills the stderr pipe while
  stdout is still open can deadlock. Use the forwarding mode for such
  programs.
* :meth:`ProcessRunner.execute_exit_code` runs without redirection and
  returns only the exit code.
* :meth:`ProcessRunner.execute_forwarded` drains both pipes concurrently into
  caller-supplied writers via two :class:`~cmd_exec.redirector.StreamRedirector`
  threads. By default it returns as soon as the process exits, without waiting
  for the redirectors to flush their last chunk; pass ``drain=True`` or use
  :meth:`ProcessRunner.start_forwarded` to wait for full delivery.

Every failure to start, read from or wait on a process is raised as
:class:`~cmd_exec.errors.ProcessExecutionError` wrapping the original error.
"""

from __future__ import annotations

import contextlib
import dataclasses as dc
import logging
import os
import subprocess
import time
import typing as t

from ._validators import validate_buffer_size, validate_optional_timeout
from .args_builder import ArgsBuilder, as_argument_string
from .config import DECODE_ERRORS, RunnerConfig
from .errors import ProcessExecutionError
from .platform import build_command, hidden_window_options
from .redirector import StreamRedirector
from .result import ExecutionResult

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc

logger = logging.getLogger(__name__)

#: Timeout value requesting an unbounded wait for the process to exit.
INFINITE: t.Final[None] = None

_UNSET = object()

Executable = os.PathLike[str] | str | None
Arguments = ArgsBuilder | str | None
WorkingDirectory = os.PathLike[str] | str | None


@dc.dataclass(slots=True)
class ForwardedExecution:
    """Exit code of a forwarded run plus the redirectors still draining it."""

    exit_code: int
    output: StreamRedirector
    error: StreamRedirector

    @property
    def streams_done(self) -> bool:
        """Return ``True`` once both redirectors have reached end-of-stream."""
        return self.output.done and self.error.done

    def wait_for_streams(self, timeout: float | None = None) -> bool:
        """Wait for both redirectors; return ``False`` if *timeout* expired."""
        deadline = None if timeout is None else time.monotonic() + timeout
        for redirector in (self.output, self.error):
            remaining = (
                None if deadline is None else max(0.0, deadline - time.monotonic())
            )
            if not redirector.wait(remaining):
                return False
        return True


@contextlib.contextmanager
def _execution_failures(executable: Executable) -> cabc.Iterator[None]:
    """Re-raise any failure inside the block as :class:`ProcessExecutionError`."""
    try:
        yield
    except (KeyboardInterrupt, SystemExit, ProcessExecutionError):
        raise
    except Exception as exc:
        logger.debug("Execution of %s failed: %r", executable, exc)
        raise ProcessExecutionError(exc, executable) from exc


def _read_all(stream: t.IO[str] | None) -> str:
    return "" if stream is None else stream.read()


def _detach_pipes(
    process: subprocess.Popen[bytes],
) -> tuple[t.IO[bytes], t.IO[bytes]]:
    """Take ownership of the process pipes so release leaves them open."""
    stdout, stderr = process.stdout, process.stderr
    if stdout is None or stderr is None:  # pragma: no cover - spawned with PIPE
        msg = "process output pipes are not available"
        raise RuntimeError(msg)
    process.stdout = None
    process.stderr = None
    return stdout, stderr


def _release(process: subprocess.Popen[t.Any]) -> None:
    """Close remaining pipes and reap *process*, killing it if still running."""
    if process.poll() is None:
        logger.warning("Killing process pid=%d which is still running", process.pid)
        with contextlib.suppress(ProcessLookupError):
            process.kill()
    for stream in (process.stdout, process.stderr):
        if stream is not None:
            with contextlib.suppress(OSError):
                stream.close()
    process.wait()


def _wait(process: subprocess.Popen[t.Any], timeout: float | None) -> int:
    exit_code = process.wait(timeout=timeout)
    logger.debug("Process pid=%d exited with code %d", process.pid, exit_code)
    return exit_code


class ProcessRunner:
    """Run executables using the defaults of a :class:`RunnerConfig`."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self._config = config or RunnerConfig()

    @property
    def config(self) -> RunnerConfig:
        """Return the defaults applied when a call omits them."""
        return self._config

    def execute(
        self,
        executable: Executable,
        arguments: Arguments,
        extract_output: bool,
        working_directory: WorkingDirectory = "",
        timeout: float | object = _UNSET,
    ) -> ExecutionResult:
        """Run *executable* and return its exit code and, optionally, output.

        Parameters
        ----------
        executable : PathLike | str
            Path to the program. Bare names are looked up on ``PATH``.
        arguments : ArgsBuilder | str | None
            The argument string, passed to the program without a shell.
        extract_output : bool
            Capture stdout and stderr into the result. When ``False`` the
            streams are inherited and ``output``/``error`` stay ``None``.
        working_directory : PathLike | str, optional
            Directory to launch in. Empty inherits the caller's directory.
        timeout : float | None, optional
            Seconds to wait for exit; :data:`INFINITE` waits without bound
            and ``0`` only polls, timing out unless the process has exited.
            Defaults to the runner's configured timeout.

        Raises
        ------
        ProcessExecutionError
            If the process cannot be started, read or waited on, including
            when *timeout* expires (the process is killed first).
        """
        with _execution_failures(executable):
            wait_timeout = self._resolve_timeout(timeout)
            with self._spawn(
                executable, arguments, working_directory, capture=extract_output
            ) as process:
                output = _read_all(process.stdout) if extract_output else None
                error = _read_all(process.stderr) if extract_output else None
                exit_code = _wait(process, wait_timeout)

        return ExecutionResult(exit_code=exit_code, output=output, error=error)

    def execute_exit_code(
        self,
        executable: Executable,
        arguments: Arguments,
        working_directory: WorkingDirectory = "",
    ) -> int:
        """Run *executable* without capturing output and return its exit code."""
        return self.execute(
            executable, arguments, False, working_directory, INFINITE
        ).exit_code

    def execute_forwarded(  # noqa: PLR0913 - mirrors the forwarding contract
        self,
        executable: Executable,
        arguments: Arguments,
        output_writer: t.TextIO,
        error_writer: t.TextIO,
        working_directory: WorkingDirectory = "",
        timeout: float | object = _UNSET,
        buffer_size: int | None = None,
        *,
        drain: bool = False,
    ) -> int:
        """Run *executable* forwarding stdout and stderr while it runs.

        The writers are flushed after every chunk and are never locked; the
        same writer may be passed twice at the cost of interleaved output.
        With ``drain`` the call also waits for both streams to be fully
        delivered before returning.
        """
        execution = self.start_forwarded(
            executable,
            arguments,
            output_writer,
            error_writer,
            working_directory,
            timeout,
            buffer_size,
        )
        if drain:
            execution.wait_for_streams()
        return execution.exit_code

    def start_forwarded(  # noqa: PLR0913 - mirrors the forwarding contract
        self,
        executable: Executable,
        arguments: Arguments,
        output_writer: t.TextIO,
        error_writer: t.TextIO,
        working_directory: WorkingDirectory = "",
        timeout: float | object = _UNSET,
        buffer_size: int | None = None,
    ) -> ForwardedExecution:
        """Like :meth:`execute_forwarded` but return the redirector handles."""
        with _execution_failures(executable):
            wait_timeout = self._resolve_timeout(timeout)
            size = self._config.buffer_size if buffer_size is None else buffer_size
            validate_buffer_size(size)
            with self._spawn(
                executable, arguments, working_directory, capture=True, text=False
            ) as process:
                output, error = self._start_redirectors(
                    process, output_writer, error_writer, size
                )
                exit_code = _wait(process, wait_timeout)

        return ForwardedExecution(exit_code=exit_code, output=output, error=error)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _resolve_timeout(self, timeout: float | object) -> float | None:
        if timeout is _UNSET:
            return self._config.timeout
        override = t.cast("float | None", timeout)
        validate_optional_timeout(override)
        return override

    @contextlib.contextmanager
    def _spawn(
        self,
        executable: Executable,
        arguments: Arguments,
        working_directory: WorkingDirectory,
        *,
        capture: bool,
        text: bool = True,
    ) -> cabc.Iterator[subprocess.Popen[t.Any]]:
        """Start the process and release it when the block exits."""
        command = build_command(executable, as_argument_string(arguments))
        pipe = subprocess.PIPE if capture else None
        text_options: dict[str, t.Any] = (
            {"text": True, "encoding": self._config.encoding, "errors": DECODE_ERRORS}
            if text and capture
            else {}
        )
        process = subprocess.Popen(  # noqa: S603 - shell=False, no interpretation
            command,
            cwd=working_directory or None,
            stdout=pipe,
            stderr=pipe,
            shell=False,
            **text_options,
            **hidden_window_options(),
        )
        try:
            logger.debug(
                "Started process pid=%d executable=%s cwd=%s",
                process.pid,
                executable,
                working_directory or None,
            )
            yield process
        finally:
            _release(process)

    def _start_redirectors(
        self,
        process: subprocess.Popen[bytes],
        output_writer: t.TextIO,
        error_writer: t.TextIO,
        buffer_size: int,
    ) -> tuple[StreamRedirector, StreamRedirector]:
        """Hand both pipes to background redirectors and start them.

        A pipe whose redirector never started is closed here, since release
        no longer sees it once detached.
        """
        stdout, stderr = _detach_pipes(process)
        unowned = [stdout, stderr]
        redirectors: list[StreamRedirector] = []
        try:
            for label, source, writer in (
                ("stdout", stdout, output_writer),
                ("stderr", stderr, error_writer),
            ):
                redirector = StreamRedirector(
                    source,
                    writer,
                    buffer_size,
                    encoding=self._config.encoding,
                    close_source=True,
                    name=f"{label}-redirector-{process.pid}",
                ).start()
                unowned.remove(source)
                redirectors.append(redirector)
        except BaseException:
            for source in unowned:
                with contextlib.suppress(OSError):
                    source.close()
            raise
        output, error = redirectors
        return output, error


_default_runner: ProcessRunner | None = None


def default_runner() -> ProcessRunner:
    """Return the shared runner configured from ``CMD_EXEC_*`` variables."""
    global _default_runner  # noqa: PLW0603 - lazily created module singleton
    if _default_runner is None:
        _default_runner = ProcessRunner(RunnerConfig.from_env())
    return _default_runner


def reset_default_runner() -> None:
    """Forget the shared runner so the next call re-reads the environment."""
    global _default_runner  # noqa: PLW0603 - lazily created module singleton
    _default_runner = None


def execute(
    executable: Executable,
    arguments: Arguments,
    extract_output: bool,
    working_directory: WorkingDirectory = "",
    timeout: float | object = _UNSET,
) -> ExecutionResult:
    """Run *executable* with the shared runner; see :meth:`ProcessRunner.execute`."""
    return default_runner().execute(
        executable, arguments, extract_output, working_directory, timeout
    )


def execute_exit_code(
    executable: Executable,
    arguments: Arguments,
    working_directory: WorkingDirectory = "",
) -> int:
    """Run *executable* and return only its exit code."""
    return default_runner().execute_exit_code(executable, arguments, working_directory)


def execute_forwarded(  # noqa: PLR0913 - mirrors the forwarding contract
    executable: Executable,
    arguments: Arguments,
    output_writer: t.TextIO,
    error_writer: t.TextIO,
    working_directory: WorkingDirectory = "",
    timeout: float | object = _UNSET,
    buffer_size: int | None = None,
    *,
    drain: bool = False,
) -> int:
    """Run *executable* forwarding its streams with the shared runner."""
    return default_runner().execute_forwarded(
        executable,
        arguments,
        output_writer,
        error_writer,
        working_directory,
        timeout,
        buffer_size,
        drain=drain,
    )


def start_forwarded(  # noqa: PLR0913 - mirrors the forwarding contract
    executable: Executable,
    arguments: Arguments,
    output_writer: t.TextIO,
    error_writer: t.TextIO,
    working_directory: WorkingDirectory = "",
    timeout: float | object = _UNSET,
    buffer_size: int | None = None,
) -> ForwardedExecution:
    """Run *executable* forwarding its streams and return the handles."""
    return default_runner().start_forwarded(
        executable,
        arguments,
        output_writer,
        error_writer,
        working_directory,
        timeout,
        buffer_size,
    )


__all__ = [
    "INFINITE",
    "ForwardedExecution",
    "ProcessRunner",
    "default_runner",
    "execute",
    "execute_exit_code",
    "execute_forwarded",
    "reset_default_runner",
    "start_forwarded",
]
