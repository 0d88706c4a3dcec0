"""Platform helpers for turning an executable and argument string into a launch.

Windows hands the whole command line to ``CreateProcess`` and lets the
launched program split it. POSIX loaders take an ``argv`` vector, so the
argument string is tokenized there with :mod:`shlex`: whitespace separates
tokens and quotes group them. Backslashes and ``#`` are ordinary characters
and nothing is expanded.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import sys
import typing as t

IS_WINDOWS = os.name == "nt"

# Tests set this override to exercise the Windows command line path on POSIX
# hosts (and vice versa) without spawning a different OS.
PLATFORM_OVERRIDE_ENV: t.Final[str] = "CMD_EXEC_PLATFORM_OVERRIDE"

_EMPTY_EXECUTABLE_MESSAGE: t.Final[str] = "executable path must not be empty"


def _normalise(platform: str) -> str:
    """Return a lowercase version of *platform* suitable for prefix checks."""
    return platform.strip().lower()


def _current_platform(platform: str | None = None) -> str:
    """Return the effective platform name, honouring test overrides."""
    if platform:
        return _normalise(platform)

    if override := os.getenv(PLATFORM_OVERRIDE_ENV):
        return _normalise(override)

    return _normalise(sys.platform)


def _split_arguments(arguments: str) -> list[str]:
    lexer = shlex.shlex(arguments, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    lexer.escape = ""
    return list(lexer)


def uses_command_line(platform: str | None = None) -> bool:
    """Return ``True`` when *platform* launches from a single command line."""
    return _current_platform(platform).startswith("win")


def build_command(
    executable: os.PathLike[str] | str | None,
    arguments: str,
    *,
    platform: str | None = None,
) -> str | list[str]:
    """Return what :class:`subprocess.Popen` should launch.

    Raises
    ------
    ValueError
        If *executable* is empty or the argument string has unbalanced quotes
        on a POSIX platform.
    """
    if executable is None or not os.fspath(executable):
        raise ValueError(_EMPTY_EXECUTABLE_MESSAGE)

    program = os.fspath(executable)
    if uses_command_line(platform):
        command_line = subprocess.list2cmdline([program])
        return f"{command_line} {arguments}" if arguments else command_line

    return [program, *_split_arguments(arguments)]


def hidden_window_options() -> dict[str, t.Any]:
    """Return :class:`subprocess.Popen` keyword arguments that hide the window.

    Console windows only exist on Windows; elsewhere this is empty.
    """
    if not IS_WINDOWS:
        return {}

    startupinfo = subprocess.STARTUPINFO()  # type: ignore[attr-defined]
    startupinfo.dwFlags |= subprocess.STARTF_USESHOWWINDOW  # type: ignore[attr-defined]
    startupinfo.wShowWindow = subprocess.SW_HIDE  # type: ignore[attr-defined]
    return {
        "startupinfo": startupinfo,
        "creationflags": subprocess.CREATE_NO_WINDOW,  # type: ignore[attr-defined]
    }


__all__ = [
    "IS_WINDOWS",
    "PLATFORM_OVERRIDE_ENV",
    "build_command",
    "hidden_window_options",
    "uses_command_line",
]
