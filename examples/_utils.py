"""Shared helpers for the runnable examples."""

from __future__ import annotations

from cmd_exec import ArgsBuilder


def python_code(code: str) -> ArgsBuilder:
    """Return arguments running *code* with ``python -c``."""
    return ArgsBuilder.by("-", "").add_key("c").add_path(code)
