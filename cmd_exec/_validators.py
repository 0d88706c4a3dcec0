"""Shared validation helpers."""

from __future__ import annotations

import math


def validate_optional_timeout(timeout: float | None, *, name: str = "timeout") -> None:
    """Ensure *timeout* is ``None`` or a non-negative finite number of seconds.

    Zero is a poll: the wait succeeds only if the process has already exited.
    """
    if timeout is None:
        return
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        msg = f"{name} must be a real number or None"
        raise TypeError(msg)

    if not (timeout >= 0 and math.isfinite(timeout)):
        msg = f"{name} must be >= 0 and finite"
        raise ValueError(msg)


def validate_buffer_size(buffer_size: int) -> None:
    """Ensure *buffer_size* is a positive integer."""
    if isinstance(buffer_size, bool) or not isinstance(buffer_size, int):
        msg = "buffer_size must be an integer"
        raise TypeError(msg)

    if buffer_size < 1:
        msg = "buffer_size must be >= 1"
        raise ValueError(msg)
