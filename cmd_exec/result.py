"""Result type returned by the buffered execution mode."""

from __future__ import annotations

import dataclasses as dc


@dc.dataclass(eq=False, slots=True)
class ExecutionResult:
    """Outcome of a single process run.

    ``output`` and ``error`` stay ``None`` when output extraction was not
    requested. Equality and hashing consider ``exit_code`` only, so two runs
    with the same exit code compare equal even if they printed different text.
    """

    exit_code: int
    output: str | None = None
    error: str | None = None

    def __eq__(self, other: object) -> bool:
        """Compare by exit code."""
        if not isinstance(other, ExecutionResult):
            return NotImplemented
        return self.exit_code == other.exit_code

    def __hash__(self) -> int:
        """Hash by exit code, consistent with :meth:`__eq__`."""
        return hash(self.exit_code)

    def __str__(self) -> str:
        """Return ``ExitCode: <code>``."""
        return f"ExitCode: {self.exit_code}"


__all__ = ["ExecutionResult"]
