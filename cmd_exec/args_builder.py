"""Fluent builder for command line argument strings.

Every ``add_*`` method accepts a ``condition`` flag and returns the same
builder, so optional arguments can be chained without branching::

    args = (
        ArgsBuilder.by("--", "=")
        .add_key("verbose", condition=verbose)
        .add_argument("config", config_name)
        .add_path_argument("output", output_dir)
        .build()
    )

Empty or ``None`` inputs mean "nothing to add" and never raise.
"""

from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:  # pragma: no cover - used only for typing
    import collections.abc as cabc


def _text(value: object) -> str:
    """Return the textual form of *value*, treating ``None`` as empty."""
    return "" if value is None else str(value)


def _non_empty(values: cabc.Iterable[object]) -> list[str]:
    """Return the non-empty textual forms of *values* in order."""
    return [text for text in map(_text, values) if text]


class ArgsBuilder:
    """Accumulate argument tokens under configurable separators."""

    __slots__ = (
        "_tokens",
        "args_separator",
        "key_prefix",
        "key_value_separator",
        "path_wrapper",
        "value_separator",
    )

    def __init__(
        self,
        key_prefix: str,
        key_value_separator: str,
        value_separator: str = ";",
        path_wrapper: str = '"',
        args_separator: str = " ",
    ) -> None:
        self.key_prefix = key_prefix
        self.key_value_separator = key_value_separator
        self.value_separator = value_separator
        self.path_wrapper = path_wrapper
        self.args_separator = args_separator
        self._tokens: list[str] = []

    @classmethod
    def by(
        cls,
        key_prefix: str,
        key_value_separator: str,
        value_separator: str = ";",
        path_wrapper: str = '"',
        args_separator: str = " ",
    ) -> ArgsBuilder:
        """Create a builder with the given separators.

        Parameters
        ----------
        key_prefix : str
            Prepended to every key, e.g. ``"--"``.
        key_value_separator : str
            Placed between a key and its value, e.g. ``"="``.
        value_separator : str, optional
            Joins several values or paths given under one key.
        path_wrapper : str, optional
            Wraps each path so that paths containing spaces stay one token.
        args_separator : str, optional
            Separates tokens in the final string.
        """
        return cls(
            key_prefix,
            key_value_separator,
            value_separator,
            path_wrapper,
            args_separator,
        )

    @property
    def modified(self) -> bool:
        """Return ``True`` once at least one token has been appended."""
        return bool(self._tokens)

    # ------------------------------------------------------------------
    # Keys and values
    # ------------------------------------------------------------------
    def add_key(self, key: str | None, condition: bool = True) -> ArgsBuilder:
        """Add ``key`` as a prefixed flag: ``--key``."""
        if not condition or not key:
            return self
        return self._append(self._key(key))

    def add_keys(
        self, keys: cabc.Iterable[str | None] | None, condition: bool = True
    ) -> ArgsBuilder:
        """Add every non-empty key as a separate flag: ``--k1 --k2``."""
        if not condition or keys is None:
            return self
        return self._extend(self._key(key) for key in keys if key)

    def add_value(self, value: object, condition: bool = True) -> ArgsBuilder:
        """Add the textual form of ``value`` as a bare token."""
        text = _text(value)
        if not condition or not text:
            return self
        return self._append(text)

    def add_values(
        self, values: cabc.Iterable[object] | None, condition: bool = True
    ) -> ArgsBuilder:
        """Add the non-empty ``values`` as bare tokens: ``111 222``."""
        if not condition or values is None:
            return self
        return self._extend(_non_empty(values))

    def add_argument(
        self, key: str | None, value: object, condition: bool = True
    ) -> ArgsBuilder:
        """Add a key/value pair: ``--key=value``."""
        text = _text(value)
        if not condition or not key or not text:
            return self
        return self._append(self._pair(key, text))

    def add_arguments(
        self,
        key: str | None,
        values: cabc.Iterable[object] | None,
        multiple_times: bool = False,
        condition: bool = True,
    ) -> ArgsBuilder:
        """Add several values under ``key``.

        With ``multiple_times`` the key is repeated for every value
        (``--key=1 --key=2``); otherwise the values share one key and are
        joined by the value separator (``--key=1;2``).
        """
        if not condition or not key or values is None:
            return self
        return self._append_keyed(key, _non_empty(values), multiple_times)

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------
    def add_path(self, path: str | None, condition: bool = True) -> ArgsBuilder:
        """Add a wrapped path: ``"C:\\My Folder\\file.txt"``."""
        if not condition or not path:
            return self
        return self._append(self._wrap(path))

    def add_path_argument(
        self, key: str | None, path: str | None, condition: bool = True
    ) -> ArgsBuilder:
        """Add a wrapped path under ``key``: ``--key="/tmp/my file"``."""
        if not condition or not key or not path:
            return self
        return self._append(self._pair(key, self._wrap(path)))

    def add_paths(
        self, paths: cabc.Iterable[str | None] | None, condition: bool = True
    ) -> ArgsBuilder:
        """Add every non-empty path wrapped as its own token."""
        if not condition or paths is None:
            return self
        return self._extend(self._wrap(path) for path in paths if path)

    def add_path_arguments(
        self,
        key: str | None,
        paths: cabc.Iterable[str | None] | None,
        multiple_times: bool = False,
        condition: bool = True,
    ) -> ArgsBuilder:
        """Add several wrapped paths under ``key``.

        Follows the same repetition rules as :meth:`add_arguments`.
        """
        if not condition or not key or paths is None:
            return self
        wrapped = [self._wrap(path) for path in paths if path]
        return self._append_keyed(key, wrapped, multiple_times)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def build(self) -> str:
        """Return the argument string without a trailing separator."""
        return self.args_separator.join(self._tokens)

    def __str__(self) -> str:
        """Alias for :meth:`build`."""
        return self.build()

    def __repr__(self) -> str:
        """Return a debug representation including the current arguments."""
        return f"ArgsBuilder({self.build()!r})"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _pair(self, key: str, value: str) -> str:
        return f"{self.key_prefix}{key}{self.key_value_separator}{value}"

    def _wrap(self, path: str) -> str:
        return f"{self.path_wrapper}{path}{self.path_wrapper}"

    def _append_keyed(
        self, key: str, values: list[str], multiple_times: bool
    ) -> ArgsBuilder:
        if multiple_times:
            return self._extend(self._pair(key, value) for value in values)
        if not values:
            return self
        return self._append(self._pair(key, self.value_separator.join(values)))

    def _extend(self, tokens: cabc.Iterable[str]) -> ArgsBuilder:
        self._tokens.extend(tokens)
        return self

    def _append(self, token: str) -> ArgsBuilder:
        self._tokens.append(token)
        return self


def as_argument_string(arguments: ArgsBuilder | str | None) -> str:
    """Return *arguments* as a string; ``None`` yields ``""``."""
    if arguments is None:
        return ""
    if isinstance(arguments, ArgsBuilder):
        return arguments.build()
    return arguments


__all__ = ["ArgsBuilder", "as_argument_string"]
