"""A minimal leveled logger writing ``name> message key: value`` lines."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, TextIO


class _Settings:
    """Process-wide logging settings shared by every logger."""

    def __init__(self) -> None:
        self.level = 0


_settings = _Settings()


def set_global_log_level(level: int) -> None:
    """Set the verbosity up to which info messages are printed."""
    _settings.level = int(level)


def get_global_log_level() -> int:
    """Return the current global verbosity."""
    return _settings.level


def _to_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return str(value)


def _join_pairs(values: tuple[Any, ...]) -> str:
    parts = []
    last = len(values) - 1
    for index, value in enumerate(values):
        parts.append(_to_string(value))
        if index % 2 == 0:
            parts.append(": ")
        elif index < last:
            parts.append(", ")
    return "".join(parts)


def _detailed_error(err: BaseException) -> str:
    details = tuple(getattr(err, "details", ()) or ())
    if not details:
        return str(err)
    return f"{err} ({_join_pairs(details)})"


@dataclass(frozen=True)
class Logger:
    """Immutable logger; derived loggers are created by ``v``, ``with_values`` and ``with_name``."""

    name: str = ""
    out: TextIO | None = None
    err: TextIO | None = None
    level: int = 0
    values: tuple[Any, ...] = field(default_factory=tuple)

    def _out(self) -> TextIO:
        return self.out if self.out is not None else sys.stderr

    def _err(self) -> TextIO:
        return self.err if self.err is not None else sys.stderr

    def enabled(self) -> bool:
        """Return True if info messages at this logger's level are printed."""
        return _settings.level >= self.level

    def v(self, level: int) -> Logger:
        """Return a logger whose verbosity is raised by ``level``."""
        return replace(self, level=self.level + level)

    def info(self, msg: str, *args: Any) -> None:
        """Print ``msg`` with key/value pairs if this logger is enabled."""
        if not self.enabled():
            return
        values = self.values + args
        if values:
            line = f"{self.name}> {msg} {_join_pairs(values)}\n"
        else:
            line = f"{self.name}> {msg}\n"
        self._out().write(line)

    def error(self, err: BaseException, msg: str, *args: Any) -> None:
        """Print ``msg`` and the error to the error stream, regardless of level."""
        values = self.values + args
        detail = _detailed_error(err)
        if values:
            line = f"{self.name}> {msg} {detail} {_join_pairs(values)}\n"
        else:
            line = f"{self.name}> {msg} {detail}\n"
        self._err().write(line)

    def with_values(self, *args: Any) -> Logger:
        """Return a logger that adds the given key/value pairs to every message."""
        return replace(self, values=self.values + args)

    def with_name(self, name: str) -> Logger:
        """Return a logger whose name has ``name`` appended."""
        return replace(self, name=self.name + name)


def new_logger(
    name: str = "",
    out: TextIO | None = None,
    err: TextIO | None = None,
    level: int = 0,
) -> Logger:
    """Create a logger; streams default to standard error."""
    return Logger(name=name, out=out, err=err).v(level)


log = new_logger("", None, None, 0)