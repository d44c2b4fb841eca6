"""Diagnostics raised while reading PDB files.

Every problem found while parsing is recorded as a PDBError with a level
from the ErrorLevel ladder. Whether a run is accepted is decided once, at the
end, by comparing all collected levels against a strictness threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional


class ErrorLevel(IntEnum):
    """Severity of a diagnostic, ordered from harmless to fatal."""

    GENERAL_WARNING = 0  # unrecognised input, never fails a run
    LOOSE_WARNING = 1
    STRICT_WARNING = 2
    INVALIDATING_ERROR = 3
    BREAKING_ERROR = 4

    @property
    def description(self) -> str:
        return _LEVEL_DESCRIPTIONS[self]


_LEVEL_DESCRIPTIONS = {
    ErrorLevel.GENERAL_WARNING: "GeneralWarning",
    ErrorLevel.LOOSE_WARNING: "LooseWarning",
    ErrorLevel.STRICT_WARNING: "StrictWarning",
    ErrorLevel.INVALIDATING_ERROR: "InvalidatingError",
    ErrorLevel.BREAKING_ERROR: "BreakingError",
}


class StrictnessLevel(IntEnum):
    """Named thresholds: the lowest ErrorLevel that makes a parse fail."""

    STRICT = ErrorLevel.LOOSE_WARNING
    MEDIUM = ErrorLevel.INVALIDATING_ERROR
    LOOSE = ErrorLevel.BREAKING_ERROR


def resolve_level(value: str | int) -> ErrorLevel:
    """Turn a preset name, level name or integer into a threshold ErrorLevel."""
    if isinstance(value, int):
        return ErrorLevel(int(value))
    key = value.strip().upper().replace("-", "_")
    if key in StrictnessLevel.__members__:
        return ErrorLevel(int(StrictnessLevel[key]))
    if key in ErrorLevel.__members__:
        return ErrorLevel[key]
    raise ValueError(f"Unknown strictness level: {value!r}")


# ======================================================================
# Location of a diagnostic
# ======================================================================

@dataclass(frozen=True)
class Context:
    """Where a diagnostic applies.

    Three shapes are used:
      - whole input: only ``label`` is set (usually the file name)
      - full line: ``linenumber`` and ``line``
      - line span: additionally ``offset`` and ``length`` (0-based columns)
    """

    label: str = ""
    linenumber: Optional[int] = None
    line: Optional[str] = None
    offset: Optional[int] = None
    length: Optional[int] = None

    @classmethod
    def show(cls, label: str) -> "Context":
        return cls(label=label)

    @classmethod
    def full_line(cls, linenumber: int, line: str) -> "Context":
        return cls(linenumber=linenumber, line=line)

    @classmethod
    def line_span(cls, linenumber: int, line: str, offset: int, length: int) -> "Context":
        return cls(linenumber=linenumber, line=line, offset=offset, length=max(length, 0))

    @property
    def is_whole_input(self) -> bool:
        return self.linenumber is None

    def __str__(self) -> str:
        if self.linenumber is None:
            return self.label
        prefix = f"{self.linenumber:>4} | "
        text = f"{prefix}{self.line or ''}"
        if self.offset is not None:
            marker = " " * (len(prefix) + self.offset) + "^" * max(self.length or 1, 1)
            text = f"{text}\n{marker}"
        return text


# ======================================================================
# Diagnostics
# ======================================================================

@dataclass(frozen=True)
class PDBError:
    """A single diagnostic produced while parsing."""

    level: ErrorLevel
    short_description: str
    long_description: str
    context: Context

    def fails(self, threshold: ErrorLevel) -> bool:
        """True when this diagnostic makes a run with ``threshold`` fail."""
        if self.level == ErrorLevel.GENERAL_WARNING:
            return False
        return self.level >= threshold

    def __str__(self) -> str:
        return (
            f"{self.level.description}: {self.short_description}\n"
            f"{self.context}\n{self.long_description}"
        )


class PDBParseError(Exception):
    """Raised when a parse is rejected; carries every diagnostic found."""

    def __init__(self, errors: Iterable[PDBError]):
        self.errors = list(errors)
        worst = max((e.level for e in self.errors), default=ErrorLevel.BREAKING_ERROR)
        super().__init__(
            f"Parsing failed with {len(self.errors)} diagnostic(s), worst: {worst.description}"
        )


class InvalidCharactersError(ValueError):
    """A name or text field contains characters outside printable ASCII."""


class UnknownSpaceGroupError(ValueError):
    """The space group symbol is not in the space group table."""


def any_fails(errors: Iterable[PDBError], threshold: ErrorLevel) -> bool:
    return any(e.fails(threshold) for e in errors)
