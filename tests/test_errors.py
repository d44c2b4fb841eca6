"""Tests for the diagnostic model: levels, thresholds and contexts."""

import pytest

from strictpdb.core.errors import (
    Context,
    ErrorLevel,
    PDBError,
    PDBParseError,
    StrictnessLevel,
    any_fails,
    resolve_level,
)


def _error(level: ErrorLevel) -> PDBError:
    return PDBError(level, "title", "detail", Context.show("test"))


def test_levels_are_ordered() -> None:
    assert (
        ErrorLevel.GENERAL_WARNING
        < ErrorLevel.LOOSE_WARNING
        < ErrorLevel.STRICT_WARNING
        < ErrorLevel.INVALIDATING_ERROR
        < ErrorLevel.BREAKING_ERROR
    )


@pytest.mark.parametrize("threshold", list(ErrorLevel))
def test_general_warning_never_fails(threshold: ErrorLevel) -> None:
    assert not _error(ErrorLevel.GENERAL_WARNING).fails(threshold)


@pytest.mark.parametrize("threshold", list(ErrorLevel))
def test_breaking_error_always_fails(threshold: ErrorLevel) -> None:
    assert _error(ErrorLevel.BREAKING_ERROR).fails(threshold)


def test_strict_warning_fails_at_or_below_its_level() -> None:
    warning = _error(ErrorLevel.STRICT_WARNING)
    assert warning.fails(ErrorLevel.LOOSE_WARNING)
    assert warning.fails(ErrorLevel.STRICT_WARNING)
    assert not warning.fails(ErrorLevel.INVALIDATING_ERROR)
    assert not warning.fails(ErrorLevel.BREAKING_ERROR)


def test_presets() -> None:
    invalid = _error(ErrorLevel.INVALIDATING_ERROR)
    assert invalid.fails(resolve_level(StrictnessLevel.STRICT))
    assert invalid.fails(resolve_level(StrictnessLevel.MEDIUM))
    assert not invalid.fails(resolve_level(StrictnessLevel.LOOSE))


@pytest.mark.parametrize(
    "value, expected",
    [
        ("strict", ErrorLevel.LOOSE_WARNING),
        ("Medium", ErrorLevel.INVALIDATING_ERROR),
        ("loose", ErrorLevel.BREAKING_ERROR),
        ("strict_warning", ErrorLevel.STRICT_WARNING),
        ("STRICT-WARNING", ErrorLevel.STRICT_WARNING),
        (2, ErrorLevel.STRICT_WARNING),
    ],
)
def test_resolve_level(value, expected) -> None:
    assert resolve_level(value) == expected


def test_resolve_level_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown strictness level"):
        resolve_level("pedantic")


def test_any_fails() -> None:
    errors = [_error(ErrorLevel.GENERAL_WARNING), _error(ErrorLevel.LOOSE_WARNING)]
    assert not any_fails(errors, ErrorLevel.STRICT_WARNING)
    assert any_fails(errors, ErrorLevel.LOOSE_WARNING)


class TestContext:
    def test_whole_input(self) -> None:
        c = Context.show("1abc.pdb")
        assert c.is_whole_input
        assert str(c) == "1abc.pdb"

    def test_full_line(self) -> None:
        c = Context.full_line(12, "ATOM  bad")
        assert not c.is_whole_input
        assert str(c) == "  12 | ATOM  bad"

    def test_line_span_underlines_columns(self) -> None:
        c = Context.line_span(3, "REMARK XYZ", 7, 3)
        first, second = str(c).split("\n")
        assert first == "   3 | REMARK XYZ"
        assert second == " " * (7 + 7) + "^^^"


def test_error_str_contains_parts() -> None:
    e = PDBError(ErrorLevel.STRICT_WARNING, "MASTER checksum failed", "counts differ", Context.show("f.pdb"))
    text = str(e)
    assert text.startswith("StrictWarning: MASTER checksum failed")
    assert "f.pdb" in text
    assert "counts differ" in text


def test_parse_error_carries_diagnostics() -> None:
    errors = [_error(ErrorLevel.STRICT_WARNING), _error(ErrorLevel.BREAKING_ERROR)]
    exc = PDBParseError(errors)
    assert exc.errors == errors
    assert "BreakingError" in str(exc)
