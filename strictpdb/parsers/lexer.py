"""Line lexer for the legacy PDB format.

Turns one text line into one record from ``records.py`` plus the
diagnostics found on that line. Fields are cut out of fixed, 0-based,
half-open column ranges. A field that does not parse as a number is
reported as an InvalidatingError and replaced by zero, so one bad field
never hides the rest of the line.

A line that cannot be lexed at all (unknown tag, ATOM line too short,
REMARK text too long) yields no record and exactly one diagnostic.
"""

from __future__ import annotations

from typing import Callable, Optional

from strictpdb.core.errors import Context, ErrorLevel, PDBError
from strictpdb.parsers.records import (
    Anisou,
    AtomRecord,
    Crystal,
    Dbref,
    Empty,
    End,
    EndModel,
    Master,
    ModelStart,
    Modres,
    MtrixRow,
    OrigXRow,
    Record,
    Remark,
    ScaleRow,
    Seqadv,
    Seqres,
    Ter,
)

LexResult = tuple[Optional[Record], list[PDBError]]

# Every fixed column used below lies inside an 80 character card
_CARD_WIDTH = 80
_MIN_ATOM_LENGTH = 54
_MAX_REMARK_LENGTH = 70
_DIGITS = "0123456789"


def parse_number(text: str, kind: type = float):
    """Parse ``text`` as ``kind`` after removing all whitespace.

    Raises ValueError when the result is not a number of that kind. Digit
    separators and non-ASCII digits, which ``int`` and ``float`` accept, are
    rejected.
    """
    compact = "".join(text.split())
    if "_" in compact or not compact.isascii():
        raise ValueError(f"not a plain number: {text!r}")
    return kind(compact)


class _Fields:
    """Column access for one line; collects number errors as it goes."""

    def __init__(self, linenumber: int, line: str):
        self.linenumber = linenumber
        self.line = line
        self.padded = line.ljust(_CARD_WIDTH)
        self.errors: list[PDBError] = []

    def context(self, start: int, end: int) -> Context:
        return Context.line_span(self.linenumber, self.line, start, end - start)

    def raw(self, start: int, end: Optional[int] = None) -> str:
        if end is None:
            return self.line[start:]
        return self.padded[start:end]

    def text(self, start: int, end: Optional[int] = None) -> str:
        return self.raw(start, end).strip()

    def char(self, index: int) -> str:
        """Single column as-is (a blank column stays ' ')."""
        return self.padded[index]

    def flag(self, index: int) -> str:
        """Single column with blank mapped to ''."""
        return self.padded[index].strip()

    def real(self, start: int, end: Optional[int] = None) -> float:
        return self._number(float, start, end)

    def integer(self, start: int, end: Optional[int] = None, signed: bool = True) -> int:
        value = self._number(int, start, end)
        if not signed and value < 0:
            self._not_a_number(start, end)
            return 0
        return value

    def _number(self, kind: type, start: int, end: Optional[int]):
        try:
            return parse_number(self.raw(start, end), kind)
        except ValueError:
            self._not_a_number(start, end)
            return kind(0)

    def _not_a_number(self, start: int, end: Optional[int]) -> None:
        stop = len(self.line) if end is None else end
        self.errors.append(PDBError(
            ErrorLevel.INVALIDATING_ERROR,
            "Not a number",
            "The text presented is not a number of the right kind.",
            self.context(start, stop),
        ))


# ======================================================================
# Dispatch
# ======================================================================

def _unrecognised(linenumber: int, line: str) -> LexResult:
    return None, [PDBError(
        ErrorLevel.GENERAL_WARNING,
        "Could not recognise tag.",
        "Could not parse the tag above, it is possible that it is valid PDB but just not supported right now.",
        Context.full_line(linenumber, line),
    )]


def lex_line(line: str, linenumber: int) -> LexResult:
    """Lex a single line (without its line terminator).

    Returns ``(record, errors)``; ``record`` is None when nothing usable
    could be read from the line, in which case ``errors`` explains why.
    """
    if len(line) >= 6:
        lexer = _TAGGED.get(line[:6])
        if lexer is not None:
            return lexer(_Fields(linenumber, line))
        return _unrecognised(linenumber, line)
    if len(line) >= 3:
        if line[:3] in _SHORT:
            return _SHORT[line[:3]](), []
        return _unrecognised(linenumber, line)
    if line:
        return _unrecognised(linenumber, line)
    return Empty(), []


# ======================================================================
# Per-record lexers
# ======================================================================

def _lex_remark(f: _Fields) -> LexResult:
    number = f.integer(7, 10, signed=False)
    text = f.line[11:] if len(f.line) > 11 else ""
    if len(text) > _MAX_REMARK_LENGTH:
        return None, [PDBError(
            ErrorLevel.LOOSE_WARNING,
            "Remark too long",
            f"The REMARK is too long, the max is {_MAX_REMARK_LENGTH} characters.",
            f.context(11, len(f.line)),
        )]
    return Remark(number, text), f.errors


def _lex_model(f: _Fields) -> LexResult:
    return ModelStart(f.integer(6, signed=False)), f.errors


def _atom_basics(f: _Fields) -> dict:
    """Identity columns shared by ATOM, HETATM and ANISOU."""
    fields = {
        "serial_number": f.integer(7, 11, signed=False),
        "name": f.text(12, 16),
        "alt_loc": f.flag(16),
        "residue_name": f.text(17, 20),
        "chain_id": f.char(21),
        "residue_serial_number": f.integer(22, 26),
        "insertion_code": f.flag(26),
        "segment_id": f.text(72, 76),
        "element": f.text(76, 78),
        "charge": 0,
    }

    digit, sign = f.char(78), f.char(79)
    if digit == " " and sign == " ":
        return fields
    if digit not in _DIGITS:
        f.errors.append(PDBError(
            ErrorLevel.INVALIDATING_ERROR,
            "Atom charge is not correct",
            "The charge is not numeric, it is defined to be [0-9][+-], so two characters in total.",
            f.context(78, 79),
        ))
    elif sign not in "+-":
        f.errors.append(PDBError(
            ErrorLevel.INVALIDATING_ERROR,
            "Atom charge is not correct",
            "The charge is not properly signed, it is defined to be [0-9][+-], so two characters in total.",
            f.context(79, 80),
        ))
    else:
        fields["charge"] = -int(digit) if sign == "-" else int(digit)
    return fields


def _lex_atom(f: _Fields, hetero: bool) -> LexResult:
    if len(f.line) < _MIN_ATOM_LENGTH:
        return None, [PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Atom line too short",
            "This line is too short to contain all necessary elements (up to `z` at least).",
            Context.full_line(f.linenumber, f.line),
        )]
    x = f.real(30, 38)
    y = f.real(38, 46)
    z = f.real(46, 54)
    occupancy = f.real(54, 60) if len(f.line) >= 60 else 1.0
    b_factor = f.real(60, 66) if len(f.line) >= 66 else 0.0
    basics = _atom_basics(f)
    record = AtomRecord(
        hetero=hetero, x=x, y=y, z=z, occupancy=occupancy, b_factor=b_factor, **basics
    )
    return record, f.errors


def _lex_anisou(f: _Fields) -> LexResult:
    raw = [f.integer(start, start + 7) for start in range(28, 70, 7)]
    factors = (
        (raw[0] / 10000.0, raw[1] / 10000.0, raw[2] / 10000.0),
        (raw[3] / 10000.0, raw[4] / 10000.0, raw[5] / 10000.0),
    )
    return Anisou(factors=factors, **_atom_basics(f)), f.errors


def _lex_crystal(f: _Fields) -> LexResult:
    a, b, c = (f.real(start, start + 9) for start in (6, 15, 24))
    alpha, beta, gamma = (f.real(start, start + 7) for start in (33, 40, 47))
    space_group = f.line[55:66]
    z = f.integer(66, signed=False) if len(f.line) > 66 else 1
    return Crystal(a, b, c, alpha, beta, gamma, space_group, z), f.errors


def _transformation(f: _Fields) -> tuple[float, float, float, float]:
    a, b, c = (f.real(start, start + 10) for start in (10, 20, 30))
    return (a, b, c, f.real(45, 55))


def _lex_origx(row: int) -> Callable[[_Fields], LexResult]:
    def lex(f: _Fields) -> LexResult:
        return OrigXRow(row, _transformation(f)), f.errors
    return lex


def _lex_scale(row: int) -> Callable[[_Fields], LexResult]:
    def lex(f: _Fields) -> LexResult:
        return ScaleRow(row, _transformation(f)), f.errors
    return lex


def _lex_mtrix(row: int) -> Callable[[_Fields], LexResult]:
    def lex(f: _Fields) -> LexResult:
        serial_number = f.integer(7, 10, signed=False)
        values = _transformation(f)
        given = len(f.line) >= 60 and f.line[59] == "1"
        return MtrixRow(row, serial_number, values, given), f.errors
    return lex


def _lex_master(f: _Fields) -> LexResult:
    counts = [f.integer(start, start + 5, signed=False) for start in range(10, 70, 5)]
    return Master(*counts), f.errors


def _lex_seqres(f: _Fields) -> LexResult:
    serial_number = f.integer(7, 10, signed=False)
    chain_id = f.char(11)
    residue_count = f.integer(13, 17, signed=False)
    residues = []
    index = 19
    stop = min(len(f.line), 71)
    while index + 3 <= stop:
        name = f.line[index:index + 3].strip()
        if not name:
            break
        residues.append(name)
        index += 4
    return Seqres(serial_number, chain_id, residue_count, tuple(residues)), f.errors


def _lex_dbref(f: _Fields) -> LexResult:
    record = Dbref(
        id_code=f.text(7, 11),
        chain_id=f.char(12),
        position=(f.integer(14, 18), f.flag(18), f.integer(20, 24), f.flag(24)),
        database=f.text(26, 32),
        database_accession=f.text(33, 41),
        database_id_code=f.text(42, 54),
        database_position=(f.integer(55, 60), f.flag(60), f.integer(62, 67), f.flag(67)),
    )
    return record, f.errors


def _lex_seqadv(f: _Fields) -> LexResult:
    id_code = f.text(7, 11)
    residue_name = f.text(12, 15)
    chain_id = f.char(16)
    sequence_number = f.integer(18, 22)
    insertion_code = f.flag(22)
    database = f.text(24, 28)
    database_accession = f.text(29, 38)
    database_residue = None
    if f.text(39, 48):
        database_residue = (f.text(39, 42), f.integer(43, 48))
    comment = f.text(49)
    record = Seqadv(
        id_code, chain_id, residue_name, sequence_number, insertion_code,
        database, database_accession, database_residue, comment,
    )
    return record, f.errors


def _lex_modres(f: _Fields) -> LexResult:
    record = Modres(
        id_code=f.text(7, 11),
        residue_name=f.text(12, 15),
        chain_id=f.char(16),
        sequence_number=f.integer(18, 22),
        insertion_code=f.flag(22),
        standard_residue=f.text(24, 27),
        comment=f.text(29),
    )
    return record, f.errors


_TAGGED: dict[str, Callable[[_Fields], LexResult]] = {
    "REMARK": _lex_remark,
    "ATOM  ": lambda f: _lex_atom(f, hetero=False),
    "HETATM": lambda f: _lex_atom(f, hetero=True),
    "ANISOU": _lex_anisou,
    "CRYST1": _lex_crystal,
    "ORIGX1": _lex_origx(0),
    "ORIGX2": _lex_origx(1),
    "ORIGX3": _lex_origx(2),
    "SCALE1": _lex_scale(0),
    "SCALE2": _lex_scale(1),
    "SCALE3": _lex_scale(2),
    "MTRIX1": _lex_mtrix(0),
    "MTRIX2": _lex_mtrix(1),
    "MTRIX3": _lex_mtrix(2),
    "MODEL ": _lex_model,
    "MASTER": _lex_master,
    "DBREF ": _lex_dbref,
    "SEQRES": _lex_seqres,
    "SEQADV": _lex_seqadv,
    "MODRES": _lex_modres,
    "ENDMDL": lambda f: (EndModel(), []),
    "TER   ": lambda f: (Ter(), []),
    "END   ": lambda f: (End(), []),
}

_SHORT: dict[str, Callable[[], Record]] = {
    "TER": Ter,
    "END": End,
}
