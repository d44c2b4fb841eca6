"""Read legacy PDB files into a PDB structure.

    pdb, errors = open_pdb("1abc.pdb")                  # or .pdb.gz / .ent.gz
    pdb, errors = parse(stream, Context.show("rcsb:1abc"))
    pdb, errors = parse_text(text, level=StrictnessLevel.STRICT)

All three return the structure together with every diagnostic found. If any
diagnostic fails the strictness threshold, PDBParseError is raised instead
and no structure is returned.
"""

from __future__ import annotations

import gzip
import io
import zlib
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional

from strictpdb.config import load_settings
from strictpdb.core.errors import (
    Context,
    ErrorLevel,
    PDBError,
    PDBParseError,
    any_fails,
    resolve_level,
)
from strictpdb.core.logging_utils import get_logger
from strictpdb.parsers.assembler import StreamAssembler
from strictpdb.parsers.lexer import lex_line
from strictpdb.structs.pdb import PDB

logger = get_logger(__name__)

EXTENSIONS = [".pdb", ".ent", ".pdb.gz", ".ent.gz"]


def _threshold(level: Optional[str | int]) -> ErrorLevel:
    if level is None:
        return load_settings().strictness
    return resolve_level(level)


def _lines(stream: Iterable) -> Iterator[str]:
    """Yield lines without terminators, decoding bytes as UTF-8."""
    for raw in stream:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        yield raw.rstrip("\r\n")


def parse(
    stream: IO | Iterable,
    context: Context,
    level: Optional[str | int] = None,
) -> tuple[PDB, list[PDBError]]:
    """Parse a text or binary stream of PDB lines.

    ``context`` labels the whole input in diagnostics (usually the file
    name). ``level`` is the strictness threshold; when omitted it comes from
    STRICTPDB_STRICTNESS. A stream that cannot be read to the end raises
    PDBParseError with a single BreakingError, whatever was read before.
    """
    threshold = _threshold(level)
    assembler = StreamAssembler(context)

    linenumber = 0
    try:
        for linenumber, line in enumerate(_lines(stream), start=1):
            record, line_errors = lex_line(line, linenumber)
            assembler.add_errors(line_errors)
            if record is not None:
                assembler.add(record, linenumber, line)
    except (OSError, EOFError, UnicodeDecodeError, zlib.error) as e:
        raise PDBParseError([PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Could not read line",
            f"Could not read line {linenumber + 1} while parsing the input file ({e}).",
            context,
        )]) from e

    pdb, errors = assembler.finish()
    if any_fails(errors, threshold):
        logger.info("%s rejected: %d diagnostic(s) at threshold %s", context, len(errors), threshold.name)
        raise PDBParseError(errors)

    logger.info("Parsed %s: %r with %d diagnostic(s)", context, pdb, len(errors))
    return pdb, errors


def open_pdb(path: str | Path, level: Optional[str | int] = None) -> tuple[PDB, list[PDBError]]:
    """Open and parse a PDB file; gzip files are recognised by their ``.gz`` suffix."""
    path = Path(path)
    context = Context.show(str(path))
    opener = gzip.open if path.suffix == ".gz" else open
    try:
        handle = opener(path, "rb")
    except OSError as e:
        raise PDBParseError([PDBError(
            ErrorLevel.BREAKING_ERROR,
            "Could not open file",
            "Could not open the specified file, make sure the path is correct, you have "
            "permission, and that it is not open in another program.",
            context,
        )]) from e
    with handle:
        return parse(handle, context, level)


def parse_text(
    text: str,
    level: Optional[str | int] = None,
    label: str = "<string>",
) -> tuple[PDB, list[PDBError]]:
    """Parse PDB content held in a string."""
    return parse(io.StringIO(text), Context.show(label), level)
