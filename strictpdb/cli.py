from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from strictpdb.config import load_settings
from strictpdb.core.errors import PDBError, PDBParseError
from strictpdb.core.logging_utils import get_logger
from strictpdb.parsers.pdb_format import open_pdb
from strictpdb.structs.pdb import PDB

logger = get_logger(__name__)
app = typer.Typer(no_args_is_help=True)


def _load(path: Path, level: Optional[str]) -> tuple[Optional[PDB], list[PDBError]]:
    try:
        return open_pdb(path, level=level)
    except PDBParseError as e:
        return None, e.errors
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def _print_errors(errors: list[PDBError]) -> None:
    for error in errors:
        typer.echo(str(error))
        typer.echo("")


@app.command("check")
def check(
    path: Path = typer.Argument(..., help="PDB file (.pdb, .ent, optionally .gz)."),
    level: Optional[str] = typer.Option(None, help="Strictness: strict, medium, loose or an ErrorLevel name."),
    quiet: bool = typer.Option(False, help="Only print the verdict."),
):
    """Parse a file and report every diagnostic."""
    pdb, errors = _load(path, level)
    if not quiet:
        _print_errors(errors)
    threshold = level or load_settings().strictness.name
    if pdb is None:
        typer.echo(f"FAILED {path} ({len(errors)} diagnostic(s), threshold {threshold})")
        raise typer.Exit(code=1)
    typer.echo(f"OK {path} ({len(errors)} diagnostic(s), threshold {threshold}) {pdb!r}")


@app.command("summary")
def summary(
    path: Path = typer.Argument(..., help="PDB file."),
    level: Optional[str] = typer.Option(None, help="Strictness threshold."),
):
    """Print a JSON summary of a parsed file."""
    pdb, errors = _load(path, level)
    if pdb is None:
        _print_errors(errors)
        raise typer.Exit(code=1)
    d = pdb.to_dict()
    d["diagnostic_count"] = len(errors)
    typer.echo(json.dumps(d, indent=2))


@app.command("atoms")
def atoms(
    path: Path = typer.Argument(..., help="PDB file."),
    out: Path = typer.Option(..., help="Output table, .parquet or .csv."),
    level: Optional[str] = typer.Option(None, help="Strictness threshold."),
):
    """Write one row per atom to a parquet or CSV table."""
    pdb, errors = _load(path, level)
    if pdb is None:
        _print_errors(errors)
        raise typer.Exit(code=1)
    df = pdb.to_dataframe()
    out.parent.mkdir(parents=True, exist_ok=True)
    if out.suffix == ".parquet":
        df.to_parquet(out, index=False)
    else:
        df.to_csv(out, index=False)
    logger.info("Wrote %d atoms to %s", len(df), out)
