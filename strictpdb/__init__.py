"""strictpdb: a strict reader for the legacy fixed-column PDB format.

    from strictpdb import open_pdb, PDBParseError

    try:
        pdb, errors = open_pdb("1abc.pdb", level="medium")
    except PDBParseError as e:
        for error in e.errors:
            print(error)
"""

from strictpdb.core.errors import Context, ErrorLevel, PDBError, PDBParseError, StrictnessLevel
from strictpdb.parsers.pdb_format import open_pdb, parse, parse_text
from strictpdb.structs import PDB

__version__ = "0.1.0"

__all__ = [
    "Context",
    "ErrorLevel",
    "PDBError",
    "PDBParseError",
    "StrictnessLevel",
    "open_pdb",
    "parse",
    "parse_text",
    "PDB",
]
