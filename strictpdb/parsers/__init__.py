"""strictpdb.parsers: reading the legacy PDB format.

Architecture:
    - records.py: one frozen dataclass per supported record tag
    - lexer.py: lex_line (one line -> record + diagnostics)
    - assembler.py: StreamAssembler (records -> PDB, staging forward references)
    - sequence.py: SEQRES reconciliation against observed residues
    - checks.py: MASTER checksum and MODRES application
    - validate.py: whole-structure checks
    - pdb_format.py: open_pdb / parse / parse_text entry points

Usage::

    from strictpdb.parsers import open_pdb

    pdb, errors = open_pdb("1abc.pdb", level="strict")
    for chain in pdb.chains():
        print(chain.chain_id, chain.num_residues)
"""

from strictpdb.parsers.assembler import StreamAssembler
from strictpdb.parsers.lexer import lex_line
from strictpdb.parsers.pdb_format import EXTENSIONS, open_pdb, parse, parse_text
from strictpdb.parsers.records import RECORD_TYPES, Record

__all__ = [
    "StreamAssembler",
    "lex_line",
    "EXTENSIONS",
    "open_pdb",
    "parse",
    "parse_text",
    "RECORD_TYPES",
    "Record",
]
