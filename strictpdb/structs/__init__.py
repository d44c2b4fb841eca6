"""strictpdb.structs: the in-memory structure model.

    - base.py: Atom, Residue, Chain, Model
    - crystal.py: UnitCell, Symmetry, OrigX, Scale, MtriX
    - dbref.py: DatabaseReference, SequencePosition, SequenceDifference
    - pdb.py: PDB (top-level container)
"""

from strictpdb.structs.base import Atom, Chain, Model, Residue
from strictpdb.structs.crystal import MtriX, OrigX, Scale, Symmetry, TransformationMatrix, UnitCell
from strictpdb.structs.dbref import Database, DatabaseReference, SequenceDifference, SequencePosition
from strictpdb.structs.pdb import PDB

__all__ = [
    "Atom",
    "Chain",
    "Model",
    "Residue",
    "MtriX",
    "OrigX",
    "Scale",
    "Symmetry",
    "TransformationMatrix",
    "UnitCell",
    "Database",
    "DatabaseReference",
    "SequenceDifference",
    "SequencePosition",
    "PDB",
]
