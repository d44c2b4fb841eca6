"""Hierarchical structure objects: Model -> Chain -> Residue -> Atom.

Hierarchy:
    PDB (top-level, see pdb.py)
    └── models: list[Model]
        ├── chains: list[Chain]          (ATOM records)
        └── hetero_chains: list[Chain]   (HETATM records)
            └── residues: list[Residue]  (sorted by serial number)
                └── atoms: list[Atom]

Unlike read-only views, these objects are built up record by record, so
they are mutable. Constructors that take names check them and raise
InvalidCharactersError instead of accepting unprintable text.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

import numpy as np

from strictpdb.core.errors import InvalidCharactersError

if TYPE_CHECKING:
    from strictpdb.structs.dbref import DatabaseReference


def check_chars(value: str, what: str) -> str:
    """Raise InvalidCharactersError if ``value`` is not printable ASCII."""
    for ch in value:
        if not " " <= ch <= "~":
            raise InvalidCharactersError(
                f"The {what} {value!r} contains invalid character {ch!r}; "
                "only printable ASCII is allowed."
            )
    return value


# ======================================================================
# Atom
# ======================================================================

@dataclass(eq=False)
class Atom:
    """Single atom with coordinates and identity."""

    serial_number: int
    name: str
    x: float
    y: float
    z: float
    occupancy: float = 1.0
    b_factor: float = 0.0
    element: str = ""
    charge: int = 0
    alt_loc: str = ""
    segment_id: str = ""
    anisotropic_temperature_factors: Optional[np.ndarray] = None

    def __post_init__(self) -> None:
        check_chars(self.name, "atom name")
        check_chars(self.element, "element")
        check_chars(self.alt_loc, "alternate location")
        check_chars(self.segment_id, "segment id")

    @property
    def coords(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def set_anisotropic_temperature_factors(self, factors) -> None:
        """Store the six ANISOU factors as a 2x3 array (U11 U22 U33 / U12 U13 U23)."""
        self.anisotropic_temperature_factors = np.asarray(factors, dtype=float).reshape(2, 3)

    def __repr__(self) -> str:
        return f"<Atom {self.serial_number} {self.name} ({self.x:.3f}, {self.y:.3f}, {self.z:.3f})>"


# ======================================================================
# Residue
# ======================================================================

@dataclass(eq=False)
class Residue:
    """Single residue; ``atoms`` is empty for residues known only from SEQRES."""

    serial_number: int
    name: str
    insertion_code: str = ""
    atoms: list[Atom] = field(default_factory=list)
    modification: Optional[tuple[str, str]] = None

    def __post_init__(self) -> None:
        check_chars(self.name, "residue name")
        check_chars(self.insertion_code, "insertion code")

    @property
    def num_atoms(self) -> int:
        return len(self.atoms)

    @property
    def ca(self) -> Optional[Atom]:
        """Alpha-carbon atom, or None."""
        for a in self.atoms:
            if a.name == "CA":
                return a
        return None

    def add_atom(self, atom: Atom) -> None:
        self.atoms.append(atom)

    def set_modification(self, modification: tuple[str, str]) -> None:
        """Mark this residue as a modified form of a standard residue.

        ``modification`` is (standard residue name, free-text comment).
        """
        standard_name, comment = modification
        check_chars(standard_name, "standard residue name")
        check_chars(comment, "modification comment")
        self.modification = (standard_name, comment)

    def __repr__(self) -> str:
        return f"<Residue {self.name} {self.serial_number}{self.insertion_code} atoms={self.num_atoms}>"


# ======================================================================
# Chain
# ======================================================================

class Chain:
    """Labelled strand; residues are kept in ascending serial number order."""

    def __init__(self, chain_id: str):
        self.chain_id = check_chars(chain_id, "chain id")
        self._residues: list[Residue] = []
        self._lookup: dict[tuple[int, str, str], Residue] = {}
        self.database_reference: Optional["DatabaseReference"] = None

    @property
    def residues(self) -> list[Residue]:
        return list(self._residues)

    @property
    def num_residues(self) -> int:
        return len(self._residues)

    @property
    def atom_count(self) -> int:
        return sum(r.num_atoms for r in self._residues)

    def atoms(self) -> Iterator[Atom]:
        for residue in self._residues:
            yield from residue.atoms

    def find_residue(self, serial_number: int, name: str, insertion_code: str = "") -> Optional[Residue]:
        return self._lookup.get((serial_number, insertion_code, name))

    def insert_residue(self, residue: Residue) -> None:
        """Insert keeping serial number order; equal serials keep arrival order."""
        self._lookup.setdefault((residue.serial_number, residue.insertion_code, residue.name), residue)
        if not self._residues or self._residues[-1].serial_number <= residue.serial_number:
            self._residues.append(residue)
            return
        index = len(self._residues)
        for i, existing in enumerate(self._residues):
            if existing.serial_number > residue.serial_number:
                index = i
                break
        self._residues.insert(index, residue)

    def add_atom(
        self, atom: Atom, residue_serial_number: int, residue_name: str, insertion_code: str = ""
    ) -> Residue:
        """Add ``atom`` to the matching residue, creating the residue if needed."""
        residue = self.find_residue(residue_serial_number, residue_name, insertion_code)
        if residue is None:
            residue = Residue(residue_serial_number, residue_name, insertion_code)
            self.insert_residue(residue)
        residue.add_atom(atom)
        return residue

    def set_database_reference(self, reference: "DatabaseReference") -> None:
        self.database_reference = reference

    def __len__(self) -> int:
        return len(self._residues)

    def __iter__(self) -> Iterator[Residue]:
        return iter(self._residues)

    def __repr__(self) -> str:
        return f"<Chain {self.chain_id!r} residues={self.num_residues} atoms={self.atom_count}>"


# ======================================================================
# Model
# ======================================================================

class Model:
    """One coordinate set of a (possibly multi-model) file."""

    def __init__(self, serial_number: int):
        self.serial_number = serial_number
        self.chains: list[Chain] = []
        self.hetero_chains: list[Chain] = []
        self._insertion_order: list[Atom] = []

    @staticmethod
    def _get_chain(chains: list[Chain], chain_id: str) -> Chain:
        for chain in chains:
            if chain.chain_id == chain_id:
                return chain
        chain = Chain(chain_id)
        chains.append(chain)
        return chain

    def add_atom(
        self, atom: Atom, chain_id: str, residue_serial_number: int, residue_name: str, insertion_code: str = ""
    ) -> None:
        self._get_chain(self.chains, chain_id).add_atom(atom, residue_serial_number, residue_name, insertion_code)
        self._insertion_order.append(atom)

    def add_hetero_atom(
        self, atom: Atom, chain_id: str, residue_serial_number: int, residue_name: str, insertion_code: str = ""
    ) -> None:
        self._get_chain(self.hetero_chains, chain_id).add_atom(atom, residue_serial_number, residue_name, insertion_code)
        self._insertion_order.append(atom)

    def all_chains(self) -> Iterator[Chain]:
        yield from self.chains
        yield from self.hetero_chains

    def atoms(self) -> Iterator[Atom]:
        for chain in self.all_chains():
            yield from chain.atoms()

    def atoms_newest_first(self) -> Iterator[Atom]:
        """Atoms in reverse insertion order."""
        return reversed(self._insertion_order)

    @property
    def atom_count(self) -> int:
        return sum(c.atom_count for c in self.chains)

    @property
    def hetero_atom_count(self) -> int:
        return sum(c.atom_count for c in self.hetero_chains)

    @property
    def total_atom_count(self) -> int:
        return self.atom_count + self.hetero_atom_count

    def __repr__(self) -> str:
        return (
            f"<Model {self.serial_number} chains={len(self.chains)} "
            f"hetero_chains={len(self.hetero_chains)} atoms={self.total_atom_count}>"
        )
