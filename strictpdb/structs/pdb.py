"""Top-level container for a parsed PDB file."""

from __future__ import annotations

from typing import Iterator, Optional

import pandas as pd

from strictpdb.structs.base import Atom, Chain, Model
from strictpdb.structs.crystal import MtriX, OrigX, Scale, Symmetry, UnitCell


class PDB:
    """A parsed PDB file: remarks, models and crystallographic metadata."""

    def __init__(self) -> None:
        self.remarks: list[tuple[int, str]] = []
        self.models: list[Model] = []
        self.unit_cell: Optional[UnitCell] = None
        self.symmetry: Optional[Symmetry] = None
        self.origx: Optional[OrigX] = None
        self.scale: Optional[Scale] = None
        self.mtrix: list[MtriX] = []

    # --- mutation -----------------------------------------------------------

    def add_remark(self, number: int, text: str) -> None:
        self.remarks.append((number, text))

    def add_model(self, model: Model) -> None:
        self.models.append(model)

    def get_or_create_origx(self) -> OrigX:
        if self.origx is None:
            self.origx = OrigX()
        return self.origx

    def get_or_create_scale(self) -> Scale:
        if self.scale is None:
            self.scale = Scale()
        return self.scale

    def get_or_create_mtrix(self, serial_number: int) -> MtriX:
        for mtrix in self.mtrix:
            if mtrix.serial_number == serial_number:
                return mtrix
        mtrix = MtriX(serial_number)
        self.mtrix.append(mtrix)
        return mtrix

    # --- navigation ---------------------------------------------------------

    def chains(self) -> Iterator[Chain]:
        """Standard (ATOM) chains of every model, in model order."""
        for model in self.models:
            yield from model.chains

    def all_chains(self) -> Iterator[Chain]:
        """Standard then hetero chains of every model, in model order."""
        for model in self.models:
            yield from model.all_chains()

    def get_chain(self, chain_id: str) -> Optional[Chain]:
        """First standard chain with ``chain_id``."""
        for chain in self.chains():
            if chain.chain_id == chain_id:
                return chain
        return None

    def atoms(self) -> Iterator[Atom]:
        for model in self.models:
            yield from model.atoms()

    # --- counts -------------------------------------------------------------

    @property
    def remark_count(self) -> int:
        return len(self.remarks)

    @property
    def model_count(self) -> int:
        return len(self.models)

    @property
    def chain_count(self) -> int:
        return len(self.models[0].chains) if self.models else 0

    @property
    def total_atom_count(self) -> int:
        return sum(m.total_atom_count for m in self.models)

    def valid_transform_count(self) -> int:
        """Number of fully specified ORIGX, SCALE and MTRIX transforms."""
        count = sum(1 for m in self.mtrix if m.valid())
        if self.origx is not None and self.origx.valid():
            count += 1
        if self.scale is not None and self.scale.valid():
            count += 1
        return count

    # --- export -------------------------------------------------------------

    def to_dict(self) -> dict:
        """Flat summary dict."""
        cell = self.unit_cell
        return {
            "model_count": self.model_count,
            "chain_count": self.chain_count,
            "chain_ids": [c.chain_id for c in self.models[0].chains] if self.models else [],
            "atom_count": self.total_atom_count,
            "remark_count": self.remark_count,
            "space_group": self.symmetry.hermann_mauguin if self.symmetry else None,
            "space_group_number": self.symmetry.number if self.symmetry else None,
            "cell_a": cell.a if cell else None,
            "cell_b": cell.b if cell else None,
            "cell_c": cell.c if cell else None,
            "cell_alpha": cell.alpha if cell else None,
            "cell_beta": cell.beta if cell else None,
            "cell_gamma": cell.gamma if cell else None,
            "transform_count": self.valid_transform_count(),
        }

    def to_dataframe(self) -> pd.DataFrame:
        """One row per atom across all models."""
        rows = []
        for model in self.models:
            for hetero, chains in ((False, model.chains), (True, model.hetero_chains)):
                for chain in chains:
                    for residue in chain:
                        for atom in residue.atoms:
                            rows.append({
                                "model": model.serial_number,
                                "hetero": hetero,
                                "chain_id": chain.chain_id,
                                "residue_serial": residue.serial_number,
                                "residue_name": residue.name,
                                "insertion_code": residue.insertion_code,
                                "atom_serial": atom.serial_number,
                                "atom_name": atom.name,
                                "alt_loc": atom.alt_loc,
                                "element": atom.element,
                                "charge": atom.charge,
                                "x": atom.x,
                                "y": atom.y,
                                "z": atom.z,
                                "occupancy": atom.occupancy,
                                "b_factor": atom.b_factor,
                            })
        columns = [
            "model", "hetero", "chain_id", "residue_serial", "residue_name", "insertion_code",
            "atom_serial", "atom_name", "alt_loc", "element", "charge",
            "x", "y", "z", "occupancy", "b_factor",
        ]
        return pd.DataFrame(rows, columns=columns)

    def __repr__(self) -> str:
        return (
            f"<PDB models={self.model_count} chains={self.chain_count} "
            f"atoms={self.total_atom_count}>"
        )
