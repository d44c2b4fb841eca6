"""Whole-structure checks, run once on the finished PDB."""

from __future__ import annotations

from strictpdb.core.errors import Context, ErrorLevel, PDBError
from strictpdb.structs.pdb import PDB


def validate(pdb: PDB, context: Context) -> list[PDBError]:
    """Return diagnostics for problems only visible on the whole structure."""
    errors = []

    transforms = [("ORIGX", pdb.origx), ("SCALE", pdb.scale)]
    transforms.extend((f"MTRIX (serial {m.serial_number})", m) for m in pdb.mtrix)
    for name, transform in transforms:
        if transform is not None and not transform.valid():
            errors.append(PDBError(
                ErrorLevel.LOOSE_WARNING,
                "Transformation incomplete",
                f"The {name} transformation does not have all three rows defined.",
                context,
            ))

    if pdb.scale is not None and pdb.unit_cell is None:
        errors.append(PDBError(
            ErrorLevel.LOOSE_WARNING,
            "SCALE without unit cell",
            "SCALE records were found but no CRYST1 record defines the unit cell.",
            context,
        ))

    if len(pdb.models) > 1:
        expected = pdb.models[0].total_atom_count
        for model in pdb.models[1:]:
            if model.total_atom_count != expected:
                errors.append(PDBError(
                    ErrorLevel.STRICT_WARNING,
                    "Models differ",
                    f"Model {model.serial_number} has {model.total_atom_count} atoms while model "
                    f"{pdb.models[0].serial_number} has {expected}.",
                    context,
                ))
    return errors
