"""MASTER checksum validation and MODRES application."""

from __future__ import annotations

from strictpdb.core.errors import Context, ErrorLevel, InvalidCharactersError, PDBError
from strictpdb.parsers.records import Master, Modres
from strictpdb.structs.pdb import PDB


def validate_master(pdb: PDB, master: Master, context: Context) -> list[PDBError]:
    """Compare the MASTER counts with what has been assembled so far.

    The four checks are independent; every mismatch gets its own diagnostic.
    """
    errors = []
    if master.num_remark != pdb.remark_count:
        errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "MASTER checksum failed",
            f"The number of REMARKS ({pdb.remark_count}) is different then posed in the "
            f"MASTER Record ({master.num_remark})",
            context,
        ))
    if master.num_empty != 0:
        errors.append(PDBError(
            ErrorLevel.LOOSE_WARNING,
            "MASTER checksum failed",
            f"The empty checksum number is not empty (value: {master.num_empty}) while it is "
            "defined to be empty.",
            context,
        ))
    xform = 3 * pdb.valid_transform_count()
    if master.num_xform != xform:
        errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "MASTER checksum failed",
            f"The number of coordinate transformation records ({xform}) is different then posed "
            f"in the MASTER Record ({master.num_xform})",
            context,
        ))
    if master.num_coord != pdb.total_atom_count:
        errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "MASTER checksum failed",
            f"The number of Atoms (Normal + Hetero) ({pdb.total_atom_count}) is different then "
            f"posed in the MASTER Record ({master.num_coord})",
            context,
        ))
    return errors


def apply_modifications(pdb: PDB, modifications: list[tuple[Context, Modres]]) -> list[PDBError]:
    """Attach each MODRES record to its residue.

    The chain is looked up among standard and hetero chains (modified
    residues are often HETATM); the first residue matching name and number
    receives the modification.
    """
    errors = []
    for context, record in modifications:
        chains = [c for c in pdb.all_chains() if c.chain_id == record.chain_id]
        if not chains:
            errors.append(PDBError(
                ErrorLevel.INVALIDATING_ERROR,
                "Modified residue could not be found",
                "The chain presented in this MODRES record could not be found in the PDB file.",
                context,
            ))
            continue

        residue = None
        for chain in chains:
            residue = chain.find_residue(record.sequence_number, record.residue_name, record.insertion_code)
            if residue is not None:
                break
        if residue is None:
            errors.append(PDBError(
                ErrorLevel.INVALIDATING_ERROR,
                "Modified residue could not be found",
                "The residue presented in this MODRES record could not be found in the specified "
                "chain in the PDB file.",
                context,
            ))
            continue

        try:
            residue.set_modification((record.standard_residue, record.comment))
        except InvalidCharactersError as e:
            errors.append(PDBError(ErrorLevel.INVALIDATING_ERROR, "Invalid characters", str(e), context))
    return errors
