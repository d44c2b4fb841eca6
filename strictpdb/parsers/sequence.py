"""Reconcile SEQRES sequences with the residues observed in ATOM records.

For every chain with SEQRES records the declared sequence is walked next to
the chain's residues (ascending serial number). Declared residues without
coordinates are inserted as empty residues; name mismatches and numbering
problems become StrictWarnings.
"""

from __future__ import annotations

from strictpdb.core.errors import Context, ErrorLevel, InvalidCharactersError, PDBError
from strictpdb.core.logging_utils import get_logger
from strictpdb.parsers.records import Seqres
from strictpdb.structs.base import Chain, Residue
from strictpdb.structs.pdb import PDB

logger = get_logger(__name__)


def _warning(title: str, detail: str, context: Context) -> PDBError:
    return PDBError(ErrorLevel.STRICT_WARNING, title, detail, context)


def reconcile_sequences(
    pdb: PDB,
    sequences: dict[str, list[Seqres]],
    context: Context,
) -> list[PDBError]:
    """Run ``reconcile_chain`` for every chain that has SEQRES fragments."""
    errors: list[PDBError] = []
    for chain_id, fragments in sequences.items():
        chain = pdb.get_chain(chain_id)
        if chain is None:
            logger.debug("SEQRES for chain %r without coordinates ignored", chain_id)
            continue
        errors.extend(reconcile_chain(chain, fragments, context))
    return errors


def declared_sequence(
    chain_id: str,
    fragments: list[Seqres],
    context: Context,
) -> tuple[list[str], int, list[PDBError]]:
    """Join SEQRES fragments; returns (sequence, declared total, errors)."""
    errors: list[PDBError] = []
    sequence: list[str] = []
    total = 0
    for expected_serial, fragment in enumerate(fragments, start=1):
        if fragment.serial_number != expected_serial:
            errors.append(_warning(
                "SEQRES serial number invalid",
                f'The serial number for SEQRES chain "{chain_id}" with number '
                f'"{fragment.serial_number}" does not follow sequentially from the previous row.',
                context,
            ))
        if total == 0:
            total = fragment.residue_count
        elif total != fragment.residue_count:
            errors.append(_warning(
                "SEQRES residue total invalid",
                f'The residue total for SEQRES chain "{chain_id}" with number '
                f'"{fragment.serial_number}" does not match the total on the first row for this chain.',
                context,
            ))
        sequence.extend(fragment.residues)

    if len(sequence) != total:
        errors.append(_warning(
            "SEQRES residue total invalid",
            f'The residue total for SEQRES chain "{chain_id}" does not match the total '
            "residues found in the seqres records.",
            context,
        ))
    return sequence, total, errors


def sequence_offset(chain: Chain, total: int, context: Context) -> tuple[int, list[PDBError]]:
    """Residue number of the first SEQRES entry.

    Defaults to 1. With a DBREF it is the start of the DBREF range, moved
    back by one for every SEQADV residue without a database counterpart that
    lies in front of that range (expression tags and the like).
    """
    reference = chain.database_reference
    if reference is None:
        return 1, []

    start = reference.pdb_position.start
    offset = start
    for difference in reference.differences:
        if difference.database_residue is None and difference.residue[1] < start:
            offset -= 1

    errors = []
    if reference.pdb_position.end - offset + 1 != total:
        errors.append(_warning(
            "SEQRES residue total invalid",
            f'The residue total for SEQRES chain "{chain.chain_id}" does not match the total '
            "residues found in the dbref record.",
            context,
        ))
    return offset, errors


def reconcile_chain(chain: Chain, fragments: list[Seqres], context: Context) -> list[PDBError]:
    """Merge the declared sequence into ``chain``.

    Walks the declared sequence (position + offset) against the observed
    residues in order:
      - same number: names are compared, both cursors advance
      - declared number lower: an empty residue is inserted, the observed
        cursor stays
      - declared number higher: a warning is emitted and the observed cursor
        stays, so the same residue is reported again for the next positions
    The walk ends as soon as either side runs out.
    """
    chain_id = chain.chain_id
    sequence, total, errors = declared_sequence(chain_id, fragments, context)
    offset, offset_errors = sequence_offset(chain, total, context)
    errors.extend(offset_errors)

    observed = chain.residues
    cursor = 0
    for position, name in enumerate(sequence):
        if cursor >= len(observed):
            break
        index = position + offset
        residue = observed[cursor]
        if index == residue.serial_number:
            if name != residue.name:
                errors.append(_warning(
                    "SEQRES residue invalid",
                    f'The residue index {index} value "{name}" for SEQRES chain "{chain_id}" '
                    f'does not match the residue in the chain value "{residue.name}".',
                    context,
                ))
            cursor += 1
        elif index < residue.serial_number:
            try:
                chain.insert_residue(Residue(index, name))
            except InvalidCharactersError as e:
                errors.append(PDBError(ErrorLevel.INVALIDATING_ERROR, "Invalid characters", str(e), context))
        else:
            errors.append(_warning(
                "Chain residue invalid",
                f'The residue index {residue.serial_number} value "{residue.name}" for Chain '
                f'"{chain_id}" is not sequentially increasing, value expected: {index}.',
                context,
            ))

    if len(sequence) != chain.num_residues:
        errors.append(_warning(
            "SEQRES residue total invalid",
            f'The residue total ({len(sequence)}) for SEQRES chain "{chain_id}" does not match '
            f"the total residues found in the chain ({chain.num_residues}).",
            context,
        ))
    return errors
