"""Folds lexed records into a PDB structure.

The assembler owns the structure being built and one "current model"
accumulator. Records that may point at chains which do not exist yet
(SEQRES, DBREF/SEQADV, MODRES) are staged and resolved by ``finish()`` in a
fixed order: database references, sequence reconciliation, modifications,
then the whole-structure validation.
"""

from __future__ import annotations

from typing import Callable

from strictpdb.core.errors import (
    Context,
    ErrorLevel,
    InvalidCharactersError,
    PDBError,
    UnknownSpaceGroupError,
)
from strictpdb.core.logging_utils import get_logger
from strictpdb.core.reference_tables import valid_remark_type_number
from strictpdb.parsers.checks import apply_modifications, validate_master
from strictpdb.parsers.records import (
    Anisou,
    AtomRecord,
    Crystal,
    Dbref,
    Empty,
    End,
    EndModel,
    Master,
    ModelStart,
    Modres,
    MtrixRow,
    OrigXRow,
    Record,
    Remark,
    ScaleRow,
    Seqadv,
    Seqres,
    Ter,
)
from strictpdb.parsers.sequence import reconcile_sequences
from strictpdb.parsers.validate import validate
from strictpdb.structs.base import Atom, Model
from strictpdb.structs.crystal import Symmetry, UnitCell
from strictpdb.structs.dbref import Database, DatabaseReference, SequenceDifference, SequencePosition
from strictpdb.structs.pdb import PDB

logger = get_logger(__name__)


class StreamAssembler:
    """Builds a PDB from records fed in file order.

    Usage::

        assembler = StreamAssembler(Context.show("1abc.pdb"))
        for linenumber, line in enumerate(lines, start=1):
            record, errors = lex_line(line, linenumber)
            assembler.add_errors(errors)
            if record is not None:
                assembler.add(record, linenumber, line)
        pdb, errors = assembler.finish()
    """

    def __init__(self, context: Context):
        self.context = context
        self.pdb = PDB()
        self.errors: list[PDBError] = []
        self.current_model = Model(0)
        self.sequences: dict[str, list[Seqres]] = {}
        self.database_references: list[tuple[str, DatabaseReference]] = []
        self.modifications: list[tuple[Context, Modres]] = []
        self._handlers: dict[type, Callable[[Record, int, str], None]] = {
            Remark: self._on_remark,
            AtomRecord: self._on_atom,
            Anisou: self._on_anisou,
            ModelStart: self._on_model,
            OrigXRow: self._on_origx,
            ScaleRow: self._on_scale,
            MtrixRow: self._on_mtrix,
            Crystal: self._on_crystal,
            Seqres: self._on_seqres,
            Dbref: self._on_dbref,
            Seqadv: self._on_seqadv,
            Modres: self._on_modres,
            Master: self._on_master,
            EndModel: self._ignore,
            Ter: self._ignore,
            End: self._ignore,
            Empty: self._ignore,
        }

    @property
    def handled_types(self) -> frozenset[type]:
        return frozenset(self._handlers)

    def add_errors(self, errors: list[PDBError]) -> None:
        self.errors.extend(errors)

    def add(self, record: Record, linenumber: int, line: str) -> None:
        """Fold one record into the structure."""
        self._handlers[type(record)](record, linenumber, line)

    def flush_model(self) -> None:
        """Move the current model into the structure if it holds any atoms."""
        if self.current_model.total_atom_count > 0:
            logger.debug(
                "Model %d complete with %d atoms",
                self.current_model.serial_number, self.current_model.total_atom_count,
            )
            self.pdb.add_model(self.current_model)

    def finish(self) -> tuple[PDB, list[PDBError]]:
        """Flush, resolve staged records and validate. Call once."""
        self.flush_model()
        self.current_model = Model(0)

        for chain_id, reference in self.database_references:
            chain = self.pdb.get_chain(chain_id)
            if chain is None:
                logger.debug("DBREF for unknown chain %r ignored", chain_id)
                continue
            chain.set_database_reference(reference)

        self.errors.extend(reconcile_sequences(self.pdb, self.sequences, self.context))
        self.errors.extend(apply_modifications(self.pdb, self.modifications))
        self.errors.extend(validate(self.pdb, self.context))
        return self.pdb, self.errors

    # --- handlers -----------------------------------------------------------

    def _ignore(self, record: Record, linenumber: int, line: str) -> None:
        pass

    def _on_remark(self, record: Remark, linenumber: int, line: str) -> None:
        self.pdb.add_remark(record.number, record.text)
        if not valid_remark_type_number(record.number):
            self.errors.append(PDBError(
                ErrorLevel.STRICT_WARNING,
                "Remark type number invalid",
                "The remark-type-number is not valid, see wwPDB v3.30 for all valid numbers.",
                Context.line_span(linenumber, line, 7, 3),
            ))

    def _on_atom(self, record: AtomRecord, linenumber: int, line: str) -> None:
        try:
            atom = Atom(
                serial_number=record.serial_number,
                name=record.name,
                x=record.x,
                y=record.y,
                z=record.z,
                occupancy=record.occupancy,
                b_factor=record.b_factor,
                element=record.element,
                charge=record.charge,
                alt_loc=record.alt_loc,
                segment_id=record.segment_id,
            )
            add = self.current_model.add_hetero_atom if record.hetero else self.current_model.add_atom
            add(atom, record.chain_id, record.residue_serial_number, record.residue_name, record.insertion_code)
        except InvalidCharactersError as e:
            self.errors.append(PDBError(
                ErrorLevel.INVALIDATING_ERROR,
                "Invalid characters",
                str(e),
                Context.full_line(linenumber, line),
            ))

    def _on_anisou(self, record: Anisou, linenumber: int, line: str) -> None:
        # Newest first, so an ANISOU pairs with the alternate location just read
        for atom in self.current_model.atoms_newest_first():
            if atom.serial_number == record.serial_number:
                atom.set_anisotropic_temperature_factors(record.factors)
                return
        logger.warning(
            "Could not find atom for temperature factors, coupled to atom %d %s",
            record.serial_number, record.name,
        )
        self.errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "Atom for ANISOU not found",
            f"Could not find atom {record.serial_number} {record.name!r} for these anisotropic "
            "temperature factors, make sure the ANISOU record follows its ATOM/HETATM record.",
            Context.full_line(linenumber, line),
        ))

    def _on_model(self, record: ModelStart, linenumber: int, line: str) -> None:
        self.flush_model()
        self.current_model = Model(record.serial_number)

    def _on_origx(self, record: OrigXRow, linenumber: int, line: str) -> None:
        self.pdb.get_or_create_origx().set_row(record.row, record.values)

    def _on_scale(self, record: ScaleRow, linenumber: int, line: str) -> None:
        self.pdb.get_or_create_scale().set_row(record.row, record.values)

    def _on_mtrix(self, record: MtrixRow, linenumber: int, line: str) -> None:
        mtrix = self.pdb.get_or_create_mtrix(record.serial_number)
        mtrix.set_row(record.row, record.values)
        mtrix.contained = record.given

    def _on_crystal(self, record: Crystal, linenumber: int, line: str) -> None:
        self.pdb.unit_cell = UnitCell(
            record.a, record.b, record.c, record.alpha, record.beta, record.gamma
        )
        try:
            self.pdb.symmetry = Symmetry(record.space_group)
        except UnknownSpaceGroupError as e:
            self.errors.append(PDBError(
                ErrorLevel.INVALIDATING_ERROR,
                "Invalid space group",
                f"{e}. The space group could not be found in the space group table.",
                Context.line_span(linenumber, line, 55, 11),
            ))

    def _on_seqres(self, record: Seqres, linenumber: int, line: str) -> None:
        self.sequences.setdefault(record.chain_id, []).append(record)

    def _on_dbref(self, record: Dbref, linenumber: int, line: str) -> None:
        reference = DatabaseReference(
            Database(record.database, record.database_accession, record.database_id_code),
            SequencePosition.from_tuple(record.position),
            SequencePosition.from_tuple(record.database_position),
        )
        self.database_references.append((record.chain_id, reference))

    def _on_seqadv(self, record: Seqadv, linenumber: int, line: str) -> None:
        for chain_id, reference in self.database_references:
            if chain_id == record.chain_id:
                reference.differences.append(SequenceDifference(
                    (record.residue_name, record.sequence_number),
                    record.database_residue,
                    record.comment,
                ))
                return
        self.errors.append(PDBError(
            ErrorLevel.STRICT_WARNING,
            "Sequence Difference Database not found",
            f"For this sequence difference (chain: {record.chain_id}) the corresponding database "
            "definition (DBREF) was not found, make sure the DBREF is located before the SEQADV",
            Context.full_line(linenumber, line),
        ))

    def _on_modres(self, record: Modres, linenumber: int, line: str) -> None:
        self.modifications.append((Context.full_line(linenumber, line), record))

    def _on_master(self, record: Master, linenumber: int, line: str) -> None:
        # MASTER is one of the last records, so the open model is complete
        self.flush_model()
        self.current_model = Model(0)
        self.errors.extend(validate_master(self.pdb, record, Context.full_line(linenumber, line)))
