"""Tests for StreamAssembler: folding records into a PDB and staging references."""

from pdb_lines import (
    anisou_line,
    atom_line,
    cryst1_line,
    dbref_line,
    master_line,
    modres_line,
    mtrix_line,
    remark_line,
    seqadv_line,
    transform_line,
)
from strictpdb.core.errors import Context, ErrorLevel
from strictpdb.parsers.assembler import StreamAssembler
from strictpdb.parsers.lexer import lex_line
from strictpdb.parsers.records import RECORD_TYPES


def assemble(lines: list[str]):
    assembler = StreamAssembler(Context.show("test.pdb"))
    for linenumber, line in enumerate(lines, start=1):
        record, errors = lex_line(line, linenumber)
        assembler.add_errors(errors)
        if record is not None:
            assembler.add(record, linenumber, line)
    return assembler.finish()


def titles(errors) -> list[str]:
    return [e.short_description for e in errors]


def test_every_record_type_has_a_handler() -> None:
    assembler = StreamAssembler(Context.show("x"))
    assert assembler.handled_types == frozenset(RECORD_TYPES)


def test_atoms_without_model_go_to_model_zero() -> None:
    pdb, errors = assemble([
        atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
        atom_line(2, " O", "HOH", "A", 101, 1, 1, 1, record="HETATM"),
        "END",
    ])
    assert errors == []
    assert len(pdb.models) == 1
    assert pdb.models[0].serial_number == 0
    assert pdb.models[0].atom_count == 1
    assert pdb.models[0].hetero_atom_count == 1


class TestModels:
    def test_models_are_split(self) -> None:
        pdb, errors = assemble([
            "MODEL        1",
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            "ENDMDL",
            "MODEL        2",
            atom_line(1, " N", "ALA", "A", 1, 0.5, 0, 0),
            "ENDMDL",
            "END",
        ])
        assert errors == []
        assert [m.serial_number for m in pdb.models] == [1, 2]
        assert pdb.models[1].chains[0].residues[0].atoms[0].x == 0.5

    def test_empty_model_is_discarded(self) -> None:
        pdb, _ = assemble([
            "MODEL        1",
            "ENDMDL",
            "MODEL        2",
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            "ENDMDL",
        ])
        assert [m.serial_number for m in pdb.models] == [2]

    def test_hetero_only_model_is_kept(self) -> None:
        pdb, _ = assemble([
            "MODEL        1",
            atom_line(1, "ZN", "ZN", "A", 1, 0, 0, 0, record="HETATM"),
            "ENDMDL",
        ])
        assert len(pdb.models) == 1

    def test_models_with_different_atom_counts(self) -> None:
        _, errors = assemble([
            "MODEL        1",
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            atom_line(2, " CA", "ALA", "A", 1, 0, 0, 0),
            "ENDMDL",
            "MODEL        2",
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            "ENDMDL",
        ])
        assert titles(errors) == ["Models differ"]
        assert errors[0].level == ErrorLevel.STRICT_WARNING


class TestAnisou:
    def test_attaches_to_newest_matching_atom(self) -> None:
        pdb, errors = assemble([
            atom_line(5, " CA", "SER", "A", 3, 0, 0, 0, occupancy=0.5, altloc="A"),
            anisou_line(5, " CA", "SER", "A", 3, [100, 200, 300, 0, 0, 0], altloc="A"),
            atom_line(5, " CA", "SER", "A", 3, 1, 1, 1, occupancy=0.5, altloc="B"),
            anisou_line(5, " CA", "SER", "A", 3, [400, 500, 600, 0, 0, 0], altloc="B"),
        ])
        assert errors == []
        first, second = pdb.models[0].chains[0].residues[0].atoms
        assert first.anisotropic_temperature_factors[0, 0] == 0.01
        assert second.anisotropic_temperature_factors[0, 0] == 0.04

    def test_missing_atom_is_reported(self) -> None:
        pdb, errors = assemble([
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            anisou_line(99, " CA", "ALA", "A", 1, [1, 2, 3, 4, 5, 6]),
        ])
        assert titles(errors) == ["Atom for ANISOU not found"]
        assert errors[0].level == ErrorLevel.STRICT_WARNING
        assert errors[0].context.linenumber == 2
        assert pdb.models[0].chains[0].residues[0].atoms[0].anisotropic_temperature_factors is None


class TestRemarks:
    def test_remarks_are_kept_in_order(self) -> None:
        pdb, errors = assemble([remark_line(2, "RESOLUTION."), remark_line(350, "BIOMOLECULE: 1")])
        assert errors == []
        assert pdb.remarks == [(2, "RESOLUTION."), (350, "BIOMOLECULE: 1")]

    def test_invalid_remark_number(self) -> None:
        pdb, errors = assemble([remark_line(123, "WHATEVER")])
        assert titles(errors) == ["Remark type number invalid"]
        assert errors[0].level == ErrorLevel.STRICT_WARNING
        assert (errors[0].context.offset, errors[0].context.length) == (7, 3)
        assert pdb.remark_count == 1


class TestTransforms:
    def test_scale_and_origx(self) -> None:
        lines = [cryst1_line()]
        lines += [transform_line("SCALE", r, 0.1 * r, 0, 0, 0) for r in (1, 2, 3)]
        lines += [transform_line("ORIGX", r, 1, 0, 0, 0) for r in (1, 2, 3)]
        pdb, errors = assemble(lines)
        assert errors == []
        assert pdb.scale.valid()
        assert pdb.origx.valid()
        assert pdb.scale.row(2)[0] == 0.3
        assert pdb.valid_transform_count() == 2

    def test_mtrix_accumulates_by_serial(self) -> None:
        lines = [mtrix_line(r, 1, 1, 0, 0, 0, given=True) for r in (1, 2, 3)]
        lines += [mtrix_line(r, 2, 0, 1, 0, 0) for r in (1, 2, 3)]
        pdb, errors = assemble(lines)
        assert errors == []
        assert [m.serial_number for m in pdb.mtrix] == [1, 2]
        assert pdb.mtrix[0].contained
        assert not pdb.mtrix[1].contained
        assert all(m.valid() for m in pdb.mtrix)

    def test_incomplete_transform(self) -> None:
        pdb, errors = assemble([cryst1_line(), transform_line("SCALE", 1, 1, 0, 0, 0)])
        assert titles(errors) == ["Transformation incomplete"]
        assert errors[0].level == ErrorLevel.LOOSE_WARNING

    def test_scale_without_unit_cell(self) -> None:
        _, errors = assemble([transform_line("SCALE", r, 1, 0, 0, 0) for r in (1, 2, 3)])
        assert titles(errors) == ["SCALE without unit cell"]


class TestCrystal:
    def test_unit_cell_and_symmetry(self) -> None:
        pdb, errors = assemble([cryst1_line()])
        assert errors == []
        assert pdb.unit_cell.b == 83.59
        assert pdb.symmetry.number == 4

    def test_invalid_space_group(self) -> None:
        pdb, errors = assemble([cryst1_line(space_group="Q 9 9 9")])
        assert titles(errors) == ["Invalid space group"]
        assert errors[0].level == ErrorLevel.INVALIDATING_ERROR
        assert (errors[0].context.offset, errors[0].context.length) == (55, 11)
        assert pdb.unit_cell is not None
        assert pdb.symmetry is None


class TestDatabaseReferences:
    def test_seqadv_attaches_to_dbref(self) -> None:
        pdb, errors = assemble([
            dbref_line("A", 1, 2, 1, 2),
            seqadv_line("A", "ALA", 2, "ENGINEERED MUTATION", db_resname="CYS", db_seqnum=2),
            atom_line(1, " N", "MET", "A", 1, 0, 0, 0),
            atom_line(2, " N", "ALA", "A", 2, 0, 0, 0),
        ])
        assert errors == []
        reference = pdb.get_chain("A").database_reference
        assert reference.database.accession == "P12345"
        assert len(reference.pdb_position) == 2
        assert reference.differences[0].database_residue == ("CYS", 2)
        assert reference.differences[0].comment == "ENGINEERED MUTATION"

    def test_seqadv_before_dbref(self) -> None:
        _, errors = assemble([
            seqadv_line("A", "ALA", 2, "ENGINEERED MUTATION", db_resname="CYS", db_seqnum=2),
            dbref_line("A", 1, 2, 1, 2),
            atom_line(1, " N", "MET", "A", 1, 0, 0, 0),
        ])
        assert titles(errors) == ["Sequence Difference Database not found"]
        assert errors[0].level == ErrorLevel.STRICT_WARNING

    def test_dbref_for_unknown_chain_is_dropped(self) -> None:
        pdb, errors = assemble([dbref_line("Z", 1, 2, 1, 2), atom_line(1, " N", "MET", "A", 1, 0, 0, 0)])
        assert errors == []
        assert pdb.get_chain("A").database_reference is None


class TestMaster:
    def test_consistent_master(self) -> None:
        lines = [remark_line(2, "RESOLUTION."), cryst1_line()]
        lines += [transform_line("SCALE", r, 1, 0, 0, 0) for r in (1, 2, 3)]
        lines += [
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            atom_line(2, " O", "HOH", "A", 101, 0, 0, 0, record="HETATM"),
            master_line(num_remark=1, num_xform=3, num_coord=2),
            "END",
        ]
        _, errors = assemble(lines)
        assert errors == []

    def test_checks_are_independent(self) -> None:
        lines = [remark_line(2, "A"), remark_line(3, "B"), remark_line(4, "C")]
        lines += [
            atom_line(1, " N", "ALA", "A", 1, 0, 0, 0),
            master_line(num_remark=5, num_coord=7),
            "END",
        ]
        _, errors = assemble(lines)
        assert titles(errors) == ["MASTER checksum failed", "MASTER checksum failed"]
        assert all(e.level == ErrorLevel.STRICT_WARNING for e in errors)
        assert "REMARKS (3)" in errors[0].long_description
        assert "(1)" in errors[1].long_description

    def test_nonzero_empty_count(self) -> None:
        _, errors = assemble([master_line(num_empty=1)])
        assert titles(errors) == ["MASTER checksum failed"]
        assert errors[0].level == ErrorLevel.LOOSE_WARNING

    def test_xform_count(self) -> None:
        lines = [cryst1_line()]
        lines += [transform_line("SCALE", r, 1, 0, 0, 0) for r in (1, 2, 3)]
        lines.append(master_line(num_xform=6))
        _, errors = assemble(lines)
        assert len(errors) == 1
        assert "transformation" in errors[0].long_description


class TestInsertionCodes:
    def test_insertion_code_makes_a_separate_residue(self) -> None:
        pdb, errors = assemble([
            atom_line(1, " CA", "GLY", "A", 52, 0, 0, 0),
            atom_line(2, " CA", "GLY", "A", 52, 1, 0, 0, icode="A"),
            atom_line(3, " CA", "SER", "A", 53, 2, 0, 0),
        ])
        assert errors == []
        chain = pdb.get_chain("A")
        assert [(r.serial_number, r.insertion_code, r.name) for r in chain] == [
            (52, "", "GLY"), (52, "A", "GLY"), (53, "", "SER"),
        ]
        assert chain.find_residue(52, "GLY", "A").atoms[0].serial_number == 2
        assert chain.find_residue(52, "GLY").atoms[0].serial_number == 1

    def test_modres_matches_insertion_code(self) -> None:
        pdb, errors = assemble([
            modres_line("A", "MSE", 52, "MET", "SELENOMETHIONINE", icode="A"),
            atom_line(1, "SE", "MSE", "A", 52, 0, 0, 0, record="HETATM"),
            atom_line(2, "SE", "MSE", "A", 52, 1, 0, 0, record="HETATM", icode="A"),
        ])
        assert errors == []
        chain = pdb.models[0].hetero_chains[0]
        assert chain.find_residue(52, "MSE", "A").modification == ("MET", "SELENOMETHIONINE")
        assert chain.find_residue(52, "MSE").modification is None
