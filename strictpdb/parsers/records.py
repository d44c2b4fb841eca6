"""Lexed records: one frozen dataclass per supported line tag.

The set is closed: ``Record`` is the union of every kind, and
``RECORD_TYPES`` lists them so consumers can check they handle all of them.
Records only hold primitive values cut out of fixed columns; building
structure objects from them is the assembler's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

Row = tuple[float, float, float, float]


@dataclass(frozen=True)
class Remark:
    number: int
    text: str


@dataclass(frozen=True)
class AtomRecord:
    """ATOM (``hetero`` False) or HETATM (``hetero`` True)."""

    hetero: bool
    serial_number: int
    name: str
    alt_loc: str
    residue_name: str
    chain_id: str
    residue_serial_number: int
    insertion_code: str
    x: float
    y: float
    z: float
    occupancy: float
    b_factor: float
    segment_id: str
    element: str
    charge: int


@dataclass(frozen=True)
class Anisou:
    serial_number: int
    name: str
    alt_loc: str
    residue_name: str
    chain_id: str
    residue_serial_number: int
    insertion_code: str
    factors: tuple[tuple[float, float, float], tuple[float, float, float]]
    segment_id: str
    element: str
    charge: int


@dataclass(frozen=True)
class ModelStart:
    serial_number: int


@dataclass(frozen=True)
class OrigXRow:
    row: int
    values: Row


@dataclass(frozen=True)
class ScaleRow:
    row: int
    values: Row


@dataclass(frozen=True)
class MtrixRow:
    row: int
    serial_number: int
    values: Row
    given: bool


@dataclass(frozen=True)
class Crystal:
    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float
    space_group: str
    z: int


@dataclass(frozen=True)
class Seqres:
    serial_number: int
    chain_id: str
    residue_count: int
    residues: tuple[str, ...]


@dataclass(frozen=True)
class Dbref:
    id_code: str
    chain_id: str
    position: tuple[int, str, int, str]
    database: str
    database_accession: str
    database_id_code: str
    database_position: tuple[int, str, int, str]


@dataclass(frozen=True)
class Seqadv:
    id_code: str
    chain_id: str
    residue_name: str
    sequence_number: int
    insertion_code: str
    database: str
    database_accession: str
    database_residue: Optional[tuple[str, int]]
    comment: str


@dataclass(frozen=True)
class Modres:
    id_code: str
    residue_name: str
    chain_id: str
    sequence_number: int
    insertion_code: str
    standard_residue: str
    comment: str


@dataclass(frozen=True)
class Master:
    num_remark: int
    num_empty: int
    num_het: int
    num_helix: int
    num_sheet: int
    num_turn: int
    num_site: int
    num_xform: int
    num_coord: int
    num_ter: int
    num_connect: int
    num_seq: int


@dataclass(frozen=True)
class EndModel:
    pass


@dataclass(frozen=True)
class Ter:
    pass


@dataclass(frozen=True)
class End:
    pass


@dataclass(frozen=True)
class Empty:
    pass


Record = Union[
    Remark, AtomRecord, Anisou, ModelStart, OrigXRow, ScaleRow, MtrixRow,
    Crystal, Seqres, Dbref, Seqadv, Modres, Master, EndModel, Ter, End, Empty,
]

RECORD_TYPES: tuple[type, ...] = (
    Remark, AtomRecord, Anisou, ModelStart, OrigXRow, ScaleRow, MtrixRow,
    Crystal, Seqres, Dbref, Seqadv, Modres, Master, EndModel, Ter, End, Empty,
)
