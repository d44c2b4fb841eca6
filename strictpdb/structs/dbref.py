"""Sequence database cross references (DBREF / SEQADV)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class SequencePosition:
    """A numbered range, each end with an optional insertion code."""

    start: int
    start_insert: str
    end: int
    end_insert: str

    @classmethod
    def from_tuple(cls, values: tuple[int, str, int, str]) -> "SequencePosition":
        start, start_insert, end, end_insert = values
        return cls(start, start_insert, end, end_insert)

    def __len__(self) -> int:
        return max(self.end - self.start + 1, 0)


@dataclass(frozen=True)
class Database:
    name: str
    accession: str
    id_code: str


@dataclass(frozen=True)
class SequenceDifference:
    """One SEQADV entry.

    ``residue`` is (name, sequence number) in the structure's numbering;
    ``database_residue`` is the same pair in the database's numbering, or
    None when the residue has no database counterpart (e.g. an expression tag).
    """

    residue: tuple[str, int]
    database_residue: Optional[tuple[str, int]]
    comment: str


@dataclass
class DatabaseReference:
    """Maps the chain's numbering onto a sequence database entry."""

    database: Database
    pdb_position: SequencePosition
    database_position: SequencePosition
    differences: list[SequenceDifference] = field(default_factory=list)
