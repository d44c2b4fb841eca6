"""Crystallographic metadata: unit cell, space group and coordinate transforms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import gemmi
import numpy as np

from strictpdb.core.errors import UnknownSpaceGroupError


@dataclass(frozen=True)
class UnitCell:
    """Unit cell lengths (Angstrom) and angles (degrees) from CRYST1."""

    a: float
    b: float
    c: float
    alpha: float
    beta: float
    gamma: float

    @property
    def lengths(self) -> tuple[float, float, float]:
        return (self.a, self.b, self.c)

    @property
    def angles(self) -> tuple[float, float, float]:
        return (self.alpha, self.beta, self.gamma)

    @property
    def volume(self) -> float:
        return gemmi.UnitCell(self.a, self.b, self.c, self.alpha, self.beta, self.gamma).volume


class Symmetry:
    """Space group resolved from its Hermann-Mauguin symbol."""

    def __init__(self, symbol: str):
        space_group = gemmi.find_spacegroup_by_name(symbol.strip())
        if space_group is None:
            raise UnknownSpaceGroupError(f"Invalid space group: {symbol.strip()!r}")
        self._space_group = space_group
        self.symbol = symbol.strip()

    @property
    def hermann_mauguin(self) -> str:
        return self._space_group.hm

    @property
    def number(self) -> int:
        return self._space_group.number

    def __repr__(self) -> str:
        return f"<Symmetry {self.hermann_mauguin!r} ({self.number})>"


# ======================================================================
# Coordinate transforms (ORIGXn, SCALEn, MTRIXn)
# ======================================================================

class TransformationMatrix:
    """A 3x4 matrix filled one row at a time.

    The transform is only valid once all three rows have been given.
    """

    def __init__(self) -> None:
        self.matrix = np.zeros((3, 4), dtype=float)
        self._rows_set = [False, False, False]

    def set_row(self, row: int, values: Sequence[float]) -> None:
        if not 0 <= row <= 2:
            raise IndexError(f"Transformation row out of range: {row}")
        self.matrix[row] = np.asarray(values, dtype=float)
        self._rows_set[row] = True

    def row(self, row: int) -> np.ndarray:
        return self.matrix[row].copy()

    def valid(self) -> bool:
        return all(self._rows_set)

    def apply(self, point: Sequence[float]) -> np.ndarray:
        """Transform a single (x, y, z) point."""
        return self.matrix[:, :3] @ np.asarray(point, dtype=float) + self.matrix[:, 3]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} valid={self.valid()}>"


class OrigX(TransformationMatrix):
    """ORIGXn: orthogonal coordinates to submitted coordinates."""


class Scale(TransformationMatrix):
    """SCALEn: orthogonal coordinates to fractional crystallographic coordinates."""


class MtriX(TransformationMatrix):
    """MTRIXn: a non-crystallographic symmetry operator.

    ``contained`` is True when the copy it generates is already present in
    the coordinates (the "given" flag in column 60).
    """

    def __init__(self, serial_number: int, contained: bool = False) -> None:
        super().__init__()
        self.serial_number = serial_number
        self.contained = contained

    def __repr__(self) -> str:
        return f"<MtriX {self.serial_number} valid={self.valid()} given={self.contained}>"
