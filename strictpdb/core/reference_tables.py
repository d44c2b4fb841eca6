"""Static lookup tables from the wwPDB format description (v3.30)."""

from __future__ import annotations

# REMARK type numbers that are defined by the format
VALID_REMARK_TYPE_NUMBERS = frozenset({
    0, 1, 2, 3, 4, 5,
    100, 200, 205, 210, 215, 217, 230, 240, 245, 247, 250, 265, 280, 285, 290,
    300, 350, 375,
    400, 450, 465, 470, 475, 480,
    500, 525,
    600, 610, 615, 620, 630, 650,
    700, 800, 900, 999,
})


def valid_remark_type_number(number: int) -> bool:
    return number in VALID_REMARK_TYPE_NUMBERS
