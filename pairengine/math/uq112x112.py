"""UQ112x112 fixed-point numbers.

A UQ112x112 is an unsigned integer scaled by 2**112: 112 integer bits and
112 fractional bits, 224 bits in total. Reserves are at most 112 bits wide,
so encoding a reserve and dividing by another reserve always fits.

These values feed only the time-weighted price accumulators. Nothing reads
them to enforce an invariant.
"""

from __future__ import annotations

from pairengine.constants import UINT112_MAX
from pairengine.safe_int import S, UintOverflow

__all__ = ["Q112", "UQ224_BITS", "encode", "uqdiv"]

Q112 = 2**112
UQ224_BITS = 224


def encode(y: int) -> int:
    """Encode a uint112 as a UQ112x112.

    Raises:
        UintOverflow: If y does not fit in 112 bits
    """
    if not 0 <= y <= UINT112_MAX:
        raise UintOverflow(f"Value exceeds uint112 max: {y}")
    return (S(y) * Q112).value


def uqdiv(x: int, y: int) -> int:
    """Divide a UQ112x112 by a uint112, returning a UQ112x112.

    Raises:
        DivisionByZero: If y is zero
        UintOverflow: If x is not a valid UQ112x112
    """
    return (S(S(x).to_uint(UQ224_BITS)) // y).value
