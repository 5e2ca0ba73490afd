"""Numeric helpers shared by the wire-format modules."""

from __future__ import annotations

import math
import struct

FLOAT32_EPSILON = 2.0**-23
"""Machine epsilon of an IEEE-754 single-precision float."""

_FLOAT32 = struct.Struct("<f")


def float32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float.

    Values beyond the single-precision range become infinities, as a
    narrowing conversion would make them.
    """
    try:
        return _FLOAT32.unpack(_FLOAT32.pack(value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def rough_eq(lhs: float, rhs: float, epsilon: float = FLOAT32_EPSILON) -> bool:
    """Return True when ``lhs`` and ``rhs`` differ by less than ``epsilon``."""
    return abs(lhs - rhs) < epsilon