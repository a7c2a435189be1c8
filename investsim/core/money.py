"""
Money helpers.

Every monetary value inside the engine is an ``int`` number of kopeks; rubles
(floats with at most two decimals) only appear at the public boundary. Rounding
happens after each multiplication or division, so a 360-month fold never
accumulates float noise.
"""

from __future__ import annotations

import math

KOPEKS_PER_RUBLE = 100


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties toward +infinity.

    Python's ``round`` uses banker's rounding; the engine needs the same result
    on every platform, so ties are resolved explicitly.
    """
    return int(math.floor(value + 0.5))


def to_minor(rubles: float) -> int:
    """Rubles -> whole kopeks."""
    return round_half_up(rubles * KOPEKS_PER_RUBLE)


def to_major(kopeks: float) -> float:
    """Kopeks -> rubles with no more than two decimals."""
    return round_half_up(kopeks) / KOPEKS_PER_RUBLE


def round_kopeks(value: float) -> int:
    """Snap an intermediate kopek amount back onto the integer grid."""
    return round_half_up(value)


def normalize_rubles(rubles: float) -> float:
    """Round a ruble amount to whole kopeks (rubles in, rubles out)."""
    return to_major(to_minor(rubles))


def round_percent(value: float) -> float:
    """Round a percentage (or a year count) to two decimals; non-finite values pass through."""
    if not math.isfinite(value):
        return value
    return round_half_up(value * 100) / 100
