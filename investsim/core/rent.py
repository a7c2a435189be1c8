"""Rent streams: what the owner saves by not renting."""

from __future__ import annotations

from investsim.core.constants import RENT_INFLATION_RATE
from investsim.core.money import normalize_rubles


def accumulated_indexed_rent(
    rent_monthly_base: float,
    months_count: int,
    inflation_rate: float = RENT_INFLATION_RATE,
) -> float:
    """
    Total rent over ``months_count`` months when rent is flat inside each
    12-month block and grows by ``inflation_rate`` on every anniversary:

        base * (12 * ((1+r)^Y - 1) / r + rem * (1+r)^Y)

    where Y is the number of full years and rem the leftover months.
    """
    if months_count <= 0:
        return 0.0
    if inflation_rate == 0:
        return normalize_rubles(rent_monthly_base * months_count)

    full_years, rem_months = divmod(months_count, 12)
    growth = (1 + inflation_rate) ** full_years
    total = rent_monthly_base * (12 * (growth - 1) / inflation_rate + rem_months * growth)
    return normalize_rubles(total)


def rent_stream_future_value(rent_monthly: float, monthly_rate: float, months_count: int) -> float:
    """Future value of a monthly rent stream reinvested at ``monthly_rate``."""
    if months_count <= 0:
        return 0.0
    if monthly_rate == 0:
        return normalize_rubles(rent_monthly * months_count)
    return normalize_rubles(rent_monthly * ((1 + monthly_rate) ** months_count - 1) / monthly_rate)
