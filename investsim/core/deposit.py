"""
Bank deposit simulation.

The deposit compounds monthly in two phases: the current (high) bank rate for
the first ``DEPOSIT_PHASE_MONTHS`` months, then a lower target rate reduced by a
drag coefficient. The phase-2 balance starts from the phase-1 balance of the
same month; nothing is reset at the boundary.

When a ``DepositWithdrawal`` is supplied the deposit also pays the tenant's rent
(indexed once a year) and the yearly tax on interest above the exempt allowance.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from investsim.core.constants import (
    DEPOSIT_INTEREST_EXEMPTION_PER_YEAR_RUB,
    DEPOSIT_PHASE_MONTHS,
    DEPOSIT_TAX_RATE,
    RENT_INFLATION_RATE,
    TARGET_DEPOSIT_RATE_AFTER_PHASE,
    TAX_DRAG_COEFFICIENT,
)
from investsim.core.money import round_kopeks, to_major, to_minor


class DepositWithdrawal(BaseModel):
    """Rent paid out of the deposit plus the yearly interest tax."""

    rent_monthly_base: float
    inflation_rate: float = RENT_INFLATION_RATE
    tax_rate: float = DEPOSIT_TAX_RATE
    exemption_per_year_rub: float = DEPOSIT_INTEREST_EXEMPTION_PER_YEAR_RUB


class DepositRegime(BaseModel):
    phase_months: int = DEPOSIT_PHASE_MONTHS
    target_rate: float = TARGET_DEPOSIT_RATE_AFTER_PHASE
    tax_drag: float = TAX_DRAG_COEFFICIENT

    def monthly_rate(self, bank_rate: float, month: int) -> float:
        if month <= self.phase_months:
            return bank_rate / 12
        return self.target_rate / 12 * self.tax_drag


DEFAULT_REGIME = DepositRegime()


def _indexed_rent_k(withdrawal: DepositWithdrawal, month: int) -> int:
    # flat within each 12-month block, stepped up on every anniversary
    year_index = (month - 1) // 12
    return round_kopeks(to_minor(withdrawal.rent_monthly_base) * (1 + withdrawal.inflation_rate) ** year_index)


def deposit_series_minor(
    initial_capital: float,
    bank_rate: float,
    months: int,
    withdrawal: Optional[DepositWithdrawal] = None,
    regime: DepositRegime = DEFAULT_REGIME,
) -> List[int]:
    """Deposit balance in kopeks for months 0..months (inclusive)."""
    balance_k = to_minor(initial_capital)
    series = [balance_k]
    if months <= 0:
        return series

    exemption_k = to_minor(withdrawal.exemption_per_year_rub) if withdrawal else 0
    interest_in_block_k = 0

    for month in range(1, months + 1):
        interest_k = round_kopeks(balance_k * regime.monthly_rate(bank_rate, month))
        balance_k += interest_k

        if withdrawal is not None:
            interest_in_block_k += interest_k
            balance_k = max(0, balance_k - _indexed_rent_k(withdrawal, month))

            if month % 12 == 0:
                taxable_k = max(0, interest_in_block_k - exemption_k)
                balance_k = max(0, balance_k - round_kopeks(taxable_k * withdrawal.tax_rate))
                interest_in_block_k = 0

        series.append(balance_k)

    return series


def deposit_series(
    initial_capital: float,
    bank_rate: float,
    months: int,
    withdrawal: Optional[DepositWithdrawal] = None,
    regime: DepositRegime = DEFAULT_REGIME,
) -> List[float]:
    """Deposit balance in rubles for months 0..months (inclusive)."""
    return [to_major(value) for value in deposit_series_minor(initial_capital, bank_rate, months, withdrawal, regime)]


def deposit_accumulation(
    initial_capital: float,
    bank_rate: float,
    month: int,
    withdrawal: Optional[DepositWithdrawal] = None,
    regime: DepositRegime = DEFAULT_REGIME,
) -> float:
    """
    Deposit balance after ``month`` months.

    Without ``withdrawal`` this is pure two-phase compounding; with it, rent and
    interest tax are debited every month / every year (floored at zero).
    """
    if month <= 0:
        return to_major(to_minor(initial_capital))
    return to_major(deposit_series_minor(initial_capital, bank_rate, month, withdrawal, regime)[-1])
