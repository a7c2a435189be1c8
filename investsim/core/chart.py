from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel

from investsim.core.amortization import AmortizationRow, amortization_schedule, annuity
from investsim.core.constants import (
    DEPOSIT_INTEREST_EXEMPTION_PER_YEAR_RUB,
    DEPOSIT_TAX_RATE,
    HYPERINFLATION_RENT_RATE,
    RENT_INFLATION_RATE,
    STAGNATION_DROP_PERCENT,
    STAGNATION_MONTHS,
)
from investsim.core.deposit import DepositWithdrawal, deposit_series_minor
from investsim.core.money import to_major, to_minor
from investsim.core.presets import LoanTerms
from investsim.core.rent import accumulated_indexed_rent

logger = logging.getLogger(__name__)


class RiskScenario(str, Enum):
    NONE = "none"
    STAGNATION = "stagnation"
    HYPERINFLATION = "hyperinflation"


class ChartRow(AmortizationRow):
    net_equity: float
    deposit_accumulation: float
    # True only on the first month where gains overtake the interest paid
    is_break_even: bool = False
    property_value_growth: float
    saved_rent_indexed: float
    net_equity_compare: Optional[float] = None
    # net equity of object B in two-object comparison mode
    net_equity_b: Optional[float] = None


class ChartInput(BaseModel):
    price: float
    down_percent: float
    rate_percent: float
    term_years: int
    deposit_rate: float
    appreciation_percent: float
    rental_yield_percent: float
    risk_scenario: RiskScenario = RiskScenario.NONE
    compare_preset: Optional[LoanTerms] = None
    # "zero-point sync": both compared objects start from the same capital
    initial_total_capital_override: Optional[float] = None
    rent_inflation_rate: float = RENT_INFLATION_RATE
    deposit_withdrawals: bool = True
    deposit_tax_rate: float = DEPOSIT_TAX_RATE
    deposit_exemption_per_year: float = DEPOSIT_INTEREST_EXEMPTION_PER_YEAR_RUB

    @property
    def down_payment(self) -> float:
        return self.price * (self.down_percent / 100)

    @property
    def loan_amount(self) -> float:
        return self.price - self.down_payment

    @property
    def initial_total_capital(self) -> float:
        if self.initial_total_capital_override is not None:
            return self.initial_total_capital_override
        return self.price

    @property
    def rent_monthly_base(self) -> float:
        return self.price * (self.rental_yield_percent / 100) / 12

    @property
    def appreciation_rate(self) -> float:
        return self.appreciation_percent / 100

    @property
    def rent_indexation_rate(self) -> float:
        if self.risk_scenario == RiskScenario.HYPERINFLATION:
            return HYPERINFLATION_RENT_RATE
        return self.rent_inflation_rate

    def withdrawal(self) -> Optional[DepositWithdrawal]:
        if not self.deposit_withdrawals:
            return None
        return DepositWithdrawal(
            rent_monthly_base=self.rent_monthly_base,
            inflation_rate=self.rent_indexation_rate,
            tax_rate=self.deposit_tax_rate,
            exemption_per_year_rub=self.deposit_exemption_per_year,
        )


def property_value(
    price: float,
    appreciation_rate: float,
    month: int,
    risk_scenario: RiskScenario = RiskScenario.NONE,
) -> float:
    """
    Market value of the object after ``month`` months.

    Under stagnation the price slides linearly to -12% over the first 24 months
    and only then starts compounding again, from the depressed level.
    """
    if risk_scenario == RiskScenario.STAGNATION:
        if month <= STAGNATION_MONTHS:
            return price * (1 - STAGNATION_DROP_PERCENT * month / STAGNATION_MONTHS)
        depressed = price * (1 - STAGNATION_DROP_PERCENT)
        return depressed * (1 + appreciation_rate) ** ((month - STAGNATION_MONTHS) / 12)
    return price * (1 + appreciation_rate) ** (month / 12)


def merge_compare_schedule(
    rows: List[AmortizationRow], compare_rows: List[AmortizationRow]
) -> List[AmortizationRow]:
    """Attach the compared schedule's balance to the main month axis."""
    by_month: Dict[int, float] = {row.month: row.balance for row in compare_rows}
    return [row.model_copy(update={"balance_compare": by_month.get(row.month)}) for row in rows]


def compare_schedule(preset: LoanTerms) -> List[AmortizationRow]:
    return amortization_schedule(preset.principal, preset.rate_percent / 100, preset.term_years)


def build_chart_data_with_deposit(
    data: ChartInput, schedule: Optional[List[AmortizationRow]] = None
) -> List[ChartRow]:
    """
    One row per amortization month with the buyer's net equity next to the
    deposit balance of the same starting capital.

    ``schedule`` may be passed in already merged with a compare schedule;
    otherwise it is generated from ``data`` (and merged when
    ``data.compare_preset`` is set).
    """
    if schedule is None:
        schedule = amortization_schedule(data.loan_amount, data.rate_percent / 100, data.term_years)
        if data.compare_preset is not None:
            schedule = merge_compare_schedule(schedule, compare_schedule(data.compare_preset))
    if not schedule:
        return []

    payment_k = to_minor(annuity(data.loan_amount, data.rate_percent / 100, data.term_years).monthly_payment)
    price_k = to_minor(data.price)
    initial_cash_k = to_minor(data.initial_total_capital) - to_minor(data.down_payment)
    rent_base = data.rent_monthly_base
    rent_rate = data.rent_indexation_rate
    appreciation = data.appreciation_rate

    last_month = max(row.month for row in schedule)
    deposit_k = deposit_series_minor(
        data.initial_total_capital,
        data.deposit_rate,
        last_month,
        data.withdrawal(),
    )

    cumulative_interest_k = 0
    break_even_assigned = False
    rows: List[ChartRow] = []

    for row in schedule:
        cumulative_interest_k += to_minor(row.interest)

        value_k = to_minor(property_value(data.price, appreciation, row.month, data.risk_scenario))
        equity_k = max(0, value_k - to_minor(row.balance))
        remaining_cash_k = max(0, initial_cash_k - payment_k * row.month)
        saved_rent_k = to_minor(accumulated_indexed_rent(rent_base, row.month, rent_rate))
        net_equity_k = equity_k + remaining_cash_k + saved_rent_k

        is_break_even = False
        if not break_even_assigned and (value_k - price_k) + saved_rent_k > cumulative_interest_k:
            is_break_even = True
            break_even_assigned = True

        net_equity_compare = None
        if data.compare_preset is not None and row.balance_compare is not None:
            compare_value_k = to_minor(
                property_value(data.compare_preset.price, appreciation, row.month, data.risk_scenario)
            )
            net_equity_compare = to_major(max(0, compare_value_k - to_minor(row.balance_compare)))

        rows.append(
            ChartRow(
                month=row.month,
                balance=row.balance,
                interest=row.interest,
                balance_compare=row.balance_compare,
                net_equity=to_major(net_equity_k),
                deposit_accumulation=to_major(deposit_k[row.month]),
                is_break_even=is_break_even,
                property_value_growth=to_major(value_k - price_k),
                saved_rent_indexed=to_major(saved_rent_k),
                net_equity_compare=net_equity_compare,
            )
        )

    logger.debug(
        "chart built: months=%s risk=%s break_even=%s",
        last_month,
        data.risk_scenario.value,
        next((r.month for r in rows if r.is_break_even), None),
    )
    return rows


def overlay_object_b(rows_a: List[ChartRow], rows_b: List[ChartRow]) -> List[ChartRow]:
    """Copy object B's net equity onto object A's month axis (A's own value where B has no row)."""
    if not rows_b:
        return list(rows_a)
    by_month = {row.month: row.net_equity for row in rows_b}
    return [row.model_copy(update={"net_equity_b": by_month.get(row.month, row.net_equity)}) for row in rows_a]
