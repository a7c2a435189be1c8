"""
Insight analysis over an already-built chart series.

Every function here is a single pass over ``ChartRow`` objects; nothing is
recomputed from the loan parameters.
"""

from __future__ import annotations

import math
from typing import Dict, List, Literal, Optional, Sequence

from pydantic import BaseModel

from investsim.core.chart import ChartRow
from investsim.core.constants import (
    DEPOSIT_PHASE_MONTHS,
    HORIZON_MONTHS,
    MIN_DISPLAY_RATIO,
    RENT_REINVEST_RATE,
    SMART_INSIGHTS_MONTHS,
)
from investsim.core.money import round_half_up
from investsim.core.rent import rent_stream_future_value

Locale = Literal["ru", "en"]

_MESSAGES: Dict[str, Dict[str, str]] = {
    "ru": {
        "property": "недвижимость",
        "deposit": "вклад",
        "year": "год",
        "not_reached": "не достигнута",
        "millions": "млн ₽",
        "conclusion": (
            "На горизонте 20 лет стратегия «{strategy}» выгоднее на {advantage}. "
            "Точка окупаемости банковских процентов — {crossover}."
        ),
        "inflation_warning": (
            "Внимание: на {year}-м году расходы на индексируемую аренду превышают доходность вклада. "
            "Система начинает изымать средства из тела депозита для оплаты жилья."
        ),
        "status_risky": "Рискованная стратегия",
        "status_high": "Высокая эффективность",
        "status_moderate": "Умеренная эффективность",
    },
    "en": {
        "property": "property",
        "deposit": "deposit",
        "year": "year",
        "not_reached": "not reached",
        "millions": "m ₽",
        "conclusion": (
            "Over 20 years, «{strategy}» is ahead by {advantage}. "
            "Deposit interest payback point — {crossover}."
        ),
        "inflation_warning": (
            "Warning: in year {year} the indexed rent exceeds the deposit yield. "
            "The deposit starts being drawn down to pay for housing."
        ),
        "status_risky": "Risky strategy",
        "status_high": "High efficiency",
        "status_moderate": "Moderate efficiency",
    },
}


class FinancialVerdict(BaseModel):
    cross_over_month: Optional[int] = None
    # net equity minus deposit at the horizon, in millions of rubles
    final_advantage: float = 0.0
    # number of months in which the deposit is ahead
    peak_deposit_period: int = 0


class ExpertConclusion(BaseModel):
    crossover_point_month: Optional[int] = None
    crossover_point_year: Optional[int] = None
    final_advantage_rub: float = 0.0
    winning_strategy: Literal["mortgage", "deposit"] = "mortgage"
    yield_peak_month: Optional[int] = None
    yield_peak_gap_rub: float = 0.0
    final_net_equity: float = 0.0
    final_deposit: float = 0.0
    inflection_month: Optional[int] = None
    inflection_year: Optional[int] = None
    inflation_warning: Optional[str] = None


class ComparisonVerdict(BaseModel):
    leader: Literal["A", "B"]
    final_net_equity_a: float
    final_net_equity_b: float
    capital_diff_millions: float
    roi_diff_percent: float
    crossover_point_month: Optional[int] = None
    crossover_point_year: Optional[int] = None


class SmartInsights(BaseModel):
    ratio_times: float = MIN_DISPLAY_RATIO
    horizon_years: float
    payback_months: Optional[int] = None
    peak_month: Optional[int] = None
    show_deposit_disclaimer: bool = False
    show_rent_capitalization: bool = False
    rent_capitalization_percent: float = 0.0


class CrossoverInsight(BaseModel):
    crossover_month: Optional[int] = None
    crossover_year: Optional[int] = None
    final_capital_rub: float = 0.0


class BreakEvenSummary(BaseModel):
    break_even_years: Optional[float] = None
    advantage_percent: Optional[float] = None
    has_break_even: bool = False
    has_advantage: bool = False


def month_to_year(month: int) -> int:
    """Calendar year of the projection a month falls into (month 1..12 -> year 1)."""
    return month // 12 + (1 if month % 12 > 0 else 0)


def window(rows: Sequence[ChartRow], horizon_months: int) -> List[ChartRow]:
    return [row for row in rows if row.month <= horizon_months]


def find_crossover_month(rows: Sequence[ChartRow]) -> Optional[int]:
    """First month after the start where net equity catches up with the deposit."""
    for row in rows:
        if row.month > 0 and row.net_equity >= row.deposit_accumulation:
            return row.month
    return None


def get_financial_verdict(rows: Sequence[ChartRow], horizon_months: int = HORIZON_MONTHS) -> FinancialVerdict:
    upto = window(rows, horizon_months)

    cross_over_month = None
    for row in upto:
        if row.month > 0 and row.net_equity > row.deposit_accumulation:
            cross_over_month = row.month
            break

    at_horizon = next((row for row in upto if row.month == horizon_months), upto[-1] if upto else None)
    advantage_rub = at_horizon.net_equity - at_horizon.deposit_accumulation if at_horizon else 0.0

    return FinancialVerdict(
        cross_over_month=cross_over_month,
        final_advantage=advantage_rub / 1_000_000,
        peak_deposit_period=sum(1 for row in upto if row.deposit_accumulation > row.net_equity),
    )


def _inflection_month(rows: Sequence[ChartRow]) -> Optional[int]:
    if len(rows) < 2:
        return None
    max_deposit = rows[0].deposit_accumulation
    max_index = 0
    for index, row in enumerate(rows):
        if row.deposit_accumulation > max_deposit:
            max_deposit = row.deposit_accumulation
            max_index = index
    if any(row.deposit_accumulation < max_deposit for row in rows[max_index + 1:]):
        return rows[max_index].month
    return None


def generate_expert_conclusion(
    rows: Sequence[ChartRow],
    horizon_months: int = HORIZON_MONTHS,
    locale: Locale = "ru",
) -> ExpertConclusion:
    """
    Crossover point, final advantage at the horizon, the month of the deposit's
    largest lead during the high-rate phase, and the month after which rent
    withdrawals start eating into the deposit (if that happens in the window).
    """
    upto = window(rows, horizon_months)
    last = upto[-1] if upto else None

    crossover_month = find_crossover_month(upto)

    final_net_equity = last.net_equity if last else 0.0
    final_deposit = last.deposit_accumulation if last else 0.0
    final_advantage = final_net_equity - final_deposit

    yield_peak_month = None
    yield_peak_gap = 0.0
    for row in upto:
        if 1 <= row.month <= DEPOSIT_PHASE_MONTHS:
            gap = row.deposit_accumulation - row.net_equity
            if gap > yield_peak_gap:
                yield_peak_gap = gap
                yield_peak_month = row.month

    inflection_month = _inflection_month(upto)
    inflection_year = month_to_year(inflection_month) if inflection_month is not None else None
    warning = None
    if inflection_year is not None:
        warning = _MESSAGES[locale]["inflation_warning"].format(year=inflection_year)

    return ExpertConclusion(
        crossover_point_month=crossover_month,
        crossover_point_year=month_to_year(crossover_month) if crossover_month is not None else None,
        final_advantage_rub=final_advantage,
        winning_strategy="mortgage" if final_advantage >= 0 else "deposit",
        yield_peak_month=yield_peak_month,
        yield_peak_gap_rub=yield_peak_gap,
        final_net_equity=final_net_equity,
        final_deposit=final_deposit,
        inflection_month=inflection_month,
        inflection_year=inflection_year,
        inflation_warning=warning,
    )


def generate_comparison_verdict(
    rows_a: Sequence[ChartRow],
    rows_b: Sequence[ChartRow],
    roi_a_percent: float,
    roi_b_percent: float,
) -> ComparisonVerdict:
    """Which of two objects ends with more capital, and when the leader overtakes its own deposit."""
    final_a = rows_a[-1].net_equity if rows_a else 0.0
    final_b = rows_b[-1].net_equity if rows_b else 0.0
    leader: Literal["A", "B"] = "A" if final_a >= final_b else "B"

    crossover_month = find_crossover_month(rows_a if leader == "A" else rows_b)

    return ComparisonVerdict(
        leader=leader,
        final_net_equity_a=final_a,
        final_net_equity_b=final_b,
        capital_diff_millions=abs(final_a - final_b) / 1_000_000,
        roi_diff_percent=roi_a_percent - roi_b_percent,
        crossover_point_month=crossover_month,
        crossover_point_year=month_to_year(crossover_month) if crossover_month is not None else None,
    )


def compute_smart_insights(
    rows: Sequence[ChartRow],
    term_years: float,
    initial_total_capital: float,
    rent_monthly: float,
) -> SmartInsights:
    upto = window(rows, SMART_INSIGHTS_MONTHS)
    horizon_years = min(term_years, SMART_INSIGHTS_MONTHS // 12)
    if not upto:
        return SmartInsights(horizon_years=horizon_years)

    last = upto[-1]
    ratio = MIN_DISPLAY_RATIO
    if last.deposit_accumulation != 0 and math.isfinite(last.deposit_accumulation):
        raw = last.net_equity / last.deposit_accumulation
        if math.isfinite(raw) and raw > 0:
            ratio = raw

    break_even = next((row for row in upto if row.is_break_even), None)

    peak_month = None
    best_diff = -math.inf
    for row in upto:
        if row.month < 24:
            continue
        diff = row.net_equity - row.deposit_accumulation
        if diff > best_diff:
            best_diff = diff
            peak_month = row.month

    at_end = rows[-1]
    show_disclaimer = at_end.deposit_accumulation > 0 and at_end.deposit_accumulation > 10 * at_end.net_equity

    show_capitalization = False
    capitalization_percent = 0.0
    if initial_total_capital > 0 and rent_monthly > 0 and last.deposit_accumulation > last.net_equity:
        months = SMART_INSIGHTS_MONTHS
        reinvested = rent_stream_future_value(rent_monthly, RENT_REINVEST_RATE / 12, months)
        extra = reinvested - rent_monthly * months
        capitalization_percent = extra / initial_total_capital / 10 * 100
        show_capitalization = capitalization_percent > 0 and math.isfinite(capitalization_percent)

    return SmartInsights(
        ratio_times=ratio,
        horizon_years=horizon_years,
        payback_months=break_even.month if break_even else None,
        peak_month=peak_month,
        show_deposit_disclaimer=show_disclaimer,
        show_rent_capitalization=show_capitalization,
        rent_capitalization_percent=capitalization_percent,
    )


def crossover_insight(rows: Sequence[ChartRow]) -> CrossoverInsight:
    if not rows:
        return CrossoverInsight()
    month = find_crossover_month(rows)
    return CrossoverInsight(
        crossover_month=month,
        crossover_year=math.ceil(month / 12) if month is not None else None,
        final_capital_rub=rows[-1].net_equity,
    )


def summarize_break_even(rows: Sequence[ChartRow], term_years: float) -> BreakEvenSummary:
    """Break-even in years and the buyer's lead over the deposit, within the first ten years at most."""
    upto = window(rows, min(term_years * 12, SMART_INSIGHTS_MONTHS))
    if not upto:
        return BreakEvenSummary()

    break_even = next((row for row in upto if row.is_break_even), None)
    last = upto[-1]

    advantage = None
    if last.deposit_accumulation > 0 and math.isfinite(last.net_equity):
        raw = (last.net_equity - last.deposit_accumulation) / last.deposit_accumulation * 100
        if math.isfinite(raw):
            advantage = round_half_up(raw * 10) / 10

    return BreakEvenSummary(
        break_even_years=break_even.month / 12 if break_even else None,
        advantage_percent=advantage,
        has_break_even=break_even is not None,
        has_advantage=advantage is not None and advantage > 0,
    )


def verdict_status(crossover_year: Optional[int], locale: Locale = "ru") -> Optional[str]:
    if crossover_year is None:
        return None
    messages = _MESSAGES[locale]
    if crossover_year > 15:
        return messages["status_risky"]
    if crossover_year < 10:
        return messages["status_high"]
    return messages["status_moderate"]


def format_millions(value: float, locale: Locale = "ru") -> str:
    millions = value / 1_000_000
    unit = _MESSAGES[locale]["millions"]
    if abs(millions) < 0.01:
        return f"0 {unit}"
    sign = "" if millions >= 0 else "−"
    return f"{sign}{abs(millions):.2f} {unit}"


def get_expert_conclusion_message(conclusion: ExpertConclusion, locale: Locale = "ru") -> str:
    messages = _MESSAGES[locale]
    strategy = messages["property"] if conclusion.winning_strategy == "mortgage" else messages["deposit"]
    if conclusion.crossover_point_year is not None:
        crossover = f"{conclusion.crossover_point_year} {messages['year']}"
    else:
        crossover = messages["not_reached"]
    return messages["conclusion"].format(
        strategy=strategy,
        advantage=format_millions(abs(conclusion.final_advantage_rub), locale),
        crossover=crossover,
    )
