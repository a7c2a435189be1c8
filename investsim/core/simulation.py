from __future__ import annotations

import logging
from typing import List, Optional

from pydantic import BaseModel

from investsim.core.amortization import (
    AnnuityResult,
    RoiResult,
    TaxDeductionResult,
    annuity,
    roi,
    tax_deductions,
)
from investsim.core.chart import (
    ChartInput,
    ChartRow,
    RiskScenario,
    build_chart_data_with_deposit,
    overlay_object_b,
)
from investsim.core.constants import (
    DEFAULT_APPRECIATION_PERCENT,
    DEFAULT_DEPOSIT_RATE,
    DEFAULT_EXPENSE_RATIO,
    RENT_INFLATION_RATE,
)
from investsim.core.insights import (
    BreakEvenSummary,
    ComparisonVerdict,
    CrossoverInsight,
    ExpertConclusion,
    FinancialVerdict,
    Locale,
    SmartInsights,
    compute_smart_insights,
    crossover_insight,
    generate_comparison_verdict,
    generate_expert_conclusion,
    get_expert_conclusion_message,
    get_financial_verdict,
    summarize_break_even,
    verdict_status,
)
from investsim.core.money import normalize_rubles
from investsim.core.presets import ScenarioPreset
from investsim.core.verdict import (
    VerdictBenefitInput,
    calculate_compare_benefit,
    calculate_verdict_benefit,
)

logger = logging.getLogger(__name__)


class ObjectInputs(BaseModel):
    """Second object ("B") in two-object comparison mode."""

    price: float
    down_percent: float
    rate_percent: float
    term_years: int
    rental_yield_percent: float


class SimulationInput(BaseModel):
    price: float
    down_percent: float
    rate_percent: float
    term_years: int
    rental_yield_percent: float
    deposit_rate: float = DEFAULT_DEPOSIT_RATE
    appreciation_percent: float = DEFAULT_APPRECIATION_PERCENT
    rent_inflation_rate: float = RENT_INFLATION_RATE
    risk_scenario: RiskScenario = RiskScenario.NONE
    compare_preset: Optional[ScenarioPreset] = None
    object_b: Optional[ObjectInputs] = None
    # start A and B from the larger of the two prices
    zero_point_sync: bool = False
    initial_total_capital_override: Optional[float] = None
    deposit_withdrawals: bool = True
    locale: Locale = "ru"

    @property
    def growth_rate(self) -> float:
        return self.appreciation_percent / 100

    def shared_capital(self) -> Optional[float]:
        if self.initial_total_capital_override is not None:
            return self.initial_total_capital_override
        if self.zero_point_sync and self.object_b is not None:
            return max(self.price, self.object_b.price)
        return None


class SimulationResult(BaseModel):
    chart: List[ChartRow]
    chart_b: Optional[List[ChartRow]] = None
    annuity: AnnuityResult
    tax_deductions: TaxDeductionResult
    roi: RoiResult
    rent_monthly: float
    total_rent: float
    final_value: float
    total_payments: float
    tax_refunds: float
    verdict_benefit: float
    verdict_benefit_compare: Optional[float] = None
    benefit_delta: Optional[float] = None
    compare_label: Optional[str] = None
    roi_b_percent: Optional[float] = None
    expert_conclusion: ExpertConclusion
    conclusion_message: str
    financial_verdict: FinancialVerdict
    verdict_status: Optional[str] = None
    smart_insights: SmartInsights
    crossover: CrossoverInsight
    break_even: BreakEvenSummary
    comparison: Optional[ComparisonVerdict] = None


def _chart_input(data: SimulationInput, capital: Optional[float]) -> ChartInput:
    return ChartInput(
        price=data.price,
        down_percent=data.down_percent,
        rate_percent=data.rate_percent,
        term_years=data.term_years,
        deposit_rate=data.deposit_rate,
        appreciation_percent=data.appreciation_percent,
        rental_yield_percent=data.rental_yield_percent,
        risk_scenario=data.risk_scenario,
        compare_preset=data.compare_preset,
        initial_total_capital_override=capital,
        rent_inflation_rate=data.rent_inflation_rate,
        deposit_withdrawals=data.deposit_withdrawals,
    )


def _object_b_chart(data: SimulationInput, capital: Optional[float]) -> List[ChartRow]:
    b = data.object_b
    return build_chart_data_with_deposit(
        ChartInput(
            price=b.price,
            down_percent=b.down_percent,
            rate_percent=b.rate_percent,
            term_years=b.term_years,
            deposit_rate=data.deposit_rate,
            appreciation_percent=data.appreciation_percent,
            rental_yield_percent=b.rental_yield_percent,
            risk_scenario=data.risk_scenario,
            initial_total_capital_override=capital,
            rent_inflation_rate=data.rent_inflation_rate,
            deposit_withdrawals=data.deposit_withdrawals,
        )
    )


def run_simulation(data: SimulationInput) -> SimulationResult:
    """
    Full projection for one parameter set: chart series, loan totals, refunds,
    ROI, lifetime benefit, optional preset / object-B comparison and insights.

    Every default (deposit rate, appreciation, rent indexation) arrives in
    ``data``; nothing is looked up from the environment here.
    """
    capital = data.shared_capital()
    chart = build_chart_data_with_deposit(_chart_input(data, capital))

    down_payment = data.price * (data.down_percent / 100)
    loan = annuity(data.price - down_payment, data.rate_percent / 100, data.term_years)
    refunds = tax_deductions(data.price, loan.total_interest)
    rent_roi = roi(data.price, down_payment, data.rental_yield_percent / 100, DEFAULT_EXPENSE_RATIO)

    rent_monthly = data.price * (data.rental_yield_percent / 100) / 12
    total_rent = rent_monthly * 12 * data.term_years
    final_value = data.price * (1 + data.growth_rate) ** data.term_years

    benefit = calculate_verdict_benefit(
        VerdictBenefitInput(
            price=data.price,
            term_years=data.term_years,
            down_payment=down_payment,
            total_payments=loan.total_payment,
            total_rent=total_rent,
            tax_refunds=refunds.total_refund,
            growth_rate=data.growth_rate,
        )
    )

    benefit_compare = None
    benefit_delta = None
    compare_label = None
    if data.compare_preset is not None:
        compared = calculate_compare_benefit(
            data.compare_preset, data.rental_yield_percent, data.growth_rate, benefit
        )
        benefit_compare = compared.verdict_benefit_compare
        benefit_delta = compared.benefit_delta
        compare_label = data.compare_preset.key.value

    chart_b = None
    roi_b_percent = None
    comparison = None
    if data.object_b is not None:
        b = data.object_b
        chart_b = _object_b_chart(data, capital)
        roi_b_percent = roi(
            b.price, b.price * (b.down_percent / 100), b.rental_yield_percent / 100, DEFAULT_EXPENSE_RATIO
        ).roi_percent
        comparison = generate_comparison_verdict(chart, chart_b, rent_roi.roi_percent, roi_b_percent)
        chart = overlay_object_b(chart, chart_b)

    conclusion = generate_expert_conclusion(chart, locale=data.locale)
    verdict = get_financial_verdict(chart)
    cross_over_year = verdict.cross_over_month // 12 if verdict.cross_over_month is not None else None

    logger.info(
        "simulation: price=%s term=%s risk=%s benefit=%s crossover=%s",
        data.price,
        data.term_years,
        data.risk_scenario.value,
        benefit,
        conclusion.crossover_point_month,
    )

    return SimulationResult(
        chart=chart,
        chart_b=chart_b,
        annuity=loan,
        tax_deductions=refunds,
        roi=rent_roi,
        rent_monthly=normalize_rubles(rent_monthly),
        total_rent=normalize_rubles(total_rent),
        final_value=normalize_rubles(final_value),
        total_payments=loan.total_payment,
        tax_refunds=refunds.total_refund,
        verdict_benefit=benefit,
        verdict_benefit_compare=benefit_compare,
        benefit_delta=benefit_delta,
        compare_label=compare_label,
        roi_b_percent=roi_b_percent,
        expert_conclusion=conclusion,
        conclusion_message=get_expert_conclusion_message(conclusion, data.locale),
        financial_verdict=verdict,
        verdict_status=verdict_status(cross_over_year, data.locale),
        smart_insights=compute_smart_insights(
            chart, data.term_years, capital if capital is not None else data.price, rent_monthly
        ),
        crossover=crossover_insight(chart),
        break_even=summarize_break_even(chart, data.term_years),
        comparison=comparison,
    )
