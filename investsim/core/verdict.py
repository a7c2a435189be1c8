from __future__ import annotations

import math

from pydantic import BaseModel

from investsim.core.amortization import annuity, tax_deductions
from investsim.core.money import normalize_rubles
from investsim.core.presets import LoanTerms


class VerdictBenefitInput(BaseModel):
    price: float
    term_years: float
    down_payment: float
    total_payments: float
    total_rent: float
    tax_refunds: float
    growth_rate: float


class CompareBenefitResult(BaseModel):
    verdict_benefit_compare: float
    benefit_delta: float


def calculate_verdict_benefit(data: VerdictBenefitInput) -> float:
    """
    Lifetime benefit of buying:
        final value + rent saved - mortgage payments - down payment + tax refunds

    A non-finite result (overflowing growth, NaN inputs) collapses to 0.
    """
    try:
        final_value = data.price * (1 + data.growth_rate) ** data.term_years
    except OverflowError:
        return 0.0
    raw = final_value + data.total_rent - data.total_payments - data.down_payment + data.tax_refunds
    # checked on the kopek scale so the rounding below cannot overflow
    if not math.isfinite(raw * 100):
        return 0.0
    return normalize_rubles(raw)


def calculate_compare_benefit(
    preset: LoanTerms,
    rental_yield_percent: float,
    growth_rate: float,
    main_benefit: float,
) -> CompareBenefitResult:
    """Benefit of an alternative preset (its own loan, refunds and rent) and the gap to the main one."""
    loan = annuity(preset.principal, preset.rate_percent / 100, preset.term_years)
    refunds = tax_deductions(preset.price, loan.total_interest)
    rent_monthly = preset.price * (rental_yield_percent / 100) / 12

    compare_benefit = calculate_verdict_benefit(
        VerdictBenefitInput(
            price=preset.price,
            term_years=preset.term_years,
            down_payment=preset.down_payment,
            total_payments=loan.total_payment,
            total_rent=rent_monthly * 12 * preset.term_years,
            tax_refunds=refunds.total_refund,
            growth_rate=growth_rate,
        )
    )
    return CompareBenefitResult(
        verdict_benefit_compare=compare_benefit,
        benefit_delta=normalize_rubles(main_benefit - compare_benefit),
    )
