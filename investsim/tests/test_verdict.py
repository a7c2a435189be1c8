import math

import pytest

from investsim.core.amortization import annuity, tax_deductions
from investsim.core.presets import get_preset
from investsim.core.verdict import (
    VerdictBenefitInput,
    calculate_compare_benefit,
    calculate_verdict_benefit,
)


def benefit_input(**overrides) -> VerdictBenefitInput:
    params = {
        "price": 10_000_000,
        "term_years": 20,
        "down_payment": 2_000_000,
        "total_payments": 29_000_000,
        "total_rent": 12_000_000,
        "tax_refunds": 650_000,
        "growth_rate": 0.0,
    }
    params.update(overrides)
    return VerdictBenefitInput(**params)


def test_benefit_formula():
    # 10M + 12M - 29M - 2M + 0.65M
    assert calculate_verdict_benefit(benefit_input()) == -8_350_000


def test_benefit_includes_price_growth():
    result = calculate_verdict_benefit(benefit_input(growth_rate=0.05))
    expected = 10_000_000 * 1.05 ** 20 + 12_000_000 - 29_000_000 - 2_000_000 + 650_000

    assert result == pytest.approx(expected, abs=0.01)


@pytest.mark.parametrize(
    "overrides",
    [
        {"total_rent": math.inf},
        {"growth_rate": math.nan},
        {"growth_rate": 1e6, "term_years": 100},
    ],
)
def test_non_finite_benefit_collapses_to_zero(overrides):
    assert calculate_verdict_benefit(benefit_input(**overrides)) == 0


def test_compare_benefit_uses_preset_loan():
    preset = get_preset("investor")
    loan = annuity(preset.principal, 0.18, 10)
    refunds = tax_deductions(preset.price, loan.total_interest)
    rent_total = preset.price * 0.06 / 12 * 12 * 10
    expected = (
        preset.price * 1.06 ** 10 + rent_total - loan.total_payment - preset.down_payment + refunds.total_refund
    )

    result = calculate_compare_benefit(preset, 6, 0.06, main_benefit=1_000_000)

    assert result.verdict_benefit_compare == pytest.approx(expected, abs=0.01)
    assert result.benefit_delta == pytest.approx(1_000_000 - result.verdict_benefit_compare, abs=0.01)
