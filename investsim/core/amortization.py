from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel

from investsim.core.constants import (
    DEFAULT_EXPENSE_RATIO,
    INCOME_TAX_RATE,
    INTEREST_REFUND_CAP,
    MORTGAGE_INTEREST_DEDUCTION_LIMIT,
    PROPERTY_DEDUCTION_LIMIT,
    PROPERTY_REFUND_CAP,
)
from investsim.core.money import (
    normalize_rubles,
    round_half_up,
    round_kopeks,
    round_percent,
    to_major,
    to_minor,
)


class AnnuityResult(BaseModel):
    monthly_payment: float
    total_payment: float
    total_interest: float


class TaxDeductionResult(BaseModel):
    """Property refund (max 260 000) and mortgage-interest refund (max 390 000)."""

    property_refund: float
    interest_refund: float
    total_refund: float


class AmortizationRow(BaseModel):
    month: int
    balance: float
    interest: float
    # balance of a compared preset on the same month axis, when one is merged in
    balance_compare: Optional[float] = None


class RoiResult(BaseModel):
    annual_rental_income: float
    annual_expenses: float
    net_annual_income: float
    investment: float
    roi_percent: float
    # math.inf when the property never pays back
    payback_years: float


class CashFlowRoiResult(BaseModel):
    roi_percent: float
    annual_cashflow: float
    total_annual_return_percent: float
    annual_appreciation: float


class RentComparison(BaseModel):
    rent_total: float
    property_equity: float


def term_months(term_years: float) -> int:
    return round_half_up(term_years * 12)


def annuity(principal: float, annual_rate: float, term_years: float) -> AnnuityResult:
    """
    Fixed monthly payment and loan totals.

        M = P * r * (1+r)^n / ((1+r)^n - 1),  r = annual_rate / 12,  n = term_years * 12

    With a zero rate the loan is repaid linearly (M = P / n). Non-positive
    principal or term yields an all-zero result instead of an error.
    """
    if principal <= 0 or term_years <= 0:
        return AnnuityResult(monthly_payment=0.0, total_payment=0.0, total_interest=0.0)

    n = term_months(term_years)
    if n <= 0:
        return AnnuityResult(monthly_payment=0.0, total_payment=0.0, total_interest=0.0)

    r = annual_rate / 12
    if r == 0:
        payment = principal / n
    else:
        factor = (1 + r) ** n
        payment = principal * r * factor / (factor - 1)

    principal_k = to_minor(principal)
    monthly_k = to_minor(payment)
    total_payment_k = monthly_k * n
    total_interest_k = total_payment_k - principal_k

    return AnnuityResult(
        monthly_payment=to_major(monthly_k),
        total_payment=to_major(total_payment_k),
        total_interest=to_major(total_interest_k),
    )


def tax_deductions(purchase_price: float, total_interest_paid: float) -> TaxDeductionResult:
    """
    Personal income tax refunds for a mortgaged purchase.

    The deduction base is capped first (2 000 000 for the property, 3 000 000 for
    interest) and the refund itself is capped again at 260 000 / 390 000.
    """
    property_base_k = min(to_minor(purchase_price), to_minor(PROPERTY_DEDUCTION_LIMIT))
    interest_base_k = min(to_minor(total_interest_paid), to_minor(MORTGAGE_INTEREST_DEDUCTION_LIMIT))

    property_refund_k = min(round_kopeks(property_base_k * INCOME_TAX_RATE), to_minor(PROPERTY_REFUND_CAP))
    interest_refund_k = min(round_kopeks(interest_base_k * INCOME_TAX_RATE), to_minor(INTEREST_REFUND_CAP))

    return TaxDeductionResult(
        property_refund=to_major(property_refund_k),
        interest_refund=to_major(interest_refund_k),
        total_refund=to_major(property_refund_k + interest_refund_k),
    )


def calculate_tax_benefits(purchase_price: float, total_interest_paid: float) -> float:
    return tax_deductions(purchase_price, total_interest_paid).total_refund


def amortization_schedule(principal: float, annual_rate: float, term_years: float) -> List[AmortizationRow]:
    """
    Month-by-month remaining balance and the interest part of each payment.

    Returns n+1 rows (months 0..n). Every step runs in kopeks:
      interest[m] = round(balance[m-1] * r)
      balance[m]  = max(0, balance[m-1] - (payment - interest[m]))
    The last payment settles whatever the rounded fixed payment left over, so
    month n always ends at exactly 0.
    """
    n = term_months(term_years)
    if n <= 0:
        return []

    payment_k = to_minor(annuity(principal, annual_rate, term_years).monthly_payment)
    r = annual_rate / 12
    balance_k = max(0, to_minor(principal))

    rows: List[AmortizationRow] = [AmortizationRow(month=0, balance=to_major(balance_k), interest=0.0)]
    for month in range(1, n + 1):
        interest_k = round_kopeks(balance_k * r)
        balance_k = max(0, balance_k - (payment_k - interest_k))
        if month == n:
            balance_k = 0
        rows.append(AmortizationRow(month=month, balance=to_major(balance_k), interest=to_major(interest_k)))

    return rows


def roi(
    price: float,
    down_payment: float,
    annual_rental_yield: float,
    expense_ratio: float = DEFAULT_EXPENSE_RATIO,
) -> RoiResult:
    """Return on the cash put in (the down payment) when the property is rented out."""
    annual_rental_income = price * annual_rental_yield
    annual_expenses = annual_rental_income * expense_ratio
    net_annual_income = annual_rental_income - annual_expenses

    roi_percent = net_annual_income / down_payment * 100 if down_payment > 0 else 0.0
    payback_years = down_payment / net_annual_income if net_annual_income > 0 else math.inf

    return RoiResult(
        annual_rental_income=normalize_rubles(annual_rental_income),
        annual_expenses=normalize_rubles(annual_expenses),
        net_annual_income=normalize_rubles(net_annual_income),
        investment=normalize_rubles(down_payment),
        roi_percent=round_percent(roi_percent),
        payback_years=round_percent(payback_years),
    )


def cash_flow_roi(
    monthly_rent: float,
    object_price: float,
    annual_taxes_and_expenses: Optional[float] = None,
    appreciation_rate: float = 0.05,
) -> CashFlowRoiResult:
    """
    Net rental cash flow against the full object price, plus the return from
    price growth (flat 5% a year unless told otherwise).
    """
    if object_price <= 0:
        return CashFlowRoiResult(
            roi_percent=0.0,
            annual_cashflow=0.0,
            total_annual_return_percent=0.0,
            annual_appreciation=0.0,
        )

    annual_gross_rent = monthly_rent * 12
    expenses = annual_taxes_and_expenses if annual_taxes_and_expenses is not None else annual_gross_rent * DEFAULT_EXPENSE_RATIO
    annual_cashflow = annual_gross_rent - expenses
    annual_appreciation = object_price * appreciation_rate

    return CashFlowRoiResult(
        roi_percent=round_percent(annual_cashflow / object_price * 100),
        annual_cashflow=normalize_rubles(annual_cashflow),
        total_annual_return_percent=round_percent((annual_cashflow + annual_appreciation) / object_price * 100),
        annual_appreciation=normalize_rubles(annual_appreciation),
    )


def compare_with_rent(
    monthly_rent: float,
    term_years: float,
    current_property_price: float,
    inflation_rate: float = 0.04,
    property_growth_rate: float = 0.05,
) -> RentComparison:
    """
    After ``term_years`` a tenant only has the rent they paid; an owner has the
    appreciated flat. Rent grows with inflation once a year.
    """
    years = max(0.0, term_years)
    annual_rent = monthly_rent * 12
    if years == 0:
        rent_total = 0.0
    elif inflation_rate == 0:
        rent_total = annual_rent * years
    else:
        rent_total = annual_rent * ((1 + inflation_rate) ** years - 1) / inflation_rate

    property_equity = current_property_price * (1 + property_growth_rate) ** years

    return RentComparison(
        rent_total=normalize_rubles(rent_total),
        property_equity=normalize_rubles(property_equity),
    )
