from typing import List, Sequence

import pytest

from investsim.core.chart import ChartRow
from investsim.core.insights import (
    compute_smart_insights,
    crossover_insight,
    find_crossover_month,
    format_millions,
    generate_comparison_verdict,
    generate_expert_conclusion,
    get_expert_conclusion_message,
    get_financial_verdict,
    month_to_year,
    summarize_break_even,
    verdict_status,
)


def make_rows(net: Sequence[float], deposit: Sequence[float], break_even_month: int = -1) -> List[ChartRow]:
    return [
        ChartRow(
            month=month,
            balance=0.0,
            interest=0.0,
            net_equity=n,
            deposit_accumulation=d,
            is_break_even=month == break_even_month,
            property_value_growth=0.0,
            saved_rent_indexed=0.0,
        )
        for month, (n, d) in enumerate(zip(net, deposit))
    ]


def test_month_to_year_rounds_up():
    assert month_to_year(1) == 1
    assert month_to_year(12) == 1
    assert month_to_year(13) == 2


def test_crossover_counts_ties_but_not_month_zero():
    rows = make_rows([100, 90, 95, 100, 120], [100, 100, 100, 100, 100])

    assert find_crossover_month(rows) == 3
    assert crossover_insight(rows).crossover_year == 1
    assert crossover_insight(rows).final_capital_rub == 120


def test_financial_verdict_needs_strict_lead():
    rows = make_rows([100, 90, 95, 100, 2_100_000], [100, 100, 100, 100, 100])
    verdict = get_financial_verdict(rows)

    assert verdict.cross_over_month == 4
    assert verdict.peak_deposit_period == 2
    # last row stands in for the 240-month horizon
    assert verdict.final_advantage == pytest.approx(2.0999)


def test_yield_peak_ignores_months_after_high_rate_phase():
    net = [100.0] * 41
    deposit = [100.0] * 41
    deposit[10] = 150.0
    deposit[38] = 500.0
    conclusion = generate_expert_conclusion(make_rows(net, deposit))

    assert conclusion.yield_peak_month == 10
    assert conclusion.yield_peak_gap_rub == 50


def test_inflection_when_deposit_starts_shrinking():
    conclusion = generate_expert_conclusion(make_rows([0, 0, 0, 0, 0], [100, 110, 120, 115, 118]))

    assert conclusion.inflection_month == 2
    assert conclusion.inflection_year == 1
    assert "1-м году" in conclusion.inflation_warning
    assert conclusion.winning_strategy == "deposit"


def test_no_inflection_for_growing_deposit():
    conclusion = generate_expert_conclusion(make_rows([0, 0, 0], [100, 110, 120]), locale="en")

    assert conclusion.inflection_month is None
    assert conclusion.inflation_warning is None


def test_comparison_verdict_is_symmetric():
    rows_a = make_rows([10, 3_000_000, 5_000_000], [10, 4_000_000, 4_500_000])
    rows_b = make_rows([10, 2_000_000, 3_000_000], [10, 4_000_000, 4_500_000])

    a_first = generate_comparison_verdict(rows_a, rows_b, 10.0, 7.0)
    b_first = generate_comparison_verdict(rows_b, rows_a, 7.0, 10.0)

    assert a_first.leader == "A"
    assert b_first.leader == "B"
    assert a_first.roi_diff_percent == 3.0
    assert b_first.roi_diff_percent == -3.0
    assert a_first.capital_diff_millions == b_first.capital_diff_millions == 2.0
    assert a_first.crossover_point_month == b_first.crossover_point_month == 2


def test_comparison_tie_goes_to_a():
    rows = make_rows([1, 2], [1, 1])

    assert generate_comparison_verdict(rows, rows, 5.0, 5.0).leader == "A"


def test_smart_insights_ratio_falls_back_when_meaningless():
    zero_deposit = compute_smart_insights(make_rows([100, 200], [0, 0]), 20, 10_000_000, 0)
    negative = compute_smart_insights(make_rows([100, -200], [100, 100]), 20, 10_000_000, 0)

    assert zero_deposit.ratio_times == 1.1
    assert negative.ratio_times == 1.1


def test_smart_insights_peak_and_payback():
    net = [float(m) for m in range(40)]
    deposit = [0.0] * 40
    deposit[30] = -50.0
    insights = compute_smart_insights(make_rows(net, deposit, break_even_month=7), 5, 10_000_000, 0)

    assert insights.horizon_years == 5
    assert insights.payback_months == 7
    assert insights.peak_month == 30
    assert insights.ratio_times == 1.1


def test_rent_capitalization_hint_when_deposit_leads():
    rows = make_rows([100, 100], [200, 200])
    insights = compute_smart_insights(rows, 20, 10_000_000, 50_000)

    assert insights.show_rent_capitalization is True
    assert insights.rent_capitalization_percent > 0
    assert insights.show_deposit_disclaimer is False


def test_deposit_disclaimer_when_equity_is_tiny():
    insights = compute_smart_insights(make_rows([1, 1], [1000, 1000]), 20, 10_000_000, 0)

    assert insights.show_deposit_disclaimer is True


def test_break_even_summary():
    rows = make_rows([100, 110, 120], [100, 100, 100], break_even_month=2)
    summary = summarize_break_even(rows, 20)

    assert summary.has_break_even is True
    assert summary.break_even_years == pytest.approx(2 / 12)
    assert summary.advantage_percent == 20.0
    assert summary.has_advantage is True

    assert summarize_break_even([], 20).has_break_even is False


def test_verdict_status_thresholds():
    assert verdict_status(None) is None
    assert verdict_status(16) == "Рискованная стратегия"
    assert verdict_status(15, "en") == "Moderate efficiency"
    assert verdict_status(10, "en") == "Moderate efficiency"
    assert verdict_status(9, "en") == "High efficiency"


def test_format_millions():
    assert format_millions(2_500_000) == "2.50 млн ₽"
    assert format_millions(-2_500_000, "en") == "−2.50 m ₽"
    assert format_millions(4_000, "en") == "0 m ₽"


def test_conclusion_message_in_both_locales():
    rows = make_rows([100, 3_000_100], [100, 100])
    ru = get_expert_conclusion_message(generate_expert_conclusion(rows), "ru")
    en = get_expert_conclusion_message(generate_expert_conclusion(rows, locale="en"), "en")

    assert ru == (
        "На горизонте 20 лет стратегия «недвижимость» выгоднее на 3.00 млн ₽. "
        "Точка окупаемости банковских процентов — 1 год."
    )
    assert "«property» is ahead by 3.00 m ₽" in en

    never = get_expert_conclusion_message(generate_expert_conclusion(make_rows([0, 0], [100, 100])), "en")
    assert "not reached" in never
    assert "«deposit»" in never
