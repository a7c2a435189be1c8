from typing import List

import pytest

from investsim.core.chart import (
    ChartInput,
    ChartRow,
    RiskScenario,
    build_chart_data_with_deposit,
    overlay_object_b,
    property_value,
)
from investsim.core.deposit import deposit_series
from investsim.core.presets import get_preset


def base_input(**overrides) -> ChartInput:
    params = {
        "price": 10_000_000,
        "down_percent": 20,
        "rate_percent": 18,
        "term_years": 20,
        "deposit_rate": 0.18,
        "appreciation_percent": 6,
        "rental_yield_percent": 6,
    }
    params.update(overrides)
    return ChartInput(**params)


def test_one_row_per_month_including_start():
    rows = build_chart_data_with_deposit(base_input())

    assert len(rows) == 241
    assert [row.month for row in rows] == list(range(241))


def test_starting_row_splits_capital():
    start = build_chart_data_with_deposit(base_input())[0]

    # 2M equity + 8M cash kept aside, against 10M on deposit
    assert start.net_equity == 10_000_000
    assert start.deposit_accumulation == 10_000_000
    assert start.property_value_growth == 0
    assert start.saved_rent_indexed == 0
    assert start.is_break_even is False


def test_break_even_flag_set_once_on_first_crossing():
    rows = build_chart_data_with_deposit(base_input())
    flagged = [row for row in rows if row.is_break_even]

    assert len(flagged) <= 1
    if not flagged:
        return

    month = flagged[0].month
    cumulative = 0.0
    for row in rows[: month + 1]:
        cumulative += row.interest
        gains = row.property_value_growth + row.saved_rent_indexed
        if row.month < month:
            assert gains - cumulative <= 0.005
        else:
            assert gains > cumulative


def test_zero_term_gives_empty_chart():
    assert build_chart_data_with_deposit(base_input(term_years=0)) == []


def test_stagnation_curve():
    assert property_value(10_000_000, 0.06, 0, RiskScenario.STAGNATION) == 10_000_000
    assert property_value(10_000_000, 0.06, 12, RiskScenario.STAGNATION) == pytest.approx(9_400_000)
    assert property_value(10_000_000, 0.06, 24, RiskScenario.STAGNATION) == pytest.approx(8_800_000)
    assert property_value(10_000_000, 0.06, 36, RiskScenario.STAGNATION) == pytest.approx(8_800_000 * 1.06)

    rows = build_chart_data_with_deposit(base_input(risk_scenario=RiskScenario.STAGNATION))
    assert rows[0].property_value_growth == 0
    assert rows[24].property_value_growth == pytest.approx(-1_200_000, abs=0.01)


def test_hyperinflation_indexes_rent_faster():
    normal = build_chart_data_with_deposit(base_input())
    hyper = build_chart_data_with_deposit(base_input(risk_scenario=RiskScenario.HYPERINFLATION))

    assert normal[24].saved_rent_indexed == pytest.approx(50_000 * (12 + 12 * 1.05), abs=0.01)
    assert hyper[24].saved_rent_indexed == pytest.approx(50_000 * (12 + 12 * 1.15), abs=0.01)
    # the deposit pays the same, faster-growing rent
    assert hyper[-1].deposit_accumulation <= normal[-1].deposit_accumulation


def test_deposit_without_withdrawals_is_pure_compounding():
    rows = build_chart_data_with_deposit(base_input(deposit_withdrawals=False))
    expected = deposit_series(10_000_000, 0.18, 240)

    assert [row.deposit_accumulation for row in rows] == expected


def test_capital_override_moves_both_sides():
    start = build_chart_data_with_deposit(base_input(initial_total_capital_override=15_000_000))[0]

    assert start.deposit_accumulation == 15_000_000
    assert start.net_equity == 15_000_000


def test_compare_preset_adds_its_own_equity():
    rows = build_chart_data_with_deposit(base_input(compare_preset=get_preset("family")))

    assert rows[0].balance_compare == 10_200_000
    assert rows[0].net_equity_compare == 1_800_000
    assert all(row.net_equity_compare is not None for row in rows)


def test_shorter_compare_preset_leaves_gaps():
    rows = build_chart_data_with_deposit(base_input(compare_preset=get_preset("investor")))

    assert rows[120].balance_compare is not None
    assert rows[121].balance_compare is None
    assert rows[121].net_equity_compare is None


def make_rows(values: List[float]) -> List[ChartRow]:
    return [
        ChartRow(
            month=month,
            balance=0.0,
            interest=0.0,
            net_equity=value,
            deposit_accumulation=0.0,
            property_value_growth=0.0,
            saved_rent_indexed=0.0,
        )
        for month, value in enumerate(values)
    ]


def test_overlay_object_b():
    rows_a = make_rows([1.0, 2.0, 3.0])
    rows_b = make_rows([10.0, 20.0])

    merged = overlay_object_b(rows_a, rows_b)

    assert [row.net_equity_b for row in merged] == [10.0, 20.0, 3.0]
    assert [row.net_equity for row in merged] == [1.0, 2.0, 3.0]
    assert overlay_object_b(rows_a, []) == rows_a


def test_compare_preset_follows_stagnation_curve():
    rows = build_chart_data_with_deposit(
        base_input(compare_preset=get_preset("family"), risk_scenario=RiskScenario.STAGNATION)
    )
    normal = build_chart_data_with_deposit(base_input(compare_preset=get_preset("family")))

    month_24 = rows[24]
    # family preset: 12M object, down 12% after two years of stagnation
    assert month_24.net_equity_compare == pytest.approx(10_560_000 - month_24.balance_compare, abs=0.01)
    assert month_24.net_equity_compare < normal[24].net_equity_compare
