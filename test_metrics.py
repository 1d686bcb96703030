import pytest

from rentalroi.schema import Assumptions, AggregateSummary
from rentalroi.constants import PLACEHOLDER_ASSUMPTIONS, PLACEHOLDER_OCCUPANCY_INCREASES
from rentalroi.engine import compute_projections
from rentalroi.metrics import (
    growth_percent,
    headline_metrics,
    payback_years,
    summarize,
    total_take_home_profit,
)


def _flat(**overrides):
    data = dict(
        initial_investment=1_000_000,
        keys=10,
        purchase_date="2026-01",
        y1_occupancy=55,
        y1_adr=150,
        occupancy_increases=[0] * 9,
    )
    data.update(overrides)
    return Assumptions(**data)


def test_summary_is_arithmetic_mean():
    records = compute_projections(PLACEHOLDER_ASSUMPTIONS)
    summary = summarize(records)
    assert summary.total_revenue == pytest.approx(sum(r.total_revenue for r in records) / 10)
    assert summary.gop_margin == pytest.approx(sum(r.gop_margin for r in records) / 10)
    assert summary.roi_after_management == pytest.approx(sum(r.roi_after_management for r in records) / 10)


def test_flat_summary():
    summary = summarize(compute_projections(_flat()))
    assert summary.occupancy == pytest.approx(55)
    assert summary.adr == pytest.approx(150)
    assert summary.revpar == pytest.approx(82.5)


def test_pre_operational_years_are_averaged_in():
    records = compute_projections(_flat(is_property_ready=False, property_ready_date="2027-01"))
    assert records[0].occupancy == 0
    assert summarize(records).occupancy == pytest.approx(55 * 9 / 10)


def test_empty_summary_is_zero():
    assert summarize([]) == AggregateSummary()


def test_payback_years():
    records = compute_projections(_flat())
    yearly = 10 * 365 * 0.55 * 150
    assert payback_years(records, _flat()) == pytest.approx(1_000_000 / yearly)


def test_payback_none_without_profit():
    a = _flat(y1_cam=10_000_000)
    records = compute_projections(a)
    assert total_take_home_profit(records) < 0
    assert payback_years(records, a) is None


@pytest.mark.parametrize("first, last, expected", [
    (100, 150, 50),
    (0, 150, 0),
    (-100, -50, 50),
    (1, 1_000_000, 999),
    (1, -1_000_000, -999),
    (float("inf"), 1, 0),
])
def test_growth_percent(first, last, expected):
    assert growth_percent(first, last) == pytest.approx(expected)


def test_headline_metrics():
    a = PLACEHOLDER_ASSUMPTIONS
    records = compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES)
    out = headline_metrics(records, a)
    assert set(out) == {"avg_net_yield", "total_net_profit", "avg_cash_flow", "avg_gop_margin", "payback_years", "total_revenue"}
    assert out["avg_cash_flow"] == pytest.approx(out["total_net_profit"] / 10)
    assert out["payback_years"] == pytest.approx(a.initial_investment / out["avg_cash_flow"])
