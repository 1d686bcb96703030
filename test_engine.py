import math

import pytest

from rentalroi.schema import Assumptions
from rentalroi.constants import PLACEHOLDER_ASSUMPTIONS, PLACEHOLDER_OCCUPANCY_INCREASES, empty_assumptions
from rentalroi.engine import (
    MissingPlaceholderError,
    compute_projections,
    projections_frame,
    resolve_occupancy_increases,
)

FULL_YEAR_ROOMS = 10 * 365 * 0.55 * 150


def _flat(**overrides):
    data = dict(
        initial_investment=1_000_000,
        keys=10,
        purchase_date="2026-01",
        y1_occupancy=55,
        y1_adr=150,
        occupancy_increases=[0] * 9,
        is_property_ready=True,
    )
    data.update(overrides)
    return Assumptions(**data)


def _rich():
    return PLACEHOLDER_ASSUMPTIONS.updated(
        purchase_date=PLACEHOLDER_ASSUMPTIONS.purchase_date.replace(month=3),
        is_property_ready=False,
        property_ready_date=PLACEHOLDER_ASSUMPTIONS.purchase_date.replace(month=9),
        y1_spa=5_000_000,
        y1_oods=2_000_000,
        y1_misc=1_000_000,
        spa_cost_pct=30,
        other_cost_pct=40,
        misc_cost_pct=10,
        incentive_fee_pct=8,
    )


def test_ten_records_in_order():
    records = compute_projections(_flat())
    assert len(records) == 10
    assert [r.year for r in records] == list(range(1, 11))
    assert [r.calendar_year for r in records] == list(range(2026, 2036))


def test_flat_scenario_rooms_revenue_constant():
    records = compute_projections(_flat())
    for r in records:
        assert r.revenue_rooms == pytest.approx(FULL_YEAR_ROOMS)
        assert r.revenue_rooms == records[0].revenue_rooms
    assert all(r.revenue_growth == 0 for r in records[1:])


@pytest.mark.parametrize("a", [_flat(), _rich(), PLACEHOLDER_ASSUMPTIONS])
def test_statement_identities(a):
    for r in compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES):
        categories = r.revenue_rooms + r.revenue_fb + r.revenue_spa + r.revenue_oods + r.revenue_misc
        assert r.total_revenue == pytest.approx(categories)
        assert r.gop == pytest.approx(r.total_revenue - r.total_operating_cost - r.total_undistributed_cost)
        assert r.take_home_profit == pytest.approx(r.gop - r.total_management_fees)


def test_zero_investment_gives_zero_roi():
    for r in compute_projections(_flat(initial_investment=0, y1_cam=1000)):
        assert r.roi_before_management == 0
        assert r.roi_after_management == 0


def test_zero_revenue_ratios_are_zero_not_nan():
    a = empty_assumptions("2026-01").updated(y1_cam=5_000, keys=0)
    for r in compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES):
        for name, value in r.model_dump().items():
            assert math.isfinite(value), name
        assert r.gop_margin == 0
        assert r.profit_margin == 0
        assert r.fee_cam_percent == 0
        assert r.trevpar == 0
        assert r.revenue_growth == 0


def test_idempotent_and_fresh_output():
    a = _rich()
    before = a.model_dump()
    first = compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES)
    second = compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES)
    assert first == second
    assert first is not second
    assert a.model_dump() == before


def test_occupancy_monotonic_with_non_negative_steps():
    records = compute_projections(_flat(occupancy_increases=[3, 0, 2, 1, 0, 0.5, 1, 0, 2]))
    occ = [r.occupancy for r in records]
    assert all(b >= a for a, b in zip(occ, occ[1:]))
    assert occ[-1] == pytest.approx(55 + 9.5)


def test_july_readiness_halves_year_one():
    full = compute_projections(_flat(y1_fb=100_000, y1_cam=12_000))
    half = compute_projections(_flat(y1_fb=100_000, y1_cam=12_000, is_property_ready=False, property_ready_date="2026-07"))

    y1 = half[0]
    assert y1.operational_factor == pytest.approx(0.5)
    assert y1.occupancy == pytest.approx(full[0].occupancy / 2)
    assert y1.revenue_rooms == pytest.approx(full[0].revenue_rooms / 2)
    assert y1.revenue_fb == pytest.approx(50_000)
    assert y1.total_revenue == pytest.approx(full[0].total_revenue / 2)
    # fees run on the purchase date, not on readiness
    assert y1.fee_factor == 1.0
    assert y1.fee_cam == pytest.approx(12_000)
    assert half[1].occupancy == pytest.approx(55)


def test_growth_compounds_on_unprorated_base():
    records = compute_projections(_flat(
        y1_fb=100_000, fb_growth=10, is_property_ready=False, property_ready_date="2026-07",
    ))
    assert records[0].revenue_fb == pytest.approx(50_000)
    assert records[1].revenue_fb == pytest.approx(110_000)
    assert records[2].revenue_fb == pytest.approx(121_000)


def test_adr_starts_on_first_operational_year():
    records = compute_projections(_flat(adr_growth=10, is_property_ready=False, property_ready_date="2027-04"))
    y1, y2, y3 = records[:3]
    assert y1.adr == 0 and y1.revenue_rooms == 0 and y1.total_revenue == 0
    assert y2.adr == 150 and y2.adr_growth == 0
    assert y2.operational_factor == pytest.approx(9 / 12)
    assert y3.adr == pytest.approx(165) and y3.adr_growth == 10


def test_fees_use_purchase_year_proration():
    records = compute_projections(_flat(purchase_date="2026-04", y1_cam=12_000, cam_growth=10, y1_base_fee=4_000))
    assert records[0].fee_factor == pytest.approx(0.75)
    assert records[0].fee_cam == pytest.approx(9_000)
    assert records[0].fee_base == pytest.approx(3_000)
    assert records[1].fee_cam == pytest.approx(13_200)


def test_incentive_fee_follows_gop():
    records = compute_projections(_flat(incentive_fee_pct=10, rooms_cost_pct=20, purchase_date="2026-07"))
    for r in records:
        assert r.fee_incentive == pytest.approx(r.gop * 0.10)
        assert r.fee_incentive_percent == 10


def test_unset_steps_take_placeholders():
    a = _flat(occupancy_increases=[None, 0, None, 0, 0, 0, 0, 0, 0])
    resolved = resolve_occupancy_increases(a, PLACEHOLDER_OCCUPANCY_INCREASES)
    assert resolved == [4, 0, 2, 0, 0, 0, 0, 0, 0]

    records = compute_projections(a, PLACEHOLDER_OCCUPANCY_INCREASES)
    assert records[1].occupancy_increase == 4
    assert records[3].occupancy == pytest.approx(61)


def test_unset_step_without_placeholder_raises():
    with pytest.raises(MissingPlaceholderError):
        compute_projections(_flat(occupancy_increases=[None] + [0] * 8))


def test_placeholder_length_checked():
    with pytest.raises(ValueError):
        resolve_occupancy_increases(_flat(), [1, 2, 3])


def test_growth_is_not_clamped():
    records = compute_projections(_flat(adr_growth=100))
    assert records[-1].adr == pytest.approx(150 * 2 ** 9)


def test_negative_keys_propagate():
    records = compute_projections(_flat(keys=-1))
    assert records[0].revenue_rooms < 0


def test_projections_frame_indexed_by_calendar_year():
    df = projections_frame(compute_projections(_flat()))
    assert list(df.index) == list(range(2026, 2036))
    assert df.loc[2026, "year"] == 1
    assert "take_home_profit" in df.columns


def test_ready_month_given_as_string_prorates():
    a = _flat().updated(is_property_ready=False, property_ready_date="2026-07")
    records = compute_projections(a)
    assert records[0].operational_factor == pytest.approx(0.5)
    assert records[0].revenue_rooms == pytest.approx(FULL_YEAR_ROOMS * 0.5)
    assert records[1].operational_factor == 1
