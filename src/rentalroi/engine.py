from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from rentalroi.schema import Assumptions, YearlyRecord, PROJECTION_YEARS, OCCUPANCY_STEPS
from rentalroi.timing import operational_factor, purchase_year_factor
from rentalroi.logging_utils import get_logger

log = get_logger(__name__)

DAYS_PER_YEAR = 365


class MissingPlaceholderError(ValueError):
    """An occupancy step-up is unset and the caller supplied no placeholder for it."""


@dataclass(frozen=True)
class ProjectionState:
    """Unprorated bases carried from one year into the next."""
    occupancy: float
    adr: float
    operating: bool
    fb: float
    spa: float
    oods: float
    misc: float
    cam: float
    base_fee: float
    tech_fee: float
    total_revenue: float


def _grow(value: float, pct: float) -> float:
    return value * (1 + pct / 100)


def _safe_div(num: float, den: float) -> float:
    return num / den if den else 0.0


def _pct(num: float, den: float) -> float:
    return _safe_div(num, den) * 100


def resolve_occupancy_increases(a: Assumptions, placeholders: Optional[Sequence[float]] = None) -> List[float]:
    """Explicit step-ups win; unset ones take the caller's placeholder for the same year."""
    if placeholders is not None and len(placeholders) != OCCUPANCY_STEPS:
        raise ValueError(f"expected {OCCUPANCY_STEPS} occupancy placeholders, got {len(placeholders)}")

    resolved = []
    for i, inc in enumerate(a.occupancy_increases):
        if inc is not None:
            resolved.append(float(inc))
        elif placeholders is not None:
            resolved.append(float(placeholders[i]))
        else:
            raise MissingPlaceholderError(f"occupancy increase for year {i + 2} is unset and no placeholder was given")
    return resolved


def _carry(a: Assumptions, prev: Optional[ProjectionState], increase: float) -> ProjectionState:
    # bases compound on last year's unprorated figures
    if prev is None:
        return ProjectionState(
            occupancy=a.y1_occupancy,
            adr=0.0,
            operating=False,
            fb=a.y1_fb,
            spa=a.y1_spa,
            oods=a.y1_oods,
            misc=a.y1_misc,
            cam=a.y1_cam,
            base_fee=a.y1_base_fee,
            tech_fee=a.y1_tech_fee,
            total_revenue=0.0,
        )
    return ProjectionState(
        occupancy=prev.occupancy + increase,
        adr=prev.adr,
        operating=prev.operating,
        fb=_grow(prev.fb, a.fb_growth),
        spa=_grow(prev.spa, a.spa_growth),
        oods=_grow(prev.oods, a.oods_growth),
        misc=_grow(prev.misc, a.misc_growth),
        cam=_grow(prev.cam, a.cam_growth),
        base_fee=_grow(prev.base_fee, a.base_fee_growth),
        tech_fee=_grow(prev.tech_fee, a.tech_fee_growth),
        total_revenue=prev.total_revenue,
    )


def project_year(
    a: Assumptions,
    index: int,
    prev: Optional[ProjectionState],
    increases: Sequence[float],
) -> Tuple[YearlyRecord, ProjectionState]:
    """Project year ``index + 1`` from the previous year's state. Returns the record and the next state."""
    calendar_year = a.purchase_year + index
    factor = operational_factor(calendar_year, a)
    fee_factor = purchase_year_factor(calendar_year, a)

    occupancy_increase = 0.0 if prev is None else increases[index - 1]
    base = _carry(a, prev, occupancy_increase)

    # Operating metrics
    keys = a.keys
    occupancy = base.occupancy * factor

    if factor <= 0:
        adr, adr_growth, operating = 0.0, 0.0, base.operating
        carried_adr = base.adr
    elif base.operating:
        adr, adr_growth, operating = _grow(base.adr, a.adr_growth), a.adr_growth, True
        carried_adr = adr
    else:
        adr, adr_growth, operating = a.y1_adr, 0.0, True
        carried_adr = adr

    revpar = adr * occupancy / 100

    # Revenue
    revenue_rooms = keys * DAYS_PER_YEAR * (occupancy / 100) * adr
    revenue_fb = base.fb * factor
    revenue_spa = base.spa * factor
    revenue_oods = base.oods * factor
    revenue_misc = base.misc * factor

    total_revenue = revenue_rooms + revenue_fb + revenue_spa + revenue_oods + revenue_misc
    trevpar = _safe_div(total_revenue, keys * DAYS_PER_YEAR)
    revenue_growth = (total_revenue / base.total_revenue - 1) * 100 if base.total_revenue else 0.0

    # Direct operating costs
    cost_rooms = revenue_rooms * a.rooms_cost_pct / 100
    cost_fb = revenue_fb * a.fb_cost_pct / 100
    cost_spa = revenue_spa * a.spa_cost_pct / 100
    cost_other = revenue_oods * a.other_cost_pct / 100
    cost_misc = revenue_misc * a.misc_cost_pct / 100
    cost_utilities = total_revenue * a.utilities_pct / 100
    total_operating_cost = cost_rooms + cost_fb + cost_spa + cost_other + cost_misc + cost_utilities

    # Undistributed expenses
    undistributed_admin = total_revenue * a.admin_pct / 100
    undistributed_sales = total_revenue * a.sales_pct / 100
    undistributed_maintenance = total_revenue * a.maint_pct / 100
    total_undistributed_cost = undistributed_admin + undistributed_sales + undistributed_maintenance

    gop = total_revenue - total_operating_cost - total_undistributed_cost

    # Management fees: fixed fees follow the purchase date, incentive follows GOP
    fee_cam = base.cam * fee_factor
    fee_base = base.base_fee * fee_factor
    fee_tech = base.tech_fee * fee_factor
    fee_incentive = gop * a.incentive_fee_pct / 100
    total_management_fees = fee_cam + fee_base + fee_tech + fee_incentive

    take_home_profit = gop - total_management_fees

    record = YearlyRecord(
        year=index + 1,
        calendar_year=calendar_year,
        operational_factor=factor,
        fee_factor=fee_factor,
        keys=keys,
        occupancy=occupancy,
        occupancy_increase=occupancy_increase,
        adr=adr,
        adr_growth=adr_growth,
        revpar=revpar,
        trevpar=trevpar,
        revenue_rooms=revenue_rooms,
        revenue_rooms_percent=_pct(revenue_rooms, total_revenue),
        revenue_fb=revenue_fb,
        revenue_fb_percent=_pct(revenue_fb, total_revenue),
        revenue_spa=revenue_spa,
        revenue_spa_percent=_pct(revenue_spa, total_revenue),
        revenue_oods=revenue_oods,
        revenue_oods_percent=_pct(revenue_oods, total_revenue),
        revenue_misc=revenue_misc,
        revenue_misc_percent=_pct(revenue_misc, total_revenue),
        total_revenue=total_revenue,
        revenue_growth=revenue_growth,
        cost_rooms=cost_rooms,
        cost_rooms_percent=a.rooms_cost_pct,
        cost_fb=cost_fb,
        cost_fb_percent=a.fb_cost_pct,
        cost_spa=cost_spa,
        cost_spa_percent=a.spa_cost_pct,
        cost_other=cost_other,
        cost_other_percent=a.other_cost_pct,
        cost_misc=cost_misc,
        cost_misc_percent=a.misc_cost_pct,
        cost_utilities=cost_utilities,
        cost_utilities_percent=a.utilities_pct,
        total_operating_cost=total_operating_cost,
        operating_cost_percent=_pct(total_operating_cost, total_revenue),
        undistributed_admin=undistributed_admin,
        undistributed_admin_percent=a.admin_pct,
        undistributed_sales=undistributed_sales,
        undistributed_sales_percent=a.sales_pct,
        undistributed_maintenance=undistributed_maintenance,
        undistributed_maintenance_percent=a.maint_pct,
        total_undistributed_cost=total_undistributed_cost,
        undistributed_cost_percent=_pct(total_undistributed_cost, total_revenue),
        gop=gop,
        gop_margin=_pct(gop, total_revenue),
        fee_cam=fee_cam,
        fee_cam_percent=_pct(fee_cam, total_revenue),
        fee_base=fee_base,
        fee_base_percent=_pct(fee_base, total_revenue),
        fee_tech=fee_tech,
        fee_tech_percent=_pct(fee_tech, total_revenue),
        fee_incentive=fee_incentive,
        fee_incentive_percent=a.incentive_fee_pct,
        total_management_fees=total_management_fees,
        management_fees_percent=_pct(total_management_fees, total_revenue),
        take_home_profit=take_home_profit,
        profit_margin=_pct(take_home_profit, total_revenue),
        roi_before_management=_pct(gop, a.initial_investment),
        roi_after_management=_pct(take_home_profit, a.initial_investment),
    )

    state = ProjectionState(
        occupancy=base.occupancy,
        adr=carried_adr,
        operating=operating,
        fb=base.fb,
        spa=base.spa,
        oods=base.oods,
        misc=base.misc,
        cam=base.cam,
        base_fee=base.base_fee,
        tech_fee=base.tech_fee,
        total_revenue=total_revenue,
    )
    return record, state


def compute_projections(a: Assumptions, placeholders: Optional[Sequence[float]] = None) -> List[YearlyRecord]:
    """Ten yearly snapshots for ``a``. ``placeholders`` fills unset occupancy step-ups (years 2-10)."""
    increases = resolve_occupancy_increases(a, placeholders)

    records: List[YearlyRecord] = []
    state: Optional[ProjectionState] = None
    for i in range(PROJECTION_YEARS):
        record, state = project_year(a, i, state, increases)
        records.append(record)

    log.debug(
        "projections computed",
        extra={"context": {
            "purchase_date": a.purchase_date,
            "first_operational_year": next((r.calendar_year for r in records if r.operational_factor > 0), None),
            "total_revenue": sum(r.total_revenue for r in records),
        }},
    )
    return records


def projections_frame(records: Sequence[YearlyRecord]) -> pd.DataFrame:
    df = pd.DataFrame([r.model_dump() for r in records])
    if df.empty:
        return df
    return df.set_index("calendar_year")
