import math
from typing import Callable, Optional, Sequence

import numpy as np

from rentalroi.schema import Assumptions, AggregateSummary, YearlyRecord

Accessor = Callable[[YearlyRecord], float]


def _mean(records: Sequence[YearlyRecord], field: Accessor) -> float:
    if not records:
        return 0.0
    return float(np.mean([field(r) for r in records]))


def summarize(records: Sequence[YearlyRecord]) -> AggregateSummary:
    """Arithmetic mean of the headline fields across all projected years, pre-operational years included."""
    return AggregateSummary(
        occupancy=_mean(records, lambda r: r.occupancy),
        adr=_mean(records, lambda r: r.adr),
        revpar=_mean(records, lambda r: r.revpar),
        trevpar=_mean(records, lambda r: r.trevpar),
        total_revenue=_mean(records, lambda r: r.total_revenue),
        total_operating_cost=_mean(records, lambda r: r.total_operating_cost),
        total_undistributed_cost=_mean(records, lambda r: r.total_undistributed_cost),
        gop=_mean(records, lambda r: r.gop),
        gop_margin=_mean(records, lambda r: r.gop_margin),
        total_management_fees=_mean(records, lambda r: r.total_management_fees),
        take_home_profit=_mean(records, lambda r: r.take_home_profit),
        profit_margin=_mean(records, lambda r: r.profit_margin),
        roi_before_management=_mean(records, lambda r: r.roi_before_management),
        roi_after_management=_mean(records, lambda r: r.roi_after_management),
    )


def total_revenue(records: Sequence[YearlyRecord]) -> float:
    return sum(r.total_revenue for r in records)


def total_take_home_profit(records: Sequence[YearlyRecord]) -> float:
    return sum(r.take_home_profit for r in records)


def total_expenses(records: Sequence[YearlyRecord]) -> float:
    return sum(r.total_operating_cost + r.total_undistributed_cost for r in records)


def payback_years(records: Sequence[YearlyRecord], a: Assumptions) -> Optional[float]:
    """Years of average profit needed to recover the investment; None when the projection never profits."""
    profit = total_take_home_profit(records)
    if not records or profit <= 0:
        return None
    return a.initial_investment / (profit / len(records))


def growth_percent(first: float, last: float, cap: float = 999.0) -> float:
    if first == 0 or not math.isfinite(first) or not math.isfinite(last):
        return 0.0
    growth = (last - first) / abs(first) * 100
    return max(-cap, min(cap, growth))


def headline_metrics(records: Sequence[YearlyRecord], a: Assumptions) -> dict:
    summary = summarize(records)
    return {
        "avg_net_yield": summary.roi_after_management,
        "total_net_profit": total_take_home_profit(records),
        "avg_cash_flow": summary.take_home_profit,
        "avg_gop_margin": summary.gop_margin,
        "payback_years": payback_years(records, a),
        "total_revenue": total_revenue(records),
    }
