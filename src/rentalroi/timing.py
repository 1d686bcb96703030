from datetime import date
from dateutil.relativedelta import relativedelta
from rentalroi.schema import Assumptions


def months_remaining(start: date) -> int:
    """Whole months from the start of ``start``'s month through December (13 - month)."""
    rd = relativedelta(date(start.year + 1, 1, 1), start.replace(day=1))
    return rd.years * 12 + rd.months


def _partial_year(start: date) -> float:
    return months_remaining(start) / 12


def purchase_year_factor(calendar_year: int, a: Assumptions) -> float:
    """Share of ``calendar_year`` after acquisition. Used for fees billed against the lease."""
    if calendar_year < a.purchase_year:
        return 0.0
    if calendar_year == a.purchase_year:
        return _partial_year(a.purchase_date)
    return 1.0


def operational_factor(calendar_year: int, a: Assumptions) -> float:
    """Fraction of ``calendar_year`` during which the property generates revenue, in [0, 1]."""
    if calendar_year < a.purchase_year:
        return 0.0

    ready = a.property_ready_date
    if a.is_property_ready or ready is None:
        return purchase_year_factor(calendar_year, a)

    if calendar_year < ready.year:
        return 0.0
    if calendar_year == ready.year:
        # ready and purchased in the same year: only the later month counts
        start = max(ready, a.purchase_date) if ready.year == a.purchase_year else ready
        return _partial_year(start)
    return purchase_year_factor(calendar_year, a)
