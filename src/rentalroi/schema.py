from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Tuple
from datetime import date, datetime

PROJECTION_YEARS = 10
OCCUPANCY_STEPS = PROJECTION_YEARS - 1

_MONTH_FORMATS = ("%Y-%m", "%Y-%m-%d")


def _to_month_start(v):
    """Normalise 'YYYY-MM', 'YYYY-MM-DD', date or datetime to the first of the month."""
    if isinstance(v, datetime):
        v = v.date()
    if isinstance(v, date):
        return v.replace(day=1)
    if isinstance(v, str):
        text = v.strip()
        for fmt in _MONTH_FORMATS:
            try:
                return datetime.strptime(text, fmt).date().replace(day=1)
            except ValueError:
                continue
        raise ValueError(f"expected a YYYY-MM date, got {v!r}")
    raise ValueError(f"expected a YYYY-MM date, got {type(v).__name__}")


class Assumptions(BaseModel):

    model_config = ConfigDict(frozen=True)

    # Investment

    initial_investment: float = Field(..., description="Total acquisition cost")
    keys: int = Field(1, description="Number of rentable units (keys)")
    purchase_date: date = Field(..., description="Purchase month (YYYY-MM)")

    # Year 1 bases

    y1_occupancy: float = Field(0, description="Year 1 occupancy (%)")
    y1_adr: float = Field(0, description="Year 1 average daily rate")
    y1_fb: float = Field(0, description="Year 1 food & beverage revenue")
    y1_spa: float = Field(0, description="Year 1 spa / wellness revenue")
    y1_oods: float = Field(0, description="Year 1 other operating departments revenue")
    y1_misc: float = Field(0, description="Year 1 miscellaneous revenue")

    # Growth / step-ups

    occupancy_increases: Tuple[Optional[float], ...] = Field(
        default_factory=lambda: (None,) * OCCUPANCY_STEPS,
        min_length=OCCUPANCY_STEPS,
        max_length=OCCUPANCY_STEPS,
        description="Occupancy step-ups for years 2-10 (percentage points); None uses the caller's placeholder",
    )
    adr_growth: float = Field(0, description="Annual ADR growth (%)")
    fb_growth: float = Field(0, description="Annual F&B revenue growth (%)")
    spa_growth: float = Field(0, description="Annual spa revenue growth (%)")
    oods_growth: float = Field(0, description="Annual other operating departments growth (%)")
    misc_growth: float = Field(0, description="Annual miscellaneous revenue growth (%)")
    cam_growth: float = Field(0, description="Annual CAM fee growth (%)")
    base_fee_growth: float = Field(0, description="Annual base fee growth (%)")
    tech_fee_growth: float = Field(0, description="Annual tech fee growth (%)")

    # Direct cost ratios (% of their department revenue)

    rooms_cost_pct: float = Field(0, description="Rooms cost (% of rooms revenue)")
    fb_cost_pct: float = Field(0, description="F&B cost (% of F&B revenue)")
    spa_cost_pct: float = Field(0, description="Spa cost (% of spa revenue)")
    other_cost_pct: float = Field(0, description="Other departments cost (% of OODs revenue)")
    misc_cost_pct: float = Field(0, description="Misc cost (% of misc revenue)")
    utilities_pct: float = Field(0, description="Utilities (% of total revenue)")

    # Undistributed (% of total revenue)

    admin_pct: float = Field(0, description="Administrative & general (% of total revenue)")
    sales_pct: float = Field(0, description="Sales & marketing (% of total revenue)")
    maint_pct: float = Field(0, description="Property operations & maintenance (% of total revenue)")

    # Management fees

    y1_cam: float = Field(0, description="Year 1 CAM fee")
    y1_base_fee: float = Field(0, description="Year 1 base management fee")
    y1_tech_fee: float = Field(0, description="Year 1 tech fee")
    incentive_fee_pct: float = Field(0, description="Incentive fee (% of GOP)")

    # Readiness

    is_property_ready: bool = Field(True, description="Property operational at purchase")
    property_ready_date: Optional[date] = Field(None, description="Month the property becomes operational (YYYY-MM)")

    @field_validator("purchase_date", mode="before")
    @classmethod
    def _purchase_month(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("purchase_date is required")
        return _to_month_start(v)

    @field_validator("property_ready_date", mode="before")
    @classmethod
    def _ready_month(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return _to_month_start(v)

    @property
    def purchase_year(self) -> int:
        return self.purchase_date.year

    def updated(self, **changes) -> "Assumptions":
        """Copy with `changes` applied, re-running field validation."""
        return type(self).model_validate({**self.model_dump(), **changes})


class YearlyRecord(BaseModel):
    """One projected year. Money is in the single unit of account; *_percent fields are 0-100."""

    model_config = ConfigDict(frozen=True)

    year: int
    calendar_year: int
    operational_factor: float
    fee_factor: float

    # operating metrics
    keys: int
    occupancy: float
    occupancy_increase: float
    adr: float
    adr_growth: float
    revpar: float
    trevpar: float

    # revenue
    revenue_rooms: float
    revenue_rooms_percent: float
    revenue_fb: float
    revenue_fb_percent: float
    revenue_spa: float
    revenue_spa_percent: float
    revenue_oods: float
    revenue_oods_percent: float
    revenue_misc: float
    revenue_misc_percent: float
    total_revenue: float
    revenue_growth: float

    # direct operating costs
    cost_rooms: float
    cost_rooms_percent: float
    cost_fb: float
    cost_fb_percent: float
    cost_spa: float
    cost_spa_percent: float
    cost_other: float
    cost_other_percent: float
    cost_misc: float
    cost_misc_percent: float
    cost_utilities: float
    cost_utilities_percent: float
    total_operating_cost: float
    operating_cost_percent: float

    # undistributed expenses
    undistributed_admin: float
    undistributed_admin_percent: float
    undistributed_sales: float
    undistributed_sales_percent: float
    undistributed_maintenance: float
    undistributed_maintenance_percent: float
    total_undistributed_cost: float
    undistributed_cost_percent: float

    # GOP
    gop: float
    gop_margin: float

    # management fees
    fee_cam: float
    fee_cam_percent: float
    fee_base: float
    fee_base_percent: float
    fee_tech: float
    fee_tech_percent: float
    fee_incentive: float
    fee_incentive_percent: float
    total_management_fees: float
    management_fees_percent: float

    # returns
    take_home_profit: float
    profit_margin: float
    roi_before_management: float
    roi_after_management: float


class AggregateSummary(BaseModel):

    model_config = ConfigDict(frozen=True)

    occupancy: float = 0.0
    adr: float = 0.0
    revpar: float = 0.0
    trevpar: float = 0.0
    total_revenue: float = 0.0
    total_operating_cost: float = 0.0
    total_undistributed_cost: float = 0.0
    gop: float = 0.0
    gop_margin: float = 0.0
    total_management_fees: float = 0.0
    take_home_profit: float = 0.0
    profit_margin: float = 0.0
    roi_before_management: float = 0.0
    roi_after_management: float = 0.0
