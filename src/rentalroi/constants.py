from rentalroi.schema import Assumptions, OCCUPANCY_STEPS

# Example values shown to users as placeholders. The engine never falls back
# to these on its own; callers pass PLACEHOLDER_OCCUPANCY_INCREASES explicitly.
PLACEHOLDER_OCCUPANCY_INCREASES = [4, 3, 2, 1.5, 1.5, 1, 1, 1, 1]

PLACEHOLDER_ASSUMPTIONS = Assumptions(
    initial_investment=2_375_000_000,
    purchase_date="2026-01",
    keys=1,
    is_property_ready=True,
    y1_occupancy=70,
    y1_adr=1_600_000,
    y1_fb=12_000_000,
    occupancy_increases=tuple(PLACEHOLDER_OCCUPANCY_INCREASES),
    adr_growth=4,
    fb_growth=3,
    cam_growth=2,
    base_fee_growth=3,
    tech_fee_growth=3,
    rooms_cost_pct=20,
    fb_cost_pct=85,
    utilities_pct=7,
    admin_pct=1,
    sales_pct=5,
    maint_pct=3,
    y1_cam=15_000_000,
    y1_base_fee=12_000_000,
    y1_tech_fee=12_000_000,
)


def empty_assumptions(purchase_date) -> Assumptions:
    """All-zero record for a fresh form; step-ups unset so placeholders apply."""
    return Assumptions(
        initial_investment=0,
        purchase_date=purchase_date,
        keys=1,
        occupancy_increases=(None,) * OCCUPANCY_STEPS,
    )
