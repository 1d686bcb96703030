import sys, pathlib
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

from rentalroi.constants import PLACEHOLDER_ASSUMPTIONS, PLACEHOLDER_OCCUPANCY_INCREASES
from rentalroi.engine import compute_projections, projections_frame
from rentalroi.metrics import summarize

# Smoke test on the placeholder scenario, with a property that opens in July
assump = PLACEHOLDER_ASSUMPTIONS.updated(
    is_property_ready=False,
    property_ready_date=PLACEHOLDER_ASSUMPTIONS.purchase_date.replace(month=7),
)

records = compute_projections(assump, PLACEHOLDER_OCCUPANCY_INCREASES)
df = projections_frame(records)
cols = ["year", "operational_factor", "fee_factor", "occupancy", "adr", "total_revenue", "gop", "take_home_profit", "roi_after_management"]
print(df[cols].to_string())

summary = summarize(records)
print('\nAvg take-home profit:', round(summary.take_home_profit, 2))
print('Avg ROI after management:', round(summary.roi_after_management, 2))
