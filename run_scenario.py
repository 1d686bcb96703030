import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import json as _json
from rentalroi.drafts import load_assumptions
from rentalroi.constants import PLACEHOLDER_OCCUPANCY_INCREASES
from rentalroi.engine import compute_projections, projections_frame
from rentalroi.metrics import summarize, headline_metrics

scenario = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("scenarios") / "sample_assumptions.json"
if not scenario.exists():
    print("Scenario file not found:", scenario)
    raise SystemExit(1)

assump = load_assumptions(scenario.read_text(encoding='utf-8'))
print('Loaded assumptions:')
print(_json.dumps(assump.model_dump(), indent=2, default=str))

records = compute_projections(assump, PLACEHOLDER_OCCUPANCY_INCREASES)
df = projections_frame(records)
summary = summarize(records)

out_dir = Path('outputs')
out_dir.mkdir(parents=True, exist_ok=True)
out_file = out_dir / 'projections.csv'
df.to_csv(out_file, index=True)

summary_file = out_dir / 'summary.json'
with summary_file.open('w', encoding='utf-8') as fh:
    _json.dump({"averages": summary.model_dump(), "headline": headline_metrics(records, assump)}, fh, indent=2)

print('\nWrote projections to', out_file)
print('Wrote summary to', summary_file)
print('\nHead:')
print(df[["total_revenue", "gop", "total_management_fees", "take_home_profit"]].head().to_string())
