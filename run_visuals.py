import sys, pathlib
from pathlib import Path
root = pathlib.Path(__file__).resolve().parent
sys.path.insert(0, str(root / "src"))

import argparse
from rentalroi.drafts import load_assumptions
from rentalroi.constants import PLACEHOLDER_OCCUPANCY_INCREASES
from rentalroi.engine import compute_projections
from rentalroi.metrics import summarize
from rentalroi.visuals import create_visual_report


def main():
    parser = argparse.ArgumentParser(description="Render the 10-year rental ROI report as a PDF")
    parser.add_argument("--scenario", type=Path, default=Path("scenarios") / "sample_assumptions.json")
    parser.add_argument("--currency", default=None, help="Display currency code (defaults to ROI_DISPLAY_CURRENCY)")
    parser.add_argument("--out", type=Path, default=None)
    args = parser.parse_args()

    if not args.scenario.exists():
        print("Scenario file not found:", args.scenario)
        raise SystemExit(1)

    assump = load_assumptions(args.scenario.read_text(encoding='utf-8'))
    records = compute_projections(assump, PLACEHOLDER_OCCUPANCY_INCREASES)
    path = create_visual_report(assump, records, summarize(records), currency=args.currency, output_file=args.out)
    print("Report generated at:", path)


if __name__ == "__main__":
    main()
