import math
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.backends.backend_pdf import PdfPages

from rentalroi.schema import Assumptions, AggregateSummary, YearlyRecord
from rentalroi.engine import projections_frame
from rentalroi.metrics import headline_metrics, growth_percent, total_expenses
from rentalroi.currency import format_currency, format_currency_abbrev
from rentalroi.config import config
from rentalroi.logging_utils import get_logger

log = get_logger(__name__)


def cap_percent(value: float, max_value: Optional[float] = None) -> str:
    """Clamp a percentage to +/- cap for display. Non-finite values show as 0."""
    cap = config.PERCENT_DISPLAY_CAP if max_value is None else max_value
    if value is None or not math.isfinite(value):
        return "0.0"
    return f"{max(-cap, min(cap, value)):.1f}"


def _month_label(d: Optional[date]) -> str:
    return d.strftime("%b %Y") if d else "N/A"


def _table_page(pdf: PdfPages, df: pd.DataFrame, title: str, width: float = 10):
    plt.figure(figsize=(width, len(df) * 0.4 + 1.5))
    plt.axis("off")
    table = plt.table(
        cellText=df.values,
        colLabels=df.columns,
        loc="center",
        cellLoc="left",
    )
    table.auto_set_font_size(False)
    table.set_fontsize(9)
    table.scale(1.2, 1.2)
    plt.title(title, pad=20)
    pdf.savefig()
    plt.close()


def create_visual_report(
    a: Assumptions,
    records: Sequence[YearlyRecord],
    summary: AggregateSummary,
    currency: Optional[str] = None,
    output_file: Optional[Path] = None,
) -> Path:
    """Generate a multi-page PDF with projection charts, headline metrics and the 10-year table."""
    currency = currency or config.DISPLAY_CURRENCY
    if output_file is None:
        output_file = Path(config.OUTPUT_DIR) / "rental_roi_report.pdf"
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    df = projections_frame(records)
    headline = headline_metrics(records, a)
    sns.set_theme(style="whitegrid")

    with PdfPages(output_file) as pdf:

        # -----------------------------
        # Revenue / GOP / Profit by year
        # -----------------------------
        long = (
            df[["total_revenue", "gop", "take_home_profit"]]
            .rename(columns={"total_revenue": "Revenue", "gop": "GOP", "take_home_profit": "Net Profit"})
            .reset_index()
            .melt(id_vars="calendar_year", var_name="Line", value_name="Amount")
        )
        plt.figure(figsize=(10, 6))
        ax = sns.barplot(data=long, x="calendar_year", y="Amount", hue="Line")
        ax.yaxis.set_major_formatter(lambda v, _pos: format_currency_abbrev(v, currency))
        plt.title("10-Year Revenue, GOP and Net Profit")
        plt.xlabel("Year")
        plt.ylabel(f"Amount ({currency})")
        pdf.savefig()
        plt.close()

        # -----------------------------
        # ROI by year
        # -----------------------------
        plt.figure(figsize=(10, 6))
        df[["roi_before_management", "roi_after_management"]].clip(
            lower=-config.PERCENT_DISPLAY_CAP, upper=config.PERCENT_DISPLAY_CAP
        ).plot(ax=plt.gca(), marker="o")
        plt.title("Annual ROI (before / after management)")
        plt.ylabel("Return (%)")
        plt.xlabel("Year")
        plt.grid(True)
        pdf.savefig()
        plt.close()

        # -----------------------------
        # Headline metrics
        # -----------------------------
        payback = headline["payback_years"]
        metrics = {
            "Avg Net Yield": f"{cap_percent(headline['avg_net_yield'])}%",
            "10Y Net Profit": format_currency(headline["total_net_profit"], currency),
            "Avg Cash Flow": format_currency(headline["avg_cash_flow"], currency),
            "GOP Margin": f"{cap_percent(headline['avg_gop_margin'])}%",
            "Payback": f"{payback:.1f} Yrs" if payback is not None and payback < 99 else "N/A",
            "10Y Revenue": format_currency(headline["total_revenue"], currency),
            "Initial Investment": format_currency(a.initial_investment, currency),
            "Y1 Occupancy": f"{a.y1_occupancy}%",
            "Y1 ADR": format_currency(a.y1_adr, currency),
            "ADR Growth": f"{a.adr_growth}%",
            "Purchase Date": _month_label(a.purchase_date),
            "Avg Occupancy": f"{cap_percent(summary.occupancy)}%",
            "Avg ADR": format_currency(summary.adr, currency),
        }
        if not a.is_property_ready and a.property_ready_date:
            metrics["Property Not Ready"] = f"Expected {_month_label(a.property_ready_date)}, occupancy prorated"

        _table_page(pdf, pd.DataFrame(list(metrics.items()), columns=["Metric", "Value"]), "Investment Summary", width=8)

        # -----------------------------
        # 10-year projections table
        # -----------------------------
        rows = [
            [
                f"Y{r.year} ({r.calendar_year})",
                format_currency(r.total_revenue, currency),
                format_currency(r.total_operating_cost + r.total_undistributed_cost, currency),
                format_currency(r.gop, currency),
                format_currency(r.total_management_fees, currency),
                format_currency(r.take_home_profit, currency),
                f"{cap_percent(r.roi_after_management)}%",
            ]
            for r in records
        ]
        rows.append([
            "TOTAL",
            format_currency(headline["total_revenue"], currency),
            format_currency(total_expenses(records), currency),
            format_currency(sum(r.gop for r in records), currency),
            format_currency(sum(r.total_management_fees for r in records), currency),
            format_currency(headline["total_net_profit"], currency),
            f"{cap_percent(headline['avg_net_yield'])}%",
        ])
        table_df = pd.DataFrame(rows, columns=["Year", "Revenue", "Expenses", "GOP", "Mgmt Fees", "Net Profit", "ROI %"])
        _table_page(pdf, table_df, "10-Year Financial Projections", width=12)

        # -----------------------------
        # Year 1 vs Year 10
        # -----------------------------
        if records:
            first, last = records[0], records[-1]
            comparisons = [
                ("Revenue", first.total_revenue, last.total_revenue, False),
                ("GOP", first.gop, last.gop, False),
                ("Net Profit", first.take_home_profit, last.take_home_profit, False),
                ("Occupancy", first.occupancy, last.occupancy, True),
                ("ADR", first.adr, last.adr, False),
            ]
            comp_rows = []
            for label, y1, y10, is_pct in comparisons:
                fmt = (lambda v: f"{v:.0f}%") if is_pct else (lambda v: format_currency(v, currency))
                growth = growth_percent(y1, y10, cap=config.PERCENT_DISPLAY_CAP)
                comp_rows.append([label, fmt(y1), fmt(y10), f"{growth:+.0f}%"])
            comp_df = pd.DataFrame(comp_rows, columns=["Line", "Year 1", "Year 10", "Growth"])
            _table_page(pdf, comp_df, "Year 1 vs Year 10 Growth", width=8)

    log.info("report generated", extra={"context": {"path": str(output_file), "currency": currency}})
    return output_file
