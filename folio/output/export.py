"""Flat-file export of report rows.

Writes allocation, sector, performance and holdings rows to CSV, one file
per table, for spreadsheets and other downstream tools.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from folio.portfolio.performance import PerformanceSummary
from folio.portfolio.report import PortfolioReport

logger = logging.getLogger(__name__)


def rows_to_frame(rows: Sequence[Any]) -> pd.DataFrame:
    """DataFrame from a list of dataclass rows (or dicts)."""
    records = [asdict(r) if is_dataclass(r) else dict(r) for r in rows]
    return pd.DataFrame.from_records(records)


def performance_frame(summary: PerformanceSummary) -> pd.DataFrame:
    """Single-row frame with best/worst performers flattened."""
    best = summary.best_performer
    worst = summary.worst_performer
    return pd.DataFrame([{
        "total_value": round(summary.total_value, 2),
        "total_cost": round(summary.total_cost, 2),
        "total_gain": round(summary.total_gain, 2),
        "total_gain_percent": round(summary.total_gain_percent, 2),
        "day_change": round(summary.day_change, 2),
        "day_change_percent": round(summary.day_change_percent, 2),
        "best_performer": best.symbol if best else "",
        "best_gain_percent": round(best.gain_percent, 2) if best else None,
        "worst_performer": worst.symbol if worst else "",
        "worst_gain_percent": round(worst.gain_percent, 2) if worst else None,
    }])


def export_report(report: PortfolioReport, out_dir: str | Path) -> dict[str, Path]:
    """Write the report's tables as CSV files into *out_dir*.

    Returns:
        {table name: written path}. Empty tables are still written so
        downstream imports see a stable file set.
    """
    out = Path(out_dir).expanduser()
    out.mkdir(parents=True, exist_ok=True)

    tables: dict[str, pd.DataFrame] = {
        "performance": performance_frame(report.performance),
        "allocation": rows_to_frame(report.allocation).drop(columns=["color"], errors="ignore"),
        "sector_allocation": rows_to_frame(report.sector_allocation).drop(
            columns=["color"], errors="ignore"
        ),
        "holdings": rows_to_frame(report.holdings_table),
        "accounts": rows_to_frame(report.account_breakdown),
    }

    written: dict[str, Path] = {}
    for name, df in tables.items():
        path = out / f"{name}.csv"
        df.to_csv(path, index=False, float_format="%.4f")
        written[name] = path

    logger.info("Exported %d tables to %s", len(written), out)
    return written
