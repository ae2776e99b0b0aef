"""Holding and sector allocation breakdowns.

Computes:
  - Per-holding allocation (value and % of total), largest first
  - Per-sector allocation with holding counts; unclassified → "Other"

Both are stable-sorted: equal values keep input order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from folio.config.defaults import CHART_COLORS, SECTOR_COLORS, UNCLASSIFIED_SECTOR
from folio.portfolio.holdings import Holding

# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class AllocationRow:
    symbol: str
    name: str
    value: float
    percentage: float
    color: str = ""


@dataclass
class SectorAllocationRow:
    sector: str
    value: float
    percentage: float
    holdings: int
    color: str = ""


# ---------------------------------------------------------------------------
# Calculators
# ---------------------------------------------------------------------------

def total_value(holdings: Sequence[Holding]) -> float:
    """Sum of positive market values."""
    return sum(h.market_value for h in holdings if h.market_value > 0)


def compute_allocation(holdings: Sequence[Holding]) -> list[AllocationRow]:
    """Allocation by holding, sorted descending by value.

    Holdings with no positive value are left out. Returns an empty list
    when the portfolio has no value.
    """
    total = total_value(holdings)
    if total <= 0:
        return []

    rows = [
        AllocationRow(
            symbol=h.label,
            name=h.display_name,
            value=h.market_value,
            percentage=h.market_value / total * 100,
            color=CHART_COLORS[i % len(CHART_COLORS)],
        )
        for i, h in enumerate(h for h in holdings if h.market_value > 0)
    ]
    return sorted(rows, key=lambda r: r.value, reverse=True)


def compute_sector_allocation(holdings: Sequence[Holding]) -> list[SectorAllocationRow]:
    """Allocation by sector, sorted descending by value."""
    total = total_value(holdings)
    if total <= 0:
        return []

    sectors: dict[str, SectorAllocationRow] = {}
    for h in holdings:
        if h.market_value <= 0:
            continue
        sector = h.sector_bucket or UNCLASSIFIED_SECTOR
        row = sectors.get(sector)
        if row is None:
            row = SectorAllocationRow(
                sector=sector,
                value=0.0,
                percentage=0.0,
                holdings=0,
                color=SECTOR_COLORS.get(sector, SECTOR_COLORS[UNCLASSIFIED_SECTOR]),
            )
            sectors[sector] = row
        row.value += h.market_value
        row.holdings += 1

    for row in sectors.values():
        row.percentage = row.value / total * 100

    return sorted(sectors.values(), key=lambda r: r.value, reverse=True)


def sector_weights(holdings: Sequence[Holding]) -> dict[str, float]:
    """sector → fraction of total value (0-1)."""
    return {
        row.sector: row.percentage / 100
        for row in compute_sector_allocation(holdings)
    }
