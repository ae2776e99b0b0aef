"""Chart builders for the portfolio views.

Each function returns a Plotly ``go.Figure``; ``write_chart_html`` saves
one as a standalone HTML file.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

import plotly.graph_objects as go
import plotly.io as pio

from folio.portfolio.allocation import AllocationRow, SectorAllocationRow
from folio.series.combiner import CombinedPoint

# ---------------------------------------------------------------------------
# Color palette (dark theme)
# ---------------------------------------------------------------------------

COLORS = {
    "bg": "#0f1117",
    "card": "#1a1d26",
    "text": "#e0e0e0",
    "muted": "#888888",
    "green": "#00d97e",
    "red": "#e63946",
    "grid": "#2a2d36",
}


def _dark_layout(**overrides: Any) -> dict[str, Any]:
    """Standard dark-theme Plotly layout."""
    layout = {
        "paper_bgcolor": COLORS["bg"],
        "plot_bgcolor": COLORS["card"],
        "font": {"color": COLORS["text"], "family": "Inter, sans-serif"},
        "margin": {"l": 50, "r": 30, "t": 50, "b": 50},
        "xaxis": {"gridcolor": COLORS["grid"], "zerolinecolor": COLORS["grid"]},
        "yaxis": {"gridcolor": COLORS["grid"], "zerolinecolor": COLORS["grid"]},
    }
    layout.update(overrides)
    return layout


# ---------------------------------------------------------------------------
# Value curve
# ---------------------------------------------------------------------------

def build_value_curve(
    points: Sequence[CombinedPoint],
    title: str = "Portfolio Value",
    missing: Sequence[str] = (),
) -> go.Figure:
    """Line chart of the combined portfolio value.

    The line is green when the range ends at or above its start, red
    otherwise. Symbols listed in *missing* are noted under the title.
    """
    fig = go.Figure()
    if not points:
        fig.add_annotation(
            text="No price data for this range",
            showarrow=False,
            font={"color": COLORS["muted"], "size": 16},
        )
        fig.update_layout(**_dark_layout(title=title))
        return fig

    up = points[-1].combined_price >= points[0].combined_price
    fig.add_trace(go.Scatter(
        x=[p.date_label for p in points],
        y=[p.combined_price for p in points],
        mode="lines",
        line={"color": COLORS["green"] if up else COLORS["red"], "width": 2},
        hovertemplate="%{x}<br>$%{y:,.2f}<extra></extra>",
        name="Value",
    ))

    if missing:
        title = f"{title}<br><sup>No data for {', '.join(missing)}</sup>"
    fig.update_layout(**_dark_layout(
        title=title,
        showlegend=False,
        yaxis={"gridcolor": COLORS["grid"], "tickprefix": "$", "tickformat": ",.0f"},
    ))
    return fig


# ---------------------------------------------------------------------------
# Allocation donuts
# ---------------------------------------------------------------------------

def build_allocation_donut(
    rows: Sequence[AllocationRow] | Sequence[SectorAllocationRow],
    title: str = "Allocation",
) -> go.Figure:
    """Donut chart for holding or sector allocation rows."""
    labels = [getattr(r, "symbol", None) or getattr(r, "sector", "") for r in rows]
    fig = go.Figure(go.Pie(
        labels=labels,
        values=[r.value for r in rows],
        hole=0.55,
        marker={"colors": [r.color for r in rows]},
        sort=False,
        textinfo="label+percent",
        hovertemplate="%{label}<br>$%{value:,.2f} (%{percent})<extra></extra>",
    ))
    fig.update_layout(**_dark_layout(title=title, showlegend=False))
    return fig


def write_chart_html(fig: go.Figure, path: str | Path) -> Path:
    """Write *fig* to a standalone HTML file and return its path."""
    path = Path(path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    pio.write_html(fig, file=str(path), include_plotlyjs="cdn", full_html=True)
    return path
