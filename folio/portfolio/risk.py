"""Concentration and diversification metrics.

Computes:
  - Top-holding concentration (% of total value in the largest holding)
  - Sector concentration as a Herfindahl-Hirschman Index in [0, 1]
  - A 0-100 diversification score blending breadth, top-holding share and
    sector HHI with config-driven weights (30/30/40 by default)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from folio.config.schema import RiskWeightsConfig
from folio.portfolio.allocation import sector_weights, total_value
from folio.portfolio.holdings import Holding

logger = logging.getLogger(__name__)

HHI_DISPLAY_SCALE = 10_000


@dataclass
class RiskMetrics:
    """Portfolio concentration summary."""

    diversification_score: int = 0
    """0-100, higher = more diversified."""
    top_holding_concentration: float = 0.0
    """Largest holding as % of total value (0-100)."""
    sector_concentration: float = 0.0
    """Sector HHI, sum of squared sector weights (0-1)."""
    account_count: int = 0

    @property
    def sector_concentration_points(self) -> float:
        """Sector HHI on the conventional 0-10,000 display scale."""
        return self.sector_concentration * HHI_DISPLAY_SCALE


def herfindahl_index(weights: Sequence[float]) -> float:
    """Sum of squared share fractions."""
    return sum(w * w for w in weights)


def diversification_score(
    holding_count: int,
    top_concentration_pct: float,
    sector_hhi: float,
    weights: RiskWeightsConfig | None = None,
) -> int:
    """Composite 0-100 diversification heuristic.

    ``w_count * min(n / target, 1) + w_top * (1 - top/100) + w_sector * (1 - hhi)``,
    rounded (halves up) and clamped to [0, 100].
    """
    if weights is None:
        weights = RiskWeightsConfig()

    breadth = min(holding_count / weights.target_holdings, 1.0) if holding_count > 0 else 0.0
    raw = (
        weights.holding_count * breadth
        + weights.top_holding * (1 - top_concentration_pct / 100)
        + weights.sector * (1 - sector_hhi)
    )
    return int(max(0, min(100, math.floor(raw + 0.5))))


def compute_risk_metrics(
    holdings: Sequence[Holding],
    account_count: int,
    weights: RiskWeightsConfig | None = None,
) -> RiskMetrics:
    """Concentration metrics for *holdings*.

    Parameters:
        holdings: Priced holdings across all accounts.
        account_count: Number of accounts the holdings were drawn from
            (passed through for display).
        weights: Diversification score policy; defaults from config.

    Returns:
        RiskMetrics. Empty or zero-value input yields all-zero metrics.
    """
    total = total_value(holdings)
    valued = [h for h in holdings if h.market_value > 0]
    if total <= 0 or not valued:
        return RiskMetrics(account_count=account_count)

    top_pct = max(h.market_value for h in valued) / total * 100
    hhi = herfindahl_index(list(sector_weights(valued).values()))
    score = diversification_score(len(valued), top_pct, hhi, weights)

    logger.debug(
        "Risk: %d holdings, top=%.1f%%, hhi=%.4f, score=%d",
        len(valued), top_pct, hhi, score,
    )
    return RiskMetrics(
        diversification_score=score,
        top_holding_concentration=top_pct,
        sector_concentration=hhi,
        account_count=account_count,
    )
