"""Portfolio performance from priced holdings and live quotes.

Computes:
  - Totals: value, cost, unrealized gain, day change
  - Best and worst performer by percent gain over average cost
  - Per-symbol holdings table aggregated across accounts
  - Per-account breakdown and top day movers

Nothing here raises on empty input; every percentage guards its
denominator and falls back to 0.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from folio.config.defaults import TOP_MOVERS_LIMIT
from folio.portfolio.holdings import (
    AccountHoldings,
    Holding,
    Quote,
    SecurityHolding,
)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Performer:
    symbol: str
    gain_percent: float


@dataclass
class PerformanceSummary:
    """Portfolio-level performance snapshot."""

    total_value: float = 0.0
    total_cost: float = 0.0
    total_gain: float = 0.0
    total_gain_percent: float = 0.0
    day_change: float = 0.0
    day_change_percent: float = 0.0
    best_performer: Performer | None = None
    worst_performer: Performer | None = None


@dataclass
class HoldingRow:
    """One symbol's detail row, summed across accounts."""

    symbol: str
    name: str
    sector: str | None
    quantity: float
    average_cost: float
    current_price: float
    market_value: float
    cost_basis: float
    unrealized_gain: float
    unrealized_gain_percent: float
    weight: float
    day_change: float
    day_change_percent: float


@dataclass
class AccountSummary:
    id: str
    name: str
    total_value: float
    total_cost: float
    gain: float
    gain_percent: float
    holdings_count: int


@dataclass
class Mover:
    symbol: str
    name: str
    day_change: float
    day_change_percent: float


# ---------------------------------------------------------------------------
# Price resolution
# ---------------------------------------------------------------------------

def _prices(holding: SecurityHolding, quotes: Mapping[str, Quote]) -> tuple[float, float]:
    """(price, previous_close) for a holding, preferring the live quote."""
    quote = quotes.get(holding.symbol)
    price = quote.price if quote is not None and quote.price > 0 else holding.current_price
    prev_close = (
        quote.previous_close
        if quote is not None and quote.previous_close > 0
        else price
    )
    return price, prev_close


def _pct(numerator: float, denominator: float) -> float:
    return numerator / denominator * 100 if denominator > 0 else 0.0


# ---------------------------------------------------------------------------
# Performance summary
# ---------------------------------------------------------------------------

def compute_performance(
    holdings: Sequence[Holding],
    quotes: Mapping[str, Quote] | None = None,
) -> PerformanceSummary:
    """Aggregate value, cost, gain and day change across *holdings*.

    Parameters:
        holdings: Priced holdings (securities and cash).
        quotes: {symbol: Quote}. A quote's price overrides the holding's
            current price; its previous close drives day change. Holdings
            without a quote contribute no day change.

    Returns:
        PerformanceSummary. Best/worst performers are ranked by percent
        gain over average cost; ties keep the first holding encountered.
        Cash counts toward value and cost but is never ranked.
    """
    quotes = quotes or {}

    total_value = 0.0
    total_cost = 0.0
    day_change = 0.0
    best: Performer | None = None
    worst: Performer | None = None

    for h in holdings:
        if not isinstance(h, SecurityHolding):
            total_value += h.market_value
            total_cost += h.cost_basis
            continue

        price, prev_close = _prices(h, quotes)
        total_value += h.quantity * price
        total_cost += h.quantity * h.average_cost_basis
        day_change += h.quantity * (price - prev_close)

        gain_pct = _pct(price - h.average_cost_basis, h.average_cost_basis)
        if best is None or gain_pct > best.gain_percent:
            best = Performer(symbol=h.symbol, gain_percent=gain_pct)
        if worst is None or gain_pct < worst.gain_percent:
            worst = Performer(symbol=h.symbol, gain_percent=gain_pct)

    total_gain = total_value - total_cost
    return PerformanceSummary(
        total_value=total_value,
        total_cost=total_cost,
        total_gain=total_gain,
        total_gain_percent=_pct(total_gain, total_cost),
        day_change=day_change,
        day_change_percent=_pct(day_change, total_value - day_change),
        best_performer=best,
        worst_performer=worst,
    )


# ---------------------------------------------------------------------------
# Detail reports
# ---------------------------------------------------------------------------

def holdings_table(
    holdings: Sequence[Holding],
    quotes: Mapping[str, Quote] | None = None,
) -> list[HoldingRow]:
    """Per-symbol rows aggregated across accounts, in first-seen order."""
    quotes = quotes or {}
    portfolio_value = sum(h.market_value for h in holdings if h.market_value > 0)

    merged: dict[str, dict] = {}
    for h in holdings:
        if not isinstance(h, SecurityHolding):
            continue
        entry = merged.setdefault(h.symbol, {
            "holding": h,
            "quantity": 0.0,
            "cost": 0.0,
        })
        entry["quantity"] += h.quantity
        entry["cost"] += h.cost_basis

    rows: list[HoldingRow] = []
    for symbol, entry in merged.items():
        first: SecurityHolding = entry["holding"]
        qty = entry["quantity"]
        cost = entry["cost"]
        market_value = qty * first.current_price
        quote = quotes.get(symbol)
        gain = market_value - cost
        rows.append(HoldingRow(
            symbol=symbol,
            name=first.display_name,
            sector=first.sector,
            quantity=qty,
            average_cost=cost / qty if qty > 0 else 0.0,
            current_price=first.current_price,
            market_value=market_value,
            cost_basis=cost,
            unrealized_gain=gain,
            unrealized_gain_percent=_pct(gain, cost),
            weight=_pct(market_value, portfolio_value),
            day_change=qty * quote.change if quote is not None else 0.0,
            day_change_percent=quote.change_percent if quote is not None else 0.0,
        ))
    return rows


def account_breakdown(accounts: Sequence[AccountHoldings]) -> list[AccountSummary]:
    """Value, cost and gain per account."""
    summaries: list[AccountSummary] = []
    for acct in accounts:
        value = sum(h.market_value for h in acct.holdings)
        cost = sum(h.cost_basis for h in acct.holdings)
        summaries.append(AccountSummary(
            id=acct.id,
            name=acct.display_name,
            total_value=value,
            total_cost=cost,
            gain=value - cost,
            gain_percent=_pct(value - cost, cost),
            holdings_count=len(acct.holdings),
        ))
    return summaries


def top_movers(
    holdings: Sequence[Holding],
    quotes: Mapping[str, Quote] | None = None,
    limit: int = TOP_MOVERS_LIMIT,
) -> list[Mover]:
    """Quoted holdings with the largest absolute day-change percent."""
    quotes = quotes or {}
    movers: list[Mover] = []
    for h in holdings:
        if not isinstance(h, SecurityHolding):
            continue
        quote = quotes.get(h.symbol)
        if quote is None:
            continue
        movers.append(Mover(
            symbol=h.symbol,
            name=h.display_name,
            day_change=h.quantity * quote.change,
            day_change_percent=quote.change_percent,
        ))
    movers.sort(key=lambda m: abs(m.day_change_percent), reverse=True)
    return movers[:limit]
