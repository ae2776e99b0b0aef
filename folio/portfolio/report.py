"""One-call portfolio analytics report.

Wires the ledger aggregator and metrics engine together: replay the
ledger, price the holdings, and compute every report the dashboard shows.
Quotes and sectors are injected; nothing here touches the network.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from folio.config.schema import FolioConfig
from folio.portfolio.allocation import (
    AllocationRow,
    SectorAllocationRow,
    compute_allocation,
    compute_sector_allocation,
)
from folio.portfolio.holdings import (
    Holding,
    Quote,
    build_holdings,
    group_by_account,
    securities,
    unpriced_symbols,
)
from folio.portfolio.ledger import LedgerResult, aggregate_positions
from folio.portfolio.overlap import OverlapRow, find_overlaps
from folio.portfolio.performance import (
    AccountSummary,
    HoldingRow,
    Mover,
    PerformanceSummary,
    account_breakdown,
    compute_performance,
    holdings_table,
    top_movers,
)
from folio.portfolio.risk import RiskMetrics, compute_risk_metrics
from folio.portfolio.transactions import Transaction

logger = logging.getLogger(__name__)


@dataclass
class PortfolioReport:
    """Everything derived from one ledger replay."""

    ledger: LedgerResult = field(default_factory=LedgerResult)
    holdings: list[Holding] = field(default_factory=list)
    performance: PerformanceSummary = field(default_factory=PerformanceSummary)
    allocation: list[AllocationRow] = field(default_factory=list)
    sector_allocation: list[SectorAllocationRow] = field(default_factory=list)
    risk: RiskMetrics = field(default_factory=RiskMetrics)
    overlaps: list[OverlapRow] = field(default_factory=list)
    holdings_table: list[HoldingRow] = field(default_factory=list)
    account_breakdown: list[AccountSummary] = field(default_factory=list)
    top_movers: list[Mover] = field(default_factory=list)
    chart_weights: list[tuple[str, float]] = field(default_factory=list)
    """(symbol, total quantity) pairs for the value-curve chart; cash excluded."""
    unpriced: list[str] = field(default_factory=list)
    """Held symbols with no quote (valued at cost)."""

    @property
    def holdings_count(self) -> int:
        return len(self.holdings)

    @property
    def account_count(self) -> int:
        return self.risk.account_count


def chart_weights(holdings: Iterable[Holding]) -> list[tuple[str, float]]:
    """Total quantity per symbol across accounts, first-seen order."""
    totals: dict[str, float] = {}
    for h in securities(list(holdings)):
        totals[h.symbol] = totals.get(h.symbol, 0.0) + h.quantity
    return list(totals.items())


def build_portfolio_report(
    transactions: Iterable[Transaction],
    quotes: Mapping[str, Quote] | None = None,
    sectors: Mapping[str, str | None] | None = None,
    names: Mapping[str, str] | None = None,
    account_names: Mapping[str, str] | None = None,
    config: FolioConfig | None = None,
) -> PortfolioReport:
    """Replay *transactions* and compute all analytics.

    Parameters:
        transactions: Full ledger, ascending by timestamp.
        quotes: {symbol: Quote} already fetched by the caller.
        sectors: {symbol: sector}, best-effort.
        names: {symbol: display name}.
        account_names: {account_id: display name}.
        config: FolioConfig for the ledger epsilon and risk weights.

    Returns:
        PortfolioReport. An empty ledger yields an empty report.
    """
    if config is None:
        config = FolioConfig()
    quotes = quotes or {}
    txs = list(transactions)

    ledger = aggregate_positions(txs, quantity_epsilon=config.ledger.quantity_epsilon)
    holdings = build_holdings(ledger, quotes, sectors, names)
    accounts = group_by_account(holdings, account_names or config.account_names)
    account_count = len({t.account_id for t in txs})

    report = PortfolioReport(
        ledger=ledger,
        holdings=holdings,
        performance=compute_performance(holdings, quotes),
        allocation=compute_allocation(holdings),
        sector_allocation=compute_sector_allocation(holdings),
        risk=compute_risk_metrics(holdings, account_count, config.risk),
        overlaps=find_overlaps(accounts),
        holdings_table=holdings_table(holdings, quotes),
        account_breakdown=account_breakdown(accounts),
        top_movers=top_movers(holdings, quotes),
        chart_weights=chart_weights(holdings),
        unpriced=unpriced_symbols(ledger, quotes),
    )

    if report.unpriced:
        logger.info("No quote for %s; valued at cost", ", ".join(report.unpriced))
    return report
