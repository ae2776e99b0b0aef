"""Portfolio ledger and metrics: positions, allocation, performance, risk.

Public API::

    from folio.portfolio import (
        Transaction,
        TransactionType,
        aggregate_positions,
        build_holdings,
        compute_allocation,
        compute_sector_allocation,
        compute_performance,
        compute_risk_metrics,
        find_overlaps,
        build_portfolio_report,
    )
"""

from folio.portfolio.allocation import (
    AllocationRow,
    SectorAllocationRow,
    compute_allocation,
    compute_sector_allocation,
)
from folio.portfolio.holdings import (
    AccountHoldings,
    CashHolding,
    Holding,
    Quote,
    SecurityHolding,
    build_holdings,
    group_by_account,
)
from folio.portfolio.ledger import (
    CashBalance,
    DataQualityIssue,
    LedgerResult,
    Position,
    aggregate_by_account,
    aggregate_positions,
)
from folio.portfolio.overlap import OverlapRow, find_overlaps
from folio.portfolio.performance import (
    PerformanceSummary,
    Performer,
    account_breakdown,
    compute_performance,
    holdings_table,
    top_movers,
)
from folio.portfolio.report import PortfolioReport, build_portfolio_report
from folio.portfolio.risk import RiskMetrics, compute_risk_metrics
from folio.portfolio.transactions import (
    OptionType,
    Transaction,
    TransactionType,
    format_option_symbol,
    is_cash_transaction,
    is_option_transaction,
    sort_transactions,
)

__all__ = [
    "AccountHoldings",
    "AllocationRow",
    "CashBalance",
    "CashHolding",
    "DataQualityIssue",
    "Holding",
    "LedgerResult",
    "OptionType",
    "OverlapRow",
    "PerformanceSummary",
    "Performer",
    "PortfolioReport",
    "Position",
    "Quote",
    "RiskMetrics",
    "SectorAllocationRow",
    "SecurityHolding",
    "Transaction",
    "TransactionType",
    "account_breakdown",
    "aggregate_by_account",
    "aggregate_positions",
    "build_holdings",
    "build_portfolio_report",
    "compute_allocation",
    "compute_performance",
    "compute_risk_metrics",
    "compute_sector_allocation",
    "find_overlaps",
    "format_option_symbol",
    "group_by_account",
    "holdings_table",
    "is_cash_transaction",
    "is_option_transaction",
    "sort_transactions",
    "top_movers",
]
