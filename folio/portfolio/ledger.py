"""Transaction ledger aggregation into positions and cash balances.

Replays a chronological transaction list in a single forward pass and
derives, per account:
  - Positions: quantity, average cost basis and total cost per symbol
  - Cash balances: deposits minus withdrawals and margin interest
  - Data-quality issues: oversells and invalid inputs, clamped rather than raised

The result is a pure function of the input list. Nothing is cached or
persisted; callers recompute from the full ledger on every read.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from folio.config.defaults import LEDGER_DEFAULTS
from folio.portfolio.transactions import (
    ACQUIRING_TYPES,
    CASH_TRANSACTION_TYPES,
    DISPOSING_TYPES,
    Transaction,
    TransactionType,
)

logger = logging.getLogger(__name__)

PositionKey = tuple[str, str]
"""(account_id, symbol)"""

# Issue kinds
OVERSELL = "oversell"
NEGATIVE_QUANTITY = "negative_quantity"
NEGATIVE_PRICE = "negative_price"
NEGATIVE_FEES = "negative_fees"
OUT_OF_ORDER = "out_of_order"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Position:
    """Net holding of one symbol within one account."""

    account_id: str
    symbol: str
    quantity: float = 0.0
    average_cost_basis: float = 0.0
    total_cost: float = 0.0

    @property
    def key(self) -> PositionKey:
        return (self.account_id, self.symbol)


@dataclass
class CashBalance:
    """Signed cash balance of one account."""

    account_id: str
    balance: float = 0.0


@dataclass
class DataQualityIssue:
    """A ledger entry that was clamped instead of applied as recorded."""

    account_id: str
    symbol: str
    transaction_id: str
    kind: str
    detail: str = ""


@dataclass
class LedgerResult:
    """Derived state of a ledger replay."""

    positions: dict[PositionKey, Position] = field(default_factory=dict)
    cash_balances: dict[str, CashBalance] = field(default_factory=dict)
    issues: list[DataQualityIssue] = field(default_factory=list)

    @property
    def flagged_accounts(self) -> set[str]:
        """Accounts with at least one data-quality issue."""
        return {issue.account_id for issue in self.issues}

    @property
    def account_ids(self) -> list[str]:
        """All accounts with a position or a cash balance, first-seen order."""
        seen: dict[str, None] = {}
        for account_id, _ in self.positions:
            seen.setdefault(account_id, None)
        for account_id in self.cash_balances:
            seen.setdefault(account_id, None)
        return list(seen)

    @property
    def symbols(self) -> list[str]:
        """Distinct held symbols, first-seen order."""
        seen: dict[str, None] = {}
        for _, symbol in self.positions:
            seen.setdefault(symbol, None)
        return list(seen)

    def positions_for(self, account_id: str) -> list[Position]:
        return [p for p in self.positions.values() if p.account_id == account_id]

    def cash_for(self, account_id: str) -> float:
        cash = self.cash_balances.get(account_id)
        return cash.balance if cash is not None else 0.0


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------

def aggregate_positions(
    transactions: Iterable[Transaction],
    quantity_epsilon: float | None = None,
) -> LedgerResult:
    """Replay *transactions* into positions and cash balances.

    Parameters:
        transactions: Ledger entries for one or more accounts, ascending by
            timestamp. Out-of-order input is replayed as given and flagged.
        quantity_epsilon: Positions with ``|quantity|`` at or below this are
            treated as closed and left out of the result.

    Returns:
        LedgerResult with open positions keyed by (account_id, symbol),
        cash balances keyed by account_id, and any data-quality issues.
    """
    eps = LEDGER_DEFAULTS["quantity_epsilon"] if quantity_epsilon is None else quantity_epsilon

    running: dict[PositionKey, Position] = {}
    cash: dict[str, CashBalance] = {}
    issues: list[DataQualityIssue] = []
    previous: Transaction | None = None
    order_flagged = False

    for tx in transactions:
        if previous is not None and tx.timestamp < previous.timestamp and not order_flagged:
            issues.append(DataQualityIssue(
                account_id=tx.account_id,
                symbol=tx.symbol,
                transaction_id=tx.id,
                kind=OUT_OF_ORDER,
                detail=f"{tx.timestamp.isoformat()} precedes {previous.timestamp.isoformat()}",
            ))
            order_flagged = True
        previous = tx

        qty, price, fees = _clamp_inputs(tx, issues)

        if tx.type in CASH_TRANSACTION_TYPES:
            _apply_cash(cash, tx, qty, price)
            continue

        if tx.type in (TransactionType.DIVIDEND, TransactionType.SPLIT):
            # Recorded in the ledger; no quantity or cost effect.
            continue

        key = (tx.account_id, tx.symbol)
        pos = running.get(key)
        if pos is None:
            pos = Position(account_id=tx.account_id, symbol=tx.symbol)
            running[key] = pos

        if tx.type in ACQUIRING_TYPES:
            pos.total_cost += qty * price + fees
            pos.quantity += qty
            pos.average_cost_basis = pos.total_cost / pos.quantity if pos.quantity > 0 else 0.0
        elif tx.type in DISPOSING_TYPES or tx.type in (
            TransactionType.OPTION_EXERCISE,
            TransactionType.OPTION_ASSIGNMENT,
        ):
            _reduce(pos, qty, tx, issues, eps)
        elif tx.type is TransactionType.OPTION_EXPIRATION:
            pos.quantity = 0.0
            pos.total_cost = 0.0
            pos.average_cost_basis = 0.0

    positions = {
        key: pos for key, pos in running.items()
        if abs(pos.quantity) > eps
    }

    if issues:
        logger.warning(
            "Ledger replay clamped %d entr%s across %d account(s)",
            len(issues), "y" if len(issues) == 1 else "ies",
            len({i.account_id for i in issues}),
        )
        for issue in issues:
            logger.debug(
                "  %s %s/%s (tx %s): %s",
                issue.kind, issue.account_id, issue.symbol, issue.transaction_id, issue.detail,
            )

    return LedgerResult(positions=positions, cash_balances=cash, issues=issues)


def aggregate_by_account(
    transactions: Iterable[Transaction],
    quantity_epsilon: float | None = None,
) -> dict[str, list[Position]]:
    """Open positions grouped by account_id."""
    result = aggregate_positions(transactions, quantity_epsilon=quantity_epsilon)
    grouped: dict[str, list[Position]] = {}
    for pos in result.positions.values():
        grouped.setdefault(pos.account_id, []).append(pos)
    return grouped


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _clamp_inputs(
    tx: Transaction,
    issues: list[DataQualityIssue],
) -> tuple[float, float, float]:
    """Clamp negative quantity, price and fees to zero, flagging each."""
    qty, price, fees = tx.quantity, tx.price_per_unit, tx.fees
    for kind, value in (
        (NEGATIVE_QUANTITY, qty),
        (NEGATIVE_PRICE, price),
        (NEGATIVE_FEES, fees),
    ):
        if value < 0:
            issues.append(DataQualityIssue(
                account_id=tx.account_id,
                symbol=tx.symbol,
                transaction_id=tx.id,
                kind=kind,
                detail=f"{value:g} clamped to 0",
            ))
    return max(qty, 0.0), max(price, 0.0), max(fees, 0.0)


def _apply_cash(
    cash: dict[str, CashBalance],
    tx: Transaction,
    qty: float,
    price: float,
) -> None:
    # A cash row carries its amount either as qty × price or as qty alone
    amount = qty * price if price > 0 else qty
    balance = cash.setdefault(tx.account_id, CashBalance(account_id=tx.account_id))
    if tx.type is TransactionType.DEPOSIT:
        balance.balance += amount
    elif tx.type is TransactionType.WITHDRAWAL:
        balance.balance -= amount
    elif tx.type is TransactionType.MARGIN_INTEREST:
        balance.balance -= abs(amount)


def _reduce(
    pos: Position,
    qty_sold: float,
    tx: Transaction,
    issues: list[DataQualityIssue],
    eps: float,
) -> None:
    """Proportional cost reduction; oversells clamp to zero and are flagged."""
    if qty_sold > pos.quantity + eps:
        issues.append(DataQualityIssue(
            account_id=tx.account_id,
            symbol=tx.symbol,
            transaction_id=tx.id,
            kind=OVERSELL,
            detail=f"{tx.type.value} {qty_sold:g} with {pos.quantity:g} held",
        ))
        qty_sold = pos.quantity

    pos.total_cost = max(0.0, pos.total_cost - pos.average_cost_basis * qty_sold)
    pos.quantity = max(0.0, pos.quantity - qty_sold)

    if pos.quantity <= eps:
        pos.quantity = 0.0
        pos.total_cost = 0.0
        pos.average_cost_basis = 0.0
