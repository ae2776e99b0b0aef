"""Priced holdings: ledger positions enriched with quotes and sectors.

A holding is either a security position or an account's cash balance.
Cash is its own variant rather than a reserved ticker, so no symbol in the
ledger can collide with it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from folio.config.defaults import CASH_SECTOR, UNCLASSIFIED_SECTOR
from folio.portfolio.ledger import LedgerResult


@dataclass(frozen=True)
class Quote:
    """A live quote, supplied by an external provider."""

    symbol: str
    price: float
    previous_close: float = 0.0
    day_high: float = 0.0
    day_low: float = 0.0
    volume: float = 0.0
    market_cap: float = 0.0
    timestamp: datetime | None = None

    @property
    def change(self) -> float:
        if self.previous_close <= 0:
            return 0.0
        return self.price - self.previous_close

    @property
    def change_percent(self) -> float:
        if self.previous_close <= 0:
            return 0.0
        return (self.price - self.previous_close) / self.previous_close * 100


@dataclass(frozen=True)
class SecurityHolding:
    """A security position valued at a current price."""

    account_id: str
    symbol: str
    quantity: float
    average_cost_basis: float
    current_price: float
    sector: str | None = None
    name: str = ""

    @property
    def label(self) -> str:
        return self.symbol

    @property
    def display_name(self) -> str:
        return self.name or self.symbol

    @property
    def sector_bucket(self) -> str:
        return self.sector or UNCLASSIFIED_SECTOR

    @property
    def market_value(self) -> float:
        return self.quantity * self.current_price

    @property
    def cost_basis(self) -> float:
        return self.quantity * self.average_cost_basis

    @property
    def gain_percent(self) -> float:
        if self.average_cost_basis <= 0:
            return 0.0
        return (self.current_price - self.average_cost_basis) / self.average_cost_basis * 100


@dataclass(frozen=True)
class CashHolding:
    """An account's cash balance."""

    account_id: str
    balance: float

    label = "Cash"
    display_name = "Cash"
    sector_bucket = CASH_SECTOR

    @property
    def market_value(self) -> float:
        return self.balance

    @property
    def cost_basis(self) -> float:
        return self.balance


Holding = Union[SecurityHolding, CashHolding]


def build_holdings(
    ledger: LedgerResult,
    quotes: Mapping[str, Quote] | None = None,
    sectors: Mapping[str, str | None] | None = None,
    names: Mapping[str, str] | None = None,
) -> list[Holding]:
    """Price every open position in *ledger*.

    Parameters:
        ledger: Output of ``aggregate_positions``.
        quotes: {symbol: Quote}. A symbol with no usable quote is valued at
            its average cost so it still appears in totals.
        sectors: {symbol: sector}; missing entries fall into "Other".
        names: {symbol: display name}.

    Returns:
        Security holdings in ledger order, followed by one cash holding per
        account with a positive balance.
    """
    quotes = quotes or {}
    sectors = sectors or {}
    names = names or {}

    holdings: list[Holding] = []
    for pos in ledger.positions.values():
        quote = quotes.get(pos.symbol)
        price = quote.price if quote is not None and quote.price > 0 else pos.average_cost_basis
        holdings.append(SecurityHolding(
            account_id=pos.account_id,
            symbol=pos.symbol,
            quantity=pos.quantity,
            average_cost_basis=pos.average_cost_basis,
            current_price=price,
            sector=sectors.get(pos.symbol) or None,
            name=names.get(pos.symbol, ""),
        ))

    for cash in ledger.cash_balances.values():
        if cash.balance > 0:
            holdings.append(CashHolding(account_id=cash.account_id, balance=cash.balance))

    return holdings


def securities(holdings: Sequence[Holding]) -> list[SecurityHolding]:
    """Only the security holdings, in input order."""
    return [h for h in holdings if isinstance(h, SecurityHolding)]


def unpriced_symbols(
    ledger: LedgerResult,
    quotes: Mapping[str, Quote],
) -> list[str]:
    """Held symbols with no usable quote (rendered as "no data" downstream)."""
    return [
        s for s in ledger.symbols
        if s not in quotes or quotes[s].price <= 0
    ]


@dataclass
class AccountHoldings:
    """Holdings of one account, as consumed by overlap and breakdown reports."""

    id: str
    name: str = ""
    holdings: list[Holding] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.name or self.id


def group_by_account(
    holdings: Sequence[Holding],
    account_names: Mapping[str, str] | None = None,
) -> list[AccountHoldings]:
    """Group holdings by account_id, preserving first-seen account order."""
    names = account_names or {}
    grouped: dict[str, AccountHoldings] = {}
    for h in holdings:
        acct = grouped.get(h.account_id)
        if acct is None:
            acct = AccountHoldings(id=h.account_id, name=names.get(h.account_id, ""))
            grouped[h.account_id] = acct
        acct.holdings.append(h)
    return list(grouped.values())
