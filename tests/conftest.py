"""Shared test fixtures for Folio.

Provides a transaction factory, the reference ledgers used across the
aggregator and metrics tests, and priced holdings.
"""

from __future__ import annotations

import itertools
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from folio.config.schema import FolioConfig
from folio.portfolio.holdings import CashHolding, Quote, SecurityHolding
from folio.portfolio.transactions import Transaction

DAY_ONE = datetime(2026, 1, 5, 15, 0, tzinfo=timezone.utc)

_ids = itertools.count(1)


def make_tx(
    type: str,
    symbol: str = "AAPL",
    quantity: float = 0.0,
    price: float = 0.0,
    day: int = 1,
    account_id: str = "acct-1",
    fees: float = 0.0,
    id: str | None = None,
) -> Transaction:
    """Transaction on *day* (1-based) after DAY_ONE."""
    return Transaction(
        id=id or f"tx-{next(_ids)}",
        account_id=account_id,
        symbol=symbol,
        type=type,
        quantity=quantity,
        price_per_unit=price,
        timestamp=DAY_ONE + timedelta(days=day - 1),
        fees=fees,
    )


# ---------------------------------------------------------------------------
# Core infrastructure
# ---------------------------------------------------------------------------

@pytest.fixture
def tx():
    """The transaction factory."""
    return make_tx


@pytest.fixture
def test_config(tmp_path: Path) -> FolioConfig:
    """Default config with output paths under tmp_path."""
    return FolioConfig(
        output={
            "export_dir": str(tmp_path / "exports"),
            "chart_dir": str(tmp_path / "charts"),
        },
    )


# ---------------------------------------------------------------------------
# Reference ledgers
# ---------------------------------------------------------------------------

@pytest.fixture
def two_buys_one_sell_ledger() -> list[Transaction]:
    """BUY 10 @ 100 (+1 fee) day 1, BUY 5 @ 110 day 5, SELL 5 @ 120 day 10."""
    return [
        make_tx("buy", "AAPL", 10, 100.0, day=1, fees=1.0),
        make_tx("buy", "AAPL", 5, 110.0, day=5),
        make_tx("sell", "AAPL", 5, 120.0, day=10),
    ]


@pytest.fixture
def two_account_ledger() -> list[Transaction]:
    """AAPL in both accounts, MSFT in one, cash in the taxable account."""
    return [
        make_tx("deposit", "", 5000, 0, day=1, account_id="taxable"),
        make_tx("buy", "AAPL", 10, 150.0, day=2, account_id="taxable"),
        make_tx("buy", "MSFT", 5, 300.0, day=2, account_id="taxable"),
        make_tx("buy", "AAPL", 4, 160.0, day=3, account_id="ira"),
        make_tx("withdrawal", "", 1000, 0, day=4, account_id="taxable"),
    ]


# ---------------------------------------------------------------------------
# Priced holdings
# ---------------------------------------------------------------------------

@pytest.fixture
def equal_holdings() -> list[SecurityHolding]:
    """Two $500 holdings."""
    return [
        SecurityHolding("acct-1", "AAA", 5, 90.0, 100.0, sector="Technology"),
        SecurityHolding("acct-1", "BBB", 10, 50.0, 50.0, sector="Energy"),
    ]


@pytest.fixture
def mixed_holdings() -> list:
    """Securities across two accounts plus cash."""
    return [
        SecurityHolding("taxable", "AAPL", 10, 150.0, 200.0, sector="Technology", name="Apple Inc."),
        SecurityHolding("taxable", "XOM", 20, 100.0, 90.0, sector="Energy"),
        SecurityHolding("ira", "AAPL", 5, 180.0, 200.0, sector="Technology", name="Apple Inc."),
        CashHolding("taxable", 1000.0),
    ]


@pytest.fixture
def quotes() -> dict[str, Quote]:
    return {
        "AAPL": Quote("AAPL", price=200.0, previous_close=190.0),
        "XOM": Quote("XOM", price=90.0, previous_close=100.0),
    }
