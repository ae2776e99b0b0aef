"""Tests for transaction records and option symbols."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from folio.portfolio.transactions import (
    Transaction,
    TransactionType,
    format_option_symbol,
    is_cash_transaction,
    is_option_transaction,
    sort_transactions,
)


class TestTransactionType:

    def test_cash_types(self):
        assert is_cash_transaction("deposit")
        assert is_cash_transaction(TransactionType.MARGIN_INTEREST)
        assert not is_cash_transaction("buy")

    def test_option_types(self):
        assert is_option_transaction("option_expiration")
        assert not is_option_transaction("sell")

    def test_unknown_type_is_neither(self):
        assert not is_cash_transaction("gift")
        assert not is_option_transaction("gift")


class TestTransaction:

    def test_normalizes_fields(self):
        t = Transaction("1", "a", "AAPL", "buy", "10", "100.5", "2026-03-05T14:30:00Z", fees=None)
        assert t.type is TransactionType.BUY
        assert t.quantity == 10.0
        assert t.price_per_unit == 100.5
        assert t.fees == 0.0
        assert t.timestamp == datetime(2026, 3, 5, 14, 30, tzinfo=timezone.utc)

    def test_naive_timestamp_is_utc(self):
        t = Transaction("1", "a", "AAPL", "buy", 1, 1, datetime(2026, 1, 1, 12, 0))
        assert t.timestamp.tzinfo is not None
        assert t.timestamp.hour == 12

    def test_offset_timestamp_converted_to_utc(self):
        t = Transaction("1", "a", "AAPL", "buy", 1, 1, "2026-01-01T09:30:00-05:00")
        assert t.timestamp == datetime(2026, 1, 1, 14, 30, tzinfo=timezone.utc)

    def test_unix_seconds(self):
        t = Transaction("1", "a", "AAPL", "buy", 1, 1, 0)
        assert t.timestamp == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_date_timestamp(self):
        t = Transaction("1", "a", "AAPL", "buy", 1, 1, date(2026, 2, 1))
        assert t.timestamp == datetime(2026, 2, 1, tzinfo=timezone.utc)

    def test_unsupported_timestamp(self):
        with pytest.raises(TypeError):
            Transaction("1", "a", "AAPL", "buy", 1, 1, object())

    def test_unknown_type_raises(self):
        with pytest.raises(ValueError):
            Transaction("1", "a", "AAPL", "gift", 1, 1, 0)

    def test_amount_and_flags(self):
        t = Transaction("1", "a", "", "deposit", 2, 50, 0)
        assert t.amount == 100
        assert t.is_cash
        assert not t.is_option

    def test_frozen(self):
        t = Transaction("1", "a", "AAPL", "buy", 1, 1, 0)
        with pytest.raises(AttributeError):
            t.quantity = 5


class TestFromDict:

    def test_basic_row(self):
        t = Transaction.from_dict({
            "id": 7, "account_id": "a", "symbol": " aapl ", "type": "BUY",
            "quantity": 3, "price_per_unit": 10, "timestamp": "2026-01-02",
        })
        assert t.id == "7"
        assert t.symbol == "AAPL"
        assert t.type is TransactionType.BUY
        assert t.currency == "USD"

    def test_aliases(self):
        t = Transaction.from_dict({
            "portfolio_id": "p1", "transaction_type": "sell",
            "transaction_date": "2026-01-02", "symbol": "MSFT", "quantity": 1,
        })
        assert t.account_id == "p1"
        assert t.type is TransactionType.SELL

    def test_blank_numbers_become_zero(self):
        t = Transaction.from_dict({
            "account_id": "a", "type": "buy", "timestamp": "2026-01-02",
            "quantity": float("nan"), "price_per_unit": "n/a", "fees": "",
        })
        assert t.quantity == 0.0
        assert t.price_per_unit == 0.0
        assert t.fees == 0.0

    def test_epoch_zero_timestamp(self):
        t = Transaction.from_dict({"account_id": "a", "type": "buy", "timestamp": 0})
        assert t.timestamp == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_falsy_primary_keys_win_over_aliases(self):
        t = Transaction.from_dict({
            "account_id": "", "portfolio_id": "p1", "type": "deposit",
            "timestamp": 0, "transaction_date": "2026-01-02",
        })
        assert t.account_id == ""
        assert t.timestamp.year == 1970

    def test_missing_type(self):
        with pytest.raises(ValueError, match="no type"):
            Transaction.from_dict({"account_id": "a", "timestamp": "2026-01-02"})

    def test_missing_timestamp(self):
        with pytest.raises(ValueError, match="no timestamp"):
            Transaction.from_dict({"account_id": "a", "type": "buy"})


class TestSorting:

    def test_stable_for_same_instant(self):
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        a = Transaction("a", "x", "S", "buy", 1, 1, base)
        b = Transaction("b", "x", "S", "sell", 1, 1, base)
        c = Transaction("c", "x", "S", "buy", 1, 1, base - timedelta(days=1))
        assert [t.id for t in sort_transactions([a, b, c])] == ["c", "a", "b"]


class TestOptionSymbol:

    def test_call(self):
        assert format_option_symbol("aapl", "call", 250, date(2026, 3, 21)) == "AAPL 250C 03/21/26"

    def test_put_fractional_strike(self):
        assert format_option_symbol("SPY", "put", 412.5, date(2026, 12, 18)) == "SPY 412.5P 12/18/26"
