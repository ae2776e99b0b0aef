"""Transaction ledger entries.

A transaction is an immutable record of one buy/sell/cash/option event in
one account. Transactions are the only source of truth: positions and cash
balances are always re-derived from them (see ``folio.portfolio.ledger``).
"""

from __future__ import annotations

import numbers
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any


class TransactionType(str, Enum):
    BUY = "buy"
    SELL = "sell"
    DIVIDEND = "dividend"
    SPLIT = "split"
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    MARGIN_INTEREST = "margin_interest"
    OPTION_EXERCISE = "option_exercise"
    OPTION_ASSIGNMENT = "option_assignment"
    OPTION_EXPIRATION = "option_expiration"


class OptionType(str, Enum):
    CALL = "call"
    PUT = "put"


ACQUIRING_TYPES = frozenset({TransactionType.BUY, TransactionType.TRANSFER_IN})
DISPOSING_TYPES = frozenset({TransactionType.SELL, TransactionType.TRANSFER_OUT})

CASH_TRANSACTION_TYPES = frozenset({
    TransactionType.DEPOSIT,
    TransactionType.WITHDRAWAL,
    TransactionType.MARGIN_INTEREST,
})

OPTION_TRANSACTION_TYPES = frozenset({
    TransactionType.OPTION_EXERCISE,
    TransactionType.OPTION_ASSIGNMENT,
    TransactionType.OPTION_EXPIRATION,
})


def is_cash_transaction(tx_type: TransactionType | str) -> bool:
    """True for deposit, withdrawal and margin interest."""
    try:
        return TransactionType(tx_type) in CASH_TRANSACTION_TYPES
    except ValueError:
        return False


def is_option_transaction(tx_type: TransactionType | str) -> bool:
    """True for option exercise, assignment and expiration."""
    try:
        return TransactionType(tx_type) in OPTION_TRANSACTION_TYPES
    except ValueError:
        return False


def _coerce_timestamp(value: Any) -> datetime:
    """Normalize a timestamp to a timezone-aware UTC datetime.

    Accepts datetimes, dates, ISO-8601 strings and Unix seconds. Naive
    values are taken to be UTC.
    """
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    elif isinstance(value, numbers.Real):
        return datetime.fromtimestamp(float(value), tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        ts = datetime.fromisoformat(text)
    else:
        raise TypeError(f"Unsupported timestamp value: {value!r}")

    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


@dataclass(frozen=True)
class Transaction:
    """One immutable ledger entry."""

    id: str
    account_id: str
    symbol: str
    type: TransactionType
    quantity: float
    price_per_unit: float
    timestamp: datetime
    fees: float = 0.0
    currency: str = "USD"
    notes: str = ""

    def __post_init__(self) -> None:
        # Frozen: normalize through object.__setattr__
        object.__setattr__(self, "type", TransactionType(self.type))
        object.__setattr__(self, "timestamp", _coerce_timestamp(self.timestamp))
        object.__setattr__(self, "quantity", float(self.quantity))
        object.__setattr__(self, "price_per_unit", float(self.price_per_unit))
        object.__setattr__(self, "fees", float(self.fees or 0.0))

    @property
    def amount(self) -> float:
        """Gross amount (quantity × price), excluding fees."""
        return self.quantity * self.price_per_unit

    @property
    def is_cash(self) -> bool:
        return self.type in CASH_TRANSACTION_TYPES

    @property
    def is_option(self) -> bool:
        return self.type in OPTION_TRANSACTION_TYPES

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> "Transaction":
        """Build a transaction from a plain mapping (a store row).

        ``transaction_type`` / ``transaction_date`` / ``portfolio_id`` are
        accepted as aliases for ``type`` / ``timestamp`` / ``account_id``.
        """
        tx_type = _first_present(row, "type", "transaction_type")
        timestamp = _first_present(row, "timestamp", "transaction_date")
        account_id = _first_present(row, "account_id", "portfolio_id")
        if tx_type is None:
            raise ValueError(f"Transaction {row.get('id')!r} has no type")
        if timestamp is None:
            raise ValueError(f"Transaction {row.get('id')!r} has no timestamp")

        return cls(
            id=str(row.get("id", "")),
            account_id="" if account_id is None else str(account_id),
            symbol=str(row.get("symbol") or "").strip().upper(),
            type=TransactionType(str(tx_type).strip().lower()),
            quantity=_safe_float(row.get("quantity")),
            price_per_unit=_safe_float(row.get("price_per_unit")),
            fees=_safe_float(row.get("fees")),
            currency=str(row.get("currency") or "USD"),
            timestamp=timestamp,
            notes=str(row.get("notes") or ""),
        )


def _first_present(row: Mapping[str, Any], *keys: str) -> Any:
    """First value under *keys* that is not None (0 and "" count as present)."""
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
    return None


def _safe_float(val: Any) -> float:
    """Convert a value to float, returning 0.0 for blanks and junk."""
    try:
        result = float(val or 0)
    except (ValueError, TypeError):
        return 0.0
    if result != result:  # NaN from pandas blanks
        return 0.0
    return result


def sort_transactions(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Stable ascending sort by timestamp (same-instant entries keep order)."""
    return sorted(transactions, key=lambda t: t.timestamp)


def format_option_symbol(
    underlying: str,
    option_type: OptionType | str,
    strike: float,
    expiration: date,
) -> str:
    """Synthetic ledger symbol for an option contract.

    >>> format_option_symbol("AAPL", "call", 250, date(2026, 3, 21))
    'AAPL 250C 03/21/26'
    """
    kind = OptionType(option_type)
    strike_text = f"{strike:g}"
    suffix = "C" if kind is OptionType.CALL else "P"
    return f"{underlying.upper()} {strike_text}{suffix} {expiration.strftime('%m/%d/%y')}"
