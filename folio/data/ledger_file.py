"""Flat-file transaction store.

Reads a ledger exported in Folio's neutral column layout (CSV or JSON
records) and returns validated transactions, ascending by timestamp.
Broker-specific export formats are not handled here; they must be
normalized to this layout first.

Columns::

    id, account_id, symbol, type, quantity, price_per_unit,
    fees, currency, timestamp, notes
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from folio.portfolio.transactions import Transaction, sort_transactions

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("account_id", "type", "quantity", "timestamp")
OPTIONAL_COLUMNS = {
    "id": "",
    "symbol": "",
    "price_per_unit": 0.0,
    "fees": 0.0,
    "currency": "USD",
    "notes": "",
}


@dataclass
class LoadResult:
    """Transactions read from a ledger file, plus rejected rows."""

    transactions: list[Transaction] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def read_ledger_frame(path: str | Path) -> pd.DataFrame:
    """Read a ledger file into a DataFrame with every known column present."""
    path = Path(path).expanduser()
    if path.suffix.lower() == ".json":
        df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    else:
        df = pd.read_csv(path, dtype={"id": str, "account_id": str, "symbol": str})

    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Ledger {path} is missing required column(s): {', '.join(missing)}")

    for col, default in OPTIONAL_COLUMNS.items():
        if col not in df.columns:
            df[col] = default
        else:
            df[col] = df[col].fillna(default)

    if (df["id"] == "").any():
        # Row position is a stable id for files that don't carry one
        df.loc[df["id"] == "", "id"] = [str(i) for i in df.index[df["id"] == ""]]
    return df


def load_transactions(path: str | Path) -> LoadResult:
    """Load and validate a ledger file.

    Rows that cannot be parsed (unknown type, bad timestamp) are reported
    in ``errors`` and skipped; the rest are returned sorted ascending by
    timestamp.
    """
    df = read_ledger_frame(path)
    result = LoadResult()

    for idx, row in df.iterrows():
        try:
            result.transactions.append(Transaction.from_dict(row.to_dict()))
        except (ValueError, TypeError) as e:
            msg = f"Row {idx}: {e}"
            logger.warning("Skipping ledger %s", msg)
            result.errors.append(msg)

    result.transactions = sort_transactions(result.transactions)
    logger.info(
        "Loaded %d transaction(s) from %s (%d rejected)",
        len(result.transactions), path, len(result.errors),
    )
    return result
