"""Cross-account overlap detection.

Finds symbols held in two or more accounts, with combined quantity and
value, so duplicated exposure is visible in one place.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from folio.portfolio.holdings import AccountHoldings, SecurityHolding


@dataclass
class OverlapRow:
    symbol: str
    accounts: list[str] = field(default_factory=list)
    """Display names of the accounts holding the symbol, in input order."""
    total_quantity: float = 0.0
    total_value: float = 0.0

    @property
    def n_accounts(self) -> int:
        return len(self.accounts)


def find_overlaps(accounts: Sequence[AccountHoldings]) -> list[OverlapRow]:
    """Symbols held in at least two distinct accounts, largest value first.

    Cash is per-account by nature and never reported as an overlap.
    """
    rows: dict[str, OverlapRow] = {}
    seen: dict[str, set[str]] = {}

    for acct in accounts:
        for h in acct.holdings:
            if not isinstance(h, SecurityHolding):
                continue
            row = rows.get(h.symbol)
            if row is None:
                row = OverlapRow(symbol=h.symbol)
                rows[h.symbol] = row
                seen[h.symbol] = set()
            if acct.id not in seen[h.symbol]:
                seen[h.symbol].add(acct.id)
                row.accounts.append(acct.display_name)
            row.total_quantity += h.quantity
            row.total_value += h.market_value

    overlaps = [row for sym, row in rows.items() if len(seen[sym]) > 1]
    return sorted(overlaps, key=lambda r: r.total_value, reverse=True)
