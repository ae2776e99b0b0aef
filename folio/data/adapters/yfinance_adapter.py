"""yfinance data adapter for quotes, price series and sector lookup.

These are the external collaborators the engine consumes. Every function
degrades to ``None`` / ``[]`` on failure so one bad symbol never sinks a
batch; the fan-out in ``folio.data.fanout`` does the parallelism.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

import pandas as pd
import yfinance as yf

from folio.portfolio.holdings import Quote
from folio.series.combiner import PriceSample
from folio.series.ranges import ChartRange

logger = logging.getLogger(__name__)

# ChartRange → (yfinance period, interval)
_HISTORY_ARGS = {
    ChartRange.ONE_DAY: ("1d", "5m"),
    ChartRange.ONE_WEEK: ("5d", "30m"),
    ChartRange.ONE_MONTH: ("1mo", "1d"),
    ChartRange.THREE_MONTHS: ("3mo", "1d"),
    ChartRange.SIX_MONTHS: ("6mo", "1d"),
    ChartRange.YEAR_TO_DATE: ("ytd", "1d"),
    ChartRange.ONE_YEAR: ("1y", "1d"),
    ChartRange.FIVE_YEARS: ("5y", "1wk"),
}


def _yf_symbol(symbol: str) -> str:
    """BRK.B → BRK-B."""
    return symbol.replace(".", "-") if "." in symbol else symbol


def _num(info: dict, *keys: str) -> float:
    for key in keys:
        value = info.get(key)
        if value is not None:
            try:
                return float(value)
            except (TypeError, ValueError):
                continue
    return 0.0


def fetch_quote(symbol: str) -> Quote | None:
    """Current quote for *symbol*, or None if yfinance has no price."""
    try:
        info = yf.Ticker(_yf_symbol(symbol)).info
    except Exception as e:
        logger.warning("Quote fetch failed for %s: %s", symbol, e)
        return None

    if not info:
        logger.warning("No quote data for %s", symbol)
        return None

    price = _num(info, "regularMarketPrice", "currentPrice")
    if price <= 0:
        logger.warning("No price for %s", symbol)
        return None

    return Quote(
        symbol=symbol,
        price=price,
        previous_close=_num(info, "regularMarketPreviousClose", "previousClose"),
        day_high=_num(info, "regularMarketDayHigh", "dayHigh"),
        day_low=_num(info, "regularMarketDayLow", "dayLow"),
        volume=_num(info, "regularMarketVolume", "volume"),
        market_cap=_num(info, "marketCap"),
        timestamp=datetime.now(timezone.utc),
    )


def fetch_series(symbol: str, chart_range: ChartRange | str) -> list[PriceSample]:
    """Ascending close-price samples for *symbol* over *chart_range*."""
    rng = ChartRange.parse(chart_range)
    period, interval = _HISTORY_ARGS[rng]
    try:
        hist = yf.Ticker(_yf_symbol(symbol)).history(period=period, interval=interval)
    except Exception as e:
        logger.warning("Series fetch failed for %s (%s): %s", symbol, rng.value, e)
        return []

    if hist is None or hist.empty or "Close" not in hist.columns:
        logger.debug("Empty series for %s (%s)", symbol, rng.value)
        return []

    closes = hist["Close"].dropna().sort_index()
    return [
        PriceSample(timestamp=float(pd.Timestamp(ts).timestamp()), price=float(price))
        for ts, price in closes.items()
    ]


def fetch_sector(symbol: str) -> str | None:
    """Sector classification, or None when unknown (best-effort)."""
    try:
        info = yf.Ticker(_yf_symbol(symbol)).info
    except Exception as e:
        logger.debug("Sector lookup failed for %s: %s", symbol, e)
        return None
    if not info:
        return None
    if info.get("quoteType") == "ETF":
        return info.get("category") or None
    return info.get("sector") or None


def fetch_name(symbol: str) -> str:
    """Display name, falling back to the symbol."""
    try:
        info = yf.Ticker(_yf_symbol(symbol)).info
    except Exception as e:
        logger.debug("Name lookup failed for %s: %s", symbol, e)
        return symbol
    if not info:
        return symbol
    return info.get("longName") or info.get("shortName") or symbol
