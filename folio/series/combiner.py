"""Quantity-weighted combination of per-asset price series.

Builds one portfolio value curve from N independent price series:

  1. Validate the request (symbol cap, quantities, range) before fetching
  2. Fetch every series concurrently; failed or empty symbols drop out
  3. Use the longest series as the base timeline
  4. At each base timestamp, sum ``quantity × nearest price`` across assets
  5. Round each combined value to cents, halves up

The nearest-sample lookup is a binary search, so each output point costs
O(log m) per asset.
"""

from __future__ import annotations

import logging
import math
from bisect import bisect_left
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from folio.config.defaults import COMBINER_DEFAULTS
from folio.data.fanout import fetch_concurrently
from folio.series.ranges import ChartRange, InvalidRequestError, format_date_label

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PriceSample:
    timestamp: float
    """Unix seconds."""
    price: float


@dataclass(frozen=True)
class CombinedPoint:
    timestamp: float
    date_label: str
    combined_price: float


SeriesFetcher = Callable[[str, ChartRange], Sequence[PriceSample]]
"""(symbol, range) → ascending samples; may raise or return []."""


@dataclass
class _Series:
    symbol: str
    quantity: float
    samples: list[PriceSample]
    timestamps: list[float]


# ---------------------------------------------------------------------------
# Nearest-timestamp lookup
# ---------------------------------------------------------------------------

def nearest_sample(
    samples: Sequence[PriceSample],
    target: float,
    timestamps: Sequence[float] | None = None,
) -> PriceSample | None:
    """Sample closest in time to *target* within an ascending series.

    Finds the first sample at or after *target*, compares it with its
    predecessor by absolute distance, and returns the closer one. Equal
    distances resolve to the earlier sample.

    Parameters:
        samples: Ascending-by-timestamp samples.
        target: Timestamp to match.
        timestamps: Precomputed ``[s.timestamp for s in samples]``; pass it
            when looking up many targets in the same series.
    """
    if not samples:
        return None
    if timestamps is None:
        timestamps = [s.timestamp for s in samples]

    idx = bisect_left(timestamps, target)
    if idx == 0:
        return samples[0]
    if idx == len(samples):
        return samples[-1]

    prev, curr = samples[idx - 1], samples[idx]
    if abs(target - prev.timestamp) <= abs(curr.timestamp - target):
        return prev
    return curr


# ---------------------------------------------------------------------------
# Request validation
# ---------------------------------------------------------------------------

def validate_request(
    weighted_symbols: Sequence[tuple[str, float]],
    max_symbols: int,
) -> list[tuple[str, float]]:
    """Normalize ``(symbol, quantity)`` pairs or raise InvalidRequestError."""
    if len(weighted_symbols) > max_symbols:
        raise InvalidRequestError(
            f"Maximum {max_symbols} holdings per chart, got {len(weighted_symbols)}"
        )

    normalized: list[tuple[str, float]] = []
    for pair in weighted_symbols:
        try:
            symbol, quantity = pair
            quantity = float(quantity)
        except (TypeError, ValueError):
            raise InvalidRequestError(f"Malformed (symbol, quantity) pair: {pair!r}") from None
        symbol = str(symbol or "").strip().upper()
        if not symbol:
            raise InvalidRequestError("Empty symbol in chart request")
        if not math.isfinite(quantity) or quantity < 0:
            raise InvalidRequestError(f"Invalid quantity {quantity!r} for {symbol}")
        normalized.append((symbol, quantity))
    return normalized


# ---------------------------------------------------------------------------
# Combiner
# ---------------------------------------------------------------------------

@dataclass
class FetchedSeries:
    """Fetched samples per symbol, and the symbols that contributed none."""

    series: list[tuple[str, float, list[PriceSample]]] = field(default_factory=list)
    missing: list[str] = field(default_factory=list)


def _round_cents(value: float) -> float:
    """Round to cents; exact halves round up."""
    return math.floor(value * 100 + 0.5) / 100


def combine_series(
    weighted_series: Sequence[tuple[str, float, Sequence[PriceSample]]],
    chart_range: ChartRange | str,
) -> list[CombinedPoint]:
    """Combine already-fetched series into one weighted curve.

    Parameters:
        weighted_series: ``(symbol, quantity, ascending samples)`` triples.
            Triples with no samples are ignored.
        chart_range: Range used for date labels.

    Returns:
        One point per sample of the longest series (the first such series
        wins a tie), or [] when every series is empty.
    """
    rng = ChartRange.parse(chart_range)
    series: list[_Series] = []
    for symbol, quantity, samples in weighted_series:
        samples = list(samples)
        if samples:
            series.append(_Series(symbol, quantity, samples, [s.timestamp for s in samples]))
    if not series:
        return []

    base = series[0]
    for s in series[1:]:
        if len(s.samples) > len(base.samples):
            base = s

    points: list[CombinedPoint] = []
    for base_sample in base.samples:
        t = base_sample.timestamp
        total = 0.0
        for s in series:
            closest = nearest_sample(s.samples, t, s.timestamps)
            if closest is not None:
                total += s.quantity * closest.price
        points.append(CombinedPoint(
            timestamp=t,
            date_label=format_date_label(t, rng),
            combined_price=_round_cents(total),
        ))
    return points


def fetch_weighted_series(
    weighted_symbols: Sequence[tuple[str, float]],
    chart_range: ChartRange | str,
    series_fetcher: SeriesFetcher,
    *,
    max_symbols: int | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> FetchedSeries:
    """Validate a chart request and fetch every series concurrently.

    A symbol whose fetch raises, misses the deadline or yields no samples
    is reported in ``missing`` and left out of ``series``. Both lists are
    settled when this returns; late fetches cannot change them.

    Raises:
        InvalidRequestError: Over the cap, malformed pair, or unknown range.
            Raised before any fetch is attempted.
    """
    cap = COMBINER_DEFAULTS["max_symbols"] if max_symbols is None else max_symbols
    rng = ChartRange.parse(chart_range)
    pairs = validate_request(weighted_symbols, cap)
    if not pairs:
        return FetchedSeries()

    # Same symbol listed twice: weights add up, fetched once
    quantities: dict[str, float] = {}
    for symbol, quantity in pairs:
        quantities[symbol] = quantities.get(symbol, 0.0) + quantity

    fetched = fetch_concurrently(
        quantities,
        lambda symbol: series_fetcher(symbol, rng),
        max_workers=max_workers,
        timeout=timeout,
    )

    result = FetchedSeries()
    for symbol, quantity in quantities.items():
        samples = list(fetched.get(symbol) or [])
        if samples:
            result.series.append((symbol, quantity, samples))
        else:
            result.missing.append(symbol)
    if result.missing:
        logger.warning("No price series for %s; excluded from chart", ", ".join(result.missing))
    return result


def combine_time_series(
    weighted_symbols: Sequence[tuple[str, float]],
    chart_range: ChartRange | str,
    series_fetcher: SeriesFetcher,
    *,
    max_symbols: int | None = None,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> list[CombinedPoint]:
    """Fetch and combine price series for ``(symbol, quantity)`` pairs.

    Parameters:
        weighted_symbols: Holdings to chart; quantity weights each series.
        chart_range: Lookback range (enum or label such as ``"1M"``).
        series_fetcher: ``fetcher(symbol, range)`` returning ascending
            samples. A symbol whose fetch raises, times out or returns no
            samples is left out of the curve.
        max_symbols: Request cap (default 30). Exceeding it is rejected.
        max_workers: Fetch concurrency.
        timeout: Deadline in seconds for all fetches together.

    Raises:
        InvalidRequestError: Over the cap, malformed pair, or unknown range.
            Raised before any fetch is attempted.

    Use :func:`fetch_weighted_series` plus :func:`combine_series` when the
    caller also needs the list of symbols that dropped out.
    """
    fetched = fetch_weighted_series(
        weighted_symbols, chart_range, series_fetcher,
        max_symbols=max_symbols, max_workers=max_workers, timeout=timeout,
    )
    return combine_series(fetched.series, chart_range)
