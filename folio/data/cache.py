"""Short-lived quote freshness cache.

Optional layer above the core: quotes are reused for 30 seconds while the
US market is open and 5 minutes otherwise. Correctness never depends on
it; a miss just means a fresh fetch.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Generic, TypeVar
from zoneinfo import ZoneInfo

from folio.config.defaults import CACHE_DEFAULTS
from folio.config.schema import CacheConfig
from folio.data.fanout import fetch_concurrently
from folio.portfolio.holdings import Quote

logger = logging.getLogger(__name__)

V = TypeVar("V")


def is_us_market_open(
    now: datetime | None = None,
    tz_name: str = CACHE_DEFAULTS["market_timezone"],
    open_minute: int = CACHE_DEFAULTS["market_open_minute"],
    close_minute: int = CACHE_DEFAULTS["market_close_minute"],
) -> bool:
    """Regular session check: Mon-Fri, 09:30-16:00 exchange time.

    Exchange holidays are not modelled; they read as open.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    local = now.astimezone(ZoneInfo(tz_name))
    if local.weekday() >= 5:
        return False
    minutes = local.hour * 60 + local.minute
    return open_minute <= minutes < close_minute


class TTLCache(Generic[V]):
    """Thread-safe key → value cache with a market-hours-aware TTL.

    Usage::

        cache = TTLCache(config.cache)
        quote = cache.get("AAPL")
        if quote is None:
            quote = provider("AAPL")
            cache.set("AAPL", quote)
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[str, tuple[float, V]] = {}
        self._lock = threading.Lock()

    def ttl(self) -> float:
        """Current TTL in seconds."""
        now = datetime.fromtimestamp(self._clock(), tz=timezone.utc)
        cfg = self._config
        if is_us_market_open(now, cfg.market_timezone, cfg.market_open_minute, cfg.market_close_minute):
            return cfg.ttl_market_open
        return cfg.ttl_market_closed

    def get(self, key: str) -> V | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at > self.ttl():
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: V) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), value)

    def get_many(self, keys: Iterable[str]) -> tuple[dict[str, V], list[str]]:
        """(fresh hits, missing keys) for *keys*."""
        hits: dict[str, V] = {}
        missing: list[str] = []
        for key in keys:
            value = self.get(key)
            if value is None:
                missing.append(key)
            else:
                hits[key] = value
        return hits, missing

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


QuoteCache = TTLCache[Quote]


def fetch_quotes(
    symbols: Iterable[str],
    provider: Callable[[str], Quote | None],
    cache: TTLCache[Quote] | None = None,
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> Mapping[str, Quote]:
    """Quotes for *symbols*, serving fresh ones from *cache* when given.

    Symbols the provider cannot price are absent from the result.
    """
    wanted = list(dict.fromkeys(symbols))
    if cache is None:
        hits, missing = {}, wanted
    else:
        hits, missing = cache.get_many(wanted)

    fetched = fetch_concurrently(missing, provider, max_workers=max_workers, timeout=timeout)
    if cache is not None:
        for symbol, quote in fetched.items():
            cache.set(symbol, quote)

    logger.debug("Quotes: %d cached, %d fetched, %d absent",
                 len(hits), len(fetched), len(missing) - len(fetched))
    return {s: hits.get(s) or fetched[s] for s in wanted if s in hits or s in fetched}
