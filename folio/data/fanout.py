"""Concurrent per-key fetching with isolated failures.

Network-bound lookups (quotes, price series) are issued for every key at
once and joined. A key whose fetch raises, returns nothing, or is still
running at the deadline is simply absent from the result; it never fails
the batch. Each worker returns its own value and results are merged only
at the join, so no locking is needed.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable
from concurrent.futures import ALL_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_MAX_WORKERS = 8


def _is_empty(value: object) -> bool:
    if value is None:
        return True
    try:
        return len(value) == 0  # type: ignore[arg-type]
    except TypeError:
        return False


def fetch_concurrently(
    keys: Iterable[K],
    fetch: Callable[[K], V | None],
    *,
    max_workers: int | None = None,
    timeout: float | None = None,
) -> dict[K, V]:
    """Run ``fetch(key)`` for every key in parallel and collect the results.

    Parameters:
        keys: Keys to fetch. Duplicates are fetched once.
        fetch: Callable returning a value, ``None``, or an empty collection
            for a key with no data. Exceptions are logged and swallowed per key.
        max_workers: Thread pool size (default 8, never more than the key count).
        timeout: Deadline in seconds for the whole batch. Keys not done by
            then are dropped and their pending work cancelled.

    Returns:
        {key: value} for every key that produced non-empty data, in input order.
    """
    unique = list(dict.fromkeys(keys))
    if not unique:
        return {}

    workers = max(1, min(max_workers or DEFAULT_MAX_WORKERS, len(unique)))
    executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="folio-fetch")
    futures: dict[Future, K] = {}
    try:
        for key in unique:
            futures[executor.submit(fetch, key)] = key

        done, not_done = wait(futures, timeout=timeout, return_when=ALL_COMPLETED)
        for fut in not_done:
            fut.cancel()
            logger.warning("Fetch for %s timed out after %ss; treating as absent", futures[fut], timeout)
    finally:
        # Don't block the caller on stragglers past the deadline
        executor.shutdown(wait=False, cancel_futures=True)

    results: dict[K, V] = {}
    for fut, key in futures.items():
        if fut not in done:
            continue
        try:
            value = fut.result()
        except Exception as e:
            logger.warning("Fetch for %s failed: %s", key, e)
            continue
        if _is_empty(value):
            logger.debug("No data for %s", key)
            continue
        results[key] = value

    logger.debug("Fetched %d/%d keys", len(results), len(unique))
    return results
