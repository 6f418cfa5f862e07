"""
Batched Fetcher
===============
Fetches every record whose foreign key matches any of N values, working
around the store's cap on how many values one "in" filter may carry.
"""
import logging
import concurrent.futures

from classgarden.config import config as default_config
from classgarden.store import StoreError

logger = logging.getLogger(__name__)


class FetchError(Exception):
    """A chunk query failed, so the whole batched fetch failed."""


def chunked(values, size):
    """Split ``values`` into contiguous lists of at most ``size`` items."""
    if size < 1:
        raise ValueError("chunk size must be at least 1")
    return [values[i:i + size] for i in range(0, len(values), size)]


def _unique(values):
    seen = set()
    out = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


def fetch_in_batches(store, table, field, values, config=None, filters=None):
    """
    Return the union of rows in ``table`` whose ``field`` is in ``values``.

    One "in" query is issued per chunk of ``config.chunk_size`` values; the
    chunks run concurrently on a thread pool and the results are
    concatenated. No query is issued for an empty value list. Any chunk
    failure raises FetchError; there is no retry.
    """
    config = config or default_config
    values = _unique(v for v in values if v is not None)
    if not values:
        return []

    chunks = chunked(values, config.chunk_size)
    workers = max(1, min(int(config.max_workers), len(chunks)))
    logger.debug("Fetching %s.%s for %d values in %d chunks", table, field, len(values), len(chunks))

    rows = []
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(store.select_in, table, field, chunk, filters) for chunk in chunks]
        try:
            for future in concurrent.futures.as_completed(futures):
                rows.extend(future.result())
        except StoreError as e:
            for f in futures:
                f.cancel()
            logger.warning("Batched fetch of %s failed: %s", table, e)
            raise FetchError(str(e)) from e

    return rows
