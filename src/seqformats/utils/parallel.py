"""Ordered thread fan-out for independent records.

FASTA and FASTQ records are split from their text first and then parsed
independently, so their parsing can be spread over a thread pool. Results
always come back in input order, and the first failing record (in input
order, not completion order) determines the raised error.

Example:
    >>> from seqformats.utils.parallel import map_ordered
    >>> map_ordered(str.upper, ["ac", "gt"], n_workers=2)
    ['AC', 'GT']
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def map_ordered(
    func: Callable[[T], R],
    items: Iterable[T],
    n_workers: int = 1,
) -> list[R]:
    """Apply ``func`` to every item, optionally across threads.

    Args:
        func: Function to apply.
        items: Input items.
        n_workers: Number of threads. 1 or less runs serially.

    Returns:
        Results in the same order as ``items``.

    Raises:
        Exception: Whatever ``func`` raised for the first failing item.
    """
    items_list = list(items)

    if n_workers <= 1 or len(items_list) <= 1:
        return [func(item) for item in items_list]

    logger.debug(f"Processing {len(items_list)} items with {n_workers} threads")

    executor = ThreadPoolExecutor(max_workers=n_workers)
    try:
        futures: list[Future] = [executor.submit(func, item) for item in items_list]
        results = [future.result() for future in futures]
    except Exception:
        executor.shutdown(wait=False, cancel_futures=True)
        raise
    executor.shutdown(wait=True)
    return results
