from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Any

from ..ranking.models import Candidate
from .config import DEFAULT_ASSEMBLY_CONFIG, AssemblyConfig
from .models import CategoryQuery, Course, CourseStep

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Sequence[Candidate]]


class SearchConfigError(RuntimeError):
    """Raised by a search function for failures that must abort assembly,
    such as missing API credentials. Any other exception means "no results"."""


def search_or_empty(search_fn: SearchFn, keyword: str) -> list[Candidate]:
    """Run one search; anything but a ``SearchConfigError`` means no results."""
    try:
        return list(search_fn(keyword) or [])
    except SearchConfigError:
        raise
    except Exception:
        logger.warning("Search for %r failed, treating as no results", keyword, exc_info=True)
        return []


def gather_candidate_pools(
    category_queries: Sequence[CategoryQuery],
    search_fn: SearchFn,
    timeout: float | None = None,
    max_workers: int = 4,
) -> list[list[Candidate]]:
    """Run one search per category concurrently.

    Returns one pool per query, in query order. A search that fails or does
    not finish within ``timeout`` seconds yields an empty pool.
    """
    if not category_queries:
        return []

    pools: list[list[Candidate]] = [[] for _ in category_queries]
    executor = ThreadPoolExecutor(max_workers=min(max_workers, len(category_queries)))
    try:
        futures = [
            executor.submit(search_or_empty, search_fn, query.keyword)
            for query in category_queries
        ]
        done, _ = wait(futures, timeout=timeout)
        for index, (query, future) in enumerate(zip(category_queries, futures)):
            if future not in done:
                logger.warning(
                    "Search for %r (%s) timed out after %ss",
                    query.keyword, query.category, timeout,
                )
                future.cancel()
                continue
            pools[index] = future.result()
    finally:
        # Do not block on searches that are still running past the deadline
        executor.shutdown(wait=False, cancel_futures=True)

    return pools


def filter_candidate_pool(
    candidates: Sequence[Candidate],
    category: str,
    config: AssemblyConfig = DEFAULT_ASSEMBLY_CONFIG,
) -> list[Candidate]:
    """Apply the deny-name pattern, then the category's name patterns.

    The category patterns are ignored when they would leave nothing.
    """
    deny = config.deny_name_pattern
    pool = [c for c in candidates if deny is None or not deny.search(c.name or "")]

    patterns = config.category_name_patterns.get(category)
    if patterns is None:
        return pool

    narrowed = [c for c in pool if patterns.accepts(c.name or "")]
    return narrowed or pool


def assemble_course(
    category_queries: Sequence[CategoryQuery],
    search_fn: SearchFn,
    config: AssemblyConfig = DEFAULT_ASSEMBLY_CONFIG,
    rng: Any = None,
) -> Course:
    """
    Build a course with at most one step per category, in the given order.

    Categories whose search is empty, failed, timed out or filtered down to
    nothing are omitted, and step orders stay contiguous from 1. Each step
    is drawn uniformly from the first ``config.top_n`` pool entries. A place
    already chosen for an earlier step is avoided when the pool allows it.

    ``rng`` must provide ``choice``; defaults to the ``random`` module.
    """
    if search_fn is None:
        raise TypeError("assemble_course requires a search_fn")
    rng = rng if rng is not None else random

    pools = gather_candidate_pools(
        category_queries,
        search_fn,
        timeout=config.search_timeout,
        max_workers=config.max_workers,
    )

    steps: list[CourseStep] = []
    used_ids: set[str] = set()
    for query, candidates in zip(category_queries, pools):
        pool = filter_candidate_pool(candidates, query.category, config)
        if not pool:
            logger.info("No usable candidates for %s (%r)", query.category, query.keyword)
            continue

        fresh = [c for c in pool if c.identifier not in used_ids]
        pool = fresh or pool

        picked = rng.choice(pool[: config.top_n])
        used_ids.add(picked.identifier)
        steps.append(
            CourseStep(category=query.category, candidate=picked, order=len(steps) + 1)
        )

    return Course(steps=steps)
