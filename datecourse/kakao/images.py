from __future__ import annotations

import logging

from ..ranking.models import Candidate
from ..ranking.scoring import pick_best_image_candidate
from .cache import cache_get, cache_set
from .client import KakaoClient

logger = logging.getLogger(__name__)


def find_best_image(client: KakaoClient, query: str) -> Candidate | None:
    """Search images for ``query`` and return the best one.

    Only hits are cached, so a query that found nothing is retried next time.
    Raises ``KakaoConfigError`` when the client has no REST key.
    """
    query = (query or "").strip()
    if not query:
        return None

    cached = cache_get(query)
    if cached is not None:
        return cached

    best = pick_best_image_candidate(
        client.search_images(query),
        client.config.image_domain_denylist,
    )
    if best is None:
        logger.info("No usable image found for %r", query)
        return None

    cache_set(
        query,
        best,
        ttl=client.config.image_cache_ttl,
        max_entries=client.config.image_cache_max_entries,
    )
    return best
