from __future__ import annotations

import logging
from typing import Any

import requests

from ..assembly.assembler import SearchConfigError
from ..ranking.models import Candidate
from .config import DEFAULT_KAKAO_CONFIG, KakaoConfig

logger = logging.getLogger(__name__)


class KakaoConfigError(SearchConfigError):
    """The Kakao REST key is missing."""


def _place_from_document(doc: dict[str, Any]) -> Candidate:
    return Candidate(
        identifier=doc.get("id", ""),
        name=doc.get("place_name") or None,
        url=doc.get("place_url") or "",
        address=doc.get("address_name") or "",
        road_address=doc.get("road_address_name") or "",
        category_name=doc.get("category_name") or "",
        phone=doc.get("phone") or "",
        x=doc.get("x") or None,
        y=doc.get("y") or None,
        distance=doc.get("distance") or None,
    )


def _image_from_document(index: int, doc: dict[str, Any]) -> Candidate:
    image_url = str(doc.get("image_url") or "")
    return Candidate(
        identifier=image_url or index,
        name=doc.get("display_sitename") or None,
        url=doc.get("doc_url") or "",
        image_url=image_url if image_url.startswith("http") else None,
        width=doc.get("width", 0),
        height=doc.get("height", 0),
    )


def prefer_address(candidates: list[Candidate], token: str) -> list[Candidate]:
    """Keep candidates whose address mentions ``token``; all of them if none do."""
    matching = [
        c for c in candidates
        if token in f"{c.road_address} {c.address}"
    ]
    return matching or candidates


class KakaoClient:
    def __init__(
        self,
        config: KakaoConfig = DEFAULT_KAKAO_CONFIG,
        session: requests.Session | None = None,
    ) -> None:
        self.config = config
        # Reuse connections across searches
        self._session = session or requests.Session()
        if config.rest_key:
            self._session.headers.update({"Authorization": f"KakaoAK {config.rest_key}"})

    def _get_documents(self, url: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        if not self.config.rest_key:
            raise KakaoConfigError("KAKAO_REST_KEY is not configured")

        try:
            resp = self._session.get(url, params=params, timeout=self.config.timeout)
        except requests.RequestException:
            logger.warning("Kakao request to %s failed", url, exc_info=True)
            return []

        if not resp.ok:
            logger.warning("Kakao API error %s: %s", resp.status_code, resp.text[:200])
            return []

        try:
            data = resp.json()
        except ValueError:
            logger.warning("Kakao API returned invalid JSON from %s", url)
            return []

        docs = data.get("documents") if isinstance(data, dict) else None
        return [d for d in docs or [] if isinstance(d, dict)]

    def search_places(
        self,
        query: str,
        x: str | float | None = None,
        y: str | float | None = None,
        radius: int | None = None,
        size: int | None = None,
    ) -> list[Candidate]:
        """Keyword place search, optionally centred on ``(x, y)``."""
        query = (query or "").strip()
        if not query:
            return []

        params: dict[str, Any] = {
            "query": query,
            "size": max(1, min(15, size or self.config.place_page_size)),
        }
        if x and y:
            params["x"] = str(x)
            params["y"] = str(y)
            if radius is None:
                radius = self.config.default_radius
            params["radius"] = max(0, min(20000, radius))

        docs = self._get_documents(self.config.keyword_url, params)
        return [_place_from_document(d) for d in docs]

    def search_images(self, query: str, size: int | None = None) -> list[Candidate]:
        query = (query or "").strip()
        if not query:
            return []

        params = {
            "query": query,
            "sort": "accuracy",
            "page": 1,
            "size": max(1, min(80, size or self.config.image_page_size)),
        }
        docs = self._get_documents(self.config.image_url, params)
        return [_image_from_document(i, d) for i, d in enumerate(docs)]


_client: KakaoClient | None = None


def get_kakao_client() -> KakaoClient:
    """Return the shared client, creating it on first call."""
    global _client
    if _client is None:
        _client = KakaoClient()
    return _client
