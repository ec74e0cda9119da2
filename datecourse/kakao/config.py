from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class KakaoConfig:
    rest_key: str = os.getenv("KAKAO_REST_KEY", "")
    keyword_url: str = "https://dapi.kakao.com/v2/local/search/keyword.json"
    image_url: str = "https://dapi.kakao.com/v2/search/image"
    timeout: float = 5.0
    place_page_size: int = 15
    image_page_size: int = 10
    default_radius: int = 2000
    # Hosts that block hotlinking or serve thumbnails
    image_domain_denylist: tuple[str, ...] = (
        "blogfiles.naver.net",
        "postfiles.pstatic.net",
        "cafefiles.naver.net",
        "blogpfthumb",
        "dthumb-phinf",
        "search.pstatic.net",
    )
    image_cache_ttl: int = 600  # 10 minutes
    image_cache_max_entries: int = 1000


DEFAULT_KAKAO_CONFIG = KakaoConfig()
