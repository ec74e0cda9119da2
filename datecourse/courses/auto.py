from __future__ import annotations

import logging
from typing import Any

from ..assembly.assembler import assemble_course
from ..assembly.config import DEFAULT_ASSEMBLY_CONFIG, AssemblyConfig
from ..assembly.models import CategoryQuery
from ..kakao.client import KakaoClient, prefer_address
from ..kakao.images import find_best_image
from ..ranking.models import Candidate
from .models import AutoCourse, AutoCourseStep
from .regions import Region

logger = logging.getLogger(__name__)

SEOUL = "서울"

# (category, search suffix, step title)
AUTO_COURSE_CATEGORIES: tuple[tuple[str, str, str], ...] = (
    ("cafe", "카페", "카페"),
    ("food", "맛집", "식사"),
    ("activity", "데이트 코스", "데이트"),
)
_STEP_TITLES = {category: title for category, _, title in AUTO_COURSE_CATEGORIES}


def build_category_queries(keyword: str) -> list[CategoryQuery]:
    return [
        CategoryQuery(category=category, keyword=f"{keyword} {suffix}")
        for category, suffix, _ in AUTO_COURSE_CATEGORIES
    ]


def place_image_url(client: KakaoClient, place: Candidate) -> str | None:
    if not place.name:
        return None
    best = find_best_image(client, place.name)
    return best.image_url if best else None


def generate_auto_course(
    region: Region,
    client: KakaoClient,
    config: AssemblyConfig = DEFAULT_ASSEMBLY_CONFIG,
    rng: Any = None,
) -> AutoCourse | None:
    """Assemble a cafe / food / activity course for ``region``.

    Returns ``None`` when no category produced a place.
    """

    def search(keyword: str) -> list[Candidate]:
        return prefer_address(client.search_places(keyword), SEOUL)

    course = assemble_course(build_category_queries(region.search_keyword), search, config, rng)
    if not course.steps:
        logger.info("Could not assemble an automatic course for %s", region.id)
        return None

    steps = [
        AutoCourseStep(
            order=step.order,
            category=step.category,
            title=_STEP_TITLES.get(step.category, step.category),
            place=step.candidate,
            image_url=place_image_url(client, step.candidate),
        )
        for step in course.steps
        if step.candidate is not None
    ]

    return AutoCourse(
        title=f"{region.label} 자동 코스",
        city=region.id,
        hero_image_url=next((s.image_url for s in steps if s.image_url), None),
        steps=steps,
    )
