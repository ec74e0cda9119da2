from __future__ import annotations

import logging
import random
import re
from typing import Any

from ..assembly.assembler import filter_candidate_pool, search_or_empty
from ..assembly.config import LANDMARK_NAME_PATTERN, STUDY_VENUE_PATTERN, AssemblyConfig
from ..kakao.client import KakaoClient, prefer_address
from ..llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from ..llm.course_planner import plan_course
from ..llm.models import PlannedStep, UserContext
from ..ranking.models import Candidate
from .auto import SEOUL, place_image_url
from .models import AICourse, AICourseStep

logger = logging.getLogger(__name__)

MIN_AI_COURSE_STEPS = 2
FALLBACK_AREA = "강남역"
MAX_SEARCH_RADIUS = 10000

_WALK_RE = re.compile(r"도보|걷|walk", re.IGNORECASE)
_TRANSIT_RE = re.compile(r"대중교통|지하철|버스|transit", re.IGNORECASE)

# Extra search phrase per planned role, first match wins
ROLE_BOOSTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"카페"), "감성 카페"),
    (re.compile(r"식사|맛집"), "맛집"),
    (re.compile(r"술|와인|바"), "와인바"),
    (re.compile(r"체험|활동"), "실내 체험"),
    (re.compile(r"산책"), "산책로"),
)

# Planned roles are free text, so only names are filtered
AI_ASSEMBLY_CONFIG = AssemblyConfig(
    deny_name_pattern=re.compile(
        rf"{STUDY_VENUE_PATTERN.pattern}|{LANDMARK_NAME_PATTERN.pattern}"
    ),
    category_name_patterns={},
    top_n=1,
)


class AICourseError(RuntimeError):
    """The AI course could not be planned or grounded in real places."""


def search_radius(transport: str | None) -> int:
    """Search radius in metres for the way the user travels."""
    move = transport or ""
    if _WALK_RE.search(move):
        return 2000
    if _TRANSIT_RE.search(move):
        return 5000
    return 7000


def radius_trials(radius: int) -> list[int]:
    """The base radius, then doubled, then the widest allowed."""
    widened = [radius, min(radius * 2, MAX_SEARCH_RADIUS), MAX_SEARCH_RADIUS]
    return list(dict.fromkeys(widened))


def resolve_anchor(client: KakaoClient, area: str) -> Candidate | None:
    """Find a place with coordinates that stands for ``area``."""
    area = area.strip()
    if not area:
        return None
    queries = [area] if area.endswith("역") else [f"{area}역", area]
    for query in queries:
        places = prefer_address(client.search_places(query, size=5), SEOUL)
        for place in places:
            if place.x and place.y:
                return place
    return None


def step_queries(step: PlannedStep, region_hint: str) -> list[str]:
    """Search phrases for one planned step, most specific first."""
    area = (step.area or region_hint).strip()
    keyword = step.kakao_query.strip()
    role = step.role.strip()

    queries = [keyword]
    if area:
        queries.append(f"{area} {role}")
        if area not in keyword:
            queries.append(f"{area} {keyword or role}")
        boost = next((phrase for pattern, phrase in ROLE_BOOSTS if pattern.search(role)), "")
        if boost:
            queries.append(f"{area} {boost}")
    elif not keyword:
        queries.append(role)
    return [q for q in dict.fromkeys(queries) if q]


def _search_near(
    client: KakaoClient, query: str, center: Candidate | None, radius: int
) -> list[Candidate]:
    places = client.search_places(
        query,
        x=center.x if center else None,
        y=center.y if center else None,
        radius=radius,
    )
    return prefer_address(places, SEOUL)


def _distance(place: Candidate) -> float:
    try:
        return float(place.distance)
    except (TypeError, ValueError):
        return float("inf")


def closest_first(places: list[Candidate]) -> list[Candidate]:
    """Sort by reported distance; places without one keep their order at the end."""
    return sorted(places, key=_distance)


def find_place_for_step(
    client: KakaoClient,
    step: PlannedStep,
    anchor: Candidate | None,
    radius: int,
    used_ids: set[str],
    region_hint: str = "",
    config: AssemblyConfig = AI_ASSEMBLY_CONFIG,
    rng: Any = None,
) -> tuple[Candidate, str] | None:
    """
    Search around ``anchor`` for a real place matching ``step``.

    Every query is tried at each widening radius, first around ``anchor``
    and then around the step's own area. Returns the place and the query
    that found it, or ``None`` when nothing turned up.
    """
    rng = rng if rng is not None else random
    queries = step_queries(step, region_hint)

    def anchors():
        yield anchor
        if step.area:
            own = resolve_anchor(client, step.area)
            if own is not None and (anchor is None or own.identifier != anchor.identifier):
                yield own

    for center in anchors():
        radii = radius_trials(radius) if center is not None else [radius]
        for r in radii:
            for query in queries:
                places = search_or_empty(
                    lambda keyword: _search_near(client, keyword, center, r), query
                )
                if not places:
                    continue

                fresh = [p for p in places if p.identifier not in used_ids]
                pool = fresh or places
                # A landmark beats an empty step
                pool = filter_candidate_pool(pool, step.role, config) or pool
                picked = rng.choice(closest_first(pool)[: config.top_n])
                return picked, query

    logger.info("No place found for step %d (%s)", step.order, step.role)
    return None


def build_ai_course(
    context: UserContext,
    client: KakaoClient,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    config: AssemblyConfig = AI_ASSEMBLY_CONFIG,
    rng: Any = None,
) -> AICourse:
    """
    Plan a course with the LLM and bind every planned step to a real place.

    Steps are searched in plan order, each around the place chosen for the
    step before it. Raises ``AICourseError`` when planning fails or fewer
    than ``MIN_AI_COURSE_STEPS`` steps could be matched to places.
    """
    plan = plan_course(context, llm_config)
    if plan is None:
        raise AICourseError("AI could not plan a course")

    region_hint = context.region or ""
    first_area = plan.steps[0].area or region_hint or FALLBACK_AREA
    anchor = resolve_anchor(client, first_area) or resolve_anchor(client, FALLBACK_AREA)
    radius = search_radius(context.transport)

    used_ids: set[str] = set()
    steps: list[AICourseStep] = []
    for planned in plan.steps:
        found = find_place_for_step(
            client, planned, anchor, radius, used_ids,
            region_hint=region_hint or first_area, config=config, rng=rng,
        )
        if found is None:
            continue
        place, query = found
        used_ids.add(place.identifier)
        steps.append(
            AICourseStep(
                order=len(steps) + 1,
                role=planned.role,
                area=planned.area,
                description=planned.description,
                search_keyword=query,
                place=place,
                image_url=place_image_url(client, place),
            )
        )
        if place.x and place.y:
            anchor = place

    if len(steps) < MIN_AI_COURSE_STEPS:
        logger.warning(
            "Only %d of %d planned steps matched real places",
            len(steps), len(plan.steps),
        )
        raise AICourseError("Too many place searches failed to build a course")

    return AICourse(
        title=plan.title or "AI 맞춤 데이트 코스",
        summary=plan.summary,
        region=region_hint,
        hero_image_url=next((s.image_url for s in steps if s.image_url), None),
        steps=steps,
    )
