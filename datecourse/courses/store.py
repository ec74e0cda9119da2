from __future__ import annotations

import random
import time
import uuid
from typing import Any

from .models import AutoCourseSave, CourseCreate, CourseRecord, CourseUpdate, StepIn

_courses: dict[str, CourseRecord] = {}

RECOMMEND_LIMIT = 5


def _newest_first(records: list[CourseRecord]) -> list[CourseRecord]:
    return sorted(records, key=lambda c: c.created_at, reverse=True)


def create_course(body: CourseCreate, owner: str) -> CourseRecord:
    """Store a user-authored course. It stays unapproved until an admin approves it."""
    record = CourseRecord(
        id=uuid.uuid4().hex,
        owner=owner,
        approved=False,
        source_type="user",
        created_at=time.time(),
        **body.model_dump(),
    )
    _courses[record.id] = record
    return record


def save_auto_course(body: AutoCourseSave, owner: str) -> CourseRecord:
    steps = [
        StepIn(
            title=step.title or "코스",
            place=step.place.display_name,
            address=step.place.road_address or step.place.address,
            kakao_place_id=step.place.identifier,
            kakao_url=step.place.url,
        )
        for step in body.steps
    ]
    record = CourseRecord(
        id=uuid.uuid4().hex,
        title=body.title,
        city=body.city,
        mood=body.mood or "자동 생성",
        hero_image_url=body.hero_image_url or "",
        steps=steps,
        owner=owner,
        approved=True,
        source_type="auto",
        generated_from=f"kakao:{body.city}",
        created_at=time.time(),
    )
    _courses[record.id] = record
    return record


def get_course(course_id: str) -> CourseRecord | None:
    return _courses.get(course_id)


def list_courses(approved: bool | None = None) -> list[CourseRecord]:
    records = list(_courses.values())
    if approved is not None:
        records = [c for c in records if c.approved == approved]
    return _newest_first(records)


def list_by_owner(owner: str) -> list[CourseRecord]:
    return _newest_first([c for c in _courses.values() if c.owner == owner])


def resolve_ids(course_ids: list[str]) -> list[CourseRecord]:
    """Return the stored courses for ``course_ids`` in that order, skipping deleted ones."""
    return [_courses[cid] for cid in course_ids if cid in _courses]


def update_course(course_id: str, body: CourseUpdate) -> CourseRecord | None:
    record = _courses.get(course_id)
    if record is None:
        return None
    changes = body.model_dump(exclude_none=True)
    updated = record.model_copy(update=changes)
    _courses[course_id] = updated
    return updated


def delete_course(course_id: str) -> bool:
    return _courses.pop(course_id, None) is not None


def set_approved(course_id: str, approved: bool) -> CourseRecord | None:
    record = _courses.get(course_id)
    if record is None:
        return None
    record.approved = approved
    return record


def adjust_likes(course_id: str, liked: bool) -> int:
    record = _courses[course_id]
    record.likes_count = max(0, record.likes_count + (1 if liked else -1))
    return record.likes_count


def random_course(city: str | None = None, rng: Any = None) -> CourseRecord | None:
    """Pick one course at random, optionally within a city. ``None`` if nothing matches."""
    rng = rng if rng is not None else random
    records = [c for c in _courses.values() if not city or c.city == city]
    if not records:
        return None
    return rng.choice(records)


def recommend_courses(city: str, limit: int = RECOMMEND_LIMIT, rng: Any = None) -> list[CourseRecord]:
    """Return up to ``limit`` courses of ``city`` in random order."""
    rng = rng if rng is not None else random
    records = [c for c in _courses.values() if c.city == city]
    return rng.sample(records, k=min(limit, len(records)))


def clear_courses() -> None:
    _courses.clear()
