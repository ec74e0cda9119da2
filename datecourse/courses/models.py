from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from ..ranking.models import Candidate

MAX_STEPS = 4


class StepIn(BaseModel):
    title: str = ""
    place: str = Field(..., min_length=1)
    memo: str = ""
    time: str = ""
    budget: int = Field(default=0, ge=0)
    address: str = ""
    kakao_place_id: str = ""
    kakao_url: str = ""


class CourseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    mood: str = ""
    hero_image_url: str = ""
    steps: list[StepIn] = Field(..., min_length=1, max_length=MAX_STEPS)


class CourseUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1)
    mood: str | None = None
    hero_image_url: str | None = None


class CourseRecord(BaseModel):
    id: str
    title: str
    city: str
    mood: str = ""
    hero_image_url: str = ""
    steps: list[StepIn]
    owner: str
    likes_count: int = 0
    approved: bool = True
    source_type: Literal["user", "auto"] = "user"
    generated_from: str = ""
    created_at: float


class ApproveRequest(BaseModel):
    approved: bool


class LikeResponse(BaseModel):
    liked: bool
    likes_count: int


# ── Automatic / AI courses ───────────────────────────────────────────────


class AutoCourseStep(BaseModel):
    order: int = Field(..., ge=1)
    category: str
    title: str
    place: Candidate
    image_url: str | None = None


class AutoCourse(BaseModel):
    title: str
    city: str
    mood: str = "자동 생성"
    hero_image_url: str | None = None
    steps: list[AutoCourseStep]


class AutoCourseSave(BaseModel):
    title: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    mood: str = ""
    hero_image_url: str | None = None
    steps: list[AutoCourseStep] = Field(..., min_length=1, max_length=MAX_STEPS)


class AICourseStep(BaseModel):
    order: int = Field(..., ge=1)
    role: str
    area: str = ""
    description: str = ""
    search_keyword: str
    place: Candidate
    image_url: str | None = None


class AICourse(BaseModel):
    title: str
    summary: str
    region: str = ""
    hero_image_url: str | None = None
    steps: list[AICourseStep]
