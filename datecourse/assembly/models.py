from __future__ import annotations

from pydantic import BaseModel, Field

from ..ranking.models import Candidate


class CategoryQuery(BaseModel):
    category: str = Field(..., min_length=1)
    keyword: str = Field(..., min_length=1)


class CourseStep(BaseModel):
    category: str
    candidate: Candidate | None = None
    order: int = Field(..., ge=1)


class Course(BaseModel):
    steps: list[CourseStep] = Field(default_factory=list)
