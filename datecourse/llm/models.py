from __future__ import annotations

from pydantic import BaseModel, Field


class UserContext(BaseModel):
    companion: str | None = Field(default=None, description="연인 / 친구 / 혼자 / 동료")
    mood: str | None = Field(default=None, description="설렘 / 편안 / 활동적 / 힐링 / 분위기")
    weather: str | None = Field(default=None, description="맑음 / 흐림 / 비 / 눈")
    budget: int | None = Field(default=None, ge=0, description="Budget per person in KRW")
    transport: str | None = Field(default=None, description="도보 / 대중교통 / 자차")
    region: str | None = None


class PlannedStep(BaseModel):
    order: int = Field(..., ge=1)
    role: str = Field(..., min_length=1)
    area: str = ""
    kakao_query: str = ""
    description: str = ""


class CoursePlan(BaseModel):
    title: str = ""
    summary: str = ""
    steps: list[PlannedStep] = Field(default_factory=list)
