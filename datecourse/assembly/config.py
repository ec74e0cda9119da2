from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CategoryPatterns:
    include: re.Pattern[str] | None = None
    exclude: re.Pattern[str] | None = None

    def accepts(self, name: str) -> bool:
        if self.include is not None and not self.include.search(name):
            return False
        if self.exclude is not None and self.exclude.search(name):
            return False
        return True


# Study rooms and cram schools pollute "cafe" searches
STUDY_VENUE_PATTERN = re.compile(r"스터디|독서실|학원|공부")

CAFE_NAME_PATTERN = re.compile(r"카페|커피|디저트|베이커리|로스터리|coffee|cafe", re.IGNORECASE)

# Streets, stations and squares are waypoints, not places to spend time
LANDMARK_NAME_PATTERN = re.compile(
    r"(거리|역|공원|한강|주차장|출구|광장|사거리|교차로|입구|정류장|환승센터)$"
)

DEFAULT_CATEGORY_PATTERNS: dict[str, CategoryPatterns] = {
    "cafe": CategoryPatterns(include=CAFE_NAME_PATTERN),
    "food": CategoryPatterns(exclude=CAFE_NAME_PATTERN),
    "activity": CategoryPatterns(exclude=LANDMARK_NAME_PATTERN),
}


@dataclass(frozen=True)
class AssemblyConfig:
    deny_name_pattern: re.Pattern[str] | None = STUDY_VENUE_PATTERN
    category_name_patterns: Mapping[str, CategoryPatterns] = field(
        default_factory=lambda: dict(DEFAULT_CATEGORY_PATTERNS)
    )
    top_n: int = 5
    search_timeout: float | None = 5.0
    max_workers: int = 4

    def __post_init__(self) -> None:
        if self.top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {self.top_n}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")


DEFAULT_ASSEMBLY_CONFIG = AssemblyConfig()
