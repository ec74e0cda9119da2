from __future__ import annotations

from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

UNKNOWN_NAME = "unknown"


class Candidate(BaseModel):
    """One place or image returned by a keyword search."""

    identifier: str
    name: str | None = None
    url: str = ""
    image_url: str | None = None
    width: int = 0
    height: int = 0

    # Place metadata, empty for image results
    address: str = ""
    road_address: str = ""
    category_name: str = ""
    phone: str = ""
    x: str | None = None
    y: str | None = None
    distance: str | None = None

    @field_validator("identifier", mode="before")
    @classmethod
    def _identifier_to_str(cls, value: object) -> str:
        return "" if value is None else str(value)

    @field_validator("width", "height", mode="before")
    @classmethod
    def _unknown_dimension_is_zero(cls, value: object) -> int:
        # Negative, missing or garbage dimensions all mean "unknown".
        try:
            number = int(float(value))  # type: ignore[arg-type]
        except (TypeError, ValueError, OverflowError):
            return 0
        return max(0, number)

    @property
    def source_domain(self) -> str:
        if not self.image_url:
            return ""
        return (urlparse(self.image_url).hostname or "").lower()

    @property
    def display_name(self) -> str:
        return self.name or UNKNOWN_NAME
