from __future__ import annotations

from pydantic import BaseModel


class Region(BaseModel):
    id: str
    label: str
    keywords: list[str]

    @property
    def search_keyword(self) -> str:
        return self.keywords[0]


SEOUL_REGIONS: list[Region] = [
    Region(id="all", label="서울 전체", keywords=["서울"]),
    Region(id="gangnam", label="강남/삼성/신사/압구정", keywords=["강남", "삼성", "신사", "압구정"]),
    Region(id="seochogangnam", label="서초/교대/고터/사당", keywords=["서초", "교대", "고터", "사당"]),
    Region(id="songpa", label="잠실/송파/강동", keywords=["잠실", "송파", "강동"]),
    Region(id="hongdae", label="홍대/신촌/마포/연남", keywords=["홍대", "신촌", "마포", "연남"]),
    Region(id="yeouido", label="여의도/영등포", keywords=["여의도", "영등포"]),
    Region(id="yongsan", label="용산/이태원", keywords=["용산", "이태원"]),
    Region(id="jongno", label="종로/경복궁/혜화", keywords=["종로", "경복궁", "혜화"]),
]

_BY_ID = {region.id: region for region in SEOUL_REGIONS}


def get_region(region_id: str) -> Region | None:
    return _BY_ID.get(region_id)
