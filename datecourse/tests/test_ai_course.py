from unittest.mock import patch

import pytest

from datecourse.courses.ai import (
    AICourseError,
    build_ai_course,
    radius_trials,
    resolve_anchor,
    search_radius,
    step_queries,
)
from datecourse.kakao.cache import clear_cache
from datecourse.llm.models import CoursePlan, PlannedStep, UserContext

from fakes import FakeKakaoClient, seoul_place

PLAN = CoursePlan(
    title="성수 데이트",
    summary="카페에서 시작해 저녁까지",
    steps=[
        PlannedStep(order=1, role="카페", area="성수", kakao_query="성수 감성 카페"),
        PlannedStep(order=2, role="식사", area="성수", kakao_query="성수 파스타"),
        PlannedStep(order=3, role="산책", area="성수", kakao_query="서울숲"),
    ],
)


def _client(**extra_places):
    places = {
        "성수역": [seoul_place("st", "성수역 2호선", x="127.05", y="37.54")],
        "성수 감성 카페": [seoul_place("c1", "성수 카페 온"), seoul_place("c2", "카페 둘")],
        "성수 파스타": [seoul_place("f1", "성수 파스타집", x="127.06", y="37.55")],
        "서울숲": [],
    }
    places.update(extra_places)
    return FakeKakaoClient(places=places)


class RadiusLimitedClient(FakeKakaoClient):
    """Only answers place searches at or beyond ``min_radius``."""

    def __init__(self, min_radius, **kwargs):
        super().__init__(**kwargs)
        self.min_radius = min_radius

    def search_places(self, query, x=None, y=None, radius=None, size=None):
        places = super().search_places(query, x=x, y=y, radius=radius, size=size)
        if x is not None and (radius or 0) < self.min_radius:
            return []
        return places


class AnchoredClient(FakeKakaoClient):
    """Serves ``query`` results only when searched around the given x."""

    def __init__(self, anchored, **kwargs):
        super().__init__(**kwargs)
        self.anchored = anchored

    def search_places(self, query, x=None, y=None, radius=None, size=None):
        places = super().search_places(query, x=x, y=y, radius=radius, size=size)
        if query in self.anchored:
            required_x, results = self.anchored[query]
            return list(results) if x == required_x else []
        return places


def test_search_radius_by_transport():
    assert search_radius("도보") == 2000
    assert search_radius("지하철") == 5000
    assert search_radius("자차") == 7000
    assert search_radius(None) == 7000


def test_radius_trials_widen_up_to_limit():
    assert radius_trials(2000) == [2000, 4000, 10000]
    assert radius_trials(7000) == [7000, 10000]


def test_step_queries_add_area_and_role_boost():
    step = PlannedStep(order=1, role="카페", area="성수", kakao_query="브런치")
    assert step_queries(step, "") == ["브런치", "성수 카페", "성수 브런치", "성수 감성 카페"]


def test_step_queries_use_region_hint_without_area():
    step = PlannedStep(order=1, role="산책", kakao_query="")
    assert step_queries(step, "홍대") == ["홍대 산책", "홍대 산책로"]


def test_resolve_anchor_prefers_station():
    anchor = resolve_anchor(_client(), "성수")
    assert anchor.identifier == "st"


@patch("datecourse.courses.ai.plan_course", return_value=PLAN)
def test_build_ai_course_binds_places_near_anchor(mock_plan):
    clear_cache()
    client = _client()

    course = build_ai_course(UserContext(transport="도보", region="성수"), client)

    assert course.title == "성수 데이트"
    assert [(s.order, s.role) for s in course.steps] == [(1, "카페"), (2, "식사")]
    assert course.steps[0].place.identifier == "c1"
    assert course.steps[1].search_keyword == "성수 파스타"

    first_calls = [c for c in client.place_calls if c["query"] == "성수 감성 카페"]
    assert first_calls[0]["x"] == "127.05"
    assert first_calls[0]["radius"] == 2000


@patch("datecourse.courses.ai.plan_course", return_value=PLAN)
def test_each_step_is_searched_around_the_previous_place(mock_plan):
    clear_cache()
    client = _client()

    build_ai_course(UserContext(transport="도보", region="성수"), client)

    # c1 sits at the default fake coordinates
    second_calls = [c for c in client.place_calls if c["query"] == "성수 파스타"]
    assert second_calls[0]["x"] == "127.0"
    third_calls = [c for c in client.place_calls if c["query"] == "서울숲"]
    assert third_calls[0]["x"] == "127.06"


@patch("datecourse.courses.ai.plan_course", return_value=PLAN)
def test_closest_place_is_picked(mock_plan):
    clear_cache()
    client = _client(**{
        "성수 감성 카페": [
            seoul_place("far", "카페 멀리", distance="4800"),
            seoul_place("near", "카페 가까이", distance="150"),
            seoul_place("unknown", "카페 어딘가"),
        ],
    })

    course = build_ai_course(UserContext(transport="도보", region="성수"), client)

    assert course.steps[0].place.identifier == "near"


@patch("datecourse.courses.ai.plan_course")
def test_duplicate_roles_keep_their_own_details(mock_plan):
    clear_cache()
    mock_plan.return_value = CoursePlan(
        title="카페 투어",
        steps=[
            PlannedStep(order=1, role="카페", area="성수", kakao_query="브런치 카페", description="brunch"),
            PlannedStep(order=2, role="카페", area="성수", kakao_query="디저트 카페", description="dessert"),
            PlannedStep(order=3, role="식사", area="성수", kakao_query="성수 파스타", description="dinner"),
        ],
    )
    client = _client(**{
        "성수 감성 카페": [],
        "디저트 카페": [seoul_place("d1", "디저트 하우스")],
    })

    course = build_ai_course(UserContext(transport="도보", region="성수"), client)

    first = course.steps[0]
    assert first.order == 1
    assert first.place.identifier == "d1"
    assert first.search_keyword == "디저트 카페"
    assert first.description == "dessert"
    assert [s.description for s in course.steps] == ["dessert", "dinner"]


@patch("datecourse.courses.ai.plan_course", return_value=PLAN)
def test_search_radius_widens_when_nothing_is_near(mock_plan):
    clear_cache()
    client = RadiusLimitedClient(
        min_radius=10000,
        places={
            "성수역": [seoul_place("st", "성수역 2호선", x="127.05", y="37.54")],
            "성수 감성 카페": [seoul_place("c1", "성수 카페 온")],
            "성수 파스타": [seoul_place("f1", "성수 파스타집")],
        },
    )

    course = build_ai_course(UserContext(transport="도보", region="성수"), client)

    assert [s.place.identifier for s in course.steps] == ["c1", "f1"]
    radii = [c["radius"] for c in client.place_calls if c["query"] == "성수 감성 카페"]
    assert radii == [2000, 4000, 10000]


@patch("datecourse.courses.ai.plan_course")
def test_step_area_anchor_is_tried_after_current_anchor(mock_plan):
    clear_cache()
    mock_plan.return_value = CoursePlan(
        steps=[
            PlannedStep(order=1, role="카페", area="성수", kakao_query="성수 감성 카페"),
            PlannedStep(order=2, role="식사", area="홍대", kakao_query="홍대 파스타"),
        ],
    )
    client = AnchoredClient(
        anchored={"홍대 파스타": ("126.92", [seoul_place("h1", "홍대 파스타집")])},
        places={
            "성수역": [seoul_place("st", "성수역 2호선", x="127.05", y="37.54")],
            "홍대역": [seoul_place("hs", "홍대입구역", x="126.92", y="37.55")],
            "성수 감성 카페": [seoul_place("c1", "성수 카페 온")],
        },
    )

    course = build_ai_course(UserContext(transport="도보"), client)

    assert [s.place.identifier for s in course.steps] == ["c1", "h1"]
    xs = [c["x"] for c in client.place_calls if c["query"] == "홍대 파스타"]
    assert xs[0] == "127.0"
    assert xs[-1] == "126.92"


@patch("datecourse.courses.ai.plan_course", return_value=None)
def test_build_ai_course_fails_without_plan(mock_plan):
    with pytest.raises(AICourseError):
        build_ai_course(UserContext(), _client())


@patch("datecourse.courses.ai.plan_course", return_value=PLAN)
def test_build_ai_course_needs_two_places(mock_plan):
    client = FakeKakaoClient(places={"성수 감성 카페": [seoul_place("c1", "성수 카페 온")]})
    with pytest.raises(AICourseError):
        build_ai_course(UserContext(), client)
