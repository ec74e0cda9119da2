from __future__ import annotations

import logging
import os

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import require_admin, require_user
from .auth.models import LoginRequest, RegisterRequest
from .auth.users import (
    authenticate,
    create_user,
    forget_course,
    get_liked_ids,
    get_recent_ids,
    record_view,
    toggle_like,
)
from .courses import store
from .courses.ai import AICourseError, build_ai_course
from .courses.auto import generate_auto_course
from .courses.models import (
    AICourse,
    ApproveRequest,
    AutoCourse,
    AutoCourseSave,
    CourseCreate,
    CourseRecord,
    CourseUpdate,
    LikeResponse,
)
from .courses.regions import SEOUL_REGIONS, Region, get_region
from .kakao.cache import get_cache_stats
from .kakao.client import KakaoClient, KakaoConfigError, get_kakao_client
from .kakao.images import find_best_image
from .llm.models import UserContext
from .ranking.models import Candidate

logger = logging.getLogger(__name__)

app = FastAPI(title="Date Course Recommendation API", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=os.environ.get("SESSION_SECRET", "datecourse-secret-change-in-production"),
)


def _kakao_unavailable(exc: KakaoConfigError) -> HTTPException:
    logger.error("Kakao search is not configured: %s", exc)
    return HTTPException(status_code=503, detail="Place search is not configured")


def _course_or_404(course_id: str) -> CourseRecord:
    course = store.get_course(course_id)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


def _owned_course(course_id: str, user: dict) -> CourseRecord:
    course = _course_or_404(course_id)
    if course.owner != user["id"]:
        raise HTTPException(status_code=403, detail="Not the owner of this course")
    return course


def _delete(course_id: str) -> dict:
    store.delete_course(course_id)
    forget_course(course_id)
    return {"status": "deleted", "id": course_id}


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/regions", response_model=list[Region])
def regions() -> list[Region]:
    return SEOUL_REGIONS


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/register", status_code=201)
def register(body: RegisterRequest) -> dict:
    user = create_user(body.email, body.password, nickname=body.nickname)
    if user is None:
        raise HTTPException(status_code=409, detail="Email already registered")
    return user


@app.post("/auth/login")
def login(body: LoginRequest, request: Request) -> dict:
    user = authenticate(body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    request.session["user"] = user
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_user)) -> dict:
    return user


# ── Course endpoints ─────────────────────────────────────────────────────


@app.post("/courses", response_model=CourseRecord, status_code=201)
def create_course(body: CourseCreate, user: dict = Depends(require_user)) -> CourseRecord:
    return store.create_course(body, owner=user["id"])


@app.get("/courses", response_model=list[CourseRecord])
def list_courses() -> list[CourseRecord]:
    return store.list_courses()


@app.get("/courses/mine", response_model=list[CourseRecord])
def my_courses(user: dict = Depends(require_user)) -> list[CourseRecord]:
    return store.list_by_owner(user["id"])


@app.get("/courses/liked/me", response_model=list[CourseRecord])
def liked_courses(user: dict = Depends(require_user)) -> list[CourseRecord]:
    return store.resolve_ids(get_liked_ids(user["id"]) or [])


@app.get("/courses/recent/me", response_model=list[CourseRecord])
def recent_courses(user: dict = Depends(require_user)) -> list[CourseRecord]:
    return store.resolve_ids(get_recent_ids(user["id"]) or [])


@app.post("/courses/auto", response_model=CourseRecord, status_code=201)
def save_auto_course(body: AutoCourseSave, user: dict = Depends(require_user)) -> CourseRecord:
    return store.save_auto_course(body, owner=user["id"])


@app.get("/courses/{course_id}", response_model=CourseRecord)
def get_course(course_id: str) -> CourseRecord:
    return _course_or_404(course_id)


@app.put("/courses/{course_id}", response_model=CourseRecord)
def update_course(
    course_id: str,
    body: CourseUpdate,
    user: dict = Depends(require_user),
) -> CourseRecord:
    _owned_course(course_id, user)
    return store.update_course(course_id, body)


@app.delete("/courses/{course_id}")
def delete_course(course_id: str, user: dict = Depends(require_user)) -> dict:
    _owned_course(course_id, user)
    return _delete(course_id)


@app.post("/courses/{course_id}/like", response_model=LikeResponse)
def like_course(course_id: str, user: dict = Depends(require_user)) -> LikeResponse:
    _course_or_404(course_id)
    liked = toggle_like(user["id"], course_id)
    return LikeResponse(liked=liked, likes_count=store.adjust_likes(course_id, liked))


@app.post("/courses/{course_id}/view")
def view_course(course_id: str, user: dict = Depends(require_user)) -> dict:
    _course_or_404(course_id)
    record_view(user["id"], course_id)
    return {"ok": True}


# ── Recommendation endpoints ─────────────────────────────────────────────


@app.get("/random", response_model=CourseRecord | None)
def random_course(city: str | None = None) -> CourseRecord | None:
    return store.random_course(city)


@app.get("/recommend", response_model=list[CourseRecord])
def recommend(city: str | None = None) -> list[CourseRecord]:
    if not city or city == "all":
        raise HTTPException(status_code=400, detail="city query parameter is required")
    return store.recommend_courses(city)


@app.get("/auto-course", response_model=AutoCourse)
def auto_course(
    city: str = Query(..., min_length=1),
    client: KakaoClient = Depends(get_kakao_client),
) -> AutoCourse:
    region = get_region(city)
    if region is None:
        raise HTTPException(status_code=404, detail=f"Unknown region: {city}")
    try:
        course = generate_auto_course(region, client)
    except KakaoConfigError as exc:
        raise _kakao_unavailable(exc) from exc
    if course is None:
        raise HTTPException(status_code=404, detail="Could not build a course for this area")
    return course


@app.post("/ai/recommend-course", response_model=AICourse)
def ai_recommend_course(
    body: UserContext,
    client: KakaoClient = Depends(get_kakao_client),
) -> AICourse:
    try:
        return build_ai_course(body, client)
    except KakaoConfigError as exc:
        raise _kakao_unavailable(exc) from exc
    except AICourseError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc


# ── Kakao proxy endpoints ────────────────────────────────────────────────


@app.get("/kakao/search", response_model=list[Candidate])
def kakao_search(
    query: str = Query(..., min_length=1),
    x: str | None = None,
    y: str | None = None,
    radius: int = Query(default=5000, ge=0, le=20000),
    size: int = Query(default=15, ge=1, le=15),
    client: KakaoClient = Depends(get_kakao_client),
) -> list[Candidate]:
    try:
        return client.search_places(query, x=x, y=y, radius=radius, size=size)
    except KakaoConfigError as exc:
        raise _kakao_unavailable(exc) from exc


@app.get("/images/best", response_model=Candidate | None)
def best_image(
    query: str = Query(..., min_length=1),
    client: KakaoClient = Depends(get_kakao_client),
) -> Candidate | None:
    try:
        return find_best_image(client, query)
    except KakaoConfigError as exc:
        raise _kakao_unavailable(exc) from exc


# ── Admin endpoints ──────────────────────────────────────────────────────


@app.get("/admin/courses", response_model=list[CourseRecord])
def admin_courses(user: dict = Depends(require_admin)) -> list[CourseRecord]:
    return store.list_courses()


@app.get("/admin/courses/pending", response_model=list[CourseRecord])
def admin_pending_courses(user: dict = Depends(require_admin)) -> list[CourseRecord]:
    return store.list_courses(approved=False)


@app.patch("/admin/courses/{course_id}/approve", response_model=CourseRecord)
def admin_approve_course(
    course_id: str,
    body: ApproveRequest,
    user: dict = Depends(require_admin),
) -> CourseRecord:
    course = store.set_approved(course_id, body.approved)
    if course is None:
        raise HTTPException(status_code=404, detail="Course not found")
    return course


@app.delete("/admin/courses/{course_id}")
def admin_delete_course(course_id: str, user: dict = Depends(require_admin)) -> dict:
    _course_or_404(course_id)
    return _delete(course_id)


@app.get("/cache/stats")
def cache_stats(user: dict = Depends(require_admin)) -> dict:
    return get_cache_stats()
