from __future__ import annotations

import os
import uuid
from typing import Any

import bcrypt

_users: dict[str, dict[str, Any]] = {}
_MAX_RECENT = 10


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": record["id"],
        "email": record["email"],
        "nickname": record["nickname"],
        "role": record["role"],
    }


def _find_by_id(user_id: str) -> dict[str, Any] | None:
    for record in _users.values():
        if record["id"] == user_id:
            return record
    return None


def create_user(
    email: str, password: str, nickname: str = "", role: str = "user",
) -> dict[str, Any] | None:
    """Register a user. Returns the public user dict, or ``None`` if the email is taken."""
    key = email.strip().lower()
    if key in _users:
        return None
    _users[key] = {
        "id": uuid.uuid4().hex,
        "email": key,
        "password_hash": _hash_password(password),
        "nickname": nickname,
        "role": role,
        "liked_courses": [],
        "recent_courses": [],
    }
    return _public(_users[key])


def authenticate(email: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, email, nickname, role}`` or ``None``."""
    record = _users.get(email.strip().lower())
    if record and _verify_password(password, record["password_hash"]):
        return _public(record)
    return None


def user_exists(user_id: str) -> bool:
    return _find_by_id(user_id) is not None


def toggle_like(user_id: str, course_id: str) -> bool | None:
    """Flip the like on a course. Returns the new state, or ``None`` for unknown users."""
    record = _find_by_id(user_id)
    if record is None:
        return None
    liked: list[str] = record["liked_courses"]
    if course_id in liked:
        liked.remove(course_id)
        return False
    liked.append(course_id)
    return True


def record_view(user_id: str, course_id: str) -> bool:
    record = _find_by_id(user_id)
    if record is None:
        return False
    recent = [cid for cid in record["recent_courses"] if cid != course_id]
    record["recent_courses"] = [course_id, *recent][:_MAX_RECENT]
    return True


def get_liked_ids(user_id: str) -> list[str] | None:
    record = _find_by_id(user_id)
    return list(record["liked_courses"]) if record else None


def get_recent_ids(user_id: str) -> list[str] | None:
    record = _find_by_id(user_id)
    return list(record["recent_courses"]) if record else None


def forget_course(course_id: str) -> None:
    """Drop a deleted course from every user's likes and recent views."""
    for record in _users.values():
        if course_id in record["liked_courses"]:
            record["liked_courses"].remove(course_id)
        record["recent_courses"] = [c for c in record["recent_courses"] if c != course_id]


def _seed_users() -> None:
    """Pre-seed the admin and a demo user on import."""
    create_user(
        os.environ.get("ADMIN_EMAIL", "admin@example.com"),
        os.environ.get("ADMIN_PASSWORD", "admin123"),
        nickname="admin",
        role="admin",
    )
    create_user("user@example.com", "user123", nickname="demo")


_seed_users()
