from __future__ import annotations

from fastapi import HTTPException, Request

from .users import user_exists


def _session_user(request: Request) -> dict | None:
    user = request.session.get("user")
    # A session can outlive the account it was issued for
    if user and not user_exists(user.get("id", "")):
        request.session.pop("user", None)
        return None
    return user


def require_user(request: Request) -> dict:
    """Raise 401 unless a known user is logged in."""
    user = _session_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(request: Request) -> dict:
    """Raise 401 if not logged in, 403 if not admin."""
    user = require_user(request)
    if user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
