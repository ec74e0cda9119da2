from __future__ import annotations

import threading
import time

from ..ranking.models import Candidate

_DEFAULT_MAX_ENTRIES = 1000

# query key -> (expires_at, best image), oldest insertion first
_entries: dict[str, tuple[float, Candidate]] = {}
_stats = {"hits": 0, "misses": 0, "expired": 0, "evicted": 0}
# Request handlers run in a threadpool
_lock = threading.Lock()


def _key(query: str) -> str:
    # "카페  봄날" and "카페 봄날" are the same search
    return " ".join(query.split()).lower()


def _prune_locked(now: float) -> int:
    stale = [key for key, (expires_at, _) in _entries.items() if now >= expires_at]
    for key in stale:
        _entries.pop(key, None)
    _stats["expired"] += len(stale)
    return len(stale)


def cache_get(query: str) -> Candidate | None:
    key = _key(query)
    with _lock:
        entry = _entries.get(key)
        if entry is None:
            _stats["misses"] += 1
            return None
        expires_at, image = entry
        if time.time() >= expires_at:
            _entries.pop(key, None)
            _stats["expired"] += 1
            _stats["misses"] += 1
            return None
        _stats["hits"] += 1
        return image


def cache_set(
    query: str,
    image: Candidate,
    ttl: float,
    max_entries: int = _DEFAULT_MAX_ENTRIES,
) -> None:
    """Store ``image`` for ``query``; expired entries go first, then the oldest."""
    key = _key(query)
    with _lock:
        _prune_locked(time.time())
        _entries.pop(key, None)
        _entries[key] = (time.time() + ttl, image)
        while len(_entries) > max(1, max_entries):
            _entries.pop(next(iter(_entries)))
            _stats["evicted"] += 1


def prune_expired() -> int:
    """Drop expired entries and return how many were removed."""
    with _lock:
        return _prune_locked(time.time())


def get_cache_stats() -> dict:
    with _lock:
        _prune_locked(time.time())
        lookups = _stats["hits"] + _stats["misses"]
        return {
            "size": len(_entries),
            **_stats,
            "hit_rate": round(_stats["hits"] / lookups * 100, 1) if lookups else 0.0,
        }


def clear_cache() -> None:
    with _lock:
        _entries.clear()
        for name in _stats:
            _stats[name] = 0
