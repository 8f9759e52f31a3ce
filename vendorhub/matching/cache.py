from __future__ import annotations

import hashlib
import json
import threading
import time
from typing import Any

from ..config import DEFAULT_APP_CONFIG

# key -> (created_at, store revision, value)
_cache: dict[str, tuple[float, int, Any]] = {}
_lock = threading.Lock()
_stats = {"hits": 0, "misses": 0}


def _make_key(criteria_dict: dict) -> str:
    normalized = json.dumps(criteria_dict, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def cache_get(
    criteria_dict: dict,
    revision: int,
    ttl: float = DEFAULT_APP_CONFIG.match_cache_ttl,
) -> Any | None:
    """Return the result cached for these criteria at this store revision, or ``None``."""
    key = _make_key(criteria_dict)
    with _lock:
        entry = _cache.get(key)
        if entry is not None and entry[1] == revision and time.time() - entry[0] < ttl:
            _stats["hits"] += 1
            return entry[2]
        _cache.pop(key, None)
        _stats["misses"] += 1
    return None


def cache_set(criteria_dict: dict, revision: int, value: Any) -> None:
    """Cache ``value``; entries computed at any other revision are dropped."""
    with _lock:
        stale = [k for k, (_, rev, _) in _cache.items() if rev != revision]
        for k in stale:
            del _cache[k]
        _cache[_make_key(criteria_dict)] = (time.time(), revision, value)


def get_cache_stats() -> dict:
    with _lock:
        hits, misses, size = _stats["hits"], _stats["misses"], len(_cache)
    total = hits + misses
    return {
        "size": size,
        "hits": hits,
        "misses": misses,
        "hit_rate": round(hits / total * 100, 1) if total else 0.0,
    }


def clear_cache() -> None:
    with _lock:
        _cache.clear()
        _stats.update(hits=0, misses=0)
