"""TTL cache for Kubernetes lookups shared across reconciliation workers."""

from __future__ import annotations

import os
import threading
import time
from typing import Any, Optional

_cache: dict[str, tuple[Any, float]] = {}
_lock = threading.Lock()
_cache_ttl: float = float(os.getenv("K8S_CACHE_TTL_SECONDS", "30.0"))


def get_cached_object(key: str) -> Optional[Any]:
    """Return the cached object for ``key``, or None if missing or expired."""
    with _lock:
        entry = _cache.get(key)
        if entry is None:
            return None
        obj, stored_at = entry
        if time.monotonic() - stored_at > _cache_ttl:
            del _cache[key]
            return None
        return obj


def set_cached_object(key: str, obj: Any) -> None:
    """Store ``obj`` under ``key``."""
    with _lock:
        _cache[key] = (obj, time.monotonic())


def invalidate_cache(pattern: Optional[str] = None) -> None:
    """Drop every entry, or only the entries whose key contains ``pattern``."""
    with _lock:
        if pattern is None:
            _cache.clear()
            return
        for key in [k for k in _cache if pattern in k]:
            del _cache[key]


def make_cache_key(kind: str, name: str, namespace: str = "") -> str:
    """Create a cache key for a Kubernetes object.

    Cluster-scoped objects such as ProviderConfig leave ``namespace`` empty.
    """
    return f"{kind}:{namespace}:{name}"
