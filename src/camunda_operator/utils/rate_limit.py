"""Client-side throttling for outbound API calls.

Throttling only spaces calls out; it never retries. Retries and backoff belong
to kopf.
"""

from __future__ import annotations

import os
import threading
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from .. import metrics

_F = TypeVar("_F", bound=Callable[..., Any])

_K8S_RATE_LIMIT_PER_SECOND = float(os.getenv("K8S_RATE_LIMIT_PER_SECOND", "10.0"))
_CONSOLE_RATE_LIMIT_PER_SECOND = float(os.getenv("CAMUNDA_RATE_LIMIT_PER_SECOND", "5.0"))


class _Throttle:
    """Minimum-interval gate shared by every caller of one API."""

    def __init__(self, api_type: str, per_second: float) -> None:
        self.api_type = api_type
        self.min_interval = 1.0 / per_second if per_second > 0 else 0.0
        self.last_call_time = 0.0
        self._lock = threading.Lock()

    def wait(self) -> None:
        with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_call_time
            if elapsed < self.min_interval:
                metrics.api_call_total.labels(
                    api_type=self.api_type, operation="throttle", result="delayed"
                ).inc()
                time.sleep(self.min_interval - elapsed)
            self.last_call_time = time.monotonic()

    def __call__(self, func: _F) -> _F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            self.wait()
            return func(*args, **kwargs)

        return wrapper  # type: ignore


_k8s_throttle = _Throttle("k8s", _K8S_RATE_LIMIT_PER_SECOND)
_console_throttle = _Throttle("console", _CONSOLE_RATE_LIMIT_PER_SECOND)


def rate_limit_k8s(func: _F) -> _F:
    """Decorator to rate limit Kubernetes API calls."""
    return _k8s_throttle(func)


def rate_limit_console(func: _F) -> _F:
    """Decorator to rate limit Camunda Console API calls."""
    return _console_throttle(func)
