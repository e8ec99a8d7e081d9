"""Utility functions for the Camunda Operator."""

from .cache import (
    get_cached_object,
    invalidate_cache,
    make_cache_key,
    set_cached_object,
)
from .conditions import (
    Availability,
    project_client_availability,
    project_cluster_status,
    update_condition,
)
from .credentials import resolve_credentials
from .events import emit_event
from .rate_limit import rate_limit_console, rate_limit_k8s
from .secrets import get_secret_bytes, publish_connection_details

__all__ = [
    "Availability",
    "project_cluster_status",
    "project_client_availability",
    "update_condition",
    "emit_event",
    "get_secret_bytes",
    "publish_connection_details",
    "resolve_credentials",
    "get_cached_object",
    "set_cached_object",
    "invalidate_cache",
    "make_cache_key",
    "rate_limit_k8s",
    "rate_limit_console",
]
