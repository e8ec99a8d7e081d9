"""Kubernetes API access shared by handlers and the connector."""

from __future__ import annotations

import threading
import time
from typing import Any

from kubernetes import client, config

from .. import metrics
from ..constants import API_GROUP, API_VERSION, KIND_PROVIDER_CONFIG, PLURAL_PROVIDER_CONFIGS
from .cache import get_cached_object, make_cache_key, set_cached_object
from .rate_limit import rate_limit_k8s

_config_loaded = False
_config_lock = threading.Lock()


def load_kube_config() -> None:
    """Load in-cluster config, falling back to the local kubeconfig (once per process)."""
    global _config_loaded
    with _config_lock:
        if _config_loaded:
            return
        try:
            config.load_incluster_config()
        except config.ConfigException:
            config.load_kube_config()
        _config_loaded = True


def get_core_api() -> client.CoreV1Api:
    """Get Kubernetes CoreV1Api client."""
    load_kube_config()
    return client.CoreV1Api()


def get_custom_objects_api() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client."""
    load_kube_config()
    return client.CustomObjectsApi()


def get_provider_config_with_cache(api: Any, name: str) -> dict[str, Any]:
    """Get a cluster-scoped ProviderConfig, caching it for a short TTL.

    Raises:
        client.exceptions.ApiException: If the config is missing or the API fails
    """
    cache_key = make_cache_key(KIND_PROVIDER_CONFIG, name)
    cached = get_cached_object(cache_key)
    if cached is not None:
        metrics.api_call_total.labels(api_type="k8s", operation="get_provider_config", result="cache_hit").inc()
        return cached

    start_time = time.time()
    try:
        obj = rate_limit_k8s(api.get_cluster_custom_object)(
            group=API_GROUP,
            version=API_VERSION,
            plural=PLURAL_PROVIDER_CONFIGS,
            name=name,
        )
        metrics.api_call_total.labels(api_type="k8s", operation="get_provider_config", result="success").inc()
        set_cached_object(cache_key, obj)
        return obj
    except Exception:
        metrics.api_call_total.labels(api_type="k8s", operation="get_provider_config", result="error").inc()
        raise
    finally:
        metrics.api_call_duration_seconds.labels(api_type="k8s", operation="get_provider_config").observe(
            time.time() - start_time
        )
