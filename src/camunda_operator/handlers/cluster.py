"""Handler for Cluster CRD."""

from __future__ import annotations

import os
from typing import Any

import kopf

from ..constants import API_GROUP_VERSION, KIND_CLUSTER
from ..models import ResourceKind
from .base import ManagedHandler

_POLL_INTERVAL_SECONDS = float(os.getenv("CAMUNDA_POLL_INTERVAL_SECONDS", "60"))

# Global handler instance
_handler = ManagedHandler(ResourceKind.CLUSTER)


@kopf.on.create(API_GROUP_VERSION, KIND_CLUSTER)
@kopf.on.update(API_GROUP_VERSION, KIND_CLUSTER)
@kopf.on.resume(API_GROUP_VERSION, KIND_CLUSTER)
@kopf.timer(API_GROUP_VERSION, KIND_CLUSTER, interval=_POLL_INTERVAL_SECONDS, idle=_POLL_INTERVAL_SECONDS)
def handle_cluster(
    body: dict[str, Any],
    meta: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Cluster resource reconciliation."""
    _handler.ensure_finalizer(meta, patch)
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, patch))


@kopf.on.delete(API_GROUP_VERSION, KIND_CLUSTER)
def handle_cluster_delete(
    body: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle Cluster resource deletion."""
    _handler.delete(body, patch)
