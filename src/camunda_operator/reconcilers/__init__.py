"""Per-kind external reconcilers."""

from __future__ import annotations

from ..models import ResourceKind
from ..services.camunda.base import ConsoleAPI
from .base import CreationResult, ExternalReconciler, Observation, UpdateResult
from .client import ClientReconciler
from .cluster import ClusterReconciler

RECONCILERS: dict[ResourceKind, type[ExternalReconciler]] = {
    ResourceKind.CLUSTER: ClusterReconciler,
    ResourceKind.CLIENT: ClientReconciler,
}


def reconciler_for(kind: ResourceKind, api: ConsoleAPI, delete_policy: str | None = None) -> ExternalReconciler:
    """Return the reconciler registered for ``kind``, bound to ``api``."""
    return RECONCILERS[kind](api, delete_policy=delete_policy)


__all__ = [
    "RECONCILERS",
    "reconciler_for",
    "ExternalReconciler",
    "ClusterReconciler",
    "ClientReconciler",
    "Observation",
    "CreationResult",
    "UpdateResult",
]
