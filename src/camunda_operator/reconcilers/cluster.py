"""Reconciler for Camunda SaaS clusters."""

from __future__ import annotations

import logging

from .. import metrics
from ..constants import CONN_OPERATE, CONN_OPTIMIZE, CONN_TASKLIST, CONN_ZEEBE
from ..models import ClusterParameters, ManagedResource, ResourceKind
from ..services.camunda.models import ClusterInfo, CreateClusterRequest
from ..utils.conditions import Availability, project_cluster_status, set_availability_condition
from .base import ConnectionDetails, CreationResult, ExternalReconciler, Observation

logger = logging.getLogger(__name__)


def cluster_drift(record: ManagedResource, remote: ClusterInfo) -> list[str]:
    """Return the names of the fields where the remote cluster differs.

    Catalog fields the Console does not report are not counted as drift.
    """
    params: ClusterParameters = record.parameters  # type: ignore[assignment]
    drifted = []
    if remote.name != record.name:
        drifted.append("name")
    for field_name, entry, wanted in (
        ("planType", remote.plan_type, params.plan_type),
        ("channel", remote.channel, params.channel),
        ("generation", remote.generation, params.generation),
        ("region", remote.region, params.region),
    ):
        if entry is not None and not entry.matches(wanted):
            drifted.append(field_name)
    return drifted


def cluster_connection_details(remote: ClusterInfo) -> ConnectionDetails:
    """Component endpoints of a cluster; links not yet assigned are skipped."""
    if remote.links is None:
        return {}
    details: ConnectionDetails = {}
    for key, value in (
        (CONN_OPERATE, remote.links.operate),
        (CONN_OPTIMIZE, remote.links.optimize),
        (CONN_TASKLIST, remote.links.tasklist),
        (CONN_ZEEBE, remote.links.zeebe),
    ):
        if value:
            details[key] = value.encode("utf-8")
    return details


class ClusterReconciler(ExternalReconciler):
    """Keeps a Cluster record converged with its Console cluster."""

    kind = ResourceKind.CLUSTER

    def _observe(self, record: ManagedResource) -> Observation:
        remote = self.api.get_cluster(record.external_name)

        availability = project_cluster_status(remote.zeebe_status)
        set_availability_condition(
            record.conditions,
            availability,
            f"Cluster status is {remote.zeebe_status or 'unknown'}",
            record.generation,
        )
        metrics.resource_status_total.labels(kind=self.kind.value, status=availability.value).inc()

        details = cluster_connection_details(remote)
        record.at_provider = {key: value.decode("utf-8") for key, value in details.items()}
        if remote.zeebe_status:
            record.at_provider["status"] = remote.zeebe_status

        drifted = cluster_drift(record, remote)
        if drifted:
            logger.info(f"Cluster {record.external_name} drifted in {', '.join(drifted)}")

        return Observation(exists=True, up_to_date=not drifted, connection_details=details)

    def _create(self, record: ManagedResource) -> CreationResult:
        params: ClusterParameters = record.parameters  # type: ignore[assignment]
        cluster_id = self.api.create_cluster(
            CreateClusterRequest(
                name=record.name,
                plan_type_id=params.plan_type,
                channel_id=params.channel,
                generation_id=params.generation,
                region_id=params.region,
            )
        )
        record.external_name = cluster_id
        set_availability_condition(record.conditions, Availability.CREATING, "Cluster is being created", record.generation)
        logger.info(f"Created cluster {record.name} with id {cluster_id}")
        return CreationResult()

    def _delete(self, record: ManagedResource) -> None:
        self.api.delete_cluster(record.external_name)
        logger.info(f"Deleted cluster {record.external_name}")
