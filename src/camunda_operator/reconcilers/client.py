"""Reconciler for cluster API clients."""

from __future__ import annotations

import logging

from .. import metrics
from ..constants import (
    CONN_ZEEBE_ADDRESS,
    CONN_ZEEBE_AUTHORIZATION_SERVER_URL,
    CONN_ZEEBE_CLIENT_ID,
    CONN_ZEEBE_CLIENT_SECRET,
)
from ..models import ClientParameters, ManagedResource, ResourceKind
from ..utils.conditions import project_client_availability, set_availability_condition
from .base import CreationResult, ExternalReconciler, Observation

logger = logging.getLogger(__name__)


class ClientReconciler(ExternalReconciler):
    """Keeps a Client record converged with its Console API client.

    Clients are addressed by (cluster id, client id) and carry no status of
    their own: availability follows from the name matching.
    """

    kind = ResourceKind.CLIENT

    def _observe(self, record: ManagedResource) -> Observation:
        params: ClientParameters = record.parameters  # type: ignore[assignment]
        remote = self.api.get_client(params.cluster_id, record.external_name)

        availability = project_client_availability(remote.name, params.name)
        set_availability_condition(
            record.conditions,
            availability,
            f"Client name is {remote.name!r}",
            record.generation,
        )
        metrics.resource_status_total.labels(kind=self.kind.value, status=availability.value).inc()

        record.at_provider = {
            "zeebeClientId": remote.zeebe_client_id,
            "zeebeAddress": remote.zeebe_address,
            "zeebeAuthorizationServerUrl": remote.zeebe_authorization_server_url,
        }
        details = {
            CONN_ZEEBE_CLIENT_ID: remote.zeebe_client_id.encode("utf-8"),
            CONN_ZEEBE_ADDRESS: remote.zeebe_address.encode("utf-8"),
            CONN_ZEEBE_AUTHORIZATION_SERVER_URL: remote.zeebe_authorization_server_url.encode("utf-8"),
        }
        return Observation(exists=True, up_to_date=remote.name == params.name, connection_details=details)

    def _create(self, record: ManagedResource) -> CreationResult:
        params: ClientParameters = record.parameters  # type: ignore[assignment]
        created = self.api.create_client(params.cluster_id, params.name)

        # The secret is never returned again; it must reach the connection secret now
        result = CreationResult(
            connection_details={
                CONN_ZEEBE_CLIENT_ID: created.client_id.encode("utf-8"),
                CONN_ZEEBE_CLIENT_SECRET: created.client_secret.encode("utf-8"),
            }
        )
        record.external_name = created.client_id
        record.at_provider["zeebeClientId"] = created.client_id
        logger.info(f"Created client {params.name} on cluster {params.cluster_id}")
        return result

    def _delete(self, record: ManagedResource) -> None:
        params: ClientParameters = record.parameters  # type: ignore[assignment]
        self.api.delete_client(params.cluster_id, record.external_name)
        logger.info(f"Deleted client {record.external_name} from cluster {params.cluster_id}")
