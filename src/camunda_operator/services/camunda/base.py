"""Camunda Console API interface the reconcilers depend on."""

from __future__ import annotations

from typing import Protocol

from .models import ClientInfo, ClusterInfo, CreateClusterRequest, CreatedClient


class ConsoleAPI(Protocol):
    """Protocol defining the Console operations used by the reconcilers.

    Lookups raise ``RemoteNotFoundError`` for missing resources and
    ``RemoteAPIError`` for every other failure.
    """

    def get_cluster(self, cluster_id: str) -> ClusterInfo:
        """Get a cluster by id."""
        ...

    def create_cluster(self, request: CreateClusterRequest) -> str:
        """Create a cluster and return its id."""
        ...

    def delete_cluster(self, cluster_id: str) -> None:
        """Delete a cluster."""
        ...

    def get_client(self, cluster_id: str, client_id: str) -> ClientInfo:
        """Get an API client of a cluster."""
        ...

    def create_client(self, cluster_id: str, name: str) -> CreatedClient:
        """Create an API client on a cluster."""
        ...

    def delete_client(self, cluster_id: str, client_id: str) -> None:
        """Delete an API client of a cluster."""
        ...
