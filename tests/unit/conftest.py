"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from camunda_operator.constants import ANNOTATION_EXTERNAL_NAME, API_GROUP_VERSION
from camunda_operator.errors import RemoteNotFoundError
from camunda_operator.services.camunda.models import (
    CatalogEntry,
    ClientInfo,
    ClusterInfo,
    ClusterLinks,
    CreateClusterRequest,
    CreatedClient,
)
from camunda_operator.utils import rate_limit
from camunda_operator.utils.cache import invalidate_cache


class FakeConsole:
    """In-memory Console API.

    ``failures`` maps an operation name to an exception raised on its next call.
    """

    def __init__(self) -> None:
        self.clusters: dict[str, ClusterInfo] = {}
        self.clients: dict[tuple[str, str], ClientInfo] = {}
        self.secrets: dict[tuple[str, str], str] = {}
        self.failures: dict[str, Exception] = {}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.next_cluster_id = "abc123"
        self.next_client_id = "client-1"
        self.next_client_secret = "s3cr3t"

    def _call(self, operation: str, *args: Any) -> None:
        self.calls.append((operation, args))
        error = self.failures.pop(operation, None)
        if error is not None:
            raise error

    def count(self, operation: str) -> int:
        return sum(1 for op, _ in self.calls if op == operation)

    def __enter__(self) -> FakeConsole:
        return self

    def __exit__(self, *args: Any) -> None:
        pass

    def get_cluster(self, cluster_id: str) -> ClusterInfo:
        self._call("get_cluster", cluster_id)
        if cluster_id not in self.clusters:
            raise RemoteNotFoundError("get_cluster: not found", status_code=404)
        return self.clusters[cluster_id]

    def create_cluster(self, request: CreateClusterRequest) -> str:
        self._call("create_cluster", request)
        cluster_id = self.next_cluster_id
        self.clusters[cluster_id] = ClusterInfo(
            uuid=cluster_id,
            name=request.name,
            zeebe_status="Creating",
            plan_type=CatalogEntry(uuid=request.plan_type_id, name=request.plan_type_id),
            channel=CatalogEntry(uuid=request.channel_id, name=request.channel_id),
            generation=CatalogEntry(uuid=request.generation_id, name=request.generation_id),
            region=CatalogEntry(uuid=request.region_id, name=request.region_id),
        )
        return cluster_id

    def delete_cluster(self, cluster_id: str) -> None:
        self._call("delete_cluster", cluster_id)
        if self.clusters.pop(cluster_id, None) is None:
            raise RemoteNotFoundError("delete_cluster: not found", status_code=404)

    def make_healthy(self, cluster_id: str) -> None:
        cluster = self.clusters[cluster_id]
        cluster.zeebe_status = "Healthy"
        cluster.links = ClusterLinks(
            zeebe=f"{cluster_id}.bru-2.zeebe.camunda.io:443",
            operate=f"https://bru-2.operate.camunda.io/{cluster_id}",
            tasklist=f"https://bru-2.tasklist.camunda.io/{cluster_id}",
            optimize=f"https://bru-2.optimize.camunda.io/{cluster_id}",
        )

    def get_client(self, cluster_id: str, client_id: str) -> ClientInfo:
        self._call("get_client", cluster_id, client_id)
        if (cluster_id, client_id) not in self.clients:
            raise RemoteNotFoundError("get_client: not found", status_code=404)
        return self.clients[(cluster_id, client_id)]

    def create_client(self, cluster_id: str, name: str) -> CreatedClient:
        self._call("create_client", cluster_id, name)
        client_id = self.next_client_id
        self.clients[(cluster_id, client_id)] = ClientInfo(
            name=name,
            zeebe_client_id=client_id,
            zeebe_address=f"{cluster_id}.bru-2.zeebe.camunda.io:443",
            zeebe_authorization_server_url="https://login.cloud.camunda.io/oauth/token",
        )
        self.secrets[(cluster_id, client_id)] = self.next_client_secret
        return CreatedClient(client_id=client_id, client_secret=self.next_client_secret)

    def delete_client(self, cluster_id: str, client_id: str) -> None:
        self._call("delete_client", cluster_id, client_id)
        if self.clients.pop((cluster_id, client_id), None) is None:
            raise RemoteNotFoundError("delete_client: not found", status_code=404)


def make_cluster_body(
    name: str = "my-cluster",
    external_name: str | None = None,
    region: str = "us-east",
    plan_type: str = "free",
    channel: str = "stable",
    generation: str = "1.0",
    secret_name: str | None = "my-cluster-conn",
    deletion_policy: str | None = None,
    status: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a Cluster custom resource body."""
    meta: dict[str, Any] = {"name": name, "namespace": "default", "uid": "uid-cluster", "generation": 1}
    if external_name is not None:
        meta["annotations"] = {ANNOTATION_EXTERNAL_NAME: external_name}
    spec: dict[str, Any] = {
        "forProvider": {
            "region": region,
            "planType": plan_type,
            "channel": channel,
            "generation": generation,
        },
        "providerConfigRef": {"name": "default"},
    }
    if secret_name:
        spec["writeConnectionSecretToRef"] = {"name": secret_name, "namespace": "default"}
    if deletion_policy:
        spec["deletionPolicy"] = deletion_policy
    return {
        "apiVersion": API_GROUP_VERSION,
        "kind": "Cluster",
        "metadata": meta,
        "spec": spec,
        "status": status or {},
    }


def make_client_body(
    name: str = "my-client",
    cluster_id: str = "abc123",
    client_name: str | None = None,
    external_name: str | None = None,
    secret_name: str | None = "my-client-conn",
) -> dict[str, Any]:
    """Build a Client custom resource body."""
    meta: dict[str, Any] = {"name": name, "namespace": "default", "uid": "uid-client", "generation": 1}
    if external_name is not None:
        meta["annotations"] = {ANNOTATION_EXTERNAL_NAME: external_name}
    for_provider = {"clusterId": cluster_id}
    if client_name:
        for_provider["clientName"] = client_name
    spec: dict[str, Any] = {"forProvider": for_provider}
    if secret_name:
        spec["writeConnectionSecretToRef"] = {"name": secret_name, "namespace": "default"}
    return {
        "apiVersion": API_GROUP_VERSION,
        "kind": "Client",
        "metadata": meta,
        "spec": spec,
        "status": {},
    }


@pytest.fixture
def console() -> FakeConsole:
    return FakeConsole()


@pytest.fixture
def cluster_body():
    return make_cluster_body


@pytest.fixture
def client_body():
    return make_client_body


@pytest.fixture(autouse=True)
def no_throttle(monkeypatch):
    """Disable client-side throttling so tests never sleep."""
    monkeypatch.setattr(rate_limit._k8s_throttle, "min_interval", 0.0)
    monkeypatch.setattr(rate_limit._console_throttle, "min_interval", 0.0)


@pytest.fixture(autouse=True)
def clear_cache():
    invalidate_cache()
    yield
    invalidate_cache()
