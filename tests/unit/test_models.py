"""Tests for desired-state records."""

from __future__ import annotations

import pytest

from camunda_operator.constants import ANNOTATION_EXTERNAL_NAME, DEFAULT_PROVIDER_CONFIG, DELETION_POLICY_DELETE
from camunda_operator.models import ClientParameters, ClusterParameters, ManagedResource, ResourceKind


class TestManagedResourceFromBody:
    """Test cases for ManagedResource.from_body."""

    def test_cluster(self, cluster_body):
        record = ManagedResource.from_body(ResourceKind.CLUSTER, cluster_body(external_name="abc123"))

        assert record.kind is ResourceKind.CLUSTER
        assert record.name == "my-cluster"
        assert record.namespace == "default"
        assert record.external_name == "abc123"
        assert record.has_external_name
        assert record.parameters == ClusterParameters(
            region="us-east", generation="1.0", channel="stable", plan_type="free"
        )
        assert record.connection_secret_ref == {"name": "my-cluster-conn", "namespace": "default"}

    def test_defaults(self, cluster_body):
        """Test provider config and deletion policy defaults."""
        body = cluster_body(secret_name=None)
        del body["spec"]["providerConfigRef"]
        record = ManagedResource.from_body(ResourceKind.CLUSTER, body)

        assert record.provider_config_ref == DEFAULT_PROVIDER_CONFIG
        assert record.deletion_policy == DELETION_POLICY_DELETE
        assert record.connection_secret_ref is None
        assert not record.has_external_name

    def test_empty_annotation_is_no_identifier(self, cluster_body):
        body = cluster_body()
        body["metadata"]["annotations"] = {ANNOTATION_EXTERNAL_NAME: ""}
        assert not ManagedResource.from_body(ResourceKind.CLUSTER, body).has_external_name

    def test_missing_cluster_parameters(self, cluster_body):
        """Test every required cluster parameter is reported."""
        body = cluster_body()
        body["spec"]["forProvider"] = {"region": "us-east"}
        with pytest.raises(ValueError, match="generation, channel, planType"):
            ManagedResource.from_body(ResourceKind.CLUSTER, body)

    def test_client(self, client_body):
        record = ManagedResource.from_body(ResourceKind.CLIENT, client_body())
        assert record.parameters == ClientParameters(cluster_id="abc123", name="my-client")

    def test_client_requires_cluster_id(self, client_body):
        body = client_body()
        body["spec"]["forProvider"] = {}
        with pytest.raises(ValueError, match="clusterId"):
            ManagedResource.from_body(ResourceKind.CLIENT, body)

    def test_status_is_copied(self, cluster_body):
        """Test mutating the record never mutates the body."""
        conditions = [{"type": "Ready", "status": "True"}]
        body = cluster_body(status={"conditions": conditions, "atProvider": {"status": "Healthy"}})
        record = ManagedResource.from_body(ResourceKind.CLUSTER, body)

        record.conditions.append({"type": "Synced"})
        record.at_provider["status"] = "Unhealthy"

        assert len(body["status"]["conditions"]) == 1
        assert body["status"]["atProvider"]["status"] == "Healthy"

    def test_status_patch(self, cluster_body):
        record = ManagedResource.from_body(ResourceKind.CLUSTER, cluster_body())
        record.at_provider = {"status": "Healthy"}
        assert record.status_patch() == {
            "atProvider": {"status": "Healthy"},
            "conditions": [],
            "observedGeneration": 1,
        }
