"""Tests for the Cluster reconciler."""

from __future__ import annotations

import pytest

from camunda_operator.constants import CONN_OPERATE, CONN_OPTIMIZE, CONN_TASKLIST, CONN_ZEEBE
from camunda_operator.errors import CreationError, RemoteAPIError
from camunda_operator.models import ManagedResource, ResourceKind
from camunda_operator.reconcilers.cluster import ClusterReconciler, cluster_connection_details, cluster_drift
from camunda_operator.services.camunda.models import CatalogEntry, ClusterInfo, ClusterLinks
from camunda_operator.utils.conditions import Availability, get_availability


def record_from(body) -> ManagedResource:
    return ManagedResource.from_body(ResourceKind.CLUSTER, body)


class TestClusterObserve:
    """Test cases for observing clusters."""

    def test_no_external_name_means_absent(self, console, cluster_body):
        """Test a record that was never created is absent without a remote call."""
        observation = ClusterReconciler(console).observe(record_from(cluster_body()))
        assert not observation.exists
        assert console.calls == []

    def test_not_found_means_absent(self, console, cluster_body):
        """Test a 404 lookup reports the cluster as absent."""
        observation = ClusterReconciler(console).observe(record_from(cluster_body(external_name="gone")))
        assert not observation.exists
        assert not observation.up_to_date

    def test_other_errors_propagate(self, console, cluster_body):
        """Test non-404 remote failures are raised, never treated as absent."""
        console.clusters["abc123"] = ClusterInfo(uuid="abc123", name="my-cluster")
        console.failures["get_cluster"] = RemoteAPIError("boom", status_code=503)

        with pytest.raises(RemoteAPIError):
            ClusterReconciler(console).observe(record_from(cluster_body(external_name="abc123")))

    def test_observe_is_idempotent(self, console, cluster_body):
        """Test observing twice without changes yields the same result."""
        reconciler = ClusterReconciler(console)
        record = record_from(cluster_body())
        reconciler.create(record)
        console.make_healthy("abc123")

        first = reconciler.observe(record)
        second = reconciler.observe(record)

        assert first == second
        assert console.count("create_cluster") == 1

    @pytest.mark.parametrize(
        "zeebe_status, expected",
        [
            ("Healthy", Availability.AVAILABLE),
            ("Creating", Availability.CREATING),
            ("Unhealthy", Availability.UNAVAILABLE),
            ("Updating", Availability.UNAVAILABLE),
        ],
    )
    def test_status_projection(self, console, cluster_body, zeebe_status, expected):
        """Test the zeebe status is projected onto the Ready condition."""
        console.clusters["abc123"] = ClusterInfo(uuid="abc123", name="my-cluster", zeebe_status=zeebe_status)
        record = record_from(cluster_body(external_name="abc123"))

        ClusterReconciler(console).observe(record)

        assert get_availability(record.conditions) is expected
        assert record.at_provider["status"] == zeebe_status


class TestClusterCreate:
    """Test cases for creating clusters."""

    def test_create_assigns_identifier(self, console, cluster_body):
        """Test create records the Console id and sets Creating."""
        record = record_from(cluster_body())
        result = ClusterReconciler(console).create(record)

        assert record.external_name == "abc123"
        assert result.connection_details == {}
        assert get_availability(record.conditions) is Availability.CREATING

    def test_create_request(self, console, cluster_body):
        """Test the create request carries the record name and parameters."""
        ClusterReconciler(console).create(record_from(cluster_body()))
        _, (request,) = console.calls[0]
        assert request.name == "my-cluster"
        assert request.region_id == "us-east"
        assert request.plan_type_id == "free"
        assert request.channel_id == "stable"
        assert request.generation_id == "1.0"

    def test_create_failure_leaves_identifier_empty(self, console, cluster_body):
        """Test a failed create never assigns an identifier."""
        console.failures["create_cluster"] = RemoteAPIError("quota exceeded", status_code=403)
        record = record_from(cluster_body())

        with pytest.raises(CreationError, match="cannot create cluster"):
            ClusterReconciler(console).create(record)
        assert record.external_name == ""

    def test_create_then_observe_reports_existing(self, console, cluster_body):
        """Test the resource exists on the tick after creation."""
        reconciler = ClusterReconciler(console)
        record = record_from(cluster_body())
        reconciler.create(record)

        observation = reconciler.observe(record)

        assert observation.exists
        assert observation.up_to_date


class TestClusterScenario:
    """End-to-end create, converge and delete of one cluster."""

    def test_lifecycle(self, console, cluster_body):
        reconciler = ClusterReconciler(console)
        record = record_from(cluster_body(region="us-east", plan_type="free", channel="stable", generation="1.0"))

        assert not reconciler.observe(record).exists
        reconciler.create(record)
        assert record.external_name == "abc123"

        observation = reconciler.observe(record)
        assert observation.exists
        assert get_availability(record.conditions) is Availability.CREATING

        console.make_healthy("abc123")
        observation = reconciler.observe(record)
        assert get_availability(record.conditions) is Availability.AVAILABLE
        assert set(observation.connection_details) == {CONN_OPERATE, CONN_OPTIMIZE, CONN_TASKLIST, CONN_ZEEBE}
        assert observation.connection_details[CONN_ZEEBE] == b"abc123.bru-2.zeebe.camunda.io:443"
        assert record.at_provider[CONN_ZEEBE] == "abc123.bru-2.zeebe.camunda.io:443"

        reconciler.delete(record)
        assert "abc123" not in console.clusters
        assert not reconciler.observe(record).exists


class TestClusterDrift:
    """Test cases for drift detection."""

    def _remote(self, **overrides) -> ClusterInfo:
        fields = {
            "uuid": "abc123",
            "name": "my-cluster",
            "plan_type": CatalogEntry(uuid="p-1", name="free"),
            "channel": CatalogEntry(uuid="c-1", name="stable"),
            "generation": CatalogEntry(uuid="g-1", name="1.0"),
            "region": CatalogEntry(uuid="r-1", name="us-east"),
        }
        fields.update(overrides)
        return ClusterInfo(**fields)

    def test_no_drift(self, cluster_body):
        """Test matching by display name is not drift."""
        assert cluster_drift(record_from(cluster_body()), self._remote()) == []

    def test_match_by_uuid(self, cluster_body):
        """Test catalog entries may also be named by id."""
        record = record_from(cluster_body(region="r-1"))
        assert cluster_drift(record, self._remote()) == []

    def test_name_drift(self, cluster_body):
        assert cluster_drift(record_from(cluster_body()), self._remote(name="renamed")) == ["name"]

    def test_catalog_drift(self, cluster_body):
        """Test a changed plan is reported."""
        remote = self._remote(plan_type=CatalogEntry(uuid="p-2", name="enterprise"))
        assert cluster_drift(record_from(cluster_body()), remote) == ["planType"]

    def test_unreported_fields_are_not_drift(self, cluster_body):
        """Test fields the Console omits are not compared."""
        remote = self._remote(plan_type=None, channel=None, generation=None, region=None)
        assert cluster_drift(record_from(cluster_body()), remote) == []

    def test_observe_reports_drift(self, console, cluster_body):
        """Test observe marks a drifted cluster as not up to date."""
        console.clusters["abc123"] = self._remote(name="renamed", zeebe_status="Healthy")
        observation = ClusterReconciler(console).observe(record_from(cluster_body(external_name="abc123")))
        assert observation.exists
        assert not observation.up_to_date


class TestClusterConnectionDetails:
    """Test cases for cluster connection details."""

    def test_skips_missing_links(self):
        remote = ClusterInfo(uuid="x", name="x", links=ClusterLinks(zeebe="z:443"))
        assert cluster_connection_details(remote) == {CONN_ZEEBE: b"z:443"}

    def test_no_links(self):
        assert cluster_connection_details(ClusterInfo(uuid="x", name="x")) == {}
