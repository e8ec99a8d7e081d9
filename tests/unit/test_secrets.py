"""Tests for Kubernetes secrets utilities."""

from __future__ import annotations

import base64
from unittest.mock import Mock

import pytest
from kubernetes.client.exceptions import ApiException

from camunda_operator.constants import FIELD_MANAGER, LABEL_MANAGED_BY, LABEL_RESOURCE_KIND
from camunda_operator.utils.secrets import (
    encode_secret_data,
    get_secret_bytes,
    publish_connection_details,
)


class TestGetSecretBytes:
    """Test cases for get_secret_bytes function."""

    def test_success(self):
        """Test successfully reading and decoding a secret value."""
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = Mock(
            data={"credentials": base64.b64encode(b'{"client_id":"a"}').decode()}
        )

        result = get_secret_bytes(mock_api, "crossplane-system", "camunda-creds", "credentials")

        assert result == b'{"client_id":"a"}'
        mock_api.read_namespaced_secret.assert_called_once_with(
            name="camunda-creds", namespace="crossplane-system"
        )

    def test_bytes_value(self):
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = Mock(data={"k": b"raw"})
        assert get_secret_bytes(mock_api, "ns", "s", "k") == b"raw"

    def test_key_not_found(self):
        mock_api = Mock()
        mock_api.read_namespaced_secret.return_value = Mock(data={"other": "dmFsdWU="})
        with pytest.raises(ValueError, match="Key 'k' not found"):
            get_secret_bytes(mock_api, "ns", "s", "k")

    def test_secret_not_found(self):
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = ApiException(status=404)
        with pytest.raises(ValueError, match="Secret 's' not found in namespace 'ns'"):
            get_secret_bytes(mock_api, "ns", "s", "k")

    def test_api_error_propagates(self):
        mock_api = Mock()
        mock_api.read_namespaced_secret.side_effect = ApiException(status=403)
        with pytest.raises(ApiException):
            get_secret_bytes(mock_api, "ns", "s", "k")


class TestPublishConnectionDetails:
    """Test cases for publish_connection_details function."""

    def test_patches_existing_secret(self):
        """Test details are merged into an existing secret."""
        mock_api = Mock()

        written = publish_connection_details(
            mock_api, "default", "conn", {"zeebe": b"abc:443"}, kind="Cluster"
        )

        assert written is True
        kwargs = mock_api.patch_namespaced_secret.call_args.kwargs
        assert kwargs["name"] == "conn"
        assert kwargs["namespace"] == "default"
        assert kwargs["field_manager"] == FIELD_MANAGER
        body = kwargs["body"]
        assert body.data == {"zeebe": base64.b64encode(b"abc:443").decode()}
        assert body.metadata.labels == {LABEL_MANAGED_BY: FIELD_MANAGER, LABEL_RESOURCE_KIND: "cluster"}
        mock_api.create_namespaced_secret.assert_not_called()

    def test_creates_missing_secret(self):
        """Test the secret is created when it does not exist yet."""
        mock_api = Mock()
        mock_api.patch_namespaced_secret.side_effect = ApiException(status=404)
        owner = [{"kind": "Client", "uid": "u"}]

        publish_connection_details(
            mock_api, "default", "conn", {"ZEEBE_CLIENT_ID": b"id"}, kind="Client", owner_references=owner
        )

        body = mock_api.create_namespaced_secret.call_args.kwargs["body"]
        assert body.metadata.owner_references == owner
        assert body.type == "connection.camunda.cloud37.dev/v1alpha1"

    def test_other_errors_propagate(self):
        mock_api = Mock()
        mock_api.patch_namespaced_secret.side_effect = ApiException(status=500)
        with pytest.raises(ApiException):
            publish_connection_details(mock_api, "default", "conn", {"k": b"v"}, kind="Cluster")
        mock_api.create_namespaced_secret.assert_not_called()

    def test_empty_details_write_nothing(self):
        mock_api = Mock()
        assert publish_connection_details(mock_api, "default", "conn", {}, kind="Cluster") is False
        mock_api.patch_namespaced_secret.assert_not_called()


class TestEncodeSecretData:
    """Test cases for encode_secret_data."""

    def test_encode_secret_data(self):
        assert encode_secret_data({"a": b"\x00\xff"}) == {"a": "AP8="}
