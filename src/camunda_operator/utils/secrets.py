"""Utilities for reading credentials from and publishing connection details to secrets."""

from __future__ import annotations

import base64
import binascii
from typing import Any

from kubernetes import client

from ..constants import FIELD_MANAGER, LABEL_MANAGED_BY, LABEL_RESOURCE_KIND
from .rate_limit import rate_limit_k8s


def get_secret_bytes(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    key: str,
) -> bytes:
    """Get the raw value stored under ``key`` in a Kubernetes secret.

    Raises:
        ValueError: If the secret or the key does not exist
    """
    try:
        secret = rate_limit_k8s(api.read_namespaced_secret)(name=secret_name, namespace=namespace)
    except client.exceptions.ApiException as e:
        if e.status == 404:
            raise ValueError(f"Secret '{secret_name}' not found in namespace '{namespace}'") from e
        raise

    data = secret.data or {}
    if key not in data:
        raise ValueError(f"Key '{key}' not found in secret '{secret_name}'")

    value = data[key]
    if isinstance(value, bytes):
        return value
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        # Some client versions hand back already-decoded strings
        return value.encode("utf-8")


def encode_secret_data(details: dict[str, bytes]) -> dict[str, str]:
    """Base64-encode connection details for the ``data`` field of a Secret."""
    return {key: base64.b64encode(value).decode("ascii") for key, value in details.items()}


def publish_connection_details(
    api: client.CoreV1Api,
    namespace: str,
    secret_name: str,
    details: dict[str, bytes],
    kind: str,
    owner_references: list[dict[str, Any]] | None = None,
) -> bool:
    """Create or patch the connection secret of a managed resource.

    Keys already in the secret and absent from ``details`` are kept, so values
    only returned at creation time (client secrets) survive later ticks.

    Returns:
        True if anything was written
    """
    if not details:
        return False

    body = client.V1Secret(
        metadata=client.V1ObjectMeta(
            name=secret_name,
            namespace=namespace,
            owner_references=owner_references or [],
            labels={
                LABEL_MANAGED_BY: FIELD_MANAGER,
                LABEL_RESOURCE_KIND: kind.lower(),
            },
        ),
        type="connection.camunda.cloud37.dev/v1alpha1",
        data=encode_secret_data(details),
    )

    try:
        rate_limit_k8s(api.patch_namespaced_secret)(
            name=secret_name,
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )
    except client.exceptions.ApiException as e:
        if e.status != 404:
            raise
        rate_limit_k8s(api.create_namespaced_secret)(
            namespace=namespace,
            body=body,
            field_manager=FIELD_MANAGER,
        )
    return True
