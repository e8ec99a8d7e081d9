"""Resolve a ProviderConfig credential source into raw credential bytes."""

from __future__ import annotations

import os
from typing import Any

from kubernetes import client

from ..errors import CredentialResolutionError
from .secrets import get_secret_bytes

SOURCE_SECRET = "Secret"
SOURCE_ENVIRONMENT = "Environment"
SOURCE_FILESYSTEM = "Filesystem"


def resolve_credentials(
    credentials: dict[str, Any],
    core_api: client.CoreV1Api | None = None,
) -> bytes:
    """Resolve the ``spec.credentials`` block of a ProviderConfig.

    Args:
        credentials: Credentials block with ``source`` and a source-specific selector
        core_api: Kubernetes API client, required for the Secret source

    Returns:
        The raw credential document

    Raises:
        CredentialResolutionError: If the source is unknown or cannot be read
    """
    source = credentials.get("source", SOURCE_SECRET)

    if source == SOURCE_SECRET:
        ref = credentials.get("secretRef") or {}
        name, namespace, key = ref.get("name"), ref.get("namespace"), ref.get("key")
        if not name or not namespace or not key:
            raise CredentialResolutionError(
                "cannot get credentials: secretRef requires name, namespace and key"
            )
        if core_api is None:
            core_api = client.CoreV1Api()
        try:
            return get_secret_bytes(core_api, namespace, name, key)
        except (ValueError, client.exceptions.ApiException) as e:
            raise CredentialResolutionError(f"cannot get credentials: {e}", cause=e) from e

    if source == SOURCE_ENVIRONMENT:
        env_name = (credentials.get("env") or {}).get("name")
        if not env_name:
            raise CredentialResolutionError("cannot get credentials: env.name is required")
        value = os.environ.get(env_name)
        if value is None:
            raise CredentialResolutionError(
                f"cannot get credentials: environment variable {env_name} is not set"
            )
        return value.encode("utf-8")

    if source == SOURCE_FILESYSTEM:
        path = (credentials.get("fs") or {}).get("path")
        if not path:
            raise CredentialResolutionError("cannot get credentials: fs.path is required")
        try:
            with open(path, "rb") as fh:
                return fh.read()
        except OSError as e:
            raise CredentialResolutionError(f"cannot get credentials: {e}", cause=e) from e

    raise CredentialResolutionError(f"cannot get credentials: unsupported source {source!r}")
