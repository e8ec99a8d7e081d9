"""Desired-state records for managed Camunda resources."""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass, field
from typing import Any, Union

from .constants import (
    ANNOTATION_EXTERNAL_NAME,
    DEFAULT_PROVIDER_CONFIG,
    DELETION_POLICY_DELETE,
    KIND_CLIENT,
    KIND_CLUSTER,
)


class ResourceKind(str, enum.Enum):
    """Kinds of external resources the operator manages."""

    CLUSTER = KIND_CLUSTER
    CLIENT = KIND_CLIENT


@dataclass
class ClusterParameters:
    """Desired parameters of a Camunda SaaS cluster."""

    region: str
    generation: str
    channel: str
    plan_type: str

    @classmethod
    def from_spec(cls, for_provider: dict[str, Any]) -> ClusterParameters:
        missing = [k for k in ("region", "generation", "channel", "planType") if not for_provider.get(k)]
        if missing:
            raise ValueError(f"spec.forProvider is missing {', '.join(missing)}")
        return cls(
            region=for_provider["region"],
            generation=for_provider["generation"],
            channel=for_provider["channel"],
            plan_type=for_provider["planType"],
        )


@dataclass
class ClientParameters:
    """Desired parameters of a cluster API client."""

    cluster_id: str
    name: str

    @classmethod
    def from_spec(cls, for_provider: dict[str, Any], default_name: str) -> ClientParameters:
        if not for_provider.get("clusterId"):
            raise ValueError("spec.forProvider is missing clusterId")
        return cls(
            cluster_id=for_provider["clusterId"],
            name=for_provider.get("clientName") or default_name,
        )


Parameters = Union[ClusterParameters, ClientParameters]


@dataclass
class ManagedResource:
    """One desired-state record, as read from a custom resource.

    Reconcilers read ``name``, ``parameters`` and ``external_name`` and write
    ``external_name``, ``at_provider`` and ``conditions``; handlers turn those
    back into a kopf patch.
    """

    kind: ResourceKind
    name: str
    namespace: str | None
    parameters: Parameters
    external_name: str = ""
    provider_config_ref: str = DEFAULT_PROVIDER_CONFIG
    connection_secret_ref: dict[str, str] | None = None
    deletion_policy: str = DELETION_POLICY_DELETE
    at_provider: dict[str, Any] = field(default_factory=dict)
    conditions: list[dict[str, Any]] = field(default_factory=list)
    generation: int = 0
    uid: str = ""

    @classmethod
    def from_body(cls, kind: ResourceKind, body: dict[str, Any]) -> ManagedResource:
        """Build a record from a custom resource body.

        Raises:
            ValueError: If the spec lacks required parameters
        """
        meta = body.get("metadata") or {}
        spec = body.get("spec") or {}
        status = body.get("status") or {}
        name = meta.get("name", "")
        for_provider = spec.get("forProvider") or {}

        if kind is ResourceKind.CLUSTER:
            parameters: Parameters = ClusterParameters.from_spec(for_provider)
        else:
            parameters = ClientParameters.from_spec(for_provider, default_name=name)

        annotations = meta.get("annotations") or {}
        return cls(
            kind=kind,
            name=name,
            namespace=meta.get("namespace"),
            parameters=parameters,
            external_name=annotations.get(ANNOTATION_EXTERNAL_NAME, "") or "",
            provider_config_ref=(spec.get("providerConfigRef") or {}).get("name") or DEFAULT_PROVIDER_CONFIG,
            connection_secret_ref=spec.get("writeConnectionSecretToRef") or None,
            deletion_policy=spec.get("deletionPolicy") or DELETION_POLICY_DELETE,
            at_provider=copy.deepcopy(status.get("atProvider") or {}),
            conditions=copy.deepcopy(status.get("conditions") or []),
            generation=meta.get("generation", 0),
            uid=meta.get("uid", ""),
        )

    @property
    def has_external_name(self) -> bool:
        return bool(self.external_name)

    def status_patch(self) -> dict[str, Any]:
        """Status fields owned by the reconcilers."""
        return {
            "atProvider": self.at_provider,
            "conditions": self.conditions,
            "observedGeneration": self.generation,
        }
