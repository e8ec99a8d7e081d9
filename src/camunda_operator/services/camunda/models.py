"""Models for Camunda Console API payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class CatalogEntry:
    """A plan type, channel, generation or region reference."""

    uuid: str | None = None
    name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> CatalogEntry | None:
        if not data:
            return None
        return cls(uuid=data.get("uuid"), name=data.get("name"))

    def matches(self, wanted: str) -> bool:
        """Specs may name an entry either by id or by display name."""
        return wanted in (self.uuid, self.name)


@dataclass
class ClusterLinks:
    """Public endpoints of a cluster's components."""

    zeebe: str | None = None
    operate: str | None = None
    tasklist: str | None = None
    optimize: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> ClusterLinks | None:
        if not data:
            return None
        return cls(
            zeebe=data.get("zeebe"),
            operate=data.get("operate"),
            tasklist=data.get("tasklist"),
            optimize=data.get("optimize"),
        )


@dataclass
class ClusterInfo:
    """A cluster as reported by ``GET /clusters/{id}``."""

    uuid: str
    name: str
    zeebe_status: str | None = None
    links: ClusterLinks | None = None
    plan_type: CatalogEntry | None = None
    channel: CatalogEntry | None = None
    generation: CatalogEntry | None = None
    region: CatalogEntry | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClusterInfo:
        status = data.get("status") or {}
        return cls(
            uuid=data.get("uuid") or "",
            name=data.get("name") or "",
            zeebe_status=status.get("zeebeStatus"),
            links=ClusterLinks.from_dict(data.get("links")),
            plan_type=CatalogEntry.from_dict(data.get("planType")),
            channel=CatalogEntry.from_dict(data.get("channel")),
            generation=CatalogEntry.from_dict(data.get("generation")),
            region=CatalogEntry.from_dict(data.get("region")),
        )


@dataclass
class CreateClusterRequest:
    """Body of ``POST /clusters``."""

    name: str
    plan_type_id: str
    channel_id: str
    generation_id: str
    region_id: str

    def to_dict(self) -> dict[str, str]:
        return {
            "name": self.name,
            "planTypeId": self.plan_type_id,
            "channelId": self.channel_id,
            "generationId": self.generation_id,
            "regionId": self.region_id,
        }


@dataclass
class ClientInfo:
    """A cluster API client as reported by ``GET /clusters/{id}/clients/{clientId}``."""

    name: str
    zeebe_client_id: str = ""
    zeebe_address: str = ""
    zeebe_authorization_server_url: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientInfo:
        return cls(
            name=data.get("name") or "",
            zeebe_client_id=data.get("ZEEBE_CLIENT_ID") or "",
            zeebe_address=data.get("ZEEBE_ADDRESS") or "",
            zeebe_authorization_server_url=data.get("ZEEBE_AUTHORIZATION_SERVER_URL") or "",
        )


@dataclass
class CreatedClient:
    """Response of ``POST /clusters/{id}/clients``.

    The secret is only ever returned here.
    """

    client_id: str
    client_secret: str = field(repr=False)
