"""Utilities for managing Kubernetes conditions and projecting remote status."""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any

from ..constants import (
    COND_AUTH_VALID,
    COND_READY,
    COND_SYNCED,
    REASON_AVAILABLE,
    REASON_CREATING,
    REASON_RECONCILE_ERROR,
    REASON_RECONCILE_SUCCESS,
    REASON_UNAVAILABLE,
)


class Availability(str, enum.Enum):
    """Three-valued availability of an external resource."""

    AVAILABLE = REASON_AVAILABLE
    CREATING = REASON_CREATING
    UNAVAILABLE = REASON_UNAVAILABLE


_CLUSTER_STATUS_TABLE = {
    "healthy": Availability.AVAILABLE,
    "creating": Availability.CREATING,
    "unhealthy": Availability.UNAVAILABLE,
    "updating": Availability.UNAVAILABLE,
}


def project_cluster_status(status: str | None) -> Availability:
    """Map a Console zeebe status onto the availability model.

    Absent and unrecognized values are Unavailable.
    """
    if not status:
        return Availability.UNAVAILABLE
    return _CLUSTER_STATUS_TABLE.get(status.lower(), Availability.UNAVAILABLE)


def project_client_availability(remote_name: str | None, desired_name: str) -> Availability:
    """Clients have no status; they are Available when the remote name matches."""
    if remote_name == desired_name:
        return Availability.AVAILABLE
    return Availability.UNAVAILABLE


def update_condition(
    conditions: list[dict[str, Any]],
    condition_type: str,
    status: str,
    reason: str,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Update or add a condition to the conditions list.

    Args:
        conditions: List of existing conditions
        condition_type: Type of condition
        status: Status of condition ("True", "False", "Unknown")
        reason: Reason for the condition
        message: Human-readable message
        observed_generation: Generation when condition was observed

    Returns:
        Updated list of conditions
    """
    now = datetime.now(timezone.utc).isoformat()

    existing_idx = None
    for idx, cond in enumerate(conditions):
        if cond.get("type") == condition_type:
            existing_idx = idx
            break

    new_condition = {
        "type": condition_type,
        "status": status,
        "reason": reason,
        "message": message,
        "lastTransitionTime": now,
    }

    if observed_generation is not None:
        new_condition["observedGeneration"] = observed_generation

    if existing_idx is not None:
        existing = conditions[existing_idx]
        # lastTransitionTime only moves when the status flips
        if existing.get("status") == status:
            new_condition["lastTransitionTime"] = existing.get("lastTransitionTime", now)
        conditions[existing_idx] = new_condition
    else:
        conditions.append(new_condition)

    return conditions


def get_condition(conditions: list[dict[str, Any]], condition_type: str) -> dict[str, Any] | None:
    """Return the condition of the given type, if present."""
    for cond in conditions:
        if cond.get("type") == condition_type:
            return cond
    return None


def get_availability(conditions: list[dict[str, Any]]) -> Availability | None:
    """Read the availability back from the Ready condition."""
    cond = get_condition(conditions, COND_READY)
    if cond is None:
        return None
    try:
        return Availability(cond.get("reason"))
    except ValueError:
        return None


def set_availability_condition(
    conditions: list[dict[str, Any]],
    availability: Availability,
    message: str = "",
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the Ready condition from an availability value."""
    return update_condition(
        conditions,
        COND_READY,
        "True" if availability is Availability.AVAILABLE else "False",
        availability.value,
        message or f"External resource is {availability.value.lower()}",
        observed_generation,
    )


def set_synced_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the Synced condition."""
    return update_condition(
        conditions,
        COND_SYNCED,
        "True" if status else "False",
        REASON_RECONCILE_SUCCESS if status else REASON_RECONCILE_ERROR,
        message,
        observed_generation,
    )


def set_auth_valid_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set the AuthValid condition."""
    return update_condition(
        conditions,
        COND_AUTH_VALID,
        "True" if status else "False",
        "AuthValid" if status else "AuthInvalid",
        message,
        observed_generation,
    )


def set_ready_condition(
    conditions: list[dict[str, Any]],
    status: bool,
    message: str,
    observed_generation: int | None = None,
) -> list[dict[str, Any]]:
    """Set a plain Ready condition (used by ProviderConfig)."""
    return update_condition(
        conditions,
        COND_READY,
        "True" if status else "False",
        "Ready" if status else "NotReady",
        message,
        observed_generation,
    )
