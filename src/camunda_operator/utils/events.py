"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    EVENT_REASON_CONNECT_FAILED,
    EVENT_REASON_CREATE_FAILED,
    EVENT_REASON_CREATED,
    EVENT_REASON_DELETE_FAILED,
    EVENT_REASON_DELETED,
    EVENT_REASON_DRIFT_DETECTED,
    EVENT_REASON_OBSERVE_FAILED,
    EVENT_REASON_RECONCILE_FAILED,
    EVENT_REASON_RECONCILE_STARTED,
    EVENT_REASON_VALIDATE_FAILED,
    EVENT_REASON_VALIDATE_SUCCEEDED,
)


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Resource body (or metadata) the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_started(body: dict[str, Any]) -> None:
    emit_event(body, EVENT_REASON_RECONCILE_STARTED, "Reconciliation started")


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_connect_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_CONNECT_FAILED, message, type_="Warning")


def emit_observe_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_OBSERVE_FAILED, message, type_="Warning")


def emit_created(body: dict[str, Any], kind: str, external_name: str) -> None:
    emit_event(body, EVENT_REASON_CREATED, f"{kind} {external_name} created")


def emit_create_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_CREATE_FAILED, message, type_="Warning")


def emit_drift_detected(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_DRIFT_DETECTED, message, type_="Warning")


def emit_deleted(body: dict[str, Any], kind: str, external_name: str) -> None:
    emit_event(body, EVENT_REASON_DELETED, f"{kind} {external_name} deleted")


def emit_delete_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_DELETE_FAILED, message, type_="Warning")


def emit_validate_succeeded(body: dict[str, Any]) -> None:
    emit_event(body, EVENT_REASON_VALIDATE_SUCCEEDED, "Validation succeeded")


def emit_validate_failed(body: dict[str, Any], message: str) -> None:
    emit_event(body, EVENT_REASON_VALIDATE_FAILED, message, type_="Warning")
