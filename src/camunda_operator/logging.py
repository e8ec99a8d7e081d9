"""Structured logging configuration for the Camunda Operator."""

import json
import logging
import os
import sys
from typing import Any

REDACTED = "***REDACTED***"

_SECRET_FIELDS = frozenset({
    "client_secret",
    "clientSecret",
    "access_token",
    "token",
    "password",
    "credentials",
    "ZEEBE_CLIENT_SECRET",
})


def setup_structured_logging() -> None:
    """Configure structured JSON logging.

    The level comes from LOG_LEVEL (default INFO).
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_resource_event(
    logger: logging.Logger,
    controller: str,
    resource_kind: str,
    resource_name: str,
    namespace: str,
    uid: str,
    event: str,
    reason: str,
    message: str,
    level: int = logging.INFO,
    **kwargs: Any,
) -> None:
    """Log one resource event as a single JSON line.

    Args:
        logger: Logger to emit on
        controller: Name of the emitting controller
        resource_kind: Custom resource kind
        resource_name: Custom resource name
        namespace: Custom resource namespace ("" for cluster-scoped kinds)
        uid: Custom resource uid
        event: Short machine-readable event name
        reason: CamelCase reason, mirrors the Kubernetes event reason
        message: Human readable message
        level: Logging level
        **kwargs: Extra fields; secret-looking keys are redacted
    """
    log_data = {
        "controller": controller,
        "resource": resource_kind,
        "name": resource_name,
        "namespace": namespace,
        "uid": uid,
        "event": event,
        "reason": reason,
        "message": message,
    }
    log_data.update(sanitize_secrets(kwargs))
    logger.log(level, json.dumps(log_data, default=str))


def sanitize_secrets(log_data: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``log_data`` with secret fields redacted, nested dicts included."""
    sanitized: dict[str, Any] = {}
    for key, value in log_data.items():
        if key in _SECRET_FIELDS:
            sanitized[key] = REDACTED
        elif isinstance(value, dict):
            sanitized[key] = sanitize_secrets(value)
        else:
            sanitized[key] = value
    return sanitized
