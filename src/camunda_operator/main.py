"""Main entry point for the Camunda Operator."""

from __future__ import annotations

import logging
import os
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from .tracing import initialize_tracing

# Registers the kopf handlers for every kind
from . import handlers  # noqa: F401

logger = logging.getLogger(__name__)

_server: Any = None


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, **_: Any) -> None:
    """Configure the operator."""
    global _server

    structured_logging.setup_structured_logging()
    initialize_tracing()

    # Annotations keep kopf's bookkeeping out of the status subresource
    settings.persistence.progress_storage = kopf.AnnotationsProgressStorage()
    settings.persistence.diffbase_storage = kopf.AnnotationsDiffBaseStorage()
    settings.persistence.finalizer = "camunda.cloud37.dev/kopf-finalizer"

    settings.posting.level = logging.INFO
    settings.networking.request_timeout = float(os.getenv("K8S_REQUEST_TIMEOUT_SECONDS", "30"))
    settings.execution.max_workers = int(os.getenv("MAX_WORKERS", "4"))

    metrics_port = int(os.getenv("METRICS_PORT", "8080"))
    _server = health.start_metrics_server(metrics_port)
    health.set_ready(True)
    logger.info(f"Camunda operator started, metrics on :{metrics_port}")


@kopf.on.cleanup()
def shutdown(**_: Any) -> None:
    """Stop serving metrics and report not ready."""
    global _server

    health.set_ready(False)
    if _server is not None:
        _server.shutdown()
        _server = None
