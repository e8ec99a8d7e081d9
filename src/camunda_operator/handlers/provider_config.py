"""Handler for ProviderConfig CRD."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import kopf

from .. import metrics
from ..auth import TokenProvider, get_token_provider
from ..builders.connector import Connector
from ..constants import API_GROUP_VERSION, KIND_PROVIDER_CONFIG
from ..errors import OperatorError
from ..tracing import trace_span
from ..utils.cache import invalidate_cache, make_cache_key
from ..utils.conditions import set_auth_valid_condition, set_ready_condition
from ..utils.errors import sanitize_exception
from ..utils.events import emit_validate_succeeded
from .base import BaseHandler


class ProviderConfigHandler(BaseHandler):
    """Validates that a ProviderConfig's credentials can obtain a token."""

    def __init__(self, connector: Connector | None = None, token_provider: TokenProvider | None = None):
        super().__init__(KIND_PROVIDER_CONFIG)
        self._connector = connector
        self._token_provider = token_provider

    @property
    def connector(self) -> Connector:
        if self._connector is None:
            self._connector = Connector()
        return self._connector

    @property
    def token_provider(self) -> TokenProvider:
        return self._token_provider or get_token_provider()

    def reconcile(
        self,
        body: dict[str, Any],
        spec: dict[str, Any],
        meta: dict[str, Any],
        status: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        """Reconcile ProviderConfig resource."""
        name = meta.get("name", "unknown")
        generation = meta.get("generation", 0)

        # Managed resources must not keep using a stale copy of this config
        invalidate_cache(make_cache_key(KIND_PROVIDER_CONFIG, name))

        credentials = spec.get("credentials") or {}
        if not credentials.get("source"):
            self.handle_validation_error(body, "credentials.source is required")

        conditions = list(status.get("conditions", []))

        with trace_span("validate_provider_config", kind=KIND_PROVIDER_CONFIG, attributes={"provider_config.name": name}):
            try:
                data = self.connector.resolver(credentials, self.connector.core_api)
                # Force a real exchange
                self.token_provider.invalidate(data)
                self.token_provider.get_or_create(data)
                auth_valid = True
                auth_message = "Token exchange succeeded"
            except OperatorError as e:
                auth_valid = False
                auth_message = f"Authentication failed: {sanitize_exception(e)}"
                metrics.error_total.labels(kind=KIND_PROVIDER_CONFIG, error_type=type(e).__name__).inc()
                self.log_error(meta, auth_message, error=e, reason="AuthFailed")

        conditions = set_auth_valid_condition(conditions, auth_valid, auth_message, generation)
        conditions = set_ready_condition(
            conditions,
            auth_valid,
            "ProviderConfig is ready" if auth_valid else "ProviderConfig is not ready",
            generation,
        )
        metrics.resource_status_total.labels(
            kind=KIND_PROVIDER_CONFIG, status="ready" if auth_valid else "not_ready"
        ).inc()

        patch.status.update({
            "observedGeneration": generation,
            "lastAuthTime": datetime.now(timezone.utc).isoformat() if auth_valid else status.get("lastAuthTime"),
            "conditions": conditions,
        })

        if not auth_valid:
            raise kopf.TemporaryError(auth_message, delay=60)
        emit_validate_succeeded(body)

    def delete(self, meta: dict[str, Any]) -> None:
        """Handle ProviderConfig resource deletion."""
        invalidate_cache(make_cache_key(KIND_PROVIDER_CONFIG, meta.get("name", "")))
        self.log_info(meta, "ProviderConfig is being deleted", event="deletion", reason="Deletion")


# Global handler instance
_handler = ProviderConfigHandler()


@kopf.on.create(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
@kopf.on.update(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
@kopf.on.resume(API_GROUP_VERSION, KIND_PROVIDER_CONFIG)
def handle_provider_config(
    body: dict[str, Any],
    spec: dict[str, Any],
    meta: dict[str, Any],
    status: dict[str, Any],
    patch: kopf.Patch,
    **kwargs: Any,
) -> None:
    """Handle ProviderConfig resource reconciliation."""
    _handler.reconcile_with_metrics(body, lambda: _handler.reconcile(body, spec, meta, status, patch))


@kopf.on.delete(API_GROUP_VERSION, KIND_PROVIDER_CONFIG, optional=True)
def handle_provider_config_delete(
    meta: dict[str, Any],
    **kwargs: Any,
) -> None:
    """Handle ProviderConfig resource deletion."""
    _handler.delete(meta)
