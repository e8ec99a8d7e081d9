"""Base handler classes with common functionality for all CRD handlers."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

import kopf

from .. import metrics
from ..builders.connector import Connector
from ..constants import ANNOTATION_EXTERNAL_NAME, CONTROLLER_NAME, DELETION_POLICY_ORPHAN, FINALIZER
from ..errors import CreationError, DeletionError, OperatorError
from ..logging import log_resource_event
from ..models import ManagedResource, ResourceKind
from ..reconcilers import reconciler_for
from ..reconcilers.base import ConnectionDetails
from ..tracing import trace_span
from ..utils.conditions import set_synced_condition
from ..utils.errors import sanitize_exception
from ..utils.events import (
    emit_connect_failed,
    emit_create_failed,
    emit_created,
    emit_delete_failed,
    emit_deleted,
    emit_drift_detected,
    emit_observe_failed,
    emit_reconcile_failed,
    emit_reconcile_started,
    emit_validate_failed,
)
from ..utils.kubernetes import get_core_api
from ..utils.secrets import publish_connection_details


class BaseHandler:
    """Base class for all CRD handlers with common functionality."""

    def __init__(self, kind: str):
        """Initialize base handler.

        Args:
            kind: The Kubernetes resource kind (e.g., "Cluster", "Client")
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)

    def _get_resource_context(self, meta: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": meta.get("name", "unknown"),
            "namespace": meta.get("namespace", ""),
            "uid": meta.get("uid", "unknown"),
        }

    def _log(
        self,
        level: int,
        meta: dict[str, Any],
        message: str,
        event: str,
        reason: str,
        **kwargs: Any,
    ) -> None:
        ctx = self._get_resource_context(meta)
        log_resource_event(
            self.logger,
            controller=CONTROLLER_NAME,
            resource_kind=self.kind,
            resource_name=ctx["name"],
            namespace=ctx["namespace"],
            uid=ctx["uid"],
            event=event,
            reason=reason,
            message=message,
            level=level,
            **kwargs,
        )

    def log_info(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "info",
        reason: str = "Info",
        **kwargs: Any,
    ) -> None:
        """Log an info-level structured log message."""
        self._log(logging.INFO, meta, message, event, reason, **kwargs)

    def log_warning(
        self,
        meta: dict[str, Any],
        message: str,
        event: str = "warning",
        reason: str = "Warning",
        **kwargs: Any,
    ) -> None:
        """Log a warning-level structured log message."""
        self._log(logging.WARNING, meta, message, event, reason, **kwargs)

    def log_error(
        self,
        meta: dict[str, Any],
        message: str,
        error: Exception | None = None,
        event: str = "error",
        reason: str = "Error",
        **kwargs: Any,
    ) -> None:
        """Log an error-level structured log message.

        Args:
            meta: Kubernetes resource metadata
            message: Log message
            error: Optional exception to include sanitized error details
            event: Event type (default: "error")
            reason: Reason for the event (default: "Error")
            **kwargs: Additional fields to include in the log
        """
        log_data = kwargs.copy()
        if error is not None:
            log_data["error"] = sanitize_exception(error)
            log_data["error_type"] = type(error).__name__
        self._log(logging.ERROR, meta, message, event, reason, **log_data)

    def handle_validation_error(self, body: dict[str, Any], error_msg: str) -> None:
        """Report an invalid spec.

        Raises:
            kopf.PermanentError: Always; a bad spec is not fixed by retrying
        """
        self.log_error(body.get("metadata", {}), error_msg, reason="ValidationFailed")
        emit_validate_failed(body, error_msg)
        metrics.reconcile_total.labels(kind=self.kind, result="failed").inc()
        raise kopf.PermanentError(error_msg)

    def ensure_finalizer(self, meta: dict[str, Any], patch: kopf.Patch) -> None:
        """Ensure finalizer is present in metadata."""
        finalizers = list(meta.get("finalizers", []))
        if FINALIZER not in finalizers:
            finalizers.append(FINALIZER)
            patch.metadata["finalizers"] = finalizers

    def remove_finalizer(self, meta: dict[str, Any], patch: kopf.Patch) -> None:
        """Remove finalizer from metadata."""
        finalizers = list(meta.get("finalizers", []))
        if FINALIZER in finalizers:
            finalizers.remove(FINALIZER)
            patch.metadata["finalizers"] = finalizers if finalizers else None

    def reconcile_with_metrics(
        self,
        body: dict[str, Any],
        reconcile_fn: Callable[[], None],
    ) -> None:
        """Execute reconciliation with metrics and error handling.

        Args:
            body: Kubernetes resource body
            reconcile_fn: Function to execute for reconciliation
        """
        emit_reconcile_started(body)
        metrics.reconcile_total.labels(kind=self.kind, result="started").inc()

        start_time = time.time()
        try:
            reconcile_fn()
            metrics.reconcile_total.labels(kind=self.kind, result="success").inc()
        except Exception as e:
            metrics.error_total.labels(kind=self.kind, error_type=type(e).__name__).inc()
            self.log_error(body.get("metadata", {}), "Reconciliation failed", error=e, reason="ReconciliationFailed")
            metrics.reconcile_total.labels(kind=self.kind, result="error").inc()
            raise
        finally:
            metrics.reconcile_duration_seconds.labels(kind=self.kind).observe(time.time() - start_time)


class ManagedHandler(BaseHandler):
    """Runs reconciliation ticks for one managed resource kind.

    Each tick connects, observes, and then creates or updates as needed,
    publishes connection details and patches identifier and status back onto
    the custom resource.
    """

    def __init__(self, resource_kind: ResourceKind, connector: Connector | None = None):
        super().__init__(resource_kind.value)
        self.resource_kind = resource_kind
        self._connector = connector
        self._core_api: Any | None = None
        # kopf runs timers beside change handlers, so ticks of one object can overlap
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()
        # uid -> identifier created here but not yet visible in the body kopf passes in
        self._created: dict[str, str] = {}

    @property
    def connector(self) -> Connector:
        if self._connector is None:
            self._connector = Connector()
        return self._connector

    @property
    def core_api(self) -> Any:
        if self._core_api is None:
            self._core_api = get_core_api()
        return self._core_api

    def _load_record(self, body: dict[str, Any]) -> ManagedResource:
        try:
            return ManagedResource.from_body(self.resource_kind, body)
        except ValueError as e:
            self.handle_validation_error(body, str(e))
            raise

    def _lock_for(self, uid: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(uid, threading.Lock())

    def _adopt_created(self, record: ManagedResource) -> None:
        """Fill in an identifier this process created that the body does not show yet."""
        if record.has_external_name:
            self._created.pop(record.uid, None)
        elif record.uid in self._created:
            record.external_name = self._created[record.uid]

    def _forget(self, uid: str) -> None:
        self._created.pop(uid, None)
        with self._locks_guard:
            self._locks.pop(uid, None)

    def _write_back(self, record: ManagedResource, original_external_name: str, patch: kopf.Patch) -> None:
        if record.external_name != original_external_name:
            patch.metadata.annotations[ANNOTATION_EXTERNAL_NAME] = record.external_name
        patch.status.update(record.status_patch())

    def _fail(
        self,
        record: ManagedResource,
        original_external_name: str,
        body: dict[str, Any],
        patch: kopf.Patch,
        error: OperatorError,
        emit: Callable[[dict[str, Any], str], None],
    ) -> kopf.TemporaryError | kopf.PermanentError:
        message = sanitize_exception(error)
        self.log_error(body.get("metadata", {}), message, error=error, reason=type(error).__name__)
        emit(body, message)
        set_synced_condition(record.conditions, False, message, record.generation)
        self._write_back(record, original_external_name, patch)
        return error.as_kopf_error()

    def publish(self, record: ManagedResource, details: ConnectionDetails, body: dict[str, Any]) -> None:
        """Write connection details to the secret named by writeConnectionSecretToRef."""
        ref = record.connection_secret_ref
        if not ref or not ref.get("name") or not details:
            return
        namespace = ref.get("namespace") or record.namespace or "default"
        owner_references = None
        if namespace == record.namespace and record.uid:
            owner_references = [{
                "apiVersion": body.get("apiVersion"),
                "kind": body.get("kind", self.kind),
                "name": record.name,
                "uid": record.uid,
                "controller": True,
                "blockOwnerDeletion": True,
            }]
        publish_connection_details(
            self.core_api,
            namespace,
            ref["name"],
            details,
            kind=self.kind,
            owner_references=owner_references,
        )

    def reconcile(self, body: dict[str, Any], patch: kopf.Patch) -> None:
        """Run one reconciliation tick."""
        record = self._load_record(body)
        original_external_name = record.external_name

        with self._lock_for(record.uid):
            self._adopt_created(record)
            self._reconcile(record, original_external_name, body, patch)

    def _reconcile(
        self,
        record: ManagedResource,
        original_external_name: str,
        body: dict[str, Any],
        patch: kopf.Patch,
    ) -> None:
        with trace_span(f"reconcile_{self.kind.lower()}", kind=self.kind, attributes={"resource.name": record.name}):
            try:
                with trace_span("connect", kind=self.kind):
                    api = self.connector.connect(record)
            except OperatorError as e:
                raise self._fail(record, original_external_name, body, patch, e, emit_connect_failed) from e

            with api:
                reconciler = reconciler_for(self.resource_kind, api)

                try:
                    observation = reconciler.observe(record)
                except OperatorError as e:
                    raise self._fail(record, original_external_name, body, patch, e, emit_observe_failed) from e

                details: ConnectionDetails = dict(observation.connection_details)
                if not observation.exists:
                    try:
                        creation = reconciler.create(record)
                    except CreationError as e:
                        raise self._fail(record, original_external_name, body, patch, e, emit_create_failed) from e
                    self._created[record.uid] = record.external_name
                    details.update(creation.connection_details)
                    emit_created(body, self.kind, record.external_name)
                    self.log_info(
                        body.get("metadata", {}),
                        f"{self.kind} created",
                        event="create",
                        reason="Created",
                        external_name=record.external_name,
                    )
                elif not observation.up_to_date:
                    update = reconciler.update(record)
                    details.update(update.connection_details)
                    emit_drift_detected(body, f"{self.kind} {record.external_name} differs from its spec")

            # Persist the identifier even if publishing fails below
            self._write_back(record, original_external_name, patch)
            try:
                self.publish(record, details, body)
            except Exception as e:
                message = f"cannot publish connection details: {sanitize_exception(e)}"
                self.log_error(body.get("metadata", {}), message, error=e, reason="PublishFailed")
                emit_reconcile_failed(body, message)
                set_synced_condition(record.conditions, False, message, record.generation)
                patch.status.update(record.status_patch())
                raise kopf.TemporaryError(message, delay=30) from e

            set_synced_condition(record.conditions, True, "Reconciled successfully", record.generation)
            patch.status.update(record.status_patch())

    def delete(self, body: dict[str, Any], patch: kopf.Patch) -> None:
        """Delete the external resource unless the record orphans it."""
        meta = body.get("metadata", {})
        try:
            record = ManagedResource.from_body(self.resource_kind, body)
        except ValueError as e:
            self.log_warning(meta, f"Cannot address external resource: {e}", reason="InvalidSpec")
            self.remove_finalizer(meta, patch)
            return

        with self._lock_for(record.uid):
            self._adopt_created(record)
            self._delete(record, body, patch)
        self._forget(record.uid)

    def _delete(self, record: ManagedResource, body: dict[str, Any], patch: kopf.Patch) -> None:
        meta = body.get("metadata", {})

        if record.deletion_policy == DELETION_POLICY_ORPHAN:
            self.log_info(meta, f"Orphaning {self.kind} {record.external_name}", event="deletion", reason="Orphaned")
            self.remove_finalizer(meta, patch)
            return

        if not record.has_external_name:
            self.log_info(meta, f"{self.kind} was never created", event="deletion", reason="NothingToDelete")
            self.remove_finalizer(meta, patch)
            return

        try:
            api = self.connector.connect(record)
        except OperatorError as e:
            self.log_error(meta, "Cannot connect to delete external resource", error=e, reason="ConnectFailed")
            emit_connect_failed(body, sanitize_exception(e))
            raise e.as_kopf_error() from e

        with api:
            try:
                reconciler_for(self.resource_kind, api).delete(record)
            except DeletionError as e:
                emit_delete_failed(body, sanitize_exception(e))
                raise e.as_kopf_error() from e

        emit_deleted(body, self.kind, record.external_name)
        self.log_info(meta, f"{self.kind} deleted", event="deletion", reason="Deleted")
        self.remove_finalizer(meta, patch)
