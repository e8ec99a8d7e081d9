"""Observe/Create/Update/Delete contract shared by every managed resource kind."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .. import metrics
from ..errors import CreationError, DeletionError, RemoteAPIError, RemoteNotFoundError, TypeMismatchError
from ..models import ManagedResource, ResourceKind
from ..services.camunda.base import ConsoleAPI
from ..tracing import trace_span
from ..utils.errors import sanitize_exception

logger = logging.getLogger(__name__)

DELETE_POLICY_BEST_EFFORT = "best-effort"
DELETE_POLICY_STRICT = "strict"

_DELETE_POLICY = os.getenv("CAMUNDA_DELETE_POLICY", DELETE_POLICY_BEST_EFFORT)

ConnectionDetails = dict[str, bytes]


@dataclass
class Observation:
    """Result of comparing a record with the remote system in one tick."""

    exists: bool
    up_to_date: bool
    connection_details: ConnectionDetails = field(default_factory=dict)


@dataclass
class CreationResult:
    connection_details: ConnectionDetails = field(default_factory=dict)


@dataclass
class UpdateResult:
    connection_details: ConnectionDetails = field(default_factory=dict)


class ExternalReconciler(ABC):
    """Stateless reconciler for one resource kind.

    Every call is a pure function of the record and the remote state; the
    only thing kept between ticks is the external identifier on the record.
    """

    kind: ResourceKind

    def __init__(self, api: ConsoleAPI, delete_policy: str | None = None) -> None:
        self.api = api
        self.delete_policy = delete_policy or _DELETE_POLICY

    def _check_kind(self, record: ManagedResource) -> None:
        if record.kind is not self.kind:
            raise TypeMismatchError(self.kind.value, getattr(record.kind, "value", str(record.kind)))

    def observe(self, record: ManagedResource) -> Observation:
        """Report whether the external resource exists and matches the record.

        A missing identifier or a not-found lookup means the resource needs
        creating. Every other remote failure is raised.
        """
        self._check_kind(record)
        if not record.has_external_name:
            return Observation(exists=False, up_to_date=False)

        with trace_span("observe", kind=self.kind.value, attributes={"external.name": record.external_name}):
            try:
                observation = self._observe(record)
            except RemoteNotFoundError:
                logger.info(f"{self.kind.value} {record.external_name} not found remotely")
                metrics.external_operations_total.labels(
                    kind=self.kind.value, operation="observe", result="not_found"
                ).inc()
                return Observation(exists=False, up_to_date=False)
            except RemoteAPIError:
                metrics.external_operations_total.labels(
                    kind=self.kind.value, operation="observe", result="error"
                ).inc()
                raise

        metrics.external_operations_total.labels(kind=self.kind.value, operation="observe", result="success").inc()
        return observation

    def create(self, record: ManagedResource) -> CreationResult:
        """Create the external resource and assign its identifier to the record.

        The identifier is only assigned after the remote call returned.

        Raises:
            CreationError: If the remote call fails
        """
        self._check_kind(record)
        with trace_span("create", kind=self.kind.value, attributes={"resource.name": record.name}):
            try:
                result = self._create(record)
            except RemoteAPIError as e:
                metrics.external_operations_total.labels(
                    kind=self.kind.value, operation="create", result="error"
                ).inc()
                raise CreationError(
                    f"cannot create {self.kind.value.lower()}: {sanitize_exception(e)}", cause=e
                ) from e

        metrics.external_operations_total.labels(kind=self.kind.value, operation="create", result="success").inc()
        return result

    def update(self, record: ManagedResource) -> UpdateResult:
        """Handle drift between the record and the remote resource.

        The Console API has no update endpoints, so drift is reported but
        never pushed to the remote side.
        """
        self._check_kind(record)
        with trace_span("update", kind=self.kind.value, attributes={"external.name": record.external_name}):
            logger.warning(
                f"{self.kind.value} {record.external_name} differs from the desired state; "
                "the Console API cannot update it in place"
            )
            metrics.drift_detected_total.labels(kind=self.kind.value).inc()
            metrics.external_operations_total.labels(kind=self.kind.value, operation="update", result="noop").inc()
        return UpdateResult()

    def delete(self, record: ManagedResource) -> None:
        """Delete the external resource.

        Already-gone resources count as deleted. Other failures are logged and
        only raised as DeletionError under the strict delete policy.
        """
        self._check_kind(record)
        if not record.has_external_name:
            return

        with trace_span("delete", kind=self.kind.value, attributes={"external.name": record.external_name}):
            try:
                self._delete(record)
            except RemoteNotFoundError:
                logger.info(f"{self.kind.value} {record.external_name} already deleted")
            except RemoteAPIError as e:
                metrics.external_operations_total.labels(
                    kind=self.kind.value, operation="delete", result="error"
                ).inc()
                metrics.error_total.labels(kind=self.kind.value, error_type=type(e).__name__).inc()
                logger.error(f"Failed to delete {self.kind.value} {record.external_name}: {sanitize_exception(e)}")
                if self.delete_policy == DELETE_POLICY_STRICT:
                    raise DeletionError(
                        f"cannot delete {self.kind.value.lower()} {record.external_name}: {sanitize_exception(e)}",
                        cause=e,
                    ) from e
                return

        metrics.external_operations_total.labels(kind=self.kind.value, operation="delete", result="success").inc()

    @abstractmethod
    def _observe(self, record: ManagedResource) -> Observation:
        """Look the resource up; RemoteNotFoundError means absent."""

    @abstractmethod
    def _create(self, record: ManagedResource) -> CreationResult:
        """Issue the creation call and record the identifier."""

    @abstractmethod
    def _delete(self, record: ManagedResource) -> None:
        """Issue the deletion call."""
