"""
Operator error hierarchy.

Every failure a reconciliation tick can hit maps onto one of these types.
Retryable errors become ``kopf.TemporaryError`` so kopf backs off and runs the
whole tick again later; the rest become ``kopf.PermanentError``.
"""

from __future__ import annotations

import kopf


class OperatorError(Exception):
    """Base error class for all operator-related exceptions."""

    def __init__(
        self,
        message: str,
        retryable: bool = True,
        delay: int = 30,
        cause: Exception | None = None,
    ):
        """
        Initialize operator error.

        Args:
            message: Human-readable error description
            retryable: Whether kopf should retry this operation
            delay: Suggested retry delay in seconds
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.retryable = retryable
        self.delay = delay
        self.cause = cause

    def as_kopf_error(self) -> kopf.TemporaryError | kopf.PermanentError:
        """Convert to appropriate kopf exception type."""
        if self.retryable:
            return kopf.TemporaryError(str(self), delay=self.delay)
        return kopf.PermanentError(str(self))


class CredentialResolutionError(OperatorError):
    """The credential source of a ProviderConfig could not be resolved."""


class MalformedCredentialsError(OperatorError):
    """Resolved credential bytes are not a usable client-credentials document."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message, retryable=False, cause=cause)


class AuthenticationError(OperatorError):
    """The OAuth token exchange failed or was rejected."""


class RemoteAPIError(OperatorError):
    """A Console API call failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, cause=cause)
        self.status_code = status_code
        self.body = body


class RemoteNotFoundError(RemoteAPIError):
    """The addressed remote resource does not exist.

    Observe absorbs this and reports the resource as absent.
    """


class CreationError(OperatorError):
    """Creating the external resource failed."""


class DeletionError(OperatorError):
    """Deleting the external resource failed (strict delete policy only)."""


class TypeMismatchError(OperatorError):
    """A record of one kind was handed to the reconciler of another kind."""

    def __init__(self, expected: str, actual: str):
        super().__init__(
            f"managed resource is not a {expected.lower()} custom resource (got {actual})",
            retryable=False,
        )
        self.expected = expected
        self.actual = actual
