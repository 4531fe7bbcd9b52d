"""Exceptions for tfaws."""

from typing import Any

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class TfawsError(Exception):
    """
    Base exception for all tfaws errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Configuration Exceptions
# ---------------------------------------------------------------------------


class ValidationError(TfawsError):
    """
    Raised when declared configuration is malformed.

    Attributes:
        field: The configuration field that failed validation
        value: The rejected value
        reason: Human-readable explanation
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


# ---------------------------------------------------------------------------
# Resource Exceptions
# ---------------------------------------------------------------------------


class ResourceError(TfawsError):
    """
    Base exception for errors tied to a managed AWS resource.

    Attributes:
        resource_type: Resource kind (e.g., 'aws_vpc_ipam')
        resource_id: Remote identifier, if one is known yet
    """

    def __init__(self, message: str, resource_type: str, resource_id: str | None) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(message)


class ResourceNotFoundError(ResourceError):
    """Raised when a resource that must exist (e.g., just created) is missing."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} ({resource_id}) not found",
            resource_type,
            resource_id,
        )


class ResourceOperationError(ResourceError):
    """
    Raised when an AWS API call for a resource fails.

    The underlying botocore error is kept as ``cause`` (and chained as
    ``__cause__`` by the raiser).
    """

    def __init__(
        self,
        operation: str,
        resource_type: str,
        resource_id: str | None,
        cause: Exception,
    ) -> None:
        self.operation = operation
        self.cause = cause
        target = f"{resource_type} ({resource_id})" if resource_id else resource_type
        super().__init__(f"{operation} {target}: {cause}", resource_type, resource_id)


class WaitTimeoutError(ResourceError):
    """Raised when a resource never reaches an expected status in time."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | None,
        expected: list[str],
        last_status: str | None,
        timeout: float,
    ) -> None:
        self.expected = expected
        self.last_status = last_status
        self.timeout = timeout
        super().__init__(
            f"timeout while waiting for {resource_type} ({resource_id}) to become "
            f"{', '.join(expected)} (last status: {last_status or 'unknown'}, "
            f"timeout: {timeout:g}s)",
            resource_type,
            resource_id,
        )


class UnexpectedStateError(ResourceError):
    """Raised when polling observes a status outside the pending and target sets."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str | None,
        status: str,
        expected: list[str],
    ) -> None:
        self.status = status
        self.expected = expected
        super().__init__(
            f"unexpected state '{status}' for {resource_type} ({resource_id}), "
            f"wanted target '{', '.join(expected)}'",
            resource_type,
            resource_id,
        )
