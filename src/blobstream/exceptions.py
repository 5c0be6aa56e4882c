"""
Exception hierarchy for blobstream.

Every error raised by the transfer engine derives from StorageError and
carries the gRPC status code it corresponds to. Errors reported by the
service are translated with from_rpc_error().
"""

from __future__ import annotations

from typing import Any

import grpc


class StorageError(Exception):
    """Base exception for all blobstream errors."""

    status_code: grpc.StatusCode = grpc.StatusCode.UNKNOWN

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self._original_cause = cause

    @property
    def code(self) -> grpc.StatusCode:
        """gRPC status code for this error."""
        return self.status_code

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Local validation errors
# =============================================================================


class InvalidArgumentError(StorageError):
    """Request rejected locally or by the service as malformed."""

    status_code = grpc.StatusCode.INVALID_ARGUMENT


class OutOfRangeError(StorageError):
    """Read range that cannot be satisfied."""

    status_code = grpc.StatusCode.OUT_OF_RANGE


class UnimplementedError(StorageError):
    """Operation is not supported by the gRPC transport."""

    status_code = grpc.StatusCode.UNIMPLEMENTED

    def __init__(
        self,
        message: str | None = None,
        operation: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.operation = operation
        if message is None:
            message = f"{operation or 'operation'} is not implemented by this transport"
        super().__init__(message, cause=cause)


# =============================================================================
# Transport errors
# =============================================================================


class UnavailableError(StorageError):
    """Channel or connection failure."""

    status_code = grpc.StatusCode.UNAVAILABLE


class AbortedError(StorageError):
    """Stream interrupted before completion."""

    status_code = grpc.StatusCode.ABORTED


class CancelledError(StorageError):
    """Call cancelled by the client."""

    status_code = grpc.StatusCode.CANCELLED


class DeadlineExceededError(StorageError):
    """Call did not complete before its deadline."""

    status_code = grpc.StatusCode.DEADLINE_EXCEEDED

    def __init__(
        self,
        message: str | None = None,
        timeout_seconds: float | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.timeout_seconds = timeout_seconds
        if message is None:
            if timeout_seconds is not None:
                message = f"Deadline of {timeout_seconds}s exceeded"
            else:
                message = "Deadline exceeded"
        super().__init__(message, cause=cause)


class InternalError(StorageError):
    """Service reported an internal failure."""

    status_code = grpc.StatusCode.INTERNAL


class DataLossError(StorageError):
    """Received data does not match its checksum."""

    status_code = grpc.StatusCode.DATA_LOSS


# =============================================================================
# Service-reported business errors
# =============================================================================


class UnauthenticatedError(StorageError):
    """Missing or invalid credentials."""

    status_code = grpc.StatusCode.UNAUTHENTICATED


class PermissionDeniedError(StorageError):
    """Caller lacks permission for the resource."""

    status_code = grpc.StatusCode.PERMISSION_DENIED


class NotFoundError(StorageError):
    """Bucket, object or upload session does not exist."""

    status_code = grpc.StatusCode.NOT_FOUND


class FailedPreconditionError(StorageError):
    """Generation or metageneration precondition did not hold."""

    status_code = grpc.StatusCode.FAILED_PRECONDITION


class ResourceExhaustedError(StorageError):
    """Quota or rate limit exceeded."""

    status_code = grpc.StatusCode.RESOURCE_EXHAUSTED


_STATUS_TO_ERROR: dict[grpc.StatusCode, type[StorageError]] = {
    grpc.StatusCode.INVALID_ARGUMENT: InvalidArgumentError,
    grpc.StatusCode.OUT_OF_RANGE: OutOfRangeError,
    grpc.StatusCode.UNIMPLEMENTED: UnimplementedError,
    grpc.StatusCode.UNAVAILABLE: UnavailableError,
    grpc.StatusCode.ABORTED: AbortedError,
    grpc.StatusCode.CANCELLED: CancelledError,
    grpc.StatusCode.DEADLINE_EXCEEDED: DeadlineExceededError,
    grpc.StatusCode.INTERNAL: InternalError,
    grpc.StatusCode.DATA_LOSS: DataLossError,
    grpc.StatusCode.UNAUTHENTICATED: UnauthenticatedError,
    grpc.StatusCode.PERMISSION_DENIED: PermissionDeniedError,
    grpc.StatusCode.NOT_FOUND: NotFoundError,
    grpc.StatusCode.FAILED_PRECONDITION: FailedPreconditionError,
    grpc.StatusCode.RESOURCE_EXHAUSTED: ResourceExhaustedError,
}


def _status_of(error: Any) -> tuple[grpc.StatusCode, str]:
    code = grpc.StatusCode.UNKNOWN
    details = ""
    if callable(getattr(error, "code", None)):
        code = error.code() or grpc.StatusCode.UNKNOWN
    if callable(getattr(error, "details", None)):
        details = error.details() or ""
    return code, details


def from_rpc_error(error: grpc.RpcError) -> StorageError:
    """
    Convert a gRPC error into the matching StorageError subclass.

    The status details become the message verbatim; unknown status codes
    produce a plain StorageError with the code preserved.
    """
    code, details = _status_of(error)
    message = details or f"RPC failed with status {code.name}"
    error_class = _STATUS_TO_ERROR.get(code)
    if error_class is None:
        result = StorageError(message, cause=error)
        result.status_code = code
        return result
    return error_class(message, cause=error)


__all__ = [
    "StorageError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "UnimplementedError",
    "UnavailableError",
    "AbortedError",
    "CancelledError",
    "DeadlineExceededError",
    "InternalError",
    "DataLossError",
    "UnauthenticatedError",
    "PermissionDeniedError",
    "NotFoundError",
    "FailedPreconditionError",
    "ResourceExhaustedError",
    "from_rpc_error",
]
