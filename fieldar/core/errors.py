"""Error Hierarchy - typed, categorized exceptions for every store failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the underlying cause (or None when there is none)
    - The set of concrete error classes below is closed: callers match on these only
    - to_response() produces the REST envelope; no internal paths leak into `message`
      for infrastructure errors

Design Decisions:
    - Single hierarchy with FieldARError base: the API layer catches one type
    - ErrorContext as dataclass: rich observability without coupling to logging
    - StorageIOError / StoredFileNotFoundError avoid shadowing the builtins
      IOError / FileNotFoundError, which the store wraps rather than re-raises
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    SERIALIZATION = "serialization"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    machine_id: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class FieldARError(Exception):
    """Base exception for all store errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.cause = cause

    def log_extra(self) -> dict:
        """Structured log fields for this error (see infrastructure/observability.py)."""
        return {"error_code": self.code, "machine_id": self.context.machine_id}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "machine_id": self.context.machine_id,
                },
            }
        }


# ─── Environment Errors ─────────────────────────────────────────

class RootDirectoryUnavailableError(FieldARError):
    """The platform could not supply a writable root storage location."""
    def __init__(
        self, cause: BaseException | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Root storage directory is unavailable",
            "ROOT_DIRECTORY_UNAVAILABLE", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500, cause,
        )


# ─── Domain Errors (400-level) ──────────────────────────────────

class MachineNotFoundError(FieldARError):
    """No folder exists for the requested machine."""
    def __init__(self, machine_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.machine_id = machine_id
        super().__init__(
            f"Machine '{machine_id}' not found",
            "MACHINE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.machine_id = machine_id


class StoredFileNotFoundError(FieldARError):
    """A file the caller expected (document, base image, overlay image) is absent."""
    def __init__(self, path: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = path
        name = path.replace("\\", "/").rsplit("/", 1)[-1]
        super().__init__(
            f"File '{name}' not found",
            "FILE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.path = path


class InvalidPathSegmentError(FieldARError):
    """A machine id or image name is not a single, visible path component."""
    def __init__(self, kind: str, value: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid {kind}: must be one non-empty path segment without a leading '.'",
            "INVALID_PATH_SEGMENT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.kind = kind
        self.value = value


class MachineIdMismatchError(FieldARError):
    """A document names a different machine than the folder it is stored in."""
    def __init__(
        self, machine_id: str, document_machine_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.machine_id = machine_id
        super().__init__(
            f"Document machine_id '{document_machine_id}' does not match "
            f"machine '{machine_id}'",
            "MACHINE_ID_MISMATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.document_machine_id = document_machine_id


class InvalidImageDataError(FieldARError):
    """Image payload cannot be stored (currently: empty)."""
    def __init__(self, reason: str = "empty image data", context: ErrorContext | None = None):
        super().__init__(
            f"Invalid image data: {reason}",
            "INVALID_IMAGE_DATA", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class DecodeError(FieldARError):
    """Stored document bytes do not match the document schema."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            "Document could not be decoded",
            "DECODE_ERROR", ErrorCategory.SERIALIZATION,
            ErrorSeverity.ERROR, context, 422, cause,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class EncodeError(FieldARError):
    """Document could not be serialized."""
    def __init__(self, cause: BaseException, context: ErrorContext | None = None):
        super().__init__(
            "Document could not be encoded",
            "ENCODE_ERROR", ErrorCategory.SERIALIZATION,
            ErrorSeverity.ERROR, context, 500, cause,
        )


class StorageIOError(FieldARError):
    """A filesystem operation failed."""
    def __init__(
        self, operation: str, cause: BaseException, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Storage {operation} failed",
            "STORAGE_IO_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503, cause,
        )
        self.operation = operation

    def to_response(self) -> dict:
        body = super().to_response()
        body["error"]["context"]["operation"] = self.operation
        return body

    def log_extra(self) -> dict:
        return {**super().log_extra(), "operation": self.operation}
