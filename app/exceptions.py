# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
#
# Every failure of a submission is one of the tagged exceptions below. Each
# class decides its own HTTP status and whether its message is safe to show
# to the person filling in the form; anything else is logged in full and
# answered with a generic message.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from core.models.supplier import FieldError

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


class SupplierRegistrationException(Exception):
    """
    Base exception for the supplier registration API.

    All custom exceptions inherit from this class. `message` is the internal
    description written to logs; `public_message` is what the client sees.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPPLIER_REGISTRATION_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
        public_message: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}
        self.public_message = public_message or GENERIC_ERROR_MESSAGE

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        return {
            "success": False,
            "error": self.public_message,
            "code": self.code,
        }


# =============================================================================
# Request Gate Exceptions
# =============================================================================

class RateLimitedError(SupplierRegistrationException):
    """Raised when a client exceeded its submissions for the current window."""

    def __init__(self, client_id: str):
        super().__init__(
            message=f"Rate limit exceeded for client: {client_id}",
            code="RATE_LIMITED",
            status_code=429,
            suggestion="Wait for the current window to end before submitting again",
            details={"client_id": client_id},
            public_message="Too many submissions. Please try again later.",
        )


class SubmissionValidationError(SupplierRegistrationException):
    """Raised when a submission violates one or more field rules."""

    def __init__(self, field_errors: list[FieldError]):
        self.field_errors = field_errors
        super().__init__(
            message=f"Invalid input data: {', '.join(e.field for e in field_errors)}",
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Correct the listed fields and submit again",
            details={"fields": [e.field for e in field_errors]},
            public_message="Invalid input data",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["details"] = [f"{e.field}: {e.message}" for e in self.field_errors]
        result["fields"] = [e.model_dump() for e in self.field_errors]
        return result


# =============================================================================
# Upload Exceptions
# =============================================================================

class FileRejectedError(SupplierRegistrationException):
    """
    Base for files refused before upload.

    These are "fix your input" failures, so the message is surfaced and the
    body carries the same `details`/`fields` shape as a validation error.
    """

    def __init__(self, message: str, code: str, slot: str, field: str, label: str, **kwargs: Any):
        self.slot = slot
        self.field_error = FieldError(field=field, label=label, message=message)
        super().__init__(
            message=message,
            code=code,
            status_code=400,
            public_message=message,
            **kwargs,
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["details"] = [f"{self.field_error.field}: {self.field_error.message}"]
        result["fields"] = [self.field_error.model_dump()]
        return result


class FileSizeExceededError(FileRejectedError):
    """Raised when a decoded file is larger than the configured ceiling."""

    def __init__(self, slot: str, field: str, label: str, max_mb: int):
        super().__init__(
            message=f"{slot.capitalize()} exceeds the {max_mb}MB file size limit",
            code="FILE_TOO_LARGE",
            slot=slot,
            field=field,
            label=label,
            suggestion=f"Upload a file smaller than {max_mb}MB",
            details={"slot": slot, "max_mb": max_mb},
        )


class InvalidFileTypeError(FileRejectedError):
    """Raised when a file's declared MIME type is missing or not allowed."""

    def __init__(self, slot: str, field: str, label: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid file type for {slot}. Allowed types: {', '.join(allowed)}",
            code="INVALID_FILE_TYPE",
            slot=slot,
            field=field,
            label=label,
            details={"slot": slot, "allowed_types": allowed},
        )


class InvalidFileEncodingError(FileRejectedError):
    """Raised when a file payload is not valid base64."""

    def __init__(self, slot: str, field: str, label: str):
        super().__init__(
            message=f"Invalid file encoding for {slot}",
            code="INVALID_FILE_ENCODING",
            slot=slot,
            field=field,
            label=label,
            suggestion="Send the file as a base64 data URL",
            details={"slot": slot},
        )


class StorageUploadError(SupplierRegistrationException):
    """Raised when the blob store refuses an upload."""

    def __init__(self, slot: str, error: str):
        super().__init__(
            message=f"Failed to upload {slot} to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"slot": slot, "error": error},
        )


# =============================================================================
# Persistence / Notification Exceptions
# =============================================================================

class PersistenceError(SupplierRegistrationException):
    """Raised when the supplier record cannot be written."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Database insert failed: {error}",
            code="PERSISTENCE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


class NotificationError(SupplierRegistrationException):
    """
    Raised when an email cannot be sent.

    Never reaches the client: notifications happen after the record is saved.
    """

    def __init__(self, recipient_class: str, error: str):
        self.recipient_class = recipient_class
        super().__init__(
            message=f"Failed to send {recipient_class} email: {error}",
            code="NOTIFICATION_ERROR",
            status_code=500,
            details={"recipient_class": recipient_class, "error": error},
        )


class UnexpectedSubmissionError(SupplierRegistrationException):
    """Wraps any unclassified failure raised while processing a submission."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Unexpected error while processing submission: {error}",
            code="INTERNAL_ERROR",
            status_code=500,
            details={"error": error},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def supplier_registration_exception_handler(
    request: Request,
    exc: SupplierRegistrationException
) -> JSONResponse:
    """
    Convert SupplierRegistrationException to JSON response.

    Returns the stable envelope:
    - success: always false
    - error: public message
    - code: machine-readable error code
    - details / fields: per-field messages for 400 responses
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
