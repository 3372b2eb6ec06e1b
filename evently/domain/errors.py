"""Domain errors raised or returned across the event lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    MISSING_ATTACHMENT = "MISSING_ATTACHMENT"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    UPSTREAM_UPLOAD_FAILED = "UPSTREAM_UPLOAD_FAILED"
    UPLOAD_SUPERSEDED = "UPLOAD_SUPERSEDED"
    PERSISTENCE_FAILED = "PERSISTENCE_FAILED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    MISSING_EVENT_ID = "MISSING_EVENT_ID"
    SUBMISSION_LOCKED = "SUBMISSION_LOCKED"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised when a draft breaks a field or cross-field rule."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)
        self.field = field


class Unauthenticated(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UNAUTHENTICATED,
            message="Please log in to create/update an event",
        )


class Forbidden(DomainError):
    def __init__(self, message: str = "Unauthorized or event not found") -> None:
        super().__init__(code=ErrorCode.FORBIDDEN, message=message)


class MissingAttachment(DomainError):
    def __init__(self) -> None:
        super().__init__(code=ErrorCode.MISSING_ATTACHMENT, message="No file provided")


class PayloadTooLarge(DomainError):
    def __init__(self, size: int, limit: int) -> None:
        super().__init__(code=ErrorCode.PAYLOAD_TOO_LARGE, message="File size too large")
        self.size = size
        self.limit = limit


class UnsupportedMediaType(DomainError):
    def __init__(self, content_type: str | None) -> None:
        super().__init__(code=ErrorCode.UNSUPPORTED_MEDIA_TYPE, message="Invalid file type")
        self.content_type = content_type


class UpstreamUploadError(DomainError):
    """Raised when the gateway or the image host fails during an upload."""

    def __init__(self, message: str = "Upload failed") -> None:
        super().__init__(code=ErrorCode.UPSTREAM_UPLOAD_FAILED, message=message)


class UploadSuperseded(DomainError):
    """Returned to an upload that was cancelled by a newer one."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.UPLOAD_SUPERSEDED,
            message="Upload replaced by a newer file",
        )


class PersistenceError(DomainError):
    def __init__(self, message: str = "Something went wrong") -> None:
        super().__init__(code=ErrorCode.PERSISTENCE_FAILED, message=message)


class EventNotFound(DomainError):
    def __init__(self, event_id: str) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")
        self.event_id = event_id


class MissingEventId(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.MISSING_EVENT_ID,
            message="No event selected for update",
        )


class SubmissionLocked(DomainError):
    """Returned when a form is submitted while submitting is disabled."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.SUBMISSION_LOCKED,
            message="This form has already been submitted",
        )
