"""
Error types and classification for the Lens application.

Every failure that reaches a page is a ``LensError``: it carries a category,
a severity and a message that can be shown to the user as is. Exceptions
raised by libraries are mapped onto the same types by ``ErrorHandler``.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    UPLOAD = "upload"
    IMAGE_PROCESSING = "image_processing"
    DATABASE = "database"
    STORAGE = "storage"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SYSTEM = "system"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_USER_MESSAGES = {
    ErrorCategory.AUTHENTICATION: "Please sign in to continue.",
    ErrorCategory.AUTHORIZATION: "You don't have permission to do that.",
    ErrorCategory.UPLOAD: "Failed to upload the image.",
    ErrorCategory.IMAGE_PROCESSING: "The image could not be processed.",
    ErrorCategory.DATABASE: "A database error occurred.",
    ErrorCategory.STORAGE: "A storage error occurred.",
    ErrorCategory.VALIDATION: "Some of the input is invalid.",
    ErrorCategory.NOT_FOUND: "Not found.",
    ErrorCategory.SYSTEM: "A system error occurred.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred.",
}

SECURITY_CATEGORIES = (ErrorCategory.AUTHENTICATION, ErrorCategory.AUTHORIZATION)


@dataclass
class ErrorInfo:
    """Snapshot of an error, as handed to the UI."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)
    recoverable: bool = True
    retry_suggested: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
        }


class LensError(Exception):
    """
    Base class of the Lens error hierarchy.

    Subclasses pick their category, severity and default code through class
    attributes. The error is logged as soon as it is constructed.
    """

    category = ErrorCategory.UNKNOWN
    severity = ErrorSeverity.MEDIUM
    default_code = "unknown_error"
    recoverable = True
    retry_suggested = False
    # The exception message is already phrased for the user
    message_is_user_facing = False

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
        retry_suggested: bool | None = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.user_message = user_message or self._default_user_message(message)
        self.details = details or {}
        self.original_exception = original_exception
        if retry_suggested is not None:
            self.retry_suggested = retry_suggested
        self.timestamp = datetime.now()

        self._log_error()

    def _default_user_message(self, message: str) -> str:
        if self.message_is_user_facing and message:
            return message
        return DEFAULT_USER_MESSAGES[self.category]

    def _log_error(self) -> None:
        context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            "retry_suggested": self.retry_suggested,
            **self.details,
        }
        if self.original_exception:
            context["original_exception"] = str(self.original_exception)

        log_error(self, context)

        if self.category in SECURITY_CATEGORIES:
            log_security_event(self.category.value, context=context)

    def get_error_info(self) -> ErrorInfo:
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
            retry_suggested=self.retry_suggested,
        )


class AuthenticationError(LensError):
    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.HIGH
    default_code = "auth_failed"
    retry_suggested = True


class AuthorizationError(LensError):
    """The signed-in user may not touch the resource, usually someone else's album."""

    category = ErrorCategory.AUTHORIZATION
    severity = ErrorSeverity.HIGH
    default_code = "access_denied"
    recoverable = False


class UploadError(LensError):
    category = ErrorCategory.UPLOAD
    default_code = "upload_failed"
    retry_suggested = True


class ImageProcessingError(LensError):
    category = ErrorCategory.IMAGE_PROCESSING
    default_code = "image_processing_failed"


class DatabaseError(LensError):
    category = ErrorCategory.DATABASE
    severity = ErrorSeverity.HIGH
    default_code = "database_error"
    retry_suggested = True


class StorageError(LensError):
    category = ErrorCategory.STORAGE
    severity = ErrorSeverity.HIGH
    default_code = "storage_error"
    retry_suggested = True


class ValidationError(LensError):
    """Rejected user input such as a missing title or a sixth image."""

    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW
    default_code = "validation_failed"
    message_is_user_facing = True


class NotFoundError(LensError):
    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW
    default_code = "not_found"
    message_is_user_facing = True


class LensSystemError(LensError):
    category = ErrorCategory.SYSTEM
    severity = ErrorSeverity.CRITICAL
    default_code = "system_error"
    recoverable = False


# Checked in order; the first category whose keywords occur in the message wins
CLASSIFICATION_RULES: list[tuple[type[LensError], tuple[str, ...]]] = [
    (AuthenticationError, ("authentication", "login", "sign in", "password", "unauthorized")),
    (AuthorizationError, ("permission", "access denied", "forbidden", "not allowed")),
    (UploadError, ("upload", "file size", "too large", "unsupported format")),
    (ImageProcessingError, ("image", "pillow", "decode", "jpeg", "png", "webp")),
    (DatabaseError, ("database", "duckdb", "sql", "query")),
    (StorageError, ("storage", "gcs", "bucket", "blob", "download")),
    (ValidationError, ("validation", "invalid", "required", "missing")),
]

SYSTEM_ERROR_TYPES = ("SystemError", "MemoryError", "OSError")


class ErrorHandler:
    """Turns arbitrary exceptions into ``ErrorInfo`` and counts them by code."""

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}
        self.logger = get_logger(__name__)

    def handle_error(
        self,
        error: Exception | LensError,
        context: dict[str, Any] | None = None,
    ) -> ErrorInfo:
        """
        Classify an exception.

        Args:
            error: Exception to handle
            context: Extra details attached to classified errors

        Returns:
            ErrorInfo: Structured error information
        """
        if not isinstance(error, LensError):
            error = self._classify_error(error, context or {})

        error_info = error.get_error_info()
        self.error_counts[error_info.code] = self.error_counts.get(error_info.code, 0) + 1
        return error_info

    def _classify_error(self, error: Exception, context: dict[str, Any]) -> LensError:
        message = str(error)
        lowered = message.lower()
        details = {"original_type": type(error).__name__, **context}

        for error_class, keywords in CLASSIFICATION_RULES:
            if any(keyword in lowered for keyword in keywords):
                if error_class is ValidationError:
                    return ValidationError(
                        message,
                        user_message=DEFAULT_USER_MESSAGES[ErrorCategory.VALIDATION],
                        details=details,
                        original_exception=error,
                    )
                return error_class(message, details=details, original_exception=error)

        if type(error).__name__ in SYSTEM_ERROR_TYPES:
            return LensSystemError(message, details=details, original_exception=error)

        return LensError(message, details=details, original_exception=error)

    def get_error_statistics(self) -> dict[str, int]:
        """Handled errors per code, shown by the health check."""
        return self.error_counts.copy()


error_handler = ErrorHandler()


def handle_error(error: Exception | LensError, context: dict[str, Any] | None = None) -> ErrorInfo:
    """Classify an exception with the shared handler."""
    return error_handler.handle_error(error, context)
