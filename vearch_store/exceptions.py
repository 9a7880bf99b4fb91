"""Vearch store exception hierarchy.

All custom exceptions inherit from VearchStoreError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "VS-1000"
    CONFIGURATION_ERROR = "VS-1001"
    VALIDATION_ERROR = "VS-1002"

    # Schema errors (2xxx)
    UNKNOWN_PROPERTY_TYPE = "VS-2000"
    METADATA_FIELD_NOT_DECLARED = "VS-2001"
    SIZE_MISMATCH = "VS-2002"
    EMPTY_BATCH = "VS-2003"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "VS-4000"
    TRANSPORT_ERROR = "VS-4001"
    SERVICE_ERROR = "VS-4002"
    INVALID_RESPONSE = "VS-4003"
    DOCUMENT_TRANSLATION_ERROR = "VS-4004"


class VearchStoreError(Exception):
    """Base exception for all Vearch store errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(VearchStoreError):
    """Schema or construction parameter error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class ValidationError(VearchStoreError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(VearchStoreError):
    """Vector store transport or translation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
