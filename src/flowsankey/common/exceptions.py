"""Custom exceptions for FlowSankey.

Provides a hierarchy of exceptions with stable error codes
and structured error payloads.
"""

from typing import Any


class FlowSankeyError(Exception):
    """Base exception for all FlowSankey errors."""

    error_code: str = "INTERNAL_ERROR"
    message: str = "An internal error occurred"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize exception with optional details.

        Args:
            message: Human-readable error message.
            details: Additional error details for debugging.
            cause: Original exception that caused this error.
        """
        self.message = message or self.message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a serializable dictionary."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(FlowSankeyError):
    """Input validation failed."""

    error_code = "VALIDATION_ERROR"
    message = "Input validation failed"


class UnrecognizedFormatError(ValidationError):
    """Graph payload matches neither the node-link nor the rows shape."""

    error_code = "UNRECOGNIZED_FORMAT"
    message = "Unexpected Sankey payload format"


class InvalidQueryError(ValidationError):
    """Invalid query parameters."""

    error_code = "INVALID_QUERY"
    message = "Invalid query parameters"
