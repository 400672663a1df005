"""Custom exceptions for ClientScan.

Provides structured error handling with categorized exceptions
and standardized error response format.
"""

from typing import Optional, Dict, Any


class ClientScanException(Exception):
    """Base exception for all ClientScan errors.

    Provides structured error response format with:
    - error_code: Machine-readable error identifier
    - message: Human-readable error description
    - details: Optional additional context
    """

    error_code: str = "CLIENTSCAN_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Return structured error response dict."""
        response = {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


# ============ Validation Errors (4xx) ============


class ValidationError(ClientScanException):
    """Input validation failed."""

    error_code = "VALIDATION_ERROR"
    status_code = 400


class SignalValidationError(ValidationError):
    """A probe payload field has the wrong shape."""

    error_code = "INVALID_SIGNAL"

    def __init__(self, field: str, reason: str):
        super().__init__(f"Invalid signal field {field}: {reason}", details={"field": field, "reason": reason})
        self.field = field


# ============ Extraction Errors ============


class ExtractorError(ClientScanException):
    """A single extractor failed.

    Never raised across the detector boundary: the detector converts the
    underlying exception into one of these and carries it as data.
    """

    error_code = "EXTRACTOR_FAILED"

    def __init__(self, source: str, message: str, cause: Optional[BaseException] = None):
        super().__init__(f"Extractor {source} failed: {message}", details={"extractor": source})
        self.source = source
        self.cause = cause

    @classmethod
    def from_exception(cls, source: str, exc: BaseException) -> "ExtractorError":
        return cls(source, f"{type(exc).__name__}: {exc}", cause=exc)


# ============ Configuration Errors ============


class ConfigurationError(ClientScanException):
    """Configuration issue."""

    error_code = "CONFIGURATION_ERROR"

    def __init__(self, setting: str, message: str):
        super().__init__(f"Configuration error for {setting}: {message}", details={"setting": setting})


# ============ Utility Functions ============


def error_response(exception: ClientScanException) -> tuple:
    """Create Flask JSON response from exception.

    Returns:
        Tuple of (response_dict, status_code) ready for jsonify
    """
    return exception.to_dict(), exception.status_code


def make_error_response(
    error_code: str, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Create structured error response dict without exception.

    Useful for creating error responses directly in routes.
    """
    response = {
        "error": True,
        "error_code": error_code,
        "message": message,
    }
    if details:
        response["details"] = details
    return response
