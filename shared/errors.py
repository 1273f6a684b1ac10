"""
Shared error handling for the Entitlements API.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class AccessLayerException(Exception):
    """Base exception for Entitlements API errors."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(AccessLayerException):
    """Validation-related errors."""

    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__("VALIDATION_ERROR", message, details)


class ConfigLoadError(AccessLayerException):
    """Configuration source could not be read."""

    status_code = 500

    def __init__(self, message: str = "Unable to read configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_LOAD_ERROR", message, details)


class ConfigParseError(AccessLayerException):
    """Configuration document is malformed."""

    status_code = 500

    def __init__(self, message: str = "Malformed configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIG_PARSE_ERROR", message, details)


class DependencyFailure(AccessLayerException):
    """An upstream dependency call failed.

    ``detail`` is the structured payload rendered back to the caller; it is
    whatever the dependency error mapper produced for the failed call.
    """

    status_code = 500

    def __init__(self, service: str, detail: Any, message: str = "Dependency failure"):
        self.service = service
        self.detail = detail
        super().__init__("DEPENDENCY_FAILURE", f"{service}: {message}", {"service": service})
