"""
Error types for the Street View Explorer service.

Every failure a tool call can report is a StreetViewError subclass. The
dispatcher catches these at the operation boundary and turns them into the
error envelope; anything else is a defect and propagates.
"""
from typing import Optional


class StreetViewError(Exception):
    """Base class for errors reported back to the caller."""

    kind = "internal"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self, prefix: Optional[str] = None) -> dict:
        """Build the error envelope for this error."""
        message = f"{prefix}: {self.message}" if prefix else self.message
        return {"ok": False, "error": {"type": self.kind, "message": message}}


class ValidationError(StreetViewError):
    """Malformed or contradictory arguments, detected before any I/O."""

    kind = "validation"
    http_status = 400


class ConflictError(StreetViewError):
    """The target file already exists."""

    kind = "conflict"
    http_status = 409


class UpstreamError(StreetViewError):
    """The Street View API answered with an error or an unusable body."""

    kind = "upstream"
    http_status = 502

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    def to_response(self, prefix: Optional[str] = None) -> dict:
        response = super().to_response(prefix)
        if self.status_code is not None:
            response["error"]["status_code"] = self.status_code
        return response


class NetworkError(StreetViewError):
    """The request never got an answer (timeout, DNS, refused connection)."""

    kind = "network"
    http_status = 504


class FilesystemError(StreetViewError):
    """Unexpected I/O failure while reading or writing the output directories."""

    kind = "filesystem"
    http_status = 500


class ConfigurationError(StreetViewError):
    """The service is missing configuration an operation needs."""

    kind = "configuration"
    http_status = 500
