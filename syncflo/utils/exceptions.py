"""
Custom Exception Classes

Defines application-specific exceptions for error handling, logging and
HTTP error responses. Each exception carries the status code it is rendered
with and a stable machine-readable error code.
"""

from typing import Any, Dict, Optional


class SyncFloException(Exception):
    """Base exception for all SyncFlo errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "SYNCFLO_ERROR",
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/API responses"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(SyncFloException):
    """Missing or malformed request input"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="VALIDATION_ERROR", details=details)


class NotFoundException(SyncFloException):
    """No record matched the request"""

    status_code = 404

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="NOT_FOUND", details=details)


class UpstreamException(SyncFloException):
    """A call to an external service failed"""

    def __init__(
        self,
        message: str,
        upstream_status: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        details = details or {}
        if upstream_status:
            details["upstream_status"] = upstream_status
        super().__init__(message, error_code="UPSTREAM_ERROR", details=details)


class PersistenceException(SyncFloException):
    """Database read or write failed"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="PERSISTENCE_ERROR", details=details)


class UnknownProviderException(SyncFloException):
    """Provider key has no registered profile column"""

    status_code = 400

    def __init__(self, provider: Optional[str]):
        super().__init__(
            f"Unknown provider: {provider}",
            error_code="UNKNOWN_PROVIDER",
            details={"provider": provider},
        )


class MissingUserIdentifierException(SyncFloException):
    """Webhook payload carries no end-user identifier"""

    def __init__(self, connection_id: Optional[str] = None):
        super().__init__(
            "Webhook payload has no end user identifier",
            error_code="MISSING_USER_IDENTIFIER",
            details={"connection_id": connection_id},
        )


class WebhookSignatureException(SyncFloException):
    """Nango webhook signature verification failed"""

    status_code = 400

    def __init__(self, message: str = "Invalid Nango webhook signature"):
        super().__init__(
            message,
            error_code="INVALID_SIGNATURE",
            details={"verification": "failed"},
        )


class ConfigurationException(SyncFloException):
    """Configuration or environment errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="CONFIG_ERROR", details=details)
