"""Domain-specific exceptions"""

from typing import Any


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ApiError(DomainException):
    """A dispatched RevenueCat call did not produce a usable result"""

    kind = "api"


class TransportError(ApiError):
    """Network, TLS or timeout failure before any HTTP status was received"""

    kind = "transport"

    def __init__(self, cause: Exception):
        super().__init__(f"Transport failure: {cause}")
        self.cause = cause


class ServiceError(ApiError):
    """RevenueCat answered with a 4xx/5xx status"""

    kind = "service"

    def __init__(self, status_code: int, error: Any = None):
        message = getattr(error, "message", None) or "no error body"
        super().__init__(f"RevenueCat API error {status_code}: {message}")
        self.status_code = status_code
        self.error = error

    @property
    def is_unauthorized(self) -> bool:
        """401 means the bearer token is missing, invalid or expired"""
        return self.status_code == 401


class DecodingError(ApiError):
    """Response body did not match the expected model"""

    kind = "decoding"

    def __init__(self, cause: Exception):
        super().__init__(f"Invalid response data from RevenueCat: {cause}")
        self.cause = cause
