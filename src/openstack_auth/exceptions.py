"""
Exceptions raised by openstack_auth.

Every failure surfaced by an AuthMethod or a factory function is an
AuthError subclass, so callers can catch the whole family at once.
"""

from typing import Optional, Sequence


class AuthError(Exception):
    """Base exception for authentication failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    """Raised when the identity endpoint rejects the exchange."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class NetworkFailure(AuthError):
    """Raised on transport errors, timeouts and identity server errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedResponse(AuthError):
    """Raised when an identity response cannot be parsed into a token."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class ConfigError(AuthError):
    """Raised when configuration is missing, invalid or contradictory."""
    pass


class MissingEnv(AuthError):
    """Raised when required OS_* environment variables are absent."""

    def __init__(self, missing: Sequence[str]):
        self.missing = tuple(missing)
        super().__init__(
            f"Missing required environment variable(s): {', '.join(self.missing)}"
        )


class EndpointNotFound(AuthError):
    """Raised when the service catalog has no matching endpoint."""

    def __init__(self, service_type: str, interface: str, region: Optional[str] = None):
        self.service_type = service_type
        self.interface = interface
        self.region = region
        where = f" in region {region}" if region else ""
        super().__init__(
            f"No {interface} endpoint for service '{service_type}'{where}"
        )
