"""ID Broker client exceptions for error handling."""
from __future__ import annotations
from typing import Any, Optional


class BrokerError(Exception):
    """Base exception for all ID Broker client errors.

    Attributes:
        code: Stable numeric identifier of the place the error was raised
    """

    def __init__(self, message: str, code: Optional[int] = None):
        self.message = message
        self.code = code
        super().__init__(message)


class ConfigurationError(BrokerError, ValueError):
    """Constructor arguments are missing or malformed."""
    pass


class UnresolvableHostError(BrokerError):
    """Broker URI has no host, or the host could not be resolved."""
    pass


class UntrustedBrokerError(BrokerError):
    """Broker host resolves to an address outside the trusted ranges.

    Attributes:
        address: Resolved IP address of the broker
        host: Hostname taken from the broker URI
    """

    def __init__(self, message: str, address: str, host: str, code: Optional[int] = None):
        self.address = address
        self.host = host
        super().__init__(message, code)


class MfaRateLimitError(BrokerError):
    """Too many recent failed verification attempts for an MFA."""
    pass


class ServiceError(BrokerError):
    """Broker answered with a status code the operation does not expect.

    Attributes:
        status_code: HTTP status code of the response
        unique_error_code: Identifier of the call site that rejected the response
        body: Parsed (or raw) response body
    """

    def __init__(self, message: str, unique_error_code: int, status_code: int, body: Any = None):
        self.status_code = status_code
        self.unique_error_code = unique_error_code
        self.body = body
        super().__init__(message, unique_error_code)

    def __str__(self) -> str:
        return f"[{self.status_code}] ({self.unique_error_code}) {self.message}"
