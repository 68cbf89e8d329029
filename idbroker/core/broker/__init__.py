"""ID Broker API client library.

Architecture:
- client.py: IdBrokerClient, one method per broker operation
- operations.py: Declarative operation table and status-code interpretation
- transport.py: HTTP transport with bearer authentication
- trust.py: One-time broker IP verification at construction
- ip_ranges.py: Trusted CIDR ranges
- options.py: Validated client configuration
- exceptions.py: Typed exceptions for error handling

Usage:
    from idbroker.core.broker import IdBrokerClient

    client = IdBrokerClient(
        "https://broker.example.com/",
        "access-token",
        {"trusted_ip_ranges": ["10.0.0.0/8"]},
    )
    user = client.get_user("12345")
"""
from .client import IdBrokerClient
from .exceptions import (
    BrokerError,
    ConfigurationError,
    UnresolvableHostError,
    UntrustedBrokerError,
    MfaRateLimitError,
    ServiceError,
)
from .ip_ranges import IpBlock, IPRangeSet
from .operations import (
    OPERATIONS,
    ApiResult,
    BrokerResponse,
    Operation,
    Outcome,
    interpret,
)
from .options import (
    ClientConfig,
    TrustConfig,
    TRUSTED_IPS_CONFIG,
    ASSERT_VALID_BROKER_IP_CONFIG,
    HTTP_CLIENT_OPTIONS_CONFIG,
)
from .transport import BrokerTransport, REQUEST_TIMEOUT
from .trust import BrokerTrustVerifier, resolve_host

__all__ = [
    # Client
    "IdBrokerClient",
    "BrokerTransport",
    "REQUEST_TIMEOUT",

    # Exceptions
    "BrokerError",
    "ConfigurationError",
    "UnresolvableHostError",
    "UntrustedBrokerError",
    "MfaRateLimitError",
    "ServiceError",

    # Trust
    "IpBlock",
    "IPRangeSet",
    "BrokerTrustVerifier",
    "resolve_host",

    # Configuration
    "ClientConfig",
    "TrustConfig",
    "TRUSTED_IPS_CONFIG",
    "ASSERT_VALID_BROKER_IP_CONFIG",
    "HTTP_CLIENT_OPTIONS_CONFIG",

    # Operations
    "OPERATIONS",
    "ApiResult",
    "BrokerResponse",
    "Operation",
    "Outcome",
    "interpret",
]
