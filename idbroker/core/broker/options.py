"""Client configuration containers and constructor-argument validation."""
from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from idbroker.core.validators import parse_bool, parse_timeout

from .exceptions import ConfigurationError
from .ip_ranges import IPRangeSet

TRUSTED_IPS_CONFIG = "trusted_ip_ranges"
ASSERT_VALID_BROKER_IP_CONFIG = "assert_valid_broker_ip"
HTTP_CLIENT_OPTIONS_CONFIG = "http_client_options"

DEFAULT_TIMEOUT = 30


@dataclass(frozen=True)
class TrustConfig:
    """Whether to verify the broker IP, and against which ranges."""
    enabled: bool = True
    ranges: Optional[IPRangeSet] = None

    def __post_init__(self):
        if self.enabled and not self.ranges:
            raise ConfigurationError(
                f"The config entry for {TRUSTED_IPS_CONFIG} must be set (as a list) when "
                f"{ASSERT_VALID_BROKER_IP_CONFIG} is not set or is set to True.",
                1494531150,
            )


@dataclass(frozen=True)
class ClientConfig:
    """Validated, immutable settings owned by one IdBrokerClient."""
    base_uri: str
    access_token: str = field(repr=False)
    trust: TrustConfig
    timeout_seconds: float = DEFAULT_TIMEOUT
    http_client_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_arguments(
        cls,
        base_uri: str,
        access_token: str,
        config: Optional[Mapping[str, Any]] = None,
    ) -> "ClientConfig":
        """Validate constructor arguments in a fixed order.

        Shape problems (empty URI or token, missing or malformed ranges) are
        all reported before any network activity takes place.

        Args:
            base_uri: Broker base URL
            access_token: Bearer token
            config: Options mapping (trusted_ip_ranges, assert_valid_broker_ip,
                http_client_options)

        Raises:
            ConfigurationError: On any invalid or missing value
        """
        if not base_uri or not str(base_uri).strip():
            raise ConfigurationError("Please provide a base URI for the ID Broker.", 1494531101)
        if not access_token or not str(access_token).strip():
            raise ConfigurationError("Please provide an access token for the ID Broker.", 1494531108)

        config = dict(config or {})
        try:
            enabled = parse_bool(config.get(ASSERT_VALID_BROKER_IP_CONFIG), default=True)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid {ASSERT_VALID_BROKER_IP_CONFIG}: {exc}") from exc

        http_options = dict(config.get(HTTP_CLIENT_OPTIONS_CONFIG) or {})
        try:
            timeout = parse_timeout(http_options.pop("timeout", None), DEFAULT_TIMEOUT)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if enabled:
            raw_ranges = config.get(TRUSTED_IPS_CONFIG)
            ranges = IPRangeSet(raw_ranges) if raw_ranges else None
            trust = TrustConfig(enabled=True, ranges=ranges)
        else:
            trust = TrustConfig(enabled=False)

        return cls(
            base_uri=base_uri,
            access_token=access_token,
            trust=trust,
            timeout_seconds=timeout,
            http_client_options=MappingProxyType(http_options),
        )
