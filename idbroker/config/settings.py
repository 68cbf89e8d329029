"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from idbroker.core.validators import parse_bool, parse_csv, parse_timeout

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.debug("Loaded %s from environment", env_var)
            return secret_value

    return None


@dataclass
class BrokerSettings:
    """ID Broker connection settings."""
    base_uri: str
    access_token: str = field(repr=False)
    trusted_ip_ranges: list[str] = field(default_factory=list)
    assert_valid_broker_ip: bool = True
    timeout: float = DEFAULT_TIMEOUT

    def to_client_config(self) -> Dict[str, Any]:
        """Options mapping accepted by IdBrokerClient."""
        return {
            "trusted_ip_ranges": list(self.trusted_ip_ranges),
            "assert_valid_broker_ip": self.assert_valid_broker_ip,
            "http_client_options": {"timeout": self.timeout},
        }


def _required(var_name: str, value: Optional[str]) -> str:
    if value:
        return value
    raise RuntimeError(f"Environment variable {var_name} is required.")


def load_settings() -> BrokerSettings:
    """Load broker settings from environment and /run/secrets.

    Raises:
        RuntimeError: If a required value is missing or malformed
    """
    base_uri = _required("IDBROKER_BASE_URI", os.environ.get("IDBROKER_BASE_URI", "").strip())
    access_token = _required(
        "IDBROKER_ACCESS_TOKEN",
        _load_secret_from_file("idbroker_access_token", "IDBROKER_ACCESS_TOKEN"),
    )

    trusted_ip_ranges = parse_csv(os.environ.get("IDBROKER_TRUSTED_IP_RANGES"))

    try:
        assert_valid_broker_ip = parse_bool(os.environ.get("IDBROKER_ASSERT_VALID_IP"), default=True)
        timeout = parse_timeout(os.environ.get("IDBROKER_TIMEOUT"), DEFAULT_TIMEOUT)
    except ValueError as e:
        raise RuntimeError(f"Invalid ID Broker setting: {e}") from e

    if not assert_valid_broker_ip:
        logger.warning("IDBROKER_ASSERT_VALID_IP=false: broker IP will not be verified")

    logger.info(
        "ID Broker settings: base_uri=%s; trusted_ranges=%d; timeout=%ss",
        base_uri, len(trusted_ip_ranges), timeout,
    )

    return BrokerSettings(
        base_uri=base_uri,
        access_token=access_token,
        trusted_ip_ranges=trusted_ip_ranges,
        assert_valid_broker_ip=assert_valid_broker_ip,
        timeout=timeout,
    )
