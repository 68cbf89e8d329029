"""ID Broker API client.

One method per broker operation. Every method sends its request through the
transport and interprets the status code through the operation table in
operations.py; methods only narrow the resulting ApiResult to their own
return type.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from .exceptions import MfaRateLimitError
from .operations import OPERATIONS, ApiResult, Outcome, interpret
from .options import ClientConfig
from .transport import BrokerTransport
from .trust import BrokerTrustVerifier, Resolver

logger = logging.getLogger(__name__)


class IdBrokerClient:
    """Typed client for the ID Broker API.

    Construction validates the configuration and, unless
    ``assert_valid_broker_ip`` is False, verifies once that the broker host
    resolves into ``trusted_ip_ranges``. Any failure aborts construction.

    The configuration is immutable after construction. Concurrent calls share
    one requests.Session, so sharing a client across threads relies on the
    session's own thread-safety.

    Usage:
        client = IdBrokerClient(
            "https://broker.example.com/",
            "access-token",
            {"trusted_ip_ranges": ["10.0.0.0/8"]},
        )
        user = client.get_user("12345")
    """

    def __init__(
        self,
        base_uri: str,
        access_token: str,
        config: Optional[Mapping[str, Any]] = None,
        *,
        resolver: Optional[Resolver] = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client.

        Args:
            base_uri: Base of the API's URL, e.g. "https://broker.example.com/"
            access_token: Authorization (bearer) token
            config: Options: trusted_ip_ranges, assert_valid_broker_ip,
                http_client_options (timeout plus extra requests kwargs)
            resolver: Hostname resolver used by the trust check
            session: Pre-built requests.Session for the transport

        Raises:
            ConfigurationError: If arguments are missing or malformed
            UnresolvableHostError: If the broker host cannot be resolved
            UntrustedBrokerError: If the broker resolves outside the trusted ranges
        """
        self.config = ClientConfig.from_arguments(base_uri, access_token, config)
        self.broker_ip: Optional[str] = None

        if self.config.trust.enabled:
            verifier = BrokerTrustVerifier(resolver)
            self.broker_ip = verifier.verify(self.config.base_uri, self.config.trust.ranges)
        else:
            logger.warning("Broker IP verification disabled for %s", self.config.base_uri)

        self.transport = BrokerTransport(
            self.config.base_uri,
            self.config.access_token,
            timeout=self.config.timeout_seconds,
            session=session,
            options=self.config.http_client_options,
        )

    @classmethod
    def from_settings(cls, settings, **kwargs) -> "IdBrokerClient":
        """Build a client from a BrokerSettings instance."""
        return cls(settings.base_uri, settings.access_token, settings.to_client_config(), **kwargs)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "IdBrokerClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _call(self, name: str, params: Optional[Mapping[str, Any]] = None) -> ApiResult:
        operation = OPERATIONS[name]
        response = self.transport.send(operation, params)
        return interpret(operation, response)

    # ─────────────────────────────────────────────────────────────────────────
    # Users
    # ─────────────────────────────────────────────────────────────────────────
    def authenticate(self, username: str, password: str) -> Optional[Dict[str, Any]]:
        """Authenticate with the given credentials.

        Returns:
            User information, or None if the credentials were not accepted
        """
        result = self._call("authenticate", {"username": username, "password": password})
        if result.outcome is Outcome.INVALID_CREDENTIALS:
            return None
        return result.body

    def authenticate_new_user(self, invite: str) -> Optional[Dict[str, Any]]:
        """Authenticate using a new-user invite code.

        Returns:
            User information, or None if the invite is not valid
        """
        result = self._call("authenticateNewUser", {"invite": invite})
        if result.outcome is Outcome.INVALID_CREDENTIALS:
            return None
        return result.body

    def create_user(self, config: Optional[Mapping[str, Any]] = None, **fields) -> Dict[str, Any]:
        """Create a user from a mapping (and/or keyword arguments) of attributes.

        Returns:
            Information about the new user
        """
        return self._call("createUser", {**(config or {}), **fields}).body

    def update_user(self, config: Optional[Mapping[str, Any]] = None, **fields) -> Dict[str, Any]:
        """Update a user. Attributes must include employee_id.

        Returns:
            Information about the updated user
        """
        return self._call("updateUser", {**(config or {}), **fields}).body

    def deactivate_user(self, employee_id: str) -> None:
        # Only 200 counts as success here; a 204 raises ServiceError
        self._call("deactivateUser", {"employee_id": employee_id, "active": "no"})

    def get_site_status(self) -> str:
        """Ping /site/status. Returns "OK" for any 2xx status."""
        self._call("getSiteStatus")
        return "OK"

    def get_user(self, employee_id: str) -> Optional[Dict[str, Any]]:
        """Get a user by Employee ID, or None if no such user exists."""
        result = self._call("getUser", {"employee_id": employee_id})
        if result.outcome is Outcome.NOT_FOUND:
            return None
        return result.body

    def list_users(
        self,
        fields: Optional[Iterable[str]] = None,
        search: Optional[Mapping[str, str]] = None,
    ) -> List[Dict[str, Any]]:
        """List users.

        Args:
            fields: Attributes wanted for each user (all when omitted)
            search: Fields to search on, e.g. {"username": "billy"}

        Returns:
            One dict per user
        """
        params: Dict[str, Any] = {}
        if fields is not None:
            params["fields"] = ",".join(fields)
        params.update(search or {})
        return self._call("listUsers", params).body

    def set_password(self, employee_id: str, password: str) -> Dict[str, Any]:
        """Set a user's password. Returns password metadata."""
        return self._call("setPassword", {"employee_id": employee_id, "password": password}).body

    # ─────────────────────────────────────────────────────────────────────────
    # MFA
    # ─────────────────────────────────────────────────────────────────────────
    def mfa_create(self, employee_id: str, mfa_type: str, label: Optional[str] = None) -> Dict[str, Any]:
        return self._call(
            "mfaCreate", {"employee_id": employee_id, "type": mfa_type, "label": label}
        ).body

    def mfa_delete(self, mfa_id, employee_id: str) -> None:
        self._call("mfaDelete", {"id": mfa_id, "employee_id": employee_id})

    def mfa_list(self, employee_id: str) -> List[Dict[str, Any]]:
        return self._call("mfaList", {"employee_id": employee_id}).body

    def mfa_update(self, mfa_id, employee_id: str, label: str) -> Dict[str, Any]:
        return self._call(
            "mfaUpdate", {"id": mfa_id, "employee_id": employee_id, "label": label}
        ).body

    def mfa_verify(self, mfa_id, employee_id: str, value: str) -> bool:
        """Verify an MFA value.

        Returns:
            True if the value was accepted, False if it was rejected

        Raises:
            MfaRateLimitError: If too many recent attempts failed for this MFA
            ServiceError: On any other unexpected status
        """
        result = self._call(
            "mfaVerify", {"id": mfa_id, "employee_id": employee_id, "value": value}
        )
        if result.outcome is Outcome.RATE_LIMITED:
            raise MfaRateLimitError("Too many recent failures for this MFA")
        return result.outcome is Outcome.SUCCESS_EMPTY

    # ─────────────────────────────────────────────────────────────────────────
    # Recovery methods
    # ─────────────────────────────────────────────────────────────────────────
    def create_method(self, employee_id: str, value: str, created: Optional[str] = None) -> Dict[str, Any]:
        """Create a recovery method.

        Args:
            employee_id: Owner of the method
            value: Contact value (e.g. an email address)
            created: When given, the method is created already verified
        """
        params = {"employee_id": employee_id, "value": value}
        if created:
            params["created"] = created
        return self._call("createMethod", params).body

    def delete_method(self, uid: str, employee_id: str) -> None:
        self._call("deleteMethod", {"uid": uid, "employee_id": employee_id})

    def get_method(self, uid: str, employee_id: str) -> Dict[str, Any]:
        return self._call("getMethod", {"uid": uid, "employee_id": employee_id}).body

    def list_method(self, employee_id: str) -> List[Dict[str, Any]]:
        return self._call("listMethod", {"employee_id": employee_id}).body

    def verify_method(self, uid: str, employee_id: str, code: str) -> Dict[str, Any]:
        return self._call(
            "verifyMethod", {"uid": uid, "employee_id": employee_id, "code": code}
        ).body

    def resend_method(self, uid: str, employee_id: str) -> bool:
        self._call("resendMethod", {"uid": uid, "employee_id": employee_id})
        return True
