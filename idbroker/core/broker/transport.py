"""Low-level HTTP transport for the ID Broker API.

Handles bearer authentication, timeouts and request marshalling. Status codes
are returned to the caller untouched; deciding what a status means is the job
of the operation table.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Mapping, Optional

import requests

from .operations import BrokerResponse, Operation

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


class BrokerTransport:
    """HTTP client for the ID Broker API built on a requests.Session.

    A session is not guaranteed to be safe for concurrent use, so a transport
    shared across threads is only as thread-safe as requests.Session itself.

    Usage:
        transport = BrokerTransport("https://broker.example.com", "token")
        response = transport.send(OPERATIONS["getUser"], {"employee_id": "42"})
    """

    def __init__(
        self,
        base_uri: str,
        access_token: str,
        timeout: float = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
        options: Optional[Mapping[str, Any]] = None,
    ):
        """Initialize transport.

        Args:
            base_uri: Broker base URL (e.g. "https://broker.example.com/")
            access_token: Bearer token sent with every request
            timeout: Per-request timeout in seconds
            session: Pre-built session (tests inject a stub here)
            options: Extra keyword arguments for every request (e.g. verify, proxies)
        """
        self.base_uri = base_uri.rstrip("/")
        self.timeout = timeout
        self.options = dict(options or {})
        self.session = session if session is not None else requests.Session()
        # Sent per request so a caller-supplied session never holds the token
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

    def send(self, operation: Operation, params: Optional[Mapping[str, Any]] = None) -> BrokerResponse:
        """Execute one operation.

        Args:
            operation: Operation description (verb, path, accepted params)
            params: Named parameters for the operation

        Returns:
            BrokerResponse with status code and parsed JSON body

        Raises:
            ConfigurationError: If a path parameter is missing
            requests.RequestException: On connection failure or timeout
        """
        params = dict(params or {})
        unknown = sorted(set(params) - set(operation.params))
        if unknown:
            logger.debug("%s: dropping undeclared parameters %s", operation.name, unknown)

        path = operation.build_path(params)
        payload: Dict[str, Any] = {
            name: params[name]
            for name in operation.params
            if name not in operation.path_params and params.get(name) is not None
        }

        url = f"{self.base_uri}{path}"
        kwargs: Dict[str, Any] = dict(self.options)
        kwargs["headers"] = {**(kwargs.get("headers") or {}), **self.headers}
        if operation.method == "GET":
            kwargs["params"] = payload or None
        elif payload:
            kwargs["json"] = payload

        logger.debug("%s %s (%s)", operation.method, url, operation.name)
        resp = self.session.request(operation.method, url, timeout=self.timeout, **kwargs)
        logger.debug("%s -> %s", operation.name, resp.status_code)
        return BrokerResponse(
            status_code=int(resp.status_code),
            body=_safe_json(resp),
            text=resp.text or "",
        )

    def close(self) -> None:
        self.session.close()


def _safe_json(resp: requests.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError:
        return resp.text
