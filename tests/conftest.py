"""Pytest shared fixtures for ID Broker client tests."""
import json
import pathlib
import socket
import sys
from typing import Any, Optional

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from idbroker.core.broker import IdBrokerClient


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_dns(monkeypatch):
    """Fail any test that would perform a real DNS lookup."""

    def _fail(host, *args, **kwargs):
        raise RuntimeError(f"Unexpected DNS lookup in unit test: {host}")

    monkeypatch.setattr(socket, "getaddrinfo", _fail)


# ─────────────────────────────────────────────────────────────────────────────
# HTTP stubs
# ─────────────────────────────────────────────────────────────────────────────
class StubResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int, payload: Any = None):
        self.status_code = status_code
        self._payload = payload
        self.text = "" if payload is None else json.dumps(payload)
        self.content = self.text.encode("utf-8")

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class StubSession:
    """Records requests and answers them with queued responses."""

    def __init__(self, *responses: StubResponse):
        self.headers = {}
        self.responses = list(responses)
        self.calls = []
        self.closed = False

    def queue(self, status_code: int, payload: Any = None) -> "StubSession":
        self.responses.append(StubResponse(status_code, payload))
        return self

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.responses:
            raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")
        return self.responses.pop(0)

    def close(self):
        self.closed = True

    @property
    def last_call(self) -> Optional[dict]:
        return self.calls[-1] if self.calls else None


@pytest.fixture()
def stub_session():
    return StubSession()


@pytest.fixture()
def broker_client(stub_session):
    """Client whose broker resolves into the trusted range, with stubbed HTTP."""
    return IdBrokerClient(
        "https://broker.example.com/",
        "test-token",
        {"trusted_ip_ranges": ["10.0.0.0/8"]},
        resolver=lambda host: "10.1.2.3",
        session=stub_session,
    )
