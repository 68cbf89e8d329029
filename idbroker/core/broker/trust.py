"""Broker IP trust verification.

The broker hostname is resolved once, when the client is built, and the
resolved address must fall inside the configured trusted ranges. Later calls
do not re-resolve: a DNS change after construction goes unnoticed until a new
client is created.
"""
from __future__ import annotations
import ipaddress
import logging
import socket
from typing import Callable, List, Optional, Sequence, Union
from urllib.parse import urlparse

from .exceptions import UnresolvableHostError, UntrustedBrokerError
from .ip_ranges import IPRangeSet

logger = logging.getLogger(__name__)

# A resolver may return one address or every address the name has
Resolver = Callable[[str], Union[str, Sequence[str]]]


def _is_ip_literal(host: str) -> bool:
    try:
        ipaddress.ip_address(host)
    except (TypeError, ValueError):
        return False
    return True


def resolve_host(host: str) -> List[str]:
    """Resolve a hostname to all of its IP addresses (IPv4 and IPv6).

    IP literals are returned as-is. Names are looked up fully qualified
    (with a trailing dot) so resolver search domains are not applied.
    Addresses keep the resolver's order, without duplicates.

    Raises:
        OSError: If the name cannot be resolved
    """
    if _is_ip_literal(host):
        return [host]
    infos = socket.getaddrinfo(host.rstrip(".") + ".", None, proto=socket.IPPROTO_TCP)
    addresses: List[str] = []
    for info in infos:
        address = info[4][0]
        if address not in addresses:
            addresses.append(address)
    if not addresses:
        raise socket.gaierror(f"No addresses for {host}")
    return addresses


class BrokerTrustVerifier:
    """Asserts that a broker URI resolves into a trusted IP range.

    Usage:
        verifier = BrokerTrustVerifier()
        ip = verifier.verify("https://broker.example.com/", IPRangeSet(["10.0.0.0/8"]))
    """

    def __init__(self, resolver: Optional[Resolver] = None):
        """Initialize verifier.

        Args:
            resolver: Callable mapping a hostname to one IP string or a list
                of them (defaults to resolve_host)
        """
        self.resolver = resolver or resolve_host

    def verify(self, base_uri: str, ranges: IPRangeSet) -> str:
        """Resolve the broker host and check it against the trusted ranges.

        A host with several addresses (dual-stack, round robin) is trusted
        when any of them falls inside the ranges.

        Args:
            base_uri: Broker base URL
            ranges: Trusted IP ranges

        Returns:
            The first resolved address inside the trusted ranges

        Raises:
            UnresolvableHostError: If the URI has no host or it does not resolve
            UntrustedBrokerError: If every resolved address is outside the ranges
        """
        try:
            host = urlparse(base_uri).hostname
        except ValueError:
            host = None
        if not host:
            raise UnresolvableHostError(
                f"The configured broker URI {base_uri} is not valid",
                1549291514,
            )

        try:
            resolved = self.resolver(host)
        except OSError as exc:
            logger.warning("Broker host %s did not resolve: %s", host, exc)
            raise UnresolvableHostError(
                f"Could not resolve broker URI {base_uri}",
                1549292074,
            ) from exc

        addresses = [resolved] if isinstance(resolved, str) else list(resolved or ())
        # Anything that is not an IP, such as the name echoed back, means no answer
        if not addresses or not all(_is_ip_literal(address) for address in addresses):
            logger.warning("Broker host %s did not resolve: %r", host, resolved)
            raise UnresolvableHostError(
                f"Could not resolve broker URI {base_uri}",
                1549292074,
            )

        for address in addresses:
            if ranges.contains(address):
                logger.info("Broker host %s resolved to trusted address %s", host, address)
                return address

        logger.warning("Broker host %s resolved to untrusted addresses %s", host, addresses)
        raise UntrustedBrokerError(
            f"The ID Broker has an IP that is not trusted: {addresses[0]}",
            address=addresses[0],
            host=host,
            code=1494531300,
        )
