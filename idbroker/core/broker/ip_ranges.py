"""Trusted IP range parsing and membership checks."""
from __future__ import annotations
import ipaddress
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


@dataclass(frozen=True)
class IpBlock:
    """A single IPv4 or IPv6 network (base address + prefix length)."""
    network: IPNetwork

    @classmethod
    def parse(cls, spec: str) -> "IpBlock":
        """Parse a CIDR string (or bare address) into a block.

        Host bits below the prefix are ignored, so "10.1.2.3/8" is read as
        "10.0.0.0/8". A bare address becomes a single-host block.

        Raises:
            ConfigurationError: If the specifier is not a valid network
        """
        if not isinstance(spec, str) or not spec.strip():
            raise ConfigurationError(f"Invalid trusted IP range: {spec!r}")
        try:
            network = ipaddress.ip_network(spec.strip(), strict=False)
        except ValueError as exc:
            raise ConfigurationError(f"Invalid trusted IP range {spec!r}: {exc}") from exc
        return cls(network)

    def contains(self, address: str) -> bool:
        try:
            ip = ipaddress.ip_address(address)
        except ValueError:
            return False
        # IPv4 addresses never match IPv6 networks and vice versa
        return ip in self.network

    def __str__(self) -> str:
        return str(self.network)


class IPRangeSet:
    """Ordered, immutable collection of trusted IP blocks.

    Usage:
        ranges = IPRangeSet(["10.0.0.0/8", "2001:db8::/32"])
        ranges.contains("10.20.30.40")  # True
    """

    def __init__(self, specs: Sequence[str]):
        """Parse every range specifier.

        Args:
            specs: Sequence of CIDR strings (a list or tuple, not a single string)

        Raises:
            ConfigurationError: If specs is not a sequence or any entry is malformed
        """
        if isinstance(specs, (str, bytes)) or not isinstance(specs, (list, tuple)):
            raise ConfigurationError(
                f"Trusted IP ranges must be a list of CIDR strings, not {specs!r}",
                1494531200,
            )
        self._blocks: Tuple[IpBlock, ...] = tuple(IpBlock.parse(spec) for spec in specs)

    @property
    def blocks(self) -> Tuple[IpBlock, ...]:
        return self._blocks

    def contains(self, address: str) -> bool:
        """Return True if the address falls within any block."""
        try:
            ipaddress.ip_address(address)
        except ValueError:
            logger.warning("Not an IP address, treating as untrusted: %r", address)
            return False
        return any(block.contains(address) for block in self._blocks)

    def __contains__(self, address: str) -> bool:
        return self.contains(address)

    def __iter__(self) -> Iterator[IpBlock]:
        return iter(self._blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def __repr__(self) -> str:
        return f"IPRangeSet({[str(block) for block in self._blocks]!r})"
