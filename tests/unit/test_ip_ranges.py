"""Unit tests for idbroker/core/broker/ip_ranges.py"""
import pytest

from idbroker.core.broker.exceptions import ConfigurationError
from idbroker.core.broker.ip_ranges import IpBlock, IPRangeSet


class TestIpBlock:
    def test_parse_normalizes_host_bits(self):
        assert str(IpBlock.parse("10.1.2.3/8")) == "10.0.0.0/8"

    def test_bare_address_is_single_host(self):
        block = IpBlock.parse("192.168.1.10")
        assert block.contains("192.168.1.10")
        assert not block.contains("192.168.1.11")

    @pytest.mark.parametrize(
        "address, expected",
        [
            ("192.168.1.0", True),     # network address
            ("192.168.1.255", True),   # broadcast address
            ("192.168.1.128", True),
            ("192.168.0.255", False),
            ("192.168.2.0", False),
        ],
    )
    def test_boundaries(self, address, expected):
        assert IpBlock.parse("192.168.1.0/24").contains(address) is expected

    def test_ipv6(self):
        block = IpBlock.parse("2001:db8::/32")
        assert block.contains("2001:db8:ffff::1")
        assert not block.contains("2001:db9::1")

    def test_versions_never_match(self):
        assert not IpBlock.parse("0.0.0.0/0").contains("::1")
        assert not IpBlock.parse("::/0").contains("127.0.0.1")

    @pytest.mark.parametrize("spec", ["", "10.0.0.0/33", "not-an-ip", "300.1.1.1/8", None])
    def test_malformed_specs(self, spec):
        with pytest.raises(ConfigurationError):
            IpBlock.parse(spec)

    def test_is_immutable(self):
        block = IpBlock.parse("10.0.0.0/8")
        with pytest.raises(AttributeError):
            block.network = None


class TestIPRangeSet:
    def test_contains_any_block(self):
        ranges = IPRangeSet(["10.0.0.0/8", "172.16.0.0/12", "2001:db8::/32"])
        assert ranges.contains("10.255.0.1")
        assert ranges.contains("172.31.255.255")
        assert ranges.contains("2001:db8::5")
        assert not ranges.contains("8.8.8.8")
        assert "172.16.0.1" in ranges

    def test_order_does_not_change_result(self):
        forward = IPRangeSet(["10.0.0.0/8", "10.1.0.0/16"])
        backward = IPRangeSet(["10.1.0.0/16", "10.0.0.0/8"])
        for address in ("10.1.1.1", "10.2.2.2", "11.0.0.1"):
            assert forward.contains(address) == backward.contains(address)

    def test_invalid_address_is_untrusted(self):
        assert IPRangeSet(["0.0.0.0/0"]).contains("broker.example.com") is False

    def test_keeps_order_and_length(self):
        ranges = IPRangeSet(("10.0.0.0/8", "192.168.0.0/16"))
        assert len(ranges) == 2
        assert [str(block) for block in ranges] == ["10.0.0.0/8", "192.168.0.0/16"]

    def test_empty_set_matches_nothing(self):
        ranges = IPRangeSet([])
        assert len(ranges) == 0
        assert not ranges.contains("10.0.0.1")

    @pytest.mark.parametrize("specs", ["10.0.0.0/8", b"10.0.0.0/8", {"10.0.0.0/8"}, 42, None])
    def test_rejects_non_sequences(self, specs):
        with pytest.raises(ConfigurationError) as exc:
            IPRangeSet(specs)
        assert exc.value.code == 1494531200

    def test_rejects_malformed_entry(self):
        with pytest.raises(ConfigurationError, match="bogus"):
            IPRangeSet(["10.0.0.0/8", "bogus"])
