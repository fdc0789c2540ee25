"""
Tests for CIDR partitioning.

Validates:
1. Child blocks are contiguous, ascending and cover the parent exactly
2. Prefix bounds are enforced
3. Malformed parents are rejected as configuration errors
"""

import ipaddress

import pytest

from infra.errors import ConfigurationError, InvalidPrefixError
from infra.network.cidr import parse_parent, partition


class TestPartition:
    """Binary subdivision of a parent block."""

    def test_slash16_into_slash24(self):
        """A /16 should yield 256 /24 blocks starting at the network address."""
        subnets = partition("10.0.0.0/16", 24)

        assert len(subnets) == 256
        assert subnets[:3] == ["10.0.0.0/24", "10.0.1.0/24", "10.0.2.0/24"]
        assert subnets[-1] == "10.0.255.0/24"

    def test_blocks_are_contiguous_and_cover_parent(self):
        """Consecutive blocks should abut and the union should equal the parent."""
        subnets = [ipaddress.ip_network(s) for s in partition("172.16.0.0/20", 23)]

        assert len(subnets) == 2 ** (23 - 20)
        for previous, current in zip(subnets, subnets[1:]):
            assert int(previous.broadcast_address) + 1 == int(current.network_address)
        assert subnets[0].network_address == ipaddress.ip_address("172.16.0.0")
        assert subnets[-1].broadcast_address == ipaddress.ip_address("172.16.15.255")

    def test_equal_prefix_returns_parent(self):
        """Partitioning at the parent's own prefix yields the parent alone."""
        assert partition("10.1.0.0/24", 24) == ["10.1.0.0/24"]

    def test_host_bits_are_zeroed(self):
        """A parent with host bits set is canonicalized before splitting."""
        assert partition("10.0.0.5/22", 24)[0] == "10.0.0.0/24"

    def test_shorter_prefix_rejected(self):
        """A child prefix shorter than the parent's is invalid."""
        with pytest.raises(InvalidPrefixError):
            partition("10.0.0.0/16", 15)

    def test_prefix_beyond_32_rejected(self):
        """IPv4 prefixes stop at /32."""
        with pytest.raises(InvalidPrefixError):
            partition("10.0.0.0/30", 33)

    def test_slash32_children(self):
        """Single-address children are allowed."""
        assert partition("192.168.1.0/31", 32) == ["192.168.1.0/32", "192.168.1.1/32"]


class TestParseParent:
    """Parent block validation."""

    @pytest.mark.parametrize("cidr", ["not-a-cidr", "10.0.0.0/33", "", "300.0.0.0/16"])
    def test_unparseable_parent(self, cidr):
        """Garbage input should be a configuration error on vpc-cidr."""
        with pytest.raises(ConfigurationError) as exc_info:
            parse_parent(cidr)

        assert exc_info.value.key == "vpc-cidr"

    def test_ipv6_parent_rejected(self):
        """Only IPv4 parents are supported."""
        with pytest.raises(ConfigurationError):
            parse_parent("2001:db8::/56")

    def test_parse_returns_network(self):
        network = parse_parent("10.0.0.0/16")

        assert network.prefixlen == 16
        assert str(network.network_address) == "10.0.0.0"
