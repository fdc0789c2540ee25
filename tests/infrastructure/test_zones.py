"""
Tests for zone assignment of partitioned subnets.
"""

import pytest

from infra.errors import ConfigurationError, InvalidPrefixError
from infra.network.cidr import partition
from infra.topology.zones import assign_zones

ZONES = ["us-east-1a", "us-east-1b", "us-east-1c", "us-east-1d", "us-east-1e"]


class TestAssignZones:
    """Public/private pair placement."""

    def test_first_blocks_are_public_next_blocks_private(self):
        """Zone i gets block i public and block i + 3 private."""
        assignments = assign_zones(partition("10.0.0.0/16", 24), ZONES)

        assert [(a.zone, a.public_cidr, a.private_cidr) for a in assignments] == [
            ("us-east-1a", "10.0.0.0/24", "10.0.3.0/24"),
            ("us-east-1b", "10.0.1.0/24", "10.0.4.0/24"),
            ("us-east-1c", "10.0.2.0/24", "10.0.5.0/24"),
        ]

    def test_only_first_zones_used(self):
        """Zones beyond the zone count are ignored, in input order."""
        assignments = assign_zones(partition("10.0.0.0/16", 24), ZONES)

        assert len(assignments) == 3
        assert "us-east-1d" not in {a.zone for a in assignments}

    def test_subnet_names(self):
        """Names are 1-based per tier."""
        assignments = assign_zones(partition("10.0.0.0/16", 24), ZONES)

        assert [a.public_name for a in assignments] == [
            "public-subnet-1",
            "public-subnet-2",
            "public-subnet-3",
        ]
        assert assignments[2].private_name == "private-subnet-3"

    def test_fewer_zones_yield_fewer_pairs(self):
        """Two available zones produce two pairs, with private blocks still offset by 3."""
        assignments = assign_zones(partition("10.0.0.0/16", 24), ZONES[:2])

        assert len(assignments) == 2
        assert assignments[1].private_cidr == "10.0.4.0/24"

    def test_no_overlap_between_tiers(self):
        """Public and private blocks should all be distinct."""
        assignments = assign_zones(partition("10.0.0.0/16", 24), ZONES)
        blocks = [a.public_cidr for a in assignments] + [a.private_cidr for a in assignments]

        assert len(set(blocks)) == len(blocks)

    def test_small_parent_rejected(self):
        """A /22 holds only four /24 blocks, fewer than three pairs need."""
        with pytest.raises(InvalidPrefixError):
            assign_zones(partition("10.0.0.0/22", 24), ZONES)

    def test_exactly_six_blocks_accepted(self):
        subnets = partition("10.0.0.0/21", 24)[:6]

        assert len(assign_zones(subnets, ZONES)) == 3

    def test_no_zones_rejected(self):
        with pytest.raises(ConfigurationError):
            assign_zones(partition("10.0.0.0/16", 24), [])

    def test_custom_zone_count(self):
        """A zone count of two uses blocks 0-1 public and 2-3 private."""
        assignments = assign_zones(partition("10.0.0.0/22", 24), ZONES, zone_count=2)

        assert [a.private_cidr for a in assignments] == ["10.0.2.0/24", "10.0.3.0/24"]
