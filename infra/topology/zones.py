"""
Zone assignment of partitioned subnets.

Zone i receives partition[i] as its public subnet and partition[i + zone_count]
as its private subnet, so the first zone_count blocks are always public.
"""

from dataclasses import dataclass
from typing import Sequence

from infra.configs.constants import ZONE_COUNT
from infra.errors import ConfigurationError, InvalidPrefixError


@dataclass(frozen=True)
class ZoneAssignment:
    """Public/private subnet pair placed in one availability zone."""
    index: int
    zone: str
    public_cidr: str
    private_cidr: str

    @property
    def public_name(self) -> str:
        return f"public-subnet-{self.index + 1}"

    @property
    def private_name(self) -> str:
        return f"private-subnet-{self.index + 1}"


def assign_zones(
    subnets: Sequence[str],
    zones: Sequence[str],
    zone_count: int = ZONE_COUNT,
) -> list[ZoneAssignment]:
    """
    Assign public/private subnet pairs to availability zones.

    Only the first zone_count zones are used, in input order. With fewer
    zones available, fewer pairs are produced.

    Args:
        subnets: Partitioned subnet list, ascending by address
        zones: Available zone names as returned by the provider
        zone_count: Maximum number of zones to use

    Returns:
        One assignment per used zone

    Raises:
        InvalidPrefixError: If the partition holds fewer than 2 * zone_count blocks
        ConfigurationError: If no zone is available
    """
    if len(subnets) < 2 * zone_count:
        raise InvalidPrefixError(
            f"Need at least {2 * zone_count} subnets for {zone_count} zones, got {len(subnets)}"
        )
    if not zones:
        raise ConfigurationError("No availability zones available to place subnets in")

    return [
        ZoneAssignment(
            index=i,
            zone=zone,
            public_cidr=subnets[i],
            private_cidr=subnets[i + zone_count],
        )
        for i, zone in enumerate(zones[:zone_count])
    ]
