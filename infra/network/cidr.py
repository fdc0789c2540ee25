"""
CIDR partitioning for VPC subnet layout.

A parent IPv4 block is cut into equally sized child blocks by pure binary
subdivision. No reserved addresses are excluded: AWS reserves its five
addresses per subnet itself, after the block is created.
"""

import ipaddress

from infra.errors import ConfigurationError, InvalidPrefixError

IPV4_MAX_PREFIX = 32


def parse_parent(cidr: str) -> ipaddress.IPv4Network:
    """
    Parse a parent IPv4 block.

    Host bits are zeroed rather than rejected, which mirrors how AWS
    canonicalizes CreateVpc/CreateSubnet input.

    Args:
        cidr: Block in address/prefix notation (e.g., '10.0.0.0/16')

    Returns:
        The parsed network

    Raises:
        ConfigurationError: If the string is not an IPv4 CIDR block
    """
    try:
        network = ipaddress.ip_network(cidr, strict=False)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Unparseable CIDR block: {cidr!r}", key="vpc-cidr") from e
    if network.version != 4:
        raise ConfigurationError(f"Expected an IPv4 CIDR block, got: {cidr}", key="vpc-cidr")
    return network


def partition(parent: str, new_prefix: int) -> list[str]:
    """
    Enumerate every child block of a given prefix length inside a parent.

    The result is in ascending network-address order, contiguous and
    non-overlapping, and covers the parent exactly:
    2 ** (new_prefix - parent_prefix) entries.

    Args:
        parent: Parent block (e.g., '10.0.0.0/16')
        new_prefix: Prefix length of the children (e.g., 24)

    Returns:
        Child blocks as CIDR strings; [parent] when the prefixes are equal

    Raises:
        ConfigurationError: If the parent is not an IPv4 CIDR block
        InvalidPrefixError: If new_prefix is shorter than the parent's or above 32
    """
    network = parse_parent(parent)
    if new_prefix < network.prefixlen:
        raise InvalidPrefixError(
            f"Subnet prefix /{new_prefix} must be at least parent prefix /{network.prefixlen}"
        )
    if new_prefix > IPV4_MAX_PREFIX:
        raise InvalidPrefixError(f"Subnet prefix /{new_prefix} exceeds /{IPV4_MAX_PREFIX}")

    return [str(subnet) for subnet in network.subnets(new_prefix=new_prefix)]
