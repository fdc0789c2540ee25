"""
Address-space helpers for VPC subnet layout.

Kept free of Pulumi imports so they can be exercised without a Pulumi runtime.
"""

from infra.network.cidr import parse_parent, partition

__all__ = [
    "parse_parent",
    "partition",
]
