"""
Utility functions for Pulumi infrastructure.

Provides naming conventions and tag factories.
"""

from infra.utils.naming import ResourceNamer
from infra.utils.tags import create_tags, merge_tags, propagated_tags

__all__ = [
    "ResourceNamer",
    "create_tags",
    "merge_tags",
    "propagated_tags",
]
