"""
Configuration module for Pulumi infrastructure.

Provides type-safe configuration loading from Pulumi stack config files.
"""

from infra.configs.base import DatabaseSettings, NotificationSettings, StackConfig
from infra.configs.environment import get_config
from infra.configs.constants import (
    SUBNET_PREFIX,
    ZONE_COUNT,
    DEFAULT_TAGS,
    PORTS,
)

__all__ = [
    "DatabaseSettings",
    "NotificationSettings",
    "StackConfig",
    "get_config",
    "SUBNET_PREFIX",
    "ZONE_COUNT",
    "DEFAULT_TAGS",
    "PORTS",
]
