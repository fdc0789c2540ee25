"""
Stack configuration loader.

Loads and validates configuration from Pulumi stack config files.
"""

import ipaddress
from typing import Any

import pulumi

from infra.configs.base import DatabaseSettings, NotificationSettings, StackConfig
from infra.configs.constants import (
    AMI_DEFAULTS,
    ASG_DEFAULTS,
    COMPUTE_INSTANCE,
    COMPUTE_MODES,
    LAMBDA_DEFAULTS,
    NOTIFICATIONS_NONE,
    NOTIFICATIONS_SNS_LAMBDA,
    NOTIFICATION_MODES,
    PORTS,
)
from infra.errors import ConfigurationError
from infra.network.cidr import parse_parent


def _require(config: pulumi.Config, key: str) -> str:
    value = config.get(key)
    if value is None or value == "":
        raise ConfigurationError(f"Missing required configuration value '{key}'", key=key)
    return value


def _require_secret(config: pulumi.Config, key: str) -> pulumi.Input[str]:
    value = config.get_secret(key)
    if value is None:
        raise ConfigurationError(f"Missing required secret configuration value '{key}'", key=key)
    return value


def _to_int(key: str, raw: Any) -> int:
    # bool is an int subclass; a YAML "true" is never a valid size or port
    if isinstance(raw, bool):
        raise ConfigurationError(f"Configuration value '{key}' must be an integer, got {raw!r}", key=key)
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Configuration value '{key}' must be an integer, got {raw!r}", key=key
        ) from e


def _get_int(config: pulumi.Config, key: str, default: int | None = None) -> int:
    raw = config.get(key)
    if raw is None:
        if default is None:
            raise ConfigurationError(f"Missing required configuration value '{key}'", key=key)
        return default
    return _to_int(key, raw)


def _port_list(config: pulumi.Config, key: str, default: list[int] | None = None) -> tuple[int, ...]:
    raw = config.get_object(key)
    if raw is None:
        if default is None:
            raise ConfigurationError(f"Missing required configuration value '{key}'", key=key)
        raw = default
    if not isinstance(raw, list):
        raise ConfigurationError(f"Configuration value '{key}' must be a list of ports", key=key)

    ports = tuple(_to_int(key, port) for port in raw)
    for port in ports:
        if not 0 < port < 65536:
            raise ConfigurationError(f"Port {port} in '{key}' is out of range", key=key)
    return ports


def _cidr(config: pulumi.Config, key: str, version: int) -> str:
    value = _require(config, key)
    try:
        network = ipaddress.ip_network(value, strict=False)
    except ValueError as e:
        raise ConfigurationError(f"Configuration value '{key}' is not a CIDR: {value!r}", key=key) from e
    if network.version != version:
        raise ConfigurationError(f"Configuration value '{key}' must be an IPv{version} CIDR", key=key)
    return value


def _choice(config: pulumi.Config, key: str, choices: tuple[str, ...], default: str) -> str:
    value = config.get(key) or default
    if value not in choices:
        raise ConfigurationError(
            f"Configuration value '{key}' must be one of {', '.join(choices)}, got {value!r}",
            key=key,
        )
    return value


def _get_database(config: pulumi.Config) -> DatabaseSettings:
    return DatabaseSettings(
        engine=_require(config, "db-engine-name"),
        family=_require(config, "db-family"),
        engine_version=_require(config, "db-engine-version"),
        instance_class=_require(config, "db-instance-class"),
        name=_require(config, "db-name"),
        storage_size=_get_int(config, "db-storage-size"),
        master_user=_require(config, "db-master-user"),
        master_password=_require_secret(config, "db-master-password"),
    )


def _get_notifications(config: pulumi.Config) -> NotificationSettings | None:
    mode = _choice(config, "notifications", NOTIFICATION_MODES, NOTIFICATIONS_NONE)
    if mode != NOTIFICATIONS_SNS_LAMBDA:
        return None

    return NotificationSettings(
        code_path=_require(config, "lambda-code-path"),
        handler=config.get("lambda-handler") or LAMBDA_DEFAULTS["handler"],
        runtime=config.get("lambda-runtime") or LAMBDA_DEFAULTS["runtime"],
        gcp_project=config.get("gcp-project"),
        smtp_user=config.get("smtp-user"),
        smtp_password=config.get_secret("smtp-password"),
        smtp_from=config.get("smtp-from"),
    )


def get_config(config: pulumi.Config | None = None) -> StackConfig:
    """
    Load stack configuration from Pulumi stack config.

    Args:
        config: Config source; defaults to the project's pulumi.Config()

    Returns:
        StackConfig: Validated configuration object

    Raises:
        ConfigurationError: If a required value is missing or malformed
    """
    config = config or pulumi.Config()

    vpc_cidr = _require(config, "vpc-cidr")
    parse_parent(vpc_cidr)

    asg_min = _get_int(config, "asg-min", ASG_DEFAULTS["min_size"])
    asg_max = _get_int(config, "asg-max", ASG_DEFAULTS["max_size"])
    asg_desired = _get_int(config, "asg-desired", ASG_DEFAULTS["desired_capacity"])
    if not asg_min <= asg_desired <= asg_max:
        raise ConfigurationError(
            f"Autoscaling sizes must satisfy min <= desired <= max, got {asg_min}/{asg_desired}/{asg_max}",
            key="asg-desired",
        )

    return StackConfig(
        environment=config.get("environment") or "dev",
        vpc_cidr=vpc_cidr,
        igw_route=_cidr(config, "igw-route", 4),
        ipv4_cidr=_cidr(config, "ipv4-cidr", 4),
        ipv6_cidr=_cidr(config, "ipv6-cidr", 6),
        ssh_key=_require(config, "ssh-key"),
        ami_id=config.get("ami-id"),
        ami_owner=config.get("ami-owner") or AMI_DEFAULTS["owner"],
        ami_name_filter=config.get("ami-name-filter") or AMI_DEFAULTS["name_filter"],
        ec2_instance_type=_require(config, "ec2-instance-type"),
        database=_get_database(config),
        domain_name=_require(config, "domain-name"),
        ports=_port_list(config, "ports"),
        alb_ports=_port_list(config, "alb-ports", [PORTS["http"]]),
        app_port=_get_int(config, "app-port", PORTS["app"]),
        compute_mode=_choice(config, "compute-mode", COMPUTE_MODES, COMPUTE_INSTANCE),
        asg_min=asg_min,
        asg_max=asg_max,
        asg_desired=asg_desired,
        health_check_path=config.get("health-check-path") or "/healthz",
        notifications=_get_notifications(config),
    )
