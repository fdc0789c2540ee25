"""
Infrastructure constants for the web application stack.

Contains subnet layout, ports, tags and scaling defaults.
"""

from typing import Final

# Every parent block is cut into /24 subnets
SUBNET_PREFIX: Final[int] = 24

# Public/private pairs are placed in at most this many zones.
# Private subnets start at this offset in the partition list.
ZONE_COUNT: Final[int] = 3

# Compute modes
COMPUTE_INSTANCE: Final[str] = "instance"
COMPUTE_AUTOSCALING: Final[str] = "autoscaling"
COMPUTE_MODES: Final[tuple[str, ...]] = (COMPUTE_INSTANCE, COMPUTE_AUTOSCALING)

# Notification pipeline modes
NOTIFICATIONS_NONE: Final[str] = "none"
NOTIFICATIONS_SNS_LAMBDA: Final[str] = "sns-lambda"
NOTIFICATION_MODES: Final[tuple[str, ...]] = (NOTIFICATIONS_NONE, NOTIFICATIONS_SNS_LAMBDA)

# Port configurations
PORTS: Final[dict[str, int]] = {
    "ssh": 22,
    "http": 80,
    "https": 443,
    "app": 8080,
    "mysql": 3306,
}

# AMI lookup used when no ami-id is configured
AMI_DEFAULTS: Final[dict[str, str]] = {
    "owner": "self",
    "name_filter": "csye6225_*",
}

# Autoscaling group sizing and CPU thresholds (percent)
ASG_DEFAULTS: Final[dict[str, int]] = {
    "min_size": 1,
    "max_size": 3,
    "desired_capacity": 1,
    "cooldown_seconds": 60,
    "scale_up_cpu": 5,
    "scale_down_cpu": 3,
}

# Lambda configuration for the notification pipeline
LAMBDA_DEFAULTS: Final[dict[str, str | int]] = {
    "handler": "index.handler",
    "runtime": "python3.12",
    "timeout_seconds": 60,
}

CLOUDWATCH_AGENT_POLICY_ARN: Final[str] = "arn:aws:iam::aws:policy/CloudWatchAgentServerPolicy"

# Route53 A record TTL (seconds) for the single-instance mode
DNS_TTL: Final[int] = 60

# Default tags applied to all resources
DEFAULT_TAGS: Final[dict[str, str]] = {
    "Project": "webapp",
    "ManagedBy": "pulumi",
}
