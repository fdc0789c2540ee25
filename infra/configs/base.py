"""
Stack configuration dataclass.

Provides the type-safe configuration structure loaded from Pulumi stack configs.
"""

from dataclasses import dataclass

import pulumi

from infra.configs.constants import COMPUTE_AUTOSCALING


@dataclass(frozen=True)
class DatabaseSettings:
    """RDS engine, sizing and master credentials."""
    engine: str
    family: str
    engine_version: str
    instance_class: str
    name: str
    storage_size: int
    master_user: str
    master_password: pulumi.Input[str]


@dataclass(frozen=True)
class NotificationSettings:
    """
    SNS -> Lambda pipeline settings.

    Attributes:
        code_path: Local directory or archive holding the Lambda code
        handler: Lambda handler entry point
        runtime: Lambda runtime identifier
        gcp_project: GCP project for the submission bucket (optional)
        smtp_user: SMTP user handed to the Lambda
        smtp_password: SMTP password handed to the Lambda
        smtp_from: Sender address for outgoing mail
    """
    code_path: str
    handler: str
    runtime: str
    gcp_project: str | None = None
    smtp_user: str | None = None
    smtp_password: pulumi.Input[str] | None = None
    smtp_from: str | None = None


@dataclass(frozen=True)
class StackConfig:
    """
    Configuration for one deployment of the stack.

    Attributes:
        environment: Deployment environment (dev, demo, prod)
        vpc_cidr: Parent CIDR block of the VPC
        igw_route: Destination CIDR of the public default route
        ipv4_cidr: IPv4 source range allowed to reach the application
        ipv6_cidr: IPv6 source range allowed to reach the application
        ssh_key: EC2 key pair name
        ami_id: AMI to launch; looked up by owner/name filter when unset
        ami_owner: Owner used for the AMI lookup
        ami_name_filter: Name filter used for the AMI lookup
        ec2_instance_type: Instance type for the application
        database: RDS settings
        domain_name: Domain served by the Route53 hosted zone
        ports: Application ports opened on the application security group
        alb_ports: Listener ports of the load balancer
        app_port: Port the application listens on behind the load balancer
        compute_mode: "instance" or "autoscaling"
        asg_min: Minimum autoscaling group size
        asg_max: Maximum autoscaling group size
        asg_desired: Desired autoscaling group size
        health_check_path: Target group health check path
        notifications: Notification pipeline settings, None when disabled
    """
    environment: str
    vpc_cidr: str
    igw_route: str
    ipv4_cidr: str
    ipv6_cidr: str
    ssh_key: str
    ami_id: str | None
    ami_owner: str
    ami_name_filter: str
    ec2_instance_type: str
    database: DatabaseSettings
    domain_name: str
    ports: tuple[int, ...]
    alb_ports: tuple[int, ...]
    app_port: int
    compute_mode: str
    asg_min: int
    asg_max: int
    asg_desired: int
    health_check_path: str
    notifications: NotificationSettings | None = None

    @property
    def uses_autoscaling(self) -> bool:
        """Check if the compute tier is an autoscaling group behind a load balancer."""
        return self.compute_mode == COMPUTE_AUTOSCALING

    @property
    def notifications_enabled(self) -> bool:
        """Check if the SNS -> Lambda pipeline is deployed."""
        return self.notifications is not None
