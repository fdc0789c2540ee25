"""
RDS Component for the Relational Database.

Access Control - Who Can Connect:
1. Application instances (app_sg) -> MySQL port
2. Anyone else -> DENIED

The instance lives in the private subnets (DB subnet group), is not publicly
accessible and runs single-AZ. Its endpoint (host:port) is only known after
creation; compute resources receive it as a deferred value.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.base import DatabaseSettings
from infra.utils.tags import create_tags


@dataclass
class RdsOutputs:
    """Output values from RDS component."""
    endpoint: pulumi.Output[str]
    address: pulumi.Output[str]
    port: pulumi.Output[int]
    database_name: str


class RdsComponent(pulumi.ComponentResource):
    """
    RDS instance for application persistence.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        settings: DatabaseSettings,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:storage:Rds", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        self.database_name = settings.name

        # DB Subnet Group
        self.subnet_group = aws.rds.SubnetGroup(
            f"{name}-db-subnet-group",
            subnet_ids=subnet_ids,
            tags=create_tags(environment, f"{name}-db-subnet-group"),
            opts=child_opts,
        )

        # Parameter Group
        self.parameter_group = aws.rds.ParameterGroup(
            f"{name}-db-params",
            family=settings.family,
            tags=create_tags(environment, f"{name}-db-params"),
            opts=child_opts,
        )

        self.instance = aws.rds.Instance(
            f"{name}-db",
            allocated_storage=settings.storage_size,
            engine=settings.engine,
            engine_version=settings.engine_version,
            instance_class=settings.instance_class,
            db_name=settings.name,
            username=settings.master_user,
            password=settings.master_password,
            multi_az=False,
            publicly_accessible=False,
            db_subnet_group_name=self.subnet_group.name,
            parameter_group_name=self.parameter_group.name,
            vpc_security_group_ids=[security_group_id],
            skip_final_snapshot=True,
            tags=create_tags(environment, f"{name}-db"),
            opts=child_opts,
        )

        self.register_outputs({
            "endpoint": self.instance.endpoint,
            "address": self.instance.address,
            "port": self.instance.port,
            "database_name": settings.name,
        })

    def get_outputs(self) -> RdsOutputs:
        """Get RDS output values."""
        return RdsOutputs(
            endpoint=self.instance.endpoint,
            address=self.instance.address,
            port=self.instance.port,
            database_name=self.database_name,
        )
