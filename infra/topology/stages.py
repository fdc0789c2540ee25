"""
Stage wiring for the web application stack.

Translates a StackConfig into a TopologyPlan. The subnet partition and the
zone assignment are computed once, here, before any resource is declared.
Optional stages are selected by configuration:
- compute mode "instance": one EC2 instance with an A record to its IP
- compute mode "autoscaling": ALB + autoscaling group with an alias record
- notifications "sns-lambda": SNS topic -> Lambda (+ DynamoDB, GCP bucket)
"""

from typing import Any, Sequence

import pulumi

from infra.components.compute.alb import AlbComponent
from infra.components.compute.ami import resolve_ami_id
from infra.components.compute.autoscaling import AutoscalingComponent
from infra.components.compute.instance import InstanceComponent
from infra.components.compute.user_data import BootstrapSettings, render_user_data
from infra.components.edge.dns import DnsRecordComponent
from infra.components.messaging.notifications import NotificationsComponent
from infra.components.networking.security_groups import SecurityGroupsComponent
from infra.components.networking.vpc import VpcComponent
from infra.components.security.iam_roles import IamRolesComponent
from infra.components.storage.rds import RdsComponent
from infra.configs.base import StackConfig
from infra.configs.constants import SUBNET_PREFIX, ZONE_COUNT
from infra.network.cidr import partition
from infra.topology.plan import PlanContext, Stage, TopologyPlan
from infra.topology.zones import ZoneAssignment, assign_zones
from infra.utils.naming import ResourceNamer

PROJECT = "webapp"


class StackStages:
    """Stage builders bound to one configuration and zone assignment."""

    def __init__(
        self,
        config: StackConfig,
        assignments: list[ZoneAssignment],
        aws_region: pulumi.Input[str],
    ) -> None:
        self.config = config
        self.assignments = assignments
        self.aws_region = aws_region
        self.namer = ResourceNamer(project=PROJECT, environment=config.environment)
        self.base_name = self.namer.name("")

    def network(self, context: PlanContext) -> dict[str, Any]:
        vpc = VpcComponent(
            name=self.base_name,
            environment=self.config.environment,
            cidr_block=self.config.vpc_cidr,
            assignments=self.assignments,
            igw_route=self.config.igw_route,
        )
        outputs = vpc.get_outputs()
        return {
            "vpc_id": outputs.vpc_id,
            "public_subnet_ids": outputs.public_subnet_ids,
            "private_subnet_ids": outputs.private_subnet_ids,
        }

    def security_groups(self, context: PlanContext) -> dict[str, Any]:
        groups = SecurityGroupsComponent(
            name=self.base_name,
            environment=self.config.environment,
            vpc_id=context.require("vpc_id"),
            ports=self.config.ports,
            ipv4_cidr=self.config.ipv4_cidr,
            ipv6_cidr=self.config.ipv6_cidr,
            app_port=self.config.app_port,
            alb_ports=self.config.alb_ports,
            behind_load_balancer=self.config.uses_autoscaling,
        )
        outputs = groups.get_outputs()
        return {
            "app_sg_id": outputs.app_sg_id,
            "db_sg_id": outputs.db_sg_id,
            "lb_sg_id": outputs.lb_sg_id,
        }

    def iam(self, context: PlanContext) -> dict[str, Any]:
        roles = IamRolesComponent(
            name=self.base_name,
            environment=self.config.environment,
        )
        outputs = roles.get_outputs()
        return {
            "instance_profile_name": outputs.ec2_instance_profile_name,
            "instance_role_name": outputs.ec2_role_name,
        }

    def notifications(self, context: PlanContext) -> dict[str, Any]:
        pipeline = NotificationsComponent(
            name=self.namer.name("notifications"),
            environment=self.config.environment,
            namer=self.namer,
            settings=self.config.notifications,
            instance_role_name=context.require("instance_role_name"),
        )
        return {"topic_arn": pipeline.get_outputs().topic_arn}

    def database(self, context: PlanContext) -> dict[str, Any]:
        rds = RdsComponent(
            name=self.base_name,
            environment=self.config.environment,
            settings=self.config.database,
            subnet_ids=context.require("private_subnet_ids"),
            security_group_id=context.require("db_sg_id"),
        )
        return {
            "db_endpoint": rds.get_outputs().endpoint,
            "db_resource": rds.instance,
        }

    def _user_data(self, context: PlanContext, consumer: str) -> pulumi.Output[str]:
        database = self.config.database
        settings = BootstrapSettings(
            db_name=database.name,
            db_user=database.master_user,
            db_password=database.master_password,
            app_port=self.config.app_port,
            aws_region=self.aws_region,
            sns_topic_arn=context.get("topic_arn"),
        )
        # each compute stage owns its own endpoint cell
        return render_user_data(settings, context.require("db_endpoint"), consumer)

    def _ami_id(self) -> pulumi.Input[str]:
        return resolve_ami_id(
            self.config.ami_id,
            self.config.ami_owner,
            self.config.ami_name_filter,
        )

    def instance(self, context: PlanContext) -> dict[str, Any]:
        name = self.namer.name("webapp")
        instance = InstanceComponent(
            name=name,
            environment=self.config.environment,
            ami_id=self._ami_id(),
            instance_type=self.config.ec2_instance_type,
            key_name=self.config.ssh_key,
            subnet_id=context.require("public_subnet_ids")[0],
            security_group_id=context.require("app_sg_id"),
            instance_profile_name=context.require("instance_profile_name"),
            user_data=self._user_data(context, name),
            database=context.require("db_resource"),
        )
        outputs = instance.get_outputs()
        return {
            "instance_id": outputs.instance_id,
            "public_ip": outputs.public_ip,
        }

    def load_balancer(self, context: PlanContext) -> dict[str, Any]:
        alb = AlbComponent(
            name=self.namer.name("webapp"),
            environment=self.config.environment,
            vpc_id=context.require("vpc_id"),
            subnet_ids=context.require("public_subnet_ids"),
            security_group_id=context.require("lb_sg_id"),
            app_port=self.config.app_port,
            listener_ports=self.config.alb_ports,
            domain_name=self.config.domain_name,
            health_check_path=self.config.health_check_path,
        )
        outputs = alb.get_outputs()
        return {
            "lb_dns_name": outputs.alb_dns_name,
            "lb_zone_id": outputs.alb_zone_id,
            "target_group_arn": outputs.target_group_arn,
        }

    def autoscaling(self, context: PlanContext) -> dict[str, Any]:
        name = self.namer.name("webapp")
        group = AutoscalingComponent(
            name=name,
            environment=self.config.environment,
            ami_id=self._ami_id(),
            instance_type=self.config.ec2_instance_type,
            key_name=self.config.ssh_key,
            subnet_ids=context.require("public_subnet_ids"),
            security_group_id=context.require("app_sg_id"),
            instance_profile_name=context.require("instance_profile_name"),
            user_data=self._user_data(context, name),
            target_group_arn=context.require("target_group_arn"),
            min_size=self.config.asg_min,
            max_size=self.config.asg_max,
            desired_capacity=self.config.asg_desired,
            database=context.require("db_resource"),
        )
        return {
            "asg_name": group.get_outputs().asg_name,
            "asg_resource": group,
        }

    def dns(self, context: PlanContext) -> dict[str, Any]:
        if self.config.uses_autoscaling:
            record = DnsRecordComponent(
                name=self.base_name,
                domain_name=self.config.domain_name,
                lb_dns_name=context.require("lb_dns_name"),
                lb_zone_id=context.require("lb_zone_id"),
                opts=pulumi.ResourceOptions(depends_on=[context.require("asg_resource")]),
            )
        else:
            record = DnsRecordComponent(
                name=self.base_name,
                domain_name=self.config.domain_name,
                public_ip=context.require("public_ip"),
            )
        return {"dns_record_fqdn": record.get_outputs().fqdn}

    def stages(self) -> list[Stage]:
        """Declare the stages selected by the configuration."""
        topic = ("topic_arn",) if self.config.notifications_enabled else ()
        compute_inputs = (
            "public_subnet_ids",
            "app_sg_id",
            "instance_profile_name",
            "db_endpoint",
            "db_resource",
        ) + topic

        stages = [
            Stage(
                "network",
                self.network,
                provides=("vpc_id", "public_subnet_ids", "private_subnet_ids"),
            ),
            Stage(
                "security_groups",
                self.security_groups,
                requires=("vpc_id",),
                provides=("app_sg_id", "db_sg_id", "lb_sg_id"),
            ),
            Stage(
                "iam",
                self.iam,
                provides=("instance_profile_name", "instance_role_name"),
            ),
        ]
        if self.config.notifications_enabled:
            stages.append(Stage(
                "notifications",
                self.notifications,
                requires=("instance_role_name",),
                provides=("topic_arn",),
            ))
        stages.append(Stage(
            "database",
            self.database,
            requires=("private_subnet_ids", "db_sg_id"),
            provides=("db_endpoint", "db_resource"),
        ))

        if self.config.uses_autoscaling:
            stages += [
                Stage(
                    "load_balancer",
                    self.load_balancer,
                    requires=("vpc_id", "public_subnet_ids", "lb_sg_id"),
                    provides=("lb_dns_name", "lb_zone_id", "target_group_arn"),
                ),
                Stage(
                    "autoscaling",
                    self.autoscaling,
                    requires=compute_inputs + ("target_group_arn",),
                    provides=("asg_name", "asg_resource"),
                ),
                Stage(
                    "dns",
                    self.dns,
                    requires=("lb_dns_name", "lb_zone_id", "asg_resource"),
                    provides=("dns_record_fqdn",),
                ),
            ]
        else:
            stages += [
                Stage(
                    "instance",
                    self.instance,
                    requires=compute_inputs,
                    provides=("instance_id", "public_ip"),
                ),
                Stage(
                    "dns",
                    self.dns,
                    requires=("public_ip",),
                    provides=("dns_record_fqdn",),
                ),
            ]
        return stages


def build_plan(
    config: StackConfig,
    zones: Sequence[str],
    aws_region: pulumi.Input[str] = "",
) -> TopologyPlan:
    """
    Build the topology plan for a configuration.

    Args:
        config: Validated stack configuration
        zones: Available zone names, in provider order
        aws_region: Region handed to the bootstrap script

    Returns:
        TopologyPlan ready to run

    Raises:
        ConfigurationError: If the VPC block is unusable or no zone is available
        InvalidPrefixError: If the VPC block holds fewer than 2 * ZONE_COUNT subnets
    """
    subnets = partition(config.vpc_cidr, SUBNET_PREFIX)
    assignments = assign_zones(subnets, list(zones), ZONE_COUNT)
    if len(assignments) < ZONE_COUNT:
        pulumi.log.warn(
            f"Only {len(assignments)} availability zone(s) available; "
            f"creating {len(assignments)} public/private subnet pair(s)"
        )

    return TopologyPlan(StackStages(config, assignments, aws_region).stages())
