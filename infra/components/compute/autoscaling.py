"""
Autoscaling Component for the load-balanced compute mode.

Creates:
- Launch template: AMI, instance type, key pair, instance profile, public IP
  on the application security group, base64 user data
- Autoscaling group across the public subnets, registered with the ALB
  target group
- Simple scaling policies (+1 / -1 instance) driven by average CPU alarms
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import ASG_DEFAULTS
from infra.components.compute.user_data import encode_user_data
from infra.utils.tags import create_tags, merge_tags, propagated_tags


@dataclass
class AutoscalingOutputs:
    """Output values from autoscaling component."""
    asg_name: pulumi.Output[str]
    launch_template_id: pulumi.Output[str]
    scale_up_policy_arn: pulumi.Output[str]
    scale_down_policy_arn: pulumi.Output[str]


class AutoscalingComponent(pulumi.ComponentResource):
    """
    Autoscaling group of application instances behind the load balancer.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        ami_id: pulumi.Input[str],
        instance_type: str,
        key_name: str,
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        instance_profile_name: pulumi.Input[str],
        user_data: pulumi.Output[str],
        target_group_arn: pulumi.Input[str],
        min_size: int,
        max_size: int,
        desired_capacity: int,
        database: pulumi.Resource,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:Autoscaling", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        instance_tags = merge_tags(
            create_tags(environment, f"{name}-instance"),
            {"AutoscalingGroup": f"{name}-asg"},
        )

        self.launch_template = aws.ec2.LaunchTemplate(
            f"{name}-lt",
            image_id=ami_id,
            instance_type=instance_type,
            key_name=key_name,
            user_data=user_data.apply(encode_user_data),
            iam_instance_profile=aws.ec2.LaunchTemplateIamInstanceProfileArgs(
                name=instance_profile_name,
            ),
            network_interfaces=[
                aws.ec2.LaunchTemplateNetworkInterfaceArgs(
                    associate_public_ip_address="true",
                    security_groups=[security_group_id],
                ),
            ],
            tag_specifications=[
                aws.ec2.LaunchTemplateTagSpecificationArgs(
                    resource_type="instance",
                    tags=instance_tags,
                ),
            ],
            tags=create_tags(environment, f"{name}-lt"),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[database],
            ),
        )

        self.group = aws.autoscaling.Group(
            f"{name}-asg",
            min_size=min_size,
            max_size=max_size,
            desired_capacity=desired_capacity,
            default_cooldown=ASG_DEFAULTS["cooldown_seconds"],
            vpc_zone_identifiers=subnet_ids,
            target_group_arns=[target_group_arn],
            launch_template=aws.autoscaling.GroupLaunchTemplateArgs(
                id=self.launch_template.id,
                version="$Latest",
            ),
            tags=propagated_tags(instance_tags),
            opts=child_opts,
        )

        self.scale_up_policy = self._create_scaling_policy(
            name, "scale-up", 1, "GreaterThanThreshold", ASG_DEFAULTS["scale_up_cpu"], child_opts,
        )
        self.scale_down_policy = self._create_scaling_policy(
            name, "scale-down", -1, "LessThanThreshold", ASG_DEFAULTS["scale_down_cpu"], child_opts,
        )

        self.register_outputs({
            "asg_name": self.group.name,
            "launch_template_id": self.launch_template.id,
            "scale_up_policy_arn": self.scale_up_policy.arn,
            "scale_down_policy_arn": self.scale_down_policy.arn,
        })

    def _create_scaling_policy(
        self,
        name: str,
        suffix: str,
        adjustment: int,
        comparison: str,
        cpu_threshold: int,
        opts: pulumi.ResourceOptions,
    ) -> aws.autoscaling.Policy:
        """Create a simple scaling policy and the CPU alarm that triggers it."""
        policy = aws.autoscaling.Policy(
            f"{name}-{suffix}",
            autoscaling_group_name=self.group.name,
            adjustment_type="ChangeInCapacity",
            policy_type="SimpleScaling",
            scaling_adjustment=adjustment,
            cooldown=ASG_DEFAULTS["cooldown_seconds"],
            opts=opts,
        )

        aws.cloudwatch.MetricAlarm(
            f"{name}-{suffix}-alarm",
            comparison_operator=comparison,
            evaluation_periods=1,
            metric_name="CPUUtilization",
            namespace="AWS/EC2",
            period=60,
            statistic="Average",
            threshold=cpu_threshold,
            dimensions={"AutoScalingGroupName": self.group.name},
            alarm_actions=[policy.arn],
            opts=opts,
        )
        return policy

    def get_outputs(self) -> AutoscalingOutputs:
        """Get autoscaling output values."""
        return AutoscalingOutputs(
            asg_name=self.group.name,
            launch_template_id=self.launch_template.id,
            scale_up_policy_arn=self.scale_up_policy.arn,
            scale_down_policy_arn=self.scale_down_policy.arn,
        )
