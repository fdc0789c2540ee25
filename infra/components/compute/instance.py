"""
EC2 Instance Component for the single-instance compute mode.

Key Components:
1. AMI: the custom application image (or the configured ami-id).
2. User Data: bootstrap script that runs ONCE at first boot. It embeds the
   database endpoint, so it is rendered only after the RDS instance exists.
3. Instance Profile: grants the CloudWatch agent its permissions.
4. Placement: first public subnet, public IP, application security group.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.utils.tags import create_tags


@dataclass
class InstanceOutputs:
    """Output values from EC2 instance component."""
    instance_id: pulumi.Output[str]
    public_ip: pulumi.Output[str]


class InstanceComponent(pulumi.ComponentResource):
    """
    Single EC2 instance running the web application.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        ami_id: pulumi.Input[str],
        instance_type: str,
        key_name: str,
        subnet_id: pulumi.Input[str],
        security_group_id: pulumi.Input[str],
        instance_profile_name: pulumi.Input[str],
        user_data: pulumi.Input[str],
        database: pulumi.Resource,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:Instance", name, None, opts)

        self.instance = aws.ec2.Instance(
            f"{name}-instance",
            ami=ami_id,
            instance_type=instance_type,
            key_name=key_name,
            subnet_id=subnet_id,
            vpc_security_group_ids=[security_group_id],
            iam_instance_profile=instance_profile_name,
            disable_api_termination=False,
            user_data=user_data,
            tags=create_tags(environment, f"{name}-instance"),
            opts=pulumi.ResourceOptions(
                parent=self,
                depends_on=[database],
            ),
        )

        self.register_outputs({
            "instance_id": self.instance.id,
            "public_ip": self.instance.public_ip,
        })

    def get_outputs(self) -> InstanceOutputs:
        """Get EC2 output values."""
        return InstanceOutputs(
            instance_id=self.instance.id,
            public_ip=self.instance.public_ip,
        )
