"""
IAM component for the application instances.

Creates:
- Role assumed by EC2, with the CloudWatch agent managed policy so the agent
  baked into the AMI can ship logs and metrics
- Instance profile wrapping the role (launch templates and instances take the
  profile, not the role)

Further inline policies (e.g., sns:Publish) are attached by the components
that own the target resource.
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import CLOUDWATCH_AGENT_POLICY_ARN
from infra.utils.tags import create_tags


def assume_role_policy(service: str) -> str:
    """Trust policy letting an AWS service principal assume a role."""
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Effect": "Allow",
            "Principal": {"Service": service},
            "Action": "sts:AssumeRole",
        }],
    })


@dataclass
class IamRoleOutputs:
    """Output values from IAM roles component."""
    ec2_role_name: pulumi.Output[str]
    ec2_role_arn: pulumi.Output[str]
    ec2_instance_profile_name: pulumi.Output[str]


class IamRolesComponent(pulumi.ComponentResource):
    """
    Instance role and profile for the application tier.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        managed_policy_arns: tuple[str, ...] = (CLOUDWATCH_AGENT_POLICY_ARN,),
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:security:IamRoles", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)
        role_name = f"{name}-instance-role"

        self.ec2_role = aws.iam.Role(
            role_name,
            assume_role_policy=assume_role_policy("ec2.amazonaws.com"),
            tags=create_tags(environment, role_name),
            opts=child_opts,
        )

        self.ec2_instance_profile = aws.iam.InstanceProfile(
            f"{name}-instance-profile",
            role=self.ec2_role.name,
            tags=create_tags(environment, f"{name}-instance-profile"),
            opts=child_opts,
        )

        self.policy_attachments: list[aws.iam.RolePolicyAttachment] = []
        for arn in managed_policy_arns:
            policy_name = arn.rsplit("/", 1)[-1]
            attachment = aws.iam.RolePolicyAttachment(
                f"{name}-{policy_name}",
                role=self.ec2_role.name,
                policy_arn=arn,
                opts=child_opts,
            )
            self.policy_attachments.append(attachment)

        self.register_outputs({
            "ec2_role_name": self.ec2_role.name,
            "ec2_role_arn": self.ec2_role.arn,
            "ec2_instance_profile_name": self.ec2_instance_profile.name,
        })

    def get_outputs(self) -> IamRoleOutputs:
        """Get IAM role output values."""
        return IamRoleOutputs(
            ec2_role_name=self.ec2_role.name,
            ec2_role_arn=self.ec2_role.arn,
            ec2_instance_profile_name=self.ec2_instance_profile.name,
        )
