"""
Notification pipeline component (SNS -> Lambda).

Creates:
- SNS topic the application publishes submission events to
- Lambda function subscribed to the topic (code from a local path)
- DynamoDB table where the Lambda tracks sent emails
- Lambda execution role with logging and table write access
- sns:Publish permission on the topic for the application's EC2 role
- Optional GCP storage bucket plus a service account key the Lambda uses to
  upload submissions, when a GCP project is configured
"""

import json
from dataclasses import dataclass

import pulumi
import pulumi_aws as aws
import pulumi_gcp as gcp

from infra.components.security.iam_roles import assume_role_policy
from infra.configs.base import NotificationSettings
from infra.configs.constants import LAMBDA_DEFAULTS
from infra.utils.naming import ResourceNamer
from infra.utils.tags import create_tags


@dataclass
class NotificationOutputs:
    """Output values from notifications component."""
    topic_arn: pulumi.Output[str]
    function_name: pulumi.Output[str]
    table_name: pulumi.Output[str]
    bucket_name: pulumi.Output[str] | None


class NotificationsComponent(pulumi.ComponentResource):
    """
    SNS topic feeding a Lambda function, with its storage.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        namer: ResourceNamer,
        settings: NotificationSettings,
        instance_role_name: pulumi.Input[str],
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:messaging:Notifications", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.topic = aws.sns.Topic(
            f"{name}-topic",
            tags=create_tags(environment, f"{name}-topic"),
            opts=child_opts,
        )

        self.table = aws.dynamodb.Table(
            f"{name}-email-tracking",
            attributes=[
                aws.dynamodb.TableAttributeArgs(name="id", type="S"),
            ],
            hash_key="id",
            billing_mode="PAY_PER_REQUEST",
            tags=create_tags(environment, f"{name}-email-tracking"),
            opts=child_opts,
        )

        self.bucket = None
        self.service_account_key = None
        if settings.gcp_project:
            self._create_gcp_storage(name, namer, settings.gcp_project)

        self._create_lambda(name, environment, settings, child_opts)

        # Application instances publish to the topic
        aws.iam.RolePolicy(
            f"{name}-ec2-sns-publish",
            role=instance_role_name,
            policy=self.topic.arn.apply(lambda arn: json.dumps({
                "Version": "2012-10-17",
                "Statement": [{
                    "Effect": "Allow",
                    "Action": ["sns:Publish"],
                    "Resource": [arn],
                }],
            })),
            opts=child_opts,
        )

        self.register_outputs({
            "topic_arn": self.topic.arn,
            "function_name": self.function.name,
            "table_name": self.table.name,
            "bucket_name": self.bucket.name if self.bucket is not None else None,
        })

    def _create_gcp_storage(
        self,
        name: str,
        namer: ResourceNamer,
        project: str,
    ) -> None:
        """Create the GCP bucket and the service account the Lambda writes with."""
        provider = gcp.Provider(
            f"{name}-gcp",
            project=project,
            opts=pulumi.ResourceOptions(parent=self),
        )
        gcp_opts = pulumi.ResourceOptions(parent=self, provider=provider)

        self.bucket = gcp.storage.Bucket(
            f"{name}-submissions",
            name=namer.bucket_name("submissions"),
            location="US",
            force_destroy=True,
            uniform_bucket_level_access=True,
            opts=gcp_opts,
        )

        self.service_account = gcp.serviceaccount.Account(
            f"{name}-lambda-sa",
            account_id=namer.account_id("lambda"),
            display_name="Submission upload service account",
            opts=gcp_opts,
        )

        self.service_account_key = gcp.serviceaccount.Key(
            f"{name}-lambda-sa-key",
            service_account_id=self.service_account.name,
            opts=gcp_opts,
        )

        gcp.storage.BucketIAMMember(
            f"{name}-submissions-writer",
            bucket=self.bucket.name,
            role="roles/storage.objectAdmin",
            member=self.service_account.email.apply(lambda email: f"serviceAccount:{email}"),
            opts=gcp_opts,
        )

    def _create_lambda(
        self,
        name: str,
        environment: str,
        settings: NotificationSettings,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create the Lambda function, its role and the SNS wiring."""
        self.lambda_role = aws.iam.Role(
            f"{name}-lambda-role",
            assume_role_policy=assume_role_policy("lambda.amazonaws.com"),
            tags=create_tags(environment, f"{name}-lambda-role"),
            opts=opts,
        )

        aws.iam.RolePolicyAttachment(
            f"{name}-lambda-basic-execution",
            role=self.lambda_role.name,
            policy_arn="arn:aws:iam::aws:policy/service-role/AWSLambdaBasicExecutionRole",
            opts=opts,
        )

        aws.iam.RolePolicy(
            f"{name}-lambda-dynamodb",
            role=self.lambda_role.id,
            policy=self.table.arn.apply(lambda arn: json.dumps({
                "Version": "2012-10-17",
                "Statement": [{
                    "Effect": "Allow",
                    "Action": [
                        "dynamodb:PutItem",
                        "dynamodb:GetItem",
                        "dynamodb:UpdateItem",
                    ],
                    "Resource": [arn],
                }],
            })),
            opts=opts,
        )

        variables = {
            "ENVIRONMENT": environment,
            "TABLE_NAME": self.table.name,
        }
        if self.bucket is not None:
            variables["GCP_BUCKET_NAME"] = self.bucket.name
            variables["GCP_SERVICE_ACCOUNT_KEY"] = self.service_account_key.private_key
        for key, value in [
            ("SMTP_USER", settings.smtp_user),
            ("SMTP_PASSWORD", settings.smtp_password),
            ("SMTP_FROM", settings.smtp_from),
        ]:
            if value is not None:
                variables[key] = value

        self.function = aws.lambda_.Function(
            f"{name}-function",
            role=self.lambda_role.arn,
            runtime=settings.runtime,
            handler=settings.handler,
            code=pulumi.FileArchive(settings.code_path),
            timeout=LAMBDA_DEFAULTS["timeout_seconds"],
            environment=aws.lambda_.FunctionEnvironmentArgs(
                variables=variables,
            ),
            tags=create_tags(environment, f"{name}-function"),
            opts=opts,
        )

        aws.lambda_.Permission(
            f"{name}-sns-invoke",
            action="lambda:InvokeFunction",
            function=self.function.name,
            principal="sns.amazonaws.com",
            source_arn=self.topic.arn,
            opts=opts,
        )

        aws.sns.TopicSubscription(
            f"{name}-subscription",
            topic=self.topic.arn,
            protocol="lambda",
            endpoint=self.function.arn,
            opts=opts,
        )

    def get_outputs(self) -> NotificationOutputs:
        """Get notification pipeline output values."""
        return NotificationOutputs(
            topic_arn=self.topic.arn,
            function_name=self.function.name,
            table_name=self.table.name,
            bucket_name=self.bucket.name if self.bucket is not None else None,
        )
