"""
Pulumi program entry point for the web application infrastructure.

Builds the topology plan from stack configuration and runs its stages in
dependency order:
1. Configuration, available zones, subnet partition
2. VPC -> Security Groups, IAM Role
3. Notification pipeline (optional)
4. RDS
5. EC2 instance, or ALB -> Autoscaling Group
6. Route53 record
"""

import pulumi
import pulumi_aws as aws

from infra.configs.environment import get_config
from infra.topology.stages import build_plan

# Exported when the stage that provides them ran
OPTIONAL_EXPORTS = {
    "public_ip": "public_ip",
    "lb_dns_name": "lb_dns_name",
    "asg_name": "asg_name",
    "topic_arn": "sns_topic_arn",
    "dns_record_fqdn": "dns_record_fqdn",
}


def main() -> None:
    """Deploy the web application infrastructure."""
    config = get_config()

    available = aws.get_availability_zones(state="available")
    aws_region = aws.get_region().name

    plan = build_plan(config, available.names, aws_region)
    context = plan.run()

    pulumi.export("vpc_id", context.require("vpc_id"))
    pulumi.export("db_endpoint", context.require("db_endpoint"))
    for key, export_name in OPTIONAL_EXPORTS.items():
        if key in context:
            pulumi.export(export_name, context.require(key))

    pulumi.log.info(f"✓ {config.compute_mode} deployment declared for {config.domain_name}")


# Execute
main()
