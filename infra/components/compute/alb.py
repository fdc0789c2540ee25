"""
Application Load Balancer Component for Backend Traffic Distribution.

Core Jobs:
1. Distribute Traffic: spread requests across the autoscaling group's instances.
2. Health Check: stop sending traffic to instances that fail the check.
3. Stable Endpoint: instances come and go, the ALB DNS name stays the same.

The 3-Resource Chain:
1. Load Balancer: internet-facing, in the public subnets. Has a DNS name.
2. Listener: one per alb-ports entry. Port 443 terminates TLS with the ACM
   certificate issued for the domain; any other port forwards plain HTTP.
3. Target Group: pool of instances on the application port. The autoscaling
   group registers its instances here.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import PORTS
from infra.utils.tags import create_tags


@dataclass
class AlbOutputs:
    """Output values from ALB component."""
    alb_arn: pulumi.Output[str]
    alb_dns_name: pulumi.Output[str]
    alb_zone_id: pulumi.Output[str]
    target_group_arn: pulumi.Output[str]
    listener_arns: list[pulumi.Output[str]]


class AlbComponent(pulumi.ComponentResource):
    """
    Internet-facing Application Load Balancer for the autoscaling group.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        subnet_ids: list[pulumi.Input[str]],
        security_group_id: pulumi.Input[str],
        app_port: int,
        listener_ports: tuple[int, ...],
        domain_name: str,
        health_check_path: str = "/healthz",
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:compute:Alb", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        self.alb = aws.lb.LoadBalancer(
            f"{name}-alb",
            internal=False,
            load_balancer_type="application",
            security_groups=[security_group_id],
            subnets=subnet_ids,
            enable_deletion_protection=False,
            tags=create_tags(environment, f"{name}-alb"),
            opts=child_opts,
        )

        self.target_group = aws.lb.TargetGroup(
            f"{name}-tg",
            port=app_port,
            protocol="HTTP",
            vpc_id=vpc_id,
            target_type="instance",
            deregistration_delay=60,
            health_check=aws.lb.TargetGroupHealthCheckArgs(
                enabled=True,
                path=health_check_path,
                port="traffic-port",
                protocol="HTTP",
                healthy_threshold=2,
                unhealthy_threshold=3,
                timeout=5,
                interval=30,
                matcher="200",
            ),
            tags=create_tags(environment, f"{name}-tg"),
            opts=child_opts,
        )

        self.listeners = [
            self._create_listener(name, environment, port, domain_name, child_opts)
            for port in listener_ports
        ]

        self.register_outputs({
            "alb_arn": self.alb.arn,
            "alb_dns_name": self.alb.dns_name,
            "alb_zone_id": self.alb.zone_id,
            "target_group_arn": self.target_group.arn,
            "listener_arns": [listener.arn for listener in self.listeners],
        })

    def _create_listener(
        self,
        name: str,
        environment: str,
        port: int,
        domain_name: str,
        opts: pulumi.ResourceOptions,
    ) -> aws.lb.Listener:
        """Create a forwarding listener; HTTPS on port 443."""
        secure = port == PORTS["https"]
        certificate_arn = None
        if secure:
            certificate = aws.acm.get_certificate(
                domain=domain_name,
                statuses=["ISSUED"],
                most_recent=True,
            )
            certificate_arn = certificate.arn

        return aws.lb.Listener(
            f"{name}-listener-{port}",
            load_balancer_arn=self.alb.arn,
            port=port,
            protocol="HTTPS" if secure else "HTTP",
            certificate_arn=certificate_arn,
            ssl_policy="ELBSecurityPolicy-2016-08" if secure else None,
            default_actions=[
                aws.lb.ListenerDefaultActionArgs(
                    type="forward",
                    target_group_arn=self.target_group.arn,
                ),
            ],
            tags=create_tags(environment, f"{name}-listener-{port}"),
            opts=opts,
        )

    def get_outputs(self) -> AlbOutputs:
        """Get ALB output values."""
        return AlbOutputs(
            alb_arn=self.alb.arn,
            alb_dns_name=self.alb.dns_name,
            alb_zone_id=self.alb.zone_id,
            target_group_arn=self.target_group.arn,
            listener_arns=[listener.arn for listener in self.listeners],
        )
