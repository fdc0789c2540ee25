"""
Security Groups Component for Network Access Control.

Architectural Steps & Flow:
1. Create "Shell" Security Groups first (application, database and, behind a
   load balancer, the load balancer's own group) so they exist and can be
   referenced by ID.

2. Define Rules:
   - Application: the configured ports from the operator CIDRs. Behind a load
     balancer, the application port only accepts traffic from the load
     balancer group and SSH is the only port left open to the CIDRs.
   - Database: MySQL/MariaDB port ONLY from the application group.
   - Application egress: MySQL port to the database group and HTTPS out (for
     CloudWatch and SNS).
   - Load balancer: listener ports from anywhere in the operator CIDRs,
     egress to the application port.

3. Stateful Nature: allowing an inbound request automatically allows the reply.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import PORTS
from infra.utils.tags import create_tags


@dataclass
class SecurityGroupOutputs:
    """Output values from security groups component."""
    app_sg_id: pulumi.Output[str]
    db_sg_id: pulumi.Output[str]
    lb_sg_id: pulumi.Output[str] | None


class SecurityGroupsComponent(pulumi.ComponentResource):
    """
    Security groups component for network access control.

    The database accepts connections only from the application group.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        vpc_id: pulumi.Input[str],
        ports: tuple[int, ...],
        ipv4_cidr: str,
        ipv6_cidr: str,
        app_port: int,
        alb_ports: tuple[int, ...] = (),
        behind_load_balancer: bool = False,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:SecurityGroups", name, None, opts)
        self.environment = environment
        self.ipv4_cidr = ipv4_cidr
        self.ipv6_cidr = ipv6_cidr

        child_opts = pulumi.ResourceOptions(parent=self)

        self.app_sg = aws.ec2.SecurityGroup(
            f"{name}-app-sg",
            description="application security group",
            vpc_id=vpc_id,
            tags=create_tags(environment, f"{name}-app-sg"),
            opts=child_opts,
        )

        self.db_sg = aws.ec2.SecurityGroup(
            f"{name}-db-sg",
            description="database security group",
            vpc_id=vpc_id,
            tags=create_tags(environment, f"{name}-db-sg"),
            opts=child_opts,
        )

        self.lb_sg = None
        if behind_load_balancer:
            self.lb_sg = aws.ec2.SecurityGroup(
                f"{name}-lb-sg",
                description="load balancer security group",
                vpc_id=vpc_id,
                tags=create_tags(environment, f"{name}-lb-sg"),
                opts=child_opts,
            )

        self.app_ingress_rules: list[aws.vpc.SecurityGroupIngressRule] = []
        self._create_app_rules(name, ports, app_port, child_opts)
        self._create_database_rules(name, child_opts)
        if self.lb_sg is not None:
            self._create_load_balancer_rules(name, alb_ports, app_port, child_opts)

        self.register_outputs({
            "app_sg_id": self.app_sg.id,
            "db_sg_id": self.db_sg.id,
            "lb_sg_id": self.lb_sg.id if self.lb_sg is not None else None,
        })

    def _cidr_ingress(
        self,
        rule_name: str,
        security_group_id: pulumi.Input[str],
        port: int,
        description: str,
        opts: pulumi.ResourceOptions,
    ) -> list[aws.vpc.SecurityGroupIngressRule]:
        """Allow one TCP port from both operator CIDRs."""
        ipv4 = aws.vpc.SecurityGroupIngressRule(
            f"{rule_name}-ipv4",
            security_group_id=security_group_id,
            ip_protocol="tcp",
            from_port=port,
            to_port=port,
            cidr_ipv4=self.ipv4_cidr,
            description=description,
            opts=opts,
        )
        ipv6 = aws.vpc.SecurityGroupIngressRule(
            f"{rule_name}-ipv6",
            security_group_id=security_group_id,
            ip_protocol="tcp",
            from_port=port,
            to_port=port,
            cidr_ipv6=self.ipv6_cidr,
            description=description,
            opts=opts,
        )
        return [ipv4, ipv6]

    def _create_app_rules(
        self,
        name: str,
        ports: tuple[int, ...],
        app_port: int,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create application ingress and egress rules."""
        cidr_ports = ports
        if self.lb_sg is not None:
            cidr_ports = tuple(port for port in ports if port == PORTS["ssh"])

        for port in cidr_ports:
            self.app_ingress_rules.extend(self._cidr_ingress(
                f"{name}-app-ingress-{port}",
                self.app_sg.id,
                port,
                f"TCP {port} from operator CIDRs",
                opts,
            ))

        if self.lb_sg is not None:
            lb_rule = aws.vpc.SecurityGroupIngressRule(
                f"{name}-app-ingress-lb",
                security_group_id=self.app_sg.id,
                ip_protocol="tcp",
                from_port=app_port,
                to_port=app_port,
                referenced_security_group_id=self.lb_sg.id,
                description="Application port from load balancer",
                opts=opts,
            )
            self.app_ingress_rules.append(lb_rule)

        # Application: database traffic only to the database group
        aws.vpc.SecurityGroupEgressRule(
            f"{name}-app-egress-db",
            security_group_id=self.app_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["mysql"],
            to_port=PORTS["mysql"],
            referenced_security_group_id=self.db_sg.id,
            description="MySQL to database",
            opts=opts,
        )

        aws.vpc.SecurityGroupEgressRule(
            f"{name}-app-egress-https-ipv4",
            security_group_id=self.app_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["https"],
            to_port=PORTS["https"],
            cidr_ipv4=self.ipv4_cidr,
            description="HTTPS out",
            opts=opts,
        )

        aws.vpc.SecurityGroupEgressRule(
            f"{name}-app-egress-https-ipv6",
            security_group_id=self.app_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["https"],
            to_port=PORTS["https"],
            cidr_ipv6=self.ipv6_cidr,
            description="HTTPS out",
            opts=opts,
        )

    def _create_database_rules(
        self,
        name: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create database ingress rules."""
        self.db_ingress_rule = aws.vpc.SecurityGroupIngressRule(
            f"{name}-db-ingress-app",
            security_group_id=self.db_sg.id,
            ip_protocol="tcp",
            from_port=PORTS["mysql"],
            to_port=PORTS["mysql"],
            referenced_security_group_id=self.app_sg.id,
            description="MySQL from application",
            opts=opts,
        )

    def _create_load_balancer_rules(
        self,
        name: str,
        alb_ports: tuple[int, ...],
        app_port: int,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create load balancer ingress and egress rules."""
        for port in alb_ports:
            self._cidr_ingress(
                f"{name}-lb-ingress-{port}",
                self.lb_sg.id,
                port,
                f"Listener port {port}",
                opts,
            )

        aws.vpc.SecurityGroupEgressRule(
            f"{name}-lb-egress-app",
            security_group_id=self.lb_sg.id,
            ip_protocol="tcp",
            from_port=app_port,
            to_port=app_port,
            referenced_security_group_id=self.app_sg.id,
            description="To application port",
            opts=opts,
        )

    def get_outputs(self) -> SecurityGroupOutputs:
        """Get security group output values."""
        return SecurityGroupOutputs(
            app_sg_id=self.app_sg.id,
            db_sg_id=self.db_sg.id,
            lb_sg_id=self.lb_sg.id if self.lb_sg is not None else None,
        )
