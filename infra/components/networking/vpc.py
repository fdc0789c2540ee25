"""
VPC Component Resource for Network Infrastructure.

Steps & Architecture:
1. VPC: the isolated network container, sized by the vpc-cidr config value.
2. Subnets: one public and one private /24 per zone assignment (at most 3 zones).
   - Public subnets map a public IP on launch and hold the application tier.
   - Private subnets hold the database tier.
3. Internet Gateway: the "door" to the internet.
4. Route Tables:
   - Public RT: igw-route (normally 0.0.0.0/0) -> IGW.
   - Private RT: no internet route. Relies on the implicit "local" route.
5. Associations: every subnet is explicitly linked to its route table.

Order falls out of the identifiers: subnets, IGW and route tables need the
VPC id, associations need subnet and route table ids, the route needs the
route table and IGW ids.
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.topology.zones import ZoneAssignment
from infra.utils.tags import create_tags


@dataclass
class VpcOutputs:
    """Output values from VPC component."""
    vpc_id: pulumi.Output[str]
    public_subnet_ids: list[pulumi.Output[str]]
    private_subnet_ids: list[pulumi.Output[str]]
    public_route_table_id: pulumi.Output[str]
    private_route_table_id: pulumi.Output[str]
    internet_gateway_id: pulumi.Output[str]


class VpcComponent(pulumi.ComponentResource):
    """
    VPC component with public/private subnet pairs and an internet gateway.
    """

    def __init__(
        self,
        name: str,
        environment: str,
        cidr_block: str,
        assignments: list[ZoneAssignment],
        igw_route: str,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        super().__init__("custom:networking:Vpc", name, None, opts)
        self.environment = environment

        child_opts = pulumi.ResourceOptions(parent=self)

        self.vpc = aws.ec2.Vpc(
            f"{name}-vpc",
            cidr_block=cidr_block,
            enable_dns_hostnames=True,
            enable_dns_support=True,
            tags=create_tags(environment, f"{name}-vpc"),
            opts=child_opts,
        )

        self.public_subnets: list[aws.ec2.Subnet] = []
        self.private_subnets: list[aws.ec2.Subnet] = []
        for assignment in assignments:
            self.public_subnets.append(aws.ec2.Subnet(
                f"{name}-{assignment.public_name}",
                vpc_id=self.vpc.id,
                cidr_block=assignment.public_cidr,
                availability_zone=assignment.zone,
                map_public_ip_on_launch=True,
                tags=create_tags(environment, f"{name}-{assignment.public_name}", Tier="public"),
                opts=child_opts,
            ))
            self.private_subnets.append(aws.ec2.Subnet(
                f"{name}-{assignment.private_name}",
                vpc_id=self.vpc.id,
                cidr_block=assignment.private_cidr,
                availability_zone=assignment.zone,
                map_public_ip_on_launch=False,
                tags=create_tags(environment, f"{name}-{assignment.private_name}", Tier="private"),
                opts=child_opts,
            ))

        self.igw = aws.ec2.InternetGateway(
            f"{name}-igw",
            vpc_id=self.vpc.id,
            tags=create_tags(environment, f"{name}-igw"),
            opts=child_opts,
        )

        self._create_route_tables(name, igw_route, child_opts)

        self.register_outputs({
            "vpc_id": self.vpc.id,
            "public_subnet_ids": [subnet.id for subnet in self.public_subnets],
            "private_subnet_ids": [subnet.id for subnet in self.private_subnets],
            "public_route_table_id": self.public_rt.id,
            "private_route_table_id": self.private_rt.id,
            "internet_gateway_id": self.igw.id,
        })

    def _create_route_tables(
        self,
        name: str,
        igw_route: str,
        opts: pulumi.ResourceOptions,
    ) -> None:
        """Create route tables, associations and the default route."""
        self.public_rt = aws.ec2.RouteTable(
            f"{name}-public-rt",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-public-rt"),
            opts=opts,
        )

        # Private route table (VPC-only routing)
        self.private_rt = aws.ec2.RouteTable(
            f"{name}-private-rt",
            vpc_id=self.vpc.id,
            tags=create_tags(self.environment, f"{name}-private-rt"),
            opts=opts,
        )

        for i, subnet in enumerate(self.public_subnets):
            aws.ec2.RouteTableAssociation(
                f"{name}-public-rt-assoc-{i + 1}",
                subnet_id=subnet.id,
                route_table_id=self.public_rt.id,
                opts=opts,
            )

        for i, subnet in enumerate(self.private_subnets):
            aws.ec2.RouteTableAssociation(
                f"{name}-private-rt-assoc-{i + 1}",
                subnet_id=subnet.id,
                route_table_id=self.private_rt.id,
                opts=opts,
            )

        self.igw_route = aws.ec2.Route(
            f"{name}-route-to-igw",
            route_table_id=self.public_rt.id,
            destination_cidr_block=igw_route,
            gateway_id=self.igw.id,
            opts=opts,
        )

    def get_outputs(self) -> VpcOutputs:
        """Get VPC output values."""
        return VpcOutputs(
            vpc_id=self.vpc.id,
            public_subnet_ids=[subnet.id for subnet in self.public_subnets],
            private_subnet_ids=[subnet.id for subnet in self.private_subnets],
            public_route_table_id=self.public_rt.id,
            private_route_table_id=self.private_rt.id,
            internet_gateway_id=self.igw.id,
        )
