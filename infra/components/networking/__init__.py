"""
Networking components for VPC infrastructure.

Components:
- VpcComponent: VPC with public/private subnet pairs, IGW, route tables
- SecurityGroupsComponent: Security groups for application, database, load balancer
"""

from infra.components.networking.vpc import VpcComponent, VpcOutputs
from infra.components.networking.security_groups import SecurityGroupsComponent, SecurityGroupOutputs

__all__ = [
    "VpcComponent",
    "VpcOutputs",
    "SecurityGroupsComponent",
    "SecurityGroupOutputs",
]
