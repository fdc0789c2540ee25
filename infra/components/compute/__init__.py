"""
Compute components for the application tier.

Components:
- InstanceComponent: single EC2 instance
- AlbComponent: Application Load Balancer with target group and listeners
- AutoscalingComponent: launch template, autoscaling group, scaling policies
"""

from infra.components.compute.instance import InstanceComponent, InstanceOutputs
from infra.components.compute.alb import AlbComponent, AlbOutputs
from infra.components.compute.autoscaling import AutoscalingComponent, AutoscalingOutputs

__all__ = [
    "InstanceComponent",
    "InstanceOutputs",
    "AlbComponent",
    "AlbOutputs",
    "AutoscalingComponent",
    "AutoscalingOutputs",
]
