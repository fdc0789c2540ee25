"""
Security components for IAM.

Components:
- IamRolesComponent: EC2 role and instance profile with CloudWatch agent access
"""

from infra.components.security.iam_roles import IamRolesComponent, IamRoleOutputs

__all__ = [
    "IamRolesComponent",
    "IamRoleOutputs",
]
