"""
Storage components.

Components:
- RdsComponent: RDS instance with subnet and parameter groups
"""

from infra.components.storage.rds import RdsComponent, RdsOutputs

__all__ = [
    "RdsComponent",
    "RdsOutputs",
]
