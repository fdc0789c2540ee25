"""
Edge components.

Components:
- DnsRecordComponent: Route53 A record for the application domain
"""

from infra.components.edge.dns import DnsRecordComponent, DnsOutputs

__all__ = [
    "DnsRecordComponent",
    "DnsOutputs",
]
