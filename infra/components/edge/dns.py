"""
Route53 DNS record for the application domain.

The hosted zone is looked up by domain name (it is owned outside this stack).
- Single instance: A record -> instance public IP, short TTL.
- Autoscaling: A alias -> load balancer DNS name (no TTL, alias records
  follow the target's health).
"""

from dataclasses import dataclass

import pulumi
import pulumi_aws as aws

from infra.configs.constants import DNS_TTL


@dataclass
class DnsOutputs:
    """Output values from DNS component."""
    fqdn: pulumi.Output[str]
    zone_id: str


class DnsRecordComponent(pulumi.ComponentResource):
    """
    A record for the application domain.

    Exactly one target must be given: public_ip, or the load balancer's
    dns name and hosted zone id.
    """

    def __init__(
        self,
        name: str,
        domain_name: str,
        public_ip: pulumi.Input[str] | None = None,
        lb_dns_name: pulumi.Input[str] | None = None,
        lb_zone_id: pulumi.Input[str] | None = None,
        opts: pulumi.ResourceOptions | None = None,
    ) -> None:
        if (public_ip is None) == (lb_dns_name is None):
            raise ValueError("DnsRecordComponent needs either public_ip or lb_dns_name")

        super().__init__("custom:edge:DnsRecord", name, None, opts)

        child_opts = pulumi.ResourceOptions(parent=self)

        zone = aws.route53.get_zone(name=domain_name)
        self.zone_id = zone.zone_id

        if public_ip is not None:
            self.record = aws.route53.Record(
                f"{name}-a-record",
                zone_id=self.zone_id,
                name=domain_name,
                type="A",
                ttl=DNS_TTL,
                records=[public_ip],
                allow_overwrite=True,
                opts=child_opts,
            )
        else:
            self.record = aws.route53.Record(
                f"{name}-alias-record",
                zone_id=self.zone_id,
                name=domain_name,
                type="A",
                aliases=[
                    aws.route53.RecordAliasArgs(
                        name=lb_dns_name,
                        zone_id=lb_zone_id,
                        evaluate_target_health=True,
                    ),
                ],
                allow_overwrite=True,
                opts=child_opts,
            )

        self.register_outputs({
            "fqdn": self.record.fqdn,
            "zone_id": self.zone_id,
        })

    def get_outputs(self) -> DnsOutputs:
        """Get DNS output values."""
        return DnsOutputs(
            fqdn=self.record.fqdn,
            zone_id=self.zone_id,
        )
