"""Pytest fixtures for infrastructure tests."""

import sys
from pathlib import Path

import pulumi
import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

MOCK_ZONES = ["us-east-1a", "us-east-1b", "us-east-1c", "us-east-1d"]
MOCK_DB_ENDPOINT = "webapp-db.abc123.us-east-1.rds.amazonaws.com:3306"
MOCK_PUBLIC_IP = "203.0.113.10"
MOCK_LB_DNS_NAME = "webapp-alb-123.us-east-1.elb.amazonaws.com"
MOCK_LB_ZONE_ID = "Z35SXDOTRQ7X7K"


class InfraMocks(pulumi.runtime.Mocks):
    """Echo inputs back as state, filling in provider-computed attributes."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        if args.typ == "aws:rds/instance:Instance":
            outputs["endpoint"] = MOCK_DB_ENDPOINT
            outputs["address"] = MOCK_DB_ENDPOINT.split(":")[0]
            outputs["port"] = 3306
        elif args.typ == "aws:ec2/instance:Instance":
            outputs["publicIp"] = MOCK_PUBLIC_IP
        elif args.typ == "aws:lb/loadBalancer:LoadBalancer":
            outputs["dnsName"] = MOCK_LB_DNS_NAME
            outputs["zoneId"] = MOCK_LB_ZONE_ID
        elif args.typ == "aws:route53/record:Record":
            outputs["fqdn"] = args.inputs.get("name")
        outputs.setdefault("arn", f"arn:aws:mock::123456789012:{args.name}")
        outputs.setdefault("name", args.name)
        return [f"{args.name}_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "aws:index/getAvailabilityZones:getAvailabilityZones":
            return {"names": MOCK_ZONES, "zoneIds": [f"use1-az{i}" for i in range(len(MOCK_ZONES))]}
        if args.token == "aws:route53/getZone:getZone":
            return {"id": "Z0123456789", "zoneId": "Z0123456789", "name": args.args.get("name")}
        if args.token == "aws:ec2/getAmi:getAmi":
            return {"id": "ami-0123456789abcdef0", "name": "csye6225_2024"}
        if args.token == "aws:acm/getCertificate:getCertificate":
            return {"arn": "arn:aws:acm:us-east-1:123456789012:certificate/mock", "domain": args.args.get("domain")}
        return {}


pulumi.runtime.set_mocks(InfraMocks(), preview=False)


class FakeConfig:
    """Stand-in for pulumi.Config backed by a dict of raw values."""

    def __init__(self, values: dict):
        self.values = values

    def get(self, key: str):
        value = self.values.get(key)
        if value is None:
            return None
        return value if isinstance(value, str) else str(value)

    def get_secret(self, key: str):
        return self.values.get(key)

    def get_object(self, key: str):
        return self.values.get(key)


BASE_CONFIG = {
    "vpc-cidr": "10.0.0.0/16",
    "igw-route": "0.0.0.0/0",
    "ipv4-cidr": "0.0.0.0/0",
    "ipv6-cidr": "::/0",
    "ssh-key": "webapp-key",
    "ami-id": "ami-0123456789abcdef0",
    "ec2-instance-type": "t2.micro",
    "db-engine-name": "mariadb",
    "db-family": "mariadb10.11",
    "db-engine-version": "10.11",
    "db-instance-class": "db.t3.micro",
    "db-name": "csye6225",
    "db-storage-size": "20",
    "db-master-user": "csye6225",
    "db-master-password": "s3cret",
    "domain-name": "dev.example.com",
    "ports": [22, 80, 443, 8080],
}


@pytest.fixture
def iac_project_root():
    """Return the infrastructure package directory."""
    return PROJECT_ROOT / "infra"


@pytest.fixture
def python_files_in_iac(iac_project_root):
    """Return all Python files in the infrastructure package."""
    return [f for f in iac_project_root.rglob("*.py") if "__pycache__" not in str(f)]


@pytest.fixture
def config_values():
    """Return a mutable copy of a complete single-instance configuration."""
    return dict(BASE_CONFIG)


@pytest.fixture
def make_config(config_values):
    """Build a StackConfig from config_values plus overrides."""
    from infra.configs.environment import get_config

    def _make(**overrides):
        values = {**config_values, **overrides}
        return get_config(FakeConfig({k: v for k, v in values.items() if v is not None}))

    return _make
