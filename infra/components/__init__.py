"""
Pulumi component resources for the web application stack.

Each submodule provides reusable ComponentResource classes:
- networking: VPC, subnets, route tables, security groups
- security: IAM role and instance profile
- storage: RDS instance
- compute: EC2 instance, load balancer, autoscaling group, user data
- edge: Route53 record
- messaging: SNS -> Lambda notification pipeline
"""
