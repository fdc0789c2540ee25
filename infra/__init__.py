"""
Pulumi infrastructure-as-code for the web application stack.

This package defines AWS infrastructure including:
- VPC with public/private subnet pairs across availability zones
- Security groups for the application, database and load balancer
- RDS MariaDB/MySQL instance for persistence
- EC2 instance, or an autoscaling group behind an Application Load Balancer
- Route53 record for the application domain
- Optional SNS -> Lambda notification pipeline with DynamoDB and GCP storage
"""
