"""
User data bootstrap script for the application instances.

The script runs ONCE at first boot. It appends the datasource settings to the
application's properties file, locks the file down to the service user and
starts the CloudWatch agent with the config baked into the AMI.

Placeholders use ${NAME}. ${HOST} is the database endpoint and is only known
after the engine has created the RDS instance, so it is filled in through a
DeferredValue. \\${USERS_CSV:users.csv} is escaped shell text for Spring and is
never substituted.
"""

import base64
from dataclasses import dataclass
from typing import Mapping

import pulumi

from infra.topology.deferred import DeferredValue

BOOTSTRAP_TEMPLATE = r"""#!/bin/bash
{
	echo "spring.jpa.hibernate.ddl-auto=create-drop"
	echo "spring.datasource.url=jdbc:mariadb://${HOST}/${DB_NAME}"
	echo "spring.datasource.username=${DB_USER}"
	echo "spring.datasource.password=${DB_PASSWORD}"
	echo "spring.datasource.driver-class-name=org.mariadb.jdbc.Driver"
	echo "spring.jpa.show-sql:true"
	echo "spring.jpa.properties.hibernate.dialect=org.hibernate.dialect.MariaDBDialect"
	echo "application.config.csv-file=\${USERS_CSV:users.csv}"
	echo "application.config.sns-topic-arn=${SNS_TOPIC_ARN}"
	echo "application.config.aws-region=${AWS_REGION}"
	echo "server.port=${APP_PORT}"
	echo "logging.level.org.springframework.security=info"
} >> /opt/csye6225/application.properties
sudo chown csye6225:csye6225 /opt/csye6225/application.properties
sudo chmod 640 /opt/csye6225/application.properties
{
	sudo /opt/aws/amazon-cloudwatch-agent/bin/amazon-cloudwatch-agent-ctl \
		-a fetch-config \
		-m ec2 \
		-c file:/opt/aws/amazon-cloudwatch-agent/etc/cloudwatch-config.json \
		-s
}
"""


@dataclass(frozen=True)
class BootstrapSettings:
    """Values substituted into the bootstrap script, apart from ${HOST}."""
    db_name: str
    db_user: str
    db_password: pulumi.Input[str]
    app_port: int
    aws_region: pulumi.Input[str]
    sns_topic_arn: pulumi.Input[str] | None = None


def substitute(template: str, placeholder: str, value: str) -> str:
    """Replace every occurrence of ${placeholder} with value."""
    return template.replace("${" + placeholder + "}", value)


def render_bootstrap(template: str, values: Mapping[str, str]) -> str:
    """Substitute each ${KEY} in values; unknown placeholders are left as-is."""
    for placeholder, value in values.items():
        template = substitute(template, placeholder, value)
    return template


def encode_user_data(script: str) -> str:
    """Base64-encode a script, as launch templates require."""
    return base64.b64encode(script.encode("utf-8")).decode("ascii")


def render_user_data(
    settings: BootstrapSettings,
    db_endpoint: pulumi.Input[str],
    consumer: str,
    template: str = BOOTSTRAP_TEMPLATE,
) -> pulumi.Output[str]:
    """
    Render the bootstrap script for one compute resource.

    Static values are substituted as soon as they resolve; ${HOST} is
    substituted when the database endpoint becomes available.

    Args:
        settings: Values for every placeholder but ${HOST}
        db_endpoint: Database endpoint (host:port), resolved by the engine
        consumer: Name of the consuming resource
        template: Script template

    Returns:
        Output resolving to the fully rendered script
    """
    static_values = pulumi.Output.all(
        DB_NAME=settings.db_name,
        DB_USER=settings.db_user,
        DB_PASSWORD=settings.db_password,
        APP_PORT=str(settings.app_port),
        AWS_REGION=settings.aws_region,
        SNS_TOPIC_ARN=settings.sns_topic_arn or "",
    )
    script = static_values.apply(lambda values: render_bootstrap(template, values))

    host = DeferredValue("db-endpoint", db_endpoint)
    return host.consume(
        consumer,
        lambda endpoint: script.apply(lambda rendered: substitute(rendered, "HOST", endpoint)),
    )
