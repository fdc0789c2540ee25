"""
Tests for the bootstrap script and deferred database endpoint.

Validates:
1. Placeholder substitution is literal and idempotent
2. The escaped Spring placeholder is never substituted
3. ${HOST} is filled in only once the endpoint resolves, for one consumer
"""

import base64

import pulumi
import pytest

from infra.components.compute.user_data import (
    BOOTSTRAP_TEMPLATE,
    BootstrapSettings,
    encode_user_data,
    render_bootstrap,
    render_user_data,
    substitute,
)
from infra.errors import ConfigurationError
from infra.topology.deferred import DeferredValue

ENDPOINT = "webapp-db.abc123.us-east-1.rds.amazonaws.com:3306"


def _settings(**overrides):
    values = {
        "db_name": "csye6225",
        "db_user": "csye6225",
        "db_password": "s3cret",
        "app_port": 8080,
        "aws_region": "us-east-1",
    }
    values.update(overrides)
    return BootstrapSettings(**values)


class TestSubstitution:
    """Pure template substitution."""

    def test_substitute_replaces_every_occurrence(self):
        assert substitute("${A}-${A}-${B}", "A", "x") == "x-x-${B}"

    def test_substitute_is_idempotent(self):
        """Substituting again leaves an already-rendered script unchanged."""
        once = substitute(BOOTSTRAP_TEMPLATE, "HOST", ENDPOINT)

        assert substitute(once, "HOST", ENDPOINT) == once

    def test_value_is_inserted_literally(self):
        """Values are not re-scanned for placeholders or regex syntax."""
        assert substitute("pw=${P}", "P", r"a$b\1${X}") == r"pw=a$b\1${X}"

    def test_render_bootstrap_fills_known_placeholders(self):
        rendered = render_bootstrap(BOOTSTRAP_TEMPLATE, {
            "DB_NAME": "csye6225",
            "DB_USER": "admin",
            "DB_PASSWORD": "s3cret",
            "APP_PORT": "8080",
            "AWS_REGION": "us-east-1",
            "SNS_TOPIC_ARN": "",
        })

        assert "jdbc:mariadb://${HOST}/csye6225" in rendered
        assert "spring.datasource.username=admin" in rendered
        assert "server.port=8080" in rendered
        assert 'application.config.sns-topic-arn="\n' in rendered

    def test_escaped_placeholder_survives(self):
        """The Spring default expression is shell-escaped and left alone."""
        rendered = render_bootstrap(BOOTSTRAP_TEMPLATE, {"HOST": ENDPOINT, "DB_NAME": "csye6225"})

        assert r"csv-file=\${USERS_CSV:users.csv}" in rendered

    def test_schema_created_and_dropped_with_application(self):
        assert "spring.jpa.hibernate.ddl-auto=create-drop" in BOOTSTRAP_TEMPLATE

    def test_template_locks_down_properties_file(self):
        assert "chown csye6225:csye6225 /opt/csye6225/application.properties" in BOOTSTRAP_TEMPLATE
        assert "chmod 640 /opt/csye6225/application.properties" in BOOTSTRAP_TEMPLATE
        assert "amazon-cloudwatch-agent-ctl" in BOOTSTRAP_TEMPLATE

    def test_encode_user_data(self):
        encoded = encode_user_data("#!/bin/bash\necho hi\n")

        assert base64.b64decode(encoded).decode("utf-8") == "#!/bin/bash\necho hi\n"


class TestDeferredValue:
    """Single-consumer deferred cell."""

    @pulumi.runtime.test
    def test_second_consumer_rejected(self):
        value = DeferredValue("db-endpoint", ENDPOINT)
        first = value.consume("webapp-dev-webapp", lambda endpoint: endpoint)

        assert value.consumer == "webapp-dev-webapp"
        with pytest.raises(ConfigurationError, match="already consumed"):
            value.consume("another", lambda endpoint: endpoint)

        return first

    @pulumi.runtime.test
    def test_render_receives_resolved_value(self):
        value = DeferredValue("db-endpoint", pulumi.Output.from_input(ENDPOINT))

        rendered = value.consume("consumer", lambda endpoint: f"jdbc:mariadb://{endpoint}/db")

        def check(result):
            assert result == f"jdbc:mariadb://{ENDPOINT}/db"

        return rendered.apply(check)


class TestRenderUserData:
    """Full rendering with the deferred endpoint."""

    @pulumi.runtime.test
    def test_no_placeholder_left_unrendered(self):
        script = render_user_data(_settings(), pulumi.Output.from_input(ENDPOINT), "webapp-test")

        def check(rendered):
            assert f"jdbc:mariadb://{ENDPOINT}/csye6225" in rendered
            assert "spring.datasource.password=s3cret" in rendered
            assert "application.config.aws-region=us-east-1" in rendered
            assert "${HOST}" not in rendered
            assert "${DB_" not in rendered
            assert r"\${USERS_CSV:users.csv}" in rendered

        return script.apply(check)

    @pulumi.runtime.test
    def test_topic_arn_rendered_when_present(self):
        arn = "arn:aws:sns:us-east-1:123456789012:webapp-dev-notifications-topic"
        script = render_user_data(
            _settings(sns_topic_arn=pulumi.Output.from_input(arn)),
            ENDPOINT,
            "webapp-test",
        )

        def check(rendered):
            assert f"application.config.sns-topic-arn={arn}" in rendered

        return script.apply(check)
