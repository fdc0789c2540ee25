"""
Tests for stack configuration loading.
"""

from dataclasses import FrozenInstanceError, is_dataclass

import pytest

from infra.errors import ConfigurationError


class TestGetConfig:
    """Loading a StackConfig from stack configuration values."""

    def test_defaults(self, make_config):
        """Optional values fall back to documented defaults."""
        config = make_config()

        assert config.environment == "dev"
        assert config.compute_mode == "instance"
        assert config.uses_autoscaling is False
        assert config.notifications is None
        assert config.notifications_enabled is False
        assert config.app_port == 8080
        assert config.alb_ports == (80,)
        assert config.health_check_path == "/healthz"
        assert (config.asg_min, config.asg_desired, config.asg_max) == (1, 1, 3)
        assert config.ami_owner == "self"

    def test_values_parsed(self, make_config):
        config = make_config()

        assert config.ports == (22, 80, 443, 8080)
        assert config.database.storage_size == 20
        assert config.database.engine == "mariadb"
        assert config.database.master_password == "s3cret"

    def test_config_is_frozen(self, make_config):
        config = make_config()

        assert is_dataclass(config)
        with pytest.raises(FrozenInstanceError):
            config.environment = "prod"

    @pytest.mark.parametrize("key", ["vpc-cidr", "ssh-key", "db-name", "domain-name", "db-master-password"])
    def test_missing_required_value(self, make_config, key):
        """Missing required values name the offending key."""
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{key: None})

        assert exc_info.value.key == key

    def test_empty_required_value(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"ssh-key": ""})

        assert exc_info.value.key == "ssh-key"

    def test_invalid_vpc_cidr(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"vpc-cidr": "10.0.0/16x"})

        assert exc_info.value.key == "vpc-cidr"

    def test_ipv6_range_must_be_ipv6(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"ipv6-cidr": "0.0.0.0/0"})

        assert exc_info.value.key == "ipv6-cidr"

    @pytest.mark.parametrize("ports", [[22, 70000], [0], "22,80", [True]])
    def test_invalid_ports(self, make_config, ports):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(ports=ports)

        assert exc_info.value.key == "ports"

    def test_non_integer_storage(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"db-storage-size": "twenty"})

        assert exc_info.value.key == "db-storage-size"

    def test_unknown_compute_mode(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"compute-mode": "kubernetes"})

        assert exc_info.value.key == "compute-mode"

    def test_autoscaling_sizes(self, make_config):
        config = make_config(**{
            "compute-mode": "autoscaling",
            "asg-min": "2",
            "asg-desired": "3",
            "asg-max": "5",
        })

        assert config.uses_autoscaling is True
        assert (config.asg_min, config.asg_desired, config.asg_max) == (2, 3, 5)

    def test_autoscaling_sizes_must_be_ordered(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(**{"asg-min": "3", "asg-desired": "1", "asg-max": "5"})

        assert exc_info.value.key == "asg-desired"

    def test_notifications_require_code_path(self, make_config):
        with pytest.raises(ConfigurationError) as exc_info:
            make_config(notifications="sns-lambda")

        assert exc_info.value.key == "lambda-code-path"

    def test_notifications_settings(self, make_config):
        config = make_config(**{
            "notifications": "sns-lambda",
            "lambda-code-path": "./lambda",
            "gcp-project": "webapp-gcp",
            "smtp-from": "noreply@dev.example.com",
        })

        assert config.notifications_enabled is True
        assert config.notifications.code_path == "./lambda"
        assert config.notifications.handler == "index.handler"
        assert config.notifications.runtime == "python3.12"
        assert config.notifications.gcp_project == "webapp-gcp"
        assert config.notifications.smtp_user is None
