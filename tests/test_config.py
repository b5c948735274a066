"""Tests for StackConfig parsing"""

import pulumi
import pytest

from config import StackConfig

PROJECT = "static-site-distribution"

REQUIRED = {
    "domain_name": "example.com",
    "bucket_name": "example-site-bucket",
    "project_name": "site",
    "environment": "dev",
}


def _config(values) -> pulumi.Config:
    pulumi.runtime.set_all_config(
        {f"{PROJECT}:{key}": value for key, value in values.items()}
    )
    return pulumi.Config(PROJECT)


class TestFromPulumiConfig:
    def test_required_values(self):
        config = StackConfig.from_pulumi_config(_config(REQUIRED))
        assert config.domain_name == "example.com"
        assert config.bucket_name == "example-site-bucket"
        assert config.project_name == "site"
        assert config.environment == "dev"

    def test_optional_defaults(self):
        config = StackConfig.from_pulumi_config(_config(REQUIRED))
        assert config.private_zone is False
        assert config.enable_public_access_block is True

    def test_bool_strings(self):
        config = StackConfig.from_pulumi_config(
            _config(
                {**REQUIRED, "private_zone": "Yes", "enable_public_access_block": "false"}
            )
        )
        assert config.private_zone is True
        assert config.enable_public_access_block is False

    def test_missing_required_key(self):
        values = dict(REQUIRED)
        del values["bucket_name"]
        with pytest.raises(pulumi.ConfigMissingError):
            StackConfig.from_pulumi_config(_config(values))

    def test_is_frozen(self):
        config = StackConfig.from_pulumi_config(_config(REQUIRED))
        with pytest.raises(AttributeError):
            config.domain_name = "other.com"
