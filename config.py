"""
Stack configuration loaded from pulumi.Config().

Provides a typed, immutable view of stack settings. All settings are read from
Pulumi config (e.g. Pulumi.<stack>.yaml or pulumi config set). Keys without a
default are required. Used by __main__.main() to name resources and to pass
the bucket and domain to the SiteDistribution component.
"""

from dataclasses import dataclass
from typing import Any, Callable

import pulumi


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("1", "true", "yes")


def _require_str(config: pulumi.Config, key: str) -> str:
    return config.require(key)


def _optional_bool(default: bool) -> Callable[[pulumi.Config, str], bool]:
    def parser(config: pulumi.Config, key: str) -> bool:
        raw = config.get(key)
        return default if raw is None else _parse_bool(raw)

    return parser


# (key, parser); parser receives (config, key) and returns value.
_CONFIG_SPEC: list[tuple[str, Callable[[pulumi.Config, str], Any]]] = [
    ("domain_name", _require_str),
    ("bucket_name", _require_str),
    ("project_name", _require_str),
    ("environment", _require_str),
    ("private_zone", _optional_bool(False)),
    ("enable_public_access_block", _optional_bool(True)),
]


@dataclass(frozen=True)
class StackConfig:
    """
    Stack configuration from Pulumi config.

    Attributes:
        domain_name: Site domain; a Route53 hosted zone with this name must
            already exist (required).
        bucket_name: Origin S3 bucket name (required; must be globally unique).
        project_name: Project name used in resource naming (required).
        environment: Environment label used in resource naming (required).
        private_zone: Look up a private hosted zone instead of a public one
            (default False).
        enable_public_access_block: Whether to enable S3 Block Public Access
            on the origin bucket (default True).
    """

    domain_name: str
    bucket_name: str
    project_name: str
    environment: str
    private_zone: bool = False
    enable_public_access_block: bool = True

    @classmethod
    def from_pulumi_config(cls, config: pulumi.Config) -> "StackConfig":
        """
        Build StackConfig from pulumi.Config(). Keys parsed with _require_str are required.
        """
        kwargs = {key: parser(config, key) for key, parser in _CONFIG_SPEC}
        return cls(**kwargs)
