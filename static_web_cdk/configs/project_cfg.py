"""
Project configuration management for the static site CDK project.

This module provides configuration classes for the deployment parameters
of both stacks. Values are read from the ``static-web`` key of the cdk.json
context; every environment-specific value must be supplied there, only the
resource prefixes and the token JSON field have defaults.
"""

from __future__ import annotations
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Optional, Union
from aws_cdk import App, Environment, Stack
from static_web_cdk.configs.error_handler import ErrorHandler

CONTEXT_KEY = "static-web"
INCLUDE_WWW_OVERRIDE = "static-web.include_www"

DEFAULT_SITE_PREFIX = "cdk-web-static"
DEFAULT_CICD_PREFIX = "cdk-web-cicd"
DEFAULT_TOKEN_JSON_FIELD = "github-token"


@dataclass(frozen=True)
class EnvCfg:
    """
    Target AWS environment.

    Attributes:
        account_id: AWS account ID
        region: AWS region
    """
    account_id: str
    region: str

    def to_environment(self) -> Environment:
        return Environment(account=self.account_id, region=self.region)


@dataclass(frozen=True)
class SiteCfg:
    """
    Hosting stack settings.

    Attributes:
        resource_prefix: Prefix for every hosting resource name
        hosted_zone_name: Route 53 hosted zone to look up
        domain_name: Primary domain served by the site
        include_www: Whether www.<domain_name> is served as well
        source_path: Local directory with the built site content
        retain_on_delete: Keep the bucket when the stack is deleted
    """
    resource_prefix: str
    hosted_zone_name: str
    domain_name: str
    include_www: bool
    source_path: str
    retain_on_delete: bool = True


@dataclass(frozen=True)
class GithubCfg:
    """
    GitHub configuration settings.

    Attributes:
        owner: GitHub repository owner
        repo: GitHub repository name
        branch: Branch that triggers the pipeline
    """
    owner: str
    repo: str
    branch: str


@dataclass(frozen=True)
class CiCdCfg:
    """
    Delivery pipeline settings.

    Attributes:
        resource_prefix: Prefix for every pipeline resource name
        github: Source repository coordinates
        token_secret_id: Secrets Manager id holding the GitHub token
        token_json_field: JSON field of the secret with the token
        alert_email: Address notified on build failures
    """
    resource_prefix: str
    github: GithubCfg
    token_secret_id: str
    alert_email: str
    token_json_field: str = DEFAULT_TOKEN_JSON_FIELD


@dataclass(frozen=True)
class AppCfg:
    """
    Main project configuration container.

    Attributes:
        env: Target environment
        site: Hosting stack settings
        cicd: Delivery pipeline settings
    """
    env: EnvCfg
    site: SiteCfg
    cicd: CiCdCfg


def _node(obj: Union[App, Stack]):
    """
    Get the CDK node from an App or Stack.

    Args:
        obj: CDK App or Stack instance

    Returns:
        CDK node instance
    """
    return (obj if isinstance(obj, App) else Stack.of(obj)).node


def _as_bool(value: Any, field_name: str) -> bool:
    """
    Accept booleans from cdk.json and "true"/"false" strings from ``-c`` overrides.
    """
    if isinstance(value, str):
        lowered = value.strip().lower()
        ErrorHandler.validate_enum_value(lowered, ["true", "false"], field_name, "cdk.json")
        return lowered == "true"
    ErrorHandler.validate_boolean(value, field_name, "cdk.json")
    return value


@lru_cache(maxsize=1)
def get_cfg(obj: Union[App, Stack]) -> AppCfg:
    """
    Load project configuration from cdk.json context.

    Reads the ``static-web`` context once, applies overrides
    (-c static-web.include_www=true), and validates.

    Args:
        obj: CDK App or Stack instance

    Returns:
        Validated project configuration

    Raises:
        ValueError: If required context keys are missing
    """
    node = _node(obj)
    ctx = node.try_get_context(CONTEXT_KEY) or {}
    site = ctx.get("site") or {}
    cicd = ctx.get("cicd") or {}
    gh = cicd.get("github") or {}

    include_www: Optional[Any] = node.try_get_context(INCLUDE_WWW_OVERRIDE)
    if include_www is None:
        include_www = site.get("include_www")

    required = {
        "account_id": ctx.get("account_id"),
        "region": ctx.get("region"),
        "site.hosted_zone_name": site.get("hosted_zone_name"),
        "site.domain_name": site.get("domain_name"),
        "site.include_www": include_www,
        "site.source_path": site.get("source_path"),
        "cicd.github.owner": gh.get("owner"),
        "cicd.github.repo": gh.get("repo"),
        "cicd.github.branch": gh.get("branch"),
        "cicd.token_secret_id": cicd.get("token_secret_id"),
        "cicd.alert_email": cicd.get("alert_email"),
    }
    # include_www=false is a value, not a missing key
    missing = [key for key, value in required.items() if value is None or value == ""]
    ErrorHandler.validate_context_keys(missing, "cdk.json")

    return AppCfg(
        env=EnvCfg(
            account_id=str(ctx["account_id"]),
            region=ctx["region"],
        ),
        site=SiteCfg(
            resource_prefix=site.get("resource_prefix", DEFAULT_SITE_PREFIX),
            hosted_zone_name=site["hosted_zone_name"],
            domain_name=site["domain_name"],
            include_www=_as_bool(include_www, "site.include_www"),
            source_path=site["source_path"],
            retain_on_delete=_as_bool(site.get("retain_on_delete", True), "site.retain_on_delete"),
        ),
        cicd=CiCdCfg(
            resource_prefix=cicd.get("resource_prefix", DEFAULT_CICD_PREFIX),
            github=GithubCfg(owner=gh["owner"], repo=gh["repo"], branch=gh["branch"]),
            token_secret_id=cicd["token_secret_id"],
            alert_email=cicd["alert_email"],
            token_json_field=cicd.get("token_json_field", DEFAULT_TOKEN_JSON_FIELD),
        ),
    )
