import copy

import pytest
from aws_cdk import App

from static_web_cdk.configs.project_cfg import (
    DEFAULT_CICD_PREFIX,
    DEFAULT_SITE_PREFIX,
    DEFAULT_TOKEN_JSON_FIELD,
    get_cfg,
)


def test_full_context(context, site_dir):
    cfg = get_cfg(App(context=context))
    assert cfg.env.account_id == "123456789012"
    assert cfg.env.region == "eu-west-1"
    assert cfg.site.resource_prefix == DEFAULT_SITE_PREFIX
    assert cfg.site.domain_name == "example.com"
    assert cfg.site.include_www is False
    assert cfg.site.source_path == str(site_dir)
    assert cfg.site.retain_on_delete is True
    assert cfg.cicd.resource_prefix == DEFAULT_CICD_PREFIX
    assert cfg.cicd.github.branch == "master"
    assert cfg.cicd.token_json_field == DEFAULT_TOKEN_JSON_FIELD
    assert cfg.cicd.alert_email == "ops@example.com"


def test_environment(context):
    env = get_cfg(App(context=context)).env.to_environment()
    assert env.account == "123456789012"
    assert env.region == "eu-west-1"


def test_missing_keys_reported_together(context):
    ctx = copy.deepcopy(context)
    del ctx["static-web"]["site"]["domain_name"]
    del ctx["static-web"]["cicd"]["alert_email"]
    with pytest.raises(ValueError) as err:
        get_cfg(App(context=ctx))
    assert "site.domain_name" in str(err.value)
    assert "cicd.alert_email" in str(err.value)


def test_include_www_is_required(context):
    ctx = copy.deepcopy(context)
    del ctx["static-web"]["site"]["include_www"]
    with pytest.raises(ValueError, match="site.include_www"):
        get_cfg(App(context=ctx))


def test_include_www_override(context):
    ctx = copy.deepcopy(context)
    ctx["static-web.include_www"] = "true"
    assert get_cfg(App(context=ctx)).site.include_www is True


def test_invalid_include_www_override(context):
    ctx = copy.deepcopy(context)
    ctx["static-web.include_www"] = "yes"
    with pytest.raises(ValueError):
        get_cfg(App(context=ctx))


def test_prefix_overrides(context):
    ctx = copy.deepcopy(context)
    ctx["static-web"]["site"]["resource_prefix"] = "blog-static"
    ctx["static-web"]["cicd"]["resource_prefix"] = "blog-cicd"
    cfg = get_cfg(App(context=ctx))
    assert cfg.site.resource_prefix == "blog-static"
    assert cfg.cicd.resource_prefix == "blog-cicd"
