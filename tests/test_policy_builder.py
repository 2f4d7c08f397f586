import json

import pytest
from aws_cdk import App, Stack, aws_iam as iam
from aws_cdk.assertions import Template

from static_web_cdk.builders.policy_builder import _validate_config, apply_policies_to_role
from static_web_cdk.configs.config_manager import ConfigManager
from static_web_cdk.configs.error_handler import TopologyError

from conftest import ENV


def _statement(**overrides):
    statement = {"Effect": "Allow", "Action": ["s3:GetObject"], "Resource": ["arn:aws:s3:::b/*"]}
    statement.update(overrides)
    return statement


@pytest.fixture
def stack():
    return Stack(App(), "PolicyTest", env=ENV)


def test_valid_config():
    _validate_config({"inline": {"Read": [_statement()]}})


def test_wildcard_resource_rejected():
    with pytest.raises(TopologyError):
        _validate_config({"inline": {"Read": [_statement(Resource="*")]}})


def test_unknown_key_rejected():
    with pytest.raises(ValueError, match="managed"):
        _validate_config({"managed": ["AdministratorAccess"], "inline": {}})


def test_statement_without_resource_rejected():
    statement = _statement()
    del statement["Resource"]
    with pytest.raises(ValueError):
        _validate_config({"inline": {"Read": [statement]}})


def test_empty_policy_rejected():
    with pytest.raises(ValueError):
        _validate_config({"inline": {"Read": []}})


def test_apply_shipped_policy(stack):
    role = iam.Role(stack, "Role", assumed_by=iam.ServicePrincipal("codebuild.amazonaws.com"))
    policies = apply_policies_to_role(role, "build_deploy.json", {"BucketName": "site-bucket", "DistributionId": "E123"})
    assert len(policies) == 2

    body = json.dumps(Template.from_stack(stack).find_resources("AWS::IAM::Policy"))
    assert ":s3:::site-bucket/*" in body
    assert ":cloudfront::123456789012:distribution/E123" in body


def test_apply_policy_requires_placeholders(stack):
    role = iam.Role(stack, "Role", assumed_by=iam.ServicePrincipal("codebuild.amazonaws.com"))
    with pytest.raises(ValueError, match="BucketName"):
        apply_policies_to_role(role, "build_deploy.json")


def test_stack_vars(stack):
    mgr = ConfigManager(stack, {"BucketName": "b"})
    assert mgr.vars["AccountId"] == "123456789012"
    assert mgr.vars["Region"] == "eu-west-1"
    assert mgr.vars["BucketName"] == "b"


def test_expand_placeholders(stack):
    mgr = ConfigManager(stack, {"Name": "x"})
    expanded = mgr.expand_placeholders({"a": ["${Name}-${Region}", 3], "b": "${Unknown}"})
    assert expanded == {"a": ["x-eu-west-1", 3], "b": "${Unknown}"}
    assert mgr.unresolved_placeholders(expanded) == ["Unknown"]


def test_shell_variables_are_not_placeholders(stack):
    mgr = ConfigManager(stack)
    assert mgr.expand_placeholders('test "$CODEBUILD_BUILD_SUCCEEDING" = "1"') == 'test "$CODEBUILD_BUILD_SUCCEEDING" = "1"'


def test_unknown_config_type(stack):
    with pytest.raises(ValueError):
        ConfigManager(stack).get_config_path("tables")


def test_missing_config_file(stack):
    with pytest.raises(FileNotFoundError):
        ConfigManager(stack).load_config("policies", "nope.json")
