"""
CI/CD pipeline stack for the static site CDK project.

This stack creates the CodePipeline that rebuilds the site from GitHub and
redeploys it into the hosting stack's bucket. The bucket name and the
distribution id are never passed in as literals: the stack takes the
StaticSiteOutputs handle of the hosting stack and imports its exports, so
CloudFormation refuses to create it before those exports exist.
"""

from __future__ import annotations

from aws_cdk import Stack
from constructs import Construct

from static_web_cdk.builders.pipeline_builder import DeliveryPipeline
from static_web_cdk.configs.error_handler import ErrorHandler
from static_web_cdk.configs.project_cfg import DEFAULT_TOKEN_JSON_FIELD
from static_web_cdk.stacks.static_site_stack import StaticSiteOutputs


class CiCdStack(Stack):
    """
    Stack for the site's delivery pipeline.

    Attributes:
        site_outputs: Handle of the hosting stack this pipeline deploys to
        delivery: The DeliveryPipeline construct
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        resource_prefix: str,
        site_outputs: StaticSiteOutputs,
        repo: str,
        repo_owner: str,
        repo_branch: str,
        github_token_secret_id: str,
        build_alert_email: str,
        github_token_json_field: str = DEFAULT_TOKEN_JSON_FIELD,
        **kwargs,
    ) -> None:
        """
        Initialize the CI/CD stack.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            resource_prefix: Prefix for every pipeline resource name
            site_outputs: Exports published by the hosting stack
            repo: GitHub repository name
            repo_owner: GitHub repository owner
            repo_branch: Branch to deploy from
            github_token_secret_id: Secrets Manager id of the GitHub token
            build_alert_email: Address notified on failed builds
            github_token_json_field: JSON field of the secret holding the token
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        ErrorHandler.validate_type(site_outputs, StaticSiteOutputs, "site_outputs", "CiCdStack")
        self.site_outputs = site_outputs

        self.delivery = DeliveryPipeline(
            self,
            "Delivery",
            resource_prefix=resource_prefix,
            bucket_name=site_outputs.bucket_name(),
            distribution_id=site_outputs.distribution_id(),
            repo_owner=repo_owner,
            repo=repo,
            repo_branch=repo_branch,
            token_secret_id=github_token_secret_id,
            token_json_field=github_token_json_field,
            alert_email=build_alert_email,
        )
