"""
Delivery pipeline builder for the static site CDK project.

This module provides a builder for a two-stage CodePipeline that keeps the
hosted site in sync with its GitHub repository:

  Source  - GitHubSourceAction, token read from Secrets Manager
  Build   - CodeBuild project that installs, builds, syncs the output into
            the site bucket (--delete) and invalidates the distribution

The build role is limited to the site bucket and the one distribution, and
failed builds are published to an SNS topic with an email subscriber.
There is no retry and no rollback.
"""

from __future__ import annotations
import logging
from aws_cdk import (
    aws_codebuild as codebuild,
    aws_codepipeline as codepipeline,
    aws_codepipeline_actions as actions,
    aws_events_targets as events_targets,
    aws_sns as sns,
    SecretValue,
    Stack,
)
from constructs import Construct
from static_web_cdk.builders.delivery_states import validate_buildspec
from static_web_cdk.builders.policy_builder import apply_policies_to_role
from static_web_cdk.configs.config_manager import ConfigManager
from static_web_cdk.configs.error_handler import ErrorHandler
from static_web_cdk.naming import identify_resource

logger = logging.getLogger(__name__)

BUILDSPEC_FILE = "static_site.json"
BUILD_POLICY_FILE = "build_deploy.json"

PIPELINE = "pipeline"
BUILD_PROJECT = "build"
NOTIFICATIONS = "notifications"
NOTIFICATIONS_SUBSCRIPTION = "notifications-subscription"
BUILD_FAILED = "build-failed"

CICD_LOGICAL_NAMES = (
    PIPELINE,
    BUILD_PROJECT,
    NOTIFICATIONS,
    NOTIFICATIONS_SUBSCRIPTION,
    BUILD_FAILED,
)

SOURCE_STAGE = "Source"
BUILD_STAGE = "Build"
SOURCE_ACTION = "SOURCE"
BUILD_ACTION = "BUILD_DEPLOY"


class DeliveryPipeline(Construct):
    """
    CodePipeline that rebuilds and redeploys the static site.

    Attributes:
        buildspec: Expanded buildspec of the build-and-deploy stage
        project: CodeBuild project running the build-and-deploy stage
        pipeline: The two-stage pipeline
        alerts_topic: Topic receiving build failures
        build_failed_rule: EventBridge rule forwarding failures to the topic
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            resource_prefix: str,
            bucket_name: str,
            distribution_id: str,
            repo_owner: str,
            repo: str,
            repo_branch: str,
            token_secret_id: str,
            token_json_field: str,
            alert_email: str,
            build_output_dir: str = "dist",
            node_runtime: str = "latest"
        ) -> None:
        """
        Initialize the delivery pipeline builder.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            resource_prefix: Prefix for every pipeline resource name
            bucket_name: Site bucket name (an import token from the hosting stack)
            distribution_id: Distribution id (an import token from the hosting stack)
            repo_owner: GitHub repository owner
            repo: GitHub repository name
            repo_branch: Branch that triggers the pipeline
            token_secret_id: Secrets Manager id of the GitHub token
            token_json_field: JSON field of the secret holding the token
            alert_email: Address notified about failed builds
            build_output_dir: Directory the build writes the site to
            node_runtime: Node.js runtime version for the build image

        Raises:
            ValueError: If a required input is empty or the email is malformed
        """
        super().__init__(scope, construct_id)

        for field_name, value in (
            ("resource_prefix", resource_prefix),
            ("repo_owner", repo_owner),
            ("repo", repo),
            ("repo_branch", repo_branch),
            ("token_secret_id", token_secret_id),
            ("token_json_field", token_json_field),
            ("alert_email", alert_email),
            ("build_output_dir", build_output_dir),
        ):
            ErrorHandler.validate_string_not_empty(value, field_name, "DeliveryPipeline")
        if "@" not in alert_email:
            raise ValueError(f"DeliveryPipeline field 'alert_email' is not an email address: {alert_email}")

        def rid(logical_name: str) -> str:
            return identify_resource(resource_prefix, logical_name)

        config_mgr = ConfigManager(Stack.of(self), {
            "BucketName": bucket_name,
            "DistributionId": distribution_id,
            "BuildOutputDir": build_output_dir,
            "NodeRuntime": node_runtime,
        })

        # Source stage
        source_output = codepipeline.Artifact("SourceOutput")
        source_action = actions.GitHubSourceAction(
            action_name=SOURCE_ACTION,
            owner=repo_owner,
            repo=repo,
            branch=repo_branch,
            oauth_token=SecretValue.secrets_manager(token_secret_id, json_field=token_json_field),
            output=source_output,
        )

        # Build-and-deploy stage
        self.buildspec = config_mgr.load_config("buildspec", BUILDSPEC_FILE)
        validate_buildspec(self.buildspec)

        self.project = codebuild.PipelineProject(
            self,
            rid(BUILD_PROJECT),
            project_name=rid(BUILD_PROJECT),
            build_spec=codebuild.BuildSpec.from_object(self.buildspec),
            environment=codebuild.BuildEnvironment(
                build_image=codebuild.LinuxBuildImage.STANDARD_7_0,
            ),
        )
        apply_policies_to_role(self.project.role, BUILD_POLICY_FILE, config_mgr.vars)

        build_action = actions.CodeBuildAction(
            action_name=BUILD_ACTION,
            project=self.project,
            input=source_output,
        )

        self.pipeline = codepipeline.Pipeline(
            self,
            rid(PIPELINE),
            pipeline_name=rid(PIPELINE),
            stages=[
                codepipeline.StageProps(stage_name=SOURCE_STAGE, actions=[source_action]),
                codepipeline.StageProps(stage_name=BUILD_STAGE, actions=[build_action]),
            ],
        )

        # Failure notifications
        self.alerts_topic = sns.Topic(
            self,
            rid(NOTIFICATIONS),
            topic_name=rid(NOTIFICATIONS),
            display_name=f"{resource_prefix} pipeline failures",
        )
        sns.Subscription(
            self,
            rid(NOTIFICATIONS_SUBSCRIPTION),
            topic=self.alerts_topic,
            protocol=sns.SubscriptionProtocol.EMAIL,
            endpoint=alert_email,
        )
        self.build_failed_rule = self.project.on_build_failed(
            rid(BUILD_FAILED),
            target=events_targets.SnsTopic(self.alerts_topic),
        )

        logger.info(
            "Declaring pipeline %s for %s/%s@%s",
            rid(PIPELINE),
            repo_owner,
            repo,
            repo_branch,
        )
