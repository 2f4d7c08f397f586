"""
Static site stack for the static site CDK project.

This stack hosts the site content using the StaticWebsite builder and
publishes the bucket name and the distribution id as CloudFormation
exports. The exports are handed to consumers through a StaticSiteOutputs
handle instead of being looked up by name elsewhere.
"""

from __future__ import annotations
from dataclasses import dataclass
from aws_cdk import CfnOutput, Fn, Stack
from constructs import Construct

from static_web_cdk.builders.site_domains import site_domains
from static_web_cdk.builders.static_site_builder import StaticWebsite
from static_web_cdk.configs.error_handler import ErrorHandler

BUCKET_NAME_OUTPUT = "bucket-name"
DISTRIBUTION_ID_OUTPUT = "distribution-id"
OUTPUT_LOGICAL_NAMES = (BUCKET_NAME_OUTPUT, DISTRIBUTION_ID_OUTPUT)


@dataclass(frozen=True)
class StaticSiteOutputs:
    """
    Export names published by a StaticSiteStack.

    Attributes:
        producer_stack_name: Name of the stack that owns the exports
        bucket_name_export: Export holding the site bucket name
        distribution_id_export: Export holding the distribution id
    """
    producer_stack_name: str
    bucket_name_export: str
    distribution_id_export: str

    def bucket_name(self) -> str:
        """Fn::ImportValue of the bucket name, resolved at deploy time."""
        return Fn.import_value(self.bucket_name_export)

    def distribution_id(self) -> str:
        """Fn::ImportValue of the distribution id, resolved at deploy time."""
        return Fn.import_value(self.distribution_id_export)


class StaticSiteStack(Stack):
    """
    Stack for hosting the static website.

    Attributes:
        site: The StaticWebsite construct
        outputs: Handle to the published exports
    """

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        resource_prefix: str,
        hosted_zone_name: str,
        domain_name: str,
        include_www: bool,
        site_source_path: str,
        bucket_name_output_id: str,
        distribution_id_output_id: str,
        retain_on_delete: bool = True,
        **kwargs,
    ) -> None:
        """
        Initialize the static site stack.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            resource_prefix: Prefix for every hosting resource name
            hosted_zone_name: Route 53 hosted zone name
            domain_name: Primary domain of the site
            include_www: Also serve www.<domain_name>
            site_source_path: Local directory with the site content
            bucket_name_output_id: Export name for the bucket name
            distribution_id_output_id: Export name for the distribution id
            retain_on_delete: Keep the bucket on stack deletion
            **kwargs: Additional stack properties
        """
        super().__init__(scope, construct_id, **kwargs)

        ErrorHandler.validate_string_not_empty(bucket_name_output_id, "bucket_name_output_id", "StaticSiteStack")
        ErrorHandler.validate_string_not_empty(distribution_id_output_id, "distribution_id_output_id", "StaticSiteStack")
        ErrorHandler.validate_distinct(
            [bucket_name_output_id, distribution_id_output_id],
            "output ids",
            "StaticSiteStack",
        )

        self.site = StaticWebsite(
            self,
            "Site",
            resource_prefix=resource_prefix,
            hosted_zone_name=hosted_zone_name,
            domains=site_domains(domain_name, include_www),
            source_path=site_source_path,
            retain_on_delete=retain_on_delete,
        )

        CfnOutput(
            self,
            bucket_name_output_id,
            value=self.site.bucket.bucket_name,
            export_name=bucket_name_output_id,
            description="Static site bucket name",
        )
        CfnOutput(
            self,
            distribution_id_output_id,
            value=self.site.distribution.distribution_id,
            export_name=distribution_id_output_id,
            description="Static site CloudFront distribution id",
        )

        self.outputs = StaticSiteOutputs(
            producer_stack_name=self.stack_name,
            bucket_name_export=bucket_name_output_id,
            distribution_id_export=distribution_id_output_id,
        )
