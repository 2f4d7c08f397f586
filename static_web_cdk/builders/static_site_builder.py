"""
Static website builder for the static site CDK project.

This module provides a builder for hosting static content behind a
TLS-terminated CloudFront distribution with a custom domain:

  hosted zone lookup -> ACM certificate (us-east-1) -> private S3 bucket
  readable only by the CloudFront origin access identity -> distribution
  -> Route 53 alias records -> content deployment + /* invalidation

The certificate SANs and the alias records both come from one SiteDomains
value and are checked with ensure_alias_agreement before any record is
declared.
"""

from __future__ import annotations
import logging
from typing import List
from aws_cdk import (
    aws_certificatemanager as acm,
    aws_cloudfront as cloudfront,
    aws_cloudfront_origins as origins,
    aws_iam as iam,
    aws_route53 as route53,
    aws_route53_targets as targets,
    aws_s3 as s3,
    aws_s3_deployment as s3_deployment,
    RemovalPolicy,
)
from constructs import Construct
from static_web_cdk.builders.site_domains import SiteDomains, ensure_alias_agreement
from static_web_cdk.configs.error_handler import ErrorHandler
from static_web_cdk.naming import identify_resource

logger = logging.getLogger(__name__)

# CloudFront only reads viewer certificates from this region.
CERTIFICATE_REGION = "us-east-1"
INVALIDATION_PATHS = ["/*"]

HOSTED_ZONE = "hosted-zone"
ORIGIN_IDENTITY = "cloudfront-OAI"
SITE_BUCKET = "site-bucket"
SITE_CERTIFICATE = "site-certificate"
SITE_DISTRIBUTION = "site-distribution"
BUCKET_DEPLOYMENT = "bucket-deployment"
ALIAS_RECORDS = ("site-alias-record-01", "site-alias-record-02")

SITE_LOGICAL_NAMES = (
    HOSTED_ZONE,
    ORIGIN_IDENTITY,
    SITE_BUCKET,
    SITE_CERTIFICATE,
    SITE_DISTRIBUTION,
    BUCKET_DEPLOYMENT,
    *ALIAS_RECORDS,
)


class StaticWebsite(Construct):
    """
    Static website builder using S3, CloudFront, ACM and Route 53.

    Attributes:
        zone: Looked-up hosted zone
        certificate: DNS validated certificate for every site alias
        bucket: Private bucket holding the site content
        origin_identity: CloudFront origin access identity
        distribution: CloudFront distribution serving the bucket
        records: Alias records, one per name in ``domains.aliases``
        certificate_names: Primary name and SANs on the certificate
        record_names: Names that received an alias record
    """
    def __init__(
            self,
            scope: Construct,
            construct_id: str,
            *,
            resource_prefix: str,
            hosted_zone_name: str,
            domains: SiteDomains,
            source_path: str,
            retain_on_delete: bool = True
        ) -> None:
        """
        Initialize the static website builder.

        Args:
            scope: CDK construct scope
            construct_id: Construct ID
            resource_prefix: Prefix for every resource name
            hosted_zone_name: Route 53 hosted zone holding the domain
            domains: Names the site is served under
            source_path: Local directory deployed into the bucket
            retain_on_delete: Keep the bucket and its objects on stack deletion

        Raises:
            ValueError: If a required input is empty
            FileNotFoundError: If source_path is not a directory
            TopologyError: If certificate names and alias records disagree
        """
        super().__init__(scope, construct_id)

        ErrorHandler.validate_string_not_empty(resource_prefix, "resource_prefix", "StaticWebsite")
        ErrorHandler.validate_string_not_empty(hosted_zone_name, "hosted_zone_name", "StaticWebsite")
        ErrorHandler.validate_path_exists(source_path, "Site content directory")

        self.domains = domains
        self.certificate_names: List[str] = [domains.domain_name, *domains.alternate_names]
        self.record_names: List[str] = list(domains.aliases)
        if len(self.record_names) > len(ALIAS_RECORDS):
            raise ValueError(f"At most {len(ALIAS_RECORDS)} alias records are supported")
        ensure_alias_agreement(self.certificate_names, self.record_names)

        def rid(logical_name: str) -> str:
            return identify_resource(resource_prefix, logical_name)

        logger.info(
            "Declaring static site %s (aliases: %s)",
            domains.domain_name,
            ", ".join(self.record_names),
        )

        # Zone first: the certificate is validated through it
        self.zone = route53.HostedZone.from_lookup(
            self,
            rid(HOSTED_ZONE),
            domain_name=hosted_zone_name,
        )

        self.certificate = acm.DnsValidatedCertificate(
            self,
            rid(SITE_CERTIFICATE),
            domain_name=domains.domain_name,
            hosted_zone=self.zone,
            region=CERTIFICATE_REGION,
            subject_alternative_names=list(domains.alternate_names) or None,
        )

        self.origin_identity = cloudfront.OriginAccessIdentity(
            self,
            rid(ORIGIN_IDENTITY),
            comment=f"OAI for {rid(SITE_DISTRIBUTION)}",
        )

        self.bucket = s3.Bucket(
            self,
            rid(SITE_BUCKET),
            bucket_name=domains.domain_name,
            public_read_access=False,
            block_public_access=s3.BlockPublicAccess.BLOCK_ALL,
            removal_policy=RemovalPolicy.RETAIN if retain_on_delete else RemovalPolicy.DESTROY,
            auto_delete_objects=not retain_on_delete,
        )

        # Only the origin identity may read objects
        self.bucket.add_to_resource_policy(iam.PolicyStatement(
            actions=["s3:GetObject"],
            resources=[self.bucket.arn_for_objects("*")],
            principals=[iam.CanonicalUserPrincipal(
                self.origin_identity.cloud_front_origin_access_identity_s3_canonical_user_id
            )],
        ))

        self.distribution = cloudfront.Distribution(
            self,
            rid(SITE_DISTRIBUTION),
            default_behavior=cloudfront.BehaviorOptions(
                origin=origins.S3BucketOrigin.with_origin_access_identity(
                    self.bucket,
                    origin_access_identity=self.origin_identity,
                ),
                compress=True,
                allowed_methods=cloudfront.AllowedMethods.ALLOW_GET_HEAD_OPTIONS,
                cached_methods=cloudfront.CachedMethods.CACHE_GET_HEAD_OPTIONS,
                viewer_protocol_policy=cloudfront.ViewerProtocolPolicy.REDIRECT_TO_HTTPS,
            ),
            certificate=self.certificate,
            domain_names=self.record_names,
            ssl_support_method=cloudfront.SSLMethod.SNI,
            minimum_protocol_version=cloudfront.SecurityPolicyProtocol.TLS_V1_2_2021,
            default_root_object="index.html",
            comment=f"{resource_prefix} {domains.domain_name}",
        )

        self.records: List[route53.ARecord] = []
        for logical_name, record_name in zip(ALIAS_RECORDS, self.record_names):
            self.records.append(route53.ARecord(
                self,
                rid(logical_name),
                zone=self.zone,
                record_name=record_name,
                target=route53.RecordTarget.from_alias(targets.CloudFrontTarget(self.distribution)),
            ))

        # Upload the local build and flush the edge caches
        self.deployment = s3_deployment.BucketDeployment(
            self,
            rid(BUCKET_DEPLOYMENT),
            sources=[s3_deployment.Source.asset(str(source_path))],
            destination_bucket=self.bucket,
            distribution=self.distribution,
            distribution_paths=INVALIDATION_PATHS,
        )
