import logging
from typing import Tuple

import aws_cdk as cdk

from static_web_cdk.configs.project_cfg import AppCfg, get_cfg
from static_web_cdk.naming import STACK, identify_resource
from static_web_cdk.stacks.cicd_stack import CiCdStack
from static_web_cdk.stacks.static_site_stack import (
    BUCKET_NAME_OUTPUT,
    DISTRIBUTION_ID_OUTPUT,
    StaticSiteStack,
)

logger = logging.getLogger(__name__)


def build_app(app: cdk.App, cfg: AppCfg) -> Tuple[StaticSiteStack, CiCdStack]:
    """
    Declare the hosting stack, then the pipeline stack that consumes its exports.

    Args:
        app: CDK app to add the stacks to
        cfg: Validated project configuration

    Returns:
        The hosting stack and the pipeline stack
    """
    env = cfg.env.to_environment()
    site_prefix = cfg.site.resource_prefix
    cicd_prefix = cfg.cicd.resource_prefix

    # Export names are the only contract between the two stacks; keep them stable
    site = StaticSiteStack(
        app,
        identify_resource(site_prefix, STACK),
        env=env,
        resource_prefix=site_prefix,
        hosted_zone_name=cfg.site.hosted_zone_name,
        domain_name=cfg.site.domain_name,
        include_www=cfg.site.include_www,
        site_source_path=cfg.site.source_path,
        bucket_name_output_id=identify_resource(site_prefix, BUCKET_NAME_OUTPUT),
        distribution_id_output_id=identify_resource(site_prefix, DISTRIBUTION_ID_OUTPUT),
        retain_on_delete=cfg.site.retain_on_delete,
    )

    cicd = CiCdStack(
        app,
        identify_resource(cicd_prefix, STACK),
        env=env,
        resource_prefix=cicd_prefix,
        site_outputs=site.outputs,
        repo=cfg.cicd.github.repo,
        repo_owner=cfg.cicd.github.owner,
        repo_branch=cfg.cicd.github.branch,
        github_token_secret_id=cfg.cicd.token_secret_id,
        github_token_json_field=cfg.cicd.token_json_field,
        build_alert_email=cfg.cicd.alert_email,
    )
    cicd.add_dependency(site, "imports the site bucket name and distribution id")

    logger.info("Declared %s -> %s", site.stack_name, cicd.stack_name)
    return site, cicd


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    app = cdk.App()
    build_app(app, get_cfg(app))
    app.synth()


if __name__ == "__main__":
    main()
