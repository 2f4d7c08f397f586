"""
IAM policy builders for the static site CDK project.

This module provides builders for creating and applying inline IAM policies
to roles from JSON files under configs/iam/policies. Policies are scoped
to concrete resource ARNs; wildcard resources are rejected during
validation.
"""

from __future__ import annotations
import logging
from typing import Any, List, Mapping, Optional
from aws_cdk import Stack, aws_iam as iam
from static_web_cdk.configs.config_manager import ConfigManager
from static_web_cdk.configs.error_handler import ErrorHandler, TopologyError

logger = logging.getLogger(__name__)


def _ensure_list(obj: Any) -> List[Any]:
    """
    Ensure obj is a list, wrapping it if it's a single item.

    Args:
        obj: Object to ensure is a list

    Returns:
        List containing the object or the object itself if already a list
    """
    if isinstance(obj, list):
        return obj
    return [obj]


def _attach_inline(
        role: iam.IRole,
        name: str,
        statements: list[dict]
    ) -> iam.Policy:
    """
    Attach inline policy to a role.

    Args:
        role: IAM role to attach policy to
        name: Name of the inline policy
        statements: List of IAM policy statements

    Returns:
        The created policy
    """
    doc = iam.PolicyDocument(
        statements=[iam.PolicyStatement.from_json(s) for s in statements]
    )
    return iam.Policy(
        role,
        f"Inline-{name}",
        document=doc,
        roles=[role]
    )


def _validate_config(raw: dict) -> None:
    """
    Validate policy configuration structure.

    Args:
        raw: Policy configuration dictionary

    Raises:
        ValueError: If configuration structure is invalid
        TopologyError: If a statement grants access to every resource
    """
    ErrorHandler.validate_type(raw, dict, "policy config", "Policy")

    allowed = {"inline"}
    extra = set(raw.keys()) - allowed
    if extra:
        raise ValueError(f"Unknown keys in policy config: {', '.join(sorted(extra))}")

    inline = raw.get("inline", {})
    ErrorHandler.validate_type(inline, dict, "inline", "Policy")

    for name, stmts in inline.items():
        ErrorHandler.validate_string_not_empty(
            name,
            "inline policy name",
            "Policy"
        )
        lst = _ensure_list(stmts)
        ErrorHandler.validate_list_not_empty(
            lst,
            f"inline policy '{name}'",
            "Policy"
        )

        for i, s in enumerate(lst):
            ErrorHandler.validate_type(
                s,
                dict,
                f"statement #{i} in '{name}'",
                "Policy"
            )

            ErrorHandler.validate_required_fields(
                s,
                ["Effect", "Action", "Resource"],
                f"Statement #{i} in '{name}'"
            )

            if "*" in _ensure_list(s["Resource"]):
                raise TopologyError(
                    f"Statement #{i} in '{name}' must be scoped to specific resources, not '*'"
                )


def apply_policies_to_role(
        role: iam.IRole,
        filename: str,
        extra_vars: Optional[Mapping[str, str]] = None
    ) -> List[iam.Policy]:
    """
    Apply policies from a JSON file to a role.

    The JSON file should have this structure:
    {
      "inline": {
        "MyInlinePolicy": [
          {
            "Effect": "Allow",
            "Action": ["s3:GetObject"],
            "Resource": ["arn:${Partition}:s3:::${BucketName}/*"]
          }
        ]
      }
    }

    Args:
        role: IAM role to apply policies to
        filename: Policy config filename
        extra_vars: Placeholder values on top of the stack variables

    Returns:
        The inline policies attached to the role

    Raises:
        ValueError: If policy configuration is invalid
        FileNotFoundError: If policy file is not found
    """
    config_mgr = ConfigManager(Stack.of(role), extra_vars)
    raw = config_mgr.load_config("policies", filename)

    _validate_config(raw)

    policies = []
    for name, statements in raw.get("inline", {}).items():
        logger.debug("Attaching inline policy %s from %s", name, filename)
        policies.append(_attach_inline(
            role,
            name,
            _ensure_list(statements)
        ))
    return policies
