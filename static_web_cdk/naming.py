"""
Resource naming for the static site CDK project.

Every construct id, physical name and export key in both stacks is derived
from a resource prefix and a short logical name, joined with a hyphen:

    identify_resource("cdk-web-static", "bucket-name") -> "cdk-web-static-bucket-name"
"""

from __future__ import annotations

SEPARATOR = "-"

# Logical name of the stack itself within each unit
STACK = "stack"


def identify_resource(prefix: str, logical_name: str) -> str:
    """
    Derive the global identifier for a resource.

    Args:
        prefix: Resource prefix of the deployment unit
        logical_name: Role of the resource inside the unit

    Returns:
        Identifier in the form ``<prefix>-<logical_name>``
    """
    return f"{prefix}{SEPARATOR}{logical_name}"
