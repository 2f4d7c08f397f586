from __future__ import annotations
import json, os, re
from pathlib import Path
from typing import Any, Mapping, Optional
from aws_cdk import Stack
from static_web_cdk.configs.error_handler import ErrorHandler

_VAR = re.compile(r"\$\{([A-Za-z0-9_]+)\}")


def stack_vars(stack: Stack, extra: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """
    Generate placeholder variables for JSON configuration expansion.

    Args:
        stack: CDK stack instance
        extra: Additional variables to include

    Returns:
        Dictionary of variable name to value mappings
    """
    base = {
        "AccountId": stack.account,
        "Region": stack.region,
        "Partition": stack.partition,          # arn:aws / arn:aws-cn / ...
        "StackName": stack.stack_name,
    }
    if extra:
        base.update({k: str(v) for k, v in extra.items()})
    return base


class ConfigManager:
    """
    Centralized configuration management for the static site CDK project.

    Handles:
    - Path resolution for the config types shipped with the package (policies, buildspecs)
    - JSON file loading with ${Var} placeholder expansion

    Placeholder values may be CDK tokens (e.g. an Fn::ImportValue); they are
    substituted as strings and resolved by CloudFormation.
    """

    # Root config directory
    CONFIG_ROOT = str(Path(__file__).resolve().parent)

    # Config type mappings to subdirectories
    CONFIG_PATHS = {
        "policies": "iam/policies",
        "buildspec": "buildspec",
    }

    def __init__(self, stack: Stack, extra_vars: Optional[Mapping[str, str]] = None):
        self.stack = stack
        self.vars = stack_vars(stack, extra_vars)

    def get_config_path(self, config_type: str, filename: str = None) -> str:
        """
        Get the full path to a config file.

        Args:
            config_type: Type of config (policies, buildspec)
            filename: Optional filename, if None returns the directory path

        Returns:
            Full path to the config file or directory
        """
        if config_type not in self.CONFIG_PATHS:
            raise ValueError(f"Unknown config type: {config_type}")

        base_path = os.path.join(self.CONFIG_ROOT, self.CONFIG_PATHS[config_type])

        if filename:
            return os.path.join(base_path, filename)
        return base_path

    def expand_placeholders(self, obj: Any, vars: Mapping[str, str] = None) -> Any:
        """
        Recursively expand ${VAR} placeholders in strings, lists, and dicts.

        Args:
            obj: Object to expand placeholders in
            vars: Variables to substitute (uses stack vars if None)

        Returns:
            Object with placeholders expanded
        """
        if vars is None:
            vars = self.vars

        if isinstance(obj, str):
            return _VAR.sub(lambda m: str(vars.get(m.group(1), m.group(0))), obj)
        if isinstance(obj, list):
            return [self.expand_placeholders(x, vars) for x in obj]
        if isinstance(obj, dict):
            return {k: self.expand_placeholders(v, vars) for k, v in obj.items()}
        return obj

    def unresolved_placeholders(self, obj: Any) -> list[str]:
        """
        List the ${VAR} placeholders left in an expanded config.
        """
        if isinstance(obj, str):
            return _VAR.findall(obj)
        if isinstance(obj, list):
            return [name for x in obj for name in self.unresolved_placeholders(x)]
        if isinstance(obj, dict):
            return [name for v in obj.values() for name in self.unresolved_placeholders(v)]
        return []

    def load_json(self, filepath: str, expand_vars: bool = True) -> dict:
        """
        Load and parse a JSON file, optionally expanding placeholders.

        Args:
            filepath: Path to the JSON file
            expand_vars: Whether to expand placeholders in the loaded JSON

        Returns:
            Parsed JSON as dict

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a placeholder has no value
        """
        ErrorHandler.validate_file_exists(filepath, "Config file")

        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        if expand_vars:
            data = self.expand_placeholders(data)
            leftover = sorted(set(self.unresolved_placeholders(data)))
            if leftover:
                raise ValueError(f"Unresolved placeholders in {filepath}: {', '.join(leftover)}")

        return data

    def load_config(self, config_type: str, filename: str, expand_vars: bool = True) -> dict:
        """
        Load a config file by type and filename.

        Args:
            config_type: Type of config (policies, buildspec)
            filename: Name of the config file
            expand_vars: Whether to expand placeholders

        Returns:
            Parsed JSON config
        """
        filepath = self.get_config_path(config_type, filename)
        return self.load_json(filepath, expand_vars)
