"""
Centralized error handling for the static site CDK project.

This module provides the error types raised while a topology is being
declared and the validation helpers shared by the configuration loader,
the builders and the stacks. Every check here runs at synth time, before
anything is handed to CloudFormation.
"""

from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union


class TopologyError(ValueError):
    """
    Raised when the declared resources are inconsistent with each other,
    e.g. the certificate covers an alias that has no DNS record.
    """


class InvalidTransitionError(ValueError):
    """
    Raised when a delivery pipeline state change is not allowed.
    """


class ErrorHandler:
    """
    Centralized error handling for the static site CDK project.

    Provides utility methods for common validation scenarios.
    """

    @staticmethod
    def validate_path_exists(
            path: Union[str, Path],
            path_type: str = "Path"
        ) -> None:
        """
        Validate that a path exists and is a directory.

        Args:
            path: Path to validate
            path_type: Type description for error messages

        Raises:
            FileNotFoundError: If path does not exist or is not a directory
        """
        if not Path(path).is_dir():
            raise FileNotFoundError(f"{path_type} not found: {path}")

    @staticmethod
    def validate_file_exists(
            file_path: Union[str, Path],
            file_type: str = "File"
        ) -> None:
        """
        Validate that a file exists.

        Args:
            file_path: File path to validate
            file_type: Type description for error messages

        Raises:
            FileNotFoundError: If file does not exist
        """
        if not Path(file_path).is_file():
            raise FileNotFoundError(f"{file_type} not found: {file_path}")

    @staticmethod
    def validate_required_fields(
            data: Dict[str, Any],
            required_fields: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that all required fields are present in a dictionary.

        Args:
            data: Dictionary to validate
            required_fields: List of field names that must be present
            context: Context description for error messages

        Raises:
            ValueError: If any required fields are missing
        """
        missing_fields = [field for field in required_fields if field not in data]
        if missing_fields:
            raise ValueError(f"{context} missing required fields: {', '.join(missing_fields)}")

    @staticmethod
    def validate_enum_value(
            value: Any,
            valid_values: List[Any],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is one of the allowed enum values.

        Args:
            value: Value to validate
            valid_values: List of allowed values
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not in the allowed list
        """
        if value not in valid_values:
            raise ValueError(f"{context} field '{field_name}' must be one of: {', '.join(map(str, valid_values))}")

    @staticmethod
    def validate_type(
            value: Any,
            expected_type: type,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is of the expected type.

        Args:
            value: Value to validate
            expected_type: Expected type class
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            TypeError: If value is not of the expected type
        """
        if not isinstance(value, expected_type):
            expected = getattr(expected_type, "__name__", None) or " or ".join(t.__name__ for t in expected_type)
            raise TypeError(f"{context} field '{field_name}' must be of type {expected}, got {type(value).__name__}")

    @staticmethod
    def validate_boolean(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a boolean.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a boolean
        """
        if not isinstance(value, bool):
            raise ValueError(f"{context} field '{field_name}' must be a boolean")

    @staticmethod
    def validate_string_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty string.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a non-empty string
        """
        if not isinstance(value, str) or value.strip() == "":
            raise ValueError(f"{context} field '{field_name}' must be a non-empty string")

    @staticmethod
    def validate_list_not_empty(
            value: Any,
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that a value is a non-empty list.

        Args:
            value: Value to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            ValueError: If value is not a non-empty list
        """
        if not isinstance(value, list) or len(value) == 0:
            raise ValueError(f"{context} field '{field_name}' must be a non-empty list")

    @staticmethod
    def validate_distinct(
            values: Iterable[str],
            field_name: str,
            context: str = "Configuration"
        ) -> None:
        """
        Validate that no value appears twice.

        Args:
            values: Values to validate
            field_name: Name of the field being validated
            context: Context description for error messages

        Raises:
            TopologyError: If a value is repeated
        """
        seen: set[str] = set()
        dupes: set[str] = set()
        for v in values:
            if v in seen:
                dupes.add(v)
            seen.add(v)
        if dupes:
            raise TopologyError(f"{context} field '{field_name}' has duplicate values: {', '.join(sorted(dupes))}")

    @staticmethod
    def validate_context_keys(
            missing_keys: List[str],
            context: str = "Configuration"
        ) -> None:
        """
        Validate that required context keys are present.

        Args:
            missing_keys: List of missing key names
            context: Context description for error messages

        Raises:
            ValueError: If any required keys are missing
        """
        if missing_keys:
            raise ValueError(f"Missing required context keys in {context}: {', '.join(missing_keys)}")
