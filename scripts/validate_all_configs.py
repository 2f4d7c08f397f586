#!/usr/bin/env python3
"""
JSON schema validation for the static site CDK configuration files.

This script validates the buildspec and IAM policy JSON files shipped in
static_web_cdk/configs against the schemas in schema/. It's designed to be
used as a pre-commit hook; placeholders such as ${BucketName} are validated
unexpanded.
"""

import json
import sys
from pathlib import Path

from jsonschema import Draft202012Validator

# Schema to config file mappings
SCHEMA_MAPPINGS = {
    "schema/buildspec.schema.json": ["static_web_cdk/configs/buildspec/static_site.json"],
    "schema/policy.schema.json": ["static_web_cdk/configs/iam/policies/build_deploy.json"],
}


def load_json(path: Path) -> dict:
    """Load and parse a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def schema_errors(schema_path: Path, config_file: Path) -> list[str]:
    """Return one message per schema violation in a config file."""
    validator = Draft202012Validator(load_json(schema_path))
    data = load_json(config_file)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    return [f"{'/'.join(map(str, e.path)) or '(root)'}: {e.message}" for e in errors]


def validate_files_against_schema(schema_path: Path, config_files: list[Path]) -> bool:
    """Validate a list of config files against a schema."""
    all_valid = True
    for config_file in config_files:
        if not config_file.exists():
            print(f"[X] {config_file}: File not found")
            all_valid = False
            continue

        try:
            errors = schema_errors(schema_path, config_file)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[X] {config_file}: {e}")
            all_valid = False
            continue

        if errors:
            all_valid = False
            print(f"[X] {config_file}: {len(errors)} error(s)")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"[OK] {config_file}: OK")

    return all_valid


def main():
    """Main validation function."""
    project_root = Path(__file__).parent.parent
    all_valid = True

    print("Validating JSON configuration files against schemas...")
    print()

    for schema_file, config_files in SCHEMA_MAPPINGS.items():
        schema_path = project_root / schema_file
        config_paths = [project_root / f for f in config_files]

        print(f"Validating against {schema_file}:")
        if not validate_files_against_schema(schema_path, config_paths):
            all_valid = False
        print()

    if all_valid:
        print("All configuration files are valid! [OK]")
        sys.exit(0)
    else:
        print("Some configuration files have validation errors! [X]")
        sys.exit(1)


if __name__ == "__main__":
    main()
