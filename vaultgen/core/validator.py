"""
Validation module for key vault definitions.

Provides schema validation and checks that a definition can be built.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import jsonschema
import yaml

from .builders import KeyVaultConfigError
from .definitions import DefinitionError, VaultDefinition

logger = logging.getLogger(__name__)

SCHEMAS_PATH = Path(__file__).resolve().parent.parent / "schemas"


def _field_path(error: jsonschema.ValidationError) -> str:
    """Dotted location of a schema violation, as keys appear in the YAML."""
    if not error.absolute_path:
        return "<document>"
    return ".".join(str(part) for part in error.absolute_path)


class ValidationError(Exception):
    """Raised when validation fails."""

    def __init__(self, message: str, errors: list[str] = None):
        super().__init__(message)
        self.errors = errors or []


class Validator:
    """Validates key vault definitions against the schema and builder rules."""

    def __init__(self, schemas_path: Optional[str | Path] = None):
        self.schemas_path = Path(schemas_path) if schemas_path else SCHEMAS_PATH
        self._schemas: dict[str, dict] = {}
        self._load_schemas()

    def _load_schemas(self) -> None:
        """Load all JSON schemas from the schemas directory."""
        schema_files = {
            "vault": "vault.schema.json",
        }

        for name, filename in schema_files.items():
            schema_path = self.schemas_path / filename
            if schema_path.exists():
                with open(schema_path) as f:
                    self._schemas[name] = json.load(f)
            else:
                logger.warning("Schema file missing: %s", schema_path)

    def validate_yaml_file(self, path: Path, schema_name: str) -> list[str]:
        """
        Validate a YAML document against a named schema.

        Every violation is reported, ordered by where it occurs in the
        document, e.g. ``spec.access-policies.0.permissions.keys.0``.
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            return [f"YAML parse error: {e}"]
        except OSError as e:
            return [f"Cannot read file: {e}"]

        if not isinstance(data, dict):
            return ["Definition must be a YAML mapping"]

        if schema_name not in self._schemas:
            return [f"Unknown schema: {schema_name}"]

        schema = self._schemas[schema_name]

        try:
            jsonschema.Draft7Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            return [f"Schema error in {schema_name}: {e.message}"]

        checker = jsonschema.Draft7Validator(schema)
        violations = sorted(checker.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))

        return [
            f"Schema validation error at {_field_path(e)}: {e.message}"
            for e in violations
        ]

    def validate_definition(self, definition_path: Path) -> list[str]:
        """Validate a definition file and check that it builds."""
        errors = self.validate_yaml_file(definition_path, "vault")

        if errors:
            return errors

        try:
            VaultDefinition.from_yaml(definition_path).to_builder().build()
        except DefinitionError as e:
            errors.append(str(e))
        except KeyVaultConfigError as e:
            errors.append(f"Configuration error: {e}")

        return errors

    def validate_directory(self, definitions_path: Path) -> dict[str, list[str]]:
        """
        Validate all definition files under a directory.

        Returns a dict mapping file paths to their validation errors.
        """
        all_errors: dict[str, list[str]] = {}

        for yaml_file in sorted(Path(definitions_path).glob("**/*.yaml")):
            errors = self.validate_definition(yaml_file)
            if errors:
                all_errors[str(yaml_file)] = errors

        return all_errors
