"""
Engine that drives key vault definitions through the build pipeline.

The engine is the main entry point for turning definition files into
converted resources and ARM deployment templates.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from .arm import DEFAULT_API_VERSION, build_template
from .converter import convert_key_vault
from .definitions import VaultDefinition
from .models import KeyVaultResource, Location
from .validator import ValidationError, Validator

logger = logging.getLogger(__name__)


class VaultEngine:
    """
    Coordinates loading, building, converting and rendering key vaults.

    Config keys:
        location: Region used when a definition does not name one
        api_version: ARM API version written into the template
    """

    def __init__(self, config: dict = None, validator: Optional[Validator] = None):
        self.config = config or {}
        self.validator = validator

    @property
    def default_location(self) -> Optional[str]:
        return self.config.get("location")

    @property
    def api_version(self) -> str:
        return self.config.get("api_version") or DEFAULT_API_VERSION

    def process_definition(self, definition: VaultDefinition) -> KeyVaultResource:
        """
        Build and convert a single definition.

        Args:
            definition: The loaded vault definition

        Returns:
            The converted KeyVaultResource
        """
        location = definition.metadata.location or self.default_location
        if not location:
            raise ValueError(
                f"No location for key vault {definition.metadata.name}: "
                "set metadata.location or configure a default location"
            )

        config = definition.to_builder().build()
        return convert_key_vault(Location(name=location), config)

    def process_definitions(
        self, definition_paths: list[str | Path]
    ) -> dict[str, KeyVaultResource]:
        """
        Process multiple definition files.

        Files are validated first when the engine has a validator.

        Returns:
            Dict mapping vault name -> converted resource
        """
        results: dict[str, KeyVaultResource] = {}

        for definition_path in definition_paths:
            path = Path(definition_path)

            if self.validator:
                errors = self.validator.validate_definition(path)
                if errors:
                    raise ValidationError(f"Invalid definition: {path}", errors)

            definition = VaultDefinition.from_yaml(path)
            logger.info("Processing key vault %s from %s", definition.metadata.name, path)

            if definition.metadata.name in results:
                raise ValueError(f"Duplicate key vault name: {definition.metadata.name}")
            results[definition.metadata.name] = self.process_definition(definition)

        return results

    def render_template(self, resources: dict[str, KeyVaultResource]) -> dict[str, Any]:
        """Render converted resources as an ARM deployment template."""
        return build_template(resources.values(), self.api_version)

    def write_template(
        self, resources: dict[str, KeyVaultResource], output_path: str | Path
    ) -> Path:
        """
        Write the deployment template to a JSON file.

        Returns:
            The path that was written
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.render_template(resources), f, indent=2)
            f.write("\n")

        logger.info("Wrote %d key vault(s) to %s", len(resources), path)
        return path
