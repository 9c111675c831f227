"""
Command-line interface for the key vault builder.

Usage:
    python -m vaultgen.cli validate --definitions vaults/
    python -m vaultgen.cli generate --definitions vaults/ --output generated/keyvaults.json
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click

from .core.builders import KeyVaultConfigError
from .core.definitions import DefinitionError
from .core.engine import VaultEngine
from .core.validator import ValidationError, Validator


def _definition_files(definitions: str) -> list[str]:
    """Handle definitions as a file, a directory or a JSON list of files."""
    if definitions.startswith("["):
        try:
            return json.loads(definitions)
        except json.JSONDecodeError as e:
            click.echo(click.style(f"Invalid JSON list of definition files: {e}", fg="red"))
            sys.exit(1)

    definitions_path = Path(definitions)
    if definitions_path.is_file():
        return [str(definitions_path)]
    return [str(p) for p in sorted(definitions_path.glob("**/*.yaml"))]


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """Key Vault template builder CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--definitions",
    "-d",
    default="vaults/",
    help="Path to definitions directory, a single file or a JSON list of files",
)
def validate(definitions: str):
    """Validate key vault definitions."""
    validator = Validator()

    all_errors: dict[str, list[str]] = {}

    click.echo("Validating definitions...")
    for definition_file in _definition_files(definitions):
        path = Path(definition_file)
        if not path.exists():
            all_errors[str(path)] = ["File not found"]
            continue
        errors = validator.validate_definition(path)
        if errors:
            all_errors[str(path)] = errors

    if all_errors:
        click.echo(click.style("\nValidation errors found:", fg="red"))
        for path, errors in all_errors.items():
            click.echo(f"\n{path}:")
            for error in errors:
                click.echo(f"  - {error}")
        sys.exit(1)
    else:
        click.echo(click.style("\nAll validations passed!", fg="green"))


@cli.command()
@click.option(
    "--definitions",
    "-d",
    required=True,
    help="Path to definitions directory, a single file or a JSON list of files",
)
@click.option(
    "--output",
    "-o",
    default="generated/keyvaults.json",
    help="Output file for the ARM template",
)
@click.option(
    "--location",
    "-l",
    help="Location for vaults that do not set one",
)
@click.option(
    "--api-version",
    help="ARM API version for the key vault resources",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print output without writing files",
)
def generate(
    definitions: str,
    output: str,
    location: str,
    api_version: str,
    dry_run: bool,
):
    """Generate an ARM template from key vault definitions."""
    definition_files = _definition_files(definitions)

    if not definition_files:
        click.echo("No definition files found")
        return

    click.echo(f"Processing {len(definition_files)} definition file(s)...")

    engine = VaultEngine(
        {"location": location, "api_version": api_version},
        validator=Validator(),
    )

    try:
        resources = engine.process_definitions(definition_files)
    except ValidationError as e:
        click.echo(click.style(f"Error processing definitions: {e}", fg="red"))
        for error in e.errors:
            click.echo(f"  - {error}")
        sys.exit(1)
    except (DefinitionError, KeyVaultConfigError, ValueError) as e:
        click.echo(click.style(f"Error processing definitions: {e}", fg="red"))
        sys.exit(1)

    if dry_run:
        click.echo("\nDry run - would generate:")
        click.echo(json.dumps(engine.render_template(resources), indent=2))
    else:
        path = engine.write_template(resources, output)
        click.echo(click.style(f"\nGenerated ARM template to {path}", fg="green"))
        for name in resources:
            click.echo(f"  {name}")


if __name__ == "__main__":
    cli()
