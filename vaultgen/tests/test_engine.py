"""
Tests for the engine and command-line interface.
"""

import json

import pytest
from click.testing import CliRunner

from vaultgen.cli import cli
from vaultgen.core.engine import VaultEngine
from vaultgen.core.validator import ValidationError, Validator

from conftest import vault_document


class TestVaultEngine:
    def test_process_definitions(self, sample_definition):
        engine = VaultEngine()
        resources = engine.process_definitions([sample_definition])

        resource = resources["kv-prod"]
        assert str(resource.location) == "westeurope"
        assert resource.create_mode == "recover"
        assert [p.object_id for p in resource.access_policies] == ["A", "B"]

    def test_default_location(self, write_definition):
        document = vault_document()
        del document["metadata"]["location"]
        path = write_definition(document)

        resources = VaultEngine({"location": "northeurope"}).process_definitions([path])
        assert str(resources["kv-prod"].location) == "northeurope"

    def test_missing_location(self, write_definition):
        document = vault_document()
        del document["metadata"]["location"]
        path = write_definition(document)

        with pytest.raises(ValueError, match="No location"):
            VaultEngine().process_definitions([path])

    def test_duplicate_names(self, write_definition):
        first = write_definition(vault_document(), "a.yaml")
        second = write_definition(vault_document(), "b.yaml")

        with pytest.raises(ValueError, match="Duplicate"):
            VaultEngine().process_definitions([first, second])

    def test_validator_rejects_definition(self, write_definition):
        path = write_definition(vault_document(**{"recovery-mode": True, "access-policies": []}))
        engine = VaultEngine(validator=Validator())

        with pytest.raises(ValidationError) as excinfo:
            engine.process_definitions([path])
        assert excinfo.value.errors

    def test_write_template(self, sample_definition, tmp_path):
        engine = VaultEngine({"api_version": "2018-02-14"})
        resources = engine.process_definitions([sample_definition])

        path = engine.write_template(resources, tmp_path / "out" / "template.json")

        template = json.loads(path.read_text())
        assert len(template["resources"]) == 1
        vault = template["resources"][0]
        assert vault["apiVersion"] == "2018-02-14"
        assert vault["properties"]["createMode"] == "recover"
        assert vault["properties"]["enablePurgeProtection"] is True


class TestCli:
    def test_validate_passes(self, sample_definition):
        result = CliRunner().invoke(cli, ["validate", "--definitions", str(sample_definition)])

        assert result.exit_code == 0
        assert "All validations passed!" in result.output

    def test_validate_fails(self, write_definition):
        path = write_definition(vault_document(**{"recovery-mode": True, "access-policies": []}))
        result = CliRunner().invoke(cli, ["validate", "-d", str(path)])

        assert result.exit_code == 1
        assert "at least one access policy" in result.output

    def test_validate_invalid_uri(self, write_definition):
        path = write_definition(vault_document(uri="not a uri"))
        result = CliRunner().invoke(cli, ["validate", "-d", str(path)])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "spec.uri" in result.output

    def test_malformed_definitions_list(self):
        for command in ("validate", "generate"):
            result = CliRunner().invoke(cli, [command, "-d", "[bad"])

            assert result.exit_code == 1
            assert isinstance(result.exception, SystemExit)
            assert "Invalid JSON list of definition files" in result.output

    def test_generate_dry_run(self, sample_definition):
        result = CliRunner().invoke(
            cli, ["generate", "-d", str(sample_definition.parent), "--dry-run"]
        )

        assert result.exit_code == 0
        assert "Microsoft.KeyVault/vaults" in result.output
        assert '"createMode": "recover"' in result.output

    def test_generate_writes_file(self, sample_definition, tmp_path):
        output = tmp_path / "generated" / "keyvaults.json"
        result = CliRunner().invoke(
            cli, ["generate", "-d", str(sample_definition), "-o", str(output)]
        )

        assert result.exit_code == 0
        assert output.exists()
        assert json.loads(output.read_text())["resources"][0]["name"] == "kv-prod"

    def test_generate_invalid(self, write_definition):
        path = write_definition(vault_document(**{"recovery-mode": True, "access-policies": []}))
        result = CliRunner().invoke(cli, ["generate", "-d", str(path), "--dry-run"])

        assert result.exit_code == 1
        assert "Error processing definitions" in result.output

    def test_generate_no_files(self, tmp_path):
        result = CliRunner().invoke(cli, ["generate", "-d", str(tmp_path)])

        assert result.exit_code == 0
        assert "No definition files found" in result.output
