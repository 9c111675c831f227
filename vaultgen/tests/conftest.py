"""
Shared fixtures for key vault tests.
"""

import pytest
import yaml

TENANT_ID = "6c3f1c39-b84c-4188-b49f-2f3a7c1d9e01"
APP_ID = "1f7e2d55-3b0a-4c7e-9a41-5d6c8b2e4f10"


def vault_document(name="kv-prod", **spec):
    """A minimal valid vault definition, with spec keys overridden."""
    document = {
        "apiVersion": "keyvault/v1",
        "kind": "KeyVault",
        "metadata": {"name": name, "location": "westeurope"},
        "spec": {
            "sku": "premium",
            "tenant-id": TENANT_ID,
            "access": {
                "vm-access": "enabled",
                "resource-manager-access": "disabled",
                "soft-delete": "purge-protection",
            },
            "access-policies": [
                {
                    "object-id": "A",
                    "application-id": APP_ID,
                    "permissions": {"keys": ["get", "list"], "secrets": ["get"]},
                },
                {
                    "object-id": "B",
                    "permissions": {"certificates": ["managecontacts"]},
                },
            ],
        },
    }
    document["spec"].update(spec)
    return document


@pytest.fixture
def write_definition(tmp_path):
    """Write a vault definition document to a YAML file and return its path."""
    def _write(document, filename=None):
        path = tmp_path / (filename or f"{document['metadata']['name']}.yaml")
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(document, f)
        return path

    return _write


@pytest.fixture
def sample_definition(write_definition):
    """A definition for a recovered premium vault with two policies."""
    return write_definition(vault_document(**{"recovery-mode": True}))
