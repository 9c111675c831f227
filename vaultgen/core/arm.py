"""
ARM template writer for key vault resources.

Turns KeyVaultResource records into Azure Resource Manager JSON objects
and wraps them in a deployment template.
"""

from __future__ import annotations

from typing import Any, Iterable

from .models import AccessPolicyRecord, KeyVaultResource

RESOURCE_TYPE = "Microsoft.KeyVault/vaults"
DEFAULT_API_VERSION = "2019-09-01"
TEMPLATE_SCHEMA = (
    "https://schema.management.azure.com/schemas/2019-04-01/deploymentTemplate.json#"
)


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    """Remove unset optional values so they are left out of the template."""
    return {k: v for k, v in values.items() if v is not None}


def _access_policy(policy: AccessPolicyRecord, tenant_id: str) -> dict[str, Any]:
    return _drop_none({
        "objectId": policy.object_id,
        "applicationId": policy.application_id,
        "tenantId": tenant_id,
        "permissions": {
            "keys": list(policy.permissions.keys),
            "secrets": list(policy.permissions.secrets),
            "certificates": list(policy.permissions.certificates),
            "storage": list(policy.permissions.storage),
        },
    })


def to_arm_resource(
    resource: KeyVaultResource, api_version: str = DEFAULT_API_VERSION
) -> dict[str, Any]:
    """Render one key vault as an ARM resource object."""
    properties = _drop_none({
        "tenantId": resource.tenant_id,
        "sku": {"name": resource.sku, "family": "A"},
        "enabledForDeployment": resource.enabled_for_deployment,
        "enabledForDiskEncryption": resource.enabled_for_disk_encryption,
        "enabledForTemplateDeployment": resource.enabled_for_template_deployment,
        "enableSoftDelete": resource.enable_soft_delete,
        "enablePurgeProtection": resource.enable_purge_protection,
        "createMode": resource.create_mode,
        "vaultUri": resource.uri,
        "accessPolicies": [
            _access_policy(p, resource.tenant_id) for p in resource.access_policies
        ],
        "networkAcls": _drop_none({
            "defaultAction": resource.default_action,
            "bypass": resource.bypass,
        }),
    })

    return {
        "type": RESOURCE_TYPE,
        "apiVersion": api_version,
        "name": str(resource.name),
        "location": str(resource.location),
        "properties": properties,
    }


def build_template(
    resources: Iterable[KeyVaultResource], api_version: str = DEFAULT_API_VERSION
) -> dict[str, Any]:
    """Wrap key vault resources in a complete deployment template."""
    return {
        "$schema": TEMPLATE_SCHEMA,
        "contentVersion": "1.0.0.0",
        "parameters": {},
        "resources": [to_arm_resource(r, api_version) for r in resources],
        "outputs": {},
    }
