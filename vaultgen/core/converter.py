"""
Converts a finalized KeyVaultConfig into a KeyVaultResource.

The conversion is pure: the same location and configuration always
produce an equal resource record.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from .models import (
    AccessPolicy,
    AccessPolicyRecord,
    Default,
    FeatureFlag,
    KeyVaultConfig,
    KeyVaultResource,
    Location,
    PermissionsRecord,
    Recover,
    SoftDeletionMode,
    Unspecified,
)

logger = logging.getLogger(__name__)

# Network ACL settings are not configurable on the builder.
DEFAULT_ACTION = "AzureServices"
BYPASS = None


def to_string_array(permissions: Iterable[Enum]) -> list[str]:
    """Lowercase string form of each permission, in vocabulary order."""
    permissions = set(permissions)
    if not permissions:
        return []
    vocabulary = list(type(next(iter(permissions))))
    return [p.value.lower() for p in sorted(permissions, key=vocabulary.index)]


def maybe_boolean(flag: Optional[FeatureFlag]) -> Optional[bool]:
    return None if flag is None else flag.as_boolean


def create_mode_name(config: KeyVaultConfig) -> Optional[str]:
    mode = config.policies
    if isinstance(mode, Recover):
        return "recover"
    if isinstance(mode, Default):
        return "default"
    return None


def convert_access_policy(policy: AccessPolicy) -> AccessPolicyRecord:
    permissions = policy.permissions
    return AccessPolicyRecord(
        object_id=policy.object_id,
        application_id=None if policy.application_id is None else str(policy.application_id),
        permissions=PermissionsRecord(
            keys=to_string_array(permissions.keys),
            secrets=to_string_array(permissions.secrets),
            certificates=to_string_array(permissions.certificates),
            storage=to_string_array(permissions.storage),
        ),
    )


def convert_key_vault(location: Location | str, config: KeyVaultConfig) -> KeyVaultResource:
    """
    Map a key vault configuration onto its resource record.

    Args:
        location: Region the vault is deployed to
        config: Finalized vault configuration

    Returns:
        KeyVaultResource with policies in the same order as the configuration.
    """
    if not isinstance(location, Location):
        location = Location(name=location)

    access = config.access
    soft_delete = access.soft_delete

    if isinstance(config.policies, (Unspecified, Default, Recover)):
        policies = config.policies.all_policies
    else:
        raise TypeError(f"Unknown create mode: {config.policies!r}")

    resource = KeyVaultResource(
        name=config.name,
        location=location,
        tenant_id=str(config.tenant_id).lower(),
        sku=config.sku.value.lower(),
        enabled_for_template_deployment=maybe_boolean(access.resource_manager_access),
        enabled_for_disk_encryption=maybe_boolean(access.azure_disk_encryption_access),
        enabled_for_deployment=maybe_boolean(access.virtual_machine_access),
        enable_soft_delete=None if soft_delete is None else True,
        enable_purge_protection=(
            True if soft_delete == SoftDeletionMode.SOFT_DELETE_WITH_PURGE_PROTECTION else None
        ),
        create_mode=create_mode_name(config),
        access_policies=[convert_access_policy(p) for p in policies],
        uri=None if config.uri is None else str(config.uri),
        default_action=DEFAULT_ACTION,
        bypass=BYPASS,
    )

    logger.debug(
        "Converted key vault %r in %s with %d access policies",
        str(config.name),
        location,
        len(resource.access_policies),
    )
    return resource
