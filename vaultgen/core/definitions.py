"""
Declarative key vault definitions.

A definition is a YAML document describing one vault. It is loaded into
Pydantic models and folded into a KeyVaultBuilder through the builder's
public operations.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional
from uuid import UUID

import yaml
from pydantic import AnyUrl, BaseModel, Field, ValidationError as PydanticValidationError

from .builders import AccessPolicyBuilder, KeyVaultBuilder
from .models import (
    Certificate,
    FeatureFlag,
    Key,
    KeyVaultSku,
    Secret,
    SoftDeletionMode,
    Storage,
)


class DefinitionError(Exception):
    """Raised when a definition file cannot be loaded."""
    pass


class ApiVersion(str, Enum):
    V1 = "keyvault/v1"


class PermissionsSpec(BaseModel):
    keys: list[Key] = Field(default_factory=list)
    secrets: list[Secret] = Field(default_factory=list)
    certificates: list[Certificate] = Field(default_factory=list)
    storage: list[Storage] = Field(default_factory=list)


class AccessPolicySpec(BaseModel):
    object_id: Optional[str] = Field(default=None, alias="object-id")
    application_id: Optional[UUID] = Field(default=None, alias="application-id")
    permissions: PermissionsSpec = Field(default_factory=PermissionsSpec)

    class Config:
        populate_by_name = True

    def to_builder(self) -> AccessPolicyBuilder:
        builder = AccessPolicyBuilder()
        if self.object_id is not None:
            builder = builder.object_id(self.object_id)
        if self.application_id is not None:
            builder = builder.application_id(self.application_id)
        return (
            builder
            .key_permissions(self.permissions.keys)
            .secret_permissions(self.permissions.secrets)
            .certificate_permissions(self.permissions.certificates)
            .storage_permissions(self.permissions.storage)
        )


class AccessSpec(BaseModel):
    vm_access: Optional[FeatureFlag] = Field(default=None, alias="vm-access")
    resource_manager_access: Optional[FeatureFlag] = Field(
        default=None, alias="resource-manager-access"
    )
    disk_encryption_access: Optional[FeatureFlag] = Field(
        default=None, alias="disk-encryption-access"
    )
    soft_delete: Optional[SoftDeletionMode] = Field(default=None, alias="soft-delete")

    class Config:
        populate_by_name = True


class VaultMetadata(BaseModel):
    name: str
    location: Optional[str] = None
    owner: Optional[str] = None
    labels: dict[str, str] = Field(default_factory=dict)


class VaultSpec(BaseModel):
    sku: KeyVaultSku = KeyVaultSku.STANDARD
    tenant_id: UUID = Field(alias="tenant-id")
    uri: Optional[AnyUrl] = None
    access: AccessSpec = Field(default_factory=AccessSpec)
    recovery_mode: Optional[bool] = Field(default=None, alias="recovery-mode")
    access_policies: list[AccessPolicySpec] = Field(
        default_factory=list, alias="access-policies"
    )

    class Config:
        populate_by_name = True


class VaultDefinition(BaseModel):
    apiVersion: ApiVersion
    kind: str = "KeyVault"
    metadata: VaultMetadata
    spec: VaultSpec

    @classmethod
    def from_yaml(cls, path: Path | str) -> VaultDefinition:
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            return cls(**data)
        except (OSError, yaml.YAMLError, PydanticValidationError, TypeError) as e:
            raise DefinitionError(f"Failed to load definition {path}: {e}") from e

    def to_builder(self) -> KeyVaultBuilder:
        """Fold the definition into a KeyVaultBuilder."""
        spec = self.spec
        builder = (
            KeyVaultBuilder()
            .name(self.metadata.name)
            .sku(spec.sku)
            .tenant_id(spec.tenant_id)
        )

        access = spec.access
        if access.vm_access == FeatureFlag.ENABLED:
            builder = builder.enable_vm_access()
        elif access.vm_access == FeatureFlag.DISABLED:
            builder = builder.disable_vm_access()

        if access.resource_manager_access == FeatureFlag.ENABLED:
            builder = builder.enable_resource_manager_access()
        elif access.resource_manager_access == FeatureFlag.DISABLED:
            builder = builder.disable_resource_manager_access()

        if access.disk_encryption_access == FeatureFlag.ENABLED:
            builder = builder.enable_disk_encryption_access()
        elif access.disk_encryption_access == FeatureFlag.DISABLED:
            builder = builder.disable_disk_encryption_access()

        if access.soft_delete == SoftDeletionMode.SOFT_DELETION_ONLY:
            builder = builder.enable_soft_delete()
        elif access.soft_delete == SoftDeletionMode.SOFT_DELETE_WITH_PURGE_PROTECTION:
            builder = builder.enable_soft_delete_with_purge_protection()

        if spec.uri is not None:
            builder = builder.uri(spec.uri)

        if spec.recovery_mode is True:
            builder = builder.enable_recovery_mode()
        elif spec.recovery_mode is False:
            builder = builder.disable_recovery_mode()

        # Added last-to-first so the built order matches the document.
        for policy in reversed(spec.access_policies):
            builder = builder.add_access_policy(policy.to_builder())

        return builder
