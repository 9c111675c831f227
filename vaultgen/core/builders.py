"""
Builders for access policies and key vaults.

Both builders are immutable: every operation returns a new builder carrying
an updated copy of its state, so a chain can be branched or replayed without
affecting other chains. Later calls on the same field overwrite earlier ones.

Example:
    policy = (
        AccessPolicyBuilder()
        .object_id("7b5b0e2c-...")
        .secret_permissions([Secret.GET, Secret.LIST])
        .build()
    )
    config = (
        KeyVaultBuilder()
        .name("my-vault")
        .tenant_id(tenant)
        .add_access_policy(policy)
        .enable_recovery_mode()
        .build()
    )
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional
from uuid import UUID

from pydantic import AnyUrl, TypeAdapter

from .models import (
    AccessPolicy,
    Certificate,
    Default,
    FeatureFlag,
    Key,
    KeyVaultBuilderState,
    KeyVaultConfig,
    KeyVaultSku,
    Recover,
    ResourceName,
    Secret,
    SimpleCreateMode,
    SoftDeletionMode,
    Storage,
    Unspecified,
)

logger = logging.getLogger(__name__)

_URL = TypeAdapter(AnyUrl)


RECOVERY_REQUIRES_POLICY = (
    "Setting the creation mode to Recover requires at least one access policy. "
    "Use the AccessPolicyBuilder to create a policy, and add it to the vault "
    "configuration using add_access_policy."
)


class KeyVaultConfigError(ValueError):
    """Raised when accumulated vault settings cannot form a valid configuration."""
    pass


# ============================================================================
# Access policies
# ============================================================================

class AccessPolicyBuilder:
    """Builds an AccessPolicy one field at a time."""

    def __init__(self, policy: Optional[AccessPolicy] = None):
        self.policy = policy or AccessPolicy()

    def _with(self, **changes) -> AccessPolicyBuilder:
        return AccessPolicyBuilder(self.policy.model_copy(update=changes))

    def _with_permissions(self, **changes) -> AccessPolicyBuilder:
        permissions = self.policy.permissions.model_copy(update=changes)
        return self._with(permissions=permissions)

    def object_id(self, object_id: str) -> AccessPolicyBuilder:
        """Sets the Object ID of the permission set."""
        return self._with(object_id=object_id)

    def application_id(self, application_id: UUID | str) -> AccessPolicyBuilder:
        """Sets the Application ID of the permission set."""
        return self._with(application_id=UUID(str(application_id)))

    def key_permissions(self, permissions: Iterable[Key | str]) -> AccessPolicyBuilder:
        """Sets the Key permissions of the permission set."""
        return self._with_permissions(keys=frozenset(Key(p) for p in permissions))

    def secret_permissions(self, permissions: Iterable[Secret | str]) -> AccessPolicyBuilder:
        """Sets the Secret permissions of the permission set."""
        return self._with_permissions(secrets=frozenset(Secret(p) for p in permissions))

    def certificate_permissions(
        self, permissions: Iterable[Certificate | str]
    ) -> AccessPolicyBuilder:
        """Sets the Certificate permissions of the permission set."""
        return self._with_permissions(
            certificates=frozenset(Certificate(p) for p in permissions)
        )

    def storage_permissions(self, permissions: Iterable[Storage | str]) -> AccessPolicyBuilder:
        """Sets the Storage permissions of the permission set."""
        return self._with_permissions(storage=frozenset(Storage(p) for p in permissions))

    def build(self) -> AccessPolicy:
        return self.policy


# ============================================================================
# Key vaults
# ============================================================================

class KeyVaultBuilder:
    """
    Accumulates key vault settings and finalizes them into a KeyVaultConfig.

    The builder starts from an empty state: no name, the nil tenant, all
    access toggles unset, Standard SKU, no policies and no create mode.
    """

    def __init__(self, state: Optional[KeyVaultBuilderState] = None):
        self.state = state or KeyVaultBuilderState()

    def _with(self, **changes) -> KeyVaultBuilder:
        return KeyVaultBuilder(self.state.model_copy(update=changes))

    def _with_access(self, **changes) -> KeyVaultBuilder:
        return self._with(access=self.state.access.model_copy(update=changes))

    def name(self, name: ResourceName | str) -> KeyVaultBuilder:
        """Sets the name of the vault."""
        if not isinstance(name, ResourceName):
            name = ResourceName(value=name)
        return self._with(name=name)

    def sku(self, sku: KeyVaultSku | str) -> KeyVaultBuilder:
        """Sets the sku of the vault."""
        return self._with(sku=KeyVaultSku(sku))

    def tenant_id(self, tenant_id: UUID | str) -> KeyVaultBuilder:
        """Sets the Tenant ID of the vault."""
        return self._with(tenant_id=UUID(str(tenant_id)))

    def enable_vm_access(self) -> KeyVaultBuilder:
        return self._with_access(virtual_machine_access=FeatureFlag.ENABLED)

    def disable_vm_access(self) -> KeyVaultBuilder:
        return self._with_access(virtual_machine_access=FeatureFlag.DISABLED)

    def enable_resource_manager_access(self) -> KeyVaultBuilder:
        return self._with_access(resource_manager_access=FeatureFlag.ENABLED)

    def disable_resource_manager_access(self) -> KeyVaultBuilder:
        return self._with_access(resource_manager_access=FeatureFlag.DISABLED)

    def enable_disk_encryption_access(self) -> KeyVaultBuilder:
        return self._with_access(azure_disk_encryption_access=FeatureFlag.ENABLED)

    def disable_disk_encryption_access(self) -> KeyVaultBuilder:
        return self._with_access(azure_disk_encryption_access=FeatureFlag.DISABLED)

    def enable_soft_delete(self) -> KeyVaultBuilder:
        """Enables soft deletion without purge protection."""
        return self._with_access(soft_delete=SoftDeletionMode.SOFT_DELETION_ONLY)

    def enable_soft_delete_with_purge_protection(self) -> KeyVaultBuilder:
        return self._with_access(
            soft_delete=SoftDeletionMode.SOFT_DELETE_WITH_PURGE_PROTECTION
        )

    def uri(self, uri: AnyUrl | str) -> KeyVaultBuilder:
        """Sets the URI of the vault."""
        return self._with(uri=_URL.validate_python(str(uri)))

    def enable_recovery_mode(self) -> KeyVaultBuilder:
        """Sets the creation mode to Recover."""
        return self._with(create_mode=SimpleCreateMode.RECOVER)

    def disable_recovery_mode(self) -> KeyVaultBuilder:
        """Sets the creation mode to Default."""
        return self._with(create_mode=SimpleCreateMode.DEFAULT)

    def add_access_policy(self, policy: AccessPolicy | AccessPolicyBuilder) -> KeyVaultBuilder:
        """
        Adds an access policy to the vault.

        The policy is placed in front of those already added, so the most
        recently added policy becomes the primary one in recovery mode.
        """
        if isinstance(policy, AccessPolicyBuilder):
            policy = policy.build()
        return self._with(policies=(policy, *self.state.policies))

    def build(self) -> KeyVaultConfig:
        """
        Resolve the accumulated state into a KeyVaultConfig.

        Raises:
            KeyVaultConfigError: recovery mode was enabled but no access
                policy was added.
        """
        state = self.state
        policies = state.policies

        if state.create_mode is None:
            create_mode = Unspecified(policies=policies)
        elif state.create_mode == SimpleCreateMode.DEFAULT:
            create_mode = Default(policies=policies)
        elif policies:
            create_mode = Recover(primary=policies[0], secondary=policies[1:])
        else:
            raise KeyVaultConfigError(RECOVERY_REQUIRES_POLICY)

        logger.debug(
            "Built key vault %r: create mode %s, %d access policies",
            str(state.name),
            create_mode.kind,
            len(policies),
        )

        return KeyVaultConfig(
            name=state.name,
            access=state.access,
            sku=state.sku,
            tenant_id=state.tenant_id,
            policies=create_mode,
            uri=state.uri,
        )

