"""
Core data models for the key vault builder.

These Pydantic models describe access policies, the intermediate builder
state, the finalized vault configuration and the resource record produced
by the converter. All of them are immutable once created.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Optional, Union
from uuid import UUID

from pydantic import AnyUrl, BaseModel, Field


# ============================================================================
# Permission vocabularies
# ============================================================================

class Key(str, Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"
    WRAP_KEY = "wrapkey"
    UNWRAP_KEY = "unwrapkey"
    SIGN = "sign"
    VERIFY = "verify"
    GET = "get"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    IMPORT = "import"
    DELETE = "delete"
    BACKUP = "backup"
    RESTORE = "restore"
    RECOVER = "recover"
    PURGE = "purge"


class Secret(str, Enum):
    GET = "get"
    LIST = "list"
    SET = "set"
    DELETE = "delete"
    BACKUP = "backup"
    RESTORE = "restore"
    RECOVER = "recover"
    PURGE = "purge"


class Certificate(str, Enum):
    GET = "get"
    LIST = "list"
    DELETE = "delete"
    CREATE = "create"
    IMPORT = "import"
    UPDATE = "update"
    MANAGE_CONTACTS = "managecontacts"
    GET_ISSUERS = "getissuers"
    LIST_ISSUERS = "listissuers"
    SET_ISSUERS = "setissuers"
    DELETE_ISSUERS = "deleteissuers"
    MANAGE_ISSUERS = "manageissuers"
    RECOVER = "recover"
    PURGE = "purge"
    BACKUP = "backup"
    RESTORE = "restore"


class Storage(str, Enum):
    GET = "get"
    LIST = "list"
    DELETE = "delete"
    SET = "set"
    UPDATE = "update"
    REGENERATE_KEY = "regeneratekey"
    RECOVER = "recover"
    PURGE = "purge"
    BACKUP = "backup"
    RESTORE = "restore"
    SET_SAS = "setsas"
    LIST_SAS = "listsas"
    GET_SAS = "getsas"
    DELETE_SAS = "deletesas"


# ============================================================================
# Shared value types
# ============================================================================

class FeatureFlag(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"

    @property
    def as_boolean(self) -> bool:
        return self is FeatureFlag.ENABLED

    @classmethod
    def from_bool(cls, value: bool) -> FeatureFlag:
        return cls.ENABLED if value else cls.DISABLED


class ResourceName(BaseModel):
    value: str = ""

    class Config:
        frozen = True

    def __str__(self) -> str:
        return self.value


EMPTY_NAME = ResourceName()


class Location(BaseModel):
    name: str

    class Config:
        frozen = True

    def __str__(self) -> str:
        return self.name


class KeyVaultSku(str, Enum):
    STANDARD = "standard"
    PREMIUM = "premium"


class SoftDeletionMode(str, Enum):
    SOFT_DELETION_ONLY = "soft-delete-only"
    SOFT_DELETE_WITH_PURGE_PROTECTION = "purge-protection"


class SimpleCreateMode(str, Enum):
    """Create mode selector used while a vault is still being accumulated."""
    RECOVER = "recover"
    DEFAULT = "default"


# ============================================================================
# Access policies
# ============================================================================

class Permissions(BaseModel):
    keys: frozenset[Key] = frozenset()
    secrets: frozenset[Secret] = frozenset()
    certificates: frozenset[Certificate] = frozenset()
    storage: frozenset[Storage] = frozenset()

    class Config:
        frozen = True


class AccessPolicy(BaseModel):
    """One security principal and the operations it may perform."""
    object_id: Optional[str] = None
    application_id: Optional[UUID] = None
    permissions: Permissions = Field(default_factory=Permissions)

    class Config:
        frozen = True


# ============================================================================
# Create modes
# ============================================================================

class Unspecified(BaseModel):
    kind: Literal["unspecified"] = "unspecified"
    policies: tuple[AccessPolicy, ...] = ()

    class Config:
        frozen = True

    @property
    def all_policies(self) -> list[AccessPolicy]:
        return list(self.policies)


class Default(BaseModel):
    kind: Literal["default"] = "default"
    policies: tuple[AccessPolicy, ...] = ()

    class Config:
        frozen = True

    @property
    def all_policies(self) -> list[AccessPolicy]:
        return list(self.policies)


class Recover(BaseModel):
    """Recovery of a soft-deleted vault; always carries a primary policy."""
    kind: Literal["recover"] = "recover"
    primary: AccessPolicy
    secondary: tuple[AccessPolicy, ...] = ()

    class Config:
        frozen = True

    @property
    def all_policies(self) -> list[AccessPolicy]:
        return [self.primary, *self.secondary]


CreateMode = Annotated[Union[Unspecified, Default, Recover], Field(discriminator="kind")]


# ============================================================================
# Vault configuration
# ============================================================================

class KeyVaultSettings(BaseModel):
    # Whether Azure Virtual Machines may retrieve certificates stored as secrets.
    virtual_machine_access: Optional[FeatureFlag] = None
    # Whether Azure Resource Manager may retrieve secrets from the vault.
    resource_manager_access: Optional[FeatureFlag] = None
    # Whether Azure Disk Encryption may retrieve secrets and unwrap keys.
    azure_disk_encryption_access: Optional[FeatureFlag] = None
    soft_delete: Optional[SoftDeletionMode] = None

    class Config:
        frozen = True


class KeyVaultBuilderState(BaseModel):
    """Staging record accumulated by KeyVaultBuilder before finalizing."""
    name: ResourceName = EMPTY_NAME
    access: KeyVaultSettings = Field(default_factory=KeyVaultSettings)
    sku: KeyVaultSku = KeyVaultSku.STANDARD
    tenant_id: UUID = UUID(int=0)
    create_mode: Optional[SimpleCreateMode] = None
    policies: tuple[AccessPolicy, ...] = ()
    uri: Optional[AnyUrl] = None

    class Config:
        frozen = True


class KeyVaultConfig(BaseModel):
    name: ResourceName
    access: KeyVaultSettings
    sku: KeyVaultSku
    policies: CreateMode
    # Azure Active Directory tenant used for authenticating requests to the vault.
    tenant_id: UUID
    uri: Optional[AnyUrl] = None

    class Config:
        frozen = True


# ============================================================================
# Converted resource (output of the converter)
# ============================================================================

class PermissionsRecord(BaseModel):
    keys: list[str] = Field(default_factory=list)
    secrets: list[str] = Field(default_factory=list)
    certificates: list[str] = Field(default_factory=list)
    storage: list[str] = Field(default_factory=list)


class AccessPolicyRecord(BaseModel):
    object_id: Optional[str] = None
    application_id: Optional[str] = None
    permissions: PermissionsRecord = Field(default_factory=PermissionsRecord)


class KeyVaultResource(BaseModel):
    """A key vault ready to be written into a deployment template."""
    name: ResourceName
    location: Location
    tenant_id: str
    sku: str
    enabled_for_template_deployment: Optional[bool] = None
    enabled_for_disk_encryption: Optional[bool] = None
    enabled_for_deployment: Optional[bool] = None
    enable_soft_delete: Optional[bool] = None
    enable_purge_protection: Optional[bool] = None
    create_mode: Optional[str] = None
    access_policies: list[AccessPolicyRecord] = Field(default_factory=list)
    uri: Optional[str] = None
    default_action: str = "AzureServices"
    bypass: Optional[str] = None
