"""
Core modules for the key vault builder.
"""

from .models import (
    AccessPolicy,
    Permissions,
    Key,
    Secret,
    Certificate,
    Storage,
    FeatureFlag,
    ResourceName,
    Location,
    KeyVaultSku,
    SoftDeletionMode,
    KeyVaultSettings,
    Unspecified,
    Default,
    Recover,
    KeyVaultBuilderState,
    KeyVaultConfig,
    KeyVaultResource,
)
from .builders import AccessPolicyBuilder, KeyVaultBuilder, KeyVaultConfigError
from .converter import convert_key_vault
from .arm import to_arm_resource, build_template
from .definitions import VaultDefinition, DefinitionError
from .validator import Validator, ValidationError
from .engine import VaultEngine

__all__ = [
    "AccessPolicy",
    "Permissions",
    "Key",
    "Secret",
    "Certificate",
    "Storage",
    "FeatureFlag",
    "ResourceName",
    "Location",
    "KeyVaultSku",
    "SoftDeletionMode",
    "KeyVaultSettings",
    "Unspecified",
    "Default",
    "Recover",
    "KeyVaultBuilderState",
    "KeyVaultConfig",
    "KeyVaultResource",
    "AccessPolicyBuilder",
    "KeyVaultBuilder",
    "KeyVaultConfigError",
    "convert_key_vault",
    "to_arm_resource",
    "build_template",
    "VaultDefinition",
    "DefinitionError",
    "Validator",
    "ValidationError",
    "VaultEngine",
]
