"""Role definitions, role sources and effective-role resolution."""

from toolgate.roles.models import (
    MAX_SLUG_LENGTH,
    ROLE_SCHEMA_VERSION,
    Role,
    RoleOverrides,
    RoleProvenance,
    RoleTools,
    is_valid_slug,
    merge_roles,
    validate_role,
)
from toolgate.roles.resolver import (
    AUTO_DETECT_ROLE_PRIORITY,
    CAPABILITY_ROLE_MAPPING,
    EffectiveRoleResolution,
    ManifestRoles,
    RoleResolutionSource,
    RoleToolLists,
    auto_detect_role,
    default_effective_role,
    merge_role_tools,
    resolve_effective_role,
)
from toolgate.roles.runtime import RuntimeRoleState
from toolgate.roles.source import RoleCatalog, RoleLoadResult, RoleSource

__all__ = [
    "AUTO_DETECT_ROLE_PRIORITY",
    "CAPABILITY_ROLE_MAPPING",
    "MAX_SLUG_LENGTH",
    "ROLE_SCHEMA_VERSION",
    "EffectiveRoleResolution",
    "ManifestRoles",
    "Role",
    "RoleCatalog",
    "RoleLoadResult",
    "RoleOverrides",
    "RoleProvenance",
    "RoleResolutionSource",
    "RoleSource",
    "RoleToolLists",
    "RoleTools",
    "RuntimeRoleState",
    "auto_detect_role",
    "default_effective_role",
    "is_valid_slug",
    "merge_role_tools",
    "merge_roles",
    "resolve_effective_role",
    "validate_role",
]
