"""Resolve the effective role from configuration and runtime state.

Resolution priority (first applicable rule wins):

1. Runtime override (role switch from a tool call or the CLI)
2. Config active role (``roles.active``)
3. Auto-detect from the user's WordPress capabilities
4. No role

A runtime or config slug that cannot be found resolves to no role with a
warning. It does not fall through to the next rule. Lookup misses never
raise; schema and validation errors raised by the role source propagate
to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Sequence

from toolgate.roles.models import Role, RoleOverrides
from toolgate.roles.source import RoleSource

logger = logging.getLogger(__name__)


class RoleResolutionSource(Enum):
    """How the effective role was chosen."""

    RUNTIME = "runtime"
    CONFIG = "config"
    AUTO_DETECT = "auto-detect"
    NONE = "none"


# WordPress capability -> candidate role slugs
CAPABILITY_ROLE_MAPPING: dict[str, tuple[str, ...]] = {
    # High-privilege capabilities suggest admin/developer roles
    "manage_options": ("site-admin", "developer"),
    "activate_plugins": ("site-admin", "developer"),
    "edit_theme_options": ("site-admin", "developer"),
    "install_plugins": ("developer",),
    "edit_files": ("developer",),
    "manage_network": ("site-admin",),
    # Editor capabilities
    "edit_others_posts": ("content-editor", "seo-specialist"),
    "edit_pages": ("content-editor",),
    "edit_published_posts": ("content-editor",),
    "publish_posts": ("content-editor",),
    # Author/Contributor
    "edit_posts": ("content-author",),
    # User management
    "list_users": ("site-admin",),
    "create_users": ("site-admin",),
}

# Total order over every slug that appears in CAPABILITY_ROLE_MAPPING.
# Lower index = higher priority.
AUTO_DETECT_ROLE_PRIORITY: tuple[str, ...] = (
    "developer",
    "site-admin",
    "seo-specialist",
    "content-editor",
    "content-author",
)


@dataclass(frozen=True)
class ManifestRoles:
    """Role section of the project configuration."""

    active: Optional[str] = None
    auto_detect: bool = True
    overrides: Optional[RoleOverrides] = None


@dataclass(frozen=True)
class RoleToolLists:
    """Effective allow/deny patterns after merging config overrides.

    ``allowed`` of None means no allow-list applies.
    """

    allowed: Optional[tuple[str, ...]] = None
    denied: tuple[str, ...] = ()


@dataclass
class EffectiveRoleResolution:
    """The effective role, how it was chosen, and merged tool lists."""

    role: Optional[Role] = None
    source: RoleResolutionSource = RoleResolutionSource.NONE
    tools: RoleToolLists = field(default_factory=RoleToolLists)
    warnings: list[str] = field(default_factory=list)

    @property
    def slug(self) -> Optional[str]:
        return self.role.name if self.role else None

    def describe(self) -> str:
        """One-line summary for logs and CLI output."""
        if self.role is None:
            return "no role"
        return f'role "{self.role.name}" ({self.source.value})'


def auto_detect_role(capabilities: Sequence[str]) -> Optional[str]:
    """Pick the highest-priority role suggested by a capability list.

    Args:
        capabilities: WordPress capability strings for the current user.

    Returns:
        Role slug, or None if no capability maps to a role.
    """
    candidates: set[str] = set()
    for capability in capabilities:
        candidates.update(CAPABILITY_ROLE_MAPPING.get(capability, ()))

    for slug in AUTO_DETECT_ROLE_PRIORITY:
        if slug in candidates:
            return slug
    return None


def _union(*groups: Sequence[str]) -> tuple[str, ...]:
    merged: list[str] = []
    for group in groups:
        for pattern in group:
            if pattern not in merged:
                merged.append(pattern)
    return tuple(merged)


def merge_role_tools(
    role: Optional[Role], overrides: Optional[RoleOverrides] = None
) -> RoleToolLists:
    """Merge config overrides over a role's own tool lists.

    ``tools_allow`` extends the role's allow-list only when the role has
    one; ``tools_deny`` always extends the deny-list. This is a reporting
    helper: enforcement happens in the tool filter.
    """
    allowed = role.tools.allowed if role else None
    denied: tuple[str, ...] = tuple(role.tools.denied or ()) if role else ()

    if overrides is not None:
        if overrides.tools_allow and allowed is not None:
            allowed = _union(allowed, overrides.tools_allow)
        if overrides.tools_deny:
            denied = _union(denied, overrides.tools_deny)

    return RoleToolLists(
        allowed=_union(allowed) if allowed is not None else None,
        denied=_union(denied),
    )


def _clean_slug(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def resolve_effective_role(
    roles: RoleSource,
    runtime_override: Optional[str] = None,
    manifest_roles: Optional[ManifestRoles] = None,
    capabilities: Optional[Sequence[str]] = None,
    role_overrides: Optional[RoleOverrides] = None,
) -> EffectiveRoleResolution:
    """Resolve the effective role.

    Args:
        roles: Where roles are looked up.
        runtime_override: Slug set at runtime; highest precedence.
        manifest_roles: Config active role and auto-detect switch.
        capabilities: Current user's WordPress capabilities.
        role_overrides: Config tools_allow/tools_deny. Defaults to the
            overrides carried by manifest_roles.

    Returns:
        EffectiveRoleResolution with role, source, merged tools and warnings.
    """
    manifest_roles = manifest_roles or ManifestRoles()
    if role_overrides is None:
        role_overrides = manifest_roles.overrides

    warnings: list[str] = []
    role: Optional[Role] = None
    source = RoleResolutionSource.NONE

    runtime_slug = _clean_slug(runtime_override)
    config_slug = _clean_slug(manifest_roles.active)

    if runtime_slug:
        role = roles.get_role(runtime_slug)
        if role is not None:
            source = RoleResolutionSource.RUNTIME
        else:
            warnings.append(f'Runtime role override not found: "{runtime_slug}"')
    elif config_slug:
        role = roles.get_role(config_slug)
        if role is not None:
            source = RoleResolutionSource.CONFIG
        else:
            warnings.append(f'Config active role not found: "{config_slug}"')
    elif manifest_roles.auto_detect and capabilities:
        detected = auto_detect_role(capabilities)
        if detected:
            role = roles.get_role(detected)
            if role is not None:
                source = RoleResolutionSource.AUTO_DETECT
            else:
                logger.debug(f"Auto-detected role not available: {detected}")

    return EffectiveRoleResolution(
        role=role,
        source=source,
        tools=merge_role_tools(role, role_overrides),
        warnings=warnings,
    )


def default_effective_role() -> EffectiveRoleResolution:
    """Resolution with no role and no restrictions."""
    return EffectiveRoleResolution()
