"""Role sources.

The resolver only needs two operations from wherever roles live:
``get_role(slug)`` and ``list_roles()``. RoleCatalog is the in-memory
implementation used by the engine: definitions are added per provenance
layer (bundled < global < project) and same-slug definitions are deep
merged, child over parent.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from toolgate.errors import RoleError
from toolgate.roles.bundled import BUNDLED_ROLES
from toolgate.roles.models import Role, RoleProvenance, merge_roles, validate_role

logger = logging.getLogger(__name__)


@runtime_checkable
class RoleSource(Protocol):
    """Minimal interface the resolver needs from a role store."""

    def get_role(self, slug: str) -> Optional[Role]:
        ...

    def list_roles(self) -> list[str]:
        ...


@dataclass
class RoleLoadResult:
    """Outcome of loading one role definition."""

    origin: str
    role: Optional[Role] = None
    error: Optional[RoleError] = None

    @property
    def success(self) -> bool:
        return self.role is not None


@dataclass
class RoleCatalog:
    """Layered in-memory role source.

    Example:
        >>> catalog = RoleCatalog.with_bundled()
        >>> catalog.get_role("content-editor").source
        <RoleProvenance.BUNDLED: 'bundled'>
    """

    # Slug -> merged role, in first-seen order
    _roles: dict[str, Role] = field(default_factory=dict)

    # Provenance value -> slugs contributed by that layer
    _sources: dict[str, list[str]] = field(
        default_factory=lambda: {p.value: [] for p in RoleProvenance}
    )

    @classmethod
    def with_bundled(cls) -> "RoleCatalog":
        """Create a catalog seeded with the bundled roles."""
        catalog = cls()
        catalog.load(BUNDLED_ROLES, RoleProvenance.BUNDLED, origin_prefix="bundled")
        return catalog

    def add(self, role: Role) -> Role:
        """Add a role, merging over an existing role with the same slug.

        Returns:
            The role now stored under the slug.
        """
        existing = self._roles.get(role.name)
        if existing is None:
            merged = role
        elif role.source.rank >= existing.source.rank:
            merged = merge_roles(existing, role)
        else:
            merged = merge_roles(role, existing)

        self._roles[role.name] = merged
        slugs = self._sources[role.source.value]
        if role.name not in slugs:
            slugs.append(role.name)
        return merged

    def load(
        self,
        definitions: Iterable[Any],
        provenance: RoleProvenance,
        origin_prefix: Optional[str] = None,
    ) -> list[RoleLoadResult]:
        """Validate and add role definitions, skipping invalid ones.

        A bad definition never prevents the others from loading.

        Args:
            definitions: Parsed role mappings.
            provenance: Layer the definitions belong to.
            origin_prefix: Label used to identify each definition in errors.

        Returns:
            One RoleLoadResult per definition.
        """
        prefix = origin_prefix or provenance.value
        results = []
        for index, data in enumerate(definitions):
            origin = f"{prefix}[{index}]"
            if isinstance(data, dict) and isinstance(data.get("name"), str):
                origin = f"{prefix}:{data['name']}"
            try:
                role = validate_role(data, provenance, origin)
            except RoleError as e:
                logger.warning(f"Skipping role definition {origin}: {e.message}")
                results.append(RoleLoadResult(origin=origin, error=e))
                continue
            self.add(role)
            results.append(RoleLoadResult(origin=origin, role=role))
        return results

    def get_role(self, slug: str) -> Optional[Role]:
        """Get a role by slug."""
        return self._roles.get(slug)

    def list_roles(self) -> list[str]:
        """Available role slugs in first-seen order."""
        return list(self._roles.keys())

    def roles(self) -> list[Role]:
        return list(self._roles.values())

    def sources(self) -> dict[str, list[str]]:
        """Which slugs each provenance layer contributed."""
        return {key: list(value) for key, value in self._sources.items()}

    def __contains__(self, slug: str) -> bool:
        return slug in self._roles

    def __len__(self) -> int:
        return len(self._roles)
