"""Role definitions and validation.

A role is a named persona: guidance text for the agent plus an optional
allow/deny tool restriction. Roles are immutable once loaded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, StrictFloat, StrictStr, ValidationError, field_validator

from toolgate.errors import RoleSchemaVersionError, RoleValidationError

# Current role schema version
ROLE_SCHEMA_VERSION = 1

MAX_SLUG_LENGTH = 64

_SLUG_RE = re.compile(r"^[a-z][a-z0-9-]*[a-z0-9]$")
_SINGLE_CHAR_SLUG_RE = re.compile(r"^[a-z]$")


class RoleProvenance(Enum):
    """Where a role definition came from, lowest precedence first."""

    BUNDLED = "bundled"
    GLOBAL = "global"
    PROJECT = "project"

    @property
    def rank(self) -> int:
        return list(RoleProvenance).index(self)


@dataclass(frozen=True)
class RoleTools:
    """Tool restriction block of a role.

    ``allowed`` of None means the role has no allow-list.
    """

    allowed: Optional[tuple[str, ...]] = None
    denied: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class Role:
    """A loaded role definition."""

    name: str
    description: str
    context: str
    focus_areas: tuple[str, ...] = ()
    avoid: tuple[str, ...] = ()
    tools: RoleTools = field(default_factory=RoleTools)
    source: RoleProvenance = RoleProvenance.BUNDLED
    schema_version: int = ROLE_SCHEMA_VERSION
    priority: Optional[float] = None
    version: Optional[str] = None
    tags: tuple[str, ...] = ()
    author: Optional[str] = None
    origin: str = "<inline>"

    @property
    def slug(self) -> str:
        return self.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for listings and diagnostics."""
        return {
            "name": self.name,
            "description": self.description,
            "context": self.context,
            "focus_areas": list(self.focus_areas),
            "avoid": list(self.avoid),
            "tools": {
                "allowed": list(self.tools.allowed) if self.tools.allowed is not None else None,
                "denied": list(self.tools.denied or ()),
            },
            "source": self.source.value,
            "schema_version": self.schema_version,
            "priority": self.priority,
            "version": self.version,
            "tags": list(self.tags),
            "author": self.author,
        }


def is_valid_slug(name: str) -> bool:
    """Validate role name format (lowercase kebab-case slug)."""
    if not name or len(name) > MAX_SLUG_LENGTH:
        return False
    return bool(_SLUG_RE.match(name) or _SINGLE_CHAR_SLUG_RE.match(name))


class RoleToolsDefinition(BaseModel):
    """Schema of the ``tools`` block in a role file."""

    allowed: Optional[list[StrictStr]] = None
    denied: Optional[list[StrictStr]] = None


class RoleDefinition(BaseModel):
    """Schema of a role file after YAML/JSON parsing.

    ``schema_version`` is checked separately, before this model runs.
    """

    name: StrictStr = Field(min_length=1)
    description: StrictStr = Field(min_length=1)
    context: StrictStr = Field(min_length=1)
    focus_areas: Optional[list[StrictStr]] = None
    avoid: Optional[list[StrictStr]] = None
    tools: Optional[RoleToolsDefinition] = None
    priority: Optional[StrictFloat] = None
    version: Optional[StrictStr] = None
    tags: Optional[list[StrictStr]] = None
    author: Optional[StrictStr] = None

    @field_validator("name")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        if not is_valid_slug(v):
            raise ValueError(
                f'Invalid role name "{v}": must be lowercase slug format '
                '(e.g., "content-editor")'
            )
        return v


_REQUIRED_FIELDS = ("name", "description", "context")


def _field_path(loc: tuple[Any, ...]) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _role_validation_error(error: ValidationError, origin: str) -> RoleValidationError:
    """Report the first pydantic failure as a RoleValidationError."""
    first = error.errors()[0]
    path = _field_path(first["loc"])
    if first["type"] == "value_error":
        message = str(first["ctx"]["error"])
    elif path in _REQUIRED_FIELDS:
        message = f'Missing or invalid "{path}" field (required string)'
    else:
        message = f"Invalid {path}: {first['msg']}"
    return RoleValidationError(message, path or None, origin)


def _check_schema_version(value: Any, origin: str) -> int:
    if value is None:
        return ROLE_SCHEMA_VERSION
    if isinstance(value, bool) or not isinstance(value, int):
        raise RoleSchemaVersionError(
            f"Invalid schema_version: expected integer, got {type(value).__name__}",
            origin,
            f'Set "schema_version: {ROLE_SCHEMA_VERSION}" (must be an integer).',
        )
    if value > ROLE_SCHEMA_VERSION:
        raise RoleSchemaVersionError(
            f"Unsupported role schema_version: {value}",
            origin,
            f"This version only understands role schema_version {ROLE_SCHEMA_VERSION}. "
            "Upgrade to use this role.",
        )
    if value < ROLE_SCHEMA_VERSION:
        raise RoleSchemaVersionError(
            f"Invalid schema_version: {value}",
            origin,
            f'Set "schema_version: {ROLE_SCHEMA_VERSION}".',
        )
    return value


def validate_role(
    data: Any,
    source: RoleProvenance = RoleProvenance.PROJECT,
    origin: str = "<inline>",
) -> Role:
    """Validate a parsed role mapping and build a Role.

    Args:
        data: Parsed role definition (for example from YAML or JSON).
        source: Provenance tag for the role.
        origin: Where the definition came from, used in error messages.

    Returns:
        The validated Role.

    Raises:
        RoleSchemaVersionError: If schema_version is not an integer or not
            the supported version.
        RoleValidationError: If a required field is missing or a field has
            the wrong type.
    """
    if not isinstance(data, Mapping):
        raise RoleValidationError("Role must be a YAML/JSON object", origin=origin)

    schema_version = _check_schema_version(data.get("schema_version"), origin)

    try:
        definition = RoleDefinition.model_validate(dict(data))
    except ValidationError as e:
        raise _role_validation_error(e, origin) from e

    tools = RoleTools()
    if definition.tools is not None:
        allowed = definition.tools.allowed
        denied = definition.tools.denied
        tools = RoleTools(
            allowed=tuple(allowed) if allowed is not None else None,
            denied=tuple(denied) if denied is not None else None,
        )

    return Role(
        name=definition.name,
        description=definition.description,
        context=definition.context,
        focus_areas=tuple(definition.focus_areas or ()),
        avoid=tuple(definition.avoid or ()),
        tools=tools,
        source=source,
        schema_version=schema_version,
        priority=definition.priority,
        version=definition.version,
        tags=tuple(definition.tags or ()),
        author=definition.author,
        origin=origin,
    )


def _dedupe(*groups: tuple[str, ...]) -> tuple[str, ...]:
    merged: list[str] = []
    for group in groups:
        for item in group:
            if item not in merged:
                merged.append(item)
    return tuple(merged)


def merge_roles(parent: Role, child: Role) -> Role:
    """Deep merge a child role over a parent role with the same slug.

    Merge semantics:
    - Identity fields (name, source, origin): child wins
    - Scalars: child overrides if set, else inherit
    - Lists (focus_areas, avoid, tags, tools.denied): concat and dedupe
    - tools.allowed: child replaces entirely when present
    """
    allowed = child.tools.allowed if child.tools.allowed is not None else parent.tools.allowed
    denied = None
    if parent.tools.denied is not None or child.tools.denied is not None:
        denied = _dedupe(parent.tools.denied or (), child.tools.denied or ())

    return replace(
        child,
        description=child.description or parent.description,
        context=child.context or parent.context,
        priority=child.priority if child.priority is not None else parent.priority,
        version=child.version or parent.version,
        author=child.author or parent.author,
        focus_areas=_dedupe(parent.focus_areas, child.focus_areas),
        avoid=_dedupe(parent.avoid, child.avoid),
        tags=_dedupe(parent.tags, child.tags),
        tools=RoleTools(allowed=allowed, denied=denied),
    )


@dataclass(frozen=True)
class RoleOverrides:
    """Configuration-level extensions to the active role's tool lists."""

    tools_allow: Optional[tuple[str, ...]] = None
    tools_deny: Optional[tuple[str, ...]] = None
