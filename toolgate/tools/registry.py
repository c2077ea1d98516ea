"""Tool registry for cataloguing remote operations.

The registry is the catalog of every operation the proxy layer can
forward. Each tool is pure metadata: a schema definition, a category, an
optional feature-flag gate and optional aliases. What a tool actually does
is owned by the proxy, which executes it by canonical name.

Registries are explicit instances rather than a process-wide global, so
independent configurations (for example one per session) can coexist.
Registration and feature-flag updates belong to the start-up phase; once
filters are compiled the registry is only read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

from toolgate.errors import DuplicateToolError
from toolgate.tools.definitions import ToolDefinition, ToolParameter

logger = logging.getLogger(__name__)


class ToolCategory(Enum):
    """Closed set of tool categories."""

    CORE = "core"
    CONTENT = "content"
    TAXONOMY = "taxonomy"
    USERS = "users"
    PLUGINS = "plugins"
    THEMES = "themes"
    WORKFLOWS = "workflows"
    COOKBOOK = "cookbook"
    ROLES = "roles"
    BATCH = "batch"
    SETTINGS = "settings"
    ANALYTICS = "analytics"
    DISCOVERY = "discovery"
    MAINTENANCE = "maintenance"
    AUTH = "auth"

    @classmethod
    def from_string(cls, value: str) -> Optional["ToolCategory"]:
        """Look up a category by its string value, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def values(cls) -> list[str]:
        """All valid category strings, in declaration order."""
        return [category.value for category in cls]


CategoryLike = Union[ToolCategory, str]


@dataclass(frozen=True)
class Tool:
    """A registered tool.

    Attributes:
        definition: The tool's schema definition for client listings.
        category: Tool category used by category bindings.
        feature_flag: Flag key that must be explicitly enabled, if any.
        aliases: Alternative names that resolve to this tool.
    """

    definition: ToolDefinition
    category: ToolCategory = ToolCategory.CORE
    feature_flag: Optional[str] = None
    aliases: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        """Get the canonical tool name from its definition."""
        return self.definition.name

    @property
    def description(self) -> str:
        return self.definition.description

    def lookup_keys(self) -> list[str]:
        """Canonical name followed by aliases, without duplicates."""
        keys = [self.name]
        for alias in self.aliases:
            if alias not in keys:
                keys.append(alias)
        return keys


@dataclass
class ToolRegistry:
    """Registry of available tools and feature-flag state.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(create_tool(
        ...     name="wpnav_help",
        ...     description="Show help",
        ...     category=ToolCategory.CORE,
        ...     aliases=["wpnav.help"],
        ... ))
        >>> registry.lookup("wpnav.help").name
        'wpnav_help'
    """

    # Canonical name -> tool, in registration order
    _tools: dict[str, Tool] = field(default_factory=dict)

    # Canonical name or alias -> canonical name
    _lookup: dict[str, str] = field(default_factory=dict)

    # Flag key -> state; absent means disabled
    _feature_flags: dict[str, bool] = field(default_factory=dict)

    def register(self, tool: Tool) -> None:
        """Register a tool under its canonical name and every alias.

        Registering an identical tool twice is a no-op.

        Args:
            tool: The tool to register.

        Raises:
            DuplicateToolError: If the name or an alias already resolves to a
                different tool.
        """
        existing = self._tools.get(tool.name)
        if existing is not None and existing == tool:
            logger.debug(f"Tool already registered, skipping: {tool.name}")
            return

        # Validate every key first so a rejected tool leaves no partial entries
        for key in tool.lookup_keys():
            owner = self._lookup.get(key)
            if owner is not None:
                raise DuplicateToolError(key, owner, tool.name)

        self._tools[tool.name] = tool
        for key in tool.lookup_keys():
            self._lookup[key] = tool.name

        logger.debug(
            f"Registered tool: {tool.name} (category: {tool.category.value})"
        )

    def register_all(self, tools: list[Tool]) -> None:
        """Register several tools in order."""
        for tool in tools:
            self.register(tool)

    def set_feature_flag(self, key: str, enabled: bool) -> None:
        """Set feature flag state.

        Already compiled filters are unaffected and must be recompiled.
        """
        self._feature_flags[key] = bool(enabled)
        logger.debug(f"Feature flag {key} = {bool(enabled)}")

    @property
    def feature_flags(self) -> dict[str, bool]:
        """Snapshot of the current feature flag state."""
        return dict(self._feature_flags)

    def lookup(self, name: str) -> Optional[Tool]:
        """Get a tool by canonical name or alias.

        Args:
            name: Canonical name or alias.

        Returns:
            The tool if found, None otherwise.
        """
        canonical = self._lookup.get(name)
        if canonical is None:
            return None
        return self._tools[canonical]

    def canonical_name(self, name: str) -> Optional[str]:
        """Resolve a name or alias to the canonical tool name."""
        return self._lookup.get(name)

    def has(self, name: str) -> bool:
        """Check if a name or alias is registered."""
        return name in self._lookup

    def all_primary_names(self) -> list[str]:
        """Canonical names in registration order (aliases never appear)."""
        return list(self._tools.keys())

    def by_category(self, category: CategoryLike) -> list[str]:
        """Canonical names in a category, in registration order.

        Args:
            category: A ToolCategory or its string value.

        Returns:
            List of canonical tool names; empty for unknown categories.
        """
        if isinstance(category, str):
            resolved = ToolCategory.from_string(category)
            if resolved is None:
                return []
            category = resolved
        return [name for name, tool in self._tools.items() if tool.category is category]

    def list_categories(self) -> list[str]:
        """Categories that have at least one tool, in first-seen order."""
        seen: list[str] = []
        for tool in self._tools.values():
            if tool.category.value not in seen:
                seen.append(tool.category.value)
        return seen

    def is_feature_enabled(self, tool: Union[Tool, str]) -> bool:
        """Check a tool's feature-flag gate.

        Args:
            tool: A Tool, or a canonical name/alias.

        Returns:
            True if the tool has no required flag, else the flag's state.
            Unknown tool names are reported as disabled.
        """
        if isinstance(tool, str):
            found = self.lookup(tool)
            if found is None:
                return False
            tool = found
        if not tool.feature_flag:
            return True
        return self._feature_flags.get(tool.feature_flag, False)

    def tools(self) -> list[Tool]:
        """All registered tools in registration order."""
        return list(self._tools.values())

    def get_definitions(self) -> list[ToolDefinition]:
        """Definitions for every registered tool, ignoring any filtering."""
        return [tool.definition for tool in self._tools.values()]

    def copy(self) -> "ToolRegistry":
        """Independent snapshot of tools, aliases and flag state."""
        return ToolRegistry(
            _tools=dict(self._tools),
            _lookup=dict(self._lookup),
            _feature_flags=dict(self._feature_flags),
        )

    def __len__(self) -> int:
        """Return the number of canonical tools."""
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        """Check if a name or alias is registered."""
        return name in self._lookup

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())


def create_tool(
    name: str,
    description: str,
    category: CategoryLike = ToolCategory.CORE,
    parameters: Optional[list[ToolParameter]] = None,
    feature_flag: Optional[str] = None,
    aliases: Optional[list[str]] = None,
) -> Tool:
    """Factory function to create a Tool with a ToolDefinition.

    Args:
        name: Canonical tool name.
        description: Tool description.
        category: Tool category (enum or string value).
        parameters: List of tool parameters.
        feature_flag: Flag key that must be enabled for the tool.
        aliases: Alternative lookup names.

    Returns:
        A configured Tool instance.

    Raises:
        ValueError: If the category string is not a known category.
    """
    if isinstance(category, str):
        category = ToolCategory(category)
    definition = ToolDefinition(
        name=name,
        description=description,
        parameters=tuple(parameters or ()),
    )
    return Tool(
        definition=definition,
        category=category,
        feature_flag=feature_flag,
        aliases=tuple(aliases or ()),
    )
