"""Compile configuration into the authoritative enabled-tool set.

The filter chain order is:

1. Feature flags
2. Manifest category filtering (enabled/disabled)
3. Manifest per-tool overrides
4. Role tool restrictions (allowed/denied)
5. Role config overrides (tools_allow/tools_deny)

Each layer is a pure set transform over the previous layer's result.
Compilation is a function of its inputs only: building two filters from
the same inputs yields the same enabled set and the same warnings in the
same order.

Layer 5 can re-admit a tool that the active role denied in layer 4, so
``tools_allow`` in configuration always wins over the role's own
defaults.

No layer can enable a tool whose feature flag is off: allow overrides
in layers 3 and 5 only add back tools that passed layer 1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional, Union

from toolgate.roles.models import Role, RoleOverrides
from toolgate.tools.definitions import ToolDefinition
from toolgate.tools.patterns import CATEGORY_STRING_TO_ENUM, PatternMatcher
from toolgate.tools.registry import Tool, ToolCategory, ToolRegistry

logger = logging.getLogger(__name__)

FilterSource = Literal[
    "feature-flag",
    "manifest-enabled",
    "manifest-disabled",
    "manifest-override",
    "role-allowed",
    "role-denied",
    "role-override",
]
FilterAction = Literal["allow", "deny"]


@dataclass(frozen=True)
class ManifestTools:
    """Project-level tool configuration.

    Attributes:
        enabled: Categories to restrict to (empty = no restriction).
        disabled: Categories to remove.
        overrides: Ordered (pattern, allow) pairs; later entries win.
    """

    enabled: tuple[str, ...] = ()
    disabled: tuple[str, ...] = ()
    overrides: tuple[tuple[str, bool], ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.enabled or self.disabled or self.overrides)


@dataclass(frozen=True)
class FilterStep:
    """A single step in the filter chain, kept for explanation output."""

    source: FilterSource
    action: FilterAction
    pattern: str
    matched_tools: tuple[str, ...]


@dataclass
class ToolFilterOptions:
    """Inputs to a filter compilation.

    Attributes:
        all_tools: Registry snapshot to filter.
        manifest_tools: Category and per-tool configuration.
        feature_flags: Flag snapshot; defaults to the registry's flag state.
        active_role: Role whose tool restrictions apply.
        role_overrides: Configuration extensions to the role lists.
    """

    all_tools: ToolRegistry
    manifest_tools: Optional[ManifestTools] = None
    feature_flags: Optional[Mapping[str, bool]] = None
    active_role: Optional[Role] = None
    role_overrides: Optional[RoleOverrides] = None


class ToolFilter:
    """Compiled tool filter.

    Compiles once at construction; the result is read-only afterwards.
    """

    def __init__(self, options: ToolFilterOptions) -> None:
        # Snapshot so later registrations cannot change this result
        self._registry = options.all_tools.copy()
        self._matcher = PatternMatcher(self._registry)
        self._warnings: list[str] = []
        self._steps: list[FilterStep] = []
        self._flag_passed: frozenset[str] = frozenset()
        self.enabled_tools: frozenset[str] = frozenset(self._compile(options))

    @property
    def warnings(self) -> list[str]:
        """Warnings generated during compilation, in call order."""
        return list(self._warnings)

    @property
    def steps(self) -> list[FilterStep]:
        """Filter steps that changed or scoped the working set."""
        return list(self._steps)

    def is_enabled(self, tool_name: str) -> bool:
        """Check if a tool (by canonical name or alias) is enabled."""
        canonical = self._registry.canonical_name(tool_name)
        if canonical is None:
            return False
        return canonical in self.enabled_tools

    def enabled_definitions(self) -> list[ToolDefinition]:
        """Definitions of enabled tools in registration order."""
        return [tool.definition for tool in self.enabled_tool_objects()]

    def enabled_tool_objects(self) -> list[Tool]:
        """Enabled tools in registration order."""
        return [tool for tool in self._registry if tool.name in self.enabled_tools]

    def stats(self) -> dict[str, Any]:
        """Counts of total, enabled and disabled tools, plus per category."""
        by_category = {category.value: 0 for category in ToolCategory}
        enabled = 0
        for tool in self._registry:
            by_category[tool.category.value] += 1
            if tool.name in self.enabled_tools:
                enabled += 1
        total = len(self._registry)
        return {
            "total_tools": total,
            "enabled_tools": enabled,
            "disabled_tools": total - enabled,
            "by_category": by_category,
        }

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def _compile(self, options: ToolFilterOptions) -> set[str]:
        manifest = options.manifest_tools
        flags = options.feature_flags
        if flags is None:
            flags = self._registry.feature_flags

        enabled = set(self._registry.all_primary_names())

        enabled = self._apply_feature_flags(enabled, flags)
        # Later layers may only add back tools that passed the flag gate
        self._flag_passed = frozenset(enabled)
        logger.debug(f"After feature flags: {len(enabled)} tools")

        if manifest is not None:
            enabled = self._apply_manifest_categories(enabled, manifest)
            logger.debug(f"After manifest categories: {len(enabled)} tools")

            if manifest.overrides:
                enabled = self._apply_manifest_overrides(enabled, manifest.overrides)
                logger.debug(f"After manifest overrides: {len(enabled)} tools")

        if options.active_role is not None:
            enabled = self._apply_role_restrictions(enabled, options.active_role)
            logger.debug(
                f"After role '{options.active_role.name}': {len(enabled)} tools"
            )

        if options.role_overrides is not None:
            enabled = self._apply_role_overrides(enabled, options.role_overrides)
            logger.debug(f"After role overrides: {len(enabled)} tools")

        return enabled

    def _match(self, pattern: str) -> tuple[str, ...]:
        result = self._matcher.match(pattern)
        if result.warning:
            self._warnings.append(result.warning)
        return result.names

    def _admissible(self, names: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(name for name in names if name in self._flag_passed)

    def _record(
        self,
        source: FilterSource,
        action: FilterAction,
        pattern: str,
        matched: Union[list[str], tuple[str, ...]],
    ) -> None:
        self._steps.append(FilterStep(source, action, pattern, tuple(matched)))

    def _apply_feature_flags(
        self, enabled: set[str], flags: Mapping[str, bool]
    ) -> set[str]:
        """Drop tools whose required flag is not explicitly true."""
        result = set()
        blocked: dict[str, list[str]] = {}

        for tool in self._registry:
            if tool.name not in enabled:
                continue
            if not tool.feature_flag or flags.get(tool.feature_flag) is True:
                result.add(tool.name)
            else:
                blocked.setdefault(tool.feature_flag, []).append(tool.name)

        for flag, names in blocked.items():
            self._record("feature-flag", "deny", flag, names)

        return result

    def _category_tools(self, category_str: str) -> Optional[list[str]]:
        category = CATEGORY_STRING_TO_ENUM.get(category_str)
        if category is None:
            self._warnings.append(f'Unknown category: "{category_str}"')
            return None
        return self._registry.by_category(category)

    def _apply_manifest_categories(
        self, enabled: set[str], manifest: ManifestTools
    ) -> set[str]:
        """Restrict to enabled categories, then remove disabled ones."""
        if not manifest.enabled and not manifest.disabled:
            return enabled

        result = set(enabled)

        if manifest.enabled:
            result = set()
            for category_str in manifest.enabled:
                names = self._category_tools(category_str)
                if names is None:
                    continue
                # A category listing cannot re-enable a flag-disabled tool
                kept = [name for name in names if name in enabled]
                result.update(kept)
                self._record("manifest-enabled", "allow", category_str, kept)

        for category_str in manifest.disabled:
            names = self._category_tools(category_str)
            if names is None:
                continue
            result.difference_update(names)
            self._record("manifest-disabled", "deny", category_str, names)

        return result

    def _apply_manifest_overrides(
        self, enabled: set[str], overrides: tuple[tuple[str, bool], ...]
    ) -> set[str]:
        """Fold per-tool overrides in declaration order."""
        result = set(enabled)

        for pattern, allow in overrides:
            matched = self._match(pattern)
            if allow:
                matched = self._admissible(matched)
                result.update(matched)
            else:
                result.difference_update(matched)
            self._record(
                "manifest-override", "allow" if allow else "deny", pattern, matched
            )

        return result

    def _apply_role_restrictions(self, enabled: set[str], role: Role) -> set[str]:
        """Intersect with the role's allow-list, then remove denied tools."""
        result = set(enabled)
        allowed = role.tools.allowed
        denied = role.tools.denied

        # The allow-list only narrows; it never re-admits excluded tools
        if allowed:
            allowed_set: set[str] = set()
            for pattern in allowed:
                matched = [name for name in self._match(pattern) if name in result]
                allowed_set.update(matched)
                self._record("role-allowed", "allow", pattern, matched)
            result = allowed_set

        for pattern in denied or ():
            matched = self._match(pattern)
            result.difference_update(matched)
            self._record("role-denied", "deny", pattern, matched)

        return result

    def _apply_role_overrides(
        self, enabled: set[str], overrides: RoleOverrides
    ) -> set[str]:
        """Add tools_allow matches, then remove tools_deny matches."""
        result = set(enabled)

        for pattern in overrides.tools_allow or ():
            matched = self._admissible(self._match(pattern))
            result.update(matched)
            self._record("role-override", "allow", pattern, matched)

        for pattern in overrides.tools_deny or ():
            matched = self._match(pattern)
            result.difference_update(matched)
            self._record("role-override", "deny", pattern, matched)

        return result


def create_tool_filter(
    all_tools: ToolRegistry,
    manifest_tools: Optional[ManifestTools] = None,
    feature_flags: Optional[Mapping[str, bool]] = None,
    active_role: Optional[Role] = None,
    role_overrides: Optional[RoleOverrides] = None,
) -> ToolFilter:
    """Create a compiled tool filter.

    Example:
        >>> tool_filter = create_tool_filter(
        ...     registry,
        ...     manifest_tools=ManifestTools(enabled=("content", "core")),
        ... )
        >>> tool_filter.is_enabled("wpnav_list_posts")
        True
    """
    return ToolFilter(
        ToolFilterOptions(
            all_tools=all_tools,
            manifest_tools=manifest_tools,
            feature_flags=feature_flags,
            active_role=active_role,
            role_overrides=role_overrides,
        )
    )
