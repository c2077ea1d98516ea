"""Resolve tool patterns against a registry.

A pattern is one of three forms, tried in this order:

- Category binding: ``content:*`` selects every tool in a category.
- Wildcard glob: ``wpnav_list_*`` where ``*`` matches any run of
  characters and everything else is literal.
- Exact name: ``wpnav_list_posts`` or an alias, resolved to the
  canonical name.

The matcher keeps no state between calls. A miss is reported as a
warning on the returned match for the caller to collect.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from toolgate.tools.registry import ToolCategory, ToolRegistry

CATEGORY_SUFFIX = ":*"
WILDCARD = "*"

# Category string -> ToolCategory
CATEGORY_STRING_TO_ENUM: dict[str, ToolCategory] = {
    category.value: category for category in ToolCategory
}

VALID_CATEGORIES: list[str] = list(CATEGORY_STRING_TO_ENUM.keys())


def is_valid_category(value: str) -> bool:
    """Check if a string names a known category."""
    return value in CATEGORY_STRING_TO_ENUM


def glob_to_regex(pattern: str) -> re.Pattern[str]:
    """Compile a regex where only ``*`` is special; use with ``fullmatch``."""
    parts = [re.escape(part) for part in pattern.split(WILDCARD)]
    return re.compile(".*".join(parts), re.DOTALL)


@dataclass(frozen=True)
class PatternMatch:
    """Result of resolving one pattern.

    Attributes:
        pattern: The pattern as given.
        names: Matched canonical names in registry order.
        warning: Diagnostic text when the pattern matched nothing useful.
    """

    pattern: str
    names: tuple[str, ...] = ()
    warning: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.names)


class PatternMatcher:
    """Match patterns against the tools in a registry."""

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    def match(self, pattern: str) -> PatternMatch:
        """Resolve a single pattern to canonical tool names.

        Args:
            pattern: Category binding, glob, or exact name/alias.

        Returns:
            PatternMatch with matched names and an optional warning.
        """
        if pattern.endswith(CATEGORY_SUFFIX):
            return self._match_category(pattern)

        if WILDCARD in pattern:
            return self._match_glob(pattern)

        tool = self._registry.lookup(pattern)
        if tool is not None:
            return PatternMatch(pattern, (tool.name,))
        return PatternMatch(pattern, warning=f'Unknown tool: "{pattern}"')

    def match_all(self, patterns: list[str]) -> tuple[list[str], list[str]]:
        """Union of matches for several patterns.

        Returns:
            Tuple of (matched names in first-match order, warnings in call order).
        """
        names: list[str] = []
        warnings: list[str] = []
        for pattern in patterns:
            result = self.match(pattern)
            if result.warning:
                warnings.append(result.warning)
            for name in result.names:
                if name not in names:
                    names.append(name)
        return names, warnings

    def _match_category(self, pattern: str) -> PatternMatch:
        category = CATEGORY_STRING_TO_ENUM.get(pattern[: -len(CATEGORY_SUFFIX)])
        if category is None:
            return PatternMatch(
                pattern, warning=f'Unknown category in pattern: "{pattern}"'
            )
        return PatternMatch(pattern, tuple(self._registry.by_category(category)))

    def _match_glob(self, pattern: str) -> PatternMatch:
        regex = glob_to_regex(pattern)
        matched = tuple(
            name for name in self._registry.all_primary_names() if regex.fullmatch(name)
        )
        if not matched:
            return PatternMatch(
                pattern, warning=f'Pattern matched no tools: "{pattern}"'
            )
        return PatternMatch(pattern, matched)
