"""Tool registry, pattern matching, focus modes and the filter compiler."""

from toolgate.tools.catalog import (
    BUILTIN_FEATURE_FLAGS,
    get_builtin_tools,
    register_builtin_tools,
)
from toolgate.tools.definitions import ToolDefinition, ToolParameter, definitions_to_mcp
from toolgate.tools.filter import (
    FilterStep,
    ManifestTools,
    ToolFilter,
    ToolFilterOptions,
    create_tool_filter,
)
from toolgate.tools.focus import (
    FOCUS_MODE_PRESETS,
    FocusMode,
    FocusModePreset,
    ResolvedFocusMode,
    estimate_tool_count,
    get_focus_mode_preset,
    list_focus_modes,
    merge_focus_mode_with_manifest,
    resolve_focus_mode,
)
from toolgate.tools.patterns import (
    CATEGORY_STRING_TO_ENUM,
    VALID_CATEGORIES,
    PatternMatch,
    PatternMatcher,
    is_valid_category,
)
from toolgate.tools.registry import Tool, ToolCategory, ToolRegistry, create_tool

__all__ = [
    # Registry
    "Tool",
    "ToolCategory",
    "ToolDefinition",
    "ToolParameter",
    "ToolRegistry",
    "create_tool",
    "definitions_to_mcp",
    # Catalog
    "BUILTIN_FEATURE_FLAGS",
    "get_builtin_tools",
    "register_builtin_tools",
    # Patterns
    "CATEGORY_STRING_TO_ENUM",
    "VALID_CATEGORIES",
    "PatternMatch",
    "PatternMatcher",
    "is_valid_category",
    # Filter
    "FilterStep",
    "ManifestTools",
    "ToolFilter",
    "ToolFilterOptions",
    "create_tool_filter",
    # Focus modes
    "FOCUS_MODE_PRESETS",
    "FocusMode",
    "FocusModePreset",
    "ResolvedFocusMode",
    "estimate_tool_count",
    "get_focus_mode_preset",
    "list_focus_modes",
    "merge_focus_mode_with_manifest",
    "resolve_focus_mode",
]
