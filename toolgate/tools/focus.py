"""Focus modes: preset tool configurations.

A focus mode narrows the exposed tool set to what a kind of session
needs. Presets are plain ManifestTools values; the ``custom`` mode uses
the configured tools section as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from toolgate.tools.filter import ManifestTools
from toolgate.tools.registry import ToolCategory


class FocusMode(Enum):
    """Available focus modes."""

    CONTENT_EDITING = "content-editing"
    FULL_ADMIN = "full-admin"
    READ_ONLY = "read-only"
    CUSTOM = "custom"

    @classmethod
    def from_string(cls, value: str) -> "FocusMode":
        for mode in cls:
            if mode.value == value:
                return mode
        valid = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown focus mode: {value}. Valid modes: {valid}")


@dataclass(frozen=True)
class FocusModePreset:
    """A named preset."""

    mode: FocusMode
    description: str
    token_estimate: str
    tools: ManifestTools


@dataclass(frozen=True)
class ResolvedFocusMode:
    """A focus mode resolved to the tool configuration it applies."""

    mode: FocusMode
    tools: ManifestTools
    description: str
    source: Literal["preset", "manifest"]


CONTENT_EDITING_PRESET = FocusModePreset(
    mode=FocusMode.CONTENT_EDITING,
    description="Essential tools for content creation and management",
    token_estimate="~500 tokens",
    tools=ManifestTools(
        overrides=(
            # Core
            ("wpnav_introspect", True),
            ("wpnav_get_site_overview", True),
            ("wpnav_help", True),
            # Posts
            ("wpnav_list_posts", True),
            ("wpnav_get_post", True),
            ("wpnav_create_post_with_blocks", True),
            ("wpnav_update_post", True),
            # Pages
            ("wpnav_list_pages", True),
            ("wpnav_get_page", True),
            ("wpnav_create_page", True),
            ("wpnav_update_page", True),
            ("wpnav_snapshot_page", True),
            # Taxonomy (read)
            ("wpnav_list_categories", True),
            ("wpnav_list_tags", True),
            # Media
            ("wpnav_list_media", True),
            ("wpnav_upload_media_from_url", True),
        ),
    ),
)

FULL_ADMIN_PRESET = FocusModePreset(
    mode=FocusMode.FULL_ADMIN,
    description="Full administrative access to all WordPress tools",
    token_estimate="~19,500 tokens",
    tools=ManifestTools(enabled=tuple(ToolCategory.values())),
)

READ_ONLY_PRESET = FocusModePreset(
    mode=FocusMode.READ_ONLY,
    description="Read-only access for auditing and exploration",
    token_estimate="~300 tokens",
    tools=ManifestTools(
        enabled=("core",),
        overrides=(
            ("wpnav_introspect", True),
            ("wpnav_get_site_overview", True),
            ("wpnav_help", True),
            ("wpnav_list_*", True),
            ("wpnav_get_*", True),
            ("wpnav_snapshot_page", True),
            # Writes stay off even when a read pattern matched them
            ("wpnav_create_*", False),
            ("wpnav_update_*", False),
            ("wpnav_delete_*", False),
            ("wpnav_activate_*", False),
            ("wpnav_deactivate_*", False),
            ("wpnav_batch_*", False),
        ),
    ),
)

CUSTOM_PRESET = FocusModePreset(
    mode=FocusMode.CUSTOM,
    description="Custom tool configuration from settings",
    token_estimate="varies",
    tools=ManifestTools(),
)

FOCUS_MODE_PRESETS: dict[FocusMode, FocusModePreset] = {
    FocusMode.CONTENT_EDITING: CONTENT_EDITING_PRESET,
    FocusMode.FULL_ADMIN: FULL_ADMIN_PRESET,
    FocusMode.READ_ONLY: READ_ONLY_PRESET,
    FocusMode.CUSTOM: CUSTOM_PRESET,
}


def _as_mode(mode: Union[FocusMode, str]) -> FocusMode:
    return mode if isinstance(mode, FocusMode) else FocusMode.from_string(mode)


def get_focus_mode_preset(mode: Union[FocusMode, str]) -> FocusModePreset:
    return FOCUS_MODE_PRESETS[_as_mode(mode)]


def resolve_focus_mode(
    mode: Union[FocusMode, str], manifest_tools: Optional[ManifestTools] = None
) -> ResolvedFocusMode:
    """Resolve a focus mode to its tool configuration.

    Args:
        mode: Focus mode or its string value.
        manifest_tools: Configured tools section, used by ``custom``.

    Returns:
        ResolvedFocusMode. Presets report source ``preset``; ``custom``
        reports ``manifest``.

    Raises:
        ValueError: If mode is not a known focus mode.
    """
    mode = _as_mode(mode)
    if mode is FocusMode.CUSTOM:
        return ResolvedFocusMode(
            mode=mode,
            tools=manifest_tools or ManifestTools(),
            description=CUSTOM_PRESET.description,
            source="manifest",
        )

    preset = FOCUS_MODE_PRESETS[mode]
    return ResolvedFocusMode(
        mode=mode,
        tools=preset.tools,
        description=preset.description,
        source="preset",
    )


def _concat_unique(first: tuple[str, ...], second: tuple[str, ...]) -> tuple[str, ...]:
    merged: list[str] = []
    for item in (*first, *second):
        if item not in merged:
            merged.append(item)
    return tuple(merged)


def merge_focus_mode_with_manifest(
    resolved: ResolvedFocusMode, manifest_tools: Optional[ManifestTools] = None
) -> ManifestTools:
    """Layer configured tools over a preset.

    Category lists are concatenated without duplicates. An override for a
    pattern the preset already lists replaces the preset value in place;
    new patterns are appended, so configured overrides are applied after
    the preset's own.
    """
    if manifest_tools is None or resolved.source == "manifest":
        return resolved.tools

    base = resolved.tools
    overrides = dict(base.overrides)
    for pattern, allow in manifest_tools.overrides:
        overrides[pattern] = allow

    return ManifestTools(
        enabled=_concat_unique(base.enabled, manifest_tools.enabled),
        disabled=_concat_unique(base.disabled, manifest_tools.disabled),
        overrides=tuple(overrides.items()),
    )


def list_focus_modes() -> list[dict[str, str]]:
    """Name, description and token estimate of every focus mode."""
    return [
        {
            "name": preset.mode.value,
            "description": preset.description,
            "token_estimate": preset.token_estimate,
        }
        for preset in FOCUS_MODE_PRESETS.values()
    ]


def estimate_tool_count(mode: Union[FocusMode, str]) -> Optional[int]:
    """Count the explicit, non-glob allow overrides of a preset.

    Returns None for ``full-admin`` and ``custom``, where the count
    depends on the registry and settings.
    """
    mode = _as_mode(mode)
    if mode in (FocusMode.FULL_ADMIN, FocusMode.CUSTOM):
        return None
    return sum(
        1
        for pattern, allow in FOCUS_MODE_PRESETS[mode].tools.overrides
        if allow and "*" not in pattern
    )
