"""Tests for the access control engine."""

import logging

import pytest

from toolgate.config import Settings
from toolgate.engine import AccessControlEngine
from toolgate.errors import RoleNotFoundError, ToolDisabledError, ToolNotFoundError
from toolgate.roles.models import RoleOverrides
from toolgate.roles.resolver import ManifestRoles, RoleResolutionSource
from toolgate.tools.filter import ManifestTools
from toolgate.utils.logging import LogCapture

ALL_UNFLAGGED = {
    "wpnav_help",
    "wpnav_introspect",
    "wpnav_list_posts",
    "wpnav_get_post",
    "wpnav_delete_post",
    "wpnav_list_pages",
    "wpnav_list_plugins",
    "wpnav_activate_plugin",
}


class TestEngineCompile:
    """Tests for initial compilation."""

    def test_no_configuration(self, registry, role_catalog):
        """Test that an unconfigured engine exposes every unflagged tool."""
        engine = AccessControlEngine(registry, role_catalog)

        assert engine.filter.enabled_tools == ALL_UNFLAGGED
        assert engine.resolution.role is None
        assert engine.warnings == []

    def test_config_role_applied(self, registry, role_catalog):
        """Test that the configured role restricts tools."""
        engine = AccessControlEngine(
            registry,
            role_catalog,
            roles_config=ManifestRoles(active="content-editor"),
        )

        assert engine.resolution.source is RoleResolutionSource.CONFIG
        assert engine.filter.enabled_tools == {
            "wpnav_help",
            "wpnav_introspect",
            "wpnav_list_posts",
            "wpnav_get_post",
            "wpnav_list_pages",
        }

    def test_auto_detected_role(self, registry, role_catalog):
        """Test capabilities driving role selection."""
        engine = AccessControlEngine(
            registry, role_catalog, capabilities=["edit_posts"]
        )
        assert engine.resolution.slug == "content-author"
        assert not engine.is_enabled("wpnav_delete_post")
        assert engine.is_enabled("wpnav_list_plugins")

    def test_warnings_combine_resolution_and_filter(self, registry, role_catalog):
        """Test warning order: resolution first, then filter."""
        engine = AccessControlEngine(
            registry,
            role_catalog,
            manifest_tools=ManifestTools(enabled=("gadgets",)),
            roles_config=ManifestRoles(active="ghost"),
        )
        assert engine.warnings == [
            'Config active role not found: "ghost"',
            'Unknown category: "gadgets"',
        ]

    def test_compile_logs_summary(self, registry, role_catalog):
        """Test the info and warning log lines."""
        with LogCapture(level=logging.DEBUG) as capture:
            AccessControlEngine(
                registry, role_catalog, roles_config=ManifestRoles(active="ghost")
            )

        assert capture.has_message("8 tools enabled, no role")
        warnings = capture.at_level(logging.WARNING)
        assert len(warnings) == 1
        assert "1 warning(s)" in warnings[0]

    def test_compiled_filter_not_mutated(self, registry, role_catalog):
        """Test that recompiling leaves earlier filters untouched."""
        engine = AccessControlEngine(registry, role_catalog)
        before = engine.filter
        engine.load_role("content-editor")

        assert before is not engine.filter
        assert before.is_enabled("wpnav_delete_post")
        assert not engine.is_enabled("wpnav_delete_post")


class TestEngineRoles:
    """Tests for runtime role changes."""

    def test_load_role_overrides_config(self, registry, role_catalog):
        """Test that a runtime role beats the configured one."""
        engine = AccessControlEngine(
            registry,
            role_catalog,
            roles_config=ManifestRoles(active="content-editor"),
        )
        engine.load_role("developer", source="cli")

        assert engine.resolution.source is RoleResolutionSource.RUNTIME
        assert engine.runtime.source == "cli"
        assert engine.filter.enabled_tools == ALL_UNFLAGGED

    def test_unknown_role_keeps_state(self, registry, role_catalog):
        """Test that loading an unknown role raises and changes nothing."""
        engine = AccessControlEngine(registry, role_catalog)
        engine.load_role("content-editor")
        current = engine.filter

        with pytest.raises(RoleNotFoundError):
            engine.load_role("ghost")

        assert engine.filter is current
        assert engine.runtime.active_role == "content-editor"

    def test_clear_role(self, registry, role_catalog):
        """Test falling back to the configured role."""
        engine = AccessControlEngine(
            registry,
            role_catalog,
            roles_config=ManifestRoles(active="content-author"),
        )
        engine.load_role("developer")
        engine.clear_role()

        assert engine.resolution.slug == "content-author"
        assert engine.resolution.source is RoleResolutionSource.CONFIG

    def test_config_overrides_reach_filter(self, registry, role_catalog):
        """Test that tools_allow re-admits a tool the role denied."""
        engine = AccessControlEngine(
            registry,
            role_catalog,
            roles_config=ManifestRoles(
                active="content-editor",
                overrides=RoleOverrides(tools_allow=("wpnav_delete_post",)),
            ),
        )
        assert engine.is_enabled("wpnav_delete_post")

    def test_set_capabilities(self, registry, role_catalog):
        """Test recompiling after capabilities change."""
        engine = AccessControlEngine(registry, role_catalog)
        engine.set_capabilities(["edit_posts"])
        assert engine.resolution.slug == "content-author"


class TestEngineFlags:
    """Tests for feature flag changes."""

    def test_set_feature_flag(self, registry, role_catalog):
        """Test enabling a flag recompiles the filter."""
        engine = AccessControlEngine(registry, role_catalog)
        assert not engine.is_enabled("wpnav_create_draft")

        engine.set_feature_flag("WRITES", True)
        assert engine.is_enabled("wpnav_create_draft")
        assert engine.is_enabled("wpnav_list_users")

    def test_enabled_definitions_in_registration_order(self, registry, role_catalog):
        """Test the advertised definitions."""
        engine = AccessControlEngine(registry, role_catalog)
        names = [d.name for d in engine.enabled_definitions()]
        assert names == [n for n in registry.all_primary_names() if n in ALL_UNFLAGGED]

    def test_list_tools(self, registry, role_catalog):
        """Test the MCP listing payload."""
        engine = AccessControlEngine(registry, role_catalog)
        engine.load_role("content-editor")
        listing = engine.list_tools()

        assert [tool["name"] for tool in listing] == [
            "wpnav_help",
            "wpnav_introspect",
            "wpnav_list_posts",
            "wpnav_get_post",
            "wpnav_list_pages",
        ]
        assert listing[0]["inputSchema"]["type"] == "object"


class TestRequireEnabled:
    """Tests for the execution guard."""

    def test_enabled_tool(self, registry, role_catalog):
        """Test that enabled tools pass and return the canonical name."""
        engine = AccessControlEngine(registry, role_catalog)
        assert engine.require_enabled("wpnav.help") == "wpnav_help"

    def test_unknown_tool(self, registry, role_catalog):
        """Test that unknown tools raise ToolNotFoundError."""
        engine = AccessControlEngine(registry, role_catalog)
        with pytest.raises(ToolNotFoundError):
            engine.require_enabled("wpnav_nope")

    def test_flag_disabled_tool_names_flag(self, registry, role_catalog):
        """Test that the error names the missing flag."""
        engine = AccessControlEngine(registry, role_catalog)
        with pytest.raises(ToolDisabledError) as exc_info:
            engine.require_enabled("wpnav_create_draft")
        assert exc_info.value.details["feature_flag"] == "WRITES"
        assert "requires feature flag: WRITES" in exc_info.value.message

    def test_role_disabled_tool(self, registry, role_catalog):
        """Test that role-filtered tools raise without a flag."""
        engine = AccessControlEngine(registry, role_catalog)
        engine.load_role("content-editor")
        with pytest.raises(ToolDisabledError) as exc_info:
            engine.require_enabled("wpnav_delete_post")
        assert "feature_flag" not in exc_info.value.details


class TestFromSettings:
    """Tests for building an engine from settings."""

    def test_from_settings(self, registry, role_catalog, clean_env):
        """Test flags, tools and roles flowing from settings."""
        settings = Settings(
            feature_flags={"WRITES": True},
            tools={"enabled": ["core", "content"], "overrides": {"wpnav_delete_*": False}},
            roles={"active": "content-author", "tools_deny": ["wpnav_introspect"]},
        )
        engine = AccessControlEngine.from_settings(settings, registry, role_catalog)

        assert registry.feature_flags["WRITES"] is True
        assert engine.resolution.slug == "content-author"
        assert engine.filter.enabled_tools == {
            "wpnav_help",
            "wpnav_list_posts",
            "wpnav_get_post",
            "wpnav_list_pages",
        }

    def test_from_settings_with_focus(self, builtin_registry, role_catalog, clean_env):
        """Test a focus preset applied through settings."""
        settings = Settings(tools={"focus": "read-only"})
        engine = AccessControlEngine.from_settings(settings, builtin_registry, role_catalog)

        assert engine.is_enabled("wpnav_list_posts")
        assert not engine.is_enabled("wpnav_create_post")
        assert engine.warnings == []
