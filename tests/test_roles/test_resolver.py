"""Tests for effective role resolution."""

import pytest

from toolgate.roles.models import RoleOverrides
from toolgate.roles.resolver import (
    CAPABILITY_ROLE_MAPPING,
    AUTO_DETECT_ROLE_PRIORITY,
    ManifestRoles,
    RoleResolutionSource,
    auto_detect_role,
    default_effective_role,
    merge_role_tools,
    resolve_effective_role,
)


class TestAutoDetect:
    """Tests for capability-based role detection."""

    def test_developer_wins_over_author(self):
        """Test that higher-priority candidates win."""
        assert auto_detect_role(["activate_plugins", "edit_posts"]) == "developer"

    def test_editor_capabilities(self):
        """Test editor capability mapping."""
        assert auto_detect_role(["edit_pages", "edit_posts"]) == "content-editor"
        assert auto_detect_role(["edit_others_posts"]) == "seo-specialist"

    def test_author(self):
        """Test author capability mapping."""
        assert auto_detect_role(["edit_posts", "upload_files"]) == "content-author"

    def test_user_management_is_site_admin(self):
        """Test that user management suggests site-admin only."""
        assert auto_detect_role(["list_users"]) == "site-admin"

    def test_no_mapping(self):
        """Test capabilities with no mapped role."""
        assert auto_detect_role(["read"]) is None
        assert auto_detect_role([]) is None

    def test_priority_covers_every_mapped_slug(self):
        """Test that the priority order is total over mapped slugs."""
        mapped = {slug for slugs in CAPABILITY_ROLE_MAPPING.values() for slug in slugs}
        assert mapped == set(AUTO_DETECT_ROLE_PRIORITY)


class TestResolveEffectiveRole:
    """Tests for resolution precedence."""

    def test_runtime_beats_config(self, role_catalog):
        """Test runtime override precedence."""
        resolution = resolve_effective_role(
            role_catalog,
            runtime_override="developer",
            manifest_roles=ManifestRoles(active="content-editor"),
        )
        assert resolution.slug == "developer"
        assert resolution.source is RoleResolutionSource.RUNTIME
        assert resolution.warnings == []

    def test_config_beats_auto_detect(self, role_catalog):
        """Test config precedence over capabilities."""
        resolution = resolve_effective_role(
            role_catalog,
            manifest_roles=ManifestRoles(active="content-author"),
            capabilities=["manage_options"],
        )
        assert resolution.slug == "content-author"
        assert resolution.source is RoleResolutionSource.CONFIG

    def test_auto_detect(self, role_catalog):
        """Test falling back to capability detection."""
        resolution = resolve_effective_role(
            role_catalog, capabilities=["activate_plugins", "edit_posts"]
        )
        assert resolution.slug == "developer"
        assert resolution.source is RoleResolutionSource.AUTO_DETECT

    def test_auto_detect_disabled(self, role_catalog):
        """Test that auto-detection can be switched off."""
        resolution = resolve_effective_role(
            role_catalog,
            manifest_roles=ManifestRoles(auto_detect=False),
            capabilities=["manage_options"],
        )
        assert resolution.role is None
        assert resolution.source is RoleResolutionSource.NONE

    def test_nothing_configured(self, role_catalog):
        """Test the no-role outcome."""
        resolution = resolve_effective_role(role_catalog)
        assert resolution.role is None
        assert resolution.describe() == "no role"
        assert resolution.tools.allowed is None
        assert resolution.tools.denied == ()

    def test_missing_runtime_role_does_not_fall_through(self, role_catalog):
        """Test that an unknown runtime slug yields no role with a warning."""
        resolution = resolve_effective_role(
            role_catalog,
            runtime_override="ghost",
            manifest_roles=ManifestRoles(active="content-editor"),
            capabilities=["manage_options"],
        )
        assert resolution.role is None
        assert resolution.source is RoleResolutionSource.NONE
        assert resolution.warnings == ['Runtime role override not found: "ghost"']

    def test_missing_config_role_does_not_fall_through(self, role_catalog):
        """Test that an unknown config slug skips auto-detection."""
        resolution = resolve_effective_role(
            role_catalog,
            manifest_roles=ManifestRoles(active="ghost"),
            capabilities=["manage_options"],
        )
        assert resolution.role is None
        assert resolution.warnings == ['Config active role not found: "ghost"']

    def test_slugs_are_stripped(self, role_catalog):
        """Test whitespace handling in configured slugs."""
        resolution = resolve_effective_role(
            role_catalog, manifest_roles=ManifestRoles(active="  developer ")
        )
        assert resolution.slug == "developer"

    def test_blank_runtime_slug_ignored(self, role_catalog):
        """Test that a blank runtime override counts as unset."""
        resolution = resolve_effective_role(
            role_catalog,
            runtime_override="   ",
            manifest_roles=ManifestRoles(active="developer"),
        )
        assert resolution.source is RoleResolutionSource.CONFIG

    def test_describe(self, role_catalog):
        """Test the one-line summary."""
        resolution = resolve_effective_role(role_catalog, runtime_override="site-admin")
        assert resolution.describe() == 'role "site-admin" (runtime)'

    def test_overrides_from_manifest_roles(self, role_catalog):
        """Test that overrides carried by ManifestRoles are merged."""
        resolution = resolve_effective_role(
            role_catalog,
            manifest_roles=ManifestRoles(
                active="content-editor",
                overrides=RoleOverrides(tools_deny=("wpnav_update_page",)),
            ),
        )
        assert resolution.tools.denied == ("wpnav_delete_*", "wpnav_update_page")

    def test_default_effective_role(self):
        """Test the empty resolution helper."""
        resolution = default_effective_role()
        assert resolution.role is None
        assert resolution.warnings == []


class TestMergeRoleTools:
    """Tests for merging config overrides into role tool lists."""

    def test_allow_extends_existing_allow_list(self, make_role):
        """Test that tools_allow extends an allow-list."""
        role = make_role(tools={"allowed": ["core:*"]})
        tools = merge_role_tools(role, RoleOverrides(tools_allow=("wpnav_seo_audit",)))
        assert tools.allowed == ("core:*", "wpnav_seo_audit")

    def test_allow_does_not_create_allow_list(self, make_role):
        """Test that tools_allow alone never restricts a role."""
        role = make_role(tools={"denied": ["wpnav_delete_*"]})
        tools = merge_role_tools(role, RoleOverrides(tools_allow=("wpnav_seo_audit",)))
        assert tools.allowed is None

    def test_deny_deduplicated(self, make_role):
        """Test union semantics for deny lists."""
        role = make_role(tools={"denied": ["wpnav_delete_*"]})
        tools = merge_role_tools(
            role, RoleOverrides(tools_deny=("wpnav_delete_*", "wpnav_batch_*"))
        )
        assert tools.denied == ("wpnav_delete_*", "wpnav_batch_*")

    def test_no_role(self):
        """Test overrides without a role."""
        tools = merge_role_tools(None, RoleOverrides(tools_deny=("wpnav_x",)))
        assert tools.allowed is None
        assert tools.denied == ("wpnav_x",)

    @pytest.mark.parametrize("overrides", [None, RoleOverrides()])
    def test_role_lists_passed_through(self, make_role, overrides):
        """Test that a role's own lists survive without overrides."""
        role = make_role(tools={"allowed": ["core:*"], "denied": ["wpnav_a"]})
        tools = merge_role_tools(role, overrides)
        assert tools.allowed == ("core:*",)
        assert tools.denied == ("wpnav_a",)
