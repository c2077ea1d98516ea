"""Tests for the layered role catalog."""

from toolgate.errors import RoleSchemaVersionError, RoleValidationError
from toolgate.roles.source import RoleCatalog, RoleSource
from toolgate.roles.models import RoleProvenance, validate_role
from toolgate.roles.resolver import AUTO_DETECT_ROLE_PRIORITY


class TestBundledRoles:
    """Tests for the bundled role set."""

    def test_bundled_slugs(self, role_catalog):
        """Test that every bundled role loads."""
        assert role_catalog.list_roles() == [
            "content-editor",
            "content-author",
            "seo-specialist",
            "site-admin",
            "developer",
            "read-only-auditor",
        ]

    def test_bundled_provenance(self, role_catalog):
        """Test that bundled roles are tagged as bundled."""
        role = role_catalog.get_role("content-editor")
        assert role.source is RoleProvenance.BUNDLED
        assert role.origin == "bundled:content-editor"
        assert role.tools.denied == ("wpnav_delete_*",)

    def test_auto_detect_targets_exist(self, role_catalog):
        """Test that roles suggested by capabilities are bundled."""
        for slug in AUTO_DETECT_ROLE_PRIORITY:
            assert slug in role_catalog

    def test_catalog_satisfies_protocol(self, role_catalog):
        """Test structural typing against RoleSource."""
        assert isinstance(role_catalog, RoleSource)


class TestCatalogLayering:
    """Tests for provenance merging."""

    def test_project_role_merges_over_bundled(self, role_catalog, make_role):
        """Test that a project role deep merges over the bundled one."""
        merged = role_catalog.add(
            make_role("content-editor", tools={"denied": ["wpnav_batch_*"]})
        )

        assert merged.source is RoleProvenance.PROJECT
        assert merged.description == "content-editor role"
        assert merged.tools.denied == ("wpnav_delete_*", "wpnav_batch_*")
        # Allow-list inherited from the bundled definition
        assert "content:*" in merged.tools.allowed
        assert role_catalog.get_role("content-editor") is merged

    def test_lower_layer_added_later_stays_underneath(self, make_role):
        """Test that add order does not override provenance precedence."""
        catalog = RoleCatalog()
        catalog.add(make_role("ops", description="Project ops"))
        bundled = validate_role(
            {"name": "ops", "description": "Bundled ops", "context": "c"},
            RoleProvenance.BUNDLED,
        )
        merged = catalog.add(bundled)

        assert merged.description == "Project ops"
        assert merged.source is RoleProvenance.PROJECT

    def test_sources_tracking(self, role_catalog, make_role):
        """Test which layer contributed which slug."""
        role_catalog.add(make_role("custom-role"))
        sources = role_catalog.sources()

        assert "custom-role" in sources["project"]
        assert "content-editor" in sources["bundled"]
        assert sources["global"] == []

    def test_new_slug_appended(self, role_catalog, make_role):
        """Test that new slugs keep first-seen order."""
        role_catalog.add(make_role("zeta"))
        assert role_catalog.list_roles()[-1] == "zeta"
        assert len(role_catalog) == 7


class TestCatalogLoad:
    """Tests for bulk loading definitions."""

    def test_bad_definitions_skipped(self):
        """Test that one invalid definition does not block the rest."""
        catalog = RoleCatalog()
        results = catalog.load(
            [
                {"name": "good", "description": "Good", "context": "c"},
                {"name": "Bad Name", "description": "Bad", "context": "c"},
                {"name": "future", "description": "F", "context": "c", "schema_version": 3},
                "not a mapping",
            ],
            RoleProvenance.GLOBAL,
        )

        assert [r.success for r in results] == [True, False, False, False]
        assert isinstance(results[1].error, RoleValidationError)
        assert isinstance(results[2].error, RoleSchemaVersionError)
        assert results[2].origin == "global:future"
        assert results[3].origin == "global[3]"
        assert catalog.list_roles() == ["good"]
        assert catalog.get_role("good").source is RoleProvenance.GLOBAL

    def test_origin_prefix(self):
        """Test custom origin labels."""
        catalog = RoleCatalog()
        results = catalog.load(
            [{"name": "a", "description": "A", "context": "c"}],
            RoleProvenance.PROJECT,
            origin_prefix=".toolgate/roles",
        )
        assert results[0].origin == ".toolgate/roles:a"
        assert catalog.get_role("a").origin == ".toolgate/roles:a"

    def test_missing_role(self, role_catalog):
        """Test lookup of an unknown slug."""
        assert role_catalog.get_role("nobody") is None
        assert "nobody" not in role_catalog
