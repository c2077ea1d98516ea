"""Tests for runtime role state."""

from datetime import timezone

import pytest

from toolgate.errors import RoleNotFoundError
from toolgate.roles.runtime import RuntimeRoleState


class TestRuntimeRoleState:
    """Tests for RuntimeRoleState."""

    def test_initial_state(self, role_catalog):
        """Test that no override is set initially."""
        state = RuntimeRoleState(role_catalog)
        assert state.active_role is None
        assert state.to_dict() == {"active_role": None, "source": None, "set_at": None}

    def test_set_role(self, role_catalog):
        """Test setting an override."""
        state = RuntimeRoleState(role_catalog)
        state.set_role("developer", source="cli")

        assert state.active_role == "developer"
        assert state.source == "cli"
        assert state.set_at.tzinfo is timezone.utc
        assert state.to_dict()["set_at"].endswith("+00:00")

    def test_default_source_is_tool(self, role_catalog):
        """Test the default source label."""
        state = RuntimeRoleState(role_catalog)
        state.set_role("site-admin")
        assert state.source == "tool"

    def test_unknown_role_raises_and_keeps_state(self, role_catalog):
        """Test that a bad slug leaves the previous override in place."""
        state = RuntimeRoleState(role_catalog)
        state.set_role("developer")

        with pytest.raises(RoleNotFoundError) as exc_info:
            state.set_role("ghost")

        assert exc_info.value.slug == "ghost"
        assert "developer" in exc_info.value.available
        assert "Available roles:" in exc_info.value.message
        assert state.active_role == "developer"

    def test_clear(self, role_catalog):
        """Test clearing the override."""
        state = RuntimeRoleState(role_catalog)
        state.set_role("developer")
        state.clear()

        assert state.active_role is None
        assert state.source is None
        assert state.set_at is None

    def test_clear_when_unset(self, role_catalog):
        """Test that clearing an empty state is harmless."""
        state = RuntimeRoleState(role_catalog)
        state.clear()
        assert state.active_role is None
