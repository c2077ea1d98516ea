"""Pytest configuration and fixtures for toolgate tests."""

import os
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from toolgate.config import reset_settings
from toolgate.roles import RoleCatalog, RoleProvenance, validate_role
from toolgate.tools import ToolCategory, ToolRegistry, create_tool, register_builtin_tools


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_path = temp_dir / "config.yaml"
    config_path.write_text(
        """
feature_flags:
  WORKFLOWS_ENABLED: true

tools:
  focus: custom
  enabled: [core, content]
  overrides:
    wpnav_delete_*: false
    wpnav_delete_post: true

roles:
  active: content-editor
  tools_deny: [wpnav_update_page]

logging:
  level: info
"""
    )
    return config_path


@pytest.fixture
def registry() -> ToolRegistry:
    """Small registry covering several categories, a flag and an alias."""
    registry = ToolRegistry()
    registry.register_all(
        [
            create_tool("wpnav_help", "Show help", ToolCategory.CORE, aliases=["wpnav.help"]),
            create_tool("wpnav_introspect", "Introspect", ToolCategory.CORE),
            create_tool("wpnav_list_posts", "List posts", ToolCategory.CONTENT),
            create_tool("wpnav_get_post", "Get post", ToolCategory.CONTENT),
            create_tool("wpnav_delete_post", "Delete post", ToolCategory.CONTENT),
            create_tool("wpnav_list_pages", "List pages", ToolCategory.CONTENT),
            create_tool(
                "wpnav_create_draft",
                "Create draft",
                ToolCategory.CONTENT,
                feature_flag="WRITES",
            ),
            create_tool("wpnav_list_users", "List users", ToolCategory.USERS, feature_flag="WRITES"),
            create_tool("wpnav_list_plugins", "List plugins", ToolCategory.PLUGINS),
            create_tool("wpnav_activate_plugin", "Activate plugin", ToolCategory.PLUGINS),
        ]
    )
    return registry


@pytest.fixture
def builtin_registry() -> ToolRegistry:
    """Registry with the full built-in catalog, built-in flags off."""
    return register_builtin_tools(ToolRegistry())


@pytest.fixture
def role_catalog() -> RoleCatalog:
    """Catalog with the bundled roles."""
    return RoleCatalog.with_bundled()


@pytest.fixture
def make_role():
    """Factory for project-level roles with sensible defaults."""

    def _make(name: str = "tester", **fields):
        data = {
            "name": name,
            "description": f"{name} role",
            "context": f"You are {name}.",
        }
        data.update(fields)
        return validate_role(data, RoleProvenance.PROJECT)

    return _make


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove TOOLGATE_* environment variables for the test."""
    original = {
        key: os.environ.pop(key)
        for key in list(os.environ)
        if key.startswith("TOOLGATE_")
    }

    reset_settings()

    yield

    for key in [k for k in os.environ if k.startswith("TOOLGATE_")]:
        del os.environ[key]
    os.environ.update(original)

    reset_settings()
