"""Access control engine.

The AccessControlEngine ties the pieces together:
1. Resolves the effective role (runtime > config > auto-detect > none)
2. Compiles a ToolFilter from flags, settings and the role
3. Answers "is this tool enabled?" for the listing and proxy layers
4. Recompiles whenever one of its inputs changes

Each compilation builds a fresh ToolFilter; a compiled filter is never
mutated, so a reference held by a caller stays consistent.
"""

import logging
from typing import Any, Optional, Sequence

from toolgate.config import Settings
from toolgate.errors import ToolDisabledError, ToolNotFoundError
from toolgate.roles.resolver import (
    EffectiveRoleResolution,
    ManifestRoles,
    resolve_effective_role,
)
from toolgate.roles.runtime import RuntimeRoleState, RuntimeSource
from toolgate.roles.source import RoleSource
from toolgate.tools.definitions import ToolDefinition, definitions_to_mcp
from toolgate.tools.filter import ManifestTools, ToolFilter, create_tool_filter
from toolgate.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


class AccessControlEngine:
    """Decides which tools are exposed for the current session."""

    def __init__(
        self,
        registry: ToolRegistry,
        roles: RoleSource,
        manifest_tools: Optional[ManifestTools] = None,
        roles_config: Optional[ManifestRoles] = None,
        capabilities: Optional[Sequence[str]] = None,
    ):
        """Initialize and compile.

        Args:
            registry: Registered tools and feature-flag state
            roles: Where role definitions are looked up
            manifest_tools: Category and per-tool configuration
            roles_config: Config active role, auto-detect switch and overrides
            capabilities: Current user's WordPress capabilities
        """
        self.registry = registry
        self.roles = roles
        self.manifest_tools = manifest_tools
        self.roles_config = roles_config or ManifestRoles()
        self.capabilities: list[str] = list(capabilities or [])
        self.runtime = RuntimeRoleState(roles)

        self._filter: Optional[ToolFilter] = None
        self._resolution: Optional[EffectiveRoleResolution] = None
        self.compile()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        registry: ToolRegistry,
        roles: RoleSource,
        capabilities: Optional[Sequence[str]] = None,
    ) -> "AccessControlEngine":
        """Build an engine from loaded settings.

        Settings feature flags are applied to the registry first.
        """
        for key, enabled in settings.feature_flags.items():
            registry.set_feature_flag(key, enabled)

        return cls(
            registry=registry,
            roles=roles,
            manifest_tools=settings.manifest_tools(),
            roles_config=settings.manifest_roles(),
            capabilities=capabilities,
        )

    @property
    def filter(self) -> ToolFilter:
        """The most recently compiled filter."""
        assert self._filter is not None
        return self._filter

    @property
    def resolution(self) -> EffectiveRoleResolution:
        """The most recent effective-role resolution."""
        assert self._resolution is not None
        return self._resolution

    @property
    def warnings(self) -> list[str]:
        """Role resolution warnings followed by filter warnings."""
        return self.resolution.warnings + self.filter.warnings

    def compile(self) -> ToolFilter:
        """Resolve the effective role and compile a fresh filter."""
        resolution = resolve_effective_role(
            self.roles,
            runtime_override=self.runtime.active_role,
            manifest_roles=self.roles_config,
            capabilities=self.capabilities,
        )
        tool_filter = create_tool_filter(
            self.registry,
            manifest_tools=self.manifest_tools,
            active_role=resolution.role,
            role_overrides=self.roles_config.overrides,
        )

        self._resolution = resolution
        self._filter = tool_filter

        warnings = self.warnings
        if warnings:
            logger.warning(
                f"Tool configuration produced {len(warnings)} warning(s): "
                + "; ".join(warnings)
            )
        logger.info(
            f"{len(tool_filter.enabled_tools)} tools enabled, {resolution.describe()}"
        )
        return tool_filter

    # ------------------------------------------------------------------
    # Input changes
    # ------------------------------------------------------------------

    def load_role(self, slug: str, source: RuntimeSource = "tool") -> ToolFilter:
        """Switch to a role at runtime and recompile.

        Raises:
            RoleNotFoundError: If the role does not exist. The previous
                override and filter are kept.
        """
        self.runtime.set_role(slug, source)
        return self.compile()

    def clear_role(self) -> ToolFilter:
        """Drop the runtime role override and recompile."""
        self.runtime.clear()
        return self.compile()

    def set_capabilities(self, capabilities: Sequence[str]) -> ToolFilter:
        self.capabilities = list(capabilities)
        return self.compile()

    def set_feature_flag(self, key: str, enabled: bool) -> ToolFilter:
        self.registry.set_feature_flag(key, enabled)
        return self.compile()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_enabled(self, tool_name: str) -> bool:
        return self.filter.is_enabled(tool_name)

    def enabled_definitions(self) -> list[ToolDefinition]:
        """Definitions to advertise to clients, in registration order."""
        return self.filter.enabled_definitions()

    def list_tools(self) -> list[dict[str, Any]]:
        """Enabled tools in MCP ``tools/list`` format."""
        return definitions_to_mcp(self.enabled_definitions())

    def require_enabled(self, tool_name: str) -> str:
        """Check a tool before executing it.

        Args:
            tool_name: Canonical name or alias

        Returns:
            The canonical tool name

        Raises:
            ToolNotFoundError: If no tool has this name or alias
            ToolDisabledError: If the tool exists but is filtered out
        """
        tool = self.registry.lookup(tool_name)
        if tool is None:
            raise ToolNotFoundError(tool_name)

        if not self.filter.is_enabled(tool.name):
            flag = None
            if tool.feature_flag and not self.registry.is_feature_enabled(tool):
                flag = tool.feature_flag
            raise ToolDisabledError(tool.name, feature_flag=flag)

        return tool.name
