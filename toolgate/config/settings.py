"""Configuration settings models using Pydantic."""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from toolgate.roles.models import RoleOverrides
from toolgate.roles.resolver import ManifestRoles
from toolgate.tools.filter import ManifestTools
from toolgate.tools.focus import merge_focus_mode_with_manifest, resolve_focus_mode
from toolgate.tools.patterns import VALID_CATEGORIES, is_valid_category


class ToolsConfig(BaseModel):
    """Configuration for which tools are exposed."""

    focus: Literal["content-editing", "full-admin", "read-only", "custom"] = "custom"
    enabled: list[str] = Field(default_factory=list)
    disabled: list[str] = Field(default_factory=list)
    # Insertion order is the order overrides are applied in
    overrides: dict[str, bool] = Field(default_factory=dict)

    @field_validator("enabled", "disabled")
    @classmethod
    def validate_categories(cls, v: list[str]) -> list[str]:
        cleaned = [c.strip() for c in v if c and c.strip()]
        for category in cleaned:
            if not is_valid_category(category):
                raise ValueError(
                    f"Unknown category: {category}. "
                    f"Valid categories: {', '.join(VALID_CATEGORIES)}"
                )
        return cleaned

    def to_manifest_tools(self) -> ManifestTools:
        return ManifestTools(
            enabled=tuple(self.enabled),
            disabled=tuple(self.disabled),
            overrides=tuple(self.overrides.items()),
        )


class RolesConfig(BaseModel):
    """Configuration for role selection and role tool overrides."""

    active: Optional[str] = None
    auto_detect: bool = True
    tools_allow: Optional[list[str]] = None
    tools_deny: Optional[list[str]] = None

    @field_validator("active")
    @classmethod
    def validate_active(cls, v: Optional[str]) -> Optional[str]:
        """Treat blank role names as unset."""
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    def to_overrides(self) -> Optional[RoleOverrides]:
        if self.tools_allow is None and self.tools_deny is None:
            return None
        return RoleOverrides(
            tools_allow=tuple(self.tools_allow) if self.tools_allow is not None else None,
            tools_deny=tuple(self.tools_deny) if self.tools_deny is not None else None,
        )


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    file: Optional[str] = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    @property
    def resolved_file(self) -> Optional[Path]:
        """Get the log file path with ~ expanded."""
        return Path(self.file).expanduser() if self.file else None


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="TOOLGATE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Flag key -> state; a flag must be explicitly true to enable its tools
    feature_flags: dict[str, bool] = Field(default_factory=dict)

    # Nested configurations
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    roles: RolesConfig = Field(default_factory=RolesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("feature_flags", mode="before")
    @classmethod
    def normalize_flag_keys(cls, v: Any) -> Any:
        """Upper-case flag keys; environment variable names arrive lowercased."""
        if isinstance(v, dict):
            return {str(key).upper(): value for key, value in v.items()}
        return v

    def manifest_tools(self) -> ManifestTools:
        """Tool configuration after applying the focus mode."""
        configured = self.tools.to_manifest_tools()
        resolved = resolve_focus_mode(self.tools.focus, configured)
        return merge_focus_mode_with_manifest(resolved, configured)

    def role_overrides(self) -> Optional[RoleOverrides]:
        """Config-level tools_allow/tools_deny, or None if neither is set."""
        return self.roles.to_overrides()

    def manifest_roles(self) -> ManifestRoles:
        return ManifestRoles(
            active=self.roles.active,
            auto_detect=self.roles.auto_detect,
            overrides=self.role_overrides(),
        )
