"""Centralized exception hierarchy for ToolGate.

This module defines all custom exceptions used throughout ToolGate,
organized in a hierarchy for easy handling and specificity.

Pattern misses and unresolvable role references are never raised; they
are reported as warning strings alongside a successful result. Only
malformed role definitions and incompatible schema versions propagate,
and only for the role involved.
"""

from __future__ import annotations

from typing import Any, Optional


class ToolGateError(Exception):
    """Base exception for all ToolGate errors.

    Attributes:
        message: Human-readable error message.
        code: Optional error code for programmatic handling.
        details: Optional dictionary with additional error context.
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ToolGateError):
    """Raised when there's a configuration problem."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid configuration for '{field}': {reason}",
            code="INVALID_CONFIG",
            details={"field": field, "value": str(value)[:100], "reason": reason},
        )


# =============================================================================
# Tool Errors
# =============================================================================

class ToolError(ToolGateError):
    """Base exception for tool-related errors."""

    def __init__(
        self,
        message: str,
        tool_name: Optional[str] = None,
        code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        details = details or {}
        if tool_name:
            details["tool_name"] = tool_name
        super().__init__(message, code, details)


class ToolNotFoundError(ToolError):
    """Raised when a requested tool is not found."""

    def __init__(self, tool_name: str):
        super().__init__(
            message=f"Tool '{tool_name}' not found",
            tool_name=tool_name,
            code="TOOL_NOT_FOUND",
        )


class DuplicateToolError(ToolError, ValueError):
    """Raised when a name or alias would shadow a different registered tool."""

    def __init__(self, name: str, existing: str, incoming: str):
        if name == existing:
            message = f"Tool '{name}' is already registered"
        else:
            message = (
                f"Name '{name}' is already registered as an alias of '{existing}'"
            )
        super().__init__(
            message=message,
            tool_name=incoming,
            code="DUPLICATE_TOOL",
            details={"name": name, "existing": existing},
        )


class ToolDisabledError(ToolError):
    """Raised when a disabled tool is requested for execution."""

    def __init__(self, tool_name: str, feature_flag: Optional[str] = None):
        message = f"Tool is disabled: {tool_name}"
        details: dict[str, Any] = {}
        if feature_flag:
            message += f" (requires feature flag: {feature_flag})"
            details["feature_flag"] = feature_flag
        super().__init__(
            message=message,
            tool_name=tool_name,
            code="TOOL_DISABLED",
            details=details,
        )


# =============================================================================
# Role Errors
# =============================================================================

class RoleError(ToolGateError):
    """Base exception for role-related errors."""
    pass


class RoleValidationError(RoleError):
    """Raised when a role definition has an invalid shape."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        origin: str = "<inline>",
    ):
        details: dict[str, Any] = {"origin": origin}
        if field:
            details["field"] = field
        super().__init__(message, "ROLE_VALIDATION_ERROR", details)
        self.field = field
        self.origin = origin


class RoleSchemaVersionError(RoleError):
    """Raised when a role declares a schema version this engine cannot read."""

    def __init__(self, message: str, origin: str = "<inline>", suggestion: str = ""):
        super().__init__(
            message,
            "ROLE_SCHEMA_VERSION",
            {"origin": origin, "suggestion": suggestion},
        )
        self.origin = origin
        self.suggestion = suggestion


class RoleNotFoundError(RoleError):
    """Raised when an explicitly requested role does not exist."""

    def __init__(self, slug: str, available: Optional[list[str]] = None):
        available = available or []
        listing = ", ".join(available) if available else "(none)"
        super().__init__(
            message=f"Role '{slug}' not found. Available roles: {listing}",
            code="ROLE_NOT_FOUND",
            details={"slug": slug, "available": list(available)},
        )
        self.slug = slug
        self.available = list(available)
