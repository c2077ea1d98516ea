"""Tool schema definitions exposed to agent clients."""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ToolParameter:
    """A parameter for a tool."""

    name: str
    type: str  # 'string', 'integer', 'number', 'boolean', 'array', 'object'
    description: str
    required: bool = True
    enum: Optional[tuple[str, ...]] = None
    default: Any = None
    items: Optional[dict[str, Any]] = None  # For array types

    def to_json_schema(self) -> dict[str, Any]:
        """Convert to JSON Schema format."""
        schema: dict[str, Any] = {
            "type": self.type,
            "description": self.description,
        }
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.default is not None:
            schema["default"] = self.default
        if self.items:
            schema["items"] = self.items
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    """Definition of a tool that can be listed to agent clients."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = field(default_factory=tuple)

    def input_schema(self) -> dict[str, Any]:
        """Build JSON schema for parameters."""
        properties = {}
        required = []

        for param in self.parameters:
            properties[param.name] = param.to_json_schema()
            if param.required:
                required.append(param.name)

        schema: dict[str, Any] = {
            "type": "object",
            "properties": properties,
        }
        if required:
            schema["required"] = required

        return schema

    def to_mcp(self) -> dict[str, Any]:
        """Convert to the MCP tool listing format.

        MCP format:
        {
            "name": "tool_name",
            "description": "tool description",
            "inputSchema": {
                "type": "object",
                "properties": {...},
                "required": [...]
            }
        }
        """
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


def definitions_to_mcp(definitions: list[ToolDefinition]) -> list[dict[str, Any]]:
    """Convert a list of definitions to MCP listing format."""
    return [definition.to_mcp() for definition in definitions]
