"""Runtime role override state.

Tracks the role switched to during a session (from a tool call or the
CLI). The state lives in memory only and belongs to one engine instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Optional

from toolgate.errors import RoleNotFoundError
from toolgate.roles.source import RoleSource

logger = logging.getLogger(__name__)

RuntimeSource = Literal["cli", "tool"]


@dataclass
class RuntimeRoleState:
    """The currently active runtime role override, if any."""

    roles: RoleSource
    _active_role: Optional[str] = None
    _source: Optional[RuntimeSource] = None
    _set_at: Optional[datetime] = field(default=None)

    @property
    def active_role(self) -> Optional[str]:
        """Current override slug, or None."""
        return self._active_role

    @property
    def source(self) -> Optional[RuntimeSource]:
        return self._source

    @property
    def set_at(self) -> Optional[datetime]:
        return self._set_at

    def set_role(self, slug: str, source: RuntimeSource = "tool") -> None:
        """Set the runtime override.

        Args:
            slug: Role slug to activate.
            source: How the role was set.

        Raises:
            RoleNotFoundError: If the role source has no such role.
        """
        if self.roles.get_role(slug) is None:
            raise RoleNotFoundError(slug, self.roles.list_roles())

        self._active_role = slug
        self._source = source
        self._set_at = datetime.now(timezone.utc)
        logger.info(f"Runtime role set to {slug} (via {source})")

    def clear(self) -> None:
        """Clear the runtime override."""
        if self._active_role is not None:
            logger.info(f"Runtime role {self._active_role} cleared")
        self._active_role = None
        self._source = None
        self._set_at = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "active_role": self._active_role,
            "source": self._source,
            "set_at": self._set_at.isoformat() if self._set_at else None,
        }
