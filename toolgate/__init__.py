"""toolgate - tool access control for WordPress agent sessions.

Decides which tools an agent may see and call, from feature flags,
category and per-tool settings, and the active role.
"""

__version__ = "0.1.0"

from toolgate.engine import AccessControlEngine
from toolgate.errors import ToolGateError

__all__ = ["AccessControlEngine", "ToolGateError", "__version__"]
