"""Process-wide mutable state shared by every request.

Nothing here is persisted: shares and the current directory are lost on
restart. No locking is applied; concurrent requests may interleave
between store calls.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .modules.sharing.model import InMemoryShareRegistry, ShareRegistry


@dataclass
class WorkspaceState:
    """Share registry plus the current directory (a UI affordance only)."""
    shares: ShareRegistry = field(default_factory=InMemoryShareRegistry)
    cwd: str = '/'

    def get_current_directory(self) -> str:
        return self.cwd

    def set_current_directory(self, path: str) -> str:
        self.cwd = path
        return path
