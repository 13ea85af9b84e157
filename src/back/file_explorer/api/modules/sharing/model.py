"""Share registry domain model.

A share is keyed by the absolute store path it exposes; its value is an
access policy. The external handle for a share is the share id, the MD5
hex digest of the UTF-8 path, so it can always be recomputed from the
path and never needs to be stored.

The id is a routing handle, not a secret: anyone who knows a path can
derive its id. Private shares are never served.

This module provides:
  1. ``AccessPolicy`` and ``derive_share_id``.
  2. ``ShareRegistry`` -- abstract storage protocol.
  3. ``InMemoryShareRegistry`` -- process-lifetime implementation.
"""

from __future__ import annotations

import hashlib
from enum import Enum
from typing import Protocol


class AccessPolicy(str, Enum):
    """Who may retrieve a shared path anonymously."""

    PUBLIC = 'Public'
    PRIVATE = 'Private'


def derive_share_id(path: str) -> str:
    """Deterministic, unkeyed share id for ``path`` (32 hex chars)."""
    return hashlib.md5(path.encode('utf-8')).hexdigest()


# ── Registry protocol ────────────────────────────────────────────────


class ShareRegistry(Protocol):
    """Abstract share storage: path -> policy.

    Implementations: InMemoryShareRegistry. A persistent backing store
    only needs to satisfy this protocol; the gateway never touches the
    underlying mapping directly.
    """

    async def put(self, path: str, policy: AccessPolicy) -> None:
        """Insert or replace the policy for ``path``."""
        ...

    async def remove(self, path: str) -> bool:
        """Remove ``path``; return whether an entry existed."""
        ...

    async def get(self, path: str) -> AccessPolicy | None: ...

    async def items(self) -> list[tuple[str, AccessPolicy]]: ...

    async def resolve(self, share_id: str) -> tuple[str, AccessPolicy] | None:
        """Return the shared path and policy whose id is ``share_id``."""
        ...


# ── In-memory implementation ─────────────────────────────────────────


class InMemoryShareRegistry:
    """Share registry held in process memory; empty after every restart.

    Keeps a secondary index ``share_id -> [paths]`` so resolution does not
    scan every entry. Two paths whose ids collide both stay in the index;
    ``resolve`` returns the one shared first.
    """

    def __init__(self) -> None:
        self._policies: dict[str, AccessPolicy] = {}
        self._by_id: dict[str, list[str]] = {}

    async def put(self, path: str, policy: AccessPolicy) -> None:
        if path not in self._policies:
            self._by_id.setdefault(derive_share_id(path), []).append(path)
        self._policies[path] = policy

    async def remove(self, path: str) -> bool:
        if self._policies.pop(path, None) is None:
            return False
        share_id = derive_share_id(path)
        paths = self._by_id.get(share_id, [])
        if path in paths:
            paths.remove(path)
        if not paths:
            self._by_id.pop(share_id, None)
        return True

    async def get(self, path: str) -> AccessPolicy | None:
        return self._policies.get(path)

    async def items(self) -> list[tuple[str, AccessPolicy]]:
        return list(self._policies.items())

    async def resolve(self, share_id: str) -> tuple[str, AccessPolicy] | None:
        for path in self._by_id.get(share_id, []):
            policy = self._policies.get(path)
            if policy is not None:
                return path, policy
        return None

    def __len__(self) -> int:
        return len(self._policies)
