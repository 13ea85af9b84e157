"""Share issuance and revocation."""
from __future__ import annotations

from ....observability.logging import get_logger
from .model import AccessPolicy, ShareRegistry, derive_share_id

logger = get_logger(__name__)

SHARED_PREFIX = '/shared/'


class ShareService:
    """Issues, revokes and looks up share links over a registry."""

    def __init__(self, registry: ShareRegistry, link_prefix: str = ''):
        """
        Args:
            registry: Share registry backend
            link_prefix: Prepended to ``/shared/<share_id>`` in issued links
        """
        self.registry = registry
        self.link_prefix = link_prefix

    def link_for(self, path: str) -> str:
        return f'{self.link_prefix}{SHARED_PREFIX}{derive_share_id(path)}'

    async def share(self, path: str, policy: AccessPolicy) -> str:
        """Share ``path`` under ``policy`` and return its link.

        Re-sharing a path replaces its policy; the link stays the same.
        """
        await self.registry.put(path, policy)
        link = self.link_for(path)
        logger.info('share_file', path=path, policy=policy.value, link=link)
        return link

    async def unshare(self, path: str) -> bool:
        removed = await self.registry.remove(path)
        logger.info('unshare_file', path=path, removed=removed)
        return removed

    async def lookup_link(self, path: str) -> str | None:
        if await self.registry.get(path) is None:
            return None
        return self.link_for(path)

    async def list_shares(self) -> list[dict]:
        return [
            {'path': path, 'policy': policy.value, 'link': self.link_for(path)}
            for path, policy in await self.registry.items()
        ]
