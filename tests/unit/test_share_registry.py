"""Tests for the share registry and share link issuance.

Validates:
  - Share ids are the deterministic MD5 hex digest of the path.
  - Share, re-share (policy replaced, link stable), unshare, lookup.
  - Registry resolution through the share-id index, including collisions.
"""

from __future__ import annotations

import hashlib

import pytest

from file_explorer.api.modules.sharing.model import (
    AccessPolicy,
    InMemoryShareRegistry,
    derive_share_id,
)
from file_explorer.api.modules.sharing.service import ShareService


@pytest.fixture
def registry():
    return InMemoryShareRegistry()


@pytest.fixture
def shares(registry):
    return ShareService(registry)


# =====================================================================
# Share ids
# =====================================================================


class TestDeriveShareId:

    def test_is_md5_hex_of_utf8_path(self):
        path = '/file-explorer:sys/home/report.pdf'
        assert derive_share_id(path) == hashlib.md5(path.encode('utf-8')).hexdigest()

    def test_is_deterministic(self):
        assert derive_share_id('/a/b') == derive_share_id('/a/b')

    def test_is_32_hex_chars(self):
        share_id = derive_share_id('/a/b')
        assert len(share_id) == 32
        assert all(c in '0123456789abcdef' for c in share_id)

    def test_non_ascii_path(self):
        path = '/home/résumé.txt'
        assert derive_share_id(path) == hashlib.md5(path.encode('utf-8')).hexdigest()

    def test_distinct_paths_in_corpus_do_not_collide(self):
        paths = [f'/home/dir{i}/file{j}.txt' for i in range(50) for j in range(20)]
        assert len({derive_share_id(p) for p in paths}) == len(paths)


# =====================================================================
# Registry
# =====================================================================


class TestInMemoryShareRegistry:

    @pytest.mark.asyncio
    async def test_put_and_get(self, registry):
        await registry.put('/a', AccessPolicy.PUBLIC)
        assert await registry.get('/a') == AccessPolicy.PUBLIC
        assert await registry.get('/b') is None

    @pytest.mark.asyncio
    async def test_put_replaces_policy(self, registry):
        await registry.put('/a', AccessPolicy.PUBLIC)
        await registry.put('/a', AccessPolicy.PRIVATE)
        assert await registry.get('/a') == AccessPolicy.PRIVATE
        assert len(registry) == 1

    @pytest.mark.asyncio
    async def test_remove(self, registry):
        await registry.put('/a', AccessPolicy.PUBLIC)
        assert await registry.remove('/a') is True
        assert await registry.remove('/a') is False
        assert await registry.resolve(derive_share_id('/a')) is None

    @pytest.mark.asyncio
    async def test_resolve(self, registry):
        await registry.put('/a', AccessPolicy.PUBLIC)
        await registry.put('/b', AccessPolicy.PRIVATE)
        assert await registry.resolve(derive_share_id('/b')) == ('/b', AccessPolicy.PRIVATE)
        assert await registry.resolve('0' * 32) is None

    @pytest.mark.asyncio
    async def test_resolve_never_matches_other_path(self, registry):
        for i in range(100):
            await registry.put(f'/p{i}', AccessPolicy.PUBLIC)
        for i in range(100):
            path, _ = await registry.resolve(derive_share_id(f'/p{i}'))
            assert path == f'/p{i}'

    @pytest.mark.asyncio
    async def test_items(self, registry):
        await registry.put('/a', AccessPolicy.PUBLIC)
        await registry.put('/b', AccessPolicy.PRIVATE)
        assert sorted(await registry.items()) == [
            ('/a', AccessPolicy.PUBLIC),
            ('/b', AccessPolicy.PRIVATE),
        ]

    @pytest.mark.asyncio
    async def test_collision_resolves_to_first_shared(self, registry, monkeypatch):
        monkeypatch.setattr(
            'file_explorer.api.modules.sharing.model.derive_share_id',
            lambda path: 'same',
        )
        await registry.put('/first', AccessPolicy.PRIVATE)
        await registry.put('/second', AccessPolicy.PUBLIC)
        assert await registry.resolve('same') == ('/first', AccessPolicy.PRIVATE)
        await registry.remove('/first')
        assert await registry.resolve('same') == ('/second', AccessPolicy.PUBLIC)


# =====================================================================
# Share service
# =====================================================================


class TestShareService:

    @pytest.mark.asyncio
    async def test_share_returns_link_with_id(self, shares):
        link = await shares.share('/home/a.txt', AccessPolicy.PUBLIC)
        assert link == f'/shared/{derive_share_id("/home/a.txt")}'

    @pytest.mark.asyncio
    async def test_link_prefix(self, registry):
        service = ShareService(registry, link_prefix='/explorer:file-explorer:sys')
        link = await service.share('/home/a.txt', AccessPolicy.PUBLIC)
        assert link == f'/explorer:file-explorer:sys/shared/{derive_share_id("/home/a.txt")}'

    @pytest.mark.asyncio
    async def test_lookup_after_share(self, shares):
        await shares.share('/home/a.txt', AccessPolicy.PUBLIC)
        link = await shares.lookup_link('/home/a.txt')
        assert link is not None
        assert derive_share_id('/home/a.txt') in link

    @pytest.mark.asyncio
    async def test_lookup_after_unshare(self, shares):
        await shares.share('/home/a.txt', AccessPolicy.PUBLIC)
        assert await shares.unshare('/home/a.txt') is True
        assert await shares.lookup_link('/home/a.txt') is None

    @pytest.mark.asyncio
    async def test_unshare_unknown(self, shares):
        assert await shares.unshare('/never') is False

    @pytest.mark.asyncio
    async def test_reshare_keeps_link_and_replaces_policy(self, shares, registry):
        first = await shares.share('/home/a.txt', AccessPolicy.PUBLIC)
        second = await shares.share('/home/a.txt', AccessPolicy.PRIVATE)
        assert first == second
        assert await registry.get('/home/a.txt') == AccessPolicy.PRIVATE

    @pytest.mark.asyncio
    async def test_list_shares(self, shares):
        await shares.share('/home/a.txt', AccessPolicy.PUBLIC)
        listed = await shares.list_shares()
        assert listed == [{
            'path': '/home/a.txt',
            'policy': 'Public',
            'link': f'/shared/{derive_share_id("/home/a.txt")}',
        }]
