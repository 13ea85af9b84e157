"""Share management and public share access routes.

  POST   /api/shares              -> share a path, returns its link
  DELETE /api/shares?path=        -> revoke
  GET    /api/shares/link?path=   -> link if shared, else null
  GET    /api/shares              -> every current share
  GET    /shared/{share_id}       -> anonymous download (public shares only;
                                     every subpath goes through the gateway)
"""

from __future__ import annotations

from fastapi import APIRouter
from fastapi.responses import Response
from pydantic import BaseModel, Field

from .gateway import ShareGateway
from .model import AccessPolicy
from .service import SHARED_PREFIX, ShareService


class ShareRequest(BaseModel):
    """Request body for sharing a path."""

    path: str = Field(..., min_length=1, description='Absolute store path')
    policy: AccessPolicy = Field(default=AccessPolicy.PUBLIC, description='Public or Private')


def create_share_router(shares: ShareService) -> APIRouter:
    """Create the authenticated share-management router."""
    router = APIRouter(tags=['shares'])

    @router.post('/shares', status_code=201)
    async def share_file(body: ShareRequest):
        link = await shares.share(body.path, body.policy)
        return {'path': body.path, 'policy': body.policy.value, 'link': link}

    @router.delete('/shares')
    async def unshare_file(path: str):
        return {'removed': await shares.unshare(path), 'path': path}

    @router.get('/shares/link')
    async def get_share_link(path: str):
        return {'path': path, 'link': await shares.lookup_link(path)}

    @router.get('/shares')
    async def list_shares():
        return {'shares': await shares.list_shares()}

    return router


def create_shared_access_router(gateway: ShareGateway) -> APIRouter:
    """Create the unauthenticated ``/shared/{share_id}`` router."""
    router = APIRouter(tags=['share-access'])

    @router.get(SHARED_PREFIX + '{share_id:path}')
    async def serve_shared_file(share_id: str):
        shared = await gateway.serve(f'{SHARED_PREFIX}{share_id}')
        return Response(content=shared.content, headers=shared.headers)

    return router
