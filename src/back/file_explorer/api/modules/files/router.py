"""File operation routes for the file-explorer API."""
from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Query, Request
from fastapi.responses import Response

from .schemas import CurrentDirectory, FileEntry, MoveRequest
from .service import FileService

if TYPE_CHECKING:
    from ...state import WorkspaceState


def create_file_router(service: FileService, state: WorkspaceState) -> APIRouter:
    """Create file operations router.

    File bodies travel as raw request/response bytes.

    Args:
        service: File operations service
        state: Process-wide state holding the current directory

    Returns:
        Configured APIRouter with file endpoints
    """
    router = APIRouter(tags=['files'])

    @router.get('/list', response_model=list[FileEntry])
    async def list_directory(path: str = Query('/', description='Directory to list')):
        """List a directory and one level below each subdirectory."""
        return await service.list_directory(path)

    @router.post('/files', response_model=FileEntry, status_code=201)
    async def create_file(request: Request, path: str):
        """Create a file from the raw request body."""
        return await service.create_file(path, await request.body())

    @router.get('/files')
    async def read_file(path: str):
        """Return raw file bytes."""
        content = await service.read_file(path)
        return Response(content=content, media_type='application/octet-stream')

    @router.put('/files', response_model=FileEntry)
    async def update_file(request: Request, path: str):
        """Overwrite an existing file with the raw request body."""
        return await service.update_file(path, await request.body())

    @router.delete('/files')
    async def delete_file(path: str):
        return {'success': await service.delete_file(path), 'path': path}

    @router.post('/directories', response_model=FileEntry, status_code=201)
    async def create_directory(path: str):
        return await service.create_directory(path)

    @router.delete('/directories')
    async def delete_directory(path: str):
        """Delete a directory and everything below it."""
        return {'success': await service.delete_directory(path), 'path': path}

    @router.post('/upload', response_model=FileEntry, status_code=201)
    async def upload_file(
        request: Request,
        dir_path: str = Query(..., alias='dir', description='Target directory'),
        name: str = Query(..., min_length=1, description='File name'),
    ):
        return await service.upload_file(dir_path, name, await request.body())

    @router.post('/move', response_model=FileEntry)
    async def move_file(body: MoveRequest):
        """Move a file. Not atomic: on a late failure both paths may exist."""
        return await service.move_file(body.source, body.destination)

    @router.post('/copy', response_model=FileEntry)
    async def copy_file(body: MoveRequest):
        return await service.copy_file(body.source, body.destination)

    @router.get('/cwd', response_model=CurrentDirectory)
    async def get_current_directory():
        return CurrentDirectory(path=state.get_current_directory())

    @router.put('/cwd', response_model=CurrentDirectory)
    async def set_current_directory(body: CurrentDirectory):
        return CurrentDirectory(path=state.set_current_directory(body.path))

    return router
