"""Files module for the file-explorer API.

Provides bounded directory listing and file CRUD over a store.
"""
from .explorer import DirectoryExplorer, MAX_DEPTH
from .router import create_file_router
from .schemas import CurrentDirectory, FileEntry, MoveRequest
from .service import FileService

__all__ = [
    'CurrentDirectory',
    'DirectoryExplorer',
    'FileEntry',
    'FileService',
    'MAX_DEPTH',
    'MoveRequest',
    'create_file_router',
]
