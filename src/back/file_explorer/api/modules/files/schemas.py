"""Pydantic schemas for file operations."""
from pydantic import BaseModel

DEFAULT_PERMISSIONS = 'rw'


class FileEntry(BaseModel):
    """One row of a directory listing or the result of a write.

    ``size_bytes`` is the exact byte length for files. For directories it
    depends on where the entry came from: a first-level directory in a
    listing carries its immediate child count, a second-level directory
    carries 0, and a freshly created directory carries 0.
    """
    name: str
    path: str
    size_bytes: int
    created: int = 0
    modified: int = 0
    is_directory: bool
    permissions: str = DEFAULT_PERMISSIONS


class MoveRequest(BaseModel):
    """Request body for file move and copy."""
    source: str
    destination: str


class CurrentDirectory(BaseModel):
    """Request/response body for the current directory."""
    path: str
