"""Bounded two-level directory listing.

Flattens the subtree under a listing root into a single list without ever
reading deeper than two levels:

  depth 1 (children of the root):
    - file      -> exact byte size
    - directory -> size is its immediate child count, then expand once
  depth 2 (children of a depth-1 directory):
    - file      -> exact byte size
    - directory -> size 0, never read

Degradation:
  - A read failure on the root fails the whole listing.
  - A read failure on a depth-1 directory is swallowed: its child count
    is reported as 0 and listing continues with its siblings.
  - A metadata failure on a depth-2 file drops that entry.
"""
from __future__ import annotations

from ....observability.logging import get_logger
from ...errors import BackendReadError, NotFoundError
from ...storage import Store, StoreEntry, StoreError, StoreNotFound
from .schemas import FileEntry

logger = get_logger(__name__)

MAX_DEPTH = 2


def entry_name(path: str) -> str:
    """Last path segment ('' for the root)."""
    return path.split('/')[-1]


def _directory_entry(path: str, size: int) -> FileEntry:
    return FileEntry(
        name=entry_name(path),
        path=path,
        size_bytes=size,
        is_directory=True,
    )


class DirectoryExplorer:
    """Produces depth-bounded listings from a store."""

    def __init__(self, store: Store):
        self.store = store

    async def list(self, root_path: str) -> list[FileEntry]:
        """List ``root_path`` and one further level below each subdirectory.

        Raises:
            NotFoundError: The root does not exist.
            BackendReadError: The root could not be read, or a depth-1
                file's metadata could not be fetched.
        """
        root = root_path or '/'
        logger.info('list_directory', path=root)

        try:
            children = await self.store.read_dir(root)
        except StoreNotFound as e:
            raise NotFoundError(f"Failed to read directory '{root}': {e}") from e
        except StoreError as e:
            raise BackendReadError(f"Failed to read directory '{root}': {e}") from e

        logger.debug('list_directory_children', path=root, count=len(children))

        entries: list[FileEntry] = []
        for child in children:
            if not child.is_dir:
                entries.append(await self._file_entry(child, depth=1))
                continue

            grandchildren = await self._read_subdirectory(child.path)
            entries.append(_directory_entry(child.path, len(grandchildren)))

            for grandchild in grandchildren:
                if grandchild.is_dir:
                    # Depth limit: never read below this level.
                    entries.append(_directory_entry(grandchild.path, 0))
                    continue
                try:
                    entries.append(await self._file_entry(grandchild, depth=MAX_DEPTH))
                except BackendReadError as e:
                    logger.warning('list_directory_entry_skipped', path=grandchild.path, error=str(e))

        logger.debug('list_directory_done', path=root, total=len(entries))
        return entries

    async def _read_subdirectory(self, path: str) -> list[StoreEntry]:
        try:
            return await self.store.read_dir(path)
        except StoreError as e:
            logger.warning('list_subdirectory_failed', path=path, error=str(e))
            return []

    async def _file_entry(self, entry: StoreEntry, depth: int) -> FileEntry:
        try:
            meta = await self.store.metadata(entry.path)
        except StoreError as e:
            raise BackendReadError(f"Failed to get metadata for '{entry.path}': {e}") from e
        logger.debug('list_directory_file', path=entry.path, depth=depth, size=meta.len)
        return FileEntry(
            name=entry_name(entry.path),
            path=entry.path,
            size_bytes=meta.len,
            created=meta.created,
            modified=meta.modified,
            is_directory=False,
        )
