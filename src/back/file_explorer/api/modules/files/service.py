"""File operations service for the file-explorer API."""
from __future__ import annotations

from ....observability.logging import get_logger
from ...errors import BackendReadError, BackendWriteError, ExplorerError, NotFoundError
from ...storage import Store, StoreError, StoreNotFound
from .explorer import DirectoryExplorer, entry_name
from .schemas import FileEntry

logger = get_logger(__name__)


def _read_error(message: str, error: StoreError) -> ExplorerError:
    if isinstance(error, StoreNotFound):
        return NotFoundError(f'{message}: {error}')
    return BackendReadError(f'{message}: {error}')


def _write_error(message: str, error: StoreError) -> ExplorerError:
    if isinstance(error, StoreNotFound):
        return NotFoundError(f'{message}: {error}')
    return BackendWriteError(f'{message}: {error}')


class FileService:
    """Service class for file operations.

    Every operation is composed from store primitives. Store failures are
    re-raised as ``ExplorerError`` with a message naming the failed step.
    ``move`` and ``copy`` are multi-step and not atomic: a failure in a
    later step leaves earlier steps committed.
    """

    def __init__(self, store: Store):
        """Initialize the file service.

        Args:
            store: Store backend
        """
        self.store = store
        self.explorer = DirectoryExplorer(store)

    async def list_directory(self, path: str) -> list[FileEntry]:
        return await self.explorer.list(path)

    async def _written_entry(self, path: str) -> FileEntry:
        try:
            meta = await self.store.metadata(path)
        except StoreError as e:
            raise _read_error('Failed to get metadata', e) from e
        return FileEntry(
            name=entry_name(path),
            path=path,
            size_bytes=meta.len,
            created=meta.created,
            modified=meta.modified,
            is_directory=False,
        )

    async def create_file(self, path: str, content: bytes) -> FileEntry:
        """Create (or truncate) a file and write all of ``content`` in one call.

        Raises:
            NotFoundError: The parent directory does not exist.
            BackendWriteError: The store rejected the create or the write.
        """
        logger.info('create_file', path=path, size=len(content))
        try:
            await self.store.create_file(path)
        except StoreError as e:
            raise _write_error('Failed to create file', e) from e
        try:
            await self.store.write_file(path, content)
        except StoreError as e:
            raise _write_error('Failed to write file', e) from e
        return await self._written_entry(path)

    async def read_file(self, path: str) -> bytes:
        """Return the bytes of an existing file.

        Raises:
            NotFoundError: The file does not exist.
            BackendReadError: The store failed to open or read it.
        """
        logger.info('read_file', path=path)
        try:
            await self.store.open_file(path, create=False)
        except StoreError as e:
            raise _read_error('Failed to open file', e) from e
        try:
            return await self.store.read_file(path)
        except StoreError as e:
            raise _read_error('Failed to read file', e) from e

    async def update_file(self, path: str, content: bytes) -> FileEntry:
        """Overwrite the full content of an existing file."""
        logger.info('update_file', path=path, size=len(content))
        try:
            await self.store.open_file(path, create=False)
        except StoreError as e:
            raise _read_error('Failed to open file', e) from e
        try:
            await self.store.write_file(path, content)
        except StoreError as e:
            raise _write_error('Failed to write file', e) from e
        return await self._written_entry(path)

    async def delete_file(self, path: str) -> bool:
        """Remove a single file. Directories are refused."""
        logger.info('delete_file', path=path)
        try:
            await self.store.remove_file(path)
        except StoreError as e:
            raise _write_error('Failed to delete file', e) from e
        return True

    async def create_directory(self, path: str) -> FileEntry:
        """Open-or-create a directory. Idempotent."""
        logger.info('create_directory', path=path)
        try:
            await self.store.open_dir(path, create=True)
        except StoreError as e:
            raise _write_error('Failed to create directory', e) from e
        return FileEntry(
            name=entry_name(path),
            path=path,
            size_bytes=0,
            is_directory=True,
        )

    async def delete_directory(self, path: str) -> bool:
        """Remove a directory and all of its descendants in one store call."""
        logger.info('delete_directory', path=path)
        try:
            await self.store.remove_dir_all(path)
        except StoreError as e:
            raise _write_error('Failed to delete directory', e) from e
        return True

    async def upload_file(self, dir_path: str, filename: str, content: bytes) -> FileEntry:
        return await self.create_file(f'{dir_path}/{filename}', content)

    async def move_file(self, source: str, destination: str) -> FileEntry:
        """Read ``source``, create ``destination``, then delete ``source``.

        Not atomic. If the final delete fails the file exists at both paths
        and the delete error is still raised.
        """
        logger.info('move_file', source=source, destination=destination)
        content = await self.read_file(source)
        entry = await self.create_file(destination, content)
        try:
            await self.delete_file(source)
        except ExplorerError:
            logger.warning('move_file_source_left_behind', source=source, destination=destination)
            raise
        return entry

    async def copy_file(self, source: str, destination: str) -> FileEntry:
        """Read ``source`` and create ``destination`` with the same bytes."""
        logger.info('copy_file', source=source, destination=destination)
        content = await self.read_file(source)
        return await self.create_file(destination, content)
