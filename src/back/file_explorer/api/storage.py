"""Store adapters: the hierarchical storage backend the explorer sits on.

All paths are absolute POSIX strings (``/file-explorer:sys/home/a.txt``).
Every public call is bounded by the store's timeout; a timeout raises
``StoreTimeout`` and the underlying work is not cancelled.
"""
from __future__ import annotations

import asyncio
import posixpath
import shutil
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable

from ..observability.logging import get_logger
from ..observability.metrics import STORE_CALLS_TOTAL
from .config import DEFAULT_STORE_TIMEOUT, ExplorerConfig, StoreBackend

logger = get_logger(__name__)


class FileType(str, Enum):
    FILE = 'file'
    DIRECTORY = 'directory'


@dataclass(frozen=True)
class StoreEntry:
    """An immediate child returned by ``Store.read_dir``."""
    path: str
    file_type: FileType

    @property
    def is_dir(self) -> bool:
        return self.file_type == FileType.DIRECTORY

    @property
    def name(self) -> str:
        return self.path.rstrip('/').split('/')[-1]


@dataclass(frozen=True)
class StoreMetadata:
    len: int
    file_type: FileType
    created: int = 0
    modified: int = 0


class StoreError(Exception):
    """Generic store failure."""


class StoreNotFound(StoreError):
    """The addressed file or directory does not exist."""


class StoreTimeout(StoreError):
    """The store did not answer within the call timeout."""


def normalize_store_path(path: str) -> str:
    """Normalize a store path to absolute form.

    Raises:
        StoreError: If the path contains parent-directory references.
    """
    if '..' in path.split('/'):
        raise StoreError(f'Path traversal not allowed: {path}')
    if '\x00' in path:
        raise StoreError('Null bytes not allowed in path')
    normalized = posixpath.normpath('/' + path.strip('/'))
    # normpath keeps a leading '//' as-is
    return '/' + normalized.lstrip('/')


def _parent(path: str) -> str:
    return posixpath.dirname(path) or '/'


class Store(ABC):
    """Abstract store interface.

    Subclasses implement the underscored primitives; the public methods
    normalize paths, apply the per-call timeout and record metrics.
    """

    def __init__(self, timeout: float = DEFAULT_STORE_TIMEOUT) -> None:
        self.timeout = timeout

    async def _call(self, operation: str, path: str, work: Awaitable[Any]) -> Any:
        try:
            result = await asyncio.wait_for(work, timeout=self.timeout)
        except asyncio.TimeoutError:
            STORE_CALLS_TOTAL.labels(operation=operation, outcome='timeout').inc()
            logger.warning('store_timeout', operation=operation, path=path, timeout=self.timeout)
            raise StoreTimeout(f'{operation} timed out after {self.timeout}s: {path}')
        except StoreError:
            STORE_CALLS_TOTAL.labels(operation=operation, outcome='error').inc()
            raise
        except OSError as e:
            STORE_CALLS_TOTAL.labels(operation=operation, outcome='error').inc()
            raise StoreError(f'{operation} failed for {path}: {e.strerror or e}') from e
        STORE_CALLS_TOTAL.labels(operation=operation, outcome='ok').inc()
        return result

    async def create_file(self, path: str) -> None:
        """Create a file, truncating it if it already exists."""
        path = normalize_store_path(path)
        await self._call('create_file', path, self._create_file(path))

    async def open_file(self, path: str, create: bool = False) -> None:
        """Check that a file exists, creating an empty one if ``create``."""
        path = normalize_store_path(path)
        await self._call('open_file', path, self._open_file(path, create))

    async def read_file(self, path: str) -> bytes:
        path = normalize_store_path(path)
        return await self._call('read_file', path, self._read_file(path))

    async def write_file(self, path: str, content: bytes) -> None:
        """Replace the full content of an existing file."""
        path = normalize_store_path(path)
        await self._call('write_file', path, self._write_file(path, content))

    async def metadata(self, path: str) -> StoreMetadata:
        path = normalize_store_path(path)
        return await self._call('metadata', path, self._metadata(path))

    async def remove_file(self, path: str) -> None:
        path = normalize_store_path(path)
        await self._call('remove_file', path, self._remove_file(path))

    async def open_dir(self, path: str, create: bool = False) -> None:
        """Check that a directory exists, creating it (and parents) if ``create``."""
        path = normalize_store_path(path)
        await self._call('open_dir', path, self._open_dir(path, create))

    async def read_dir(self, path: str) -> list[StoreEntry]:
        """Return the immediate children of a directory."""
        path = normalize_store_path(path)
        return await self._call('read_dir', path, self._read_dir(path))

    async def remove_dir_all(self, path: str) -> None:
        """Remove a directory and every descendant in a single call."""
        path = normalize_store_path(path)
        await self._call('remove_dir_all', path, self._remove_dir_all(path))

    async def create_drive(self, package_id: str, drive: str) -> str:
        """Create the drive directory ``/<package_id>/<drive>`` and return its path."""
        path = normalize_store_path(f'/{package_id}/{drive}')
        await self.open_dir(path, create=True)
        return path

    @abstractmethod
    async def _create_file(self, path: str) -> None: ...

    @abstractmethod
    async def _open_file(self, path: str, create: bool) -> None: ...

    @abstractmethod
    async def _read_file(self, path: str) -> bytes: ...

    @abstractmethod
    async def _write_file(self, path: str, content: bytes) -> None: ...

    @abstractmethod
    async def _metadata(self, path: str) -> StoreMetadata: ...

    @abstractmethod
    async def _remove_file(self, path: str) -> None: ...

    @abstractmethod
    async def _open_dir(self, path: str, create: bool) -> None: ...

    @abstractmethod
    async def _read_dir(self, path: str) -> list[StoreEntry]: ...

    @abstractmethod
    async def _remove_dir_all(self, path: str) -> None: ...


class LocalStore(Store):
    """Store backed by a directory on the local filesystem.

    Blocking I/O runs in a worker thread so a timed-out call keeps running
    to completion in the background.
    """

    def __init__(self, root: Path, timeout: float = DEFAULT_STORE_TIMEOUT):
        """Initialize with the directory that maps to store path ``/``.

        Args:
            root: The root directory for all store paths
            timeout: Per-call timeout in seconds
        """
        super().__init__(timeout)
        self.root = Path(root).resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def _abs(self, path: str) -> Path:
        """Convert a store path to an absolute local path, validating it's within root.

        Raises:
            StoreError: If path escapes the root directory
        """
        resolved = (self.root / path.lstrip('/')).resolve()
        if self.root not in resolved.parents and resolved != self.root:
            raise StoreError(f'Path outside of store root: {path}')
        return resolved

    def _store_path(self, local: Path) -> str:
        return '/' + local.relative_to(self.root).as_posix()

    def _existing_file(self, path: str) -> Path:
        p = self._abs(path)
        if not p.exists():
            raise StoreNotFound(f'No such file: {path}')
        if p.is_dir():
            raise StoreError(f'Is a directory: {path}')
        return p

    def _existing_dir(self, path: str) -> Path:
        p = self._abs(path)
        if not p.exists():
            raise StoreNotFound(f'No such directory: {path}')
        if not p.is_dir():
            raise StoreError(f'Not a directory: {path}')
        return p

    async def _create_file(self, path: str) -> None:
        def work():
            p = self._abs(path)
            if not p.parent.is_dir():
                raise StoreNotFound(f'Parent directory does not exist: {_parent(path)}')
            if p.is_dir():
                raise StoreError(f'Is a directory: {path}')
            p.write_bytes(b'')
        await asyncio.to_thread(work)

    async def _open_file(self, path: str, create: bool) -> None:
        def work():
            p = self._abs(path)
            if create and not p.exists():
                if not p.parent.is_dir():
                    raise StoreNotFound(f'Parent directory does not exist: {_parent(path)}')
                p.touch()
            self._existing_file(path)
        await asyncio.to_thread(work)

    async def _read_file(self, path: str) -> bytes:
        return await asyncio.to_thread(lambda: self._existing_file(path).read_bytes())

    async def _write_file(self, path: str, content: bytes) -> None:
        await asyncio.to_thread(lambda: self._existing_file(path).write_bytes(content))

    async def _metadata(self, path: str) -> StoreMetadata:
        def work():
            p = self._abs(path)
            if not p.exists():
                raise StoreNotFound(f'No such file or directory: {path}')
            st = p.stat()
            return StoreMetadata(
                len=0 if p.is_dir() else st.st_size,
                file_type=FileType.DIRECTORY if p.is_dir() else FileType.FILE,
                created=int(st.st_ctime),
                modified=int(st.st_mtime),
            )
        return await asyncio.to_thread(work)

    async def _remove_file(self, path: str) -> None:
        await asyncio.to_thread(lambda: self._existing_file(path).unlink())

    async def _open_dir(self, path: str, create: bool) -> None:
        def work():
            p = self._abs(path)
            if create:
                if p.exists() and not p.is_dir():
                    raise StoreError(f'Not a directory: {path}')
                p.mkdir(parents=True, exist_ok=True)
            self._existing_dir(path)
        await asyncio.to_thread(work)

    async def _read_dir(self, path: str) -> list[StoreEntry]:
        def work():
            base = self._existing_dir(path)
            return [
                StoreEntry(
                    path=self._store_path(child),
                    file_type=FileType.DIRECTORY if child.is_dir() else FileType.FILE,
                )
                for child in sorted(base.iterdir(), key=lambda c: c.name)
            ]
        return await asyncio.to_thread(work)

    async def _remove_dir_all(self, path: str) -> None:
        def work():
            p = self._existing_dir(path)
            if p == self.root:
                raise StoreError('Refusing to remove the store root')
            shutil.rmtree(p)
        await asyncio.to_thread(work)


@dataclass
class _Node:
    file_type: FileType
    content: bytes = b''
    created: int = field(default_factory=lambda: int(time.time()))
    modified: int = field(default_factory=lambda: int(time.time()))


class InMemoryStore(Store):
    """Simple in-memory store for development and testing.

    Children are listed in insertion order. ``fail`` and ``stall`` inject
    faults for a given operation on a given path.
    """

    def __init__(self, timeout: float = DEFAULT_STORE_TIMEOUT) -> None:
        super().__init__(timeout)
        self._nodes: dict[str, _Node] = {'/': _Node(FileType.DIRECTORY)}
        self._faults: dict[tuple[str, str], StoreError] = {}
        self._stalls: dict[tuple[str, str], float] = {}

    # ── Fault injection ──

    def fail(self, operation: str, path: str, error: StoreError | None = None) -> None:
        """Make every ``operation`` call on ``path`` raise ``error``."""
        key = (operation, normalize_store_path(path))
        self._faults[key] = error or StoreError(f'Injected {operation} failure: {key[1]}')

    def stall(self, operation: str, path: str, seconds: float) -> None:
        """Delay every ``operation`` call on ``path`` by ``seconds``."""
        self._stalls[(operation, normalize_store_path(path))] = seconds

    def clear_faults(self) -> None:
        self._faults.clear()
        self._stalls.clear()

    async def _enter(self, operation: str, path: str) -> None:
        delay = self._stalls.get((operation, path))
        if delay:
            await asyncio.sleep(delay)
        error = self._faults.get((operation, path))
        if error is not None:
            raise error

    # ── Node helpers ──

    def _file(self, path: str) -> _Node:
        node = self._nodes.get(path)
        if node is None:
            raise StoreNotFound(f'No such file: {path}')
        if node.file_type == FileType.DIRECTORY:
            raise StoreError(f'Is a directory: {path}')
        return node

    def _dir(self, path: str) -> _Node:
        node = self._nodes.get(path)
        if node is None:
            raise StoreNotFound(f'No such directory: {path}')
        if node.file_type != FileType.DIRECTORY:
            raise StoreError(f'Not a directory: {path}')
        return node

    def _require_parent(self, path: str) -> None:
        parent = self._nodes.get(_parent(path))
        if parent is None or parent.file_type != FileType.DIRECTORY:
            raise StoreNotFound(f'Parent directory does not exist: {_parent(path)}')

    # ── Primitives ──

    async def _create_file(self, path: str) -> None:
        await self._enter('create_file', path)
        self._require_parent(path)
        existing = self._nodes.get(path)
        if existing is not None and existing.file_type == FileType.DIRECTORY:
            raise StoreError(f'Is a directory: {path}')
        self._nodes[path] = _Node(FileType.FILE)

    async def _open_file(self, path: str, create: bool) -> None:
        await self._enter('open_file', path)
        if create and path not in self._nodes:
            self._require_parent(path)
            self._nodes[path] = _Node(FileType.FILE)
        self._file(path)

    async def _read_file(self, path: str) -> bytes:
        await self._enter('read_file', path)
        return self._file(path).content

    async def _write_file(self, path: str, content: bytes) -> None:
        await self._enter('write_file', path)
        node = self._file(path)
        node.content = bytes(content)
        node.modified = int(time.time())

    async def _metadata(self, path: str) -> StoreMetadata:
        await self._enter('metadata', path)
        node = self._nodes.get(path)
        if node is None:
            raise StoreNotFound(f'No such file or directory: {path}')
        return StoreMetadata(
            len=len(node.content),
            file_type=node.file_type,
            created=node.created,
            modified=node.modified,
        )

    async def _remove_file(self, path: str) -> None:
        await self._enter('remove_file', path)
        self._file(path)
        del self._nodes[path]

    async def _open_dir(self, path: str, create: bool) -> None:
        await self._enter('open_dir', path)
        if create:
            # Create missing ancestors top-down.
            current = ''
            for segment in path.strip('/').split('/'):
                if not segment:
                    continue
                current = f'{current}/{segment}'
                node = self._nodes.get(current)
                if node is None:
                    self._nodes[current] = _Node(FileType.DIRECTORY)
                elif node.file_type != FileType.DIRECTORY:
                    raise StoreError(f'Not a directory: {current}')
        self._dir(path)

    async def _read_dir(self, path: str) -> list[StoreEntry]:
        await self._enter('read_dir', path)
        self._dir(path)
        return [
            StoreEntry(path=p, file_type=node.file_type)
            for p, node in self._nodes.items()
            if p != '/' and _parent(p) == path
        ]

    async def _remove_dir_all(self, path: str) -> None:
        await self._enter('remove_dir_all', path)
        self._dir(path)
        if path == '/':
            raise StoreError('Refusing to remove the store root')
        prefix = path + '/'
        for p in [p for p in self._nodes if p == path or p.startswith(prefix)]:
            del self._nodes[p]


def build_store(config: ExplorerConfig) -> Store:
    """Create the store selected by ``config.store_backend``."""
    if config.store_backend == StoreBackend.MEMORY:
        return InMemoryStore(timeout=config.store_timeout)
    return LocalStore(config.store_root, timeout=config.store_timeout)
