"""Configuration for the file-explorer API."""
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

DEFAULT_STORE_TIMEOUT = 5.0  # seconds, applied to every store call
DEFAULT_PACKAGE_ID = 'file-explorer:sys'
DEFAULT_HOME_DRIVE = 'home'


class StoreBackend(str, Enum):
    """Store implementation backing the explorer.

    - LOCAL: Directory on the local filesystem (STORE_ROOT)
    - MEMORY: Process-local tree, lost on restart (dev/tests)
    """
    LOCAL = 'local'
    MEMORY = 'memory'

    @classmethod
    def from_env(cls) -> 'StoreBackend':
        """Get store backend from STORE_BACKEND env var.

        Defaults to LOCAL if not specified.
        Case-insensitive.
        """
        backend_str = os.environ.get('STORE_BACKEND', 'local').lower()
        try:
            return cls(backend_str)
        except ValueError:
            raise ValueError(
                f"Invalid STORE_BACKEND='{backend_str}'. "
                f"Must be one of: {', '.join(b.value for b in cls)}"
            )


def _default_store_root() -> Path:
    return Path(os.environ.get('STORE_ROOT', Path.cwd() / '.file-explorer'))


def _default_store_timeout() -> float:
    raw = os.environ.get('STORE_TIMEOUT_SECONDS', '').strip()
    if not raw:
        return DEFAULT_STORE_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"Invalid STORE_TIMEOUT_SECONDS='{raw}'. Must be a number.")
    if timeout <= 0:
        raise ValueError(f"Invalid STORE_TIMEOUT_SECONDS='{raw}'. Must be positive.")
    return timeout


@dataclass
class ExplorerConfig:
    """Central configuration for the explorer routers and store.

    This dataclass is passed to the create_*_router() factories and to
    build_store(), avoiding global state.

    Issued share links are ``<share_link_prefix>/shared/<share_id>``. When
    the app is mounted below a path (e.g. behind a reverse proxy at
    ``/explorer:file-explorer:sys``), SHARE_LINK_PREFIX must be set to that
    mount, or links will point at the proxy root.
    """
    store_backend: StoreBackend = field(default_factory=StoreBackend.from_env)
    store_root: Path = field(default_factory=_default_store_root)
    store_timeout: float = field(default_factory=_default_store_timeout)

    # The home drive lives at /<package_id>/<home_drive> and becomes the
    # initial current directory.
    package_id: str = field(default_factory=lambda: os.environ.get('PACKAGE_ID', DEFAULT_PACKAGE_ID))
    home_drive: str = field(default_factory=lambda: os.environ.get('HOME_DRIVE', DEFAULT_HOME_DRIVE))

    # Prepended to /shared/<share_id> in issued links, e.g. a reverse-proxy mount.
    share_link_prefix: str = field(default_factory=lambda: os.environ.get('SHARE_LINK_PREFIX', ''))

    host: str = field(default_factory=lambda: os.environ.get('FILE_EXPLORER_HOST', '127.0.0.1'))
    port: int = field(default_factory=lambda: int(os.environ.get('FILE_EXPLORER_PORT', '8080')))

    @property
    def home_path(self) -> str:
        return f'/{self.package_id}/{self.home_drive}'

    def validate_startup(self) -> None:
        """Validate configuration at startup.

        Raises:
            ValueError: If the configuration cannot produce a working store.
        """
        problems = []
        if self.store_timeout <= 0:
            problems.append(f'store_timeout must be positive, got {self.store_timeout}')
        if not self.package_id or '/' in self.package_id:
            problems.append(f'package_id must be a single path segment, got {self.package_id!r}')
        if not self.home_drive or '/' in self.home_drive:
            problems.append(f'home_drive must be a single path segment, got {self.home_drive!r}')
        if self.share_link_prefix.endswith('/'):
            problems.append('share_link_prefix must not end with "/"')
        if problems:
            raise ValueError(
                'Startup validation failed:\n' + '\n'.join(f'  - {p}' for p in problems)
            )
