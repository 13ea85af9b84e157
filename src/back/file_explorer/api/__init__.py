"""FastAPI routers and services for the file-explorer backend.

Example:
    # Simple usage with create_app()
    from file_explorer.api import create_app
    app = create_app()

    # Compose routers manually
    from fastapi import FastAPI
    from file_explorer.api import (
        FileService, InMemoryStore, ShareService, WorkspaceState,
        create_file_router, create_share_router,
    )
    store = InMemoryStore()
    state = WorkspaceState()
    app = FastAPI()
    app.include_router(create_file_router(FileService(store), state), prefix='/api')
    app.include_router(create_share_router(ShareService(state.shares)), prefix='/api')
"""

# Configuration
from .config import ExplorerConfig, StoreBackend

# Errors
from .errors import (
    AccessDeniedError,
    BackendReadError,
    BackendWriteError,
    ErrorCategory,
    ExplorerError,
    MalformedRequestError,
    NotFoundError,
)

# Storage
from .storage import (
    FileType,
    InMemoryStore,
    LocalStore,
    Store,
    StoreEntry,
    StoreError,
    StoreMetadata,
    StoreNotFound,
    StoreTimeout,
    build_store,
)

# State
from .state import WorkspaceState

# Modules
from .modules.files import DirectoryExplorer, FileEntry, FileService, create_file_router
from .modules.sharing import (
    AccessPolicy,
    InMemoryShareRegistry,
    ShareGateway,
    ShareRegistry,
    ShareService,
    SharedFile,
    create_share_router,
    create_shared_access_router,
    derive_share_id,
)

# App factory
from .app import create_app

__all__ = [
    'AccessDeniedError',
    'AccessPolicy',
    'BackendReadError',
    'BackendWriteError',
    'DirectoryExplorer',
    'ErrorCategory',
    'ExplorerConfig',
    'ExplorerError',
    'FileEntry',
    'FileService',
    'FileType',
    'InMemoryShareRegistry',
    'InMemoryStore',
    'LocalStore',
    'MalformedRequestError',
    'NotFoundError',
    'ShareGateway',
    'ShareRegistry',
    'ShareService',
    'SharedFile',
    'Store',
    'StoreBackend',
    'StoreEntry',
    'StoreError',
    'StoreMetadata',
    'StoreNotFound',
    'StoreTimeout',
    'WorkspaceState',
    'build_store',
    'create_app',
    'create_file_router',
    'create_share_router',
    'create_shared_access_router',
    'derive_share_id',
]
