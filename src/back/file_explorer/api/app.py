"""Application factory for the file-explorer API.

Example:
    from file_explorer.api import create_app
    app = create_app()

    # Custom store
    from file_explorer.api import ExplorerConfig, InMemoryStore, create_app
    app = create_app(ExplorerConfig(), store=InMemoryStore())
"""
from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from ..observability.logging import configure_logging, get_logger
from ..observability.metrics import metrics_text
from ..observability.middleware import (
    MetricsMiddleware,
    RequestIdMiddleware,
    RequestLoggingMiddleware,
)
from .config import ExplorerConfig
from .errors import ExplorerError
from .modules.files import FileService, create_file_router
from .modules.sharing import (
    ShareGateway,
    ShareService,
    create_share_router,
    create_shared_access_router,
)
from .state import WorkspaceState
from .storage import Store, StoreError, build_store

logger = get_logger(__name__)


async def init_home_drive(config: ExplorerConfig, store: Store, state: WorkspaceState) -> None:
    """Create the home drive and make it the current directory.

    Falls back to ``/`` when the drive cannot be created.
    """
    try:
        home = await store.create_drive(config.package_id, config.home_drive)
    except StoreError as e:
        logger.error('home_drive_failed', error=str(e), fallback='/')
        state.cwd = '/'
        return
    logger.info('home_drive_ready', path=home)
    state.cwd = home


def create_app(
    config: ExplorerConfig | None = None,
    store: Store | None = None,
    state: WorkspaceState | None = None,
) -> FastAPI:
    """Create the explorer FastAPI application.

    Args:
        config: Explorer configuration. Defaults to env-driven ExplorerConfig.
        store: Store backend. Defaults to build_store(config).
        state: Shared process state. Defaults to a fresh WorkspaceState.

    Returns:
        FastAPI application instance
    """
    configure_logging()
    config = config or ExplorerConfig()
    config.validate_startup()
    store = store or build_store(config)
    state = state or WorkspaceState()

    files = FileService(store)
    shares = ShareService(state.shares, link_prefix=config.share_link_prefix)
    gateway = ShareGateway(state.shares, files)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info('file_explorer_startup', store_backend=config.store_backend.value)
        await init_home_drive(config, store, state)
        yield
        logger.info('file_explorer_shutdown')

    app = FastAPI(
        title='File Explorer',
        description='Directory browsing, file CRUD and share links over a store',
        version='0.1.0',
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store
    app.state.workspace = state

    # Order of execution: RequestID -> Metrics -> RequestLogging -> route handler
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIdMiddleware)

    @app.exception_handler(ExplorerError)
    async def explorer_error_handler(request: Request, exc: ExplorerError):
        logger.info(
            'explorer_error',
            category=exc.category.value,
            detail=exc.message,
            path=request.url.path,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    app.include_router(create_file_router(files, state), prefix='/api')
    app.include_router(create_share_router(shares), prefix='/api')
    app.include_router(create_shared_access_router(gateway))

    @app.get('/health')
    async def health():
        return {
            'status': 'ok',
            'service': 'file-explorer',
            'store_backend': config.store_backend.value,
        }

    @app.get('/metrics')
    async def metrics():
        body, content_type = metrics_text()
        return Response(content=body, media_type=content_type)

    return app
