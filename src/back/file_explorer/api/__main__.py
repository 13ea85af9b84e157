"""Run the file-explorer API as a standalone HTTP server.

Usage:
    STORE_ROOT=/srv/explorer FILE_EXPLORER_PORT=8080 python -m file_explorer.api

Starts a uvicorn server. Configuration comes from the environment, see
``file_explorer.api.config.ExplorerConfig``.
"""

import uvicorn

from .app import create_app
from .config import ExplorerConfig


def main():
    config = ExplorerConfig()
    app = create_app(config)

    print(f"File explorer starting on http://{config.host}:{config.port}")
    print(f"Store: {config.store_backend.value} ({config.store_root})")
    print(f"Home drive: {config.home_path}")

    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
