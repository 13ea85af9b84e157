"""Anonymous retrieval of shared files.

Request flow for ``/shared/<share_id>``:

  1. Path must start with ``/shared/`` (else malformed request).
  2. ``<share_id>`` is resolved through the registry (else not found).
  3. Private shares are always denied.
  4. Public shares are read through ``FileService.read_file`` and returned
     with a Content-Type inferred from the extension and a
     Content-Disposition carrying the original filename.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

from ....observability.logging import get_logger
from ....observability.metrics import SHARE_RESOLUTIONS_TOTAL
from ...errors import AccessDeniedError, MalformedRequestError, NotFoundError
from ..files.service import FileService
from .model import AccessPolicy, ShareRegistry
from .service import SHARED_PREFIX

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = 'application/octet-stream'
DEFAULT_DOWNLOAD_NAME = 'download'

CONTENT_TYPES = {
    'txt': 'text/plain',
    'html': 'text/html',
    'htm': 'text/html',
    'css': 'text/css',
    'js': 'application/javascript',
    'json': 'application/json',
    'png': 'image/png',
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'gif': 'image/gif',
    'pdf': 'application/pdf',
    'zip': 'application/zip',
}


def content_type_for(filename: str) -> str:
    """Content type from the text after the last dot. Case-sensitive."""
    extension = filename.rsplit('.', 1)[-1]
    return CONTENT_TYPES.get(extension, DEFAULT_CONTENT_TYPE)


def download_name(path: str) -> str:
    return path.split('/')[-1] or DEFAULT_DOWNLOAD_NAME


def content_disposition_for(filename: str) -> str:
    """Attachment header value; names that need escaping use RFC 5987 encoding."""
    quoted = quote(filename)
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    return f"attachment; filename*=utf-8''{quoted}"


@dataclass(frozen=True)
class SharedFile:
    """Bytes plus the response headers to send with them."""
    path: str
    content: bytes
    content_type: str
    content_disposition: str

    @property
    def headers(self) -> dict[str, str]:
        return {
            'Content-Type': self.content_type,
            'Content-Disposition': self.content_disposition,
        }


class ShareGateway:
    """Resolves share ids and serves public shares."""

    def __init__(self, registry: ShareRegistry, files: FileService):
        self.registry = registry
        self.files = files

    async def serve(self, request_path: str | None) -> SharedFile:
        """Serve the file behind ``/shared/<share_id>``.

        Raises:
            MalformedRequestError: Missing path or wrong prefix.
            NotFoundError: No share has this id, or the file is gone.
            AccessDeniedError: The share is private.
        """
        if request_path is None:
            SHARE_RESOLUTIONS_TOTAL.labels(outcome='malformed').inc()
            raise MalformedRequestError('No request path provided')
        if not request_path.startswith(SHARED_PREFIX):
            SHARE_RESOLUTIONS_TOTAL.labels(outcome='malformed').inc()
            raise MalformedRequestError('Invalid shared file path')

        share_id = request_path[len(SHARED_PREFIX):]
        match = await self.registry.resolve(share_id)
        if match is None:
            SHARE_RESOLUTIONS_TOTAL.labels(outcome='not_found').inc()
            logger.info('serve_shared_file_not_found', share_id=share_id)
            raise NotFoundError('File not found or not shared')

        path, policy = match
        if policy != AccessPolicy.PUBLIC:
            SHARE_RESOLUTIONS_TOTAL.labels(outcome='denied').inc()
            logger.info('serve_shared_file_denied', share_id=share_id, path=path)
            raise AccessDeniedError('Access denied: Private file')

        filename = download_name(path)
        content = await self.files.read_file(path)
        SHARE_RESOLUTIONS_TOTAL.labels(outcome='served').inc()
        logger.info('serve_shared_file', share_id=share_id, path=path, size=len(content))
        return SharedFile(
            path=path,
            content=content,
            content_type=content_type_for(filename),
            content_disposition=content_disposition_for(filename),
        )
