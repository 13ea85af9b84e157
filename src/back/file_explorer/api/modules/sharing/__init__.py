"""Share links: path -> policy registry and the public share gateway."""

from .model import (
    AccessPolicy,
    InMemoryShareRegistry,
    ShareRegistry,
    derive_share_id,
)
from .service import SHARED_PREFIX, ShareService
from .gateway import (
    CONTENT_TYPES,
    ShareGateway,
    SharedFile,
    content_type_for,
)
from .router import (
    ShareRequest,
    create_share_router,
    create_shared_access_router,
)

__all__ = [
    'AccessPolicy',
    'CONTENT_TYPES',
    'InMemoryShareRegistry',
    'SHARED_PREFIX',
    'ShareGateway',
    'ShareRegistry',
    'ShareRequest',
    'ShareService',
    'SharedFile',
    'content_type_for',
    'create_share_router',
    'create_shared_access_router',
    'derive_share_id',
]
