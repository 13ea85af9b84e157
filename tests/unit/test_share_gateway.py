"""Tests for anonymous retrieval through /shared/<share_id>."""
import pytest
import pytest_asyncio

from file_explorer.api.errors import (
    AccessDeniedError,
    BackendReadError,
    ErrorCategory,
    MalformedRequestError,
    NotFoundError,
)
from file_explorer.api.modules.files.service import FileService
from file_explorer.api.modules.sharing.gateway import (
    ShareGateway,
    content_disposition_for,
    content_type_for,
    download_name,
)
from file_explorer.api.modules.sharing.model import (
    AccessPolicy,
    InMemoryShareRegistry,
    derive_share_id,
)


@pytest.fixture
def registry():
    return InMemoryShareRegistry()


@pytest_asyncio.fixture
async def files(memory_store):
    service = FileService(memory_store)
    await memory_store.open_dir('/home', create=True)
    await service.create_file('/home/report.pdf', b'%PDF-1.4')
    await service.create_file('/home/notes.txt', b'hello')
    return service


@pytest.fixture
def gateway(registry, files):
    return ShareGateway(registry, files)


def _shared(path):
    return f'/shared/{derive_share_id(path)}'


class TestContentType:

    @pytest.mark.parametrize('filename, expected', [
        ('a.txt', 'text/plain'),
        ('a.html', 'text/html'),
        ('a.htm', 'text/html'),
        ('a.css', 'text/css'),
        ('a.js', 'application/javascript'),
        ('a.json', 'application/json'),
        ('a.png', 'image/png'),
        ('a.jpg', 'image/jpeg'),
        ('a.jpeg', 'image/jpeg'),
        ('a.gif', 'image/gif'),
        ('a.pdf', 'application/pdf'),
        ('a.zip', 'application/zip'),
    ])
    def test_known_extensions(self, filename, expected):
        assert content_type_for(filename) == expected

    def test_unknown_extension(self):
        assert content_type_for('archive.tar.xz') == 'application/octet-stream'

    def test_no_extension(self):
        assert content_type_for('README') == 'application/octet-stream'

    def test_uses_last_dot(self):
        assert content_type_for('backup.zip.txt') == 'text/plain'

    def test_extension_match_is_case_sensitive(self):
        assert content_type_for('PHOTO.JPG') == 'application/octet-stream'
        assert content_type_for('REPORT.PDF') == 'application/octet-stream'


class TestDownloadName:

    def test_last_segment(self):
        assert download_name('/home/docs/report.pdf') == 'report.pdf'

    def test_empty_segment(self):
        assert download_name('/home/docs/') == 'download'


class TestContentDisposition:

    def test_plain_name_is_quoted_as_is(self):
        assert content_disposition_for('report.pdf') == 'attachment; filename="report.pdf"'

    def test_non_ascii_name_is_percent_encoded(self):
        value = content_disposition_for('报告.txt')
        assert value == "attachment; filename*=utf-8''%E6%8A%A5%E5%91%8A.txt"
        value.encode('latin-1')

    def test_double_quote_is_encoded(self):
        assert content_disposition_for('a"b.txt') == "attachment; filename*=utf-8''a%22b.txt"


class TestServe:

    @pytest.mark.asyncio
    async def test_none_path_is_malformed(self, gateway):
        with pytest.raises(MalformedRequestError, match='No request path provided'):
            await gateway.serve(None)

    @pytest.mark.asyncio
    async def test_wrong_prefix_is_malformed(self, gateway):
        with pytest.raises(MalformedRequestError, match='Invalid shared file path') as exc_info:
            await gateway.serve('/files/abc')
        assert exc_info.value.category == ErrorCategory.MALFORMED_REQUEST

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, gateway):
        with pytest.raises(NotFoundError, match='File not found or not shared'):
            await gateway.serve('/shared/' + '0' * 32)

    @pytest.mark.asyncio
    async def test_empty_id_is_not_found(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.serve('/shared/')

    @pytest.mark.asyncio
    async def test_private_is_denied(self, gateway, registry):
        await registry.put('/home/notes.txt', AccessPolicy.PRIVATE)
        with pytest.raises(AccessDeniedError, match='Access denied: Private file') as exc_info:
            await gateway.serve(_shared('/home/notes.txt'))
        assert exc_info.value.http_status == 403

    @pytest.mark.asyncio
    async def test_public_is_served(self, gateway, registry):
        await registry.put('/home/report.pdf', AccessPolicy.PUBLIC)
        shared = await gateway.serve(_shared('/home/report.pdf'))
        assert shared.path == '/home/report.pdf'
        assert shared.content == b'%PDF-1.4'
        assert shared.headers == {
            'Content-Type': 'application/pdf',
            'Content-Disposition': 'attachment; filename="report.pdf"',
        }

    @pytest.mark.asyncio
    async def test_non_ascii_name_is_served(self, gateway, registry, files):
        await files.create_file('/home/报告.txt', b'quarterly')
        await registry.put('/home/报告.txt', AccessPolicy.PUBLIC)
        shared = await gateway.serve(_shared('/home/报告.txt'))
        assert shared.content == b'quarterly'
        assert shared.content_type == 'text/plain'
        assert shared.content_disposition == "attachment; filename*=utf-8''%E6%8A%A5%E5%91%8A.txt"

    @pytest.mark.asyncio
    async def test_serves_only_the_matching_path(self, gateway, registry):
        await registry.put('/home/report.pdf', AccessPolicy.PUBLIC)
        await registry.put('/home/notes.txt', AccessPolicy.PUBLIC)
        shared = await gateway.serve(_shared('/home/notes.txt'))
        assert shared.path == '/home/notes.txt'
        assert shared.content == b'hello'
        assert shared.content_type == 'text/plain'

    @pytest.mark.asyncio
    async def test_unshared_path_is_not_found(self, gateway, registry):
        await registry.put('/home/notes.txt', AccessPolicy.PUBLIC)
        await registry.remove('/home/notes.txt')
        with pytest.raises(NotFoundError):
            await gateway.serve(_shared('/home/notes.txt'))

    @pytest.mark.asyncio
    async def test_deleted_file_is_not_found(self, gateway, registry, files):
        await registry.put('/home/notes.txt', AccessPolicy.PUBLIC)
        await files.delete_file('/home/notes.txt')
        with pytest.raises(NotFoundError, match='Failed to open file'):
            await gateway.serve(_shared('/home/notes.txt'))

    @pytest.mark.asyncio
    async def test_store_failure_is_backend_error(self, gateway, registry, memory_store):
        await registry.put('/home/notes.txt', AccessPolicy.PUBLIC)
        memory_store.fail('read_file', '/home/notes.txt')
        with pytest.raises(BackendReadError, match='Failed to read file'):
            await gateway.serve(_shared('/home/notes.txt'))
