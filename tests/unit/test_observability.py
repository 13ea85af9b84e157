"""Unit tests for file_explorer.observability."""
import uuid

import pytest
from prometheus_client import REGISTRY

from file_explorer.observability.logging import _add_request_context, request_id_ctx
from file_explorer.observability.metrics import STORE_CALLS_TOTAL, metrics_text
from file_explorer.observability.middleware import accept_request_id, route_label
from file_explorer.api.storage import InMemoryStore, StoreNotFound, StoreTimeout


class TestRouteLabel:

    def test_collapses_share_id(self):
        assert route_label('/shared/0123abcd') == '/shared/{share_id}'

    def test_collapses_nested_share_path(self):
        assert route_label('/shared/a/b') == '/shared/{share_id}'

    def test_leaves_other_paths(self):
        assert route_label('/api/list') == '/api/list'
        assert route_label('/api/shares/link') == '/api/shares/link'


class TestAcceptRequestId:

    def test_reuses_valid(self):
        assert accept_request_id('req-12345678') == 'req-12345678'

    @pytest.mark.parametrize('incoming', [None, '', 'short', 'has spaces in it', 'x' * 200])
    def test_replaces_invalid(self, incoming):
        rid = accept_request_id(incoming)
        assert uuid.UUID(rid).version == 4


class TestLogContext:

    def test_adds_service_and_request_id(self):
        token = request_id_ctx.set('rid-abcdef12')
        try:
            event = _add_request_context(None, 'info', {'event': 'x'})
        finally:
            request_id_ctx.reset(token)
        assert event == {'event': 'x', 'service': 'file-explorer', 'request_id': 'rid-abcdef12'}

    def test_no_request_id_outside_request(self):
        event = _add_request_context(None, 'info', {'event': 'x'})
        assert 'request_id' not in event


class TestStoreMetrics:

    def _value(self, operation, outcome):
        value = REGISTRY.get_sample_value(
            'file_explorer_store_calls_total',
            {'operation': operation, 'outcome': outcome},
        )
        return value or 0.0

    @pytest.mark.asyncio
    async def test_outcomes_are_counted(self):
        store = InMemoryStore(timeout=0.05)
        ok_before = self._value('read_dir', 'ok')
        error_before = self._value('read_file', 'error')
        timeout_before = self._value('metadata', 'timeout')

        await store.read_dir('/')
        with pytest.raises(StoreNotFound):
            await store.read_file('/missing')
        store.stall('metadata', '/', 1.0)
        with pytest.raises(StoreTimeout):
            await store.metadata('/')

        assert self._value('read_dir', 'ok') == ok_before + 1
        assert self._value('read_file', 'error') == error_before + 1
        assert self._value('metadata', 'timeout') == timeout_before + 1

    def test_metrics_text(self):
        STORE_CALLS_TOTAL.labels(operation='read_dir', outcome='ok')
        body, content_type = metrics_text()
        assert b'file_explorer_store_calls_total' in body
        assert content_type.startswith('text/plain')
