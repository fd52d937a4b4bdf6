"""Unit tests for HttpSearchIndexer using httpx.MockTransport."""

import json
from unittest.mock import Mock

import httpx
import pytest

from infrastructure.fanout.search_indexer import HttpSearchIndexer
from shared_kernel.fanout.exceptions import FanoutError
from shared_kernel.fanout.observability import FanoutProbe
from shared_kernel.fanout.value_objects import IndexDocument

DOCUMENT = IndexDocument(
    index="users",
    document_id="01ARZCX0P0HZGQP3MZXQQ0NNZZ",
    body={"tenant_id": "acme", "full_name": "Ada Lovelace"},
)


def _indexer(handler, probe=None) -> HttpSearchIndexer:
    client = httpx.AsyncClient(
        base_url="http://search.test", transport=httpx.MockTransport(handler)
    )
    return HttpSearchIndexer(client, probe=probe)


class TestHttpSearchIndexer:
    @pytest.mark.asyncio
    async def test_puts_document_by_id(self):
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(201, json={"result": "created"})

        probe = Mock(spec=FanoutProbe)
        await _indexer(handler, probe).index(DOCUMENT)

        [request] = requests
        assert request.method == "PUT"
        assert request.url.path == "/users/_doc/01ARZCX0P0HZGQP3MZXQQ0NNZZ"
        assert json.loads(request.content) == DOCUMENT.body
        probe.delivered.assert_called_once_with(
            "search_index", "01ARZCX0P0HZGQP3MZXQQ0NNZZ"
        )

    @pytest.mark.asyncio
    async def test_repeated_writes_use_the_same_path(self):
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200)

        indexer = _indexer(handler)
        await indexer.index(DOCUMENT)
        await indexer.index(DOCUMENT)

        assert paths[0] == paths[1]

    @pytest.mark.asyncio
    async def test_error_status_raises_fanout_error(self):
        probe = Mock(spec=FanoutProbe)
        indexer = _indexer(lambda request: httpx.Response(503), probe)

        with pytest.raises(FanoutError, match="HTTP 503") as exc_info:
            await indexer.index(DOCUMENT)

        assert exc_info.value.target == "search_index"
        probe.delivery_failed.assert_called_once()
        probe.delivered.assert_not_called()

    @pytest.mark.asyncio
    async def test_transport_error_raises_fanout_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(FanoutError, match="ConnectError"):
            await _indexer(handler).index(DOCUMENT)
