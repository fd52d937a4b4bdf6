"""HTTP search index adapter.

Writes documents to an Elasticsearch-compatible index with
``PUT /{index}/_doc/{id}``, which replaces the document with the same id
and is therefore idempotent under replay.
"""

from __future__ import annotations

import httpx

from shared_kernel.fanout.exceptions import FanoutError
from shared_kernel.fanout.observability import DefaultFanoutProbe, FanoutProbe
from shared_kernel.fanout.value_objects import IndexDocument

TARGET = "search_index"


class HttpSearchIndexer:
    """SearchIndexer over an httpx AsyncClient.

    The client is owned by the caller, who configures its base URL and
    timeout and closes it on shutdown.
    """

    def __init__(self, client: httpx.AsyncClient, probe: FanoutProbe | None = None):
        self._client = client
        self._probe = probe or DefaultFanoutProbe()

    async def index(self, document: IndexDocument) -> None:
        path = f"/{document.index}/_doc/{document.document_id}"
        try:
            response = await self._client.put(path, json=document.body)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = f"HTTP {e.response.status_code} for {path}"
            self._probe.delivery_failed(TARGET, document.document_id, error)
            raise FanoutError(TARGET, error) from e
        except httpx.HTTPError as e:
            error = f"{type(e).__name__}: {e}"
            self._probe.delivery_failed(TARGET, document.document_id, error)
            raise FanoutError(TARGET, error) from e

        self._probe.delivered(TARGET, document.document_id)


def create_search_client(base_url: str, timeout_seconds: float) -> httpx.AsyncClient:
    """Build the AsyncClient used by HttpSearchIndexer."""
    return httpx.AsyncClient(base_url=base_url, timeout=timeout_seconds)
