"""Elasticsearch document adapter."""

import logging
from collections.abc import Sequence
from typing import Any

import httpx

from esalert.adapters.interfaces import DocumentFetcher, DocumentRetrievalError
from esalert.config import get_settings
from esalert.domain.models import EsConfig

logger = logging.getLogger(__name__)


def build_find_by_ids_body(ids: Sequence[str]) -> dict[str, Any]:
    """Search body selecting exactly the given document ids."""

    return {"query": {"ids": {"values": list(ids)}}, "size": len(ids)}


class ElasticsearchDocumentFetcher(DocumentFetcher):
    """Fetch hits through the `_search` endpoint, trying each address in turn."""

    def __init__(self, config: EsConfig, transport: httpx.BaseTransport | None = None) -> None:
        self.config = config
        self.settings = get_settings()
        self.transport = transport

    def find_by_ids(self, index: str, ids: Sequence[str]) -> list[dict[str, Any]]:
        if not ids:
            return []
        if not self.config.addresses:
            raise DocumentRetrievalError("no elasticsearch addresses configured")

        body = build_find_by_ids_body(ids)
        last_error: Exception | None = None
        with self._client() as client:
            for address in self.config.addresses:
                url = f"{address.rstrip('/')}/{index}/_search"
                try:
                    response = client.post(url, json=body)
                    response.raise_for_status()
                except httpx.TransportError as exc:
                    logger.warning("elasticsearch address %s unreachable: %s", address, exc)
                    last_error = exc
                    continue
                except httpx.HTTPStatusError as exc:
                    if exc.response.status_code >= 500:
                        logger.warning("elasticsearch address %s answered %d", address, exc.response.status_code)
                        last_error = exc
                        continue
                    raise DocumentRetrievalError(
                        f"search on index {index!r} failed with status {exc.response.status_code}"
                    ) from exc
                return _ordered_hits(_hits_from_response(response), ids)

        raise DocumentRetrievalError(f"failed to query elasticsearch: {last_error}") from last_error

    def _client(self) -> httpx.Client:
        auth = None
        if self.config.username:
            auth = httpx.BasicAuth(self.config.username, self.config.password or "")
        timeout = self.config.timeout_seconds or self.settings.es_timeout_seconds
        return httpx.Client(timeout=timeout, auth=auth, transport=self.transport)


def _hits_from_response(response: httpx.Response) -> list[dict[str, Any]]:
    try:
        data = response.json()
    except ValueError as exc:
        raise DocumentRetrievalError("elasticsearch returned a non-JSON body") from exc
    hits = data.get("hits", {}).get("hits") if isinstance(data, dict) else None
    if not isinstance(hits, list):
        raise DocumentRetrievalError("elasticsearch response has no hits.hits list")
    return [hit for hit in hits if isinstance(hit, dict)]


def _ordered_hits(hits: list[dict[str, Any]], ids: Sequence[str]) -> list[dict[str, Any]]:
    # The backend returns hits by score; put them back in requested id order.
    position = {doc_id: i for i, doc_id in reversed(list(enumerate(ids)))}
    return sorted(hits, key=lambda hit: position.get(str(hit.get("_id")), len(ids)))
