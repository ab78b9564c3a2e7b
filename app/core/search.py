"""
Elasticsearch REST client for the employee index.

Talks to Elasticsearch over HTTP with httpx. Each call opens a short-lived
client; errors are raised to the caller, which decides how to report them.
"""

from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class SearchIndexClient:
    """
    Minimal client for a single Elasticsearch index.
    Supports index creation, document upsert and search.
    """

    def __init__(
        self,
        base_url: str,
        index_name: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the search index client.

        Args:
            base_url: Base URL of the Elasticsearch cluster
            index_name: Name of the index all calls operate on
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.index_name = index_name
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            headers={"Content-Type": "application/json"},
        )

    async def create_index(self, mappings: dict[str, Any]) -> bool:
        """
        Create the index with the given mappings if it does not exist.

        Returns:
            True if the index was created, False if it already existed
        """
        async with self._client() as client:
            response = await client.head(f"/{self.index_name}")
            if response.status_code == 200:
                return False

            response = await client.put(
                f"/{self.index_name}", json={"mappings": mappings}
            )
            response.raise_for_status()
            logger.info(f"Created search index {self.index_name}")
            return True

    async def index_document(self, document_id: str, body: dict[str, Any]) -> str:
        """
        Upsert a document keyed by id.

        Returns:
            The id Elasticsearch stored the document under
        """
        async with self._client() as client:
            response = await client.put(
                f"/{self.index_name}/_doc/{document_id}", json=body
            )
            response.raise_for_status()
            result = response.json()
            logger.debug(
                f"Indexed document {document_id} into {self.index_name}: "
                f"{result.get('result')}"
            )
            return result["_id"]

    async def search(self, query: dict[str, Any], size: int) -> list[dict[str, Any]]:
        """
        Run a query against the index.

        Returns:
            The raw hit objects, in the order Elasticsearch returned them
        """
        async with self._client() as client:
            response = await client.post(
                f"/{self.index_name}/_search", json={"query": query, "size": size}
            )
            response.raise_for_status()
            hits = response.json().get("hits", {}).get("hits", [])
            logger.info(f"Search on {self.index_name} returned {len(hits)} hits")
            return hits


# Create a singleton instance
search_client = SearchIndexClient(
    base_url=settings.ELASTICSEARCH_URL,
    index_name=settings.ELASTICSEARCH_INDEX_NAME,
    timeout=settings.ELASTICSEARCH_TIMEOUT,
)
