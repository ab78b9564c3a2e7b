"""
Employee search index service.

Keeps the search index copy of employee data and queries it with the
filter DSL. Indexing is explicit: documents are written only when a caller
asks for it, not on every database write.

Neither operation raises on backend failure. Both return an IndexResult so
callers can tell "no match" apart from "search backend unavailable".
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

import httpx
from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import IndexingFailure
from app.core.logging import get_logger
from app.core.query_builder import build_employee_query
from app.core.search import SearchIndexClient, search_client
from app.models.search import EmployeeDocument, EmployeeField, FilterEmployee

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class IndexResult(Generic[T]):
    """Outcome of an index operation: a value or an IndexingFailure."""

    value: Optional[T] = None
    error: Optional[IndexingFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, raising the captured failure if there is one."""
        if self.error is not None:
            raise self.error
        return self.value


def employee_index_mappings() -> dict:
    """Explicit mapping so term and range queries compare native types."""
    return {
        "properties": {
            field.field_name: {"type": field.index_type} for field in EmployeeField
        }
    }


class EmployeeIndexService:
    """Index synchronizer and search executor for employee documents."""

    def __init__(
        self,
        client: SearchIndexClient = search_client,
        search_size: int = settings.ELASTICSEARCH_SEARCH_SIZE,
    ):
        self.client = client
        self.search_size = search_size

    async def ensure_index(self) -> IndexResult[bool]:
        """Create the employee index with its mapping if it is missing."""
        try:
            created = await self.client.create_index(employee_index_mappings())
            return IndexResult(value=created)
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to create index {self.client.index_name}: {e}", exc_info=True
            )
            return IndexResult(error=IndexingFailure(f"Index creation failed: {e}"))

    async def upsert(self, document: EmployeeDocument) -> IndexResult[str]:
        """
        Write a document into the index, replacing any copy with the same id.

        Returns:
            IndexResult holding the stored document id, or the failure
        """
        try:
            body = document.model_dump(mode="json")
            document_id = await self.client.index_document(str(document.id), body)
            logger.info(f"Indexed employee document {document_id}")
            return IndexResult(value=document_id)
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(
                f"The exception was thrown while indexing employee {document.id}: {e}",
                exc_info=True,
            )
            return IndexResult(error=IndexingFailure(f"Indexing failed: {e}"))

    async def search(
        self, filter_employee: FilterEmployee
    ) -> IndexResult[list[EmployeeDocument]]:
        """
        Find employee documents matching a filter expression.

        Invalid filters raise immediately; backend failures are returned.

        Returns:
            IndexResult holding the matching documents in hit order
        """
        query = build_employee_query(filter_employee)

        try:
            hits = await self.client.search(query, size=self.search_size)
            documents = [
                EmployeeDocument.model_validate(hit["_source"]) for hit in hits
            ]
            return IndexResult(value=documents)
        except (httpx.HTTPError, KeyError, ValueError, ValidationError) as e:
            logger.error(
                f"Exception thrown while getting the search response: {e}",
                exc_info=True,
            )
            return IndexResult(error=IndexingFailure(f"Search failed: {e}"))


# Create singleton instance
employee_index_service = EmployeeIndexService()
