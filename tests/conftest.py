"""
Shared fixtures for the Employee Management Service tests.

Tests run against an in-memory SQLite database, a recording change
publisher instead of Kafka, and an in-memory Elasticsearch served through
httpx.MockTransport.
"""

import json
import os
from typing import Any, Optional

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("KAFKA_ENABLED", "false")

import httpx
import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import app.models  # noqa: F401
from app.core.change_publisher import ChangePublisher
from app.core.database import enable_sqlite_write_locking
from app.core.employee_index import EmployeeIndexService
from app.core.employee_service import EmployeeService
from app.core.events import (
    ChangeEnvelope,
    EntityType,
    OperationType,
    create_change_envelope,
)
from app.core.search import SearchIndexClient


class RecordingPublisher(ChangePublisher):
    """Change publisher that keeps envelopes in memory."""

    def __init__(self):
        super().__init__(topic="employee")
        self.envelopes: list[ChangeEnvelope] = []

    async def publish(
        self, entity_type: EntityType, operation_type: OperationType, record
    ) -> Optional[ChangeEnvelope]:
        envelope = create_change_envelope(entity_type, operation_type, record)
        self.envelopes.append(envelope)
        return envelope


class FakeElasticsearch:
    """
    Just enough of the Elasticsearch REST API for the employee index:
    index creation, document PUT by id, and bool/terms/range/match_all search.
    """

    def __init__(self):
        self.indices: dict[str, dict[str, dict[str, Any]]] = {}
        self.mappings: dict[str, dict[str, Any]] = {}
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        parts = [part for part in request.url.path.split("/") if part]
        index = parts[0]

        if len(parts) == 1 and request.method == "HEAD":
            return httpx.Response(200 if index in self.indices else 404)

        if len(parts) == 1 and request.method == "PUT":
            self.indices.setdefault(index, {})
            self.mappings[index] = json.loads(request.content)["mappings"]
            return httpx.Response(200, json={"acknowledged": True, "index": index})

        if len(parts) == 3 and parts[1] == "_doc" and request.method == "PUT":
            documents = self.indices.setdefault(index, {})
            document_id = parts[2]
            result = "updated" if document_id in documents else "created"
            documents[document_id] = json.loads(request.content)
            return httpx.Response(
                201 if result == "created" else 200,
                json={"_index": index, "_id": document_id, "result": result},
            )

        if len(parts) == 2 and parts[1] == "_search" and request.method == "POST":
            if index not in self.indices:
                return httpx.Response(404, json={"error": "index_not_found_exception"})
            body = json.loads(request.content)
            hits = [
                {"_index": index, "_id": document_id, "_source": source}
                for document_id, source in self.indices[index].items()
                if self._matches(source, body["query"])
            ][: body.get("size", 10)]
            return httpx.Response(
                200,
                json={"hits": {"total": {"value": len(hits)}, "hits": hits}},
            )

        return httpx.Response(400, json={"error": "unsupported request"})

    def _matches(self, source: dict[str, Any], query: dict[str, Any]) -> bool:
        if "match_all" in query:
            return True
        if "bool" in query:
            clauses = query["bool"].get("must", []) + query["bool"].get("filter", [])
            return all(self._matches(source, clause) for clause in clauses)
        if "terms" in query:
            ((field, values),) = query["terms"].items()
            return source.get(field) in values
        if "range" in query:
            ((field, bounds),) = query["range"].items()
            value = source.get(field)
            if value is None:
                return False
            if "gt" in bounds and not value > bounds["gt"]:
                return False
            if "lt" in bounds and not value < bounds["lt"]:
                return False
            return True
        raise AssertionError(f"Unexpected query clause: {query}")


@pytest.fixture
def engine():
    """In-memory database shared by every session in a test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_write_locking(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def file_engine(tmp_path):
    """File-backed database so separate threads get separate connections."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'employees.db'}",
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_write_locking(engine)
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(engine):
    """Create a database session for testing."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def service(publisher):
    return EmployeeService(publisher=publisher)


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture
def index_service(fake_es):
    client = SearchIndexClient(
        base_url="http://elasticsearch:9200",
        index_name="employees-test",
        transport=httpx.MockTransport(fake_es.handler),
    )
    return EmployeeIndexService(client=client, search_size=50)
