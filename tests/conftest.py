"""Pytest configuration and shared fixtures."""

import math
from typing import Any
from unittest.mock import MagicMock

import pytest

from vearch_store.client.client import VearchClient
from vearch_store.client.models import (
    BulkRequest,
    CreateDatabaseRequest,
    CreateSpaceRequest,
    ListDatabaseResponse,
    ListSpaceResponse,
    SearchHit,
    SearchHits,
    SearchQuery,
    SearchResponse,
)
from vearch_store.schema.models import (
    SchemaConfig,
    SpaceEngine,
    float_param,
    integer_param,
    string_param,
    vector_param,
)


class InMemoryVearchClient:
    """Fake transport that stores documents and scores by cosine similarity."""

    def __init__(self) -> None:
        self.databases: list[str] = []
        self.spaces: dict[str, dict[str, CreateSpaceRequest]] = {}
        self.documents: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self.bulk_calls = 0
        self.search_calls = 0

    def list_databases(self) -> list[ListDatabaseResponse]:
        return [ListDatabaseResponse(name=name) for name in self.databases]

    def create_database(self, request: CreateDatabaseRequest) -> None:
        self.databases.append(request.name)
        self.spaces.setdefault(request.name, {})

    def list_spaces(self, database_name: str) -> list[ListSpaceResponse]:
        return [ListSpaceResponse(name=name) for name in self.spaces.get(database_name, {})]

    def create_space(self, database_name: str, request: CreateSpaceRequest) -> None:
        self.spaces.setdefault(database_name, {})[request.name] = request
        self.documents[(database_name, request.name)] = {}

    def bulk(self, database_name: str, space_name: str, request: BulkRequest) -> None:
        self.bulk_calls += 1
        space = self.documents[(database_name, space_name)]
        for document in request.documents:
            space[document["_id"]] = {k: v for k, v in document.items() if k != "_id"}

    def search(
        self,
        database_name: str,
        space_name: str,
        query: SearchQuery,
    ) -> SearchResponse:
        self.search_calls += 1
        term = query.query.sum[0]
        scored = []
        for doc_id, source in self.documents[(database_name, space_name)].items():
            score = _cosine(term.feature, source[term.field]["feature"])
            if term.min_score is None or score >= term.min_score:
                scored.append((score, doc_id, source))
        scored.sort(key=lambda item: item[0], reverse=True)

        hits = [
            SearchHit(id=doc_id, score=score, source=dict(source))
            for score, doc_id, source in scored[: query.size]
        ]
        return SearchResponse(hits=SearchHits(total=len(hits), hits=hits))

    def delete_space(self, database_name: str, space_name: str) -> None:
        del self.spaces[database_name][space_name]
        del self.documents[(database_name, space_name)]

    def close(self) -> None:
        pass


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b, strict=True))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


@pytest.fixture
def schema() -> SchemaConfig:
    """Schema with one metadata field of each scalar type."""
    return SchemaConfig(
        database_name="test_db",
        space_name="test_space",
        embedding_field_name="embedding",
        text_field_name="text",
        metadata_field_names=("author", "rating", "year"),
        properties={
            "embedding": vector_param(3),
            "text": string_param(),
            "author": string_param(),
            "rating": float_param(),
            "year": integer_param(),
        },
        space_engine=SpaceEngine(),
    )


@pytest.fixture
def memory_client() -> InMemoryVearchClient:
    """Empty in-memory Vearch service."""
    return InMemoryVearchClient()


@pytest.fixture
def mock_client() -> MagicMock:
    """Transport stub reporting an existing database and space."""
    client = MagicMock(spec=VearchClient)
    client.list_databases.return_value = [ListDatabaseResponse(name="test_db")]
    client.list_spaces.return_value = [ListSpaceResponse(name="test_space")]
    client.search.return_value = SearchResponse()
    return client
