"""Vearch transport client module."""

from vearch_store.client.client import VearchClient
from vearch_store.client.models import (
    BulkRequest,
    CreateDatabaseRequest,
    CreateSpaceRequest,
    ListDatabaseResponse,
    ListSpaceResponse,
    QueryParam,
    SearchHit,
    SearchQuery,
    SearchResponse,
    VectorTerm,
)

__all__ = [
    "BulkRequest",
    "CreateDatabaseRequest",
    "CreateSpaceRequest",
    "ListDatabaseResponse",
    "ListSpaceResponse",
    "QueryParam",
    "SearchHit",
    "SearchQuery",
    "SearchResponse",
    "VearchClient",
    "VectorTerm",
]
