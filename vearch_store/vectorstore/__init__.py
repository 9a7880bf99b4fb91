"""Vector store module."""

from vearch_store.vectorstore.mapper import DocumentMapper, coerce_value
from vearch_store.vectorstore.models import (
    EmbeddingMatch,
    EmbeddingSearchRequest,
    EmbeddingSearchResult,
)
from vearch_store.vectorstore.service import VearchEmbeddingStore
from vearch_store.vectorstore.translator import (
    SearchTranslator,
    cosine_from_relevance,
    relevance_from_cosine,
)

__all__ = [
    "DocumentMapper",
    "EmbeddingMatch",
    "EmbeddingSearchRequest",
    "EmbeddingSearchResult",
    "SearchTranslator",
    "VearchEmbeddingStore",
    "coerce_value",
    "cosine_from_relevance",
    "relevance_from_cosine",
]
