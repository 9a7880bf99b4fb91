"""Embedding domain models."""

from vearch_store.embeddings.models import Embedding, TextSegment

__all__ = [
    "Embedding",
    "TextSegment",
]
