"""Observability module for metrics and monitoring."""

from vearch_store.observability.metrics import (
    get_metrics,
    get_metrics_content_type,
    track_documents_written,
    track_search_results,
    track_vectorstore_operation,
)

__all__ = [
    "get_metrics",
    "get_metrics_content_type",
    "track_documents_written",
    "track_search_results",
    "track_vectorstore_operation",
]
