"""Prometheus metrics for the Vearch store.

Provides metrics instrumentation for:
- Store operation latency and status
- Documents written
- Matches returned per search
"""

import time
from collections.abc import Iterator
from contextlib import contextmanager

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)

from vearch_store.logging_config import get_logger

logger = get_logger(__name__)

VECTORSTORE_OPERATION_DURATION = Histogram(
    "vectorstore_operation_duration_seconds",
    "Vector store operation duration",
    ["operation", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0],
)

VECTORSTORE_OPERATION_TOTAL = Counter(
    "vectorstore_operations_total",
    "Total vector store operations",
    ["operation", "status"],
)

VECTORSTORE_DOCUMENTS_WRITTEN = Counter(
    "vectorstore_documents_written_total",
    "Documents sent in bulk writes",
)

VECTORSTORE_MATCHES_RETURNED = Histogram(
    "vectorstore_matches_returned",
    "Number of matches returned per search",
    buckets=[0, 1, 2, 3, 5, 10, 20, 50, 100],
)


@contextmanager
def track_vectorstore_operation(operation: str) -> Iterator[None]:
    """Time a store operation and record its outcome.

    Args:
        operation: Operation label (add, search, delete_space, ...).
    """
    status = "success"
    start_time = time.perf_counter()
    try:
        yield
    except Exception:
        status = "error"
        raise
    finally:
        duration = time.perf_counter() - start_time
        VECTORSTORE_OPERATION_DURATION.labels(
            operation=operation,
            status=status,
        ).observe(duration)
        VECTORSTORE_OPERATION_TOTAL.labels(operation=operation, status=status).inc()


def track_documents_written(count: int) -> None:
    VECTORSTORE_DOCUMENTS_WRITTEN.inc(count)


def track_search_results(matches_returned: int) -> None:
    VECTORSTORE_MATCHES_RETURNED.observe(matches_returned)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
