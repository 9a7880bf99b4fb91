"""Translation between search requests, Vearch queries and matches.

Vearch scores cosine similarity in [-1, 1]; callers work with relevance
scores in [0, 1] where relevance = (similarity + 1) / 2.
"""

import math
from typing import Any

from vearch_store.client.models import QueryParam, SearchHit, SearchQuery, VectorTerm
from vearch_store.embeddings.models import Embedding, TextSegment
from vearch_store.exceptions import ErrorCode, ValidationError, VectorStoreError
from vearch_store.logging_config import get_logger
from vearch_store.schema.models import SchemaConfig
from vearch_store.vectorstore.mapper import FEATURE_KEY
from vearch_store.vectorstore.models import EmbeddingMatch

logger = get_logger(__name__)


def relevance_from_cosine(similarity: float) -> float:
    """Convert a cosine similarity to a relevance score."""
    return (similarity + 1) / 2


def cosine_from_relevance(relevance: float) -> float:
    """Convert a relevance score to a cosine similarity threshold."""
    return 2 * relevance - 1


class SearchTranslator:
    """Builds Vearch search queries and reads their hits back."""

    def __init__(self, schema: SchemaConfig) -> None:
        self._schema = schema

    @property
    def schema(self) -> SchemaConfig:
        return self._schema

    def build_query(
        self,
        query_embedding: Embedding,
        max_results: int,
        min_relevance_score: float = 0.0,
        extra_fields: tuple[str, ...] | list[str] = (),
    ) -> SearchQuery:
        """Build a single-term vector query.

        Args:
            query_embedding: Vector to search for.
            max_results: Maximum number of hits.
            min_relevance_score: Minimum relevance score in [0, 1].
            extra_fields: Additional source fields to return.

        Returns:
            SearchQuery over the configured vector field.

        Raises:
            ValidationError: If max_results or min_relevance_score is out of range.
        """
        if max_results < 1:
            raise ValidationError(
                "max_results must be at least 1",
                details={"max_results": max_results},
            )
        if not 0.0 <= min_relevance_score <= 1.0:
            raise ValidationError(
                "min_relevance_score must be between 0 and 1",
                details={"min_relevance_score": min_relevance_score},
            )

        term = VectorTerm(
            field=self._schema.embedding_field_name,
            feature=query_embedding.vector_as_list(),
            min_score=cosine_from_relevance(min_relevance_score),
        )
        return SearchQuery(
            query=QueryParam(sum=[term]),
            size=max_results,
            fields=self._schema.projection_fields(extra_fields),
        )

    def translate_hits(self, hits: list[SearchHit] | None) -> list[EmbeddingMatch]:
        """Convert hits to matches, keeping the service order.

        Every source field other than the vector and text fields becomes
        metadata, whether or not it is configured. Metadata is dropped for
        hits without text.

        Raises:
            VectorStoreError: If a hit has no usable vector.
        """
        if not hits:
            return []
        return [self._to_match(hit) for hit in hits]

    def _to_match(self, hit: SearchHit) -> EmbeddingMatch:
        source = hit.source
        embedding = Embedding(vector=self._extract_vector(hit))

        text_segment = None
        raw_text = source.get(self._schema.text_field_name)
        text = None if raw_text is None else str(raw_text)
        if text and text.strip():
            text_segment = TextSegment(text=text, metadata=self._metadata(source))

        if not -1.0 <= hit.score <= 1.0:
            logger.warning(
                f"Similarity {hit.score} of document {hit.id} is outside [-1, 1]",
                extra={"space": self._schema.space_name},
            )

        return EmbeddingMatch(
            score=relevance_from_cosine(hit.score),
            embedding_id=hit.id,
            embedding=embedding,
            embedded=text_segment,
        )

    def _extract_vector(self, hit: SearchHit) -> list[float]:
        field_name = self._schema.embedding_field_name
        value = hit.source.get(field_name)
        feature = value.get(FEATURE_KEY) if isinstance(value, dict) else None

        try:
            vector = [float(component) for component in feature]  # type: ignore[union-attr]
        except (TypeError, ValueError) as e:
            raise VectorStoreError(
                f"Document {hit.id} has no usable {field_name} vector",
                code=ErrorCode.DOCUMENT_TRANSLATION_ERROR,
                details={"id": hit.id, "field": field_name},
            ) from e

        if not vector or not all(math.isfinite(v) for v in vector):
            raise VectorStoreError(
                f"Document {hit.id} has an empty or non-finite {field_name} vector",
                code=ErrorCode.DOCUMENT_TRANSLATION_ERROR,
                details={"id": hit.id, "field": field_name},
            )
        return vector

    def _metadata(self, source: dict[str, Any]) -> dict[str, Any]:
        excluded = {self._schema.embedding_field_name, self._schema.text_field_name}
        return {key: value for key, value in source.items() if key not in excluded}
