"""Tests for search translation."""

import logging

import pytest

from vearch_store.client.models import SearchHit
from vearch_store.embeddings.models import Embedding
from vearch_store.exceptions import ErrorCode, ValidationError, VectorStoreError
from vearch_store.schema.models import SchemaConfig
from vearch_store.vectorstore.translator import (
    SearchTranslator,
    cosine_from_relevance,
    relevance_from_cosine,
)


def _hit(doc_id: str, score: float, **source: object) -> SearchHit:
    return SearchHit(id=doc_id, score=score, source=source)


class TestScoreConversion:
    """Tests for relevance and similarity conversion."""

    @pytest.mark.parametrize(
        ("similarity", "relevance"),
        [(-1.0, 0.0), (0.0, 0.5), (1.0, 1.0), (0.5, 0.75)],
    )
    def test_relevance_from_cosine(self, similarity: float, relevance: float) -> None:
        """Similarity in [-1, 1] maps onto [0, 1]."""
        assert relevance_from_cosine(similarity) == pytest.approx(relevance)

    @pytest.mark.parametrize("relevance", [0.0, 0.1, 0.25, 0.5, 0.8, 1.0])
    def test_threshold_round_trip(self, relevance: float) -> None:
        """Converting a threshold and back is the identity."""
        assert relevance_from_cosine(cosine_from_relevance(relevance)) == pytest.approx(
            relevance
        )


class TestBuildQuery:
    """Tests for query construction."""

    def test_single_vector_term(self, schema: SchemaConfig) -> None:
        """Query has one term over the vector field."""
        translator = SearchTranslator(schema)
        query = translator.build_query(Embedding(vector=[0.1, 0.2]), 5, 0.75)

        assert len(query.query.sum) == 1
        term = query.query.sum[0]
        assert term.field == "embedding"
        assert term.feature == [0.1, 0.2]
        assert term.min_score == pytest.approx(0.5)
        assert query.size == 5
        assert query.fields == ["text", "embedding", "author", "rating", "year"]

    def test_zero_min_score(self, schema: SchemaConfig) -> None:
        """Relevance 0 asks for similarity -1 and above."""
        query = SearchTranslator(schema).build_query(Embedding(vector=[1.0]), 1)
        assert query.query.sum[0].min_score == -1.0

    def test_extra_fields(self, schema: SchemaConfig) -> None:
        """Extra fields are appended to the projection."""
        query = SearchTranslator(schema).build_query(
            Embedding(vector=[1.0]), 1, extra_fields=["genre"]
        )
        assert query.fields[-1] == "genre"

    def test_request_body(self, schema: SchemaConfig) -> None:
        """Wire body omits unset parameters."""
        query = SearchTranslator(schema).build_query(Embedding(vector=[1.0]), 2, 1.0)
        assert query.to_request() == {
            "query": {"sum": [{"field": "embedding", "feature": [1.0], "min_score": 1.0}]},
            "size": 2,
            "fields": ["text", "embedding", "author", "rating", "year"],
        }

    def test_invalid_max_results(self, schema: SchemaConfig) -> None:
        """max_results below 1 is rejected."""
        with pytest.raises(ValidationError):
            SearchTranslator(schema).build_query(Embedding(vector=[1.0]), 0)

    def test_invalid_min_score(self, schema: SchemaConfig) -> None:
        """Relevance outside [0, 1] is rejected."""
        with pytest.raises(ValidationError):
            SearchTranslator(schema).build_query(Embedding(vector=[1.0]), 1, 1.5)


class TestTranslateHits:
    """Tests for hit translation."""

    @pytest.mark.parametrize("hits", [None, []])
    def test_no_hits(self, schema: SchemaConfig, hits: list[SearchHit] | None) -> None:
        """No hits produce an empty list."""
        assert SearchTranslator(schema).translate_hits(hits) == []

    def test_text_and_metadata(self, schema: SchemaConfig) -> None:
        """Every non-vector, non-text field becomes metadata."""
        hit = _hit(
            "id-1",
            0.6,
            embedding={"feature": [1, 2]},
            text="hello",
            author="ann",
            genre="sf",
        )

        [match] = SearchTranslator(schema).translate_hits([hit])

        assert match.embedding_id == "id-1"
        assert match.score == pytest.approx(0.8)
        assert match.embedding.vector == [1.0, 2.0]
        assert match.embedded is not None
        assert match.embedded.text == "hello"
        assert match.embedded.metadata == {"author": "ann", "genre": "sf"}

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_blank_text_drops_metadata(
        self,
        schema: SchemaConfig,
        text: str | None,
    ) -> None:
        """Hits without text have no text segment."""
        hit = _hit("id-1", 1.0, embedding={"feature": [1.0]}, text=text, author="ann")
        [match] = SearchTranslator(schema).translate_hits([hit])
        assert match.embedded is None

    def test_non_string_text(self, schema: SchemaConfig) -> None:
        """Non-string text is converted to a string."""
        hit = _hit("id-1", 1.0, embedding={"feature": [1.0]}, text=42)
        [match] = SearchTranslator(schema).translate_hits([hit])
        assert match.embedded is not None
        assert match.embedded.text == "42"

    def test_preserves_order(self, schema: SchemaConfig) -> None:
        """Matches keep the service order."""
        hits = [
            _hit("a", 0.9, embedding={"feature": [1.0]}),
            _hit("b", 0.4, embedding={"feature": [1.0]}),
            _hit("c", -0.2, embedding={"feature": [1.0]}),
        ]
        matches = SearchTranslator(schema).translate_hits(hits)
        assert [m.embedding_id for m in matches] == ["a", "b", "c"]
        scores = [m.score for m in matches]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.parametrize(
        "source",
        [
            {"text": "hello"},
            {"embedding": [1.0, 2.0]},
            {"embedding": {"feature": None}},
            {"embedding": {"feature": []}},
            {"embedding": {"feature": ["x"]}},
        ],
    )
    def test_missing_vector(self, schema: SchemaConfig, source: dict) -> None:
        """Hits without a usable vector are translation errors."""
        hit = SearchHit(id="id-1", score=0.5, source=source)
        with pytest.raises(VectorStoreError) as exc_info:
            SearchTranslator(schema).translate_hits([hit])
        assert exc_info.value.code == ErrorCode.DOCUMENT_TRANSLATION_ERROR

    def test_out_of_range_score_not_clamped(
        self,
        schema: SchemaConfig,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """Scores outside [-1, 1] pass through with a warning."""
        hit = _hit("id-1", 1.2, embedding={"feature": [1.0]})
        with caplog.at_level(logging.WARNING):
            [match] = SearchTranslator(schema).translate_hits([hit])
        assert match.score == pytest.approx(1.1)
        assert "outside" in caplog.text
