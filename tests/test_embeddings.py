"""Tests for embedding domain models."""

import math

import pytest
from pydantic import ValidationError as PydanticValidationError

from vearch_store.embeddings.models import Embedding, TextSegment


class TestEmbedding:
    """Tests for Embedding model."""

    def test_from_values(self) -> None:
        """Embedding can be created from integers."""
        embedding = Embedding.from_values([1, 2, 3])
        assert embedding.vector == [1.0, 2.0, 3.0]
        assert embedding.dimension() == 3

    def test_empty_vector_rejected(self) -> None:
        """Empty vectors are invalid."""
        with pytest.raises(PydanticValidationError, match="empty"):
            Embedding(vector=[])

    def test_non_finite_rejected(self) -> None:
        """NaN and infinity are invalid."""
        with pytest.raises(PydanticValidationError, match="finite"):
            Embedding(vector=[0.1, math.nan])
        with pytest.raises(PydanticValidationError, match="finite"):
            Embedding(vector=[math.inf])

    def test_vector_as_list_is_copy(self) -> None:
        """vector_as_list does not expose the internal list."""
        embedding = Embedding(vector=[0.5, 0.5])
        values = embedding.vector_as_list()
        values[0] = 9.0
        assert embedding.vector == [0.5, 0.5]

    def test_normalize_in_place(self) -> None:
        """normalize rescales to unit length."""
        embedding = Embedding(vector=[3.0, 4.0])
        embedding.normalize()
        assert embedding.vector == pytest.approx([0.6, 0.8])
        assert math.sqrt(sum(v * v for v in embedding.vector)) == pytest.approx(1.0)

    def test_normalize_zero_vector(self) -> None:
        """Zero vector is left unchanged."""
        embedding = Embedding(vector=[0.0, 0.0])
        embedding.normalize()
        assert embedding.vector == [0.0, 0.0]


class TestTextSegment:
    """Tests for TextSegment model."""

    def test_from_text(self) -> None:
        """Keyword arguments become metadata."""
        segment = TextSegment.from_text("hello", author="ann", year=2020)
        assert segment.text == "hello"
        assert segment.metadata == {"author": "ann", "year": 2020}
        assert segment.get("author") == "ann"
        assert segment.get("missing", "x") == "x"

    def test_default_metadata(self) -> None:
        """Metadata defaults to empty."""
        assert TextSegment(text="hello").metadata == {}

    def test_blank_text_rejected(self) -> None:
        """Blank text is invalid."""
        with pytest.raises(PydanticValidationError, match="blank"):
            TextSegment(text="   ")
