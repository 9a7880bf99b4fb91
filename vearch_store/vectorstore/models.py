"""Vector store search models."""

from pydantic import BaseModel, Field

from vearch_store.embeddings.models import Embedding, TextSegment


class EmbeddingMatch(BaseModel):
    """A stored embedding returned by a search.

    Attributes:
        score: Relevance score, 1.0 for an identical vector.
        embedding_id: Id of the stored document.
        embedding: The stored vector.
        embedded: Stored text and metadata, None for embedding-only entries.
    """

    score: float = Field(description="Relevance score")
    embedding_id: str = Field(description="Stored document id")
    embedding: Embedding = Field(description="Stored vector")
    embedded: TextSegment | None = Field(default=None, description="Stored text")


class EmbeddingSearchRequest(BaseModel):
    """A nearest-neighbour query.

    Attributes:
        query_embedding: Vector to search for.
        max_results: Maximum number of matches.
        min_score: Minimum relevance score of a match.

    Ranges are checked when the query is built, so an out-of-range
    request raises the store's ValidationError.
    """

    query_embedding: Embedding = Field(description="Query vector")
    max_results: int = Field(default=3, description="Maximum matches, at least 1")
    min_score: float = Field(
        default=0.0,
        description="Minimum relevance score in [0, 1]",
    )


class EmbeddingSearchResult(BaseModel):
    """Matches in the order returned by the service."""

    matches: list[EmbeddingMatch] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.matches)
