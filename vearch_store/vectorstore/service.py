"""Embedding store backed by a Vearch space."""

from uuid import uuid4

from vearch_store.client.client import VearchClient
from vearch_store.client.models import (
    BulkRequest,
    CreateDatabaseRequest,
    CreateSpaceRequest,
)
from vearch_store.config import VearchSettings, get_settings
from vearch_store.embeddings.models import Embedding, TextSegment
from vearch_store.exceptions import ConfigurationError
from vearch_store.logging_config import get_logger
from vearch_store.observability.metrics import (
    track_documents_written,
    track_search_results,
    track_vectorstore_operation,
)
from vearch_store.schema.models import SchemaConfig, default_schema_config
from vearch_store.vectorstore.mapper import DocumentMapper
from vearch_store.vectorstore.models import (
    EmbeddingMatch,
    EmbeddingSearchRequest,
    EmbeddingSearchResult,
)
from vearch_store.vectorstore.translator import SearchTranslator

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 60.0
REPLICA_NUM = 1
PARTITION_NUM = 1


class VearchEmbeddingStore:
    """Stores embeddings with optional text in a Vearch space.

    The database and space are created on construction when missing.
    That check-then-create is not atomic: two stores constructed at the
    same time against an empty service can both issue the create calls.

    With ``normalize_embeddings`` set, embeddings passed to the add
    methods are normalized in place. Do not share one Embedding between
    concurrent adds in that mode.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        schema: SchemaConfig | None = None,
        normalize_embeddings: bool | None = None,
        client: VearchClient | None = None,
    ) -> None:
        """Initialize the store and bootstrap its database and space.

        Args:
            base_url: Vearch router URL.
            timeout: Request timeout in seconds (default 60).
            schema: Target schema (default: default_schema_config()).
            normalize_embeddings: Normalize embeddings before storing.
            client: Existing transport client (for testing).

        Raises:
            ConfigurationError: If base_url is missing.
            VectorStoreError: If bootstrap calls fail.
        """
        if not base_url:
            raise ConfigurationError(
                "base_url cannot be null",
                details={"parameter": "base_url"},
            )

        self._schema = schema or default_schema_config()
        self._normalize_embeddings = bool(normalize_embeddings)
        self._owns_client = client is None
        if client is None:
            client = VearchClient(
                base_url=base_url,
                timeout=timeout if timeout is not None else DEFAULT_TIMEOUT,
            )
        self._client = client
        self._mapper = DocumentMapper(self._schema)
        self._translator = SearchTranslator(self._schema)

        try:
            self._bootstrap()
        except Exception:
            self.close()
            raise

    @classmethod
    def from_settings(
        cls,
        settings: VearchSettings | None = None,
        schema: SchemaConfig | None = None,
        client: VearchClient | None = None,
    ) -> "VearchEmbeddingStore":
        """Build a store from environment settings.

        Args:
            settings: Vearch configuration (default from environment).
            schema: Schema override; built from settings when omitted.
            client: Existing transport client.

        Returns:
            A bootstrapped store.
        """
        settings = settings or get_settings().vearch
        return cls(
            base_url=settings.base_url,
            timeout=settings.timeout,
            schema=schema or settings.to_schema_config(),
            normalize_embeddings=settings.normalize_embeddings,
            client=client,
        )

    @property
    def schema(self) -> SchemaConfig:
        return self._schema

    @property
    def normalize_embeddings(self) -> bool:
        return self._normalize_embeddings

    def close(self) -> None:
        """Close the transport client if we own it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "VearchEmbeddingStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _bootstrap(self) -> None:
        database_name = self._schema.database_name
        space_name = self._schema.space_name

        with track_vectorstore_operation("bootstrap"):
            if not self._database_exists(database_name):
                self._client.create_database(CreateDatabaseRequest(name=database_name))
                logger.info(
                    f"Created database: {database_name}",
                    extra={"database": database_name},
                )

            if not self._space_exists(database_name, space_name):
                self._client.create_space(
                    database_name,
                    CreateSpaceRequest(
                        name=space_name,
                        engine=self._schema.space_engine.model_dump(mode="json"),
                        replica_num=REPLICA_NUM,
                        partition_num=PARTITION_NUM,
                        properties=self._schema.properties_request(),
                        models=[
                            model.model_dump(mode="json")
                            for model in self._schema.model_params
                        ],
                    ),
                )
                logger.info(
                    f"Created space: {space_name}",
                    extra={"database": database_name, "space": space_name},
                )

    def _database_exists(self, database_name: str) -> bool:
        return any(db.name == database_name for db in self._client.list_databases())

    def _space_exists(self, database_name: str, space_name: str) -> bool:
        spaces = self._client.list_spaces(database_name)
        return any(space.name == space_name for space in spaces)

    def add(self, embedding: Embedding) -> str:
        """Store an embedding under a generated id.

        Returns:
            The generated id.
        """
        id = _random_id()
        self._add_all([id], [embedding], None)
        return id

    def add_with_id(self, id: str, embedding: Embedding) -> None:
        """Store an embedding under the given id."""
        self._add_all([id], [embedding], None)

    def add_with_text(self, embedding: Embedding, text_segment: TextSegment) -> str:
        """Store an embedding with its text and metadata.

        Returns:
            The generated id.
        """
        id = _random_id()
        self._add_all([id], [embedding], [text_segment])
        return id

    def add_all(
        self,
        embeddings: list[Embedding],
        text_segments: list[TextSegment] | None = None,
    ) -> list[str]:
        """Store a batch of embeddings in one bulk write.

        Args:
            embeddings: Vectors to store.
            text_segments: Optional text per embedding, same length.

        Returns:
            Generated ids, in input order.

        Raises:
            ValidationError: If the batch is empty or sizes differ.
        """
        ids = [_random_id() for _ in embeddings]
        self._add_all(ids, embeddings, text_segments)
        return ids

    def add_all_with_ids(
        self,
        ids: list[str],
        embeddings: list[Embedding],
        text_segments: list[TextSegment] | None = None,
    ) -> None:
        """Store a batch under caller-supplied ids."""
        self._add_all(ids, embeddings, text_segments)

    def _add_all(
        self,
        ids: list[str],
        embeddings: list[Embedding],
        text_segments: list[TextSegment] | None,
    ) -> None:
        documents = self._mapper.map_all_to_documents(
            ids,
            embeddings,
            text_segments,
            normalize=self._normalize_embeddings,
        )

        with track_vectorstore_operation("add"):
            self._client.bulk(
                self._schema.database_name,
                self._schema.space_name,
                BulkRequest(documents=documents),
            )

        track_documents_written(len(documents))
        logger.debug(
            f"Wrote {len(documents)} documents",
            extra={"space": self._schema.space_name, "count": len(documents)},
        )

    def search(
        self,
        request: EmbeddingSearchRequest,
        extra_fields: tuple[str, ...] | list[str] = (),
    ) -> EmbeddingSearchResult:
        """Find the stored embeddings closest to the query.

        Args:
            request: Query vector, result limit and minimum relevance.
            extra_fields: Additional source fields to return as metadata.

        Returns:
            Matches in service order, highest relevance first.
        """
        query = self._translator.build_query(
            request.query_embedding,
            request.max_results,
            request.min_score,
            extra_fields,
        )

        with track_vectorstore_operation("search"):
            response = self._client.search(
                self._schema.database_name,
                self._schema.space_name,
                query,
            )

        matches = self._translator.translate_hits(response.hits.hits)
        track_search_results(len(matches))
        logger.debug(
            f"Search returned {len(matches)} matches",
            extra={"space": self._schema.space_name, "count": len(matches)},
        )
        return EmbeddingSearchResult(matches=matches)

    def find_relevant(
        self,
        query_embedding: Embedding,
        max_results: int = 3,
        min_score: float = 0.0,
    ) -> list[EmbeddingMatch]:
        """Shorthand for search() returning the match list."""
        request = EmbeddingSearchRequest(
            query_embedding=query_embedding,
            max_results=max_results,
            min_score=min_score,
        )
        return self.search(request).matches

    def delete_space(self) -> None:
        """Delete the whole space and every document in it."""
        with track_vectorstore_operation("delete_space"):
            self._client.delete_space(self._schema.database_name, self._schema.space_name)
        logger.info(
            f"Deleted space: {self._schema.space_name}",
            extra={
                "database": self._schema.database_name,
                "space": self._schema.space_name,
            },
        )


def _random_id() -> str:
    return str(uuid4())
