"""Mapping of embeddings and text segments to space documents."""

from typing import Any

from vearch_store.embeddings.models import Embedding, TextSegment
from vearch_store.exceptions import (
    ConfigurationError,
    ErrorCode,
    ValidationError,
)
from vearch_store.schema.models import SchemaConfig, SpacePropertyType

FEATURE_KEY = "feature"
ID_KEY = "_id"


def coerce_value(value: Any, property_type: SpacePropertyType) -> Any:
    """Coerce a metadata value to its declared type.

    Absent values become the type default: "" for STRING, 0.0 for FLOAT,
    0 for INTEGER and [] for VECTOR.

    Args:
        value: Source value, None when absent.
        property_type: Declared property type.

    Returns:
        The coerced value.

    Raises:
        ConfigurationError: If the type is not a known property type.
        ValidationError: If the value cannot be converted.
    """
    type_name = getattr(property_type, "value", property_type)
    try:
        if property_type == SpacePropertyType.STRING:
            return "" if value is None else str(value)
        if property_type == SpacePropertyType.FLOAT:
            return 0.0 if value is None else float(value)
        if property_type == SpacePropertyType.INTEGER:
            if value is None:
                return 0
            if isinstance(value, float) and not value.is_integer():
                raise ValueError("not a whole number")
            return int(value)
        if property_type == SpacePropertyType.VECTOR:
            return [] if value is None else [float(v) for v in value]
    except (TypeError, ValueError, OverflowError) as e:
        raise ValidationError(
            f"Cannot convert {value!r} to {type_name}",
            details={"value": repr(value), "type": type_name},
        ) from e

    raise ConfigurationError(
        f"Unsupported property type {property_type!r}",
        code=ErrorCode.UNKNOWN_PROPERTY_TYPE,
        details={"type": repr(property_type)},
    )


class DocumentMapper:
    """Builds schema-conformant documents.

    Only the configured metadata fields are written, each coerced to its
    declared type or defaulted when missing.
    """

    def __init__(self, schema: SchemaConfig) -> None:
        self._schema = schema

    @property
    def schema(self) -> SchemaConfig:
        return self._schema

    def map_to_document(
        self,
        id: str,
        embedding: Embedding,
        text_segment: TextSegment | None = None,
        normalize: bool = False,
    ) -> dict[str, Any]:
        """Build the document for one embedding.

        Args:
            id: Document id.
            embedding: Vector to store. Normalized in place when
                ``normalize`` is set.
            text_segment: Optional text and metadata.
            normalize: Rescale the embedding to unit length first.

        Returns:
            Document keyed by ``_id``, the vector field, the text field
            and every configured metadata field.

        Raises:
            ValidationError: If id or embedding is empty.
            ConfigurationError: If a metadata field is not declared.
        """
        _check_entry(id, embedding)
        metadata = self._coerce_metadata(text_segment)
        return self._build_document(id, embedding, text_segment, metadata, normalize)

    def _coerce_metadata(self, text_segment: TextSegment | None) -> dict[str, Any]:
        schema = self._schema
        source = text_segment.metadata if text_segment else {}
        return {
            field_name: coerce_value(
                source.get(field_name),
                schema.property_type(field_name),
            )
            for field_name in schema.metadata_field_names
        }

    def _build_document(
        self,
        id: str,
        embedding: Embedding,
        text_segment: TextSegment | None,
        metadata: dict[str, Any],
        normalize: bool,
    ) -> dict[str, Any]:
        schema = self._schema
        if normalize:
            embedding.normalize()

        return {
            ID_KEY: id,
            schema.embedding_field_name: {FEATURE_KEY: embedding.vector_as_list()},
            schema.text_field_name: text_segment.text if text_segment else "",
            **metadata,
        }

    def map_all_to_documents(
        self,
        ids: list[str],
        embeddings: list[Embedding],
        text_segments: list[TextSegment] | None = None,
        normalize: bool = False,
    ) -> list[dict[str, Any]]:
        """Build documents for a batch.

        Every entry is validated and its metadata coerced before any
        embedding is normalized, so a rejected batch leaves the inputs
        unchanged.

        Raises:
            ValidationError: If a list is empty, the sizes differ or an
                entry or metadata value is invalid.
            ConfigurationError: If a metadata field is not declared.
        """
        if not ids:
            raise ValidationError("ids must not be empty", code=ErrorCode.EMPTY_BATCH)
        if not embeddings:
            raise ValidationError(
                "embeddings must not be empty",
                code=ErrorCode.EMPTY_BATCH,
            )
        if len(ids) != len(embeddings):
            raise ValidationError(
                "ids size is not equal to embeddings size",
                code=ErrorCode.SIZE_MISMATCH,
                details={"ids": len(ids), "embeddings": len(embeddings)},
            )
        if text_segments is not None and len(text_segments) != len(embeddings):
            raise ValidationError(
                "embeddings size is not equal to text segments size",
                code=ErrorCode.SIZE_MISMATCH,
                details={
                    "embeddings": len(embeddings),
                    "text_segments": len(text_segments),
                },
            )

        for field_name in self._schema.metadata_field_names:
            self._schema.property_type(field_name)

        segments: list[TextSegment | None] = (
            list(text_segments) if text_segments is not None else [None] * len(ids)
        )
        for id, embedding in zip(ids, embeddings):
            _check_entry(id, embedding)
        metadata = [self._coerce_metadata(segment) for segment in segments]

        return [
            self._build_document(ids[i], embeddings[i], segments[i], metadata[i], normalize)
            for i in range(len(ids))
        ]


def _check_entry(id: str, embedding: Embedding) -> None:
    if not id:
        raise ValidationError("Document id must not be empty")
    if embedding is None or not embedding.vector:
        raise ValidationError(
            "Embedding must not be empty",
            details={"id": id},
        )
