"""Space schema models.

A SchemaConfig is built once per store and never mutated afterwards, so
it can be shared by the mapper, the translator and concurrent callers.
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from vearch_store.exceptions import ConfigurationError, ErrorCode

DEFAULT_DATABASE_NAME = "embedding_db"
DEFAULT_SPACE_NAME = "embedding_space"
DEFAULT_EMBEDDING_FIELD_NAME = "embedding"
DEFAULT_TEXT_FIELD_NAME = "text"
DEFAULT_DIMENSION = 384


class SpacePropertyType(str, Enum):
    """Declared type of a space property."""

    STRING = "string"
    FLOAT = "float"
    INTEGER = "integer"
    VECTOR = "vector"


class SpaceStoreType(str, Enum):
    """Storage mode of a vector property."""

    MEMORY_ONLY = "MemoryOnly"
    ROCKS_DB = "RocksDB"


class RetrievalType(str, Enum):
    """Index type used by the gamma engine."""

    IVFPQ = "IVFPQ"
    HNSW = "HNSW"
    GPU = "GPU"
    IVFFLAT = "IVFFLAT"
    BINARYIVF = "BINARYIVF"
    FLAT = "FLAT"


class SpacePropertyParam(BaseModel):
    """Declaration of a single space property.

    Only ``type`` drives local behavior. The remaining attributes are
    sent as-is when the space is created.
    """

    model_config = ConfigDict(frozen=True)

    type: SpacePropertyType = Field(description="Declared property type")
    index: bool | None = Field(default=None, description="Build a scalar index")
    dimension: int | None = Field(default=None, description="Vector dimension")
    store_type: SpaceStoreType | None = Field(
        default=None,
        description="Vector storage mode",
    )
    format: str | None = Field(default=None, description="Vector format")
    array: bool | None = Field(default=None, description="Multi-valued property")

    def to_request(self) -> dict[str, Any]:
        """Wire representation for space creation."""
        return self.model_dump(mode="json", exclude_none=True)


def string_param(index: bool | None = None) -> SpacePropertyParam:
    return SpacePropertyParam(type=SpacePropertyType.STRING, index=index)


def float_param(index: bool | None = None) -> SpacePropertyParam:
    return SpacePropertyParam(type=SpacePropertyType.FLOAT, index=index)


def integer_param(index: bool | None = None) -> SpacePropertyParam:
    return SpacePropertyParam(type=SpacePropertyType.INTEGER, index=index)


def vector_param(
    dimension: int,
    store_type: SpaceStoreType = SpaceStoreType.MEMORY_ONLY,
    format: str | None = None,
) -> SpacePropertyParam:
    return SpacePropertyParam(
        type=SpacePropertyType.VECTOR,
        index=True,
        dimension=dimension,
        store_type=store_type,
        format=format,
    )


class SpaceEngine(BaseModel):
    """Engine parameters passed through to space creation."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="gamma", description="Engine name")
    index_size: int = Field(default=1, description="Documents before indexing")
    retrieval_type: RetrievalType = Field(
        default=RetrievalType.FLAT,
        description="Index type",
    )
    retrieval_param: Mapping[str, Any] = Field(
        default_factory=lambda: {"metric_type": "InnerProduct"},
        description="Index specific parameters",
    )

    @field_validator("retrieval_param", mode="after")
    @classmethod
    def _freeze_retrieval_param(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("retrieval_param")
    def _dump_retrieval_param(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)


class ModelParam(BaseModel):
    """Server-side model declaration passed through to space creation."""

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_id: str = Field(description="Model identifier")
    fields: tuple[str, ...] = Field(default=(), description="Input fields")
    out: str = Field(description="Output field")


class SchemaConfig(BaseModel):
    """Immutable description of the target database and space.

    Attributes:
        database_name: Database holding the space.
        space_name: Space holding the documents.
        embedding_field_name: Name of the vector property.
        text_field_name: Name of the text property.
        metadata_field_names: Metadata properties written on every add,
            in write order.
        properties: Declared type of every property in the space,
            read-only after construction.
        space_engine: Engine parameters for space creation.
        model_params: Model declarations for space creation.
    """

    model_config = ConfigDict(frozen=True, protected_namespaces=())

    database_name: str = Field(default=DEFAULT_DATABASE_NAME, min_length=1)
    space_name: str = Field(default=DEFAULT_SPACE_NAME, min_length=1)
    embedding_field_name: str = Field(
        default=DEFAULT_EMBEDDING_FIELD_NAME,
        min_length=1,
    )
    text_field_name: str = Field(default=DEFAULT_TEXT_FIELD_NAME, min_length=1)
    metadata_field_names: tuple[str, ...] = Field(default=())
    properties: Mapping[str, SpacePropertyParam] = Field(default_factory=dict)
    space_engine: SpaceEngine = Field(default_factory=SpaceEngine)
    model_params: tuple[ModelParam, ...] = Field(default=())

    @field_validator("properties", mode="after")
    @classmethod
    def _freeze_properties(
        cls,
        value: Mapping[str, SpacePropertyParam],
    ) -> Mapping[str, SpacePropertyParam]:
        return MappingProxyType(dict(value))

    @field_serializer("properties")
    def _dump_properties(
        self,
        value: Mapping[str, SpacePropertyParam],
    ) -> dict[str, SpacePropertyParam]:
        return dict(value)

    def property_type(self, field_name: str) -> SpacePropertyType:
        """Declared type of a property.

        Raises:
            ConfigurationError: If the property is not declared.
        """
        prop = self.properties.get(field_name)
        if prop is None:
            raise ConfigurationError(
                f"Metadata field {field_name} not found in schema properties",
                code=ErrorCode.METADATA_FIELD_NOT_DECLARED,
                details={"field": field_name},
            )
        return prop.type

    def projection_fields(self, extra: tuple[str, ...] | list[str] = ()) -> list[str]:
        """Fields requested back from a search, without duplicates."""
        fields: list[str] = []
        for name in (
            self.text_field_name,
            self.embedding_field_name,
            *self.metadata_field_names,
            *extra,
        ):
            if name not in fields:
                fields.append(name)
        return fields

    def properties_request(self) -> dict[str, dict[str, Any]]:
        """Wire representation of all properties."""
        return {name: prop.to_request() for name, prop in self.properties.items()}


def default_schema_config(
    database_name: str = DEFAULT_DATABASE_NAME,
    space_name: str = DEFAULT_SPACE_NAME,
    embedding_field_name: str = DEFAULT_EMBEDDING_FIELD_NAME,
    text_field_name: str = DEFAULT_TEXT_FIELD_NAME,
    dimension: int = DEFAULT_DIMENSION,
) -> SchemaConfig:
    """Schema with a text field, one vector field and no metadata.

    Args:
        database_name: Database name.
        space_name: Space name.
        embedding_field_name: Vector field name.
        text_field_name: Text field name.
        dimension: Vector dimension.

    Returns:
        SchemaConfig using a FLAT gamma engine.
    """
    return SchemaConfig(
        database_name=database_name,
        space_name=space_name,
        embedding_field_name=embedding_field_name,
        text_field_name=text_field_name,
        properties={
            embedding_field_name: vector_param(dimension),
            text_field_name: string_param(),
        },
        space_engine=SpaceEngine(),
        model_params=(
            ModelParam(model_id="vgg16", fields=("string",), out="feature"),
        ),
    )
