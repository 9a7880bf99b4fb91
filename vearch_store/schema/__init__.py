"""Space schema module."""

from vearch_store.schema.models import (
    ModelParam,
    RetrievalType,
    SchemaConfig,
    SpaceEngine,
    SpacePropertyParam,
    SpacePropertyType,
    SpaceStoreType,
    default_schema_config,
    float_param,
    integer_param,
    string_param,
    vector_param,
)

__all__ = [
    "ModelParam",
    "RetrievalType",
    "SchemaConfig",
    "SpaceEngine",
    "SpacePropertyParam",
    "SpacePropertyType",
    "SpaceStoreType",
    "default_schema_config",
    "float_param",
    "integer_param",
    "string_param",
    "vector_param",
]
