"""Vearch REST API request and response models."""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseWrapper(BaseModel):
    """Envelope returned by the router for management calls."""

    code: int = Field(description="Service status code")
    msg: str | None = Field(default=None, description="Service message")
    data: Any = Field(default=None, description="Response payload")


class ListDatabaseResponse(BaseModel):
    """Entry of the database listing."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="Database id")
    name: str = Field(description="Database name")


class CreateDatabaseRequest(BaseModel):
    """Body of a database creation call."""

    name: str = Field(description="Database name")


class ListSpaceResponse(BaseModel):
    """Entry of the space listing."""

    model_config = ConfigDict(extra="ignore")

    id: int | None = Field(default=None, description="Space id")
    name: str = Field(description="Space name")
    db_id: int | None = Field(default=None, description="Owning database id")
    partition_num: int | None = Field(default=None, description="Partitions")
    replica_num: int | None = Field(default=None, description="Replicas")


class CreateSpaceRequest(BaseModel):
    """Body of a space creation call."""

    model_config = ConfigDict(protected_namespaces=())

    name: str = Field(description="Space name")
    engine: dict[str, Any] = Field(description="Engine parameters")
    replica_num: int = Field(default=1, description="Replicas")
    partition_num: int = Field(default=1, description="Partitions")
    properties: dict[str, dict[str, Any]] = Field(description="Property declarations")
    models: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Model declarations",
    )

    def to_request(self) -> dict[str, Any]:
        body = self.model_dump(mode="json")
        if not body["models"]:
            del body["models"]
        return body


class BulkRequest(BaseModel):
    """A batch of documents written in a single call.

    Each document must carry its id under ``_id``.
    """

    documents: list[dict[str, Any]] = Field(description="Documents to upsert")

    def to_ndjson(self) -> str:
        """Encode as alternating action and source lines."""
        lines: list[str] = []
        for document in self.documents:
            source = {k: v for k, v in document.items() if k != "_id"}
            lines.append(json.dumps({"index": {"_id": document["_id"]}}))
            lines.append(json.dumps(source, ensure_ascii=False))
        return "\n".join(lines) + "\n"


class VectorTerm(BaseModel):
    """One vector clause of a search query."""

    field: str = Field(description="Vector field to search")
    feature: list[float] = Field(description="Query vector")
    min_score: float | None = Field(default=None, description="Raw score floor")
    boost: float | None = Field(default=None, description="Score weight")


class QueryParam(BaseModel):
    """Query body; scores of all terms are summed."""

    sum: list[VectorTerm] = Field(description="Vector terms")


class SearchQuery(BaseModel):
    """Body of a search call."""

    query: QueryParam = Field(description="Vector query")
    size: int = Field(description="Maximum hits")
    fields: list[str] = Field(default_factory=list, description="Projection")
    retrieval_param: dict[str, Any] | None = Field(
        default=None,
        description="Index specific search parameters",
    )

    def to_request(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class SearchHit(BaseModel):
    """A single searched document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(alias="_id", description="Document id")
    score: float = Field(alias="_score", description="Raw similarity score")
    source: dict[str, Any] = Field(
        default_factory=dict,
        alias="_source",
        description="Projected fields",
    )


class SearchHits(BaseModel):
    """Hit list with totals."""

    model_config = ConfigDict(extra="ignore")

    total: int = Field(default=0, description="Total matching documents")
    max_score: float | None = Field(default=None, description="Best raw score")
    hits: list[SearchHit] | None = Field(default=None, description="Hits")


class SearchResponse(BaseModel):
    """Body returned by a search call."""

    model_config = ConfigDict(extra="ignore")

    took: int | None = Field(default=None, description="Milliseconds spent")
    timed_out: bool = Field(default=False, description="Search timed out")
    hits: SearchHits = Field(default_factory=SearchHits, description="Results")
