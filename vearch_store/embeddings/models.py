"""Embedding and text segment models."""

import math
from typing import Any

from pydantic import BaseModel, Field, field_validator


class Embedding(BaseModel):
    """A dense vector.

    The model is mutable: ``normalize`` rescales the components in place,
    so an instance shared between callers observes the change.

    Attributes:
        vector: The embedding components.
    """

    vector: list[float] = Field(description="Embedding components")

    @field_validator("vector")
    @classmethod
    def _check_components(cls, value: list[float]) -> list[float]:
        if not value:
            raise ValueError("embedding vector must not be empty")
        if not all(math.isfinite(component) for component in value):
            raise ValueError("embedding vector components must be finite")
        return value

    @classmethod
    def from_values(cls, values: list[float]) -> "Embedding":
        """Create an embedding from a sequence of numbers."""
        return cls(vector=[float(v) for v in values])

    def dimension(self) -> int:
        """Number of components."""
        return len(self.vector)

    def vector_as_list(self) -> list[float]:
        """Copy of the components as floats."""
        return [float(v) for v in self.vector]

    def normalize(self) -> None:
        """Rescale to unit L2 norm in place.

        A zero vector is left unchanged.
        """
        norm = math.sqrt(sum(v * v for v in self.vector))
        if norm == 0.0:
            return
        self.vector[:] = [v / norm for v in self.vector]


class TextSegment(BaseModel):
    """A piece of text and the metadata that travels with it.

    Attributes:
        text: The text content.
        metadata: Arbitrary key/value metadata.
    """

    text: str = Field(description="Text content")
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Segment metadata",
    )

    @field_validator("text")
    @classmethod
    def _check_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("text must not be blank")
        return value

    @classmethod
    def from_text(cls, text: str, **metadata: Any) -> "TextSegment":
        """Create a text segment with keyword metadata.

        Args:
            text: The text content.
            **metadata: Metadata entries.

        Returns:
            New TextSegment instance.
        """
        return cls(text=text, metadata=metadata)

    def get(self, key: str, default: Any = None) -> Any:
        """Get a metadata value."""
        return self.metadata.get(key, default)
