"""Document store models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .graph import GraphScope

SCHEMA_VERSION = 1

_KIND_ALIASES = {"file": "leaf", "folder": "container"}


class DocumentKind(str, Enum):
    LEAF = "leaf"
    CONTAINER = "container"


class Document(BaseModel):
    """A leaf document or a container of child documents."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "research",
                "name": "Research",
                "kind": "container",
                "children": [
                    {
                        "id": "graphs",
                        "name": "Graphs.md",
                        "kind": "leaf",
                        "content": "Notes on force layouts. See [[Knowledge]].",
                    }
                ],
            }
        }
    )

    id: str = Field(..., min_length=1, description="Unique identifier across the store")
    name: str = Field(..., description="Display name, may include an extension")
    kind: DocumentKind = Field(default=DocumentKind.LEAF)
    content: Optional[str] = Field(None, description="Text content (leaf only)")
    children: list[Document] = Field(default_factory=list, description="Ordered children (container only)")

    @field_validator("kind", mode="before")
    @classmethod
    def _accept_kind_aliases(cls, value):
        if isinstance(value, str):
            return _KIND_ALIASES.get(value.lower(), value.lower())
        return value

    @model_validator(mode="after")
    def _check_shape(self) -> Document:
        if self.kind is DocumentKind.LEAF and self.children:
            raise ValueError(f"Leaf document '{self.id}' cannot have children")
        if self.kind is DocumentKind.CONTAINER and self.content is not None:
            raise ValueError(f"Container '{self.id}' cannot have content")
        return self

    @property
    def is_leaf(self) -> bool:
        return self.kind is DocumentKind.LEAF


class DocumentBundle(BaseModel):
    """Versioned payload holding the document forest and the graph view state."""

    model_config = ConfigDict(extra="ignore")

    schema_version: int = Field(default=SCHEMA_VERSION, ge=1)
    documents: list[Document] = Field(default_factory=list)
    scope: GraphScope = Field(default=GraphScope.ALL)
    focus_id: Optional[str] = None

    @field_validator("schema_version")
    @classmethod
    def _supported_version(cls, value: int) -> int:
        if value > SCHEMA_VERSION:
            raise ValueError(
                f"Unsupported schema_version {value}; this build reads up to {SCHEMA_VERSION}"
            )
        return value


__all__ = ["SCHEMA_VERSION", "Document", "DocumentKind", "DocumentBundle"]
