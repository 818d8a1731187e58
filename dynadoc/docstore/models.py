"""
Type models for docstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class DocumentKey:
    """Key uniquely identifying a document in a table."""

    partition_key: str
    sort_key: str

    def __str__(self) -> str:
        return f'("{self.partition_key}", "{self.sort_key}")'


@dataclass(frozen=True)
class Document:
    """A versioned JSON document.

    A body of None means the document does not exist or has been deleted.
    Version 0 means the document has never been written.
    """

    id: DocumentKey
    body: str | None
    version: int


@dataclass(frozen=True)
class JsonEntity(Generic[T]):
    """Typed projection of a Document through a JsonSerializer."""

    id: DocumentKey
    entity: T | None
    version: int

    def modify(self, change: Callable[[T | None], U | None]) -> "JsonEntity[U]":
        """
        Return a copy holding a new entity value, at the same version.

        Args:
            change: Function computing the new entity from the current one

        Returns:
            The modified entity, ready to be passed to BatchBuilder.modify
        """
        return replace(self, entity=change(self.entity))  # type: ignore[return-value]

    def if_exists(self) -> "JsonEntity[T] | None":
        """Return this entity if it holds a value, None otherwise."""
        if self.entity is None:
            return None
        return self


def create_entity(partition_key: str, sort_key: str, entity: T) -> JsonEntity[T]:
    """
    Create an entity that has never been written.

    Args:
        partition_key: Partition key of the new document
        sort_key: Sort key of the new document
        entity: Entity value

    Returns:
        JsonEntity at version 0
    """
    return JsonEntity(DocumentKey(partition_key, sort_key), entity, 0)
