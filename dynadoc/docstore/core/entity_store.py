"""
Typed entity store on top of a DocumentStore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Iterable
from typing import Any, TypeVar

from ..models import DocumentKey, JsonEntity
from .document_store import DocumentStore
from .serializers import JsonSerializer, from_document, to_document

T = TypeVar("T")


class EntityStore:
    """Retrieves and modifies documents represented as JsonEntity objects."""

    def __init__(self, document_store: DocumentStore, serializer: JsonSerializer):
        self.document_store = document_store
        self.serializer = serializer

    def update_entities(
        self,
        updated: Iterable[JsonEntity[Any]] = (),
        checked: Iterable[JsonEntity[Any]] = (),
    ) -> None:
        """
        Atomically write entities and assert the version of others.

        Args:
            updated: Entities to write; a None entity deletes the document
            checked: Entities whose version must match; their value is ignored

        Raises:
            UpdateConflictError: If any expected version does not match
        """
        self.document_store.update_documents(
            [to_document(self.serializer, entity) for entity in updated],
            [to_document(self.serializer, JsonEntity(e.id, None, e.version)) for e in checked],
        )

    def update_entity(self, *entities: JsonEntity[Any]) -> None:
        """Atomically write entities, without version checks on other keys."""
        self.update_entities(entities, ())

    def get_entities(
        self, ids: Iterable[DocumentKey], entity_type: type[T]
    ) -> list[JsonEntity[T]]:
        """
        Retrieve entities by key.

        Args:
            ids: Keys to read, duplicates allowed
            entity_type: Type to deserialize bodies into

        Returns:
            One entity per key, in input order; absent documents have a None entity
        """
        documents = self.document_store.get_documents(ids)
        return [from_document(self.serializer, document, entity_type) for document in documents]

    def get_entity(self, id: DocumentKey, entity_type: type[T]) -> JsonEntity[T]:
        """Retrieve a single entity."""
        return self.get_entities([id], entity_type)[0]
