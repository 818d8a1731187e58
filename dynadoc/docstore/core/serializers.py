"""
JSON serializers used to turn entities into document bodies.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from pydantic import TypeAdapter

from ..models import Document, JsonEntity

T = TypeVar("T")


class JsonSerializer(ABC):
    """Converts entities to and from JSON object text."""

    @abstractmethod
    def serialize(self, value: Any) -> str:
        """Serialize an entity to JSON."""

    @abstractmethod
    def deserialize(self, json: str, entity_type: type[T]) -> T:
        """Deserialize JSON into an instance of entity_type."""


class PydanticJsonSerializer(JsonSerializer):
    """JsonSerializer based on pydantic type adapters.

    Handles pydantic models, dataclasses, TypedDicts and plain containers.
    None-valued fields are written out so they read back as None.
    """

    def __init__(self, by_alias: bool = True):
        self.by_alias = by_alias
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, entity_type: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(entity_type)
        if adapter is None:
            adapter = TypeAdapter(entity_type)
            self._adapters[entity_type] = adapter
        return adapter

    def serialize(self, value: Any) -> str:
        return self._adapter(type(value)).dump_json(value, by_alias=self.by_alias).decode("utf-8")

    def deserialize(self, json: str, entity_type: type[T]) -> T:
        return self._adapter(entity_type).validate_json(json)  # type: ignore[no-any-return]


def to_document(serializer: JsonSerializer, entity: JsonEntity[Any]) -> Document:
    """
    Convert an entity to the document written for it.

    Args:
        serializer: Serializer for the entity body
        entity: Entity to convert; a None entity becomes a None body

    Returns:
        Document with the same key and version
    """
    body = serializer.serialize(entity.entity) if entity.entity is not None else None
    return Document(id=entity.id, body=body, version=entity.version)


def from_document(
    serializer: JsonSerializer, document: Document, entity_type: type[T]
) -> JsonEntity[T]:
    """
    Convert a stored document to a typed entity.

    Args:
        serializer: Serializer for the entity body
        document: Document read from the store
        entity_type: Type to deserialize the body into

    Returns:
        Entity with the same key and version; None entity when the body is None
    """
    entity = None
    if document.body is not None:
        entity = serializer.deserialize(document.body, entity_type)
    return JsonEntity(id=document.id, entity=entity, version=document.version)
