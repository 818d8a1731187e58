"""
Accumulates writes and version checks for one atomic transaction.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from collections.abc import Callable
from typing import Any, TypeVar

from ..exceptions import BatchBuilderError
from ..models import DocumentKey, JsonEntity
from .entity_store import EntityStore

T = TypeVar("T")
U = TypeVar("U")


class BatchBuilder:
    """Collects modified and checked entities, then submits them atomically.

    A key is either modified once or checked at a single version within a
    batch. Each modify/check call applies completely or not at all.
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self.checked: dict[DocumentKey, JsonEntity[Any]] = {}
        self.modified: dict[DocumentKey, JsonEntity[Any]] = {}

    def modify(self, *entities: JsonEntity[Any]) -> None:
        """
        Add entities to write.

        Modifying a key already checked at the same version replaces the check.

        Args:
            *entities: Entities to write, at their expected current version

        Raises:
            BatchBuilderError: If a key is already modified, or checked at
                another version
        """
        checked = dict(self.checked)
        modified = dict(self.modified)

        for entity in entities:
            existing_check = checked.get(entity.id)

            if existing_check is not None:
                if existing_check.version != entity.version:
                    raise BatchBuilderError(
                        f"A different version of document {entity.id} is already being checked."
                    )
                del checked[entity.id]

            elif entity.id in modified:
                raise BatchBuilderError(f"Document {entity.id} is already being modified.")

            modified[entity.id] = entity

        self.checked = checked
        self.modified = modified

    def check(self, *entities: JsonEntity[Any]) -> None:
        """
        Add entities whose version must still match at submit time.

        Checking a key already checked or modified at the same version is a no-op.

        Args:
            *entities: Entities to check

        Raises:
            BatchBuilderError: If the key is checked or modified at another version
        """
        checked = dict(self.checked)

        for entity in entities:
            existing_check = checked.get(entity.id)
            existing_modify = self.modified.get(entity.id)

            if existing_check is not None:
                if existing_check.version != entity.version:
                    raise BatchBuilderError(
                        f"A different version of document {entity.id} is already being checked."
                    )
                continue

            if existing_modify is not None:
                if existing_modify.version != entity.version:
                    raise BatchBuilderError(
                        f"A different version of document {entity.id} is already being modified."
                    )
                continue

            checked[entity.id] = entity

        self.checked = checked

    def modify_entity(
        self, entity: JsonEntity[T], change: Callable[[T | None], U | None]
    ) -> JsonEntity[U]:
        """
        Apply a change to an entity and add the result to the batch.

        Args:
            entity: Entity at its current version
            change: Function computing the new entity value

        Returns:
            The modified entity
        """
        modified = entity.modify(change)
        self.modify(modified)
        return modified

    def submit(self) -> None:
        """
        Write all accumulated entities in one transaction.

        The builder is emptied on success. On failure its content is left as
        is and the builder should be discarded.

        Raises:
            UpdateConflictError: If any expected version does not match
        """
        self.store.update_entities(list(self.modified.values()), list(self.checked.values()))

        self.checked.clear()
        self.modified.clear()
