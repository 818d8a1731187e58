"""
Document store backed by DynamoDB transactions.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from botocore.exceptions import ClientError

from ..constants import (
    CONDITION_NOT_EXISTS,
    CONDITION_VERSION,
    CONDITIONAL_CHECK_FAILED,
    TRANSACTION_CANCELED,
)
from ..exceptions import UpdateConflictError
from ..logging_config import get_logger
from ..models import Document, DocumentKey
from .attribute_mapper import AttributeMapper
from .client import DynamoDBClient

logger = get_logger(__name__)


class DocumentStore(ABC):
    """Retrieves and atomically modifies versioned documents."""

    @abstractmethod
    def update_documents(
        self, updated: Iterable[Document], checked: Iterable[Document] = ()
    ) -> None:
        """
        Atomically write documents and assert the version of others.

        Args:
            updated: Documents to write, each at its expected current version
            checked: Documents whose version must match but which are not written

        Raises:
            UpdateConflictError: If any expected version does not match
        """

    @abstractmethod
    def get_documents(self, ids: Iterable[DocumentKey]) -> list[Document]:
        """
        Retrieve documents by key.

        Args:
            ids: Keys to read, duplicates allowed

        Returns:
            One document per key, in input order
        """

    def update_document(self, *documents: Document) -> None:
        """Atomically write documents, without version checks on other keys."""
        self.update_documents(documents, ())

    def get_document(self, id: DocumentKey) -> Document:
        """Retrieve a single document."""
        return self.get_documents([id])[0]


def _condition(version: int) -> dict[str, Any]:
    if version == 0:
        return {"ConditionExpression": CONDITION_NOT_EXISTS}
    return {
        "ConditionExpression": CONDITION_VERSION,
        "ExpressionAttributeValues": {":version": {"N": str(version)}},
    }


def _first_conditional_failure(error: ClientError) -> int | None:
    if error.response.get("Error", {}).get("Code") != TRANSACTION_CANCELED:
        return None

    reasons = error.response.get("CancellationReasons") or []
    for index, reason in enumerate(reasons):
        if (reason or {}).get("Code") == CONDITIONAL_CHECK_FAILED:
            return index
    return None


class DynamoDBDocumentStore(DocumentStore):
    """DocumentStore implementation using a single DynamoDB table."""

    def __init__(self, client: DynamoDBClient, mapper: AttributeMapper | None = None):
        """
        Initialize document store.

        Args:
            client: DynamoDB client bound to the document table
            mapper: Attribute mapper (optional, default retention)
        """
        self.client = client
        self.mapper = mapper or AttributeMapper()

    def update_documents(
        self, updated: Iterable[Document], checked: Iterable[Document] = ()
    ) -> None:
        """
        Atomically write documents and assert the version of others.

        Writes come first in the transaction, in the given order, followed by
        the checks. Checked documents never send their body.

        Args:
            updated: Documents to write, each at its expected current version
            checked: Documents whose version must match but which are not written

        Raises:
            UpdateConflictError: If any expected version does not match; the
                key of the first failing item is reported
            MalformedDocumentError: If a body is invalid (nothing is sent)
            ClientError: For any other DynamoDB failure, unchanged
        """
        table_name = self.client.table_name
        items: list[dict[str, Any]] = []

        for document in updated:
            put = {"TableName": table_name, "Item": self.mapper.from_document(document)}
            put.update(_condition(document.version))
            items.append({"Put": put})

        for document in checked:
            check = {"TableName": table_name, "Key": self.mapper.to_key_attributes(document.id)}
            check.update(_condition(document.version))
            items.append({"ConditionCheck": check})

        if not items:
            return

        try:
            self.client.transact_write_items(items)
        except ClientError as e:
            index = _first_conditional_failure(e)
            if index is None or index >= len(items):
                raise

            item = items[index]
            attributes = item["Put"]["Item"] if "Put" in item else item["ConditionCheck"]["Key"]
            key = self.mapper.from_key_attributes(attributes)
            logger.info(f"Update conflict on document {key}")
            raise UpdateConflictError(key) from e

    def get_documents(self, ids: Iterable[DocumentKey]) -> list[Document]:
        """
        Retrieve documents by key using strongly consistent reads.

        Args:
            ids: Keys to read, duplicates allowed

        Returns:
            One document per key, in input order; keys without an item map to
            Document(key, None, 0)

        Raises:
            BatchRetryExceededError: If DynamoDB keeps keys unprocessed
            ClientError: For DynamoDB errors
        """
        id_list = list(ids)
        if not id_list:
            return []

        distinct = list(dict.fromkeys(id_list))
        logger.debug(f"Reading {len(distinct)} distinct documents for {len(id_list)} ids")

        items = self.client.batch_get_items(
            [self.mapper.to_key_attributes(key) for key in distinct], consistent_read=True
        )
        documents = {document.id: document for document in map(self.mapper.to_document, items)}

        return [documents.get(key) or Document(key, None, 0) for key in id_list]

    def query(self, **request: Any) -> Iterator[Document]:
        """
        Run a DynamoDB Query and yield the matching documents.

        Args:
            **request: Query parameters in DynamoDB client shape, without TableName

        Yields:
            Documents across all result pages
        """
        for item in self.client.query(request):
            yield self.mapper.to_document(item)

    def scan(self, **request: Any) -> Iterator[Document]:
        """
        Run a DynamoDB Scan and yield the matching documents.

        Args:
            **request: Scan parameters in DynamoDB client shape, without TableName

        Yields:
            Documents across all result pages
        """
        for item in self.client.scan(request):
            yield self.mapper.to_document(item)
