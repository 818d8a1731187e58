from __future__ import annotations

import copy
import json
from decimal import Decimal
from typing import Any

import pytest
from botocore.exceptions import ClientError

from dynadoc.docstore.core.attribute_mapper import AttributeMapper
from dynadoc.docstore.core.client import DynamoDBClient
from dynadoc.docstore.core.document_store import DocumentStore, DynamoDBDocumentStore
from dynadoc.docstore.core.serializers import JsonSerializer
from dynadoc.docstore.models import Document, DocumentKey

TABLE_NAME = "tests"
NOW = 1_700_000_000.0
MAX_ITEM_SIZE = 400 * 1024


def client_error(code: str, operation: str, message: str = "", **extra: Any) -> ClientError:
    response: dict[str, Any] = {"Error": {"Code": code, "Message": message or code}}
    response.update(extra)
    return ClientError(response, operation)  # type: ignore[arg-type]


class FakeDynamoDB:
    """
    In-memory stand-in for the low-level boto3 DynamoDB client.

    Supports just what the document store uses: TransactWriteItems with the
    two version conditions, BatchGetItem, and paginated Query/Scan.
    """

    def __init__(self, table_name: str = TABLE_NAME):
        self.table_name = table_name
        # Keyed by (partition_key, sort_key), items in client shape
        self.items: dict[tuple[str, str], dict[str, Any]] = {}
        self.calls: list[str] = []
        self.transaction_requests: list[list[dict[str, Any]]] = []
        self.batch_get_requests: list[dict[str, Any]] = []
        # Number of BatchGetItem responses that leave keys unprocessed
        self.unprocessed_rounds = 0
        # Error raised by the next TransactWriteItems call
        self.transaction_error: ClientError | None = None
        self.page_size = 2

    @staticmethod
    def _key(attributes: dict[str, Any]) -> tuple[str, str]:
        return attributes["partition_key"]["S"], attributes["sort_key"]["S"]

    def _condition_holds(self, request: dict[str, Any]) -> bool:
        existing = self.items.get(self._key(request.get("Item") or request["Key"]))
        condition = request.get("ConditionExpression")

        if condition == "attribute_not_exists(partition_key)":
            return existing is None
        if condition == "version = :version":
            expected = request["ExpressionAttributeValues"][":version"]["N"]
            return existing is not None and existing["version"]["N"] == expected
        raise AssertionError(f"Unexpected condition: {condition}")

    # --- transactions ---

    def transact_write_items(self, *, TransactItems: list[dict[str, Any]]) -> dict[str, Any]:
        self.calls.append("TransactWriteItems")
        self.transaction_requests.append(copy.deepcopy(TransactItems))

        if self.transaction_error is not None:
            error, self.transaction_error = self.transaction_error, None
            raise error

        if len(TransactItems) > 100:
            raise client_error(
                "ValidationException",
                "TransactWriteItems",
                "Member must have length less than or equal to 100",
            )

        keys = []
        for entry in TransactItems:
            (request,) = entry.values()
            assert request["TableName"] == self.table_name
            keys.append(self._key(request.get("Item") or request["Key"]))
            if "Put" in entry and len(json.dumps(request["Item"])) > MAX_ITEM_SIZE:
                raise client_error(
                    "ValidationException",
                    "TransactWriteItems",
                    "Item size has exceeded the maximum allowed size",
                )

        if len(set(keys)) != len(keys):
            raise client_error(
                "ValidationException",
                "TransactWriteItems",
                "Transaction request cannot include multiple operations on one item",
            )

        reasons = []
        for entry in TransactItems:
            (request,) = entry.values()
            if self._condition_holds(request):
                reasons.append({"Code": "None"})
            else:
                reasons.append(
                    {"Code": "ConditionalCheckFailed", "Message": "The conditional request failed"}
                )

        if any(reason["Code"] != "None" for reason in reasons):
            codes = ", ".join(reason["Code"] for reason in reasons)
            raise client_error(
                "TransactionCanceledException",
                "TransactWriteItems",
                f"Transaction cancelled, please refer cancellation reasons for specific reasons [{codes}]",
                CancellationReasons=reasons,
            )

        for entry in TransactItems:
            if "Put" in entry:
                item = copy.deepcopy(entry["Put"]["Item"])
                self.items[self._key(item)] = item
        return {}

    # --- reads ---

    def batch_get_item(self, *, RequestItems: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("BatchGetItem")
        request = RequestItems[self.table_name]
        self.batch_get_requests.append(copy.deepcopy(request))

        keys = request["Keys"]
        if len(keys) > 100:
            raise client_error("ValidationException", "BatchGetItem", "Too many items requested")

        processed, unprocessed = keys, []
        if self.unprocessed_rounds > 0 and len(keys) > 1:
            self.unprocessed_rounds -= 1
            processed, unprocessed = keys[:1], keys[1:]

        found = [
            copy.deepcopy(self.items[self._key(key)])
            for key in processed
            if self._key(key) in self.items
        ]
        response: dict[str, Any] = {"Responses": {self.table_name: found}, "UnprocessedKeys": {}}
        if unprocessed:
            response["UnprocessedKeys"] = {
                self.table_name: {"Keys": unprocessed, "ConsistentRead": True}
            }
        return response

    def _page(self, items: list[dict[str, Any]], kwargs: dict[str, Any]) -> dict[str, Any]:
        assert kwargs["TableName"] == self.table_name
        items = sorted(items, key=self._key)

        start = kwargs.get("ExclusiveStartKey")
        if start is not None:
            items = [item for item in items if self._key(item) > self._key(start)]

        limit = kwargs.get("Limit") or self.page_size
        page = items[:limit]
        response: dict[str, Any] = {"Items": copy.deepcopy(page), "Count": len(page)}
        if len(items) > limit:
            last = page[-1]
            response["LastEvaluatedKey"] = {
                "partition_key": last["partition_key"],
                "sort_key": last["sort_key"],
            }
        return response

    def query(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append("Query")
        # Only "partition_key = :pk" is understood
        assert kwargs["KeyConditionExpression"] == "partition_key = :pk"
        pk = kwargs["ExpressionAttributeValues"][":pk"]["S"]
        items = [item for (p, _), item in self.items.items() if p == pk]
        return self._page(items, kwargs)

    def scan(self, **kwargs: Any) -> dict[str, Any]:
        self.calls.append("Scan")
        return self._page(list(self.items.values()), kwargs)


class RecordingDocumentStore(DocumentStore):
    """DocumentStore double recording update calls and serving canned documents."""

    def __init__(self):
        self.updates: list[tuple[list[Document], list[Document]]] = []
        self.documents: dict[DocumentKey, Document] = {}
        # Errors raised by successive update_documents calls; None means success
        self.errors: list[Exception | None] = []
        self.always_fail_with: Exception | None = None

    def update_documents(self, updated, checked=()) -> None:
        self.updates.append((list(updated), list(checked)))
        if self.always_fail_with is not None:
            raise self.always_fail_with
        if self.errors:
            error = self.errors.pop(0)
            if error is not None:
                raise error

    def get_documents(self, ids) -> list[Document]:
        return [self.documents.get(key) or Document(key, None, 0) for key in ids]


class StringSerializer(JsonSerializer):
    """Serializes str entities as {"string": value}."""

    @staticmethod
    def json_for(value: str) -> str:
        return json.dumps({"string": value})

    def serialize(self, value: Any) -> str:
        assert isinstance(value, str)
        return self.json_for(value)

    def deserialize(self, json_text: str, entity_type: type) -> Any:
        assert entity_type is str
        return json.loads(json_text)["string"]


def assert_document(document: Document, key: DocumentKey, body: str | None, version: int) -> None:
    assert document.id == key
    if body is None:
        assert document.body is None
    else:
        assert document.body is not None
        expected = json.loads(body, parse_float=Decimal)
        assert json.loads(document.body, parse_float=Decimal) == expected
    assert document.version == version


@pytest.fixture
def dynamodb() -> FakeDynamoDB:
    return FakeDynamoDB()


@pytest.fixture
def mapper() -> AttributeMapper:
    return AttributeMapper(clock=lambda: NOW)


@pytest.fixture
def store(dynamodb: FakeDynamoDB, mapper: AttributeMapper) -> DynamoDBDocumentStore:
    return DynamoDBDocumentStore(DynamoDBClient(TABLE_NAME, client=dynamodb), mapper)


@pytest.fixture
def ids() -> list[DocumentKey]:
    return [DocumentKey(f"pk_{i}", "0000") for i in range(11)]
