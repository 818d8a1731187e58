"""
DynamoDB client wrapper for document operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import time
from collections.abc import Callable, Iterator
from typing import Any

import boto3

from ..constants import (
    BATCH_GET_BACKOFF_BASE,
    BATCH_GET_BACKOFF_MAX,
    BATCH_GET_MAX_KEYS,
    BATCH_GET_MAX_RETRIES,
)
from ..exceptions import BatchRetryExceededError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _backoff_seconds(attempt: int) -> float:
    return min(BATCH_GET_BACKOFF_BASE * (2 ** (attempt - 1)), BATCH_GET_BACKOFF_MAX)


class DynamoDBClient:
    """Low-level DynamoDB client bound to a single table.

    Errors reported by DynamoDB are raised unchanged as botocore exceptions;
    interpreting them is up to the caller.
    """

    def __init__(
        self,
        table_name: str,
        region: str | None = None,
        profile: str | None = None,
        client: Any | None = None,
    ):
        """
        Initialize DynamoDB client.

        Args:
            table_name: DynamoDB table name
            region: AWS region (optional, uses SDK default)
            profile: AWS profile (optional, uses SDK default)
            client: Preconfigured boto3 DynamoDB client (optional)
        """
        if client is None:
            session = boto3.Session(profile_name=profile, region_name=region)
            client = session.client("dynamodb")
        self.client = client
        self.table_name = table_name

    def transact_write_items(self, items: list[dict[str, Any]]) -> dict[str, Any]:
        """
        Submit items as one TransactWriteItems call.

        Args:
            items: Transact items in DynamoDB client shape

        Returns:
            Response from DynamoDB

        Raises:
            ClientError: If the transaction is cancelled or rejected
        """
        logger.debug(f"TransactWriteItems on '{self.table_name}' with {len(items)} items")
        return self.client.transact_write_items(TransactItems=items)  # type: ignore[no-any-return]

    def batch_get_items(
        self,
        keys: list[dict[str, Any]],
        consistent_read: bool = True,
        max_retries: int = BATCH_GET_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> list[dict[str, Any]]:
        """
        Fetch items by key, draining unprocessed keys.

        Keys are requested in chunks of BATCH_GET_MAX_KEYS. Keys DynamoDB
        leaves unprocessed are requested again with exponential backoff.

        Args:
            keys: Distinct keys in DynamoDB client shape
            consistent_read: Use strongly consistent reads
            max_retries: Retries per chunk while keys remain unprocessed
            sleep: Function used to pause between retries

        Returns:
            Items found, in no particular order

        Raises:
            BatchRetryExceededError: If keys remain unprocessed after max_retries
            ClientError: For DynamoDB errors
        """
        items: list[dict[str, Any]] = []

        for start in range(0, len(keys), BATCH_GET_MAX_KEYS):
            pending = keys[start : start + BATCH_GET_MAX_KEYS]
            attempts = 0

            while pending:
                request = {
                    self.table_name: {"Keys": pending, "ConsistentRead": consistent_read}
                }
                response = self.client.batch_get_item(RequestItems=request)
                items.extend(response.get("Responses", {}).get(self.table_name, []))

                pending = (
                    response.get("UnprocessedKeys", {}).get(self.table_name, {}).get("Keys")
                    or []
                )
                if pending:
                    if attempts >= max_retries:
                        raise BatchRetryExceededError(len(pending))
                    attempts += 1
                    logger.debug(
                        f"BatchGetItem left {len(pending)} keys unprocessed, retry {attempts}"
                    )
                    sleep(_backoff_seconds(attempts))

        return items

    def query(self, request: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """
        Run a Query request, following pagination.

        Args:
            request: Query parameters without TableName

        Yields:
            Raw items in DynamoDB client shape
        """
        return self._paginate(self.client.query, request)

    def scan(self, request: dict[str, Any]) -> Iterator[dict[str, Any]]:
        """
        Run a Scan request, following pagination.

        Args:
            request: Scan parameters without TableName

        Yields:
            Raw items in DynamoDB client shape
        """
        return self._paginate(self.client.scan, request)

    def _paginate(
        self, operation: Callable[..., dict[str, Any]], request: dict[str, Any]
    ) -> Iterator[dict[str, Any]]:
        kwargs: dict[str, Any] = dict(request, TableName=self.table_name)

        while True:
            response = operation(**kwargs)
            yield from response.get("Items", [])

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                break
            kwargs["ExclusiveStartKey"] = last_key
