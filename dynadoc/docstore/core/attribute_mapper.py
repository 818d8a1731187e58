"""
Mapping between JSON documents and DynamoDB attribute values.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import base64
import json
import time
from collections.abc import Callable
from datetime import timedelta
from decimal import Decimal, DecimalException
from typing import Any

from boto3.dynamodb.types import Binary, TypeDeserializer, TypeSerializer

from ..constants import (
    ATTR_DELETED,
    ATTR_PARTITION_KEY,
    ATTR_SORT_KEY,
    ATTR_VERSION,
    DEFAULT_RETENTION_DAYS,
    SYSTEM_ATTRIBUTES,
)
from ..exceptions import MalformedDocumentError
from ..models import Document, DocumentKey

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def reject_json_constant(name: str) -> Any:
    """parse_constant hook refusing NaN and Infinity."""
    raise ValueError(f"Unsupported JSON constant {name}")


def parse_json_object(body: str) -> dict[str, Any]:
    """
    Parse a JSON object, keeping numbers exact.

    Args:
        body: JSON text

    Returns:
        Parsed object; decimals are returned as Decimal

    Raises:
        MalformedDocumentError: If body is not a JSON object
    """
    try:
        value = json.loads(body, parse_float=Decimal, parse_constant=reject_json_constant)
    except ValueError as e:
        raise MalformedDocumentError("The document must be a JSON object.") from e

    if not isinstance(value, dict):
        raise MalformedDocumentError("The document must be a JSON object.")
    return value


def encode_json(value: Any) -> str:
    """
    Encode a deserialized DynamoDB value as compact JSON.

    Decimals are written as exact JSON numbers. Sets become arrays and
    binary values become base64 strings.

    Args:
        value: Value produced by TypeDeserializer

    Returns:
        JSON text
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Decimal):
        if value.as_tuple().exponent >= 0:  # type: ignore[operator]
            return str(int(value))
        return str(value)
    if isinstance(value, (int, str)):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, dict):
        members = (
            f"{json.dumps(str(name), ensure_ascii=False)}:{encode_json(member)}"
            for name, member in value.items()
        )
        return "{" + ",".join(members) + "}"
    if isinstance(value, (set, frozenset)):
        return encode_json(sorted(value, key=str))
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(encode_json(item) for item in value) + "]"
    if isinstance(value, Binary):
        return json.dumps(base64.b64encode(value.value).decode("ascii"))
    if isinstance(value, (bytes, bytearray)):
        return json.dumps(base64.b64encode(bytes(value)).decode("ascii"))
    raise TypeError(f"Cannot encode {type(value).__name__} as JSON")


def _require(attributes: dict[str, Any], name: str) -> Any:
    try:
        return attributes[name]
    except KeyError:
        raise KeyError(f"Key {name} is missing in the map.") from None


class AttributeMapper:
    """Converts documents to and from DynamoDB attribute maps."""

    def __init__(
        self,
        retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS),
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize attribute mapper.

        Args:
            retention: How long tombstones of deleted documents are kept
            clock: Returns the current time in epoch seconds
        """
        self.retention = retention
        self.clock = clock

    def from_document(self, document: Document) -> dict[str, Any]:
        """
        Build the item written for a document.

        The stored version is the document version plus one. A document
        without body is stored as a tombstone carrying its expiry time.

        Args:
            document: Document to write

        Returns:
            Item in DynamoDB client shape

        Raises:
            MalformedDocumentError: If the body is not a JSON object or uses
                a reserved attribute name
        """
        attributes: dict[str, Any] = {}

        if document.body is not None:
            body = parse_json_object(document.body)

            for name in SYSTEM_ATTRIBUTES:
                if name in body:
                    raise MalformedDocumentError(
                        f'The document cannot use the special attribute "{name}".'
                    )

            try:
                attributes.update({name: _serializer.serialize(v) for name, v in body.items()})
            except (TypeError, DecimalException) as e:
                raise MalformedDocumentError(
                    f"The document cannot be represented in DynamoDB: {e}"
                ) from e

        attributes.update(self.to_key_attributes(document.id))
        attributes[ATTR_VERSION] = {"N": str(document.version + 1)}

        if document.body is None:
            expiration = int(self.clock() + self.retention.total_seconds())
            attributes[ATTR_DELETED] = {"N": str(expiration)}

        return attributes

    def to_document(self, attributes: dict[str, Any]) -> Document:
        """
        Rebuild a document from a stored item.

        Args:
            attributes: Item in DynamoDB client shape

        Returns:
            Document; the body is None for tombstones

        Raises:
            KeyError: If a key or version attribute is missing
        """
        body: str | None
        if ATTR_DELETED in attributes:
            body = None
        else:
            body = encode_json(
                {
                    name: _deserializer.deserialize(value)
                    for name, value in attributes.items()
                    if name not in SYSTEM_ATTRIBUTES
                }
            )

        return Document(
            id=self.from_key_attributes(attributes),
            body=body,
            version=int(_require(attributes, ATTR_VERSION)["N"]),
        )

    @staticmethod
    def to_key_attributes(key: DocumentKey) -> dict[str, Any]:
        """Project a document key to its DynamoDB key attributes."""
        return {
            ATTR_PARTITION_KEY: {"S": key.partition_key},
            ATTR_SORT_KEY: {"S": key.sort_key},
        }

    @staticmethod
    def from_key_attributes(attributes: dict[str, Any]) -> DocumentKey:
        """Read the document key from an item or key attribute map."""
        return DocumentKey(
            partition_key=_require(attributes, ATTR_PARTITION_KEY)["S"],
            sort_key=_require(attributes, ATTR_SORT_KEY)["S"],
        )
