"""Versioned JSON documents on DynamoDB with optimistic concurrency control."""

from dynadoc.docstore.core.attribute_mapper import AttributeMapper
from dynadoc.docstore.core.batch_builder import BatchBuilder
from dynadoc.docstore.core.client import DynamoDBClient
from dynadoc.docstore.core.document_store import DocumentStore, DynamoDBDocumentStore
from dynadoc.docstore.core.entity_store import EntityStore
from dynadoc.docstore.core.serializers import JsonSerializer, PydanticJsonSerializer
from dynadoc.docstore.core.transaction import NO_RETRY, RetryPolicy, retry, transaction
from dynadoc.docstore.exceptions import (
    BatchBuilderError,
    DynadocError,
    MalformedDocumentError,
    UpdateConflictError,
)
from dynadoc.docstore.models import Document, DocumentKey, JsonEntity, create_entity

__all__ = [
    "AttributeMapper",
    "BatchBuilder",
    "BatchBuilderError",
    "Document",
    "DocumentKey",
    "DocumentStore",
    "DynadocError",
    "DynamoDBClient",
    "DynamoDBDocumentStore",
    "EntityStore",
    "JsonEntity",
    "JsonSerializer",
    "MalformedDocumentError",
    "NO_RETRY",
    "PydanticJsonSerializer",
    "RetryPolicy",
    "UpdateConflictError",
    "create_entity",
    "retry",
    "transaction",
]
