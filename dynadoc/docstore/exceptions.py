"""
Custom exceptions for docstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from .models import DocumentKey


class DynadocError(Exception):
    """Base exception for docstore operations."""

    pass


class UpdateConflictError(DynadocError):
    """A document was modified since the version the caller based its update on."""

    def __init__(self, key: DocumentKey):
        super().__init__(f"The object {key} has been modified.")
        self.key = key


class MalformedDocumentError(DynadocError, ValueError):
    """Document body is not a JSON object or uses a reserved attribute."""

    pass


class BatchBuilderError(DynadocError):
    """Overlapping check/modify intent within a single batch."""

    pass


class BatchRetryExceededError(DynadocError):
    """BatchGetItem kept returning unprocessed keys."""

    def __init__(self, unprocessed_count: int):
        super().__init__(
            f"BatchGetItem left {unprocessed_count} keys unprocessed after retrying"
        )
        self.unprocessed_count = unprocessed_count


class TableNotFoundError(DynadocError):
    """DynamoDB table does not exist."""

    pass


class TableAlreadyExistsError(DynadocError):
    """DynamoDB table already exists."""

    pass
