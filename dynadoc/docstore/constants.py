"""
Constants for docstore operations.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

# Default table name
DEFAULT_TABLE_NAME = "dynadoc"

# Tombstone retention (deleted documents keep their version this long)
DEFAULT_RETENTION_DAYS = 30

# Reserved DynamoDB attribute names
ATTR_PARTITION_KEY = "partition_key"
ATTR_SORT_KEY = "sort_key"
ATTR_VERSION = "version"
ATTR_DELETED = "deleted"

SYSTEM_ATTRIBUTES = (ATTR_PARTITION_KEY, ATTR_SORT_KEY, ATTR_VERSION, ATTR_DELETED)

# Condition expressions
CONDITION_NOT_EXISTS = f"attribute_not_exists({ATTR_PARTITION_KEY})"
CONDITION_VERSION = f"{ATTR_VERSION} = :version"

# DynamoDB error codes
TRANSACTION_CANCELED = "TransactionCanceledException"
CONDITIONAL_CHECK_FAILED = "ConditionalCheckFailed"  # CancellationReasons code

# BatchGetItem behavior
BATCH_GET_MAX_KEYS = 100  # DynamoDB limit per request
BATCH_GET_MAX_RETRIES = 5
BATCH_GET_BACKOFF_BASE = 0.05  # Start with 50 ms
BATCH_GET_BACKOFF_MAX = 1.0  # Max 1 second between retries
