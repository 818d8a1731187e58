"""
Table management operations for docstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Any, Literal

import boto3
from botocore.exceptions import ClientError

from ..constants import ATTR_DELETED, ATTR_PARTITION_KEY, ATTR_SORT_KEY
from ..exceptions import TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger

logger = get_logger(__name__)


def _client(region: str | None, profile: str | None, client: Any | None) -> Any:
    if client is not None:
        return client
    session = boto3.Session(profile_name=profile, region_name=region)
    return session.client("dynamodb")


def create_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    billing_mode: Literal["PAY_PER_REQUEST", "PROVISIONED"] = "PAY_PER_REQUEST",
    client: Any | None = None,
) -> dict[str, Any]:
    """
    Create DynamoDB table for documents.

    The table is keyed by partition_key (HASH) and sort_key (RANGE). TTL is
    enabled on the deletion marker so tombstones expire on their own.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        billing_mode: Billing mode (PAY_PER_REQUEST or PROVISIONED)
        client: Preconfigured boto3 DynamoDB client (optional)

    Returns:
        Table description

    Raises:
        TableAlreadyExistsError: If table already exists
    """
    dynamodb = _client(region, profile, client)

    kwargs: dict[str, Any] = {
        "TableName": table_name,
        "KeySchema": [
            {"AttributeName": ATTR_PARTITION_KEY, "KeyType": "HASH"},
            {"AttributeName": ATTR_SORT_KEY, "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": ATTR_PARTITION_KEY, "AttributeType": "S"},
            {"AttributeName": ATTR_SORT_KEY, "AttributeType": "S"},
        ],
        "BillingMode": billing_mode,
        "Tags": [{"Key": "ManagedBy", "Value": "dynadoc"}],
    }
    if billing_mode == "PROVISIONED":
        kwargs["ProvisionedThroughput"] = {"ReadCapacityUnits": 5, "WriteCapacityUnits": 5}

    try:
        logger.debug(f"Creating table '{table_name}' ({billing_mode})")
        response = dynamodb.create_table(**kwargs)

        # TTL can only be enabled once the table is active
        dynamodb.get_waiter("table_exists").wait(TableName=table_name)
        dynamodb.update_time_to_live(
            TableName=table_name,
            TimeToLiveSpecification={"Enabled": True, "AttributeName": ATTR_DELETED},
        )

        return response["TableDescription"]  # type: ignore[no-any-return]

    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceInUseException":
            raise TableAlreadyExistsError(f"Table '{table_name}' already exists")
        raise


def drop_table(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    client: Any | None = None,
) -> dict[str, Any]:
    """
    Drop DynamoDB table.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        client: Preconfigured boto3 DynamoDB client (optional)

    Returns:
        Table description

    Raises:
        TableNotFoundError: If table does not exist
    """
    dynamodb = _client(region, profile, client)

    try:
        response = dynamodb.delete_table(TableName=table_name)
        return response["TableDescription"]  # type: ignore[no-any-return]
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            raise TableNotFoundError(f"Table '{table_name}' not found")
        raise


def check_table_exists(
    table_name: str,
    region: str | None = None,
    profile: str | None = None,
    client: Any | None = None,
) -> bool:
    """
    Check if table exists.

    Args:
        table_name: Table name
        region: AWS region (optional)
        profile: AWS profile (optional)
        client: Preconfigured boto3 DynamoDB client (optional)

    Returns:
        True if table exists, False otherwise
    """
    dynamodb = _client(region, profile, client)

    try:
        dynamodb.describe_table(TableName=table_name)
        return True
    except ClientError as e:
        if e.response["Error"]["Code"] == "ResourceNotFoundException":
            return False
        raise
