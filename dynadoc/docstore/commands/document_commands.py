"""
Document commands for docstore.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from datetime import timedelta

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import DEFAULT_RETENTION_DAYS, DEFAULT_TABLE_NAME
from ..core.attribute_mapper import AttributeMapper
from ..core.client import DynamoDBClient
from ..core.document_store import DynamoDBDocumentStore
from ..exceptions import DynadocError, MalformedDocumentError, UpdateConflictError
from ..logging_config import get_logger, setup_logging
from ..models import Document, DocumentKey
from ..utils import (
    describe_client_error,
    document_to_json,
    exit_with_error,
    load_transaction_file,
    output_json,
    output_text,
)

logger = get_logger(__name__)


def _open_store(
    table: str, region: str | None, profile: str | None, retention_days: int
) -> DynamoDBDocumentStore:
    client = DynamoDBClient(table, region, profile)
    return DynamoDBDocumentStore(client, AttributeMapper(retention=timedelta(days=retention_days)))


def _write(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    retention_days: int,
    updated: list[Document],
    checked: list[Document],
    text: bool,
) -> bool:
    try:
        store = _open_store(table, region, profile, retention_days)
        store.update_documents(updated, checked)
        return True
    except UpdateConflictError as e:
        exit_with_error(
            ctx,
            str(e),
            f"Read the document again with 'dynadoc get {e.key.partition_key} "
            f"{e.key.sort_key}' and retry with its current version",
            1,
            text,
        )
    except MalformedDocumentError as e:
        exit_with_error(
            ctx, str(e), "Provide a JSON object body without reserved attributes", 2, text
        )
    except ClientError as e:
        exit_with_error(
            ctx, describe_client_error(e), "Check table exists and AWS credentials", 3, text
        )
    except BotoCoreError as e:
        exit_with_error(ctx, str(e), "Check AWS credentials and network access", 3, text)
    return False


@click.command("get")
@click.argument("partition_key")
@click.argument("sort_keys", metavar="SORT_KEY...", nargs=-1, required=True)
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def get_command(
    ctx: click.Context,
    partition_key: str,
    sort_keys: tuple[str, ...],
    table: str,
    region: str | None,
    profile: str | None,
    text: bool,
    verbose: int,
) -> None:
    """Read documents with strongly consistent reads.

    Documents that do not exist are reported with version 0 and a null body.

    Examples:

    \b
        # Read one document
        dynadoc get user:42 profile

    \b
        # Read several documents of the same partition
        dynadoc get user:42 profile settings

    \b
    Output Format:
        Returns JSON, one object per line:
        {"partition_key": "user:42", "sort_key": "profile", "version": 3, "body": {...}}
    """
    setup_logging(verbose)

    try:
        logger.info(f"Reading {len(sort_keys)} documents from partition '{partition_key}'")
        logger.debug(f"Table: {table}, Region: {region}")

        store = _open_store(table, region, profile, DEFAULT_RETENTION_DAYS)
        documents = store.get_documents(DocumentKey(partition_key, sk) for sk in sort_keys)

        for document in documents:
            if text:
                body = document.body if document.body is not None else "(none)"
                output_text(f"{document.id} v{document.version}: {body}")
            else:
                output_text(document_to_json(document))

    except DynadocError as e:
        exit_with_error(ctx, str(e), "Retry the read later", 3, text)
    except ClientError as e:
        exit_with_error(
            ctx, describe_client_error(e), "Check table exists and AWS credentials", 3, text
        )
    except BotoCoreError as e:
        exit_with_error(ctx, str(e), "Check AWS credentials and network access", 3, text)


@click.command("put")
@click.argument("partition_key")
@click.argument("sort_key")
@click.argument("body")
@click.option(
    "--version",
    "expected_version",
    type=click.IntRange(min=0),
    required=True,
    help="Current version of the document (0 to create it)",
)
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--retention-days",
    envvar="DYNADOC_RETENTION_DAYS",
    type=click.IntRange(min=1),
    default=DEFAULT_RETENTION_DAYS,
    help="Days tombstones of deleted documents are kept",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def put_command(
    ctx: click.Context,
    partition_key: str,
    sort_key: str,
    body: str,
    expected_version: int,
    table: str,
    region: str | None,
    profile: str | None,
    retention_days: int,
    text: bool,
    verbose: int,
) -> None:
    """Write a document if it is still at the given version.

    Use --version 0 to create a document that does not exist yet.

    Examples:

    \b
        # Create a document
        dynadoc put user:42 profile '{"name": "Ada"}' --version 0

    \b
        # Update it, based on version 1
        dynadoc put user:42 profile '{"name": "Ada Lovelace"}' --version 1

    \b
    Exit Codes:
        0 = success
        1 = conflict (document changed since that version)
        2 = body is not a valid JSON object
        3 = AWS error

    \b
    Output Format:
        Returns JSON:
        {"partition_key": "user:42", "sort_key": "profile", "version": 2}
    """
    setup_logging(verbose)

    key = DocumentKey(partition_key, sort_key)
    logger.info(f"Writing document {key} based on version {expected_version}")
    logger.debug(f"Table: {table}, Region: {region}")

    document = Document(key, body, expected_version)
    if _write(ctx, table, region, profile, retention_days, [document], [], text):
        if text:
            output_text(f"✅ Wrote {key} (version {expected_version + 1})")
        else:
            output_json(
                {
                    "partition_key": partition_key,
                    "sort_key": sort_key,
                    "version": expected_version + 1,
                }
            )


@click.command("delete")
@click.argument("partition_key")
@click.argument("sort_key")
@click.option(
    "--version",
    "expected_version",
    type=click.IntRange(min=0),
    required=True,
    help="Current version of the document",
)
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--retention-days",
    envvar="DYNADOC_RETENTION_DAYS",
    type=click.IntRange(min=1),
    default=DEFAULT_RETENTION_DAYS,
    help="Days the tombstone is kept",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def delete_command(
    ctx: click.Context,
    partition_key: str,
    sort_key: str,
    expected_version: int,
    table: str,
    region: str | None,
    profile: str | None,
    retention_days: int,
    text: bool,
    verbose: int,
) -> None:
    """Delete a document if it is still at the given version.

    The document is replaced by a tombstone that keeps its version for
    --retention-days, after which DynamoDB TTL removes it.

    Examples:

    \b
        # Delete version 2 of a document
        dynadoc delete user:42 profile --version 2

    \b
    Output Format:
        Returns JSON:
        {"partition_key": "user:42", "sort_key": "profile", "version": 3, "deleted": true}
    """
    setup_logging(verbose)

    key = DocumentKey(partition_key, sort_key)
    logger.info(f"Deleting document {key} at version {expected_version}")
    logger.debug(f"Table: {table}, Region: {region}, Retention: {retention_days} days")

    tombstone = Document(key, None, expected_version)
    if _write(ctx, table, region, profile, retention_days, [tombstone], [], text):
        if text:
            output_text(f"✅ Deleted {key} (version {expected_version + 1})")
        else:
            output_json(
                {
                    "partition_key": partition_key,
                    "sort_key": sort_key,
                    "version": expected_version + 1,
                    "deleted": True,
                }
            )


@click.command("transaction")
@click.option(
    "--file",
    "-f",
    "file_path",
    required=True,
    type=click.Path(exists=True),
    help="Path to JSON file containing the transaction",
)
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="DynamoDB table name",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--retention-days",
    envvar="DYNADOC_RETENTION_DAYS",
    type=click.IntRange(min=1),
    default=DEFAULT_RETENTION_DAYS,
    help="Days tombstones of deleted documents are kept",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def transaction_command(
    ctx: click.Context,
    file_path: str,
    table: str,
    region: str | None,
    profile: str | None,
    retention_days: int,
    text: bool,
    verbose: int,
) -> None:
    """Write and check several documents atomically.

    Either every write is applied or none is. Checked documents are not
    written; the transaction only requires them to still be at the given
    version.

    \b
    Transaction File Format (JSON):
        {
          "updated": [
            {"partition_key": "order:1", "sort_key": "header",
             "version": 2, "body": {"status": "shipped"}},
            {"partition_key": "order:1", "sort_key": "draft",
             "version": 1, "body": null}
          ],
          "checked": [
            {"partition_key": "customer:7", "sort_key": "profile", "version": 4}
          ]
        }

    \b
    Exit Codes:
        0 = success
        1 = conflict (the conflicting key is reported)
        2 = validation error
        3 = AWS error

    \b
    Output Format:
        {"success": true, "updated": 2, "checked": 1}
    """
    setup_logging(verbose)

    try:
        updated, checked = load_transaction_file(file_path)
    except DynadocError as e:
        exit_with_error(ctx, str(e), "Check the transaction file format", 2, text)
        return

    logger.info(f"Submitting transaction: {len(updated)} updated, {len(checked)} checked")
    logger.debug(f"Table: {table}, Region: {region}")

    if _write(ctx, table, region, profile, retention_days, updated, checked, text):
        if text:
            output_text(
                f"✅ Transaction succeeded: {len(updated)} updated, {len(checked)} checked"
            )
        else:
            output_json({"success": True, "updated": len(updated), "checked": len(checked)})
