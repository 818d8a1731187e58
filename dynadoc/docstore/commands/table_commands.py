"""
Commands managing the DynamoDB table that holds the documents.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

from typing import Literal

import click
from botocore.exceptions import BotoCoreError, ClientError

from ..constants import ATTR_DELETED, DEFAULT_TABLE_NAME
from ..core.table_operations import create_table, drop_table
from ..exceptions import TableAlreadyExistsError, TableNotFoundError
from ..logging_config import get_logger, setup_logging
from ..utils import (
    describe_client_error,
    exit_with_error,
    output_json,
    output_text,
    validate_table_name,
)

logger = get_logger(__name__)

BILLING_MODES: dict[str, Literal["PAY_PER_REQUEST", "PROVISIONED"]] = {
    "on-demand": "PAY_PER_REQUEST",
    "provisioned": "PROVISIONED",
}


def _aws_failure(ctx: click.Context, error: ClientError | BotoCoreError, text: bool) -> None:
    message = describe_client_error(error) if isinstance(error, ClientError) else str(error)
    solution = "Check AWS credentials and IAM permissions on the table"
    exit_with_error(ctx, message, solution, 3, text)


@click.command("create-table")
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="Name of the document table",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option(
    "--billing",
    type=click.Choice(sorted(BILLING_MODES)),
    default="on-demand",
    help="Capacity mode; provisioned starts at 5 RCU / 5 WCU",
)
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def create_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    billing: str,
    text: bool,
    verbose: int,
) -> None:
    """Create the table documents are stored in.

    Every document is one item keyed by its partition key and sort key.
    The command waits until the table is active, then enables TTL on the
    tombstone expiry so deleted documents disappear after their retention.

    Examples:

    \b
        # Table used by default by get/put/delete/transaction
        dynadoc create-table

    \b
        # Separate table for an integration environment
        DYNADOC_TABLE=orders-it dynadoc create-table --region eu-west-1

    \b
    Exit Codes:
        0 = table created
        1 = table already exists
        2 = invalid table name
        3 = AWS error

    \b
    Output Format:
        {"table": "...", "status": "CREATING", "arn": "...", "ttl_attribute": "deleted"}
    """
    setup_logging(verbose)

    try:
        validate_table_name(table)
    except ValueError as e:
        solution = "Use 3-255 characters from a-z, A-Z, 0-9, '_', '-' and '.'"
        exit_with_error(ctx, str(e), solution, 2, text)

    logger.info(f"Creating document table '{table}' ({billing})")
    logger.debug(f"Region: {region}, Profile: {profile}")

    try:
        description = create_table(table, region, profile, BILLING_MODES[billing])
    except TableAlreadyExistsError as e:
        exit_with_error(
            ctx,
            str(e),
            f"Reuse it with --table {table}, or remove it with 'dynadoc drop-table --approve'",
            1,
            text,
        )
        return
    except (ClientError, BotoCoreError) as e:
        _aws_failure(ctx, e, text)
        return

    if text:
        output_text(f"✅ Document table '{table}' is {description['TableStatus']}")
        output_text(f"ARN: {description['TableArn']}")
        output_text(f"Tombstones expire through TTL on '{ATTR_DELETED}'")
    else:
        output_json(
            {
                "table": table,
                "status": description["TableStatus"],
                "arn": description["TableArn"],
                "ttl_attribute": ATTR_DELETED,
            }
        )


@click.command("drop-table")
@click.option(
    "--table",
    envvar="DYNADOC_TABLE",
    default=DEFAULT_TABLE_NAME,
    help="Name of the document table",
)
@click.option("--region", envvar="AWS_REGION", help="AWS region")
@click.option("--profile", envvar="AWS_PROFILE", help="AWS profile")
@click.option("--approve", is_flag=True, help="Confirm that every document may be lost")
@click.option("--text", is_flag=True, help="Output as human-readable text")
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (-v INFO, -vv DEBUG, -vvv TRACE)",
)
@click.pass_context
def drop_table_command(
    ctx: click.Context,
    table: str,
    region: str | None,
    profile: str | None,
    approve: bool,
    text: bool,
    verbose: int,
) -> None:
    """Delete the document table.

    Documents, tombstones and their versions are gone afterwards, so a
    recreated document starts again at version 1. Requires --approve.

    Examples:

    \b
        dynadoc drop-table --table orders-it --approve

    \b
    Exit Codes:
        0 = deletion started
        1 = table not found
        2 = --approve missing
        3 = AWS error

    \b
    Output Format:
        {"table": "...", "status": "DELETING"}
    """
    setup_logging(verbose)

    if not approve:
        exit_with_error(
            ctx,
            f"Dropping '{table}' deletes all of its documents",
            f"Run again with --approve: dynadoc drop-table --table {table} --approve",
            2,
            text,
        )

    logger.info(f"Dropping document table '{table}'")
    logger.debug(f"Region: {region}, Profile: {profile}")

    try:
        description = drop_table(table, region, profile)
    except TableNotFoundError as e:
        exit_with_error(ctx, str(e), "Check --table, DYNADOC_TABLE and --region", 1, text)
        return
    except (ClientError, BotoCoreError) as e:
        _aws_failure(ctx, e, text)
        return

    if text:
        output_text(f"✅ Document table '{table}' is {description['TableStatus']}")
    else:
        output_json({"table": table, "status": description["TableStatus"]})
