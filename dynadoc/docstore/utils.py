"""
Utility functions for docstore commands.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import json
from decimal import Decimal
from typing import Any

import click
from botocore.exceptions import ClientError

from .core.attribute_mapper import encode_json, reject_json_constant
from .exceptions import DynadocError
from .models import Document, DocumentKey


def output_json(data: Any, quiet: bool = False) -> None:
    """
    Output JSON to stdout.

    Args:
        data: Data to output as JSON
        quiet: If True, suppress output
    """
    if not quiet:
        print(json.dumps(data))


def output_text(message: str, quiet: bool = False) -> None:
    """
    Output text to stdout.

    Args:
        message: Message to output
        quiet: If True, suppress output
    """
    if not quiet:
        print(message)


def error_json(error: str, solution: str, exit_code: int) -> str:
    """
    Format error as JSON.

    Args:
        error: Error message
        solution: Solution suggestion
        exit_code: Exit code

    Returns:
        JSON error object
    """
    return json.dumps({"error": error, "solution": solution, "exit_code": exit_code})


def error_text(error: str, solution: str) -> str:
    """
    Format error as human-readable text.

    Args:
        error: Error message
        solution: Solution suggestion

    Returns:
        Formatted error message
    """
    return f"❌ Error: {error}\n\n💡 Solution: {solution}"


def exit_with_error(
    ctx: click.Context, error: str, solution: str, exit_code: int, text: bool
) -> None:
    """
    Report an error on stderr and exit the command.

    Args:
        ctx: Click context of the failing command
        error: Error message
        solution: Solution suggestion
        exit_code: Process exit code
        text: Use the human-readable format instead of JSON
    """
    if text:
        click.echo(error_text(error, solution), err=True)
    else:
        click.echo(error_json(error, solution, exit_code), err=True)
    ctx.exit(exit_code)


def describe_client_error(error: ClientError) -> str:
    """
    Summarize a botocore ClientError for display.

    Args:
        error: ClientError from boto3

    Returns:
        "<Code>: <Message>" text
    """
    details = error.response.get("Error", {})
    code = details.get("Code", "ClientError")
    message = details.get("Message", str(error))
    return f"{code}: {message}"


def validate_table_name(table_name: str) -> bool:
    """
    Validate DynamoDB table name.

    Args:
        table_name: Table name to validate

    Returns:
        True if valid

    Raises:
        ValueError: If table name is invalid
    """
    if not table_name:
        raise ValueError("Table name cannot be empty")
    if len(table_name) < 3 or len(table_name) > 255:
        raise ValueError("Table name must be between 3 and 255 characters")
    if not all(c.isalnum() or c in "-_." for c in table_name):
        raise ValueError(
            "Table name can only contain alphanumeric characters, hyphens, underscores, and periods"
        )
    return True


def document_to_dict(document: Document) -> dict[str, Any]:
    """
    Convert a document to its JSON output form.

    Args:
        document: Document to display

    Returns:
        Dictionary with key, version and parsed body (decimals as Decimal)
    """
    return {
        "partition_key": document.id.partition_key,
        "sort_key": document.id.sort_key,
        "version": document.version,
        "body": (
            json.loads(document.body, parse_float=Decimal) if document.body is not None else None
        ),
    }


def document_to_json(document: Document) -> str:
    """
    Render a document as one line of JSON, keeping its numbers exact.

    Args:
        document: Document to display

    Returns:
        JSON text of document_to_dict(document)
    """
    return encode_json(document_to_dict(document))


def _document_from_entry(entry: Any, index: int) -> Document:
    if not isinstance(entry, dict):
        raise DynadocError(f"Entry {index} must be an object")

    try:
        key = DocumentKey(str(entry["partition_key"]), str(entry["sort_key"]))
        version = entry["version"]
    except KeyError as e:
        raise DynadocError(f"Entry {index} is missing {e.args[0]!r}") from e

    if isinstance(version, bool) or not isinstance(version, int) or version < 0:
        raise DynadocError(f"Entry {index} has an invalid version")

    body = entry.get("body")
    return Document(key, encode_json(body) if body is not None else None, version)


def load_transaction_file(file_path: str) -> tuple[list[Document], list[Document]]:
    """
    Load a transaction from a JSON file.

    The file holds "updated" and "checked" arrays of objects with
    partition_key, sort_key, version and (for updates) body.

    Args:
        file_path: Path to JSON file

    Returns:
        Tuple of (updated documents, checked documents)

    Raises:
        DynadocError: If file cannot be loaded or is invalid
    """
    try:
        with open(file_path) as f:
            data = json.load(f, parse_float=Decimal, parse_constant=reject_json_constant)
    except ValueError as e:
        raise DynadocError(f"Invalid JSON in transaction file: {e}") from e
    except FileNotFoundError as e:
        raise DynadocError(f"Transaction file not found: {file_path}") from e

    if not isinstance(data, dict):
        raise DynadocError("Transaction file must contain a JSON object")

    updated_entries = data.get("updated", [])
    checked_entries = data.get("checked", [])
    if not isinstance(updated_entries, list) or not isinstance(checked_entries, list):
        raise DynadocError("'updated' and 'checked' must be arrays")
    if not updated_entries and not checked_entries:
        raise DynadocError("Transaction file must contain 'updated' or 'checked' entries")

    updated = [_document_from_entry(entry, i) for i, entry in enumerate(updated_entries)]
    checked = [_document_from_entry(entry, i) for i, entry in enumerate(checked_entries)]
    return updated, checked
