"""CLI entry point for dynadoc.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import click

from dynadoc.docstore.commands.document_commands import (
    delete_command,
    get_command,
    put_command,
    transaction_command,
)
from dynadoc.docstore.commands.table_commands import create_table_command, drop_table_command


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Versioned JSON documents on DynamoDB with optimistic concurrency"""
    pass


# Register table commands
main.add_command(create_table_command)
main.add_command(drop_table_command)

# Register document commands
main.add_command(get_command)
main.add_command(put_command)
main.add_command(delete_command)
main.add_command(transaction_command)

if __name__ == "__main__":
    main()
