"""
CLI Error Handling
==================

Maps front-end exceptions to consistent messages and exit codes.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn, Optional

import click

from cfront.errors import CFrontError
from cfront.syntax.errors import render_report


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    PARSE_ERROR = 1      # Lexical or syntax error in the input
    INVALID_ARGS = 2     # Invalid arguments or unreadable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    source: Optional[str] = None,
) -> NoReturn:
    """
    Report an exception on stderr and exit with the matching code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        source: The source buffer, so front-end errors can show the
            offending line

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, CFrontError):
        # Front-end errors carry their own "error:" prefix and location
        if source is not None:
            click.echo(render_report(error, source), err=True)
        else:
            click.echo(f"error: {error}", err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    elif isinstance(error, click.BadParameter):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (FileNotFoundError, PermissionError, UnicodeDecodeError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
