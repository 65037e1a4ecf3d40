"""
cfparse - C Front-End Command-Line Interface
============================================

Lexes and parses a C source file and reports the result. Useful for
checking what the front end makes of a file and for reading its
diagnostics.

Usage Examples
--------------
Check a file:
    $ cfparse hello.c

Dump the token stream:
    $ cfparse --tokens hello.c

Dump the AST:
    $ cfparse --ast hello.c

Verbose mode (debug logging):
    $ cfparse -v hello.c
"""

import logging
from pathlib import Path
from typing import Optional

import click

from cfront import __version__
from cfront.cli.errors import handle_cli_exception
from cfront.syntax.ast import ASTPrinter
from cfront.syntax.frontend import Frontend, FrontendOptions


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--tokens",
    is_flag=True,
    help="Print the token stream",
)
@click.option(
    "--ast",
    is_flag=True,
    help="Print the AST",
)
@click.option(
    "--allow-trailing-comma",
    is_flag=True,
    help="Accept a trailing ',' in function argument lists",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="cfparse")
def main(
    input_file: Path,
    tokens: bool,
    ast: bool,
    allow_trailing_comma: bool,
    verbose: bool,
) -> None:
    """
    Parse a C source file.

    INPUT_FILE is the C source file (.c) to parse.

    \b
    Examples:
        cfparse hello.c              # Check the file parses
        cfparse --tokens hello.c     # Print tokens
        cfparse --ast hello.c        # Print the AST

    On failure the diagnostic is printed to stderr and the exit code
    is 1.
    """
    setup_logging(verbose)

    options = FrontendOptions(
        filename=str(input_file),
        allow_trailing_comma=allow_trailing_comma,
    )
    source: Optional[str] = None

    try:
        source = input_file.read_text(encoding="utf-8")
        result = Frontend(options).parse(source)

        if tokens:
            for token in result.tokens:
                click.echo(repr(token))

        if ast:
            click.echo(ASTPrinter().print(result.ast))

        if not tokens and not ast:
            declarations = 0 if result.is_empty else len(result.ast)
            click.echo(
                f"Parsed {input_file}: {result.token_count} tokens, "
                f"{declarations} declarations"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, source=source)


if __name__ == "__main__":
    main()
