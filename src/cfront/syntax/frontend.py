"""
C Front-End Driver
==================

This module provides the main interface for turning C source text into
an AST and collects what the stages produce. The parser pulls tokens from
the lexer on demand; the tokens it consumed are kept in the result, so
the buffer is lexed exactly once:

    Source Text → Lexer → Tokens → Parser → AST

Example Usage
-------------
>>> from cfront.syntax.frontend import Frontend, FrontendOptions
>>> result = Frontend(FrontendOptions(filename="hello.c")).parse("int x = 1;")
>>> result.token_count
5
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from cfront.syntax.ast import ASTNode, Empty
from cfront.syntax.parser import Parser
from cfront.syntax.tokens import Token

logger = logging.getLogger(__name__)


@dataclass
class FrontendOptions:
    """
    Front-end configuration options.

    Attributes:
        filename: Name reported in diagnostics when none is given to parse()
        allow_trailing_comma: Accept a trailing ',' in function argument
            lists, as in ``void f(int a,) {}``
    """
    filename: str = "<input>"
    allow_trailing_comma: bool = False


@dataclass
class FrontendResult:
    """
    Result of running the front end over one buffer.

    Attributes:
        filename: Source filename
        tokens: Every token of the buffer, in order
        ast: Top-level nodes ([Empty] for a buffer with no declarations)
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    ast: list[ASTNode] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def is_empty(self) -> bool:
        return len(self.ast) == 1 and isinstance(self.ast[0], Empty)


class Frontend:
    """
    Lexes and parses C source code.

    Example:
        frontend = Frontend()
        result = frontend.parse_file("hello.c")
        print(result.ast)

    Attributes:
        options: Front-end configuration options
    """

    def __init__(self, options: Optional[FrontendOptions] = None):
        self.options = options or FrontendOptions()

    def parse(self, source: str, filename: Optional[str] = None) -> FrontendResult:
        """
        Lex and parse a source buffer in one pass.

        Args:
            source: C source code string
            filename: Source filename for error messages (defaults to
                options.filename)

        Returns:
            FrontendResult holding the tokens and the AST

        Raises:
            LexError: If the source cannot be tokenized
            ParseError: At the first syntax error
        """
        filename = filename or self.options.filename
        result = FrontendResult(filename=filename)

        parser = Parser(
            source,
            filename,
            allow_trailing_comma=self.options.allow_trailing_comma,
        )
        result.ast = parser.parse()

        # A successful parse has read the stream to its end
        result.tokens = parser.stream.tokens

        logger.debug(
            "%s: %d tokens, %d top-level nodes",
            filename, result.token_count, len(result.ast),
        )
        return result

    def parse_file(self, filepath) -> FrontendResult:
        """
        Read a UTF-8 source file and parse it.

        Raises:
            FileNotFoundError: If the file does not exist
            LexError: If the source cannot be tokenized
            ParseError: At the first syntax error
        """
        path = Path(filepath)
        source = path.read_text(encoding="utf-8")
        return self.parse(source, str(path))


def parse_c(source: str, filename: str = "<input>", **options) -> list[ASTNode]:
    """
    Convenience function to parse C source to a list of AST nodes.

    Args:
        source: C source code
        filename: Source filename for error messages
        **options: FrontendOptions fields

    Returns:
        Top-level AST nodes
    """
    frontend = Frontend(FrontendOptions(filename=filename, **options))
    return frontend.parse(source).ast
