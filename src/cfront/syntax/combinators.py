"""
Parsing Combinators
===================

Building blocks shared by the statement and expression parsers:

- TokenStream: a peekable, position-restorable view over a Lexer. Tokens
  are pulled from the lexer only when first peeked, then buffered so a
  failed alternative can rewind to where it started.
- alt: try named alternative productions in order from the same position.
- committed: mark errors raised past a production's point of no return,
  so `alt` propagates them instead of trying the next alternative.

Example
-------
    parser = Parser("int x;")
    node = alt(parser.stream, [
        ("function declaration", parser.parse_function),
        ("variable declaration", parser.parse_var_declaration),
    ])
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from cfront.errors import SourceLocation, locate
from cfront.syntax.errors import (
    NoAlternativeMatchedError,
    ParseError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
)
from cfront.syntax.lexer import Lexer
from cfront.syntax.tokens import Keyword, Token, TokenKind

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TokenStream:
    """
    Peekable token stream over a Lexer.

    Attributes:
        source: The source buffer being parsed
        filename: Source filename for error messages
    """

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.source = lexer.source
        self.filename = lexer.filename

        self._buffer: list[Token] = []
        self._pos = 0
        self._exhausted = False

    @property
    def tokens(self) -> list[Token]:
        """Tokens pulled from the lexer so far, in source order."""
        return list(self._buffer)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _fill(self, index: int) -> None:
        """Pull tokens from the lexer until index is buffered or input ends."""
        while len(self._buffer) <= index and not self._exhausted:
            try:
                self._buffer.append(next(self.lexer))
            except StopIteration:
                self._exhausted = True

    def peek(self, offset: int = 0) -> Optional[Token]:
        """Token at current position + offset, or None past the end."""
        index = self._pos + offset
        self._fill(index)
        if index < len(self._buffer):
            return self._buffer[index]
        return None

    def advance(self) -> Optional[Token]:
        """Consume and return the current token (None at end)."""
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    def at_end(self) -> bool:
        return self.peek() is None

    def check(self, *kinds: TokenKind) -> bool:
        token = self.peek()
        return token is not None and token.kind in kinds

    def check_keyword(self, *keywords: Keyword) -> bool:
        token = self.peek()
        return token is not None and token.is_keyword(*keywords)

    def match(self, *kinds: TokenKind) -> Optional[Token]:
        """Consume the current token if it is one of kinds."""
        if self.check(*kinds):
            return self.advance()
        return None

    def expect(self, kind: TokenKind, expected: str) -> Token:
        """
        Consume a token of the given kind.

        Raises:
            UnexpectedTokenError: If the current token is something else
            UnexpectedEndOfInputError: If the input has ended
        """
        if self.check(kind):
            return self.advance()
        raise self.unexpected(expected)

    # =========================================================================
    # Backtracking
    # =========================================================================

    def mark(self) -> int:
        """Return an opaque position that reset() can return to."""
        return self._pos

    def reset(self, mark: int) -> None:
        self._pos = mark

    # =========================================================================
    # Error Helpers
    # =========================================================================

    def location_of(self, token: Optional[Token]) -> SourceLocation:
        """Location of token, or of the end of input for None."""
        if token is None:
            return locate(self.source, len(self.source.encode("utf-8")), self.filename)
        return locate(self.source, token.byte_start, self.filename)

    def location(self) -> SourceLocation:
        """Location of the current token."""
        return self.location_of(self.peek())

    def unexpected(self, expected: str) -> UnexpectedTokenError:
        """Build the root mismatch error for the current token."""
        token = self.peek()
        if token is None:
            return UnexpectedEndOfInputError(expected, self.location_of(None))
        return UnexpectedTokenError(expected, token.text, self.location_of(token))


# =============================================================================
# Alternatives and Commit Points
# =============================================================================

@contextmanager
def committed() -> Iterator[None]:
    """
    Mark parse errors raised inside the block as committed.

    Used once a production has seen enough input to be sure it is the
    right one; `alt` then reports its failure directly.
    """
    try:
        yield
    except ParseError as exc:
        exc.committed = True
        raise


def alt(stream: TokenStream, alternatives: Sequence[tuple[str, Callable[[], T]]]) -> T:
    """
    Try named alternatives in order from the same stream position.

    The stream is primed once before dispatch so leading whitespace and
    comments are skipped a single time. Each failing alternative rewinds
    the stream; the first success wins and leaves the stream where that
    alternative stopped.

    Args:
        stream: The token stream all alternatives read from
        alternatives: (name, parse function) pairs

    Returns:
        The first successful alternative's result

    Raises:
        NoAlternativeMatchedError: Listing each (name, error) if all fail
        ParseError: A committed alternative's error, unchanged
        LexError: Lexical errors are never caught
    """
    stream.peek()
    start = stream.mark()
    attempts: list[tuple[str, ParseError]] = []

    for name, parse in alternatives:
        try:
            return parse()
        except ParseError as exc:
            if exc.is_committed:
                raise
            logger.debug("alternative '%s' failed: %s", name, exc)
            attempts.append((name, exc))
            stream.reset(start)

    raise NoAlternativeMatchedError(attempts, stream.location())
