"""
Lexer (Tokenizer)
=================

This module converts C source text into a lazy stream of positioned
tokens. The lexer is pull-based: each call to ``next()`` scans exactly one
token, so the parser drives it and nothing is produced ahead of demand.

Token Categories
----------------
- Keywords: int, char, void, if, while, sizeof, ... (see tokens.Keyword)
- Identifiers: start with a letter or underscore
- Integers and floats: kept as raw, unparsed text
- Strings: "double quoted", kept raw (escapes are not interpreted)
- Operators: +, -, *, /, ==, !=, &&, ||, <<=, ->, ++, etc.
- Delimiters: ( ) { } [ ] ; , : . ?

Comments
--------
- Single-line: // comment
- Multi-line: /* comment */ (no nesting; ends at the first */)

Positions
---------
The source is scanned by Unicode scalar value, but every token records the
byte offset of its first character in the UTF-8 encoding, so positions
always fall on a character boundary. Line and column are derived only on
request.

Example Usage
-------------
>>> from cfront.syntax.lexer import Lexer
>>> for token in Lexer("x && y;"):
...     print(token)
Token(IDENT, 'x', @0)
Token(DOUBLE_AMPERSAND, @2)
Token(IDENT, 'y', @5)
Token(SEMICOLON, @6)
"""

import logging
import string
from typing import Optional

from cfront.errors import locate
from cfront.syntax.errors import LexError, LexErrorKind
from cfront.syntax.tokens import OPERATORS, Keyword, Token, TokenKind

logger = logging.getLogger(__name__)


class Lexer:
    """
    Tokenizes C source code on demand.

    Iterating a Lexer yields Token objects until the end of input. A
    LexError ends the stream for good: once raised, every further call to
    ``next()`` raises the same error again.

    Usage:
        lexer = Lexer(source_text)
        tokens = list(lexer)

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
    """

    DIGITS = string.digits

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        # Cursor as a character index and as the matching UTF-8 byte offset.
        # Both always advance together, one scalar value at a time.
        self._index = 0
        self._byte_pos = 0

        self._error: Optional[LexError] = None

    def __iter__(self) -> "Lexer":
        return self

    def __next__(self) -> Token:
        if self._error is not None:
            raise self._error
        try:
            return self._scan_token()
        except LexError as exc:
            self._error = exc
            raise

    def reset(self) -> None:
        """Restart lexing from the beginning of the source."""
        self._index = 0
        self._byte_pos = 0
        self._error = None

    def tokenize(self) -> list[Token]:
        """Lex the remaining input into a list."""
        tokens = list(self)
        logger.debug("lexed %d tokens from %s", len(tokens), self.filename)
        return tokens

    @property
    def byte_pos(self) -> int:
        """Byte offset of the cursor."""
        return self._byte_pos

    def line_and_column(self) -> tuple[int, int]:
        """
        Return the 1-based (line, column) of the cursor.

        Walks the buffer from the start, so only use this for diagnostics.
        """
        location = locate(self.source, self._byte_pos, self.filename)
        return location.line, location.column

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._index >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Character at cursor + offset, or "" past the end."""
        pos = self._index + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume one character and keep the byte offset on its boundary."""
        char = self.source[self._index]
        self._index += 1
        self._byte_pos += len(char.encode("utf-8"))
        return char

    def _is_digit(self, char: str) -> bool:
        return char != "" and char in self.DIGITS

    def _error_at(self, byte_pos: int, kind: LexErrorKind, char: Optional[str] = None) -> LexError:
        return LexError(self.source, byte_pos, kind, char, self.filename)

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            if char == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            if char == "/" and self._peek(1) == "*":
                self._skip_block_comment()
                continue

            break

    def _skip_block_comment(self) -> None:
        start = self._byte_pos
        self._advance()  # consume /
        self._advance()  # consume *

        while not self._at_end():
            if self._peek() == "*" and self._peek(1) == "/":
                self._advance()
                self._advance()
                return
            self._advance()

        raise self._error_at(start, LexErrorKind.UNTERMINATED_COMMENT)

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_token(self) -> Token:
        self._skip_whitespace_and_comments()
        if self._at_end():
            raise StopIteration

        char = self._peek()

        if char == "_" or char.isalpha():
            return self._scan_identifier()

        if self._is_digit(char) or (char == "." and self._is_digit(self._peek(1))):
            return self._scan_number()

        if char == '"':
            return self._scan_string()

        return self._scan_operator()

    def _scan_identifier(self) -> Token:
        start_index = self._index
        start = self._byte_pos

        self._advance()
        while self._peek() and (self._peek().isalnum() or self._peek() == "_"):
            self._advance()

        name = self.source[start_index:self._index]
        keyword = Keyword.lookup(name)
        if keyword is not None:
            return Token(TokenKind.KEYWORD, start, self._byte_pos, keyword)
        return Token(TokenKind.IDENT, start, self._byte_pos, name)

    def _scan_number(self) -> Token:
        """
        Scan the full extent of a numeric literal without interpreting it.

        The run covers digits, letters (radix prefixes, hex digits and
        suffixes), underscores and dots, plus a sign directly after an
        exponent marker: e/E for decimal literals, p/P for hex ones.
        """
        start_index = self._index
        start = self._byte_pos

        is_hex = self._peek() == "0" and self._peek(1) in ("x", "X")
        exponent_markers = "pP" if is_hex else "eE"
        is_float = False

        while self._peek() and (self._peek().isalnum() or self._peek() in "_."):
            char = self._advance()
            if char == ".":
                is_float = True
            elif char in exponent_markers:
                is_float = True
                if self._peek() in ("+", "-"):
                    self._advance()

        text = self.source[start_index:self._index]
        kind = TokenKind.FLOAT if is_float else TokenKind.INTEGER
        return Token(kind, start, self._byte_pos, text)

    def _scan_string(self) -> Token:
        """
        Scan a double-quoted string literal up to the matching unescaped quote.

        A backslash always escapes the character after it, so \\" does not
        end the literal. The raw contents between the quotes are kept.
        """
        start = self._byte_pos
        self._advance()  # consume opening "
        content_start = self._index

        while not self._at_end():
            char = self._peek()

            if char == '"':
                value = self.source[content_start:self._index]
                self._advance()  # consume closing "
                return Token(TokenKind.STRING, start, self._byte_pos, value)

            if char == "\n":
                break

            self._advance()
            if char == "\\" and not self._at_end():
                self._advance()

        raise self._error_at(start, LexErrorKind.UNTERMINATED_STRING, '"')

    def _scan_operator(self) -> Token:
        """
        Scan an operator or delimiter by maximal munch.

        The first character is consumed provisionally; while the next
        character extends the text to a known operator it is consumed too.
        One character of lookahead per step, the same rule for every
        operator family.
        """
        start = self._byte_pos
        text = self._peek()

        if text not in OPERATORS:
            raise self._error_at(start, LexErrorKind.UNRECOGNIZED_CHARACTER, text)

        self._advance()
        while self._peek() and text + self._peek() in OPERATORS:
            text += self._advance()

        return Token(OPERATORS[text], start, self._byte_pos)


def tokenize(source: str, filename: str = "<input>") -> list[Token]:
    """Lex a whole buffer into a list of tokens (raises LexError)."""
    return Lexer(source, filename).tokenize()
