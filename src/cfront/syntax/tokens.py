"""
Token and Keyword Model
=======================

The vocabulary shared by the lexer and the parser: token kinds, the C
keyword table, and the positioned Token record.

Tokens never interpret literal values. Integer and float literals keep
their raw source text so that a later stage can decide width, signedness
and precision; see cfront.syntax.ast.atom_from_token for that step.

Keyword classification is total and happens exactly once, at lex time:
any identifier-shaped run that matches the table below is a KEYWORD
token, never an IDENT.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import NamedTuple, Optional, Union


# =============================================================================
# Token Kind Enumeration
# =============================================================================

class TokenKind(Enum):
    """Lexical categories produced by the lexer."""

    # === Delimiters ===
    PAREN_OPEN = auto()             # (
    PAREN_CLOSE = auto()            # )
    BRACE_OPEN = auto()             # {
    BRACE_CLOSE = auto()            # }
    BRACKET_OPEN = auto()           # [
    BRACKET_CLOSE = auto()          # ]

    # === Separators ===
    COMMA = auto()                  # ,
    SEMICOLON = auto()              # ;
    COLON = auto()                  # :
    DOT = auto()                    # .
    QUESTION = auto()               # ?
    ARROW = auto()                  # ->

    # === Arithmetic ===
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    STAR = auto()                   # * (multiply or dereference)
    SLASH = auto()                  # /
    PERCENT = auto()                # %
    TILDE = auto()                  # ~ (one's complement)
    PLUS_PLUS = auto()              # ++
    MINUS_MINUS = auto()            # --

    # === Assignment ===
    EQUAL = auto()                  # =
    PLUS_EQUAL = auto()             # +=
    MINUS_EQUAL = auto()            # -=
    STAR_EQUAL = auto()             # *=
    SLASH_EQUAL = auto()            # /=
    PERCENT_EQUAL = auto()          # %=
    TILDE_EQUAL = auto()            # ~=
    AMPERSAND_EQUAL = auto()        # &=
    PIPE_EQUAL = auto()             # |=
    CARET_EQUAL = auto()            # ^=
    LESS_LESS_EQUAL = auto()        # <<=
    GREATER_GREATER_EQUAL = auto()  # >>=

    # === Comparison ===
    EQUAL_EQUAL = auto()            # ==
    BANG_EQUAL = auto()             # !=
    LESS = auto()                   # <
    LESS_EQUAL = auto()             # <=
    GREATER = auto()                # >
    GREATER_EQUAL = auto()          # >=

    # === Logical and Bitwise ===
    BANG = auto()                   # !
    DOUBLE_AMPERSAND = auto()       # &&
    DOUBLE_PIPE = auto()            # ||
    AMPERSAND = auto()              # & (bitwise and, or address-of)
    PIPE = auto()                   # |
    CARET = auto()                  # ^
    LESS_LESS = auto()              # <<
    GREATER_GREATER = auto()        # >>

    # === Literals and Names ===
    STRING = auto()                 # "raw contents"
    INTEGER = auto()                # unparsed integer text
    FLOAT = auto()                  # unparsed float text
    KEYWORD = auto()                # reserved word
    IDENT = auto()                  # identifier


# Operator spellings. The lexer grows a match one character at a time, so
# every multi-character operator must have its prefixes in this table too.
OPERATORS: dict[str, TokenKind] = {
    "(": TokenKind.PAREN_OPEN,
    ")": TokenKind.PAREN_CLOSE,
    "{": TokenKind.BRACE_OPEN,
    "}": TokenKind.BRACE_CLOSE,
    "[": TokenKind.BRACKET_OPEN,
    "]": TokenKind.BRACKET_CLOSE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    ":": TokenKind.COLON,
    ".": TokenKind.DOT,
    "?": TokenKind.QUESTION,
    "+": TokenKind.PLUS,
    "++": TokenKind.PLUS_PLUS,
    "+=": TokenKind.PLUS_EQUAL,
    "-": TokenKind.MINUS,
    "--": TokenKind.MINUS_MINUS,
    "-=": TokenKind.MINUS_EQUAL,
    "->": TokenKind.ARROW,
    "*": TokenKind.STAR,
    "*=": TokenKind.STAR_EQUAL,
    "/": TokenKind.SLASH,
    "/=": TokenKind.SLASH_EQUAL,
    "%": TokenKind.PERCENT,
    "%=": TokenKind.PERCENT_EQUAL,
    "~": TokenKind.TILDE,
    "~=": TokenKind.TILDE_EQUAL,
    "!": TokenKind.BANG,
    "!=": TokenKind.BANG_EQUAL,
    "=": TokenKind.EQUAL,
    "==": TokenKind.EQUAL_EQUAL,
    "<": TokenKind.LESS,
    "<=": TokenKind.LESS_EQUAL,
    "<<": TokenKind.LESS_LESS,
    "<<=": TokenKind.LESS_LESS_EQUAL,
    ">": TokenKind.GREATER,
    ">=": TokenKind.GREATER_EQUAL,
    ">>": TokenKind.GREATER_GREATER,
    ">>=": TokenKind.GREATER_GREATER_EQUAL,
    "&": TokenKind.AMPERSAND,
    "&&": TokenKind.DOUBLE_AMPERSAND,
    "&=": TokenKind.AMPERSAND_EQUAL,
    "|": TokenKind.PIPE,
    "||": TokenKind.DOUBLE_PIPE,
    "|=": TokenKind.PIPE_EQUAL,
    "^": TokenKind.CARET,
    "^=": TokenKind.CARET_EQUAL,
}

# Reverse mapping, used when printing tokens in diagnostics
SPELLINGS: dict[TokenKind, str] = {kind: text for text, kind in OPERATORS.items()}


# =============================================================================
# Keyword Table
# =============================================================================

class Keyword(Enum):
    """The C reserved words recognised by this subset."""

    AUTO = "auto"
    BREAK = "break"
    CASE = "case"
    CHAR = "char"
    CONST = "const"
    CONTINUE = "continue"
    DEFAULT = "default"
    DO = "do"
    DOUBLE = "double"
    ELSE = "else"
    ENUM = "enum"
    EXTERN = "extern"
    FLOAT = "float"
    FOR = "for"
    GOTO = "goto"
    IF = "if"
    INT = "int"
    LONG = "long"
    REGISTER = "register"
    RETURN = "return"
    SHORT = "short"
    SIGNED = "signed"
    SIZEOF = "sizeof"
    STATIC = "static"
    STRUCT = "struct"
    SWITCH = "switch"
    TYPEDEF = "typedef"
    UNION = "union"
    UNSIGNED = "unsigned"
    VOID = "void"
    VOLATILE = "volatile"
    WHILE = "while"

    @classmethod
    def lookup(cls, text: str) -> Optional["Keyword"]:
        """Return the keyword spelled exactly as text, or None."""
        return _KEYWORDS.get(text)


_KEYWORDS: dict[str, Keyword] = {kw.value: kw for kw in Keyword}


# =============================================================================
# Token Data Class
# =============================================================================

class Span(NamedTuple):
    """Half-open byte range [start, end) into the source buffer."""
    start: int
    end: int


@dataclass(frozen=True)
class Token:
    """
    A single lexical unit.

    Attributes:
        kind: The TokenKind classification
        byte_start: Offset of the first byte of the token in the UTF-8 source
        byte_end: Offset one past the last byte of the token
        value: Raw text for STRING/INTEGER/FLOAT/IDENT, the Keyword for
            KEYWORD, None for punctuation and operators
    """
    kind: TokenKind
    byte_start: int
    byte_end: int = 0
    value: Union[str, Keyword, None] = None

    def __repr__(self) -> str:
        if self.value is not None:
            shown = self.value.value if isinstance(self.value, Keyword) else self.value
            return f"Token({self.kind.name}, {shown!r}, @{self.byte_start})"
        return f"Token({self.kind.name}, @{self.byte_start})"

    @property
    def span(self) -> Span:
        return Span(self.byte_start, self.byte_end)

    @property
    def text(self) -> str:
        """Source-like spelling of the token, for messages."""
        if self.kind == TokenKind.STRING:
            return f'"{self.value}"'
        if isinstance(self.value, Keyword):
            return self.value.value
        if self.value is not None:
            return self.value
        return SPELLINGS[self.kind]

    def is_keyword(self, *keywords: Keyword) -> bool:
        """Return True if this is a KEYWORD token (optionally one of keywords)."""
        if self.kind != TokenKind.KEYWORD:
            return False
        return not keywords or self.value in keywords
