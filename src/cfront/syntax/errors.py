"""
Front-End Error Hierarchy
=========================

This module defines the diagnostics raised by the lexer and the parser,
and the routines that render them.

Exception Hierarchy
-------------------
CFrontError
├── LexError - unrecognized character, unterminated string or comment
└── ParseError
    ├── UnexpectedTokenError - root mismatch: expected X, found Y
    │   ├── UnexpectedEndOfInputError - expected X, found end of input
    │   ├── SymbolNotFoundError - expected a type or identifier
    │   └── ExpectedExpressionError - no operand where one is required
    ├── MissingDelimiterError - missing ( ) { } [ ] or ;
    ├── UnmatchedParenthesisError - '(' in an expression never closed
    ├── ExpressionTooDeepError - nesting past MAX_EXPRESSION_DEPTH
    ├── NoReturnTypeError, NoFunctionNameError
    ├── InvalidArgumentTypeError, InvalidArgumentNameError
    ├── InvalidArgumentsError, InvalidBlockError, InvalidFunctionBodyError
    ├── InvalidVariableDeclarationError
    ├── UnsupportedStatementError - control flow is not parsed yet
    ├── NoAlternativeMatchedError - every `alt` alternative failed
    └── AtomError
        ├── NotAnAtomError
        ├── InvalidIntegerError
        └── InvalidFloatError

Causal Chains
-------------
Wrapper errors store only their own short message. The error they wrap is
attached with ``raise Wrapper() from cause`` and exposed as ``.source``, so
a failure reads from the symptom the caller sees down to the token that
was actually missing:

    invalid argument list: missing ')': <input>:1:20: expected ',' or ')', found '{'
"""

from enum import Enum
from typing import Optional

from cfront.errors import CFrontError, SourceLocation, locate, source_line_at


# =============================================================================
# Lexical Errors
# =============================================================================

class LexErrorKind(Enum):
    """What went wrong at the lexer's cursor."""
    UNRECOGNIZED_CHARACTER = "unrecognized character"
    UNTERMINATED_STRING = "unterminated string literal"
    UNTERMINATED_COMMENT = "unterminated block comment"


class LexError(CFrontError):
    """
    Fatal lexical error.

    The lexer does not resynchronize after raising one of these; the parse
    must be abandoned.

    Attributes:
        whole: The complete source buffer
        byte_pos: Byte offset of the offending character
        kind: The LexErrorKind
        char: The offending character (None at end of input)
        filename: Name used when reporting the location
    """

    def __init__(
        self,
        whole: str,
        byte_pos: int,
        kind: LexErrorKind,
        char: Optional[str] = None,
        filename: str = "<input>",
    ):
        self.whole = whole
        self.byte_pos = byte_pos
        self.kind = kind
        self.char = char
        self.filename = filename
        super().__init__(self._format_message())

    @property
    def location(self) -> SourceLocation:
        return locate(self.whole, self.byte_pos, self.filename)

    @property
    def source(self) -> Optional[BaseException]:
        return self.__cause__

    def _format_message(self) -> str:
        message = f"{self.location}: {self.kind.value}"
        if self.kind == LexErrorKind.UNRECOGNIZED_CHARACTER and self.char:
            message += f" '{self.char}' (U+{ord(self.char):04X})"
        return message


# =============================================================================
# Parse Errors
# =============================================================================

class ParseError(CFrontError):
    """
    Base class for structural and syntactic errors.

    Attributes:
        message: Short description of this link of the chain only
        location: Where the error was detected, when this link knows it
        committed: Set once the failing production was past the point where
            another `alt` alternative could still apply
    """

    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        self.message = message
        self.location = location
        self.committed = False
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message

    @property
    def source(self) -> Optional[BaseException]:
        """The wrapped cause, if any."""
        return self.__cause__

    @property
    def is_committed(self) -> bool:
        """True if this error or any of its causes was raised after a commit point."""
        error: Optional[BaseException] = self
        while error is not None:
            if getattr(error, "committed", False):
                return True
            error = error.__cause__
        return False


class UnexpectedTokenError(ParseError):
    """A token did not match what the grammar required."""

    def __init__(
        self,
        expected: str,
        found: Optional[str],
        location: Optional[SourceLocation] = None,
    ):
        self.expected = expected
        self.found = found
        found_text = f"'{found}'" if found is not None else "end of input"
        super().__init__(f"expected {expected}, found {found_text}", location)


class UnexpectedEndOfInputError(UnexpectedTokenError):
    """The input ended where the grammar required more tokens."""

    def __init__(self, expected: str, location: Optional[SourceLocation] = None):
        super().__init__(expected, None, location)


class SymbolNotFoundError(UnexpectedTokenError):
    """A type name or identifier was required."""

    def __init__(self, found: Optional[str], location: Optional[SourceLocation] = None):
        super().__init__("a symbol", found, location)


class ExpectedExpressionError(UnexpectedTokenError):
    """
    No operand where one was required.

    Raised for an operator with no prefix form and no preceding operand,
    e.g. ``/ b``, and for input ending where an operand was expected.
    """

    def __init__(self, found: Optional[str], location: Optional[SourceLocation] = None):
        super().__init__("an expression", found, location)


class MissingDelimiterError(ParseError):
    """A required delimiter or terminator was absent."""

    def __init__(self, delimiter: str):
        self.delimiter = delimiter
        super().__init__(f"missing '{delimiter}'")


class UnmatchedParenthesisError(ParseError):
    """A parenthesised sub-expression was never closed."""

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__("unmatched '('", location)


class ExpressionTooDeepError(ParseError):
    """
    An expression nested deeper than the parser will follow.

    Always committed: no other alternative can parse the same text.
    """

    def __init__(self, limit: int, location: Optional[SourceLocation] = None):
        self.limit = limit
        super().__init__(f"expression nested too deeply (more than {limit} levels)", location)
        self.committed = True


class NoReturnTypeError(ParseError):
    def __init__(self):
        super().__init__("no return type found")


class NoFunctionNameError(ParseError):
    def __init__(self):
        super().__init__("no function name found")


class InvalidArgumentTypeError(ParseError):
    """An argument list entry did not start with a type."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"malformed type for argument {position}")


class InvalidArgumentNameError(ParseError):
    """An argument list entry had a type but no usable name."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"malformed name for argument {position}")


class InvalidArgumentsError(ParseError):
    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"invalid argument list for '{function_name}'")


class InvalidBlockError(ParseError):
    def __init__(self):
        super().__init__("invalid block")


class InvalidFunctionBodyError(ParseError):
    def __init__(self, function_name: str):
        self.function_name = function_name
        super().__init__(f"invalid body for '{function_name}'")


class InvalidVariableDeclarationError(ParseError):
    def __init__(self, name: Optional[str] = None):
        self.name = name
        if name:
            super().__init__(f"invalid declaration of '{name}'")
        else:
            super().__init__("invalid variable declaration")


class UnsupportedStatementError(ParseError):
    """
    A statement form that is recognised but not parsed yet.

    Control flow (if, while, for, return, ...) and nested blocks are
    reported with this error rather than skipped.
    """

    def __init__(self, statement: str, location: Optional[SourceLocation] = None):
        self.statement = statement
        super().__init__(f"'{statement}' statements are not supported yet", location)


class NoAlternativeMatchedError(ParseError):
    """
    Every alternative tried by `alt` failed.

    Attributes:
        attempts: (alternative name, error) pairs in the order tried
    """

    def __init__(
        self,
        attempts: list[tuple[str, ParseError]],
        location: Optional[SourceLocation] = None,
    ):
        self.attempts = attempts
        names = ", ".join(name for name, _ in attempts)
        super().__init__(f"no alternative matched (tried {names})", location)


# =============================================================================
# Atom Conversion Errors
# =============================================================================

class AtomError(ParseError):
    """A token could not be turned into an Atom."""
    pass


class NotAnAtomError(AtomError):
    def __init__(self, found: str, location: Optional[SourceLocation] = None):
        self.found = found
        super().__init__(f"'{found}' is not a literal or identifier", location)


class InvalidIntegerError(AtomError):
    def __init__(self, text: str, reason: str, location: Optional[SourceLocation] = None):
        self.text = text
        self.reason = reason
        super().__init__(f"invalid integer literal '{text}': {reason}", location)


class InvalidFloatError(AtomError):
    def __init__(self, text: str, location: Optional[SourceLocation] = None):
        self.text = text
        super().__init__(f"invalid floating point literal '{text}'", location)


# =============================================================================
# Rendering
# =============================================================================

def iter_chain(error: BaseException):
    """Yield error, then each wrapped cause down to the root."""
    current: Optional[BaseException] = error
    while current is not None:
        yield current
        current = current.__cause__


def render_chain(error: BaseException) -> str:
    """
    Render the full causal chain on one line.

    The outermost symptom comes first, then each source in turn,
    separated by ": ".
    """
    return ": ".join(str(link) for link in iter_chain(error))


def root_cause(error: BaseException) -> BaseException:
    """Return the innermost error of the chain."""
    *_, root = iter_chain(error)
    return root


def render_report(error: BaseException, source: str) -> str:
    """
    Render a multi-line diagnostic in the compiler report style.

    Example:
        error: invalid argument list for 'main': missing ')': <input>:1:20: expected ',' or ')', found '{'
            void main(int argc {}
                               ^
        note: ...

    Args:
        error: The outermost error of the chain
        source: The source buffer the error refers to
    """
    parts = [f"error: {render_chain(error)}"]

    # Point at the innermost link that knows where it happened
    located = None
    for link in iter_chain(error):
        location = getattr(link, "location", None)
        if location is not None:
            located = location
    if located is not None:
        parts.append(f"    {source_line_at(source, located.offset)}")
        parts.append(" " * (4 + located.column - 1) + "^")

    for link in iter_chain(error):
        if isinstance(link, NoAlternativeMatchedError):
            for name, attempt in link.attempts:
                parts.append(f"note: as {name}: {render_chain(attempt)}")

    return "\n".join(parts)
