"""
Recursive Descent Statement Parser
==================================

This module parses top-level declarations and blocks. It pulls tokens
from the lexer through a TokenStream and hands every expression position
over to the Pratt parser in cfront.syntax.expressions.

Grammar (Simplified EBNF)
-------------------------
translation_unit ::= declaration*
declaration      ::= function | var_declaration          (chosen with alt)
function         ::= symbol '*'* symbol arguments block
arguments        ::= '(' ( 'void' | argument (',' argument)* )? ')'
argument         ::= symbol '*'* symbol
block            ::= '{' statement* '}'
statement        ::= ';' | var_declaration | expression ';'
var_declaration  ::= symbol '*'* symbol ('=' expression)? ';'

A symbol is one identifier or type keyword token taken as bare text; name
positions reject keywords. Pointer stars between a type and a name are
consumed and are not part of either.

Control flow (if, while, for, return, ...) and nested blocks are not
parsed yet; they raise UnsupportedStatementError instead of being skipped.

Errors
------
Each production wraps the failure of its parts in a purpose-named error,
so a report reads as a chain from the symptom down to the missing token:

    invalid argument list for 'main': missing ')': <input>:1:20: expected ',' or ')', found '{'

Example Usage
-------------
>>> from cfront.syntax.parser import parse_source
>>> parse_source("void main() {}")
[FunctionDeclaration(ty='void', name='main', args=[], body=[])]
"""

import logging
from typing import Optional

from cfront.syntax.ast import (
    ASTNode,
    Atom,
    Empty,
    ExpressionStatement,
    FunctionDeclaration,
    Parameter,
    VarDeclaration,
)
from cfront.syntax.combinators import TokenStream, alt, committed
from cfront.syntax.errors import (
    InvalidArgumentNameError,
    InvalidArgumentsError,
    InvalidArgumentTypeError,
    InvalidBlockError,
    InvalidFunctionBodyError,
    InvalidVariableDeclarationError,
    MissingDelimiterError,
    NoFunctionNameError,
    NoReturnTypeError,
    ParseError,
    SymbolNotFoundError,
    UnsupportedStatementError,
)
from cfront.syntax.expressions import ExpressionParser
from cfront.syntax.lexer import Lexer
from cfront.syntax.tokens import Keyword, TokenKind

logger = logging.getLogger(__name__)


# Keywords that may appear where a type name is expected
TYPE_KEYWORDS = (
    Keyword.AUTO,
    Keyword.CHAR,
    Keyword.CONST,
    Keyword.DOUBLE,
    Keyword.ENUM,
    Keyword.EXTERN,
    Keyword.FLOAT,
    Keyword.INT,
    Keyword.LONG,
    Keyword.REGISTER,
    Keyword.SHORT,
    Keyword.SIGNED,
    Keyword.STATIC,
    Keyword.STRUCT,
    Keyword.TYPEDEF,
    Keyword.UNION,
    Keyword.UNSIGNED,
    Keyword.VOID,
    Keyword.VOLATILE,
)

# Statement keywords that are recognised but not parsed yet
UNSUPPORTED_STATEMENT_KEYWORDS = (
    Keyword.IF,
    Keyword.ELSE,
    Keyword.WHILE,
    Keyword.FOR,
    Keyword.DO,
    Keyword.SWITCH,
    Keyword.CASE,
    Keyword.DEFAULT,
    Keyword.BREAK,
    Keyword.CONTINUE,
    Keyword.RETURN,
    Keyword.GOTO,
)


class Parser:
    """
    Recursive descent parser for declarations and blocks.

    The parser stops at the first error; no partial AST is returned.

    Attributes:
        source: The source buffer
        filename: Source filename for error reporting
        allow_trailing_comma: Accept ``f(int a,)`` argument lists
    """

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        allow_trailing_comma: bool = False,
    ):
        self.source = source
        self.filename = filename
        self.allow_trailing_comma = allow_trailing_comma

        self.stream = TokenStream(Lexer(source, filename))
        self.expressions = ExpressionParser(self.stream)

    def parse(self) -> list[ASTNode]:
        """
        Parse the whole buffer.

        Returns:
            Top-level nodes in source order, or [Empty] if there are none

        Raises:
            LexError: If the source cannot be tokenized
            ParseError: At the first unrecoverable syntax error
        """
        nodes: list[ASTNode] = []
        while not self.stream.at_end():
            nodes.append(self.parse_declaration())

        if not nodes:
            return [Empty(byte_start=len(self.source.encode("utf-8")))]

        logger.debug("parsed %d top-level declarations from %s", len(nodes), self.filename)
        return nodes

    # =========================================================================
    # Declarations
    # =========================================================================

    def parse_declaration(self) -> ASTNode:
        """Parse one top-level function or variable declaration."""
        return alt(self.stream, [
            ("function declaration", self.parse_function),
            ("variable declaration", self.parse_var_declaration),
        ])

    def parse_function(self) -> FunctionDeclaration:
        """Parse return type, name, argument list and body."""
        start = self.stream.peek()

        try:
            ty = self.parse_symbol()
        except ParseError as exc:
            raise NoReturnTypeError() from exc
        self._skip_pointer_stars()

        try:
            name = self.parse_symbol(allow_keywords=False)
        except ParseError as exc:
            raise NoFunctionNameError() from exc

        try:
            args = self.parse_function_arguments()
        except ParseError as exc:
            raise InvalidArgumentsError(name) from exc

        with committed():
            try:
                body = self.parse_block()
            except ParseError as exc:
                raise InvalidFunctionBodyError(name) from exc

        logger.debug("parsed function '%s' (%d arguments, %d statements)", name, len(args), len(body))
        return FunctionDeclaration(
            byte_start=start.byte_start,
            ty=ty,
            name=name,
            args=args,
            body=body,
        )

    def parse_function_arguments(self) -> list[Parameter]:
        """
        Parse '(' type name, ... ')'.

        An empty list and ``(void)`` are legal. Once the '(' is seen the
        production is committed.
        """
        if not self.stream.match(TokenKind.PAREN_OPEN):
            raise self._missing("(", "'('")

        with committed():
            args: list[Parameter] = []
            if self.stream.match(TokenKind.PAREN_CLOSE):
                return args

            next_token = self.stream.peek(1)
            if (self.stream.check_keyword(Keyword.VOID)
                    and next_token is not None
                    and next_token.kind == TokenKind.PAREN_CLOSE):
                self.stream.advance()
                self.stream.advance()
                return args

            while True:
                args.append(self._parse_argument(len(args) + 1))

                if self.stream.match(TokenKind.PAREN_CLOSE):
                    break
                if self.stream.match(TokenKind.COMMA):
                    if self.allow_trailing_comma and self.stream.match(TokenKind.PAREN_CLOSE):
                        break
                    continue
                raise self._missing(")", "',' or ')'")

        return args

    def _parse_argument(self, position: int) -> Parameter:
        try:
            ty = self.parse_symbol()
        except ParseError as exc:
            raise InvalidArgumentTypeError(position) from exc
        self._skip_pointer_stars()

        try:
            name = self.parse_symbol(allow_keywords=False)
        except ParseError as exc:
            raise InvalidArgumentNameError(position) from exc

        return Parameter(ty, name)

    def parse_var_declaration(self) -> VarDeclaration:
        """Parse ``type name;`` or ``type name = expression;``."""
        start = self.stream.peek()

        try:
            ty = self.parse_symbol()
            self._skip_pointer_stars()
            name = self.parse_symbol(allow_keywords=False)
        except ParseError as exc:
            raise InvalidVariableDeclarationError() from exc

        rhs = None
        if self.stream.match(TokenKind.EQUAL):
            with committed():
                try:
                    rhs = self.expressions.parse_expression()
                    if not self.stream.match(TokenKind.SEMICOLON):
                        raise self._missing(";", "';'")
                except ParseError as exc:
                    raise InvalidVariableDeclarationError(name) from exc
        elif not self.stream.match(TokenKind.SEMICOLON):
            raise InvalidVariableDeclarationError(name) from self._missing(";", "'=' or ';'")

        return VarDeclaration(byte_start=start.byte_start, ty=ty, name=name, rhs=rhs)

    # =========================================================================
    # Blocks and Statements
    # =========================================================================

    def parse_block(self) -> list[ASTNode]:
        """Parse '{' statement* '}' and return the statements."""
        if not self.stream.match(TokenKind.BRACE_OPEN):
            raise self._missing("{", "'{'")

        statements: list[ASTNode] = []
        try:
            while not self.stream.match(TokenKind.BRACE_CLOSE):
                if self.stream.at_end():
                    raise self._missing("}", "'}'")
                statement = self.parse_statement()
                if statement is not None:
                    statements.append(statement)
        except ParseError as exc:
            raise InvalidBlockError() from exc

        return statements

    def parse_statement(self) -> Optional[ASTNode]:
        """
        Parse one statement inside a block.

        Returns None for an empty statement (a lone ';').
        """
        token = self.stream.peek()

        if token.kind == TokenKind.SEMICOLON:
            self.stream.advance()
            return None

        if token.is_keyword(*UNSUPPORTED_STATEMENT_KEYWORDS):
            raise UnsupportedStatementError(token.text, self.stream.location_of(token))
        if token.kind == TokenKind.BRACE_OPEN:
            raise UnsupportedStatementError("{", self.stream.location_of(token))

        return alt(self.stream, [
            ("variable declaration", self.parse_var_declaration),
            ("expression statement", self.parse_expression_statement),
        ])

    def parse_expression_statement(self) -> ASTNode:
        """
        Parse ``expression ;``.

        A bare literal or identifier comes back as the Atom itself; any
        other expression is wrapped in an ExpressionStatement.
        """
        expression = self.expressions.parse_expression()
        if not self.stream.match(TokenKind.SEMICOLON):
            raise self._missing(";", "';'")

        if isinstance(expression, Atom):
            return expression
        return ExpressionStatement(byte_start=expression.byte_start, expression=expression)

    # =========================================================================
    # Symbols
    # =========================================================================

    def parse_symbol(self, allow_keywords: bool = True) -> str:
        """
        Read one identifier (or type keyword) token as bare text.

        Only the keywords in TYPE_KEYWORDS count as symbols, so
        ``sizeof x;`` is left for the expression parser.

        Raises:
            SymbolNotFoundError: If the current token is not a symbol
        """
        token = self.stream.peek()
        if token is not None and (
            token.kind == TokenKind.IDENT
            or (allow_keywords and token.is_keyword(*TYPE_KEYWORDS))
        ):
            self.stream.advance()
            return token.text

        found = token.text if token is not None else None
        raise SymbolNotFoundError(found, self.stream.location_of(token))

    def _skip_pointer_stars(self) -> int:
        depth = 0
        while self.stream.match(TokenKind.STAR):
            depth += 1
        return depth

    def _missing(self, delimiter: str, expected: str) -> MissingDelimiterError:
        """MissingDelimiterError caused by a mismatch at the current token."""
        error = MissingDelimiterError(delimiter)
        error.__cause__ = self.stream.unexpected(expected)
        return error


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(
    source: str,
    filename: str = "<input>",
    allow_trailing_comma: bool = False,
) -> list[ASTNode]:
    """
    Parse C source code into a list of top-level AST nodes.

    Raises:
        LexError: If the source cannot be tokenized
        ParseError: If parsing fails
    """
    return Parser(source, filename, allow_trailing_comma).parse()
