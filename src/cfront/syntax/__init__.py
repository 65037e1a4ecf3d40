"""
C Syntax Front End
==================

This package turns C source text into an abstract syntax tree:

- A pull-based lexer producing positioned tokens
- A recursive descent parser for declarations and blocks
- A Pratt parser for expressions
- Parsing combinators (a backtracking token stream and `alt`)
- A chained error model with compiler-style reports

Supported Subset
----------------
- Function definitions with (type, name) argument lists
- Global and local variable declarations with optional initializers
- Expression statements over the full C operator set, including
  assignment, ?:, calls, subscripts and member access

Not parsed yet: control flow statements and nested blocks, which are
reported with UnsupportedStatementError.
"""

# =============================================================================
# Public API Imports
# =============================================================================

from cfront.syntax.frontend import Frontend, FrontendOptions, FrontendResult, parse_c
from cfront.syntax.errors import (
    LexError,
    LexErrorKind,
    ParseError,
    UnexpectedTokenError,
    MissingDelimiterError,
    NoAlternativeMatchedError,
    UnsupportedStatementError,
    ExpressionTooDeepError,
    render_chain,
    render_report,
    root_cause,
)
from cfront.syntax.lexer import Lexer, tokenize
from cfront.syntax.tokens import Keyword, Token, TokenKind
from cfront.syntax.parser import Parser, parse_source
from cfront.syntax.expressions import ExpressionParser, parse_expression_text
from cfront.syntax.ast import (
    ASTNode,
    ASTPrinter,
    ASTVisitor,
    Atom,
    Empty,
    ExpressionStatement,
    FunctionDeclaration,
    Parameter,
    VarDeclaration,
    format_expression,
)

__all__ = [
    # Main API
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
    "parse_c",
    "parse_source",
    "parse_expression_text",
    # Errors
    "LexError",
    "LexErrorKind",
    "ParseError",
    "UnexpectedTokenError",
    "MissingDelimiterError",
    "NoAlternativeMatchedError",
    "UnsupportedStatementError",
    "ExpressionTooDeepError",
    "render_chain",
    "render_report",
    "root_cause",
    # Lexer
    "Lexer",
    "tokenize",
    "Keyword",
    "Token",
    "TokenKind",
    # Parsers
    "Parser",
    "ExpressionParser",
    # AST
    "ASTNode",
    "ASTPrinter",
    "ASTVisitor",
    "Atom",
    "Empty",
    "ExpressionStatement",
    "FunctionDeclaration",
    "Parameter",
    "VarDeclaration",
    "format_expression",
]
