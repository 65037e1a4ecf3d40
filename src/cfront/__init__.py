"""
cfront - C Language Front End
=============================

A lexer and parser for a subset of C, producing an abstract syntax tree
with precise, chained diagnostics.

Components
----------
- **syntax**: Lexer, statement and expression parsers, AST and errors
- **cli**: The ``cfparse`` command-line tool

Pipeline
--------
    C Source → Lexer → TokenStream → Parser (+ expression parser) → AST

Quick Start
-----------
>>> from cfront import parse_source
>>> parse_source("int x = 1;")
[VarDeclaration(ty='int', name='x', rhs=IntegerLiteral(value=1))]

Errors raised by the front end all derive from CFrontError. Use
render_chain() for a one-line message or render_report() for a compiler
style report with the offending source line.
"""

__version__ = "1.0.0"

from cfront.errors import CFrontError, SourceLocation
from cfront.syntax import (
    Frontend,
    FrontendOptions,
    FrontendResult,
    LexError,
    ParseError,
    Parser,
    parse_source,
    render_chain,
    render_report,
    tokenize,
)

__all__ = [
    "__version__",
    "CFrontError",
    "SourceLocation",
    "Frontend",
    "FrontendOptions",
    "FrontendResult",
    "LexError",
    "ParseError",
    "Parser",
    "parse_source",
    "render_chain",
    "render_report",
    "tokenize",
]
