"""
cfront Command-Line Interface
=============================

- **cfparse**: lex and parse a C file, dumping tokens, the AST or a
  diagnostic report

The tool is a Click-based CLI application sharing the exit codes in
cfront.cli.errors.
"""

__all__ = ["cfparse"]
