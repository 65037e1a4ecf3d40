"""
cfront Error Base
=================

This module defines the root of the exception hierarchy for cfront.
All exceptions inherit from CFrontError, allowing callers to catch every
front-end failure with a single except clause if desired.

Exception Hierarchy
-------------------
CFrontError (base)
├── LexError - the lexer hit a character it cannot tokenize
└── ParseError - the parser could not build the AST
    (see cfront.syntax.errors for the full parse error family)

Source Positions
----------------
Tokens and AST nodes only store byte offsets into the source buffer.
Line and column numbers are derived on demand when an error is reported,
by walking the buffer from the start. SourceLocation is the derived,
human-facing form of such an offset.
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class CFrontError(Exception):
    """
    Base exception for all cfront errors.

        try:
            parse_source(text)
        except CFrontError as e:
            print(render_chain(e))
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in a source buffer, for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, counted in characters)
        offset: Byte offset into the UTF-8 encoded source
    """
    filename: str
    line: int
    column: int
    offset: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


def locate(source: str, byte_pos: int, filename: str = "<input>") -> SourceLocation:
    """
    Convert a byte offset into a SourceLocation.

    Walks the source from the start counting newlines, so this is O(n)
    and only meant for diagnostics.

    Args:
        source: The complete source buffer
        byte_pos: Byte offset into the UTF-8 encoding of source
        filename: Name to report in the location

    Returns:
        SourceLocation with 1-based line and column
    """
    line = 1
    column = 1
    offset = 0
    for char in source:
        if offset >= byte_pos:
            break
        offset += len(char.encode("utf-8"))
        if char == "\n":
            line += 1
            column = 1
        else:
            column += 1
    return SourceLocation(filename, line, column, byte_pos)


def source_line_at(source: str, byte_pos: int) -> str:
    """Return the text of the line containing byte_pos (without newline)."""
    encoded = source.encode("utf-8")
    byte_pos = max(0, min(byte_pos, len(encoded)))
    start = encoded.rfind(b"\n", 0, byte_pos) + 1
    end = encoded.find(b"\n", byte_pos)
    if end == -1:
        end = len(encoded)
    return encoded[start:end].decode("utf-8", errors="replace")
