"""
Abstract Syntax Tree (AST) Definitions
======================================

This module defines the AST node types built by the parser, the
fallible conversion from a lexical token to an Atom, and a visitor and
pretty printer for debugging output.

Node Hierarchy
--------------
ASTNode (base)
├── Empty - a translation unit with no declarations
├── Declarations
│   ├── FunctionDeclaration - return type, name, (type, name) args, body
│   └── VarDeclaration - type, name, optional initializer
├── ExpressionStatement - non-atom expression followed by ';'
└── Expressions
    ├── Atom - leaf value built from one token
    │   ├── StringLiteral, IntegerLiteral, FloatLiteral
    │   ├── KeywordAtom
    │   └── Identifier
    ├── UnaryExpression - prefix operators (++x, !x, *p, &x, sizeof x, ...)
    ├── PostfixExpression - x++ and x--
    ├── BinaryExpression - infix operators, including '.' and '->'
    ├── AssignmentExpression - =, +=, <<=, ...
    ├── ConditionalExpression - c ? a : b
    ├── CallExpression - f(a, b)
    ├── SubscriptExpression - a[i]
    └── ParenthesizedExpression - ( expr )

Design Notes
------------
- All nodes are dataclasses. Each stores ``byte_start``, the byte offset
  where it begins in the source, excluded from equality so trees can be
  compared structurally.
- Literal text becomes a typed value only in atom_from_token. Integers
  are kept as unbounded Python ints checked against 128 bits, floats as
  Python floats; no range or type checking beyond that happens here.
"""

import string
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NamedTuple, Optional

from cfront.errors import SourceLocation
from cfront.syntax.errors import InvalidFloatError, InvalidIntegerError, NotAnAtomError
from cfront.syntax.tokens import Keyword, Token, TokenKind


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        byte_start: Byte offset of the node's first token in the source
    """
    byte_start: int = field(default=0, compare=False, repr=False)


@dataclass
class Expression(ASTNode):
    """Base class for all expression nodes."""
    pass


@dataclass
class Atom(Expression):
    """Base class for leaf expressions built directly from one token."""
    pass


# =============================================================================
# Statement-Level Nodes
# =============================================================================

@dataclass
class Empty(ASTNode):
    """End of input reached without any declaration."""
    pass


class Parameter(NamedTuple):
    """One (type, name) entry of a function's argument list."""
    ty: str
    name: str


@dataclass
class FunctionDeclaration(ASTNode):
    """
    Function definition.

    Attributes:
        ty: Return type
        name: Function name
        args: Ordered (type, name) pairs
        body: Ordered statements of the function block
    """
    ty: str = ""
    name: str = ""
    args: list[Parameter] = field(default_factory=list)
    body: list[ASTNode] = field(default_factory=list)


@dataclass
class VarDeclaration(ASTNode):
    """
    Variable declaration, global or local.

        int x;
        int y = a + 1;

    Attributes:
        ty: Declared type
        name: Variable name
        rhs: Initializer expression, None when absent
    """
    ty: str = ""
    name: str = ""
    rhs: Optional[Expression] = None


@dataclass
class ExpressionStatement(ASTNode):
    """An expression followed by ';' that is not a bare Atom."""
    expression: Expression = None


# =============================================================================
# Atoms
# =============================================================================

@dataclass
class StringLiteral(Atom):
    """String literal; value is the raw text between the quotes."""
    value: str = ""


@dataclass
class IntegerLiteral(Atom):
    """Integer literal, 0 <= value < 2**128."""
    value: int = 0


@dataclass
class FloatLiteral(Atom):
    value: float = 0.0


@dataclass
class KeywordAtom(Atom):
    keyword: Keyword = None


@dataclass
class Identifier(Atom):
    name: str = ""


# =============================================================================
# Operator Enumerations
# =============================================================================

class UnaryOperator(Enum):
    """Prefix operators."""
    PRE_INCREMENT = "++"
    PRE_DECREMENT = "--"
    LOGICAL_NOT = "!"
    BITWISE_NOT = "~"
    DEREFERENCE = "*"
    ADDRESS_OF = "&"
    POSITIVE = "+"
    NEGATE = "-"
    SIZEOF = "sizeof"


class PostfixOperator(Enum):
    POST_INCREMENT = "++"
    POST_DECREMENT = "--"


class BinaryOperator(Enum):
    """Infix operators, including member access."""
    # Member access
    MEMBER = "."
    ARROW = "->"

    # Arithmetic
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"
    ADD = "+"
    SUBTRACT = "-"

    # Shift
    LEFT_SHIFT = "<<"
    RIGHT_SHIFT = ">>"

    # Comparison
    LESS = "<"
    LESS_EQ = "<="
    GREATER = ">"
    GREATER_EQ = ">="
    EQUAL = "=="
    NOT_EQUAL = "!="

    # Bitwise
    BITWISE_AND = "&"
    BITWISE_XOR = "^"
    BITWISE_OR = "|"

    # Logical
    LOGICAL_AND = "&&"
    LOGICAL_OR = "||"


class AssignmentOperator(Enum):
    ASSIGN = "="
    ADD_ASSIGN = "+="
    SUB_ASSIGN = "-="
    MUL_ASSIGN = "*="
    DIV_ASSIGN = "/="
    MOD_ASSIGN = "%="
    TILDE_ASSIGN = "~="
    AND_ASSIGN = "&="
    OR_ASSIGN = "|="
    XOR_ASSIGN = "^="
    LSHIFT_ASSIGN = "<<="
    RSHIFT_ASSIGN = ">>="


# =============================================================================
# Operator Expressions
# =============================================================================

@dataclass
class UnaryExpression(Expression):
    operator: UnaryOperator = None
    operand: Expression = None


@dataclass
class PostfixExpression(Expression):
    operator: PostfixOperator = None
    operand: Expression = None


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation expression (a op b).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator = None
    left: Expression = None
    right: Expression = None


@dataclass
class AssignmentExpression(Expression):
    """
    Assignment expression (target op= value). Right-associative.

    Attributes:
        operator: The assignment operator (=, +=, etc.)
        target: The assignment target
        value: The value to assign
    """
    operator: AssignmentOperator = None
    target: Expression = None
    value: Expression = None


@dataclass
class ConditionalExpression(Expression):
    """Ternary conditional expression (condition ? then_expr : else_expr)."""
    condition: Expression = None
    then_expr: Expression = None
    else_expr: Expression = None


@dataclass
class CallExpression(Expression):
    """
    Function call expression.

    Attributes:
        callee: The expression being called
        arguments: Argument expressions in order
    """
    callee: Expression = None
    arguments: list[Expression] = field(default_factory=list)


@dataclass
class SubscriptExpression(Expression):
    array: Expression = None
    index: Expression = None


@dataclass
class ParenthesizedExpression(Expression):
    inner: Expression = None


# =============================================================================
# Token -> Atom Conversion
# =============================================================================

_INTEGER_DIGITS = {
    16: string.hexdigits,
    10: string.digits,
    8: string.octdigits,
    2: "01",
}

_DECIMAL_FLOAT_CHARS = set(string.digits + ".eE+-")

ATOM_INTEGER_LIMIT = 2 ** 128


def parse_integer_text(text: str, location: Optional[SourceLocation] = None) -> int:
    """
    Interpret raw integer literal text.

    Accepts decimal, 0x hexadecimal, 0b binary and leading-zero octal
    forms, with up to three u/U/l/L suffix characters.

    Raises:
        InvalidIntegerError: On bad digits, bad suffix or overflow
    """
    body = text.rstrip("uUlL")
    if len(text) - len(body) > 3:
        raise InvalidIntegerError(text, "invalid suffix", location)

    lowered = body.lower()
    if lowered.startswith("0x"):
        base, digits = 16, body[2:]
    elif lowered.startswith("0b"):
        base, digits = 2, body[2:]
    elif len(body) > 1 and body.startswith("0"):
        base, digits = 8, body[1:]
    else:
        base, digits = 10, body

    if not digits:
        raise InvalidIntegerError(text, "missing digits", location)
    for char in digits:
        if char not in _INTEGER_DIGITS[base]:
            raise InvalidIntegerError(text, f"invalid digit '{char}' in base {base}", location)

    value = int(digits, base)
    if value >= ATOM_INTEGER_LIMIT:
        raise InvalidIntegerError(text, "does not fit in 128 bits", location)
    return value


def parse_float_text(text: str, location: Optional[SourceLocation] = None) -> float:
    """
    Interpret raw floating point literal text.

    Accepts decimal (1.5, .5, 1e-3) and hexadecimal (0x1.8p3) forms with
    an optional f/F/l/L suffix. A hexadecimal literal must have a p
    exponent.

    Raises:
        InvalidFloatError: If the text is not a valid literal
    """
    is_hex = text[:2].lower() == "0x"
    body = text
    # Hex digits include 'f', so only a hex literal with an exponent can
    # carry a suffix
    if text[-1] in "lL" or (text[-1] in "fF" and (not is_hex or "p" in text.lower())):
        body = text[:-1]

    try:
        if is_hex:
            # A hex float needs its binary exponent
            if "p" not in body.lower():
                raise ValueError(body)
            return float.fromhex(body)
        if not body or not set(body) <= _DECIMAL_FLOAT_CHARS:
            raise ValueError(body)
        return float(body)
    except ValueError:
        raise InvalidFloatError(text, location) from None


def atom_from_token(token: Token, location: Optional[SourceLocation] = None) -> Atom:
    """
    Convert a lexical token into an Atom.

    This is the point where literal text becomes a typed value.

    Args:
        token: The token to convert
        location: Where the token is, for error messages

    Raises:
        NotAnAtomError: If the token is an operator or delimiter
        InvalidIntegerError: If an INTEGER token's text is malformed
        InvalidFloatError: If a FLOAT token's text is malformed
    """
    start = token.byte_start
    if token.kind == TokenKind.IDENT:
        return Identifier(byte_start=start, name=token.value)
    if token.kind == TokenKind.KEYWORD:
        return KeywordAtom(byte_start=start, keyword=token.value)
    if token.kind == TokenKind.STRING:
        return StringLiteral(byte_start=start, value=token.value)
    if token.kind == TokenKind.INTEGER:
        return IntegerLiteral(byte_start=start, value=parse_integer_text(token.value, location))
    if token.kind == TokenKind.FLOAT:
        return FloatLiteral(byte_start=start, value=parse_float_text(token.value, location))
    raise NotAnAtomError(token.text, location)


# =============================================================================
# AST Visitor Pattern
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Dispatches on the node class name to ``visit_<ClassName>``; nodes
    without a specific method go to generic_visit, which visits children.

        class IdentifierCollector(ASTVisitor):
            def __init__(self):
                self.names = []

            def visit_Identifier(self, node):
                self.names.append(node.name)
    """

    def visit(self, node: ASTNode) -> Any:
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: ASTNode) -> None:
        for value in node.__dict__.values():
            if isinstance(value, ASTNode):
                self.visit(value)
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, ASTNode):
                        self.visit(item)


# =============================================================================
# AST Pretty Printer
# =============================================================================

def format_expression(expr: Optional[Expression]) -> str:
    """
    Render an expression with every operator application parenthesised,
    so precedence and associativity are visible: ``a+b*c`` becomes
    ``(a + (b * c))``.
    """
    if expr is None:
        return ""
    if isinstance(expr, Identifier):
        return expr.name
    if isinstance(expr, IntegerLiteral):
        return str(expr.value)
    if isinstance(expr, FloatLiteral):
        return repr(expr.value)
    if isinstance(expr, StringLiteral):
        return f'"{expr.value}"'
    if isinstance(expr, KeywordAtom):
        return expr.keyword.value
    if isinstance(expr, UnaryExpression):
        if expr.operator == UnaryOperator.SIZEOF:
            return f"(sizeof {format_expression(expr.operand)})"
        return f"({expr.operator.value}{format_expression(expr.operand)})"
    if isinstance(expr, PostfixExpression):
        return f"({format_expression(expr.operand)}{expr.operator.value})"
    if isinstance(expr, BinaryExpression):
        if expr.operator in (BinaryOperator.MEMBER, BinaryOperator.ARROW):
            return f"({format_expression(expr.left)}{expr.operator.value}{format_expression(expr.right)})"
        return f"({format_expression(expr.left)} {expr.operator.value} {format_expression(expr.right)})"
    if isinstance(expr, AssignmentExpression):
        return f"({format_expression(expr.target)} {expr.operator.value} {format_expression(expr.value)})"
    if isinstance(expr, ConditionalExpression):
        return (
            f"({format_expression(expr.condition)} ? {format_expression(expr.then_expr)}"
            f" : {format_expression(expr.else_expr)})"
        )
    if isinstance(expr, CallExpression):
        args = ", ".join(format_expression(a) for a in expr.arguments)
        return f"{format_expression(expr.callee)}({args})"
    if isinstance(expr, SubscriptExpression):
        return f"{format_expression(expr.array)}[{format_expression(expr.index)}]"
    if isinstance(expr, ParenthesizedExpression):
        return format_expression(expr.inner)
    return f"<{type(expr).__name__}>"


class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(nodes))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, nodes: list[ASTNode]) -> str:
        """Print a list of top-level nodes and return the text."""
        self.output = []
        self.indent_level = 0
        for node in nodes:
            self.visit(node)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_Empty(self, node: Empty):
        self._emit("Empty")

    def visit_FunctionDeclaration(self, node: FunctionDeclaration):
        params = ", ".join(f"{p.ty} {p.name}" for p in node.args)
        self._emit(f"Function: {node.ty} {node.name}({params})")
        self.indent_level += 1
        for stmt in node.body:
            self.visit(stmt)
        self.indent_level -= 1

    def visit_VarDeclaration(self, node: VarDeclaration):
        init = f" = {format_expression(node.rhs)}" if node.rhs is not None else ""
        self._emit(f"Variable: {node.ty} {node.name}{init}")

    def visit_ExpressionStatement(self, node: ExpressionStatement):
        self._emit(f"Expr: {format_expression(node.expression)}")

    def generic_visit(self, node: ASTNode):
        if isinstance(node, Atom):
            self._emit(f"Atom: {format_expression(node)}")
        else:
            self._emit(f"<{type(node).__name__}>")
