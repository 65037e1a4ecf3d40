"""
Expression Parser (Precedence Climbing)
=======================================

This module parses C expressions with a Pratt parser: one loop threaded
with a minimum binding power, instead of one function per precedence
level. Operator behaviour is driven entirely by the three tables below.

Binding Powers (higher binds tighter)
-------------------------------------
| Level          | Operators                          | (left, right) |
|----------------|------------------------------------|---------------|
| assignment     | = += -= *= /= %= ~= &= |= ^= <<= >>= | (2, 1)      |
| conditional    | ? :                                | (4, 3)        |
| logical or     | ||                                 | (5, 6)        |
| logical and    | &&                                 | (7, 8)        |
| bitwise or     | |                                  | (9, 10)       |
| bitwise xor    | ^                                  | (11, 12)      |
| bitwise and    | &                                  | (13, 14)      |
| equality       | == !=                              | (15, 16)      |
| relational     | < <= > >=                          | (17, 18)      |
| shift          | << >>                              | (19, 20)      |
| additive       | + -                                | (21, 22)      |
| multiplicative | * / %                              | (23, 24)      |
| prefix         | ++ -- ! ~ * & + - sizeof           | right 25      |
| postfix        | . -> ++ -- call() subscript[]      | left 29       |

Left-associative operators use (p, p+1) and right-associative ones use
(p+1, p). An infix operator is folded into the current call only when its
left power exceeds the threshold the call was given.

``.`` and ``->`` share the postfix level, so ``s.f(x)`` calls ``s.f`` and
``a.b[i]`` indexes ``a.b``. Their right operand is always a member name.

Unary vs. Binary
----------------
``* & + -`` are both prefix and infix. Which one applies depends only on
the parser's position: where an operand is expected they are prefix,
right after a complete operand they are infix. The lexer never decides.

Example Usage
-------------
>>> from cfront.syntax.expressions import parse_expression_text
>>> from cfront.syntax.ast import format_expression
>>> format_expression(parse_expression_text("a+b*c"))
'(a + (b * c))'
"""

from typing import Optional

from cfront.syntax.ast import (
    AssignmentExpression,
    AssignmentOperator,
    BinaryExpression,
    BinaryOperator,
    CallExpression,
    ConditionalExpression,
    Expression,
    Identifier,
    ParenthesizedExpression,
    PostfixExpression,
    PostfixOperator,
    SubscriptExpression,
    UnaryExpression,
    UnaryOperator,
    atom_from_token,
)
from cfront.syntax.combinators import TokenStream
from cfront.syntax.errors import (
    ExpectedExpressionError,
    ExpressionTooDeepError,
    MissingDelimiterError,
    NotAnAtomError,
    UnmatchedParenthesisError,
)
from cfront.syntax.lexer import Lexer
from cfront.syntax.tokens import Keyword, Token, TokenKind


# =============================================================================
# Prefix Table
# =============================================================================

PREFIX_BINDING_POWER = 25

PREFIX_OPERATORS: dict[TokenKind, UnaryOperator] = {
    TokenKind.PLUS_PLUS: UnaryOperator.PRE_INCREMENT,
    TokenKind.MINUS_MINUS: UnaryOperator.PRE_DECREMENT,
    TokenKind.BANG: UnaryOperator.LOGICAL_NOT,
    TokenKind.TILDE: UnaryOperator.BITWISE_NOT,
    TokenKind.STAR: UnaryOperator.DEREFERENCE,
    TokenKind.AMPERSAND: UnaryOperator.ADDRESS_OF,
    TokenKind.PLUS: UnaryOperator.POSITIVE,
    TokenKind.MINUS: UnaryOperator.NEGATE,
}


# =============================================================================
# Infix Table
# =============================================================================

ASSIGNMENT_OPERATORS: dict[TokenKind, AssignmentOperator] = {
    TokenKind.EQUAL: AssignmentOperator.ASSIGN,
    TokenKind.PLUS_EQUAL: AssignmentOperator.ADD_ASSIGN,
    TokenKind.MINUS_EQUAL: AssignmentOperator.SUB_ASSIGN,
    TokenKind.STAR_EQUAL: AssignmentOperator.MUL_ASSIGN,
    TokenKind.SLASH_EQUAL: AssignmentOperator.DIV_ASSIGN,
    TokenKind.PERCENT_EQUAL: AssignmentOperator.MOD_ASSIGN,
    TokenKind.TILDE_EQUAL: AssignmentOperator.TILDE_ASSIGN,
    TokenKind.AMPERSAND_EQUAL: AssignmentOperator.AND_ASSIGN,
    TokenKind.PIPE_EQUAL: AssignmentOperator.OR_ASSIGN,
    TokenKind.CARET_EQUAL: AssignmentOperator.XOR_ASSIGN,
    TokenKind.LESS_LESS_EQUAL: AssignmentOperator.LSHIFT_ASSIGN,
    TokenKind.GREATER_GREATER_EQUAL: AssignmentOperator.RSHIFT_ASSIGN,
}

BINARY_OPERATORS: dict[TokenKind, BinaryOperator] = {
    TokenKind.DOT: BinaryOperator.MEMBER,
    TokenKind.ARROW: BinaryOperator.ARROW,
    TokenKind.STAR: BinaryOperator.MULTIPLY,
    TokenKind.SLASH: BinaryOperator.DIVIDE,
    TokenKind.PERCENT: BinaryOperator.MODULO,
    TokenKind.PLUS: BinaryOperator.ADD,
    TokenKind.MINUS: BinaryOperator.SUBTRACT,
    TokenKind.LESS_LESS: BinaryOperator.LEFT_SHIFT,
    TokenKind.GREATER_GREATER: BinaryOperator.RIGHT_SHIFT,
    TokenKind.LESS: BinaryOperator.LESS,
    TokenKind.LESS_EQUAL: BinaryOperator.LESS_EQ,
    TokenKind.GREATER: BinaryOperator.GREATER,
    TokenKind.GREATER_EQUAL: BinaryOperator.GREATER_EQ,
    TokenKind.EQUAL_EQUAL: BinaryOperator.EQUAL,
    TokenKind.BANG_EQUAL: BinaryOperator.NOT_EQUAL,
    TokenKind.AMPERSAND: BinaryOperator.BITWISE_AND,
    TokenKind.CARET: BinaryOperator.BITWISE_XOR,
    TokenKind.PIPE: BinaryOperator.BITWISE_OR,
    TokenKind.DOUBLE_AMPERSAND: BinaryOperator.LOGICAL_AND,
    TokenKind.DOUBLE_PIPE: BinaryOperator.LOGICAL_OR,
}


def _left_assoc(power: int) -> tuple[int, int]:
    return (power, power + 1)


def _right_assoc(power: int) -> tuple[int, int]:
    return (power + 1, power)


INFIX_BINDING_POWERS: dict[TokenKind, tuple[int, int]] = {
    **{kind: _right_assoc(1) for kind in ASSIGNMENT_OPERATORS},
    TokenKind.QUESTION: _right_assoc(3),
    TokenKind.DOUBLE_PIPE: _left_assoc(5),
    TokenKind.DOUBLE_AMPERSAND: _left_assoc(7),
    TokenKind.PIPE: _left_assoc(9),
    TokenKind.CARET: _left_assoc(11),
    TokenKind.AMPERSAND: _left_assoc(13),
    TokenKind.EQUAL_EQUAL: _left_assoc(15),
    TokenKind.BANG_EQUAL: _left_assoc(15),
    TokenKind.LESS: _left_assoc(17),
    TokenKind.LESS_EQUAL: _left_assoc(17),
    TokenKind.GREATER: _left_assoc(17),
    TokenKind.GREATER_EQUAL: _left_assoc(17),
    TokenKind.LESS_LESS: _left_assoc(19),
    TokenKind.GREATER_GREATER: _left_assoc(19),
    TokenKind.PLUS: _left_assoc(21),
    TokenKind.MINUS: _left_assoc(21),
    TokenKind.STAR: _left_assoc(23),
    TokenKind.SLASH: _left_assoc(23),
    TokenKind.PERCENT: _left_assoc(23),
    TokenKind.DOT: _left_assoc(29),
    TokenKind.ARROW: _left_assoc(29),
}


# =============================================================================
# Postfix Table
# =============================================================================

POSTFIX_BINDING_POWER = 29

POSTFIX_OPERATORS: dict[TokenKind, PostfixOperator] = {
    TokenKind.PLUS_PLUS: PostfixOperator.POST_INCREMENT,
    TokenKind.MINUS_MINUS: PostfixOperator.POST_DECREMENT,
}

# Call and subscript are postfix forms too; they carry their own operands
POSTFIX_KINDS = frozenset(POSTFIX_OPERATORS) | {TokenKind.PAREN_OPEN, TokenKind.BRACKET_OPEN}


def prefix_binding_power(token: Token) -> Optional[int]:
    """Right binding power of token used as a prefix operator, if it is one."""
    if token.kind in PREFIX_OPERATORS or token.is_keyword(Keyword.SIZEOF):
        return PREFIX_BINDING_POWER
    return None


def infix_binding_power(kind: TokenKind) -> Optional[tuple[int, int]]:
    """(left, right) binding powers of kind used as an infix operator."""
    return INFIX_BINDING_POWERS.get(kind)


def postfix_binding_power(kind: TokenKind) -> Optional[int]:
    """Left binding power of kind used as a postfix operator."""
    if kind in POSTFIX_KINDS:
        return POSTFIX_BINDING_POWER
    return None


# =============================================================================
# Parser
# =============================================================================

# Nesting beyond this raises ExpressionTooDeepError instead of exhausting the
# interpreter stack
MAX_EXPRESSION_DEPTH = 200


class ExpressionParser:
    """
    Pratt parser over a TokenStream.

    parse_expression consumes exactly the tokens of one expression and
    leaves the stream on the first token that cannot continue it (a ';',
    ',', ')' and so on), so statement terminators are never swallowed.
    """

    def __init__(self, stream: TokenStream, max_depth: int = MAX_EXPRESSION_DEPTH):
        self.stream = stream
        self.max_depth = max_depth
        self._depth = 0

    def parse_expression(self, min_bp: int = 0) -> Expression:
        """
        Parse one expression whose operators bind tighter than min_bp.

        Raises:
            ExpectedExpressionError: If no operand is found where one is required
            UnmatchedParenthesisError: If a '(' is never closed
            ExpressionTooDeepError: If sub-expressions nest past max_depth
        """
        if self._depth >= self.max_depth:
            raise ExpressionTooDeepError(self.max_depth, self.stream.location())

        self._depth += 1
        try:
            lhs = self._parse_operand()

            while True:
                token = self.stream.peek()
                if token is None:
                    break

                left_power = postfix_binding_power(token.kind)
                if left_power is not None:
                    if left_power <= min_bp:
                        break
                    lhs = self._parse_postfix(lhs)
                    continue

                powers = infix_binding_power(token.kind)
                if powers is None:
                    break
                left_power, right_power = powers
                if left_power <= min_bp:
                    break

                self.stream.advance()
                lhs = self._parse_infix(lhs, token, right_power)
        finally:
            self._depth -= 1

        return lhs

    # =========================================================================
    # Operands
    # =========================================================================

    def _parse_operand(self) -> Expression:
        """Parse an Atom, a parenthesised expression or a prefix application."""
        token = self.stream.peek()
        if token is None:
            raise ExpectedExpressionError(None, self.stream.location_of(None))

        if token.kind == TokenKind.PAREN_OPEN:
            return self._parse_parenthesized()

        right_power = prefix_binding_power(token)
        if right_power is not None:
            self.stream.advance()
            operand = self.parse_expression(right_power)
            if token.kind == TokenKind.KEYWORD:
                operator = UnaryOperator.SIZEOF
            else:
                operator = PREFIX_OPERATORS[token.kind]
            return UnaryExpression(byte_start=token.byte_start, operator=operator, operand=operand)

        location = self.stream.location_of(token)
        try:
            atom = atom_from_token(token, location)
        except NotAnAtomError as exc:
            raise ExpectedExpressionError(token.text, location) from exc
        self.stream.advance()
        return atom

    def _parse_parenthesized(self) -> ParenthesizedExpression:
        open_paren = self.stream.advance()
        inner = self.parse_expression(0)
        if not self.stream.check(TokenKind.PAREN_CLOSE):
            raise UnmatchedParenthesisError(
                self.stream.location_of(open_paren)
            ) from self.stream.unexpected("')'")
        self.stream.advance()
        return ParenthesizedExpression(byte_start=open_paren.byte_start, inner=inner)

    # =========================================================================
    # Operators After an Operand
    # =========================================================================

    def _parse_infix(self, lhs: Expression, token: Token, right_power: int) -> Expression:
        if token.kind in ASSIGNMENT_OPERATORS:
            value = self.parse_expression(right_power)
            return AssignmentExpression(
                byte_start=lhs.byte_start,
                operator=ASSIGNMENT_OPERATORS[token.kind],
                target=lhs,
                value=value,
            )

        if token.kind == TokenKind.QUESTION:
            then_expr = self.parse_expression(0)
            if not self.stream.match(TokenKind.COLON):
                raise MissingDelimiterError(":") from self.stream.unexpected("':'")
            else_expr = self.parse_expression(right_power)
            return ConditionalExpression(
                byte_start=lhs.byte_start,
                condition=lhs,
                then_expr=then_expr,
                else_expr=else_expr,
            )

        if token.kind in (TokenKind.DOT, TokenKind.ARROW):
            member = self.stream.expect(TokenKind.IDENT, "a member name")
            return BinaryExpression(
                byte_start=lhs.byte_start,
                operator=BINARY_OPERATORS[token.kind],
                left=lhs,
                right=Identifier(byte_start=member.byte_start, name=member.text),
            )

        rhs = self.parse_expression(right_power)
        return BinaryExpression(
            byte_start=lhs.byte_start,
            operator=BINARY_OPERATORS[token.kind],
            left=lhs,
            right=rhs,
        )

    def _parse_postfix(self, lhs: Expression) -> Expression:
        token = self.stream.advance()

        if token.kind == TokenKind.PAREN_OPEN:
            return self._parse_call(lhs)

        if token.kind == TokenKind.BRACKET_OPEN:
            index = self.parse_expression(0)
            if not self.stream.match(TokenKind.BRACKET_CLOSE):
                raise MissingDelimiterError("]") from self.stream.unexpected("']'")
            return SubscriptExpression(byte_start=lhs.byte_start, array=lhs, index=index)

        return PostfixExpression(
            byte_start=lhs.byte_start,
            operator=POSTFIX_OPERATORS[token.kind],
            operand=lhs,
        )

    def _parse_call(self, callee: Expression) -> CallExpression:
        """Parse call arguments after the opening '('."""
        arguments = []
        if not self.stream.match(TokenKind.PAREN_CLOSE):
            while True:
                arguments.append(self.parse_expression(0))
                if self.stream.match(TokenKind.COMMA):
                    continue
                if self.stream.match(TokenKind.PAREN_CLOSE):
                    break
                raise MissingDelimiterError(")") from self.stream.unexpected("',' or ')'")

        return CallExpression(byte_start=callee.byte_start, callee=callee, arguments=arguments)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_expression_text(source: str, filename: str = "<input>") -> Expression:
    """
    Parse a buffer holding exactly one expression.

    Raises:
        LexError: If the text cannot be tokenized
        ParseError: If it is not one complete expression
    """
    stream = TokenStream(Lexer(source, filename))
    expression = ExpressionParser(stream).parse_expression()
    if not stream.at_end():
        raise stream.unexpected("end of expression")
    return expression
