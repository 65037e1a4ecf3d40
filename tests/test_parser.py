# =============================================================================
# test_parser.py - Statement Parser Tests
# =============================================================================
# Tests for declarations, blocks, statements and the error chains the
# parser builds when they are malformed.
# =============================================================================

import pytest

from cfront.syntax.ast import (
    AssignmentExpression,
    BinaryExpression,
    CallExpression,
    Empty,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    IntegerLiteral,
    Parameter,
    StringLiteral,
    UnaryExpression,
    UnaryOperator,
    VarDeclaration,
)
from cfront.syntax.errors import (
    ExpectedExpressionError,
    InvalidArgumentNameError,
    InvalidArgumentsError,
    InvalidArgumentTypeError,
    InvalidBlockError,
    InvalidFunctionBodyError,
    InvalidVariableDeclarationError,
    LexError,
    MissingDelimiterError,
    NoAlternativeMatchedError,
    NoFunctionNameError,
    NoReturnTypeError,
    UnexpectedEndOfInputError,
    UnexpectedTokenError,
    UnsupportedStatementError,
    iter_chain,
    render_chain,
    root_cause,
)
from cfront.syntax.parser import Parser, parse_source


def chain_types(error) -> list[type]:
    return [type(link) for link in iter_chain(error)]


# =============================================================================
# Function Declaration Tests
# =============================================================================

class TestFunctions:
    """Function definitions."""

    def test_empty_main(self):
        """'void main() {}' is one function with no args and no body."""
        assert parse_source("void main() {}") == [
            FunctionDeclaration(ty="void", name="main", args=[], body=[]),
        ]

    def test_arguments_with_pointers(self):
        """Pointer stars are consumed, not appended to type or name."""
        (func,) = parse_source("void main(int argc, char **argv) {}")
        assert func.args == [("int", "argc"), ("char", "argv")]
        assert func.args[1] == Parameter(ty="char", name="argv")

    def test_void_argument_list(self):
        (func,) = parse_source("int main(void) {}")
        assert func.ty == "int"
        assert func.args == []

    def test_pointer_return_type(self):
        (func,) = parse_source("char *name() {}")
        assert func.ty == "char"
        assert func.name == "name"

    def test_identifier_as_type(self):
        (func,) = parse_source("size_t length(buffer b) {}")
        assert func.ty == "size_t"
        assert func.args == [("buffer", "b")]

    def test_body_statements(self):
        (func,) = parse_source("""
            void main() {
                int x = 1;
                x = x + 1;
                f(x);
                x;
                ;
            }
        """)
        assert len(func.body) == 4
        assert func.body[0] == VarDeclaration(ty="int", name="x", rhs=IntegerLiteral(value=1))

        assignment = func.body[1]
        assert isinstance(assignment, ExpressionStatement)
        assert isinstance(assignment.expression, AssignmentExpression)
        assert isinstance(assignment.expression.value, BinaryExpression)

        call = func.body[2]
        assert isinstance(call, ExpressionStatement)
        assert isinstance(call.expression, CallExpression)

        # A bare atom statement comes back as the Atom itself
        assert func.body[3] == Identifier(name="x")

    def test_multiple_functions(self):
        nodes = parse_source("void a() {}\nvoid b() {}")
        assert [n.name for n in nodes] == ["a", "b"]

    def test_node_offsets(self):
        nodes = parse_source("void a() {}\nvoid b() {}")
        assert nodes[0].byte_start == 0
        assert nodes[1].byte_start == 12


# =============================================================================
# Variable Declaration Tests
# =============================================================================

class TestVariables:
    """Global and local variable declarations."""

    def test_declaration_without_initializer(self):
        assert parse_source("int x;") == [VarDeclaration(ty="int", name="x", rhs=None)]

    def test_declaration_with_initializer(self):
        (decl,) = parse_source("int x = 2 * 3;")
        assert decl.name == "x"
        assert isinstance(decl.rhs, BinaryExpression)

    def test_pointer_declaration(self):
        assert parse_source('char *s = "hi";') == [
            VarDeclaration(ty="char", name="s", rhs=StringLiteral(value="hi")),
        ]

    def test_globals_and_functions(self):
        nodes = parse_source("int g = 2;\nint *p;\nvoid main() { g = 3; }")
        assert [type(n) for n in nodes] == [VarDeclaration, VarDeclaration, FunctionDeclaration]

    def test_multiplication_statement_reads_as_declaration(self):
        """'a * b;' is a declaration of b with type a."""
        (func,) = parse_source("void main() { a * b; }")
        assert func.body == [VarDeclaration(ty="a", name="b")]

    def test_sizeof_statement_is_an_expression(self):
        """Only type keywords may stand where a type name is expected."""
        (func,) = parse_source("void f() { sizeof x; }")
        assert func.body == [
            ExpressionStatement(expression=UnaryExpression(
                operator=UnaryOperator.SIZEOF,
                operand=Identifier(name="x"),
            )),
        ]

    def test_sizeof_is_not_a_return_type(self):
        with pytest.raises(NoAlternativeMatchedError) as exc_info:
            parse_source("sizeof x;")
        assert isinstance(exc_info.value.attempts[0][1], NoReturnTypeError)
        assert isinstance(exc_info.value.attempts[1][1], InvalidVariableDeclarationError)

    @pytest.mark.parametrize("ty", ["unsigned", "const", "struct", "volatile"])
    def test_type_keywords_are_symbols(self, ty):
        assert parse_source(f"{ty} x;") == [VarDeclaration(ty=ty, name="x")]

    def test_missing_initializer_is_committed(self):
        """After '=' the declaration is committed; no other alternative is tried."""
        with pytest.raises(InvalidVariableDeclarationError) as exc_info:
            parse_source("int x = ;")
        assert exc_info.value.name == "x"
        assert ExpectedExpressionError in chain_types(exc_info.value)

    def test_missing_semicolon_after_initializer(self):
        with pytest.raises(InvalidVariableDeclarationError) as exc_info:
            parse_source("int x = 1")
        assert MissingDelimiterError in chain_types(exc_info.value)
        assert isinstance(root_cause(exc_info.value), UnexpectedEndOfInputError)


# =============================================================================
# Empty Input Tests
# =============================================================================

class TestEmpty:

    def test_empty_source(self):
        assert parse_source("") == [Empty()]

    def test_comments_only(self):
        assert parse_source("  // nothing here\n/* or here */\n") == [Empty()]


# =============================================================================
# Argument List Error Tests
# =============================================================================

class TestArgumentErrors:
    """Malformed argument lists."""

    def test_missing_close_paren(self):
        """The chain's root cause identifies the missing ')'."""
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void main(int argc {}")
        error = exc_info.value
        assert error.function_name == "main"
        assert isinstance(error.source, MissingDelimiterError)
        assert error.source.delimiter == ")"

        root = root_cause(error)
        assert isinstance(root, UnexpectedTokenError)
        assert "')'" in root.expected
        assert root.found == "{"

    def test_missing_close_paren_chain_text(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void main(int argc {}")
        assert render_chain(exc_info.value) == (
            "invalid argument list for 'main': missing ')': "
            "<input>:1:20: expected ',' or ')', found '{'"
        )

    def test_trailing_comma_rejected_by_default(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void f(int a,) {}")
        cause = exc_info.value.source
        assert isinstance(cause, InvalidArgumentTypeError)
        assert cause.position == 2

    def test_trailing_comma_allowed(self):
        (func,) = parse_source("void f(int a,) {}", allow_trailing_comma=True)
        assert func.args == [("int", "a")]

    def test_missing_argument_name(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void f(int) {}")
        cause = exc_info.value.source
        assert isinstance(cause, InvalidArgumentNameError)
        assert cause.position == 1

    def test_keyword_rejected_as_argument_name(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void f(int a, int char) {}")
        assert exc_info.value.source.position == 2

    def test_unterminated_argument_list(self):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            parse_source("void f(int a")
        assert isinstance(root_cause(exc_info.value), UnexpectedEndOfInputError)


# =============================================================================
# Body Error Tests
# =============================================================================

class TestBodyErrors:
    """Errors inside a function body."""

    def test_missing_body(self):
        with pytest.raises(InvalidFunctionBodyError) as exc_info:
            parse_source("void main()")
        assert exc_info.value.source.delimiter == "{"

    def test_missing_close_brace(self):
        with pytest.raises(InvalidFunctionBodyError) as exc_info:
            parse_source("void main() { int x;")
        types = chain_types(exc_info.value)
        assert types[:3] == [InvalidFunctionBodyError, InvalidBlockError, MissingDelimiterError]
        assert isinstance(root_cause(exc_info.value), UnexpectedEndOfInputError)

    def test_missing_semicolon(self):
        with pytest.raises(InvalidFunctionBodyError) as exc_info:
            parse_source("void main() { x = 1 }")
        assert NoAlternativeMatchedError in chain_types(exc_info.value)

    @pytest.mark.parametrize("keyword", [
        "if", "else", "while", "for", "do", "switch",
        "case", "default", "break", "continue", "return", "goto",
    ])
    def test_control_flow_is_unsupported(self, keyword):
        """Control flow is reported, never silently dropped."""
        with pytest.raises(InvalidFunctionBodyError) as exc_info:
            parse_source(f"void main() {{ {keyword} x; }}")
        root = root_cause(exc_info.value)
        assert isinstance(root, UnsupportedStatementError)
        assert root.statement == keyword
        assert root.location.column == 15

    def test_nested_block_is_unsupported(self):
        with pytest.raises(InvalidFunctionBodyError) as exc_info:
            parse_source("void main() { { } }")
        root = root_cause(exc_info.value)
        assert isinstance(root, UnsupportedStatementError)
        assert root.statement == "{"


# =============================================================================
# Top-Level Alternative Tests
# =============================================================================

class TestTopLevel:
    """Choosing between function and variable declarations."""

    def test_no_alternative_matched(self):
        with pytest.raises(NoAlternativeMatchedError) as exc_info:
            parse_source("123;")
        attempts = exc_info.value.attempts
        assert [name for name, _ in attempts] == ["function declaration", "variable declaration"]
        assert isinstance(attempts[0][1], NoReturnTypeError)
        assert isinstance(attempts[1][1], InvalidVariableDeclarationError)

    def test_missing_name(self):
        with pytest.raises(NoAlternativeMatchedError) as exc_info:
            parse_source("int;")
        assert isinstance(exc_info.value.attempts[0][1], NoFunctionNameError)

    def test_keyword_rejected_as_name(self):
        with pytest.raises(NoAlternativeMatchedError):
            parse_source("int int;")

    def test_failure_after_valid_declaration(self):
        with pytest.raises(NoAlternativeMatchedError) as exc_info:
            parse_source("int x;\n+")
        assert exc_info.value.location.line == 2

    def test_lex_errors_are_not_caught(self):
        with pytest.raises(LexError):
            parse_source("int x = @;")

    def test_parser_filename(self):
        with pytest.raises(NoAlternativeMatchedError) as exc_info:
            Parser("123;", "prog.c").parse()
        assert str(exc_info.value).startswith("prog.c:1:1:")
