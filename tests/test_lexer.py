# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the C lexer/tokenizer.
#
# Test coverage includes:
#   - Token sequences for identifiers, keywords and operators
#   - Maximal munch for multi-character operators
#   - Numeric literals kept as raw text (decimal, hex, exponents, suffixes)
#   - String literals with escapes, comments and whitespace
#   - Byte offsets on UTF-8 input
#   - Error conditions and poisoning after an error
# =============================================================================

import pytest

from cfront.syntax.errors import LexError, LexErrorKind
from cfront.syntax.lexer import Lexer
from cfront.syntax.tokens import Keyword, Span, Token, TokenKind


# =============================================================================
# Helper Functions
# =============================================================================

def tokenize(source: str) -> list[Token]:
    """Lex a whole buffer into a list of tokens."""
    return Lexer(source, "<test>").tokenize()


def kinds(source: str) -> list[TokenKind]:
    return [t.kind for t in tokenize(source)]


# =============================================================================
# Basic Token Recognition Tests
# =============================================================================

class TestBasicTokens:
    """Test basic token recognition for simple inputs."""

    def test_empty_source(self):
        """Empty input yields no tokens."""
        assert tokenize("") == []

    def test_whitespace_only(self):
        """Whitespace is skipped, never emitted."""
        assert tokenize("  \t\n\r\n ") == []

    def test_logical_and_statement(self):
        """'x && y;' is ident, &&, ident, semicolon."""
        tokens = tokenize("x && y;")
        assert [t.kind for t in tokens] == [
            TokenKind.IDENT,
            TokenKind.DOUBLE_AMPERSAND,
            TokenKind.IDENT,
            TokenKind.SEMICOLON,
        ]
        assert tokens[0].value == "x"
        assert tokens[2].value == "y"
        assert [t.byte_start for t in tokens] == [0, 2, 5, 6]

    def test_mixed_logical_expression(self):
        """Operators and parentheses in a longer expression."""
        tokens = tokenize("hola && adeu || (si % no)")
        assert [t.kind for t in tokens] == [
            TokenKind.IDENT,
            TokenKind.DOUBLE_AMPERSAND,
            TokenKind.IDENT,
            TokenKind.DOUBLE_PIPE,
            TokenKind.PAREN_OPEN,
            TokenKind.IDENT,
            TokenKind.PERCENT,
            TokenKind.IDENT,
            TokenKind.PAREN_CLOSE,
        ]
        assert [t.value for t in tokens if t.kind == TokenKind.IDENT] == [
            "hola", "adeu", "si", "no",
        ]

    def test_identifier_with_underscore_and_digits(self):
        tokens = tokenize("_my_var2")
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.IDENT
        assert tokens[0].value == "_my_var2"

    def test_delimiters(self):
        """Single-character punctuation."""
        assert kinds("( ) { } [ ] , ; : . ?") == [
            TokenKind.PAREN_OPEN,
            TokenKind.PAREN_CLOSE,
            TokenKind.BRACE_OPEN,
            TokenKind.BRACE_CLOSE,
            TokenKind.BRACKET_OPEN,
            TokenKind.BRACKET_CLOSE,
            TokenKind.COMMA,
            TokenKind.SEMICOLON,
            TokenKind.COLON,
            TokenKind.DOT,
            TokenKind.QUESTION,
        ]

    def test_token_span(self):
        token = tokenize("  abc")[0]
        assert token.span == Span(2, 5)

    def test_token_repr(self):
        tokens = tokenize("x;")
        assert repr(tokens[0]) == "Token(IDENT, 'x', @0)"
        assert repr(tokens[1]) == "Token(SEMICOLON, @1)"


# =============================================================================
# Keyword Tests
# =============================================================================

class TestKeywords:
    """Keywords are classified once, at lex time."""

    def test_keyword_recognized(self):
        token = tokenize("int")[0]
        assert token.kind == TokenKind.KEYWORD
        assert token.value == Keyword.INT
        assert token.is_keyword(Keyword.INT)

    def test_all_keywords(self):
        """Every member of the keyword table lexes as a KEYWORD."""
        for keyword in Keyword:
            token = tokenize(keyword.value)[0]
            assert token.kind == TokenKind.KEYWORD
            assert token.value is keyword

    def test_keyword_prefix_is_identifier(self):
        """An identifier that only starts with a keyword is not a keyword."""
        token = tokenize("integer")[0]
        assert token.kind == TokenKind.IDENT
        assert token.value == "integer"

    def test_keywords_are_case_sensitive(self):
        assert tokenize("Int")[0].kind == TokenKind.IDENT

    def test_lookup(self):
        assert Keyword.lookup("while") is Keyword.WHILE
        assert Keyword.lookup("main") is None


# =============================================================================
# Operator Tests
# =============================================================================

class TestOperators:
    """Maximal munch with one character of lookahead."""

    @pytest.mark.parametrize("text,kind", [
        ("+", TokenKind.PLUS),
        ("++", TokenKind.PLUS_PLUS),
        ("+=", TokenKind.PLUS_EQUAL),
        ("->", TokenKind.ARROW),
        ("--", TokenKind.MINUS_MINUS),
        ("~=", TokenKind.TILDE_EQUAL),
        ("==", TokenKind.EQUAL_EQUAL),
        ("!=", TokenKind.BANG_EQUAL),
        ("<=", TokenKind.LESS_EQUAL),
        ("<<", TokenKind.LESS_LESS),
        ("<<=", TokenKind.LESS_LESS_EQUAL),
        (">>=", TokenKind.GREATER_GREATER_EQUAL),
        ("&&", TokenKind.DOUBLE_AMPERSAND),
        ("&=", TokenKind.AMPERSAND_EQUAL),
        ("||", TokenKind.DOUBLE_PIPE),
        ("^=", TokenKind.CARET_EQUAL),
    ])
    def test_single_operator(self, text, kind):
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].kind == kind
        assert tokens[0].byte_end == len(text)

    def test_longest_match_wins(self):
        """'a+++b' is a, ++, +, b."""
        assert kinds("a+++b") == [
            TokenKind.IDENT,
            TokenKind.PLUS_PLUS,
            TokenKind.PLUS,
            TokenKind.IDENT,
        ]

    def test_shift_assign_without_spaces(self):
        assert kinds("a<<=b") == [
            TokenKind.IDENT,
            TokenKind.LESS_LESS_EQUAL,
            TokenKind.IDENT,
        ]

    def test_member_access(self):
        assert kinds("p->x.y") == [
            TokenKind.IDENT,
            TokenKind.ARROW,
            TokenKind.IDENT,
            TokenKind.DOT,
            TokenKind.IDENT,
        ]

    def test_minus_is_not_part_of_number(self):
        """Negative literals are a MINUS then an INTEGER."""
        tokens = tokenize("-1")
        assert [t.kind for t in tokens] == [TokenKind.MINUS, TokenKind.INTEGER]
        assert tokens[1].value == "1"

    def test_operator_text(self):
        assert tokenize("<<=")[0].text == "<<="


# =============================================================================
# Number Tests
# =============================================================================

class TestNumbers:
    """Numeric literals keep their raw text."""

    @pytest.mark.parametrize("text", ["0", "42", "0x1F", "0b101", "017", "10UL", "42u"])
    def test_integer_text(self, text):
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.INTEGER
        assert tokens[0].value == text

    @pytest.mark.parametrize("text", ["3.14", ".5", "1.", "1e10", "1e-3", "2.5E+4", "1.5f", "0x1.8p3", "0x1fp-2"])
    def test_float_text(self, text):
        tokens = tokenize(text)
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.FLOAT
        assert tokens[0].value == text

    def test_hex_e_is_a_digit(self):
        """In a hex literal 'E' is a digit, so '+' after it is an operator."""
        tokens = tokenize("0xE+1")
        assert [t.kind for t in tokens] == [
            TokenKind.INTEGER,
            TokenKind.PLUS,
            TokenKind.INTEGER,
        ]
        assert tokens[0].value == "0xE"

    def test_malformed_number_is_one_token(self):
        """Validation is deferred; the lexer keeps the whole run."""
        tokens = tokenize("12abc")
        assert len(tokens) == 1
        assert tokens[0].value == "12abc"

    def test_dot_before_identifier_is_member_access(self):
        assert kinds("s.x") == [TokenKind.IDENT, TokenKind.DOT, TokenKind.IDENT]


# =============================================================================
# String Tests
# =============================================================================

class TestStrings:
    """String literals."""

    def test_simple_string(self):
        token = tokenize('"hello"')[0]
        assert token.kind == TokenKind.STRING
        assert token.value == "hello"
        assert token.text == '"hello"'

    def test_escaped_quote_does_not_end_string(self):
        tokens = tokenize(r'"a\"b" ;')
        assert tokens[0].value == r'a\"b'
        assert tokens[1].kind == TokenKind.SEMICOLON

    def test_escapes_are_kept_raw(self):
        assert tokenize(r'"line\n"')[0].value == r"line\n"

    def test_empty_string(self):
        assert tokenize('""')[0].value == ""

    def test_unterminated_string(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('x = "abc')
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_STRING
        assert exc_info.value.byte_pos == 4

    def test_newline_in_string(self):
        with pytest.raises(LexError) as exc_info:
            tokenize('"ab\ncd"')
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_STRING


# =============================================================================
# Comment Tests
# =============================================================================

class TestComments:
    """Line and block comments are skipped like whitespace."""

    def test_line_comment(self):
        tokens = tokenize("a // comment\nb")
        assert [t.value for t in tokens] == ["a", "b"]

    def test_line_comment_at_end(self):
        assert [t.value for t in tokenize("a // trailing")] == ["a"]

    def test_block_comment(self):
        tokens = tokenize("a /* comment */ b")
        assert [t.value for t in tokens] == ["a", "b"]

    def test_multiline_block_comment(self):
        tokens = tokenize("a /* one\ntwo\n*/ b")
        assert [t.value for t in tokens] == ["a", "b"]

    def test_block_comments_do_not_nest(self):
        """The first */ ends the comment."""
        tokens = tokenize("/* a /* b */ c")
        assert [t.value for t in tokens] == ["c"]

    def test_unterminated_block_comment(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("a /* never closed")
        assert exc_info.value.kind == LexErrorKind.UNTERMINATED_COMMENT
        assert exc_info.value.byte_pos == 2

    def test_slash_alone_is_division(self):
        assert kinds("a / b") == [TokenKind.IDENT, TokenKind.SLASH, TokenKind.IDENT]


# =============================================================================
# Position Tests
# =============================================================================

class TestPositions:
    """Byte offsets and derived line/column."""

    def test_reconstruction(self):
        """Each token's bytes plus skipped whitespace rebuild the source."""
        source = "void main(int argc, char **argv) { x <<= 0x1F; s = \"é\"; }"
        encoded = source.encode("utf-8")
        tokens = tokenize(source)

        for token, following in zip(tokens, tokens[1:]):
            chunk = encoded[token.byte_start:following.byte_start]
            assert chunk.rstrip() == encoded[token.byte_start:token.byte_end]

        last = tokens[-1]
        assert encoded[last.byte_start:last.byte_end] == b"}"
        assert encoded[last.byte_end:].strip() == b""

    def test_utf8_byte_offsets(self):
        """Offsets count UTF-8 bytes, not characters."""
        tokens = tokenize("é x")
        assert tokens[0].value == "é"
        assert tokens[0].byte_end == 2
        assert tokens[1].byte_start == 3

    def test_offsets_after_multibyte_comment(self):
        tokens = tokenize("/* ñ */ y")
        assert tokens[0].byte_start == 9

    def test_line_and_column_initial(self):
        assert Lexer("int x;").line_and_column() == (1, 1)

    def test_line_and_column_after_token(self):
        lexer = Lexer("int x;")
        next(lexer)
        assert lexer.line_and_column() == (1, 4)
        assert lexer.byte_pos == 3

    def test_line_and_column_second_line(self):
        lexer = Lexer("int x;\n  y")
        list(lexer)
        assert lexer.line_and_column() == (2, 4)


# =============================================================================
# Iterator Protocol Tests
# =============================================================================

class TestIteration:
    """The lexer is a lazy iterator."""

    def test_next_returns_one_token_at_a_time(self):
        lexer = Lexer("a b")
        assert next(lexer).value == "a"
        assert lexer.byte_pos == 1
        assert next(lexer).value == "b"
        with pytest.raises(StopIteration):
            next(lexer)

    def test_reset(self):
        lexer = Lexer("a + b")
        first = lexer.tokenize()
        lexer.reset()
        assert lexer.tokenize() == first

    def test_tokenize_function(self):
        from cfront.syntax.lexer import tokenize as lex_all
        assert [t.kind for t in lex_all("x;")] == [TokenKind.IDENT, TokenKind.SEMICOLON]


# =============================================================================
# Error Tests
# =============================================================================

class TestErrors:
    """Lexical errors."""

    def test_unrecognized_character(self):
        lexer = Lexer("a @ b")
        assert next(lexer).value == "a"
        with pytest.raises(LexError) as exc_info:
            next(lexer)
        error = exc_info.value
        assert error.kind == LexErrorKind.UNRECOGNIZED_CHARACTER
        assert error.char == "@"
        assert error.byte_pos == 2
        assert error.whole == "a @ b"

    def test_error_message(self):
        with pytest.raises(LexError) as exc_info:
            Lexer("a @ b").tokenize()
        assert str(exc_info.value) == "<input>:1:3: unrecognized character '@' (U+0040)"

    def test_error_location_on_later_line(self):
        with pytest.raises(LexError) as exc_info:
            Lexer("ab\n  $", "t.c").tokenize()
        location = exc_info.value.location
        assert (location.filename, location.line, location.column) == ("t.c", 2, 3)

    def test_lexer_is_poisoned_after_error(self):
        """Every call after an error re-raises the same error."""
        lexer = Lexer("@ a")
        with pytest.raises(LexError) as first:
            next(lexer)
        with pytest.raises(LexError) as second:
            next(lexer)
        assert second.value is first.value

    def test_reset_clears_error(self):
        lexer = Lexer("a @")
        with pytest.raises(LexError):
            lexer.tokenize()
        lexer.reset()
        assert next(lexer).value == "a"
