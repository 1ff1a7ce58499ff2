"""Tests for the tokenizer module."""

import io

import pytest

from scripts.docpair.errors import UnterminatedLiteralError
from scripts.docpair.tokenizer import (
    NEWLINE,
    TokenKind,
    token_kind,
    tokenize,
    tokenize_text,
)


class TestWords:
    """Tests for word and whitespace handling."""

    def test_whitespace_separates_words(self):
        """Spaces and tabs end a token and produce nothing themselves."""
        assert tokenize_text("int  x\t=\t1;") == ["int", "x", "=", "1;"]

    def test_empty_input(self):
        """Empty input yields no tokens."""
        assert tokenize_text("") == []

    def test_pending_word_flushed_at_end(self):
        """A word at end of stream without trailing whitespace is kept."""
        assert tokenize_text("return") == ["return"]

    def test_no_empty_tokens(self):
        """Runs of separators never produce empty tokens."""
        tokens = tokenize_text("  a  (  )  \n\n  b  ")
        assert "" not in tokens
        assert tokens == ["a", "(", ")", NEWLINE, NEWLINE, "b"]

    def test_reads_from_stream(self):
        """tokenize accepts any readable text stream."""
        assert tokenize(io.StringIO("a b")) == ["a", "b"]


class TestNewlines:
    """Tests for newline tokens."""

    def test_line_feed_is_own_token(self):
        """Each line feed becomes one NEWLINE token."""
        assert tokenize_text("a\nb\n") == ["a", NEWLINE, "b", NEWLINE]

    def test_crlf_produces_single_newline(self):
        """A carriage return is whitespace, so CRLF yields one NEWLINE."""
        assert tokenize_text("a\r\nb\r\n") == ["a", NEWLINE, "b", NEWLINE]

    def test_newline_count_matches_line_feeds(self):
        """NEWLINE tokens outside literals match the number of line feeds."""
        text = "class A\n{\n  int x;\n}\n"
        assert tokenize_text(text).count(NEWLINE) == text.count("\n")


class TestPunctuation:
    """Tests for bracket characters."""

    @pytest.mark.parametrize("char", list("{}<>()[]"))
    def test_bracket_is_single_token(self, char):
        """Brackets split words and stand alone."""
        assert tokenize_text(f"a{char}b") == ["a", char, "b"]

    def test_nested_generic(self):
        """Nested generic brackets are all separate tokens."""
        assert tokenize_text("Map<K,List<V>>") == ["Map", "<", "K,List", "<", "V", ">", ">"]


class TestStringLiterals:
    """Tests for string and character literals."""

    def test_string_is_one_token(self):
        """Whitespace and brackets inside a string stay in the token."""
        assert tokenize_text('x = "a (b) c";') == ["x", "=", '"a (b) c"', ";"]

    def test_escaped_quote_does_not_close(self):
        """A backslash-escaped quote does not end the string."""
        assert tokenize_text(r'"say \"hi\"" x') == [r'"say \"hi\""', "x"]

    def test_escaped_backslash_before_quote_closes(self):
        """An escaped backslash does not escape the following quote."""
        assert tokenize_text(r'"a\\" b') == [r'"a\\"', "b"]

    def test_verbatim_string(self):
        """`@"` starts a verbatim string literal."""
        assert tokenize_text('@"c d" e') == ['@"c d"', "e"]

    def test_at_without_quote_is_word(self):
        """`@` not followed by a quote is part of a word."""
        assert tokenize_text("@class x") == ["@class", "x"]

    def test_comment_markers_inside_string(self):
        """`//` inside a string does not start a comment."""
        assert tokenize_text('"http://x" y') == ['"http://x"', "y"]

    def test_string_spanning_lines_keeps_newline(self):
        """A line feed inside a literal stays in the token."""
        tokens = tokenize_text('@"a\nb" c\n')
        assert tokens == ['@"a\nb"', "c", NEWLINE]

    def test_char_literal(self):
        """Character literals are single tokens, including escapes."""
        assert tokenize_text(r"c = '\'' ; d = '\\';") == ["c", "=", r"'\''", ";", "d", "=", r"'\\'", ";"]

    def test_char_literal_with_bracket(self):
        """A bracket inside a character literal is not punctuation."""
        assert tokenize_text("'{'") == ["'{'"]

    def test_literal_ends_pending_word(self):
        """A literal starts a new token even without preceding whitespace."""
        assert tokenize_text('f("x")') == ["f", "(", '"x"', ")"]


class TestComments:
    """Tests for line and block comments."""

    def test_line_comment_with_newline(self):
        """A line comment is one token followed by a NEWLINE."""
        assert tokenize_text("// hello\nint x;\n") == ["// hello", NEWLINE, "int", "x;", NEWLINE]

    def test_line_comment_strips_carriage_return(self):
        """CRLF after a line comment is replaced by one NEWLINE."""
        assert tokenize_text("// hi\r\nx") == ["// hi", NEWLINE, "x"]

    def test_line_comment_at_end_of_stream(self):
        """A line comment without a trailing line feed still ends its line."""
        assert tokenize_text("x // end") == ["x", "// end", NEWLINE]

    def test_line_comment_ends_pending_word(self):
        """`//` glued to a word still starts a comment."""
        assert tokenize_text("x;// c\n") == ["x;", "// c", NEWLINE]

    def test_block_comment_is_one_token(self):
        """A block comment, including its line feeds, is one token."""
        text = "/* one\n   two\n   three */\nx"
        tokens = tokenize_text(text)
        assert tokens[0] == "/* one\n   two\n   three */"
        assert tokens[1:] == [NEWLINE, "x"]

    def test_multiline_comment_followed_by_blank_lines(self):
        """Lines after a block comment produce NEWLINE tokens."""
        tokens = tokenize_text("/*\n a\n b\n c\n d */\n\nclass A {}\n")
        assert tokens[0].count("\n") == 4
        assert tokens[1] == NEWLINE
        assert tokens[2] == NEWLINE

    def test_block_comment_mid_line(self):
        """A block comment after code is its own token."""
        assert tokenize_text("a /* b */ c") == ["a", "/* b */", "c"]

    def test_slash_star_slash_does_not_close(self):
        """The star of the opening `/*` cannot close the comment."""
        assert tokenize_text("/*/ still open */ x") == ["/*/ still open */", "x"]

    def test_empty_block_comment(self):
        """`/**/` is a complete comment."""
        assert tokenize_text("/**/x") == ["/**/", "x"]

    def test_division_is_word(self):
        """A single slash is an ordinary word character."""
        assert tokenize_text("a/b") == ["a/b"]


class TestUnterminated:
    """Tests for literals running off the end of the stream."""

    def test_unterminated_string(self):
        """An open string at end of stream raises."""
        with pytest.raises(UnterminatedLiteralError) as exc_info:
            tokenize_text('x = "never closed')
        assert exc_info.value.opening == '"'
        assert exc_info.value.line == 1

    def test_unterminated_char(self):
        """An open character literal at end of stream raises."""
        with pytest.raises(UnterminatedLiteralError):
            tokenize_text("c = '")

    def test_unterminated_block_comment_reports_start_line(self):
        """An open block comment reports the line it started on."""
        with pytest.raises(UnterminatedLiteralError) as exc_info:
            tokenize_text("a\nb /* open\nstill open\n")
        assert exc_info.value.opening == "/*"
        assert exc_info.value.line == 2

    def test_trailing_escape_does_not_close(self):
        """A string ending in an escaped quote is still open."""
        with pytest.raises(UnterminatedLiteralError):
            tokenize_text('"abc\\"')


class TestTokenKind:
    """Tests for token_kind."""

    @pytest.mark.parametrize(
        "token,kind",
        [
            (NEWLINE, TokenKind.NEWLINE),
            ("class", TokenKind.WORD),
            ("{", TokenKind.PUNCTUATION),
            ('"s"', TokenKind.STRING),
            ('@"s"', TokenKind.STRING),
            ("'c'", TokenKind.CHAR),
            ("// c", TokenKind.LINE_COMMENT),
            ("/* c */", TokenKind.BLOCK_COMMENT),
        ],
    )
    def test_kind_from_leading_characters(self, token, kind):
        """Kind is inferred from the leading characters."""
        assert token_kind(token) == kind


class TestReconstruction:
    """Tokens keep every non-whitespace character in order."""

    def test_tokens_cover_non_whitespace_text(self):
        """Joining tokens reproduces the input minus whitespace outside literals."""
        text = 'class A<T> { string s = "x y"; char c = \'z\'; }\n'
        joined = "".join(t for t in tokenize_text(text) if t != NEWLINE)
        assert joined == 'classA<T>{strings="x y";charc=\'z\';}'
