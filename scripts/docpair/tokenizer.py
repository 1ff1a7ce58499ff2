"""Lexical tokenizer for C#-style source files.

The tokenizer turns a character stream into a flat list of string tokens.
String literals, character literals and comments are gathered into single
tokens, the bracket characters become one-character tokens, and every line
feed is emitted as a standalone NEWLINE token so the parser can count
physical lines while it walks the list.
"""

from __future__ import annotations

import io
from enum import Enum
from typing import TextIO

from scripts.docpair.errors import UnterminatedLiteralError

# Canonical line terminator used for NEWLINE tokens
NEWLINE = "\n"

STRING_LITERAL = '"'
CHAR_LITERAL = "'"
VERBATIM_PREFIX = "@"
FORWARDSLASH = "/"
BACKSLASH = "\\"
SPLAT = "*"
CR = "\r"
LF = "\n"

# These become individual tokens; the parser needs them to read generic type names
PUNCTUATION = frozenset("{}<>()[]")


class TokenKind(str, Enum):
    """Kind of a token, inferred from its leading characters."""

    NEWLINE = "newline"
    WORD = "word"
    PUNCTUATION = "punctuation"
    STRING = "string"
    CHAR = "char"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


def token_kind(token: str) -> TokenKind:
    """Infer the kind of a token produced by tokenize()."""
    if token == NEWLINE:
        return TokenKind.NEWLINE
    if token.startswith("//"):
        return TokenKind.LINE_COMMENT
    if token.startswith("/*"):
        return TokenKind.BLOCK_COMMENT
    if token.startswith(STRING_LITERAL) or token.startswith(VERBATIM_PREFIX + STRING_LITERAL):
        return TokenKind.STRING
    if token.startswith(CHAR_LITERAL):
        return TokenKind.CHAR
    if token in PUNCTUATION:
        return TokenKind.PUNCTUATION
    return TokenKind.WORD


class _CharReader:
    """Buffered character reader with one character of look-ahead."""

    def __init__(self, stream: TextIO, chunk_size: int = 8192):
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = ""
        self._pos = 0
        self.line = 1

    def _fill(self) -> bool:
        if self._pos < len(self._buffer):
            return True
        self._buffer = self._stream.read(self._chunk_size)
        self._pos = 0
        return bool(self._buffer)

    def peek(self) -> str:
        """Return the next character without consuming it ("" at end of stream)."""
        if not self._fill():
            return ""
        return self._buffer[self._pos]

    def read(self) -> str:
        """Consume and return the next character ("" at end of stream)."""
        if not self._fill():
            return ""
        c = self._buffer[self._pos]
        self._pos += 1
        if c == LF:
            self.line += 1
        return c


def _chomp_until(reader: _CharReader, until: str, token: list[str], line: int) -> None:
    """Append characters to token up to and including an unescaped `until`."""
    opening = "".join(token)
    escaped = False
    while True:
        c = reader.read()
        if not c:
            raise UnterminatedLiteralError(opening, line)
        token.append(c)
        if c == until and not escaped:
            return
        escaped = c == BACKSLASH and not escaped


def _chomp_block_comment(reader: _CharReader, token: list[str], line: int) -> None:
    """Append characters to token up to and including the closing `*/`."""
    while True:
        c = reader.read()
        if not c:
            raise UnterminatedLiteralError("/*", line)
        token.append(c)
        # len > 3 so the `*` of the opening `/*` cannot close the comment
        if c == FORWARDSLASH and len(token) > 3 and token[-2] == SPLAT:
            return


def _chomp_line_comment(reader: _CharReader, token: list[str]) -> None:
    """Append characters to token up to the end of the line, dropping the terminator."""
    while True:
        c = reader.read()
        if not c or c == LF:
            break
        token.append(c)
    while token and token[-1] in (CR, LF):
        token.pop()


def tokenize(stream: TextIO) -> list[str]:
    """Convert a character stream into a list of tokens.

    Args:
        stream: Readable text stream positioned at the start of the source.

    Returns:
        Tokens in source order. No token is ever an empty string.

    Raises:
        UnterminatedLiteralError: If a string, character or block comment
            literal is still open at the end of the stream.
    """
    reader = _CharReader(stream)
    tokens: list[str] = []
    token: list[str] = []

    def push() -> None:
        if token:
            tokens.append("".join(token))
            token.clear()

    while True:
        c = reader.read()
        if not c:
            break

        if c == LF:
            push()
            tokens.append(NEWLINE)
            continue

        # Non-newline white space is the primary signal for the end of a token
        if c.isspace():
            push()
            continue

        if c == STRING_LITERAL or (c == VERBATIM_PREFIX and reader.peek() == STRING_LITERAL):
            push()
            token.append(c)
            if c == VERBATIM_PREFIX:
                token.append(reader.read())
            _chomp_until(reader, STRING_LITERAL, token, reader.line)
            push()
            continue

        if c == CHAR_LITERAL:
            push()
            token.append(c)
            _chomp_until(reader, CHAR_LITERAL, token, reader.line)
            push()
            continue

        if c == FORWARDSLASH and reader.peek() == SPLAT:
            push()
            line = reader.line
            token.append(c)
            token.append(reader.read())
            _chomp_block_comment(reader, token, line)
            push()
            continue

        if c == FORWARDSLASH and reader.peek() == FORWARDSLASH:
            push()
            token.append(c)
            _chomp_line_comment(reader, token)
            push()
            tokens.append(NEWLINE)
            continue

        if c in PUNCTUATION:
            push()
            tokens.append(c)
            continue

        token.append(c)

    push()
    return tokens


def tokenize_text(text: str) -> list[str]:
    """Tokenize an in-memory string."""
    return tokenize(io.StringIO(text))
