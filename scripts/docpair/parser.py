"""Classify source lines as comment or code and register type declarations.

The parser walks the token list produced by the tokenizer and, every time a
NEWLINE token goes by, reads the next physical line from a second reader
over the same file. Tokens lose whitespace, so the raw line is what ends up
in the output; the tokens only decide how the line is classified.

Each raw line must match the token text gathered for it once white space is
ignored, so a file edited between the two reads fails instead of pairing new
text with stale tokens.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from scripts.docpair.errors import MalformedDeclarationError, SourceMismatchError
from scripts.docpair.registry import TypeKind, TypeRegistry
from scripts.docpair.tokenizer import NEWLINE, TokenKind, token_kind

DECLARATION_KEYWORDS = frozenset({"class", "struct", "enum", "interface", "delegate"})


class LineKind(str, Enum):
    """Classification of a physical source line."""

    COMMENT = "comment"
    CODE = "code"


@dataclass(frozen=True)
class SourceLine:
    """One classified physical line."""

    kind: LineKind
    text: str  # Raw line text without its terminator
    number: int  # 1-based


class _LineScanner:
    """Single-use walker over one file's tokens."""

    def __init__(
        self,
        tokens: list[str],
        reader: TextIO,
        registry: TypeRegistry,
        rel_path: str,
    ):
        self.tokens = deque(tokens)
        self.reader = reader
        self.registry = registry
        self.rel_path = rel_path

        self.line_number = 0
        self.in_comment = False
        self.at_line_start = True
        self.lines: list[SourceLine] = []
        self._keyword = ""
        self._previous = ""  # Last code token consumed
        self._pending: list[str] = []  # Token text of the line being read

    # -- line emission -----------------------------------------------------

    def _emit(self, text: str) -> None:
        self.line_number += 1
        kind = LineKind.COMMENT if self.in_comment else LineKind.CODE
        self.lines.append(SourceLine(kind=kind, text=text, number=self.line_number))

    def _read_line(self) -> str:
        raw = self.reader.readline()
        if not raw:
            raise SourceMismatchError(
                "Source has fewer lines than its token stream",
                file=self.rel_path,
                line=self.line_number + 1,
            )
        return _strip_terminator(raw)

    def _check_line(self, text: str) -> None:
        """Emit a raw line once it matches the token text gathered for it."""
        expected = "".join(self._pending)
        self._pending = []
        if _squeeze(text) != _squeeze(expected):
            raise SourceMismatchError(
                "Line content differs from its token stream",
                file=self.rel_path,
                line=self.line_number + 1,
            )
        self._emit(text)

    # -- token access ------------------------------------------------------

    def _malformed(self) -> MalformedDeclarationError:
        return MalformedDeclarationError(
            self._keyword, file=self.rel_path, line=self.line_number + 1
        )

    def _advance(self) -> str:
        """Consume the next token, emitting any physical lines it completes."""
        if not self.tokens:
            raise self._malformed()

        tok = self.tokens.popleft()
        if tok == NEWLINE:
            self._check_line(self._read_line())
            self.at_line_start = True
            return tok

        if token_kind(tok) not in (TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT):
            self._previous = tok

        # A block comment or verbatim string may span several lines
        *complete, rest = tok.split(NEWLINE)
        for part in complete:
            self._pending.append(part)
            self._check_line(self._read_line())
        self._pending.append(rest)
        return tok

    def _peek(self) -> str:
        if not self.tokens:
            raise self._malformed()
        return self.tokens[0]

    def _skip_newlines(self) -> None:
        while self._peek() == NEWLINE:
            self._advance()

    def _skip_block(self, open_tok: str, close_tok: str) -> str:
        """Consume a balanced block such as `<K, List<V>>` and return it verbatim."""
        parts: list[str] = []
        depth = 0
        while True:
            tok = self._advance()
            if tok != NEWLINE:
                parts.append(tok)
            if tok == open_tok:
                depth += 1
            elif tok == close_tok:
                depth -= 1
                if depth <= 0:
                    return "".join(parts)

    def _skip_generic(self) -> str:
        if self.tokens and self.tokens[0] == "<":
            return self._skip_block("<", ">")
        return ""

    def _type_name(self) -> tuple[str, int]:
        """Read a name and its generic block; return it with the line the name starts on."""
        self._skip_newlines()
        line = self.line_number + 1
        return _base_name(self._advance()) + self._skip_generic(), line

    # -- declarations ------------------------------------------------------

    def _register(self, name: str, kind: TypeKind, line: Optional[int] = None) -> None:
        if not name or token_kind(name) != TokenKind.WORD:
            return
        if line is None:
            line = self.line_number + 1
        self.registry.add(name, self.rel_path, line, kind)

    def _declaration(self, keyword: str, previous: str) -> None:
        self._keyword = keyword

        # `where T : class` and `where T : struct` are constraints
        if keyword in ("class", "struct") and previous.endswith(":"):
            return

        if keyword == "class":
            name, line = self._type_name()
            self._register(name, TypeKind.CLASS, line)

        elif keyword == "struct":
            # A constraint may also be recognised by the `{` or line break after it
            if self._peek() in ("{", NEWLINE):
                return
            name, line = self._type_name()
            self._register(name, TypeKind.STRUCT, line)

        elif keyword == "enum":
            self._skip_newlines()
            self._register(_base_name(self._peek()), TypeKind.ENUM)

        elif keyword == "interface":
            self._skip_newlines()
            self._register(_base_name(self._peek()), TypeKind.INTERFACE)

        elif keyword == "delegate":
            self._skip_newlines()
            # Anonymous delegate: `delegate { ... }` or `delegate (x) { ... }`
            if self._advance() in ("{", "("):
                return
            self._skip_generic()
            self._register(_base_name(self._peek()), TypeKind.DELEGATE)

    # -- main loop ---------------------------------------------------------

    def _classify(self, tok: str) -> bool:
        """Update comment state for a token; return True if it opens a comment line."""
        kind = token_kind(tok)
        if self.at_line_start and kind in (TokenKind.LINE_COMMENT, TokenKind.BLOCK_COMMENT):
            self.in_comment = True
            return True

        self.in_comment = False
        self.at_line_start = False
        return False

    def scan(self) -> list[SourceLine]:
        while self.tokens:
            tok = self.tokens[0]
            if tok == NEWLINE:
                self._advance()
                continue

            previous = self._previous
            is_comment = self._classify(tok)
            self._advance()
            if not is_comment and tok in DECLARATION_KEYWORDS:
                self._declaration(tok, previous)

        self._flush()
        return self.lines

    def _flush(self) -> None:
        # Text after the last line feed is a final line of its own
        raw = self.reader.readline()
        if raw or self._pending:
            self._check_line(_strip_terminator(raw))
        if self.reader.readline():
            raise SourceMismatchError(
                "Source has more lines than its token stream",
                file=self.rel_path,
                line=self.line_number + 1,
            )


def _base_name(tok: str) -> str:
    """Cut a name token at the first `:`, `;` or `,` glued to it (`Foo:` -> `Foo`)."""
    for sep in ":;,":
        tok = tok.split(sep, 1)[0]
    return tok


def _strip_terminator(raw: str) -> str:
    if raw.endswith("\n"):
        raw = raw[:-1]
    if raw.endswith("\r"):
        raw = raw[:-1]
    return raw


def _squeeze(text: str) -> str:
    """Drop all white space; tokens keep every other character of a line."""
    return "".join(text.split())


def parse_lines(
    tokens: list[str],
    reader: TextIO,
    registry: TypeRegistry,
    rel_path: str,
) -> list[SourceLine]:
    """Classify every physical line of a file and register its type declarations.

    Args:
        tokens: Tokens of the file, from tokenize().
        reader: Fresh text reader over the same file, opened with newline="\\n".
        registry: Registry that receives the file's declarations.
        rel_path: Root-relative path used as the declarations' file key.

    Returns:
        One SourceLine per physical line, in order.

    Raises:
        MalformedDeclarationError: If the tokens end inside a declaration.
        DuplicateTypeError: If the file declares the same name twice.
        SourceMismatchError: If reader and tokens disagree on the line count
            or on the non-whitespace text of a line.
    """
    return _LineScanner(tokens, reader, registry, rel_path).scan()


def count_lines(lines: list[SourceLine], kind: Optional[LineKind] = None) -> int:
    """Count classified lines, optionally of one kind only."""
    if kind is None:
        return len(lines)
    return sum(1 for line in lines if line.kind == kind)
