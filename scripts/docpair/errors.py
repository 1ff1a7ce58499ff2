"""Error types raised while tokenizing and parsing source files."""

from __future__ import annotations

from typing import Any, Optional


class DocpairError(Exception):
    """Base error for docpair failures."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        line: Optional[int] = None,
        error_type: str = "error",
    ):
        super().__init__(message)
        self.message = message
        self.file = file
        self.line = line
        self.error_type = error_type

    def to_json(self) -> dict[str, Any]:
        """Serialize error to JSON format for machine parsing."""
        result: dict[str, Any] = {
            "error": self.error_type,
            "message": self.message,
        }
        if self.file:
            result["file"] = self.file
        if self.line:
            result["line"] = self.line
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.file:
            parts.append(f"file: {self.file}")
        if self.line:
            parts.append(f"line: {self.line}")
        return " | ".join(parts)


class UnterminatedLiteralError(DocpairError):
    """A string, character or block comment literal ran past end of stream."""

    def __init__(self, opening: str, line: int, file: Optional[str] = None):
        super().__init__(
            f"Unterminated literal starting with {opening!r}",
            file=file,
            line=line,
            error_type="unterminated_literal",
        )
        self.opening = opening


class DuplicateTypeError(DocpairError):
    """Two type declarations share the same (name, file) key."""

    def __init__(self, name: str, file: str, first_line: int, line: int):
        super().__init__(
            f"Duplicate type '{name}' (first declared on line {first_line})",
            file=file,
            line=line,
            error_type="duplicate_type",
        )
        self.name = name
        self.first_line = first_line


class MalformedDeclarationError(DocpairError):
    """Token stream ended while reading a declaration."""

    def __init__(self, keyword: str, file: Optional[str] = None, line: Optional[int] = None):
        super().__init__(
            f"Source ended inside '{keyword}' declaration",
            file=file,
            line=line,
            error_type="malformed_declaration",
        )
        self.keyword = keyword


class SourceMismatchError(DocpairError):
    """The line reader and the token stream disagree on line count."""

    def __init__(self, message: str, file: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message, file=file, line=line, error_type="source_mismatch")


class SourceReadError(DocpairError):
    """A source file could not be opened or decoded."""

    def __init__(self, message: str, file: Optional[str] = None):
        super().__init__(message, file=file, error_type="io_error")
