"""Drive source files through tokenizing, line classification and sectioning.

Each file is read twice: once to build its token list and once, line by
line, while the parser walks those tokens. Files are processed one at a time
and share a single TypeRegistry owned by the run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from scripts.docpair.errors import DocpairError, SourceReadError
from scripts.docpair.parser import LineKind, SourceLine, count_lines, parse_lines
from scripts.docpair.paths import PathResolver, format_size
from scripts.docpair.registry import TypeDeclaration, TypeRegistry
from scripts.docpair.sections import DEFAULT_DIRECTIVES, Section, build_sections
from scripts.docpair.tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass
class ParsedFile:
    """Output for one successfully parsed file."""

    source: Path
    rel_path: str
    sections: list[Section]
    lines: list[SourceLine]
    declarations: list[TypeDeclaration] = field(default_factory=list)
    size: str = ""

    @property
    def line_count(self) -> int:
        return len(self.lines)


@dataclass
class ParseFailure:
    """A file that could not be parsed."""

    source: Path
    rel_path: str
    error: DocpairError

    def to_json(self) -> dict[str, Any]:
        result = self.error.to_json()
        result["file"] = self.rel_path
        return result


@dataclass
class RunResult:
    """Result of parsing a set of files, including failures."""

    registry: TypeRegistry
    files: list[ParsedFile] = field(default_factory=list)
    failures: list[ParseFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def parse_file(
    path: Path | str,
    registry: TypeRegistry,
    resolver: PathResolver,
    encoding: str = "utf-8",
    directives: Iterable[str] = DEFAULT_DIRECTIVES,
) -> ParsedFile:
    """Parse one source file into sections and register its declarations.

    Args:
        path: Source file.
        registry: Registry receiving the file's type declarations.
        resolver: Resolver for the file's root-relative path.
        encoding: Text encoding of the file.
        directives: Directive keywords dropped from comment text.

    Returns:
        ParsedFile with sections and classified lines.

    Raises:
        DocpairError: On any tokenizing, parsing or read failure. The
            error's file is set to the relative path.
    """
    path = Path(path)
    rel_path = resolver.relative(path)

    try:
        # newline="\n" keeps both passes agreed on what a line is
        with open(path, encoding=encoding, newline="\n") as stream:
            tokens = tokenize(stream)
        with open(path, encoding=encoding, newline="\n") as reader:
            lines = parse_lines(tokens, reader, registry, rel_path)
        size = format_size(path.stat().st_size)
    except DocpairError as e:
        e.file = rel_path
        raise
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(f"Cannot read source: {e}", file=rel_path) from e

    sections = build_sections(lines, directives)
    logger.debug(
        f"Parsed {rel_path}: {len(lines)} lines "
        f"({count_lines(lines, LineKind.COMMENT)} comment), {len(sections)} sections"
    )

    return ParsedFile(
        source=path,
        rel_path=rel_path,
        sections=sections,
        lines=lines,
        declarations=registry.in_file(rel_path),
        size=size,
    )


def parse_files(
    paths: Iterable[Path | str],
    root: Path | str,
    on_error: str = "abort",
    encoding: str = "utf-8",
    directives: Iterable[str] = DEFAULT_DIRECTIVES,
    registry: Optional[TypeRegistry] = None,
) -> RunResult:
    """Parse several files into one run, sharing a single TypeRegistry.

    Each file registers into a staging registry that is merged into the run
    registry only once the whole file has parsed, so a failed file leaves no
    declarations behind.

    Args:
        paths: Source files, processed in order.
        root: Directory that relative paths are computed from.
        on_error: "abort" re-raises the first failure; "skip" records it
            and continues with the next file.
        encoding: Text encoding of the files.
        directives: Directive keywords dropped from comment text.
        registry: Registry to populate (a new one when omitted).

    Returns:
        RunResult with parsed files, failures and the populated registry.

    Raises:
        DocpairError: When on_error is "abort" and a file fails.
    """
    if on_error not in ("abort", "skip"):
        raise ValueError(f"on_error must be 'abort' or 'skip', not {on_error!r}")

    resolver = PathResolver(root)
    result = RunResult(registry=registry if registry is not None else TypeRegistry())
    directives = list(directives)

    for path in paths:
        path = Path(path)
        staging = TypeRegistry()
        try:
            parsed = parse_file(path, staging, resolver, encoding=encoding, directives=directives)
            result.registry.extend(staging)
        except DocpairError as e:
            rel_path = e.file or resolver.relative(path)
            if on_error == "abort":
                logger.error(f"Aborting run at {rel_path}: {e}")
                raise
            logger.warning(f"Skipping {rel_path}: {e}")
            result.failures.append(ParseFailure(source=path, rel_path=rel_path, error=e))
            continue

        result.files.append(parsed)
        logger.info(f"{parsed.rel_path}: {len(parsed.sections)} sections, {len(parsed.declarations)} types")

    logger.info(
        f"Parsed {len(result.files)} files, {len(result.registry)} types, "
        f"{len(result.failures)} failures"
    )
    return result
