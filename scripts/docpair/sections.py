"""Group classified source lines into alternating comment and code sections."""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from typing import Any, Iterable, Optional

from scripts.docpair.parser import LineKind, SourceLine

# Preprocessor commands that show up commented out, e.g. `// #region Helpers`
DEFAULT_DIRECTIVES = (
    "if",
    "else",
    "elif",
    "endif",
    "define",
    "undef",
    "warning",
    "error",
    "line",
    "region",
    "endregion",
    "pragma",
    "nullable",
)

COMMENT_MARKERS = " \t/*"


@dataclass(frozen=True)
class Section:
    """A run of comment lines or a run of code lines from one file.

    Text is raw and unescaped; lines are joined with "\\n". For a comment
    section code_start_line is 0.
    """

    docs_text: str
    code_text: str
    code_start_line: int
    start_line: int
    end_line: int

    @property
    def has_code(self) -> bool:
        return self.code_start_line > 0

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def directive_pattern(directives: Iterable[str] = DEFAULT_DIRECTIVES) -> re.Pattern[str]:
    """Anchored pattern matching a commented-out preprocessor line."""
    names = "|".join(re.escape(d) for d in directives)
    return re.compile(rf"^\s*//\s*#(?:{names})\b")


_DEFAULT_DIRECTIVE_PATTERN = directive_pattern()


def is_directive_line(text: str, pattern: Optional[re.Pattern[str]] = None) -> bool:
    """Check whether a comment line is a commented-out preprocessor command."""
    pattern = pattern or _DEFAULT_DIRECTIVE_PATTERN
    return bool(pattern.match(text))


def clean_comment_line(text: str) -> str:
    """Strip leading indentation and comment markers, and a trailing `*/`."""
    cleaned = text.lstrip(COMMENT_MARKERS)
    if cleaned.rstrip().endswith("*/"):
        cleaned = cleaned.rstrip()[:-2].rstrip()
    return cleaned


def _close(run: list[SourceLine], pattern: re.Pattern[str]) -> Section:
    if run[0].kind == LineKind.COMMENT:
        docs = [
            clean_comment_line(line.text)
            for line in run
            if not is_directive_line(line.text, pattern)
        ]
        return Section(
            docs_text="\n".join(docs),
            code_text="",
            code_start_line=0,
            start_line=run[0].number,
            end_line=run[-1].number,
        )

    return Section(
        docs_text="",
        code_text="\n".join(line.text for line in run),
        code_start_line=run[0].number,
        start_line=run[0].number,
        end_line=run[-1].number,
    )


def build_sections(
    lines: Iterable[SourceLine],
    directives: Iterable[str] = DEFAULT_DIRECTIVES,
) -> list[Section]:
    """Split a file's classified lines into sections.

    Consecutive lines of the same kind form one section, so the result
    alternates between comment sections and code sections. Sections laid
    end to end cover every line exactly once.

    Args:
        lines: Classified lines from parse_lines(), in order.
        directives: Directive keywords whose commented-out lines are dropped
            from comment text (they still count towards the line range).

    Returns:
        Sections in source order. A file with no lines yields one empty
        section with start_line 1 and end_line 0.
    """
    pattern = directive_pattern(directives)
    sections: list[Section] = []
    run: list[SourceLine] = []

    for line in lines:
        if run and line.kind != run[-1].kind:
            sections.append(_close(run, pattern))
            run = []
        run.append(line)

    if run:
        sections.append(_close(run, pattern))
    else:
        sections.append(Section("", "", code_start_line=0, start_line=1, end_line=0))

    return sections
