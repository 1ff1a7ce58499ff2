"""Root-relative path computation for registry keys and cross-file links."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath

OUTPUT_SUFFIX = ".html"


class PathResolver:
    """Resolve source paths relative to a fixed root directory.

    Relative paths always use forward slashes so registry keys and links
    look the same on every platform.
    """

    def __init__(self, root: str | Path):
        if not str(root):
            raise ValueError("root must not be empty")

        root = os.path.abspath(os.fspath(root))
        if not root.endswith(os.sep):
            root += os.sep
        self.root = root

    def relative(self, path: str | Path) -> str:
        """Return path relative to the root.

        Args:
            path: Absolute (or cwd-relative) file path.

        Returns:
            Root-relative path with forward slashes.

        Raises:
            ValueError: If path is empty.
        """
        if not str(path):
            raise ValueError("path must not be empty")

        rel = os.path.relpath(os.path.abspath(os.fspath(path)), self.root)
        return rel.replace(os.sep, "/")

    @staticmethod
    def output_path(rel_path: str) -> str:
        """Lower-cased output page path for a relative source path."""
        return str(PurePosixPath(rel_path).with_suffix(OUTPUT_SUFFIX)).lower()

    @staticmethod
    def path_to_root(rel_path: str) -> str:
        """Prefix leading from a page back to the output root, e.g. `../../`."""
        depth = len(PurePosixPath(rel_path).parts) - 1
        return "../" * depth

    def link(self, from_rel: str, to_rel: str) -> str:
        """Href from the page of one source file to the page of another."""
        return self.path_to_root(from_rel) + self.output_path(to_rel)


def format_size(num_bytes: int) -> str:
    """Format a byte count using B, KB, MB or GB with up to two decimals."""
    units = ["B", "KB", "MB", "GB"]
    size = float(num_bytes)
    order = 0
    while size >= 1024 and order + 1 < len(units):
        order += 1
        size /= 1024

    text = f"{size:.2f}".rstrip("0").rstrip(".")
    return f"{text} {units[order]}"
