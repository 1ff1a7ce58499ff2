"""Expand file and directory arguments into a list of source files."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable

from scripts.docpair.config import DocpairConfig

logger = logging.getLogger(__name__)


def _should_skip_dir(dir_name: str, skip_dirs: list[str]) -> bool:
    """Check if a directory should be skipped."""
    return dir_name in skip_dirs or dir_name.startswith(".")


def _has_extension(path: Path, extensions: list[str]) -> bool:
    return path.suffix.lower() in {ext.lower() for ext in extensions}


def collect_sources(paths: Iterable[str | Path], config: DocpairConfig) -> list[Path]:
    """Resolve arguments to absolute source file paths.

    Files are taken as given, whatever their extension. Directories are
    walked for files with a configured extension, skipping configured and
    hidden directories.

    Args:
        paths: Files and/or directories.
        config: Docpair configuration.

    Returns:
        Absolute paths without duplicates, in argument order with each
        directory's files sorted.

    Raises:
        FileNotFoundError: If an argument does not exist.
    """
    result: list[Path] = []
    seen: set[Path] = set()

    def add(path: Path) -> None:
        if path not in seen:
            seen.add(path)
            result.append(path)

    for arg in paths:
        path = Path(arg).resolve()
        if path.is_file():
            add(path)
            continue
        if not path.is_dir():
            raise FileNotFoundError(f"Source not found: {arg}")

        found: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(path):
            # Filter in place to prevent descent
            dirnames[:] = [d for d in dirnames if not _should_skip_dir(d, config.skip_dirs)]
            for filename in filenames:
                file_path = Path(dirpath) / filename
                if _has_extension(file_path, config.extensions):
                    found.append(file_path)

        logger.debug(f"Found {len(found)} source files under {path}")
        for file_path in sorted(found):
            add(file_path)

    return result
