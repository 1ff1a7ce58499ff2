"""Command-line interface for docpair."""

from __future__ import annotations

import argparse
import json
import sys
from enum import IntEnum
from pathlib import Path
from typing import Optional

from scripts.docpair.config import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    DocpairConfig,
    configure_logging,
    load_config,
)
from scripts.docpair.errors import DocpairError
from scripts.docpair.index import (
    build_sections_index,
    build_types_index,
    load_types_index,
    save_index,
)
from scripts.docpair.pipeline import RunResult, parse_files
from scripts.docpair.sources import collect_sources


class ExitCode(IntEnum):
    """Process exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1
    FILE_SYSTEM_ERROR = 2
    PARTIAL_SUCCESS = 3
    PARSE_ERROR = 4


def _get_config(config_path: Optional[str]) -> DocpairConfig:
    """Load config from an explicit path, else ./docpair.yaml, else defaults."""
    if config_path:
        return load_config(config_path)
    return load_config(Path.cwd() / DEFAULT_CONFIG_PATH)


def _root_dir(args: argparse.Namespace, config: DocpairConfig) -> Path:
    if getattr(args, "root", None):
        return Path(args.root).resolve()
    return config.root_dir().resolve()


def _setup(args: argparse.Namespace) -> DocpairConfig:
    config = _get_config(args.config)
    configure_logging("DEBUG" if args.verbose else config.log_level)
    return config


def _report_failures(result: RunResult) -> None:
    for failure in result.failures:
        print(json.dumps(failure.to_json()), file=sys.stderr)


def cmd_build(args: argparse.Namespace) -> int:
    """Parse sources and write the sections and types indexes."""
    try:
        config = _setup(args)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.CONFIG_ERROR

    root = _root_dir(args, config)
    try:
        sources = collect_sources(args.paths or [root], config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return ExitCode.FILE_SYSTEM_ERROR

    if not sources:
        print("No source files found.", file=sys.stderr)
        return ExitCode.FILE_SYSTEM_ERROR

    on_error = "skip" if args.skip_errors else config.on_error
    print(f"Parsing {len(sources)} files...")
    try:
        result = parse_files(
            sources,
            root,
            on_error=on_error,
            encoding=config.encoding,
            directives=config.directives,
        )
    except DocpairError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.PARSE_ERROR

    output_dir = root / config.output.index_dir
    save_index(build_sections_index(result), output_dir / config.output.sections_file)
    save_index(build_types_index(result.registry), output_dir / config.output.types_file)

    print(f"  Parsed {len(result.files)} files")
    print(f"  Found {len(result.registry)} types")
    if result.failures:
        print(f"  Skipped {len(result.failures)} files due to errors")
        _report_failures(result)
    print(f"Output: {output_dir}")

    if result.failures:
        return ExitCode.PARTIAL_SUCCESS
    return ExitCode.SUCCESS


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse one file and print its sections and types as JSON."""
    try:
        config = _setup(args)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.CONFIG_ERROR

    path = Path(args.file).resolve()
    if not path.is_file():
        print(f"Error: file not found: {args.file}", file=sys.stderr)
        return ExitCode.FILE_SYSTEM_ERROR

    root = Path(args.root).resolve() if args.root else path.parent
    try:
        result = parse_files([path], root, encoding=config.encoding, directives=config.directives)
    except DocpairError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.PARSE_ERROR

    parsed = result.files[0]
    print(json.dumps(
        {
            "file": parsed.rel_path,
            "sections": [s.to_dict() for s in parsed.sections],
            "types": result.registry.to_list(),
        },
        indent=2,
    ))
    return ExitCode.SUCCESS


def cmd_types(args: argparse.Namespace) -> int:
    """Query a written types index."""
    try:
        config = _setup(args)
    except ConfigError as e:
        print(json.dumps(e.to_json()), file=sys.stderr)
        return ExitCode.CONFIG_ERROR

    root = _root_dir(args, config)
    types_path = root / config.output.index_dir / config.output.types_file
    registry = load_types_index(types_path)
    if registry is None:
        print("Types index not found. Run 'docpair build' first.")
        return ExitCode.FILE_SYSTEM_ERROR

    matches = [
        d for d in registry
        if (not args.file or d.file == args.file) and (not args.name or d.name == args.name)
    ]
    for d in matches:
        print(f"{d.name}\t{d.kind.value}\t{d.file}:{d.line}")
    if not matches:
        print("No matching types.")
    return ExitCode.SUCCESS


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add --config, --root and --verbose arguments to a parser."""
    parser.add_argument(
        "--config",
        "-c",
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--root",
        help="Root directory for relative paths (default: config root or current directory)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="docpair",
        description="Split annotated source files into comment/code sections and index their types",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser(
        "build",
        help="Parse sources and write the sections and types indexes",
    )
    build_parser.add_argument("paths", nargs="*", help="Source files or directories (default: root)")
    build_parser.add_argument(
        "--skip-errors",
        action="store_true",
        help="Skip files that fail to parse instead of aborting",
    )
    _add_common_args(build_parser)

    parse_parser = subparsers.add_parser(
        "parse",
        help="Print one file's sections and types as JSON",
    )
    parse_parser.add_argument("file", help="Source file")
    _add_common_args(parse_parser)

    types_parser = subparsers.add_parser(
        "types",
        help="Query the types index",
    )
    types_parser.add_argument("--file", help="Only types declared in this relative path")
    types_parser.add_argument("--name", help="Only types with this name")
    _add_common_args(types_parser)

    args = parser.parse_args(argv)

    commands = {
        "build": cmd_build,
        "parse": cmd_parse,
        "types": cmd_types,
    }

    return commands[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
