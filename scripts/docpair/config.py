"""Configuration loading and validation for docpair runs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from scripts.docpair.errors import DocpairError
from scripts.docpair.sections import DEFAULT_DIRECTIVES


class ConfigError(DocpairError):
    """Error in docpair configuration."""

    def __init__(
        self,
        message: str,
        file: Optional[str] = None,
        line: Optional[int] = None,
        error_type: str = "config_invalid",
    ):
        super().__init__(message, file=file, line=line, error_type=error_type)


DEFAULT_CONFIG_PATH = "docpair.yaml"
DEFAULT_INDEX_DIR = "docs"

ON_ERROR_CHOICES = ("abort", "skip")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class OutputConfig:
    """Output configuration."""

    index_dir: str = DEFAULT_INDEX_DIR
    sections_file: str = "sections.json"
    types_file: str = "types.json"


@dataclass
class DocpairConfig:
    """Complete docpair configuration."""

    version: str = "1.0"
    root: Optional[str] = None  # None means the current directory
    extensions: list[str] = field(default_factory=lambda: [".cs"])
    skip_dirs: list[str] = field(
        default_factory=lambda: ["bin", "obj", ".git", ".vs", "packages", "node_modules"]
    )
    encoding: str = "utf-8"
    on_error: str = "abort"
    log_level: str = "WARNING"
    directives: list[str] = field(default_factory=lambda: list(DEFAULT_DIRECTIVES))
    output: OutputConfig = field(default_factory=OutputConfig)

    def root_dir(self) -> Path:
        return Path(self.root) if self.root else Path.cwd()


def get_default_config() -> DocpairConfig:
    """Return the default docpair configuration."""
    return DocpairConfig()


def _parse_output(output_dict: dict[str, Any]) -> OutputConfig:
    """Parse output configuration."""
    return OutputConfig(
        index_dir=output_dict.get("index_dir", DEFAULT_INDEX_DIR),
        sections_file=output_dict.get("sections_file", "sections.json"),
        types_file=output_dict.get("types_file", "types.json"),
    )


def validate_config(config: DocpairConfig, config_file: Optional[str] = None) -> None:
    """Validate configuration values.

    Raises:
        ConfigError: If configuration is invalid.
    """
    if config.on_error not in ON_ERROR_CHOICES:
        raise ConfigError(
            f"Invalid on_error '{config.on_error}': must be one of {', '.join(ON_ERROR_CHOICES)}",
            file=config_file,
        )

    if str(config.log_level).upper() not in LOG_LEVELS:
        raise ConfigError(f"Invalid log_level '{config.log_level}'", file=config_file)

    for ext in config.extensions:
        if not isinstance(ext, str) or not ext.startswith(".") or len(ext) < 2:
            raise ConfigError(
                f"Invalid extension '{ext}': extensions must look like '.cs'",
                file=config_file,
            )

    for directive in config.directives:
        if not isinstance(directive, str) or not directive.isidentifier():
            raise ConfigError(
                f"Invalid directive '{directive}': must be a bare keyword such as 'region'",
                file=config_file,
            )


def load_config(config_path: Path | str) -> DocpairConfig:
    """Load configuration from a YAML file.

    Args:
        config_path: Path to the docpair.yaml file.

    Returns:
        DocpairConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If the file exists but contains invalid configuration.
    """
    config_path = Path(config_path)
    config_file = str(config_path)

    defaults = get_default_config()

    if not config_path.exists():
        return defaults

    try:
        content = config_path.read_text(encoding="utf-8")
        if not content.strip():
            return defaults

        data = yaml.safe_load(content)
        if not data:
            return defaults
        if not isinstance(data, dict):
            raise ConfigError("Top-level docpair config must be a mapping", file=config_file)

    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", file=config_file)

    output = data.get("output", {})
    if not isinstance(output, dict):
        raise ConfigError("'output' must be a mapping", file=config_file)

    config = DocpairConfig(
        version=str(data.get("version", defaults.version)),
        root=data.get("root", defaults.root),
        extensions=data.get("extensions", defaults.extensions),
        skip_dirs=data.get("skip_dirs", defaults.skip_dirs),
        encoding=data.get("encoding", defaults.encoding),
        on_error=data.get("on_error", defaults.on_error),
        log_level=data.get("log_level", defaults.log_level),
        directives=data.get("directives", defaults.directives),
        output=_parse_output(output),
    )

    validate_config(config, config_file)

    return config


def configure_logging(level: str) -> None:
    """Configure root logging for command-line runs."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
