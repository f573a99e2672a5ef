"""Configuration for a bundling run.

Loaded from a YAML file and validated with pydantic:

    base_path: .
    bundler_options:
      add_node_globals: true
      exclude: [fs, lodash]
      resolve:
        alias:
          jquery: vendor/jquery/dist/jquery.js
        directories: [node_modules]
        extensions: [.js, .json, .ts, .tsx]
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel
from pydantic import Field
from pydantic import ValidationError

from .errors import ConfigurationError

DEFAULT_EXTENSIONS = [".js", ".json", ".ts", ".tsx"]
DEFAULT_DIRECTORIES = ["node_modules"]


class ResolveOptions(BaseModel):
    """Options passed to filename resolution."""

    alias: dict[str, str] = Field(
        default_factory=dict, description="Module name (or path regex) to replacement path"
    )
    directories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_DIRECTORIES), description="Module directory names to search"
    )
    extensions: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS), description="Extensions tried when resolving files"
    )


class BundlerOptions(BaseModel):
    """Bundler policy: exclusions, aliases and shimming."""

    add_node_globals: bool = Field(default=True, description="Shim Node built-ins with browser implementations")
    exclude: list[str] = Field(default_factory=list, description="Module names never resolved or bundled")
    resolve: ResolveOptions = Field(default_factory=ResolveOptions)


class Configuration(BaseModel):
    """Complete configuration for one bundling run."""

    base_path: Path = Field(default_factory=Path.cwd, description="Project base directory")
    bundler_options: BundlerOptions = Field(default_factory=BundlerOptions)

    @property
    def base_dir(self) -> str:
        """Absolute project base directory as a string."""
        return str(self.base_path.resolve())


def load_configuration(path: Path) -> Configuration:
    """Load and validate a YAML configuration file.

    A relative base_path is taken relative to the configuration file's directory.

    Args:
        path: YAML configuration file

    Returns:
        Validated Configuration

    Raises:
        ConfigurationError: File missing, unreadable or invalid
    """
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Failed to read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")

    try:
        config = Configuration.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration in {path}:\n{e}") from e

    if "base_path" not in data:
        config.base_path = path.parent
    if not config.base_path.is_absolute():
        config.base_path = path.parent / config.base_path
    config.base_path = config.base_path.resolve()
    return config
