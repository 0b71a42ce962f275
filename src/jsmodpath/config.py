"""Configuration management for jsmodpath."""

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from jsmodpath.errors import ConfigError
from jsmodpath.resolution import DEFAULT_ENV_VAR, SearchPath, SpecifierKind
from jsmodpath.resolution.specifier import kind_of

PLACEHOLDER = "%"


class ResolverConfig(BaseModel):
    """Module resolution settings."""

    env_var: str = DEFAULT_ENV_VAR
    # Used instead of the environment variable when non-empty
    search_path: List[str] = Field(default_factory=list)
    bare_direct_fallback: bool = True


class IgnorePatternsConfig(BaseModel):
    """Paths skipped when embedding whole directories."""

    paths: List[str] = Field(
        default_factory=lambda: [
            "**/.git/**",
            "**/node_modules/**",
            "**/.idea/**",
            "**/.vscode/**",
        ]
    )
    extensions: List[str] = Field(default_factory=lambda: [".tmp", ".swp"])


class BuildConfig(BaseModel):
    """Executable build settings."""

    entries: List[str] = Field(default_factory=list)
    force_embed: List[str] = Field(default_factory=list)
    # Directory whose modules are all embedded; "%" in entries expands to it
    embed_dir: Optional[str] = None
    output: Optional[str] = None
    stub: Optional[str] = None
    manifest: Optional[str] = None


class LoggingConfig(BaseModel):
    level: str = "WARNING"


class JsModPathConfig(BaseModel):
    """Main jsmodpath configuration."""

    resolver: ResolverConfig = Field(default_factory=ResolverConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    ignore_patterns: IgnorePatternsConfig = Field(default_factory=IgnorePatternsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "JsModPathConfig":
        """Load configuration from YAML file."""
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping")

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    @classmethod
    def load_default(cls) -> "JsModPathConfig":
        """Load default configuration."""
        return cls()

    def get_search_path(self, environ: Optional[Dict[str, str]] = None) -> SearchPath:
        """Search path from the config, falling back to the environment."""
        if self.resolver.search_path:
            return SearchPath.of(*self.resolver.search_path)
        return SearchPath.from_environ(self.resolver.env_var, environ)


def load_config(config_path: Optional[str] = None) -> JsModPathConfig:
    """Load configuration from file or defaults."""
    if config_path:
        return JsModPathConfig.load_from_file(Path(config_path))

    standard_paths = [
        Path("jsmodpath.yaml"),
        Path("config/jsmodpath.yaml"),
        Path.home() / ".jsmodpath" / "config.yaml",
    ]

    for path in standard_paths:
        if path.exists():
            return JsModPathConfig.load_from_file(path)

    return JsModPathConfig.load_default()


def expand_placeholder(template: str, directory: str) -> str:
    """Replace every '%' in template with directory.

    A relative directory without a leading dot gets "./" so that the
    expanded string is classified as a relative specifier.
    """
    if kind_of(directory) == SpecifierKind.BARE:
        directory = f"./{directory}"
    return template.replace(PLACEHOLDER, directory.rstrip("/\\") or directory)
