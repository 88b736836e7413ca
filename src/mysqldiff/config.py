"""Configuration management for mysqldiff."""

import configparser
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from mysqldiff.exceptions import ConfigError

OUTPUT_MODES = ("alter", "detailed", "json", "yaml")
CONFIG_SECTION = "mysqldiff"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean setting.

    Raises:
        ConfigError: If the value is not a recognised boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean value for {name}: '{value}'")


def default_config_path() -> Path:
    env_path = os.environ.get("MYSQLDIFF_CONFIG")
    if env_path:
        return Path(env_path)
    return Path.home() / ".mysqldiff.cfg"


def load_config_file(path: Optional[Path] = None) -> dict[str, str]:
    """Load the [mysqldiff] section of an INI config file.

    Args:
        path: Config file path (default: $MYSQLDIFF_CONFIG or ~/.mysqldiff.cfg)

    Returns:
        Dict of raw option values, empty when the file does not exist

    Raises:
        ConfigError: If the file exists but cannot be parsed
    """
    cfg_path = path or default_config_path()
    if not cfg_path.exists():
        return {}

    parser = configparser.ConfigParser()
    try:
        parser.read(cfg_path)
    except configparser.Error as exc:
        raise ConfigError(f"Failed to parse config file '{cfg_path}': {exc}") from exc

    if CONFIG_SECTION not in parser:
        return {}
    return {key: value.strip() for key, value in parser[CONFIG_SECTION].items()}


@dataclass
class Config:
    """Configuration for mysqldiff."""

    output: str = "alter"
    include_drops: bool = False
    include_creates: bool = False
    table: Optional[str] = None
    strict: bool = False
    color: Optional[bool] = None
    verbose: bool = False

    @classmethod
    def from_env(
        cls,
        *,
        output: Optional[str] = None,
        include_drops: Optional[bool] = None,
        include_creates: Optional[bool] = None,
        table: Optional[str] = None,
        strict: Optional[bool] = None,
        color: Optional[bool] = None,
        verbose: Optional[bool] = None,
        config_path: Optional[Path] = None,
    ) -> "Config":
        """Load configuration from the config file and env vars, with CLI overrides.

        Priority (highest to lowest):
        1. Explicit parameters (CLI args)
        2. Environment variables (MYSQLDIFF_*)
        3. [mysqldiff] section of the config file
        4. Defaults
        """
        file_cfg = load_config_file(config_path)

        def resolve(explicit, env_key, cfg_key):
            if explicit is not None:
                return explicit
            env_val = os.environ.get(env_key)
            if env_val is not None:
                return env_val
            return file_cfg.get(cfg_key)

        def resolve_bool(explicit, env_key, cfg_key, default):
            value = resolve(explicit, env_key, cfg_key)
            if value is None:
                return default
            if isinstance(value, bool):
                return value
            return parse_bool(value, env_key)

        return cls(
            output=resolve(output, "MYSQLDIFF_OUTPUT", "output") or "alter",
            include_drops=resolve_bool(
                include_drops, "MYSQLDIFF_INCLUDE_DROPS", "include_drops", False
            ),
            include_creates=resolve_bool(
                include_creates, "MYSQLDIFF_INCLUDE_CREATES", "include_creates", False
            ),
            table=resolve(table, "MYSQLDIFF_TABLE", "table") or None,
            strict=resolve_bool(strict, "MYSQLDIFF_STRICT", "strict", False),
            color=resolve_bool(color, "MYSQLDIFF_COLOR", "color", None),
            verbose=resolve_bool(verbose, "MYSQLDIFF_VERBOSE", "verbose", False),
        )

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ConfigError: If the output mode is unknown
        """
        if self.output not in OUTPUT_MODES:
            raise ConfigError(
                f"Unknown output mode '{self.output}'. "
                f"Expected one of: {', '.join(OUTPUT_MODES)}"
            )

    def use_color(self, is_tty: bool) -> bool:
        """Resolve the color setting, falling back to TTY detection."""
        if self.color is None:
            return is_tty
        return self.color
