"""
YAML configuration loader for scraper runs.

Loads run settings from YAML files with:
- Environment variable substitution
- Type validation
- Default values
"""

import os
import re
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Optional

import yaml
import structlog

from cropdocs_scraper.core.http_client import DEFAULT_USER_AGENT

logger = structlog.get_logger(__name__)


DEFAULT_CONFIG_FILE = "scraper.yml"


class ConfigError(ValueError):
    """Invalid scraper configuration."""


@dataclass(frozen=True)
class ScraperConfig:
    """Settings for one scraper run."""

    endpoint: str = "https://cropscience.bayer.co.uk/api/documents"
    origin: str = "https://cropscience.bayer.co.uk"
    output_dir: str = "PDFs/"
    dir_mode: int = 0o755

    # Timeouts in seconds (None = no timeout)
    download_timeout: Optional[float] = 30.0
    index_timeout: Optional[float] = None

    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_dict(cls, data: dict) -> "ScraperConfig":
        """
        Create from dictionary (e.g., from YAML).

        Missing keys keep their defaults; unknown keys are ignored.

        Raises:
            ConfigError: If a value has the wrong type
        """
        known = {f.name for f in fields(cls)}
        values = {}

        for key, value in data.items():
            if key not in known:
                logger.warning("unknown_config_key", key=key)
                continue
            values[key] = _coerce(key, value)

        return cls(**values)

    def with_overrides(self, **overrides) -> "ScraperConfig":
        """Return a copy with non-None overrides applied."""
        changes = {k: _coerce(k, v) for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _coerce(key: str, value):
    """Validate and convert a single config value."""
    if key in ("endpoint", "origin", "output_dir", "user_agent"):
        if not isinstance(value, str) or not value:
            raise ConfigError(f"{key} must be a non-empty string")
        return value

    if key == "dir_mode":
        # PyYAML reads bare 0755 as octal; quoted modes arrive as strings
        if isinstance(value, str):
            try:
                return int(value, 8)
            except ValueError:
                raise ConfigError(f"dir_mode must be an octal mode, got {value!r}") from None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        raise ConfigError(f"dir_mode must be an octal mode, got {value!r}")

    if key in ("download_timeout", "index_timeout"):
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"{key} must be a positive number or null")
        return float(value)

    return value


def substitute_env_vars(text: str) -> str:
    """
    Substitute environment variables in text.

    Supports formats:
    - ${VAR_NAME} - required, empty string and a warning if missing
    - ${VAR_NAME:-default} - optional with default

    Args:
        text: Text with env var placeholders

    Returns:
        Text with substituted values
    """
    def replace_var(match):
        var_expr = match.group(1)
        if ":-" in var_expr:
            var_name, default = var_expr.split(":-", 1)
            return os.getenv(var_name, default)

        value = os.getenv(var_expr)
        if value is None:
            logger.warning("env_var_not_set", var=var_expr)
            return ""
        return value

    return re.sub(r"\$\{([^}]+)\}", replace_var, text)


class ConfigLoader:
    """
    Configuration loader for scraper runs.

    Loads YAML config files and validates them into ScraperConfig.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory containing config files
                       (defaults to package config directory)
        """
        if config_dir:
            self.config_dir = Path(config_dir)
        else:
            self.config_dir = Path(__file__).parent

    def load_file(self, filename: str) -> dict:
        """
        Load YAML config file.

        Args:
            filename: Config file name (relative to config_dir)

        Returns:
            Parsed config dict

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If the YAML is invalid or not a mapping
        """
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise FileNotFoundError(f"Config file not found: {filepath}")

        logger.info("loading_config", file=str(filepath))

        with open(filepath, "r", encoding="utf-8") as f:
            content = f.read()

        content = substitute_env_vars(content)

        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {filepath}: {e}") from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config root must be a mapping: {filepath}")

        return config

    def load_config(self, filename: str = DEFAULT_CONFIG_FILE) -> ScraperConfig:
        """
        Load run settings from YAML.

        Settings may sit at the top level or under a "scraper" key.

        Args:
            filename: Config file name

        Returns:
            ScraperConfig object
        """
        config = self.load_file(filename)
        section = config.get("scraper", config)

        if not isinstance(section, dict):
            raise ConfigError("'scraper' section must be a mapping")

        return ScraperConfig.from_dict(section)


def load_config(config_path: Optional[str] = None) -> ScraperConfig:
    """
    Convenience function to load run settings.

    Args:
        config_path: Optional path to a YAML config file

    Returns:
        ScraperConfig object
    """
    if config_path:
        path = Path(config_path)
        loader = ConfigLoader(str(path.parent))
        return loader.load_config(path.name)

    return ConfigLoader().load_config()
