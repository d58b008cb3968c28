"""
Configuration module for scraper runs.

Provides:
- YAML config loading with validation
- ScraperConfig run settings
- Environment variable substitution
"""

from .loader import ConfigError, ConfigLoader, ScraperConfig, load_config

__all__ = ["ConfigError", "ConfigLoader", "ScraperConfig", "load_config"]
