"""
Configuration loader — reads brewdeck.yml into a Settings model.

The file is optional: with no file every setting has a working default.
When present it is YAML, validated against a Pydantic schema.

    # brewdeck.yml
    brew_path: /opt/homebrew/bin/brew
    port: 3001
    stream_upgrades: true
    categories:
      - name: Databases
        keywords: [database, sql]
      - name: Other
        keywords: []
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from brewdeck.adapters.shell.command import DEFAULT_MAX_OUTPUT_BYTES
from brewdeck.core.services.classifier import CATEGORY_TABLE, Category, build_table

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "brewdeck.yml"

# Where Homebrew lives when it isn't on PATH
_BREW_CANDIDATES = (
    "/opt/homebrew/bin/brew",               # Apple Silicon
    "/usr/local/bin/brew",                  # Intel
    "/home/linuxbrew/.linuxbrew/bin/brew",  # Linuxbrew
)


class ConfigError(Exception):
    """Raised when the configuration file is unreadable or invalid."""


def find_brew_path() -> str:
    """Locate the brew executable: env override, PATH, well-known prefixes."""
    override = os.environ.get("BREWDECK_BREW_PATH")
    if override:
        return override
    found = shutil.which("brew")
    if found:
        return found
    for candidate in _BREW_CANDIDATES:
        if os.path.exists(candidate):
            return candidate
    return "brew"  # will surface as ExternalCommandUnavailable on first use


class CategoryEntry(BaseModel):
    """One row of a category table override."""

    name: str
    keywords: list[str] = Field(default_factory=list)


class Settings(BaseModel):
    """Runtime settings for the service, web server and CLI."""

    brew_path: str = Field(default_factory=find_brew_path)
    host: str = "127.0.0.1"
    port: int = Field(default=3001, ge=1, le=65535)
    max_output_bytes: int = Field(default=DEFAULT_MAX_OUTPUT_BYTES, gt=0)
    stream_upgrades: bool = True
    cors_origins: str | list[str] = "*"
    categories: list[CategoryEntry] | None = None

    @field_validator("cors_origins")
    @classmethod
    def _split_origins(cls, value: str | list[str]) -> str | list[str]:
        # "a,b" is two origins
        if isinstance(value, str) and "," in value:
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @field_validator("categories")
    @classmethod
    def _check_categories(cls, value: list[CategoryEntry] | None) -> list[CategoryEntry] | None:
        if value is not None:
            build_table((c.name, c.keywords) for c in value)
        return value

    def category_table(self) -> tuple[Category, ...]:
        """The configured table, or the built-in one."""
        if self.categories is None:
            return CATEGORY_TABLE
        return build_table((c.name, c.keywords) for c in self.categories)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for brewdeck.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to brewdeck.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def load_settings(path: Path | None = None, *, search: bool = True) -> Settings:
    """Load and validate settings.

    Args:
        path: Explicit path to brewdeck.yml. If None and ``search`` is
            set, searches upward from the cwd; no file means defaults.
        search: Whether to look for a config file when ``path`` is None.

    Returns:
        Validated Settings model.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded settings from %s (brew=%s)", path, settings.brew_path)
    return settings
