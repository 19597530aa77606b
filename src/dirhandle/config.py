"""Configuration for directory handles."""

from __future__ import annotations

import json
import logging
import os
import secrets
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Default configuration location
CONFIG_DIR = Path.home() / ".dirhandle"
CONFIG_FILE = CONFIG_DIR / "config.yaml"

# Environment variable overriding the configuration file
CONFIG_ENV = "DIRHANDLE_CONFIG"


def _expand_charset(spec: str) -> str:
    """Expand ``a-z`` style ranges into the characters they cover.

    Example:
        >>> _expand_charset("0-9a-f")
        '0123456789abcdef'
    """
    chars: list[str] = []
    i = 0
    while i < len(spec):
        if i + 2 < len(spec) and spec[i + 1] == "-":
            start, end = ord(spec[i]), ord(spec[i + 2])
            chars.extend(chr(c) for c in range(start, end + 1))
            i += 3
        else:
            chars.append(spec[i])
            i += 1
    return "".join(dict.fromkeys(chars))


class Settings(BaseModel):
    """Settings shared by directory handles."""

    model_config = ConfigDict(populate_by_name=True)

    default_mode: int = Field(default=0o777, alias="defaultMode")
    random_name_length: int = Field(default=10, ge=1, alias="randomNameLength")
    random_charset: str = Field(default="0-9a-z", min_length=1, alias="randomCharset")

    @field_validator("default_mode", mode="before")
    @classmethod
    def _parse_mode(cls, value: Any) -> Any:
        """Accept octal strings such as "0755" or "0o755"."""
        if isinstance(value, str):
            try:
                return int(value, 8)
            except ValueError as e:
                raise ValueError(f"Invalid octal mode: {value!r}") from e
        return value

    @field_validator("default_mode")
    @classmethod
    def _check_mode(cls, value: int) -> int:
        if not 0 <= value <= 0o7777:
            raise ValueError(f"Mode out of range: {oct(value)}")
        return value

    @field_validator("random_charset")
    @classmethod
    def _check_charset(cls, value: str) -> str:
        alphabet = _expand_charset(value)
        if not alphabet:
            raise ValueError(f"Charset expands to no characters: {value!r}")
        forbidden = {".", os.sep, os.altsep} & set(alphabet)
        if forbidden:
            raise ValueError(f"Charset may not contain {''.join(sorted(forbidden))!r}")
        return value

    def random_name(self) -> str:
        """Generate a random token for upload file names."""
        alphabet = _expand_charset(self.random_charset)
        return "".join(secrets.choice(alphabet) for _ in range(self.random_name_length))

    @classmethod
    def from_file(cls, path: Path) -> Settings:
        """Load settings from a YAML or JSON file.

        Args:
            path: Path to a .yaml/.yml or .json file.

        Returns:
            Parsed Settings.

        Raises:
            FileNotFoundError: If file doesn't exist.
            ValueError: If the content is invalid.
        """
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        text = path.read_text()
        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(text) or {}
            else:
                data = json.loads(text)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Invalid configuration file {path}: expected a mapping")
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid configuration file {path}: {e}") from e


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from the first configuration source found.

    Looks at ``path``, then the DIRHANDLE_CONFIG environment variable, then
    ~/.dirhandle/config.yaml. Falls back to defaults when none is set.

    Args:
        path: Explicit configuration file.

    Returns:
        Loaded or default Settings.
    """
    if path is None and os.environ.get(CONFIG_ENV):
        path = Path(os.environ[CONFIG_ENV])
    if path is None and CONFIG_FILE.is_file():
        path = CONFIG_FILE
    if path is None:
        return Settings()

    logger.debug("Loading settings from %s", path)
    return Settings.from_file(path)
