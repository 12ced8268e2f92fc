"""
Loading of the WordPress login configuration.

The configuration file is plain ``KEY=VALUE`` text, for example::

    WP_SITE_URL="https://example.org"
    WP_API_BASE="https://example.org/wp-json/wp/v2"
    WP_USER="editor"
    WP_APP_PASSWORD="abcd efgh ijkl mnop"
    AUTHOR_ID=3
    CATEGORY_ID=12

Quote characters and semicolons are removed from values and surrounding
whitespace is stripped.  Keys absent from the file are read from the
environment variable of the same name.
"""

from __future__ import annotations

import os
import re
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from syndicator.utils.errors import ConfigError

CONFIG_KEYS = ("WP_SITE_URL", "WP_API_BASE", "WP_USER", "WP_APP_PASSWORD", "AUTHOR_ID", "CATEGORY_ID")
DEFAULT_API_PATH = "/wp-json/wp/v2"


class SyndicatorConfig(BaseModel):
    """Read-only settings for one process."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    site_url: str = Field(..., alias="WP_SITE_URL", min_length=1)
    api_base: str = Field(..., alias="WP_API_BASE", min_length=1)
    user: str = Field(..., alias="WP_USER", min_length=1)
    app_password: str = Field(..., alias="WP_APP_PASSWORD", min_length=1, repr=False)
    author_id: int = Field(..., alias="AUTHOR_ID")
    category_id: int = Field(..., alias="CATEGORY_ID")

    @field_validator("site_url", "api_base")
    @classmethod
    def _strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def auth(self) -> tuple[str, str]:
        return (self.user, self.app_password)


def parse_config_text(text: str) -> Dict[str, str]:
    """Parse ``KEY=VALUE`` lines into a dictionary."""
    values: Dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip() or "=" not in line:
            continue
        key, _, value = line.partition("=")
        values[key.strip()] = re.sub(r"['\";]+", "", value).strip()
    return values


def load_config(path: str, *, environ: Optional[Dict[str, str]] = None) -> SyndicatorConfig:
    """
    Read ``path`` and build a :class:`SyndicatorConfig`.

    :param path: Location of the key-value config file.
    :param environ: Fallback mapping for missing keys, ``os.environ`` by default.
    :raises ConfigError: if the file is missing or unreadable, or a required
        key is missing or invalid.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            values = parse_config_text(f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Error loading config file ({path}): {e}") from e

    env = os.environ if environ is None else environ
    for key in CONFIG_KEYS:
        if not values.get(key) and env.get(key):
            values[key] = env[key].strip()
    if not values.get("WP_API_BASE") and values.get("WP_SITE_URL"):
        values["WP_API_BASE"] = values["WP_SITE_URL"].rstrip("/") + DEFAULT_API_PATH

    try:
        return SyndicatorConfig(**{k: values[k] for k in CONFIG_KEYS if values.get(k)})
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors())
        raise ConfigError(f"Invalid or missing config values in {path}: {fields}") from e
