"""Application configuration: settings schema and mdblog.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator


CONFIG_FILE = "mdblog.yaml"
PERMALINK_STYLES = {"date", "pretty", "ordinal", "none"}
SITE_CONFIG_FILE = "_config.yml"
SITE_KEYS = ("permalink", "baseurl")


class Settings(BaseModel):
    app_name:      str = "mdblog"
    db_url:        str = "sqlite:///mdblog.db"
    content_dir:   str = Field(default=".",        description="Blog source root (holds _posts/ and pages)")
    posts_dir:     str = Field(default="_posts",   description="Post directory, relative to content_dir")
    site_dir:      str = Field(default="_site",    description="Generator output directory, relative to content_dir")
    snippets_dir:  str = Field(default="snippets", description="Directory for extracted code samples")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")
    permalink:     str = Field(default="date", description="Post URL style (date|pretty|ordinal|none) or a /:template")
    baseurl:       str = Field(default="", description="Site baseurl prefix stripped from internal links")
    default_post_layout: str = "post"
    default_page_layout: str = "page"
    host:          str = Field(default="0.0.0.0", description="Preview server bind address")
    port:          int = Field(default=4000, ge=1, le=65535, description="Preview server port")
    generator_command: str = Field(default="bundle exec jekyll", description="Static-site generator command prefix")
    log_level:     str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")

    @field_validator("permalink")
    @classmethod
    def _known_permalink(cls, v: str) -> str:
        if v not in PERMALINK_STYLES and not v.startswith("/"):
            raise ValueError(f"permalink must be one of {sorted(PERMALINK_STYLES)} or start with '/'")
        return v


def read_site_config(content_dir: str) -> dict[str, Any]:
    """Return the permalink/baseurl keys of the generator's own _config.yml, if present."""
    path = Path(content_dir) / SITE_CONFIG_FILE
    if not path.exists():
        return {}
    try:
        site = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid {path}: {e}") from e
    if not isinstance(site, dict):
        return {}
    return {k: str(site[k]) for k in SITE_KEYS if site.get(k) is not None}


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from mdblog.yaml, then MDBLOG_<FIELD> env vars, then non-None CLI overrides.

    permalink and baseurl fall back to the site's _config.yml when none of those set them.
    """
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping")

    for name in Settings.model_fields:
        if val := os.getenv(f"MDBLOG_{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    for key, val in read_site_config(data.get("content_dir", ".")).items():
        data.setdefault(key, val)
    return Settings(**data)
