"""Document models: Post and Page front-matter schemas, parse results, and lint findings"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DocKind(str, Enum):
    post = "post"
    page = "page"


def _normalize_tags(value: Any) -> list[str]:
    """Accept a space-separated string or a list of scalars; return de-duplicated strings in order."""
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split()
    elif isinstance(value, (list, tuple, set)):
        items = []
        for item in value:
            if isinstance(item, (dict, list, tuple, set)) or item is None:
                raise ValueError(f"tags must be scalars, got {type(item).__name__}")
            items.append(str(item).strip())
    else:
        raise ValueError(f"tags must be a string or a list, got {type(value).__name__}")
    return list(dict.fromkeys(t for t in items if t))


class Post(BaseModel):
    """A dated blog article; identity is its `YYYY-MM-DD-slug` filename."""
    model_config = ConfigDict(frozen=True)

    path:   Path
    slug:   str
    layout: str
    title:  str = Field(..., min_length=1)
    date:   datetime
    tags:   list[str] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    permalink:  Optional[str] = None
    body:   str = ""
    extra:  dict[str, Any] = Field(default_factory=dict)

    @field_validator('title')
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()

    @field_validator('tags', 'categories', mode='before')
    @classmethod
    def _split_tags(cls, v: Any) -> list[str]:
        return _normalize_tags(v)


class Page(BaseModel):
    """A standalone page such as About; no date or tags."""
    model_config = ConfigDict(frozen=True)

    path:      Path
    layout:    str
    title:     str = Field(..., min_length=1)
    permalink: Optional[str] = None
    body:      str = ""
    extra:     dict[str, Any] = Field(default_factory=dict)

    @field_validator('title')
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v.strip()

    @field_validator('permalink')
    @classmethod
    def _permalink_absolute(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.startswith('/'):
            raise ValueError("permalink must start with '/'")
        return v


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:        Path          # absolute or cwd-relative source path
    rel_path:    Path          # path relative to the content root
    kind:        DocKind
    raw:         str           # full file content (includes front matter)
    body:        str           # front matter stripped
    frontmatter: dict[str, Any]
    hash:        str
    body_offset: int = 0       # number of source lines before the body starts
    tokens:      list = field(default_factory=list)


class Severity(str, Enum):
    error = "error"
    warning = "warning"


class Issue(BaseModel):
    """A single lint finding against a source or output file."""
    path:     str
    rule:     str
    severity: Severity
    message:  str
    line:     Optional[int] = None

    def format(self) -> str:
        loc = f"{self.path}:{self.line}" if self.line else self.path
        return f"{loc}: {self.severity.value}: {self.message} [{self.rule}]"


class LintReport(BaseModel):
    checked: int = 0
    issues:  list[Issue] = Field(default_factory=list)

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.error]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == Severity.warning]

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass
class Snippet:
    """A fenced code sample found in a document body."""
    source:   Path
    language: str
    content:  str
    line:     int
    index:    int
