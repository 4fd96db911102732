"""File discovery, front matter extraction, and markdown-it tokenization"""

import logging
import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Optional

import yaml
from markdown_it import MarkdownIt

from mdblog.core.models import DocKind, ParsedDoc
from mdblog.core.utils.hashing import sha256
from mdblog.errors import FrontmatterError


logger = logging.getLogger(__name__)

FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)
POST_FILENAME_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})-(.+)\.(md|markdown)$')
MD_EXTENSIONS = {'.md', '.markdown'}
POST_DIRS = {'_posts', '_drafts'}
SKIP_DIRS = {'_site', 'vendor', 'node_modules'}   # plus any dot directory
SKIP_ROOT_FILES = {'readme.md', 'changelog.md', 'license.md'}


def _make_parser(preset: str) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


class FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that keeps impossible timestamps (2021-02-30) as plain strings."""


def _construct_timestamp(loader: FrontmatterLoader, node: yaml.Node) -> Any:
    try:
        return yaml.SafeLoader.construct_yaml_timestamp(loader, node)
    except ValueError:
        return loader.construct_scalar(node)


FrontmatterLoader.add_constructor('tag:yaml.org,2002:timestamp', _construct_timestamp)


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with the YAML header removed."""
    text = text.lstrip('\ufeff')
    m = FRONTMATTER_RE.match(text)
    if not m:
        return {}, text
    try:
        fm = yaml.load(m.group(1), Loader=FrontmatterLoader) or {}
    except (yaml.YAMLError, ValueError) as e:
        raise FrontmatterError(f"Invalid YAML front matter: {e}") from e
    if not isinstance(fm, dict):
        raise FrontmatterError(f"Invalid YAML front matter: expected a mapping, got {type(fm).__name__}")
    return fm, text[m.end():]


def parse_post_filename(name: str) -> Optional[tuple[date, str]]:
    """Return (date, slug) for a `YYYY-MM-DD-slug.md` filename, else None."""
    m = POST_FILENAME_RE.match(name)
    if not m:
        return None
    try:
        day = date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None
    return day, m.group(4)


_DATETIME_FORMATS = (
    '%Y-%m-%d %H:%M:%S %z',
    '%Y-%m-%d %H:%M %z',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%d %H:%M',
    '%Y-%m-%dT%H:%M:%S%z',
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d',
)


def coerce_date(value: Any) -> datetime:
    """Convert a front-matter date (YAML date/datetime or Jekyll date string) to datetime.

    Raises ValueError when the value is not a well-formed date.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        text = value.strip()
        for fmt in _DATETIME_FORMATS:
            try:
                return datetime.strptime(text, fmt)
            except ValueError:
                continue
    raise ValueError(f"not a well-formed date: {value!r}")


def doc_kind(rel_path: Path) -> DocKind:
    """Posts live under _posts/ or _drafts/; everything else is a page."""
    return DocKind.post if POST_DIRS.intersection(rel_path.parts[:-1]) else DocKind.page


def _skipped(rel: Path) -> bool:
    if any(part in SKIP_DIRS or part.startswith('.') for part in rel.parts):
        return True
    return len(rel.parts) == 1 and rel.name.lower() in SKIP_ROOT_FILES


def discover_files(path: Path) -> list[Path]:
    """Return sorted Markdown sources under path, or [path] if given a single Markdown file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(
        p for p in path.rglob('*')
        if p.is_file() and p.suffix in MD_EXTENSIONS and not _skipped(p.relative_to(path))
    )


def relative_path(path: Path, root: Path) -> Path:
    """Path of a source file relative to the content root (bare name when outside it)."""
    try:
        return path.resolve().relative_to(root.resolve())
    except ValueError:
        return Path(path.name)


def parse_file(path: Path, root: Path, parser_config: str = 'gfm-like') -> ParsedDoc:
    """Parse a single Markdown file into a ParsedDoc with its token stream."""
    raw = path.read_text(encoding='utf-8')
    frontmatter, body = split_frontmatter(raw)
    rel_path = relative_path(path, root)
    text = raw.lstrip('\ufeff')
    body_offset = text[:len(text) - len(body)].count('\n')
    logger.debug("Parsed %s (%d front matter keys)", rel_path, len(frontmatter))
    return ParsedDoc(
        path=path,
        rel_path=rel_path,
        kind=doc_kind(rel_path),
        raw=raw,
        body=body,
        frontmatter=frontmatter,
        hash=sha256(raw),
        body_offset=body_offset,
        tokens=_make_parser(parser_config).parse(body),
    )
