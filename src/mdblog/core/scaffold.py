"""Create new post and page sources with starter front matter"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from mdblog.core.utils.slug import slugify


logger = logging.getLogger(__name__)


def render_frontmatter(fm: dict[str, Any], body: str = "") -> str:
    """Return a Markdown document with fm dumped as a YAML header."""
    header = yaml.safe_dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{body}"


def _write_new(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('x', encoding='utf-8') as f:  # 'x' refuses to overwrite
        f.write(text)
    logger.info("Created %s", path)
    return path


def new_post(
    posts_dir: Path,
    title: str,
    tags: Optional[list[str]] = None,
    date: Optional[datetime] = None,
    layout: str = 'post',
    ) -> Path:
    """Write `YYYY-MM-DD-<slug>.md` under posts_dir. Raises FileExistsError if it already exists."""
    slug = slugify(title)
    if not slug:
        raise ValueError(f"Cannot derive a filename slug from title {title!r}")
    published = date or datetime.now().astimezone()
    fm = {
        'layout': layout,
        'title': title,
        'date': published.strftime('%Y-%m-%d %H:%M:%S %z').strip(),
        'tags': list(dict.fromkeys(tags or [])),
    }
    path = posts_dir / f"{published:%Y-%m-%d}-{slug}.md"
    return _write_new(path, render_frontmatter(fm))


def new_page(
    root: Path,
    title: str,
    permalink: Optional[str] = None,
    layout: str = 'page',
    ) -> Path:
    """Write `<slug>.md` under root with a permalink. Raises FileExistsError if it already exists."""
    slug = slugify(title)
    if not slug:
        raise ValueError(f"Cannot derive a filename slug from title {title!r}")
    permalink = permalink or f"/{slug}/"
    if not permalink.startswith('/'):
        raise ValueError(f"permalink {permalink!r} must start with '/'")
    fm = {'layout': layout, 'title': title, 'permalink': permalink}
    return _write_new(root / f"{slug}.md", render_frontmatter(fm))
