"""Build typed Post/Page models from parsed documents and derive their published URLs"""

from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any

from pydantic import ValidationError

from mdblog.core.models import DocKind, Page, ParsedDoc, Post
from mdblog.core.parse import coerce_date, parse_post_filename
from mdblog.core.utils.slug import slugify
from mdblog.errors import DocumentError


POST_KEYS = {'layout', 'title', 'date', 'tags', 'categories', 'category', 'permalink'}
PAGE_KEYS = {'layout', 'title', 'permalink'}

PERMALINK_STYLES = {
    'date':    '/:categories/:year/:month/:day/:title:output_ext',
    'pretty':  '/:categories/:year/:month/:day/:title/',
    'ordinal': '/:categories/:year/:y_day/:title:output_ext',
    'none':    '/:categories/:title:output_ext',
}


def _errors(e: ValidationError) -> str:
    return "; ".join(f"{'.'.join(str(p) for p in err['loc']) or 'front matter'}: {err['msg']}" for err in e.errors())


def _title(fm: dict[str, Any]) -> str:
    title = fm.get('title')
    return "" if title is None else str(title)


def _path_categories(rel_path: Path) -> list[str]:
    """Directories above _posts/ act as categories in Jekyll (e.g. go/_posts/x.md -> ['go'])."""
    parts = rel_path.parts[:-1]
    for marker in ('_posts', '_drafts'):
        if marker in parts:
            return list(parts[:parts.index(marker)])
    return []


def load_post(parsed: ParsedDoc, default_layout: str = 'post') -> Post:
    """Validate a parsed post's front matter into a Post. Raises DocumentError."""
    fm = parsed.frontmatter
    is_draft = '_drafts' in parsed.rel_path.parts
    named = parse_post_filename(parsed.path.name)
    if named is None and not is_draft:
        raise DocumentError(parsed.rel_path, "post filename must look like YYYY-MM-DD-slug.md")

    if fm.get('date') is not None:
        try:
            published = coerce_date(fm['date'])
        except ValueError as e:
            raise DocumentError(parsed.rel_path, f"date: {e}") from e
    elif named is not None:
        file_date = named[0]
        published = datetime(file_date.year, file_date.month, file_date.day)
    else:
        published = datetime.fromtimestamp(parsed.path.stat().st_mtime)

    slug = str(fm.get('slug') or (named[1] if named else parsed.path.stem))
    categories = fm.get('categories', fm.get('category')) or []
    if not isinstance(categories, (list, tuple)):
        categories = str(categories).split()
    try:
        return Post(
            path=parsed.rel_path,
            slug=slug,
            layout=fm.get('layout') or default_layout,
            title=_title(fm),
            date=published,
            tags=fm.get('tags'),
            categories=_path_categories(parsed.rel_path) + list(categories),
            permalink=fm.get('permalink'),
            body=parsed.body,
            extra={k: v for k, v in fm.items() if k not in POST_KEYS},
        )
    except ValidationError as e:
        raise DocumentError(parsed.rel_path, _errors(e)) from e


def load_page(parsed: ParsedDoc, default_layout: str = 'page') -> Page:
    """Validate a parsed page's front matter into a Page. Raises DocumentError."""
    fm = parsed.frontmatter
    try:
        return Page(
            path=parsed.rel_path,
            layout=fm.get('layout') or default_layout,
            title=_title(fm),
            permalink=fm.get('permalink'),
            body=parsed.body,
            extra={k: v for k, v in fm.items() if k not in PAGE_KEYS},
        )
    except ValidationError as e:
        raise DocumentError(parsed.rel_path, _errors(e)) from e


def load_doc(parsed: ParsedDoc, settings=None) -> Post | Page:
    """Dispatch on document kind using the layout defaults from settings."""
    post_layout = settings.default_post_layout if settings else 'post'
    page_layout = settings.default_page_layout if settings else 'page'
    if parsed.kind == DocKind.post:
        return load_post(parsed, post_layout)
    return load_page(parsed, page_layout)


def _expand(template: str, values: dict[str, Any]) -> str:
    """Substitute :placeholders in a permalink template and collapse empty segments."""
    url = template
    for key in sorted(values, key=len, reverse=True):
        url = url.replace(f":{key}", str(values[key]))
    url = '/' + '/'.join(p for p in url.split('/') if p)
    if template.endswith('/') and url != '/':
        url += '/'
    return url


def post_url(post: Post, style: str = 'date') -> str:
    """Return the URL Jekyll publishes a post at for the given permalink style."""
    template = post.permalink or PERMALINK_STYLES.get(style, style)
    values = {
        'categories': '/'.join(dict.fromkeys(c.lower() for c in post.categories)),
        'year': f"{post.date.year:04d}",
        'month': f"{post.date.month:02d}",
        'day': f"{post.date.day:02d}",
        'i_month': str(post.date.month),
        'i_day': str(post.date.day),
        'y_day': f"{post.date.timetuple().tm_yday:03d}",
        'title': post.slug,
        'slug': slugify(post.slug),
        'output_ext': '.html',
    }
    return _expand(template, values)


def page_url(page: Page) -> str:
    """Return a page's permalink, else the URL derived from its source path."""
    if page.permalink:
        return page.permalink
    rel = PurePosixPath(page.path.as_posix())
    if rel.stem == 'index':
        parent = rel.parent.as_posix()
        return '/' if parent == '.' else f"/{parent}/"
    return '/' + rel.with_suffix('.html').as_posix()


def doc_url(doc: Post | Page, style: str = 'date') -> str:
    return post_url(doc, style) if isinstance(doc, Post) else page_url(doc)
