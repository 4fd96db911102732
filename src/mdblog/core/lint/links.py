"""Internal link rules: Markdown links, images, and Liquid post_url/link tags must resolve"""

import posixpath
import re
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from urllib.parse import unquote, urlsplit

from mdblog.core.documents import doc_url
from mdblog.core.models import Issue, Page, ParsedDoc, Post, Severity


POST_URL_RE = re.compile(r'\{%-?\s*post_url\s+([^\s%]+)\s*-?%\}')
LINK_TAG_RE = re.compile(r'\{%-?\s*link\s+([^\s%]+)\s*-?%\}')
LIQUID_DEST_RE = re.compile(r'\]\(\s*(\{\{.*?\}\}[^)\s]*)')
RAW_BLOCK_RE = re.compile(r'\{%-?\s*raw\s*-?%\}.*?\{%-?\s*endraw\s*-?%\}', re.DOTALL)
RELATIVE_URL_RE = re.compile(r'''\{\{-?\s*['"]([^'"]*)['"]\s*\|\s*(?:relative_url|absolute_url)\s*-?\}\}''')
SITE_VAR_RE = re.compile(r'\{\{-?\s*site\.(?:baseurl|url)\s*-?\}\}')
HTML_ATTR_RE = re.compile(r'''\b(?:href|src)\s*=\s*["']([^"']+)["']''', re.IGNORECASE)
SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


@dataclass
class Link:
    target: str
    line: int | None
    kind: str = 'link'      # link | post_url | link_tag


@dataclass
class SiteIndex:
    """Everything an internal link may point at: published URLs, post names, and source files."""
    root: Path
    urls: set[str] = field(default_factory=set)
    post_names: set[str] = field(default_factory=set)
    baseurl: str = ''

    def add(self, doc: Post | Page, permalink: str = 'date') -> None:
        self.urls.add(doc_url(doc, permalink))
        if isinstance(doc, Post):
            stem = PurePosixPath(doc.path.as_posix()).stem
            self.post_names.add(stem)
            # post_url accepts a subdirectory of _posts, e.g. "go/2021-03-01-ioc"
            parts = doc.path.parts
            if '_posts' in parts:
                inner = parts[parts.index('_posts') + 1:]
                self.post_names.add(PurePosixPath(*inner).with_suffix('').as_posix())

    def has_post(self, name: str) -> bool:
        return name in self.post_names

    def has_url(self, url: str) -> bool:
        candidates = {url, url.rstrip('/') or '/', url + '/', url + '.html', url.rstrip('/') + '/index.html'}
        if url.endswith('/index.html'):
            candidates.add(url[:-len('index.html')])
        if url.endswith('.html'):
            candidates.add(url[:-len('.html')])
        return bool(candidates & self.urls) or self.has_file(url.lstrip('/'))

    def has_file(self, rel: str) -> bool:
        if not rel:
            return True
        path = self.root / rel
        if path.is_dir():
            return (path / 'index.html').exists() or (path / 'index.md').exists()
        return path.is_file()


def _code_lines(doc: ParsedDoc) -> set[int]:
    """0-based body lines that belong to fenced or indented code blocks."""
    lines: set[int] = set()
    for tok in doc.tokens:
        if tok.type in ('fence', 'code_block') and tok.map:
            lines.update(range(*tok.map))
    return lines


def _strip_raw(body: str) -> str:
    """Blank out {% raw %} regions while keeping line numbering intact."""
    return RAW_BLOCK_RE.sub(lambda m: '\n' * m.group(0).count('\n'), body)


def _line_of(text: str, offset: int) -> int:
    return text.count('\n', 0, offset)


def normalize_liquid(target: str) -> str:
    """Reduce {{ site.baseurl }} and relative_url filter forms to a plain path."""
    target = RELATIVE_URL_RE.sub(lambda m: m.group(1), target)
    return SITE_VAR_RE.sub('', target).strip()


def collect_links(doc: ParsedDoc) -> list[Link]:
    """Return link targets found in a document body, with 1-based source lines."""
    links: list[Link] = []
    for tok in doc.tokens:
        line = doc.body_offset + tok.map[0] + 1 if tok.map else None
        if tok.type == 'html_block':
            links.extend(Link(m.group(1), line) for m in HTML_ATTR_RE.finditer(tok.content))
        if tok.type != 'inline' or not tok.children:
            continue
        for child in tok.children:
            if child.type == 'link_open':
                href = unquote(str(child.attrGet('href') or ''))
            elif child.type == 'image':
                href = unquote(str(child.attrGet('src') or ''))
            elif child.type == 'html_inline':
                links.extend(Link(m.group(1), line) for m in HTML_ATTR_RE.finditer(child.content))
                continue
            else:
                continue
            if href and '{{' not in href and '{%' not in href:
                links.append(Link(href, line))

    body = _strip_raw(doc.body)
    skip = _code_lines(doc)
    for regex, kind in ((POST_URL_RE, 'post_url'), (LINK_TAG_RE, 'link_tag'), (LIQUID_DEST_RE, 'link')):
        for m in regex.finditer(body):
            body_line = _line_of(body, m.start())
            # Liquid tags expand before Markdown, so only plain link destinations honour code blocks
            if kind == 'link' and body_line in skip:
                continue
            target = normalize_liquid(m.group(1)) if kind == 'link' else m.group(1)
            if kind == 'link' and ('{{' in target or '{%' in target):
                continue
            links.append(Link(target, doc.body_offset + body_line + 1, kind))
    return links


def _is_external(target: str) -> bool:
    return bool(SCHEME_RE.match(target)) or target.startswith('//') or target.startswith('#')


def _resolve_path(target: str, doc: ParsedDoc, base_url: str, index: SiteIndex) -> bool:
    path = urlsplit(target).path
    if not path:
        return True
    if index.baseurl and path.startswith(index.baseurl.rstrip('/') + '/'):
        path = path[len(index.baseurl.rstrip('/')):]
    if path.startswith('/'):
        return index.has_url(posixpath.normpath(path) + ('/' if path.endswith('/') and path != '/' else ''))

    # relative: against the published URL, then against the source file
    url_dir = base_url if base_url.endswith('/') else posixpath.dirname(base_url) + '/'
    joined = posixpath.normpath(posixpath.join(url_dir, path))
    if index.has_url(joined):
        return True
    src_dir = PurePosixPath(doc.rel_path.as_posix()).parent
    return index.has_file(posixpath.normpath((src_dir / path).as_posix()))


def check_links(doc: ParsedDoc, loaded: Post | Page, index: SiteIndex, permalink: str = 'date') -> list[Issue]:
    """Report internal links in one document that resolve to nothing in the site index."""
    issues = []
    path = doc.rel_path.as_posix()
    base_url = doc_url(loaded, permalink)
    for link in collect_links(doc):
        if link.kind == 'post_url':
            if not index.has_post(link.target):
                issues.append(Issue(path=path, rule='post-url-broken', severity=Severity.error,
                                    message=f"post_url {link.target!r} names no post", line=link.line))
        elif link.kind == 'link_tag':
            if not index.has_file(link.target.lstrip('/')):
                issues.append(Issue(path=path, rule='link-tag-broken', severity=Severity.error,
                                    message=f"link tag path {link.target!r} does not exist", line=link.line))
        elif not _is_external(link.target) and not _resolve_path(link.target, doc, base_url, index):
            issues.append(Issue(path=path, rule='link-broken', severity=Severity.error,
                                message=f"internal link {link.target!r} does not resolve", line=link.line))
    return issues
