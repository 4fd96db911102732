"""Fenced code sample extraction: the Go (and other) examples the articles teach with"""

import logging
from pathlib import Path
from typing import Optional

from mdblog.core.models import ParsedDoc, Snippet


logger = logging.getLogger(__name__)

EXTENSIONS: dict[str, str] = {
    'go': 'go', 'golang': 'go',
    'python': 'py', 'py': 'py',
    'javascript': 'js', 'js': 'js', 'typescript': 'ts', 'ts': 'ts',
    'bash': 'sh', 'sh': 'sh', 'shell': 'sh', 'console': 'txt',
    'yaml': 'yml', 'yml': 'yml', 'json': 'json', 'toml': 'toml',
    'dockerfile': 'Dockerfile', 'sql': 'sql', 'html': 'html', 'ruby': 'rb',
}


def _language(info: str) -> str:
    """First word of a fence info string, lowercased ('go {linenos}' -> 'go')."""
    words = info.strip().split()
    return words[0].lower().strip('{}') if words else ''


def extract_snippets(doc: ParsedDoc) -> list[Snippet]:
    """Return fenced code blocks in document order with their 1-based source lines."""
    snippets = []
    for tok in doc.tokens:
        if tok.type != 'fence':
            continue
        line = doc.body_offset + tok.map[0] + 1 if tok.map else 0
        snippets.append(Snippet(
            source=doc.rel_path,
            language=_language(tok.info),
            content=tok.content,
            line=line,
            index=len(snippets) + 1,
        ))
    return snippets


def snippet_dir(doc: ParsedDoc) -> Path:
    """Relative output directory for a document: its source path without the extension.

    Mirroring the source tree keeps same-slug posts in different directories apart.
    """
    return doc.rel_path.with_suffix('')


def filter_language(snippets: list[Snippet], language: Optional[str]) -> list[Snippet]:
    if not language:
        return snippets
    wanted = EXTENSIONS.get(language.lower(), language.lower())
    return [s for s in snippets if EXTENSIONS.get(s.language, s.language) == wanted]


def write_snippets(doc: ParsedDoc, snippets: list[Snippet], out_dir: Path) -> list[Path]:
    """Write each snippet to out_dir/<source path>/<n>.<ext>; returns the written paths."""
    if not snippets:
        return []
    dest = out_dir / snippet_dir(doc)
    dest.mkdir(parents=True, exist_ok=True)
    written = []
    for s in snippets:
        ext = EXTENSIONS.get(s.language, 'txt')
        path = dest / f"{s.index:02d}.{ext}"
        path.write_text(s.content, encoding='utf-8')
        written.append(path)
    logger.debug("Wrote %d snippet(s) from %s", len(written), doc.rel_path)
    return written
