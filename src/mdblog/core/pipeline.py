"""Pipeline step functions: lint, index, and snippet extraction orchestration"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlmodel import Session

from mdblog.config import Settings
from mdblog.core.documents import doc_url
from mdblog.core.lint.runner import lint_content, load_tree
from mdblog.core.models import LintReport, Page, ParsedDoc, Post
from mdblog.core.parse import discover_files, parse_file
from mdblog.core.snippets import extract_snippets, filter_language, write_snippets
from mdblog.crud.catalog import index_doc, prune_missing


logger = logging.getLogger(__name__)


def _record(parsed: ParsedDoc, loaded: Post | Page, settings: Settings) -> dict:
    """Build the catalog record dict for one validated document."""
    is_post = isinstance(loaded, Post)
    return {
        "path": parsed.rel_path.as_posix(),
        "kind": parsed.kind.value,
        "slug": loaded.slug if is_post else parsed.rel_path.stem,
        "title": loaded.title,
        "url": doc_url(loaded, settings.permalink),
        "published_at": loaded.date.replace(tzinfo=None) if is_post else None,
        "hash": parsed.hash,
        "frontmatter": parsed.frontmatter,
        "tags": loaded.tags if is_post else [],
    }


def run_lint(root: Path, settings: Settings, target: Optional[Path] = None) -> LintReport:
    """Lint target (default: the whole content root)."""
    return lint_content(root, settings, target)


def run_index(engine, root: Path, settings: Settings, prune: bool = True) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Catalog every valid document under root.

    Returns (counts, changes) where changes is a list of (status, path) for
    created/updated/removed docs. Documents with front-matter errors are skipped
    and counted as 'skipped'.
    """
    tree = load_tree(root, settings)
    indexed_at = datetime.now()
    counts = {"created": 0, "updated": 0, "unchanged": 0, "removed": 0,
              "skipped": tree.checked - len(tree.docs)}
    changes = []
    with Session(engine) as session:
        for parsed, loaded in tree.docs:
            try:
                doc, status = index_doc(session, _record(parsed, loaded, settings), indexed_at)
            except Exception as e:
                raise RuntimeError(f"Failed to index {parsed.rel_path}: {e}") from e
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.path))
        if prune:
            removed = prune_missing(session, tree.seen)
            counts["removed"] = len(removed)
            changes.extend(("removed", path) for path in removed)
        session.commit()
    logger.info("Indexed %d document(s) under %s", len(tree.docs), root)
    return counts, changes


def run_snippets(
    root: Path,
    out_dir: Path,
    settings: Settings,
    language: Optional[str] = None,
    target: Optional[Path] = None,
    ) -> list[tuple[Path, Path]]:
    """Extract fenced code samples to out_dir. Returns (source_path, snippet_file) pairs."""
    results = []
    for p in discover_files(target or root):
        try:
            parsed = parse_file(p, root, settings.parser_config)
        except Exception as e:
            raise RuntimeError(f"Failed to extract snippets from {p}: {e}") from e
        snippets = filter_language(extract_snippets(parsed), language)
        for path in write_snippets(parsed, snippets, out_dir):
            results.append((parsed.rel_path, path))
    return results
