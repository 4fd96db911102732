"""Lint orchestration: load the content tree, build the site index, run all rules"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mdblog.config import Settings
from mdblog.core.documents import load_doc
from mdblog.core.lint.frontmatter import check_frontmatter
from mdblog.core.lint.links import SiteIndex, check_links
from mdblog.core.lint.rendered import check_output
from mdblog.core.models import Issue, LintReport, Page, ParsedDoc, Post, Severity
from mdblog.core.parse import discover_files, parse_file, relative_path
from mdblog.errors import DocumentError, FrontmatterError


logger = logging.getLogger(__name__)


@dataclass
class ContentTree:
    """Parsed and validated documents under a content root, plus the problems found loading them."""
    root: Path
    docs: list[tuple[ParsedDoc, Post | Page]] = field(default_factory=list)
    issues: list[Issue] = field(default_factory=list)
    checked: int = 0
    seen: set[str] = field(default_factory=set)   # every discovered source, valid or not


def load_tree(root: Path, settings: Settings, target: Path | None = None) -> ContentTree:
    """Parse every Markdown source under target (default: root) and validate its front matter.

    Documents that fail to parse or validate are reported as issues and left out of tree.docs.
    """
    tree = ContentTree(root=root)
    for p in discover_files(target or root):
        tree.checked += 1
        tree.seen.add(relative_path(p, root).as_posix())
        try:
            parsed = parse_file(p, root, settings.parser_config)
        except FrontmatterError as e:
            tree.issues.append(Issue(path=relative_path(p, root).as_posix(), rule='frontmatter-invalid',
                                     severity=Severity.error, message=str(e)))
            continue

        found = check_frontmatter(parsed)
        tree.issues.extend(found)
        try:
            tree.docs.append((parsed, load_doc(parsed, settings)))
        except DocumentError as e:
            if not any(i.severity == Severity.error for i in found):
                tree.issues.append(Issue(path=parsed.rel_path.as_posix(), rule='document-invalid',
                                         severity=Severity.error, message=str(e)))
            logger.debug("Skipping %s: %s", parsed.rel_path, e)
    return tree


def build_index(tree: ContentTree, settings: Settings) -> SiteIndex:
    index = SiteIndex(root=tree.root, baseurl=settings.baseurl)
    for _, loaded in tree.docs:
        index.add(loaded, settings.permalink)
    return index


def lint_content(root: Path, settings: Settings, target: Path | None = None) -> LintReport:
    """Run front-matter and link rules over target, resolving links against the whole of root."""
    tree = load_tree(root, settings, target)
    full = tree if target is None or target == root else load_tree(root, settings)
    index = build_index(full, settings)

    report = LintReport(checked=tree.checked, issues=list(tree.issues))
    for parsed, loaded in tree.docs:
        report.issues.extend(check_links(parsed, loaded, index, settings.permalink))
    report.issues.sort(key=lambda i: (i.path, i.line or 0, i.rule))
    logger.info("Linted %d document(s): %d error(s), %d warning(s)",
                report.checked, len(report.errors), len(report.warnings))
    return report


def check_site(site_dir: Path) -> LintReport:
    """Run rendered-output rules over the generator's output directory."""
    return check_output(site_dir)
