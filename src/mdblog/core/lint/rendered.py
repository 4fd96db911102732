"""Rendered-output rule: generated HTML must not contain unresolved Liquid syntax"""

import logging
import re
from pathlib import Path

from mdblog.core.models import Issue, LintReport, Severity
from mdblog.errors import SiteError


logger = logging.getLogger(__name__)

HTML_EXTENSIONS = {'.html', '.htm', '.xml'}
# Code samples legitimately show template syntax (e.g. Go text/template)
VERBATIM_RE = re.compile(r'<(pre|code|script|style|textarea)\b[^>]*>.*?</\1\s*>', re.DOTALL | re.IGNORECASE)
COMMENT_RE = re.compile(r'<!--.*?-->', re.DOTALL)
TEMPLATE_RE = re.compile(r'\{\{.*?\}\}|\{%.*?%\}', re.DOTALL)


def _blank(m: re.Match) -> str:
    """Replace a match with newlines only, so later line numbers stay correct."""
    return '\n' * m.group(0).count('\n')


def find_unresolved(html: str) -> list[tuple[int, str]]:
    """Return (1-based line, snippet) for template syntax outside verbatim elements."""
    text = COMMENT_RE.sub(_blank, html)
    text = VERBATIM_RE.sub(_blank, text)
    found = []
    for m in TEMPLATE_RE.finditer(text):
        snippet = ' '.join(m.group(0).split())
        found.append((text.count('\n', 0, m.start()) + 1, snippet[:80]))
    return found


def discover_output(site_dir: Path) -> list[Path]:
    """Return sorted generated HTML/XML files under site_dir."""
    if not site_dir.is_dir():
        raise SiteError(f"Site output directory not found: {site_dir} (run the generator build first)")
    return sorted(p for p in site_dir.rglob('*') if p.is_file() and p.suffix.lower() in HTML_EXTENSIONS)


def check_output(site_dir: Path) -> LintReport:
    """Scan every generated page for template-unresolved findings."""
    report = LintReport()
    for path in discover_output(site_dir):
        rel = path.relative_to(site_dir).as_posix()
        try:
            html = path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise SiteError(f"Could not read {path}: {e}") from e
        report.checked += 1
        for line, snippet in find_unresolved(html):
            report.issues.append(Issue(
                path=rel, rule='template-unresolved', severity=Severity.error,
                message=f"unresolved template syntax {snippet!r}", line=line,
            ))
    logger.info("Checked %d rendered file(s) under %s", report.checked, site_dir)
    return report
