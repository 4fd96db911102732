"""Front-matter rules: required keys, well-formed dates, post filenames"""

from mdblog.core.models import DocKind, Issue, ParsedDoc, Severity
from mdblog.core.parse import coerce_date, parse_post_filename


def _issue(doc: ParsedDoc, rule: str, severity: Severity, message: str, line: int | None = None) -> Issue:
    return Issue(path=doc.rel_path.as_posix(), rule=rule, severity=severity, message=message, line=line)


def _key_line(doc: ParsedDoc, key: str) -> int | None:
    """1-based line of a top-level front-matter key, if present."""
    for n, line in enumerate(doc.raw.splitlines()[:doc.body_offset], start=1):
        if line.startswith(f"{key}:"):
            return n
    return None


def _check_tags(doc: ParsedDoc) -> list[Issue]:
    tags = doc.frontmatter.get('tags')
    if tags is None or isinstance(tags, str):
        return []
    if isinstance(tags, list) and all(isinstance(t, (str, int, float)) and not isinstance(t, bool) for t in tags):
        return []
    return [_issue(doc, 'tags-invalid', Severity.error,
                   "tags must be a space-separated string or a list of strings", _key_line(doc, 'tags'))]


def _check_post(doc: ParsedDoc) -> list[Issue]:
    issues = []
    is_draft = '_drafts' in doc.rel_path.parts
    named = parse_post_filename(doc.path.name)
    if named is None and not is_draft:
        issues.append(_issue(doc, 'filename-invalid', Severity.error,
                             f"post filename {doc.path.name!r} must look like YYYY-MM-DD-slug.md"))

    raw_date = doc.frontmatter.get('date')
    if raw_date is None:
        return issues + _check_tags(doc)
    try:
        published = coerce_date(raw_date)
    except ValueError:
        issues.append(_issue(doc, 'date-invalid', Severity.error,
                             f"date {raw_date!r} is not a well-formed date (YYYY-MM-DD[ HH:MM[:SS] [+ZZZZ]])",
                             _key_line(doc, 'date')))
    else:
        if named is not None and published.date() != named[0]:
            issues.append(_issue(doc, 'date-mismatch', Severity.warning,
                                 f"date {published.date().isoformat()} differs from filename date {named[0].isoformat()}",
                                 _key_line(doc, 'date')))
    return issues + _check_tags(doc)


def _check_page(doc: ParsedDoc) -> list[Issue]:
    permalink = doc.frontmatter.get('permalink')
    if permalink is not None and not str(permalink).startswith('/'):
        return [_issue(doc, 'permalink-invalid', Severity.error,
                       f"permalink {permalink!r} must start with '/'", _key_line(doc, 'permalink'))]
    return []


def check_frontmatter(doc: ParsedDoc) -> list[Issue]:
    """Run all front-matter rules against one parsed document."""
    issues = []
    title = doc.frontmatter.get('title')
    if title is None or not str(title).strip():
        issues.append(_issue(doc, 'title-missing', Severity.error, "front matter needs a non-empty title",
                             _key_line(doc, 'title')))
    if not doc.frontmatter.get('layout'):
        issues.append(_issue(doc, 'layout-missing', Severity.warning, "no layout set; site defaults will apply"))

    if doc.kind == DocKind.post:
        issues.extend(_check_post(doc))
    else:
        issues.extend(_check_page(doc))
    return issues
