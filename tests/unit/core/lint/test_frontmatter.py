"""Unit tests for core/lint/frontmatter.py"""

import pytest

from mdblog.core.lint.frontmatter import check_frontmatter
from mdblog.core.models import Severity


def _rules(issues):
    return [i.rule for i in issues]


def test_valid_post_has_no_issues(parse_text):
    doc = parse_text("_posts/2021-03-01-ioc.md", "---\nlayout: post\ntitle: IoC\ndate: 2021-03-01\ntags: [go]\n---\n")
    assert check_frontmatter(doc) == []


def test_title_missing(parse_text):
    doc = parse_text("_posts/2021-03-01-ioc.md", "---\nlayout: post\ntitle: ''\n---\n")
    issues = check_frontmatter(doc)
    assert _rules(issues) == ["title-missing"]
    assert issues[0].severity == Severity.error
    assert issues[0].line == 3


def test_layout_missing_is_a_warning(parse_text):
    issues = check_frontmatter(parse_text("about.md", "---\ntitle: About\n---\n"))
    assert _rules(issues) == ["layout-missing"]
    assert issues[0].severity == Severity.warning


@pytest.mark.parametrize("value", ["'next tuesday'", "'2021/03/01'", "20210301", "2021-02-30"])
def test_date_invalid(parse_text, value):
    doc = parse_text("_posts/2021-03-01-ioc.md", f"---\nlayout: post\ntitle: IoC\ndate: {value}\n---\n")
    issues = check_frontmatter(doc)
    assert _rules(issues) == ["date-invalid"]
    assert issues[0].line == 4


def test_date_with_offset_is_well_formed(parse_text):
    doc = parse_text("_posts/2021-03-01-ioc.md",
                     "---\nlayout: post\ntitle: IoC\ndate: 2021-03-01 10:00:00 +0100\n---\n")
    assert check_frontmatter(doc) == []


def test_date_mismatch_warns(parse_text):
    doc = parse_text("_posts/2021-03-01-ioc.md", "---\nlayout: post\ntitle: IoC\ndate: 2021-03-02\n---\n")
    issues = check_frontmatter(doc)
    assert _rules(issues) == ["date-mismatch"]
    assert issues[0].severity == Severity.warning


def test_filename_invalid(parse_text):
    issues = check_frontmatter(parse_text("_posts/ioc.md", "---\nlayout: post\ntitle: IoC\n---\n"))
    assert _rules(issues) == ["filename-invalid"]


def test_drafts_need_no_date_prefix(parse_text):
    assert check_frontmatter(parse_text("_drafts/ioc.md", "---\nlayout: post\ntitle: IoC\n---\n")) == []


def test_tags_invalid(parse_text):
    doc = parse_text("_posts/2021-03-01-ioc.md", "---\nlayout: post\ntitle: IoC\ntags:\n  - [nested]\n---\n")
    assert _rules(check_frontmatter(doc)) == ["tags-invalid"]


def test_page_permalink_invalid(parse_text):
    doc = parse_text("about.md", "---\nlayout: page\ntitle: About\npermalink: about/\n---\n")
    assert _rules(check_frontmatter(doc)) == ["permalink-invalid"]


def test_missing_frontmatter_entirely(parse_text):
    issues = check_frontmatter(parse_text("notes.md", "# Notes\n"))
    assert _rules(issues) == ["title-missing", "layout-missing"]
    assert issues[0].line is None
