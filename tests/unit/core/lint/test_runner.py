"""Unit tests for core/lint/runner.py"""

from mdblog.config import Settings
from mdblog.core.lint.runner import build_index, lint_content, load_tree


def _settings(root, **kwargs) -> Settings:
    return Settings(content_dir=str(root), permalink="pretty", **kwargs)


def test_sample_blog_is_clean(blog):
    report = lint_content(blog, _settings(blog))
    assert report.checked == 3
    assert report.issues == []
    assert report.ok


def test_load_tree_reports_unparseable_docs(blog):
    (blog / "_posts" / "2021-05-01-broken.md").write_text("---\ntitle: [oops\n---\n")
    tree = load_tree(blog, _settings(blog))
    assert tree.checked == 4
    assert len(tree.docs) == 3
    assert [(i.path, i.rule) for i in tree.issues] == [("_posts/2021-05-01-broken.md", "frontmatter-invalid")]
    assert "_posts/2021-05-01-broken.md" in tree.seen


def test_impossible_date_is_a_date_error_not_a_parse_error(blog):
    (blog / "_posts" / "2021-02-28-x.md").write_text("---\nlayout: post\ntitle: X\ndate: 2021-02-30\n---\n")
    tree = load_tree(blog, _settings(blog))
    assert [i.rule for i in tree.issues] == ["date-invalid"]


def test_invalid_docs_are_excluded_from_link_targets(blog):
    """A post that fails validation does not satisfy post_url references to it."""
    ioc = blog / "_posts" / "2021-03-01-ioc-container.md"
    ioc.write_text(ioc.read_text().replace("title: A tiny IoC container\n", ""))
    report = lint_content(blog, _settings(blog))
    rules = sorted(i.rule for i in report.issues)
    assert rules == ["post-url-broken", "post-url-broken", "title-missing"]


def test_lint_target_subset_resolves_against_whole_root(blog):
    report = lint_content(blog, _settings(blog), target=blog / "about.md")
    assert report.checked == 1
    assert report.ok


def test_build_index_uses_permalink_style(blog):
    index = build_index(load_tree(blog, _settings(blog)), _settings(blog))
    assert "/2021/03/01/ioc-container/" in index.urls
    assert "/about/" in index.urls
    assert index.has_post("2021-04-10-functional-options")


def test_issues_sorted_by_path_and_line(blog):
    (blog / "contact.md").write_text("---\ntitle: Contact\n---\n[x](/b/)\n\n[y](/a/)\n")
    report = lint_content(blog, _settings(blog))
    assert [(i.path, i.line, i.rule) for i in report.issues] == [
        ("contact.md", None, "layout-missing"),
        ("contact.md", 4, "link-broken"),
        ("contact.md", 6, "link-broken"),
    ]
