"""Root test configuration: a sample blog tree and session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["mdblog.db", "test.db"]
_CLEANUP_DIRS = ["snippets"]


SAMPLE_BLOG = {
    "_config.yml": "title: Test Blog\npermalink: pretty\n",
    "README.md": "# Blog\n\nRun `docker compose up` to preview.\n",
    "about.md": (
        "---\n"
        "layout: page\n"
        "title: About\n"
        "permalink: /about/\n"
        "---\n"
        "\n"
        "I write about Go, starting with [an IoC container]({% post_url 2021-03-01-ioc-container %}).\n"
    ),
    "_posts/2021-03-01-ioc-container.md": (
        "---\n"
        "layout: post\n"
        "title: A tiny IoC container\n"
        "date: 2021-03-01 10:00:00 +0100\n"
        "tags: [go, patterns]\n"
        "---\n"
        "\n"
        "More on the [about page](/about/).\n"
        "\n"
        "```go\n"
        "type Container struct {\n"
        "\tmu       sync.RWMutex\n"
        "\tservices map[string]any\n"
        "}\n"
        "```\n"
    ),
    "_posts/2021-04-10-functional-options.md": (
        "---\n"
        "layout: post\n"
        "title: Functional options\n"
        "date: 2021-04-10\n"
        "tags: go\n"
        "---\n"
        "\n"
        "Follows [the IoC post]({% post_url 2021-03-01-ioc-container %}).\n"
        "\n"
        "![logo](/assets/img/logo.png)\n"
        "\n"
        "```go\n"
        "func WithPort(p int) Option { return func(s *Server) { s.port = p } }\n"
        "```\n"
        "\n"
        "```bash\n"
        "go run .\n"
        "```\n"
    ),
    "assets/img/logo.png": "not really a png",
}


def write_blog(root: Path, files: dict[str, str] = None) -> Path:
    """Write files (default: SAMPLE_BLOG) under root and return root."""
    for rel, text in (files if files is not None else SAMPLE_BLOG).items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture(name="make_blog")
def make_blog_fixture():
    """The write_blog helper, for tests that need a custom tree."""
    return write_blog


@pytest.fixture(name="blog")
def blog_fixture(tmp_path):
    """A small valid blog: two posts, an About page, an asset, and a README."""
    return write_blog(tmp_path / "blog")


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove DB files and snippet directories created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)
