"""CLI command implementations"""

from datetime import datetime
from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session

from mdblog.config import Settings, load_config
from mdblog.core.devcontainer import check_devcontainer, find_devcontainer, load_devcontainer
from mdblog.core.jekyll import build_command, run_generator
from mdblog.core.lint.runner import check_site
from mdblog.core.models import LintReport
from mdblog.core.pipeline import run_index, run_lint, run_snippets
from mdblog.core.scaffold import new_page, new_post
from mdblog.crud.catalog import get_tags, list_pages, list_posts, list_tags
from mdblog.crud.database import init_db, make_engine, reset_db
from mdblog.errors import MdblogError
from mdblog.logger import setup_logging


_state = {"verbose": False}


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling and configure logging from it."""
    overrides = dict(overrides or {})
    if _state["verbose"]:
        overrides["log_level"] = "DEBUG"
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings.log_level)
    return settings


def _echo_report(report: LintReport, strict: bool = False) -> None:
    """Print every issue and a summary line; exit 1 on errors (or warnings when strict)."""
    for issue in report.issues:
        typer.echo(issue.format())
    typer.echo(
        f"Checked {report.checked} file(s) - "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    if not report.ok or (strict and report.warnings):
        raise typer.Exit(1)


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")] = False,
    ):
    """Authoring tools for a Markdown/front-matter blog."""
    _state["verbose"] = verbose


def lint_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to lint (default: content dir)")] = None,
    content_dir: Annotated[Optional[str], typer.Option("--content-dir", help="Blog source root")] = None,
    strict: Annotated[bool, typer.Option("--strict", help="Treat warnings as failures")] = False,
    ):
    """Check front matter and internal links of posts and pages."""
    settings = _settings(overrides={"content_dir": content_dir})
    root = Path(settings.content_dir)
    target = Path(path) if path else None
    if target is not None and not target.exists():
        _fail(f"No such file or directory: {target}")
    report = run_lint(root, settings, target)
    _echo_report(report, strict)


def check_site_cmd(
    site_dir: Annotated[Optional[str], typer.Argument(help="Generated site directory (default: _site)")] = None,
    ):
    """Check generated HTML for unresolved template syntax."""
    settings = _settings()
    out = Path(site_dir) if site_dir else Path(settings.content_dir) / settings.site_dir
    try:
        report = check_site(out)
    except MdblogError as e:
        _fail(str(e))
    _echo_report(report)


def new_post_cmd(
    title: Annotated[str, typer.Argument(help="Post title")],
    tags: Annotated[Optional[list[str]], typer.Option("--tag", "-t", help="Tag (repeatable)")] = None,
    date: Annotated[Optional[datetime], typer.Option("--date", formats=["%Y-%m-%d", "%Y-%m-%d %H:%M"], help="Publish date")] = None,
    layout: Annotated[Optional[str], typer.Option("--layout", help="Layout name")] = None,
    ):
    """Create a new dated post with starter front matter."""
    settings = _settings()
    posts_dir = Path(settings.content_dir) / settings.posts_dir
    try:
        path = new_post(posts_dir, title, tags, date, layout or settings.default_post_layout)
    except (FileExistsError, ValueError) as e:
        _fail("Could not create post", e)
    typer.echo(f"Created {path}")


def new_page_cmd(
    title: Annotated[str, typer.Argument(help="Page title")],
    permalink: Annotated[Optional[str], typer.Option("--permalink", help="Page URL, e.g. /about/")] = None,
    layout: Annotated[Optional[str], typer.Option("--layout", help="Layout name")] = None,
    ):
    """Create a new standalone page with starter front matter."""
    settings = _settings()
    try:
        path = new_page(Path(settings.content_dir), title, permalink, layout or settings.default_page_layout)
    except (FileExistsError, ValueError) as e:
        _fail("Could not create page", e)
    typer.echo(f"Created {path}")


def index_cmd(
    content_dir: Annotated[Optional[str], typer.Option("--content-dir", help="Blog source root")] = None,
    prune: Annotated[bool, typer.Option("--prune/--no-prune", help="Drop catalog rows for deleted files")] = True,
    ):
    """Catalog posts and pages in the database."""
    settings = _settings(overrides={"content_dir": content_dir})
    engine = make_engine(settings.db_url)
    init_db(engine)
    try:
        counts, changes = run_index(engine, Path(settings.content_dir), settings, prune)
    except Exception as e:
        _fail("Index failed", e)
    for status, path in changes:
        typer.echo(f"  {status}: {path}")
    typer.echo(
        f"Index complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['removed']} removed, "
        f"{counts['skipped']} skipped"
    )


def list_cmd(
    tag: Annotated[Optional[str], typer.Option("--tag", "-t", help="Only posts with this tag")] = None,
    pages: Annotated[bool, typer.Option("--pages", help="List pages instead of posts")] = False,
    ):
    """List catalogued posts, newest first."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        docs = list_pages(session) if pages else list_posts(session, tag)
        if not docs:
            typer.echo("No documents found in catalog. Run 'mdblog index' first.")
            raise typer.Exit(1)
        for doc in docs:
            when = doc.published_at.strftime('%Y-%m-%d') if doc.published_at else '----------'
            suffix = f"  [{', '.join(get_tags(session, doc))}]" if doc.kind == 'post' else ""
            typer.echo(f"{when}  {doc.title}  {doc.url}{suffix}")


def tags_cmd():
    """List tags with their post counts."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    init_db(engine)
    with Session(engine) as session:
        tags = list_tags(session)
    if not tags:
        typer.echo("No tags found in catalog.")
        raise typer.Exit(1)
    for name, count in tags:
        typer.echo(f"{count:4d}  {name}")


def snippets_cmd(
    path: Annotated[Optional[str], typer.Argument(help="File or directory to scan (default: content dir)")] = None,
    lang: Annotated[Optional[str], typer.Option("--lang", help="Only this language, e.g. go")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    ):
    """Extract fenced code samples from posts into standalone files."""
    settings = _settings(overrides={"snippets_dir": out})
    out_dir = Path(settings.snippets_dir)
    try:
        results = run_snippets(Path(settings.content_dir), out_dir, settings, lang, Path(path) if path else None)
    except RuntimeError as e:
        _fail(str(e))
    for src, snippet in results:
        typer.echo(f"  {src} -> {snippet}")
    typer.echo(f"Extracted {len(results)} snippet(s) to {out_dir}/")


def devcontainer_cmd(
    path: Annotated[Optional[str], typer.Argument(help="devcontainer.json path")] = None,
    ):
    """Validate the devcontainer descriptor (base image and startup command)."""
    settings = _settings()
    descriptor = Path(path) if path else find_devcontainer(Path(settings.content_dir))
    if descriptor is None or not descriptor.is_file():
        _fail("No devcontainer descriptor found")
    try:
        config = load_devcontainer(descriptor)
    except MdblogError as e:
        _fail(str(e))
    _echo_report(check_devcontainer(config, descriptor.as_posix()))


def serve_cmd(
    drafts: Annotated[bool, typer.Option("--drafts", help="Include _drafts/")] = False,
    host: Annotated[Optional[str], typer.Option("--host", help="Bind address")] = None,
    port: Annotated[Optional[int], typer.Option("--port", help="Port")] = None,
    ):
    """Start the generator's live-reload preview server."""
    settings = _settings(overrides={"host": host, "port": port})
    argv = build_command(settings, serve=True, drafts=drafts)
    try:
        code = run_generator(argv, Path(settings.content_dir))
    except MdblogError as e:
        _fail(str(e))
    raise typer.Exit(code)


def build_cmd(
    drafts: Annotated[bool, typer.Option("--drafts", help="Include _drafts/")] = False,
    check: Annotated[bool, typer.Option("--check/--no-check", help="Check output for unresolved templates")] = True,
    ):
    """Build the site with the generator, then check its output."""
    settings = _settings()
    try:
        code = run_generator(build_command(settings, drafts=drafts), Path(settings.content_dir))
    except MdblogError as e:
        _fail(str(e))
    if code != 0:
        _fail(f"Generator exited with status {code}")
    if check:
        try:
            report = check_site(Path(settings.content_dir) / settings.site_dir)
        except MdblogError as e:
            _fail(str(e))
        _echo_report(report)


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize the catalog database. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Catalog initialized at: {settings.db_url}")
