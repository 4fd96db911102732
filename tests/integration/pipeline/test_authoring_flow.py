"""End-to-end authoring flow: scaffold a post, lint it, catalog it, edit it, re-catalog"""

from datetime import datetime
from pathlib import Path

from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdblog.config import Settings
from mdblog.core.pipeline import run_index, run_lint
from mdblog.core.scaffold import new_post
from mdblog.crud import models  # noqa: F401
from mdblog.crud.catalog import get_by_path, list_tags


def _engine():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    return engine


def test_scaffold_lint_index_edit(blog):
    settings = Settings(content_dir=str(blog), permalink="pretty")
    engine = _engine()

    path = new_post(blog / "_posts", "Config loader with reflection", ["go", "reflection"], datetime(2021, 5, 2, 9, 0))
    assert run_lint(blog, settings).ok

    counts, _ = run_index(engine, blog, settings)
    assert counts["created"] == 4

    # link the new post from the About page, breaking one reference on purpose
    about = blog / "about.md"
    about.write_text(about.read_text()
                     + "\nSee {% post_url 2021-05-02-config-loader-with-reflection %}"
                       " and {% post_url 2021-05-03-not-written-yet %}.\n")
    report = run_lint(blog, settings)
    assert [(i.path, i.rule) for i in report.issues] == [("about.md", "post-url-broken")]

    path.write_text(path.read_text() + "\nBody text.\n")
    counts, changes = run_index(engine, blog, settings)
    assert counts["updated"] == 2
    assert {c[1] for c in changes} == {"about.md", Path("_posts", path.name).as_posix()}

    with Session(engine) as session:
        doc = get_by_path(session, Path("_posts", path.name).as_posix())
        assert doc.url == "/2021/05/02/config-loader-with-reflection/"
        assert dict(list_tags(session))["go"] == 3
