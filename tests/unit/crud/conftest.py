"""Shared fixtures for crud unit tests"""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdblog.crud import models  # noqa: F401
from mdblog.core.utils.hashing import sha256


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="make_record")
def make_record_fixture():
    """Build a catalog record dict as the index pipeline does."""
    def _make(path="_posts/2021-03-01-ioc.md", body="# IoC", kind="post", tags=("go",), when=datetime(2021, 3, 1)):
        slug = path.rsplit("/", 1)[-1].removesuffix(".md")[11:] if kind == "post" else path.removesuffix(".md")
        return {
            "path": path,
            "kind": kind,
            "slug": slug,
            "title": slug.replace("-", " ").title(),
            "url": f"/{slug}/",
            "published_at": when if kind == "post" else None,
            "hash": sha256(body),
            "frontmatter": {"title": slug, "date": when.date()},
            "tags": list(tags),
        }

    return _make
