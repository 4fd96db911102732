"""Catalog persistence: upsert by source path, tag replacement, and listing queries"""

from datetime import date, datetime
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from mdblog.crud.models import Document, DocumentTag, Tag


def jsonable(value: Any) -> Any:
    """Convert YAML date/datetime values (recursively) to ISO strings for the JSON column."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [jsonable(v) for v in value]
    return value


def get_by_path(session: Session, path: str) -> Document | None:
    """Return the Document with the given source path, or None if not found."""
    return session.exec(select(Document).where(Document.path == path)).one_or_none()


def get_tags(session: Session, doc: Document) -> list[str]:
    """Return a document's tags in front-matter order."""
    stmt = select(DocumentTag.tag_name).where(DocumentTag.document_id == doc.id).order_by(DocumentTag.position)
    return list(session.exec(stmt).all())


def _replace_tags(session: Session, doc_id, tags: list[str]) -> None:
    """Delete a document's tag links and insert new ones, creating missing Tag rows."""
    for row in session.exec(select(DocumentTag).where(DocumentTag.document_id == doc_id)).all():
        session.delete(row)
    session.flush()

    for position, name in enumerate(tags):
        if not session.get(Tag, name):
            session.add(Tag(name=name))
            session.flush()
        session.add(DocumentTag(document_id=doc_id, tag_name=name, position=position))
    session.flush()


def index_doc(session: Session, data: dict, indexed_at: datetime | None = None) -> tuple[Document, str]:
    """Upsert one catalog record dict keyed by source path.

    Returns (doc, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; the caller controls the transaction.
    """
    indexed_at = indexed_at or datetime.now()
    doc = get_by_path(session, data['path'])
    fields = {
        'kind': data['kind'],
        'slug': data['slug'],
        'title': data['title'],
        'url': data['url'],
        'published_at': data.get('published_at'),
        'hash': data['hash'],
        'frontmatter': jsonable(data.get('frontmatter') or {}) or None,
    }

    if doc:
        if doc.hash == data['hash']:
            return doc, 'unchanged'
        for key, value in fields.items():
            setattr(doc, key, value)
        doc.updated_at = indexed_at
        session.add(doc)
        session.flush()
        _replace_tags(session, doc.id, data.get('tags', []))
        return doc, 'updated'

    doc = Document(path=data['path'], indexed_at=indexed_at, updated_at=indexed_at, **fields)
    session.add(doc)
    session.flush()
    _replace_tags(session, doc.id, data.get('tags', []))
    return doc, 'created'


def prune_missing(session: Session, seen_paths: set[str]) -> list[str]:
    """Remove catalog rows whose source path was not seen; returns the removed paths.

    Only catalog rows are deleted, never files.
    """
    removed = []
    for doc in session.exec(select(Document)).all():
        if doc.path in seen_paths:
            continue
        _replace_tags(session, doc.id, [])
        session.delete(doc)
        removed.append(doc.path)
    session.flush()
    return sorted(removed)


def list_posts(session: Session, tag: str | None = None) -> list[Document]:
    """Return catalogued posts newest first, optionally only those carrying tag."""
    stmt = select(Document).where(Document.kind == 'post')
    if tag:
        stmt = stmt.join(DocumentTag, DocumentTag.document_id == Document.id).where(DocumentTag.tag_name == tag)
    return list(session.exec(stmt.order_by(Document.published_at.desc(), Document.path)).all())


def list_pages(session: Session) -> list[Document]:
    return list(session.exec(select(Document).where(Document.kind == 'page').order_by(Document.path)).all())


def list_tags(session: Session) -> list[tuple[str, int]]:
    """Return (tag, post_count) sorted by count descending, then name."""
    count = func.count(DocumentTag.document_id)
    stmt = (
        select(DocumentTag.tag_name, count)
        .group_by(DocumentTag.tag_name)
        .order_by(count.desc(), DocumentTag.tag_name)
    )
    return [(name, n) for name, n in session.exec(stmt).all()]
