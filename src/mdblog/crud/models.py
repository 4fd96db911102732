"""Catalog tables: one row per post/page source, plus tags"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlmodel import Field, SQLModel


class DocumentTag(SQLModel, table=True):
    """Many-to-many link between documents and tags, in front-matter order"""
    __tablename__ = "document_tags"
    document_id: UUID = Field(foreign_key="documents.id", primary_key=True)
    tag_name: str = Field(foreign_key="tags.name", primary_key=True)
    position: int = Field(default=0, nullable=False)


class Document(SQLModel, table=True):
    """A catalogued post or page; the Markdown file on disk stays the source of truth"""
    __tablename__ = "documents"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    kind: str = Field(..., index=True, nullable=False, description="post or page")
    slug: str = Field(..., index=True, nullable=False)
    title: str = Field(..., nullable=False)
    url: str = Field(..., sa_column=Column(Text, nullable=False))
    published_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=False), nullable=True))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    indexed_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Tag(SQLModel, table=True):
    """A post tag"""
    __tablename__ = "tags"
    name: str = Field(primary_key=True)
