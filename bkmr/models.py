"""
SQLAlchemy models for bkmr.

A single table holds the bookmarks. Tags live in one column as the
canonical TagSet text (",a,b,") so tag clauses can be evaluated with
plain LIKE conditions.
"""
from datetime import datetime, timezone

from sqlalchemy import Integer, String, Text, DateTime, Index, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from bkmr.tags import TagSet


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class Bookmark(Base):
    """
    Bookmark model representing a saved URL with metadata.

    Attributes:
        id: Primary key, assigned by the store and never reused for another record
        url: The bookmark URL, or a ``shell::`` command
        title: Bookmark title (may be empty)
        description: Free text description (may be empty)
        tags: Canonical tag text, see ``bkmr.tags.TagSet.render``
        flags: Opaque integer carried through edits
        last_update: Timestamp of the last insert or update
    """
    __tablename__ = 'bookmarks'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    title: Mapped[str] = mapped_column(String(512), nullable=False, default='')
    description: Mapped[str] = mapped_column(Text, nullable=False, default='')
    tags: Mapped[str] = mapped_column(String(2048), nullable=False, default=lambda: TagSet().render())
    flags: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_update: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        UniqueConstraint('url', name='uq_bookmarks_url'),
        Index('ix_bookmarks_last_update', 'last_update'),
    )

    @property
    def tag_set(self) -> TagSet:
        """Tags of this bookmark as a TagSet."""
        return TagSet.normalize(self.tags)

    @tag_set.setter
    def tag_set(self, value: TagSet):
        self.tags = value.render()

    def __repr__(self):
        title = (self.title or '')[:50]
        return f"<Bookmark(id={self.id}, title='{title}', url='{self.url[:50]}')>"
