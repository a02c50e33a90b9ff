"""
Database interface for bkmr.

Provides the bookmark store on top of SQLAlchemy. A Database owns one
engine and hands out short-lived sessions; objects returned by the public
methods are detached and stay readable after the session closes.

Ids are assigned by SQLite and are never renumbered: deleting a bookmark
leaves every other id untouched.
"""
import logging
from collections import Counter
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, List, Optional, Tuple

from sqlalchemy import and_, create_engine, event, func, not_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool, StaticPool

from bkmr.config import BkmrConfig
from bkmr.errors import DuplicateUrlError, NotFoundError
from bkmr.models import Base, Bookmark, utcnow
from bkmr.tags import TagFilter, TagSet

logger = logging.getLogger(__name__)


def _has_tag(tag: str):
    return Bookmark.tags.contains(f",{tag},", autoescape=True)


def tag_filter_clauses(tag_filter: TagFilter) -> list:
    """
    Translate a TagFilter into SQL conditions on the canonical tags column.

    Every clause of the filter has an exact LIKE equivalent because tags
    are stored framed by delimiters.
    """
    clauses = []
    if tag_filter.tags_exact is not None:
        clauses.append(Bookmark.tags == tag_filter.tags_exact.render())
    if tag_filter.tags_all is not None:
        clauses.append(and_(*[_has_tag(t) for t in tag_filter.tags_all]))
    if tag_filter.tags_all_not is not None:
        clauses.append(not_(and_(*[_has_tag(t) for t in tag_filter.tags_all_not])))
    if tag_filter.tags_any is not None:
        clauses.append(or_(*[_has_tag(t) for t in tag_filter.tags_any]))
    if tag_filter.tags_any_not is not None:
        clauses.append(and_(*[not_(_has_tag(t)) for t in tag_filter.tags_any_not]))
    return clauses


def text_clauses(fts_text: str) -> list:
    """Each whitespace separated term must occur in url, title or description."""
    clauses = []
    for term in fts_text.split():
        clauses.append(or_(
            Bookmark.url.icontains(term, autoescape=True),
            Bookmark.title.icontains(term, autoescape=True),
            Bookmark.description.icontains(term, autoescape=True),
        ))
    return clauses


def _count_tags(tag_columns) -> List[Tuple[str, int]]:
    counts = Counter()
    for tags in tag_columns:
        counts.update(TagSet.normalize(tags))
    return sorted(counts.items(), key=lambda item: (-item[1], item[0]))


class Database:
    """
    Bookmark store.

    One instance is created per command invocation and accessed serially.
    """

    def __init__(self, path: Optional[str] = None, url: Optional[str] = None,
                 config: Optional[BkmrConfig] = None):
        """
        Initialize database connection.

        Args:
            path: Database file path (SQLite). Overrides the configured database.
            url: Full SQLAlchemy URL (overrides path).
            config: Configuration; defaults are used when omitted.

        Examples:
            Database(config=config)
            Database(path="bookmarks.db")
            Database(url="sqlite:///:memory:")
        """
        self.config = config or BkmrConfig()

        if url:
            self.url = url
            self.path = None
        elif path:
            self.path = Path(path)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.url = f"sqlite:///{self.path}"
        else:
            self.url = self.config.get_database_url()
            if self.config.database_url is None:
                self.path = self.config.get_database_path()
                self.path.parent.mkdir(parents=True, exist_ok=True)
            else:
                self.path = None

        if self.url.startswith("sqlite:"):
            # In-memory databases live in one connection
            in_memory = self.url in ("sqlite://", "sqlite:///:memory:")
            self.engine = create_engine(
                self.url,
                poolclass=StaticPool if in_memory else NullPool,
                echo=self.config.database_echo,
            )
            event.listen(self.engine, "connect", self._configure_sqlite)
        else:
            self.engine = create_engine(
                self.url,
                pool_pre_ping=True,
                echo=self.config.database_echo,
            )

        self.Session = sessionmaker(bind=self.engine, autoflush=False)

        Base.metadata.create_all(self.engine)
        logger.debug("Opened bookmark database %s", self.url)

    @staticmethod
    def _configure_sqlite(dbapi_conn, connection_record):
        """Configure SQLite connection."""
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys = ON")
        cursor.execute("PRAGMA synchronous = NORMAL")
        cursor.close()

    @contextmanager
    def session(self, expire_on_commit: bool = False) -> Generator[Session, None, None]:
        """
        Context manager for database sessions.

        Yields:
            SQLAlchemy session with automatic commit/rollback
        """
        session = self.Session()
        session.expire_on_commit = expire_on_commit
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, id: int) -> Optional[Bookmark]:
        """
        Get a bookmark by id.

        Returns:
            Bookmark instance or None
        """
        with self.session() as session:
            return session.get(Bookmark, id)

    def query(self, fts_text: str = "", tag_filter: Optional[TagFilter] = None) -> List[Bookmark]:
        """
        Find bookmarks matching a text query and, optionally, a tag filter.

        Args:
            fts_text: Whitespace separated terms; all must match (case-insensitive)
            tag_filter: Tag clauses to evaluate in SQL

        Returns:
            Matching bookmarks in ascending id order (callers sort)
        """
        conditions = text_clauses(fts_text or "")
        if tag_filter is not None:
            conditions.extend(tag_filter_clauses(tag_filter))

        statement = select(Bookmark)
        if conditions:
            statement = statement.where(and_(*conditions))
        statement = statement.order_by(Bookmark.id)

        with self.session() as session:
            bookmarks = list(session.execute(statement).scalars())
        logger.debug("Query %r, %s -> %d bookmarks", fts_text, tag_filter, len(bookmarks))
        return bookmarks

    def all(self) -> List[Bookmark]:
        """Get all bookmarks in id order."""
        return self.query()

    def insert(self, url: str, title: str = "", description: str = "",
               tags: Optional[TagSet] = None, flags: int = 0) -> Bookmark:
        """
        Add a bookmark.

        Raises:
            DuplicateUrlError: a bookmark with this URL already exists
        """
        try:
            with self.session() as session:
                existing = session.execute(
                    select(Bookmark.id).where(Bookmark.url == url)
                ).scalar_one_or_none()
                if existing is not None:
                    raise DuplicateUrlError(url)

                bookmark = Bookmark(
                    url=url,
                    title=title or "",
                    description=description or "",
                    tags=(tags or TagSet()).render(),
                    flags=flags,
                    last_update=utcnow(),
                )
                session.add(bookmark)
                session.flush()
        except IntegrityError as e:
            raise DuplicateUrlError(url) from e

        logger.info("Added bookmark %d: %s", bookmark.id, url)
        return bookmark

    def update(self, bookmark: Bookmark) -> Bookmark:
        """
        Write all fields of ``bookmark`` to the stored record with the same id.

        Raises:
            NotFoundError: no record with this id
            DuplicateUrlError: the new URL belongs to another bookmark
        """
        try:
            with self.session() as session:
                stored = session.get(Bookmark, bookmark.id)
                if stored is None:
                    raise NotFoundError(bookmark.id)

                stored.url = bookmark.url
                stored.title = bookmark.title or ""
                stored.description = bookmark.description or ""
                stored.tags = TagSet.normalize(bookmark.tags).render()
                stored.flags = bookmark.flags or 0
                stored.last_update = utcnow()
                session.flush()
        except IntegrityError as e:
            raise DuplicateUrlError(bookmark.url) from e

        logger.info("Updated bookmark %d", stored.id)
        return stored

    def delete(self, id: int) -> None:
        """
        Delete a bookmark.

        Raises:
            NotFoundError: no record with this id
        """
        with self.session() as session:
            bookmark = session.get(Bookmark, id)
            if bookmark is None:
                raise NotFoundError(id)
            session.delete(bookmark)
        logger.info("Deleted bookmark %d", id)

    def count(self) -> int:
        with self.session() as session:
            return session.execute(select(func.count(Bookmark.id))).scalar()

    def all_tags(self) -> List[Tuple[str, int]]:
        """
        Count bookmarks per tag.

        Returns:
            (tag, count) pairs, most used first, ties by tag name
        """
        with self.session() as session:
            rows = session.execute(select(Bookmark.tags)).scalars().all()
        return _count_tags(rows)

    def related_tags(self, tag: str) -> List[Tuple[str, int]]:
        """
        Count tags co-occurring with ``tag``.

        The tag itself is included with the number of bookmarks carrying it.
        """
        tags = TagSet.normalize(tag)
        if not tags:
            return []
        statement = select(Bookmark.tags).where(and_(*[_has_tag(t) for t in tags]))
        with self.session() as session:
            rows = session.execute(statement).scalars().all()
        return _count_tags(rows)
