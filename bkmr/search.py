"""
Search: text query + tag filter + sort order -> ordered result list.

The store narrows candidates (text match, tag clauses pushed down to SQL);
the engine re-applies the tag filter in memory and sorts. The resulting
SearchResult is what ordinals typed by the user refer to.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from bkmr.models import Bookmark
from bkmr.tags import TagFilter

logger = logging.getLogger(__name__)


class SortOrder(Enum):
    """Result ordering."""
    TITLE = "title"                  # ascending, case-insensitive
    UPDATED_DESC = "updated_desc"    # newest first
    UPDATED_ASC = "updated_asc"      # oldest first


def sort_bookmarks(bookmarks: Iterable[Bookmark], order: SortOrder = SortOrder.TITLE) -> List[Bookmark]:
    """
    Sort bookmarks; ties keep their incoming order.

    ``sorted`` is stable, including with ``reverse=True``, so repeated
    identical queries produce identical lists.
    """
    if order is SortOrder.UPDATED_DESC:
        return sorted(bookmarks, key=lambda b: b.last_update, reverse=True)
    if order is SortOrder.UPDATED_ASC:
        return sorted(bookmarks, key=lambda b: b.last_update)
    return sorted(bookmarks, key=lambda b: (b.title or "").lower())


@dataclass(frozen=True)
class SearchResult:
    """
    Ordered, immutable list of bookmarks produced by one search.

    Ordinal k (1-indexed) denotes ``bookmarks[k - 1]``; it says nothing
    about the bookmark's id.
    """
    bookmarks: Tuple[Bookmark, ...] = ()

    def __len__(self) -> int:
        return len(self.bookmarks)

    def __iter__(self) -> Iterator[Bookmark]:
        return iter(self.bookmarks)

    def __getitem__(self, idx: Union[int, slice]):
        return self.bookmarks[idx]

    def __bool__(self) -> bool:
        return len(self.bookmarks) > 0


class SearchEngine:
    """Runs searches against a store."""

    def __init__(self, store):
        self.store = store

    def query(
        self,
        fts_text: str = "",
        tag_filter: Optional[TagFilter] = None,
        sort: SortOrder = SortOrder.TITLE,
    ) -> SearchResult:
        """
        Search bookmarks.

        A bookmark is in the result iff it matches the text query and the
        tag filter.

        Args:
            fts_text: Text query; empty matches everything
            tag_filter: Tag predicate; None matches everything
            sort: Ordering of the result

        Returns:
            SearchResult in the requested order
        """
        tag_filter = tag_filter or TagFilter()
        candidates = self.store.query(fts_text, tag_filter)
        matching = [b for b in candidates if tag_filter.matches(b.tag_set)]
        logger.debug("Search %r: %d candidates, %d matching", fts_text, len(candidates), len(matching))
        return SearchResult(tuple(sort_bookmarks(matching, sort)))
