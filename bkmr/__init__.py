"""
bkmr - terminal bookmark manager

Store bookmarks in a single SQLite database, search them with a text
query and five tag clauses, and act on the numbered result list.

Example Usage:
    >>> from bkmr import Database, SearchEngine, TagFilter, TagSet
    >>> db = Database(path="bookmarks.db")
    >>> db.insert("https://example.com", title="Example", tags=TagSet.normalize("demo,web"))
    >>> SearchEngine(db).query("example", TagFilter.from_options(tags_all="web"))
"""

__version__ = "0.7.0"
__author__ = "bkmr Contributors"

# Core database API
from bkmr.db import Database

# Configuration
from bkmr.config import BkmrConfig, init_config

# Models
from bkmr.models import Bookmark

# Search and selection
from bkmr.tags import TagFilter, TagSet
from bkmr.search import SearchEngine, SearchResult, SortOrder
from bkmr.selection import SelectionSession
from bkmr.actions import Action, ActionDispatcher

# Errors
from bkmr.errors import (
    BkmrError,
    DuplicateUrlError,
    ExternalProcessError,
    InvalidInputError,
    NotFoundError,
    OutOfRangeError,
    TemplateParseError,
    TempFileError,
)

__all__ = [
    "Database",
    "BkmrConfig",
    "init_config",
    "Bookmark",
    "TagFilter",
    "TagSet",
    "SearchEngine",
    "SearchResult",
    "SortOrder",
    "SelectionSession",
    "Action",
    "ActionDispatcher",
    "BkmrError",
    "DuplicateUrlError",
    "ExternalProcessError",
    "InvalidInputError",
    "NotFoundError",
    "OutOfRangeError",
    "TemplateParseError",
    "TempFileError",
]
