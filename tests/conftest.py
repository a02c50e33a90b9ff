import os
import shutil
import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from bkmr.config import BkmrConfig
from bkmr.db import Database
from bkmr.models import Bookmark
from bkmr.tags import TagSet


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep BKMR_* and editor variables of the developer's shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("BKMR_") or key in ("EDITOR", "VISUAL"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_bookmarks():
    """Sample bookmark data for testing."""
    return [
        {
            "url": "https://docs.python.org",
            "title": "Python Documentation",
            "description": "Official Python documentation",
            "tags": "python,docs",
        },
        {
            "url": "https://github.com",
            "title": "GitHub",
            "description": "Code hosting platform",
            "tags": "git,dev",
        },
        {
            "url": "https://www.rust-lang.org",
            "title": "Rust",
            "description": "A language empowering everyone",
            "tags": "rust,dev",
        },
        {
            "url": "https://fastapi.tiangolo.com",
            "title": "FastAPI",
            "description": "Web framework for building APIs with Python",
            "tags": "python,web,dev",
        },
        {
            "url": "shell::echo hello",
            "title": "Say hello",
            "description": "",
            "tags": "shell",
        },
    ]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    temp_dir = tempfile.mkdtemp(prefix="bkmr_test_")
    yield temp_dir
    # Cleanup after test
    shutil.rmtree(temp_dir)


@pytest.fixture
def config(temp_dir):
    """Configuration pointing at a database inside the temp directory."""
    return BkmrConfig(database=os.path.join(temp_dir, "bkmr.db"), color_output=False, editor="vi")


@pytest.fixture
def temp_db(config):
    """Empty database."""
    return Database(config=config)


@pytest.fixture
def populated_db(temp_db, sample_bookmarks):
    """Database holding the sample bookmarks with ids 1..5."""
    for data in sample_bookmarks:
        temp_db.insert(
            data["url"],
            title=data["title"],
            description=data["description"],
            tags=TagSet.normalize(data["tags"]),
        )
    return temp_db


@pytest.fixture
def make_bookmark():
    """Build detached Bookmark objects without a database."""
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _make(id, title="", url=None, tags="", description="", flags=0, minutes=0):
        return Bookmark(
            id=id,
            url=url or f"https://example.com/{id}",
            title=title,
            description=description,
            tags=TagSet.normalize(tags).render(),
            flags=flags,
            last_update=base + timedelta(minutes=minutes),
        )

    return _make
