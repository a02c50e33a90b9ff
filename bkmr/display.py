"""
Terminal rendering of bookmarks with rich.
"""
import json
from typing import Iterable, List, Sequence, Tuple

from rich.console import Console
from rich.markup import escape

from bkmr.config import BkmrConfig
from bkmr.models import Bookmark


def make_console(config: BkmrConfig) -> Console:
    """Console honouring the color setting."""
    return Console(no_color=not config.color_output, highlight=False)


def bookmark_to_dict(bookmark: Bookmark) -> dict:
    return {
        "id": bookmark.id,
        "url": bookmark.url,
        "title": bookmark.title,
        "description": bookmark.description,
        "tags": list(bookmark.tag_set),
        "flags": bookmark.flags,
        "last_update": bookmark.last_update.isoformat() if bookmark.last_update else None,
    }


def print_json(bookmarks: Iterable[Bookmark]):
    print(json.dumps([bookmark_to_dict(b) for b in bookmarks], indent=2))


def show_bookmarks(bookmarks: Sequence[Bookmark], console: Console):
    """
    Print a numbered list of bookmarks.

    Each entry shows ordinal, title and id on the first line, followed by
    url, description (if any) and tags (if any), indented under the title.
    """
    width = len(str(len(bookmarks)))
    pad = " " * width

    for i, b in enumerate(bookmarks, start=1):
        console.print(
            f"[green]{i:>{width}}. {escape(b.title or '')}[/green] [white]\\[{b.id}][/white]",
            soft_wrap=True,
        )
        console.print(f"[yellow]{pad}  {escape(b.url)}[/yellow]", soft_wrap=True)
        if b.description:
            console.print(f"[white]{pad}  {escape(b.description)}[/white]", soft_wrap=True)
        tags = " ".join(b.tag_set)
        if tags:
            console.print(f"[blue]{pad}  {escape(tags)}[/blue]", soft_wrap=True)
        console.print()


def show_tag_counts(counts: List[Tuple[str, int]], console: Console):
    for tag, count in counts:
        console.print(f"{count}: {escape(tag)}", soft_wrap=True)
