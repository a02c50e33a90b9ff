#!/usr/bin/env python3
"""
bkmr - terminal bookmark manager.

Search bookmarks with a text query and tag filters, then act on the
numbered result list: open, delete, edit or print the selection.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List

import requests
from rich.console import Console
from rich.markup import escape

from bkmr.actions import Action, ActionDispatcher
from bkmr.config import BkmrConfig, init_config
from bkmr.db import Database
from bkmr.display import make_console, print_json, show_bookmarks, show_tag_counts
from bkmr.editing import edit_in_editor
from bkmr.enrich import fetch_url_details
from bkmr.errors import DuplicateUrlError, NotFoundError
from bkmr.fuzzy import fuzzy_open
from bkmr.interactive import InteractiveCommandProcessor
from bkmr.models import Bookmark
from bkmr.search import SearchEngine, SortOrder
from bkmr.selection import SelectionSession, parse_ids
from bkmr.tags import TagFilter, TagSet
from bkmr.utils import is_remote_url

logger = logging.getLogger(__name__)

console = Console(stderr=True, highlight=False)


def setup_logging(verbosity: int, config: BkmrConfig):
    """Configure logging from the -d count, falling back to the configured level."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(logging, str(config.log_level).upper(), logging.WARNING)

    logging.basicConfig(level=level, format='%(levelname)s: %(message)s')
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logger.debug("Log level %s", logging.getLevelName(level))


def _lookup(db: Database, ids: List[int], out: Console, strict: bool) -> List[Bookmark]:
    """
    Fetch bookmarks for ids parsed with ``parse_ids``.

    With ``strict`` an unknown id ends the command; otherwise it is
    reported and skipped.
    """
    bookmarks = []
    for id in ids:
        bookmark = db.get(id)
        if bookmark is None:
            if strict:
                raise NotFoundError(id)
            out.print(f"[red]{escape(str(NotFoundError(id)))}[/red]")
            continue
        bookmarks.append(bookmark)
    return bookmarks


def _sort_order(args) -> SortOrder:
    if args.order_desc:
        return SortOrder.UPDATED_DESC
    if args.order_asc:
        return SortOrder.UPDATED_ASC
    return SortOrder.TITLE


def cmd_search(args, config: BkmrConfig):
    """Search bookmarks and act on the result."""
    db = Database(config=config)
    out = make_console(config)

    tag_filter = TagFilter.from_options(
        tags_all=args.tags_all,
        tags_all_not=args.tags_all_not,
        tags_any=args.tags_any,
        tags_any_not=args.tags_any_not,
        tags_exact=args.tags_exact,
        prefix=args.prefix,
    )
    result = SearchEngine(db).query(args.query or "", tag_filter, _sort_order(args))

    if args.json:
        print_json(result)
        return

    dispatcher = ActionDispatcher(db, config)
    if args.fzf:
        fuzzy_open(result, dispatcher)
        return

    show_bookmarks(result.bookmarks, out)
    if args.non_interactive:
        return

    out.print(f"Found {len(result)} bookmarks")
    if not result:
        return
    out.print("Selection: ")
    InteractiveCommandProcessor(SelectionSession(result), dispatcher, out).run()


def cmd_open(args, config: BkmrConfig):
    """Open bookmarks by id."""
    ids = parse_ids(args.ids)
    db = Database(config=config)
    bookmarks = _lookup(db, ids, make_console(config), strict=False)
    ActionDispatcher(db, config).apply(Action.OPEN, bookmarks)


def cmd_add(args, config: BkmrConfig):
    """Add a bookmark, optionally filling title and description from the web."""
    db = Database(config=config)
    out = make_console(config)

    url = args.url
    title = args.title or ""
    description = args.description or ""
    tags = TagSet.normalize(args.tags)

    if not args.no_web and is_remote_url(url):
        try:
            details = fetch_url_details(url, config)
        except requests.RequestException as e:
            logger.debug("Enrichment of %s failed: %s", url, e)
            out.print("[yellow]Cannot enrich URL data from web.[/yellow]")
        else:
            title = title or details.title
            description = description or details.description

    if args.edit:
        draft = Bookmark(url=url, title=title, description=description, tags=tags.render())
        fields = edit_in_editor(draft, config.editor)
        url, title, description, tags = fields.url, fields.title, fields.description, fields.tags

    try:
        bookmark = db.insert(url, title=title, description=description, tags=tags)
    except DuplicateUrlError as e:
        out.print(f"[red]{escape(str(e))}[/red]")
        sys.exit(1)

    out.print(f"Added bookmark: {bookmark.id}")
    show_bookmarks([bookmark], out)


def cmd_delete(args, config: BkmrConfig):
    """Delete bookmarks by id."""
    ids = parse_ids(args.ids)
    db = Database(config=config)
    bookmarks = _lookup(db, ids, make_console(config), strict=True)
    ActionDispatcher(db, config).apply(Action.DELETE, bookmarks)


def cmd_edit(args, config: BkmrConfig):
    """Edit bookmarks by id in the external editor."""
    ids = parse_ids(args.ids)
    db = Database(config=config)
    bookmarks = _lookup(db, ids, make_console(config), strict=True)
    ActionDispatcher(db, config).apply(Action.EDIT, bookmarks)


def cmd_update(args, config: BkmrConfig):
    """Add or remove tags of bookmarks, or replace them with --force."""
    out = make_console(config)
    add = TagSet.normalize(args.tags)
    remove = TagSet.normalize(args.ntags)
    if args.force and (not add or remove):
        out.print("[red]Force update requires tags but no ntags[/red]")
        sys.exit(1)

    ids = parse_ids(args.ids)
    db = Database(config=config)

    for bookmark in _lookup(db, ids, out, strict=True):
        if args.force:
            tags = add
        else:
            tags = (bookmark.tag_set | add) - remove
        bookmark.tag_set = tags
        db.update(bookmark)
        logger.info("Bookmark %d tags: %s", bookmark.id, tags.render())


def cmd_show(args, config: BkmrConfig):
    """Show bookmarks by id."""
    ids = parse_ids(args.ids)
    db = Database(config=config)
    out = make_console(config)
    bookmarks = _lookup(db, ids, out, strict=False)
    if args.json:
        print_json(bookmarks)
    else:
        show_bookmarks(bookmarks, out)


def cmd_tags(args, config: BkmrConfig):
    """Show tag usage counts, or tags used together with one tag."""
    db = Database(config=config)
    counts = db.related_tags(args.tag) if args.tag else db.all_tags()
    show_tag_counts(counts, make_console(config))


def cmd_create_db(args, config: BkmrConfig):
    """Create a new, empty bookmark database."""
    out = make_console(config)
    path = Path(args.path).expanduser()
    if path.exists():
        out.print(f"[red]Database already exists at {escape(str(path))}[/red]")
        sys.exit(1)

    Database(path=str(path), config=config)
    out.print(f"Database created at {escape(str(path))}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bkmr",
        description="bkmr - a terminal bookmark manager",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  bkmr search -t python,web "async"
  bkmr search -N archived -O --np
  bkmr add https://example.com tutorial,web --title "Example"
  bkmr update 3,7 -t important -n todo
  bkmr open 12
  bkmr tags python

Configuration:
  Default database: ~/.config/bkmr/bkmr.db
  Config file: ~/.config/bkmr/config.toml
  Environment: BKMR_DB_URL (database path), BKMR_EDITOR, BKMR_COLOR_OUTPUT
        """
    )

    # Global options
    parser.add_argument("--db", help="Database file")
    parser.add_argument("--config", help="Config file path")
    parser.add_argument("-d", "--debug", action="count", default=0,
                        help="Increase log verbosity (-d info, -dd debug)")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Commands")

    # search
    search = subparsers.add_parser("search", help="Search bookmarks")
    search.add_argument("query", nargs="?", default="", help="Text that must occur in url, title or description")
    search.add_argument("-e", "--exact", dest="tags_exact", help="Exactly these tags")
    search.add_argument("-t", "--tags", dest="tags_all", help="All of these tags")
    search.add_argument("-T", "--Tags", dest="tags_all_not", help="Not all of these tags")
    search.add_argument("-n", "--ntags", dest="tags_any", help="Any of these tags")
    search.add_argument("-N", "--Ntags", dest="tags_any_not", help="None of these tags")
    search.add_argument("--prefix", help="Tags added to --tags")
    order = search.add_mutually_exclusive_group()
    order.add_argument("-o", "--descending", dest="order_desc", action="store_true",
                       help="Order by last update, newest first")
    order.add_argument("-O", "--ascending", dest="order_asc", action="store_true",
                       help="Order by last update, oldest first")
    search.add_argument("--np", dest="non_interactive", action="store_true",
                        help="No prompt after the result list")
    search.add_argument("--fzf", action="store_true", help="Fuzzy select one bookmark and open it")
    search.add_argument("--json", action="store_true", help="Print results as JSON")
    search.set_defaults(func=cmd_search)

    # open
    open_parser = subparsers.add_parser("open", help="Open bookmarks")
    open_parser.add_argument("ids", help="Comma separated ids")
    open_parser.set_defaults(func=cmd_open)

    # add
    add = subparsers.add_parser("add", help="Add a bookmark")
    add.add_argument("url", help="URL, file path or shell:: command")
    add.add_argument("tags", nargs="?", help="Comma separated tags")
    add.add_argument("--title", help="Title")
    add.add_argument("-d", "--description", help="Description")
    add.add_argument("--no-web", action="store_true", help="Do not fetch title and description")
    add.add_argument("-e", "--edit", action="store_true", help="Edit before saving")
    add.set_defaults(func=cmd_add)

    # delete
    delete = subparsers.add_parser("delete", help="Delete bookmarks")
    delete.add_argument("ids", help="Comma separated ids")
    delete.set_defaults(func=cmd_delete)

    # update
    update = subparsers.add_parser("update", help="Update bookmark tags")
    update.add_argument("ids", help="Comma separated ids")
    update.add_argument("-t", "--tags", help="Tags to add")
    update.add_argument("-n", "--ntags", help="Tags to remove")
    update.add_argument("-f", "--force", action="store_true", help="Replace all tags with --tags")
    update.set_defaults(func=cmd_update)

    # edit
    edit = subparsers.add_parser("edit", help="Edit bookmarks in $EDITOR")
    edit.add_argument("ids", help="Comma separated ids")
    edit.set_defaults(func=cmd_edit)

    # show
    show = subparsers.add_parser("show", help="Show bookmarks")
    show.add_argument("ids", help="Comma separated ids")
    show.add_argument("--json", action="store_true", help="Print as JSON")
    show.set_defaults(func=cmd_show)

    # tags
    tags = subparsers.add_parser("tags", help="Show tag counts")
    tags.add_argument("tag", nargs="?", help="Show tags used together with this tag")
    tags.set_defaults(func=cmd_tags)

    # create-db
    create_db = subparsers.add_parser("create-db", help="Create a new database")
    create_db.add_argument("path", help="Database file")
    create_db.set_defaults(func=cmd_create_db)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config_file = Path(args.config) if args.config else None

    try:
        config = init_config(database=args.db, config_file=config_file)
        setup_logging(args.debug, config)
        args.func(args, config)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)
    except Exception as e:
        logger.debug("Command failed", exc_info=True)
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
