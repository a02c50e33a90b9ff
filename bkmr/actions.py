"""
Batch actions over selected bookmarks.

The dispatcher knows a closed set of actions (open, delete, edit, print).
Bookmarks are processed strictly one after another; the first failure is
logged and re-raised, so remaining bookmarks are never attempted and
bookmarks already handled stay handled.
"""
import logging
import subprocess
import webbrowser
from enum import Enum
from typing import Callable, Iterable, List, Optional, Sequence

from bkmr.config import BkmrConfig
from bkmr.editing import edit_in_editor
from bkmr.errors import ExternalProcessError
from bkmr.models import Bookmark
from bkmr.selection import SelectionSession
from bkmr.utils import abspath

logger = logging.getLogger(__name__)


class Action(Enum):
    """Actions the dispatcher can apply to a selection."""
    OPEN = "open"
    DELETE = "delete"
    EDIT = "edit"
    PRINT = "print"


class ActionDispatcher:
    """
    Executes actions against bookmarks of a store.

    Args:
        store: Database the bookmarks belong to (used by delete and edit)
        config: Configuration (shell prefix, editor)
    """

    def __init__(self, store, config: Optional[BkmrConfig] = None):
        self.store = store
        self.config = config or BkmrConfig()

    def dispatch(self, action: Action, ordinals: Sequence[int], session: SelectionSession) -> None:
        """
        Resolve ordinals against ``session`` and apply ``action``.

        Resolution stops at the first invalid ordinal, before any action runs.
        """
        if action is Action.PRINT:
            self.print_ordinals(ordinals, session)
            return
        bookmarks = session.resolve_many(ordinals)
        self.apply(action, bookmarks)

    def apply(self, action: Action, bookmarks: Iterable[Bookmark]) -> None:
        """Apply ``action`` to already resolved bookmarks."""
        bookmarks = list(bookmarks)
        if action is Action.OPEN:
            self.run_batch(bookmarks, self.open_bookmark)
        elif action is Action.DELETE:
            self.run_batch(self.deletion_order(bookmarks), self.delete_bookmark)
        elif action is Action.EDIT:
            self.run_batch(bookmarks, self.edit_bookmark)
        else:
            raise ValueError(f"Action {action} needs a selection session")

    @staticmethod
    def run_batch(bookmarks: Iterable[Bookmark], handler: Callable[[Bookmark], None]) -> None:
        """Run ``handler`` over bookmarks in sequence, aborting on the first failure."""
        name = getattr(handler, "__name__", "action")
        for bookmark in bookmarks:
            logger.debug("%s: bookmark %s", name, bookmark.id)
            try:
                handler(bookmark)
            except Exception as e:
                # Reported by the caller
                logger.debug("%s aborted at bookmark %s: %s", name, bookmark.id, e)
                raise

    @staticmethod
    def deletion_order(bookmarks: Iterable[Bookmark]) -> List[Bookmark]:
        """Unique bookmarks by descending id."""
        unique = {b.id: b for b in bookmarks}
        return [unique[i] for i in sorted(unique, reverse=True)]

    def open_bookmark(self, bookmark: Bookmark) -> None:
        """
        Open a bookmark.

        ``shell::<command>`` runs the command through the shell with the
        terminal attached and waits for it. Anything else is handed to the
        default browser/handler; existing local paths are opened as file URIs.

        Raises:
            ExternalProcessError: the shell command failed to start or exited nonzero
        """
        url = bookmark.url
        prefix = self.config.shell_prefix
        if prefix and url.startswith(prefix):
            command = url[len(prefix):]
            logger.debug("Shell command %r", command)
            try:
                completed = subprocess.run(command, shell=True)
            except OSError as e:
                raise ExternalProcessError(command, reason=str(e)) from e
            if completed.returncode != 0:
                raise ExternalProcessError(command, returncode=completed.returncode)
            return

        path = abspath(url)
        target = path.as_uri() if path else url
        logger.debug("General OS open %r", target)
        if not webbrowser.open(target):
            logger.warning("System did not acknowledge opening %s", target)

    def delete_bookmark(self, bookmark: Bookmark) -> None:
        self.store.delete(bookmark.id)

    def edit_bookmark(self, bookmark: Bookmark) -> None:
        """Edit a bookmark in the external editor and store the result under the same id."""
        fields = edit_in_editor(bookmark, self.config.editor)
        updated = Bookmark(
            id=bookmark.id,
            url=fields.url,
            title=fields.title,
            description=fields.description,
            tags=fields.tags.render(),
            flags=bookmark.flags or 0,
        )
        self.store.update(updated)

    @staticmethod
    def print_ordinals(ordinals: Sequence[int], session: SelectionSession) -> None:
        """Print the selected ordinals space separated; no selection means all."""
        ordinals = list(ordinals) or session.ordinals()
        session.resolve_many(ordinals)
        print(" ".join(str(o) for o in ordinals))
