"""
Fuzzy selection of a single bookmark from a search result.

Uses prompt_toolkit's fuzzy completer over one label per result entry;
the chosen entry is opened.
"""
import logging
from typing import Callable, Dict, Optional

from prompt_toolkit import prompt
from prompt_toolkit.completion import FuzzyWordCompleter

from bkmr.actions import Action, ActionDispatcher
from bkmr.models import Bookmark
from bkmr.search import SearchResult

logger = logging.getLogger(__name__)


def entry_label(ordinal: int, bookmark: Bookmark) -> str:
    title = bookmark.title or bookmark.url
    return f"{ordinal}: {title} [{bookmark.id}]"


def build_choices(result: SearchResult) -> Dict[str, Bookmark]:
    return {entry_label(i, b): b for i, b in enumerate(result, start=1)}


def fuzzy_select(result: SearchResult, read_line: Optional[Callable[..., str]] = None) -> Optional[Bookmark]:
    """
    Let the user pick one bookmark by fuzzy matching its label.

    Returns:
        The chosen bookmark, or None when the input matches no label or
        the prompt was aborted
    """
    choices = build_choices(result)
    if not choices:
        return None

    read_line = read_line or prompt
    completer = FuzzyWordCompleter(list(choices), WORD=True)
    try:
        answer = read_line("> ", completer=completer, complete_while_typing=True)
    except (EOFError, KeyboardInterrupt):
        return None

    answer = answer.strip()
    if answer in choices:
        return choices[answer]

    # Fall back to the first label containing the typed text
    lowered = answer.lower()
    if lowered:
        for label, bookmark in choices.items():
            if lowered in label.lower():
                return bookmark
    logger.debug("No bookmark matches %r", answer)
    return None


def fuzzy_open(result: SearchResult, dispatcher: ActionDispatcher,
               read_line: Optional[Callable[..., str]] = None) -> Optional[Bookmark]:
    """Fuzzy-select a bookmark and open it."""
    bookmark = fuzzy_select(result, read_line)
    if bookmark is not None:
        dispatcher.apply(Action.OPEN, [bookmark])
    return bookmark
