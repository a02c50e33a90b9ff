"""
Interactive selection prompt shown after a search.

The processor reads lines until one real action (or quit) has been
taken. Help and invalid input keep it waiting for another line.

    > 1 3        open result 1 and 3
    > p          print all ordinals
    > d 2        delete result 2
    > e 1        edit result 1
    > q          quit
"""
import logging
import re
from enum import Enum
from typing import Callable, List, Optional

from prompt_toolkit import PromptSession
from rich.console import Console
from rich.markup import escape

from bkmr.actions import Action, ActionDispatcher
from bkmr.constants import INTERACTIVE_HELP
from bkmr.errors import BkmrError, InvalidInputError
from bkmr.selection import SelectionSession, parse_ordinals

logger = logging.getLogger(__name__)

LEADING_DIGITS = re.compile(r"^\d+")

COMMANDS = {
    "p": Action.PRINT,
    "d": Action.DELETE,
    "e": Action.EDIT,
}


class State(Enum):
    AWAITING_INPUT = "awaiting_input"
    DONE = "done"


def tokenize(line: str) -> List[str]:
    """Lowercase, drop commas, split on whitespace."""
    return line.strip().replace(",", "").lower().split()


def _prompt_reader() -> Callable[[str], str]:
    session = PromptSession()
    return session.prompt


class InteractiveCommandProcessor:
    """
    Single-shot command prompt over a selection session.

    Args:
        session: Selection the ordinals refer to
        dispatcher: Executes the chosen action
        console: Output for help and messages
        read_line: Callable taking the prompt and returning one line;
            defaults to a prompt_toolkit session
    """

    prompt = "> "

    def __init__(
        self,
        session: SelectionSession,
        dispatcher: ActionDispatcher,
        console: Optional[Console] = None,
        read_line: Optional[Callable[[str], str]] = None,
    ):
        self.session = session
        self.dispatcher = dispatcher
        self.console = console or Console(highlight=False)
        self._read_line = read_line
        self.state = State.AWAITING_INPUT

    def read_line(self) -> Optional[str]:
        if self._read_line is None:
            self._read_line = _prompt_reader()
        try:
            return self._read_line(self.prompt)
        except (EOFError, KeyboardInterrupt):
            return None

    def run(self) -> State:
        """Read and handle lines until done."""
        while self.state is State.AWAITING_INPUT:
            line = self.read_line()
            if line is None:
                self.state = State.DONE
                break
            self.handle(line)
        return self.state

    def handle(self, line: str) -> State:
        """Handle one input line and return the resulting state."""
        if self.state is State.DONE:
            return self.state

        tokens = tokenize(line)
        logger.debug("Tokens: %s", tokens)

        if not tokens or tokens[0] == "q":
            self.state = State.DONE
        elif tokens[0] == "h":
            self.show_help()
        elif tokens[0] in COMMANDS:
            self._dispatch(COMMANDS[tokens[0]], tokens[1:])
        elif LEADING_DIGITS.match(tokens[0]):
            self._dispatch(Action.OPEN, tokens)
        else:
            self.console.print("Invalid Input")
            self.show_help()
        return self.state

    def show_help(self):
        self.console.print(INTERACTIVE_HELP, markup=False)

    def _dispatch(self, action: Action, tokens: List[str]):
        try:
            ordinals = parse_ordinals(tokens)
        except InvalidInputError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
            return

        self.state = State.DONE
        try:
            self.dispatcher.dispatch(action, ordinals, self.session)
        except BkmrError as e:
            self.console.print(f"[red]{escape(str(e))}[/red]")
