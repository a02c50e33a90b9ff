"""
Ordinal selection against a search result.

A SelectionSession wraps exactly one SearchResult. Ordinals typed by the
user are positions in that list (1..N) and become meaningless once the
list is regenerated.
"""
from typing import Iterable, List

from bkmr.errors import InvalidInputError, OutOfRangeError
from bkmr.models import Bookmark
from bkmr.search import SearchResult


def parse_ordinals(tokens: Iterable[str]) -> List[int]:
    """
    Convert tokens to integers.

    Raises:
        InvalidInputError: any token is not an integer
    """
    tokens = list(tokens)
    try:
        return [int(token) for token in tokens]
    except ValueError:
        raise InvalidInputError(tokens) from None


def parse_ids(text: str) -> List[int]:
    """
    Parse a comma separated id list such as ``"1,2,3"``.

    Raises:
        InvalidInputError: the list is empty or contains a non-integer
    """
    tokens = [token.strip() for token in text.split(",")]
    if not any(tokens):
        raise InvalidInputError(tokens)
    return parse_ordinals(tokens)


class SelectionSession:
    """Resolves ordinals against one search result."""

    def __init__(self, result: SearchResult):
        self.result = result

    def __len__(self) -> int:
        return len(self.result)

    def ordinals(self) -> List[int]:
        """All valid ordinals, 1..N."""
        return list(range(1, len(self.result) + 1))

    def resolve(self, ordinal: int) -> Bookmark:
        """
        Map an ordinal to its bookmark.

        Raises:
            OutOfRangeError: ordinal < 1 or ordinal > N
        """
        if ordinal < 1 or ordinal > len(self.result):
            raise OutOfRangeError(ordinal, len(self.result))
        return self.result[ordinal - 1]

    def resolve_many(self, ordinals: Iterable[int]) -> List[Bookmark]:
        """Resolve ordinals in order; the first failure aborts resolution."""
        return [self.resolve(ordinal) for ordinal in ordinals]
