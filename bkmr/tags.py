"""
Tag sets and the five-clause tag filter.

Tags are stored as a canonical string: sorted tokens joined by a comma and
framed by a leading and trailing comma (",python,web,"). Looking for
",tag," inside that string can never match a different tag that merely
starts with the same letters, which lets the store push tag clauses down
to SQL LIKE conditions.
"""
from dataclasses import dataclass
from typing import FrozenSet, Iterable, Iterator, Optional

from bkmr.constants import TAG_DELIMITER


def _clean(token: str) -> str:
    return token.strip().lower()


class TagSet:
    """
    Immutable set of lowercase, non-empty tag tokens.

    Two TagSets are equal iff they hold the same tokens; iteration yields
    tokens in sorted order.
    """

    __slots__ = ("_tags",)

    def __init__(self, tags: Iterable[str] = ()):
        cleaned = (_clean(t) for t in tags)
        self._tags: FrozenSet[str] = frozenset(t for t in cleaned if t)

    @classmethod
    def normalize(cls, raw: Optional[str]) -> "TagSet":
        """
        Build a TagSet from a comma separated list.

        Splits on commas, trims and lowercases each token, drops empty
        tokens and duplicates. ``None`` yields the empty set.

        >>> TagSet.normalize(" B,a,,a ").render()
        ',a,b,'
        """
        if not raw:
            return cls()
        return cls(raw.split(TAG_DELIMITER))

    def render(self) -> str:
        """Canonical text form, e.g. ``,a,b,``; the empty set renders as ``,,``."""
        return f"{TAG_DELIMITER}{TAG_DELIMITER.join(sorted(self._tags))}{TAG_DELIMITER}"

    def union(self, other: "TagSet") -> "TagSet":
        return TagSet(self._tags | other._tags)

    def difference(self, other: "TagSet") -> "TagSet":
        return TagSet(self._tags - other._tags)

    def issuperset(self, other: "TagSet") -> bool:
        return self._tags >= other._tags

    def isdisjoint(self, other: "TagSet") -> bool:
        return self._tags.isdisjoint(other._tags)

    __or__ = union
    __sub__ = difference

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._tags))

    def __len__(self) -> int:
        return len(self._tags)

    def __bool__(self) -> bool:
        return bool(self._tags)

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and _clean(tag) in self._tags

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagSet):
            return NotImplemented
        return self._tags == other._tags

    def __hash__(self) -> int:
        return hash(self._tags)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"TagSet({sorted(self._tags)!r})"


def _clause(raw: Optional[str]) -> Optional[TagSet]:
    # An option that normalizes to nothing does not filter.
    tags = TagSet.normalize(raw)
    return tags if tags else None


@dataclass(frozen=True)
class TagFilter:
    """
    Boolean predicate over a bookmark's tags.

    Each clause is optional; an absent clause is vacuously satisfied and
    the present clauses are ANDed:

    ============  ======================================
    tags_exact    tags == exact
    tags_all      tags contain every tag of the clause
    tags_all_not  tags do not contain all of the clause
    tags_any      tags share at least one tag
    tags_any_not  tags share no tag
    ============  ======================================
    """

    tags_all: Optional[TagSet] = None
    tags_all_not: Optional[TagSet] = None
    tags_any: Optional[TagSet] = None
    tags_any_not: Optional[TagSet] = None
    tags_exact: Optional[TagSet] = None

    @classmethod
    def from_options(
        cls,
        tags_all: Optional[str] = None,
        tags_all_not: Optional[str] = None,
        tags_any: Optional[str] = None,
        tags_any_not: Optional[str] = None,
        tags_exact: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> "TagFilter":
        """
        Build a filter from raw comma separated option strings.

        ``prefix`` tags are unioned into the ``tags_all`` clause.
        """
        all_tags = TagSet.normalize(tags_all) | TagSet.normalize(prefix)
        return cls(
            tags_all=all_tags if all_tags else None,
            tags_all_not=_clause(tags_all_not),
            tags_any=_clause(tags_any),
            tags_any_not=_clause(tags_any_not),
            tags_exact=_clause(tags_exact),
        )

    @property
    def is_empty(self) -> bool:
        return all(
            clause is None
            for clause in (self.tags_all, self.tags_all_not, self.tags_any,
                           self.tags_any_not, self.tags_exact)
        )

    def matches(self, tags: TagSet) -> bool:
        """Test whether a bookmark's tags satisfy every present clause."""
        if self.tags_exact is not None and tags != self.tags_exact:
            return False
        if self.tags_all is not None and not tags.issuperset(self.tags_all):
            return False
        if self.tags_all_not is not None and tags.issuperset(self.tags_all_not):
            return False
        if self.tags_any is not None and tags.isdisjoint(self.tags_any):
            return False
        if self.tags_any_not is not None and not tags.isdisjoint(self.tags_any_not):
            return False
        return True
