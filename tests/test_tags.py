"""
Tests for bkmr/tags.py

Covers the canonical tag representation and each clause of the tag filter.
"""
import pytest

from bkmr.tags import TagFilter, TagSet


class TestTagSetNormalize:
    """Test TagSet.normalize() and render()."""

    def test_sorted_lowercase_unique(self):
        """Tokens are trimmed, lowercased, de-duplicated and sorted."""
        assert TagSet.normalize(" B,a,,a ").render() == ",a,b,"

    def test_none_is_empty(self):
        assert TagSet.normalize(None).render() == ",,"
        assert not TagSet.normalize(None)

    def test_only_delimiters_is_empty(self):
        assert TagSet.normalize(",, ,").render() == ",,"

    def test_render_round_trips(self):
        tags = TagSet.normalize("web,python,dev")
        assert TagSet.normalize(tags.render()) == tags

    def test_iteration_sorted(self):
        assert list(TagSet.normalize("zeta,Alpha,mid")) == ["alpha", "mid", "zeta"]


class TestTagSetOperations:
    """Test set operations on TagSet."""

    def test_equality_ignores_order_and_case(self):
        assert TagSet.normalize("a,B") == TagSet.normalize("b,a")
        assert hash(TagSet.normalize("a,B")) == hash(TagSet.normalize("b,a"))

    def test_union(self):
        assert (TagSet.normalize("a") | TagSet.normalize("b")).render() == ",a,b,"

    def test_difference(self):
        assert (TagSet.normalize("a,b,c") - TagSet.normalize("b")).render() == ",a,c,"

    def test_contains(self):
        tags = TagSet.normalize("python")
        assert "python" in tags
        assert "Python" in tags
        assert "py" not in tags

    def test_len(self):
        assert len(TagSet.normalize("a,b,a")) == 2


class TestTagFilterFromOptions:
    """Test building filters from raw options."""

    def test_no_options_is_empty(self):
        assert TagFilter.from_options().is_empty

    def test_empty_option_is_absent(self):
        """An option that normalizes to nothing does not filter."""
        tag_filter = TagFilter.from_options(tags_any=",,", tags_exact="")
        assert tag_filter.tags_any is None
        assert tag_filter.tags_exact is None
        assert tag_filter.is_empty

    def test_prefix_unioned_into_tags_all(self):
        tag_filter = TagFilter.from_options(tags_all="a", prefix="b,c")
        assert tag_filter.tags_all == TagSet.normalize("a,b,c")

    def test_prefix_alone(self):
        tag_filter = TagFilter.from_options(prefix="a")
        assert tag_filter.tags_all == TagSet.normalize("a")


class TestTagFilterMatches:
    """Test TagFilter.matches() for each clause."""

    @pytest.fixture
    def tags(self):
        return TagSet.normalize("a,b")

    def test_empty_filter_matches_everything(self, tags):
        assert TagFilter().matches(tags)
        assert TagFilter().matches(TagSet())

    def test_tags_all(self, tags):
        assert TagFilter.from_options(tags_all="a").matches(tags)
        assert TagFilter.from_options(tags_all="a,b").matches(tags)
        assert not TagFilter.from_options(tags_all="a,c").matches(tags)

    def test_tags_all_not(self, tags):
        """Excludes only bookmarks carrying every listed tag."""
        assert not TagFilter.from_options(tags_all_not="a").matches(tags)
        assert not TagFilter.from_options(tags_all_not="a,b").matches(tags)
        assert TagFilter.from_options(tags_all_not="a,c").matches(tags)

    def test_tags_any(self, tags):
        assert TagFilter.from_options(tags_any="c,b").matches(tags)
        assert not TagFilter.from_options(tags_any="c,d").matches(tags)

    def test_tags_any_not(self, tags):
        assert TagFilter.from_options(tags_any_not="c,d").matches(tags)
        assert not TagFilter.from_options(tags_any_not="c,a").matches(tags)

    def test_tags_exact(self, tags):
        assert TagFilter.from_options(tags_exact="b,a").matches(tags)
        assert not TagFilter.from_options(tags_exact="a").matches(tags)
        assert not TagFilter.from_options(tags_exact="a,b,c").matches(tags)

    def test_clauses_are_anded(self, tags):
        tag_filter = TagFilter.from_options(tags_all="a", tags_any_not="b")
        assert not tag_filter.matches(tags)
        assert tag_filter.matches(TagSet.normalize("a,c"))

    def test_prefix_requires_tag(self, tags):
        assert not TagFilter.from_options(prefix="c").matches(tags)
        assert TagFilter.from_options(prefix="b").matches(tags)
