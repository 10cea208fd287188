"""
==============================================================================
Search Index Tests
==============================================================================
"""

from wpcatalog.catalog.normalizer import ProductNormalizer
from wpcatalog.catalog.search import SearchIndex

from conftest import make_record


def products(*names, descriptions=None):
    normalizer = ProductNormalizer()
    descriptions = descriptions or {}
    return [
        normalizer.normalize(make_record(index, name, description=descriptions.get(name, "")))
        for index, name in enumerate(names, start=1)
    ]


class TestSearchIndex:
    """Fuzzy search contract."""

    def test_foo_matches_only_foo_bar(self):
        index = SearchIndex(products("Foo Bar", "Baz"))
        assert [p.name for p in index.search("foo")] == ["Foo Bar"]

    def test_empty_query_returns_nothing(self):
        index = SearchIndex(products("Foo Bar", "Baz"))

        assert index.search("") == []
        assert index.search("   ") == []
        assert index.search(None) == []

    def test_no_match_returns_empty_list(self):
        index = SearchIndex(products("Foo Bar", "Baz"))
        assert index.search("qqqqqq") == []

    def test_at_most_twenty_results(self):
        names = [f"Astra Child {n}" for n in range(30)]
        index = SearchIndex(products(*names))

        results = index.search("astra")

        assert len(results) == 20
        # equal scores keep snapshot order
        assert [p.name for p in results] == names[:20]

    def test_deterministic_order(self):
        snapshot = products("Elementor Pro", "Elements Kit", "Element Pack", "Divi")
        first = [p.name for p in SearchIndex(snapshot).search("element")]
        second = [p.name for p in SearchIndex(snapshot).search("element")]

        assert first == second
        assert "Divi" not in first

    def test_better_match_ranks_first(self):
        index = SearchIndex(products("Yoast Helper", "WooCommerce Subscriptions"))
        results = index.search("subscriptions")
        assert results[0].name == "WooCommerce Subscriptions"

    def test_description_is_searched_without_markup(self):
        snapshot = products(
            "Alpha",
            "Beta",
            descriptions={"Beta": "<p>Drag &amp; drop <strong>page builder</strong></p>"},
        )
        assert [p.name for p in SearchIndex(snapshot).search("page builder")] == ["Beta"]

    def test_short_name_does_not_match_longer_query(self):
        """A one-letter name is not a hit for every query containing that letter."""
        index = SearchIndex([{"name": "X"}, {"name": "Yoast SEO"}])

        names = [hit.item["name"] for hit in index.hits("xml sitemap generator")]

        assert "X" not in names

    def test_partial_word_still_matches(self):
        index = SearchIndex(products("Astra Pro", "Divi"))
        assert [p.name for p in index.search("astr")] == ["Astra Pro"]

    def test_case_insensitive(self):
        index = SearchIndex(products("WPForms"))
        assert [p.name for p in index.search("WPFORMS")] == ["WPForms"]

    def test_hits_carry_scores(self):
        hits = SearchIndex(products("Foo Bar")).hits("foo")
        assert hits[0].score == 100
        assert hits[0].position == 0

    def test_works_on_plain_mappings(self):
        index = SearchIndex([{"name": "Foo Bar"}, {"name": "Baz"}])
        assert index.search("foo") == [{"name": "Foo Bar"}]

    def test_limit_and_cutoff_configurable(self):
        snapshot = products("Foo One", "Foo Two", "Foo Three")
        assert len(SearchIndex(snapshot, limit=2).search("foo")) == 2
        assert SearchIndex(snapshot, score_cutoff=101).search("foo") == []
