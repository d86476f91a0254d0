"""Tests for query sanitization and tsquery expression building."""

from __future__ import annotations

import pytest

from recipe_search.search.query_preprocessor import build_tsquery_string, sanitize_search_query

# ---------------------------------------------------------------------------
# 1. Sanitization
# ---------------------------------------------------------------------------


class TestSanitizeSearchQuery:
    """Tests for sanitize_search_query."""

    def test_strips_operators_and_quotes(self):
        """tsquery operators, parentheses and apostrophes are removed."""
        assert sanitize_search_query("chicken's & pasta | (hot)") == "chickens pasta hot"

    def test_whitespace_only_returns_empty(self):
        assert sanitize_search_query("   ") == ""

    def test_empty_string_returns_empty(self):
        assert sanitize_search_query("") == ""

    def test_only_special_characters_returns_empty(self):
        """Input made entirely of metacharacters sanitizes to nothing."""
        assert sanitize_search_query("!&|():*'\"") == ""

    def test_truncates_to_200_characters(self):
        """A 250-character query is cut to at most 200 characters."""
        result = sanitize_search_query("a" * 250)
        assert len(result) == 200

    def test_truncation_does_not_leave_trailing_space(self):
        query = "word " * 50  # 250 characters
        result = sanitize_search_query(query)
        assert len(result) <= 200
        assert not result.endswith(" ")

    def test_collapses_whitespace_runs(self):
        assert sanitize_search_query("  spicy \t\n  chicken   soup ") == "spicy chicken soup"

    def test_strips_phrase_and_prefix_operators(self):
        """Phrase (<->) and prefix (:*) operators never survive."""
        assert sanitize_search_query("garlic <-> bread:*") == "garlic bread"

    def test_keeps_unicode_letters_and_digits(self):
        assert sanitize_search_query("crème brûlée 2 ways") == "crème brûlée 2 ways"

    @pytest.mark.parametrize("char", list("&|!():*'\"\\<>"))
    def test_each_metacharacter_is_removed(self, char):
        assert char not in sanitize_search_query(f"soup{char}stew")


# ---------------------------------------------------------------------------
# 2. tsquery expression building
# ---------------------------------------------------------------------------


class TestBuildTsqueryString:
    """Tests for build_tsquery_string."""

    def test_single_word_is_prefix_matched(self):
        assert build_tsquery_string("chicken") == "chicken:*"

    def test_two_words(self):
        assert build_tsquery_string("chicken pasta") == "chicken & pasta:*"

    def test_three_words(self):
        """Earlier words are AND-ed whole; only the last gets a prefix match."""
        assert build_tsquery_string("spicy chicken soup") == "spicy & chicken & soup:*"

    def test_empty_query(self):
        assert build_tsquery_string("") == ""

    def test_apostrophe_removed_before_building(self):
        assert build_tsquery_string("chicken's pasta") == "chickens & pasta:*"

    def test_punctuation_only_query_is_empty(self):
        """Nothing searchable left means no expression at all."""
        assert build_tsquery_string("!!! ((( )))") == ""

    def test_injected_operators_are_neutralised(self):
        assert build_tsquery_string("beef | !pork") == "beef & pork:*"

    def test_word_order_is_preserved(self):
        assert build_tsquery_string("soup chicken spicy") == "soup & chicken & spicy:*"
