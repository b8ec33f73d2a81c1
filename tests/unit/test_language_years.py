"""
Unit tests for language + experience years extraction.

Tests the alias table, the segment pass, the whole-text pass and the rule
that a value with years is never replaced by one without.
"""

import pytest

from anken.contexts.intake.language_codec import LanguagePair
from anken.contexts.intake.language_years import canonical_language, extract_language_years


def pairs(*items):
    return [LanguagePair(*item) for item in items]


class TestCanonicalLanguage:
    """Tests for canonical_language."""

    @pytest.mark.parametrize(
        "alias, expected",
        [("js", "JavaScript"), ("Node.js", "JavaScript"), ("golang", "Go"), ("C#", "C#")],
    )
    def test_known_alias(self, alias, expected):
        """Aliases map onto one canonical name."""
        assert canonical_language(alias) == expected

    def test_unknown_name_kept(self):
        """Unknown names are trimmed and kept."""
        assert canonical_language(" Elixir ") == "Elixir"


class TestYearsForms:
    """Tests for the ways years are attached to a language."""

    def test_years_after_name(self):
        """Years right after the name, with 以上."""
        assert extract_language_years("Java 3年以上") == pairs(("Java", "3年以上"))

    def test_years_in_parentheses(self):
        """Years in parentheses after the name."""
        assert extract_language_years("Python(3年以上)") == pairs(("Python", "3年以上"))

    def test_years_after_colon(self):
        """Years after a full-width colon."""
        assert extract_language_years("Go：2年") == pairs(("Go", "2年"))

    def test_years_after_experience_word(self):
        """Years after 経験."""
        assert extract_language_years("Java 経験 5年") == pairs(("Java", "5年"))

    def test_years_before_name_japanese(self):
        """Years joined to a later name by の."""
        assert extract_language_years("3年のTypeScript") == pairs(("TypeScript", "3年"))

    def test_years_before_name_english(self):
        """The English form N years of reads as N年."""
        assert extract_language_years("3 years of Python") == pairs(("Python", "3年"))

    def test_decimal_years(self):
        """Fractional years are kept."""
        assert extract_language_years("Python 1.5年") == pairs(("Python", "1.5年"))

    def test_full_width_input(self):
        """Full-width names and digits are normalized first."""
        assert extract_language_years("Ｊａｖａ　３年") == pairs(("Java", "3年"))

    def test_calendar_year_is_not_experience(self):
        """A four-digit year is not experience."""
        assert extract_language_years("2024年からJava") == pairs(("Java", ""))


class TestSegmentation:
    """Tests for segment splitting and ordering."""

    def test_years_kept_with_their_own_language(self):
        """Each language keeps the years written after it."""
        result = extract_language_years("Java 3年 Python 2年")
        assert result == pairs(("Java", "3年"), ("Python", "2年"))

    def test_names_without_years_kept(self):
        """Names without years appear with empty years."""
        result = extract_language_years("node.js / TypeScript")
        assert result == pairs(("JavaScript", ""), ("TypeScript", ""))

    def test_first_mention_order(self):
        """Pairs follow the order of first mention."""
        result = extract_language_years("Go、Ruby、PHP")
        assert [pair.name for pair in result] == ["Go", "Ruby", "PHP"]

    def test_symbol_aliases(self):
        """C# and C++ are found despite their symbols."""
        assert extract_language_years("C#とC++") == pairs(("C#", ""), ("C++", ""))


class TestAliasBoundaries:
    """Tests that short aliases only match as whole words."""

    def test_java_not_inside_javascript(self):
        """java never matches inside JavaScript."""
        assert extract_language_years("JavaScript 2年") == pairs(("JavaScript", "2年"))

    def test_go_not_inside_google(self):
        """go never matches inside Google."""
        assert extract_language_years("Google Cloud") == []

    def test_js_not_inside_json(self):
        """js never matches inside JSON."""
        assert extract_language_years("JSON API") == []


class TestYearsPrecedence:
    """Tests for the years-bearing value rule."""

    def test_later_years_replace_bare_name(self):
        """A later mention with years fills a bare name."""
        assert extract_language_years("Java, Java 3年") == pairs(("Java", "3年"))

    def test_bare_name_never_replaces_years(self):
        """A later bare mention keeps the years."""
        assert extract_language_years("Java 3年, Java") == pairs(("Java", "3年"))

    @pytest.mark.parametrize("text", [None, "", "特になし"])
    def test_nothing_found(self, text):
        """No known language gives an empty list."""
        assert extract_language_years(text) == []
