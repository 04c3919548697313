"""Tests for infrastructure.i18n.tags module."""

import pytest

from infrastructure.i18n.models import UNDEFINED, LanguageTag
from infrastructure.i18n.tags import parse_accept_language, parse_tag


class TestParseTag:
    """Tests for parse_tag()."""

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("en-US", LanguageTag("en", territory="US")),
            ("en_US", LanguageTag("en", territory="US")),
            ("EN-us", LanguageTag("en", territory="US")),
            ("el", LanguageTag("el")),
            ("el-GR", LanguageTag("el", territory="GR")),
        ],
    )
    def test_parses_known_codes(self, code, expected):
        """parse_tag() normalizes separators and case."""
        assert parse_tag(code) == expected

    @pytest.mark.parametrize("code", ["", None, "*", "not a tag", "xx-YY", "welcome", "root"])
    def test_invalid_codes_are_undefined(self, code):
        """parse_tag() returns UNDEFINED instead of raising."""
        assert parse_tag(code) == UNDEFINED

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("el-US", LanguageTag("el", territory="US")),
            ("de-US", LanguageTag("de", territory="US")),
            ("fr_US", LanguageTag("fr", territory="US")),
            ("en-ZZ", LanguageTag("en", territory="ZZ")),
            ("sr-latn-RS", LanguageTag("sr", script="Latn", territory="RS")),
        ],
    )
    def test_keeps_subtags_without_locale_data(self, code, expected):
        """A known language keeps its region and script as given."""
        assert parse_tag(code) == expected

    def test_string_form(self):
        """Parsed tags render in BCP 47 form."""
        assert str(parse_tag("el_GR")) == "el-GR"


class TestParseAcceptLanguage:
    """Tests for parse_accept_language()."""

    def test_orders_by_quality(self):
        """Entries are sorted by quality, highest first."""
        tags = parse_accept_language("fr-FR;q=0.5,el-GR,en;q=0.8")
        assert [str(tag) for tag in tags] == ["el-GR", "en", "fr-FR"]

    def test_equal_quality_keeps_header_order(self):
        """Entries with the same quality keep their header order."""
        tags = parse_accept_language("el,en")
        assert [str(tag) for tag in tags] == ["el", "en"]

    def test_skips_wildcard_zero_quality_and_unknown(self):
        """Wildcards, q=0 entries and unknown ranges are skipped."""
        tags = parse_accept_language("*,xx-YY,fr;q=0,en-US")
        assert [str(tag) for tag in tags] == ["en-US"]

    def test_invalid_quality_is_dropped(self):
        """An unparsable quality drops the entry."""
        tags = parse_accept_language("en;q=0.4,el;q=abc")
        assert [str(tag) for tag in tags] == ["en"]

    def test_regions_without_locale_data(self):
        """Language and region pairs unknown to CLDR are kept."""
        tags = parse_accept_language("de-US,en;q=0.1")
        assert tags == [LanguageTag("de", territory="US"), LanguageTag("en")]

    @pytest.mark.parametrize("header", [None, "", " , "])
    def test_empty_header(self, header):
        """Empty headers yield no tags."""
        assert parse_accept_language(header) == []
