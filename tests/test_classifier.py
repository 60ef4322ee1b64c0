"""
Tests for the package classifier — ordered keyword table matching.
"""

import pytest

from brewdeck.core.services.classifier import (
    CATEGORY_TABLE,
    FALLBACK_CATEGORY,
    Category,
    build_table,
    classify,
    fallback_name,
)

# ── Built-in table ───────────────────────────────────────────────────


class TestClassify:
    def test_single_keyword_match(self):
        assert classify("SQL database server") == "Databases"

    def test_case_insensitive(self):
        assert classify("VIRTUAL machines") == "Virtualization"

    def test_first_declared_category_wins(self):
        # "log" and "video" both match; Monitoring is declared first
        assert classify("video log viewer") == "Monitoring & Diagnostics"

    def test_keyword_order_within_earlier_category_irrelevant_to_later(self):
        # "editor" is in both Image & Graphics and Text & Document
        assert classify("Markdown editor") == "Image & Graphics"

    def test_substring_matching(self):
        # "dev" is a substring of "developer"
        assert classify("A developer's friend") == "Development Tools"

    def test_no_match_returns_fallback(self):
        assert classify("zzz qqq") == FALLBACK_CATEGORY

    def test_empty_and_none(self):
        assert classify("") == FALLBACK_CATEGORY
        assert classify(None) == FALLBACK_CATEGORY

    def test_deterministic(self):
        desc = "Play, record, convert, and stream audio and video"
        assert {classify(desc) for _ in range(10)} == {classify(desc)}

    def test_every_category_reachable(self):
        for category in CATEGORY_TABLE:
            if category.is_fallback:
                continue
            # a description consisting of only this category's first keyword
            # lands here or in an earlier category that shares a substring
            result = classify(category.keywords[0])
            names = [c.name for c in CATEGORY_TABLE]
            assert names.index(result) <= names.index(category.name)


class TestCustomTable:
    def test_custom_order(self):
        table = (
            Category("B", ("beta",)),
            Category("A", ("alpha", "beta")),
            Category("Misc"),
        )
        assert classify("alpha beta", table) == "B"
        assert classify("alpha", table) == "A"
        assert classify("gamma", table) == "Misc"

    def test_fallback_name(self):
        assert fallback_name(CATEGORY_TABLE) == "Other"
        assert fallback_name((Category("X", ("x",)), Category("Rest"))) == "Rest"


# ── Table construction ───────────────────────────────────────────────


class TestBuildTable:
    def test_lowercases_keywords(self):
        table = build_table([("Net", ["HTTP"]), ("Other", [])])
        assert table[0].keywords == ("http",)
        assert classify("an http client", table) == "Net"

    def test_requires_fallback(self):
        with pytest.raises(ValueError, match="exactly one fallback"):
            build_table([("Net", ["http"])])

    def test_rejects_two_fallbacks(self):
        with pytest.raises(ValueError, match="exactly one fallback"):
            build_table([("A", []), ("B", [])])

    def test_fallback_must_be_last(self):
        with pytest.raises(ValueError, match="declared last"):
            build_table([("Other", []), ("Net", ["http"])])

    def test_rejects_duplicates(self):
        with pytest.raises(ValueError, match="unique"):
            build_table([("Net", ["http"]), ("Net", ["ssh"]), ("Other", [])])

    def test_rejects_empty(self):
        with pytest.raises(ValueError, match="empty"):
            build_table([])
