"""Fuzzy author suggestions, autocomplete ranking and author list paging."""

import pytest

from quote_engine import (
    QuoteCorpus,
    author_page,
    autocomplete_authors,
    levenshtein,
    navigate,
    suggest_authors,
)
from quote_engine.authors import page_count
from conftest import make_corpus


@pytest.mark.parametrize("a,b,expected", [
    ("", "", 0),
    ("", "abc", 3),
    ("abc", "", 3),
    ("kitten", "sitting", 3),
    ("flaw", "lawn", 2),
    ("gandhi", "gandhi", 0),
])
def test_levenshtein(a, b, expected):
    assert levenshtein(a, b) == expected


def test_suggest_by_prefix_and_edit_distance():
    c = make_corpus(
        ("Some words by Twain", "Mark Twain"),
        ("Some words by Plato", "Plato"),
        ("Some words by Platon", "Platon"),
        ("Some words by Marx", "Karl Marx"),
    )
    # "mar" prefix hits Mark Twain and Karl Marx; "plto" is within 3 edits of plato
    assert suggest_authors(c, "Marcus") == ["Mark Twain", "Karl Marx"]
    assert suggest_authors(c, "plto") == ["Plato", "Platon"]
    assert suggest_authors(c, "zzzzzzzz") == []


def test_suggest_caps_at_three():
    c = make_corpus(*[(f"quote by ann {i}", f"Ann {i}") for i in range(6)])
    assert suggest_authors(c, "annx") == ["Ann 0", "Ann 1", "Ann 2"]


def test_autocomplete_tiers():
    c = make_corpus(
        ("one quote by zed", "Zed"),
        ("first quote by ro", "Robert Frost"),
        ("quote by bob roberts", "Bob Roberts"),
        ("another by bob roberts", "Bob Roberts"),
        ("quote by rob", "Rob Pike"),
        ("three by amy", "Amy"),
        ("three by amy again", "Amy"),
        ("three by amy thrice", "Amy"),
    )
    values = [v for _, v in autocomplete_authors(c, "rob")]
    # prefix tier sorted, then substring tier, then the rest by quote count
    assert values == ["Rob Pike", "Robert Frost", "Bob Roberts", "Amy", "Zed"]


def test_autocomplete_labels_and_limit():
    c = make_corpus(*[(f"quote number {i}", f"Author {i:02d}") for i in range(40)])
    choices = autocomplete_authors(c, "")
    assert len(choices) == 25
    assert choices[0] == ("Author 00 (1 quote)", "Author 00")


def test_autocomplete_empty_corpus():
    assert autocomplete_authors(QuoteCorpus(), "any") == []


def _authors(n):
    return make_corpus(*[(f"quote from author {i}", f"Author {i:02d}") for i in range(n)])


def test_pages_of_twenty():
    c = _authors(45)
    assert page_count(45) == 3
    sizes = [len(author_page(c, p).entries) for p in range(3)]
    assert sizes == [20, 20, 5]
    last = author_page(c, 2)
    assert last.entries[0] == ("Author 40", 1)
    assert (last.first_index, last.last_index) == (41, 45)
    assert last.is_last and not last.is_first


def test_author_page_sorted_and_clamped():
    c = make_corpus(("text by zoe here", "Zoe"), ("text by al here", "Al"), ("more by al here", "Al"))
    page = author_page(c, 5)
    assert page.page == 0
    assert page.entries == (("Al", 2), ("Zoe", 1))
    assert author_page(c, -3).page == 0


def test_empty_author_list_has_one_page():
    page = author_page(QuoteCorpus(), 0)
    assert page.total_pages == 1
    assert page.entries == ()
    assert page.first_index == 0


@pytest.mark.parametrize("current", [0, 1, 2])
def test_last_lands_on_final_page(current):
    assert navigate("last", current, 3) == 2


def test_navigation_clamps():
    assert navigate("first", 2, 3) == 0
    assert navigate("prev", 0, 3) == 0
    assert navigate("prev", 2, 3) == 1
    assert navigate("next", 1, 3) == 2
    assert navigate("next", 2, 3) == 2
    assert navigate("sideways", 1, 3) is None
