# quote_engine/authors.py — fuzzy author lookup, autocomplete, paginated author list

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .corpus import QuoteCorpus
from .themes import AUTHORS_PER_PAGE, MAX_AUTOCOMPLETE, MAX_SUGGESTIONS

NAV_ACTIONS = ("first", "prev", "next", "last")


def levenshtein(a: str, b: str) -> int:
    """Single-character insert/delete/substitute edit distance."""
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        cur = [i]
        for j, cb in enumerate(b, 1):
            cost = 0 if ca == cb else 1
            cur.append(min(prev[j] + 1, cur[j - 1] + 1, prev[j - 1] + cost))
        prev = cur
    return prev[-1]


def suggest_authors(corpus: QuoteCorpus, search: str, limit: int = MAX_SUGGESTIONS) -> List[str]:
    """
    "Did you mean" candidates for a search that matched no author:
    shares the first 3 chars of the term, or is within edit distance 3.
    """
    term = (search or "").lower()
    prefix = term[:3]
    out = []
    for author in corpus.by_author:
        name = author.lower()
        if prefix in name or levenshtein(name, term) <= 3:
            out.append(author)
            if len(out) >= limit:
                break
    return out


def autocomplete_authors(corpus: QuoteCorpus, typed: str, limit: int = MAX_AUTOCOMPLETE) -> List[Tuple[str, str]]:
    """
    (label, value) choices: prefix hits, then substring hits (both sorted),
    then everyone else by quote count.
    """
    typed = (typed or "").lower()
    starts, contains, rest = [], [], []
    for author in corpus.by_author:
        name = author.lower()
        if name.startswith(typed):
            starts.append(author)
        elif typed in name:
            contains.append(author)
        else:
            rest.append(author)

    rest.sort(key=lambda a: -len(corpus.by_author[a]))
    ranked = sorted(starts) + sorted(contains) + rest

    out = []
    for author in ranked[:limit]:
        n = len(corpus.by_author[author])
        out.append((f"{author} ({n} quote{'s' if n != 1 else ''})", author))
    return out


# ==== Author list pagination ====

@dataclass(frozen=True)
class AuthorPage:
    page: int
    total_pages: int
    total_authors: int
    entries: Tuple[Tuple[str, int], ...]

    @property
    def first_index(self) -> int:
        # 1-based, for "Showing a-b of n"
        return self.page * AUTHORS_PER_PAGE + 1 if self.entries else 0

    @property
    def last_index(self) -> int:
        return self.page * AUTHORS_PER_PAGE + len(self.entries)

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page >= self.total_pages - 1


def page_count(total_authors: int, per_page: int = AUTHORS_PER_PAGE) -> int:
    return max(1, -(-total_authors // per_page))


def author_page(corpus: QuoteCorpus, page: int = 0, per_page: int = AUTHORS_PER_PAGE) -> AuthorPage:
    authors = sorted(corpus.by_author)
    total = page_count(len(authors), per_page)
    page = min(max(page, 0), total - 1)
    chunk = authors[page * per_page:(page + 1) * per_page]
    return AuthorPage(
        page=page,
        total_pages=total,
        total_authors=len(authors),
        entries=tuple((a, len(corpus.by_author[a])) for a in chunk),
    )


def navigate(action: str, current: int, total_pages: int) -> Optional[int]:
    """Target page for a nav button, or None for an unknown action."""
    last = max(total_pages - 1, 0)
    if action == "first":
        return 0
    if action == "prev":
        return max(current - 1, 0)
    if action == "next":
        return min(current + 1, last)
    if action == "last":
        return last
    return None
