"""
queries.py — read-only lookups over a QuoteCorpus
-------------------------------------------------
Every function takes the corpus explicitly. Random picks go through `rng`
(any object with `choice`), so callers/tests can pass a seeded
`random.Random`.

Empty results are normal outcomes: functions return None / () / 0 and the
caller decides what to tell the user.
"""

from __future__ import annotations
import random
import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple, Union

from .corpus import Quote, QuoteCorpus
from .themes import LengthBucket, Theme

TOP_AUTHORS = 5
_HEX_PREFIX = re.compile(r"\s*([+-]?[0-9a-fA-F]+)")


def _pick(items: Sequence, rng=None):
    if not items:
        return None
    return (rng or random).choice(items)


def random_quote(corpus: QuoteCorpus, rng=None) -> Optional[Quote]:
    return _pick(corpus.quotes, rng)


def _scope_offset(scope_id) -> int:
    # longest leading hex run of the last 4 chars, 0 when there is none
    m = _HEX_PREFIX.match(str(scope_id)[-4:])
    return int(m.group(1), 16) if m else 0


def daily_index(size: int, today: Optional[date] = None, scope_id=None) -> int:
    """
    seed = day + month0 * 31 (+ last four chars of scope_id read as hex).
    Stable for a given date + scope; collisions across days are allowed.
    """
    today = today or date.today()
    seed = today.day + (today.month - 1) * 31
    if scope_id is not None and str(scope_id) != "":
        seed += _scope_offset(scope_id)
    return seed % size


def daily_quote(corpus: QuoteCorpus, today: Optional[date] = None, scope_id=None) -> Optional[Quote]:
    if not corpus:
        return None
    return corpus.quotes[daily_index(len(corpus), today, scope_id)]


def find_author(corpus: QuoteCorpus, search: str) -> Tuple[Optional[str], Tuple[Quote, ...]]:
    """
    First author key (index order) containing `search`, case-insensitive.
    Not a best-match: "an" picks whichever matching author was loaded first.
    """
    needle = (search or "").lower()
    for author, quotes in corpus.by_author.items():
        if needle in author.lower():
            return author, quotes
    return None, ()


def search_quotes(corpus: QuoteCorpus, keywords: str) -> List[Quote]:
    """All quotes where every whitespace-separated keyword hits text or author."""
    terms = [t.lower() for t in (keywords or "").split()]
    out = []
    for q in corpus.quotes:
        text, author = q.text.lower(), q.author.lower()
        if all(t in text or t in author for t in terms):
            out.append(q)
    return out


def theme_matches(corpus: QuoteCorpus, theme: Theme) -> List[Quote]:
    out = []
    for q in corpus.quotes:
        text, author = q.text.lower(), q.author.lower()
        if any(k in text for k in theme.keywords) or any(a in author for a in theme.authors):
            out.append(q)
    return out


def themed_quote(corpus: QuoteCorpus, theme: Theme, rng=None) -> Tuple[Optional[Quote], int]:
    """
    Random quote matching the theme, plus how many matched. With no matches
    it falls back to any random quote (count stays 0).
    """
    pool = theme_matches(corpus, theme)
    if pool:
        return _pick(pool, rng), len(pool)
    return random_quote(corpus, rng), 0


def length_matches(corpus: QuoteCorpus, bucket: Union[LengthBucket, str]) -> List[Quote]:
    bucket = LengthBucket(bucket)
    return [q for q in corpus.quotes if bucket.contains(q.length)]


def quote_by_length(corpus: QuoteCorpus, bucket: Union[LengthBucket, str], rng=None) -> Tuple[Optional[Quote], int]:
    pool = length_matches(corpus, bucket)
    return _pick(pool, rng), len(pool)


def random_author(corpus: QuoteCorpus, rng=None) -> Optional[Tuple[str, Quote]]:
    authors = corpus.authors
    if not authors:
        return None
    author = _pick(authors, rng)
    return author, _pick(corpus.by_author[author], rng)


@dataclass(frozen=True)
class CorpusStats:
    total_quotes: int
    total_authors: int
    average_length: int
    top_authors: List[Tuple[str, int]]
    shortest: Optional[Quote]
    longest: Optional[Quote]


def _round_half_up(x: float) -> int:
    return int(x + 0.5)


def corpus_stats(corpus: QuoteCorpus, top_n: int = TOP_AUTHORS) -> CorpusStats:
    quotes = corpus.quotes
    avg = _round_half_up(sum(q.length for q in quotes) / len(quotes)) if quotes else 0

    # sorted() is stable, so equal counts keep index order
    counts = [(author, len(qs)) for author, qs in corpus.by_author.items()]
    top = sorted(counts, key=lambda kv: -kv[1])[:top_n]

    shortest = longest = None
    for q in quotes:
        if shortest is None or q.length < shortest.length:
            shortest = q
        if longest is None or q.length > longest.length:
            longest = q

    return CorpusStats(
        total_quotes=len(quotes),
        total_authors=len(corpus.by_author),
        average_length=avg,
        top_authors=top,
        shortest=shortest,
        longest=longest,
    )
