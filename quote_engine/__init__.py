from .corpus import Quote, QuoteCorpus, load_corpus, parse_line, parse_quotes, split_quote_line
from .themes import MOTIVATIONAL, WISDOM, LengthBucket, Theme
from .queries import (
    CorpusStats,
    corpus_stats,
    daily_quote,
    find_author,
    quote_by_length,
    random_author,
    random_quote,
    search_quotes,
    themed_quote,
)
from .authors import AuthorPage, author_page, autocomplete_authors, levenshtein, navigate, suggest_authors

__all__ = [
    "Quote",
    "QuoteCorpus",
    "load_corpus",
    "parse_line",
    "parse_quotes",
    "split_quote_line",
    "MOTIVATIONAL",
    "WISDOM",
    "LengthBucket",
    "Theme",
    "CorpusStats",
    "corpus_stats",
    "daily_quote",
    "find_author",
    "quote_by_length",
    "random_author",
    "random_quote",
    "search_quotes",
    "themed_quote",
    "AuthorPage",
    "author_page",
    "autocomplete_authors",
    "levenshtein",
    "navigate",
    "suggest_authors",
]
