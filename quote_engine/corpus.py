# quote_engine/corpus.py — flat-file quote corpus + author index

from __future__ import annotations
import os
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

DEBUG_MODE = True

SEPARATOR = " - "
MIN_TEXT_CHARS = 6  # texts of 5 chars or fewer are dropped


def _log(msg: str):
    if DEBUG_MODE:
        print(msg)


@dataclass(frozen=True)
class Quote:
    text: str
    author: str

    @property
    def length(self) -> int:
        return len(self.text)


class QuoteCorpus:
    """
    Read-only corpus: quotes in file order plus an author -> quotes index.
    Build a new instance to reload; never mutate one in place.
    """

    def __init__(self, quotes: Iterable[Quote] = ()):
        self._quotes: Tuple[Quote, ...] = tuple(quotes)
        grouped: Dict[str, List[Quote]] = {}
        for q in self._quotes:
            grouped.setdefault(q.author, []).append(q)
        self._by_author: Mapping[str, Tuple[Quote, ...]] = MappingProxyType(
            {author: tuple(qs) for author, qs in grouped.items()}
        )

    @property
    def quotes(self) -> Tuple[Quote, ...]:
        return self._quotes

    @property
    def by_author(self) -> Mapping[str, Tuple[Quote, ...]]:
        return self._by_author

    @property
    def authors(self) -> List[str]:
        # index (first appearance) order
        return list(self._by_author.keys())

    def position(self, quote: Quote) -> int:
        """1-based position of the first equal quote in the corpus, 0 if absent."""
        for i, q in enumerate(self._quotes):
            if q is quote:
                return i + 1
        for i, q in enumerate(self._quotes):
            if q == quote:
                return i + 1
        return 0

    def __len__(self) -> int:
        return len(self._quotes)

    def __bool__(self) -> bool:
        return bool(self._quotes)

    def __repr__(self) -> str:
        return f"QuoteCorpus(quotes={len(self._quotes)}, authors={len(self._by_author)})"


def split_quote_line(line: str) -> Optional[Tuple[str, str]]:
    """(text, author) split at the last " - ", or None if the line has no separator."""
    line = (line or "").strip()
    if not line or SEPARATOR not in line or line.startswith("- "):
        return None
    # rightmost separator wins: "A - B - C" -> ("A - B", "C")
    cut = line.rfind(SEPARATOR)
    return line[:cut].strip(), line[cut + len(SEPARATOR):].strip()


def parse_line(line: str) -> Optional[Quote]:
    """
    Parse one `"text" - Author` line. Returns None for anything that
    doesn't qualify; malformed lines are never an error.
    """
    parts = split_quote_line(line)
    if parts is None:
        return None
    text, author = parts

    # each end stripped independently, not a matched-pair check
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]

    if len(text) < MIN_TEXT_CHARS or not author:
        return None
    return Quote(text=text, author=author)


def parse_quotes(raw: str) -> QuoteCorpus:
    quotes = []
    # "\n" only; parse_line trims a trailing "\r"
    for ln in (raw or "").split("\n"):
        q = parse_line(ln)
        if q is not None:
            quotes.append(q)
    return QuoteCorpus(quotes)


def load_corpus(path: str) -> QuoteCorpus:
    """
    Read and parse the quotes file. A missing or unreadable file is logged
    and gives an empty corpus so every query degrades to "no quotes".
    """
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            raw = f.read()
    except (OSError, UnicodeDecodeError) as e:
        _log(f"❌ Error loading quotes from {os.path.basename(path)}: {e}")
        return QuoteCorpus()

    corpus = parse_quotes(raw)
    _log(f"📚 Loaded {len(corpus)} quotes from {len(corpus.by_author)} authors")
    return corpus
