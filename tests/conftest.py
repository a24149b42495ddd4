"""Shared fixtures: small quote corpora and a bot client with Telegram stubbed out."""

import os
import sys
import random
import pytest

# Make the repo root importable (bot_server.py + quote_engine/)
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from quote_engine import Quote, QuoteCorpus, parse_quotes


SAMPLE_QUOTES = '''\
"Be the change that you wish to see in the world." - Mahatma Gandhi
"The only way to do great work is to love what you do." - Steve Jobs
"Knowing yourself is the beginning of all wisdom." - Aristotle
"Stay hungry, stay foolish." - Steve Jobs
"Live as if you were to die tomorrow. Learn as if you were to live forever." - Mahatma Gandhi
"Well done is better than well said." - Benjamin Franklin

not a quote line at all
- Orphan attribution
"Hi" - Bo
'''


@pytest.fixture
def sample_text():
    return SAMPLE_QUOTES


@pytest.fixture
def corpus():
    return parse_quotes(SAMPLE_QUOTES)


@pytest.fixture
def rng():
    return random.Random(1234)


def make_corpus(*pairs):
    """Build a corpus from (text, author) pairs."""
    return QuoteCorpus(Quote(text=t, author=a) for t, a in pairs)


@pytest.fixture
def quotes_file(tmp_path):
    path = tmp_path / "quotes.txt"
    path.write_text(SAMPLE_QUOTES, encoding="utf-8")
    return path


@pytest.fixture
def telegram_calls(monkeypatch):
    """Capture outbound Telegram API calls instead of hitting the network."""
    import bot_server

    calls = []

    async def fake_call(method, payload):
        calls.append((method, payload))
        return {"ok": True}

    monkeypatch.setattr(bot_server, "telegram_call", fake_call)
    return calls


@pytest.fixture
def bot(monkeypatch, tmp_path, quotes_file, telegram_calls):
    """TestClient over the FastAPI app, corpus loaded from a temp file."""
    from fastapi.testclient import TestClient
    import bot_server

    monkeypatch.setattr(bot_server, "QUOTES_FILE", str(quotes_file))
    monkeypatch.setattr(bot_server, "DEBUG_LOG_FILE", str(tmp_path / "debug.log"))
    monkeypatch.setattr(bot_server, "KEEPALIVE_URL", "")

    with TestClient(bot_server.app) as client:
        yield client
