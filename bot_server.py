# bot_server.py — Quote Bot front door (Telegram webhook + health)
# Features:
# - Slash commands over a read-only quote corpus (quote_engine)
# - Daily quote varies per chat
# - Author browser with inline-keyboard paging (page number lives in callback data)
# - Inline-query author autocomplete
# - Health/status endpoints, /reload, /logs
# - Optional keep-alive ping

from fastapi import FastAPI, Request
import httpx
import os
import time
import random
import asyncio
from datetime import datetime
from dotenv import load_dotenv
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse, PlainTextResponse

from quote_engine import (
    MOTIVATIONAL,
    WISDOM,
    LengthBucket,
    QuoteCorpus,
    author_page,
    autocomplete_authors,
    corpus_stats,
    daily_quote,
    find_author,
    load_corpus,
    navigate,
    quote_by_length,
    random_author,
    random_quote,
    search_quotes,
    suggest_authors,
    themed_quote,
)

# === Config ===
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
load_dotenv(dotenv_path=os.path.join(BASE_DIR, ".env"))

QUOTES_FILE = os.getenv("QUOTES_FILE", os.path.join(BASE_DIR, "quotes.txt"))
DEBUG_LOG_FILE = os.getenv("DEBUG_LOG_FILE", os.path.join(BASE_DIR, "quotebot_debug.log"))

TELEGRAM_TOKEN = os.getenv("BOT_TOKEN")
TELEGRAM_API = f"https://api.telegram.org/bot{TELEGRAM_TOKEN}" if TELEGRAM_TOKEN else ""

KEEPALIVE_URL = os.getenv("KEEPALIVE_URL", "").strip()
KEEPALIVE_INTERVAL = int(os.getenv("KEEPALIVE_INTERVAL", "600"))
DAILY_PER_CHAT = os.getenv("DAILY_PER_CHAT", "1").strip().lower() in ("1","true","yes","on")

NO_QUOTES = "❌ No quotes available at the moment."
ERROR_REPLY = "❌ An error occurred while processing your request."

HELP_TEXT = "\n".join([
    "📚 Quote Bot commands:",
    "/quote — random quote",
    "/dailyquote — quote of the day",
    "/quotebyauthor <name> — quote by an author",
    "/searchquote <words> — quotes containing all the words",
    "/quotestats — collection statistics",
    "/authorlist — browse authors",
    "/randomauthor — quote from a random author",
    "/motivational — motivational quote",
    "/wisdom — wisdom quote",
    "/quotelength short|medium|long — quote by length",
    "",
    "Type @<bot> <author> in any chat for author suggestions.",
])

# === App + logger ===
app = FastAPI()
START_TIME = time.time()

def log_debug(msg: str):
    print(msg)
    try:
        with open(DEBUG_LOG_FILE, "a", encoding="utf-8") as f:
            f.write(f"{datetime.utcnow().isoformat()} {msg}\n")
    except OSError:
        pass

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"], allow_credentials=True,
    allow_methods=["*"], allow_headers=["*"]
)

# === Security: only public endpoints skip the IP/UA check ===
PUBLIC_PATHS = ["/", "/health", "/api/telegram"]
ALLOWED_IPS = ["127.0.0.1"]
ALLOWED_USER_AGENTS = ["TelegramBot", "curl"]
TELEGRAM_IP_PREFIXES = ["91.108.", "149.154."]

@app.middleware("http")
async def filter_requests(request: Request, call_next):
    client_ip = request.client.host if request.client else ""
    ua = request.headers.get("User-Agent", "")

    if request.url.path in PUBLIC_PATHS:
        return await call_next(request)

    if (client_ip not in ALLOWED_IPS and
        not any(tag in ua for tag in ALLOWED_USER_AGENTS) and
        not any(client_ip.startswith(p) for p in TELEGRAM_IP_PREFIXES)):
        log_debug(f"⚠️ BLOCKED IP/User-Agent: {client_ip} | {ua}")
        return JSONResponse(status_code=403, content={"detail": "Forbidden"})

    return await call_next(request)

# === Corpus (built once; reload swaps the reference) ===
corpus = QuoteCorpus()

def reload_corpus() -> QuoteCorpus:
    global corpus
    corpus = load_corpus(QUOTES_FILE)
    log_debug(f"📚 Corpus ready: {len(corpus)} quotes | {len(corpus.by_author)} authors")
    return corpus

# === Rendering ===
def render_quote(quote, title: str = "💬 Inspirational Quote", src: QuoteCorpus | None = None) -> str:
    src = src if src is not None else corpus
    lines = [title, "", f"“{quote.text}”", f"— {quote.author}"]
    pos = src.position(quote)
    if pos:
        lines += ["", f"Quote {pos} of {len(src)}"]
    return "\n".join(lines)

def render_stats(src: QuoteCorpus) -> str:
    stats = corpus_stats(src)
    lines = [
        "📊 Quote Collection Statistics",
        f"Total Quotes: {stats.total_quotes}",
        f"Total Authors: {stats.total_authors}",
        f"Average Quote Length: {stats.average_length} characters",
    ]
    if stats.top_authors:
        lines.append("")
        lines.append("Top Authors:")
        for i, (author, n) in enumerate(stats.top_authors, 1):
            lines.append(f"{i}. {author} ({n} quote{'s' if n != 1 else ''})")
    if stats.shortest:
        lines.append("")
        lines.append(f"Shortest ({stats.shortest.length} chars): “{stats.shortest.text}” — {stats.shortest.author}")
        lines.append(f"Longest ({stats.longest.length} chars): “{stats.longest.text}” — {stats.longest.author}")
    return "\n".join(lines)

def render_author_page(page) -> str:
    if not page.entries:
        return "👥 Authors in Collection\n\nNo authors loaded."
    body = "\n".join(f"{a} ({n})" for a, n in page.entries)
    footer = (f"Showing {page.first_index}-{page.last_index} of {page.total_authors} authors"
              f" • Page {page.page + 1}/{page.total_pages}")
    return f"👥 Authors in Collection\n\n{body}\n\n{footer}"

def author_keyboard(page) -> dict | None:
    if page.total_pages <= 1:
        return None
    glyphs = {"first": "⏮", "prev": "◀", "next": "▶", "last": "⏭"}
    row = [{"text": glyphs[a], "callback_data": f"authors:{a}:{page.page}"}
           for a in ("first", "prev", "next", "last")]
    return {"inline_keyboard": [row]}

# === Command handlers ===
# each returns (text, reply_markup)

def _parse_command(text: str):
    parts = (text or "").strip().split(maxsplit=1)
    if not parts or not parts[0].startswith("/"):
        return None, ""
    name = parts[0][1:].split("@", 1)[0].lower()
    args = parts[1].strip() if len(parts) > 1 else ""
    return name, args

def cmd_quote(src, args, chat_id, rng):
    q = random_quote(src, rng)
    return (render_quote(q, src=src) if q else NO_QUOTES), None

def cmd_dailyquote(src, args, chat_id, rng):
    scope = chat_id if DAILY_PER_CHAT else None
    q = daily_quote(src, scope_id=scope)
    if not q:
        return "❌ No daily quote available.", None
    return render_quote(q, "🌅 Daily Quote", src), None

def cmd_quotebyauthor(src, args, chat_id, rng):
    if not args:
        return "Usage: /quotebyauthor <author name>", None
    if not src:
        return NO_QUOTES, None
    author, quotes = find_author(src, args)
    if not author:
        reply = f"❌ No quotes found for author: \"{args}\""
        hints = suggest_authors(src, args)
        if hints:
            reply += "\nDid you mean: " + ", ".join(hints) + "?"
        return reply, None
    q = (rng or random).choice(quotes)
    return render_quote(q, f"📖 Quote by {author} ({len(quotes)} available)", src), None

def cmd_searchquote(src, args, chat_id, rng):
    if not args:
        return "Usage: /searchquote <keywords>", None
    if not src:
        return NO_QUOTES, None
    results = search_quotes(src, args)
    if not results:
        return f"❌ No quotes found containing: \"{args}\"", None
    q = (rng or random).choice(results)
    return render_quote(q, f"🔍 Quote containing \"{args}\" ({len(results)} matches)", src), None

def cmd_quotestats(src, args, chat_id, rng):
    if not src:
        return NO_QUOTES, None
    return render_stats(src), None

def cmd_authorlist(src, args, chat_id, rng):
    page = author_page(src, 0)
    return render_author_page(page), author_keyboard(page)

def cmd_randomauthor(src, args, chat_id, rng):
    picked = random_author(src, rng)
    if not picked:
        return NO_QUOTES, None
    author, q = picked
    return render_quote(q, f"🎲 Random quote by {author}", src), None

def _themed(src, theme, title, rng):
    q, n = themed_quote(src, theme, rng)
    if not q:
        return NO_QUOTES, None
    if n:
        title = f"{title} ({n} in theme)"
    return render_quote(q, title, src), None

def cmd_motivational(src, args, chat_id, rng):
    return _themed(src, MOTIVATIONAL, "💪 Motivational Quote", rng)

def cmd_wisdom(src, args, chat_id, rng):
    return _themed(src, WISDOM, "🧠 Wisdom Quote", rng)

def cmd_quotelength(src, args, chat_id, rng):
    try:
        bucket = LengthBucket((args or "").strip().lower())
    except ValueError:
        choices = "\n".join(f"• {b.value}: {b.label}" for b in LengthBucket)
        return f"Usage: /quotelength short|medium|long\n{choices}", None
    q, n = quote_by_length(src, bucket, rng)
    title = f"📏 {bucket.value.capitalize()} Quote"
    if q:
        return render_quote(q, f"{title} ({n} available)", src), None
    # empty bucket: fall back to any quote
    q = random_quote(src, rng)
    if not q:
        return NO_QUOTES, None
    return render_quote(q, f"{title} — none matched, here's a random one", src), None

def cmd_help(src, args, chat_id, rng):
    return HELP_TEXT, None

COMMANDS = {
    "start": cmd_help,
    "help": cmd_help,
    "quote": cmd_quote,
    "dailyquote": cmd_dailyquote,
    "quotebyauthor": cmd_quotebyauthor,
    "searchquote": cmd_searchquote,
    "quotestats": cmd_quotestats,
    "authorlist": cmd_authorlist,
    "randomauthor": cmd_randomauthor,
    "motivational": cmd_motivational,
    "wisdom": cmd_wisdom,
    "quotelength": cmd_quotelength,
}

def handle_command(text: str, chat_id=None, src: QuoteCorpus | None = None, rng=None):
    """Dispatch one chat message. Returns (text, reply_markup) or None if it isn't a command."""
    name, args = _parse_command(text)
    if name is None:
        return None
    src = src if src is not None else corpus
    handler = COMMANDS.get(name, cmd_help)
    try:
        return handler(src, args, chat_id, rng)
    except Exception as e:
        log_debug(f"Command error (/{name}): {e}")
        return ERROR_REPLY, None

def handle_author_nav(data: str, src: QuoteCorpus | None = None):
    """
    callback_data "authors:<action>:<page>" -> (page, changed) or None.
    The shown page comes from the button itself, not from message text.
    """
    try:
        prefix, action, current = data.split(":")
        current = int(current)
    except (AttributeError, ValueError):
        return None
    if prefix != "authors":
        return None
    src = src if src is not None else corpus
    total = author_page(src, 0).total_pages
    target = navigate(action, current, total)
    if target is None:
        return None
    return author_page(src, target), target != current

def inline_results(query: str, src: QuoteCorpus | None = None, rng=None) -> list:
    src = src if src is not None else corpus
    results = []
    for i, (label, author) in enumerate(autocomplete_authors(src, query)):
        q = (rng or random).choice(src.by_author[author])
        results.append({
            "type": "article",
            "id": str(i),
            "title": label,
            "description": q.text[:100],
            "input_message_content": {"message_text": render_quote(q, f"📖 Quote by {author}", src)},
        })
    return results

# === Telegram API ===
async def telegram_call(method: str, payload: dict):
    if not TELEGRAM_API:
        log_debug(f"❗ Telegram BOT_TOKEN missing; {method} is NO-OP.")
        return None
    try:
        async with httpx.AsyncClient(timeout=httpx.Timeout(15.0, connect=5.0)) as client:
            r = await client.post(f"{TELEGRAM_API}/{method}", json=payload)
            return r.json()
    except Exception as e:
        log_debug(f"Telegram {method} error: {e}")
        return None

async def send_reply(chat_id, text, reply_markup=None):
    payload = {"chat_id": chat_id, "text": text}
    if reply_markup:
        payload["reply_markup"] = reply_markup
    await telegram_call("sendMessage", payload)

# === Telegram webhook ===
@app.post("/api/telegram")
async def telegram_webhook(request: Request):
    try:
        body = await request.json()
    except Exception:
        return {"ok": False, "error": "Invalid JSON"}

    if body.get("callback_query"):
        await on_callback_query(body["callback_query"])
        return {"ok": True}

    if body.get("inline_query"):
        iq = body["inline_query"]
        await telegram_call("answerInlineQuery", {
            "inline_query_id": iq.get("id"),
            "results": inline_results(iq.get("query") or ""),
            "cache_time": 60,
        })
        return {"ok": True}

    message = body.get("message", {}) or {}
    chat_id = (message.get("chat", {}) or {}).get("id")
    user_text = (message.get("text") or "").strip()
    if not chat_id or not user_text:
        return {"ok": False}

    if user_text.lower().split()[0] == "/reload":
        reload_corpus()
        await send_reply(chat_id, f"✅ Reloaded. Quotes: {len(corpus)} | Authors: {len(corpus.by_author)}")
        return {"ok": True}

    reply = handle_command(user_text, chat_id)
    if reply is None:
        return {"ok": True}
    text, markup = reply
    await send_reply(chat_id, text, markup)
    return {"ok": True}

async def on_callback_query(cq: dict):
    nav = handle_author_nav(cq.get("data") or "")
    msg = cq.get("message") or {}
    chat_id = (msg.get("chat") or {}).get("id")
    if nav and chat_id:
        page, changed = nav
        if changed:
            payload = {
                "chat_id": chat_id,
                "message_id": msg.get("message_id"),
                "text": render_author_page(page),
            }
            markup = author_keyboard(page)
            if markup:
                payload["reply_markup"] = markup
            await telegram_call("editMessageText", payload)
    await telegram_call("answerCallbackQuery", {"callback_query_id": cq.get("id")})

# === HTTP endpoints ===
@app.get("/")
async def root():
    return {
        "status": "Bot is running!",
        "uptime": round(time.time() - START_TIME, 1),
        "timestamp": datetime.utcnow().isoformat(),
    }

@app.get("/health")
async def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "components": {
            "quotes_loaded": len(corpus),
            "authors_loaded": len(corpus.by_author),
            "telegram_configured": bool(TELEGRAM_API),
            "keepalive": bool(KEEPALIVE_URL),
        }
    }

@app.post("/reload")
async def reload_quotes():
    src = reload_corpus()
    return {"status": "ok", "quotes": len(src), "authors": len(src.by_author)}

@app.get("/logs")
async def get_logs():
    try:
        if not os.path.exists(DEBUG_LOG_FILE):
            return PlainTextResponse("No logs found.")
        with open(DEBUG_LOG_FILE, "r", encoding="utf-8") as f:
            lines = f.readlines()[-200:]
        return PlainTextResponse("".join(lines))
    except OSError as e:
        return PlainTextResponse(f"Log read error: {e}")

# === Keep-alive ===
_keepalive_task = None

async def keepalive_loop(url: str, interval: int):
    while True:
        await asyncio.sleep(interval)
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(15.0, connect=5.0)) as client:
                r = await client.get(url)
            log_debug(f"🔁 Keep-alive ping {r.status_code}")
        except Exception as e:
            log_debug(f"Keep-alive ping failed: {e}")

# === Startup ===
@app.on_event("startup")
async def startup_event():
    global _keepalive_task
    reload_corpus()
    if KEEPALIVE_URL:
        _keepalive_task = asyncio.create_task(keepalive_loop(KEEPALIVE_URL, KEEPALIVE_INTERVAL))
    log_debug("✨ Quote Bot is ready.")

@app.on_event("shutdown")
async def shutdown_event():
    global _keepalive_task
    if _keepalive_task:
        _keepalive_task.cancel()
        _keepalive_task = None

# === Run (optional local) ===
if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
