# quote_engine/themes.py
from enum import Enum
from typing import NamedTuple, Tuple

# ==== Theme policy ====

class Theme(NamedTuple):
    name: str
    keywords: Tuple[str, ...]
    authors: Tuple[str, ...]

MOTIVATIONAL = Theme(
    name="motivational",
    keywords=("success", "achieve", "dream", "goal", "work", "future", "win", "believe", "possible"),
    authors=("steve jobs", "disney"),
)

WISDOM = Theme(
    name="wisdom",
    keywords=("wisdom", "learn", "knowledge", "understand", "truth", "life", "experience"),
    authors=("plato", "aristotle", "confucius", "gandhi", "einstein", "buddha"),
)

THEMES = {t.name: t for t in (MOTIVATIONAL, WISDOM)}

# ==== Length buckets ====

SHORT_MAX = 50    # short: length < 50
LONG_MIN = 150    # long: length > 150; medium is 50..150 inclusive

class LengthBucket(str, Enum):
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    def contains(self, length: int) -> bool:
        if self is LengthBucket.SHORT:
            return length < SHORT_MAX
        if self is LengthBucket.LONG:
            return length > LONG_MIN
        return SHORT_MAX <= length <= LONG_MIN

    @property
    def label(self) -> str:
        return {
            LengthBucket.SHORT: f"Short (under {SHORT_MAX} characters)",
            LengthBucket.MEDIUM: f"Medium ({SHORT_MAX}-{LONG_MIN} characters)",
            LengthBucket.LONG: f"Long (over {LONG_MIN} characters)",
        }[self]

# ==== Author browsing limits ====

AUTHORS_PER_PAGE = 20
MAX_SUGGESTIONS = 3
MAX_AUTOCOMPLETE = 25   # platform cap on suggestion lists
