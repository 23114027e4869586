"""
Text helpers shared by repositories and routes.
"""
import math
import re
from typing import Set

_NON_WORD = re.compile(r"[^\w]+", re.UNICODE)


def _trigrams(value: str) -> Set[str]:
    """
    Trigrams of a string the way pg_trgm builds them.
    
    Each lowercase word is padded with two spaces in front and one behind,
    so "cat" yields {"  c", " ca", "cat", "at "}.
    """
    grams: Set[str] = set()
    for word in _NON_WORD.split(value.lower()):
        if not word:
            continue
        padded = f"  {word} "
        for i in range(len(padded) - 2):
            grams.add(padded[i:i + 3])
    return grams


def trigram_similarity(a: str, b: str) -> float:
    """Shared trigrams over all distinct trigrams of both strings (0.0 - 1.0)."""
    left, right = _trigrams(a or ""), _trigrams(b or "")
    if not left or not right:
        return 0.0
    return len(left & right) / len(left | right)


def estimate_tokens(content: str) -> int:
    """Rough token count: one token per four characters."""
    return math.ceil(len(content) / 4)


def strip_quotes(value: str) -> str:
    """Trim whitespace and any wrapping quote characters."""
    return value.strip().strip("\"'“”‘’`").strip()
