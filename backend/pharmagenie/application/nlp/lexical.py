"""Lexical analysis — tokenization and keyword extraction for raw queries."""

import re
from collections.abc import Iterable

_WORD_RE = re.compile(r"\w+", re.UNICODE)

STOPWORDS: frozenset[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "from", "is", "are", "was", "were", "be", "been",
    "show", "me", "get", "find", "list", "all", "what", "how", "when",
})

MIN_KEYWORD_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Lowercase ``text`` and split it into word tokens.

    Punctuation never sticks to a token: ``"trials?"`` yields ``["trials"]``
    and ``"CT-2024-007"`` yields ``["ct", "2024", "007"]``.
    """
    return _WORD_RE.findall(text.lower())


def extract_keywords(tokens: Iterable[str]) -> list[str]:
    """Keep content words: no stopwords, no pure digits, at least 3 chars.

    Token order is preserved and duplicates are kept.
    """
    return [
        token
        for token in tokens
        if token not in STOPWORDS
        and len(token) >= MIN_KEYWORD_LENGTH
        and not token.isdigit()
    ]
