"""Tokenization helpers shared by the detectors."""

import re
import string

_PUNCTUATION = string.punctuation + "–—‘’“”…"
_WHITESPACE = re.compile(r"\s+")

STOPWORDS = frozenset({
    "a", "about", "above", "after", "again", "against", "all", "also", "an",
    "and", "any", "are", "as", "at", "be", "because", "been", "before",
    "being", "below", "between", "both", "but", "by", "can", "could", "did",
    "do", "does", "doing", "down", "during", "each", "few", "for", "from",
    "further", "had", "has", "have", "having", "he", "her", "here", "hers",
    "him", "his", "how", "i", "if", "in", "into", "is", "it", "its", "just",
    "me", "more", "most", "my", "no", "nor", "not", "now", "of", "off", "on",
    "once", "only", "or", "other", "our", "ours", "out", "over", "own",
    "same", "she", "should", "so", "some", "such", "than", "that", "the",
    "their", "theirs", "them", "then", "there", "these", "they", "this",
    "those", "through", "to", "too", "under", "until", "up", "very", "was",
    "we", "were", "what", "when", "where", "which", "while", "who", "whom",
    "why", "will", "with", "would", "you", "your", "yours",
})


def tokenize(text: str, min_length: int = 1, drop_stopwords: bool = False) -> list[str]:
    """Split text into case-folded tokens.

    Tokens are whitespace-separated words with surrounding punctuation
    stripped. Tokens shorter than min_length are dropped, and so are
    stop-words when drop_stopwords is set.
    """
    tokens = []
    for raw in text.casefold().split():
        token = raw.strip(_PUNCTUATION)
        if len(token) < min_length:
            continue
        if drop_stopwords and token in STOPWORDS:
            continue
        tokens.append(token)
    return tokens


def title_words(title: str, min_length: int = 3, drop_stopwords: bool = True) -> set[str]:
    """Distinct content words of a title."""
    return set(tokenize(title, min_length=min_length, drop_stopwords=drop_stopwords))


def topic_keywords(title: str, min_length: int = 5, drop_stopwords: bool = True) -> list[str]:
    """Title words usable as topic keys, in order of first appearance."""
    return list(dict.fromkeys(tokenize(title, min_length=min_length, drop_stopwords=drop_stopwords)))


def unit_phrase(text: str) -> str:
    """Case-folded text with runs of whitespace collapsed."""
    return _WHITESPACE.sub(" ", text).strip().casefold()
