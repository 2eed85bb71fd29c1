"""Tokenization helpers for the Naive Bayes text classifier.

The classifier never inspects raw text itself: a *tokenizer* turns a string
into an ordered list of tokens and everything downstream works on those.
Any callable taking one string and returning a sequence of strings can be
used, so callers can plug in stemming, lowercasing, n-grams, and so on.
"""

from __future__ import annotations

import re
from collections import Counter
from collections.abc import Callable, Iterable, Sequence

Tokenizer = Callable[[str], Sequence[str]]

# \w is Unicode-aware for str patterns: Latin, Cyrillic, digits and "_"
_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def default_tokenizer(text: str) -> list[str]:
    """Split text into word tokens, replacing punctuation with spaces.

    Case is preserved. Splitting on whitespace runs never yields empty
    tokens, even with leading or trailing whitespace.

    Example::

        >>> default_tokenizer("Hello, world! 123")
        ['Hello', 'world', '123']
    """
    sanitized = _PUNCTUATION_RE.sub(" ", text)
    return sanitized.split()


def frequency_table(tokens: Iterable[str]) -> Counter[str]:
    """Count occurrences of each token in a single text.

    Empty-string tokens (which a custom tokenizer may produce) are dropped.

    Args:
        tokens: Ordered tokens, duplicates allowed.

    Returns:
        Counter mapping token to its number of occurrences.
    """
    return Counter(token for token in tokens if token != "")


__all__ = ["Tokenizer", "default_tokenizer", "frequency_table"]
