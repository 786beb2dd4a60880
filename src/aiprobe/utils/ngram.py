"""Token and n-gram helpers shared by the analyzers."""
import re
from collections import Counter
from typing import Sequence, Tuple, TypeVar

T = TypeVar("T")


def tokenize(text: str) -> list[str]:
    """Simple word tokenization.

    Args:
        text: Input text to tokenize

    Returns:
        List of lowercase tokens
    """
    # Lowercase and split on non-alphanumeric
    text = text.lower()
    tokens = re.findall(r'\b\w+\b', text)
    return tokens


def raw_tokens(text: str) -> list[str]:
    """Whitespace tokens with their case and punctuation intact."""
    return text.split()


def get_ngrams(items: Sequence[T], n: int) -> list[Tuple[T, ...]]:
    """Extract n-grams from a sequence.

    Args:
        items: Tokens (or any hashable items, e.g. token shapes)
        n: N-gram size

    Returns:
        List of n-gram tuples
    """
    if len(items) < n:
        return []
    return [tuple(items[i:i+n]) for i in range(len(items) - n + 1)]


def count_transitions(tokens: Sequence[str]) -> tuple[Counter, Counter]:
    """Build a first-order transition table.

    Args:
        tokens: Token stream

    Returns:
        Tuple of (pair counts, predecessor counts). A token is counted as a
        predecessor only when it is followed by another token.
    """
    pairs = Counter(get_ngrams(tokens, 2))
    predecessors: Counter = Counter()
    for (first, _), count in pairs.items():
        predecessors[first] += count
    return pairs, predecessors
