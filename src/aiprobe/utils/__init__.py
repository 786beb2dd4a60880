"""aiprobe utilities package."""

from aiprobe.utils.ngram import (
    tokenize,
    raw_tokens,
    get_ngrams,
    count_transitions,
)
from aiprobe.utils.segmenter import (
    Document,
    segment,
    split_sentences,
    split_paragraphs,
)
from aiprobe.utils.lexicon import (
    Lexicon,
    load_lexicon,
)

__all__ = [
    # ngram
    "tokenize",
    "raw_tokens",
    "get_ngrams",
    "count_transitions",
    # segmenter
    "Document",
    "segment",
    "split_sentences",
    "split_paragraphs",
    # lexicon
    "Lexicon",
    "load_lexicon",
]
