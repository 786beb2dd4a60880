"""Sentence and paragraph segmentation.

Sentence indices produced here are the unit of "position" for every
analyzer that reasons about order.
"""
import re
from dataclasses import dataclass
from functools import cached_property

from aiprobe.errors import InvalidInput
from aiprobe.utils.ngram import tokenize, raw_tokens

SENTENCE_BOUNDARY = re.compile(r'[.!?]+')
PARAGRAPH_BOUNDARY = re.compile(r'\n\s*\n')


def split_sentences(text: str) -> list[str]:
    """Split text on terminal punctuation.

    Text without any terminal punctuation (or made of punctuation only) is
    returned as a single sentence so callers always get at least one
    sentence for non-empty input.
    """
    sentences = [s.strip() for s in SENTENCE_BOUNDARY.split(text)]
    sentences = [s for s in sentences if s]
    if not sentences and text.strip():
        return [text.strip()]
    return sentences


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines."""
    paragraphs = [p.strip() for p in PARAGRAPH_BOUNDARY.split(text)]
    paragraphs = [p for p in paragraphs if p]
    if not paragraphs and text.strip():
        return [text.strip()]
    return paragraphs


def segment(text: str) -> tuple[list[str], list[str]]:
    """Split text into (sentences, paragraphs), preserving order."""
    return split_sentences(text), split_paragraphs(text)


@dataclass(frozen=True)
class Document:
    """Immutable, segmented view of one input text.

    Tokenization is computed once and shared by all analyzers.
    """
    text: str
    sentences: tuple[str, ...]
    paragraphs: tuple[str, ...]

    @classmethod
    def from_text(cls, text: str) -> "Document":
        """Segment text into a document.

        Raises:
            InvalidInput: If text is empty or whitespace only
        """
        if text is None or not text.strip():
            raise InvalidInput("Text cannot be empty or whitespace only")
        sentences, paragraphs = segment(text)
        return cls(text=text, sentences=tuple(sentences), paragraphs=tuple(paragraphs))

    @cached_property
    def tokens(self) -> list[str]:
        """Lowercase word tokens of the whole text."""
        return tokenize(self.text)

    @cached_property
    def raw_tokens(self) -> list[str]:
        """Whitespace tokens of the whole text."""
        return raw_tokens(self.text)

    @cached_property
    def sentence_tokens(self) -> list[list[str]]:
        """Lowercase word tokens per sentence."""
        return [tokenize(s) for s in self.sentences]

    @cached_property
    def paragraph_sentences(self) -> list[list[str]]:
        """Sentences of each paragraph."""
        return [split_sentences(p) for p in self.paragraphs]

    @property
    def word_count(self) -> int:
        return len(self.text.split())

    @property
    def character_count(self) -> int:
        return len(self.text)
