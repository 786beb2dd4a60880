"""Lexical statistics analyzer.

Four token/character features, each compared against a human-typical range:
- Character entropy: Shannon entropy of the character distribution (bits)
- Sentence-length variance: uniform sentence lengths read as AI-like
- Punctuation-density variance: per-sentence counts of , ; :
- Lexical diversity: type-token ratio

Each raw metric becomes a humanness value in [0, 1] by a linear clamp over
its configured range; the sub-score is 100 * (1 - weighted humanness).
"""
import math
from collections import Counter

from aiprobe.analyzers.base import (
    Analyzer, AnalyzerResult, linear_clamp, pvariance, weighted_sum,
)
from aiprobe.utils.segmenter import Document

CLAUSE_PUNCTUATION = ",;:"

# Humanness used when a variance needs at least two sentences
NEUTRAL_HUMANNESS = 0.5


def character_entropy(text: str) -> float:
    """Shannon entropy over lowercase characters, in bits per character."""
    if not text:
        return 0.0
    counts = Counter(text.lower())
    total = sum(counts.values())
    entropy = 0.0
    for count in counts.values():
        p = count / total
        entropy -= p * math.log2(p)
    return entropy


def lexical_diversity(tokens: list[str]) -> float:
    """Type-token ratio: distinct tokens over total tokens."""
    if not tokens:
        return 0.0
    return len(set(tokens)) / len(tokens)


def punctuation_counts(sentences: tuple[str, ...]) -> list[int]:
    """Clause punctuation marks per sentence."""
    return [sum(s.count(c) for c in CLAUSE_PUNCTUATION) for s in sentences]


class LexicalAnalyzer(Analyzer):
    """Token and character frequency features."""

    name = "lexical"

    def analyze(self, doc: Document) -> AnalyzerResult:
        s = self.settings

        entropy = character_entropy(doc.text)
        lengths = [len(tokens) for tokens in doc.sentence_tokens]
        punctuation = punctuation_counts(doc.sentences)
        sentence_variance = pvariance(lengths)
        punctuation_variance = pvariance(punctuation)
        diversity = lexical_diversity(doc.tokens)

        multi_sentence = len(doc.sentences) >= 2
        humanness = {
            "entropy": linear_clamp(entropy, *s.entropy_range),
            "sentence_variance": (
                linear_clamp(sentence_variance, *s.sentence_variance_range)
                if multi_sentence else NEUTRAL_HUMANNESS
            ),
            "punctuation_variance": (
                linear_clamp(punctuation_variance, *s.punctuation_variance_range)
                if multi_sentence else NEUTRAL_HUMANNESS
            ),
            "lexical_diversity": (
                linear_clamp(diversity, *s.lexical_diversity_range)
                if doc.tokens else NEUTRAL_HUMANNESS
            ),
        }
        human = weighted_sum(humanness, s.lexical_weights)
        if math.isnan(human):
            human = NEUTRAL_HUMANNESS

        return self._result(
            100.0 * (1.0 - human),
            entropy_bits=round(entropy, 4),
            sentence_length_variance=round(sentence_variance, 4),
            punctuation_variance=round(punctuation_variance, 4),
            lexical_diversity=round(diversity, 4),
            token_count=len(doc.tokens),
            sentence_count=len(doc.sentences),
        )
