"""Structural consistency analyzer.

Paragraph-level shape checks:
- Regularity: max relative deviation of paragraph lengths from their mean.
  Below the threshold (0.3) the layout is "systematic". A single-paragraph
  document is judged on its sentence lengths instead.
- Section shape: the intro/body/conclusion habit of a short opening
  sentence followed by a longer one, and a closing sentence shorter than
  the paragraph mean.
- Transition markers: paragraphs that open with canonical discourse
  markers (elaboration, contrast, causation, example, summary).

Checks without enough material are left out and the remaining weights are
renormalized. With no applicable check the sub-score is neutral.
"""
import math
from collections import Counter
from typing import Optional

from aiprobe.analyzers.base import (
    Analyzer, AnalyzerResult, NEUTRAL_SCORE, mean, weighted_sum,
)
from aiprobe.utils.ngram import tokenize
from aiprobe.utils.segmenter import Document

MIN_SECTION_SENTENCES = 3


def max_relative_deviation(lengths: list[int]) -> Optional[float]:
    """Largest |length - mean| / mean, or None when undefined."""
    if len(lengths) < 2:
        return None
    m = mean(lengths)
    if m <= 0:
        return None
    return max(abs(length - m) for length in lengths) / m


def regularity_from_deviation(deviation: float, threshold: float) -> float:
    """1.0 when systematic (deviation < threshold), falling to 0 at deviation 1."""
    if deviation < threshold:
        return 1.0
    if threshold >= 1.0:
        return 0.0
    return max(0.0, (1.0 - deviation) / (1.0 - threshold))


def section_shape(lengths: list[int]) -> float:
    """Intro/body/conclusion score of one paragraph's sentence lengths."""
    score = 0.0
    if lengths[0] < lengths[1]:
        score += 0.5
    if lengths[-1] < mean(lengths):
        score += 0.5
    return score


class StructuralAnalyzer(Analyzer):
    """Paragraph shape regularity."""

    name = "structural"

    def analyze(self, doc: Document) -> AnalyzerResult:
        s = self.settings
        parts: dict[str, float] = {}

        paragraph_sentence_lengths = [
            [len(tokenize(sentence)) for sentence in sentences]
            for sentences in doc.paragraph_sentences
        ]

        # Regularity
        if len(doc.paragraphs) >= 2:
            basis = "paragraphs"
            deviation = max_relative_deviation([len(tokenize(p)) for p in doc.paragraphs])
        else:
            basis = "sentences"
            deviation = max_relative_deviation(paragraph_sentence_lengths[0])
        if deviation is not None:
            parts["regularity"] = regularity_from_deviation(
                deviation, s.structural_deviation_threshold
            )

        # Section shape
        shaped = [
            section_shape(lengths)
            for lengths in paragraph_sentence_lengths
            if len(lengths) >= MIN_SECTION_SENTENCES
        ]
        if shaped:
            parts["section_shape"] = mean(shaped)

        # Transition markers at paragraph boundaries
        categories: Counter = Counter()
        boundaries = doc.paragraphs[1:]
        for paragraph in boundaries:
            category = self.lexicon.transition_category(paragraph)
            if category:
                categories[category] += 1
        if boundaries:
            parts["transitions"] = sum(categories.values()) / len(boundaries)

        score = 100.0 * weighted_sum(parts, s.structural_weights)
        if math.isnan(score):
            score = NEUTRAL_SCORE

        metrics = {
            "paragraph_count": len(doc.paragraphs),
            "max_relative_deviation": round(deviation, 4) if deviation is not None else 0.0,
            "systematic": float(
                deviation is not None and deviation < s.structural_deviation_threshold
            ),
            "regularity_from_sentences": float(basis == "sentences"),
            "section_shape": round(parts.get("section_shape", 0.0), 4),
            "transition_boundaries": sum(categories.values()),
        }
        for category, count in categories.items():
            metrics[f"transition_{category}"] = count
        return self._result(score, **metrics)
