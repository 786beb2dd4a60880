"""Voice marker analyzer.

Counts personal-voice markers (first person, hedges, emoticons, ellipses)
against formal/business vocabulary. Personal markers read as human; dense
formal vocabulary reads as generated. Both lists come from the lexicon.
"""
import re

from aiprobe.analyzers.base import Analyzer, AnalyzerResult, linear_clamp, weighted_sum
from aiprobe.utils.segmenter import Document


def count_phrases(text: str, phrases: tuple[str, ...]) -> int:
    """Whole-word occurrences of multi-word phrases."""
    lowered = text.lower()
    return sum(
        len(re.findall(r'\b' + re.escape(phrase) + r'\b', lowered))
        for phrase in phrases
    )


def count_symbols(text: str, symbols: tuple[str, ...]) -> int:
    """Occurrences of emoticons and punctuation markers."""
    return sum(text.count(symbol) for symbol in symbols)


class MarkerAnalyzer(Analyzer):
    """Personal voice versus formal vocabulary."""

    name = "markers"

    def analyze(self, doc: Document) -> AnalyzerResult:
        s = self.settings
        lex = self.lexicon
        words = max(1, len(doc.tokens))

        personal = (
            sum(1 for t in doc.tokens if t in lex.personal_words)
            + count_phrases(doc.text, lex.personal_phrases)
            + count_symbols(doc.text, lex.personal_symbols)
        )
        formal = sum(
            1 for t in doc.tokens
            if any(t.startswith(stem) for stem in lex.formal_stems)
        )
        personal_ratio = personal / words
        formal_ratio = formal / words

        parts = {
            "personal": 1.0 - linear_clamp(personal_ratio, *s.personal_marker_range),
            "formal": linear_clamp(formal_ratio, *s.formal_term_range),
        }
        score = 100.0 * weighted_sum(parts, s.marker_weights)

        return self._result(
            score,
            personal_markers=personal,
            formal_terms=formal,
            personal_ratio=round(personal_ratio, 4),
            formal_ratio=round(formal_ratio, 4),
        )
