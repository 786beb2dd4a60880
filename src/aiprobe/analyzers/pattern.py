"""Pattern consistency analyzer.

Reduces tokens to structural shapes and measures how often shapes repeat:
- Token-shape consistency: 3-token shape windows that recur within the last
  `pattern_lookback` windows (25), so sentence-length periods are caught
- Sentence-start consistency: adjacent sentences opening with the same
  two-token shape

Shape equality is structural. "The system" and "Our team" have the same
shape and count as a repeat.
"""
from aiprobe.analyzers.base import Analyzer, AnalyzerResult, linear_clamp, weighted_sum
from aiprobe.utils.ngram import get_ngrams
from aiprobe.utils.segmenter import Document

TERMINAL = ".!?"
CLAUSE = ",;:"

START_WIDTH = 2

Shape = tuple[str, str, str]


def token_shape(token: str) -> Shape:
    """Reduce a raw token to (case class, length class, punctuation class).

    Case classes: "XX" all caps, "X" capitalized, "x" lowercase,
    "d" numeric, "o" no alphanumerics (emoticons, dashes).
    Length classes over alphanumeric characters: "s" <= 3, "m" <= 7, "l".
    Punctuation class from the last character: "." terminal, "," clause,
    "" none.
    """
    chars = [c for c in token if c.isalnum()]
    alpha = [c for c in chars if c.isalpha()]
    if not chars:
        case = "o"
    elif not alpha:
        case = "d"
    elif len(alpha) > 1 and all(c.isupper() for c in alpha):
        case = "XX"
    elif alpha[0].isupper():
        case = "X"
    else:
        case = "x"

    n = len(chars)
    length = "s" if n <= 3 else "m" if n <= 7 else "l"

    last = token[-1] if token else ""
    if last in TERMINAL:
        punct = "."
    elif last in CLAUSE:
        punct = ","
    else:
        punct = ""
    return case, length, punct


def window_repeat_ratio(shapes: list[Shape], width: int, lookback: int) -> float:
    """Fraction of shape windows seen within the previous `lookback` windows."""
    windows = get_ngrams(shapes, width)
    if not windows:
        return 0.0
    repeats = 0
    for i, window in enumerate(windows):
        if window in windows[max(0, i - lookback):i]:
            repeats += 1
    return repeats / len(windows)


def start_repeat_ratio(sentences: tuple[str, ...]) -> float:
    """Fraction of adjacent sentence pairs opening with the same shape."""
    starts = [
        tuple(token_shape(t) for t in sentence.split()[:START_WIDTH])
        for sentence in sentences
    ]
    if len(starts) < 2:
        return 0.0
    repeats = sum(1 for a, b in zip(starts, starts[1:]) if a == b)
    return repeats / (len(starts) - 1)


class PatternAnalyzer(Analyzer):
    """Repetition of low-level token and sentence-start shapes."""

    name = "pattern"

    def analyze(self, doc: Document) -> AnalyzerResult:
        s = self.settings
        shapes = [token_shape(t) for t in doc.raw_tokens]

        token_ratio = window_repeat_ratio(shapes, s.pattern_window, s.pattern_lookback)
        start_ratio = start_repeat_ratio(doc.sentences)

        parts = {
            "token_shape": linear_clamp(token_ratio, *s.token_repeat_range),
            "sentence_start": linear_clamp(start_ratio, *s.start_repeat_range),
        }
        score = 100.0 * weighted_sum(parts, s.pattern_weights)

        return self._result(
            score,
            token_shape_repeat_ratio=round(token_ratio, 4),
            sentence_start_repeat_ratio=round(start_ratio, 4),
            window_count=max(0, len(shapes) - s.pattern_window + 1),
        )
