"""Analyzer interface and numeric helpers.

Every analyzer maps a Document to a sub-score in [0, 100] (higher is more
AI-like) plus raw metrics. Analyzers are pure: no shared mutable state, so
the pipeline may run them concurrently.
"""
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

from aiprobe.config import Settings, get_settings
from aiprobe.utils.lexicon import Lexicon, load_lexicon
from aiprobe.utils.segmenter import Document

NEUTRAL_SCORE = 50.0


@dataclass(frozen=True)
class AnalyzerResult:
    """One analyzer's sub-score and raw metrics."""
    name: str
    score: float
    metrics: Mapping[str, float]

    def as_dict(self) -> dict:
        return {"score": self.score, "metrics": dict(self.metrics)}


@dataclass(frozen=True)
class FeatureVector:
    """Ordered analyzer results for one document."""
    results: tuple[AnalyzerResult, ...]

    def __getitem__(self, name: str) -> AnalyzerResult:
        for result in self.results:
            if result.name == name:
                return result
        raise KeyError(name)

    def __contains__(self, name: object) -> bool:
        return any(r.name == name for r in self.results)

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def scores(self) -> dict[str, float]:
        """Analyzer name -> sub-score."""
        return {r.name: r.score for r in self.results}


class Analyzer(ABC):
    """Strategy interface shared by all analyzers."""

    name: str = ""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        lexicon: Optional[Lexicon] = None,
    ):
        self.settings = settings or get_settings()
        self.lexicon = lexicon or load_lexicon(
            self.settings.language, self.settings.lexicon_dir
        )

    def compute(self, text: str) -> AnalyzerResult:
        """Segment text and analyze it.

        Raises:
            InvalidInput: If text is empty or whitespace only
        """
        return self.analyze(Document.from_text(text))

    @abstractmethod
    def analyze(self, doc: Document) -> AnalyzerResult:
        """Score an already segmented document."""

    def _result(self, score: float, **metrics: float) -> AnalyzerResult:
        return AnalyzerResult(
            name=self.name,
            score=round(clamp_score(score), 2),
            metrics=MappingProxyType({k: finite(v) for k, v in metrics.items()}),
        )


# ==============================================================================
# Numeric helpers
# ==============================================================================

def finite(value: float, default: float = 0.0) -> float:
    """Replace NaN or infinity with a default."""
    value = float(value)
    return value if math.isfinite(value) else default


def clamp_score(score: float) -> float:
    """Clamp a score into [0, 100]; non-finite scores become neutral."""
    return max(0.0, min(100.0, finite(score, NEUTRAL_SCORE)))


def linear_clamp(value: float, low: float, high: float) -> float:
    """Position of value inside [low, high], saturating at 0 and 1."""
    if high <= low:
        return 0.0
    return max(0.0, min(1.0, (value - low) / (high - low)))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def pvariance(values: Sequence[float]) -> float:
    """Population variance; 0.0 for fewer than two values."""
    if len(values) < 2:
        return 0.0
    m = mean(values)
    return sum((v - m) ** 2 for v in values) / len(values)


def coefficient_of_variation(values: Sequence[float]) -> Optional[float]:
    """Population standard deviation over mean.

    Returns None when undefined (fewer than two values or a near-zero mean).
    """
    if len(values) < 2:
        return None
    m = mean(values)
    if abs(m) < 1e-12:
        return None
    return math.sqrt(pvariance(values)) / m


def weighted_sum(parts: Mapping[str, float], weights: Mapping[str, float]) -> float:
    """Weighted sum over the parts present, renormalizing their weights.

    Parts missing from `parts` (or with zero total weight) are dropped.
    Returns NaN if no weighted part remains, so callers can pick a neutral.
    """
    total_weight = sum(weights.get(k, 0.0) for k in parts)
    if total_weight <= 0:
        return math.nan
    return sum(v * weights.get(k, 0.0) for k, v in parts.items()) / total_weight


def pairs(items: Iterable[str]) -> list[tuple[str, str]]:
    """Unordered pairs of distinct items, each as a sorted tuple."""
    ordered = sorted(set(items))
    return [
        (ordered[i], ordered[j])
        for i in range(len(ordered))
        for j in range(i + 1, len(ordered))
    ]
