"""Score Fusion Service.

Combines analyzer sub-scores and an optional oracle score into one integer
AI probability plus a human / human-AI-refined / AI distribution.

Weighting:
- analyzer weights (summing to 1.0) share the local budget 1 - oracle_share
- the oracle gets oracle_share when it answered
- without an oracle score, or for analyzers missing from the input, the
  remaining local weights are renormalized to sum to 1.0
"""
import logging
import math
from dataclasses import dataclass
from typing import Mapping, Optional

from aiprobe.analyzers.base import clamp_score
from aiprobe.api.schemas import Distribution
from aiprobe.config import Settings, get_settings
from aiprobe.errors import FusionInconsistency

logger = logging.getLogger(__name__)

ORACLE = "oracle"


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))


def split_distribution(ai_probability: int, refinement_ratio: float) -> Distribution:
    """Split the non-AI share into human-AI-refined and purely human.

    Integer arithmetic: human_ai_refined + human_pure == 100 - ai_probability.
    """
    human_share = 100 - ai_probability
    refined = round_half_up(human_share * refinement_ratio)
    refined = max(0, min(human_share, refined))
    return Distribution(
        ai_generated=ai_probability,
        human_ai_refined=refined,
        human_pure=human_share - refined,
    )


@dataclass(frozen=True)
class FusionResult:
    """Outcome of one fusion."""
    ai_probability: int
    distribution: Distribution
    weights: dict[str, float]
    oracle_used: bool


class FusionEngine:
    """Weighted fusion of sub-scores."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.analyzer_weights = self.settings.effective_analyzer_weights
        self.oracle_share = self.settings.effective_oracle_share

    def effective_weights(
        self,
        names: list[str],
        oracle_available: bool,
    ) -> dict[str, float]:
        """Weights actually applied for a set of analyzers, summing to 1.0.

        Raises:
            FusionInconsistency: If nothing with a positive weight remains
        """
        local = {name: self.analyzer_weights.get(name, 0.0) for name in names}
        local_total = sum(local.values())
        use_oracle = oracle_available and self.oracle_share > 0

        if local_total <= 0:
            if use_oracle:
                return {ORACLE: 1.0}
            raise FusionInconsistency(
                f"No positively weighted analyzer among: {', '.join(names) or 'none'}"
            )

        local_budget = 1.0 - self.oracle_share if use_oracle else 1.0
        weights = {
            name: weight / local_total * local_budget
            for name, weight in local.items()
        }
        if use_oracle:
            weights[ORACLE] = self.oracle_share
        return weights

    def fuse(
        self,
        sub_scores: Mapping[str, float],
        oracle_score: Optional[float] = None,
    ) -> FusionResult:
        """Fuse analyzer sub-scores with an optional oracle score.

        Args:
            sub_scores: Analyzer name -> sub-score in [0, 100]
            oracle_score: Oracle probability in [0, 100], or None if unavailable

        Returns:
            FusionResult with the integer probability and distribution
        """
        weights = self.effective_weights(list(sub_scores), oracle_score is not None)

        total = 0.0
        for name, weight in weights.items():
            score = oracle_score if name == ORACLE else sub_scores[name]
            total += weight * clamp_score(score)

        ai_probability = max(0, min(100, round_half_up(total)))
        logger.debug(f"Fused {len(weights)} signals -> {ai_probability}")

        return FusionResult(
            ai_probability=ai_probability,
            distribution=split_distribution(ai_probability, self.settings.refinement_ratio),
            weights={name: round(w, 6) for name, w in weights.items()},
            oracle_used=ORACLE in weights,
        )
