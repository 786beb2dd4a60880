"""aiprobe Configuration Module.

Every threshold, clamp range and fusion weight used by the engine lives
here as a named, overridable setting (environment variables or `.env`).

The clamp ranges are empirical placeholders tuned on English prose. They
have no validation dataset behind them and should be recalibrated before
being trusted for another language or domain.

Weights are checked when settings are loaded: an inconsistent configuration
raises FusionInconsistency before the service accepts any request.
"""
import math
from functools import lru_cache
from typing import Literal, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

from aiprobe.errors import FusionInconsistency


# Order matters: reports list analyzer metrics in this order.
ANALYZER_NAMES = (
    "lexical",
    "transition",
    "pattern",
    "concept_flow",
    "structural",
    "markers",
)

WEIGHT_TOLERANCE = 1e-6

_EQUAL = {name: 1 / len(ANALYZER_NAMES) for name in ANALYZER_NAMES}

# Each preset is one former scoring variant expressed as a weight vector.
FUSION_PRESETS: dict[str, dict] = {
    "balanced": {
        "analyzer_weights": dict(_EQUAL),
        "oracle_share": 0.35,
    },
    "statistical": {
        "analyzer_weights": {
            "lexical": 0.25,
            "transition": 0.20,
            "pattern": 0.15,
            "concept_flow": 0.15,
            "structural": 0.15,
            "markers": 0.10,
        },
        "oracle_share": 0.30,
    },
    "oracle_heavy": {
        "analyzer_weights": dict(_EQUAL),
        "oracle_share": 0.40,
    },
    "local_only": {
        "analyzer_weights": dict(_EQUAL),
        "oracle_share": 0.0,
    },
}


class Settings(BaseSettings):
    """Engine settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === Language ===
    # Selects the word lists under aiprobe/data/lexicons/<language>.json
    language: str = "en"
    lexicon_dir: Optional[str] = None

    # === Lexical statistics (human-typical ranges) ===
    entropy_range: tuple[float, float] = (4.0, 5.0)
    sentence_variance_range: tuple[float, float] = (0.0, 10.0)
    punctuation_variance_range: tuple[float, float] = (0.0, 0.8)
    lexical_diversity_range: tuple[float, float] = (0.4, 0.7)
    lexical_weights: dict[str, float] = {
        "entropy": 0.15,
        "sentence_variance": 0.35,
        "punctuation_variance": 0.20,
        "lexical_diversity": 0.30,
    }

    # === Transition model ===
    perplexity_range: tuple[float, float] = (1.5, 4.0)
    perplexity_epsilon: float = 1e-10

    # === Pattern consistency ===
    pattern_window: int = 3
    pattern_lookback: int = 25
    token_repeat_range: tuple[float, float] = (0.1, 0.5)
    start_repeat_range: tuple[float, float] = (0.0, 1.0)
    pattern_weights: dict[str, float] = {
        "token_shape": 0.6,
        "sentence_start": 0.4,
    }

    # === Concept flow ===
    active_window: int = 3
    concept_min_length: int = 3
    repetition_overlap: float = 0.5
    concept_weights: dict[str, float] = {
        "introduction": 0.25,
        "development": 0.30,
        "relation": 0.25,
        "event_pattern": 0.20,
    }

    # === Structural consistency ===
    structural_deviation_threshold: float = 0.3
    structural_weights: dict[str, float] = {
        "regularity": 0.6,
        "section_shape": 0.2,
        "transitions": 0.2,
    }

    # === Markers ===
    personal_marker_range: tuple[float, float] = (0.0, 0.08)
    formal_term_range: tuple[float, float] = (0.0, 0.15)
    marker_weights: dict[str, float] = {
        "personal": 0.6,
        "formal": 0.4,
    }

    # === Fusion ===
    fusion_preset: str = "balanced"
    # Explicit overrides win over the preset
    analyzer_weights: Optional[dict[str, float]] = None
    oracle_share: Optional[float] = None
    refinement_ratio: float = 0.4

    # === Segment classification ===
    ai_threshold: float = 70.0
    confidence_high: float = 85.0
    confidence_medium: float = 70.0
    segment_concurrency: int = 8
    oracle_per_segment: bool = False

    # === Oracle ===
    oracle_enabled: bool = False
    oracle_backend: Literal["openai", "anthropic"] = "openai"
    oracle_base_url: str = "http://localhost:8000/v1"
    oracle_model: str = "mistralai/Mistral-Nemo-Instruct-2407"
    oracle_api_key: str = "dummy"
    oracle_timeout_s: float = 15.0
    oracle_max_tokens: int = 256
    oracle_temperature: float = 0.1

    # === API boundary ===
    api_min_words: int = 50
    api_max_words: int = 2500

    # === Paths ===
    log_path: str = "./logs"

    @property
    def effective_analyzer_weights(self) -> dict[str, float]:
        """Analyzer weights after applying the preset and any override."""
        if self.analyzer_weights is not None:
            return dict(self.analyzer_weights)
        return dict(self._preset()["analyzer_weights"])

    @property
    def effective_oracle_share(self) -> float:
        """Oracle share of the fused score."""
        if self.oracle_share is not None:
            return self.oracle_share
        return self._preset()["oracle_share"]

    def _preset(self) -> dict:
        try:
            return FUSION_PRESETS[self.fusion_preset]
        except KeyError:
            raise FusionInconsistency(
                f"Unknown fusion preset '{self.fusion_preset}'. "
                f"Available: {', '.join(FUSION_PRESETS)}"
            ) from None

    def validate_fusion(self) -> None:
        """Validate weights and ranges at startup.

        Raises:
            FusionInconsistency: If any weight group does not sum to 1.0,
                names an unknown component, or a range is inverted.
        """
        weights = self.effective_analyzer_weights
        unknown = set(weights) - set(ANALYZER_NAMES)
        if unknown:
            raise FusionInconsistency(
                f"Unknown analyzers in weights: {', '.join(sorted(unknown))}"
            )
        _check_weight_group("analyzer_weights", weights)

        share = self.effective_oracle_share
        if not 0.0 <= share < 1.0:
            raise FusionInconsistency(
                f"oracle_share must be in [0, 1), got {share}"
            )

        _check_weight_group("lexical_weights", self.lexical_weights)
        _check_weight_group("pattern_weights", self.pattern_weights)
        _check_weight_group("concept_weights", self.concept_weights)
        _check_weight_group("structural_weights", self.structural_weights)
        _check_weight_group("marker_weights", self.marker_weights)

        for name in (
            "entropy_range",
            "sentence_variance_range",
            "punctuation_variance_range",
            "lexical_diversity_range",
            "perplexity_range",
            "token_repeat_range",
            "start_repeat_range",
            "personal_marker_range",
            "formal_term_range",
        ):
            low, high = getattr(self, name)
            if not low < high:
                raise FusionInconsistency(f"{name} must satisfy low < high, got ({low}, {high})")

        if not 0.0 <= self.refinement_ratio <= 1.0:
            raise FusionInconsistency(
                f"refinement_ratio must be in [0, 1], got {self.refinement_ratio}"
            )
        if self.confidence_high < self.confidence_medium:
            raise FusionInconsistency("confidence_high must be >= confidence_medium")
        if self.pattern_window < 1 or self.pattern_lookback < 1 or self.active_window < 1:
            raise FusionInconsistency("pattern_window, pattern_lookback and active_window must be >= 1")


def _check_weight_group(name: str, weights: dict[str, float]) -> None:
    if any(w < 0 or not math.isfinite(w) for w in weights.values()):
        raise FusionInconsistency(f"{name} must be finite and non-negative")
    total = sum(weights.values())
    if abs(total - 1.0) > WEIGHT_TOLERANCE:
        raise FusionInconsistency(
            f"{name} must sum to 1.0, got {total:.6f}"
        )


def load_settings(**overrides) -> Settings:
    """Build and validate an uncached settings instance."""
    settings = Settings(**overrides)
    settings.validate_fusion()
    return settings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
