"""Tests for configuration module."""
import os
import pytest
from aiprobe.config import (
    ANALYZER_NAMES, FUSION_PRESETS, Settings, get_settings, load_settings,
)
from aiprobe.errors import FusionInconsistency


def test_default_settings():
    """Test default fusion settings."""
    settings = Settings()
    assert settings.fusion_preset == "balanced"
    assert settings.oracle_enabled is False
    assert settings.effective_oracle_share == 0.35
    assert set(settings.effective_analyzer_weights) == set(ANALYZER_NAMES)


def test_default_settings_validate():
    """Test that the shipped defaults pass validation."""
    Settings().validate_fusion()


def test_threshold_defaults():
    """Test that thresholds have correct defaults."""
    settings = Settings()
    assert settings.ai_threshold == 70
    assert settings.confidence_high == 85
    assert settings.confidence_medium == 70
    assert settings.active_window == 3
    assert settings.structural_deviation_threshold == 0.3
    assert settings.refinement_ratio == 0.4
    assert settings.api_min_words == 50
    assert settings.api_max_words == 2500


@pytest.mark.parametrize("preset", sorted(FUSION_PRESETS))
def test_presets_are_consistent(preset):
    """Test every preset validates."""
    settings = load_settings(fusion_preset=preset)
    assert abs(sum(settings.effective_analyzer_weights.values()) - 1.0) < 1e-9


def test_local_only_preset_has_no_oracle_share():
    settings = load_settings(fusion_preset="local_only")
    assert settings.effective_oracle_share == 0.0


def test_unknown_preset_rejected():
    with pytest.raises(FusionInconsistency, match="Unknown fusion preset"):
        load_settings(fusion_preset="nope")


def test_weights_must_sum_to_one():
    weights = {name: 0.1 for name in ANALYZER_NAMES}
    with pytest.raises(FusionInconsistency, match="sum to 1.0"):
        load_settings(analyzer_weights=weights)


def test_negative_weight_rejected():
    weights = {name: 0.25 for name in ANALYZER_NAMES}
    weights["lexical"] = -0.25
    with pytest.raises(FusionInconsistency, match="non-negative"):
        load_settings(analyzer_weights=weights)


def test_unknown_analyzer_rejected():
    with pytest.raises(FusionInconsistency, match="Unknown analyzers"):
        load_settings(analyzer_weights={"lexical": 0.5, "vibes": 0.5})


def test_oracle_share_bounds():
    with pytest.raises(FusionInconsistency, match="oracle_share"):
        load_settings(oracle_share=1.0)


def test_inverted_range_rejected():
    with pytest.raises(FusionInconsistency, match="entropy_range"):
        load_settings(entropy_range=(5.0, 4.0))


def test_inner_weight_group_checked():
    with pytest.raises(FusionInconsistency, match="pattern_weights"):
        load_settings(pattern_weights={"token_shape": 0.9, "sentence_start": 0.4})


def test_explicit_override_beats_preset():
    weights = {name: 0.0 for name in ANALYZER_NAMES}
    weights["lexical"] = 1.0
    settings = load_settings(fusion_preset="statistical", analyzer_weights=weights, oracle_share=0.2)
    assert settings.effective_analyzer_weights["lexical"] == 1.0
    assert settings.effective_oracle_share == 0.2


def test_get_settings_fails_closed():
    """Test that get_settings validates on creation."""
    os.environ["FUSION_PRESET"] = "does_not_exist"
    get_settings.cache_clear()

    try:
        with pytest.raises(FusionInconsistency):
            get_settings()
    finally:
        os.environ.pop("FUSION_PRESET", None)
        get_settings.cache_clear()


def test_env_override():
    os.environ["FUSION_PRESET"] = "oracle_heavy"
    get_settings.cache_clear()

    try:
        assert get_settings().effective_oracle_share == 0.40
    finally:
        os.environ.pop("FUSION_PRESET", None)
        get_settings.cache_clear()
