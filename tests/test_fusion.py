"""Tests for score fusion and segment classification."""
import pytest
from aiprobe.analyzers import build_analyzers
from aiprobe.api.schemas import Classification, Confidence
from aiprobe.config import ANALYZER_NAMES, load_settings
from aiprobe.errors import FusionInconsistency
from aiprobe.services.fusion import FusionEngine, round_half_up, split_distribution
from aiprobe.services.segments import SegmentClassifier, confidence_band


def all_scores(value: float) -> dict[str, float]:
    return {name: value for name in ANALYZER_NAMES}


class TestRounding:
    """Tests for deterministic rounding."""

    def test_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.4999) == 2


class TestDistribution:
    """Tests for the human / refined / AI split."""

    @pytest.mark.parametrize("ai", range(0, 101))
    def test_shares_add_up(self, ai):
        d = split_distribution(ai, 0.4)
        assert d.ai_generated == ai
        assert d.human_ai_refined + d.human_pure == 100 - ai

    def test_refined_share(self):
        d = split_distribution(35, 0.4)
        # 65 * 0.4 = 26
        assert d.human_ai_refined == 26
        assert d.human_pure == 39

    def test_refined_rounds_half_up(self):
        # 25 * 0.5 = 12.5 -> 13
        d = split_distribution(75, 0.5)
        assert d.human_ai_refined == 13
        assert d.human_pure == 12


class TestFusionEngine:
    """Tests for weighted fusion."""

    def test_local_only_renormalizes(self):
        engine = FusionEngine(load_settings())
        result = engine.fuse(all_scores(80.0))
        assert result.ai_probability == 80
        assert result.oracle_used is False
        assert sum(result.weights.values()) == pytest.approx(1.0, abs=1e-5)
        assert set(result.weights) == set(ANALYZER_NAMES)

    def test_oracle_share(self):
        engine = FusionEngine(load_settings(fusion_preset="balanced"))
        result = engine.fuse(all_scores(0.0), oracle_score=100)
        assert result.ai_probability == 35
        assert result.oracle_used is True
        assert result.weights["oracle"] == pytest.approx(0.35)
        assert sum(result.weights.values()) == pytest.approx(1.0, abs=1e-5)

    def test_local_only_preset_ignores_oracle(self):
        engine = FusionEngine(load_settings(fusion_preset="local_only"))
        result = engine.fuse(all_scores(20.0), oracle_score=100)
        assert result.ai_probability == 20
        assert result.oracle_used is False

    def test_missing_analyzers_are_dropped(self):
        engine = FusionEngine(load_settings())
        result = engine.fuse({"lexical": 90.0, "pattern": 10.0})
        assert result.ai_probability == 50
        assert set(result.weights) == {"lexical", "pattern"}

    def test_statistical_preset_weights(self):
        engine = FusionEngine(load_settings(fusion_preset="statistical", oracle_share=0.0))
        scores = all_scores(0.0)
        scores["lexical"] = 100.0
        assert engine.fuse(scores).ai_probability == 25

    def test_out_of_range_scores_clamped(self):
        engine = FusionEngine(load_settings())
        result = engine.fuse(all_scores(250.0))
        assert result.ai_probability == 100

    def test_bounds(self):
        engine = FusionEngine(load_settings())
        for value in (0.0, 33.3, 66.6, 100.0):
            result = engine.fuse(all_scores(value), oracle_score=int(100 - value))
            assert 0 <= result.ai_probability <= 100

    def test_nothing_to_fuse(self):
        engine = FusionEngine(load_settings())
        with pytest.raises(FusionInconsistency):
            engine.fuse({})

    def test_oracle_alone(self):
        engine = FusionEngine(load_settings())
        result = engine.fuse({}, oracle_score=42)
        assert result.ai_probability == 42
        assert result.weights == {"oracle": 1.0}


class TestSegmentClassifier:
    """Tests for per-sentence attribution."""

    @pytest.fixture
    def classifier(self):
        settings = load_settings()
        return SegmentClassifier(build_analyzers(settings), FusionEngine(settings), settings)

    def test_confidence_bands(self):
        assert confidence_band(90, 85, 70) == Confidence.HIGH
        assert confidence_band(85, 85, 70) == Confidence.MEDIUM
        assert confidence_band(71, 85, 70) == Confidence.MEDIUM
        assert confidence_band(70, 85, 70) == Confidence.LOW

    def test_threshold_is_strict(self, classifier):
        assert classifier.build_result("x", 70).classification == Classification.HUMAN
        assert classifier.build_result("x", 71).classification == Classification.AI

    def test_confidence_is_symmetric(self, classifier):
        assert classifier.build_result("x", 95).confidence == Confidence.HIGH
        assert classifier.build_result("x", 5).confidence == Confidence.HIGH
        assert classifier.build_result("x", 20).confidence == Confidence.MEDIUM
        assert classifier.build_result("x", 50).confidence == Confidence.LOW

    def test_classify_sentence(self, classifier):
        result = classifier.classify_sentence("The system processes the data")
        assert result.text == "The system processes the data"
        assert 0 <= result.score <= 100

    @pytest.mark.asyncio
    async def test_classify_preserves_order(self, classifier, uniform_text):
        sentences = [s.strip() for s in uniform_text.split(".") if s.strip()]
        results = await classifier.classify(sentences)
        assert [r.text for r in results] == sentences

    @pytest.mark.asyncio
    async def test_classify_matches_sync_path(self, classifier):
        sentences = ["Honestly not sure", "The system stores the data"]
        results = await classifier.classify(sentences)
        assert results == [classifier.classify_sentence(s) for s in sentences]
