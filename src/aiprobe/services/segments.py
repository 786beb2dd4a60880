"""Segment Classification Service.

Attributes each sentence to "AI" or "Human" by running every analyzer on a
one-sentence document and fusing locally. The oracle is consulted per
sentence only when `oracle_per_segment` is set.
"""
import asyncio
import logging
from typing import Optional, Sequence

from aiprobe.analyzers.base import Analyzer, FeatureVector
from aiprobe.api.schemas import Classification, Confidence, SegmentResult
from aiprobe.config import Settings, get_settings
from aiprobe.errors import OracleUnavailable
from aiprobe.services.fusion import FusionEngine
from aiprobe.utils.segmenter import Document

logger = logging.getLogger(__name__)


def confidence_band(distance: float, high: float, medium: float) -> Confidence:
    """Band a score's distance into its class."""
    if distance > high:
        return Confidence.HIGH
    if distance > medium:
        return Confidence.MEDIUM
    return Confidence.LOW


class SegmentClassifier:
    """Per-sentence attribution using the document analyzers."""

    def __init__(
        self,
        analyzers: Sequence[Analyzer],
        fusion: FusionEngine,
        settings: Optional[Settings] = None,
        oracle=None,
        language: Optional[str] = None,
    ):
        self.analyzers = list(analyzers)
        self.fusion = fusion
        self.settings = settings or get_settings()
        self.oracle = oracle if self.settings.oracle_per_segment else None
        self.language = language or self.settings.language

    def score_sentence(self, sentence: str) -> FeatureVector:
        """Run every analyzer on a one-sentence document."""
        doc = Document.from_text(sentence)
        return FeatureVector(tuple(a.analyze(doc) for a in self.analyzers))

    def build_result(self, sentence: str, score: int) -> SegmentResult:
        s = self.settings
        is_ai = score > s.ai_threshold
        distance = score if is_ai else 100 - score
        return SegmentResult(
            text=sentence,
            classification=Classification.AI if is_ai else Classification.HUMAN,
            confidence=confidence_band(distance, s.confidence_high, s.confidence_medium),
            score=score,
        )

    def classify_sentence(self, sentence: str) -> SegmentResult:
        """Classify one sentence with local analyzers only."""
        features = self.score_sentence(sentence)
        fused = self.fusion.fuse(features.scores())
        return self.build_result(sentence, fused.ai_probability)

    async def _judge(self, sentence: str) -> Optional[int]:
        try:
            judgment = await asyncio.wait_for(
                self.oracle.judge(sentence, self.language),
                timeout=self.settings.oracle_timeout_s,
            )
        except asyncio.TimeoutError:
            logger.debug("Segment oracle call timed out")
            return None
        except OracleUnavailable as e:
            logger.debug(f"Segment oracle unavailable: {e.reason}")
            return None
        except Exception as e:
            logger.warning(f"Segment oracle failed: {type(e).__name__}: {e}")
            return None
        return judgment.probability

    async def classify(self, sentences: Sequence[str]) -> list[SegmentResult]:
        """Classify sentences concurrently, preserving their order."""
        semaphore = asyncio.Semaphore(self.settings.segment_concurrency)

        async def run(sentence: str) -> SegmentResult:
            async with semaphore:
                features = await asyncio.to_thread(self.score_sentence, sentence)
                oracle_score = await self._judge(sentence) if self.oracle else None
                fused = self.fusion.fuse(features.scores(), oracle_score)
                return self.build_result(sentence, fused.ai_probability)

        return list(await asyncio.gather(*(run(s) for s in sentences)))
