"""Detector Service.

Orchestrates the analysis pipeline:
1. Segment the text into a Document (empty input fails fast)
2. Start the oracle call, if configured, as a concurrent task
3. Run every analyzer concurrently on the shared Document
4. Await the oracle within its timeout; failure degrades to local fusion
5. Fuse the sub-scores and classify each sentence
6. Audit-log the request and the result by text hash
"""
import asyncio
import logging
import time
from typing import Optional

from aiprobe.analyzers import build_analyzers
from aiprobe.analyzers.base import Analyzer, FeatureVector
from aiprobe.api.schemas import AnalysisReport, AnalyzerMetrics
from aiprobe.config import Settings, get_settings
from aiprobe.errors import InvalidInput, OracleUnavailable
from aiprobe.services.fusion import FusionEngine
from aiprobe.services.oracle import OracleClient, OracleJudgment
from aiprobe.services.segments import SegmentClassifier
from aiprobe.utils.lexicon import load_lexicon
from aiprobe.utils.logging import (
    hash_text, log_analysis_request, log_analysis_result, log_oracle_failure,
)
from aiprobe.utils.segmenter import Document

logger = logging.getLogger(__name__)


class DetectorService:
    """Composite AI-text detector."""

    def __init__(self, settings: Optional[Settings] = None, oracle=None):
        """Initialize detector.

        Args:
            settings: Validated settings (defaults to get_settings())
            oracle: Object with `async judge(text, language)`. When omitted,
                an OracleClient is created if `oracle_enabled` is set.
        """
        self.settings = settings or get_settings()
        if oracle is None and self.settings.oracle_enabled:
            oracle = OracleClient(self.settings)
        self.oracle = oracle
        self.fusion = FusionEngine(self.settings)
        self._analyzers: dict[str, list[Analyzer]] = {}

    def analyzers_for(self, language: str) -> list[Analyzer]:
        """Analyzers bound to one language's lexicon.

        Raises:
            InvalidInput: If no lexicon exists for the language
        """
        if language not in self._analyzers:
            try:
                lexicon = load_lexicon(language, self.settings.lexicon_dir)
            except ValueError as e:
                raise InvalidInput(str(e)) from None
            self._analyzers[language] = build_analyzers(self.settings, lexicon)
        return self._analyzers[language]

    async def _judge(
        self,
        text: str,
        language: str,
        input_hash: str,
    ) -> Optional[OracleJudgment]:
        """Oracle judgment, or None when the oracle is unavailable."""
        try:
            return await asyncio.wait_for(
                self.oracle.judge(text, language),
                timeout=self.settings.oracle_timeout_s,
            )
        except asyncio.TimeoutError:
            reason = f"timeout after {self.settings.oracle_timeout_s}s"
        except OracleUnavailable as e:
            reason = e.reason
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
        logger.warning(f"Oracle unavailable, using local analyzers only: {reason}")
        log_oracle_failure(input_hash, reason)
        return None

    async def score(self, doc: Document, language: str) -> FeatureVector:
        """Run all analyzers concurrently on one document."""
        analyzers = self.analyzers_for(language)
        results = await asyncio.gather(
            *(asyncio.to_thread(a.analyze, doc) for a in analyzers)
        )
        return FeatureVector(tuple(results))

    async def analyze(self, text: str, language: Optional[str] = None) -> AnalysisReport:
        """Analyze a text.

        Args:
            text: Text to analyze
            language: Lexicon language (defaults to settings.language)

        Returns:
            AnalysisReport with probability, segments, metrics and distribution

        Raises:
            InvalidInput: If text is empty/whitespace or the language is unknown
        """
        start_time = time.time()
        s = self.settings
        doc = Document.from_text(text)
        language = language or s.language
        analyzers = self.analyzers_for(language)

        log_analysis_request(text, language, s.fusion_preset)
        input_hash = hash_text(text)

        oracle_task = None
        if self.oracle is not None:
            oracle_task = asyncio.create_task(self._judge(doc.text, language, input_hash))

        try:
            features = await self.score(doc, language)
        except Exception:
            if oracle_task is not None:
                oracle_task.cancel()
            raise

        judgment = await oracle_task if oracle_task is not None else None
        oracle_score = judgment.probability if judgment else None
        degraded = oracle_task is not None and judgment is None

        fused = self.fusion.fuse(features.scores(), oracle_score)

        classifier = SegmentClassifier(
            analyzers, self.fusion, s, oracle=self.oracle, language=language
        )
        segments = await classifier.classify(doc.sentences)

        processing_time_ms = int((time.time() - start_time) * 1000)
        log_analysis_result(
            input_hash=input_hash,
            ai_probability=fused.ai_probability,
            oracle_score=oracle_score,
            oracle_degraded=degraded,
            segment_count=len(segments),
            processing_time_ms=processing_time_ms,
        )

        return AnalysisReport(
            ai_probability=fused.ai_probability,
            word_count=doc.word_count,
            character_count=doc.character_count,
            segments=segments,
            metrics={
                r.name: AnalyzerMetrics(score=r.score, metrics=dict(r.metrics))
                for r in features
            },
            distribution=fused.distribution,
            oracle_degraded=degraded,
            oracle_score=oracle_score,
            oracle_explanations=judgment.explanations if judgment else [],
            weights=fused.weights,
            language=language,
            preset=s.fusion_preset,
            processing_time_ms=processing_time_ms,
        )


# Singleton instance
_detector_service: Optional[DetectorService] = None


def get_detector_service() -> DetectorService:
    """Get or create detector service singleton."""
    global _detector_service
    if _detector_service is None:
        _detector_service = DetectorService()
    return _detector_service


def reset_detector_service() -> None:
    """Reset the detector service singleton (useful for testing)."""
    global _detector_service
    _detector_service = None
