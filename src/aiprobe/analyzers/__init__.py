"""
aiprobe analyzers - independent stylometric signals.

Each analyzer scores a document in [0, 100] (higher is more AI-like):
- lexical: entropy, sentence/punctuation variance, lexical diversity
- transition: perplexity under the document's own bigram table
- pattern: repeating token and sentence-start shapes
- concept_flow: pacing of concept introduction and development
- structural: paragraph shape regularity and discourse markers
- markers: personal voice versus formal vocabulary
"""
from typing import Optional

from aiprobe.config import ANALYZER_NAMES, Settings, get_settings
from aiprobe.utils.lexicon import Lexicon, load_lexicon

from .base import Analyzer, AnalyzerResult, FeatureVector
from .lexical import LexicalAnalyzer
from .transition import TransitionAnalyzer
from .pattern import PatternAnalyzer
from .concept_flow import ConceptFlowAnalyzer, ConceptTracker, Concept
from .structural import StructuralAnalyzer
from .markers import MarkerAnalyzer

ANALYZER_CLASSES: dict[str, type[Analyzer]] = {
    cls.name: cls
    for cls in (
        LexicalAnalyzer,
        TransitionAnalyzer,
        PatternAnalyzer,
        ConceptFlowAnalyzer,
        StructuralAnalyzer,
        MarkerAnalyzer,
    )
}


def build_analyzers(
    settings: Optional[Settings] = None,
    lexicon: Optional[Lexicon] = None,
) -> list[Analyzer]:
    """Instantiate every analyzer in report order."""
    settings = settings or get_settings()
    lexicon = lexicon or load_lexicon(settings.language, settings.lexicon_dir)
    return [ANALYZER_CLASSES[name](settings, lexicon) for name in ANALYZER_NAMES]


__all__ = [
    "Analyzer",
    "AnalyzerResult",
    "FeatureVector",
    "LexicalAnalyzer",
    "TransitionAnalyzer",
    "PatternAnalyzer",
    "ConceptFlowAnalyzer",
    "ConceptTracker",
    "Concept",
    "StructuralAnalyzer",
    "MarkerAnalyzer",
    "ANALYZER_CLASSES",
    "build_analyzers",
]
