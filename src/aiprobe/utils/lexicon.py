"""Per-language word lists.

Keyword heuristics (stopwords, personal-voice markers, formal vocabulary,
discourse transitions) are data, not code: each language is one JSON file
under aiprobe/data/lexicons/. Pointing `lexicon_dir` at another directory
swaps the lists without touching the analyzers.
"""
import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

LEXICON_DIR = Path(__file__).parent.parent / "data" / "lexicons"

TRANSITION_CATEGORIES = ("elaboration", "contrast", "causation", "example", "summary")


@dataclass(frozen=True)
class Lexicon:
    """Word lists for one language."""
    language: str
    stopwords: frozenset[str] = frozenset()
    personal_words: frozenset[str] = frozenset()
    personal_phrases: tuple[str, ...] = ()
    personal_symbols: tuple[str, ...] = ()
    formal_stems: tuple[str, ...] = ()
    transitions: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def transition_category(self, sentence: str) -> Optional[str]:
        """Return the discourse category a sentence opens with, if any."""
        opening = sentence.lower().lstrip()
        for category in TRANSITION_CATEGORIES:
            for marker in self.transitions.get(category, ()):
                if opening.startswith(marker):
                    rest = opening[len(marker):]
                    # Whole-word match only: "so" must not match "some"
                    if not rest or not rest[0].isalnum():
                        return category
        return None


@lru_cache
def load_lexicon(language: str = "en", directory: Optional[str] = None) -> Lexicon:
    """Load a lexicon from JSON.

    Args:
        language: Language code, e.g. "en" or "da"
        directory: Optional directory overriding the bundled lexicons

    Returns:
        Lexicon for the language

    Raises:
        ValueError: If no lexicon exists for the language
    """
    base = Path(directory) if directory else LEXICON_DIR
    path = base / f"{language}.json"
    if not path.exists():
        available = sorted(p.stem for p in base.glob("*.json"))
        raise ValueError(
            f"No lexicon for language '{language}' in {base}. "
            f"Available: {', '.join(available) or 'none'}"
        )

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    personal = data.get("personal_markers", {})
    transitions = {
        category: tuple(m.lower() for m in data.get("transitions", {}).get(category, []))
        for category in TRANSITION_CATEGORIES
    }
    lexicon = Lexicon(
        language=language,
        stopwords=frozenset(w.lower() for w in data.get("stopwords", [])),
        personal_words=frozenset(w.lower() for w in personal.get("words", [])),
        personal_phrases=tuple(p.lower() for p in personal.get("phrases", [])),
        personal_symbols=tuple(personal.get("symbols", [])),
        formal_stems=tuple(s.lower() for s in data.get("formal_stems", [])),
        transitions=transitions,
    )
    logger.debug(f"Loaded lexicon '{language}' from {path}")
    return lexicon
