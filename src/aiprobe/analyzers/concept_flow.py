"""Concept flow analyzer.

Models how topical terms are introduced and developed across sentences.
Generated text tends to introduce concepts at an even pace and develop each
one the same way; human text is uneven and associative.

Two passes over the sentence sequence, both on a request-scoped
ConceptTracker:

1. Discovery: every content word becomes a Concept on first occurrence and
   collects its later occurrence indices.
2. Development: walks the sentences again with an active-concept window.
   A concept stays active until more than `active_window` sentences have
   passed since its last occurrence. Each re-occurrence records a
   development event, and every pair of simultaneously active concepts
   becomes a (symmetric) relation.

The sub-score combines introduction regularity, development regularity,
relation density and event consistency (0.25/0.30/0.25/0.20 by default).
"""
from collections import Counter
from dataclasses import dataclass, field

from aiprobe.analyzers.base import (
    Analyzer, AnalyzerResult, coefficient_of_variation, mean, pairs, weighted_sum,
)
from aiprobe.utils.segmenter import Document

REPETITION = "repetition"
ELABORATION = "elaboration"
PIVOT = "pivot"


@dataclass
class DevelopmentEvent:
    """One re-occurrence of a concept."""
    sentence_index: int
    kind: str
    context_overlap: float


@dataclass
class Concept:
    """A normalized topical term and its history within one document."""
    term: str
    introduced_at: int
    occurrences: list[int] = field(default_factory=list)
    related: set[str] = field(default_factory=set)
    history: list[DevelopmentEvent] = field(default_factory=list)

    @property
    def is_recurring(self) -> bool:
        return len(self.occurrences) >= 2

    def gaps(self) -> list[int]:
        """Sentence distance between consecutive occurrences."""
        return [b - a for a, b in zip(self.occurrences, self.occurrences[1:])]

    def previous_occurrence(self, index: int) -> int | None:
        """Latest occurrence strictly before a sentence index."""
        earlier = [o for o in self.occurrences if o < index]
        return earlier[-1] if earlier else None


def classify_development(overlap: float, repetition_overlap: float) -> str:
    """Name a development event from the Jaccard overlap of its contexts."""
    if overlap >= repetition_overlap:
        return REPETITION
    if overlap > 0:
        return ELABORATION
    return PIVOT


def jaccard(a: set[str], b: set[str]) -> float:
    """Jaccard similarity; two empty contexts count as identical."""
    if not a and not b:
        return 1.0
    return len(a & b) / len(a | b)


class ConceptTracker:
    """State for one concept-flow run. Create one per analysis and discard it."""

    def __init__(self, active_window: int = 3, repetition_overlap: float = 0.5):
        self.active_window = active_window
        self.repetition_overlap = repetition_overlap
        self.concepts: dict[str, Concept] = {}
        self.sentence_terms: list[list[str]] = []
        self.new_per_sentence: list[int] = []
        self.active_pair_count = 0
        self.established_pair_count = 0

    def discover(self, sentence_terms: list[list[str]]) -> None:
        """First pass: create concepts and collect occurrences."""
        for index, terms in enumerate(sentence_terms):
            terms = list(dict.fromkeys(terms))
            self.sentence_terms.append(terms)
            introduced = 0
            for term in terms:
                concept = self.concepts.get(term)
                if concept is None:
                    concept = Concept(term=term, introduced_at=index)
                    self.concepts[term] = concept
                    introduced += 1
                concept.occurrences.append(index)
            self.new_per_sentence.append(introduced)

    def develop(self) -> None:
        """Second pass: active window, development events and relations."""
        active: dict[str, int] = {}
        for index, terms in enumerate(self.sentence_terms):
            for term, last_seen in list(active.items()):
                if index - last_seen > self.active_window:
                    del active[term]

            context = set(terms)
            for term in terms:
                concept = self.concepts[term]
                previous = concept.previous_occurrence(index)
                if previous is not None:
                    before = set(self.sentence_terms[previous]) - {term}
                    overlap = jaccard(context - {term}, before)
                    concept.history.append(DevelopmentEvent(
                        sentence_index=index,
                        kind=classify_development(overlap, self.repetition_overlap),
                        context_overlap=round(overlap, 4),
                    ))
                active[term] = index

            active_pairs = pairs(active)
            for a, b in active_pairs:
                self.active_pair_count += 1
                if b in self.concepts[a].related:
                    self.established_pair_count += 1
            for a, b in active_pairs:
                self.concepts[a].related.add(b)
                self.concepts[b].related.add(a)

    # === Component scores, each in [0, 1] ===

    def introduction_regularity(self) -> float:
        """How evenly new concepts arrive after the opening sentence."""
        cv = coefficient_of_variation(self.new_per_sentence[1:])
        if cv is None:
            return 0.0
        return max(0.0, 1.0 - cv)

    def development_regularity(self) -> float:
        """How similar the re-occurrence pacing is across concepts."""
        recurring = [c for c in self.concepts.values() if c.is_recurring]
        if len(recurring) >= 2:
            cv = coefficient_of_variation([mean(c.gaps()) for c in recurring])
        elif len(recurring) == 1:
            cv = coefficient_of_variation(recurring[0].gaps())
        else:
            cv = None
        if cv is None:
            return 0.0
        return max(0.0, 1.0 - cv)

    def relation_density(self) -> float:
        """Share of active concept pairs that were already related."""
        if self.active_pair_count == 0:
            return 0.0
        return self.established_pair_count / self.active_pair_count

    def event_consistency(self) -> float:
        """Share of development events of the dominant kind."""
        kinds = Counter(e.kind for c in self.concepts.values() for e in c.history)
        total = sum(kinds.values())
        if total == 0:
            return 0.0
        return kinds.most_common(1)[0][1] / total

    def event_counts(self) -> Counter:
        return Counter(e.kind for c in self.concepts.values() for e in c.history)

    def relation_count(self) -> int:
        return sum(len(c.related) for c in self.concepts.values()) // 2


class ConceptFlowAnalyzer(Analyzer):
    """Regularity of concept introduction and development."""

    name = "concept_flow"

    def extract_terms(self, tokens: list[str]) -> list[str]:
        """Content words of one sentence."""
        min_length = self.settings.concept_min_length
        stopwords = self.lexicon.stopwords
        return [
            t for t in tokens
            if t.isalpha() and len(t) >= min_length and t not in stopwords
        ]

    def analyze(self, doc: Document) -> AnalyzerResult:
        s = self.settings
        tracker = ConceptTracker(s.active_window, s.repetition_overlap)
        tracker.discover([self.extract_terms(tokens) for tokens in doc.sentence_tokens])
        tracker.develop()

        parts = {
            "introduction": tracker.introduction_regularity(),
            "development": tracker.development_regularity(),
            "relation": tracker.relation_density(),
            "event_pattern": tracker.event_consistency(),
        }
        score = 100.0 * weighted_sum(parts, s.concept_weights)

        events = tracker.event_counts()
        return self._result(
            score,
            introduction_regularity=round(parts["introduction"], 4),
            development_regularity=round(parts["development"], 4),
            relation_density=round(parts["relation"], 4),
            event_consistency=round(parts["event_pattern"], 4),
            concept_count=len(tracker.concepts),
            recurring_concepts=sum(1 for c in tracker.concepts.values() if c.is_recurring),
            relation_count=tracker.relation_count(),
            repetition_events=events[REPETITION],
            elaboration_events=events[ELABORATION],
            pivot_events=events[PIVOT],
        )
