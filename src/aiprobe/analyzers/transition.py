"""Transition model analyzer.

Builds a first-order (bigram) transition table over the document itself and
measures how predictable each next token is under it:

    perplexity = 2 ** (-mean(log2 P(w[i+1] | w[i])))

Low perplexity relative to the human-typical band means unusually regular
phrasing (AI-like). This is a self-trained table, not a language model, so
its values sit close to 1 and grow with branching vocabulary.
"""
import math

from aiprobe.analyzers.base import (
    Analyzer, AnalyzerResult, NEUTRAL_SCORE, linear_clamp,
)
from aiprobe.utils.ngram import count_transitions
from aiprobe.utils.segmenter import Document


def transition_perplexity(tokens: list[str], epsilon: float = 1e-10) -> float:
    """Perplexity of a token stream under its own bigram table.

    Args:
        tokens: Token stream (at least two tokens)
        epsilon: Floor for transition probabilities

    Returns:
        Perplexity (>= 1.0)
    """
    pair_counts, predecessor_counts = count_transitions(tokens)
    log_sum = 0.0
    n_pairs = 0
    for i in range(len(tokens) - 1):
        pair = (tokens[i], tokens[i + 1])
        p = pair_counts[pair] / predecessor_counts[tokens[i]]
        log_sum += math.log2(max(p, epsilon))
        n_pairs += 1
    return 2 ** (-log_sum / n_pairs)


class TransitionAnalyzer(Analyzer):
    """Perplexity under the document's own transition table."""

    name = "transition"

    def analyze(self, doc: Document) -> AnalyzerResult:
        tokens = doc.tokens
        if len(tokens) < 2:
            return self._result(NEUTRAL_SCORE, perplexity=0.0, token_count=len(tokens))

        perplexity = transition_perplexity(tokens, self.settings.perplexity_epsilon)
        low, high = self.settings.perplexity_range
        score = 100.0 * (1.0 - linear_clamp(perplexity, low, high))

        pair_counts, _ = count_transitions(tokens)
        return self._result(
            score,
            perplexity=round(perplexity, 4),
            token_count=len(tokens),
            distinct_transitions=len(pair_counts),
        )
