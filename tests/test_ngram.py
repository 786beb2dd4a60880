"""Tests for n-gram utilities."""
from aiprobe.utils.ngram import tokenize, raw_tokens, get_ngrams, count_transitions


class TestTokenize:
    """Tests for tokenize function."""

    def test_basic_tokenize(self):
        """Test basic tokenization."""
        text = "Hello, World! This is a test."
        tokens = tokenize(text)
        assert tokens == ["hello", "world", "this", "is", "a", "test"]

    def test_empty_text(self):
        """Test empty text."""
        assert tokenize("") == []
        assert tokenize("   ") == []

    def test_unicode(self):
        """Test unicode handling."""
        tokens = tokenize("Ærligt talt, måske")
        assert tokens == ["ærligt", "talt", "måske"]

    def test_raw_tokens_keep_punctuation(self):
        assert raw_tokens("Hi there, you.") == ["Hi", "there,", "you."]


class TestGetNgrams:
    """Tests for get_ngrams function."""

    def test_bigrams(self):
        assert get_ngrams(["a", "b", "c"], 2) == [("a", "b"), ("b", "c")]

    def test_too_short(self):
        assert get_ngrams(["a", "b"], 3) == []

    def test_any_hashable(self):
        shapes = [("x", "s"), ("X", "m"), ("x", "s")]
        assert get_ngrams(shapes, 3) == [tuple(shapes)]


class TestCountTransitions:
    """Tests for the first-order transition table."""

    def test_counts(self):
        pairs, predecessors = count_transitions(["a", "b", "a", "c"])
        assert pairs[("a", "b")] == 1
        assert pairs[("b", "a")] == 1
        assert pairs[("a", "c")] == 1
        assert predecessors["a"] == 2
        # Final token never precedes anything
        assert predecessors["c"] == 0

    def test_single_token(self):
        pairs, predecessors = count_transitions(["a"])
        assert not pairs
        assert not predecessors
