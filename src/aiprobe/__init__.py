"""aiprobe - composite AI-text detection engine.

Fuses independent stylometric analyzers with an optional external
judgment oracle into one AI probability, and labels each sentence.
"""

__version__ = "0.1.0"
