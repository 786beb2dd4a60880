"""Logging utilities for aiprobe.

Provides audit logging for analysis requests.
"""
import logging
import hashlib
from typing import Optional
from pathlib import Path

from aiprobe.config import get_settings


def get_audit_logger() -> logging.Logger:
    """Get or create audit logger.

    Returns:
        Logger configured for audit logging
    """
    logger = logging.getLogger("aiprobe.audit")

    if not logger.handlers:
        settings = get_settings()
        log_path = Path(settings.log_path)
        log_path.mkdir(parents=True, exist_ok=True)

        # File handler for audit logs
        handler = logging.FileHandler(log_path / "audit.log")
        handler.setFormatter(logging.Formatter(
            "%(asctime)s - %(levelname)s - %(message)s"
        ))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def hash_text(text: str) -> str:
    """Create SHA256 hash of text for logging.

    Submitted documents are logged by hash, never verbatim.

    Args:
        text: Text to hash

    Returns:
        First 16 characters of SHA256 hash
    """
    return hashlib.sha256(text.encode()).hexdigest()[:16]


def log_analysis_request(
    text: str,
    language: str,
    preset: str,
) -> None:
    """Log an analysis request (without its content).

    Args:
        text: Input text (will be hashed)
        language: Lexicon language in use
        preset: Fusion preset in use
    """
    logger = get_audit_logger()
    logger.info(
        f"ANALYSIS_REQUEST | "
        f"input_hash={hash_text(text)} | "
        f"input_len={len(text)} | "
        f"language={language} | "
        f"preset={preset}"
    )


def log_analysis_result(
    input_hash: str,
    ai_probability: int,
    oracle_score: Optional[int],
    oracle_degraded: bool,
    segment_count: int,
    processing_time_ms: int,
) -> None:
    """Log an analysis result.

    Args:
        input_hash: Hash of input text
        ai_probability: Fused probability
        oracle_score: Oracle probability, if the oracle answered
        oracle_degraded: Whether fusion fell back to local analyzers
        segment_count: Number of classified sentences
        processing_time_ms: Processing time in milliseconds
    """
    logger = get_audit_logger()
    logger.info(
        f"ANALYSIS_RESULT | "
        f"input_hash={input_hash} | "
        f"ai_probability={ai_probability} | "
        f"oracle_score={oracle_score} | "
        f"oracle_degraded={oracle_degraded} | "
        f"segments={segment_count} | "
        f"processing_time_ms={processing_time_ms}"
    )


def log_oracle_failure(input_hash: str, reason: str) -> None:
    """Log an oracle call that degraded to local-only fusion.

    Args:
        input_hash: Hash of input text
        reason: Why the oracle was treated as unavailable
    """
    logger = get_audit_logger()
    logger.warning(
        f"ORACLE_UNAVAILABLE | "
        f"input_hash={input_hash} | "
        f"reason={reason}"
    )
