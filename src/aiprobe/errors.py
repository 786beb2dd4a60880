"""Error taxonomy for the detection engine."""


class AnalysisError(Exception):
    """Base class for detection errors."""


class InvalidInput(AnalysisError, ValueError):
    """Document is empty or whitespace only. Raised before any analyzer runs."""


class OracleUnavailable(AnalysisError):
    """Oracle timed out, failed, or returned something unparseable.

    Never propagated to callers of the pipeline: fusion falls back to the
    local analyzers and the report is flagged as oracle-degraded.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class FusionInconsistency(AnalysisError, ValueError):
    """Configured weights or ranges are unusable. Raised at settings load time."""
