"""API Request/Response Schemas.

All data structures for the aiprobe API endpoints. Reports serialize with
camelCase keys (`aiProbability`, `wordCount`, ...); Python code uses the
snake_case field names.
"""
from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Classification(str, Enum):
    """Segment attribution."""
    AI = "AI"
    HUMAN = "Human"


class Confidence(str, Enum):
    """Confidence band of a segment attribution."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AnalyzeRequest(CamelModel):
    """Request body for /v1/analyze."""
    text: str = Field(..., description="Text to analyze")
    language: Optional[str] = Field(None, description="Lexicon language (defaults to settings)")

    @field_validator("language")
    @classmethod
    def language_lowercase(cls, v: Optional[str]) -> Optional[str]:
        return v.strip().lower() if v else None


class SegmentResult(CamelModel):
    """Attribution of a single sentence."""
    text: str
    classification: Classification
    confidence: Confidence
    score: int = Field(..., ge=0, le=100, description="Fused AI score of the sentence")


class Distribution(CamelModel):
    """Presentation split of the document into three shares summing to 100."""
    ai_generated: int = Field(..., ge=0, le=100)
    human_ai_refined: int = Field(..., ge=0, le=100)
    human_pure: int = Field(..., ge=0, le=100)


class AnalyzerMetrics(CamelModel):
    """One analyzer's sub-score and raw metrics."""
    score: float = Field(..., ge=0, le=100)
    metrics: dict[str, float] = Field(default_factory=dict)


class AnalysisReport(CamelModel):
    """Response body for /v1/analyze."""
    ai_probability: int = Field(..., ge=0, le=100)
    word_count: int
    character_count: int
    segments: list[SegmentResult]
    metrics: dict[str, AnalyzerMetrics]
    distribution: Distribution
    oracle_degraded: bool = False
    oracle_score: Optional[int] = None
    oracle_explanations: list[str] = Field(default_factory=list)
    weights: dict[str, float] = Field(..., description="Effective fusion weights, summing to 1.0")
    language: str
    preset: str
    processing_time_ms: int = 0


class HealthResponse(BaseModel):
    """Response body for /v1/health."""
    status: str
    oracle: str
    oracle_backend: Optional[str] = None
    language: str
    preset: str


class PresetInfo(BaseModel):
    """One fusion preset."""
    name: str
    analyzer_weights: dict[str, float]
    oracle_share: float


class PresetsResponse(BaseModel):
    """Response body for /v1/presets."""
    presets: list[PresetInfo]
    active: str
