from pydantic import Field

from .common import CamelModel


class IndicatorReadings(CamelModel):
    rsi: str
    volume: str


class AnalysisResult(CamelModel):
    """
    Structured reading of a chart screenshot returned by the AI model.

    Field names on the wire match the response schema sent to the model.
    """

    patterns: list[str] = Field(default_factory=list)
    trend: str
    indicators: IndicatorReadings
    recommendation: str
    confidence_score: float
    summary: str
