from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

VerdictBucket = Literal["blue_best", "blue_promising", "yellow", "red", "purple"]
Level = Literal["high", "medium", "low"]


class ComparableListing(BaseModel):
    id: str
    name: str = ""
    popularity_proxy: int = 0
    genres: List[str] = Field(default_factory=list)


class MarketSample(BaseModel):
    """Counts and a detail sample for one tag combination."""

    tags: List[str] = Field(default_factory=list)
    total_count: int = 0
    combined_count: int = 0
    per_filter_counts: Dict[str, int] = Field(default_factory=dict)
    listings: List[ComparableListing] = Field(default_factory=list)


class AxisScore(BaseModel):
    score: int = Field(ge=0, le=100)
    weight: float
    measure: float


class Position(BaseModel):
    x: int
    y: int


class Verdict(BaseModel):
    bucket: VerdictBucket
    color: Literal["blue", "yellow", "red", "purple"]
    label: str
    description: str
    recommendation: str
    position: Position
    golden_zone: bool = False


class MarketStats(BaseModel):
    competitor_count: int
    avg_reviews: float
    hit_count: int
    hit_density: float


class MarketScore(BaseModel):
    total: int = Field(ge=0, le=100)
    axes: Dict[str, AxisScore]
    verdict: Verdict
    stats: MarketStats


class AnalyzeIn(BaseModel):
    tags: List[str] = Field(default_factory=list)
    free_text: Optional[str] = None


class MarketInsight(BaseModel):
    """The LLM's reading of the market, next to the computed score."""

    estimated_demand: Level = "medium"
    risk_level: Level = "medium"
    summary: str = ""
    strengths: List[str] = Field(default_factory=list)
    risks: List[str] = Field(default_factory=list)
    competitor_weaknesses: List[str] = Field(default_factory=list)
    differentiation: List[str] = Field(default_factory=list)
    winning_strategy: str = ""
    verdict: str = ""

    @field_validator("estimated_demand", "risk_level", mode="before")
    @classmethod
    def normalize_level(cls, value):
        value = str(value or "").strip().lower()
        return value if value in ("high", "medium", "low") else "medium"


class PivotSuggestion(BaseModel):
    add_tags: List[str] = Field(default_factory=list)
    remove_tags: List[str] = Field(default_factory=list)
    concept: str = ""
    reason: str = ""
    pitch: str = ""


class MarketAnalysisOut(BaseModel):
    tags: List[str]
    sample: MarketSample
    score: MarketScore
    free_text: Optional[str] = None
    ai_analysis: Optional[MarketInsight] = None
    pivot_suggestions: List[PivotSuggestion] = Field(default_factory=list)
