from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ReviewText(BaseModel):
    """The parts of a fetched review the analyses read; other fields are ignored."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    recommendation_id: Optional[str] = None
    app_id: Optional[str] = None
    review: str = ""
    voted_up: bool = False


class ReviewAnalysisIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    reviews: List[ReviewText] = Field(default_factory=list)
    mental_guard_mode: bool = False
    app_id: Optional[str] = None


class ReviewCacheOptions(BaseModel):
    """Cache key options shared by the summary and keyword namespaces."""

    model_config = ConfigDict(frozen=True)

    mental_guard_mode: bool = False
    review_count: int = 0


class SummaryPoint(BaseModel):
    point: str
    quote: str = ""


class CategorySentiment(BaseModel):
    positive: int = 0
    negative: int = 0
    keywords: List[str] = Field(default_factory=list)


class ReviewSummary(BaseModel):
    good_points: List[SummaryPoint] = Field(default_factory=list)
    bad_points: List[SummaryPoint] = Field(default_factory=list)
    categories: Dict[str, CategorySentiment] = Field(default_factory=dict)


class Keyword(BaseModel):
    word: str
    score: int = 0
    count: int = 0


class KeywordSet(BaseModel):
    positive: List[Keyword] = Field(default_factory=list)
    negative: List[Keyword] = Field(default_factory=list)


class Topic(BaseModel):
    keyword: str
    count: int = 0
    summary: str = ""


class DeepKeywordSet(KeywordSet):
    positive_topics: List[Topic] = Field(default_factory=list)
    negative_topics: List[Topic] = Field(default_factory=list)


class CommunityIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    app_id: Optional[str] = None


class CommunityTopic(BaseModel):
    topic: str
    count: int = 0
    summary: str = ""


class CommunityAnalysis(BaseModel):
    topics: List[CommunityTopic] = Field(default_factory=list)


class TransformIn(BaseModel):
    review: str = ""


class ConstructiveFeedback(BaseModel):
    """One review rewritten for the developer: facts and requests, no abuse."""

    category: str = "other"
    summary: str = ""
    technical_issues: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    severity: Literal["high", "medium", "low"] = "medium"

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, value):
        value = str(value or "").strip().lower()
        return value if value in ("high", "medium", "low") else "medium"
