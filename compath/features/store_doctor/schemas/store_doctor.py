from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from compath.features.store_doctor.services.catalog import is_specific_tag

Severity = Literal["critical", "warning", "passed"]
SUPPORTED_LANGUAGES = ("en", "ja")


class Finding(BaseModel):
    severity: Severity
    message: str
    suggestion: Optional[str] = None


class CategoryScore(BaseModel):
    score: int = Field(ge=0, le=100)
    weight: float
    weighted_score: float
    issues: List[Finding] = Field(default_factory=list)
    warnings: List[Finding] = Field(default_factory=list)
    passed: List[Finding] = Field(default_factory=list)
    details: Dict[str, Any] = Field(default_factory=dict)


class Grade(BaseModel):
    letter: Literal["S", "A", "B", "C", "D", "F"]
    label: str
    color: str


class ListingAttributes(BaseModel):
    """Everything the diagnosis looks at, already pulled off the store listing."""

    app_id: str
    name: str = ""
    tags: List[str] = Field(default_factory=list)
    trailer_count: int = 0
    screenshot_count: int = 0
    has_header_image: bool = False
    short_description: str = ""
    detailed_description_html: str = ""
    detailed_description_html_alt: str = ""
    language_count: int = 0
    genre_count: int = 0
    category_count: int = 0

    header_image: Optional[str] = None
    developers: List[str] = Field(default_factory=list)
    release_date: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    is_free: bool = False
    price: Optional[str] = None

    @property
    def tag_count(self) -> int:
        return len(self.tags)

    @property
    def specific_tag_ratio(self) -> float:
        if not self.tags:
            return 0.0
        return sum(1 for tag in self.tags if is_specific_tag(tag)) / len(self.tags)


class GameSummary(BaseModel):
    app_id: str
    name: str
    header_image: Optional[str] = None
    developers: List[str] = Field(default_factory=list)
    release_date: Optional[str] = None


class Diagnosis(BaseModel):
    app_id: str
    name: str
    total_score: int = Field(ge=0, le=100)
    grade: Grade
    categories: Dict[str, CategoryScore]
    suggested_tags: List[str] = Field(default_factory=list)
    game_info: Optional[GameSummary] = None


class TextScores(BaseModel):
    content_clarity: int
    appeal: int
    readability: int
    completeness: int


class TextEvaluation(BaseModel):
    scores: TextScores
    overall_score: int
    summary: str
    good_points: List[str]
    improvements: List[str]


class DiagnoseIn(BaseModel):
    url: str
    lang: str = "en"

    @field_validator("lang", mode="before")
    @classmethod
    def fallback_to_english(cls, value):
        return value if value in SUPPORTED_LANGUAGES else "en"
