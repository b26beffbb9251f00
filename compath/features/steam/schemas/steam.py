from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class SteamReview(BaseModel):
    recommendation_id: str
    steam_id: Optional[str] = None
    app_id: Optional[str] = None
    language: Optional[str] = None
    review: str
    voted_up: bool
    votes_up: int = 0
    votes_funny: int = 0
    weighted_vote_score: float = 0.0
    playtime_forever: float = 0.0
    playtime_at_review: float = 0.0
    timestamp_created: Optional[int] = None
    timestamp_updated: Optional[int] = None
    comment_count: int = 0
    steam_purchase: Optional[bool] = None
    received_for_free: Optional[bool] = None
    written_during_early_access: Optional[bool] = None


class LanguageStat(BaseModel):
    language: str
    total: int
    positive: int
    negative: int
    positive_rate: int


class ReviewStats(BaseModel):
    total: int = 0
    positive: int = 0
    negative: int = 0
    positive_rate: int = 0
    average_playtime: float = 0.0
    by_language: List[LanguageStat] = Field(default_factory=list)


class PriceOverview(BaseModel):
    currency: Optional[str] = None
    initial: float
    final: float
    discount_percent: int = 0


class GameInfo(BaseModel):
    app_id: str
    name: str
    header_image: Optional[str] = None
    short_description: Optional[str] = None
    developers: List[str] = Field(default_factory=list)
    publishers: List[str] = Field(default_factory=list)
    release_date: Optional[str] = None
    genres: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    metacritic: Optional[int] = None
    price_overview: Optional[PriceOverview] = None


class ReviewsFetchIn(BaseModel):
    url: str
    language: Literal["all", "japanese", "english", "schinese", "tchinese", "korean"] = "all"
    playtime_filter: Literal["all", "5hours", "10hours"] = "all"
    date_filter: Literal["all", "30days", "90days", "180days"] = "all"
    count: int = Field(default=200, ge=1)


class ReviewsFetchOut(BaseModel):
    app_id: str
    game_info: Optional[GameInfo] = None
    reviews: List[SteamReview]
    stats: ReviewStats
    total_fetched: int


class DiscussionThread(BaseModel):
    title: str
    replies: str = ""


class OwnedGame(BaseModel):
    app_id: str
    name: str = ""
    playtime: int = 0  # minutes
    icon_url: Optional[str] = None


class UserGamesIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    steam_ids: List[str] = Field(default_factory=list)
    app_id: Optional[str] = None


class SharedGame(BaseModel):
    app_id: str
    name: str = ""
    icon_url: Optional[str] = None
    count: int
    percentage: int


class UserGamesOut(BaseModel):
    games: List[SharedGame] = Field(default_factory=list)
    total_users: int = 0
    public_users: int = 0
    public_rate: int = 0
