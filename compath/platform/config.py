from pathlib import Path
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ── App ─────────────────────────────────────
    APP_NAME: str = "Compath"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    DEBUG: bool = False

    # ── LLM (Gemini through its OpenAI-compatible endpoint) ──
    GOOGLE_GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # ── Steam ───────────────────────────────────
    STEAM_STORE_URL: str = "https://store.steampowered.com"
    STEAM_COMMUNITY_URL: str = "https://steamcommunity.com"
    STEAM_WEB_API_URL: str = "https://api.steampowered.com"
    STEAM_API_KEY: Optional[str] = None  # Web API key, needed for reviewer libraries
    STEAM_REQUEST_TIMEOUT: float = 15.0
    REVIEW_FETCH_LIMIT: int = 1000
    MARKET_SAMPLE_SIZE: int = 5
    USER_GAMES_MAX_IDS: int = 100

    # ── Cache ───────────────────────────────────
    CACHE_SWEEP_INTERVAL_SECONDS: int = 3600  # hourly
    CACHE_MAX_ENTRIES: int = 10_000

    @property
    def ai_enabled(self) -> bool:
        return bool(self.GOOGLE_GEMINI_API_KEY)

    class Config:
        env_file = str(Path(__file__).parent.parent.parent / ".env")
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


settings = Settings()
