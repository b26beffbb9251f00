class ExternalServiceError(Exception):
    """An upstream call (Steam, Gemini) failed or returned something unusable."""

    def __init__(self, service: str, message: str):
        self.service = service
        super().__init__(f"{service}: {message}")


class AIUnavailableError(Exception):
    """LLM features were requested but no API key is configured."""


class CacheKeyError(ValueError):
    """Cache options could not be serialized into a deterministic key."""
