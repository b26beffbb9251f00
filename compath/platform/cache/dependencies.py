from fastapi import Request

from compath.platform.cache.memory import ResponseCache


def get_response_cache(request: Request) -> ResponseCache:
    """Return the cache owned by the application lifespan."""
    return request.app.state.response_cache
