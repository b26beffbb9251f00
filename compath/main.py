from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from compath import __version__
from compath.api_routers.v1 import api_router
from compath.features.health.routes.health import router as health_router
from compath.platform.cache.memory import ResponseCache
from compath.platform.config import settings
from compath.platform.errors import AIUnavailableError
from compath.platform.exceptions import add_exception_handlers
from compath.platform.llm import LLMClient
from compath.platform.logger import get_logger

logger = get_logger("main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache = ResponseCache(maxsize=settings.CACHE_MAX_ENTRIES)
    app.state.response_cache = cache
    cache.start_sweeper(settings.CACHE_SWEEP_INTERVAL_SECONDS)

    try:
        llm_client = LLMClient()
    except AIUnavailableError as e:
        logger.warning(f"AI features disabled: {e}")
        llm_client = None
    app.state.llm_client = llm_client

    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT}, AI {'enabled' if llm_client else 'disabled'})")
    try:
        yield
    finally:
        await cache.shutdown()
        if llm_client is not None:
            await llm_client.close()


app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="Store page, review and market analysis for Steam developers",
    version=__version__,
    debug=settings.DEBUG,
    lifespan=lifespan,
)


# Root endpoint for basic info
@app.get("/", tags=["Info"])
def root():
    return {
        "app_name": f"{settings.APP_NAME} API",
        "description": "Steam developer assistant: review analysis, store page diagnosis and market scoring.",
        "version": __version__,
        "docs_url": "/docs",
        "api_base": "/api/v1",
    }


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

add_exception_handlers(app)

app.include_router(health_router)
app.include_router(api_router, prefix="/api/v1")
