from fastapi import APIRouter

from compath import __version__
from compath.platform.config import settings
from compath.platform.response import api_response

router = APIRouter(tags=["Status"])


@router.get("/status")
async def service_status():
    return api_response(
        data={"status": "ok", "ai_enabled": settings.ai_enabled, "version": __version__},
        message="Service status",
    )
