from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status

from compath.features.steam.services.steam_client import extract_app_id
from compath.features.store_doctor.schemas.store_doctor import DiagnoseIn
from compath.features.store_doctor.services.listing import StoreListingLoader, get_listing_loader
from compath.features.store_doctor.services.store_doctor import StoreDoctor
from compath.features.store_doctor.services.text_evaluator import TextEvaluator, get_text_evaluator
from compath.platform.errors import ExternalServiceError
from compath.platform.logger import get_logger
from compath.platform.response import api_response

logger = get_logger("store_doctor_routes")
router = APIRouter(prefix="/store-doctor", tags=["Store Doctor"])


@router.post("/diagnose")
async def diagnose_store_page(
    diagnose_in: DiagnoseIn,
    loader: StoreListingLoader = Depends(get_listing_loader),
    evaluator: Optional[TextEvaluator] = Depends(get_text_evaluator),
):
    """
    Score a Steam store page and list what to fix.

    The text category degrades to a fixed score when no evaluator is
    configured, so this endpoint works without a Gemini key.
    """
    app_id = extract_app_id(diagnose_in.url)
    if not app_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid Steam store URL. Use https://store.steampowered.com/app/12345/...",
        )

    try:
        attrs = await loader.load(app_id, diagnose_in.lang)
    except ExternalServiceError as e:
        logger.error(f"Store data fetch failed for {app_id}: {e}")
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to fetch store data from Steam")

    if attrs is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")

    diagnosis = await StoreDoctor(evaluator).diagnose(attrs, diagnose_in.lang)
    return api_response(data=diagnosis.model_dump(), message="Store page diagnosed")
