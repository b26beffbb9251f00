from fastapi import APIRouter

from compath.features.analyze.routes.analyze import router as analyze_router
from compath.features.blue_ocean.routes.blue_ocean import router as blue_ocean_router
from compath.features.status.routes.status import router as status_router
from compath.features.steam.routes.reviews import router as reviews_router
from compath.features.store_doctor.routes.store_doctor import router as store_doctor_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(status_router)
api_router.include_router(reviews_router)
api_router.include_router(analyze_router)
api_router.include_router(store_doctor_router)
api_router.include_router(blue_ocean_router)
