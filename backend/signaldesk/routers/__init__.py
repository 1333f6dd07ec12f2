from fastapi import APIRouter

from .health import router as health_router
from .auth import router as auth_router
from .signals import router as signals_router
from .providers import router as providers_router
from .admin import router as admin_router
from .backtests import router as backtests_router
from .analysis import router as analysis_router

api_router = APIRouter()

# Mount all sub-routers here. This keeps main.py clean.
api_router.include_router(health_router)
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(signals_router, prefix="/signals", tags=["signals"])
api_router.include_router(providers_router, prefix="/providers", tags=["providers"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
api_router.include_router(backtests_router, prefix="/backtests", tags=["backtests"])
api_router.include_router(analysis_router, prefix="/analysis", tags=["analysis"])
