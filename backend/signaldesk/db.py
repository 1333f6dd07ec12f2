from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from .config import Settings, get_settings
from .services.admin_service import AdminService
from .services.analysis_service import AnalysisService
from .services.auth_service import AuthService
from .services.backend_client import BackendClient
from .services.backtest_service import BacktestService
from .services.firebase_client import FirebaseBackendClient
from .services.mock_store import MockStore, build_mock_store
from .services.signal_service import SignalService
from .services.supabase_client import SupabaseBackendClient

logger = logging.getLogger(__name__)


def supabase_configured(settings: Settings) -> bool:
    return bool(settings.SUPABASE_URL and settings.SUPABASE_ANON_KEY)


def firebase_configured(settings: Settings) -> bool:
    # Web API keys always start with "AIza"; anything else is a placeholder.
    key = settings.FIREBASE_API_KEY
    return bool(key and key.startswith("AIza") and settings.FIREBASE_PROJECT_ID)


def _create_supabase(settings: Settings) -> BackendClient:
    return SupabaseBackendClient(
        url=settings.SUPABASE_URL,
        anon_key=settings.SUPABASE_ANON_KEY,
        service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
    )


def _create_firebase(settings: Settings) -> BackendClient:
    return FirebaseBackendClient(
        api_key=settings.FIREBASE_API_KEY,
        project_id=settings.FIREBASE_PROJECT_ID,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


def create_backend_client(settings: Settings) -> Optional[BackendClient]:
    """
    Build the backend handle selected by the settings, or None for mock mode.

    Missing credentials are a normal setup, not an error.
    """
    provider = settings.BACKEND_PROVIDER
    if provider == "auto":
        if supabase_configured(settings):
            provider = "supabase"
        elif firebase_configured(settings):
            provider = "firebase"
        else:
            provider = "mock"

    if provider == "supabase" and not supabase_configured(settings):
        logger.warning("BACKEND_PROVIDER=supabase but SUPABASE_URL / SUPABASE_ANON_KEY are missing")
        provider = "mock"
    elif provider == "firebase" and not firebase_configured(settings):
        logger.warning("BACKEND_PROVIDER=firebase but the Firebase API key / project id are missing or invalid")
        provider = "mock"

    if provider == "mock":
        logger.warning("No backend credentials found, running in mock (demo) mode")
        return None

    factory = _create_supabase if provider == "supabase" else _create_firebase
    try:
        client = factory(settings)
    except Exception as e:
        logger.error("Failed to initialise the %s backend, running in mock mode: %s", provider, e)
        return None

    logger.info("Connected to the %s backend", provider)
    return client


# --- FastAPI dependencies ---


@lru_cache()
def get_backend_client() -> Optional[BackendClient]:
    """Selected once per process."""
    return create_backend_client(get_settings())


@lru_cache()
def get_mock_store() -> MockStore:
    return build_mock_store()


def get_auth_service() -> AuthService:
    settings = get_settings()
    return AuthService(get_backend_client(), get_mock_store(), delay=settings.MOCK_DELAY_SECONDS)


def get_signal_service() -> SignalService:
    settings = get_settings()
    return SignalService(get_backend_client(), get_mock_store(), delay=settings.MOCK_DELAY_SECONDS)


def get_admin_service() -> AdminService:
    settings = get_settings()
    return AdminService(
        get_backend_client(),
        get_mock_store(),
        delay=settings.MOCK_DELAY_SECONDS,
        delete_removes_identity=settings.DELETE_REMOVES_IDENTITY,
    )


def get_backtest_service() -> BacktestService:
    return BacktestService(
        get_mock_store(),
        delay=get_settings().BACKTEST_DELAY_SECONDS,
        backend=get_backend_client(),
    )


def get_analysis_service() -> AnalysisService:
    settings = get_settings()
    return AnalysisService(api_key=settings.GEMINI_API_KEY, model=settings.GEMINI_MODEL)
