from typing import Annotated, Optional

from fastapi import APIRouter, Depends

from ..db import get_backend_client
from ..services.backend_client import BackendClient

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(
    backend: Annotated[Optional[BackendClient], Depends(get_backend_client)],
) -> dict[str, str]:
    """
    Health check that also tells which data backend is active.

    `backend` is "supabase", "firebase" or "mock".
    """
    return {"status": "ok", "backend": backend.name if backend is not None else "mock"}
