from fastapi import APIRouter, Query, Response

from ..schemas import PaginatedResponse, Signal
from .deps import SignalDep, unwrap

router = APIRouter()


@router.get("", response_model=PaginatedResponse[Signal])
def list_signals(
    service: SignalDep,
    response: Response,
    page: int = Query(1, ge=1, description="1-based page number"),
    limit: int = Query(10, ge=1, le=100, description="Signals per page"),
) -> PaginatedResponse[Signal]:
    """
    Return one page of trading signals, newest first.
    """
    return unwrap(response, service.get_signals(page=page, limit=limit))
