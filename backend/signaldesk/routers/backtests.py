from typing import Optional

from fastapi import APIRouter

from ..schemas import BacktestRequest, BacktestResult
from .deps import BacktestDep

router = APIRouter()


@router.post("", response_model=BacktestResult)
def run_backtest(service: BacktestDep, payload: Optional[BacktestRequest] = None) -> BacktestResult:
    """
    Run a simulated backtest and return its summary and last 15 trades.

    The numbers are random demo data, a new draw on every call.
    """
    user_id = payload.user_id if payload is not None else None
    return service.run_backtest(user_id=user_id)
