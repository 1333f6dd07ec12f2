from typing import Annotated, TypeVar

from fastapi import Depends, Response

from ..db import (
    get_admin_service,
    get_analysis_service,
    get_auth_service,
    get_backtest_service,
    get_signal_service,
)
from ..schemas import ServiceResult
from ..services.admin_service import AdminService
from ..services.analysis_service import AnalysisService
from ..services.auth_service import AuthService
from ..services.backtest_service import BacktestService
from ..services.signal_service import SignalService

T = TypeVar("T")

DATA_SOURCE_HEADER = "X-Data-Source"

AuthDep = Annotated[AuthService, Depends(get_auth_service)]
SignalDep = Annotated[SignalService, Depends(get_signal_service)]
AdminDep = Annotated[AdminService, Depends(get_admin_service)]
BacktestDep = Annotated[BacktestService, Depends(get_backtest_service)]
AnalysisDep = Annotated[AnalysisService, Depends(get_analysis_service)]


def unwrap(response: Response, result: ServiceResult[T]) -> T:
    """Expose where the data came from as a header and return the payload."""
    response.headers[DATA_SOURCE_HEADER] = result.source.value
    return result.data
