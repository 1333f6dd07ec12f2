"""
Pydantic models (schemas) shared by the services and the API.
"""

from .common import CamelModel, DataSource, PaginatedResponse, ServiceResult
from .user import (
    AdminUser,
    LoginRequest,
    RecoverPasswordRequest,
    RegisterRequest,
    UpgradePlanRequest,
    User,
    UserRole,
    UserStatus,
    UserStatusUpdate,
)
from .signal import FollowResult, ProviderRef, Signal, SignalProvider, SignalType
from .backtest import BacktestRequest, BacktestResult, Trade
from .analysis import AnalysisResult, IndicatorReadings

__all__ = [
    "CamelModel",
    "DataSource",
    "PaginatedResponse",
    "ServiceResult",
    "AdminUser",
    "LoginRequest",
    "RecoverPasswordRequest",
    "RegisterRequest",
    "UpgradePlanRequest",
    "User",
    "UserRole",
    "UserStatus",
    "UserStatusUpdate",
    "FollowResult",
    "ProviderRef",
    "Signal",
    "SignalProvider",
    "SignalType",
    "BacktestRequest",
    "BacktestResult",
    "Trade",
    "AnalysisResult",
    "IndicatorReadings",
]
