"""
Exception types raised by the service layer.

Backend failures are normally absorbed by the mock fallback; only the errors
that have no fallback (unknown users, chart analysis) reach the caller.
"""

from typing import Any, Optional


class SignalDeskError(Exception):
    """Base exception for all SignalDesk errors"""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }


class ConfigurationError(SignalDeskError):
    """Raised when a required setting is missing at call time"""


class BackendError(SignalDeskError):
    """Raised by a backend client when the remote call fails"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.status_code = status_code


class UserNotFoundError(SignalDeskError):
    """Raised when a user id is unknown to the mock dataset"""

    def __init__(self, user_id: str):
        super().__init__("User not found", {"user_id": user_id})
        self.user_id = user_id


class AnalysisError(SignalDeskError):
    """Raised when the chart analysis cannot produce a result"""
