from __future__ import annotations

import logging
from typing import Optional

from ..schemas import FollowResult, PaginatedResponse, ServiceResult, Signal, SignalProvider
from ..schemas.user import GUEST_USER_ID
from .backend_client import BackendClient
from .fallback import call_with_fallback
from .mock_store import MockStore

logger = logging.getLogger(__name__)


def page_window(page: int, limit: int) -> tuple[int, int]:
    """Return (offset, limit) for a 1-based page."""
    if page < 1:
        raise ValueError("page must be >= 1")
    if limit < 1:
        raise ValueError("limit must be >= 1")
    return (page - 1) * limit, limit


class SignalService:
    """Read access to trading signals and their providers."""

    def __init__(self, backend: Optional[BackendClient], store: MockStore, delay: float = 0.8):
        self.backend = backend
        self.store = store
        self.delay = delay

    def get_signals(self, page: int = 1, limit: int = 10) -> ServiceResult[PaginatedResponse[Signal]]:
        """
        Return one page of signals, newest first.

        `has_more` is true while `page * limit` is below the total count. A
        backend holding no signals at all is treated like a missing backend.
        """
        offset, limit = page_window(page, limit)

        def _remote(b: BackendClient) -> Optional[PaginatedResponse[Signal]]:
            signals, total = b.fetch_signals(offset, limit)
            if total == 0:
                return None
            return PaginatedResponse[Signal](
                data=signals,
                total=total,
                page=page,
                limit=limit,
                has_more=page * limit < total,
            )

        def _mock() -> PaginatedResponse[Signal]:
            total = len(self.store.signals)
            return PaginatedResponse[Signal](
                data=self.store.signals.list(offset=offset, limit=limit),
                total=total,
                page=page,
                limit=limit,
                has_more=page * limit < total,
            )

        return call_with_fallback("get_signals", self.backend, _remote, _mock, self.delay)

    def get_signal_providers(self) -> ServiceResult[list[SignalProvider]]:
        def _remote(b: BackendClient) -> Optional[list[SignalProvider]]:
            return b.fetch_providers() or None

        return call_with_fallback(
            "get_signal_providers",
            self.backend,
            _remote,
            self.store.providers.list,
            self.delay,
        )

    def toggle_follow_provider(self, provider_id: str, user_id: str = GUEST_USER_ID) -> ServiceResult[FollowResult]:
        # Follows are only kept in memory for now.
        def _mock() -> FollowResult:
            following = self.store.toggle_follow(user_id, provider_id)
            logger.info("User %s %s provider %s", user_id, "follows" if following else "unfollowed", provider_id)
            return FollowResult(success=True, following=following)

        return call_with_fallback("toggle_follow_provider", None, None, _mock, self.delay / 2)
