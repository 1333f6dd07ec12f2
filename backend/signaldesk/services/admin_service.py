from __future__ import annotations

import logging
from typing import Optional

from ..schemas import AdminUser, ServiceResult, UserStatus
from .backend_client import BackendClient
from .fallback import call_with_fallback
from .mock_store import MockStore

logger = logging.getLogger(__name__)


class AdminService:
    """
    User administration: list, suspend / reactivate and delete.

    Missing ids are not an error: update and delete simply do nothing and
    report `False` as their data.
    """

    def __init__(
        self,
        backend: Optional[BackendClient],
        store: MockStore,
        delay: float = 0.8,
        delete_removes_identity: bool = False,
    ):
        self.backend = backend
        self.store = store
        self.delay = delay
        self.delete_removes_identity = delete_removes_identity

    def list_users(self) -> ServiceResult[list[AdminUser]]:
        def _remote(b: BackendClient) -> Optional[list[AdminUser]]:
            return b.fetch_users() or None

        return call_with_fallback("list_users", self.backend, _remote, self.store.admin_users.list, self.delay)

    def update_user_status(self, user_id: str, status: UserStatus) -> ServiceResult[bool]:
        def _remote(b: BackendClient) -> bool:
            b.update_user_status(user_id, status)
            return True

        def _mock() -> bool:
            return self.store.admin_users.update(user_id, status=status) is not None

        return call_with_fallback("update_user_status", self.backend, _remote, _mock, self.delay / 2)

    def delete_user(self, user_id: str) -> ServiceResult[bool]:
        """
        Remove a user from the admin table.

        The login identity (auth record, or the demo user list entry) is only
        removed when `delete_removes_identity` is set.
        """
        remove_identity = self.delete_removes_identity

        def _remote(b: BackendClient) -> bool:
            b.delete_user(user_id, remove_identity=remove_identity)
            return True

        def _mock() -> bool:
            removed = self.store.admin_users.delete(user_id)
            if remove_identity:
                removed = self.store.users.delete(user_id) or removed
            elif removed:
                logger.info("Admin record %s removed, login identity kept", user_id)
            return removed

        return call_with_fallback("delete_user", self.backend, _remote, _mock, self.delay / 2)
