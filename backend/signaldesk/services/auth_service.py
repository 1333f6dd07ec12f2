from __future__ import annotations

import logging
import time
from typing import Optional

from ..exceptions import UserNotFoundError
from ..schemas import AdminUser, ServiceResult, User, UserRole, UserStatus
from ..schemas.user import FREE_PLAN, GUEST_USER_ID, GUEST_USER_NAME, PREMIUM_PLAN
from .backend_client import BackendClient
from .fallback import call_with_fallback
from .mock_store import MockStore

logger = logging.getLogger(__name__)

GUEST_EMAIL = "guest@test.com"


def guest_user(email: str, role: UserRole = UserRole.FREE) -> User:
    plan = PREMIUM_PLAN if role is UserRole.PREMIUM else FREE_PLAN
    return User(id=GUEST_USER_ID, name=GUEST_USER_NAME, email=email, role=role, plan=plan)


class AuthService:
    """
    Login, registration, password recovery and plan upgrades.

    Uses the configured backend when there is one and degrades to the
    in-memory users otherwise.
    """

    def __init__(self, backend: Optional[BackendClient], store: MockStore, delay: float = 0.8):
        self.backend = backend
        self.store = store
        self.delay = delay

    def login(self, email: str, password: Optional[str] = None) -> ServiceResult[User]:
        """
        Remote login needs a password; without one we go straight to the
        demo users. Unknown emails get a guest account.
        """

        def _mock_login() -> User:
            user = self.store.users.find(lambda u: u.email == email)
            return user if user is not None else guest_user(email)

        remote = (lambda b: b.sign_in(email, password)) if password else None
        return call_with_fallback("login", self.backend, remote, _mock_login, self.delay)

    def register(self, email: str, password: str, name: str) -> ServiceResult[User]:
        def _mock_register() -> User:
            stamp = int(time.time() * 1000)
            while self.store.users.get(f"new_{stamp}") is not None:
                stamp += 1
            new_user = User(
                id=f"new_{stamp}",
                name=name,
                email=email,
                role=UserRole.FREE,
                plan=FREE_PLAN,
            )
            self.store.users.insert(new_user)
            # Newest first in the admin table.
            self.store.admin_users.insert(
                AdminUser(
                    id=new_user.id,
                    name=new_user.name,
                    email=new_user.email,
                    plan=FREE_PLAN,
                    status=UserStatus.ACTIVE,
                ),
                at_front=True,
            )
            return new_user

        return call_with_fallback(
            "register",
            self.backend,
            lambda b: b.sign_up(email, password, name),
            _mock_register,
            self.delay,
        )

    def recover_password(self, email: str) -> ServiceResult[bool]:
        logger.info("Password recovery requested for %s", email)

        def _remote(b: BackendClient) -> bool:
            b.send_password_reset(email)
            return True

        return call_with_fallback("recover_password", self.backend, _remote, lambda: True, self.delay)

    def upgrade_plan(self, user_id: str) -> ServiceResult[User]:
        """
        Move a user to the premium plan.

        Raises:
            UserNotFoundError: in mock mode, for an id that is neither known
                nor the guest account.
        """

        def _mock_upgrade() -> User:
            updated = self.store.users.update(user_id, role=UserRole.PREMIUM, plan=PREMIUM_PLAN)
            if updated is not None:
                self.store.admin_users.update(user_id, plan=PREMIUM_PLAN)
                return updated
            if user_id == GUEST_USER_ID:
                return guest_user(GUEST_EMAIL, role=UserRole.PREMIUM)
            raise UserNotFoundError(user_id)

        return call_with_fallback(
            "upgrade_plan",
            self.backend,
            lambda b: b.upgrade_user(user_id),
            _mock_upgrade,
            self.delay,
        )
