from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional, TypeVar

from supabase import Client, PostgrestAPIError, create_client

from ..exceptions import BackendError
from ..schemas import AdminUser, Signal, SignalProvider, User, UserStatus
from .backend_client import (
    BackendClient,
    admin_user_from_row,
    provider_from_row,
    signal_from_row,
    user_from_row,
)

logger = logging.getLogger(__name__)

R = TypeVar("R")

USERS_TABLE = "users"
SIGNALS_TABLE = "signals"
PROVIDERS_TABLE = "providers"

# Provider columns joined onto every signal row.
SIGNAL_SELECT = "*, providers(name, avatar_url, win_rate)"

# PostgREST answers 416 with this code when the range starts past the last row.
RANGE_NOT_SATISFIABLE = "PGRST103"


class SupabaseBackendClient(BackendClient):
    """
    Backend implementation on top of the official supabase-py client.

    The profile data lives in a `users` table keyed by the auth user id.
    """

    name = "supabase"

    def __init__(
        self,
        url: str,
        anon_key: str,
        service_role_key: str = "",
        client: Optional[Client] = None,
    ) -> None:
        self.url = url
        self.client = client or create_client(url, anon_key)
        self._service_role_key = service_role_key
        self._admin_client: Optional[Client] = None

    def _call(self, operation: str, fn: Callable[[], R]) -> R:
        try:
            return fn()
        except BackendError:
            raise
        except Exception as e:
            raise BackendError(f"Supabase {operation} failed: {e}", context={"operation": operation}) from e

    def _get_profile(self, user_id: str) -> Optional[dict[str, Any]]:
        res = (
            self.client.table(USERS_TABLE)
            .select("*")
            .eq("id", user_id)
            .limit(1)
            .execute()
        )
        rows = res.data or []
        return rows[0] if rows else None

    # --- auth ---

    def sign_in(self, email: str, password: str) -> Optional[User]:
        def _run() -> Optional[User]:
            res = self.client.auth.sign_in_with_password({"email": email, "password": password})
            if res.user is None:
                raise BackendError("Supabase sign-in returned no user")
            profile = self._get_profile(res.user.id)
            if profile is None:
                logger.info("[SupabaseBackendClient] no profile row for %s", res.user.id)
                return None
            return user_from_row(res.user.id, profile, email=res.user.email)

        return self._call("sign_in", _run)

    def sign_up(self, email: str, password: str, name: str) -> User:
        def _run() -> User:
            res = self.client.auth.sign_up(
                {"email": email, "password": password, "options": {"data": {"name": name}}}
            )
            if res.user is None:
                raise BackendError("Supabase sign-up returned no user")
            row = {
                "id": res.user.id,
                "name": name,
                "email": email,
                "role": "free",
                "plan": "Gratuito",
                "status": UserStatus.ACTIVE.value,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }
            self.client.table(USERS_TABLE).insert(row).execute()
            return user_from_row(res.user.id, row)

        return self._call("sign_up", _run)

    def send_password_reset(self, email: str) -> None:
        self._call("send_password_reset", lambda: self.client.auth.reset_password_for_email(email))

    def upgrade_user(self, user_id: str) -> User:
        def _run() -> User:
            (
                self.client.table(USERS_TABLE)
                .update({"role": "premium", "plan": "Premium"})
                .eq("id", user_id)
                .execute()
            )
            profile = self._get_profile(user_id) or {}
            return user_from_row(user_id, {**profile, "role": "premium", "plan": "Premium"})

        return self._call("upgrade_user", _run)

    # --- data ---

    def fetch_signals(self, offset: int, limit: int) -> tuple[list[Signal], int]:
        def _run() -> tuple[list[Signal], int]:
            try:
                res = (
                    self.client.table(SIGNALS_TABLE)
                    .select(SIGNAL_SELECT, count="exact")
                    .order("created_at", desc=True)
                    .range(offset, offset + limit - 1)
                    .execute()
                )
            except PostgrestAPIError as e:
                if e.code != RANGE_NOT_SATISFIABLE:
                    raise
                # Page past the end: empty page, real total.
                res = self.client.table(SIGNALS_TABLE).select("id", count="exact", head=True).execute()
                return [], res.count or 0
            rows = res.data or []
            signals = [signal_from_row(str(row["id"]), row) for row in rows]
            total = res.count if res.count is not None else len(signals)
            return signals, total

        return self._call("fetch_signals", _run)

    def fetch_providers(self) -> list[SignalProvider]:
        def _run() -> list[SignalProvider]:
            res = self.client.table(PROVIDERS_TABLE).select("*").order("name").execute()
            return [provider_from_row(str(row["id"]), row) for row in res.data or []]

        return self._call("fetch_providers", _run)

    def fetch_users(self) -> list[AdminUser]:
        def _run() -> list[AdminUser]:
            res = (
                self.client.table(USERS_TABLE)
                .select("id, name, email, plan, status, created_at")
                .order("created_at", desc=True)
                .execute()
            )
            return [admin_user_from_row(str(row["id"]), row) for row in res.data or []]

        return self._call("fetch_users", _run)

    # --- admin ---

    def update_user_status(self, user_id: str, status: UserStatus) -> None:
        self._call(
            "update_user_status",
            lambda: self.client.table(USERS_TABLE).update({"status": status.value}).eq("id", user_id).execute(),
        )

    def _get_admin_client(self) -> Client:
        if not self._service_role_key:
            raise BackendError("SUPABASE_SERVICE_ROLE_KEY is required to delete auth users")
        if self._admin_client is None:
            self._admin_client = create_client(self.url, self._service_role_key)
        return self._admin_client

    def delete_user(self, user_id: str, *, remove_identity: bool = False) -> None:
        def _run() -> None:
            self.client.table(USERS_TABLE).delete().eq("id", user_id).execute()
            if remove_identity:
                self._get_admin_client().auth.admin.delete_user(user_id)

        self._call("delete_user", _run)
