from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Optional

from ..schemas import AdminUser, Signal, SignalProvider, User, UserStatus


class BackendClient(ABC):
    """
    Unified interface over the hosted backends (auth + database).

    Implementations:
      - SupabaseBackendClient
      - FirebaseBackendClient

    Every method either returns data already mapped to the app's view models
    or raises; callers decide what to do on failure.
    """

    name: str = "backend"

    @abstractmethod
    def sign_in(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate and load the profile row.

        Returns None when the credentials are valid but no profile exists.
        """
        raise NotImplementedError

    @abstractmethod
    def sign_up(self, email: str, password: str, name: str) -> User:
        """Create the auth identity and its profile row."""
        raise NotImplementedError

    @abstractmethod
    def send_password_reset(self, email: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def upgrade_user(self, user_id: str) -> User:
        """Switch the user to the premium plan and return the fresh record."""
        raise NotImplementedError

    @abstractmethod
    def fetch_signals(self, offset: int, limit: int) -> tuple[list[Signal], int]:
        """Return one page of signals (newest first) and the total count."""
        raise NotImplementedError

    @abstractmethod
    def fetch_providers(self) -> list[SignalProvider]:
        raise NotImplementedError

    @abstractmethod
    def fetch_users(self) -> list[AdminUser]:
        raise NotImplementedError

    @abstractmethod
    def update_user_status(self, user_id: str, status: UserStatus) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete_user(self, user_id: str, *, remove_identity: bool = False) -> None:
        """
        Delete the profile row; also the auth identity when `remove_identity`.
        """
        raise NotImplementedError


def format_display_date(value: Any) -> str:
    """
    Turn a backend timestamp (ISO string, datetime or epoch millis) into
    the dd/mm/yyyy label shown on signal cards.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000.0)
    elif isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            # Already a display string.
            return str(value)
    return dt.strftime("%d/%m/%Y")


def parse_join_date(value: Any) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).date()
    except ValueError:
        return None


# --- row -> view model mapping shared by the backends ---


def user_from_row(user_id: str, row: dict[str, Any], email: Optional[str] = None) -> User:
    return User(
        id=user_id,
        name=row.get("name") or "Usuário",
        email=email or row.get("email") or "",
        role=row.get("role") or "free",
        plan=row.get("plan") or "Gratuito",
    )


def admin_user_from_row(user_id: str, row: dict[str, Any]) -> AdminUser:
    return AdminUser(
        id=user_id,
        name=row.get("name") or "No Name",
        email=row.get("email") or "",
        plan=row.get("plan") or "Gratuito",
        status=row.get("status") or UserStatus.ACTIVE,
        join_date=parse_join_date(row.get("created_at")),
    )


def signal_from_row(signal_id: str, row: dict[str, Any]) -> Signal:
    # Supabase embeds the joined table as "providers", Firestore stores a "provider" map.
    provider = row.get("providers") or row.get("provider") or {}
    return Signal(
        id=signal_id,
        provider=provider,
        pair=row.get("pair") or "",
        type=row.get("type"),
        timeframe=row.get("timeframe") or "",
        entry=float(row.get("entry") or 0.0),
        target=float(row.get("target") or 0.0),
        stop=float(row.get("stop") or 0.0),
        justification=row.get("justification") or "",
        image_url=row.get("image_url") or row.get("imageUrl"),
        timestamp=format_display_date(row.get("created_at") or row.get("timestamp")),
    )


def provider_from_row(provider_id: str, row: dict[str, Any]) -> SignalProvider:
    return SignalProvider(
        id=provider_id,
        name=row.get("name") or "",
        avatar_url=row.get("avatar_url") or row.get("avatarUrl") or "",
        win_rate=float(row.get("win_rate") or row.get("winRate") or 0.0),
        followers=int(row.get("followers") or 0),
        total_signals=int(row.get("total_signals") or row.get("totalSignals") or 0),
    )
