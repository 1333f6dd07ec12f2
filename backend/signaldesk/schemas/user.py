from datetime import date
from enum import Enum
from typing import Optional

from pydantic import Field

from .common import CamelModel

FREE_PLAN = "Gratuito"
PREMIUM_PLAN = "Premium"

GUEST_USER_ID = "guest"
GUEST_USER_NAME = "Usuário Convidado"


class UserRole(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class UserStatus(str, Enum):
    ACTIVE = "Ativo"
    SUSPENDED = "Suspenso"


class User(CamelModel):
    """A logged-in user as seen by the app."""

    id: str
    name: str
    email: str
    role: UserRole = UserRole.FREE
    plan: str = FREE_PLAN


class AdminUser(CamelModel):
    """
    Row of the admin user table.

    This is a projection of the user records; removing it does not
    necessarily remove the login identity behind it.
    """

    id: str
    name: str
    email: str
    plan: str = FREE_PLAN
    status: UserStatus = UserStatus.ACTIVE
    join_date: Optional[date] = None


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: Optional[str] = None


class RegisterRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class RecoverPasswordRequest(CamelModel):
    email: str = Field(..., min_length=1)


class UpgradePlanRequest(CamelModel):
    user_id: str = Field(..., min_length=1)


class UserStatusUpdate(CamelModel):
    status: UserStatus
