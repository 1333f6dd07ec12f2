from fastapi import APIRouter, Response, status

from ..schemas import LoginRequest, RecoverPasswordRequest, RegisterRequest, UpgradePlanRequest, User
from .deps import AuthDep, unwrap

router = APIRouter()


@router.post("/login", response_model=User)
def login(payload: LoginRequest, service: AuthDep, response: Response) -> User:
    """
    Log in with email and (optionally) password.

    Without a password, or when the backend is unreachable, the demo users
    are searched; unknown emails get a guest account.
    """
    return unwrap(response, service.login(payload.email, payload.password))


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, service: AuthDep, response: Response) -> User:
    return unwrap(response, service.register(payload.email, payload.password, payload.name))


@router.post("/recover-password", status_code=status.HTTP_202_ACCEPTED)
def recover_password(payload: RecoverPasswordRequest, service: AuthDep, response: Response) -> dict:
    unwrap(response, service.recover_password(payload.email))
    return {"status": "sent"}


@router.post("/upgrade", response_model=User)
def upgrade_plan(payload: UpgradePlanRequest, service: AuthDep, response: Response) -> User:
    """
    Switch a user to the premium plan. Unknown ids answer 404.
    """
    return unwrap(response, service.upgrade_plan(payload.user_id))
