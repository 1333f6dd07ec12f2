from fastapi import APIRouter, Query, Response

from ..schemas import FollowResult, SignalProvider
from ..schemas.user import GUEST_USER_ID
from .deps import SignalDep, unwrap

router = APIRouter()


@router.get("", response_model=list[SignalProvider])
def list_providers(service: SignalDep, response: Response) -> list[SignalProvider]:
    return unwrap(response, service.get_signal_providers())


@router.post("/{provider_id}/follow", response_model=FollowResult)
def toggle_follow(
    provider_id: str,
    service: SignalDep,
    response: Response,
    user_id: str = Query(GUEST_USER_ID, alias="userId", description="Follower user id"),
) -> FollowResult:
    """
    Follow the provider, or unfollow it if already followed.
    """
    return unwrap(response, service.toggle_follow_provider(provider_id, user_id=user_id))
