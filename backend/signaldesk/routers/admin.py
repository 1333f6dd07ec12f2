from fastapi import APIRouter, Response, status

from ..schemas import AdminUser, UserStatusUpdate
from .deps import AdminDep, unwrap

router = APIRouter()


@router.get("/users", response_model=list[AdminUser])
def list_users(service: AdminDep, response: Response) -> list[AdminUser]:
    return unwrap(response, service.list_users())


@router.patch("/users/{user_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def update_user_status(user_id: str, payload: UserStatusUpdate, service: AdminDep, response: Response) -> None:
    """
    Suspend or reactivate a user. Unknown ids are ignored.
    """
    unwrap(response, service.update_user_status(user_id, payload.status))


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, service: AdminDep, response: Response) -> None:
    """
    Remove a user from the admin table. Unknown ids are ignored.

    Whether the login identity goes too depends on DELETE_REMOVES_IDENTITY.
    """
    unwrap(response, service.delete_user(user_id))
