"""User administration. Every route here passes through the permission gate."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.api.routes.deps import gate
from warden.core.database import get_db
from warden.schemas.envelope import ApiResponse
from warden.schemas.rbac import UserRead, UserUpdate
from warden.services import users as user_store

router = APIRouter(dependencies=[Depends(gate)])


@router.get("", response_model=ApiResponse[list[UserRead]])
def list_users(db: Annotated[Session, Depends(get_db)]) -> ApiResponse[list[UserRead]]:
    """All users, without roles."""
    users = user_store.list_users(db)
    return ApiResponse.ok([UserRead.model_validate(u) for u in users])


@router.get("/{user_id}", response_model=ApiResponse[UserRead])
def get_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> ApiResponse[UserRead]:
    """One user with roles and permissions."""
    return ApiResponse.ok(user_store.get_user_with_roles(db, user_id))


@router.put("/{user_id}", response_model=ApiResponse[UserRead])
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[UserRead]:
    """Change username and/or email. A password in the body is ignored."""
    user = user_store.update_profile(db, user_id, body)
    return ApiResponse.ok(UserRead.model_validate(user), "User updated")


@router.delete("/{user_id}", response_model=ApiResponse[None])
def delete_user(user_id: int, db: Annotated[Session, Depends(get_db)]) -> ApiResponse[None]:
    user_store.delete_user(db, user_id)
    return ApiResponse.ok(None, "User deleted")


@router.post("/{user_id}/roles/{role_id}", response_model=ApiResponse[None])
def assign_role_to_user(
    user_id: int,
    role_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    """Give the user a role; assigning a role it already holds is a no-op."""
    user_store.assign_role_to_user(db, user_id, role_id)
    return ApiResponse.ok(None, "Role assigned")


@router.delete("/{user_id}/roles/{role_id}", response_model=ApiResponse[None])
def remove_role_from_user(
    user_id: int,
    role_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    user_store.remove_role_from_user(db, user_id, role_id)
    return ApiResponse.ok(None, "Role removed")
