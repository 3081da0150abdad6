"""Role administration and role-permission links. Gated."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.api.routes.deps import gate
from warden.core.database import get_db
from warden.schemas.envelope import ApiResponse
from warden.schemas.rbac import RoleCreate, RoleRead, RoleUpdate
from warden.services import roles as role_store

router = APIRouter(dependencies=[Depends(gate)])


@router.get("", response_model=ApiResponse[list[RoleRead]])
def list_roles(db: Annotated[Session, Depends(get_db)]) -> ApiResponse[list[RoleRead]]:
    """All roles, without permissions."""
    return ApiResponse.ok([RoleRead.model_validate(r) for r in role_store.list_roles(db)])


@router.get("/{role_id}", response_model=ApiResponse[RoleRead])
def get_role(role_id: int, db: Annotated[Session, Depends(get_db)]) -> ApiResponse[RoleRead]:
    """One role with its permissions."""
    return ApiResponse.ok(role_store.get_role_with_permissions(db, role_id))


@router.post("", response_model=ApiResponse[RoleRead])
def create_role(
    body: RoleCreate, db: Annotated[Session, Depends(get_db)]
) -> ApiResponse[RoleRead]:
    role = role_store.create_role(db, body)
    return ApiResponse.ok(RoleRead.model_validate(role), "Role created")


@router.put("/{role_id}", response_model=ApiResponse[RoleRead])
def update_role(
    role_id: int,
    body: RoleUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[RoleRead]:
    role = role_store.update_role(db, role_id, body)
    return ApiResponse.ok(RoleRead.model_validate(role), "Role updated")


@router.delete("/{role_id}", response_model=ApiResponse[None])
def delete_role(role_id: int, db: Annotated[Session, Depends(get_db)]) -> ApiResponse[None]:
    """Delete the role; its user and permission links go with it."""
    role_store.delete_role(db, role_id)
    return ApiResponse.ok(None, "Role deleted")


@router.post("/{role_id}/permissions/{permission_id}", response_model=ApiResponse[None])
def add_permission_to_role(
    role_id: int,
    permission_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    role_store.link_role_permission(db, role_id, permission_id)
    return ApiResponse.ok(None, "Permission added")


@router.delete("/{role_id}/permissions/{permission_id}", response_model=ApiResponse[None])
def remove_permission_from_role(
    role_id: int,
    permission_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[None]:
    role_store.unlink_role_permission(db, role_id, permission_id)
    return ApiResponse.ok(None, "Permission removed")
