"""Permission administration. Gated."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from warden.api.routes.deps import gate
from warden.core.database import get_db
from warden.schemas.envelope import ApiResponse
from warden.schemas.rbac import PermissionCreate, PermissionRead, PermissionUpdate
from warden.services import permissions as permission_store

router = APIRouter(dependencies=[Depends(gate)])


@router.get("", response_model=ApiResponse[list[PermissionRead]])
def list_permissions(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[PermissionRead]]:
    permissions = permission_store.list_permissions(db)
    return ApiResponse.ok([PermissionRead.model_validate(p) for p in permissions])


@router.get("/{permission_id}", response_model=ApiResponse[PermissionRead])
def get_permission(
    permission_id: int, db: Annotated[Session, Depends(get_db)]
) -> ApiResponse[PermissionRead]:
    permission = permission_store.get_permission(db, permission_id)
    return ApiResponse.ok(PermissionRead.model_validate(permission))


@router.post("", response_model=ApiResponse[PermissionRead])
def create_permission(
    body: PermissionCreate, db: Annotated[Session, Depends(get_db)]
) -> ApiResponse[PermissionRead]:
    permission = permission_store.create_permission(db, body)
    return ApiResponse.ok(PermissionRead.model_validate(permission), "Permission created")


@router.put("/{permission_id}", response_model=ApiResponse[PermissionRead])
def update_permission(
    permission_id: int,
    body: PermissionUpdate,
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[PermissionRead]:
    permission = permission_store.update_permission(db, permission_id, body)
    return ApiResponse.ok(PermissionRead.model_validate(permission), "Permission updated")


@router.delete("/{permission_id}", response_model=ApiResponse[None])
def delete_permission(
    permission_id: int, db: Annotated[Session, Depends(get_db)]
) -> ApiResponse[None]:
    """Delete the permission and detach it from every role."""
    permission_store.delete_permission(db, permission_id)
    return ApiResponse.ok(None, "Permission deleted")
