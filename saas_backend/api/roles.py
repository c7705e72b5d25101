"""Roles API router."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from saas_backend.api.deps import RequireAccess, get_role_service
from saas_backend.schemas.schemas import RoleCreate, RoleOut, RoleUpdate, role_out
from saas_backend.services.role_service import RoleService

router = APIRouter(prefix="/roles", tags=["roles"])


@router.post(
    "/",
    response_model=RoleOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequireAccess("roles.create"))],
)
def create_role(body: RoleCreate, roles: RoleService = Depends(get_role_service)):
    """Create a role; omitted permissions fall back to the role's defaults."""
    return role_out(roles.create(body))


@router.get("/", response_model=List[RoleOut], dependencies=[Depends(RequireAccess("roles.list"))])
def list_roles(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    roles: RoleService = Depends(get_role_service),
):
    return roles.list(page, page_size)


@router.get("/{role_id}", response_model=RoleOut, dependencies=[Depends(RequireAccess("roles.read"))])
def get_role(role_id: str, roles: RoleService = Depends(get_role_service)):
    return role_out(roles.get(role_id))


@router.patch("/{role_id}", response_model=RoleOut, dependencies=[Depends(RequireAccess("roles.update"))])
def update_role(role_id: str, body: RoleUpdate, roles: RoleService = Depends(get_role_service)):
    return role_out(roles.update(role_id, body))


@router.delete(
    "/{role_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(RequireAccess("roles.delete"))],
)
def delete_role(role_id: str, roles: RoleService = Depends(get_role_service)):
    roles.soft_delete(role_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{role_id}/restore",
    response_model=RoleOut,
    dependencies=[Depends(RequireAccess("roles.restore"))],
)
def restore_role(role_id: str, roles: RoleService = Depends(get_role_service)):
    return role_out(roles.restore(role_id))
