"""Persons API router."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from saas_backend.api.deps import RequireAccess, get_user_service
from saas_backend.schemas.schemas import PersonCreate, PersonOut, PersonUpdate, person_out
from saas_backend.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "/",
    response_model=PersonOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequireAccess("users.create"))],
)
def create_user(body: PersonCreate, users: UserService = Depends(get_user_service)):
    return person_out(users.create(body))


@router.get("/", response_model=List[PersonOut], dependencies=[Depends(RequireAccess("users.list"))])
def list_users(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    users: UserService = Depends(get_user_service),
):
    return [person_out(p) for p in users.list(page, page_size)]


@router.get("/{person_id}", response_model=PersonOut, dependencies=[Depends(RequireAccess("users.read"))])
def get_user(person_id: str, users: UserService = Depends(get_user_service)):
    return person_out(users.get(person_id))


@router.patch("/{person_id}", response_model=PersonOut, dependencies=[Depends(RequireAccess("users.update"))])
def update_user(
    person_id: str,
    body: PersonUpdate,
    users: UserService = Depends(get_user_service),
):
    return person_out(users.update(person_id, body))


@router.delete(
    "/{person_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(RequireAccess("users.delete"))],
)
def delete_user(person_id: str, users: UserService = Depends(get_user_service)):
    """Soft delete a person."""
    users.soft_delete(person_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{person_id}/restore",
    response_model=PersonOut,
    dependencies=[Depends(RequireAccess("users.restore"))],
)
def restore_user(person_id: str, users: UserService = Depends(get_user_service)):
    return person_out(users.restore(person_id))
