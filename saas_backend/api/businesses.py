"""Businesses API router."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from saas_backend.api.deps import RequireAccess, get_business_service
from saas_backend.schemas.schemas import BusinessCreate, BusinessOut, BusinessUpdate, business_out
from saas_backend.services.business_service import BusinessService

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.post(
    "/",
    response_model=BusinessOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(RequireAccess("businesses.create"))],
)
def create_business(
    body: BusinessCreate,
    businesses: BusinessService = Depends(get_business_service),
):
    return business_out(businesses.create(body))


@router.get("/", response_model=List[BusinessOut], dependencies=[Depends(RequireAccess("businesses.list"))])
def list_businesses(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    businesses: BusinessService = Depends(get_business_service),
):
    return businesses.list(page, page_size)


@router.get(
    "/founder/{founder_id}",
    response_model=List[BusinessOut],
    dependencies=[Depends(RequireAccess("businesses.by_founder"))],
)
def list_businesses_by_founder(
    founder_id: str,
    businesses: BusinessService = Depends(get_business_service),
):
    return [business_out(b) for b in businesses.list_by_founder(founder_id)]


@router.get(
    "/{business_id}",
    response_model=BusinessOut,
    dependencies=[Depends(RequireAccess("businesses.read"))],
)
def get_business(business_id: str, businesses: BusinessService = Depends(get_business_service)):
    return business_out(businesses.get(business_id))


@router.patch(
    "/{business_id}",
    response_model=BusinessOut,
    dependencies=[Depends(RequireAccess("businesses.update"))],
)
def update_business(
    business_id: str,
    body: BusinessUpdate,
    businesses: BusinessService = Depends(get_business_service),
):
    return business_out(businesses.update(business_id, body))


@router.delete(
    "/{business_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(RequireAccess("businesses.delete"))],
)
def delete_business(business_id: str, businesses: BusinessService = Depends(get_business_service)):
    businesses.soft_delete(business_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{business_id}/restore",
    response_model=BusinessOut,
    dependencies=[Depends(RequireAccess("businesses.restore"))],
)
def restore_business(business_id: str, businesses: BusinessService = Depends(get_business_service)):
    return business_out(businesses.restore(business_id))
