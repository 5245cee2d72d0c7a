"""Unit router - FastAPI endpoints for clinic units"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import TenantContext, get_tenant_context
from ...database import get_db
from ...models import Unit
from .schemas import UnitCreate, UnitResponse, UnitUpdate
from .service import UnitService

router = APIRouter(prefix="/units", tags=["Units"])


def get_unit_service(db: Session = Depends(get_db)) -> UnitService:
    """Dependency injection for UnitService"""
    return UnitService(db)


def unit_response(u: Unit) -> UnitResponse:
    return UnitResponse(
        id=u.id,
        name=u.name,
        address=u.address,
        phone=u.phone,
        openingTime=u.opening_time,
        closingTime=u.closing_time,
        visitDuration=u.visit_duration,
        created_at=u.created_at,
    )


@router.get("", response_model=list[UnitResponse])
async def get_units(
    context: TenantContext = Depends(get_tenant_context),
    service: UnitService = Depends(get_unit_service),
):
    """Units of the caller's organization, by name"""
    return [unit_response(u) for u in service.get_units(context)]


@router.get("/{unit_id}", response_model=UnitResponse)
async def get_unit(
    unit_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: UnitService = Depends(get_unit_service),
):
    return unit_response(service.get_unit(unit_id, context))


@router.post("", response_model=UnitResponse)
async def create_unit(
    data: UnitCreate,
    context: TenantContext = Depends(get_tenant_context),
    service: UnitService = Depends(get_unit_service),
):
    return unit_response(service.create_unit(data, context))


@router.patch("/{unit_id}", response_model=UnitResponse)
async def update_unit(
    unit_id: str,
    data: UnitUpdate,
    context: TenantContext = Depends(get_tenant_context),
    service: UnitService = Depends(get_unit_service),
):
    return unit_response(service.update_unit(unit_id, data, context))


@router.delete("/{unit_id}")
async def delete_unit(
    unit_id: str,
    context: TenantContext = Depends(get_tenant_context),
    service: UnitService = Depends(get_unit_service),
):
    return service.delete_unit(unit_id, context)
