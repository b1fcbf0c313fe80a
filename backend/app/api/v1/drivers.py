"""
Router FastAPI per l'entità Driver
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce gli endpoint API per la gestione degli autisti.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status

from app.core.deps import CurrentSession, get_driver_service
from app.core.exceptions import NotFoundError
from app.schemas.driver import Driver, DriverCreate, DriverStatus, DriverUpdate
from app.services.driver_service import DriverService

router = APIRouter(
    prefix="/drivers",
    tags=["Drivers"],
)


@router.get(
    "/",
    summary="Lista autisti",
    response_model=list[Driver],
)
async def get_drivers(
    session: CurrentSession,
    status_filter: Optional[DriverStatus] = Query(
        None,
        description="Filtro per stato (active, inactive)",
    ),
    service: DriverService = Depends(get_driver_service),
) -> list[Driver]:
    return await service.get_all(status=status_filter)


@router.get(
    "/{driver_id}",
    summary="Dettaglio autista",
    response_model=Driver,
)
async def get_driver(
    session: CurrentSession,
    driver_id: str = Path(..., description="ID dell'autista"),
    service: DriverService = Depends(get_driver_service),
) -> Driver:
    driver = await service.get_by_id(driver_id)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")
    return driver


@router.post(
    "/",
    summary="Crea autista",
    response_model=Driver,
    status_code=status.HTTP_201_CREATED,
)
async def create_driver(
    data: DriverCreate,
    session: CurrentSession,
    service: DriverService = Depends(get_driver_service),
) -> Driver:
    return await service.create(data)


@router.put(
    "/{driver_id}",
    summary="Aggiorna autista",
    response_model=Driver,
)
async def update_driver(
    data: DriverUpdate,
    session: CurrentSession,
    driver_id: str = Path(..., description="ID dell'autista"),
    service: DriverService = Depends(get_driver_service),
) -> Driver:
    driver = await service.update(driver_id, data)
    if driver is None:
        raise NotFoundError(f"Driver {driver_id} not found")
    return driver


@router.delete(
    "/{driver_id}",
    summary="Elimina autista",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_driver(
    session: CurrentSession,
    driver_id: str = Path(..., description="ID dell'autista"),
    service: DriverService = Depends(get_driver_service),
) -> Response:
    """Le fatture già emesse conservano il nome copiato alla creazione."""
    if not await service.delete(driver_id):
        raise NotFoundError(f"Driver {driver_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


__all__ = ["router"]
