"""
Router FastAPI per i broker salvati
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)
"""

from fastapi import APIRouter, Depends, Query

from app.core.deps import CurrentSession, get_broker_service
from app.services.broker_service import BrokerService

router = APIRouter(
    prefix="/brokers",
    tags=["Brokers"],
)


@router.get(
    "/",
    summary="Broker salvati",
    description="Elenco completo, oppure suggerimenti se è indicato `q`.",
    response_model=list[str],
)
async def get_brokers(
    session: CurrentSession,
    q: str = Query("", max_length=200, description="Testo digitato nel campo broker"),
    limit: int = Query(10, ge=1, le=50),
    service: BrokerService = Depends(get_broker_service),
) -> list[str]:
    if q:
        return await service.suggest(q, limit=limit)
    return await service.get_all()


__all__ = ["router"]
