"""
API v1 Routes
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Router versione 1 dell'API.
"""

from fastapi import APIRouter

from app.api.v1 import auth, brokers, drivers, invoices

# Router aggregato per v1
api_v1_router = APIRouter(prefix="/api/v1")

# Includi i router dei moduli
api_v1_router.include_router(auth.router)
api_v1_router.include_router(drivers.router)
api_v1_router.include_router(invoices.router)
api_v1_router.include_router(brokers.router)

# Esportazione
__all__ = ["api_v1_router"]
