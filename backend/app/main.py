"""
Main Entry Point - FastAPI Application
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Configura l'applicazione FastAPI con middleware, router e lifecycle.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1 import api_v1_router
from app.core.config import Settings, get_settings
from app.core.database import close_db, create_engine, create_session_factory, init_db
from app.core.exceptions import AppException
from app.core.record_store import SqlRecordStore
from app.services.auth_service import AuthService
from app.services.broker_service import BrokerService
from app.services.driver_service import DriverService

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configurazione logging di base per l'intera applicazione."""
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# ------------------------------------------------------------
# Exception Handlers
# ------------------------------------------------------------
async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Gestore per tutte le eccezioni di dominio.

    Lo status HTTP viene dalla classe dell'eccezione
    (404, 409, 422, 401, 403).
    """
    content = {"detail": exc.detail, "error_code": exc.error_code}
    if exc.extra:
        content["extra"] = exc.extra
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Gestore generico per tutte le eccezioni non catturate.

    Converte l'eccezione in risposta HTTP 500 e logga l'errore.
    """
    logger.error("Unhandled exception: %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "error_code": "INTERNAL_SERVER_ERROR"},
    )


# ------------------------------------------------------------
# Lifespan Handler
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestisce il ciclo di vita dell'applicazione.

    - Startup: apre l'archivio, crea l'admin di default e gli
      eventuali dati iniziali
    - Shutdown: chiude le connessioni
    """
    settings: Settings = app.state.settings
    logger.info("Avvio %s v%s", settings.app_name, settings.app_version)

    engine = create_engine(settings.database_url, echo=settings.db_echo)
    await init_db(engine)
    store = SqlRecordStore(create_session_factory(engine))
    app.state.store = store

    await AuthService(store, settings).ensure_default_admin()
    if settings.seed_default_drivers:
        await DriverService(store).seed_defaults()
    if settings.default_brokers:
        await BrokerService(store).seed_defaults(settings.default_brokers)

    logger.info("Applicazione avviata con successo")

    yield

    logger.info("Arresto applicazione in corso...")
    await close_db(engine)
    logger.info("Applicazione arrestata")


# ------------------------------------------------------------
# FastAPI Application
# ------------------------------------------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Crea l'applicazione FastAPI.

    Args:
        settings: Impostazioni da usare (default: get_settings())
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Gestionale fatture per autotrasporto - Backend API",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings

    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get(
        "/health",
        name="Health Check",
        summary="Controlla lo stato dell'applicazione",
        tags=["System"],
    )
    async def health_check() -> dict[str, str]:
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
        }

    app.include_router(api_v1_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=_settings.backend_port,
        reload=_settings.app_env == "development",
    )
