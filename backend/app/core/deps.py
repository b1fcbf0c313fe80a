"""
Dependency Injection per servizi e autenticazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Funzioni di dependency injection: archivio record, service di dominio,
sessione corrente e verifica del ruolo amministratore.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from app.core.config import Settings
from app.core.exceptions import AuthenticationError, AuthorizationError
from app.core.record_store import RecordStore
from app.schemas.user import SessionInfo, UserRole
from app.services.auth_service import AuthService
from app.services.broker_service import BrokerService
from app.services.driver_service import DriverService
from app.services.invoice_service import InvoiceService
from app.services.pdf_service import PdfService

# OAuth2 scheme - estrae il token dall'header Authorization
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="/api/v1/auth/login",
    auto_error=False,
)


# ------------------------------------------------------------
# Archivio e configurazione
# ------------------------------------------------------------

def get_app_settings(request: Request) -> Settings:
    """Settings con cui è stata creata l'applicazione."""
    return request.app.state.settings


def get_store(request: Request) -> RecordStore:
    """Archivio record aperto nel lifespan."""
    return request.app.state.store


# ------------------------------------------------------------
# Service
# ------------------------------------------------------------

def get_driver_service(store: RecordStore = Depends(get_store)) -> DriverService:
    return DriverService(store)


def get_broker_service(store: RecordStore = Depends(get_store)) -> BrokerService:
    return BrokerService(store)


def get_invoice_service(
    store: RecordStore = Depends(get_store),
    drivers: DriverService = Depends(get_driver_service),
    brokers: BrokerService = Depends(get_broker_service),
) -> InvoiceService:
    return InvoiceService(store, drivers, brokers)


def get_auth_service(
    store: RecordStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> AuthService:
    return AuthService(store, settings)


def get_pdf_service(settings: Settings = Depends(get_app_settings)) -> PdfService:
    return PdfService(settings)


# ------------------------------------------------------------
# Autenticazione
# ------------------------------------------------------------

async def get_current_session(
    token: Optional[str] = Depends(oauth2_scheme),
    service: AuthService = Depends(get_auth_service),
) -> SessionInfo:
    """
    Dependency per ottenere la sessione corrente dal token JWT.

    Raises:
        AuthenticationError: Token assente, invalido, scaduto o sessione chiusa
    """
    if not token:
        raise AuthenticationError("Authentication token not provided")

    session = await service.current_session(token)
    if session is None:
        raise AuthenticationError("Session expired or invalid, please log in again")
    return session


async def require_admin(
    session: SessionInfo = Depends(get_current_session),
) -> SessionInfo:
    """
    Verifica che la sessione corrente appartenga a un amministratore.

    Raises:
        AuthorizationError: Se l'utente non ha ruolo admin
    """
    if session.role != UserRole.ADMIN:
        raise AuthorizationError("Only administrators can manage users")
    return session


# Type aliases per uso comune
CurrentSession = Annotated[SessionInfo, Depends(get_current_session)]
AdminSession = Annotated[SessionInfo, Depends(require_admin)]


# Export
__all__ = [
    "oauth2_scheme",
    "get_app_settings",
    "get_store",
    "get_driver_service",
    "get_broker_service",
    "get_invoice_service",
    "get_auth_service",
    "get_pdf_service",
    "get_current_session",
    "require_admin",
    "CurrentSession",
    "AdminSession",
]
