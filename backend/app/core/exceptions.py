"""
Eccezioni di dominio
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Ogni eccezione porta con sé lo status HTTP e un codice stabile per il
frontend; main.py le traduce in risposta con un unico handler.
"""

from typing import Any, Dict, Optional

__all__ = [
    "AppException",
    "NotFoundError",
    "DuplicateError",
    "BusinessValidationError",
    "AuthenticationError",
    "AuthorizationError",
]


class AppException(Exception):
    """
    Base delle eccezioni dell'applicazione.

    Attributes:
        status_code: Status HTTP della risposta
        error_code: Codice stabile letto dal frontend
        detail: Messaggio mostrato all'utente
        extra: Dati aggiuntivi (es. campi mancanti del modulo)
    """

    status_code: int = 500
    error_code: str = "INTERNAL_SERVER_ERROR"
    default_detail: str = "Internal server error"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.detail = detail or self.default_detail
        self.error_code = error_code or type(self).error_code
        self.extra = extra
        self.status_code = type(self).status_code
        super().__init__(self.detail)


class NotFoundError(AppException):
    """Fattura, autista o utente inesistente (i service restituiscono None, il router solleva)."""

    status_code = 404
    error_code = "RESOURCE_NOT_FOUND"
    default_detail = "Resource not found"


class DuplicateError(AppException):
    """Username già registrato."""

    status_code = 409
    error_code = "DUPLICATE_RESOURCE"
    default_detail = "Resource already exists"


class BusinessValidationError(ValueError, AppException):
    """
    Modulo incompleto o incoerente.

    È anche un ValueError: sollevata dentro un validatore pydantic diventa
    un errore di validazione del body (422) e nulla viene salvato.
    """

    status_code = 422
    error_code = "BUSINESS_VALIDATION_ERROR"
    default_detail = "Validation failed"

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        AppException.__init__(self, detail, error_code, extra)


class AuthenticationError(AppException):
    """Credenziali errate, token assente o sessione chiusa/scaduta."""

    status_code = 401
    error_code = "NOT_AUTHENTICATED"
    default_detail = "Invalid username or password"


class AuthorizationError(AppException):
    """Operazione riservata agli amministratori."""

    status_code = 403
    error_code = "FORBIDDEN"
    default_detail = "Access denied"
