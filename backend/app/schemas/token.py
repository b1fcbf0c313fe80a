"""
Schemas Pydantic per l'autenticazione JWT
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Schemas per token JWT e relativi payload.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class TokenResponse(BaseModel):
    """
    Schema per la risposta di login.

    Attributes:
        access_token: Token di accesso JWT
        token_type: Tipo di token (default: bearer)
    """

    access_token: str = Field(..., description="Token di accesso JWT")
    token_type: str = Field(
        default="bearer",
        description="Tipo di token",
    )


class TokenPayload(BaseModel):
    """
    Schema per il payload contenuto nei token JWT.

    Attributes:
        sub: Subject - ID dell'utente
        sid: ID della sessione a cui il token è legato
        role: Ruolo dell'utente
        exp: Expiration - Data/ora di scadenza
        type: Tipo di token
    """

    sub: str = Field(..., description="ID utente")
    sid: str = Field(..., description="ID sessione")
    role: str = Field(..., description="Ruolo dell'utente")
    exp: datetime = Field(..., description="Data/ora di scadenza")
    type: str = Field(..., description="Tipo di token")


# Export degli schemas
__all__ = [
    "TokenResponse",
    "TokenPayload",
]
