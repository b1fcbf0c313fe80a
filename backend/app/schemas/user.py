"""
Schemas Pydantic per utenti e sessioni
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Schemas per validazione e serializzazione dati utente.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Ruoli utente nel sistema."""
    ADMIN = "admin"
    USER = "user"


class User(BaseModel):
    """
    Record utente come salvato nella collezione `users`.

    Attributes:
        id: Identificativo dell'utente
        username: Username univoco
        hashed_password: Password hashata
        role: Ruolo dell'utente (admin, user)
        created_at: Data/ora creazione
    """

    id: str
    username: str
    hashed_password: str
    role: UserRole = UserRole.USER
    created_at: datetime

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


class UserCreate(BaseModel):
    """
    Schema per la creazione di un nuovo utente.

    Attributes:
        username: Username (deve essere univoco)
        password: Password in chiaro
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    username: str = Field(
        min_length=1,
        max_length=50,
        description="Username univoco",
    )
    password: str = Field(
        min_length=1,
        max_length=100,
        description="Password in chiaro",
    )


class UserLogin(BaseModel):
    """
    Schema per il login utente.

    Attributes:
        username: Username dell'utente
        password: Password in chiaro
    """

    username: str = Field(..., description="Username dell'utente")
    password: str = Field(..., description="Password in chiaro")


class UserResponse(BaseModel):
    """
    Schema per la risposta contenente dati utente.

    Non espone mai la password hashata.
    """

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="ID dell'utente")
    username: str = Field(..., description="Username dell'utente")
    role: UserRole = Field(..., description="Ruolo dell'utente")
    created_at: datetime = Field(..., description="Data/ora di creazione")


class SessionInfo(BaseModel):
    """
    Record di sessione (collezione `sessions`), creato al login
    e rimosso al logout.
    """

    session_id: str = Field(..., description="ID della sessione")
    user_id: str = Field(..., description="ID dell'utente")
    username: str = Field(..., description="Username dell'utente")
    role: UserRole = Field(..., description="Ruolo dell'utente")
    created_at: datetime = Field(..., description="Data/ora di login")

    def to_record(self) -> dict:
        return self.model_dump(mode="json")


# Export degli schemas
__all__ = [
    "UserRole",
    "User",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "SessionInfo",
]
