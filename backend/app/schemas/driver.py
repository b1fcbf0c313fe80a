import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _blank_to_none(v):
    if isinstance(v, str) and not v.strip():
        return None
    return v


class DriverStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class DriverBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Nome completo dell'autista")
    truck_number: str = Field(..., min_length=1, max_length=50, description="Camion assegnato (es. TRK-001)")
    license_number: str = Field("", max_length=50, description="Numero patente CDL")
    phone: str = Field("", max_length=50, description="Telefono")
    email: Optional[EmailStr] = Field(None, description="Email")
    status: DriverStatus = Field(default=DriverStatus.ACTIVE, description="Stato dell'autista")

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_to_none(cls, v):
        """Il campo email lasciato vuoto nel modulo equivale a nessuna email."""
        return _blank_to_none(v)


class DriverCreate(DriverBase):
    pass


class DriverUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    truck_number: Optional[str] = Field(None, min_length=1, max_length=50)
    license_number: Optional[str] = Field(None, max_length=50)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[EmailStr] = None
    status: Optional[DriverStatus] = None

    @field_validator("email", mode="before")
    @classmethod
    def empty_email_to_none(cls, v):
        return _blank_to_none(v)

    @field_validator("name", "truck_number", "license_number", "phone", "status")
    @classmethod
    def not_null(cls, v):
        """Campi omessi restano invariati; null esplicito non è ammesso."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class Driver(DriverBase):
    """Record autista come salvato nella collezione `drivers`."""

    id: str
    created_at: datetime.datetime

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
