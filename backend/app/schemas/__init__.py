"""
Schemas Pydantic per il progetto Haul-It Invoice Pro

Questo modulo contiene tutti gli schemi Pydantic utilizzati per la validazione
dei moduli, la serializzazione dei record in archivio e le risposte API.
"""

# Import degli schemi per renderli disponibili tramite import diretto
# es: from app.schemas import InvoiceRead, DriverCreate, etc.

from app.schemas.driver import (
    Driver,
    DriverCreate,
    DriverStatus,
    DriverUpdate,
)
from app.schemas.invoice import (
    AdditionalCost,
    DashboardStats,
    Invoice,
    InvoiceCreate,
    InvoiceList,
    InvoiceNumberPreview,
    InvoiceRead,
    InvoiceStatus,
    PaymentDefaults,
    PaymentStatus,
    PaymentUpdate,
)
from app.schemas.token import TokenPayload, TokenResponse
from app.schemas.user import (
    SessionInfo,
    User,
    UserCreate,
    UserLogin,
    UserResponse,
    UserRole,
)

__all__ = [
    # Driver
    "Driver",
    "DriverCreate",
    "DriverStatus",
    "DriverUpdate",
    # Invoice
    "AdditionalCost",
    "DashboardStats",
    "Invoice",
    "InvoiceCreate",
    "InvoiceList",
    "InvoiceNumberPreview",
    "InvoiceRead",
    "InvoiceStatus",
    "PaymentDefaults",
    "PaymentStatus",
    "PaymentUpdate",
    # Auth
    "TokenPayload",
    "TokenResponse",
    "SessionInfo",
    "User",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserRole",
]
