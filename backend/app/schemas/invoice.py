"""
Schemas Pydantic per la Fatturazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Contiene:
- Enums: InvoiceStatus, PaymentStatus
- Schema per AdditionalCost (voce di costo aggiuntiva)
- Schemas per Invoice (modulo di creazione, record salvato, lettura)
- Schemas per l'aggiornamento pagamento
- Schemas di supporto (anteprima numero, lista, dashboard)
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from app.core.exceptions import BusinessValidationError
from app.services import invoice_calc


# -------------------------------------------------------------------
# Enum
# -------------------------------------------------------------------

class InvoiceStatus(str, Enum):
    """Stato di pagamento della fattura."""
    UNPAID = "unpaid"
    PAID = "paid"
    PARTIAL = "partial"


class PaymentStatus(str, Enum):
    """Stati impostabili dal dialogo di pagamento."""
    PAID = "paid"
    PARTIAL = "partial"


# -------------------------------------------------------------------
# AdditionalCost
# -------------------------------------------------------------------

class AdditionalCost(BaseModel):
    """Voce di costo aggiuntiva (es. Fuel Surcharge, Detention)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = Field(
        default="",
        max_length=200,
        description="Descrizione della voce (vuota = voce non ancora compilata)",
    )
    amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Importo della voce",
    )


# -------------------------------------------------------------------
# Invoice
# -------------------------------------------------------------------

class InvoiceCreate(BaseModel):
    """
    Stato tipizzato del modulo "Create Invoice".

    I campi obbligatori (load number, broker, autista, tariffa) sono
    verificati insieme, così il messaggio elenca tutto ciò che manca.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    load_number: str = Field(default="", max_length=50, description="Numero del carico")
    broker: str = Field(default="", max_length=200, description="Broker da fatturare")
    driver_id: str = Field(default="", max_length=64, description="ID dell'autista")
    rate: Optional[Decimal] = Field(default=None, description="Tariffa base del trasporto")
    pickup_location: str = Field(default="", max_length=200)
    delivery_location: str = Field(default="", max_length=200)
    pickup_date: Optional[date] = None
    delivery_date: Optional[date] = None
    notes: str = Field(default="", max_length=2000)
    additional_costs: list[AdditionalCost] = Field(default_factory=list)
    include_route_info: bool = Field(
        default=False,
        description="Mostra il blocco percorso nel PDF",
    )

    @model_validator(mode="after")
    def check_required_fields(self) -> "InvoiceCreate":
        missing = [
            name
            for name in ("load_number", "broker", "driver_id", "rate")
            if getattr(self, name) in (None, "")
        ]
        if missing:
            raise BusinessValidationError(
                "Please fill in all required fields: " + ", ".join(missing),
                extra={"missing_fields": missing},
            )
        return self


class Invoice(BaseModel):
    """
    Record fattura così come viene salvato nella collezione `invoices`.

    Il totale non è memorizzato: vedi InvoiceRead.
    """

    id: str
    invoice_number: str
    load_number: str
    broker: str
    driver: str = ""
    truck_number: str = ""
    rate: Decimal
    pickup_location: str = ""
    delivery_location: str = ""
    pickup_date: Optional[date] = None
    delivery_date: Optional[date] = None
    notes: str = ""
    status: InvoiceStatus = InvoiceStatus.UNPAID
    payment_method: Optional[str] = None
    payment_date: Optional[date] = None
    paid_amount: Optional[Decimal] = None
    created_at: datetime
    additional_costs: list[AdditionalCost] = Field(default_factory=list)
    include_route_info: bool = False

    def to_record(self) -> dict:
        """Record piatto per l'archivio (i campi di pagamento assenti restano assenti)."""
        return self.model_dump(mode="json", exclude_none=True)


class InvoiceRead(Invoice):
    """Schema di lettura con i valori derivati, ricalcolati a ogni richiesta."""

    @computed_field
    @property
    def total(self) -> Decimal:
        return invoice_calc.invoice_total(self)

    @computed_field
    @property
    def outstanding_balance(self) -> Decimal:
        return invoice_calc.outstanding_balance(self)

    @computed_field
    @property
    def billable_costs(self) -> list[AdditionalCost]:
        return invoice_calc.qualifying_costs(self.additional_costs)


class InvoiceList(BaseModel):
    """Risultato della ricerca nello storico fatture."""
    items: list[InvoiceRead]
    count: int


class InvoiceNumberPreview(BaseModel):
    """Anteprima del numero fattura mostrata durante la compilazione."""
    load_number: str
    invoice_number: str


# -------------------------------------------------------------------
# Pagamento
# -------------------------------------------------------------------

class PaymentUpdate(BaseModel):
    """Dati del dialogo "Update Payment"."""

    model_config = ConfigDict(str_strip_whitespace=True)

    status: PaymentStatus = PaymentStatus.PAID
    payment_method: str = Field(default="", max_length=100)
    payment_date: Optional[date] = None
    paid_amount: Optional[Decimal] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_partial_amount(self) -> "PaymentUpdate":
        if self.status == PaymentStatus.PARTIAL and self.paid_amount is None:
            raise BusinessValidationError(
                "Paid amount is required for a partial payment"
            )
        return self


class PaymentDefaults(BaseModel):
    """Valori proposti all'apertura del dialogo di pagamento."""
    status: PaymentStatus
    payment_date: date
    paid_amount: Decimal


# -------------------------------------------------------------------
# Dashboard
# -------------------------------------------------------------------

class DashboardStats(BaseModel):
    """Riepilogo per le card della pagina principale."""
    total_invoices: int
    unpaid_count: int
    partial_count: int
    paid_count: int
    total_billed: Decimal
    total_collected: Decimal
    total_outstanding: Decimal
    active_drivers: int


__all__ = [
    "InvoiceStatus",
    "PaymentStatus",
    "AdditionalCost",
    "InvoiceCreate",
    "Invoice",
    "InvoiceRead",
    "InvoiceList",
    "InvoiceNumberPreview",
    "PaymentUpdate",
    "PaymentDefaults",
    "DashboardStats",
]
