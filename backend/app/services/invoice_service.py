"""
Service Layer per la Fatturazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce la logica di business per la gestione delle fatture:
creazione dal modulo, storico con ricerca, aggiornamento pagamenti
e riepilogo per la dashboard.
"""

import logging
import uuid
from datetime import date, datetime
from typing import List, Optional

from app.core.record_store import INVOICES, RecordStore
from app.schemas.driver import DriverStatus
from app.schemas.invoice import (
    DashboardStats,
    Invoice,
    InvoiceCreate,
    InvoiceNumberPreview,
    InvoiceRead,
    InvoiceStatus,
    PaymentDefaults,
    PaymentStatus,
    PaymentUpdate,
)
from app.services.broker_service import BrokerService
from app.services.driver_service import DriverService
from app.services.invoice_calc import (
    ZERO,
    generate_invoice_number,
    invoice_total,
    outstanding_balance,
    qualifying_costs,
)

# Logger per questo modulo
logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


class InvoiceService:
    """
    Service per la gestione delle operazioni sulle fatture.

    Implementa:
    - Numerazione INV-{YY}{MM}-{load} calcolata una sola volta alla creazione
    - Copia di nome autista e camion al momento della creazione
    - Registrazione automatica del broker per l'autocompletamento
    - Aggiornamento stato pagamento (unica modifica ammessa dopo la creazione)
    - Riepilogo importi per la dashboard

    Ogni scrittura segue lo schema load_all → modifica in memoria → save_all.
    """

    def __init__(
        self,
        store: RecordStore,
        driver_service: DriverService,
        broker_service: BrokerService,
    ) -> None:
        self.store = store
        self.driver_service = driver_service
        self.broker_service = broker_service

    # ------------------------------------------------------------
    # Numerazione
    # ------------------------------------------------------------

    def preview_number(
        self,
        load_number: str,
        today: Optional[date] = None,
    ) -> InvoiceNumberPreview:
        """
        Anteprima del numero mostrata durante la compilazione.

        Il numero definitivo viene ricalcolato in create(): se nel frattempo
        cambia il mese, vale quello calcolato all'invio.
        """
        load_number = load_number.strip()
        return InvoiceNumberPreview(
            load_number=load_number,
            invoice_number=generate_invoice_number(load_number, today or _local_now().date()),
        )

    # ------------------------------------------------------------
    # Creazione
    # ------------------------------------------------------------

    async def create(
        self,
        data: InvoiceCreate,
        now: Optional[datetime] = None,
    ) -> InvoiceRead:
        """
        Crea una fattura dal modulo compilato.

        Steps:
        1. Calcola il numero fattura dalla data di creazione
        2. Copia nome e camion dell'autista (vuoti se l'autista non esiste più)
        3. Conserva solo le voci di costo aggiuntive valide
        4. Accoda il record alla collezione `invoices`
        5. Registra il broker tra quelli suggeriti

        Args:
            data: Dati validati del modulo
            now: Istante di creazione (default: ora locale)

        Returns:
            InvoiceRead: Fattura creata, con totale calcolato
        """
        now = now or _local_now()

        driver = await self.driver_service.get_by_id(data.driver_id)
        if driver is None:
            logger.warning(
                "Autista %s non trovato: la fattura non riporterà nome e camion",
                data.driver_id,
            )

        invoice = Invoice(
            id=uuid.uuid1().hex,
            invoice_number=generate_invoice_number(data.load_number, now.date()),
            load_number=data.load_number,
            broker=data.broker,
            driver=driver.name if driver else "",
            truck_number=driver.truck_number if driver else "",
            rate=data.rate,
            pickup_location=data.pickup_location,
            delivery_location=data.delivery_location,
            pickup_date=data.pickup_date,
            delivery_date=data.delivery_date,
            notes=data.notes,
            status=InvoiceStatus.UNPAID,
            created_at=now,
            additional_costs=qualifying_costs(data.additional_costs),
            include_route_info=data.include_route_info,
        )

        records = await self.store.load_all(INVOICES)
        await self.store.save_all(INVOICES, [*records, invoice.to_record()])

        await self.broker_service.register(data.broker)

        logger.info(
            "Fattura %s creata per %s (totale %s)",
            invoice.invoice_number,
            invoice.broker,
            invoice_total(invoice),
        )
        return InvoiceRead.model_validate(invoice.model_dump())

    # ------------------------------------------------------------
    # Lettura
    # ------------------------------------------------------------

    async def _load(self) -> List[InvoiceRead]:
        return [InvoiceRead.model_validate(r) for r in await self.store.load_all(INVOICES)]

    async def get_all(
        self,
        search: Optional[str] = None,
        status_filter: Optional[InvoiceStatus] = None,
    ) -> List[InvoiceRead]:
        """
        Storico fatture, dalla più recente.

        Filtri disponibili:
        - search: sottostringa (case-insensitive) di numero fattura,
          load number, broker o autista
        - status_filter: unpaid, partial, paid
        """
        invoices = await self._load()

        if search:
            needle = search.strip().lower()
            invoices = [
                inv for inv in invoices
                if needle in inv.invoice_number.lower()
                or needle in inv.load_number.lower()
                or needle in inv.broker.lower()
                or needle in inv.driver.lower()
            ]

        if status_filter is not None:
            invoices = [inv for inv in invoices if inv.status == status_filter]

        invoices.sort(key=lambda inv: inv.created_at, reverse=True)
        return invoices

    async def get_by_id(self, invoice_id: str) -> Optional[InvoiceRead]:
        """Recupera una fattura; None se l'id non esiste."""
        for invoice in await self._load():
            if invoice.id == invoice_id:
                return invoice
        logger.debug("Fattura %s non trovata", invoice_id)
        return None

    # ------------------------------------------------------------
    # Pagamenti
    # ------------------------------------------------------------

    async def payment_defaults(
        self,
        invoice_id: str,
        today: Optional[date] = None,
    ) -> Optional[PaymentDefaults]:
        """Valori iniziali del dialogo di pagamento: saldato, oggi, totale."""
        invoice = await self.get_by_id(invoice_id)
        if invoice is None:
            return None
        return PaymentDefaults(
            status=PaymentStatus.PAID,
            payment_date=today or _local_now().date(),
            paid_amount=invoice_total(invoice),
        )

    async def update_payment(
        self,
        invoice_id: str,
        data: PaymentUpdate,
    ) -> Optional[InvoiceRead]:
        """
        Aggiorna lo stato di pagamento di una fattura.

        È l'unica modifica consentita dopo la creazione. Per un saldo
        senza importo indicato si assume pagato il totale.

        Returns:
            InvoiceRead aggiornata, oppure None se l'id non esiste
        """
        records = await self.store.load_all(INVOICES)

        updated: Optional[Invoice] = None
        new_records = []
        for record in records:
            if record.get("id") == invoice_id:
                invoice = Invoice.model_validate(record)
                paid_amount = data.paid_amount
                if paid_amount is None:
                    paid_amount = invoice_total(invoice)
                updated = invoice.model_copy(
                    update={
                        "status": InvoiceStatus(data.status.value),
                        "payment_method": data.payment_method,
                        "payment_date": data.payment_date or _local_now().date(),
                        "paid_amount": paid_amount,
                    }
                )
                record = updated.to_record()
            new_records.append(record)

        if updated is None:
            logger.debug("Aggiornamento pagamento ignorato: fattura %s inesistente", invoice_id)
            return None

        await self.store.save_all(INVOICES, new_records)
        logger.info(
            "Pagamento fattura %s aggiornato: %s (%s)",
            updated.invoice_number,
            updated.status.value,
            updated.paid_amount,
        )
        return InvoiceRead.model_validate(updated.model_dump())

    # ------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------

    async def get_dashboard(self) -> DashboardStats:
        """
        Riepilogo per le card della pagina principale.

        Incassato: importo pagato indicato (o il totale per le fatture
        saldate senza importo). Residuo: somma dei saldi aperti.
        """
        invoices = await self._load()
        drivers = await self.driver_service.get_all(status=DriverStatus.ACTIVE)

        total_billed = ZERO
        total_collected = ZERO
        total_outstanding = ZERO
        counts = {status: 0 for status in InvoiceStatus}

        for invoice in invoices:
            total = invoice_total(invoice)
            total_billed += total
            total_outstanding += outstanding_balance(invoice)
            counts[invoice.status] += 1
            if invoice.status == InvoiceStatus.PAID:
                total_collected += invoice.paid_amount if invoice.paid_amount is not None else total
            elif invoice.status == InvoiceStatus.PARTIAL:
                total_collected += invoice.paid_amount or ZERO

        return DashboardStats(
            total_invoices=len(invoices),
            unpaid_count=counts[InvoiceStatus.UNPAID],
            partial_count=counts[InvoiceStatus.PARTIAL],
            paid_count=counts[InvoiceStatus.PAID],
            total_billed=total_billed,
            total_collected=total_collected,
            total_outstanding=total_outstanding,
            active_drivers=len(drivers),
        )
