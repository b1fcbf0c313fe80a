"""
Router FastAPI per la Fatturazione
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce gli endpoint API per la gestione delle fatture:
creazione dal modulo, storico, aggiornamento pagamento, riepilogo
dashboard ed esportazione PDF.
"""

import logging
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Path, Query, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from app.core.deps import (
    CurrentSession,
    get_invoice_service,
    get_pdf_service,
)
from app.core.exceptions import NotFoundError
from app.schemas.invoice import (
    DashboardStats,
    InvoiceCreate,
    InvoiceList,
    InvoiceNumberPreview,
    InvoiceRead,
    InvoiceStatus,
    PaymentDefaults,
    PaymentUpdate,
)
from app.services.invoice_service import InvoiceService
from app.services.pdf_service import PdfService, export_filename

# Logger per questo modulo
logger = logging.getLogger(__name__)

# Router con prefix e tag
router = APIRouter(
    prefix="/invoices",
    tags=["Invoices"],
)


async def _get_or_404(service: InvoiceService, invoice_id: str) -> InvoiceRead:
    invoice = await service.get_by_id(invoice_id)
    if invoice is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return invoice


# -------------------------------------------------------------------
# Storico e riepilogo
# -------------------------------------------------------------------

@router.get(
    "/",
    name="invoices_list",
    summary="Storico fatture",
    description="Fatture dalla più recente, con ricerca testuale e filtro per stato.",
    response_model=InvoiceList,
)
async def get_invoices(
    session: CurrentSession,
    search: Optional[str] = Query(
        None,
        max_length=200,
        description="Cerca in numero fattura, load number, broker, autista",
    ),
    status_filter: Optional[InvoiceStatus] = Query(
        None,
        description="Filtro per stato (unpaid, partial, paid)",
    ),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceList:
    items = await service.get_all(search=search, status_filter=status_filter)
    return InvoiceList(items=items, count=len(items))


@router.get(
    "/dashboard",
    name="invoices_dashboard",
    summary="Riepilogo dashboard",
    response_model=DashboardStats,
)
async def get_dashboard(
    session: CurrentSession,
    service: InvoiceService = Depends(get_invoice_service),
) -> DashboardStats:
    return await service.get_dashboard()


@router.get(
    "/number-preview",
    name="invoice_number_preview",
    summary="Anteprima numero fattura",
    description="Numero che verrebbe assegnato oggi al load number indicato.",
    response_model=InvoiceNumberPreview,
)
async def preview_invoice_number(
    session: CurrentSession,
    load_number: str = Query("", max_length=50, description="Numero del carico"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceNumberPreview:
    return service.preview_number(load_number)


# -------------------------------------------------------------------
# Creazione e dettaglio
# -------------------------------------------------------------------

@router.post(
    "/",
    name="invoice_create",
    summary="Crea fattura",
    description="Crea una fattura dal modulo compilato.",
    response_model=InvoiceRead,
    status_code=status.HTTP_201_CREATED,
)
async def create_invoice(
    data: InvoiceCreate,
    session: CurrentSession,
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    """
    Campi obbligatori: load_number, broker, driver_id, rate.
    Se ne manca uno la richiesta viene rifiutata con 422 e nulla
    viene salvato.
    """
    return await service.create(data)


@router.get(
    "/{invoice_id}",
    name="invoice_detail",
    summary="Dettaglio fattura",
    response_model=InvoiceRead,
)
async def get_invoice(
    session: CurrentSession,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    return await _get_or_404(service, invoice_id)


# -------------------------------------------------------------------
# Pagamento
# -------------------------------------------------------------------

@router.get(
    "/{invoice_id}/payment-defaults",
    name="invoice_payment_defaults",
    summary="Valori iniziali del dialogo di pagamento",
    response_model=PaymentDefaults,
)
async def get_payment_defaults(
    session: CurrentSession,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> PaymentDefaults:
    defaults = await service.payment_defaults(invoice_id)
    if defaults is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return defaults


@router.put(
    "/{invoice_id}/payment",
    name="invoice_payment_update",
    summary="Aggiorna pagamento",
    description="Registra un pagamento totale o parziale.",
    response_model=InvoiceRead,
)
async def update_payment(
    data: PaymentUpdate,
    session: CurrentSession,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
) -> InvoiceRead:
    invoice = await service.update_payment(invoice_id, data)
    if invoice is None:
        raise NotFoundError(f"Invoice {invoice_id} not found")
    return invoice


# -------------------------------------------------------------------
# PDF
# -------------------------------------------------------------------

@router.get(
    "/{invoice_id}/pdf",
    name="invoice_pdf",
    summary="Scarica PDF fattura",
    response_class=Response,
)
async def download_invoice_pdf(
    session: CurrentSession,
    invoice_id: str = Path(..., description="ID della fattura"),
    service: InvoiceService = Depends(get_invoice_service),
    pdf_service: PdfService = Depends(get_pdf_service),
) -> Response:
    """
    Genera il PDF della fattura e lo restituisce come allegato
    `Invoice-{numero}.pdf`.
    """
    invoice = await _get_or_404(service, invoice_id)

    # WeasyPrint è sincrono e CPU-bound
    pdf_bytes = await run_in_threadpool(pdf_service.generate_invoice_pdf, invoice)

    filename = export_filename(invoice)
    ascii_name = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "_")
    logger.info("PDF generato per la fattura %s", invoice.invoice_number)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": (
                f'attachment; filename="{ascii_name}"; '
                f"filename*=UTF-8''{quote(filename)}"
            )
        },
    )


__all__ = ["router"]
