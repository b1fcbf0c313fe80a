"""
Service per la generazione di PDF con WeasyPrint + Jinja2.
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

L'impaginazione è calcolata qui, non dal motore HTML: un cursore scorre
dall'alto verso il basso e ogni blocco emesso viene posizionato alla
quota corrente, poi il cursore avanza dell'altezza del blocco. I blocchi
opzionali omessi non occupano spazio. Il template posiziona ogni blocco
in modo assoluto alla quota calcolata.
"""

import logging
import os
import textwrap
from dataclasses import dataclass, field
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.core.config import Settings, get_settings
from app.schemas.invoice import InvoiceStatus
from app.services.invoice_calc import (
    format_money,
    invoice_total,
    outstanding_balance,
    qualifying_costs,
)

logger = logging.getLogger(__name__)

# Path alle cartelle templates
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")

# ------------------------------------------------------------
# Geometria pagina (mm, A4)
# ------------------------------------------------------------
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN = 25.0
FOOTER_TOP = PAGE_HEIGHT - 25.0
CONTENT_BOTTOM = FOOTER_TOP - 5.0

HEADER_HEIGHT = 40.0
METADATA_HEIGHT = 24.0
BILL_TO_HEIGHT = 28.0
TABLE_HEADER_HEIGHT = 15.0
TABLE_ROW_HEIGHT = 8.0
TABLE_GAP = 7.0
TOTALS_HEIGHT = 22.0
SECTION_LABEL_HEIGHT = 8.0
SECTION_LINE_HEIGHT = 6.0
NOTES_LINE_HEIGHT = 5.0
SECTION_GAP = 10.0
NOTES_WRAP_CHARS = 95

DATE_FORMAT = "%m/%d/%Y"


# Lazy import of weasyprint to avoid startup errors if system libraries aren't available
def _get_weasyprint():
    """Lazy import of weasyprint to handle missing Pango/GTK libraries gracefully."""
    try:
        from weasyprint import HTML, CSS
        return HTML, CSS
    except OSError as e:
        raise RuntimeError(
            "WeasyPrint dependencies not found. Please install Pango: "
            "https://doc.courtbouillon.org/weasyprint/stable/first_steps.html"
        ) from e


@dataclass
class TemplateOptions:
    """
    Configurazione del template unico: sezioni opzionali abilitate
    e token di stile.
    """

    show_route: bool = True
    show_payment_status: bool = True
    show_notes: bool = True
    accent_color: str = "#000000"
    muted_color: str = "#646464"
    font_family: str = "Helvetica, Arial, sans-serif"
    currency_symbol: str = "$"

    @classmethod
    def from_settings(cls, settings: Settings) -> "TemplateOptions":
        return cls(
            accent_color=settings.pdf_accent_color,
            muted_color=settings.pdf_muted_color,
            font_family=settings.pdf_font_family,
            currency_symbol=settings.invoice_currency_symbol,
        )


@dataclass
class Block:
    """Blocco posizionato: pagina (da 1), quota e altezza in mm."""

    name: str
    page: int
    top: float
    height: float
    data: dict[str, Any] = field(default_factory=dict)
    column: str = "left"

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class DocumentLayout:
    blocks: list[Block]
    page_count: int

    def get(self, name: str) -> Optional[Block]:
        """Primo blocco con il nome indicato, None se omesso."""
        return next((b for b in self.blocks if b.name == name), None)

    def names(self) -> list[str]:
        return [b.name for b in self.blocks]

    def following(self, name: str) -> Optional[Block]:
        """Blocco emesso subito dopo `name` nel flusso del cursore."""
        flow = [b for b in self.blocks if b.column == "left"]
        for i, block in enumerate(flow[:-1]):
            if block.name == name:
                return flow[i + 1]
        return None

    def pages(self) -> list[list[Block]]:
        return [
            [b for b in self.blocks if b.page == page]
            for page in range(1, self.page_count + 1)
        ]


class _Cursor:
    """Cursore verticale; passa alla pagina successiva se un blocco non entra."""

    def __init__(self, top: float = MARGIN, bottom: float = CONTENT_BOTTOM) -> None:
        self.top_limit = top
        self.bottom_limit = bottom
        self.page = 1
        self.y = top
        self.blocks: list[Block] = []

    @property
    def remaining(self) -> float:
        return self.bottom_limit - self.y

    def new_page(self) -> None:
        self.page += 1
        self.y = self.top_limit

    def place(self, name: str, height: float, **data: Any) -> Block:
        if height > self.remaining and self.y > self.top_limit:
            self.new_page()
        block = Block(name=name, page=self.page, top=self.y, height=height, data=data)
        self.blocks.append(block)
        self.y += height
        return block


def _fmt_date(value) -> str:
    return value.strftime(DATE_FORMAT) if value else ""


def _wrap_notes(notes: str) -> list[str]:
    """A capo dell'utente mantenuti; ogni paragrafo va a capo da solo."""
    return [
        line
        for paragraph in notes.splitlines()
        for line in (textwrap.wrap(paragraph, NOTES_WRAP_CHARS) or [""])
    ]


def export_filename(invoice) -> str:
    """Nome del file scaricato: Invoice-{numero}.pdf"""
    return f"Invoice-{invoice.invoice_number}.pdf"


class PdfService:
    """
    Genera PDF da template HTML/CSS usando WeasyPrint + Jinja2.

    Il chiamante passa una fattura già salvata (schema Invoice/InvoiceRead).
    Gli errori di rendering non vengono intercettati.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        options: Optional[TemplateOptions] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.options = options or TemplateOptions.from_settings(self.settings)
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
        )

    def money(self, amount) -> str:
        return format_money(amount, self.options.currency_symbol)

    # ------------------------------------------------------------
    # Impaginazione
    # ------------------------------------------------------------

    def build_layout(self, invoice) -> DocumentLayout:
        """
        Calcola la posizione di ogni blocco del documento.

        Ordine: testata (+ metadati a destra), bill-to, righe, totale,
        percorso*, stato pagamento*, note*. I blocchi con * sono opzionali.
        Il piè di pagina è fisso e ripetuto su ogni pagina.
        """
        opts = self.options
        cursor = _Cursor()

        header = cursor.place(
            "header",
            HEADER_HEIGHT,
            company=self.settings.invoice_company_name,
            tagline=self.settings.invoice_company_tagline,
            address=self.settings.invoice_address,
            phone=self.settings.invoice_phone,
            email=self.settings.invoice_email,
        )
        cursor.blocks.append(
            Block(
                name="metadata",
                page=header.page,
                top=header.top,
                height=METADATA_HEIGHT,
                column="right",
                data={
                    "invoice_number": invoice.invoice_number,
                    "date": _fmt_date(invoice.created_at),
                },
            )
        )

        cursor.place("bill_to", BILL_TO_HEIGHT, broker=invoice.broker)

        rows = [
            {
                "description": "Freight Transportation",
                "load_number": invoice.load_number,
                "driver": invoice.driver,
                "truck_number": invoice.truck_number,
                "amount": self.money(invoice.rate),
            }
        ]
        rows += [
            {
                "description": cost.description,
                "load_number": "",
                "driver": "",
                "truck_number": "",
                "amount": self.money(cost.amount),
            }
            for cost in qualifying_costs(invoice.additional_costs)
        ]
        self._place_rows(cursor, rows)

        cursor.place("totals", TOTALS_HEIGHT, total=self.money(invoice_total(invoice)))

        route_lines = self._route_lines(invoice)
        if route_lines:
            cursor.place(
                "route",
                SECTION_LABEL_HEIGHT + SECTION_LINE_HEIGHT * len(route_lines) + SECTION_GAP,
                lines=route_lines,
            )

        if opts.show_payment_status and invoice.status != InvoiceStatus.UNPAID:
            payment_lines = self._payment_lines(invoice)
            cursor.place(
                "payment",
                SECTION_LABEL_HEIGHT + SECTION_LINE_HEIGHT * (1 + len(payment_lines)) + SECTION_GAP,
                label="PAID" if invoice.status == InvoiceStatus.PAID else "PARTIAL PAYMENT",
                lines=payment_lines,
            )

        if opts.show_notes and invoice.notes:
            note_lines = _wrap_notes(invoice.notes)
            cursor.place(
                "notes",
                SECTION_LABEL_HEIGHT + NOTES_LINE_HEIGHT * len(note_lines) + SECTION_GAP,
                lines=note_lines,
            )

        for page in range(1, cursor.page + 1):
            cursor.blocks.append(
                Block(
                    name="footer",
                    page=page,
                    top=FOOTER_TOP,
                    height=PAGE_HEIGHT - FOOTER_TOP,
                    column="footer",
                    data={"terms": self.settings.invoice_payment_terms},
                )
            )

        return DocumentLayout(blocks=cursor.blocks, page_count=cursor.page)

    def _place_rows(self, cursor: _Cursor, rows: list[dict]) -> None:
        """Tabella righe; se non entra viene spezzata su più pagine."""
        while rows:
            min_height = TABLE_HEADER_HEIGHT + TABLE_ROW_HEIGHT + TABLE_GAP
            if cursor.remaining < min_height and cursor.y > cursor.top_limit:
                cursor.new_page()
            fit = int((cursor.remaining - TABLE_HEADER_HEIGHT - TABLE_GAP) // TABLE_ROW_HEIGHT)
            chunk, rows = rows[:max(fit, 1)], rows[max(fit, 1):]
            cursor.place(
                "line_items",
                TABLE_HEADER_HEIGHT + TABLE_ROW_HEIGHT * len(chunk) + TABLE_GAP,
                rows=chunk,
            )
            if rows:
                cursor.new_page()

    def _route_lines(self, invoice) -> list[str]:
        if not (self.options.show_route and invoice.include_route_info):
            return []
        if not (invoice.pickup_location or invoice.delivery_location):
            return []
        lines = []
        if invoice.pickup_location:
            lines.append(f"From: {invoice.pickup_location}")
        if invoice.delivery_location:
            lines.append(f"To: {invoice.delivery_location}")
        if invoice.pickup_date:
            lines.append(f"Pickup: {_fmt_date(invoice.pickup_date)}")
        if invoice.delivery_date:
            lines.append(f"Delivery: {_fmt_date(invoice.delivery_date)}")
        return lines

    def _payment_lines(self, invoice) -> list[str]:
        """Dettagli sotto l'etichetta di stato: metodo, data, importi."""
        lines = []
        if invoice.payment_method:
            lines.append(f"Method: {invoice.payment_method}")
        if invoice.payment_date:
            lines.append(f"Date: {_fmt_date(invoice.payment_date)}")
        if invoice.status == InvoiceStatus.PARTIAL:
            if invoice.paid_amount is not None:
                lines.append(f"Amount paid: {self.money(invoice.paid_amount)}")
            lines.append(f"Balance due: {self.money(outstanding_balance(invoice))}")
        return lines

    # ------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------

    def render_html(self, invoice) -> str:
        """Renderizza l'HTML del documento a partire dall'impaginazione."""
        layout = self.build_layout(invoice)
        template = self.env.get_template("invoice_template.html")
        return template.render(
            invoice=invoice,
            layout=layout,
            pages=layout.pages(),
            options=self.options,
            page_width=PAGE_WIDTH,
            page_height=PAGE_HEIGHT,
            margin=MARGIN,
            title=export_filename(invoice),
        )

    def generate_invoice_pdf(self, invoice) -> bytes:
        """
        Genera il PDF di una fattura.

        Args:
            invoice: Fattura salvata

        Returns:
            bytes: PDF binario pronto per il download
        """
        HTML, CSS = _get_weasyprint()

        html_out = self.render_html(invoice)
        css = CSS(filename=os.path.join(TEMPLATES_DIR, "invoice_style.css"))

        pdf_bytes = HTML(string=html_out, base_url=TEMPLATES_DIR).write_pdf(stylesheets=[css])
        logger.info("PDF generato per la fattura %s (%d byte)", invoice.invoice_number, len(pdf_bytes))
        return pdf_bytes
