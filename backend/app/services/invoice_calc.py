"""
Calcoli fattura: numerazione, totali, residuo
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Funzioni pure, senza accesso all'archivio. Accettano qualsiasi oggetto
con gli attributi della fattura (schema pydantic o mock nei test).
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

ZERO = Decimal("0")


def generate_invoice_number(load_number: str, today: date) -> str:
    """
    Genera il numero fattura nel formato INV-{YY}{MM}-{load_number}.

    Anno a due cifre e mese con zero iniziale sono presi da `today`.
    Con load number vuoto restituisce stringa vuota (nessuna anteprima).

    Args:
        load_number: Numero del carico
        today: Data di riferimento (creazione fattura)

    Returns:
        str: Numero fattura, oppure "" se load_number è vuoto
    """
    if not load_number:
        return ""
    return f"INV-{today:%y%m}-{load_number}"


def is_qualifying_cost(cost: Any) -> bool:
    """Una voce conta solo con descrizione non vuota e importo > 0."""
    return bool(cost.description) and cost.amount > 0


def qualifying_costs(costs: Optional[Iterable[Any]]) -> list[Any]:
    """
    Filtra le voci di costo aggiuntive valide.

    Lo stesso filtro vale per salvataggio, visualizzazione ed export.
    """
    return [cost for cost in (costs or []) if is_qualifying_cost(cost)]


def calculate_total(rate: Decimal, costs: Optional[Iterable[Any]] = None) -> Decimal:
    """
    Totale = tariffa base + somma dei costi aggiuntivi validi.

    Nessun arrotondamento: la formattazione a due decimali avviene
    solo in fase di stampa.
    """
    return rate + sum((cost.amount for cost in qualifying_costs(costs)), ZERO)


def invoice_total(invoice: Any) -> Decimal:
    """Totale di una fattura, ricalcolato ad ogni chiamata."""
    return calculate_total(invoice.rate, invoice.additional_costs)


def outstanding_balance(invoice: Any) -> Decimal:
    """
    Importo ancora dovuto in base allo stato di pagamento.

    - paid: 0
    - partial: totale - importo pagato
    - unpaid: totale
    """
    if invoice.status == "paid":
        return ZERO
    total = invoice_total(invoice)
    if invoice.status == "partial":
        return total - (invoice.paid_amount or ZERO)
    return total


def format_money(amount: Decimal, symbol: str = "$") -> str:
    """Formatta un importo con due decimali e separatore delle migliaia."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
