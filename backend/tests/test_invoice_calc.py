"""
Unit tests per i calcoli fattura: numerazione, totali, residuo.
"""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.schemas.invoice import AdditionalCost, InvoiceStatus
from app.services.invoice_calc import (
    calculate_total,
    format_money,
    generate_invoice_number,
    invoice_total,
    is_qualifying_cost,
    outstanding_balance,
    qualifying_costs,
)

from conftest import make_invoice


# ============================================================
# Numerazione
# ============================================================


class TestInvoiceNumber:
    """Test per il formato INV-{YY}{MM}-{load}."""

    def test_number_from_load_and_date(self):
        assert generate_invoice_number("76430", date(2025, 8, 15)) == "INV-2508-76430"

    def test_month_is_zero_padded(self):
        assert generate_invoice_number("A1", date(2026, 1, 3)) == "INV-2601-A1"

    def test_empty_load_number_gives_no_number(self):
        assert generate_invoice_number("", date(2025, 8, 15)) == ""

    def test_same_load_in_different_months(self):
        """Stesso load number in mesi diversi → numeri diversi."""
        august = generate_invoice_number("76430", date(2025, 8, 31))
        september = generate_invoice_number("76430", date(2025, 9, 1))
        assert august != september
        assert september == "INV-2509-76430"

    def test_same_load_same_month_collides(self):
        """Nessuna deduplica: stesso load nello stesso mese → stesso numero."""
        assert generate_invoice_number("55", date(2025, 8, 1)) == generate_invoice_number(
            "55", date(2025, 8, 28)
        )

    def test_load_number_kept_verbatim(self):
        assert generate_invoice_number("LD-77/B", date(2025, 12, 1)) == "INV-2512-LD-77/B"


# ============================================================
# Totali
# ============================================================


class TestTotals:
    """Test per il calcolo del totale."""

    def test_rate_only(self):
        assert calculate_total(Decimal("650.00"), []) == Decimal("650.00")

    def test_invalid_costs_are_ignored(self):
        """650 + 85 = 735: voci senza descrizione o con importo 0 escluse."""
        costs = [
            AdditionalCost(description="Detention", amount=Decimal("85.00")),
            AdditionalCost(description="", amount=Decimal("40.00")),
            AdditionalCost(description="Lumper", amount=Decimal("0")),
        ]
        assert calculate_total(Decimal("650.00"), costs) == Decimal("735.00")

    def test_total_is_idempotent(self, sample_invoice):
        assert invoice_total(sample_invoice) == invoice_total(sample_invoice) == Decimal("735.00")

    def test_no_internal_rounding(self):
        costs = [AdditionalCost(description="Fuel", amount=Decimal("0.005"))]
        assert calculate_total(Decimal("100.001"), costs) == Decimal("100.006")

    def test_none_costs(self):
        assert calculate_total(Decimal("10"), None) == Decimal("10")

    @pytest.mark.parametrize(
        "description, amount, expected",
        [
            ("Detention", Decimal("1"), True),
            ("", Decimal("1"), False),
            ("Detention", Decimal("0"), False),
        ],
    )
    def test_qualifying_cost(self, description, amount, expected):
        cost = SimpleNamespace(description=description, amount=amount)
        assert is_qualifying_cost(cost) is expected

    def test_qualifying_costs_keeps_order(self):
        costs = [
            AdditionalCost(description="B", amount=Decimal("2")),
            AdditionalCost(description="", amount=Decimal("3")),
            AdditionalCost(description="A", amount=Decimal("1")),
        ]
        assert [c.description for c in qualifying_costs(costs)] == ["B", "A"]


# ============================================================
# Residuo
# ============================================================


class TestOutstandingBalance:
    """Test per il saldo residuo in base allo stato."""

    def test_unpaid_owes_total(self, sample_invoice):
        assert outstanding_balance(sample_invoice) == Decimal("735.00")

    def test_paid_owes_nothing(self):
        invoice = make_invoice(status=InvoiceStatus.PAID, paid_amount=Decimal("650.00"))
        assert outstanding_balance(invoice) == Decimal("0")

    def test_partial_payment(self):
        """Totale 1000, pagati 400 → residuo 600."""
        invoice = make_invoice(
            rate=Decimal("1000.00"),
            status=InvoiceStatus.PARTIAL,
            paid_amount=Decimal("400.00"),
        )
        assert outstanding_balance(invoice) == Decimal("600.00")

    def test_partial_without_amount(self):
        invoice = make_invoice(rate=Decimal("1000.00"), status=InvoiceStatus.PARTIAL)
        assert outstanding_balance(invoice) == Decimal("1000.00")


# ============================================================
# Formattazione
# ============================================================


class TestFormatMoney:

    def test_thousands_and_two_decimals(self):
        assert format_money(Decimal("1234.5")) == "$1,234.50"

    def test_custom_symbol(self):
        assert format_money(Decimal("735"), "€") == "€735.00"
