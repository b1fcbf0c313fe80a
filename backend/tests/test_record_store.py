"""
Test per l'archivio record chiave-valore su SQLite.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from app.core.record_store import DRIVERS, INVOICES, SAVED_BROKERS
from app.schemas.invoice import AdditionalCost, Invoice, InvoiceStatus


class TestSqlRecordStore:
    """Test lettura/sostituzione dell'intera collezione."""

    async def test_missing_key_is_empty(self, store):
        assert await store.load_all(INVOICES) == []

    async def test_save_then_load_returns_same_records(self, store):
        records = [{"id": str(i), "name": f"Driver {i}", "active": i % 2 == 0} for i in range(5)]
        await store.save_all(DRIVERS, records)
        assert await store.load_all(DRIVERS) == records

    async def test_save_replaces_whole_collection(self, store):
        await store.save_all(DRIVERS, [{"id": "1"}, {"id": "2"}])
        await store.save_all(DRIVERS, [{"id": "3"}])
        assert await store.load_all(DRIVERS) == [{"id": "3"}]

    async def test_collections_are_independent(self, store):
        await store.save_all(SAVED_BROKERS, ["CH Robinson", "TQL"])
        await store.save_all(INVOICES, [{"id": "a"}])
        assert await store.load_all(SAVED_BROKERS) == ["CH Robinson", "TQL"]
        assert await store.load_all(DRIVERS) == []

    async def test_empty_collection_can_be_saved(self, store):
        await store.save_all(INVOICES, [{"id": "a"}])
        await store.save_all(INVOICES, [])
        assert await store.load_all(INVOICES) == []

    async def test_unserialisable_record_leaves_previous_snapshot(self, store):
        await store.save_all(INVOICES, [{"id": "a"}])
        with pytest.raises(TypeError):
            await store.save_all(INVOICES, [{"id": "b", "bad": object()}])
        assert await store.load_all(INVOICES) == [{"id": "a"}]


class TestInvoiceRoundTrip:
    """Fatture complete salvate e rilette restano identiche campo per campo."""

    async def test_invoices_preserved_exactly(self, store):
        invoices = [
            Invoice(
                id=f"inv-{i}",
                invoice_number=f"INV-2508-{1000 + i}",
                load_number=str(1000 + i),
                broker="Coyote Logistics",
                driver="Sarah Davis",
                truck_number="TRK-003",
                rate=Decimal("1234.5678"),
                pickup_location="Dallas, TX",
                delivery_location="Memphis, TN",
                pickup_date=date(2025, 8, 14),
                delivery_date=date(2025, 8, 16),
                notes="Dock 4\nCall ahead",
                status=InvoiceStatus.PARTIAL,
                payment_method="ACH",
                payment_date=date(2025, 9, 1),
                paid_amount=Decimal("200.10"),
                created_at=datetime(2025, 8, 15, 10, 30, 15, 123456, tzinfo=timezone(timedelta(hours=-5))),
                additional_costs=[AdditionalCost(description="Detention", amount=Decimal("85.005"))],
                include_route_info=bool(i % 2),
            )
            for i in range(4)
        ]
        invoices.append(
            Invoice(
                id="inv-unpaid",
                invoice_number="INV-2508-9",
                load_number="9",
                broker="TQL",
                rate=Decimal("0"),
                created_at=datetime(2025, 8, 1, tzinfo=timezone.utc),
            )
        )

        await store.save_all(INVOICES, [inv.to_record() for inv in invoices])
        reloaded = [Invoice.model_validate(r) for r in await store.load_all(INVOICES)]

        assert [r.model_dump() for r in reloaded] == [i.model_dump() for i in invoices]
        assert reloaded[0].rate == Decimal("1234.5678")
        assert reloaded[0].created_at.utcoffset() == timedelta(hours=-5)
        assert reloaded[-1].paid_amount is None
