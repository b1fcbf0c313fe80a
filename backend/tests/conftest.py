"""
Pytest configuration and fixtures per Haul-It Invoice Pro.

I service lavorano su un archivio SQLite in memoria, creato da zero
per ogni test. L'applicazione FastAPI viene avviata con TestClient,
che esegue anche il lifespan (creazione admin di default).
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import close_db, create_engine, create_session_factory, init_db
from app.core.record_store import SqlRecordStore
from app.main import create_app
from app.schemas.driver import DriverCreate
from app.schemas.invoice import AdditionalCost, InvoiceRead, InvoiceStatus
from app.services.broker_service import BrokerService
from app.services.driver_service import DriverService
from app.services.invoice_service import InvoiceService

IN_MEMORY_URL = "sqlite+aiosqlite://"


# ============================================================
# Settings
# ============================================================


@pytest.fixture
def test_settings():
    """Settings isolate dal file .env dell'ambiente."""
    return Settings(
        _env_file=None,
        database_url=IN_MEMORY_URL,
        app_env="testing",
        secret_key="test-secret-key-for-unit-tests-only",
        log_level="WARNING",
    )


# ============================================================
# Archivio e service
# ============================================================


@pytest_asyncio.fixture
async def store():
    """Archivio record su SQLite in memoria."""
    engine = create_engine(IN_MEMORY_URL)
    await init_db(engine)
    yield SqlRecordStore(create_session_factory(engine))
    await close_db(engine)


@pytest.fixture
def driver_service(store):
    return DriverService(store)


@pytest.fixture
def broker_service(store):
    return BrokerService(store)


@pytest.fixture
def invoice_service(store, driver_service, broker_service):
    return InvoiceService(store, driver_service, broker_service)


@pytest_asyncio.fixture
async def driver(driver_service):
    """Autista attivo già salvato."""
    return await driver_service.create(
        DriverCreate(
            name="John Smith",
            truck_number="TRK-001",
            license_number="CDL123456",
            phone="(555) 123-4567",
            email="john.smith@email.com",
        )
    )


# ============================================================
# Fatture di esempio (senza archivio)
# ============================================================


def make_invoice(**kwargs) -> InvoiceRead:
    """Costruisce una fattura salvata con valori di default realistici."""
    data = {
        "id": "inv-1",
        "invoice_number": "INV-2508-76430",
        "load_number": "76430",
        "broker": "CH Robinson",
        "driver": "John Smith",
        "truck_number": "TRK-001",
        "rate": Decimal("650.00"),
        "pickup_location": "Dallas, TX",
        "delivery_location": "Houston, TX",
        "pickup_date": date(2025, 8, 14),
        "delivery_date": date(2025, 8, 15),
        "notes": "",
        "status": InvoiceStatus.UNPAID,
        "created_at": datetime(2025, 8, 15, 10, 30, tzinfo=timezone.utc),
        "additional_costs": [],
        "include_route_info": False,
    }
    data.update(kwargs)
    return InvoiceRead(**data)


@pytest.fixture
def sample_invoice():
    """Fattura con una voce aggiuntiva valida (totale 735.00)."""
    return make_invoice(
        additional_costs=[AdditionalCost(description="Detention", amount=Decimal("85.00"))],
    )


# ============================================================
# Mock WeasyPrint
# ============================================================


@pytest.fixture
def mock_weasyprint():
    """
    Coppia (HTML, CSS) finta: write_pdf restituisce byte PDF fittizi.

    Evita la dipendenza dalle librerie di sistema (Pango) nei test.
    """
    html_cls = MagicMock(name="HTML")
    html_cls.return_value.write_pdf.return_value = b"%PDF-1.7 fake"
    css_cls = MagicMock(name="CSS")
    return html_cls, css_cls


# ============================================================
# Applicazione FastAPI
# ============================================================


@pytest.fixture
def client(test_settings):
    """TestClient con lifespan attivo su archivio in memoria."""
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client):
    """Header Authorization per l'admin di default."""
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "admin", "password": "password"},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
