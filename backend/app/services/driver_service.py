"""
Service Layer per l'entità Driver
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce la logica di business per la gestione degli autisti.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from app.core.record_store import DRIVERS, RecordStore
from app.schemas.driver import Driver, DriverCreate, DriverStatus, DriverUpdate

logger = logging.getLogger(__name__)

# Anagrafica dimostrativa caricata con seed_default_drivers
DEFAULT_DRIVERS = [
    ("1", "John Smith", "TRK-001", "CDL123456", "(555) 123-4567", "john.smith@email.com"),
    ("2", "Mike Johnson", "TRK-002", "CDL789012", "(555) 234-5678", "mike.johnson@email.com"),
    ("3", "Sarah Davis", "TRK-003", "CDL345678", "(555) 345-6789", "sarah.davis@email.com"),
    ("4", "Robert Wilson", "TRK-004", "CDL901234", "(555) 456-7890", "robert.wilson@email.com"),
    ("5", "Lisa Anderson", "TRK-005", "CDL567890", "(555) 567-8901", "lisa.anderson@email.com"),
]


class DriverService:
    """
    Service per la gestione delle operazioni CRUD sugli autisti.

    Ogni scrittura rilegge l'intera collezione, la trasforma in memoria
    e la risalva per intero.
    """

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def get_all(self, status: Optional[DriverStatus] = None) -> List[Driver]:
        """Recupera la lista degli autisti, opzionalmente filtrata per stato."""
        drivers = [Driver.model_validate(r) for r in await self.store.load_all(DRIVERS)]
        if status is not None:
            drivers = [d for d in drivers if d.status == status]
        return drivers

    async def get_by_id(self, driver_id: str) -> Optional[Driver]:
        """Recupera un autista; None se l'id non esiste più."""
        for driver in await self.get_all():
            if driver.id == driver_id:
                return driver
        logger.debug("Autista %s non trovato", driver_id)
        return None

    async def create(self, data: DriverCreate) -> Driver:
        """Crea un nuovo autista."""
        records = await self.store.load_all(DRIVERS)
        driver = Driver(
            id=uuid.uuid1().hex,
            created_at=datetime.now(timezone.utc),
            **data.model_dump(),
        )
        await self.store.save_all(DRIVERS, [*records, driver.to_record()])
        logger.info("Autista creato: %s (%s)", driver.name, driver.truck_number)
        return driver

    async def update(self, driver_id: str, data: DriverUpdate) -> Optional[Driver]:
        """Aggiorna i dati di un autista. None se l'id non esiste."""
        drivers = await self.get_all()
        update_data = data.model_dump(exclude_unset=True)

        updated: Optional[Driver] = None
        new_drivers = []
        for driver in drivers:
            if driver.id == driver_id:
                driver = Driver.model_validate({**driver.model_dump(), **update_data})
                updated = driver
            new_drivers.append(driver)

        if updated is None:
            return None

        await self.store.save_all(DRIVERS, [d.to_record() for d in new_drivers])
        logger.info("Autista aggiornato: %s", driver_id)
        return updated

    async def delete(self, driver_id: str) -> bool:
        """
        Elimina un autista.

        Le fatture già emesse conservano nome e camion copiati alla
        creazione, quindi non vengono toccate.
        """
        records = await self.store.load_all(DRIVERS)
        remaining = [r for r in records if r.get("id") != driver_id]
        if len(remaining) == len(records):
            return False
        await self.store.save_all(DRIVERS, remaining)
        logger.info("Autista eliminato: %s", driver_id)
        return True

    async def seed_defaults(self) -> int:
        """Carica l'anagrafica dimostrativa se la collezione è vuota."""
        if await self.store.load_all(DRIVERS):
            return 0
        now = datetime.now(timezone.utc)
        drivers = [
            Driver(
                id=driver_id,
                name=name,
                truck_number=truck,
                license_number=license_number,
                phone=phone,
                email=email,
                created_at=now,
            )
            for driver_id, name, truck, license_number, phone, email in DEFAULT_DRIVERS
        ]
        await self.store.save_all(DRIVERS, [d.to_record() for d in drivers])
        logger.info("Caricati %d autisti dimostrativi", len(drivers))
        return len(drivers)
