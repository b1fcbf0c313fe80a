"""
Archivio record chiave-valore
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Ogni collezione nominata è una sequenza di record piatti (dict
serializzabili in JSON). L'interfaccia espone solo due operazioni:
lettura dell'intera collezione e sostituzione dell'intera collezione.

Gli aggiornamenti dei service seguono sempre lo schema
load_all → map/filter in memoria → save_all.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.models import RecordCollection

logger = logging.getLogger(__name__)

Record = dict[str, Any]

# Chiavi note delle collezioni
DRIVERS = "drivers"
INVOICES = "invoices"
SAVED_BROKERS = "savedBrokers"
USERS = "users"
SESSIONS = "sessions"


class RecordStore(ABC):
    """Contratto minimo dell'archivio: leggi tutto, sostituisci tutto."""

    @abstractmethod
    async def load_all(self, collection: str) -> list[Any]:
        """
        Restituisce l'intera collezione.

        Una chiave mai scritta equivale a una collezione vuota.
        """

    @abstractmethod
    async def save_all(self, collection: str, records: Iterable[Any]) -> None:
        """Sostituisce l'intera collezione con `records`."""


class SqlRecordStore(RecordStore):
    """
    RecordStore su una tabella SQL (una riga per collezione).

    Il nuovo payload viene serializzato per intero prima di aprire la
    transazione: se la scrittura fallisce resta lo snapshot precedente.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def load_all(self, collection: str) -> list[Any]:
        async with self._session_factory() as session:
            row = await session.get(RecordCollection, collection)
            if row is None:
                logger.debug("Collezione %s assente, restituisco elenco vuoto", collection)
                return []
            return json.loads(row.payload)

    async def save_all(self, collection: str, records: Iterable[Any]) -> None:
        payload = json.dumps(list(records))

        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(RecordCollection, collection)
                if row is None:
                    session.add(RecordCollection(key=collection, payload=payload))
                else:
                    row.payload = payload
        logger.debug("Collezione %s salvata (%d byte)", collection, len(payload))


__all__ = [
    "Record",
    "RecordStore",
    "SqlRecordStore",
    "DRIVERS",
    "INVOICES",
    "SAVED_BROKERS",
    "USERS",
    "SESSIONS",
]
