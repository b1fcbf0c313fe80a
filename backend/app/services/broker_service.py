"""
Service per l'elenco broker salvati
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

L'elenco cresce come effetto collaterale della creazione fatture e serve
solo per l'autocompletamento del campo broker.
"""

import logging
from typing import Iterable, List

from app.core.record_store import SAVED_BROKERS, RecordStore

logger = logging.getLogger(__name__)


class BrokerService:
    """Elenco deduplicato dei nomi broker."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    async def get_all(self) -> List[str]:
        return list(await self.store.load_all(SAVED_BROKERS))

    async def suggest(self, query: str, limit: int = 10) -> List[str]:
        """
        Suggerimenti per l'autocompletamento.

        Match case-insensitive per sottostringa; query vuota → nessun
        suggerimento.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        matches = [name for name in await self.get_all() if needle in name.lower()]
        return matches[:limit]

    async def register(self, name: str) -> bool:
        """Aggiunge il broker se non è già presente. True se aggiunto."""
        name = name.strip()
        if not name:
            return False
        brokers = await self.get_all()
        if name in brokers:
            return False
        await self.store.save_all(SAVED_BROKERS, [*brokers, name])
        logger.info("Nuovo broker salvato: %s", name)
        return True

    async def seed_defaults(self, names: Iterable[str]) -> int:
        """Inserisce i broker di default se l'elenco è vuoto."""
        names = list(names)
        if not names or await self.get_all():
            return 0
        await self.store.save_all(SAVED_BROKERS, names)
        logger.info("Caricati %d broker di default", len(names))
        return len(names)
