"""
Configurazione Database - SQLAlchemy 2.0 Async
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Definisce engine e session factory. Nessuna istanza globale: l'engine
viene creato nel lifespan dell'applicazione e rilasciato allo shutdown.
"""

import logging
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.models import Base

# Logger per questo modulo
logger = logging.getLogger(__name__)


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """
    Crea l'engine async SQLAlchemy.

    Un URL SQLite senza file (`sqlite+aiosqlite://`) usa una sola
    connessione condivisa, altrimenti ogni connessione vedrebbe
    un database in memoria diverso.

    Args:
        database_url: URL di connessione in formato async
        echo: Log delle query

    Returns:
        AsyncEngine: Engine pronto all'uso
    """
    kwargs = {"echo": echo, "pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if database_url.rstrip("/").endswith(":") or ":memory:" in database_url:
            kwargs["poolclass"] = StaticPool
    return create_async_engine(database_url, **kwargs)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory legata all'engine."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine, create_tables: bool = True) -> None:
    """
    Inizializza la connessione al database.

    Esegue un test di connessione e crea la tabella delle collezioni
    se non esiste ancora.
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            if create_tables:
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Connessione al database stabilita con successo")
    except Exception as e:
        logger.error("Errore connessione database: %s", e)
        raise


async def close_db(engine: Optional[AsyncEngine]) -> None:
    """
    Chiude le connessioni al database.

    Da chiamare durante lo shutdown dell'applicazione.
    """
    if engine is None:
        return
    await engine.dispose()
    logger.info("Connessioni database chiuse")
