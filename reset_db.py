import asyncio
import sys
import os

# Aggiungi backend/ alla PYTHONPATH per importare app.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from app.core.config import get_settings
from app.core.database import close_db, create_engine
from app.models import Base

async def reset():
    settings = get_settings()
    engine = create_engine(settings.database_url)
    print(f"Connessione all'archivio {settings.database_url}, eliminazione collezioni...")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        print("Collezioni eliminate. Creazione tabella vuota...")
        await conn.run_sync(Base.metadata.create_all)
    await close_db(engine)
    print("Archivio resettato: al prossimo avvio verrà ricreato l'account admin.")

if __name__ == "__main__":
    asyncio.run(reset())
