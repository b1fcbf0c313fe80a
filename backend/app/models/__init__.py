"""
Modelli Database SQLAlchemy
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)

Import centralizzato dei modelli per create_all e usage generico.

L'archivio è chiave-valore: una sola tabella che contiene, per ogni
collezione (autisti, fatture, broker, utenti, sessioni), l'intero
elenco di record serializzato in JSON.
"""

# SQLAlchemy 2.0 Base declarativa
# Importato qui per essere disponibile per tutti i modelli
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class per tutti i modelli SQLAlchemy."""
    pass


from app.models.record_collection import RecordCollection

__all__ = [
    "Base",
    "RecordCollection",
]
