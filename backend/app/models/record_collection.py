from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models import Base
from app.models.mixins import TimestampMixin


class RecordCollection(Base, TimestampMixin):
    """
    Una collezione nominata di record piatti.

    `payload` contiene l'intero elenco in JSON: ogni scrittura lo
    sostituisce in blocco, non esistono aggiornamenti parziali.
    """
    __tablename__ = "record_collections"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    payload: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    def __repr__(self) -> str:
        return f"RecordCollection(key={self.key!r}, size={len(self.payload)})"
