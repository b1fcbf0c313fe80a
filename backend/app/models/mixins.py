"""
Mixin SQLAlchemy per modelli
Progetto: Haul-It Invoice Pro (Gestionale Fatture Autotrasporto)
"""

import datetime

from sqlalchemy import DateTime
from sqlalchemy import event
from sqlalchemy.orm import Mapped, mapped_column, Session
from sqlalchemy.sql import func


class TimestampMixin:
    """
    Data di creazione e di ultima sostituzione di una riga.

    Per `record_collections` updated_at coincide con l'ultimo save_all
    della collezione.
    """

    created_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


@event.listens_for(Session, "before_flush")
def touch_updated_at(session: Session, flush_context, instances) -> None:
    """Aggiorna updated_at sulle righe nuove o modificate prima del flush."""
    now = datetime.datetime.now(datetime.timezone.utc)
    touched = [obj for obj in session.dirty if session.is_modified(obj, include_collections=False)]
    for obj in [*touched, *session.new]:
        if isinstance(obj, TimestampMixin):
            obj.updated_at = now
