"""DAO ORM — persisted shape of a procurement dossier.

Invariants:
    - id is a string primary key (canonical uuid4 text), generated on insert
    - numero_liste indexed (business key, searched and used for numbering)
    - equipe and tasks are JSON arrays of camelCase dicts, written whole on every update
    - No derived field (status, progress) is stored

Design Decisions:
    - JSON columns for team and tasks: they are only ever read and written with
      their dossier, so the team-removal cascade is one row UPDATE
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import JSON, Date, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from dao_manager.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DaoRecord(Base):
    """Dossier row — identifying fields plus embedded team and task list."""
    __tablename__ = "daos"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    numero_liste: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True,
    )
    objet_dossier: Mapped[str] = mapped_column(Text, nullable=False)
    reference: Mapped[str] = mapped_column(String(100), nullable=False)
    autorite_contractante: Mapped[str] = mapped_column(Text, nullable=False)
    date_depot: Mapped[date] = mapped_column(Date, nullable=False)
    equipe: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    tasks: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )
