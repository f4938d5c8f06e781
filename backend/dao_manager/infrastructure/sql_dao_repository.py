"""SQL DAO Repository — SQLAlchemy implementation of the DaoRepository Protocol.

Invariants:
    - One DB session per call; every write commits once (update of team + tasks is atomic)
    - Missing ids raise DaoNotFoundError; driver failures surface as DatabaseError
      (mapped by DatabaseSessionManager), never swallowed
    - list_all returns dossiers in creation order (the collection order callers see)
    - Team and task models stored as camelCase JSON, read back through the schemas

Design Decisions:
    - Column whitelist on create/update: unknown keys are ignored, id is never writable
    - Dossier numbers follow DAO-<year>-<seq>, seq = max existing for the year + 1
"""

import logging
import re
from collections.abc import Callable
from datetime import date, datetime, timezone
from typing import Any

from pydantic import BaseModel
from sqlalchemy import select

from dao_manager.core.errors import DaoNotFoundError
from dao_manager.infrastructure.database import DatabaseSessionManager
from dao_manager.models.dao import DaoRecord
from dao_manager.schemas.dao import Dao

logger = logging.getLogger(__name__)

_WRITABLE_COLUMNS = frozenset({
    "numero_liste", "objet_dossier", "reference",
    "autorite_contractante", "date_depot", "equipe", "tasks",
})
_JSON_COLUMNS = frozenset({"equipe", "tasks"})


def _to_column_value(key: str, value: Any) -> Any:
    if key in _JSON_COLUMNS:
        return [
            item.model_dump(mode="json", by_alias=True)
            if isinstance(item, BaseModel) else item
            for item in value or []
        ]
    return value


def _to_columns(fields: dict[str, Any]) -> dict[str, Any]:
    return {
        key: _to_column_value(key, value)
        for key, value in fields.items()
        if key in _WRITABLE_COLUMNS
    }


def _to_domain(record: DaoRecord) -> Dao:
    return Dao.model_validate({
        "id": record.id,
        "numero_liste": record.numero_liste,
        "objet_dossier": record.objet_dossier,
        "reference": record.reference,
        "autorite_contractante": record.autorite_contractante,
        "date_depot": record.date_depot,
        "equipe": record.equipe or [],
        "tasks": record.tasks or [],
        "created_at": record.created_at,
        "updated_at": record.updated_at,
    })


class SqlDaoRepository:
    """Dossier store backed by the `daos` table."""

    def __init__(
        self,
        manager: DatabaseSessionManager,
        clock: Callable[[], date] = date.today,
    ):
        self._manager = manager
        self._clock = clock

    async def list_all(self) -> list[Dao]:
        async with self._manager.session() as db:
            result = await db.execute(
                select(DaoRecord).order_by(DaoRecord.created_at, DaoRecord.id),
            )
            return [_to_domain(r) for r in result.scalars().all()]

    async def get_by_id(self, dao_id: str) -> Dao:
        async with self._manager.session() as db:
            record = await db.get(DaoRecord, dao_id)
            if record is None:
                raise DaoNotFoundError(dao_id)
            return _to_domain(record)

    async def create(self, fields: dict[str, Any]) -> Dao:
        async with self._manager.session() as db:
            record = DaoRecord(**_to_columns(fields))
            db.add(record)
            await db.commit()
            await db.refresh(record)
            logger.debug(
                f"Inserted row for {record.numero_liste}", extra={"dao_id": record.id},
            )
            return _to_domain(record)

    async def update(self, dao_id: str, fields: dict[str, Any]) -> Dao:
        async with self._manager.session() as db:
            record = await db.get(DaoRecord, dao_id)
            if record is None:
                raise DaoNotFoundError(dao_id)
            for key, value in _to_columns(fields).items():
                setattr(record, key, value)
            record.updated_at = datetime.now(timezone.utc)
            await db.commit()
            await db.refresh(record)
            return _to_domain(record)

    async def delete(self, dao_id: str) -> None:
        async with self._manager.session() as db:
            record = await db.get(DaoRecord, dao_id)
            if record is None:
                raise DaoNotFoundError(dao_id)
            await db.delete(record)
            await db.commit()
            logger.debug("Deleted row", extra={"dao_id": dao_id})

    async def next_available_number(self) -> str:
        prefix = f"DAO-{self._clock().year}-"
        pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        async with self._manager.session() as db:
            result = await db.execute(
                select(DaoRecord.numero_liste).where(
                    DaoRecord.numero_liste.like(f"{prefix}%"),
                ),
            )
            numbers = result.scalars().all()

        highest = 0
        for numero in numbers:
            match = pattern.match(numero)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}{highest + 1:03d}"
