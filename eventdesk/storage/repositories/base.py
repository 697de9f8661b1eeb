"""Shared SQLModel repository plumbing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.exceptions import StorageError

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


class SQLModelRepository(Generic[ModelT]):
    """CRUD over a single table, one ``AsyncSession`` per call.

    ``immutable_fields`` are never written by :meth:`update`; for scoped
    resources this includes the tenant reference so an update can never move
    a record to another event.
    """

    model: ClassVar[type[SQLModel]]
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id"})

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def get(self, record_id: int) -> ModelT | None:
        async with AsyncSession(self._engine) as session:
            return await session.get(self.model, record_id)  # type: ignore[return-value]

    async def add(self, record: ModelT) -> ModelT:
        async with AsyncSession(self._engine) as session:
            session.add(record)
            try:
                await session.commit()
            except SQLAlchemyError as exc:
                await session.rollback()
                logger.error("record_create_failed", table=self._table, error=str(exc))
                raise StorageError from exc
            await session.refresh(record)
            logger.info("record_created", table=self._table, id=getattr(record, "id", None))
            return record

    async def update(self, record_id: int, changes: dict[str, Any]) -> ModelT | None:
        async with AsyncSession(self._engine) as session:
            record = await session.get(self.model, record_id)
            if record is None:
                return None
            self._apply_changes(record, record_id, changes)
            await self._commit(session)
            await session.refresh(record)
            return record  # type: ignore[return-value]

    def _apply_changes(self, record: SQLModel, record_id: int, changes: dict[str, Any]) -> None:
        """Copy ``changes`` onto ``record``.

        Immutable fields are skipped. An explicit ``None`` for a NOT NULL
        column means "leave as is"; nullable columns may be cleared.
        """
        ignored = sorted(set(changes) & self.immutable_fields)
        if ignored:
            logger.warning(
                "immutable_fields_ignored",
                table=self._table,
                id=record_id,
                fields=ignored,
            )
        columns = self.model.__table__.columns  # type: ignore[attr-defined]
        for key, value in changes.items():
            if key in self.immutable_fields or key not in columns:
                continue
            if value is None and not columns[key].nullable:
                logger.debug("null_for_required_column_ignored", table=self._table, field=key)
                continue
            setattr(record, key, value)

    async def _commit(self, session: AsyncSession) -> None:
        try:
            await session.commit()
        except SQLAlchemyError as exc:
            await session.rollback()
            logger.error("record_update_failed", table=self._table, error=str(exc))
            raise StorageError from exc

    async def delete(self, record_id: int) -> bool:
        async with AsyncSession(self._engine) as session:
            record = await session.get(self.model, record_id)
            if record is None:
                return False
            await session.delete(record)
            await session.commit()
            logger.info("record_deleted", table=self._table, id=record_id)
            return True

    async def _list(self, *conditions: Any, order_by: tuple[Any, ...] = ()) -> list[ModelT]:
        statement = select(self.model).where(*conditions)
        if order_by:
            statement = statement.order_by(*order_by)
        async with AsyncSession(self._engine) as session:
            results = await session.execute(statement)
            return list(results.scalars().all())  # type: ignore[arg-type]

    @property
    def _table(self) -> str:
        return str(getattr(self.model, "__tablename__", self.model.__name__))
