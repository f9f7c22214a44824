# backend/app/crud/base.py
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    Shared data access for the board tables.

    Writes commit and refresh by default; pass `commit=False` to stage a
    change inside a larger unit of work and commit it yourself.
    """

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def _save(self, db: AsyncSession, db_obj: ModelType, commit: bool) -> ModelType:
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def get(self, db: AsyncSession, id: Any) -> ModelType | None:
        return await db.get(self.model, id)

    async def get_multi(
        self,
        db: AsyncSession,
        *,
        order_by: ColumnElement | Sequence[ColumnElement] | None = None,
    ) -> list[ModelType]:
        stmt = select(self.model)
        if order_by is not None:
            clauses = order_by if isinstance(order_by, Sequence) else [order_by]
            stmt = stmt.order_by(*clauses)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    async def count(self, db: AsyncSession) -> int:
        return int((await db.execute(select(func.count()).select_from(self.model))).scalar_one())

    async def create(
        self, db: AsyncSession, *, obj_in: CreateSchemaType | dict[str, Any], commit: bool = True
    ) -> ModelType:
        data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        return await self._save(db, self.model(**data), commit)

    async def update(
        self,
        db: AsyncSession,
        *,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | dict[str, Any],
        commit: bool = True,
    ) -> ModelType:
        """Apply the given fields; keys that are not columns of the model are skipped."""
        changes = obj_in if isinstance(obj_in, dict) else obj_in.model_dump(exclude_unset=True)
        columns = {attr.key for attr in inspect(self.model).column_attrs}
        for field in columns.intersection(changes):
            setattr(db_obj, field, changes[field])
        return await self._save(db, db_obj, commit)

    async def remove(self, db: AsyncSession, *, id: Any) -> ModelType | None:
        db_obj = await self.get(db, id)
        if db_obj is not None:
            await db.delete(db_obj)
            await db.commit()
        return db_obj
