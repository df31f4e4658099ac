"""
Base repository pattern implementation with async support
"""
from typing import TypeVar, Generic, Type, Optional, List, Dict, Any, Union
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel, select, and_
from sqlmodel.ext.asyncio.session import AsyncSession

from feedsync.core.exceptions import WriteError
from feedsync.core.logging import log


ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for data access with async support.
    Implements the reads shared by every table and dialect-aware inserts.
    """

    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    @property
    def dialect_name(self) -> str:
        return self.session.get_bind().dialect.name

    def insert(self):
        """INSERT statement that supports ON CONFLICT for the bound dialect"""
        table = self.model.__table__
        if self.dialect_name == "postgresql":
            return postgresql.insert(table)
        if self.dialect_name == "sqlite":
            return sqlite.insert(table)
        raise WriteError(f"Upsert is not supported on {self.dialect_name}")

    async def get(self, *, id: Union[UUID, str]) -> Optional[ModelType]:
        """Get a record by ID"""
        if isinstance(id, str):
            id = UUID(id)

        statement = select(self.model).where(self.model.id == id)
        result = await self.session.exec(statement)
        return result.first()

    async def get_multi(
        self,
        *,
        skip: int = 0,
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        order_desc: bool = False,
        filters: Optional[Dict[str, Any]] = None
    ) -> List[ModelType]:
        """Get multiple records with optional pagination and filtering"""
        statement = select(self.model)

        # Apply filters
        if filters:
            conditions = []
            for field, value in filters.items():
                if hasattr(self.model, field):
                    if isinstance(value, list):
                        conditions.append(getattr(self.model, field).in_(value))
                    else:
                        conditions.append(getattr(self.model, field) == value)
            if conditions:
                statement = statement.where(and_(*conditions))

        # Apply ordering
        if order_by and hasattr(self.model, order_by):
            order_column = getattr(self.model, order_by)
            statement = statement.order_by(desc(order_column) if order_desc else asc(order_column))

        # Apply pagination
        statement = statement.offset(skip)
        if limit is not None:
            statement = statement.limit(limit)

        result = await self.session.exec(statement)
        return list(result.all())

    async def update(self, *, id: Union[UUID, str], values: Dict[str, Any]) -> Optional[ModelType]:
        """Update fields of one record; returns None when it does not exist"""
        db_obj = await self.get(id=id)
        if db_obj is None:
            return None

        try:
            for field, value in values.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)

            self.session.add(db_obj)
            await self.session.commit()
            await self.session.refresh(db_obj)
            return db_obj

        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error(f"Database error updating {self.model.__name__}", id=str(id), error=str(e))
            raise WriteError(f"Error updating {self.model.__name__}: {e}")

    async def execute_write(self, statement, *, what: str):
        """Execute and commit one write; a failure rolls back and raises WriteError"""
        try:
            result = await self.session.execute(statement)
            await self.session.commit()
            return result
        except SQLAlchemyError as e:
            await self.session.rollback()
            log.error(f"Database error writing {what}", error=str(e))
            raise WriteError(f"Error writing {what}: {e.__class__.__name__}: {e}")
