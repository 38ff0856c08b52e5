"""
Base repository with generic CRUD operations.

All entity-specific repositories inherit from this.
"""
from typing import Any, Generic, List, Optional, Tuple, Type, TypeVar
from uuid import UUID

from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import BaseModel

# Generic type for SQLAlchemy models
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository providing standard CRUD operations.

    Usage:
        class UserRepository(BaseRepository[User]):
            def __init__(self):
                super().__init__(User)
    """

    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get_by_id(
        self,
        db: AsyncSession,
        id: UUID,
    ) -> Optional[ModelType]:
        """Get a single record by ID."""
        result = await db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    async def count(
        self,
        db: AsyncSession,
    ) -> int:
        """Get total count of records."""
        result = await db.execute(
            select(func.count()).select_from(self.model)
        )
        return result.scalar() or 0

    async def create(
        self,
        db: AsyncSession,
        **kwargs: Any,
    ) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        db.add(instance)
        await db.flush()
        await db.refresh(instance)
        return instance

    async def update(
        self,
        db: AsyncSession,
        instance: ModelType,
        **kwargs: Any,
    ) -> ModelType:
        """Update an existing record."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await db.flush()
        await db.refresh(instance)
        return instance

    async def delete(
        self,
        db: AsyncSession,
        id: UUID,
    ) -> bool:
        """Hard delete a record by ID."""
        result = await db.execute(
            delete(self.model).where(self.model.id == id)
        )
        return result.rowcount > 0


class OwnedRepository(BaseRepository[ModelType]):
    """
    Repository for rows that belong to a single user (``user_id`` column).

    Every lookup is scoped to the owner so one user can never read or
    modify another user's rows by guessing an ID.
    """

    async def get_for_user(
        self,
        db: AsyncSession,
        id: UUID,
        user_id: UUID,
    ) -> Optional[ModelType]:
        """Get a record by ID only if it belongs to `user_id`."""
        result = await db.execute(
            select(self.model).where(
                self.model.id == id,
                self.model.user_id == user_id,
            )
        )
        return result.scalar_one_or_none()

    async def find_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
        *,
        filters: Optional[List[Any]] = None,
        page: int = 1,
        limit: int = 20,
        order_by: Any = None,
    ) -> Tuple[List[ModelType], int]:
        """Paginated records for one user, newest first by default."""
        query = select(self.model).where(self.model.user_id == user_id)
        for condition in filters or []:
            query = query.where(condition)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(order_by if order_by is not None else self.model.updated_at.desc())
        query = query.offset((page - 1) * limit).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all()), total

    async def count_for_user(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> int:
        result = await db.execute(
            select(func.count()).select_from(self.model).where(self.model.user_id == user_id)
        )
        return result.scalar() or 0
