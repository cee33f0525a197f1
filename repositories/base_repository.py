from typing import Any, Generic, Optional, Protocol, Type, TypeVar, runtime_checkable

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession


# models must expose .id
@runtime_checkable
class HasId(Protocol):
    id: Any


ModelT = TypeVar("ModelT", bound=HasId)


class BaseRepository(Generic[ModelT]):
    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def add(self, entity: ModelT, session: AsyncSession) -> ModelT:
        session.add(entity)
        try:
            await session.flush()
        except IntegrityError:
            await session.rollback()
            raise
        return entity

    async def get_by_id(self, id_: Any, session: AsyncSession) -> Optional[ModelT]:
        res = await session.execute(select(self.model).where(self.model.id == id_))
        return res.scalars().first()

    async def update(self, entity: ModelT, session: AsyncSession) -> ModelT:
        await session.flush()
        return entity

    async def delete(self, entity: ModelT, session: AsyncSession) -> None:
        await session.delete(entity)
        await session.flush()
