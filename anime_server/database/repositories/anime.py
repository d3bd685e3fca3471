"""
番剧Repository

AnimeRepositoryInterface 的 SQLAlchemy 实现，负责ORM实体与 AnimeSchema 之间的转换。
"""

from contextlib import aclosing
from typing import AsyncIterator, Optional, Sequence
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from .interfaces import AnimeRepositoryInterface
from ..models.anime import Anime
from ...schemas.anime import AnimeSchema


class AnimeRepository(BaseRepository[Anime], AnimeRepositoryInterface):
    """番剧Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Anime)

    @staticmethod
    def _to_schema(instance: Anime) -> AnimeSchema:
        return AnimeSchema.model_validate(instance)

    async def find_all(self) -> AsyncIterator[AnimeSchema]:
        async with aclosing(self.stream_all()) as stream:
            async for instance in stream:
                yield self._to_schema(instance)

    async def find_by_id(self, id: int) -> Optional[AnimeSchema]:
        instance = await self.get_by_id(id)
        if instance is None:
            return None
        return self._to_schema(instance)

    async def create(self, anime: AnimeSchema) -> AnimeSchema:
        # ID由数据库分配，忽略调用方传入的值
        instance = await super().create(name=anime.name)
        return self._to_schema(instance)

    async def create_all(self, animes: Sequence[AnimeSchema]) -> AsyncIterator[AnimeSchema]:
        items = [{"name": anime.name} for anime in animes]
        async with aclosing(self.create_many(items)) as stream:
            async for instance in stream:
                yield self._to_schema(instance)

    async def overwrite(self, anime: AnimeSchema) -> Optional[AnimeSchema]:
        """
        以传入实体覆盖同ID的记录

        Args:
            anime: 带ID的番剧

        Returns:
            覆盖后的番剧，记录不存在时为None
        """
        with self._storage_errors("overwrite"):
            instance = await self.session.get(Anime, anime.id)
            if instance is None:
                return None
            instance.name = anime.name
            await self.session.flush()
            return self._to_schema(instance)

    async def remove(self, anime: AnimeSchema) -> None:
        await self.delete(anime.id)
