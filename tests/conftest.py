"""
pytest 配置和共享 fixture

提供:
- 内存版番剧Repository（记录调用，便于断言存储是否被访问）
- 番剧测试数据构造函数
- 基于内存SQLite的数据库引擎与会话
"""

import asyncio
from typing import AsyncIterator, Dict, List, Optional, Sequence, Tuple

import pytest

from anime_server.config import DatabaseConfig
from anime_server.database.engine import DatabaseEngine
from anime_server.database.repositories.interfaces import AnimeRepositoryInterface
from anime_server.schemas.anime import AnimeSchema

ANIME_NAME = "Tensei Shitara Slime Datta Ken"


def create_anime_to_be_saved() -> AnimeSchema:
    """未保存的番剧（无ID）"""
    return AnimeSchema(name=ANIME_NAME)


def create_valid_anime() -> AnimeSchema:
    """已保存的番剧"""
    return AnimeSchema(id=1, name=ANIME_NAME)


def create_valid_update_anime() -> AnimeSchema:
    """用于更新的番剧"""
    return AnimeSchema(id=1, name=f"{ANIME_NAME} 2")


class InMemoryAnimeRepository(AnimeRepositoryInterface):
    """
    内存版番剧Repository

    calls 按顺序记录每次调用的方法名和参数；
    create_all_result 不为空时 create_all 原样产出这些结果，而不是回显输入；
    find_all_error 不为空时 find_all 在产出全部记录后抛出该异常；
    hold_lookup 为 True 时 find_by_id 会挂起，直到 release_lookup 被设置。
    """

    def __init__(
        self,
        rows: Sequence[AnimeSchema] = (),
        create_all_result: Optional[List[AnimeSchema]] = None,
        find_all_error: Optional[Exception] = None,
        hold_lookup: bool = False,
    ):
        self.rows: Dict[int, AnimeSchema] = {row.id: row for row in rows}
        self.calls: List[Tuple] = []
        self.closed_streams: List[str] = []
        self.create_all_result = create_all_result
        self.find_all_error = find_all_error
        self.hold_lookup = hold_lookup
        self.lookup_started = asyncio.Event()
        self.release_lookup = asyncio.Event()
        self._next_id = max(self.rows, default=0) + 1

    def called(self, method: str) -> List[Tuple]:
        return [call[1:] for call in self.calls if call[0] == method]

    def _insert(self, anime: AnimeSchema) -> AnimeSchema:
        saved = anime.with_id(self._next_id)
        self._next_id += 1
        self.rows[saved.id] = saved
        return saved

    async def find_all(self) -> AsyncIterator[AnimeSchema]:
        self.calls.append(("find_all",))
        try:
            for id in sorted(self.rows):
                await asyncio.sleep(0)
                yield self.rows[id]
            if self.find_all_error is not None:
                raise self.find_all_error
        finally:
            self.closed_streams.append("find_all")

    async def find_by_id(self, id: int) -> Optional[AnimeSchema]:
        self.calls.append(("find_by_id", id))
        self.lookup_started.set()
        if self.hold_lookup:
            await self.release_lookup.wait()
        return self.rows.get(id)

    async def create(self, anime: AnimeSchema) -> AnimeSchema:
        self.calls.append(("create", anime))
        await asyncio.sleep(0)
        return self._insert(anime)

    async def create_all(self, animes: Sequence[AnimeSchema]) -> AsyncIterator[AnimeSchema]:
        self.calls.append(("create_all", list(animes)))
        try:
            if self.create_all_result is not None:
                for anime in self.create_all_result:
                    yield anime
                return
            for anime in animes:
                await asyncio.sleep(0)
                yield self._insert(anime)
        finally:
            self.closed_streams.append("create_all")

    async def overwrite(self, anime: AnimeSchema) -> Optional[AnimeSchema]:
        self.calls.append(("overwrite", anime))
        if anime.id not in self.rows:
            return None
        self.rows[anime.id] = anime
        return anime

    async def remove(self, anime: AnimeSchema) -> None:
        self.calls.append(("remove", anime))
        self.rows.pop(anime.id, None)


@pytest.fixture
def anime() -> AnimeSchema:
    return create_valid_anime()


@pytest.fixture
def repository(anime) -> InMemoryAnimeRepository:
    """预置一条 id=1 记录的内存Repository"""
    return InMemoryAnimeRepository(rows=[anime])


@pytest.fixture
async def database_engine() -> AsyncIterator[DatabaseEngine]:
    """内存SQLite引擎，测试前建表，测试后释放"""
    config = DatabaseConfig(type="sqlite", name=":memory:")
    engine = DatabaseEngine(config.async_url, **config.get_engine_config())
    await engine.create_all()
    yield engine
    await engine.close()


@pytest.fixture
async def db_session(database_engine):
    """数据库会话"""
    async with database_engine.session_factory() as session:
        yield session
