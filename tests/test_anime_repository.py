"""
番剧Repository测试

针对内存SQLite验证 SQLAlchemy 实现是否满足存储接口约定。
"""

import pytest

from anime_server.database.repositories.anime import AnimeRepository
from anime_server.database.repositories.factory import RepositoryFactory
from anime_server.errors import StorageError
from anime_server.schemas.anime import AnimeSchema


@pytest.fixture
def anime_repository(db_session) -> AnimeRepository:
    return RepositoryFactory(db_session).anime


async def test_factory_caches_repositories(db_session):
    factory = RepositoryFactory(db_session)

    assert factory.anime is factory.anime
    assert factory.user is factory.user


async def test_create_assigns_id(anime_repository):
    saved = await anime_repository.create(AnimeSchema(name="Cowboy Bebop"))

    assert saved.id is not None
    assert saved.name == "Cowboy Bebop"
    assert await anime_repository.find_by_id(saved.id) == saved


async def test_create_ignores_caller_supplied_id(anime_repository):
    first = await anime_repository.create(AnimeSchema(name="First"))
    second = await anime_repository.create(AnimeSchema(id=999, name="Second"))

    assert second.id == first.id + 1


async def test_find_by_id_returns_none_on_miss(anime_repository):
    assert await anime_repository.find_by_id(12345) is None


async def test_create_all_preserves_input_order(anime_repository):
    names = ["Mushishi", "Monster", "Ping Pong"]

    saved = [a async for a in anime_repository.create_all([AnimeSchema(name=n) for n in names])]

    assert [a.name for a in saved] == names
    ids = [a.id for a in saved]
    assert ids == sorted(ids)
    assert len(set(ids)) == 3


async def test_find_all_streams_rows_in_id_order(anime_repository):
    for name in ("B", "A", "C"):
        await anime_repository.create(AnimeSchema(name=name))

    rows = [a async for a in anime_repository.find_all()]

    assert [a.name for a in rows] == ["B", "A", "C"]
    assert all(isinstance(a, AnimeSchema) for a in rows)


async def test_overwrite_replaces_name(anime_repository):
    saved = await anime_repository.create(AnimeSchema(name="Old"))

    updated = await anime_repository.overwrite(saved.with_name("New"))

    assert updated == AnimeSchema(id=saved.id, name="New")
    assert (await anime_repository.find_by_id(saved.id)).name == "New"


async def test_overwrite_missing_row_returns_none(anime_repository):
    assert await anime_repository.overwrite(AnimeSchema(id=404, name="Ghost")) is None


async def test_remove_deletes_row(anime_repository):
    saved = await anime_repository.create(AnimeSchema(name="Temporary"))

    await anime_repository.remove(saved)

    assert await anime_repository.find_by_id(saved.id) is None


async def test_database_failure_is_wrapped_in_storage_error(anime_repository):
    """名称为NULL违反数据库约束，以 StorageError 抛出并保留原始异常"""
    with pytest.raises(StorageError) as exc_info:
        await anime_repository.create(AnimeSchema(name=None))

    assert exc_info.value.error_code == "DATABASE_ERROR"
    assert exc_info.value.details == {"operation": "create", "model": "Anime"}
    assert exc_info.value.__cause__ is not None
