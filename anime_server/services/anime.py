"""
番剧业务服务

位于HTTP层与番剧Repository之间，负责存在性检查、名称校验、
批量保存的部分失败语义，以及统一的类型化错误。

每个操作都是无状态的：服务只持有一个Repository引用，可以在并发调用间共享。
单次调用内各阶段严格按顺序执行，存在性检查成功之后才会发起写操作；
调用方在检查完成前取消任务时，写操作不会被发起。
"""

from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Sequence

from .base import (
    BaseService, ServiceResult, ValidationError, ResourceNotFoundError,
    service_operation, service_stream
)
from ..database.repositories.interfaces import AnimeRepositoryInterface
from ..schemas.anime import AnimeSchema

RESOURCE_TYPE = "Anime"


def is_valid_name(anime: AnimeSchema) -> bool:
    """名称非空且至少包含一个非空白字符"""
    return anime.name is not None and bool(anime.name.strip())


class AnimeService(BaseService):
    """番剧业务服务"""

    def __init__(self, repository: AnimeRepositoryInterface):
        """
        初始化服务

        Args:
            repository: 番剧存储接口实现
        """
        super().__init__()
        self._repository = repository

    def _require_valid_name(self, anime: AnimeSchema) -> None:
        if not is_valid_name(anime):
            raise ValidationError("番剧名称不能为空", field="name")

    async def get_by_id_or_fail(self, id: int) -> AnimeSchema:
        """
        按ID查询，未找到时抛出 ResourceNotFoundError

        Args:
            id: 番剧ID

        Returns:
            Repository返回的番剧，原样透传
        """
        anime = await self._repository.find_by_id(id)
        if anime is None:
            raise ResourceNotFoundError(RESOURCE_TYPE, id)
        return anime

    @service_stream("list_all")
    async def list_all(self) -> AsyncIterator[AnimeSchema]:
        """列出全部番剧，Repository的顺序与内容原样透传"""
        async with aclosing(self._repository.find_all()) as stream:
            async for anime in stream:
                yield anime

    @service_operation("find_by_id")
    async def find_by_id(self, id: int) -> AnimeSchema:
        return await self.get_by_id_or_fail(id)

    @service_operation("save")
    async def save(self, anime: AnimeSchema) -> AnimeSchema:
        """
        创建番剧

        名称无效时直接返回验证错误，不访问存储。

        Args:
            anime: 待创建的番剧

        Returns:
            Repository的创建结果
        """
        self._require_valid_name(anime)
        return await self._repository.create(anime)

    @service_stream("save_all")
    async def save_all(self, animes: Sequence[AnimeSchema]) -> AsyncIterator[AnimeSchema]:
        """
        批量创建番剧

        1. 所有输入先校验名称，任何一个无效都直接失败，不访问存储
        2. 整批交给 Repository.create_all，结果按输入顺序逐个返回
        3. 对每个返回结果再次校验：有效的按顺序产出，遇到第一个无效结果时
           以验证错误结束，该结果不会被产出，之前已产出的结果保持有效

        已写入的记录不做补偿删除。

        Args:
            animes: 待创建的番剧列表

        Yields:
            持久化后的番剧
        """
        animes = list(animes)
        for anime in animes:
            self._require_valid_name(anime)

        async with aclosing(self._repository.create_all(animes)) as stream:
            async for saved in stream:
                # 校验存储返回的数据，而不是输入
                self._require_valid_name(saved)
                yield saved

    @service_operation("update")
    async def update(self, anime: AnimeSchema) -> None:
        """
        更新番剧

        先确认记录存在，再以传入的完整实体覆盖，成功时不返回数据。

        Args:
            anime: 带ID的番剧
        """
        await self.get_by_id_or_fail(anime.id)
        self._require_valid_name(anime)
        await self._repository.overwrite(anime)

    @service_operation("delete")
    async def delete(self, id: int) -> None:
        """
        删除番剧

        Args:
            id: 番剧ID
        """
        anime = await self.get_by_id_or_fail(id)
        await self._repository.remove(anime)

    async def health_check(self) -> ServiceResult[Dict[str, Any]]:
        return ServiceResult.success_result(
            data={
                "service": "AnimeService",
                "status": "healthy",
                "repository": type(self._repository).__name__,
            }
        )
