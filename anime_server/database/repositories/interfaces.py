"""
Repository 接口约定 (ABC)

服务层只依赖这里的抽象接口，AnimeRepository 是基于 SQLAlchemy 的实现。

实现约定:
- 所有方法都是异步的
- find_by_id 未找到时返回 None，而不是抛出异常
- create_all / find_all 返回惰性的异步迭代器，create_all 保持输入顺序
- 存储自身的故障必须以 StorageError 抛出
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional, Sequence

from ...schemas.anime import AnimeSchema


class AnimeRepositoryInterface(ABC):
    """番剧存储接口"""

    @abstractmethod
    def find_all(self) -> AsyncIterator[AnimeSchema]:
        """按ID顺序惰性返回全部番剧"""

    @abstractmethod
    async def find_by_id(self, id: int) -> Optional[AnimeSchema]:
        """
        按ID查询

        Returns:
            找到的番剧或None
        """

    @abstractmethod
    async def create(self, anime: AnimeSchema) -> AnimeSchema:
        """
        创建番剧

        Returns:
            分配了ID的番剧
        """

    @abstractmethod
    def create_all(self, animes: Sequence[AnimeSchema]) -> AsyncIterator[AnimeSchema]:
        """批量创建，按输入顺序惰性返回持久化结果"""

    @abstractmethod
    async def overwrite(self, anime: AnimeSchema) -> Optional[AnimeSchema]:
        """
        以传入实体覆盖同ID的记录

        Returns:
            覆盖后的番剧，记录不存在时为None
        """

    @abstractmethod
    async def remove(self, anime: AnimeSchema) -> None:
        """删除番剧"""
