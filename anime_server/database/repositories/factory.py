"""
Repository工厂

同一个会话内的Repository实例按类缓存，供服务工厂按需获取。
"""

from typing import Type, TypeVar, Dict
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from .anime import AnimeRepository
from .user import UserRepository

# 类型定义
RepositoryType = TypeVar("RepositoryType", bound=BaseRepository)


class RepositoryFactory:
    """Repository工厂类"""

    def __init__(self, session: AsyncSession):
        """
        初始化工厂

        Args:
            session: SQLAlchemy异步会话
        """
        self.session = session
        self._repositories: Dict[Type, BaseRepository] = {}

    def get_repository(self, repository_class: Type[RepositoryType]) -> RepositoryType:
        """
        获取Repository实例（单例模式）

        Args:
            repository_class: Repository类

        Returns:
            Repository实例
        """
        if repository_class not in self._repositories:
            self._repositories[repository_class] = repository_class(self.session)

        return self._repositories[repository_class]

    @property
    def anime(self) -> AnimeRepository:
        """获取番剧Repository"""
        return self.get_repository(AnimeRepository)

    @property
    def user(self) -> UserRepository:
        """获取用户Repository"""
        return self.get_repository(UserRepository)
